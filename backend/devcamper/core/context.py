# devcamper/core/context.py
"""
Application context.

One AppContext is built per application (see main.create_app) and handed to
request handlers through the get_context dependency. It owns the settings
and the external collaborators, and opens/closes the database connection
in startup()/shutdown().
"""
import logging
from dataclasses import dataclass

from ..config import Settings
from ..services.geocoder import GeocodingService
from ..services.mailer import MailService
from .bootstrap import ensure_default_admin
from .db import init_db, close_db

logger = logging.getLogger("uvicorn.error")


@dataclass
class AppContext:
    settings: Settings
    mailer: MailService
    geocoder: GeocodingService

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        return cls(
            settings=settings,
            mailer=MailService(settings),
            geocoder=GeocodingService(settings),
        )

    async def startup(self) -> None:
        await init_db(self.settings.database_url)
        await ensure_default_admin(self.settings)
        logger.info("[context] started env=%s", self.settings.env)

    async def shutdown(self) -> None:
        await close_db()
        logger.info("[context] database connections closed")
