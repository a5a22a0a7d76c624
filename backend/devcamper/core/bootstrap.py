# devcamper/core/bootstrap.py
"""
Bootstrap module for application initialization.
Handles initial setup tasks such as creating default admin user on first startup.
"""
import logging
from devcamper.config import Settings
from devcamper.models.user import User
from devcamper.core.policy import Role
from devcamper.core.security import hash_password

logger = logging.getLogger("uvicorn.error")

async def ensure_default_admin(settings: Settings) -> User | None:
    """
    If no admin exists in the database, create a default admin from settings.
    Admins cannot register themselves, so this is how the first one appears.
    Only takes effect under the following conditions:
      - Currently no user with role="admin"
      - And ADMIN_PASSWORD is set (to avoid using default weak password)
    Settings used:
      admin_name     (ADMIN_NAME, default: "Admin")
      admin_email    (ADMIN_EMAIL, default: "admin@devcamper.io")
      admin_password (ADMIN_PASSWORD, required, otherwise won't create)
    """
    # Check if any admin user already exists
    if await User.filter(role=Role.ADMIN.value).exists():
        return None

    if not settings.admin_password:
        logger.warning("[bootstrap] No admin present, but ADMIN_PASSWORD not set -> skip creating default admin.")
        return None

    # The email may already belong to a regular account; never hijack it
    if await User.filter(email=settings.admin_email).exists():
        logger.warning("[bootstrap] ADMIN_EMAIL=%s is already registered -> skip creating default admin.",
                       settings.admin_email)
        return None

    u = await User.create(
        name=settings.admin_name,
        email=settings.admin_email,
        password_hash=hash_password(settings.admin_password),
        role=Role.ADMIN.value,
    )
    logger.warning("[bootstrap] Created default admin -> email=%s id=%s", u.email, u.id)
    return u
