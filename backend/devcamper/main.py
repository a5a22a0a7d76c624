# devcamper/main.py
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from devcamper.config import Settings
from devcamper.core.context import AppContext
from devcamper.core.errors import register_exception_handlers
from devcamper.core.protection import install_protection

from devcamper.api.v1.routers import auth, bootcamps, courses, reviews, users

logger = logging.getLogger("uvicorn.error")


def create_app(ctx: AppContext | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Tests pass their own AppContext (with fake mailer/geocoder); otherwise one
    is built from environment settings. The database is opened in the
    lifespan startup and closed on shutdown.
    """
    ctx = ctx or AppContext.from_settings(Settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await ctx.startup()
        try:
            yield
        finally:
            await ctx.shutdown()

    app = FastAPI(title=ctx.settings.APP_NAME, lifespan=lifespan)
    app.state.ctx = ctx

    install_protection(app, ctx.settings)

    # CORS (with Cookie)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ctx.settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if not ctx.settings.is_production:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            logger.info(
                "[http] %s %s -> %s (%.1f ms)",
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
            return response

    register_exception_handlers(app)

    # REST
    app.include_router(auth.router, prefix="/api/v1")
    app.include_router(bootcamps.router, prefix="/api/v1")
    app.include_router(courses.bootcamp_router, prefix="/api/v1")
    app.include_router(reviews.bootcamp_router, prefix="/api/v1")
    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(reviews.router, prefix="/api/v1")
    app.include_router(users.router, prefix="/api/v1")

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    return app


app = create_app()
