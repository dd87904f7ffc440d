"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from permission_engine.api.error_handlers import register_exception_handlers
from permission_engine.api.routers import get_api_router
from permission_engine.core.config import AppSettings, get_settings
from permission_engine.core.database import session_scope
from permission_engine.core.logging import configure_logging
from permission_engine.services.authorization import AuthorizationEngine
from permission_engine.services.bootstrap import BootstrapSeeder
from permission_engine.services.users import SqlUserDirectory


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: D401
    """Application lifespan context for startup/shutdown hooks."""

    settings = get_settings()
    if settings.bootstrap_enabled:
        with session_scope() as session:
            BootstrapSeeder(AuthorizationEngine(session), SqlUserDirectory(session)).run(settings)

    yield


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Application factory."""

    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Permission Engine",
        version="1.0.0",
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    app.include_router(get_api_router())
    return app


app = create_app()
