"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import (
    badges_router,
    health_router,
    profiles_router,
    user_badges_router,
    users_router,
)
from app.clients.directory import SupabaseDirectoryClient
from app.clients.storage import StorageClient
from app.config.settings import get_settings
from app.core.error_handlers import domain_error_handler
from app.core.exceptions import DomainError
from app.core.logging import configure_logging, get_logger
from app.db.database import close_engine, init_db
from app.middleware.request_id import RequestIDMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    configure_logging()

    # Startup: Initialize database and shared backend clients
    await init_db()
    if getattr(app.state, "directory_client", None) is None:
        app.state.directory_client = SupabaseDirectoryClient()
    if getattr(app.state, "storage_client", None) is None:
        app.state.storage_client = StorageClient()
    logger.info("application_started", app=get_settings().app_name)

    yield

    # Shutdown: Cleanup resources
    await app.state.directory_client.close()
    await app.state.storage_client.close()
    await close_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Users, profiles and achievement badges over the hosted data platform",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(DomainError, domain_error_handler)

    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(profiles_router)
    app.include_router(badges_router)
    app.include_router(user_badges_router)

    return app


app = create_app()
