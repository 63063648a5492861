"""FastAPI application — main entry point."""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from afiliaciones.application.services.auth_service import ensure_default_admin
from afiliaciones.config import Settings, get_settings
from afiliaciones.core import clock
from afiliaciones.core.exceptions import register_exception_handlers
from afiliaciones.core.logging import configure_logging
from afiliaciones.core.middleware import setup_middleware
from afiliaciones.infrastructure.database import Database

# Import routers
from afiliaciones.interfaces.api.affiliations import registration_router
from afiliaciones.interfaces.api.affiliations import router as affiliations_router
from afiliaciones.interfaces.api.auth import router as auth_router
from afiliaciones.interfaces.api.bulk_upload import router as bulk_upload_router
from afiliaciones.interfaces.api.clients import router as clients_router
from afiliaciones.interfaces.api.lists import router as lists_router
from afiliaciones.interfaces.api.monthly_affiliations import router as monthly_affiliations_router
from afiliaciones.interfaces.api.reports import router as reports_router
from afiliaciones.interfaces.api.unsubscriptions import router as unsubscriptions_router
from afiliaciones.interfaces.api.users import router as users_router

logger = structlog.get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)
    clock.configure(settings.TIMEZONE)

    database = Database(settings.DATABASE_URL, pool_size=settings.DB_POOL_SIZE)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan — startup and shutdown events."""
        logger.info("Starting Afiliaciones backend...", env=settings.ENVIRONMENT)

        # Create DB tables (schema migrations are managed outside the app)
        database.create_all()
        logger.info("Database tables created/verified")

        db = database.SessionLocal()
        try:
            ensure_default_admin(db, settings)
        finally:
            db.close()

        yield

        database.dispose()
        logger.info("Afiliaciones backend stopped")

    app = FastAPI(
        title="Afiliaciones — Gestión de afiliaciones mensuales",
        description="API Backend — clientes, afiliaciones EPS/ARL/CCF/pensión, retiros y reportes",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.settings = settings

    # Setup Middleware (Correlation ID, Logging)
    setup_middleware(app)

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(clients_router)
    app.include_router(lists_router)
    app.include_router(unsubscriptions_router)
    app.include_router(bulk_upload_router)
    app.include_router(affiliations_router)
    app.include_router(registration_router)
    app.include_router(monthly_affiliations_router)
    app.include_router(reports_router)

    @app.get("/")
    def root():
        return {
            "name": "Afiliaciones Backend",
            "version": "1.0.0",
            "status": "running",
            "docs": "/docs",
        }

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app


app = create_app()
