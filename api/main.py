"""FastAPI application for the Fairway Friends API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import get_settings
from api.error_handlers import register_error_handlers
from api.logging_config import setup_logging
from database.connection import db
from database.db_manager import DatabaseManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize DB pool on startup, close on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    await db.initialize(
        dsn=settings.database_url,
        min_size=settings.db_pool_min,
        max_size=settings.db_pool_max,
    )
    app.state.db_manager = DatabaseManager(db.pool)
    await app.state.db_manager.initialize_schema()
    logger.info("Fairway Friends API started")
    yield
    await db.close()
    logger.info("Fairway Friends API shut down")


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Fairway Friends API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    from api.routers import auth, courses, places, profiles, rounds, stats
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(profiles.router, prefix="/api/profiles", tags=["profiles"])
    app.include_router(courses.router, prefix="/api/courses", tags=["courses"])
    app.include_router(rounds.router, prefix="/api/rounds", tags=["rounds"])
    app.include_router(stats.router, prefix="/api/stats", tags=["stats"])
    app.include_router(places.router, prefix="/api/places", tags=["places"])

    @app.get("/api/health")
    async def health():
        healthy = await db.health_check()
        return {"status": "ok" if healthy else "degraded", "database": healthy}

    return app


app = create_app()
