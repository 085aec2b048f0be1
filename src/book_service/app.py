"""
Book Service API
CRUD over a single Book entity backed by PostgreSQL through asyncpg.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from book_service.api.routes import books, health
from book_service.config.logging import configure_logging
from book_service.config.settings import Settings, load_settings
from book_service.database.connection import Database
from book_service.utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database pool on startup and close it on shutdown"""
    database: Database = app.state.database
    await database.connect()
    if app.state.settings.init_schema:
        await database.init_schema()
    yield
    await database.close()


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Configuration (loaded from the environment when omitted)
        database: Database handle (built from settings when omitted)

    Returns:
        Configured FastAPI app
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Book Service",
        description="REST API for managing books",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = database or Database(settings)

    if settings.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["Location", "Link", "X-Total-Count", "X-Trace-ID"],
        )

    setup_error_handling(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(books.router, prefix="/api", tags=["Books"])

    logger.info(f"Book Service configured (application name: {settings.application_name})")
    return app
