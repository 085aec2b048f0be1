"""
Database connection and pool management
"""

import asyncpg
import logging
from typing import Optional

from fastapi import Request

from book_service.config.settings import Settings

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS book (
    id BIGSERIAL PRIMARY KEY,
    title VARCHAR(20) NOT NULL,
    description TEXT,
    author TEXT NOT NULL
)
"""


class Database:
    """Owns the asyncpg pool for the lifetime of the application"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._pool: Optional[asyncpg.Pool] = None

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database pool is not initialized")
        return self._pool

    async def connect(self) -> None:
        """Initialize database connection pool"""
        self._pool = await asyncpg.create_pool(
            self.settings.database_url,
            min_size=self.settings.db_pool_min_size,
            max_size=self.settings.db_pool_max_size,
            command_timeout=self.settings.db_command_timeout,
            statement_cache_size=0  # Fix for pgbouncer compatibility
        )

        # Test connection
        async with self._pool.acquire() as conn:
            await conn.fetchval("SELECT 1")

        logger.info("Database initialized successfully")

    async def init_schema(self) -> None:
        """Create the book table if it does not exist"""
        async with self.pool.acquire() as conn:
            await conn.execute(SCHEMA_SQL)
        logger.info("Database schema verified")

    async def ping(self) -> bool:
        async with self.pool.acquire() as conn:
            return await conn.fetchval("SELECT 1") == 1

    async def close(self) -> None:
        """Close database connection pool"""
        if self._pool:
            await self._pool.close()
            self._pool = None
        logger.info("Database connections closed")


def get_database(request: Request) -> Database:
    """Get the database handle bound to the running app"""
    return request.app.state.database
