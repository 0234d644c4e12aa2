import asyncpg
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class DatabasePool:
    """Owns the asyncpg pool every repository borrows connections from."""

    def __init__(self):
        self._pool: Optional[asyncpg.Pool] = None

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None

    async def initialize(
        self,
        dsn: Optional[str] = None,
        *,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 30.0,
    ) -> None:
        """Open the pool once at startup.

        Without a DSN, asyncpg reads PGHOST/PGDATABASE/PGUSER/... from the
        environment.
        """
        if self.is_initialized:
            logger.debug("Database pool already open")
            return
        if min_size > max_size:
            raise ValueError(f"DB_POOL_MIN ({min_size}) exceeds DB_POOL_MAX ({max_size})")

        self._pool = await asyncpg.create_pool(
            dsn=dsn,
            min_size=min_size,
            max_size=max_size,
            command_timeout=command_timeout,
        )
        logger.info("Database pool ready (min=%d, max=%d)", min_size, max_size)

    async def close(self) -> None:
        if not self.is_initialized:
            return
        await self._pool.close()
        self._pool = None
        logger.info("Database pool closed")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database pool is not open; call db.initialize() during startup")
        return self._pool

    async def health_check(self) -> bool:
        """True when a connection can be borrowed and answers SELECT 1."""
        if not self.is_initialized:
            return False
        try:
            async with self._pool.acquire() as conn:
                return await conn.fetchval("SELECT 1") == 1
        except (asyncpg.PostgresError, OSError):
            logger.warning("Database health check failed", exc_info=True)
            return False


db = DatabasePool()
