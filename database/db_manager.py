from __future__ import annotations

import asyncpg
import logging
from pathlib import Path
from typing import Optional

from database.exceptions import DatabaseError
from database.repositories import CourseRepositoryDB, ProfileRepositoryDB, RoundRepositoryDB

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Entry point to the three collections.

    Notes:
    - Each repository shares the same asyncpg pool.
    - Repositories use raw SQL (no ORM) to keep behavior explicit.
    """

    def __init__(
        self,
        pool: asyncpg.Pool,
        schema_path: Optional[str] = None,
    ) -> None:
        self._pool = pool
        self.schema_path = Path(
            schema_path or Path(__file__).with_name("schema.sql")
        ).resolve()
        self.profiles = ProfileRepositoryDB(pool)
        self.courses = CourseRepositoryDB(pool)
        self.rounds = RoundRepositoryDB(pool)

    async def initialize_schema(self) -> None:
        """Create the tables defined in `database/schema.sql`."""
        if not self.schema_path.exists():
            raise DatabaseError(f"Schema file not found: {self.schema_path}")

        sql_text = self.schema_path.read_text(encoding="utf-8")
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(sql_text)
        logger.info("Schema applied from %s", self.schema_path.name)
