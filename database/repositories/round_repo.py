"""CRUD operations for rounds.

A round is one row: players, every score line (JSONB) and the copied
course details are written together, so a round never exists half-saved.
"""

import asyncpg
import logging
from typing import List, Optional
from uuid import UUID

from models import Round
from database.converters import round_from_row, round_to_row
from database.exceptions import IntegrityError, StoreError

logger = logging.getLogger(__name__)

_ROUND_COLUMNS = (
    "course_kind", "course_id", "course_name", "course_holes", "course_par",
    "course_address", "round_date", "players", "scores", "winner",
    "hole_count", "par",
)


class RoundRepositoryDB:
    """Async CRUD for rounds."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Read
    # ================================================================

    async def get_round(self, round_id: str) -> Optional[Round]:
        """Get a round by ID, or None."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM rounds WHERE id = $1", UUID(round_id)
            )
            return round_from_row(row) if row else None

    async def list_recent(self, limit: int = 10) -> List[Round]:
        """Most recent rounds across the whole group, newest date first."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM rounds
                   ORDER BY round_date DESC, created_at DESC
                   LIMIT $1""",
                limit,
            )
            return [round_from_row(r) for r in rows]

    async def list_for_player(self, uid: str) -> List[Round]:
        """Every round the player took part in, newest date first."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM rounds
                   WHERE $1 = ANY(players)
                   ORDER BY round_date DESC, created_at DESC""",
                uid,
            )
            return [round_from_row(r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def create_round(self, round_: Round) -> Round:
        """Insert the whole round in one statement. created_at comes from the server."""
        data = round_to_row(round_)
        placeholders = ", ".join(f"${i+1}" for i in range(len(_ROUND_COLUMNS)))
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""INSERT INTO rounds ({', '.join(_ROUND_COLUMNS)}, created_at)
                        VALUES ({placeholders}, NOW())
                        RETURNING *""",
                    *(data[c] for c in _ROUND_COLUMNS),
                )
        except asyncpg.CheckViolationError as e:
            raise IntegrityError(str(e)) from e
        except asyncpg.PostgresError as e:
            logger.error("Round insert failed: %s", e)
            raise StoreError("save round", e) from e

        logger.debug(
            "Created round %s at %s for %d players",
            row["id"], round_.course_name, len(round_.players),
        )
        return round_from_row(row)

    # ================================================================
    # Update
    # ================================================================

    async def update_round(self, round_id: str, round_: Round) -> Optional[Round]:
        """Replace a round's course, date, players, scores and winner wholesale."""
        data = round_to_row(round_)
        set_clause = ", ".join(f"{c} = ${i+2}" for i, c in enumerate(_ROUND_COLUMNS))
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"UPDATE rounds SET {set_clause} WHERE id = $1 RETURNING *",
                    UUID(round_id), *(data[c] for c in _ROUND_COLUMNS),
                )
        except asyncpg.CheckViolationError as e:
            raise IntegrityError(str(e)) from e
        except asyncpg.PostgresError as e:
            logger.error("Round update failed for %s: %s", round_id, e)
            raise StoreError("update round", e) from e
        return round_from_row(row) if row else None

    # ================================================================
    # Delete
    # ================================================================

    async def delete_round(self, round_id: str) -> bool:
        """Delete a round. Returns True if deleted."""
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM rounds WHERE id = $1", UUID(round_id)
            )
            return result == "DELETE 1"
