"""CRUD operations for the profiles table."""

import asyncpg
import logging
from typing import List, Optional

from models import PlayerStats, UserProfile
from database.converters import profile_from_row, profile_to_row, stats_to_row
from database.exceptions import DuplicateError, IntegrityError

logger = logging.getLogger(__name__)


class ProfileRepositoryDB:
    """Async CRUD for player profiles, keyed by identity uid."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Read
    # ================================================================

    async def get_profile(self, uid: str) -> Optional[UserProfile]:
        """Get a profile by uid, or None."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow("SELECT * FROM profiles WHERE uid = $1", uid)
            return profile_from_row(row) if row else None

    async def list_profiles(self) -> List[UserProfile]:
        """Every member, by name. Feeds the leaderboard and player pickers."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch("SELECT * FROM profiles ORDER BY name, uid")
            return [profile_from_row(r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def create_profile(self, profile: UserProfile) -> UserProfile:
        """Create a profile with zeroed stats, whatever stats were passed in."""
        data = profile_to_row(profile.model_copy(update={"stats": PlayerStats()}))
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """INSERT INTO profiles
                       (uid, name, photo_url, home_course, handicap,
                        wins, birdies, best_score, average_score, rounds_played)
                       VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                       RETURNING *""",
                    data["uid"], data["name"], data["photo_url"],
                    data["home_course"], data["handicap"],
                    data["wins"], data["birdies"], data["best_score"],
                    data["average_score"], data["rounds_played"],
                )
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"Profile already exists: {profile.uid}") from e
        logger.debug("Created profile %s", profile.uid)
        return profile_from_row(row)

    async def ensure_profile(
        self, uid: str, name: str, photo_url: Optional[str] = None
    ) -> UserProfile:
        """Return the member's profile, creating it on their first sign-in."""
        existing = await self.get_profile(uid)
        if existing:
            return existing
        try:
            return await self.create_profile(
                UserProfile(uid=uid, name=name, photo_url=photo_url)
            )
        except DuplicateError:
            # Two first sign-ins raced; the other one created it.
            return await self.get_profile(uid)

    # ================================================================
    # Update
    # ================================================================

    async def update_profile(self, uid: str, **fields) -> Optional[UserProfile]:
        """Update profile fields (name, photo_url, home_course, handicap)."""
        allowed = {"name", "photo_url", "home_course", "handicap"}
        updates = {k: v for k, v in fields.items() if k in allowed}
        if not updates:
            return await self.get_profile(uid)

        set_clause = ", ".join(f"{k} = ${i+2}" for i, k in enumerate(updates))
        values = [uid] + list(updates.values())

        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"UPDATE profiles SET {set_clause} WHERE uid = $1 RETURNING *",
                *values,
            )
            return profile_from_row(row) if row else None

    async def update_stats(self, uid: str, stats: PlayerStats) -> Optional[UserProfile]:
        """Replace a member's stats block."""
        data = stats_to_row(stats)
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """UPDATE profiles
                       SET wins = $2, birdies = $3, best_score = $4,
                           average_score = $5, rounds_played = $6
                       WHERE uid = $1 RETURNING *""",
                    uid, data["wins"], data["birdies"], data["best_score"],
                    data["average_score"], data["rounds_played"],
                )
        except asyncpg.CheckViolationError as e:
            raise IntegrityError(str(e)) from e
        return profile_from_row(row) if row else None

    # ================================================================
    # Delete
    # ================================================================

    async def delete_profile(self, uid: str) -> bool:
        """Delete a profile. Rounds that list this uid are left alone."""
        async with self._pool.acquire() as conn:
            result = await conn.execute("DELETE FROM profiles WHERE uid = $1", uid)
            return result == "DELETE 1"
