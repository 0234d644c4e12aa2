"""CRUD operations for the courses table."""

import asyncpg
import logging
from pydantic import ValidationError
from typing import List, Optional, Union
from uuid import UUID

from analytics.filters import prefix_range
from models import Course, CourseInput, GolfValidationError, MissingFieldsError
from models.base import first_error_message
from database.converters import course_from_row, course_to_row, course_updates_to_columns
from database.exceptions import StoreError

logger = logging.getLogger(__name__)


class CourseRepositoryDB:
    """Async CRUD for courses."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Read
    # ================================================================

    async def get_course(self, course_id: str) -> Optional[Course]:
        """Get a course by ID, or None."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM courses WHERE id = $1", UUID(course_id)
            )
            return course_from_row(row) if row else None

    async def list_courses(
        self,
        *,
        user_id: Optional[str] = None,
        search_term: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Course]:
        """List courses by name.

        With user_id: that member's courses (public or not).
        Without: public courses only.
        search_term keeps names starting with it, case-sensitively.
        """
        conditions = []
        values: list = []

        if user_id:
            values.append(user_id)
            conditions.append(f"created_by = ${len(values)}")
        else:
            conditions.append("is_public")

        if search_term:
            lower, upper = prefix_range(search_term)
            values.extend([lower, upper])
            conditions.append(
                f'name COLLATE "C" >= ${len(values) - 1} AND name COLLATE "C" < ${len(values)}'
            )

        sql = f"SELECT * FROM courses WHERE {' AND '.join(conditions)} ORDER BY name"
        if limit:
            values.append(limit)
            sql += f" LIMIT ${len(values)}"

        async with self._pool.acquire() as conn:
            rows = await conn.fetch(sql, *values)
            return [course_from_row(r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def create_course(
        self, payload: Union[CourseInput, Course, dict], user_id: str
    ) -> Course:
        """Insert a course owned by user_id.

        Checks name/location/holes/par are present before touching the
        database. New courses are private, with no amenities and zero
        rating/slope unless given.
        """
        if not user_id:
            raise GolfValidationError("User ID is required to create a course")

        if isinstance(payload, Course):
            payload = CourseInput(**payload.model_dump(exclude={"id"}))
        elif isinstance(payload, dict):
            payload = CourseInput(**payload)

        missing = payload.missing_required_fields()
        if missing:
            raise MissingFieldsError(missing)

        course = Course(
            **payload.model_dump(exclude_none=True),
            created_by=user_id,
        )
        data = course_to_row(course)
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """INSERT INTO courses
                       (name, address, lat, lng, holes, par, rating, slope,
                        amenities, phone, website, created_by, is_public,
                        created_at, updated_at)
                       VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13,
                               NOW(), NOW())
                       RETURNING *""",
                    data["name"], data["address"], data["lat"], data["lng"],
                    data["holes"], data["par"], data["rating"], data["slope"],
                    data["amenities"], data["phone"], data["website"],
                    data["created_by"], data["is_public"],
                )
        except asyncpg.PostgresError as e:
            logger.error("Course insert failed for user %s: %s", user_id, e)
            raise StoreError("create course", e) from e

        if not row:
            raise StoreError("create course", RuntimeError("no row returned"))
        logger.debug("Created course %s for user %s", row["id"], user_id)
        return course_from_row(row)

    # ================================================================
    # Update
    # ================================================================

    async def update_course(self, course_id: str, **fields) -> Optional[Course]:
        """Update course fields in place. updated_at is always refreshed.

        Values are checked against the same rules as a new course before
        anything is written; unknown fields are ignored.
        """
        try:
            payload = CourseInput(**fields)
        except ValidationError as e:
            raise GolfValidationError(first_error_message(e)) from e
        updates = course_updates_to_columns(payload.to_updates())

        assignments = [f"{k} = ${i+2}" for i, k in enumerate(updates)]
        assignments.append("updated_at = NOW()")
        values = [UUID(course_id)] + list(updates.values())

        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"UPDATE courses SET {', '.join(assignments)} WHERE id = $1 RETURNING *",
                    *values,
                )
        except asyncpg.PostgresError as e:
            logger.error("Course update failed for %s: %s", course_id, e)
            raise StoreError("update course", e) from e
        return course_from_row(row) if row else None

    # ================================================================
    # Delete
    # ================================================================

    async def delete_course(self, course_id: str) -> bool:
        """Delete a course. Rounds keep their own copy of its details."""
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM courses WHERE id = $1", UUID(course_id)
            )
            return result == "DELETE 1"
