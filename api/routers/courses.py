"""Course API endpoints."""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from api.dependencies import get_db, require_principal
from auth import Principal
from database.db_manager import DatabaseManager
from models import Course, CourseInput

logger = logging.getLogger(__name__)

router = APIRouter()


async def _owned_course(db: DatabaseManager, course_id: str, uid: str) -> Course:
    """The course, if it exists and `uid` created it."""
    try:
        course = await db.courses.get_course(course_id)
    except ValueError:
        course = None
    if not course:
        raise HTTPException(404, "Course not found")
    if course.created_by != uid:
        raise HTTPException(403, "Only the member who added this course can change it")
    return course


@router.get("", response_model=List[Course])
async def list_courses(
    q: Optional[str] = Query(None, description="Name prefix, case-sensitive"),
    mine: bool = Query(False, description="Only courses I added"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    principal: Principal = Depends(require_principal),
    db: DatabaseManager = Depends(get_db),
):
    """Public courses, or the caller's own with `mine=true`."""
    return await db.courses.list_courses(
        user_id=principal.uid if mine else None,
        search_term=q or None,
        limit=limit,
    )


@router.get("/{course_id}", response_model=Course)
async def get_course(course_id: str, db: DatabaseManager = Depends(get_db)):
    try:
        course = await db.courses.get_course(course_id)
    except ValueError:
        course = None
    if not course:
        raise HTTPException(404, "Course not found")
    return course


@router.post("", response_model=Course, status_code=201)
async def create_course(
    req: CourseInput,
    principal: Principal = Depends(require_principal),
    db: DatabaseManager = Depends(get_db),
):
    """Add a course. Missing name/location/holes/par is a 400."""
    course = await db.courses.create_course(req, user_id=principal.uid)
    logger.info("Course %s added by %s", course.id, principal.uid)
    return course


@router.put("/{course_id}", response_model=Course)
async def update_course(
    course_id: str,
    req: CourseInput,
    principal: Principal = Depends(require_principal),
    db: DatabaseManager = Depends(get_db),
):
    await _owned_course(db, course_id, principal.uid)
    updated = await db.courses.update_course(course_id, **req.to_updates())
    if not updated:
        raise HTTPException(404, "Course not found")
    return updated


@router.delete("/{course_id}", status_code=204)
async def delete_course(
    course_id: str,
    principal: Principal = Depends(require_principal),
    db: DatabaseManager = Depends(get_db),
):
    await _owned_course(db, course_id, principal.uid)
    if not await db.courses.delete_course(course_id):
        raise HTTPException(404, "Course not found")
