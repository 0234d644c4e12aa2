"""Conversion between asyncpg database rows and Pydantic domain models.

Centralizes all mapping logic between the flat tables and the nested
models (stats inside a profile, location inside a course, course
reference and score lines inside a round).
"""

import json
from typing import Optional
from uuid import UUID

from models import (
    Course,
    CourseSnapshot,
    LegacyCourseName,
    Location,
    PlayerScore,
    PlayerStats,
    Round,
    UserProfile,
)


def _as_uuid(value: Optional[str]) -> Optional[UUID]:
    return UUID(value) if value else None


def _as_str(value) -> Optional[str]:
    return str(value) if value is not None else None


def _as_float(value) -> Optional[float]:
    return float(value) if value is not None else None


# ================================================================
# Row -> Model (reads)
# ================================================================

def profile_from_row(row) -> UserProfile:
    """profiles row -> UserProfile model."""
    return UserProfile(
        uid=row["uid"],
        name=row["name"],
        photo_url=row["photo_url"],
        home_course=row["home_course"],
        handicap=_as_float(row["handicap"]),
        stats=PlayerStats(
            wins=row["wins"],
            birdies=row["birdies"],
            best_score=row["best_score"],
            average_score=float(row["average_score"]),
            rounds_played=row["rounds_played"],
        ),
    )


def course_from_row(row) -> Course:
    """courses row -> Course model."""
    return Course(
        id=str(row["id"]),
        name=row["name"],
        location=Location(
            address=row["address"] or "",
            lat=float(row["lat"] or 0),
            lng=float(row["lng"] or 0),
        ),
        holes=row["holes"],
        par=row["par"],
        rating=_as_float(row["rating"]),
        slope=row["slope"],
        amenities=list(row["amenities"] or []),
        phone=row["phone"],
        website=row["website"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        created_by=row["created_by"],
        is_public=row["is_public"],
    )


def course_ref_from_row(row):
    """Pick the course variant named by course_kind."""
    kind = row["course_kind"]
    if kind == "legacy":
        return LegacyCourseName(name=row["course_name"])
    if kind == "snapshot":
        return CourseSnapshot(
            course_id=_as_str(row["course_id"]),
            name=row["course_name"],
            holes=row["course_holes"],
            par=row["course_par"],
            address=row["course_address"],
        )
    raise ValueError(f"Unknown course kind {kind!r} on round {row['id']}")


def round_from_row(row) -> Round:
    """rounds row -> Round model. Score lines come back from JSONB."""
    scores = row["scores"] or []
    if isinstance(scores, str):
        scores = json.loads(scores)
    return Round(
        id=str(row["id"]),
        course=course_ref_from_row(row),
        date=row["round_date"],
        players=list(row["players"]),
        scores=[PlayerScore(uid=s["uid"], holes=s["holes"]) for s in scores],
        winner=row["winner"],
        hole_count=row["hole_count"],
        par=row["par"],
        created_at=row["created_at"],
    )


# ================================================================
# Model -> Row dict (writes)
# ================================================================

def profile_to_row(profile: UserProfile) -> dict:
    """UserProfile -> dict for profiles INSERT."""
    return {
        "uid": profile.uid,
        "name": profile.name,
        "photo_url": profile.photo_url,
        "home_course": profile.home_course,
        "handicap": profile.handicap,
        **stats_to_row(profile.stats),
    }


def stats_to_row(stats: PlayerStats) -> dict:
    return {
        "wins": stats.wins,
        "birdies": stats.birdies,
        "best_score": stats.best_score,
        "average_score": stats.average_score,
        "rounds_played": stats.rounds_played,
    }


def course_to_row(course: Course) -> dict:
    """Course -> dict for courses INSERT (timestamps are set by the repository)."""
    return {
        "name": course.name,
        "address": course.location.address,
        "lat": course.location.lat,
        "lng": course.location.lng,
        "holes": course.holes,
        "par": course.par,
        "rating": course.rating or 0,
        "slope": course.slope or 0,
        "amenities": list(course.amenities),
        "phone": course.phone,
        "website": course.website,
        "created_by": course.created_by,
        "is_public": course.is_public,
    }


def course_updates_to_columns(updates: dict) -> dict:
    """Flatten a partial course update into column names."""
    columns = dict(updates)
    location = columns.pop("location", None)
    if location is not None:
        if isinstance(location, dict):
            location = Location(**location)
        columns["address"] = location.address
        columns["lat"] = location.lat
        columns["lng"] = location.lng
    for key in ("rating", "slope"):
        if key in columns and columns[key] is None:
            columns[key] = 0
    if "amenities" in columns and columns["amenities"] is None:
        columns["amenities"] = []
    return columns


def round_to_row(round_: Round) -> dict:
    """Round -> dict for rounds INSERT/UPDATE. created_at is left to the server."""
    course = round_.course
    if isinstance(course, CourseSnapshot):
        course_columns = {
            "course_kind": "snapshot",
            "course_id": _as_uuid(course.course_id),
            "course_name": course.name,
            "course_holes": course.holes,
            "course_par": course.par,
            "course_address": course.address,
        }
    else:
        course_columns = {
            "course_kind": "legacy",
            "course_id": None,
            "course_name": course.name,
            "course_holes": None,
            "course_par": None,
            "course_address": None,
        }
    return {
        **course_columns,
        "round_date": round_.date,
        "players": list(round_.players),
        "scores": json.dumps(
            [{"uid": s.uid, "holes": list(s.holes)} for s in round_.scores]
        ),
        "winner": round_.winner,
        "hole_count": round_.hole_count,
        "par": round_.par,
    }
