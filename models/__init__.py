from .base import BaseGolfModel
from .course import Course, CourseInput, HoleCount, Location
from .errors import GolfValidationError, MissingFieldsError
from .profile import NO_BEST_SCORE, PlayerStats, ProfileUpdate, UserProfile
from .round import (
    CourseRef,
    CourseSnapshot,
    LegacyCourseName,
    PlayerScore,
    Round,
    UNSET_STROKES,
)

__all__ = [
    "BaseGolfModel",
    "Course",
    "CourseInput",
    "CourseRef",
    "CourseSnapshot",
    "GolfValidationError",
    "HoleCount",
    "LegacyCourseName",
    "Location",
    "MissingFieldsError",
    "NO_BEST_SCORE",
    "PlayerScore",
    "PlayerStats",
    "ProfileUpdate",
    "Round",
    "UNSET_STROKES",
    "UserProfile",
]
