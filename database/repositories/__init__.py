from .course_repo import CourseRepositoryDB
from .profile_repo import ProfileRepositoryDB
from .round_repo import RoundRepositoryDB

__all__ = ["CourseRepositoryDB", "ProfileRepositoryDB", "RoundRepositoryDB"]
