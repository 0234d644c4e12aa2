from database.connection import DatabasePool, db
from database.db_manager import DatabaseManager
from database.repositories import CourseRepositoryDB, ProfileRepositoryDB, RoundRepositoryDB
from database.exceptions import (
    DatabaseError,
    DuplicateError,
    IntegrityError,
    NotFoundError,
    StoreError,
)

__all__ = [
    "DatabasePool",
    "db",
    "DatabaseManager",
    "CourseRepositoryDB",
    "ProfileRepositoryDB",
    "RoundRepositoryDB",
    "DatabaseError",
    "DuplicateError",
    "IntegrityError",
    "NotFoundError",
    "StoreError",
]
