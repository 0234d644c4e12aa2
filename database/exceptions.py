class DatabaseError(Exception):
    """Base for all database errors."""


class NotFoundError(DatabaseError):
    """Record not found where one was required (lookups return None instead)."""


class DuplicateError(DatabaseError):
    """Unique constraint violation."""


class IntegrityError(DatabaseError):
    """Check constraint violation."""


class StoreError(DatabaseError):
    """The store rejected or failed a request.

    The message reads "Failed to <action>: <cause>" so routers can show it
    as-is.
    """

    def __init__(self, action: str, cause: Exception):
        self.action = action
        self.cause = cause
        super().__init__(f"Failed to {action}: {cause}")
