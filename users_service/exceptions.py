"""
Name: Custom Exceptions

Responsibilities:
  - Define infrastructure exceptions raised by repositories
  - Carry a stable error_code and an error_id for log correlation
  - Name the violated unique field on storage constraint failures

Collaborators:
  - infrastructure.repositories: raise DatabaseError / UniqueConstraintError
  - application.use_cases: translate them into UserError results
  - exception_handlers.py: last-resort mapping to HTTP responses

Notes:
  - Domain failures (ALREADY_EXISTS, INVALID_ARGUMENT, NOT_FOUND) are not
    exceptions; they travel as result values (application/user_results.py)
"""

from uuid import uuid4


class UsersServiceError(Exception):
    """Base exception for the users service."""

    error_code: str = "USERS_SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(UsersServiceError):
    """Database connection or query error."""

    error_code: str = "DATABASE_ERROR"


class UniqueConstraintError(DatabaseError):
    """A write violated the unique constraint on ``field``."""

    error_code: str = "UNIQUE_VIOLATION"

    def __init__(self, field: str, message: str | None = None, **kwargs):
        self.field = field
        super().__init__(message or f"Unique constraint violated on {field}", **kwargs)
