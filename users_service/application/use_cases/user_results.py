"""
Name: User Use Case Results

Responsibilities:
  - Provide consistent error/result types for the user use cases
  - Build the standard failure values (not found, already exists, ...)

Notes:
  - A result carries either a value or a UserError, never both
  - INTERNAL messages are opaque; details go to the server log only
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List
from uuid import UUID

from ...domain.entities import MIN_PASSWORD_LENGTH, User


class UserErrorCode(str, Enum):
    """R: Error codes for user use cases."""

    ALREADY_EXISTS = "ALREADY_EXISTS"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


@dataclass
class UserError:
    code: UserErrorCode
    message: str
    resource: str | None = "User"
    field: str | None = None


@dataclass
class UserResult:
    user: User | None = None
    error: UserError | None = None


@dataclass
class ListUsersResult:
    users: List[User] = field(default_factory=list)
    error: UserError | None = None


@dataclass
class DeleteUserResult:
    deleted: bool
    error: UserError | None = None


@dataclass
class ValidateCredentialsResult:
    is_valid: bool
    user: User | None = None
    error: UserError | None = None


def not_found_by_id(user_id: UUID) -> UserError:
    return UserError(
        code=UserErrorCode.NOT_FOUND,
        message=f"User with ID {user_id} not found or inactive",
    )


def not_found_by_field(field_name: str, value: str) -> UserError:
    return UserError(
        code=UserErrorCode.NOT_FOUND,
        message=f"User with {field_name} {value} not found",
        field=field_name,
    )


def already_exists(field_name: str) -> UserError:
    return UserError(
        code=UserErrorCode.ALREADY_EXISTS,
        message=f"{field_name.capitalize()} already exists",
        field=field_name,
    )


def invalid_argument(message: str, field_name: str | None = None) -> UserError:
    return UserError(
        code=UserErrorCode.INVALID_ARGUMENT,
        message=message,
        field=field_name,
    )


def password_too_short() -> UserError:
    return invalid_argument(
        f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        "password",
    )


def internal(message: str) -> UserError:
    return UserError(code=UserErrorCode.INTERNAL, message=message)
