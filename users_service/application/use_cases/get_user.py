"""
Name: Get User Use Cases

Responsibilities:
  - Fetch an active user by ID (inactive users are reported as not found)
  - Fetch a user by username or email, regardless of activity
  - Share the active-user lookup with the update/delete use cases

Collaborators:
  - domain.repositories.UserRepository
"""

from typing import Optional, Tuple
from uuid import UUID

from ...domain.entities import UserRecord
from ...domain.repositories import UserRepository
from ...logger import logger
from .user_results import (
    UserError,
    UserResult,
    internal,
    not_found_by_field,
    not_found_by_id,
)


async def load_active_user(
    repository: UserRepository, user_id: UUID
) -> Tuple[Optional[UserRecord], Optional[UserError]]:
    """R: Resolve an active user or the NOT_FOUND error for it."""
    record = await repository.get_user(user_id, active_only=True)
    if record is None or not record.is_active:
        return None, not_found_by_id(user_id)
    return record, None


class GetUserUseCase:
    """R: Fetch an active user by ID."""

    def __init__(self, repository: UserRepository):
        self.repository = repository

    async def execute(self, user_id: UUID) -> UserResult:
        try:
            record, error = await load_active_user(self.repository, user_id)
        except Exception:
            logger.error("Error finding user", exc_info=True)
            return UserResult(error=internal("Failed to find user"))

        if error:
            return UserResult(error=error)
        return UserResult(user=record.to_user())


class GetUserByUsernameUseCase:
    """R: Fetch a user by exact username."""

    def __init__(self, repository: UserRepository):
        self.repository = repository

    async def execute(self, username: str) -> UserResult:
        try:
            record = await self.repository.get_user_by_username(username)
        except Exception:
            logger.error("Error finding user by username", exc_info=True)
            return UserResult(error=internal("Failed to find user"))

        if record is None:
            return UserResult(error=not_found_by_field("username", username))
        return UserResult(user=record.to_user())


class GetUserByEmailUseCase:
    """R: Fetch a user by exact email."""

    def __init__(self, repository: UserRepository):
        self.repository = repository

    async def execute(self, email: str) -> UserResult:
        try:
            record = await self.repository.get_user_by_email(email)
        except Exception:
            logger.error("Error finding user by email", exc_info=True)
            return UserResult(error=internal("Failed to find user"))

        if record is None:
            return UserResult(error=not_found_by_field("email", email))
        return UserResult(user=record.to_user())
