"""
Name: List Users Use Case

Responsibilities:
  - Return every stored user with credentials stripped

Collaborators:
  - domain.repositories.UserRepository

Notes:
  - No pagination or filtering; order is the store's iteration order
"""

from ...domain.repositories import UserRepository
from ...logger import logger
from .user_results import ListUsersResult, internal


class ListUsersUseCase:
    """R: List all users."""

    def __init__(self, repository: UserRepository):
        self.repository = repository

    async def execute(self) -> ListUsersResult:
        try:
            records = await self.repository.list_users()
        except Exception:
            logger.error("Error listing users", exc_info=True)
            return ListUsersResult(error=internal("Failed to list users"))

        return ListUsersResult(users=[record.to_user() for record in records])
