"""
Name: Delete User Use Case

Responsibilities:
  - Permanently remove an active user by ID

Collaborators:
  - domain.repositories.UserRepository
  - get_user.load_active_user

Notes:
  - Inactive users cannot be deleted through this path (NOT_FOUND)
  - A second delete of the same ID is NOT_FOUND, not a silent success
"""

from uuid import UUID

from ...domain.repositories import UserRepository
from ...logger import logger
from .get_user import load_active_user
from .user_results import DeleteUserResult, internal, not_found_by_id


class DeleteUserUseCase:
    """R: Hard delete a user."""

    def __init__(self, repository: UserRepository):
        self.repository = repository

    async def execute(self, user_id: UUID) -> DeleteUserResult:
        try:
            _, error = await load_active_user(self.repository, user_id)
            if error:
                return DeleteUserResult(deleted=False, error=error)

            deleted = await self.repository.delete_user(user_id)
        except Exception:
            logger.error("Error deleting user", exc_info=True)
            return DeleteUserResult(deleted=False, error=internal("Failed to delete user"))

        if not deleted:
            return DeleteUserResult(deleted=False, error=not_found_by_id(user_id))

        logger.info("User deleted", extra={"user_id": str(user_id)})
        return DeleteUserResult(deleted=True)
