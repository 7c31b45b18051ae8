"""
Name: Domain Repository Interfaces

Responsibilities:
  - Define the persistence contract for user records
  - Keep the record service independent of the storage technology

Collaborators:
  - domain.entities: UserRecord
  - Implementations in infrastructure.repositories

Constraints:
  - Pure interfaces (Protocol), no implementation
  - username and email are unique at the storage level; writes that violate
    them raise exceptions.UniqueConstraintError naming the field
  - Any other storage failure raises exceptions.DatabaseError

Notes:
  - All methods are coroutines (asynchronous I/O to the store)
  - Enables testing with the in-memory repository or mocks
"""

from typing import List, Optional, Protocol
from uuid import UUID

from .entities import UserRecord


class UserRepository(Protocol):
    """
    R: Interface for user record persistence.

    Implementations must provide:
      - Lookup by id (optionally restricted to active users)
      - Lookup by unique field (username, email, or either)
      - Insert, update in place, delete
    """

    async def get_user(
        self, user_id: UUID, *, active_only: bool = False
    ) -> Optional[UserRecord]:
        """
        R: Fetch a user by ID.

        Args:
            user_id: User UUID
            active_only: If True, inactive users are treated as absent

        Returns:
            UserRecord if found, otherwise None
        """
        ...

    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        """R: Fetch a user by exact username."""
        ...

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        """R: Fetch a user by exact email."""
        ...

    async def find_user_by_username_or_email(
        self, username: str, email: str
    ) -> Optional[UserRecord]:
        """
        R: Fetch any user whose username OR email matches.

        When two different users match (one per field), the username match
        is returned.
        """
        ...

    async def list_users(self) -> List[UserRecord]:
        """R: Fetch every user, in store iteration order."""
        ...

    async def create_user(self, user: UserRecord) -> UserRecord:
        """
        R: Insert a new user and return the persisted record.

        Raises:
            UniqueConstraintError: username or email already taken
        """
        ...

    async def update_user(self, user: UserRecord) -> Optional[UserRecord]:
        """
        R: Replace the mutable fields of an existing user.

        Returns:
            The persisted record, or None if the user no longer exists

        Raises:
            UniqueConstraintError: username or email already taken
        """
        ...

    async def delete_user(self, user_id: UUID) -> bool:
        """R: Permanently delete a user. Returns False if nothing was deleted."""
        ...

    async def ping(self) -> bool:
        """R: Check store connectivity (health checks)."""
        ...
