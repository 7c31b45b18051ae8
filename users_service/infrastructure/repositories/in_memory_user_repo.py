"""
Name: In-Memory User Repository

Responsibilities:
  - Store user records in memory (tests/local dev)
  - Enforce username/email uniqueness like the database constraints

Collaborators:
  - domain.entities.UserRecord
  - domain.repositories.UserRepository

Constraints / Notes:
  - Thread-safe access (Lock); no awaits inside the critical section
  - Stores and returns copies so callers cannot mutate stored state
  - Ordering aligned with Postgres repository: created_at ASC
"""

from __future__ import annotations

from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional
from uuid import UUID

from ...domain.entities import UserRecord
from ...exceptions import UniqueConstraintError


class InMemoryUserRepository:
    """R: Thread-safe in-memory user repository."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, UserRecord] = {}

    def _find_by(self, field: str, value: str) -> Optional[UserRecord]:
        for user in self._users.values():
            if getattr(user, field) == value:
                return user
        return None

    def _check_unique(self, user: UserRecord) -> None:
        for field in ("username", "email"):
            existing = self._find_by(field, getattr(user, field))
            if existing is not None and existing.id != user.id:
                raise UniqueConstraintError(field)

    async def get_user(
        self, user_id: UUID, *, active_only: bool = False
    ) -> Optional[UserRecord]:
        with self._lock:
            user = self._users.get(user_id)
        if user is None or (active_only and not user.is_active):
            return None
        return user.copy()

    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        with self._lock:
            user = self._find_by("username", username)
        return user.copy() if user else None

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        with self._lock:
            user = self._find_by("email", email)
        return user.copy() if user else None

    async def find_user_by_username_or_email(
        self, username: str, email: str
    ) -> Optional[UserRecord]:
        with self._lock:
            user = self._find_by("username", username) or self._find_by("email", email)
        return user.copy() if user else None

    async def list_users(self) -> List[UserRecord]:
        with self._lock:
            users = [user.copy() for user in self._users.values()]

        oldest = datetime.min.replace(tzinfo=timezone.utc)
        users.sort(key=lambda u: u.created_at or oldest)
        return users

    async def create_user(self, user: UserRecord) -> UserRecord:
        with self._lock:
            if user.id in self._users:
                raise UniqueConstraintError("id")
            self._check_unique(user)
            self._users[user.id] = user.copy()
        return user.copy()

    async def update_user(self, user: UserRecord) -> Optional[UserRecord]:
        """R: Replace mutable fields; id, roles and created_at are preserved."""
        with self._lock:
            current = self._users.get(user.id)
            if current is None:
                return None
            self._check_unique(user)
            stored = current.copy(
                username=user.username,
                email=user.email,
                credential_secret=user.credential_secret,
                first_name=user.first_name,
                last_name=user.last_name,
                is_active=user.is_active,
                updated_at=user.updated_at,
            )
            self._users[user.id] = stored
        return stored.copy()

    async def delete_user(self, user_id: UUID) -> bool:
        with self._lock:
            return self._users.pop(user_id, None) is not None

    async def ping(self) -> bool:
        return True
