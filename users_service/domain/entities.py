"""
Name: Domain Entities

Responsibilities:
  - Define the user identity entities (stored record and public view)
  - Define the role enumeration
  - Provide identity normalization for username/email

Collaborators:
  - None (pure domain layer, no external dependencies)

Constraints:
  - UserRecord is the only shape that carries credential_secret
  - User (public) has no credential attribute at all
  - roles is never empty

Notes:
  - Timestamps are timezone-aware UTC
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple
from uuid import UUID


class UserRole(str, Enum):
    """R: Role tags a user can hold."""

    USER = "USER"
    ADMIN = "ADMIN"


DEFAULT_ROLES: Tuple[UserRole, ...] = (UserRole.USER,)

# R: Shortest plaintext password accepted on create and on rotation
MIN_PASSWORD_LENGTH = 6


def normalize_identity(value: str) -> str:
    """R: Canonical form for username/email (trimmed, lower-case)."""
    return value.strip().lower()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class User:
    """
    R: Public view of a user, safe to return to callers.

    Attributes:
        id: Unique user identifier (immutable)
        username: Normalized unique username
        email: Normalized unique email
        roles: Role tags (never empty)
        first_name: Optional display name
        last_name: Optional display name
        is_active: False excludes the user from active-only lookups
        created_at: Creation timestamp
        updated_at: Timestamp of the last mutation
    """

    id: UUID
    username: str
    email: str
    roles: Tuple[UserRole, ...] = DEFAULT_ROLES
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class UserRecord:
    """
    R: Stored form of a user, including the derived credential secret.

    Never leaves the application layer; use to_user() for anything returned
    to a caller.
    """

    id: UUID
    username: str
    email: str
    credential_secret: str = field(repr=False)
    roles: Tuple[UserRole, ...] = DEFAULT_ROLES
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.roles:
            raise ValueError("A user must hold at least one role")
        self.roles = tuple(UserRole(role) for role in self.roles)

    def to_user(self) -> User:
        """R: Strip the credential secret."""
        return User(
            id=self.id,
            username=self.username,
            email=self.email,
            roles=self.roles,
            first_name=self.first_name,
            last_name=self.last_name,
            is_active=self.is_active,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def copy(self, **changes) -> "UserRecord":
        return replace(self, **changes)
