"""Domain layer exports"""

from .entities import (
    DEFAULT_ROLES,
    MIN_PASSWORD_LENGTH,
    User,
    UserRecord,
    UserRole,
    normalize_identity,
)
from .repositories import UserRepository
from .services import CredentialCodec

__all__ = [
    "DEFAULT_ROLES",
    "MIN_PASSWORD_LENGTH",
    "User",
    "UserRecord",
    "UserRole",
    "normalize_identity",
    "UserRepository",
    "CredentialCodec",
]
