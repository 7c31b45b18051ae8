"""
Name: Dependency Injection Container

Responsibilities:
  - Wire up dependencies for the application
  - Manage singleton instances of the repository, codec and service
  - Enable dependency injection in FastAPI endpoints

Collaborators:
  - infrastructure.repositories: PostgresUserRepository, InMemoryUserRepository
  - identity.credentials: Argon2CredentialCodec
  - application.UserRecordService
  - FastAPI Depends(): Dependency injection mechanism

Constraints:
  - Manual DI (no library like dependency-injector)
  - Singletons via functools.lru_cache
  - Environment-based configuration

Notes:
  - This is the composition root (where dependencies are wired)
  - Tests override get_user_record_service via app.dependency_overrides
"""

from functools import lru_cache

from .application import UserRecordService
from .config import get_settings
from .domain.repositories import UserRepository
from .domain.services import CredentialCodec
from .identity.credentials import Argon2CredentialCodec, Argon2Parameters
from .infrastructure.repositories import (
    InMemoryUserRepository,
    PostgresUserRepository,
)


def uses_in_memory_store() -> bool:
    """R: True when the in-memory store is selected (flag or test env)."""
    settings = get_settings()
    if settings.use_in_memory_store:
        return True
    return settings.app_env.strip().lower() in {"test", "testing"}


# R: Repository factory (singleton)
@lru_cache
def get_user_repository() -> UserRepository:
    """
    R: Get singleton instance of user repository.

    Returns:
        In-memory or PostgreSQL implementation of UserRepository
    """
    if uses_in_memory_store():
        return InMemoryUserRepository()
    return PostgresUserRepository()


# R: Credential codec factory (singleton)
@lru_cache
def get_credential_codec() -> CredentialCodec:
    """R: Argon2id codec with costs from Settings."""
    return Argon2CredentialCodec(Argon2Parameters.from_settings())


@lru_cache
def get_user_record_service() -> UserRecordService:
    """R: Get singleton UserRecordService with injected dependencies."""
    return UserRecordService(
        repository=get_user_repository(),
        codec=get_credential_codec(),
    )
