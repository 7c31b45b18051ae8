"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure the test environment (in-memory store, test JWT secret)
  - Provide low-cost credential codec, repositories and the record service
  - Provide mock collaborators for use case tests

Collaborators:
  - pytest / pytest-asyncio: Test framework
  - unittest.mock: Mocking library
  - users_service.domain: Entities and protocols

Notes:
  - Fixtures are auto-discovered by pytest
  - Argon2 costs are dropped to the minimum so tests stay fast
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JWT_SECRET", "users-service-unit-test-secret-0123456789abcdef")

from users_service import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from users_service.application import UserRecordService  # noqa: E402
from users_service.domain.entities import UserRecord, UserRole  # noqa: E402
from users_service.domain.repositories import UserRepository  # noqa: E402
from users_service.domain.services import CredentialCodec  # noqa: E402
from users_service.identity.credentials import (  # noqa: E402
    Argon2CredentialCodec,
    Argon2Parameters,
)
from users_service.infrastructure.repositories import (  # noqa: E402
    InMemoryUserRepository,
)

FAST_ARGON2 = Argon2Parameters(time_cost=1, memory_cost=8, parallelism=1)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Clear settings and container caches around each test."""
    from users_service import container

    app_config.get_settings.cache_clear()
    container.get_user_repository.cache_clear()
    container.get_credential_codec.cache_clear()
    container.get_user_record_service.cache_clear()
    yield
    app_config.get_settings.cache_clear()
    container.get_user_repository.cache_clear()
    container.get_credential_codec.cache_clear()
    container.get_user_record_service.cache_clear()


# ============================================================================
# Factories
# ============================================================================


def make_record(**overrides) -> UserRecord:
    """R: Build a stored user record with sensible defaults."""
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    values = {
        "id": uuid4(),
        "username": "alice",
        "email": "a@x.com",
        "credential_secret": "aa" * 32 + ":" + "bb" * 64,
        "roles": (UserRole.USER,),
        "first_name": None,
        "last_name": None,
        "is_active": True,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return UserRecord(**values)


# ============================================================================
# Real collaborators
# ============================================================================


@pytest.fixture
def codec() -> Argon2CredentialCodec:
    """R: Argon2id codec with minimal costs."""
    return Argon2CredentialCodec(FAST_ARGON2)


@pytest.fixture
def repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def service(repository, codec) -> UserRecordService:
    return UserRecordService(repository=repository, codec=codec)


# ============================================================================
# Mock collaborators
# ============================================================================


@pytest.fixture
def mock_repository() -> AsyncMock:
    """
    R: Create a mock UserRepository.

    Pre-configured behaviors:
    - every lookup returns None (no users)
    - create_user/update_user echo their argument
    - delete_user returns True
    """
    mock = AsyncMock(spec=UserRepository)
    mock.get_user.return_value = None
    mock.get_user_by_username.return_value = None
    mock.get_user_by_email.return_value = None
    mock.find_user_by_username_or_email.return_value = None
    mock.list_users.return_value = []
    mock.create_user.side_effect = lambda user: user
    mock.update_user.side_effect = lambda user: user
    mock.delete_user.return_value = True
    return mock


@pytest.fixture
def mock_codec() -> AsyncMock:
    """R: Create a mock CredentialCodec (derive returns a fixed secret)."""
    mock = AsyncMock(spec=CredentialCodec)
    mock.derive.return_value = "00" * 32 + ":" + "11" * 64
    mock.verify.return_value = True
    return mock


@pytest.fixture
def record_factory():
    """R: Factory for UserRecord test data."""
    return make_record
