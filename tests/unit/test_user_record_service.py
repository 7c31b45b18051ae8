"""
Name: User Record Service Scenario Tests

Responsibilities:
  - Exercise the service end to end over the in-memory store and the
    real (low-cost) Argon2id codec

Notes:
  - Scenarios follow a user through create, lookup, update and removal
"""

import pytest

from users_service.application.use_cases import (
    CreateUserInput,
    UpdateUserInput,
    UserErrorCode,
)


pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


async def _create_alice(service):
    result = await service.create(
        CreateUserInput(username="Alice", email="A@x.com", password="secret1")
    )
    assert result.error is None
    return result.user


async def test_duplicate_username_differs_only_in_case(service):
    await _create_alice(service)

    result = await service.create(
        CreateUserInput(username="alice", email="other@x.com", password="secret1")
    )

    assert result.error.code == UserErrorCode.ALREADY_EXISTS
    assert result.error.message == "Username already exists"


async def test_duplicate_email(service):
    await _create_alice(service)

    result = await service.create(
        CreateUserInput(username="bob", email="a@X.com", password="secret1")
    )

    assert result.error.message == "Email already exists"


async def test_short_password_creates_nothing(service, repository):
    result = await service.create(
        CreateUserInput(username="bob", email="b@x.com", password="abc")
    )

    assert result.error.code == UserErrorCode.INVALID_ARGUMENT
    assert await repository.list_users() == []


async def test_inactive_user_hidden_from_find_one(service):
    alice = await _create_alice(service)
    await service.update(alice.id, UpdateUserInput(is_active=False))

    result = await service.find_one(alice.id)

    assert result.error.code == UserErrorCode.NOT_FOUND
    by_username = await service.find_by_username("alice")
    assert by_username.user.is_active is False


async def test_wrong_password_and_unknown_user_look_alike(service):
    await _create_alice(service)

    wrong = await service.validate_credentials("alice", "nope-nope")
    unknown = await service.validate_credentials("ghost", "secret1")

    assert (wrong.is_valid, wrong.user, wrong.error) == (False, None, None)
    assert (unknown.is_valid, unknown.user, unknown.error) == (False, None, None)


async def test_validate_uses_stored_username_form(service):
    await _create_alice(service)

    assert (await service.validate_credentials("alice", "secret1")).is_valid is True
    assert (await service.validate_credentials("Alice", "secret1")).is_valid is False


async def test_lone_surrogate_password_create_and_validate(service):
    created = await service.create(
        CreateUserInput(username="bob", email="bob@x.com", password="pass\ud800word")
    )
    await _create_alice(service)

    assert created.error is None
    assert (await service.validate_credentials("bob", "pass\ud800word")).is_valid is True
    wrong = await service.validate_credentials("alice", "\ud800xx")
    assert (wrong.is_valid, wrong.user, wrong.error) == (False, None, None)


async def test_password_rotation(service):
    alice = await _create_alice(service)

    result = await service.update(alice.id, UpdateUserInput(password="newpass1"))

    assert result.error is None
    assert (await service.validate_credentials("alice", "newpass1")).is_valid is True
    assert (await service.validate_credentials("alice", "secret1")).is_valid is False


async def test_update_cannot_steal_email(service):
    alice = await _create_alice(service)
    await service.create(
        CreateUserInput(username="bob", email="b@x.com", password="secret1")
    )

    result = await service.update(alice.id, UpdateUserInput(email="B@x.com"))

    assert result.error.code == UserErrorCode.ALREADY_EXISTS
    assert (await service.find_one(alice.id)).user.email == "a@x.com"


async def test_remove_then_find_one(service):
    alice = await _create_alice(service)

    removed = await service.remove(alice.id)
    again = await service.remove(alice.id)

    assert removed.deleted is True
    assert (await service.find_one(alice.id)).error.code == UserErrorCode.NOT_FOUND
    assert again.error.code == UserErrorCode.NOT_FOUND


async def test_find_all_never_exposes_secret(service):
    await _create_alice(service)
    await service.create(
        CreateUserInput(username="bob", email="b@x.com", password="secret1")
    )

    result = await service.find_all()

    assert [user.username for user in result.users] == ["alice", "bob"]
    for user in result.users:
        assert not hasattr(user, "credential_secret")
        assert "secret" not in repr(user)
