"""
Name: Update User Use Case Tests

Responsibilities:
  - Partial updates leave absent fields untouched
  - Username/email changes are normalized and re-checked for uniqueness
  - Password rotation validates length and re-derives the secret
"""

from uuid import uuid4

import pytest

from users_service.application.use_cases import (
    UpdateUserInput,
    UpdateUserUseCase,
    UserErrorCode,
)
from users_service.exceptions import DatabaseError, UniqueConstraintError


pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


@pytest.fixture
def existing(mock_repository, record_factory):
    record = record_factory(first_name="Alice", last_name="Doe")
    mock_repository.get_user.return_value = record
    return record


async def test_update_names_only(mock_repository, mock_codec, existing):
    use_case = UpdateUserUseCase(mock_repository, mock_codec)

    result = await use_case.execute(existing.id, UpdateUserInput(first_name="Ally"))

    assert result.error is None
    assert result.user.first_name == "Ally"
    assert result.user.last_name == "Doe"
    assert result.user.email == existing.email
    assert result.user.created_at == existing.created_at
    assert result.user.updated_at > existing.updated_at
    mock_codec.derive.assert_not_awaited()


async def test_update_missing_user(mock_repository, mock_codec):
    user_id = uuid4()
    use_case = UpdateUserUseCase(mock_repository, mock_codec)

    result = await use_case.execute(user_id, UpdateUserInput(first_name="X"))

    assert result.error.code == UserErrorCode.NOT_FOUND
    assert result.error.message == f"User with ID {user_id} not found or inactive"
    mock_repository.update_user.assert_not_awaited()


async def test_update_inactive_user_is_not_found(
    mock_repository, mock_codec, record_factory
):
    record = record_factory(is_active=False)
    mock_repository.get_user.return_value = record
    use_case = UpdateUserUseCase(mock_repository, mock_codec)

    result = await use_case.execute(record.id, UpdateUserInput(is_active=True))

    assert result.error.code == UserErrorCode.NOT_FOUND


async def test_update_rotates_password(mock_repository, mock_codec, existing):
    mock_codec.derive.return_value = "cc" * 32 + ":" + "dd" * 64
    use_case = UpdateUserUseCase(mock_repository, mock_codec)

    result = await use_case.execute(existing.id, UpdateUserInput(password="newpass1"))

    assert result.error is None
    mock_codec.derive.assert_awaited_once_with("newpass1")
    stored = mock_repository.update_user.await_args.args[0]
    assert stored.credential_secret == mock_codec.derive.return_value


async def test_update_short_password(mock_repository, mock_codec, existing):
    use_case = UpdateUserUseCase(mock_repository, mock_codec)

    result = await use_case.execute(existing.id, UpdateUserInput(password="12345"))

    assert result.error.code == UserErrorCode.INVALID_ARGUMENT
    assert result.error.field == "password"
    mock_repository.update_user.assert_not_awaited()


async def test_update_email_is_normalized(mock_repository, mock_codec, existing):
    use_case = UpdateUserUseCase(mock_repository, mock_codec)

    result = await use_case.execute(existing.id, UpdateUserInput(email=" New@X.com"))

    assert result.user.email == "new@x.com"
    mock_repository.get_user_by_email.assert_awaited_once_with("new@x.com")


async def test_update_email_taken_by_other_user(
    mock_repository, mock_codec, existing, record_factory
):
    mock_repository.get_user_by_email.return_value = record_factory(
        username="bob", email="b@x.com"
    )
    use_case = UpdateUserUseCase(mock_repository, mock_codec)

    result = await use_case.execute(existing.id, UpdateUserInput(email="b@x.com"))

    assert result.error.code == UserErrorCode.ALREADY_EXISTS
    assert result.error.message == "Email already exists"
    mock_repository.update_user.assert_not_awaited()


async def test_update_username_taken_by_other_user(
    mock_repository, mock_codec, existing, record_factory
):
    mock_repository.get_user_by_username.return_value = record_factory(
        username="bob", email="b@x.com"
    )
    use_case = UpdateUserUseCase(mock_repository, mock_codec)

    result = await use_case.execute(existing.id, UpdateUserInput(username="Bob"))

    assert result.error.code == UserErrorCode.ALREADY_EXISTS
    assert result.error.message == "Username already exists"


async def test_update_same_email_skips_lookup(mock_repository, mock_codec, existing):
    use_case = UpdateUserUseCase(mock_repository, mock_codec)

    result = await use_case.execute(existing.id, UpdateUserInput(email="A@X.COM"))

    assert result.error is None
    mock_repository.get_user_by_email.assert_not_awaited()


async def test_update_blank_username(mock_repository, mock_codec, existing):
    use_case = UpdateUserUseCase(mock_repository, mock_codec)

    result = await use_case.execute(existing.id, UpdateUserInput(username="  "))

    assert result.error.code == UserErrorCode.INVALID_ARGUMENT
    assert result.error.field == "username"


async def test_update_unique_violation_on_write(mock_repository, mock_codec, existing):
    mock_repository.update_user.side_effect = UniqueConstraintError("username")
    use_case = UpdateUserUseCase(mock_repository, mock_codec)

    result = await use_case.execute(existing.id, UpdateUserInput(username="carol"))

    assert result.error.code == UserErrorCode.ALREADY_EXISTS
    assert result.error.message == "Username already exists"


async def test_update_deleted_between_read_and_write(
    mock_repository, mock_codec, existing
):
    mock_repository.update_user.side_effect = None
    mock_repository.update_user.return_value = None
    use_case = UpdateUserUseCase(mock_repository, mock_codec)

    result = await use_case.execute(existing.id, UpdateUserInput(last_name="Roe"))

    assert result.error.code == UserErrorCode.NOT_FOUND


async def test_update_store_failure(mock_repository, mock_codec, existing):
    mock_repository.update_user.side_effect = DatabaseError("down")
    use_case = UpdateUserUseCase(mock_repository, mock_codec)

    result = await use_case.execute(existing.id, UpdateUserInput(last_name="Roe"))

    assert result.error.code == UserErrorCode.INTERNAL
    assert result.error.message == "Failed to update user"
