"""
Name: Update User Use Case

Responsibilities:
  - Merge the provided fields into an active user
  - Rotate the credential when a new password is provided
  - Re-check uniqueness when username or email change

Collaborators:
  - domain.repositories.UserRepository
  - domain.services.CredentialCodec
  - get_user.load_active_user

Constraints:
  - id, roles and created_at are never changed here
  - Fields left as None are not touched
  - Read-then-write without a concurrency token (last writer wins)
"""

from dataclasses import dataclass
from typing import Any, Dict
from uuid import UUID

from ...domain.entities import MIN_PASSWORD_LENGTH, UserRecord, normalize_identity, utc_now
from ...domain.repositories import UserRepository
from ...domain.services import CredentialCodec
from ...exceptions import UniqueConstraintError
from ...logger import logger
from .get_user import load_active_user
from .user_results import (
    UserError,
    UserResult,
    already_exists,
    internal,
    invalid_argument,
    not_found_by_id,
    password_too_short,
)


@dataclass
class UpdateUserInput:
    username: str | None = None
    email: str | None = None
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    is_active: bool | None = None


class UpdateUserUseCase:
    """R: Partially update an active user."""

    def __init__(self, repository: UserRepository, codec: CredentialCodec):
        self.repository = repository
        self.codec = codec

    async def _identity_change(
        self, record: UserRecord, field_name: str, raw_value: str
    ) -> tuple[str | None, UserError | None]:
        value = normalize_identity(raw_value)
        if not value:
            return None, invalid_argument(
                f"{field_name.capitalize()} must not be empty", field_name
            )
        if value == getattr(record, field_name):
            return value, None

        if field_name == "username":
            other = await self.repository.get_user_by_username(value)
        else:
            other = await self.repository.get_user_by_email(value)
        if other is not None and other.id != record.id:
            return None, already_exists(field_name)
        return value, None

    async def execute(self, user_id: UUID, input_data: UpdateUserInput) -> UserResult:
        try:
            record, error = await load_active_user(self.repository, user_id)
            if error:
                return UserResult(error=error)

            changes: Dict[str, Any] = {}
            for field_name in ("username", "email"):
                raw_value = getattr(input_data, field_name)
                if raw_value is None:
                    continue
                value, error = await self._identity_change(record, field_name, raw_value)
                if error:
                    return UserResult(error=error)
                changes[field_name] = value

            if input_data.password is not None:
                if len(input_data.password) < MIN_PASSWORD_LENGTH:
                    return UserResult(error=password_too_short())
                changes["credential_secret"] = await self.codec.derive(
                    input_data.password
                )

            for field_name in ("first_name", "last_name", "is_active"):
                value = getattr(input_data, field_name)
                if value is not None:
                    changes[field_name] = value

            changes["updated_at"] = utc_now()
            updated = await self.repository.update_user(record.copy(**changes))
        except UniqueConstraintError as exc:
            return UserResult(error=already_exists(exc.field))
        except Exception:
            logger.error("Error updating user", exc_info=True)
            return UserResult(error=internal("Failed to update user"))

        if updated is None:
            # R: Deleted between the read and the write
            return UserResult(error=not_found_by_id(user_id))

        logger.info(
            "User updated",
            extra={
                "user_id": str(user_id),
                "fields": sorted(k for k in changes if k != "updated_at"),
            },
        )
        return UserResult(user=updated.to_user())
