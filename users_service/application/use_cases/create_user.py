"""
Name: Create User Use Case

Responsibilities:
  - Normalize username/email and enforce their uniqueness
  - Enforce the password length rule before deriving a credential
  - Insert the new record with default roles and timestamps

Collaborators:
  - domain.repositories.UserRepository
  - domain.services.CredentialCodec

Constraints:
  - The insert is the only write; any failure before it leaves no trace
  - A storage unique violation is reported as ALREADY_EXISTS, not INTERNAL
"""

from dataclasses import dataclass
from uuid import uuid4

from ...domain.entities import (
    DEFAULT_ROLES,
    MIN_PASSWORD_LENGTH,
    UserRecord,
    normalize_identity,
    utc_now,
)
from ...domain.repositories import UserRepository
from ...domain.services import CredentialCodec
from ...exceptions import UniqueConstraintError
from ...logger import logger
from .user_results import (
    UserResult,
    already_exists,
    internal,
    invalid_argument,
    password_too_short,
)


@dataclass
class CreateUserInput:
    username: str
    email: str
    password: str
    first_name: str | None = None
    last_name: str | None = None


class CreateUserUseCase:
    """R: Create a user with a derived credential."""

    def __init__(self, repository: UserRepository, codec: CredentialCodec):
        self.repository = repository
        self.codec = codec

    async def execute(self, input_data: CreateUserInput) -> UserResult:
        username = normalize_identity(input_data.username)
        email = normalize_identity(input_data.email)
        if not username:
            return UserResult(error=invalid_argument("Username is required", "username"))
        if not email:
            return UserResult(error=invalid_argument("Email is required", "email"))

        try:
            existing = await self.repository.find_user_by_username_or_email(
                username, email
            )
            if existing:
                # R: Report the username collision when both collide
                field_name = "username" if existing.username == username else "email"
                return UserResult(error=already_exists(field_name))

            if len(input_data.password or "") < MIN_PASSWORD_LENGTH:
                return UserResult(error=password_too_short())

            credential_secret = await self.codec.derive(input_data.password)
            now = utc_now()
            record = UserRecord(
                id=uuid4(),
                username=username,
                email=email,
                credential_secret=credential_secret,
                roles=DEFAULT_ROLES,
                first_name=input_data.first_name,
                last_name=input_data.last_name,
                is_active=True,
                created_at=now,
                updated_at=now,
            )
            saved = await self.repository.create_user(record)
        except UniqueConstraintError as exc:
            logger.info(
                "User creation lost a uniqueness race", extra={"field": exc.field}
            )
            return UserResult(error=already_exists(exc.field))
        except Exception:
            logger.error("Error creating user", exc_info=True)
            return UserResult(error=internal("Failed to create user"))

        logger.info("User created", extra={"user_id": str(saved.id)})
        return UserResult(user=saved.to_user())
