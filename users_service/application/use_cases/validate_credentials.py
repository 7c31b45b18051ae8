"""
Name: Validate Credentials Use Case

Responsibilities:
  - Check a username/password pair against the stored credential

Collaborators:
  - domain.repositories.UserRepository
  - domain.services.CredentialCodec

Constraints:
  - Unknown user, inactive user and wrong password all yield the same
    is_valid=False result (no username enumeration)
  - A mismatch is not an error; only store failures produce INTERNAL
  - The username is matched exactly as given
"""

from ...domain.repositories import UserRepository
from ...domain.services import CredentialCodec
from ...logger import logger
from .user_results import ValidateCredentialsResult, internal


class ValidateCredentialsUseCase:
    """R: Verify a password for a username."""

    def __init__(self, repository: UserRepository, codec: CredentialCodec):
        self.repository = repository
        self.codec = codec

    async def execute(self, username: str, password: str) -> ValidateCredentialsResult:
        try:
            record = await self.repository.get_user_by_username(username)
            if record is None or not record.is_active:
                return ValidateCredentialsResult(is_valid=False)

            matches = await self.codec.verify(record.credential_secret, password)
        except Exception:
            logger.error("Error validating credentials", exc_info=True)
            return ValidateCredentialsResult(
                is_valid=False, error=internal("Failed to validate credentials")
            )

        if not matches:
            return ValidateCredentialsResult(is_valid=False)
        return ValidateCredentialsResult(is_valid=True, user=record.to_user())
