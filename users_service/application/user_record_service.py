"""
Name: User Record Service

Responsibilities:
  - Expose the user CRUD and credential operations as one object
  - Build every use case from a single repository and codec

Collaborators:
  - application.use_cases: one use case per operation
  - container.py: constructs the singleton instance
  - rpc_routes.py: calls it for every RPC method

Notes:
  - Stateless between calls; all state lives in the repository
"""

from uuid import UUID

from ..domain.repositories import UserRepository
from ..domain.services import CredentialCodec
from .use_cases import (
    CreateUserInput,
    CreateUserUseCase,
    DeleteUserResult,
    DeleteUserUseCase,
    GetUserByEmailUseCase,
    GetUserByUsernameUseCase,
    GetUserUseCase,
    ListUsersResult,
    ListUsersUseCase,
    UpdateUserInput,
    UpdateUserUseCase,
    UserResult,
    ValidateCredentialsResult,
    ValidateCredentialsUseCase,
)


class UserRecordService:
    """R: Facade over the user use cases."""

    def __init__(self, repository: UserRepository, codec: CredentialCodec):
        self.repository = repository
        self.codec = codec
        self._create = CreateUserUseCase(repository, codec)
        self._find_one = GetUserUseCase(repository)
        self._find_by_username = GetUserByUsernameUseCase(repository)
        self._find_by_email = GetUserByEmailUseCase(repository)
        self._find_all = ListUsersUseCase(repository)
        self._update = UpdateUserUseCase(repository, codec)
        self._remove = DeleteUserUseCase(repository)
        self._validate = ValidateCredentialsUseCase(repository, codec)

    async def create(self, input_data: CreateUserInput) -> UserResult:
        return await self._create.execute(input_data)

    async def find_one(self, user_id: UUID) -> UserResult:
        return await self._find_one.execute(user_id)

    async def find_by_username(self, username: str) -> UserResult:
        return await self._find_by_username.execute(username)

    async def find_by_email(self, email: str) -> UserResult:
        return await self._find_by_email.execute(email)

    async def find_all(self) -> ListUsersResult:
        return await self._find_all.execute()

    async def update(self, user_id: UUID, input_data: UpdateUserInput) -> UserResult:
        return await self._update.execute(user_id, input_data)

    async def remove(self, user_id: UUID) -> DeleteUserResult:
        return await self._remove.execute(user_id)

    async def validate_credentials(
        self, username: str, password: str
    ) -> ValidateCredentialsResult:
        return await self._validate.execute(username, password)
