"""Application use cases"""

from .create_user import CreateUserInput, CreateUserUseCase
from .delete_user import DeleteUserUseCase
from .get_user import (
    GetUserByEmailUseCase,
    GetUserByUsernameUseCase,
    GetUserUseCase,
    load_active_user,
)
from .list_users import ListUsersUseCase
from .update_user import UpdateUserInput, UpdateUserUseCase
from .user_results import (
    DeleteUserResult,
    ListUsersResult,
    UserError,
    UserErrorCode,
    UserResult,
    ValidateCredentialsResult,
    internal,
)
from .validate_credentials import ValidateCredentialsUseCase

__all__ = [
    "CreateUserInput",
    "CreateUserUseCase",
    "DeleteUserUseCase",
    "GetUserByEmailUseCase",
    "GetUserByUsernameUseCase",
    "GetUserUseCase",
    "load_active_user",
    "ListUsersUseCase",
    "UpdateUserInput",
    "UpdateUserUseCase",
    "DeleteUserResult",
    "ListUsersResult",
    "UserError",
    "UserErrorCode",
    "UserResult",
    "ValidateCredentialsResult",
    "internal",
    "ValidateCredentialsUseCase",
]
