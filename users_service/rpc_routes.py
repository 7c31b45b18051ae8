"""
Name: UsersService RPC Controllers

Responsibilities:
  - Expose one POST endpoint per UsersService RPC method
  - Delegate business logic to UserRecordService (Clean Architecture)
  - Validate requests and serialize responses using Pydantic models
  - Translate UserError results into RFC 7807 errors

Collaborators:
  - application.UserRecordService: all user operations
  - container.get_user_record_service: dependency provider
  - identity.auth.require_service_token: bearer-token guard
  - error_responses: error factories

Constraints:
  - Every route requires a valid bearer token (router-level dependency)
  - Responses never include the credential secret

Notes:
  - This module stays thin (controllers only)
  - Paths follow /rpc/UsersService/<Method>
"""

from datetime import datetime
from typing import Callable
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from .application import UserRecordService
from .application.use_cases import (
    CreateUserInput,
    UpdateUserInput,
    UserError,
    UserErrorCode,
)
from .container import get_user_record_service
from .context import rpc_method_var
from .domain.entities import User
from .error_responses import (
    OPENAPI_ERROR_RESPONSES,
    already_exists,
    internal_error,
    invalid_argument,
    not_found,
)
from .identity.auth import require_service_token

router = APIRouter(
    prefix="/rpc/UsersService",
    tags=["users"],
    dependencies=[Depends(require_service_token())],
    responses=OPENAPI_ERROR_RESPONSES,
)


def rpc_method(name: str) -> Callable:
    """R: Dependency that tags the request context with the RPC method."""

    async def dependency(request: Request) -> None:
        rpc_method_var.set(name)
        # R: ContextVars set here do not reach the middleware; state does
        request.state.rpc_method = name

    return dependency


# -----------------------------------------------------------------------------
# Request / response models
# -----------------------------------------------------------------------------


class UserRes(BaseModel):
    id: UUID
    username: str
    email: str
    roles: list[str]
    first_name: str | None = None
    last_name: str | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserRes":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            roles=[role.value for role in user.roles],
            first_name=user.first_name,
            last_name=user.last_name,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class ValidateCredentialsReq(BaseModel):
    username: str
    password: str


class ValidateCredentialsRes(BaseModel):
    is_valid: bool
    user: UserRes | None = None


class FindOneReq(BaseModel):
    id: UUID


class FindByUsernameReq(BaseModel):
    username: str


class FindByEmailReq(BaseModel):
    email: str


class UsersListRes(BaseModel):
    users: list[UserRes]


class CreateUserReq(BaseModel):
    username: str = Field(..., max_length=255)
    email: str = Field(..., max_length=255)
    password: str
    first_name: str | None = Field(None, max_length=255)
    last_name: str | None = Field(None, max_length=255)


class UpdateUserReq(BaseModel):
    id: UUID
    username: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=255)
    password: str | None = None
    first_name: str | None = Field(None, max_length=255)
    last_name: str | None = Field(None, max_length=255)
    is_active: bool | None = None


class DeleteUserReq(BaseModel):
    id: UUID


class EmptyRes(BaseModel):
    pass


# -----------------------------------------------------------------------------
# Error translation
# -----------------------------------------------------------------------------


def _raise_user_error(error: UserError) -> None:
    """Translate a UserError (use case) to an RFC 7807 HTTP error."""
    if error.code == UserErrorCode.INVALID_ARGUMENT:
        errors = [{"field": error.field}] if error.field else None
        raise invalid_argument(error.message, errors)
    if error.code == UserErrorCode.ALREADY_EXISTS:
        raise already_exists(error.message)
    if error.code == UserErrorCode.NOT_FOUND:
        raise not_found(error.message)
    raise internal_error(error.message)


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.post(
    "/ValidateCredentials",
    response_model=ValidateCredentialsRes,
    dependencies=[Depends(rpc_method("ValidateCredentials"))],
)
async def validate_credentials(
    req: ValidateCredentialsReq,
    service: UserRecordService = Depends(get_user_record_service),
):
    result = await service.validate_credentials(req.username, req.password)
    if result.error:
        _raise_user_error(result.error)
    return ValidateCredentialsRes(
        is_valid=result.is_valid,
        user=UserRes.from_user(result.user) if result.user else None,
    )


@router.post(
    "/FindOne",
    response_model=UserRes,
    dependencies=[Depends(rpc_method("FindOne"))],
)
async def find_one(
    req: FindOneReq,
    service: UserRecordService = Depends(get_user_record_service),
):
    result = await service.find_one(req.id)
    if result.error:
        _raise_user_error(result.error)
    return UserRes.from_user(result.user)


@router.post(
    "/FindByUsername",
    response_model=UserRes,
    dependencies=[Depends(rpc_method("FindByUsername"))],
)
async def find_by_username(
    req: FindByUsernameReq,
    service: UserRecordService = Depends(get_user_record_service),
):
    result = await service.find_by_username(req.username)
    if result.error:
        _raise_user_error(result.error)
    return UserRes.from_user(result.user)


@router.post(
    "/FindByEmail",
    response_model=UserRes,
    dependencies=[Depends(rpc_method("FindByEmail"))],
)
async def find_by_email(
    req: FindByEmailReq,
    service: UserRecordService = Depends(get_user_record_service),
):
    result = await service.find_by_email(req.email)
    if result.error:
        _raise_user_error(result.error)
    return UserRes.from_user(result.user)


@router.post(
    "/FindAll",
    response_model=UsersListRes,
    dependencies=[Depends(rpc_method("FindAll"))],
)
async def find_all(
    service: UserRecordService = Depends(get_user_record_service),
):
    result = await service.find_all()
    if result.error:
        _raise_user_error(result.error)
    return UsersListRes(users=[UserRes.from_user(user) for user in result.users])


@router.post(
    "/Create",
    response_model=UserRes,
    dependencies=[Depends(rpc_method("Create"))],
)
async def create_user(
    req: CreateUserReq,
    service: UserRecordService = Depends(get_user_record_service),
):
    result = await service.create(
        CreateUserInput(
            username=req.username,
            email=req.email,
            password=req.password,
            first_name=req.first_name,
            last_name=req.last_name,
        )
    )
    if result.error:
        _raise_user_error(result.error)
    return UserRes.from_user(result.user)


@router.post(
    "/Update",
    response_model=UserRes,
    dependencies=[Depends(rpc_method("Update"))],
)
async def update_user(
    req: UpdateUserReq,
    service: UserRecordService = Depends(get_user_record_service),
):
    result = await service.update(
        req.id,
        UpdateUserInput(
            username=req.username,
            email=req.email,
            password=req.password,
            first_name=req.first_name,
            last_name=req.last_name,
            is_active=req.is_active,
        ),
    )
    if result.error:
        _raise_user_error(result.error)
    return UserRes.from_user(result.user)


@router.post(
    "/Delete",
    response_model=EmptyRes,
    dependencies=[Depends(rpc_method("Delete"))],
)
async def delete_user(
    req: DeleteUserReq,
    service: UserRecordService = Depends(get_user_record_service),
):
    result = await service.remove(req.id)
    if result.error:
        _raise_user_error(result.error)
    return EmptyRes()
