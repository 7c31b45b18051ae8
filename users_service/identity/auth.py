"""
Name: Service Authentication (JWT bearer tokens)

Responsibilities:
  - Extract a bearer token from the Authorization header
  - Verify token signature, expiry and minimum claims
  - Expose a FastAPI dependency that guards the RPC surface
  - Mint tokens for trusted callers (tooling and tests)

Collaborators:
  - config.get_settings: secret, algorithm, TTL
  - error_responses.unauthorized: 401 UNAUTHENTICATED
  - logger: structured logging (never the token itself)

Constraints:
  - A call with a missing or invalid token never reaches the record service
  - Claims: sub (required), username, roles, iat, exp
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Sequence

import jwt
from fastapi import Header, Request

from ..config import get_settings
from ..error_responses import AppHTTPException, unauthorized
from ..logger import logger

CLAIM_SUB = "sub"
CLAIM_USERNAME = "username"
CLAIM_ROLES = "roles"
CLAIM_IAT = "iat"
CLAIM_EXP = "exp"


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """Auth settings (snapshot)."""

    jwt_secret: str
    jwt_algorithm: str
    jwt_access_ttl_minutes: int


@dataclass(frozen=True, slots=True)
class TokenPayload:
    """Verified claims of a service token."""

    subject: str
    username: str | None = None
    roles: tuple[str, ...] = field(default_factory=tuple)


def get_auth_settings() -> AuthSettings:
    s = get_settings()
    return AuthSettings(
        jwt_secret=s.jwt_secret,
        jwt_algorithm=s.jwt_algorithm,
        jwt_access_ttl_minutes=s.jwt_access_ttl_minutes,
    )


def create_access_token(
    subject: str,
    *,
    username: str | None = None,
    roles: Sequence[str] = (),
    settings: AuthSettings | None = None,
) -> tuple[str, int]:
    """
    R: Sign a bearer token.

    Returns:
        (token, expires_in_seconds)
    """
    auth_settings = settings or get_auth_settings()
    now = datetime.now(timezone.utc)
    expires_in = int(auth_settings.jwt_access_ttl_minutes * 60)

    payload: dict[str, object] = {
        CLAIM_SUB: subject,
        CLAIM_ROLES: list(roles),
        CLAIM_IAT: int(now.timestamp()),
        CLAIM_EXP: int((now + timedelta(seconds=expires_in)).timestamp()),
    }
    if username:
        payload[CLAIM_USERNAME] = username

    token = jwt.encode(
        payload, auth_settings.jwt_secret, algorithm=auth_settings.jwt_algorithm
    )
    return token, expires_in


def verify_token(token: str, settings: AuthSettings | None = None) -> TokenPayload:
    """
    R: Decode and validate a bearer token.

    Raises:
        AppHTTPException (401) if expired, badly signed or missing claims
    """
    auth_settings = settings or get_auth_settings()

    try:
        payload = jwt.decode(
            token,
            auth_settings.jwt_secret,
            algorithms=[auth_settings.jwt_algorithm],
            options={"require": [CLAIM_SUB]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise unauthorized("Token expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise unauthorized("Invalid token.") from exc

    subject = payload.get(CLAIM_SUB)
    if not subject:
        raise unauthorized("Invalid token.")

    roles = payload.get(CLAIM_ROLES) or ()
    if isinstance(roles, str):
        roles = (roles,)

    return TokenPayload(
        subject=str(subject),
        username=payload.get(CLAIM_USERNAME),
        roles=tuple(str(role) for role in roles),
    )


def extract_bearer_token(authorization: str | None) -> str | None:
    """Extract token from `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def require_service_token() -> Callable:
    """FastAPI dependency: requires a valid bearer token."""

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> TokenPayload:
        token = extract_bearer_token(authorization)
        if not token:
            logger.warning("Rejected call without bearer token")
            raise unauthorized("Missing bearer token.")

        try:
            principal = verify_token(token)
        except AppHTTPException:
            logger.warning("Rejected call with invalid bearer token")
            raise

        request.state.principal = principal
        return principal

    return dependency
