"""
Name: Bearer Token Guard Tests

Responsibilities:
  - Token creation/verification round trip (sub, username, roles)
  - Rejection of missing, malformed, expired and badly signed tokens
"""

from unittest.mock import MagicMock

import jwt
import pytest

from users_service.error_responses import AppHTTPException, ErrorCode
from users_service.identity.auth import (
    AuthSettings,
    create_access_token,
    extract_bearer_token,
    require_service_token,
    verify_token,
)


pytestmark = pytest.mark.unit

SETTINGS = AuthSettings(
    jwt_secret="auth-test-secret-0123456789abcdef0123456789",
    jwt_algorithm="HS256",
    jwt_access_ttl_minutes=5,
)


def test_token_round_trip():
    token, expires_in = create_access_token(
        "gateway", username="gateway-svc", roles=["ADMIN"], settings=SETTINGS
    )

    payload = verify_token(token, settings=SETTINGS)

    assert expires_in == 300
    assert payload.subject == "gateway"
    assert payload.username == "gateway-svc"
    assert payload.roles == ("ADMIN",)


def test_expired_token_rejected():
    expired = AuthSettings(
        jwt_secret=SETTINGS.jwt_secret,
        jwt_algorithm="HS256",
        jwt_access_ttl_minutes=-1,
    )
    token, _ = create_access_token("gateway", settings=expired)

    with pytest.raises(AppHTTPException) as exc_info:
        verify_token(token, settings=SETTINGS)

    assert exc_info.value.status_code == 401
    assert exc_info.value.code == ErrorCode.UNAUTHENTICATED
    assert exc_info.value.detail == "Token expired."


def test_wrong_signature_rejected():
    token = jwt.encode(
        {"sub": "gateway"}, "another-secret-0123456789abcdef012345", algorithm="HS256"
    )

    with pytest.raises(AppHTTPException) as exc_info:
        verify_token(token, settings=SETTINGS)

    assert exc_info.value.detail == "Invalid token."


def test_token_without_subject_rejected():
    token = jwt.encode({"username": "x"}, SETTINGS.jwt_secret, algorithm="HS256")

    with pytest.raises(AppHTTPException):
        verify_token(token, settings=SETTINGS)


def test_token_without_exp_accepted():
    token = jwt.encode({"sub": "gateway"}, SETTINGS.jwt_secret, algorithm="HS256")

    assert verify_token(token, settings=SETTINGS).subject == "gateway"


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        (None, None),
        ("", None),
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("Bearer   ", None),
        ("Basic abc", None),
        ("abc", None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


class TestRequireServiceToken:
    @pytest.mark.asyncio
    async def test_missing_header_raises_401(self):
        dependency = require_service_token()

        with pytest.raises(AppHTTPException) as exc_info:
            await dependency(MagicMock(), None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    @pytest.mark.asyncio
    async def test_invalid_token_raises_401(self):
        dependency = require_service_token()

        with pytest.raises(AppHTTPException):
            await dependency(MagicMock(), "Bearer not-a-jwt")

    @pytest.mark.asyncio
    async def test_valid_token_sets_principal(self):
        token, _ = create_access_token("gateway", roles=["USER"])
        request = MagicMock()

        principal = await require_service_token()(request, f"Bearer {token}")

        assert principal.subject == "gateway"
        assert request.state.principal == principal
