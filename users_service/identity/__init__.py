"""Identity edge: credential codec and bearer-token guard"""

from .credentials import Argon2CredentialCodec, Argon2Parameters
from .auth import TokenPayload, require_service_token, verify_token

__all__ = [
    "Argon2CredentialCodec",
    "Argon2Parameters",
    "TokenPayload",
    "require_service_token",
    "verify_token",
]
