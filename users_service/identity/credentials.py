"""
Name: Credential Codec (Argon2id)

Responsibilities:
  - Derive a storable secret from a plaintext password
  - Verify a supplied plaintext against a stored secret
  - Keep the KDF off the event loop

Collaborators:
  - argon2.low_level: raw Argon2id key derivation
  - config.get_settings: KDF cost parameters
  - domain.services.CredentialCodec: contract implemented here

Constraints:
  - Stored format: hex(salt) + ":" + hex(derived_key)
  - 32-byte random salt per secret, 64-byte derived key
  - Malformed stored secrets are a non-match, never an exception
  - Never log plaintext or derived material

Notes:
  - Cryptography lives at the identity edge, not in the domain
  - Comparison uses hmac.compare_digest (constant time)
"""

import asyncio
import hmac
import secrets
from dataclasses import dataclass
from typing import Optional, Tuple

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw

from ..config import get_settings

SALT_LENGTH = 32
KEY_LENGTH = 64
SECRET_DELIMITER = ":"


@dataclass(frozen=True, slots=True)
class Argon2Parameters:
    """R: Argon2id cost parameters (must match between derive and verify)."""

    time_cost: int = 3
    memory_cost: int = 65536
    parallelism: int = 4

    @classmethod
    def from_settings(cls) -> "Argon2Parameters":
        s = get_settings()
        return cls(
            time_cost=s.argon2_time_cost,
            memory_cost=s.argon2_memory_cost,
            parallelism=s.argon2_parallelism,
        )


def _encode_plaintext(plaintext: str) -> bytes:
    """R: UTF-8 bytes of a password; lone surrogates become U+FFFD."""
    try:
        return plaintext.encode("utf-8")
    except UnicodeEncodeError:
        # R: Round-trip through UTF-16 so surrogate pairs survive and strays are replaced
        repaired = plaintext.encode("utf-16-le", "surrogatepass").decode(
            "utf-16-le", "replace"
        )
        return repaired.encode("utf-8")


def _split_secret(stored_secret: str) -> Optional[Tuple[bytes, bytes]]:
    """R: Recover (salt, key) from a stored secret, or None if malformed."""
    if not isinstance(stored_secret, str):
        return None
    salt_hex, delimiter, key_hex = stored_secret.partition(SECRET_DELIMITER)
    if not delimiter or not salt_hex or not key_hex:
        return None
    try:
        salt = bytes.fromhex(salt_hex)
        key = bytes.fromhex(key_hex)
    except ValueError:
        return None
    if len(key) != KEY_LENGTH:
        return None
    return salt, key


class Argon2CredentialCodec:
    """
    R: Memory-hard password codec.

    derive()/verify() are coroutines that run the KDF in a worker thread;
    derive_sync()/verify_sync() are the blocking primitives.
    """

    def __init__(self, parameters: Argon2Parameters | None = None):
        self.parameters = parameters or Argon2Parameters.from_settings()

    def _derive_key(self, plaintext: str, salt: bytes) -> bytes:
        return hash_secret_raw(
            secret=_encode_plaintext(plaintext),
            salt=salt,
            time_cost=self.parameters.time_cost,
            memory_cost=self.parameters.memory_cost,
            parallelism=self.parameters.parallelism,
            hash_len=KEY_LENGTH,
            type=Type.ID,
        )

    def derive_sync(self, plaintext: str) -> str:
        salt = secrets.token_bytes(SALT_LENGTH)
        key = self._derive_key(plaintext, salt)
        return f"{salt.hex()}{SECRET_DELIMITER}{key.hex()}"

    def verify_sync(self, stored_secret: str, supplied_plaintext: str) -> bool:
        parts = _split_secret(stored_secret)
        if parts is None:
            return False
        salt, expected_key = parts
        try:
            candidate = self._derive_key(supplied_plaintext, salt)
        except (HashingError, UnicodeError):
            # R: e.g. a salt shorter than Argon2 accepts
            return False
        return hmac.compare_digest(candidate, expected_key)

    async def derive(self, plaintext: str) -> str:
        return await asyncio.to_thread(self.derive_sync, plaintext)

    async def verify(self, stored_secret: str, supplied_plaintext: str) -> bool:
        return await asyncio.to_thread(
            self.verify_sync, stored_secret, supplied_plaintext
        )
