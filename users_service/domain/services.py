"""
Name: Domain Service Interfaces

Responsibilities:
  - Define the credential codec contract used by the record service

Collaborators:
  - identity.credentials.Argon2CredentialCodec: implementation

Constraints:
  - Pure interfaces (Protocol), no implementation
  - Implementations never log plaintext or derived material
"""

from typing import Protocol


class CredentialCodec(Protocol):
    """
    R: Turns plaintext passwords into storable secrets and verifies them.
    """

    async def derive(self, plaintext: str) -> str:
        """
        R: Derive a storable secret from a plaintext password.

        Callers must reject passwords shorter than the minimum length
        before calling.
        """
        ...

    async def verify(self, stored_secret: str, supplied_plaintext: str) -> bool:
        """
        R: Check a plaintext against a stored secret.

        Returns False (never raises) for a mismatch or a malformed secret.
        """
        ...
