"""Port for symmetric credential encryption."""

from __future__ import annotations

from typing import Protocol


class EncryptionError(Exception):
    """Raised for bad keys, corrupt ciphertext or authentication failures."""


class EncryptionPort(Protocol):
    """Encrypts/decrypts credential values.

    Ciphertext and nonce travel as base64 strings.
    """

    def encrypt(self, plaintext: str) -> tuple[str, str]:
        """Return ``(ciphertext, nonce)``."""
        ...

    def decrypt(self, ciphertext: str, nonce: str) -> str: ...
