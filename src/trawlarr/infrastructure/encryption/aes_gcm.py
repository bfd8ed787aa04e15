"""AES-256-GCM credential encryption."""

from __future__ import annotations

import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from trawlarr.domain.ports.encryption import EncryptionError

KEY_SIZE = 32
NONCE_SIZE = 12


def _b64decode(value: str, what: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncryptionError(f"Invalid {what}: {e}") from e


class AesGcmEncryption:
    """Encrypts credential values with a fresh random nonce per call.

    Keys shorter than 32 bytes are zero-padded; longer ones are truncated.
    """

    def __init__(self, key: bytes) -> None:
        key_bytes = key[:KEY_SIZE].ljust(KEY_SIZE, b"\0")
        self._cipher = AESGCM(key_bytes)

    def __repr__(self) -> str:
        return "AesGcmEncryption(key=[REDACTED])"

    @classmethod
    def from_base64_key(cls, key_b64: str) -> AesGcmEncryption:
        return cls(_b64decode(key_b64, "base64 key"))

    @staticmethod
    def generate_key() -> str:
        return base64.b64encode(AESGCM.generate_key(bit_length=256)).decode("ascii")

    def encrypt(self, plaintext: str) -> tuple[str, str]:
        nonce = os.urandom(NONCE_SIZE)
        ciphertext = self._cipher.encrypt(nonce, plaintext.encode("utf-8"), None)
        return (
            base64.b64encode(ciphertext).decode("ascii"),
            base64.b64encode(nonce).decode("ascii"),
        )

    def decrypt(self, ciphertext: str, nonce: str) -> str:
        data = _b64decode(ciphertext, "encrypted data")
        nonce_bytes = _b64decode(nonce, "nonce")
        if len(nonce_bytes) != NONCE_SIZE:
            raise EncryptionError(
                f"Invalid nonce length: expected {NONCE_SIZE}, got {len(nonce_bytes)}"
            )
        try:
            plaintext = self._cipher.decrypt(nonce_bytes, data, None)
        except InvalidTag as e:
            raise EncryptionError("Decryption failed") from e
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncryptionError("Invalid UTF-8 in decrypted data") from e
