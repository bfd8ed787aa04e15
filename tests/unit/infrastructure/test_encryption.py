"""Tests for AES-256-GCM credential encryption."""

from __future__ import annotations

import base64

import pytest

from trawlarr.domain.ports import EncryptionError
from trawlarr.infrastructure.encryption import AesGcmEncryption


class TestAesGcmEncryption:
    def test_round_trip(self, encryption: AesGcmEncryption) -> None:
        ciphertext, nonce = encryption.encrypt("uid=1234; pass=abcdef")
        assert encryption.decrypt(ciphertext, nonce) == "uid=1234; pass=abcdef"

    def test_unicode(self, encryption: AesGcmEncryption) -> None:
        ciphertext, nonce = encryption.encrypt("pässwörd ✓")
        assert encryption.decrypt(ciphertext, nonce) == "pässwörd ✓"

    def test_fresh_nonce_per_call(self, encryption: AesGcmEncryption) -> None:
        a = encryption.encrypt("same")
        b = encryption.encrypt("same")
        assert a[1] != b[1]
        assert a[0] != b[0]
        assert len(base64.b64decode(a[1])) == 12

    def test_tampered_ciphertext(self, encryption: AesGcmEncryption) -> None:
        ciphertext, nonce = encryption.encrypt("secret")
        raw = bytearray(base64.b64decode(ciphertext))
        raw[0] ^= 0xFF
        with pytest.raises(EncryptionError, match="Decryption failed"):
            encryption.decrypt(base64.b64encode(bytes(raw)).decode(), nonce)

    def test_wrong_key(self, encryption: AesGcmEncryption) -> None:
        ciphertext, nonce = encryption.encrypt("secret")
        other = AesGcmEncryption.from_base64_key(AesGcmEncryption.generate_key())
        with pytest.raises(EncryptionError):
            other.decrypt(ciphertext, nonce)

    def test_bad_nonce_length(self, encryption: AesGcmEncryption) -> None:
        ciphertext, _ = encryption.encrypt("secret")
        short = base64.b64encode(b"123").decode()
        with pytest.raises(EncryptionError, match="Invalid nonce length"):
            encryption.decrypt(ciphertext, short)

    def test_invalid_base64(self, encryption: AesGcmEncryption) -> None:
        with pytest.raises(EncryptionError, match="Invalid encrypted data"):
            encryption.decrypt("!!!not base64!!!", "AAAAAAAAAAAAAAAA")

    def test_invalid_key(self) -> None:
        with pytest.raises(EncryptionError, match="Invalid base64 key"):
            AesGcmEncryption.from_base64_key("not a key!")

    def test_short_key_is_padded(self) -> None:
        key = base64.b64encode(b"short").decode()
        enc = AesGcmEncryption.from_base64_key(key)
        ciphertext, nonce = enc.encrypt("x")
        assert enc.decrypt(ciphertext, nonce) == "x"

    def test_generated_key_is_32_bytes(self) -> None:
        assert len(base64.b64decode(AesGcmEncryption.generate_key())) == 32

    def test_repr_redacts_key(self, encryption: AesGcmEncryption) -> None:
        assert "REDACTED" in repr(encryption)
