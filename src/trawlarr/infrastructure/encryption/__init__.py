from __future__ import annotations

from .aes_gcm import AesGcmEncryption

__all__ = ["AesGcmEncryption"]
