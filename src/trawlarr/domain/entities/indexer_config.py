"""Persisted indexer configuration records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class IndexerConfig:
    """A user's configured indexer instance.

    ``indexer_type`` selects the backend (e.g. ``iptorrents``, ``newznab``,
    ``cardigann``); ``definition_id`` names the YAML definition for the
    ``cardigann`` type.
    """

    id: str
    user_id: str
    indexer_type: str
    name: str
    enabled: bool = True
    priority: int = 50
    definition_id: str | None = None
    site_url: str | None = None

    last_error: str | None = None
    error_count: int = 0
    last_success_at: datetime | None = None
    last_error_at: datetime | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class IndexerCredential:
    """One encrypted credential (base64 ciphertext + nonce)."""

    credential_type: str
    encrypted_value: str
    nonce: str


@dataclass(frozen=True)
class IndexerSetting:
    setting_key: str
    setting_value: str


@dataclass(frozen=True)
class NewIndexerConfig:
    """Input for creating a configuration row."""

    user_id: str
    indexer_type: str
    name: str
    enabled: bool = True
    priority: int = 50
    definition_id: str | None = None
    site_url: str | None = None
