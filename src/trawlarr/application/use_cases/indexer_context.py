"""Load a configured indexer's config, credentials and settings for one request."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from trawlarr.domain.entities import (
    IndexerConfig,
    TorznabBadRequestError,
    TorznabInternalError,
)
from trawlarr.domain.ports import EncryptionError, EncryptionPort, IndexerRepositoryPort

log = structlog.get_logger(__name__)

EncryptionFactory = Callable[[str], EncryptionPort]


@dataclass(frozen=True)
class IndexerContext:
    config: IndexerConfig
    credentials: dict[str, str] = field(default_factory=dict)
    settings: dict[str, str] = field(default_factory=dict)


class LoadIndexerContextUseCase:
    """Resolves everything needed to build a backend for one Torznab request.

    Failures map onto Torznab errors:
        - malformed id / unknown config -> 201
        - persistence or encryption key problems -> 900
    Undecryptable credentials are skipped (treated as missing).
    """

    def __init__(
        self,
        repository: IndexerRepositoryPort,
        encryption_factory: EncryptionFactory,
    ) -> None:
        self.repository = repository
        self.encryption_factory = encryption_factory

    async def execute(self, config_id: str) -> IndexerContext:
        try:
            uuid.UUID(config_id)
        except ValueError as e:
            raise TorznabBadRequestError("Invalid indexer ID") from e

        try:
            config = await self.repository.get(config_id)
        except Exception as e:
            raise TorznabInternalError(f"Database error: {e}") from e
        if config is None:
            raise TorznabBadRequestError("Indexer not found")

        try:
            stored_credentials = await self.repository.get_credentials(config_id)
        except Exception as e:
            raise TorznabInternalError(f"Failed to get credentials: {e}") from e

        try:
            stored_settings = await self.repository.get_settings(config_id)
        except Exception:
            log.warning("indexer_settings_unavailable", indexer_id=config_id, exc_info=True)
            stored_settings = []

        try:
            key = await self.repository.get_encryption_key()
        except Exception as e:
            raise TorznabInternalError("Failed to get encryption key") from e

        try:
            encryption = self.encryption_factory(key)
        except EncryptionError as e:
            raise TorznabInternalError("Encryption error") from e

        credentials: dict[str, str] = {}
        for credential in stored_credentials:
            try:
                credentials[credential.credential_type] = encryption.decrypt(
                    credential.encrypted_value, credential.nonce
                )
            except EncryptionError:
                log.warning(
                    "credential_decrypt_skipped",
                    indexer_id=config_id,
                    credential_type=credential.credential_type,
                )

        return IndexerContext(
            config=config,
            credentials=credentials,
            settings={s.setting_key: s.setting_value for s in stored_settings},
        )
