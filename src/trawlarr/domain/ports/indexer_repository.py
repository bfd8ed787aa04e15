"""Port for persisted indexer configurations, credentials and settings."""

from __future__ import annotations

from typing import Protocol

from trawlarr.domain.entities import (
    IndexerConfig,
    IndexerCredential,
    IndexerSetting,
    NewIndexerConfig,
)


class RepositoryError(Exception):
    """Raised when the backing store cannot serve a request."""


class IndexerRepositoryPort(Protocol):
    """Persistence collaborator for indexer configuration.

    Credentials are stored encrypted; callers decrypt them with the key
    returned by ``get_encryption_key``.
    """

    async def get(self, config_id: str) -> IndexerConfig | None: ...

    async def list_by_user(self, user_id: str) -> list[IndexerConfig]: ...

    async def list_enabled_by_user(self, user_id: str) -> list[IndexerConfig]: ...

    async def create(self, new_config: NewIndexerConfig) -> IndexerConfig: ...

    async def delete(self, config_id: str) -> bool: ...

    async def get_credentials(self, config_id: str) -> list[IndexerCredential]: ...

    async def upsert_credential(
        self, config_id: str, credential: IndexerCredential
    ) -> None: ...

    async def get_settings(self, config_id: str) -> list[IndexerSetting]: ...

    async def upsert_setting(self, config_id: str, key: str, value: str) -> None: ...

    async def record_success(self, config_id: str) -> None: ...

    async def record_error(self, config_id: str, message: str) -> None: ...

    async def get_encryption_key(self) -> str:
        """Base64 key used to encrypt credentials."""
        ...
