"""Process-local indexer configuration store."""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timezone

import structlog

from trawlarr.domain.entities import (
    IndexerConfig,
    IndexerCredential,
    IndexerSetting,
    NewIndexerConfig,
)

log = structlog.get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryIndexerRepository:
    """Dict-backed repository.

    Listings are ordered by priority (highest first), then name, like the
    SQL store this stands in for. Credentials and settings are upserted by
    type/key; deleting a config drops both.
    """

    def __init__(self, encryption_key: str) -> None:
        self._encryption_key = encryption_key
        self._configs: dict[str, IndexerConfig] = {}
        self._credentials: dict[str, dict[str, IndexerCredential]] = {}
        self._settings: dict[str, dict[str, str]] = {}

    async def get(self, config_id: str) -> IndexerConfig | None:
        return self._configs.get(config_id)

    async def list_by_user(self, user_id: str) -> list[IndexerConfig]:
        configs = [c for c in self._configs.values() if c.user_id == user_id]
        return sorted(configs, key=lambda c: (-c.priority, c.name))

    async def list_enabled_by_user(self, user_id: str) -> list[IndexerConfig]:
        return [c for c in await self.list_by_user(user_id) if c.enabled]

    async def create(self, new_config: NewIndexerConfig) -> IndexerConfig:
        config = IndexerConfig(
            id=str(uuid.uuid4()),
            user_id=new_config.user_id,
            indexer_type=new_config.indexer_type,
            name=new_config.name,
            enabled=new_config.enabled,
            priority=new_config.priority,
            definition_id=new_config.definition_id,
            site_url=new_config.site_url,
            created_at=_now(),
        )
        self._configs[config.id] = config
        log.info(
            "indexer_config_created",
            indexer_id=config.id,
            indexer_type=config.indexer_type,
            indexer_name=config.name,
        )
        return config

    async def delete(self, config_id: str) -> bool:
        self._credentials.pop(config_id, None)
        self._settings.pop(config_id, None)
        return self._configs.pop(config_id, None) is not None

    async def get_credentials(self, config_id: str) -> list[IndexerCredential]:
        return list(self._credentials.get(config_id, {}).values())

    async def upsert_credential(
        self, config_id: str, credential: IndexerCredential
    ) -> None:
        self._credentials.setdefault(config_id, {})[
            credential.credential_type
        ] = credential

    async def get_settings(self, config_id: str) -> list[IndexerSetting]:
        return [
            IndexerSetting(setting_key=k, setting_value=v)
            for k, v in self._settings.get(config_id, {}).items()
        ]

    async def upsert_setting(self, config_id: str, key: str, value: str) -> None:
        self._settings.setdefault(config_id, {})[key] = value

    async def record_success(self, config_id: str) -> None:
        config = self._configs.get(config_id)
        if config is None:
            return
        self._configs[config_id] = replace(
            config, error_count=0, last_error=None, last_success_at=_now()
        )

    async def record_error(self, config_id: str, message: str) -> None:
        config = self._configs.get(config_id)
        if config is None:
            return
        self._configs[config_id] = replace(
            config,
            error_count=config.error_count + 1,
            last_error=message,
            last_error_at=_now(),
        )

    async def get_encryption_key(self) -> str:
        return self._encryption_key
