"""Import indexer configurations from a YAML seed file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from trawlarr.domain.entities import IndexerConfig, IndexerCredential, NewIndexerConfig
from trawlarr.domain.ports import EncryptionPort, IndexerRepositoryPort

log = structlog.get_logger(__name__)


class SeedError(Exception):
    """Raised when a seed file cannot be read or validated."""


class SeedIndexer(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    user_id: str | None = None
    enabled: bool = True
    priority: int = 50
    definition_id: str | None = None
    site_url: str | None = None
    credentials: dict[str, str] = Field(default_factory=dict)
    settings: dict[str, str] = Field(default_factory=dict)

    @field_validator("settings", "credentials", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Any:
        # YAML turns `freeleech: true` into a bool; settings are strings.
        if isinstance(v, dict):
            return {
                str(k): (str(val).lower() if isinstance(val, bool) else str(val))
                for k, val in v.items()
            }
        return v


class SeedFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    indexers: list[SeedIndexer] = Field(default_factory=list)


def read_seed_file(path: Path) -> SeedFile:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise SeedError(f"Cannot read seed file {path}: {e}") from e
    try:
        return SeedFile.model_validate(raw or {})
    except ValidationError as e:
        log.error("seed_validation_failed", path=str(path), errors=e.errors())
        raise SeedError(f"Invalid seed file {path}") from e


async def import_seed(
    seed: SeedFile,
    repository: IndexerRepositoryPort,
    encryption: EncryptionPort,
    *,
    default_user_id: str,
) -> list[IndexerConfig]:
    """Create each seeded indexer, encrypting its credentials on the way in."""
    created: list[IndexerConfig] = []
    for entry in seed.indexers:
        config = await repository.create(
            NewIndexerConfig(
                user_id=entry.user_id or default_user_id,
                indexer_type=entry.type,
                name=entry.name,
                enabled=entry.enabled,
                priority=entry.priority,
                definition_id=entry.definition_id,
                site_url=entry.site_url,
            )
        )
        for credential_type, value in entry.credentials.items():
            ciphertext, nonce = encryption.encrypt(value)
            await repository.upsert_credential(
                config.id,
                IndexerCredential(
                    credential_type=credential_type,
                    encrypted_value=ciphertext,
                    nonce=nonce,
                ),
            )
        for key, value in entry.settings.items():
            await repository.upsert_setting(config.id, key, value)
        created.append(config)

    log.info("seed_imported", indexers=len(created))
    return created
