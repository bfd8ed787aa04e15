"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.datastructures import State

from trawlarr.infrastructure.config import AppConfig

if TYPE_CHECKING:
    import asyncio

    from trawlarr.application.indexer_manager import IndexerManager
    from trawlarr.domain.ports import (
        CachePort,
        EncryptionPort,
        IndexerFactoryPort,
        IndexerRepositoryPort,
    )
    from trawlarr.infrastructure.indexers.cardigann import DefinitionRegistry


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: CachePort
    encryption: EncryptionPort
    definitions: DefinitionRegistry

    # Domain Ports
    repository: IndexerRepositoryPort
    factory: IndexerFactoryPort

    # Application Services
    manager: IndexerManager

    # Background cache eviction
    _purge_task: asyncio.Task | None
