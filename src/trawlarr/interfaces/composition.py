"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import AsyncIterator, cast

import structlog
from fastapi import FastAPI

from trawlarr.application.indexer_manager import IndexerManager
from trawlarr.infrastructure.cache.cache_factory import create_cache
from trawlarr.infrastructure.config.schema import AppConfig
from trawlarr.infrastructure.encryption import AesGcmEncryption
from trawlarr.infrastructure.indexers import IndexerFactory
from trawlarr.infrastructure.indexers.cardigann import DefinitionRegistry
from trawlarr.infrastructure.persistence import (
    InMemoryIndexerRepository,
    import_seed,
    read_seed_file,
)
from trawlarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def _resolve_encryption_key(config: AppConfig) -> str:
    if config.encryption_key:
        return config.encryption_key
    log.warning(
        "encryption_key_generated",
        hint="set TRAWLARR_ENCRYPTION_KEY to keep credentials readable across restarts",
    )
    return AesGcmEncryption.generate_key()


async def _purge_loop(manager: IndexerManager, interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        try:
            await manager.purge_expired_cache()
        except Exception:
            log.warning("search_cache_purge_failed", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. Cache (required by the manager)
        2. Encryption key + repository (+ optional seed import)
        3. Definition registry and backend factory
        4. Indexer manager, then autoload of the default user's indexers
        5. Background cache eviction
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Search result cache
    cache = create_cache(
        backend=config.cache.backend,
        directory=str(config.cache.directory),
        ttl_seconds=config.cache.search_ttl_seconds,
        max_concurrent=config.cache.max_concurrent,
    )
    await cache.__aenter__()
    state.cache = cache
    log.info("cache_initialized", backend=config.cache.backend)

    # 2) Credentials: key, repository, encryption service
    key = _resolve_encryption_key(config)
    state.encryption = AesGcmEncryption.from_base64_key(key)
    state.repository = InMemoryIndexerRepository(encryption_key=key)

    seed_file = config.indexers.seed_file
    if seed_file is not None:
        seed = read_seed_file(seed_file)
        await import_seed(
            seed,
            state.repository,
            state.encryption,
            default_user_id=config.indexers.default_user_id,
        )

    # 3) Definitions + factory
    state.definitions = DefinitionRegistry(config.indexers.definitions_dir)
    state.definitions.discover()

    state.factory = IndexerFactory(
        state.definitions,
        user_agent=config.http_user_agent,
        timeout=config.http_timeout_seconds,
    )

    # 4) Manager
    state.manager = IndexerManager(
        repository=state.repository,
        encryption=state.encryption,
        factory=state.factory,
        cache=state.cache,
        cache_ttl=config.cache.search_ttl_seconds,
        max_concurrent_searches=config.indexers.max_concurrent_searches,
    )
    if config.indexers.autoload:
        await state.manager.load_user_indexers(config.indexers.default_user_id)

    # 5) Cache eviction
    state._purge_task = None
    interval = config.cache.purge_interval_seconds
    if interval > 0 and config.cache.search_ttl_seconds > 0:
        state._purge_task = asyncio.create_task(_purge_loop(state.manager, interval))

    log.info("app_startup_complete", indexers=len(state.manager.loaded_ids))

    try:
        yield
    finally:
        if state._purge_task is not None:
            state._purge_task.cancel()
            with suppress(asyncio.CancelledError):
                await state._purge_task

        await state.manager.aclose()
        log.info("indexers_closed")

        await state.cache.aclose()
        log.info("cache_closed")

        log.info("app_shutdown_complete")
