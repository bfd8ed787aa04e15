"""Indexer manager: loads backends, caches searches and fans queries out."""

from __future__ import annotations

import asyncio
import time
import uuid
from collections.abc import Iterable
from dataclasses import replace

import structlog

from trawlarr.domain.entities import IndexerSearchResult, ReleaseInfo, TorznabQuery
from trawlarr.domain.indexers import (
    IndexerConfigNotFoundError,
    IndexerError,
    IndexerNotLoadedError,
    IndexerProtocol,
    InvalidIndexerIdError,
)
from trawlarr.domain.ports import (
    CachePort,
    EncryptionPort,
    IndexerFactoryPort,
    IndexerRepositoryPort,
)

log = structlog.get_logger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 300
MAX_CONCURRENT_SEARCHES = 2

_Target = tuple[str, IndexerProtocol, asyncio.Semaphore]


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class IndexerManager:
    """Registry of loaded indexer backends plus the search fan-out.

    - One semaphore per loaded indexer bounds concurrent requests to that
      site (no global cap across indexers).
    - Search results are cached per ``"{indexer_id}:{query.cache_key()}"``
      when the query allows caching.
    - A failing backend yields an error entry; it never aborts siblings.

    Registry writes (load/unload) are serialized by a lock; readers take a
    snapshot of the registry before dispatching, so no lock is held across
    a backend call.
    """

    def __init__(
        self,
        *,
        repository: IndexerRepositoryPort,
        encryption: EncryptionPort,
        factory: IndexerFactoryPort,
        cache: CachePort,
        cache_ttl: int = DEFAULT_CACHE_TTL_SECONDS,
        max_concurrent_searches: int = MAX_CONCURRENT_SEARCHES,
    ) -> None:
        self._repository = repository
        self._encryption = encryption
        self._factory = factory
        self._cache = cache
        self._cache_ttl = cache_ttl
        self._max_concurrent = max_concurrent_searches

        self._indexers: dict[str, IndexerProtocol] = {}
        self._limiters: dict[str, asyncio.Semaphore] = {}
        self._registry_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_user_indexers(self, user_id: str) -> list[str]:
        """Load every enabled indexer of a user, skipping the ones that fail."""
        configs = await self._repository.list_enabled_by_user(user_id)
        loaded: list[str] = []
        for config in configs:
            try:
                await self.load_indexer(config.id)
            except Exception as exc:  # noqa: BLE001
                log.warning(
                    "indexer_load_failed",
                    indexer_id=config.id,
                    indexer_name=config.name,
                    indexer_type=config.indexer_type,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                continue
            loaded.append(config.id)

        log.info(
            "user_indexers_loaded",
            user_id=user_id,
            loaded=len(loaded),
            configured=len(configs),
        )
        return loaded

    async def load_indexer(self, config_id: str) -> IndexerProtocol:
        """Build and register the backend for one configuration.

        Raises:
            IndexerConfigNotFoundError: No configuration row exists.
            EncryptionError: A credential could not be decrypted.
            UnknownIndexerTypeError: No backend implements the type.
            MissingCredentialError: A required credential is absent.
        """
        config = await self._repository.get(config_id)
        if config is None:
            raise IndexerConfigNotFoundError(config_id)

        credentials: dict[str, str] = {}
        for credential in await self._repository.get_credentials(config_id):
            credentials[credential.credential_type] = self._encryption.decrypt(
                credential.encrypted_value, credential.nonce
            )

        settings = {
            s.setting_key: s.setting_value
            for s in await self._repository.get_settings(config_id)
        }

        backend = self._factory.create(config, credentials, settings, strict=True)

        async with self._registry_lock:
            previous = self._indexers.get(config_id)
            self._indexers[config_id] = backend
            self._limiters[config_id] = asyncio.Semaphore(self._max_concurrent)

        if previous is not None and previous is not backend:
            await previous.aclose()

        log.info(
            "indexer_loaded",
            indexer_id=config_id,
            indexer_name=config.name,
            indexer_type=config.indexer_type,
            configured=backend.is_configured(),
        )
        return backend

    async def unload_indexer(self, config_id: str) -> bool:
        async with self._registry_lock:
            backend = self._indexers.pop(config_id, None)
            self._limiters.pop(config_id, None)

        if backend is None:
            return False

        await backend.aclose()
        log.info("indexer_unloaded", indexer_id=config_id, indexer_name=backend.name)
        return True

    # ------------------------------------------------------------------
    # Registry access
    # ------------------------------------------------------------------

    def get_indexer(self, config_id: str) -> IndexerProtocol | None:
        return self._indexers.get(config_id)

    def list_indexers(self) -> list[tuple[str, IndexerProtocol]]:
        return list(self._indexers.items())

    def is_loaded(self, config_id: str) -> bool:
        return config_id in self._indexers

    @property
    def loaded_ids(self) -> list[str]:
        return list(self._indexers)

    def _require(self, config_id: str) -> IndexerProtocol:
        backend = self._indexers.get(config_id)
        if backend is None:
            raise IndexerNotLoadedError(config_id)
        return backend

    # ------------------------------------------------------------------
    # Searching
    # ------------------------------------------------------------------

    async def search_all(self, query: TorznabQuery) -> list[IndexerSearchResult]:
        """Search every loaded backend able to handle ``query``."""
        return await self._fan_out(self._snapshot(query), query)

    async def search_indexers(
        self, ids: Iterable[str], query: TorznabQuery
    ) -> list[IndexerSearchResult]:
        """Search the given indexers (those loaded and able to handle ``query``)."""
        wanted = set(ids)
        targets = [t for t in self._snapshot(query) if t[0] in wanted]
        return await self._fan_out(targets, query)

    def _snapshot(self, query: TorznabQuery) -> list[_Target]:
        targets: list[_Target] = []
        for config_id, backend in list(self._indexers.items()):
            limiter = self._limiters.get(config_id)
            if limiter is None or not backend.can_handle_query(query):
                continue
            targets.append((config_id, backend, limiter))
        return targets

    async def _fan_out(
        self, targets: list[_Target], query: TorznabQuery
    ) -> list[IndexerSearchResult]:
        if not targets:
            log.info("search_no_capable_indexers", query_type=query.query_type.value)
            return []

        start = time.perf_counter()
        outcomes = await asyncio.gather(
            *(
                self._search_single(config_id, backend, query, limiter)
                for config_id, backend, limiter in targets
            ),
            return_exceptions=True,
        )

        results: list[IndexerSearchResult] = []
        for (config_id, backend, _), outcome in zip(targets, outcomes):
            if isinstance(outcome, BaseException):
                log.error(
                    "indexer_search_task_crashed",
                    indexer_id=config_id,
                    indexer_name=backend.name,
                    error=repr(outcome),
                )
                results.append(
                    IndexerSearchResult(
                        indexer_id=config_id,
                        indexer_name=backend.name,
                        error=f"Search task failed: {outcome!r}",
                    )
                )
            else:
                results.append(outcome)

        log.info(
            "search_fan_out_complete",
            query_type=query.query_type.value,
            indexers=len(results),
            failed=sum(1 for r in results if not r.succeeded),
            releases=sum(len(r.releases) for r in results),
            duration_ms=_elapsed_ms(start),
        )
        return results

    async def _search_single(
        self,
        config_id: str,
        backend: IndexerProtocol,
        query: TorznabQuery,
        limiter: asyncio.Semaphore,
    ) -> IndexerSearchResult:
        cache_key = f"{config_id}:{query.cache_key()}" if query.cache else None

        if cache_key is not None:
            cached = await self._cache_read(cache_key, config_id)
            if cached is not None:
                return IndexerSearchResult(
                    indexer_id=config_id,
                    indexer_name=backend.name,
                    releases=cached,
                    elapsed_ms=0,
                    from_cache=True,
                )

        start = time.perf_counter()
        try:
            async with limiter:
                releases = await backend.search(query)
        except Exception as exc:  # noqa: BLE001
            log.warning(
                "indexer_search_failed",
                indexer_id=config_id,
                indexer_name=backend.name,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return IndexerSearchResult(
                indexer_id=config_id,
                indexer_name=backend.name,
                elapsed_ms=_elapsed_ms(start),
                error=str(exc) or type(exc).__name__,
            )

        stamped = [
            replace(r, indexer_id=config_id, indexer_name=backend.name)
            for r in releases
        ]
        elapsed = _elapsed_ms(start)
        log.debug(
            "indexer_search_complete",
            indexer_id=config_id,
            indexer_name=backend.name,
            releases=len(stamped),
            elapsed_ms=elapsed,
        )

        if cache_key is not None:
            await self._cache_write(cache_key, stamped)

        return IndexerSearchResult(
            indexer_id=config_id,
            indexer_name=backend.name,
            releases=stamped,
            elapsed_ms=elapsed,
            from_cache=False,
        )

    async def _cache_read(self, cache_key: str, config_id: str) -> list[ReleaseInfo] | None:
        """Returns None on miss, expiry or cache error."""
        if self._cache_ttl <= 0:
            return None
        try:
            cached = await self._cache.get(cache_key)
        except Exception:
            log.warning("search_cache_read_error", cache_key=cache_key, exc_info=True)
            return None
        if cached is not None:
            log.info(
                "search_cache_hit",
                indexer_id=config_id,
                cache_key=cache_key,
                result_count=len(cached),
            )
        return cached

    async def _cache_write(self, cache_key: str, releases: list[ReleaseInfo]) -> None:
        if self._cache_ttl <= 0:
            return
        try:
            await self._cache.set(cache_key, releases, ttl=self._cache_ttl)
        except Exception:
            log.warning("search_cache_store_error", cache_key=cache_key, exc_info=True)
            return
        log.debug(
            "search_cache_stored",
            cache_key=cache_key,
            ttl=self._cache_ttl,
            result_count=len(releases),
        )

    async def purge_expired_cache(self) -> int:
        removed = await self._cache.purge_expired()
        if removed:
            log.debug("search_cache_purged", removed=removed)
        return removed

    # ------------------------------------------------------------------
    # Downloads and connection tests
    # ------------------------------------------------------------------

    async def download_torrent(self, indexer_id: str, link: str) -> bytes:
        """Download ``link`` through the originating backend's session."""
        try:
            uuid.UUID(indexer_id)
        except ValueError as exc:
            raise InvalidIndexerIdError(indexer_id) from exc

        backend = self._require(indexer_id)
        limiter = self._limiters.get(indexer_id) or asyncio.Semaphore(self._max_concurrent)
        async with limiter:
            payload = await backend.download(link)

        log.info(
            "indexer_download_complete",
            indexer_id=indexer_id,
            indexer_name=backend.name,
            size_bytes=len(payload),
        )
        return payload

    async def download_release(self, release: ReleaseInfo) -> bytes:
        if not release.indexer_id:
            raise IndexerError("Release has no indexer_id")
        if not release.link:
            raise IndexerError("Release has no download link")
        return await self.download_torrent(release.indexer_id, release.link)

    async def test_indexer(self, config_id: str) -> bool:
        backend = self._require(config_id)
        ok = await backend.test_connection()
        log.info(
            "indexer_tested",
            indexer_id=config_id,
            indexer_name=backend.name,
            ok=ok,
        )
        return ok

    async def aclose(self) -> None:
        """Unload everything, closing each backend's HTTP session."""
        async with self._registry_lock:
            backends = list(self._indexers.values())
            self._indexers.clear()
            self._limiters.clear()
        for backend in backends:
            try:
                await backend.aclose()
            except Exception:
                log.warning("indexer_close_failed", indexer_name=backend.name, exc_info=True)
