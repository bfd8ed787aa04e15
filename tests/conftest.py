"""Shared test fixtures for the Trawlarr test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

import pytest

from trawlarr.domain.entities import (
    IndexerConfig,
    ReleaseInfo,
    TorznabCapabilities,
    TorznabQuery,
    TrackerType,
    TvSearchParam,
)
from trawlarr.domain.indexers import query_supported
from trawlarr.infrastructure.cache import MemoryCacheAdapter
from trawlarr.infrastructure.encryption import AesGcmEncryption
from trawlarr.infrastructure.persistence import InMemoryIndexerRepository

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------

PUBLISHED = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_release(**overrides: Any) -> ReleaseInfo:
    """ReleaseInfo with sensible defaults; any field can be overridden."""
    fields: dict[str, Any] = {
        "title": "Iron.Man.2008.1080p.BluRay.x264",
        "guid": "https://tracker.example/t/1",
        "publish_date": PUBLISHED,
        "link": "https://tracker.example/download/1.torrent",
        "details": "https://tracker.example/t/1",
        "categories": [2040],
        "size": 1_500_000_000,
        "seeders": 10,
        "peers": 15,
    }
    fields.update(overrides)
    return ReleaseInfo(**fields)


@pytest.fixture()
def release() -> ReleaseInfo:
    return make_release()


@pytest.fixture()
def tv_query() -> TorznabQuery:
    return TorznabQuery.tv_search("The Expanse", season=1, episode="2")


# ---------------------------------------------------------------------------
# Fake backend
# ---------------------------------------------------------------------------


def make_capabilities() -> TorznabCapabilities:
    caps = TorznabCapabilities(
        tv_search_params=[TvSearchParam.Q, TvSearchParam.SEASON, TvSearchParam.EP],
    )
    caps.add_category("1", 2040, "Movies/HD")
    caps.add_category("2", 5040, "TV/HD")
    return caps


class FakeIndexer:
    """In-memory backend satisfying IndexerProtocol.

    ``delay`` simulates network latency; ``error`` makes every call raise.
    """

    indexer_type = "fake"
    description = "Fake indexer"
    language = "en-US"
    tracker_type = TrackerType.PRIVATE

    def __init__(
        self,
        indexer_id: str = "fake-1",
        name: str = "Fake",
        *,
        releases: list[ReleaseInfo] | None = None,
        delay: float = 0.0,
        error: Exception | None = None,
        capabilities: TorznabCapabilities | None = None,
        payload: bytes = b"d8:announce0:e",
    ) -> None:
        self.id = indexer_id
        self.name = name
        self.site_link = "https://tracker.example/"
        self.capabilities = capabilities or make_capabilities()
        self.releases = releases if releases is not None else [make_release()]
        self.delay = delay
        self.error = error
        self.payload = payload
        self.search_calls: list[TorznabQuery] = []
        self.download_calls: list[str] = []
        self.closed = False

    def is_configured(self) -> bool:
        return True

    def can_handle_query(self, query: TorznabQuery) -> bool:
        return query_supported(self.capabilities, query)

    def supports_pagination(self) -> bool:
        return True

    async def test_connection(self) -> bool:
        if self.error is not None:
            raise self.error
        return True

    async def search(self, query: TorznabQuery) -> list[ReleaseInfo]:
        self.search_calls.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.releases)

    async def download(self, link: str) -> bytes:
        self.download_calls.append(link)
        if self.error is not None:
            raise self.error
        return self.payload

    async def aclose(self) -> None:
        self.closed = True


class FakeFactory:
    """IndexerFactoryPort returning pre-registered backends by config id."""

    def __init__(self, backends: Mapping[str, FakeIndexer] | None = None) -> None:
        self.backends: dict[str, FakeIndexer] = dict(backends or {})
        self.calls: list[tuple[IndexerConfig, dict[str, str], dict[str, str], bool]] = []

    def supports(self, indexer_type: str) -> bool:
        return indexer_type == "fake"

    def create(
        self,
        config: IndexerConfig,
        credentials: Mapping[str, str],
        settings: Mapping[str, str],
        *,
        strict: bool = True,
    ) -> FakeIndexer:
        from trawlarr.domain.indexers import UnknownIndexerTypeError

        self.calls.append((config, dict(credentials), dict(settings), strict))
        if config.indexer_type != "fake":
            raise UnknownIndexerTypeError(config.indexer_type)
        backend = self.backends.get(config.id)
        if backend is None:
            backend = FakeIndexer(config.id, config.name)
            self.backends[config.id] = backend
        return backend


@pytest.fixture()
def fake_factory() -> FakeFactory:
    return FakeFactory()


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@pytest.fixture()
def encryption_key() -> str:
    return AesGcmEncryption.generate_key()


@pytest.fixture()
def encryption(encryption_key: str) -> AesGcmEncryption:
    return AesGcmEncryption.from_base64_key(encryption_key)


@pytest.fixture()
def repository(encryption_key: str) -> InMemoryIndexerRepository:
    return InMemoryIndexerRepository(encryption_key=encryption_key)


@pytest.fixture()
def memory_cache() -> MemoryCacheAdapter:
    return MemoryCacheAdapter(ttl_seconds=300)


@pytest.fixture()
def release_factory() -> Callable[..., ReleaseInfo]:
    return make_release


@pytest.fixture()
def fake_indexer() -> type[FakeIndexer]:
    return FakeIndexer
