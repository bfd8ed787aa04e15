"""Tests for the per-indexer Torznab caps and search use cases."""

from __future__ import annotations

import pytest

from trawlarr.application.indexer_manager import IndexerManager
from trawlarr.application.use_cases import (
    IndexerContext,
    IndexerTestUseCase,
    TorznabCapsUseCase,
    TorznabSearchUseCase,
)
from trawlarr.domain.entities import (
    NewIndexerConfig,
    TorznabBadRequestError,
    TorznabInternalError,
    TorznabQuery,
)
from trawlarr.domain.indexers import IndexerNotLoadedError, IndexerRequestError


async def _context(repository, indexer_type: str = "fake") -> IndexerContext:
    config = await repository.create(
        NewIndexerConfig(user_id="u", indexer_type=indexer_type, name="My Tracker")
    )
    return IndexerContext(config=config)


# ---------------------------------------------------------------------------
# Caps
# ---------------------------------------------------------------------------


class TestTorznabCapsUseCase:
    @pytest.mark.asyncio
    async def test_returns_backend_capabilities(self, repository, fake_factory) -> None:
        context = await _context(repository)

        caps = await TorznabCapsUseCase(fake_factory).execute(context)

        assert caps.server_title == "My Tracker"
        assert caps.capabilities.tv_search_available
        backend = fake_factory.backends[context.config.id]
        assert backend.closed

    @pytest.mark.asyncio
    async def test_builds_leniently(self, repository, fake_factory) -> None:
        context = await _context(repository)
        await TorznabCapsUseCase(fake_factory).execute(context)
        assert fake_factory.calls[0][3] is False

    @pytest.mark.asyncio
    async def test_unknown_type(self, repository, fake_factory) -> None:
        context = await _context(repository, "rutracker")
        with pytest.raises(TorznabBadRequestError, match="Unsupported indexer type"):
            await TorznabCapsUseCase(fake_factory).execute(context)


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class TestTorznabSearchUseCase:
    @pytest.mark.asyncio
    async def test_success_records_success(self, repository, fake_factory) -> None:
        context = await _context(repository)
        await repository.record_error(context.config.id, "earlier failure")

        feed = await TorznabSearchUseCase(fake_factory, repository).execute(
            context, TorznabQuery.search("iron man")
        )

        assert feed.title == "My Tracker"
        assert feed.link == "https://tracker.example/"
        assert len(feed.releases) == 1
        stored = await repository.get(context.config.id)
        assert stored.error_count == 0
        assert stored.last_success_at is not None
        assert fake_factory.backends[context.config.id].closed

    @pytest.mark.asyncio
    async def test_failure_records_error(
        self, repository, fake_factory, fake_indexer
    ) -> None:
        context = await _context(repository)
        fake_factory.backends[context.config.id] = fake_indexer(
            context.config.id, "My Tracker", error=IndexerRequestError("HTTP 403")
        )

        with pytest.raises(TorznabInternalError, match="HTTP 403"):
            await TorznabSearchUseCase(fake_factory, repository).execute(
                context, TorznabQuery.search("x")
            )

        stored = await repository.get(context.config.id)
        assert stored.error_count == 1
        assert stored.last_error == "HTTP 403"
        assert fake_factory.backends[context.config.id].closed

    @pytest.mark.asyncio
    async def test_unknown_type(self, repository, fake_factory) -> None:
        context = await _context(repository, "rutracker")
        with pytest.raises(TorznabBadRequestError):
            await TorznabSearchUseCase(fake_factory, repository).execute(
                context, TorznabQuery.search("x")
            )


# ---------------------------------------------------------------------------
# Connection test
# ---------------------------------------------------------------------------


class TestIndexerTestUseCase:
    @pytest.mark.asyncio
    async def test_ok(self, repository, encryption, fake_factory, memory_cache) -> None:
        context = await _context(repository)
        manager = IndexerManager(
            repository=repository,
            encryption=encryption,
            factory=fake_factory,
            cache=memory_cache,
        )
        await manager.load_indexer(context.config.id)

        outcome = await IndexerTestUseCase(manager, repository).execute(context.config.id)

        assert outcome.ok
        assert outcome.error is None

    @pytest.mark.asyncio
    async def test_failure_is_recorded(
        self, repository, encryption, fake_factory, fake_indexer, memory_cache
    ) -> None:
        context = await _context(repository)
        fake_factory.backends[context.config.id] = fake_indexer(
            context.config.id, "My Tracker", error=IndexerRequestError("timeout")
        )
        manager = IndexerManager(
            repository=repository,
            encryption=encryption,
            factory=fake_factory,
            cache=memory_cache,
        )
        await manager.load_indexer(context.config.id)

        outcome = await IndexerTestUseCase(manager, repository).execute(context.config.id)

        assert not outcome.ok
        assert outcome.error == "timeout"
        assert (await repository.get(context.config.id)).error_count == 1

    @pytest.mark.asyncio
    async def test_not_loaded_propagates(
        self, repository, encryption, fake_factory, memory_cache
    ) -> None:
        manager = IndexerManager(
            repository=repository,
            encryption=encryption,
            factory=fake_factory,
            cache=memory_cache,
        )
        with pytest.raises(IndexerNotLoadedError):
            await IndexerTestUseCase(manager, repository).execute("missing")
