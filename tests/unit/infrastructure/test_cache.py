"""Tests for the cache adapters and factory."""

from __future__ import annotations

from pathlib import Path

import pytest

from trawlarr.infrastructure.cache import (
    DiskcacheAdapter,
    MemoryCacheAdapter,
    create_cache,
)


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


# ---------------------------------------------------------------------------
# MemoryCacheAdapter
# ---------------------------------------------------------------------------


class TestMemoryCacheAdapter:
    @pytest.mark.asyncio
    async def test_set_get(self) -> None:
        cache = MemoryCacheAdapter(ttl_seconds=60)
        await cache.set("k", [1, 2])
        assert await cache.get("k") == [1, 2]

    @pytest.mark.asyncio
    async def test_miss(self) -> None:
        assert await MemoryCacheAdapter().get("nope") is None

    @pytest.mark.asyncio
    async def test_empty_list_is_a_hit(self) -> None:
        cache = MemoryCacheAdapter()
        await cache.set("k", [])
        assert await cache.get("k") == []

    @pytest.mark.asyncio
    async def test_entry_expires_on_read(self) -> None:
        clock = _Clock()
        cache = MemoryCacheAdapter(ttl_seconds=60, clock=clock)
        await cache.set("k", "v")

        clock.now += 59
        assert await cache.get("k") == "v"
        clock.now += 1
        assert await cache.get("k") is None
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_explicit_ttl(self) -> None:
        clock = _Clock()
        cache = MemoryCacheAdapter(ttl_seconds=60, clock=clock)
        await cache.set("k", "v", ttl=5)
        clock.now += 6
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_zero_ttl_stores_nothing(self) -> None:
        cache = MemoryCacheAdapter(ttl_seconds=0)
        await cache.set("k", "v")
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_purge_expired(self) -> None:
        clock = _Clock()
        cache = MemoryCacheAdapter(ttl_seconds=60, clock=clock)
        await cache.set("old", 1, ttl=10)
        await cache.set("new", 2, ttl=100)

        clock.now += 50
        assert await cache.purge_expired() == 1
        assert len(cache) == 1
        assert await cache.get("new") == 2

    @pytest.mark.asyncio
    async def test_context_manager_clears(self) -> None:
        async with MemoryCacheAdapter() as cache:
            await cache.set("a", 1)
        assert len(cache) == 0


# ---------------------------------------------------------------------------
# DiskcacheAdapter
# ---------------------------------------------------------------------------


class TestDiskcacheAdapter:
    @pytest.mark.asyncio
    async def test_round_trip(self, tmp_path: Path) -> None:
        async with DiskcacheAdapter(directory=tmp_path / "cache", ttl_seconds=60) as cache:
            await cache.set("k", {"releases": 3})
            assert await cache.get("k") == {"releases": 3}
            assert await cache.get("other") is None

    @pytest.mark.asyncio
    async def test_purge_before_open(self, tmp_path: Path) -> None:
        cache = DiskcacheAdapter(directory=tmp_path / "cache")
        assert await cache.purge_expired() == 0

    @pytest.mark.asyncio
    async def test_zero_ttl_stores_nothing(self, tmp_path: Path) -> None:
        async with DiskcacheAdapter(directory=tmp_path / "cache", ttl_seconds=0) as cache:
            await cache.set("k", "v")
            assert await cache.get("k") is None


# ---------------------------------------------------------------------------
# create_cache
# ---------------------------------------------------------------------------


class TestCreateCache:
    def test_memory(self) -> None:
        assert isinstance(create_cache("memory"), MemoryCacheAdapter)

    def test_diskcache(self, tmp_path: Path) -> None:
        cache = create_cache("diskcache", directory=tmp_path)
        assert isinstance(cache, DiskcacheAdapter)

    def test_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown cache backend"):
            create_cache("redis")  # type: ignore[arg-type]
