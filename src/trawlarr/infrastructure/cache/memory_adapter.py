"""In-process cache adapter with read-time expiry."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, Optional

import structlog

log = structlog.get_logger(__name__)


class MemoryCacheAdapter:
    """Dict-backed cache holding ``(value, expires_at)`` pairs.

    Expired entries are treated as absent on read and evicted by
    ``purge_expired``. A ttl of 0 (or less) stores nothing.

    Args:
        ttl_seconds: Default TTL for `set()` without explicit value.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: int = 300,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> MemoryCacheAdapter:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        async with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Optional[Any]:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                log.debug("cache_expired", key=key)
                return None
            return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        expire_time = ttl if ttl is not None else self.default_ttl
        if expire_time <= 0:
            return
        async with self._lock:
            self._entries[key] = (value, self._clock() + expire_time)
        log.debug("cache_set", key=key, ttl=expire_time)

    async def purge_expired(self) -> int:
        async with self._lock:
            now = self._clock()
            expired = [k for k, (_, exp) in self._entries.items() if now >= exp]
            for key in expired:
                del self._entries[key]
        return len(expired)
