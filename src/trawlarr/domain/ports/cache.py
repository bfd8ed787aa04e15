"""Search cache port."""

from __future__ import annotations

from typing import Any, Protocol


class CachePort(Protocol):
    """Async key-value store for per-indexer search results.

    A ``get`` on a missing or expired key returns None, so an empty result
    list stored under a key is still a hit. Adapters are async context
    managers; ``aclose`` releases whatever they hold open.
    """

    async def get(self, key: str) -> Any: ...

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        """Store ``value`` for ``ttl`` seconds (adapter default when None)."""
        ...

    async def purge_expired(self) -> int:
        """Evict expired entries, returning how many were removed."""
        ...

    async def aclose(self) -> None: ...

    async def __aenter__(self) -> CachePort: ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...
