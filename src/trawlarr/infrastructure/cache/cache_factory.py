"""Cache factory - builds the configured adapter."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import structlog

from trawlarr.domain.ports.cache import CachePort
from trawlarr.infrastructure.cache.diskcache_adapter import DiskcacheAdapter
from trawlarr.infrastructure.cache.memory_adapter import MemoryCacheAdapter

log = structlog.get_logger(__name__)

CacheBackend = Literal["memory", "diskcache"]


def create_cache(
    backend: CacheBackend = "memory",
    *,
    directory: str | Path = "./.cache/trawlarr",
    ttl_seconds: int = 300,
    max_concurrent: int = 10,
) -> CachePort:
    """Create a cache adapter for ``backend``.

    Raises:
        ValueError: If `backend` is unknown.
    """
    log.info(
        "cache_factory_create",
        backend=backend,
        ttl=ttl_seconds,
        directory=str(directory) if backend == "diskcache" else None,
    )
    if backend == "memory":
        return MemoryCacheAdapter(ttl_seconds=ttl_seconds)
    if backend == "diskcache":
        return DiskcacheAdapter(
            directory=directory,
            ttl_seconds=ttl_seconds,
            max_concurrent=max_concurrent,
        )
    raise ValueError(
        f"Unknown cache backend: {backend!r}. Must be 'memory' or 'diskcache'."
    )
