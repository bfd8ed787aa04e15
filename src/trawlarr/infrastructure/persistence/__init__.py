from __future__ import annotations

from .memory_indexer_repository import InMemoryIndexerRepository
from .seed import SeedError, SeedFile, SeedIndexer, import_seed, read_seed_file

__all__ = [
    "InMemoryIndexerRepository",
    "SeedError",
    "SeedFile",
    "SeedIndexer",
    "import_seed",
    "read_seed_file",
]
