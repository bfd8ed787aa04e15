"""Indexer backends and the factory that builds them from configuration."""

from .factory import SUPPORTED_TYPES, IndexerFactory, normalize_credentials
from .iptorrents import IPTorrentsIndexer
from .newznab import NewznabIndexer

__all__ = [
    "SUPPORTED_TYPES",
    "IPTorrentsIndexer",
    "IndexerFactory",
    "NewznabIndexer",
    "normalize_credentials",
]
