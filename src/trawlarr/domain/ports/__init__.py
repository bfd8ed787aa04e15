from .cache import CachePort
from .encryption import EncryptionError, EncryptionPort
from .indexer_factory import IndexerFactoryPort
from .indexer_repository import IndexerRepositoryPort, RepositoryError

__all__ = [
    "CachePort",
    "EncryptionError",
    "EncryptionPort",
    "IndexerFactoryPort",
    "IndexerRepositoryPort",
    "RepositoryError",
]
