from .base import IndexerProtocol, query_supported
from .catalog import (
    AVAILABLE_INDEXERS,
    CredentialType,
    IndexerTypeInfo,
    SettingDefinition,
    SettingType,
    get_indexer_info,
)
from .exceptions import (
    DefinitionError,
    DefinitionLoadError,
    DefinitionNotFoundError,
    DefinitionValidationError,
    IndexerAuthError,
    IndexerConfigNotFoundError,
    IndexerError,
    IndexerNotImplementedError,
    IndexerNotLoadedError,
    IndexerParseError,
    IndexerRequestError,
    InvalidIndexerIdError,
    MissingCredentialError,
    UnknownIndexerTypeError,
)

__all__ = [
    "AVAILABLE_INDEXERS",
    "CredentialType",
    "DefinitionError",
    "DefinitionLoadError",
    "DefinitionNotFoundError",
    "DefinitionValidationError",
    "IndexerAuthError",
    "IndexerConfigNotFoundError",
    "IndexerError",
    "IndexerNotImplementedError",
    "IndexerNotLoadedError",
    "IndexerParseError",
    "IndexerProtocol",
    "IndexerRequestError",
    "IndexerTypeInfo",
    "InvalidIndexerIdError",
    "MissingCredentialError",
    "SettingDefinition",
    "SettingType",
    "UnknownIndexerTypeError",
    "get_indexer_info",
    "query_supported",
]
