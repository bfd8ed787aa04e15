"""Indexer system exceptions."""

from __future__ import annotations


class IndexerError(Exception):
    """Base class for all indexer-related errors."""


class InvalidIndexerIdError(IndexerError):
    """Raised when an indexer id is not a valid UUID."""

    def __init__(self, indexer_id: str) -> None:
        super().__init__("Invalid indexer ID")
        self.indexer_id = indexer_id


class IndexerConfigNotFoundError(IndexerError):
    """Raised when no persisted configuration exists for an id."""

    def __init__(self, config_id: str) -> None:
        super().__init__(f"Indexer config not found: {config_id}")
        self.config_id = config_id


class UnknownIndexerTypeError(IndexerError):
    """Raised when a configuration names a backend type nobody implements."""

    def __init__(self, indexer_type: str) -> None:
        super().__init__(f"Unknown indexer type: {indexer_type}")
        self.indexer_type = indexer_type


class IndexerNotLoadedError(IndexerError):
    """Raised when an operation targets an indexer that is not loaded."""

    def __init__(self, indexer_id: str) -> None:
        super().__init__(f"Indexer not loaded: {indexer_id}")
        self.indexer_id = indexer_id


class MissingCredentialError(IndexerError):
    """Raised when a strictly-built backend lacks a required credential."""


class IndexerAuthError(IndexerError):
    """Raised when the remote site rejects our session or API key."""


class IndexerRequestError(IndexerError):
    """Transport or HTTP status failure talking to the remote site."""


class IndexerParseError(IndexerError):
    """Raised when a remote response cannot be decoded."""


class IndexerNotImplementedError(IndexerError):
    """Raised by backends whose runtime behaviour is not available."""


class DefinitionError(IndexerError):
    """Base class for YAML definition problems."""


class DefinitionValidationError(DefinitionError):
    """Raised when a YAML definition fails schema validation."""


class DefinitionLoadError(DefinitionError):
    """Raised when a YAML definition file cannot be read."""


class DefinitionNotFoundError(DefinitionError):
    """Raised when a definition id is not known to the registry."""
