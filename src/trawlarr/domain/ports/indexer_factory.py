"""Port for constructing indexer backends from configuration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from trawlarr.domain.entities import IndexerConfig
from trawlarr.domain.indexers import IndexerProtocol


class IndexerFactoryPort(Protocol):
    def supports(self, indexer_type: str) -> bool: ...

    def create(
        self,
        config: IndexerConfig,
        credentials: Mapping[str, str],
        settings: Mapping[str, str],
        *,
        strict: bool = True,
    ) -> IndexerProtocol:
        """Build a backend for ``config.indexer_type``.

        With ``strict`` a missing required credential raises
        ``MissingCredentialError``; otherwise the backend is built anyway.
        Unknown types raise ``UnknownIndexerTypeError``.
        """
        ...
