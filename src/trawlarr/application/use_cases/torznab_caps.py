"""Torznab caps use case for a single configured indexer."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from trawlarr.application.use_cases.indexer_context import IndexerContext
from trawlarr.domain.entities import (
    TorznabBadRequestError,
    TorznabCapabilities,
    TorznabInternalError,
)
from trawlarr.domain.indexers import IndexerProtocol, UnknownIndexerTypeError
from trawlarr.domain.ports import IndexerFactoryPort

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CapsResponse:
    server_title: str
    capabilities: TorznabCapabilities


def build_backend(
    factory: IndexerFactoryPort, context: IndexerContext
) -> IndexerProtocol:
    """Construct a request-scoped backend, translating failures to Torznab errors."""
    config = context.config
    try:
        return factory.create(
            config, context.credentials, context.settings, strict=False
        )
    except UnknownIndexerTypeError as e:
        raise TorznabBadRequestError(
            f"Unsupported indexer type: {config.indexer_type}"
        ) from e
    except Exception as e:
        log.error(
            "indexer_build_failed",
            indexer_id=config.id,
            indexer_type=config.indexer_type,
            error=str(e),
        )
        raise TorznabInternalError(f"Failed to create indexer: {e}") from e


class TorznabCapsUseCase:
    def __init__(self, factory: IndexerFactoryPort) -> None:
        self.factory = factory

    async def execute(self, context: IndexerContext) -> CapsResponse:
        backend = build_backend(self.factory, context)
        try:
            return CapsResponse(
                server_title=context.config.name,
                capabilities=backend.capabilities,
            )
        finally:
            await backend.aclose()
