"""Torznab search use case for a single configured indexer."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from trawlarr.application.use_cases.indexer_context import IndexerContext
from trawlarr.application.use_cases.torznab_caps import build_backend
from trawlarr.domain.entities import ReleaseInfo, TorznabInternalError, TorznabQuery
from trawlarr.domain.ports import IndexerFactoryPort, IndexerRepositoryPort

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SearchFeed:
    """Channel metadata plus the releases to render."""

    title: str
    description: str
    link: str
    releases: list[ReleaseInfo]


class TorznabSearchUseCase:
    """Runs one query against one request-scoped backend.

    Flow:
        1. Build the backend for the configuration's type
        2. Execute the search
        3. Record success/error with the repository
        4. Return channel metadata + releases
    """

    def __init__(
        self,
        factory: IndexerFactoryPort,
        repository: IndexerRepositoryPort,
    ) -> None:
        self.factory = factory
        self.repository = repository

    async def execute(self, context: IndexerContext, query: TorznabQuery) -> SearchFeed:
        """Raises:
        TorznabBadRequestError: Unsupported indexer type.
        TorznabInternalError: Backend construction or search failure.
        """
        config = context.config
        backend = build_backend(self.factory, context)
        try:
            try:
                releases = await backend.search(query)
            except Exception as e:
                message = str(e) or type(e).__name__
                log.warning(
                    "torznab_search_failed",
                    indexer_id=config.id,
                    indexer_name=config.name,
                    error=message,
                )
                await self._record_error(config.id, message)
                raise TorznabInternalError(message) from e

            await self._record_success(config.id)
            log.info(
                "torznab_search_complete",
                indexer_id=config.id,
                indexer_name=config.name,
                query_type=query.query_type.value,
                results=len(releases),
            )
            return SearchFeed(
                title=config.name,
                description=backend.description,
                link=backend.site_link,
                releases=releases,
            )
        finally:
            await backend.aclose()

    async def _record_success(self, config_id: str) -> None:
        try:
            await self.repository.record_success(config_id)
        except Exception:
            log.warning("record_success_failed", indexer_id=config_id, exc_info=True)

    async def _record_error(self, config_id: str, message: str) -> None:
        try:
            await self.repository.record_error(config_id, message)
        except Exception:
            log.warning("record_error_failed", indexer_id=config_id, exc_info=True)
