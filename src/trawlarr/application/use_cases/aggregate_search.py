"""Fan a query out across loaded indexers and merge the results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog

from trawlarr.application.indexer_manager import IndexerManager
from trawlarr.domain.entities import (
    IndexerSearchResult,
    QueryType,
    ReleaseInfo,
    TorznabBadRequestError,
    TorznabQuery,
)

log = structlog.get_logger(__name__)


def _sort_key(release: ReleaseInfo) -> datetime:
    published = release.publish_date
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return published


@dataclass(frozen=True)
class AggregateSearchResponse:
    results: list[IndexerSearchResult] = field(default_factory=list)
    releases: list[ReleaseInfo] = field(default_factory=list)

    @property
    def failed(self) -> list[IndexerSearchResult]:
        return [r for r in self.results if not r.succeeded]


class AggregateSearchUseCase:
    """Searches all (or selected) loaded indexers.

    Releases from successful indexers are merged newest-first and capped at
    ``query.limit`` when one is given.
    """

    def __init__(self, manager: IndexerManager) -> None:
        self.manager = manager

    async def execute(
        self,
        query: TorznabQuery,
        indexer_ids: list[str] | None = None,
    ) -> AggregateSearchResponse:
        if query.query_type is QueryType.CAPS:
            raise TorznabBadRequestError("Caps cannot be aggregated")

        if indexer_ids:
            results = await self.manager.search_indexers(indexer_ids, query)
        else:
            results = await self.manager.search_all(query)

        merged = [r for result in results for r in result.releases]
        merged.sort(key=_sort_key, reverse=True)
        if query.limit:
            merged = merged[: query.limit]

        log.info(
            "aggregate_search_complete",
            query=query.search_term,
            query_type=query.query_type.value,
            indexers=len(results),
            failed=sum(1 for r in results if not r.succeeded),
            releases=len(merged),
        )
        return AggregateSearchResponse(results=results, releases=merged)
