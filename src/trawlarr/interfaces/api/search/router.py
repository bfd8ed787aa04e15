"""Aggregate search across every loaded indexer."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, HTTPException, Query, Request, Response

from trawlarr.application.use_cases import AggregateSearchUseCase
from trawlarr.domain.entities import TorznabError, TorznabErrorCode
from trawlarr.infrastructure.torznab import (
    TorznabRendered,
    parse_torznab_request,
    render_error_xml,
    render_rss_xml,
    render_torznab_error,
)
from trawlarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["search"])


def _indexer_ids(raw: str | None) -> list[str] | None:
    if not raw:
        return None
    ids = [part.strip() for part in raw.split(",") if part.strip()]
    return ids or None


@router.get("/search")
async def aggregate_search_rss(
    request: Request,
    indexers: str | None = Query(None, description="Comma separated indexer ids"),
) -> Response:
    """Merged Torznab feed; items carry the indexer they came from."""
    state = cast(AppState, request.app.state)
    rendered: TorznabRendered
    try:
        torznab_request = parse_torznab_request(request.query_params)
        response = await AggregateSearchUseCase(state.manager).execute(
            torznab_request.query, _indexer_ids(indexers)
        )
        rendered = render_rss_xml(
            title=state.config.app_name,
            releases=response.releases,
            description=f"{state.config.app_name} aggregate search",
            link=str(request.base_url),
            self_link=str(request.url.remove_query_params("apikey")),
        )
    except TorznabError as e:
        rendered = render_torznab_error(e)
    except Exception as e:
        log.exception("aggregate_search_unhandled_error")
        rendered = render_error_xml(TorznabErrorCode.UNKNOWN_ERROR, str(e) or "Internal error")
    return Response(
        content=rendered.payload, media_type=rendered.media_type, status_code=200
    )


@router.get("/search/results")
async def aggregate_search_results(
    request: Request,
    indexers: str | None = Query(None, description="Comma separated indexer ids"),
) -> dict[str, Any]:
    """Per-indexer outcome of an aggregate search, as JSON."""
    state = cast(AppState, request.app.state)
    try:
        torznab_request = parse_torznab_request(request.query_params)
        response = await AggregateSearchUseCase(state.manager).execute(
            torznab_request.query, _indexer_ids(indexers)
        )
    except TorznabError as e:
        raise HTTPException(status_code=400, detail=e.description) from e

    return {
        "query": torznab_request.query.search_term,
        "type": torznab_request.query.query_type.value,
        "total": len(response.releases),
        "failed": len(response.failed),
        "results": [
            {
                "indexer_id": r.indexer_id,
                "indexer_name": r.indexer_name,
                "elapsed_ms": r.elapsed_ms,
                "from_cache": r.from_cache,
                "error": r.error,
                "count": len(r.releases),
            }
            for r in response.results
        ],
    }
