"""Per-indexer Torznab endpoint.

Every response is HTTP 200; failures are reported in-band as
``<error code=".." description=".."/>`` documents.
"""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Request, Response

from trawlarr.application.use_cases import (
    LoadIndexerContextUseCase,
    TorznabCapsUseCase,
    TorznabSearchUseCase,
)
from trawlarr.domain.entities import QueryType, TorznabError, TorznabErrorCode
from trawlarr.infrastructure.encryption import AesGcmEncryption
from trawlarr.infrastructure.torznab import (
    TorznabRendered,
    parse_torznab_request,
    render_caps_xml,
    render_error_xml,
    render_rss_xml,
    render_torznab_error,
)
from trawlarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["torznab"])


def _xml(rendered: TorznabRendered) -> Response:
    return Response(
        content=rendered.payload, media_type=rendered.media_type, status_code=200
    )


async def _handle(request: Request, config_id: str) -> TorznabRendered:
    state = cast(AppState, request.app.state)

    context = await LoadIndexerContextUseCase(
        repository=state.repository,
        encryption_factory=AesGcmEncryption.from_base64_key,
    ).execute(config_id)

    torznab_request = parse_torznab_request(request.query_params)
    query = torznab_request.query

    if query.query_type is QueryType.CAPS:
        caps = await TorznabCapsUseCase(factory=state.factory).execute(context)
        return render_caps_xml(caps.server_title, caps.capabilities)

    feed = await TorznabSearchUseCase(
        factory=state.factory, repository=state.repository
    ).execute(context, query)
    return render_rss_xml(
        title=feed.title,
        releases=feed.releases,
        description=feed.description,
        link=feed.link,
        self_link=str(request.url.remove_query_params("apikey")),
    )


@router.get("/torznab/{config_id}")
@router.get("/torznab/{config_id}/api")
async def torznab_api(request: Request, config_id: str) -> Response:
    try:
        rendered = await _handle(request, config_id)
    except TorznabError as e:
        log.info(
            "torznab_error_response",
            indexer_id=config_id,
            code=int(e.code),
            description=e.description,
        )
        rendered = render_torznab_error(e)
    except Exception as e:
        log.exception("torznab_unhandled_error", indexer_id=config_id)
        rendered = render_error_xml(TorznabErrorCode.UNKNOWN_ERROR, str(e) or "Internal error")
    return _xml(rendered)
