"""Indexer management: catalog, definitions, load/unload, test, download."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import Response

from trawlarr.application.use_cases import IndexerTestUseCase
from trawlarr.domain.indexers import (
    AVAILABLE_INDEXERS,
    DefinitionError,
    IndexerConfigNotFoundError,
    IndexerError,
    IndexerNotLoadedError,
    IndexerProtocol,
    IndexerTypeInfo,
    InvalidIndexerIdError,
    MissingCredentialError,
    UnknownIndexerTypeError,
)
from trawlarr.domain.indexers.definition_schema import IndexerDefinition
from trawlarr.domain.ports import EncryptionError
from trawlarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["indexers"])

TORRENT_MEDIA_TYPE = "application/x-bittorrent"


def _indexer_json(config_id: str, backend: IndexerProtocol) -> dict[str, Any]:
    caps = backend.capabilities
    return {
        "id": config_id,
        "name": backend.name,
        "type": backend.indexer_type,
        "description": backend.description,
        "site_link": backend.site_link,
        "language": backend.language,
        "tracker_type": backend.tracker_type.value,
        "configured": backend.is_configured(),
        "supports_pagination": backend.supports_pagination(),
        "search_modes": {
            "search": caps.search_available,
            "tv-search": caps.tv_search_available,
            "movie-search": caps.movie_search_available,
            "music-search": caps.music_search_available,
            "book-search": caps.book_search_available,
        },
        "categories": caps.torznab_categories(),
    }


def _type_json(info: IndexerTypeInfo) -> dict[str, Any]:
    return {
        "id": info.id,
        "name": info.name,
        "description": info.description,
        "tracker_type": info.tracker_type.value,
        "language": info.language,
        "site_link": info.site_link,
        "is_native": info.is_native,
        "required_credentials": [c.value for c in info.required_credentials],
        "optional_settings": [
            {
                "key": s.key,
                "label": s.label,
                "type": s.setting_type.value,
                "default": s.default,
                "options": [{"value": v, "label": label} for v, label in s.options],
            }
            for s in info.optional_settings
        ],
    }


def _definition_json(definition: IndexerDefinition) -> dict[str, Any]:
    return {
        "id": definition.id,
        "name": definition.name,
        "description": definition.description,
        "language": definition.language,
        "type": definition.type,
        "links": list(definition.links),
        "settings": [
            {
                "name": s.name,
                "type": s.type,
                "label": s.label,
                "default": s.default,
                "options": dict(s.options),
            }
            for s in definition.settings
        ],
    }


@router.get("/indexers")
async def list_loaded_indexers(request: Request) -> dict[str, Any]:
    state = cast(AppState, request.app.state)
    indexers = [
        _indexer_json(config_id, backend)
        for config_id, backend in state.manager.list_indexers()
    ]
    return {"indexers": indexers}


@router.get("/indexers/types")
async def list_indexer_types() -> dict[str, Any]:
    return {"types": [_type_json(info) for info in AVAILABLE_INDEXERS]}


@router.get("/indexers/definitions")
async def list_definitions(request: Request) -> dict[str, Any]:
    state = cast(AppState, request.app.state)
    return {
        "definitions": [
            _definition_json(d) for d in state.definitions.list_definitions()
        ]
    }


@router.post("/indexers/{config_id}/load")
async def load_indexer(request: Request, config_id: str) -> dict[str, Any]:
    state = cast(AppState, request.app.state)
    try:
        backend = await state.manager.load_indexer(config_id)
    except IndexerConfigNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except (
        UnknownIndexerTypeError,
        MissingCredentialError,
        DefinitionError,
        EncryptionError,
    ) as e:
        log.warning("indexer_load_rejected", indexer_id=config_id, error=str(e))
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _indexer_json(config_id, backend)


@router.delete("/indexers/{config_id}")
async def unload_indexer(request: Request, config_id: str) -> dict[str, Any]:
    state = cast(AppState, request.app.state)
    if not await state.manager.unload_indexer(config_id):
        raise HTTPException(status_code=404, detail=f"Indexer not loaded: {config_id}")
    return {"id": config_id, "unloaded": True}


@router.post("/indexers/{config_id}/test")
async def test_indexer(request: Request, config_id: str) -> dict[str, Any]:
    state = cast(AppState, request.app.state)
    try:
        outcome = await IndexerTestUseCase(
            manager=state.manager, repository=state.repository
        ).execute(config_id)
    except IndexerNotLoadedError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return {"id": outcome.indexer_id, "ok": outcome.ok, "error": outcome.error}


@router.get("/indexers/{config_id}/download")
async def download_through_indexer(
    request: Request,
    config_id: str,
    link: str = Query(..., description="Download link from a search result"),
) -> Response:
    """Fetch ``link`` with the indexer's own session (cookies, API key)."""
    state = cast(AppState, request.app.state)
    try:
        payload = await state.manager.download_torrent(config_id, link)
    except InvalidIndexerIdError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except IndexerNotLoadedError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except IndexerError as e:
        log.warning("indexer_download_failed", indexer_id=config_id, error=str(e))
        raise HTTPException(status_code=502, detail=str(e)) from e

    return Response(
        content=payload,
        media_type=TORRENT_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{config_id[:8]}.torrent"'},
    )
