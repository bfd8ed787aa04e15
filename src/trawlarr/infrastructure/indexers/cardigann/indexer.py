"""Backend driven by a YAML ("Cardigann") definition.

Only the declarative half is live: metadata, capabilities, category
mappings and settings. The login/search/download blocks are validated and
kept on the definition but are not executed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from trawlarr.domain.entities import (
    BookSearchParam,
    MovieSearchParam,
    MusicSearchParam,
    ReleaseInfo,
    TorznabCapabilities,
    TorznabQuery,
    TrackerType,
    TvSearchParam,
)
from trawlarr.domain.indexers import IndexerNotImplementedError
from trawlarr.domain.indexers.catalog import CARDIGANN, CredentialType
from trawlarr.domain.indexers.definition_schema import IndexerDefinition
from trawlarr.infrastructure.indexers.cardigann.categories import parse_category_string
from trawlarr.infrastructure.indexers.httpx_base import HttpxIndexerBase

ENGINE_NOT_IMPLEMENTED = "Cardigann engine not yet implemented"

_MODE_PARAMS: dict[str, Any] = {
    "tv-search": TvSearchParam,
    "movie-search": MovieSearchParam,
    "music-search": MusicSearchParam,
    "book-search": BookSearchParam,
}


def _mode_params(enum: Any, names: list[str]) -> list[Any]:
    """``q`` first, then every recognised parameter once."""
    params = [enum.Q]
    for name in names:
        param = enum.parse(name)
        if param is not None and param not in params:
            params.append(param)
    return params


def build_capabilities(definition: IndexerDefinition) -> TorznabCapabilities:
    caps_def = definition.caps
    caps = TorznabCapabilities(supports_raw_search=caps_def.allow_raw_search)

    for mapping in caps_def.categorymappings:
        caps.add_category(
            mapping.id, parse_category_string(mapping.cat), mapping.desc or mapping.cat
        )
    for tracker_id, cat in caps_def.categories.items():
        caps.add_category(tracker_id, parse_category_string(cat), cat)

    modes = caps_def.modes
    if "tv-search" in modes:
        caps.tv_search_params = _mode_params(TvSearchParam, modes["tv-search"])
    if "movie-search" in modes:
        caps.movie_search_params = _mode_params(MovieSearchParam, modes["movie-search"])
    if "music-search" in modes:
        caps.music_search_params = _mode_params(MusicSearchParam, modes["music-search"])
    if "book-search" in modes:
        caps.book_search_params = _mode_params(BookSearchParam, modes["book-search"])
    return caps


class CardigannIndexer(HttpxIndexerBase):
    indexer_type = CARDIGANN

    def __init__(
        self,
        *,
        indexer_id: str,
        definition: IndexerDefinition,
        credentials: Mapping[str, str] | None = None,
        settings: Mapping[str, str] | None = None,
        name: str | None = None,
        site_url: str | None = None,
        user_agent: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(
            indexer_id=indexer_id,
            name=name or definition.name,
            site_link=site_url or definition.site_link,
            capabilities=build_capabilities(definition),
            settings=settings,
            user_agent=user_agent,
            timeout=timeout,
        )
        self.definition = definition
        self.description = definition.description
        self.language = definition.language
        self.tracker_type = TrackerType.parse(definition.type) or TrackerType.PRIVATE
        self._credentials: dict[str, str] = dict(credentials or {})

    def credential(self, name: str) -> str | None:
        """Credential stored under ``name`` or under any alias of it."""
        value = self._credentials.get(name)
        if value:
            return value
        wanted = CredentialType.parse(name)
        if wanted is None:
            return None
        for key, candidate in self._credentials.items():
            if candidate and CredentialType.parse(key) is wanted:
                return candidate
        return None

    def is_configured(self) -> bool:
        for setting in self.definition.settings:
            if not setting.is_secret_or_text:
                continue
            if not (self.credential(setting.name) or self.settings.get(setting.name)):
                return False
        return True

    def supports_pagination(self) -> bool:
        return False

    async def test_connection(self) -> bool:
        raise IndexerNotImplementedError(ENGINE_NOT_IMPLEMENTED)

    async def search(self, query: TorznabQuery) -> list[ReleaseInfo]:
        raise IndexerNotImplementedError(ENGINE_NOT_IMPLEMENTED)

    async def download(self, link: str) -> bytes:
        raise IndexerNotImplementedError(ENGINE_NOT_IMPLEMENTED)
