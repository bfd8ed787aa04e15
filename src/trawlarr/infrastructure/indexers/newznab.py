"""Generic Newznab/Torznab API backend (API key, XML over HTTP)."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import urlencode

from trawlarr.domain.entities import (
    BookSearchParam,
    Cats,
    MovieSearchParam,
    MusicSearchParam,
    QueryType,
    ReleaseInfo,
    TorznabApiError,
    TorznabCapabilities,
    TorznabErrorCode,
    TorznabQuery,
    TrackerType,
    TvSearchParam,
)
from trawlarr.domain.indexers import IndexerAuthError, IndexerRequestError
from trawlarr.domain.indexers.catalog import NEWZNAB
from trawlarr.infrastructure.indexers.httpx_base import HttpxIndexerBase
from trawlarr.infrastructure.torznab.feed_parser import parse_caps, parse_rss

_SEARCH_FUNCTIONS: dict[QueryType, str] = {
    QueryType.SEARCH: "search",
    QueryType.TV_SEARCH: "tvsearch",
    QueryType.MOVIE_SEARCH: "movie",
    QueryType.MUSIC_SEARCH: "music",
    QueryType.BOOK_SEARCH: "book",
}

DEFAULT_CATEGORIES: tuple[tuple[int, str], ...] = (
    (Cats.MOVIES, "Movies"),
    (Cats.MOVIES_FOREIGN, "Movies/Foreign"),
    (Cats.MOVIES_OTHER, "Movies/Other"),
    (Cats.MOVIES_SD, "Movies/SD"),
    (Cats.MOVIES_HD, "Movies/HD"),
    (Cats.MOVIES_UHD, "Movies/UHD"),
    (Cats.MOVIES_BLURAY, "Movies/BluRay"),
    (Cats.MOVIES_3D, "Movies/3D"),
    (Cats.TV, "TV"),
    (Cats.TV_FOREIGN, "TV/Foreign"),
    (Cats.TV_SD, "TV/SD"),
    (Cats.TV_HD, "TV/HD"),
    (Cats.TV_UHD, "TV/UHD"),
    (Cats.TV_SPORT, "TV/Sport"),
    (Cats.TV_ANIME, "TV/Anime"),
    (Cats.TV_DOCUMENTARY, "TV/Documentary"),
    (Cats.AUDIO, "Audio"),
    (Cats.AUDIO_MP3, "Audio/MP3"),
    (Cats.AUDIO_VIDEO, "Audio/Video"),
    (Cats.AUDIO_AUDIOBOOK, "Audio/Audiobook"),
    (Cats.AUDIO_LOSSLESS, "Audio/Lossless"),
    (Cats.BOOKS, "Books"),
    (Cats.BOOKS_EBOOK, "Books/EBook"),
    (Cats.BOOKS_COMICS, "Books/Comics"),
)


def build_capabilities() -> TorznabCapabilities:
    """Capabilities assumed until the remote caps document says otherwise."""
    caps = TorznabCapabilities(
        limits_default=100,
        limits_max=100,
        tv_search_params=[
            TvSearchParam.Q,
            TvSearchParam.SEASON,
            TvSearchParam.EP,
            TvSearchParam.TVDB_ID,
            TvSearchParam.RID,
        ],
        movie_search_params=[MovieSearchParam.Q, MovieSearchParam.IMDB_ID],
        music_search_params=[MusicSearchParam.Q],
        book_search_params=[BookSearchParam.Q],
    )
    for cat, desc in DEFAULT_CATEGORIES:
        caps.add_category(str(int(cat)), cat, desc)
    return caps


def _api_error(error: TorznabApiError) -> Exception:
    if error.code == TorznabErrorCode.INCORRECT_CREDENTIALS:
        return IndexerAuthError(f"API error: {error.description}")
    return IndexerRequestError(f"API error: {error.description}")


class NewznabIndexer(HttpxIndexerBase):
    """Any Newznab-compatible API (Usenet indexers, Torznab proxies).

    The API endpoint comes from the ``api_url`` setting and falls back to
    the configured site URL.
    """

    indexer_type = NEWZNAB
    description = "Newznab-compatible Usenet indexer"
    tracker_type = TrackerType.PRIVATE

    def __init__(
        self,
        *,
        indexer_id: str,
        name: str,
        api_url: str,
        api_key: str,
        user_agent: str | None = None,
        settings: Mapping[str, str] | None = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(
            indexer_id=indexer_id,
            name=name,
            site_link=api_url,
            capabilities=build_capabilities(),
            settings=settings,
            user_agent=user_agent,
            timeout=timeout,
        )
        self.api_url = api_url.rstrip("/")
        self._api_key = api_key

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def build_api_url(self, params: list[tuple[str, str]]) -> str:
        pairs = [("apikey", self._api_key), *params]
        return f"{self.api_url}/api?{urlencode(pairs)}"

    def build_search_params(self, query: TorznabQuery) -> list[tuple[str, str]]:
        params = [("t", _SEARCH_FUNCTIONS.get(query.query_type, "search"))]
        if query.search_term:
            params.append(("q", query.search_term))
        if query.categories:
            params.append(("cat", ",".join(str(c) for c in sorted(query.categories))))
        if query.season is not None:
            params.append(("season", str(query.season)))
        if query.episode:
            params.append(("ep", query.episode))
        imdb = query.imdb_id_short()
        if imdb:
            params.append(("imdbid", imdb))
        if query.tvdb_id is not None:
            params.append(("tvdbid", str(query.tvdb_id)))
        if query.rage_id is not None:
            params.append(("rid", str(query.rage_id)))
        if query.limit is not None:
            params.append(("limit", str(query.limit)))
        if query.offset is not None:
            params.append(("offset", str(query.offset)))
        return params

    async def test_connection(self) -> bool:
        resp = await self._get(
            self.build_api_url([("t", "caps")]), context="test_connection"
        )
        try:
            caps = parse_caps(resp.content)
        except TorznabApiError as e:
            raise _api_error(e) from e
        self._log.info(
            "newznab_connection_ok",
            categories=len(caps.categories),
        )
        return True

    async def search(self, query: TorznabQuery) -> list[ReleaseInfo]:
        url = self.build_api_url(self.build_search_params(query))
        resp = await self._get(url, context="search")
        try:
            releases = parse_rss(resp.content)
        except TorznabApiError as e:
            raise _api_error(e) from e
        self._log.debug("newznab_search_parsed", results=len(releases))
        return releases

    async def download(self, link: str) -> bytes:
        if "apikey=" not in link:
            separator = "&" if "?" in link else "?"
            link = f"{link}{separator}apikey={self._api_key}"
        try:
            resp = await self._get(link, context="download")
        except IndexerRequestError as e:
            raise IndexerRequestError(f"Download failed: {e}") from e

        head = resp.content[:100].decode("utf-8", errors="replace")
        if len(resp.content) > 10 and "<?xml" not in head and "<nzb" not in head:
            self._log.warning("newznab_download_not_nzb", preview=head)
        return resp.content
