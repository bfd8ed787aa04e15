"""Canonical Torznab query/result model.

Pure value objects: no framework dependencies, no I/O.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Iterable

from .categories import category_family


class _WireToken(str, Enum):
    """Enum whose values are Torznab wire tokens."""

    @classmethod
    def parse(cls, value: str) -> Any:
        token = value.strip().lower()
        for member in cls:
            if member.value == token:
                return member
        return None


class QueryType(_WireToken):
    SEARCH = "search"
    TV_SEARCH = "tvsearch"
    MOVIE_SEARCH = "movie"
    MUSIC_SEARCH = "music"
    BOOK_SEARCH = "book"
    CAPS = "caps"

    @classmethod
    def parse(cls, value: str) -> QueryType | None:
        return _QUERY_TYPE_ALIASES.get(value.strip().lower())


_QUERY_TYPE_ALIASES: dict[str, QueryType] = {
    "search": QueryType.SEARCH,
    "tvsearch": QueryType.TV_SEARCH,
    "movie": QueryType.MOVIE_SEARCH,
    "music": QueryType.MUSIC_SEARCH,
    "book": QueryType.BOOK_SEARCH,
    "caps": QueryType.CAPS,
    "capabilities": QueryType.CAPS,
}


class SearchParam(_WireToken):
    Q = "q"


class TvSearchParam(_WireToken):
    Q = "q"
    SEASON = "season"
    EP = "ep"
    IMDB_ID = "imdbid"
    TVDB_ID = "tvdbid"
    RID = "rid"
    TMDB_ID = "tmdbid"
    TVMAZE_ID = "tvmazeid"
    TRAKT_ID = "traktid"
    DOUBAN_ID = "doubanid"
    YEAR = "year"
    GENRE = "genre"


class MovieSearchParam(_WireToken):
    Q = "q"
    IMDB_ID = "imdbid"
    TMDB_ID = "tmdbid"
    TRAKT_ID = "traktid"
    DOUBAN_ID = "doubanid"
    YEAR = "year"
    GENRE = "genre"


class MusicSearchParam(_WireToken):
    Q = "q"
    ALBUM = "album"
    ARTIST = "artist"
    LABEL = "label"
    TRACK = "track"
    YEAR = "year"
    GENRE = "genre"


class BookSearchParam(_WireToken):
    Q = "q"
    TITLE = "title"
    AUTHOR = "author"
    PUBLISHER = "publisher"
    YEAR = "year"
    GENRE = "genre"


class TrackerType(_WireToken):
    PUBLIC = "public"
    SEMI_PRIVATE = "semi-private"
    PRIVATE = "private"


class TorznabErrorCode(IntEnum):
    INCORRECT_CREDENTIALS = 100
    MISSING_PARAMETER = 200
    INCORRECT_PARAMETER = 201
    NO_SUCH_FUNCTION = 202
    FUNCTION_NOT_AVAILABLE = 203
    UNKNOWN_ERROR = 900


@dataclass(frozen=True)
class TorznabQuery:
    """A single search request in canonical form.

    Only the fields relevant to ``query_type`` are meaningful; the rest are
    ignored by convention.
    """

    query_type: QueryType = QueryType.SEARCH
    search_term: str | None = None
    categories: frozenset[int] = frozenset()
    limit: int | None = None
    offset: int | None = None
    cache: bool = True

    # TV
    season: int | None = None
    episode: str | None = None

    # External ids
    imdb_id: str | None = None
    tvdb_id: int | None = None
    rage_id: int | None = None
    tmdb_id: int | None = None
    tvmaze_id: int | None = None
    trakt_id: int | None = None
    douban_id: int | None = None

    # Music
    album: str | None = None
    artist: str | None = None
    label: str | None = None
    track: str | None = None

    # Books
    title: str | None = None
    author: str | None = None
    publisher: str | None = None

    year: int | None = None
    genre: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.categories, frozenset):
            object.__setattr__(self, "categories", frozenset(self.categories))

    # --- constructors ---

    @classmethod
    def search(cls, term: str) -> TorznabQuery:
        return cls(query_type=QueryType.SEARCH, search_term=term, cache=True)

    @classmethod
    def tv_search(
        cls, term: str | None = None, season: int | None = None, episode: str | None = None
    ) -> TorznabQuery:
        return cls(
            query_type=QueryType.TV_SEARCH,
            search_term=term,
            season=season,
            episode=episode,
            cache=True,
        )

    @classmethod
    def movie_search(cls, term: str | None = None) -> TorznabQuery:
        return cls(query_type=QueryType.MOVIE_SEARCH, search_term=term, cache=True)

    def with_season_episode(
        self, season: int | None, episode: str | None = None
    ) -> TorznabQuery:
        return replace(self, season=season, episode=episode)

    def with_imdb(self, imdb_id: str) -> TorznabQuery:
        return replace(self, imdb_id=imdb_id)

    def with_categories(self, categories: Iterable[int]) -> TorznabQuery:
        return replace(self, categories=frozenset(categories))

    # --- derived values ---

    def episode_string(self) -> str | None:
        """Scene-style episode marker: ``S01E02`` or ``S01`` for season packs."""
        if self.season is None:
            return None
        if not self.episode:
            return f"S{self.season:02d}"
        ep = self.episode.strip()
        if ep.isdigit():
            ep = f"{int(ep):02d}"
        return f"S{self.season:02d}E{ep}"

    def get_query_string(self) -> str:
        parts = [p for p in (self.search_term, self.episode_string()) if p]
        return " ".join(parts).strip()

    def is_id_search(self) -> bool:
        return any(
            v is not None
            for v in (
                self.imdb_id,
                self.tvdb_id,
                self.rage_id,
                self.tmdb_id,
                self.tvmaze_id,
                self.trakt_id,
                self.douban_id,
            )
        )

    def imdb_id_short(self) -> str | None:
        if self.imdb_id is None:
            return None
        return self.imdb_id.removeprefix("tt")

    def cache_key(self) -> str:
        """Hex SHA-256 of the canonical serialization of every field."""
        payload: dict[str, Any] = {f.name: getattr(self, f.name) for f in fields(self)}
        payload["query_type"] = self.query_type.value
        payload["categories"] = sorted(self.categories)
        raw = json.dumps(payload, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class ReleaseInfo:
    """One search result as produced by an indexer backend.

    ``indexer_id``/``indexer_name`` are stamped on by the manager, never by
    the backend.
    """

    title: str
    guid: str
    publish_date: datetime

    link: str | None = None
    magnet_uri: str | None = None
    info_hash: str | None = None
    details: str | None = None

    categories: list[int] = field(default_factory=list)
    size: int | None = None
    files: int | None = None
    grabs: int | None = None
    description: str | None = None

    rage_id: int | None = None
    tvdb_id: int | None = None
    imdb: int | None = None
    tmdb: int | None = None
    tvmaze_id: int | None = None
    trakt_id: int | None = None
    douban_id: int | None = None

    genres: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)
    subs: list[str] = field(default_factory=list)
    year: int | None = None

    author: str | None = None
    book_title: str | None = None
    publisher: str | None = None
    artist: str | None = None
    album: str | None = None
    label: str | None = None
    track: str | None = None

    seeders: int | None = None
    peers: int | None = None
    poster: str | None = None

    download_volume_factor: float = 1.0
    upload_volume_factor: float = 1.0
    minimum_ratio: float | None = None
    minimum_seed_time: int | None = None

    indexer_id: str | None = None
    indexer_name: str | None = None

    def is_freeleech(self) -> bool:
        return self.download_volume_factor == 0.0

    def leechers(self) -> int | None:
        if self.peers is None or self.seeders is None:
            return None
        return self.peers - self.seeders

    def gain(self) -> float | None:
        """Seeders multiplied by size in GiB, a rough popularity metric."""
        if self.seeders is None or self.size is None:
            return None
        return self.seeders * (self.size / 1024**3)

    @property
    def download_url(self) -> str | None:
        return self.link or self.magnet_uri


@dataclass(frozen=True)
class CategoryMapping:
    """Tracker-local category id mapped onto a Torznab category code."""

    tracker_id: str
    torznab_cat: int
    description: str | None = None


@dataclass
class TorznabCapabilities:
    """What an indexer can search for and how its categories map.

    Availability of each search mode is derived from its parameter list.
    """

    limits_default: int = 100
    limits_max: int = 100
    search_params: list[SearchParam] = field(default_factory=lambda: [SearchParam.Q])
    supports_raw_search: bool = False
    tv_search_params: list[TvSearchParam] = field(default_factory=list)
    movie_search_params: list[MovieSearchParam] = field(default_factory=list)
    music_search_params: list[MusicSearchParam] = field(default_factory=list)
    book_search_params: list[BookSearchParam] = field(default_factory=list)
    categories: list[CategoryMapping] = field(default_factory=list)

    @property
    def search_available(self) -> bool:
        return bool(self.search_params)

    @property
    def tv_search_available(self) -> bool:
        return bool(self.tv_search_params)

    @property
    def movie_search_available(self) -> bool:
        return bool(self.movie_search_params)

    @property
    def music_search_available(self) -> bool:
        return bool(self.music_search_params)

    @property
    def book_search_available(self) -> bool:
        return bool(self.book_search_params)

    @property
    def tv_search_imdb_available(self) -> bool:
        return TvSearchParam.IMDB_ID in self.tv_search_params

    def has_tv_param(self, param: TvSearchParam) -> bool:
        return param in self.tv_search_params

    def has_movie_param(self, param: MovieSearchParam) -> bool:
        return param in self.movie_search_params

    def is_available(self, query_type: QueryType) -> bool:
        if query_type is QueryType.CAPS:
            return True
        return {
            QueryType.SEARCH: self.search_available,
            QueryType.TV_SEARCH: self.tv_search_available,
            QueryType.MOVIE_SEARCH: self.movie_search_available,
            QueryType.MUSIC_SEARCH: self.music_search_available,
            QueryType.BOOK_SEARCH: self.book_search_available,
        }[query_type]

    def add_category(
        self, tracker_id: str, torznab_cat: int, description: str | None = None
    ) -> None:
        self.categories.append(CategoryMapping(tracker_id, torznab_cat, description))

    def map_tracker_to_torznab(self, tracker_id: str) -> list[int]:
        return [m.torznab_cat for m in self.categories if m.tracker_id == tracker_id]

    def map_torznab_to_tracker(self, torznab_cats: Iterable[int]) -> list[str]:
        """Tracker ids whose category equals, or shares the family of, a request.

        Any Movies/* request matches any configured Movies/* tracker category.
        """
        wanted = set(torznab_cats)
        if not wanted:
            return []
        families = {category_family(c) for c in wanted}
        out: list[str] = []
        for mapping in self.categories:
            if (
                mapping.torznab_cat in wanted
                or category_family(mapping.torznab_cat) in families
            ) and mapping.tracker_id not in out:
                out.append(mapping.tracker_id)
        return out

    def supports_categories(self, torznab_cats: Iterable[int]) -> bool:
        wanted = list(torznab_cats)
        if not wanted or not self.categories:
            return True
        return bool(self.map_torznab_to_tracker(wanted))

    def torznab_categories(self) -> list[int]:
        return sorted({m.torznab_cat for m in self.categories})


@dataclass(frozen=True)
class IndexerSearchResult:
    """Outcome of one backend's part in a fan-out search."""

    indexer_id: str
    indexer_name: str
    releases: list[ReleaseInfo] = field(default_factory=list)
    elapsed_ms: int = 0
    from_cache: bool = False
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class TorznabError(Exception):
    """Base error for the Torznab adapter, carrying a Torznab error code."""

    code: int = TorznabErrorCode.UNKNOWN_ERROR

    def __init__(self, description: str, *, code: int | None = None) -> None:
        super().__init__(description)
        self.description = description
        if code is not None:
            self.code = code


class TorznabBadRequestError(TorznabError):
    """Malformed or unsupported request shape (never retried)."""

    code = TorznabErrorCode.INCORRECT_PARAMETER


class TorznabInternalError(TorznabError):
    """Dependency or indexer failure behind the adapter."""

    code = TorznabErrorCode.UNKNOWN_ERROR


class TorznabApiError(TorznabError):
    """Error document returned by a remote Torznab/Newznab API."""
