"""Decode a Torznab query string into a canonical ``TorznabQuery``."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from trawlarr.domain.entities import (
    QueryType,
    TorznabBadRequestError,
    TorznabQuery,
)

_FALSE_TOKENS = frozenset({"false", "0", "no", "off"})
_NON_DIGITS = re.compile(r"\D+")


@dataclass(frozen=True)
class TorznabRequest:
    action: str
    query: TorznabQuery
    apikey: str | None = None
    extended: bool = False


def _clean(params: Mapping[str, str], key: str) -> str | None:
    value = params.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _int(params: Mapping[str, str], key: str) -> int | None:
    value = _clean(params, key)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _non_negative(params: Mapping[str, str], key: str) -> int | None:
    value = _int(params, key)
    if value is None or value < 0:
        return None
    return value


def parse_categories(raw: str | None) -> frozenset[int]:
    """Comma separated category codes; tokens that aren't integers are dropped."""
    if not raw:
        return frozenset()
    out: set[int] = set()
    for token in raw.split(","):
        token = token.strip()
        if token.isdigit():
            out.add(int(token))
    return frozenset(out)


def normalize_imdb_id(raw: str | None) -> str | None:
    """``"1234567"``, ``"tt1234567"`` and ``"tt123"`` all become ``tt`` + 7+ digits."""
    if not raw:
        return None
    digits = _NON_DIGITS.sub("", raw)
    if not digits:
        return None
    return f"tt{int(digits):07d}"


def parse_cache_flag(raw: str | None) -> bool:
    if raw is None:
        return True
    return raw.strip().lower() not in _FALSE_TOKENS


def parse_torznab_request(params: Mapping[str, str]) -> TorznabRequest:
    """Build a ``TorznabRequest`` from query-string parameters.

    A missing ``t`` means ``search``.

    Raises:
        TorznabBadRequestError: ``t`` names no known function.
    """
    action = _clean(params, "t") or "search"
    query_type = QueryType.parse(action)
    if query_type is None:
        raise TorznabBadRequestError(f"Unknown query type: {action}")

    query = TorznabQuery(
        query_type=query_type,
        search_term=_clean(params, "q"),
        categories=parse_categories(params.get("cat")),
        limit=_non_negative(params, "limit"),
        offset=_non_negative(params, "offset"),
        cache=parse_cache_flag(params.get("cache")),
        season=_int(params, "season"),
        episode=_clean(params, "ep"),
        imdb_id=normalize_imdb_id(_clean(params, "imdbid")),
        tvdb_id=_int(params, "tvdbid"),
        rage_id=_int(params, "rid"),
        tmdb_id=_int(params, "tmdbid"),
        tvmaze_id=_int(params, "tvmazeid"),
        trakt_id=_int(params, "traktid"),
        douban_id=_int(params, "doubanid"),
        album=_clean(params, "album"),
        artist=_clean(params, "artist"),
        label=_clean(params, "label"),
        track=_clean(params, "track"),
        title=_clean(params, "title"),
        author=_clean(params, "author"),
        publisher=_clean(params, "publisher"),
        year=_int(params, "year"),
        genre=_clean(params, "genre"),
    )
    return TorznabRequest(
        action=action,
        query=query,
        apikey=_clean(params, "apikey"),
        extended=_clean(params, "extended") == "1",
    )
