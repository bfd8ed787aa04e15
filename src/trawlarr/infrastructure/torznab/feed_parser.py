"""Decode Torznab/Newznab XML responses into the canonical model."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable

import structlog
from lxml import etree

from trawlarr.domain.entities import (
    BookSearchParam,
    MovieSearchParam,
    MusicSearchParam,
    ReleaseInfo,
    SearchParam,
    TorznabApiError,
    TorznabCapabilities,
    TvSearchParam,
)
from trawlarr.domain.indexers import IndexerParseError

log = structlog.get_logger(__name__)

_PARSER = etree.XMLParser(
    resolve_entities=False, no_network=True, recover=False, huge_tree=False
)


def _local(tag: Any) -> str:
    if not isinstance(tag, str):
        return ""
    return etree.QName(tag).localname


def _parse_document(xml: bytes | str) -> etree._Element:
    data = xml.encode("utf-8") if isinstance(xml, str) else xml
    try:
        root = etree.fromstring(data, parser=_PARSER)
    except etree.XMLSyntaxError as e:
        raise IndexerParseError(f"Invalid XML response: {e}") from e
    if _local(root.tag) == "error":
        code = root.get("code", "900")
        description = root.get("description", "Unknown error")
        raise TorznabApiError(
            description, code=int(code) if code.isdigit() else 900
        )
    return root


def _child_text(elem: etree._Element, name: str) -> str | None:
    for child in elem:
        if _local(child.tag) == name:
            text = (child.text or "").strip()
            return text or None
    return None


def _int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        try:
            return int(float(value))
        except ValueError:
            return None


def _float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _imdb(value: str | None) -> int | None:
    if value is None:
        return None
    return _int(value.strip().removeprefix("tt"))


def _pub_date(value: str | None) -> datetime:
    if value:
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            parsed = None
        if parsed is not None:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
    return datetime.now(timezone.utc)


# torznab:attr name -> (ReleaseInfo field, converter)
_ATTR_FIELDS: dict[str, tuple[str, Callable[[str | None], Any]]] = {
    "seeders": ("seeders", _int),
    "peers": ("peers", _int),
    "size": ("size", _int),
    "files": ("files", _int),
    "grabs": ("grabs", _int),
    "imdb": ("imdb", _imdb),
    "imdbid": ("imdb", _imdb),
    "tvdbid": ("tvdb_id", _int),
    "rageid": ("rage_id", _int),
    "tmdbid": ("tmdb", _int),
    "tvmazeid": ("tvmaze_id", _int),
    "traktid": ("trakt_id", _int),
    "doubanid": ("douban_id", _int),
    "year": ("year", _int),
    "infohash": ("info_hash", str),
    "magneturl": ("magnet_uri", str),
    "coverurl": ("poster", str),
    "author": ("author", str),
    "booktitle": ("book_title", str),
    "publisher": ("publisher", str),
    "artist": ("artist", str),
    "album": ("album", str),
    "label": ("label", str),
    "track": ("track", str),
    "downloadvolumefactor": ("download_volume_factor", _float),
    "uploadvolumefactor": ("upload_volume_factor", _float),
    "minimumratio": ("minimum_ratio", _float),
    "minimumseedtime": ("minimum_seed_time", _int),
}


def _parse_item(item: etree._Element) -> ReleaseInfo | None:
    title = _child_text(item, "title")
    if not title:
        return None

    fields: dict[str, Any] = {}
    categories: list[int] = []
    text_categories: list[int] = []
    genres: list[str] = []
    link = _child_text(item, "link")
    enclosure_url: str | None = None
    enclosure_length: int | None = None

    for child in item:
        name = _local(child.tag)
        if name == "attr":
            attr_name = (child.get("name") or "").lower()
            value = child.get("value")
            if attr_name == "category":
                cat = _int(value)
                if cat is not None:
                    categories.append(cat)
            elif attr_name == "genre" and value:
                genres.extend(g.strip() for g in value.split(",") if g.strip())
            elif attr_name in _ATTR_FIELDS and value is not None:
                field_name, convert = _ATTR_FIELDS[attr_name]
                converted = convert(value)
                if converted is not None:
                    fields.setdefault(field_name, converted)
        elif name == "category":
            cat = _int(child.text)
            if cat is not None:
                text_categories.append(cat)
        elif name == "enclosure":
            enclosure_url = child.get("url") or None
            enclosure_length = _int(child.get("length"))

    attr_size = fields.pop("size", None)
    size = _int(_child_text(item, "size"))
    if size is None:
        size = attr_size if attr_size is not None else enclosure_length

    download = link or enclosure_url
    if download and download.startswith("magnet:"):
        fields.setdefault("magnet_uri", download)
        download = None
        if enclosure_url and not enclosure_url.startswith("magnet:"):
            download = enclosure_url

    guid = (
        _child_text(item, "guid")
        or _child_text(item, "comments")
        or download
        or fields.get("magnet_uri")
        or title
    )

    return ReleaseInfo(
        title=title,
        guid=guid,
        publish_date=_pub_date(_child_text(item, "pubDate")),
        link=download,
        details=_child_text(item, "comments"),
        description=_child_text(item, "description"),
        categories=categories or text_categories,
        size=size,
        genres=genres,
        **fields,
    )


def parse_rss(xml: bytes | str) -> list[ReleaseInfo]:
    """Parse an RSS search response.

    Raises:
        TorznabApiError: The document is an ``<error>`` response.
        IndexerParseError: The document is not well-formed XML.
    """
    root = _parse_document(xml)
    releases: list[ReleaseInfo] = []
    skipped = 0
    for item in root.iter():
        if _local(item.tag) != "item":
            continue
        release = _parse_item(item)
        if release is None:
            skipped += 1
            continue
        releases.append(release)
    if skipped:
        log.debug("rss_items_skipped", skipped=skipped)
    return releases


def _param_list(tokens: str | None, enum: Any) -> list[Any]:
    out: list[Any] = []
    for token in (tokens or "").split(","):
        if not token.strip():
            continue
        param = enum.parse(token)
        if param is not None and param not in out:
            out.append(param)
    return out


_SEARCH_MODES: dict[str, tuple[str, Any]] = {
    "search": ("search_params", SearchParam),
    "tv-search": ("tv_search_params", TvSearchParam),
    "movie-search": ("movie_search_params", MovieSearchParam),
    "music-search": ("music_search_params", MusicSearchParam),
    "audio-search": ("music_search_params", MusicSearchParam),
    "book-search": ("book_search_params", BookSearchParam),
}


def parse_caps(xml: bytes | str) -> TorznabCapabilities:
    """Parse a ``<caps>`` document.

    Unavailable modes end up with empty parameter lists; subcategories are
    flattened into the mapping table with their own ids.
    """
    root = _parse_document(xml)
    if _local(root.tag) != "caps":
        raise IndexerParseError(f"Expected <caps> document, got <{_local(root.tag)}>")

    caps = TorznabCapabilities(search_params=[])

    for elem in root:
        name = _local(elem.tag)
        if name == "limits":
            caps.limits_default = _int(elem.get("default")) or caps.limits_default
            caps.limits_max = _int(elem.get("max")) or caps.limits_max
        elif name == "searching":
            for mode in elem:
                target = _SEARCH_MODES.get(_local(mode.tag))
                if target is None or mode.get("available", "no") != "yes":
                    continue
                attr, enum = target
                params = _param_list(mode.get("supportedParams"), enum)
                if not params:
                    params = [enum.Q]
                setattr(caps, attr, params)
                if _local(mode.tag) == "search":
                    caps.supports_raw_search = mode.get("searchEngine") == "raw"
        elif name == "categories":
            for cat in elem:
                _add_category(caps, cat)
    return caps


def _add_category(caps: TorznabCapabilities, elem: etree._Element) -> None:
    if _local(elem.tag) not in ("category", "subcat"):
        return
    cat_id = _int(elem.get("id"))
    if cat_id is not None:
        caps.add_category(str(cat_id), cat_id, elem.get("name"))
    for sub in elem:
        _add_category(caps, sub)
