"""Torznab XML presenter.

Renders Torznab-compliant XML documents:
- error documents (``<error code=".." description=".."/>``)
- capabilities (``<caps>``)
- RSS 2.0 search feeds with ``torznab:attr`` elements
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Iterable
from xml.etree import ElementTree as ET

from trawlarr.domain.entities import (
    ReleaseInfo,
    TorznabCapabilities,
    TorznabError,
    category_name,
)

TORZNAB_NS = "http://torznab.com/schemas/2015/feed"
ATOM_NS = "http://www.w3.org/2005/Atom"

XML_MEDIA_TYPE = "application/xml"
RSS_MEDIA_TYPE = "application/rss+xml"


@dataclass(frozen=True)
class TorznabRendered:
    """Rendered Torznab XML response."""

    payload: bytes
    media_type: str = XML_MEDIA_TYPE


def _serialize(root: ET.Element) -> bytes:
    xml = ET.tostring(root, encoding="utf-8", xml_declaration=True)
    # ElementTree writes "<tag />"; Torznab clients expect "<tag/>".
    return xml.replace(b" />", b"/>")


def _number(value: float) -> str:
    """Compact float rendering: 0.0 -> "0", 1.0 -> "1", 0.123456789 kept whole."""
    return f"{value:.15g}"


def _rfc2822(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt)


def render_error_xml(code: int, description: str) -> TorznabRendered:
    root = ET.Element("error")
    root.set("code", str(int(code)))
    root.set("description", description)
    return TorznabRendered(_serialize(root))


def render_torznab_error(error: TorznabError) -> TorznabRendered:
    return render_error_xml(error.code, error.description)


def _supported_params(params: Iterable[object]) -> str:
    """``q`` first, then the variant's tokens in declaration order."""
    tokens = ["q"]
    for param in params:
        token = getattr(param, "value", str(param))
        if token not in tokens:
            tokens.append(token)
    return ",".join(tokens)


def _search_element(
    parent: ET.Element, tag: str, available: bool, params: Iterable[object]
) -> None:
    elem = ET.SubElement(parent, tag)
    elem.set("available", "yes" if available else "no")
    elem.set("supportedParams", _supported_params(params))


def render_caps_xml(server_title: str, caps: TorznabCapabilities) -> TorznabRendered:
    """Render a ``<caps>`` document.

    One ``<category>`` element is written per configured mapping; its name
    is the mapping's description, falling back to the standard category
    name.
    """
    root = ET.Element("caps")

    server = ET.SubElement(root, "server")
    server.set("title", server_title)

    limits = ET.SubElement(root, "limits")
    limits.set("default", str(caps.limits_default))
    limits.set("max", str(caps.limits_max))

    searching = ET.SubElement(root, "searching")
    _search_element(searching, "search", caps.search_available, [])
    _search_element(
        searching, "tv-search", caps.tv_search_available, caps.tv_search_params
    )
    _search_element(
        searching, "movie-search", caps.movie_search_available, caps.movie_search_params
    )
    _search_element(
        searching, "music-search", caps.music_search_available, caps.music_search_params
    )
    _search_element(
        searching, "book-search", caps.book_search_available, caps.book_search_params
    )

    categories = ET.SubElement(root, "categories")
    for mapping in caps.categories:
        elem = ET.SubElement(categories, "category")
        elem.set("id", str(mapping.torznab_cat))
        name = mapping.description or category_name(mapping.torznab_cat)
        if name:
            elem.set("name", name)

    return TorznabRendered(_serialize(root))


def _text(parent: ET.Element, tag: str, text: str) -> ET.Element:
    elem = ET.SubElement(parent, tag)
    elem.text = text
    return elem


def _attr(parent: ET.Element, name: str, value: str) -> None:
    elem = ET.SubElement(parent, "torznab:attr")
    elem.set("name", name)
    elem.set("value", value)


def _render_item(channel: ET.Element, release: ReleaseInfo) -> None:
    item = ET.SubElement(channel, "item")

    _text(item, "title", release.title)
    _text(item, "guid", release.guid)
    if release.indexer_id:
        indexer = _text(item, "indexer", release.indexer_name or release.indexer_id)
        indexer.set("id", release.indexer_id)
    if release.details:
        _text(item, "comments", release.details)
    _text(item, "pubDate", _rfc2822(release.publish_date))
    if release.size is not None:
        _text(item, "size", str(release.size))
    if release.description:
        _text(item, "description", release.description)

    link = release.download_url or ""
    _text(item, "link", link)

    for cat in release.categories:
        _text(item, "category", str(cat))

    if link:
        enclosure = ET.SubElement(item, "enclosure")
        enclosure.set("url", link)
        if release.size is not None:
            enclosure.set("length", str(release.size))
        enclosure.set("type", "application/x-bittorrent")

    for cat in release.categories:
        _attr(item, "category", str(cat))
    if release.seeders is not None:
        _attr(item, "seeders", str(release.seeders))
    if release.peers is not None:
        _attr(item, "peers", str(release.peers))
    if release.size is not None:
        _attr(item, "size", str(release.size))
    if release.files is not None:
        _attr(item, "files", str(release.files))
    if release.grabs is not None:
        _attr(item, "grabs", str(release.grabs))
    if release.imdb is not None:
        imdb = f"tt{release.imdb:07d}"
        _attr(item, "imdb", imdb)
        _attr(item, "imdbid", imdb)
    if release.tvdb_id is not None:
        _attr(item, "tvdbid", str(release.tvdb_id))
    if release.tmdb is not None:
        _attr(item, "tmdbid", str(release.tmdb))
    if release.info_hash:
        _attr(item, "infohash", release.info_hash)
    if release.magnet_uri:
        _attr(item, "magneturl", release.magnet_uri)
    if release.poster:
        _attr(item, "coverurl", release.poster)

    _attr(item, "downloadvolumefactor", _number(release.download_volume_factor))
    _attr(item, "uploadvolumefactor", _number(release.upload_volume_factor))

    if release.minimum_ratio is not None:
        _attr(item, "minimumratio", _number(release.minimum_ratio))
    if release.minimum_seed_time is not None:
        _attr(item, "minimumseedtime", str(release.minimum_seed_time))


def render_rss_xml(
    *,
    title: str,
    releases: Iterable[ReleaseInfo],
    description: str | None = None,
    link: str | None = None,
    self_link: str | None = None,
) -> TorznabRendered:
    """Render a Torznab RSS 2.0 feed.

    Args:
        title: Channel title (usually the indexer name).
        releases: Items in the order they should appear.
        description: Channel description.
        link: Channel link (indexer site).
        self_link: Request URL, emitted as ``<atom:link rel="self">``.
    """
    rss = ET.Element(
        "rss",
        attrib={
            "version": "2.0",
            "xmlns:atom": ATOM_NS,
            "xmlns:torznab": TORZNAB_NS,
        },
    )
    channel = ET.SubElement(rss, "channel")

    if self_link:
        atom_link = ET.SubElement(channel, "atom:link")
        atom_link.set("href", self_link)
        atom_link.set("rel", "self")
        atom_link.set("type", RSS_MEDIA_TYPE)

    _text(channel, "title", title)
    _text(channel, "description", description or title)
    _text(channel, "link", link or "")
    _text(channel, "language", "en-us")

    for release in releases:
        _render_item(channel, release)

    return TorznabRendered(_serialize(rss), media_type=RSS_MEDIA_TYPE)
