from __future__ import annotations

from .feed_parser import parse_caps, parse_rss
from .presenter import (
    RSS_MEDIA_TYPE,
    XML_MEDIA_TYPE,
    TorznabRendered,
    render_caps_xml,
    render_error_xml,
    render_rss_xml,
    render_torznab_error,
)
from .request import TorznabRequest, parse_torznab_request

__all__ = [
    "RSS_MEDIA_TYPE",
    "XML_MEDIA_TYPE",
    "TorznabRendered",
    "TorznabRequest",
    "parse_caps",
    "parse_rss",
    "parse_torznab_request",
    "render_caps_xml",
    "render_error_xml",
    "render_rss_xml",
    "render_torznab_error",
]
