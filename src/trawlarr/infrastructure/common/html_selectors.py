"""CSS-selector-based HTML extraction with fallback chains.

Every helper accepts a primary selector and optional fallbacks; the first
selector that yields a match wins, so scrapers survive minor layout changes
(extra wrapper ``<div>``, renamed CSS class, ...).
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (lxml parser)."""
    return BeautifulSoup(html, "lxml")


def select_items(
    root: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
) -> list[Tag]:
    """Results of the first selector that matches at least one element."""
    for sel in (selector, *fallback_selectors):
        items = root.select(sel)
        if items:
            return items
    return []


def select_first(
    root: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
) -> Tag | None:
    for sel in (selector, *fallback_selectors):
        match = root.select_one(sel)
        if match is not None:
            return match
    return None


def extract_text(
    element: Tag,
    selector: str,
    *fallback_selectors: str,
    default: str = "",
) -> str:
    """Text of the first matching child element.

    With ``selector=""`` the element's own text is returned.
    """
    if selector == "":
        return element.get_text(strip=True) or default
    match = select_first(element, selector, *fallback_selectors)
    if match is None:
        return default
    return match.get_text(strip=True) or default


def href_of(tag: Tag) -> str:
    value = tag.get("href")
    return str(value) if value else ""
