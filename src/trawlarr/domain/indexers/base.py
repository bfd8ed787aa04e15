"""The capability contract every indexer backend satisfies."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from trawlarr.domain.entities import (
    ReleaseInfo,
    TorznabCapabilities,
    TorznabQuery,
    TrackerType,
)


@runtime_checkable
class IndexerProtocol(Protocol):
    """A searchable indexer site.

    Backends are either native (hand-written per site) or YAML-defined.
    ``search`` returns an empty list for "no results" and raises only for
    transport, parse or authentication failures. ``download`` reuses the
    backend's own authentication so private-tracker links can be fetched.
    """

    @property
    def id(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def indexer_type(self) -> str: ...

    @property
    def site_link(self) -> str: ...

    @property
    def language(self) -> str: ...

    @property
    def tracker_type(self) -> TrackerType: ...

    @property
    def capabilities(self) -> TorznabCapabilities: ...

    def is_configured(self) -> bool: ...

    def can_handle_query(self, query: TorznabQuery) -> bool: ...

    def supports_pagination(self) -> bool: ...

    async def test_connection(self) -> bool: ...

    async def search(self, query: TorznabQuery) -> list[ReleaseInfo]: ...

    async def download(self, link: str) -> bytes: ...

    async def aclose(self) -> None: ...


def query_supported(capabilities: TorznabCapabilities, query: TorznabQuery) -> bool:
    """Default ``can_handle_query`` derived from declared capabilities."""
    if not capabilities.is_available(query.query_type):
        return False
    return capabilities.supports_categories(query.categories)
