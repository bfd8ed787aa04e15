"""Shared base class for httpx-based indexer backends.

Handles the client lifecycle, typed request errors and the descriptive
metadata every backend exposes. Backends inheriting from
``HttpxIndexerBase`` structurally satisfy ``IndexerProtocol``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from trawlarr.domain.entities import (
    ReleaseInfo,
    TorznabCapabilities,
    TorznabQuery,
    TrackerType,
)
from trawlarr.domain.indexers import IndexerRequestError, query_supported

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)
DEFAULT_CLIENT_TIMEOUT = 30.0


class HttpxIndexerBase:
    """Shared base for httpx-based backends.

    Subclasses **must** set ``indexer_type`` and override ``search``,
    ``test_connection`` and ``download``.
    """

    indexer_type: str = ""
    description: str = ""
    language: str = "en-US"
    tracker_type: TrackerType = TrackerType.PRIVATE

    def __init__(
        self,
        *,
        indexer_id: str,
        name: str,
        site_link: str,
        capabilities: TorznabCapabilities,
        settings: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        user_agent: str | None = None,
        timeout: float = DEFAULT_CLIENT_TIMEOUT,
        follow_redirects: bool = True,
    ) -> None:
        self.id = indexer_id
        self.name = name
        self.site_link = site_link
        self.capabilities = capabilities
        self.settings: dict[str, str] = dict(settings or {})
        self._headers: dict[str, str] = {"User-Agent": user_agent or DEFAULT_USER_AGENT}
        self._headers.update(headers or {})
        self._timeout = timeout
        self._follow_redirects = follow_redirects
        self._client: httpx.AsyncClient | None = None
        self._log = structlog.get_logger(__name__).bind(
            indexer_id=indexer_id, indexer_name=name
        )

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=self._follow_redirects,
                headers=self._headers,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get(
        self,
        url: str,
        *,
        params: Any = None,
        headers: Mapping[str, str] | None = None,
        context: str = "",
    ) -> httpx.Response:
        """GET ``url``; transport failures and non-2xx statuses raise
        ``IndexerRequestError``."""
        client = await self._ensure_client()
        try:
            resp = await client.get(url, params=params, headers=headers)
            resp.raise_for_status()
        except httpx.TimeoutException as e:
            self._log.warning("indexer_request_timeout", url=url, context=context)
            raise IndexerRequestError(f"Request timed out: {url}") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            self._log.warning(
                "indexer_http_error", url=url, status=status, context=context
            )
            raise IndexerRequestError(f"HTTP {status} from {url}") from e
        except httpx.HTTPError as e:
            self._log.warning(
                "indexer_request_failed", url=url, error=str(e), context=context
            )
            raise IndexerRequestError(f"Request failed: {e}") from e
        return resp

    # ------------------------------------------------------------------
    # Contract defaults
    # ------------------------------------------------------------------

    def is_configured(self) -> bool:
        return True

    def can_handle_query(self, query: TorznabQuery) -> bool:
        return query_supported(self.capabilities, query)

    def supports_pagination(self) -> bool:
        return True

    async def test_connection(self) -> bool:
        raise NotImplementedError(f"{type(self).__name__}.test_connection()")

    async def search(self, query: TorznabQuery) -> list[ReleaseInfo]:
        raise NotImplementedError(f"{type(self).__name__}.search()")

    async def download(self, link: str) -> bytes:
        raise NotImplementedError(f"{type(self).__name__}.download()")
