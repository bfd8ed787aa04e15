"""Tests for the aggregate search endpoints."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from xml.etree import ElementTree as ET

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from trawlarr.application.indexer_manager import IndexerManager
from trawlarr.domain.entities import NewIndexerConfig
from trawlarr.domain.indexers import IndexerRequestError
from trawlarr.infrastructure.config import AppConfig
from trawlarr.interfaces.api.search.router import router


def _make_app(manager: IndexerManager) -> FastAPI:
    app = FastAPI()
    app.include_router(router, prefix="/api/v1")
    app.state.manager = manager
    app.state.config = AppConfig()
    return app


@pytest.fixture()
def loaded(repository, encryption, fake_factory, fake_indexer, release_factory, memory_cache):
    """Manager with two loaded fakes: "Older" succeeds, "Broken" fails."""

    async def _setup() -> tuple[IndexerManager, str, str]:
        manager = IndexerManager(
            repository=repository,
            encryption=encryption,
            factory=fake_factory,
            cache=memory_cache,
        )
        good = await repository.create(
            NewIndexerConfig(user_id="u", indexer_type="fake", name="Older")
        )
        bad = await repository.create(
            NewIndexerConfig(user_id="u", indexer_type="fake", name="Broken")
        )
        fake_factory.backends[good.id] = fake_indexer(
            good.id,
            "Older",
            releases=[
                release_factory(
                    title="Iron.Man.2008.720p",
                    guid="old",
                    publish_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
                ),
                release_factory(
                    title="Iron.Man.2008.2160p",
                    guid="new",
                    publish_date=datetime(2025, 3, 1, tzinfo=timezone.utc),
                ),
            ],
        )
        fake_factory.backends[bad.id] = fake_indexer(
            bad.id, "Broken", error=IndexerRequestError("HTTP 503")
        )
        await manager.load_indexer(good.id)
        await manager.load_indexer(bad.id)
        return manager, good.id, bad.id

    return asyncio.run(_setup())


# ---------------------------------------------------------------------------
# RSS
# ---------------------------------------------------------------------------


class TestAggregateRss:
    def test_merged_feed(self, loaded) -> None:
        manager, good_id, _ = loaded
        client = TestClient(_make_app(manager))

        response = client.get("/api/v1/search?t=search&q=iron+man")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/rss+xml")
        channel = ET.fromstring(response.content).find("channel")
        assert channel.findtext("title") == "trawlarr"
        items = channel.findall("item")
        # Newest first; the failing indexer contributes nothing.
        assert [i.findtext("title") for i in items] == [
            "Iron.Man.2008.2160p",
            "Iron.Man.2008.720p",
        ]
        indexer = items[0].find("indexer")
        assert indexer.get("id") == good_id
        assert indexer.text == "Older"

    def test_limit_caps_merged_feed(self, loaded) -> None:
        manager, _, _ = loaded
        client = TestClient(_make_app(manager))

        response = client.get("/api/v1/search?q=iron&limit=1")

        items = ET.fromstring(response.content).findall("channel/item")
        assert [i.findtext("title") for i in items] == ["Iron.Man.2008.2160p"]

    def test_caps_rejected_in_band(self, loaded) -> None:
        manager, _, _ = loaded
        client = TestClient(_make_app(manager))

        response = client.get("/api/v1/search?t=caps")

        assert response.status_code == 200
        root = ET.fromstring(response.content)
        assert root.tag == "error"
        assert root.get("code") == "201"


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


class TestAggregateResults:
    def test_per_indexer_outcomes(self, loaded) -> None:
        manager, good_id, bad_id = loaded
        client = TestClient(_make_app(manager))

        response = client.get("/api/v1/search/results?t=search&q=iron")

        assert response.status_code == 200
        body = response.json()
        assert body["query"] == "iron"
        assert body["type"] == "search"
        assert body["total"] == 2
        assert body["failed"] == 1
        by_id = {r["indexer_id"]: r for r in body["results"]}
        assert by_id[good_id]["count"] == 2
        assert by_id[good_id]["error"] is None
        assert by_id[bad_id]["error"] == "HTTP 503"

    def test_indexer_selection(self, loaded) -> None:
        manager, good_id, _ = loaded
        client = TestClient(_make_app(manager))

        response = client.get(f"/api/v1/search/results?q=iron&indexers={good_id}")

        body = response.json()
        assert [r["indexer_id"] for r in body["results"]] == [good_id]
        assert body["failed"] == 0

    def test_repeat_is_served_from_cache(self, loaded) -> None:
        manager, good_id, _ = loaded
        client = TestClient(_make_app(manager))

        client.get(f"/api/v1/search/results?q=iron&indexers={good_id}")
        body = client.get(f"/api/v1/search/results?q=iron&indexers={good_id}").json()

        assert body["results"][0]["from_cache"] is True

    def test_bad_request(self, loaded) -> None:
        manager, _, _ = loaded
        client = TestClient(_make_app(manager))

        response = client.get("/api/v1/search/results?t=nonsense")

        assert response.status_code == 400
        assert response.json()["detail"] == "Unknown query type: nonsense"
