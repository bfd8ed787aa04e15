"""Tests for the per-indexer Torznab endpoint."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch
from xml.etree import ElementTree as ET

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from trawlarr.domain.entities import IndexerConfig, IndexerCredential, NewIndexerConfig
from trawlarr.infrastructure.persistence import InMemoryIndexerRepository
from trawlarr.interfaces.api.torznab.router import router

TORZNAB_NS = "{http://torznab.com/schemas/2015/feed}"


def _make_app(repository, factory) -> FastAPI:
    app = FastAPI()
    app.include_router(router)
    app.state.repository = repository
    app.state.factory = factory
    return app


def _create(repository: InMemoryIndexerRepository, **kw) -> IndexerConfig:
    params = {"user_id": "default", "indexer_type": "fake", "name": "Fake Tracker"}
    params.update(kw)
    return asyncio.run(repository.create(NewIndexerConfig(**params)))


@pytest.fixture()
def client(repository, fake_factory) -> TestClient:
    return TestClient(_make_app(repository, fake_factory))


def _error(response) -> tuple[str, str]:
    root = ET.fromstring(response.content)
    assert root.tag == "error"
    return root.get("code"), root.get("description")


# ---------------------------------------------------------------------------
# Error documents
# ---------------------------------------------------------------------------


class TestTorznabErrors:
    def test_invalid_id(self, client: TestClient) -> None:
        response = client.get("/torznab/not-a-uuid/api?t=caps")
        assert response.status_code == 200
        assert response.content.endswith(
            b'<error code="201" description="Invalid indexer ID"/>'
        )

    def test_unknown_config(self, client: TestClient) -> None:
        response = client.get(
            "/torznab/3f2b8c1e-0000-4000-8000-000000000001/api?t=caps"
        )
        assert response.status_code == 200
        assert _error(response) == ("201", "Indexer not found")

    def test_unknown_function(self, client: TestClient, repository) -> None:
        config = _create(repository)
        response = client.get(f"/torznab/{config.id}/api?t=bogus")
        assert response.status_code == 200
        assert _error(response) == ("201", "Unknown query type: bogus")

    def test_unsupported_type(self, client: TestClient, repository) -> None:
        config = _create(repository, indexer_type="rarbg")
        response = client.get(f"/torznab/{config.id}/api?t=caps")
        code, description = _error(response)
        assert code == "201"
        assert "Unsupported indexer type" in description

    def test_backend_failure(
        self, client: TestClient, repository, fake_factory, fake_indexer
    ) -> None:
        config = _create(repository)
        fake_factory.backends[config.id] = fake_indexer(
            config.id, error=RuntimeError("tracker down")
        )

        response = client.get(f"/torznab/{config.id}/api?t=search&q=x")

        assert response.status_code == 200
        assert _error(response) == ("900", "tracker down")
        stored = asyncio.run(repository.get(config.id))
        assert stored.error_count == 1
        assert stored.last_error == "tracker down"

    @patch("trawlarr.interfaces.api.torznab.router.TorznabSearchUseCase")
    def test_unexpected_exception(
        self, mock_uc_cls, client: TestClient, repository
    ) -> None:
        mock_instance = AsyncMock()
        mock_instance.execute.side_effect = ValueError("boom")
        mock_uc_cls.return_value = mock_instance
        config = _create(repository)

        response = client.get(f"/torznab/{config.id}?t=search&q=x")

        assert response.status_code == 200
        assert _error(response) == ("900", "boom")


# ---------------------------------------------------------------------------
# caps / search
# ---------------------------------------------------------------------------


class TestTorznabCaps:
    def test_caps_document(self, client: TestClient, repository) -> None:
        config = _create(repository)

        response = client.get(f"/torznab/{config.id}/api?t=caps")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        root = ET.fromstring(response.content)
        assert root.tag == "caps"
        assert root.find("server").get("title") == "Fake Tracker"
        tv = root.find("searching/tv-search")
        assert tv.get("available") == "yes"
        assert tv.get("supportedParams") == "q,season,ep"
        assert [c.get("id") for c in root.findall("categories/category")] == [
            "2040",
            "5040",
        ]

    def test_caps_builds_lenient_backend(
        self, client: TestClient, repository, fake_factory
    ) -> None:
        config = _create(repository)
        client.get(f"/torznab/{config.id}/api?t=caps")
        [(_, _, _, strict)] = fake_factory.calls
        assert strict is False


class TestTorznabSearch:
    def test_search_feed(
        self, client: TestClient, repository, fake_factory, fake_indexer
    ) -> None:
        config = _create(repository)
        backend = fake_indexer(config.id, "Fake Tracker")
        fake_factory.backends[config.id] = backend

        response = client.get(
            f"/torznab/{config.id}/api?t=tvsearch&q=The+Expanse&season=1&ep=2&cat=5040"
            "&apikey=secret"
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/rss+xml")
        root = ET.fromstring(response.content)
        channel = root.find("channel")
        assert channel.findtext("title") == "Fake Tracker"
        [item] = channel.findall("item")
        assert item.findtext("title") == "Iron.Man.2008.1080p.BluRay.x264"
        attrs = {
            a.get("name"): a.get("value") for a in item.findall(f"{TORZNAB_NS}attr")
        }
        assert attrs["seeders"] == "10"
        assert attrs["downloadvolumefactor"] == "1"

        atom = channel.find("{http://www.w3.org/2005/Atom}link")
        assert "apikey" not in atom.get("href")

        [query] = backend.search_calls
        assert query.search_term == "The Expanse"
        assert query.season == 1
        assert query.episode == "2"
        assert query.categories == frozenset({5040})
        assert backend.closed

    def test_missing_t_is_search(
        self, client: TestClient, repository, fake_factory, fake_indexer
    ) -> None:
        config = _create(repository)
        backend = fake_indexer(config.id)
        fake_factory.backends[config.id] = backend

        response = client.get(f"/torznab/{config.id}?q=iron")

        assert ET.fromstring(response.content).tag == "rss"
        assert backend.search_calls[0].search_term == "iron"

    def test_success_recorded(self, client: TestClient, repository) -> None:
        config = _create(repository)
        asyncio.run(repository.record_error(config.id, "earlier failure"))

        client.get(f"/torznab/{config.id}/api?t=search&q=x")

        stored = asyncio.run(repository.get(config.id))
        assert stored.error_count == 0
        assert stored.last_success_at is not None

    def test_credentials_decrypted_for_backend(
        self, client: TestClient, repository, fake_factory, encryption
    ) -> None:
        config = _create(repository)
        ciphertext, nonce = encryption.encrypt("uid=1; pass=x")
        asyncio.run(
            repository.upsert_credential(
                config.id, IndexerCredential("cookie", ciphertext, nonce)
            )
        )
        asyncio.run(repository.upsert_setting(config.id, "sort", "size"))

        client.get(f"/torznab/{config.id}/api?t=search&q=x")

        [(_, credentials, settings, _)] = fake_factory.calls
        assert credentials == {"cookie": "uid=1; pass=x"}
        assert settings == {"sort": "size"}
