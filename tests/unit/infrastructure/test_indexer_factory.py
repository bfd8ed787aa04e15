"""Tests for IndexerFactory."""

from __future__ import annotations

from pathlib import Path

import pytest

from trawlarr.domain.entities import IndexerConfig
from trawlarr.domain.indexers import (
    DefinitionNotFoundError,
    MissingCredentialError,
    UnknownIndexerTypeError,
)
from trawlarr.infrastructure.indexers import (
    IndexerFactory,
    IPTorrentsIndexer,
    NewznabIndexer,
    normalize_credentials,
)
from trawlarr.infrastructure.indexers.cardigann import (
    CardigannIndexer,
    DefinitionRegistry,
)

DEFINITIONS_DIR = Path(__file__).resolve().parents[3] / "definitions"

KEYED_DEFINITION = """\
id: keyed
name: Keyed Tracker
links:
  - https://keyed.example/
caps:
  categorymappings:
    - {id: 1, cat: Movies/HD}
  modes:
    search: [q]
settings:
  - name: apikey
    type: text
    label: API key
"""


def _config(indexer_type: str, **kw) -> IndexerConfig:
    return IndexerConfig(
        id="3f2b8c1e-0000-4000-8000-000000000001",
        user_id="default",
        indexer_type=indexer_type,
        name=kw.pop("name", indexer_type.title()),
        **kw,
    )


class TestNormalizeCredentials:
    def test_aliases(self) -> None:
        assert normalize_credentials({"apikey": "k", "UserAgent": "ua"}) == {
            "api_key": "k",
            "user_agent": "ua",
        }

    def test_unknown_keys_kept(self) -> None:
        assert normalize_credentials({"rsskey": "x"}) == {"rsskey": "x"}


class TestIPTorrents:
    def test_builds_backend(self) -> None:
        indexer = IndexerFactory().create(
            _config("iptorrents", site_url="https://ipt.lol/"),
            {"cookie": "uid=1", "user_agent": "MyBrowser/1.0"},
            {"freeleech": "true"},
        )
        assert isinstance(indexer, IPTorrentsIndexer)
        assert indexer.id == "3f2b8c1e-0000-4000-8000-000000000001"
        assert indexer.site_link == "https://ipt.lol/"
        assert indexer.settings == {"freeleech": "true"}
        assert indexer.is_configured()

    def test_strict_requires_cookie(self) -> None:
        with pytest.raises(MissingCredentialError, match="Cookie is required"):
            IndexerFactory().create(_config("iptorrents"), {}, {}, strict=True)

    def test_lenient_without_cookie(self) -> None:
        indexer = IndexerFactory().create(_config("iptorrents"), {}, {}, strict=False)
        assert not indexer.is_configured()


class TestNewznab:
    def test_builds_from_site_url(self) -> None:
        indexer = IndexerFactory().create(
            _config("newznab", site_url="https://nzb.example"), {"apikey": "k"}, {}
        )
        assert isinstance(indexer, NewznabIndexer)
        assert indexer.api_url == "https://nzb.example"

    def test_api_url_setting_wins(self) -> None:
        indexer = IndexerFactory().create(
            _config("newznab", site_url="https://nzb.example"),
            {"api_key": "k"},
            {"api_url": "https://api.nzb.example/"},
        )
        assert indexer.api_url == "https://api.nzb.example"

    def test_requires_api_url_even_when_lenient(self) -> None:
        with pytest.raises(MissingCredentialError, match="API URL is required"):
            IndexerFactory().create(_config("newznab"), {"apikey": "k"}, {}, strict=False)

    def test_requires_api_key(self) -> None:
        with pytest.raises(MissingCredentialError, match="API key is required"):
            IndexerFactory().create(
                _config("newznab", site_url="https://nzb.example"), {}, {}
            )


class TestCardigann:
    def test_builds_from_registry(self) -> None:
        factory = IndexerFactory(DefinitionRegistry(DEFINITIONS_DIR))
        indexer = factory.create(
            _config("cardigann", definition_id="example-tracker", name="Example"),
            {"username": "u", "password": "p"},
            {},
        )
        assert isinstance(indexer, CardigannIndexer)
        assert indexer.name == "Example"
        assert indexer.is_configured()

    def test_missing_definition_id(self) -> None:
        factory = IndexerFactory(DefinitionRegistry(DEFINITIONS_DIR))
        with pytest.raises(DefinitionNotFoundError, match="has no definition_id"):
            factory.create(_config("cardigann"), {}, {})

    def test_no_registry(self) -> None:
        with pytest.raises(DefinitionNotFoundError, match="No definitions directory"):
            IndexerFactory().create(
                _config("cardigann", definition_id="example-tracker"), {}, {}
            )

    @pytest.mark.parametrize("stored_as", ["apikey", "api_key", "ApiKey"])
    def test_setting_named_like_a_credential_alias(
        self, tmp_path: Path, stored_as: str
    ) -> None:
        (tmp_path / "keyed.yml").write_text(KEYED_DEFINITION, encoding="utf-8")
        factory = IndexerFactory(DefinitionRegistry(tmp_path))

        indexer = factory.create(
            _config("cardigann", definition_id="keyed"),
            {stored_as: "secret"},
            {},
            strict=False,
        )

        assert indexer.is_configured()
        assert indexer.credential("apikey") == "secret"

    def test_setting_without_credential(self, tmp_path: Path) -> None:
        (tmp_path / "keyed.yml").write_text(KEYED_DEFINITION, encoding="utf-8")
        factory = IndexerFactory(DefinitionRegistry(tmp_path))

        indexer = factory.create(
            _config("cardigann", definition_id="keyed"), {"cookie": "x"}, {}, strict=False
        )

        assert not indexer.is_configured()

    def test_unknown_definition(self, tmp_path: Path) -> None:
        factory = IndexerFactory(DefinitionRegistry(tmp_path))
        with pytest.raises(DefinitionNotFoundError, match="'ghost' not found"):
            factory.create(_config("cardigann", definition_id="ghost"), {}, {})


class TestUnknownType:
    def test_raises(self) -> None:
        factory = IndexerFactory()
        assert not factory.supports("rarbg")
        with pytest.raises(UnknownIndexerTypeError, match="rarbg"):
            factory.create(_config("rarbg"), {}, {})
