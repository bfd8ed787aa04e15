"""Builds indexer backends from persisted configuration."""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from trawlarr.domain.entities import IndexerConfig
from trawlarr.domain.indexers import (
    DefinitionNotFoundError,
    IndexerProtocol,
    MissingCredentialError,
    UnknownIndexerTypeError,
)
from trawlarr.domain.indexers.catalog import (
    CARDIGANN,
    IPTORRENTS,
    NEWZNAB,
    CredentialType,
)
from trawlarr.infrastructure.indexers.cardigann import (
    CardigannIndexer,
    DefinitionRegistry,
)
from trawlarr.infrastructure.indexers.httpx_base import DEFAULT_CLIENT_TIMEOUT
from trawlarr.infrastructure.indexers.iptorrents import IPTorrentsIndexer
from trawlarr.infrastructure.indexers.newznab import NewznabIndexer

log = structlog.get_logger(__name__)

SUPPORTED_TYPES = frozenset({IPTORRENTS, NEWZNAB, CARDIGANN})


def normalize_credentials(credentials: Mapping[str, str]) -> dict[str, str]:
    """Key credentials by canonical type (``apikey`` -> ``api_key``)."""
    out: dict[str, str] = {}
    for key, value in credentials.items():
        ctype = CredentialType.parse(key)
        out[ctype.value if ctype is not None else key] = value
    return out


class IndexerFactory:
    """Implements ``IndexerFactoryPort`` for the built-in backend types.

    Newznab backends cannot exist without an endpoint and key, so those
    are required regardless of ``strict``. ``strict`` governs the IPTorrents
    cookie: a lenient build logs a warning and yields an unconfigured
    backend.
    """

    def __init__(
        self,
        definitions: DefinitionRegistry | None = None,
        *,
        user_agent: str | None = None,
        timeout: float = DEFAULT_CLIENT_TIMEOUT,
    ) -> None:
        self._definitions = definitions
        self._user_agent = user_agent
        self._timeout = timeout

    def supports(self, indexer_type: str) -> bool:
        return indexer_type in SUPPORTED_TYPES

    def create(
        self,
        config: IndexerConfig,
        credentials: Mapping[str, str],
        settings: Mapping[str, str],
        *,
        strict: bool = True,
    ) -> IndexerProtocol:
        creds = normalize_credentials(credentials)
        indexer_type = config.indexer_type

        if indexer_type == IPTORRENTS:
            return self._iptorrents(config, creds, settings, strict=strict)
        if indexer_type == NEWZNAB:
            return self._newznab(config, creds, settings)
        if indexer_type == CARDIGANN:
            # Definitions name their own settings; keep the stored keys.
            return self._cardigann(config, credentials, settings)

        raise UnknownIndexerTypeError(indexer_type)

    def _iptorrents(
        self,
        config: IndexerConfig,
        creds: dict[str, str],
        settings: Mapping[str, str],
        *,
        strict: bool,
    ) -> IPTorrentsIndexer:
        cookie = creds.get(CredentialType.COOKIE.value, "")
        if not cookie and strict:
            raise MissingCredentialError("Cookie is required for IPTorrents")
        # The session cookie is bound to the browser that created it,
        # so only the user's own user agent is meaningful here.
        return IPTorrentsIndexer(
            indexer_id=config.id,
            name=config.name,
            cookie=cookie,
            user_agent=creds.get(CredentialType.USER_AGENT.value) or None,
            site_url=config.site_url,
            settings=settings,
            timeout=self._timeout,
        )

    def _newznab(
        self,
        config: IndexerConfig,
        creds: dict[str, str],
        settings: Mapping[str, str],
    ) -> NewznabIndexer:
        api_url = settings.get("api_url") or config.site_url
        if not api_url:
            raise MissingCredentialError("API URL is required for Newznab indexer")
        api_key = creds.get(CredentialType.API_KEY.value)
        if not api_key:
            raise MissingCredentialError("API key is required for Newznab indexer")
        return NewznabIndexer(
            indexer_id=config.id,
            name=config.name,
            api_url=api_url,
            api_key=api_key,
            user_agent=creds.get(CredentialType.USER_AGENT.value) or self._user_agent,
            settings=settings,
            timeout=self._timeout,
        )

    def _cardigann(
        self,
        config: IndexerConfig,
        credentials: Mapping[str, str],
        settings: Mapping[str, str],
    ) -> CardigannIndexer:
        if not config.definition_id:
            raise DefinitionNotFoundError(
                f"Indexer '{config.name}' has no definition_id"
            )
        if self._definitions is None:
            raise DefinitionNotFoundError("No definitions directory configured")

        definition = self._definitions.get(config.definition_id)
        user_agent = normalize_credentials(credentials).get(CredentialType.USER_AGENT.value)
        backend = CardigannIndexer(
            indexer_id=config.id,
            definition=definition,
            credentials=credentials,
            settings=settings,
            name=config.name,
            site_url=config.site_url,
            user_agent=user_agent or self._user_agent,
            timeout=self._timeout,
        )
        if not backend.is_configured():
            log.warning(
                "cardigann_settings_incomplete",
                indexer_id=config.id,
                definition_id=definition.id,
            )
        return backend
