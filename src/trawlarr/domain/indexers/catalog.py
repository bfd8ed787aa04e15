"""Catalog of indexer types that can be configured."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from trawlarr.domain.entities import TrackerType

IPTORRENTS = "iptorrents"
NEWZNAB = "newznab"
CARDIGANN = "cardigann"


class SettingType(str, Enum):
    TEXT = "text"
    PASSWORD = "password"
    CHECKBOX = "checkbox"
    SELECT = "select"


class CredentialType(str, Enum):
    COOKIE = "cookie"
    USER_AGENT = "user_agent"
    API_KEY = "api_key"
    USERNAME = "username"
    PASSWORD = "password"
    PASSKEY = "passkey"
    TWO_FACTOR_TOKEN = "2fa_token"

    @classmethod
    def parse(cls, value: str) -> CredentialType | None:
        return _CREDENTIAL_ALIASES.get(value.strip().lower())


_CREDENTIAL_ALIASES: dict[str, CredentialType] = {
    "cookie": CredentialType.COOKIE,
    "user_agent": CredentialType.USER_AGENT,
    "useragent": CredentialType.USER_AGENT,
    "api_key": CredentialType.API_KEY,
    "apikey": CredentialType.API_KEY,
    "username": CredentialType.USERNAME,
    "password": CredentialType.PASSWORD,
    "passkey": CredentialType.PASSKEY,
    "2fa_token": CredentialType.TWO_FACTOR_TOKEN,
    "2fa": CredentialType.TWO_FACTOR_TOKEN,
    "twofa": CredentialType.TWO_FACTOR_TOKEN,
}


@dataclass(frozen=True)
class SettingDefinition:
    key: str
    label: str
    setting_type: SettingType
    default: str | None = None
    options: list[tuple[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class IndexerTypeInfo:
    id: str
    name: str
    description: str
    tracker_type: TrackerType
    language: str
    site_link: str
    required_credentials: list[CredentialType] = field(default_factory=list)
    optional_settings: list[SettingDefinition] = field(default_factory=list)
    is_native: bool = True


AVAILABLE_INDEXERS: tuple[IndexerTypeInfo, ...] = (
    IndexerTypeInfo(
        id=IPTORRENTS,
        name="IPTorrents",
        description="IPTorrents is a Private site. Always a step ahead.",
        tracker_type=TrackerType.PRIVATE,
        language="en-US",
        site_link="https://iptorrents.com/",
        required_credentials=[CredentialType.COOKIE, CredentialType.USER_AGENT],
        optional_settings=[
            SettingDefinition(
                key="freeleech",
                label="Search freeleech only",
                setting_type=SettingType.CHECKBOX,
                default="false",
            ),
            SettingDefinition(
                key="sort",
                label="Sort requested from site",
                setting_type=SettingType.SELECT,
                default="time",
                options=[
                    ("time", "Created"),
                    ("size", "Size"),
                    ("seeders", "Seeders"),
                    ("name", "Title"),
                ],
            ),
        ],
    ),
    IndexerTypeInfo(
        id=NEWZNAB,
        name="Newznab",
        description="Generic Newznab/Torznab API indexer",
        tracker_type=TrackerType.PRIVATE,
        language="en-US",
        site_link="",
        required_credentials=[CredentialType.API_KEY],
        optional_settings=[
            SettingDefinition(
                key="api_url",
                label="API URL",
                setting_type=SettingType.TEXT,
            ),
        ],
    ),
)


def get_indexer_info(indexer_type: str) -> IndexerTypeInfo | None:
    for info in AVAILABLE_INDEXERS:
        if info.id == indexer_type:
            return info
    return None
