"""Pure domain models for YAML ("Cardigann") indexer definitions (framework-free)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CategoryMappingDefinition:
    """``{id, cat: "Family/Sub", desc}`` entry from ``caps.categorymappings``."""

    id: str
    cat: str
    desc: str | None = None
    default: bool = False


@dataclass(frozen=True)
class CapsDefinition:
    # Legacy shorthand: tracker id -> "Family/Sub"
    categories: dict[str, str] = field(default_factory=dict)
    categorymappings: list[CategoryMappingDefinition] = field(default_factory=list)
    # Mode name ("search", "tv-search", ...) -> parameter names
    modes: dict[str, list[str]] = field(default_factory=dict)
    allow_raw_search: bool = False


@dataclass(frozen=True)
class SettingsField:
    name: str
    type: str = "text"
    label: str | None = None
    default: Any = None
    options: dict[str, str] = field(default_factory=dict)

    @property
    def is_secret_or_text(self) -> bool:
        return self.type in ("text", "password")


@dataclass(frozen=True)
class FilterDefinition:
    name: str
    args: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class LoginTest:
    path: str | None = None
    selector: str | None = None


@dataclass(frozen=True)
class LoginBlock:
    path: str | None = None
    submitpath: str | None = None
    method: str | None = None
    form: str | None = None
    inputs: dict[str, str] = field(default_factory=dict)
    test: LoginTest | None = None


@dataclass(frozen=True)
class SearchPathDefinition:
    path: str
    categories: list[str] = field(default_factory=list)
    response_type: str | None = None


@dataclass(frozen=True)
class RowsDefinition:
    selector: str
    after: int = 0
    count_selector: str | None = None


@dataclass(frozen=True)
class FieldDefinition:
    selector: str | None = None
    text: str | None = None
    attribute: str | None = None
    optional: bool = False
    default: str | None = None
    filters: list[FilterDefinition] = field(default_factory=list)
    case: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SearchBlock:
    path: str | None = None
    paths: list[SearchPathDefinition] = field(default_factory=list)
    inputs: dict[str, str] = field(default_factory=dict)
    rows: RowsDefinition | None = None
    fields: dict[str, FieldDefinition] = field(default_factory=dict)


@dataclass(frozen=True)
class DownloadSelector:
    selector: str
    attribute: str | None = None
    filters: list[FilterDefinition] = field(default_factory=list)


@dataclass(frozen=True)
class DownloadBlock:
    selectors: list[DownloadSelector] = field(default_factory=list)
    method: str | None = None


@dataclass(frozen=True)
class IndexerDefinition:
    """A validated YAML indexer definition.

    Only the declarative parts (metadata, capabilities, settings) have
    runtime meaning; the login/search/download blocks are kept for a future
    template engine.
    """

    id: str
    name: str
    links: list[str]
    description: str = ""
    language: str = "en-US"
    type: str = "private"
    encoding: str | None = None
    request_delay: float | None = None
    replaces: list[str] = field(default_factory=list)
    legacylinks: list[str] = field(default_factory=list)
    caps: CapsDefinition = field(default_factory=CapsDefinition)
    settings: list[SettingsField] = field(default_factory=list)
    login: LoginBlock | None = None
    search: SearchBlock | None = None
    download: DownloadBlock | None = None

    @property
    def site_link(self) -> str:
        return self.links[0]
