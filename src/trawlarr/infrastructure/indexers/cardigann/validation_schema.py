"""Pydantic validation models for YAML indexer definitions."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFINITION_ID_RE = r"^[a-z0-9][a-z0-9._-]*$"


def _stringify(value: Any) -> Any:
    # YAML happily yields ints for ids like `{id: 1}`
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class _Block(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CategoryMappingModel(_Block):
    id: str
    cat: str
    desc: Optional[str] = None
    default: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _validate_id(cls, v: Any) -> Any:
        return _stringify(v)


class CapsModel(_Block):
    categories: Dict[str, str] = Field(default_factory=dict)
    categorymappings: List[CategoryMappingModel] = Field(default_factory=list)
    modes: Dict[str, List[str]] = Field(default_factory=dict)
    allowrawsearch: bool = False

    @field_validator("categories", mode="before")
    @classmethod
    def _validate_categories(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(k): val for k, val in v.items()}
        return v

    @field_validator("modes", mode="before")
    @classmethod
    def _validate_modes(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(k): list(params or []) for k, params in v.items()}
        return v


class SettingsFieldModel(_Block):
    name: str = Field(..., min_length=1)
    type: str = "text"
    label: Optional[str] = None
    default: Any = None
    options: Dict[str, str] = Field(default_factory=dict)

    @field_validator("options", mode="before")
    @classmethod
    def _validate_options(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(k): str(val) for k, val in v.items()}
        return v


class FilterModel(_Block):
    name: str
    args: Any = None


class LoginTestModel(_Block):
    path: Optional[str] = None
    selector: Optional[str] = None


class LoginModel(_Block):
    path: Optional[str] = None
    submitpath: Optional[str] = None
    method: Optional[str] = None
    form: Optional[str] = None
    inputs: Dict[str, str] = Field(default_factory=dict)
    test: Optional[LoginTestModel] = None


class ResponseModel(_Block):
    type: Optional[str] = None


class SearchPathModel(_Block):
    path: str
    categories: List[str] = Field(default_factory=list)
    response: Optional[ResponseModel] = None

    @field_validator("categories", mode="before")
    @classmethod
    def _validate_categories(cls, v: Any) -> Any:
        if v is None:
            return []
        return [_stringify(c) for c in v]


class RowCountModel(_Block):
    selector: str


class RowsModel(_Block):
    selector: str
    after: int = 0
    count: Optional[RowCountModel] = None


class FieldModel(_Block):
    selector: Optional[str] = None
    text: Optional[str] = None
    attribute: Optional[str] = None
    optional: bool = False
    default: Optional[str] = None
    filters: List[FilterModel] = Field(default_factory=list)
    case: Dict[str, str] = Field(default_factory=dict)

    @field_validator("text", "default", mode="before")
    @classmethod
    def _validate_text(cls, v: Any) -> Any:
        return _stringify(v)


class SearchModel(_Block):
    path: Optional[str] = None
    paths: List[SearchPathModel] = Field(default_factory=list)
    inputs: Dict[str, str] = Field(default_factory=dict)
    rows: Optional[RowsModel] = None
    fields: Dict[str, FieldModel] = Field(default_factory=dict)

    @field_validator("inputs", mode="before")
    @classmethod
    def _validate_inputs(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(k): "" if val is None else str(val) for k, val in v.items()}
        return v


class DownloadSelectorModel(_Block):
    selector: str
    attribute: Optional[str] = None
    filters: List[FilterModel] = Field(default_factory=list)


class DownloadModel(_Block):
    selectors: List[DownloadSelectorModel] = Field(default_factory=list)
    method: Optional[str] = None


class IndexerDefinitionModel(_Block):
    """Top-level YAML document."""

    id: str = Field(..., pattern=DEFINITION_ID_RE)
    name: str = Field(..., min_length=1)
    description: str = ""
    language: str = "en-US"
    type: Literal["public", "semi-private", "private"] = "private"
    encoding: Optional[str] = None
    request_delay: Optional[float] = Field(default=None, alias="requestDelay")
    replaces: List[str] = Field(default_factory=list)
    links: List[str] = Field(..., min_length=1)
    legacylinks: List[str] = Field(default_factory=list)
    caps: CapsModel = Field(default_factory=CapsModel)
    settings: List[SettingsFieldModel] = Field(default_factory=list)
    login: Optional[LoginModel] = None
    search: Optional[SearchModel] = None
    download: Optional[DownloadModel] = None

    @field_validator("links", "legacylinks")
    @classmethod
    def _validate_links(cls, v: List[str]) -> List[str]:
        for link in v:
            if not link.startswith(("http://", "https://")):
                raise ValueError(f"link must be an http(s) URL: {link!r}")
        return v

    @field_validator("request_delay")
    @classmethod
    def _validate_request_delay(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("requestDelay must be >= 0")
        return v

    @model_validator(mode="after")
    def _validate_unique_settings(self) -> "IndexerDefinitionModel":
        names = [s.name for s in self.settings]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate setting names: {', '.join(duplicates)}")
        return self
