"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
CacheBackendName = Literal["memory", "diskcache"]


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class CacheConfig(BaseModel):
    """Search result cache configuration."""

    backend: CacheBackendName = Field(
        default="memory",
        description="Cache backend: 'memory' (process-local) or 'diskcache' (SQLite)",
    )
    directory: Path = Field(
        default=Path("./.cache/trawlarr"),
        validation_alias=AliasChoices("dir", "directory"),
        description="Diskcache SQLite DB path (only when backend=diskcache)",
    )
    search_ttl_seconds: int = Field(
        default=300,
        description="TTL for cached search results (seconds). 0 = disabled.",
    )
    purge_interval_seconds: float = Field(
        default=60.0,
        description="How often expired entries are evicted (seconds). 0 = never.",
    )
    max_concurrent: int = Field(
        default=10,
        description="Max parallel diskcache ops (semaphore limit)",
    )

    @field_validator("directory", mode="before")
    @classmethod
    def _validate_directory(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("search_ttl_seconds")
    @classmethod
    def _validate_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("search_ttl_seconds must be >= 0")
        return v


class IndexersConfig(BaseModel):
    """Indexer loading configuration."""

    definitions_dir: Path = Field(
        default=Path("./definitions"),
        description="Directory containing YAML indexer definitions.",
    )
    seed_file: Optional[Path] = Field(
        default=None,
        description="YAML file with indexer configurations to import at startup.",
    )
    default_user_id: str = Field(
        default="default",
        description="User whose enabled indexers are loaded at startup.",
    )
    autoload: bool = Field(
        default=True,
        description="Load the default user's enabled indexers at startup.",
    )
    max_concurrent_searches: int = Field(
        default=2,
        description="Concurrent outstanding searches allowed per indexer.",
    )

    @field_validator("definitions_dir", mode="before")
    @classmethod
    def _validate_definitions_dir(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("seed_file", mode="before")
    @classmethod
    def _validate_seed_file(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return _normalize_path(v)

    @field_validator("max_concurrent_searches")
    @classmethod
    def _validate_max_concurrent(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_concurrent_searches must be >= 1")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/cache/indexers).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="trawlarr", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="HTTP timeout in seconds for indexer requests.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP clients follow redirects.",
    )
    http_user_agent: str = Field(
        default="Trawlarr/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="Default User-Agent when an indexer has none configured.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    cache: CacheConfig = Field(default_factory=CacheConfig)
    indexers: IndexersConfig = Field(default_factory=IndexersConfig)

    encryption_key: Optional[str] = Field(
        default=None,
        description="Base64 credential encryption key. Generated per process if unset.",
    )

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "cache": {
                "backend": self.cache.backend,
                "dir": str(self.cache.directory),
                "search_ttl_seconds": self.cache.search_ttl_seconds,
                "purge_interval_seconds": self.cache.purge_interval_seconds,
                "max_concurrent": self.cache.max_concurrent,
            },
            "indexers": {
                "definitions_dir": str(self.indexers.definitions_dir),
                "seed_file": str(self.indexers.seed_file)
                if self.indexers.seed_file
                else None,
                "default_user_id": self.indexers.default_user_id,
                "autoload": self.indexers.autoload,
                "max_concurrent_searches": self.indexers.max_concurrent_searches,
            },
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read TRAWLARR_* variables, converts
    them to a dict of set values, merges into YAML/defaults, then validates
    AppConfig.

    Supported env var examples (flat, explicit):
    - TRAWLARR_LOG_LEVEL
    - TRAWLARR_CACHE_BACKEND
    - TRAWLARR_DEFINITIONS_DIR
    - TRAWLARR_ENCRYPTION_KEY
    """

    model_config = SettingsConfigDict(
        env_prefix="TRAWLARR_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_backend: Optional[CacheBackendName] = None
    cache_dir: Optional[Path] = None
    cache_search_ttl_seconds: Optional[int] = None

    definitions_dir: Optional[Path] = None
    seed_file: Optional[Path] = None
    default_user_id: Optional[str] = None

    encryption_key: Optional[str] = None

    @field_validator("cache_dir", "definitions_dir", "seed_file", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
