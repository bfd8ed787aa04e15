from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Iterator, Mapping

import structlog
import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

log = structlog.get_logger(__name__)

_SECTIONS = frozenset({"http", "logging", "cache", "indexers"})
_TOP_LEVEL = frozenset({"app_name", "environment", "encryption_key"})

# Flat names used by env vars and CLI flags, keyed to their section slot.
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_follow_redirects": ("http", "follow_redirects"),
    "http_user_agent": ("http", "user_agent"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "cache_backend": ("cache", "backend"),
    "cache_dir": ("cache", "dir"),
    "cache_search_ttl_seconds": ("cache", "search_ttl_seconds"),
    "definitions_dir": ("indexers", "definitions_dir"),
    "seed_file": ("indexers", "seed_file"),
    "default_user_id": ("indexers", "default_user_id"),
}


def _merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> None:
    """Nested mappings merge key by key; any other value replaces."""
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge_into(current, value)
        else:
            target[key] = value


def _sectioned(raw: Mapping[str, Any]) -> dict[str, Any]:
    """
    Bring one layer into the sectioned shape ``AppConfig`` validates.

    Section blocks (``cache: {...}``) pass through, top-level scalars are kept,
    and flat keys such as ``cache_backend`` are folded into their section.
    Anything unrecognised is dropped.
    """
    layer: dict[str, Any] = {
        name: dict(block)
        for name, block in raw.items()
        if name in _SECTIONS and isinstance(block, Mapping)
    }
    layer.update((name, raw[name]) for name in _TOP_LEVEL if name in raw)
    for flat, (section, slot) in _FLAT_KEYS.items():
        if flat in raw:
            layer.setdefault(section, {})[slot] = raw[flat]
    return layer


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open(encoding="utf-8") as fh:
        document = yaml.safe_load(fh)
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ValueError(
            f"Config YAML must be a mapping, got: {type(document).__name__}"
        )
    return document


def _layers(
    config_path: Path | None, cli_overrides: Mapping[str, Any]
) -> Iterator[tuple[str, Mapping[str, Any]]]:
    yield "defaults", deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        yield "yaml", _read_yaml(config_path)
    yield "env", EnvOverrides().to_update_dict()
    yield "cli", cli_overrides


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Build the validated config from defaults < YAML < env (+ .env) < CLI.

    Explicitly given files must exist. Nothing is written to disk here.
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        # Real environment variables win over .env entries.
        load_dotenv(dotenv_path, override=False)

    merged: dict[str, Any] = {}
    for name, raw in _layers(config_path, cli_overrides or {}):
        layer = _sectioned(raw)
        if layer and name != "defaults":
            log.debug("config_layer_applied", layer=name, keys=sorted(layer))
        _merge_into(merged, layer)

    return AppConfig.model_validate(merged)
