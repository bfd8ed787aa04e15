"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "trawlarr",
    "environment": "dev",
    "http": {
        "timeout_seconds": 30.0,
        "follow_redirects": True,
        "user_agent": "Trawlarr/0.1.0",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "backend": "memory",
        "dir": "./.cache/trawlarr",
        "search_ttl_seconds": 300,
        "purge_interval_seconds": 60,
        "max_concurrent": 10,
    },
    "indexers": {
        "definitions_dir": "./definitions",
        "seed_file": None,
        "default_user_id": "default",
        "autoload": True,
        "max_concurrent_searches": 2,
    },
    "encryption_key": None,
}
