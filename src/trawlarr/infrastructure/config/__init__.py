from __future__ import annotations

from .load import load_config
from .schema import AppConfig, CacheConfig, EnvOverrides, IndexersConfig

__all__ = ["AppConfig", "CacheConfig", "EnvOverrides", "IndexersConfig", "load_config"]
