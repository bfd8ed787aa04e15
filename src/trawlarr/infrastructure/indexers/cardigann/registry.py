"""Definition registry with lazy loading and in-memory caching."""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml

from trawlarr.domain.indexers import DefinitionError, DefinitionNotFoundError
from trawlarr.domain.indexers.definition_schema import IndexerDefinition

from .loader import load_definition

log = structlog.get_logger(__name__)


class DefinitionRegistry:
    """
    Lazy-loading registry of YAML indexer definitions.

    discover():
      - indexes files only, reading just the top-level ``id``

    get()/list_definitions():
      - parse and validate on demand and cache results
    """

    def __init__(self, definitions_dir: Path) -> None:
        self._definitions_dir = definitions_dir
        self._discovered: bool = False
        self._paths: dict[str, Path] = {}
        self._cache: dict[str, IndexerDefinition] = {}

    @property
    def definitions_dir(self) -> Path:
        return self._definitions_dir

    def discover(self) -> None:
        if self._discovered:
            return

        self._discovered = True
        self._paths = {}

        if not self._definitions_dir.is_dir():
            log.warning(
                "definitions_directory_not_found",
                directory=str(self._definitions_dir),
            )
            return

        for path in sorted(self._definitions_dir.iterdir(), key=lambda p: p.name):
            if path.is_dir() or path.suffix.lower() not in {".yaml", ".yml"}:
                continue
            definition_id = self._peek_id(path)
            if definition_id is None:
                log.warning("definition_without_id", definition_file=str(path))
                continue
            if definition_id in self._paths:
                log.warning(
                    "definition_duplicate_id",
                    definition_id=definition_id,
                    definition_file=str(path),
                    kept=str(self._paths[definition_id]),
                )
                continue
            self._paths[definition_id] = path

        log.info(
            "definitions_discovered",
            count=len(self._paths),
            directory=str(self._definitions_dir),
        )

    def register(self, definition: IndexerDefinition) -> None:
        """Add an in-memory definition (takes precedence over files)."""
        self._cache[definition.id] = definition

    def list_ids(self) -> list[str]:
        self.discover()
        return sorted(set(self._paths) | set(self._cache))

    def get(self, definition_id: str) -> IndexerDefinition:
        self.discover()

        cached = self._cache.get(definition_id)
        if cached is not None:
            return cached

        path = self._paths.get(definition_id)
        if path is None:
            raise DefinitionNotFoundError(f"Definition '{definition_id}' not found")

        definition = load_definition(path)
        self._cache[definition_id] = definition
        log.info("definition_loaded", definition_id=definition_id)
        return definition

    def list_definitions(self) -> list[IndexerDefinition]:
        """Every definition that loads cleanly; broken files are logged and skipped."""
        out: list[IndexerDefinition] = []
        for definition_id in self.list_ids():
            try:
                out.append(self.get(definition_id))
            except DefinitionError:
                continue
        return out

    def _peek_id(self, path: Path) -> str | None:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError):
            return None
        if not isinstance(data, dict):
            return None
        value = data.get("id")
        return value if isinstance(value, str) and value.strip() else None
