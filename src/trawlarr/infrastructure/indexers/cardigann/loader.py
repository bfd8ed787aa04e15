from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from trawlarr.domain.indexers import DefinitionLoadError, DefinitionValidationError
from trawlarr.domain.indexers.definition_schema import IndexerDefinition
from trawlarr.infrastructure.indexers.cardigann.adapters import to_domain_definition
from trawlarr.infrastructure.indexers.cardigann.validation_schema import (
    IndexerDefinitionModel,
)

log = structlog.get_logger(__name__)


def parse_definition(data: Any) -> IndexerDefinition:
    """Validate an already-parsed YAML document, returning the domain model."""
    if data is None:
        raise DefinitionValidationError("YAML file is empty")
    if not isinstance(data, dict):
        raise DefinitionValidationError("YAML root must be a mapping/object")
    model = IndexerDefinitionModel.model_validate(data)
    return to_domain_definition(model)


def load_definition_text(text: str) -> IndexerDefinition:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DefinitionValidationError(str(e)) from e
    try:
        return parse_definition(data)
    except ValidationError as e:
        raise DefinitionValidationError(str(e)) from e


def load_definition(path: Path) -> IndexerDefinition:
    """Load and validate a YAML definition file, returning the domain model."""
    try:
        raw = path.read_text(encoding="utf-8")
        data = yaml.safe_load(raw)
        return parse_definition(data)
    except (OSError, UnicodeDecodeError) as e:
        log.error(
            "definition_load_failed",
            definition_file=str(path),
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise DefinitionLoadError(str(e)) from e
    except ValidationError as e:
        log.error(
            "definition_validation_failed",
            definition_file=str(path),
            error_type="ValidationError",
            error_details=e.errors(),
        )
        raise DefinitionValidationError(str(e)) from e
    except yaml.YAMLError as e:
        log.error(
            "definition_validation_failed",
            definition_file=str(path),
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise DefinitionValidationError(str(e)) from e
