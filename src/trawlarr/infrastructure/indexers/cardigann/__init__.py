from .categories import parse_category_string
from .indexer import ENGINE_NOT_IMPLEMENTED, CardigannIndexer, build_capabilities
from .loader import load_definition, load_definition_text
from .registry import DefinitionRegistry

__all__ = [
    "ENGINE_NOT_IMPLEMENTED",
    "CardigannIndexer",
    "DefinitionRegistry",
    "build_capabilities",
    "load_definition",
    "load_definition_text",
    "parse_category_string",
]
