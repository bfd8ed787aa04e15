from .aggregate_search import AggregateSearchResponse, AggregateSearchUseCase
from .indexer_context import IndexerContext, LoadIndexerContextUseCase
from .indexer_test import IndexerTestOutcome, IndexerTestUseCase
from .torznab_caps import CapsResponse, TorznabCapsUseCase
from .torznab_search import SearchFeed, TorznabSearchUseCase

__all__ = [
    "AggregateSearchResponse",
    "AggregateSearchUseCase",
    "CapsResponse",
    "IndexerContext",
    "IndexerTestOutcome",
    "IndexerTestUseCase",
    "LoadIndexerContextUseCase",
    "SearchFeed",
    "TorznabCapsUseCase",
    "TorznabSearchUseCase",
]
