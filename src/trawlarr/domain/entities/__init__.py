from .categories import (
    TORZNAB_CATEGORIES,
    Cats,
    TorznabCategory,
    category_name,
    expand_categories,
    get_category,
    get_parent_category,
    get_subcategories,
)
from .indexer_config import (
    IndexerConfig,
    IndexerCredential,
    IndexerSetting,
    NewIndexerConfig,
)
from .torznab import (
    BookSearchParam,
    CategoryMapping,
    IndexerSearchResult,
    MovieSearchParam,
    MusicSearchParam,
    QueryType,
    ReleaseInfo,
    SearchParam,
    TorznabApiError,
    TorznabBadRequestError,
    TorznabCapabilities,
    TorznabError,
    TorznabErrorCode,
    TorznabInternalError,
    TorznabQuery,
    TrackerType,
    TvSearchParam,
)

__all__ = [
    "TORZNAB_CATEGORIES",
    "BookSearchParam",
    "CategoryMapping",
    "Cats",
    "IndexerConfig",
    "IndexerCredential",
    "IndexerSearchResult",
    "IndexerSetting",
    "MovieSearchParam",
    "MusicSearchParam",
    "NewIndexerConfig",
    "QueryType",
    "ReleaseInfo",
    "SearchParam",
    "TorznabApiError",
    "TorznabBadRequestError",
    "TorznabCapabilities",
    "TorznabCategory",
    "TorznabError",
    "TorznabErrorCode",
    "TorznabInternalError",
    "TorznabQuery",
    "TrackerType",
    "TvSearchParam",
    "category_name",
    "expand_categories",
    "get_category",
    "get_parent_category",
    "get_subcategories",
]
