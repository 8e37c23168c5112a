from .listing import Listing, ListingStatus, PLACEHOLDER_TITLE
from .search import (
    BackfillResult,
    ProductSearchResponse,
    ProductSearchResult,
    RagSearchResponse,
    RagSearchResult,
    RankedListing,
)
from .vector_index import (
    ENTRY_SEPARATOR,
    ChunkContext,
    VectorEntryHandle,
    VectorNamespace,
    VectorSearchEntry,
    VectorSearchHit,
    VectorSearchResponse,
)

__all__ = [
    "Listing",
    "ListingStatus",
    "PLACEHOLDER_TITLE",
    "BackfillResult",
    "ProductSearchResponse",
    "ProductSearchResult",
    "RagSearchResponse",
    "RagSearchResult",
    "RankedListing",
    "ENTRY_SEPARATOR",
    "ChunkContext",
    "VectorEntryHandle",
    "VectorNamespace",
    "VectorSearchEntry",
    "VectorSearchHit",
    "VectorSearchResponse",
]
