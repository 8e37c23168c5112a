from .listing import ListingCreate, ListingUpdate, ListingResponse
from .search import (
    AssistantSearchRequest,
    AssistantSearchResponseSchema,
    BackfillRequest,
    BackfillResponseSchema,
    ProductSearchRequest,
    ProductSearchResponseSchema,
    ProductSearchResultSchema,
    RagSearchRequest,
    RagSearchResponseSchema,
    RagSearchResultSchema,
)

__all__ = [
    "ListingCreate",
    "ListingUpdate",
    "ListingResponse",
    "AssistantSearchRequest",
    "AssistantSearchResponseSchema",
    "BackfillRequest",
    "BackfillResponseSchema",
    "ProductSearchRequest",
    "ProductSearchResponseSchema",
    "ProductSearchResultSchema",
    "RagSearchRequest",
    "RagSearchResponseSchema",
    "RagSearchResultSchema",
]
