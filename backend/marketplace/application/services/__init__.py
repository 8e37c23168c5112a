from .listing_embedding_service import ListingEmbeddingService
from .listing_service import ListingService
from .product_search_service import ProductSearchService

__all__ = [
    "ListingEmbeddingService",
    "ListingService",
    "ProductSearchService",
]
