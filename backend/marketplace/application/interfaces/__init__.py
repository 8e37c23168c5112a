from .listing_repository import ListingRepository
from .vector_index import VectorIndex
from .embedding_provider import EmbeddingProvider

__all__ = [
    "ListingRepository",
    "VectorIndex",
    "EmbeddingProvider",
]
