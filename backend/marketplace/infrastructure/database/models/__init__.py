from .listing import ListingModel
from .vector_index_models import VectorChunkModel, VectorEntryModel, VectorNamespaceModel

__all__ = [
    "ListingModel",
    "VectorChunkModel",
    "VectorEntryModel",
    "VectorNamespaceModel",
]
