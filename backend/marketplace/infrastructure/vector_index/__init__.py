"""Vector index infrastructure package."""

from .pg_vector_index import PgVectorIndex
from .text_chunker import TextChunker

__all__ = ["PgVectorIndex", "TextChunker"]
