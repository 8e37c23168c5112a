"""Abstract interface (port) for the namespaced text vector index."""

from abc import ABC, abstractmethod

from marketplace.domain.entities import (
    ChunkContext,
    VectorEntryHandle,
    VectorNamespace,
    VectorSearchResponse,
)


class VectorIndex(ABC):
    """Port for adding, deleting and searching embedded text entries.

    Entries live in a namespace and carry a free-text ``key`` so search hits
    can be traced back to the record that produced them. The index chunks
    and embeds text itself; callers only deal in text.
    """

    @abstractmethod
    async def get_namespace(self, name: str) -> VectorNamespace | None:
        """Return the namespace, or ``None`` if nothing was ever added to it."""
        ...

    @abstractmethod
    async def add(self, namespace: str, *, key: str, text: str) -> VectorEntryHandle:
        """Chunk, embed and store ``text`` as a new entry. Creates the namespace if needed."""
        ...

    @abstractmethod
    async def delete(self, entry_id: str) -> None:
        """Delete an entry and its chunks. Deleting a missing entry is a no-op."""
        ...

    @abstractmethod
    async def search(
        self,
        namespace: str,
        query: str,
        *,
        limit: int,
        score_threshold: float = 0.0,
        chunk_context: ChunkContext | None = None,
    ) -> VectorSearchResponse:
        """Find the chunks most similar to ``query``.

        Args:
            namespace: Namespace to search in.
            query: Free-text query, embedded by the index.
            limit: Maximum number of chunk hits.
            score_threshold: Minimum similarity for a hit to be returned.
            chunk_context: Neighbouring chunks to include with each hit.

        Returns:
            VectorSearchResponse with hits ordered by descending score.
        """
        ...
