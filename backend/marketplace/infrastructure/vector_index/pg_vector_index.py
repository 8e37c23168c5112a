"""PostgreSQL + pgvector implementation of the VectorIndex port.

Entries are chunked with TextChunker, embedded through the EmbeddingProvider
port, and stored one row per chunk. Search embeds the query, ranks chunks by
cosine similarity and optionally widens each hit with neighbouring chunks.
"""

import logging
from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces import EmbeddingProvider, VectorIndex
from marketplace.domain.entities import (
    ENTRY_SEPARATOR,
    ChunkContext,
    VectorEntryHandle,
    VectorNamespace,
    VectorSearchEntry,
    VectorSearchHit,
    VectorSearchResponse,
)
from marketplace.domain.exceptions import EmbeddingProviderError, VectorIndexError
from marketplace.infrastructure.database.models import (
    VectorChunkModel,
    VectorEntryModel,
    VectorNamespaceModel,
)
from marketplace.infrastructure.vector_index.text_chunker import TextChunker

logger = logging.getLogger(__name__)

GAP_MARKER = "\n...\n"


class PgVectorIndex(VectorIndex):
    """Concrete vector index backed by PostgreSQL + pgvector."""

    def __init__(
        self,
        session: AsyncSession,
        embedding_provider: EmbeddingProvider,
        *,
        chunker: TextChunker | None = None,
    ):
        self._session = session
        self._embedding_provider = embedding_provider
        self._chunker = chunker or TextChunker()

    async def get_namespace(self, name: str) -> VectorNamespace | None:
        model = await self._find_namespace(name)
        if model is None:
            return None
        return VectorNamespace(id=model.id, name=model.name)

    async def add(self, namespace: str, *, key: str, text: str) -> VectorEntryHandle:
        chunks = self._chunker.split(text)
        if not chunks:
            raise VectorIndexError("add", f"no embeddable text for key '{key}'")

        try:
            embeddings = await self._embedding_provider.generate_embeddings(chunks)
        except EmbeddingProviderError as e:
            raise VectorIndexError("add", str(e)) from e

        if len(embeddings) != len(chunks):
            raise VectorIndexError(
                "add",
                f"expected {len(chunks)} embeddings, got {len(embeddings)}",
            )
        for embedding in embeddings:
            self._check_dimensions("add", embedding)

        # Savepoint: a failed write must not abort the caller's transaction
        try:
            async with self._session.begin_nested():
                ns = await self._get_or_create_namespace(namespace)
                entry = VectorEntryModel(namespace_id=ns.id, key=key)
                self._session.add(entry)
                await self._session.flush()

                self._session.add_all(
                    VectorChunkModel(
                        entry_id=entry.id,
                        chunk_index=i,
                        content=chunk,
                        embedding=embedding,
                    )
                    for i, (chunk, embedding) in enumerate(zip(chunks, embeddings, strict=True))
                )
                await self._session.flush()
        except SQLAlchemyError as e:
            raise VectorIndexError("add", str(e)) from e

        logger.info(
            "Added entry %s to '%s' (key=%s, %d chunks)",
            entry.id,
            namespace,
            key,
            len(chunks),
        )
        return VectorEntryHandle(entry_id=entry.id)

    async def delete(self, entry_id: str) -> None:
        try:
            async with self._session.begin_nested():
                await self._session.execute(
                    delete(VectorChunkModel).where(VectorChunkModel.entry_id == entry_id)
                )
                result = await self._session.execute(
                    delete(VectorEntryModel).where(VectorEntryModel.id == entry_id)
                )
                await self._session.flush()
        except SQLAlchemyError as e:
            raise VectorIndexError("delete", str(e)) from e

        if result.rowcount:
            logger.info("Deleted vector entry %s", entry_id)
        else:
            logger.debug("Vector entry %s already absent", entry_id)

    async def search(
        self,
        namespace: str,
        query: str,
        *,
        limit: int,
        score_threshold: float = 0.0,
        chunk_context: ChunkContext | None = None,
    ) -> VectorSearchResponse:
        ns = await self._find_namespace(namespace)
        if ns is None or limit <= 0:
            return VectorSearchResponse()

        try:
            query_embedding = await self._embedding_provider.generate_query_embedding(query)
        except EmbeddingProviderError as e:
            raise VectorIndexError("search", str(e)) from e
        self._check_dimensions("search", query_embedding)

        distance = VectorChunkModel.embedding.cosine_distance(query_embedding)
        stmt = (
            select(
                VectorChunkModel.entry_id,
                VectorChunkModel.chunk_index,
                VectorChunkModel.content,
                VectorEntryModel.key,
                distance.label("distance"),
            )
            .select_from(VectorChunkModel)
            .join(VectorEntryModel, VectorEntryModel.id == VectorChunkModel.entry_id)
            .where(VectorEntryModel.namespace_id == ns.id)
            # similarity = 1 - cosine distance
            .where(distance <= 1.0 - score_threshold)
            .order_by(distance)
            .limit(limit)
        )

        try:
            rows = (await self._session.execute(stmt)).all()
        except SQLAlchemyError as e:
            raise VectorIndexError("search", str(e)) from e

        context = chunk_context or ChunkContext()
        windows = {
            (row.entry_id, row.chunk_index): _window(row.chunk_index, context)
            for row in rows
        }
        chunk_texts = {(row.entry_id, row.chunk_index): row.content for row in rows}
        if context.before or context.after:
            chunk_texts.update(await self._load_context_chunks(windows))

        hits: list[VectorSearchHit] = []
        entry_keys: dict[str, str | None] = {}
        entry_orders: dict[str, set[int]] = {}
        for row in rows:
            start, end = windows[(row.entry_id, row.chunk_index)]
            present = [
                i for i in range(start, end + 1) if (row.entry_id, i) in chunk_texts
            ]
            hits.append(
                VectorSearchHit(
                    entry_id=row.entry_id,
                    score=1.0 - float(row.distance),
                    order=row.chunk_index,
                    start_order=present[0],
                    content=[chunk_texts[(row.entry_id, i)] for i in present],
                )
            )
            entry_keys.setdefault(row.entry_id, row.key)
            entry_orders.setdefault(row.entry_id, set()).update(present)

        entries = [
            VectorSearchEntry(
                entry_id=entry_id,
                key=key,
                text=build_entry_text(
                    sorted(entry_orders[entry_id]),
                    {i: chunk_texts[(entry_id, i)] for i in entry_orders[entry_id]},
                ),
            )
            for entry_id, key in entry_keys.items()
        ]

        logger.debug(
            "Vector search in '%s' returned %d hits (%d entries)",
            namespace,
            len(hits),
            len(entries),
        )
        return VectorSearchResponse(
            results=hits,
            entries=entries,
            text=ENTRY_SEPARATOR.join(e.text for e in entries),
        )

    # ── Private helpers ──────────────────────────────────────────────

    def _check_dimensions(self, operation: str, vector: list[float] | None) -> None:
        expected = self._embedding_provider.dimensions
        if vector is None or len(vector) != expected:
            got = "none" if vector is None else len(vector)
            raise VectorIndexError(
                operation, f"embedding has {got} dimensions, expected {expected}"
            )

    async def _find_namespace(self, name: str) -> VectorNamespaceModel | None:
        result = await self._session.execute(
            select(VectorNamespaceModel).where(VectorNamespaceModel.name == name)
        )
        return result.scalar_one_or_none()

    async def _get_or_create_namespace(self, name: str) -> VectorNamespaceModel:
        model = await self._find_namespace(name)
        if model is None:
            model = VectorNamespaceModel(name=name)
            self._session.add(model)
            await self._session.flush()
            logger.info("Created vector namespace '%s'", name)
        return model

    async def _load_context_chunks(
        self,
        windows: dict[tuple[str, int], tuple[int, int]],
    ) -> dict[tuple[str, int], str]:
        """Fetch every chunk that falls inside one of the hit windows."""
        wanted_by_entry: dict[str, set[int]] = {}
        for (entry_id, _), (start, end) in windows.items():
            wanted_by_entry.setdefault(entry_id, set()).update(range(start, end + 1))
        if not wanted_by_entry:
            return {}

        stmt = select(
            VectorChunkModel.entry_id,
            VectorChunkModel.chunk_index,
            VectorChunkModel.content,
        ).where(VectorChunkModel.entry_id.in_(list(wanted_by_entry)))
        rows = (await self._session.execute(stmt)).all()

        return {
            (row.entry_id, row.chunk_index): row.content
            for row in rows
            if row.chunk_index in wanted_by_entry[row.entry_id]
        }


def _window(order: int, context: ChunkContext) -> tuple[int, int]:
    return max(order - context.before, 0), order + context.after


def build_entry_text(orders: Iterable[int], texts: dict[int, str]) -> str:
    """Join chunk texts in order, marking gaps between non-adjacent chunks."""
    parts: list[str] = []
    previous: int | None = None
    for order in orders:
        if previous is not None:
            parts.append("\n" if order == previous + 1 else GAP_MARKER)
        parts.append(texts[order])
        previous = order
    return "".join(parts)
