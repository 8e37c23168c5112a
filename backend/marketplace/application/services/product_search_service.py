"""Product search service — semantic search over active listings.

Flow:
  1. Vector search over the products namespace, over-fetching chunks.
  2. Deduplicate chunk hits into one ranked entry per listing.
  3. Resolve each listing against the listing store, dropping anything that
     is no longer active. The vector index is a secondary index and may lag
     behind listing status changes.
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from marketplace.application.interfaces import ListingRepository, VectorIndex
from marketplace.application.services.search_formatting import to_product_result, to_rag_result
from marketplace.application.services.search_ranking import build_context_text, rank_hits
from marketplace.domain.entities import (
    ChunkContext,
    Listing,
    ProductSearchResponse,
    RagSearchResponse,
    RankedListing,
    VectorSearchResponse,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProductSearchService:
    """Application service for semantic product search.

    The over-fetch factor, score threshold and limits are heuristics; they
    are injected so they can be tuned from configuration.
    """

    def __init__(
        self,
        listing_repository: ListingRepository,
        vector_index: VectorIndex,
        *,
        namespace: str = "products",
        overfetch_factor: int = 2,
        score_threshold: float = 0.3,
        default_limit: int = 10,
        rag_default_limit: int = 8,
        rag_chunk_context: ChunkContext | None = None,
    ):
        self._listing_repo = listing_repository
        self._vector_index = vector_index
        self._namespace = namespace
        self._overfetch_factor = max(overfetch_factor, 1)
        self._score_threshold = score_threshold
        self._default_limit = default_limit
        self._rag_default_limit = rag_default_limit
        self._rag_chunk_context = rag_chunk_context or ChunkContext(before=1, after=0)

    async def search_products(
        self,
        query: str,
        limit: int | None = None,
    ) -> ProductSearchResponse:
        """Search active listings, returning structured results only."""
        if limit is None:
            limit = self._default_limit

        response = await self._vector_search(
            query,
            limit=limit,
            score_threshold=self._score_threshold,
            chunk_context=None,
        )
        if response is None or not response.results:
            return ProductSearchResponse()

        ranked = rank_hits(response.results, response.entries, limit=limit)
        results = await self._resolve(ranked, to_product_result)

        logger.info("Found %d products for query %r", len(results), query)
        return ProductSearchResponse(results=results)

    async def search_listings_rag(
        self,
        query: str,
        limit: int | None = None,
        score_threshold: float | None = None,
    ) -> RagSearchResponse:
        """Search active listings and return matched snippets plus aggregated context text."""
        if limit is None:
            limit = self._rag_default_limit
        threshold = self._score_threshold if score_threshold is None else score_threshold

        response = await self._vector_search(
            query,
            limit=limit,
            score_threshold=threshold,
            chunk_context=self._rag_chunk_context,
        )
        if response is None or not response.results:
            return RagSearchResponse()

        ranked = rank_hits(response.results, response.entries, limit=limit)
        results = await self._resolve(ranked, to_rag_result)

        # Context text only covers listings that survived resolution
        text = build_context_text(response.entries, {r.listing_id for r in results})

        logger.info("RAG search found %d products for query %r", len(results), query)
        return RagSearchResponse(results=results, text=text)

    # ── Private helpers ──────────────────────────────────────────────

    async def _vector_search(
        self,
        query: str,
        *,
        limit: int,
        score_threshold: float,
        chunk_context: ChunkContext | None,
    ) -> VectorSearchResponse | None:
        """Run the over-fetched vector search; ``None`` when nothing was ever indexed."""
        namespace = await self._vector_index.get_namespace(self._namespace)
        if namespace is None:
            logger.info(
                "No '%s' namespace found — no products indexed yet", self._namespace
            )
            return None

        response = await self._vector_index.search(
            self._namespace,
            query,
            limit=limit * self._overfetch_factor,
            score_threshold=score_threshold,
            chunk_context=chunk_context,
        )
        logger.debug(
            "Vector search returned %d hits across %d entries for %r",
            len(response.results),
            len(response.entries),
            query,
        )
        return response

    async def _resolve(
        self,
        ranked: list[RankedListing],
        build: Callable[[RankedListing, Listing], T],
    ) -> list[T]:
        """Fetch live listings in ranked order, keeping only active ones."""
        results: list[T] = []
        for item in ranked:
            try:
                listing = await self._listing_repo.get_by_id(item.listing_id)
            except Exception as e:
                logger.error("Error fetching listing %s: %s", item.listing_id, e)
                continue

            if listing is None or not listing.is_active:
                logger.debug("Dropping stale search hit for listing %s", item.listing_id)
                continue

            results.append(build(item, listing))
        return results
