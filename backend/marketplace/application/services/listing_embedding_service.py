"""Listing embedding service — keeps one vector index entry in sync with each active listing.

The listing store and the vector index are independent services, so there
is no transaction spanning both. Ordering carries the invariant instead:
1. Delete the listing's previous entry (best effort).
2. Add a new entry built from the listing's canonical text.
3. Persist the new entry id back onto the listing.

A crash between steps leaves the listing unindexed until the next
successful embed; stale entries are filtered out at search time.
"""

import logging
import time

from marketplace.application.interfaces import ListingRepository, VectorIndex
from marketplace.domain.entities import BackfillResult, ListingStatus

logger = logging.getLogger(__name__)

_DEFAULT_NAMESPACE = "products"


class ListingEmbeddingService:
    """Application service for embedding, un-embedding and backfilling listings."""

    def __init__(
        self,
        listing_repository: ListingRepository,
        vector_index: VectorIndex,
        *,
        namespace: str = _DEFAULT_NAMESPACE,
    ):
        self._listing_repo = listing_repository
        self._vector_index = vector_index
        self._namespace = namespace

    async def embed_listing(self, listing_id: str) -> None:
        """(Re-)embed a listing.

        Missing or non-active listings are skipped. Failures deleting the
        previous entry are logged and ignored; failures creating the new
        entry propagate to the caller.
        """
        listing = await self._listing_repo.get_by_id(listing_id)
        if listing is None:
            logger.info("Listing %s not found, skipping embed", listing_id)
            return

        if not listing.is_active:
            logger.info(
                "Listing %s is %s, not active; skipping embed",
                listing_id,
                listing.status.value,
            )
            return

        if listing.embedding_handle:
            try:
                await self._vector_index.delete(listing.embedding_handle)
            except Exception as e:
                logger.warning(
                    "Could not delete old entry %s for listing %s: %s",
                    listing.embedding_handle,
                    listing_id,
                    e,
                )

        handle = await self._vector_index.add(
            self._namespace,
            key=listing_id,
            text=listing.embedding_text(),
        )
        await self._listing_repo.set_embedding_handle(listing_id, handle.entry_id)

        logger.info("Embedded listing %s (entry %s)", listing_id, handle.entry_id)

    async def remove_listing_embedding(
        self,
        listing_id: str,
        handle: str | None = None,
    ) -> None:
        """Delete a listing's vector index entry. Best effort — never raises."""
        if not handle:
            logger.info("No embedding handle for listing %s, skipping removal", listing_id)
            return

        try:
            await self._vector_index.delete(handle)
            logger.info("Removed embedding for listing %s", listing_id)
        except Exception as e:
            logger.error("Error removing embedding for listing %s: %s", listing_id, e)

    async def backfill_embeddings(self, limit: int) -> BackfillResult:
        """Embed up to ``limit`` active listings, one at a time.

        A failure on one listing is counted and the batch continues.
        """
        start = time.monotonic()
        listings = await self._listing_repo.get_all(status=ListingStatus.ACTIVE, limit=limit)

        result = BackfillResult()
        for listing in listings:
            try:
                await self.embed_listing(listing.id)
                result.processed += 1
            except Exception as e:
                logger.error("Error embedding listing %s during backfill: %s", listing.id, e)
                result.errors += 1

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "Backfill completed: %d processed, %d errors in %dms",
            result.processed,
            result.errors,
            duration_ms,
        )
        return result
