"""Application service (use case) for listing lifecycle operations.

Every write keeps the search index in step with listing state: active
listings are (re-)embedded, listings leaving ``active`` lose their entry.
"""

import logging

from marketplace.application.interfaces import ListingRepository
from marketplace.application.schemas import ListingCreate, ListingUpdate
from marketplace.application.services.listing_embedding_service import ListingEmbeddingService
from marketplace.domain.entities import Listing, ListingStatus, PLACEHOLDER_TITLE
from marketplace.domain.exceptions import EntityNotFoundError, InvalidListingStateError

logger = logging.getLogger(__name__)

# Optional columns a PATCH may reset to null; null is ignored for the rest
_CLEARABLE_FIELDS = frozenset({"campus"})


class ListingService:
    """Orchestrates listing business logic. Depends on the repository port (DI).

    ``embedding_service`` is optional so listings keep working when no
    embedding provider is configured; they are simply not indexed.
    """

    def __init__(
        self,
        repository: ListingRepository,
        embedding_service: ListingEmbeddingService | None = None,
    ):
        self._repository = repository
        self._embedding_service = embedding_service

    async def get_listing(self, listing_id: str) -> Listing:
        listing = await self._repository.get_by_id(listing_id)
        if listing is None:
            raise EntityNotFoundError("Listing", listing_id)
        return listing

    async def list_active(self, *, category: str | None = None, limit: int = 50) -> list[Listing]:
        return await self._repository.get_all(
            status=ListingStatus.ACTIVE, category=category, limit=limit
        )

    async def create_listing(self, data: ListingCreate) -> Listing:
        listing = Listing(
            title=data.title,
            description=data.description,
            price=data.price,
            currency=data.currency,
            category=data.category,
            campus=data.campus,
            owner_id=data.owner_id,
            status=ListingStatus(data.status),
        )
        created = await self._repository.create(listing)
        return await self._sync_index(created, text_changed=True)

    async def update_listing(self, listing_id: str, data: ListingUpdate) -> Listing:
        listing = await self.get_listing(listing_id)
        old_text = listing.embedding_text()

        changes = {
            name: value
            for name, value in data.model_dump(exclude_unset=True).items()
            if value is not None or name in _CLEARABLE_FIELDS
        }
        if "status" in changes:
            changes["status"] = ListingStatus(changes["status"])
        for name, value in changes.items():
            setattr(listing, name, value)
        listing.touch()

        updated = await self._repository.update(listing)
        return await self._sync_index(updated, text_changed=updated.embedding_text() != old_text)

    async def publish_listing(self, listing_id: str) -> Listing:
        """Move a draft listing to ``active`` once it has the required fields."""
        listing = await self.get_listing(listing_id)

        if listing.status != ListingStatus.DRAFT:
            raise InvalidListingStateError(listing_id, "only draft listings can be published")
        if not listing.title or listing.title == PLACEHOLDER_TITLE:
            raise InvalidListingStateError(listing_id, "title is required to publish")
        if not listing.description:
            raise InvalidListingStateError(listing_id, "description is required to publish")
        if listing.price <= 0:
            raise InvalidListingStateError(listing_id, "price must be greater than 0 to publish")

        return await self._transition(listing, ListingStatus.ACTIVE)

    async def mark_sold(self, listing_id: str) -> Listing:
        listing = await self.get_listing(listing_id)
        return await self._transition(listing, ListingStatus.SOLD)

    async def archive_listing(self, listing_id: str) -> Listing:
        listing = await self.get_listing(listing_id)
        return await self._transition(listing, ListingStatus.ARCHIVED)

    # ── Private helpers ──────────────────────────────────────────────

    async def _transition(self, listing: Listing, status: ListingStatus) -> Listing:
        listing.status = status
        listing.touch()
        updated = await self._repository.update(listing)
        return await self._sync_index(updated, text_changed=False)

    async def _sync_index(self, listing: Listing, *, text_changed: bool) -> Listing:
        """Embed active listings, drop the entry of anything else.

        Embedding failures are logged rather than raised: the write itself
        succeeded and the listing is picked up again by the next write or
        a backfill.
        """
        if self._embedding_service is None:
            return listing

        if listing.is_active:
            if not text_changed and listing.embedding_handle:
                return listing
            try:
                await self._embedding_service.embed_listing(listing.id)
            except Exception as e:
                logger.warning("Listing %s saved but not indexed: %s", listing.id, e)
                return listing
            return await self.get_listing(listing.id)

        if listing.embedding_handle:
            await self._embedding_service.remove_listing_embedding(
                listing.id, listing.embedding_handle
            )
            await self._repository.set_embedding_handle(listing.id, None)
            listing.embedding_handle = None
        return listing
