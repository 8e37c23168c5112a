"""Abstract repository interface (port) for listings — the authoritative document store."""

from abc import ABC, abstractmethod

from marketplace.domain.entities import Listing, ListingStatus


class ListingRepository(ABC):
    """Port for listing persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, listing_id: str) -> Listing | None:
        """Retrieve a single listing by its ID."""
        ...

    @abstractmethod
    async def get_all(
        self,
        *,
        status: ListingStatus | None = None,
        category: str | None = None,
        limit: int = 100,
    ) -> list[Listing]:
        """List listings, newest first, optionally filtered by status and category."""
        ...

    @abstractmethod
    async def create(self, listing: Listing) -> Listing:
        """Persist a new listing and return it with the generated ID."""
        ...

    @abstractmethod
    async def update(self, listing: Listing) -> Listing:
        """Persist changes to an existing listing."""
        ...

    @abstractmethod
    async def set_embedding_handle(self, listing_id: str, handle: str | None) -> None:
        """Replace the listing's vector index handle (``None`` clears it)."""
        ...
