"""Domain entity for marketplace listings."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ListingStatus(str, Enum):
    """Lifecycle states of a listing."""

    DRAFT = "draft"
    ACTIVE = "active"
    SOLD = "sold"
    ARCHIVED = "archived"


PLACEHOLDER_TITLE = "Untitled Listing"


@dataclass
class Listing:
    """Core domain entity: an item offered on the marketplace.

    Only ``ACTIVE`` listings are embedded and searchable. ``embedding_handle``
    points at the listing's live vector index entry; ``None`` means the
    listing is not indexed.
    """

    title: str
    description: str
    price: float
    category: str
    currency: str = "USD"
    status: ListingStatus = ListingStatus.ACTIVE
    campus: str | None = None
    owner_id: str | None = None
    embedding_handle: str | None = None
    id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_active(self) -> bool:
        return self.status == ListingStatus.ACTIVE

    def embedding_text(self) -> str:
        """Canonical text submitted to the vector index."""
        return f"{self.title}\n{self.description}\nCategory: {self.category}"

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
