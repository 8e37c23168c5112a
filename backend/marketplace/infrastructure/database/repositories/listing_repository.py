"""Concrete listing repository implementation backed by SQLAlchemy."""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.interfaces import ListingRepository
from marketplace.domain.entities import Listing, ListingStatus
from marketplace.infrastructure.database.models import ListingModel


class SQLAlchemyListingRepository(ListingRepository):
    """Implements the ListingRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ListingModel) -> Listing:
        """Map ORM model → domain entity."""
        return Listing(
            id=model.id,
            owner_id=model.owner_id,
            title=model.title,
            description=model.description,
            price=model.price,
            currency=model.currency,
            category=model.category,
            campus=model.campus,
            status=ListingStatus(model.status),
            embedding_handle=model.embedding_handle,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Listing) -> ListingModel:
        """Map domain entity → ORM model (for creation)."""
        return ListingModel(
            owner_id=entity.owner_id,
            title=entity.title,
            description=entity.description,
            price=entity.price,
            currency=entity.currency,
            category=entity.category,
            campus=entity.campus,
            status=entity.status.value,
            embedding_handle=entity.embedding_handle,
        )

    async def get_by_id(self, listing_id: str) -> Listing | None:
        result = await self._session.get(ListingModel, listing_id)
        return self._to_entity(result) if result else None

    async def get_all(
        self,
        *,
        status: ListingStatus | None = None,
        category: str | None = None,
        limit: int = 100,
    ) -> list[Listing]:
        stmt = select(ListingModel)
        if status is not None:
            stmt = stmt.where(ListingModel.status == status.value)
        if category is not None:
            stmt = stmt.where(ListingModel.category == category)
        stmt = stmt.order_by(ListingModel.created_at.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, listing: Listing) -> Listing:
        model = self._to_model(listing)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, listing: Listing) -> Listing:
        model = await self._session.get(ListingModel, listing.id)
        if model is None:
            raise ValueError(f"Listing {listing.id} not found in database")
        model.title = listing.title
        model.description = listing.description
        model.price = listing.price
        model.currency = listing.currency
        model.category = listing.category
        model.campus = listing.campus
        model.status = listing.status.value
        await self._session.flush()
        return self._to_entity(model)

    async def set_embedding_handle(self, listing_id: str, handle: str | None) -> None:
        await self._session.execute(
            update(ListingModel)
            .where(ListingModel.id == listing_id)
            .values(embedding_handle=handle)
            .execution_options(synchronize_session="fetch")
        )
        await self._session.flush()
