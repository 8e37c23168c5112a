"""Listing lifecycle endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from marketplace.application.schemas import ListingCreate, ListingResponse, ListingUpdate
from marketplace.application.services import ListingService
from marketplace.domain.exceptions import EntityNotFoundError, InvalidListingStateError
from marketplace.infrastructure.dependencies import get_listing_service

router = APIRouter(prefix="/listings", tags=["Listings"])


@router.get("", response_model=list[ListingResponse])
async def list_active_listings(
    category: str | None = None,
    limit: int = 50,
    service: ListingService = Depends(get_listing_service),
) -> list[ListingResponse]:
    """Retrieve the feed of active listings, newest first."""
    listings = await service.list_active(category=category, limit=limit)
    return [ListingResponse.model_validate(item, from_attributes=True) for item in listings]


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(
    listing_id: str,
    service: ListingService = Depends(get_listing_service),
) -> ListingResponse:
    """Retrieve a single listing by ID."""
    try:
        listing = await service.get_listing(listing_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ListingResponse.model_validate(listing, from_attributes=True)


@router.post("", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
async def create_listing(
    data: ListingCreate,
    service: ListingService = Depends(get_listing_service),
) -> ListingResponse:
    """Create a listing; active listings are indexed for search."""
    listing = await service.create_listing(data)
    return ListingResponse.model_validate(listing, from_attributes=True)


@router.patch("/{listing_id}", response_model=ListingResponse)
async def update_listing(
    listing_id: str,
    data: ListingUpdate,
    service: ListingService = Depends(get_listing_service),
) -> ListingResponse:
    """Update an existing listing."""
    try:
        listing = await service.update_listing(listing_id, data)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ListingResponse.model_validate(listing, from_attributes=True)


@router.post("/{listing_id}/publish", response_model=ListingResponse)
async def publish_listing(
    listing_id: str,
    service: ListingService = Depends(get_listing_service),
) -> ListingResponse:
    """Publish a draft listing."""
    return await _transition(service.publish_listing, listing_id)


@router.post("/{listing_id}/sold", response_model=ListingResponse)
async def mark_listing_sold(
    listing_id: str,
    service: ListingService = Depends(get_listing_service),
) -> ListingResponse:
    """Mark a listing as sold; it is removed from search."""
    return await _transition(service.mark_sold, listing_id)


@router.post("/{listing_id}/archive", response_model=ListingResponse)
async def archive_listing(
    listing_id: str,
    service: ListingService = Depends(get_listing_service),
) -> ListingResponse:
    """Archive a listing (soft delete); it is removed from search."""
    return await _transition(service.archive_listing, listing_id)


async def _transition(action, listing_id: str) -> ListingResponse:
    try:
        listing = await action(listing_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidListingStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return ListingResponse.model_validate(listing, from_attributes=True)
