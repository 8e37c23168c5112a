"""Embedding management endpoints — manual (re-)indexing and backfill."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from marketplace.application.schemas import BackfillRequest, BackfillResponseSchema
from marketplace.application.services import ListingEmbeddingService
from marketplace.config import get_settings
from marketplace.domain.exceptions import VectorIndexError
from marketplace.infrastructure.dependencies import get_listing_embedding_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/embeddings", tags=["Embeddings"])


@router.post("/listings/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def embed_listing(
    listing_id: str,
    service: ListingEmbeddingService = Depends(get_listing_embedding_service),
) -> None:
    """(Re-)embed one listing. Missing or inactive listings are skipped."""
    try:
        await service.embed_listing(listing_id)
    except VectorIndexError as e:
        logger.error("Embedding listing %s failed: %s", listing_id, e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@router.delete("/listings/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_listing_embedding(
    listing_id: str,
    handle: str | None = None,
    service: ListingEmbeddingService = Depends(get_listing_embedding_service),
) -> None:
    """Delete the vector index entry ``handle``. Best effort; a missing handle is a no-op."""
    await service.remove_listing_embedding(listing_id, handle)


@router.post("/backfill", response_model=BackfillResponseSchema)
async def backfill_embeddings(
    body: BackfillRequest | None = None,
    service: ListingEmbeddingService = Depends(get_listing_embedding_service),
) -> BackfillResponseSchema:
    """Embed all active listings, up to ``limit``."""
    limit = (body.limit if body else None) or get_settings().backfill_default_limit
    result = await service.backfill_embeddings(limit)
    return BackfillResponseSchema(processed=result.processed, errors=result.errors)
