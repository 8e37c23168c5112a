"""Semantic product search endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from marketplace.application.schemas import (
    AssistantSearchRequest,
    AssistantSearchResponseSchema,
    ProductSearchRequest,
    ProductSearchResponseSchema,
    ProductSearchResultSchema,
    RagSearchRequest,
    RagSearchResponseSchema,
    RagSearchResultSchema,
)
from marketplace.application.services import ProductSearchService
from marketplace.application.services.search_formatting import (
    format_products_for_agent,
    format_rag_results_for_agent,
)
from marketplace.domain.exceptions import VectorIndexError
from marketplace.infrastructure.dependencies import get_product_search_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["Search"])

_UNAVAILABLE = "Search is temporarily unavailable"


@router.post("/products", response_model=ProductSearchResponseSchema)
async def search_products(
    body: ProductSearchRequest,
    service: ProductSearchService = Depends(get_product_search_service),
) -> ProductSearchResponseSchema:
    """Semantic search over active listings."""
    try:
        response = await service.search_products(body.query, body.limit)
    except VectorIndexError as e:
        logger.error("Product search failed: %s", e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=_UNAVAILABLE)
    return ProductSearchResponseSchema(
        results=[
            ProductSearchResultSchema.model_validate(r, from_attributes=True)
            for r in response.results
        ]
    )


@router.post("/rag", response_model=RagSearchResponseSchema)
async def search_listings_rag(
    body: RagSearchRequest,
    service: ProductSearchService = Depends(get_product_search_service),
) -> RagSearchResponseSchema:
    """Semantic search returning matched snippets and aggregated context text."""
    try:
        response = await service.search_listings_rag(
            body.query, body.limit, body.score_threshold
        )
    except VectorIndexError as e:
        logger.error("RAG search failed: %s", e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=_UNAVAILABLE)
    return RagSearchResponseSchema(
        results=[
            RagSearchResultSchema.model_validate(r, from_attributes=True)
            for r in response.results
        ],
        text=response.text,
    )


@router.post("/assistant", response_model=AssistantSearchResponseSchema)
async def search_for_assistant(
    body: AssistantSearchRequest,
    service: ProductSearchService = Depends(get_product_search_service),
) -> AssistantSearchResponseSchema:
    """Search results rendered as numbered, citable text for a chat assistant.

    Failures degrade to a message instead of an error so the assistant can
    relay it to the user.
    """
    try:
        if body.mode == "rag":
            rag = await service.search_listings_rag(body.query, body.limit)
            content = format_rag_results_for_agent(rag.results)
            count = len(rag.results)
        else:
            products = await service.search_products(body.query, body.limit)
            content = format_products_for_agent(products.results)
            count = len(products.results)
    except VectorIndexError as e:
        logger.error("Assistant search failed: %s", e)
        return AssistantSearchResponseSchema(
            content="Error searching products. Please try again.",
            result_count=0,
        )
    return AssistantSearchResponseSchema(content=content, result_count=count)
