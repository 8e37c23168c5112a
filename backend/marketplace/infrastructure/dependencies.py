"""FastAPI dependency injection — wires infrastructure to application layer."""

import logging
from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.config import Settings, get_settings
from marketplace.application.services import (
    ListingEmbeddingService,
    ListingService,
    ProductSearchService,
)
from marketplace.domain.entities import ChunkContext
from marketplace.infrastructure.database.session import get_db_session
from marketplace.infrastructure.database.repositories import SQLAlchemyListingRepository
from marketplace.infrastructure.openrouter import OpenRouterEmbeddingProvider
from marketplace.infrastructure.vector_index import PgVectorIndex, TextChunker

logger = logging.getLogger(__name__)


def _build_vector_index(session: AsyncSession, settings: Settings) -> PgVectorIndex:
    provider = OpenRouterEmbeddingProvider(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        app_name=settings.openrouter_app_name,
        model=settings.embedding_model,
        model_dimensions=settings.embedding_dimensions,
    )
    chunker = TextChunker(
        chunk_size=settings.embedding_chunk_size,
        chunk_overlap=settings.embedding_chunk_overlap,
    )
    return PgVectorIndex(session, provider, chunker=chunker)


def _build_embedding_service(session: AsyncSession, settings: Settings) -> ListingEmbeddingService:
    return ListingEmbeddingService(
        listing_repository=SQLAlchemyListingRepository(session),
        vector_index=_build_vector_index(session, settings),
        namespace=settings.products_namespace,
    )


async def get_listing_embedding_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ListingEmbeddingService, None]:
    """Provides a ListingEmbeddingService bound to the request session."""
    yield _build_embedding_service(session, get_settings())


async def get_listing_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ListingService, None]:
    """Provides a ListingService; listings are indexed only when embeddings are configured."""
    settings = get_settings()

    embedding_service = None
    if settings.openrouter_api_key.strip():
        embedding_service = _build_embedding_service(session, settings)
    else:
        logger.warning("OPENROUTER_API_KEY is not configured; listings will not be indexed.")

    yield ListingService(
        repository=SQLAlchemyListingRepository(session),
        embedding_service=embedding_service,
    )


async def get_product_search_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ProductSearchService, None]:
    """Provides a ProductSearchService with tuning constants from Settings."""
    settings = get_settings()
    yield ProductSearchService(
        listing_repository=SQLAlchemyListingRepository(session),
        vector_index=_build_vector_index(session, settings),
        namespace=settings.products_namespace,
        overfetch_factor=settings.search_overfetch_factor,
        score_threshold=settings.search_score_threshold,
        default_limit=settings.search_default_limit,
        rag_default_limit=settings.rag_default_limit,
        rag_chunk_context=ChunkContext(
            before=settings.rag_chunk_context_before,
            after=settings.rag_chunk_context_after,
        ),
    )
