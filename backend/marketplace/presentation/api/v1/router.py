"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from marketplace.presentation.api.v1.endpoints.health import router as health_router
from marketplace.presentation.api.v1.endpoints.listings import router as listings_router
from marketplace.presentation.api.v1.endpoints.search import router as search_router
from marketplace.presentation.api.v1.endpoints.embeddings import router as embeddings_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(listings_router)
router.include_router(search_router)
router.include_router(embeddings_router)
