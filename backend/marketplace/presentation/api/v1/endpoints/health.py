"""Health check endpoint; touches neither the database nor the embedding provider."""

from fastapi import APIRouter

from marketplace.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Report version, environment and whether semantic search is configured."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "semantic_search": bool(settings.openrouter_api_key.strip()),
        "embedding_model": settings.embedding_model,
    }
