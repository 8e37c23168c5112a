"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.engine import make_url

from marketplace.config import Settings, get_settings
from marketplace.infrastructure.database import Base, VectorChunkModel, engine
from marketplace.infrastructure.logging.log_config import setup_logging
from marketplace.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


async def _create_database_if_missing(database_url: str) -> None:
    """Issue ``CREATE DATABASE`` through the ``postgres`` maintenance database when needed."""
    import asyncpg

    url = make_url(database_url)
    if not url.database or url.get_backend_name() != "postgresql":
        return

    maintenance_dsn = url.set(drivername="postgresql", database="postgres").render_as_string(
        hide_password=False
    )
    try:
        conn = await asyncpg.connect(maintenance_dsn)
    except (OSError, asyncpg.PostgresError) as exc:
        logger.warning("Could not reach PostgreSQL to check database '%s': %s", url.database, exc)
        return

    try:
        if await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", url.database):
            return
        # CREATE DATABASE cannot run inside a transaction block
        await conn.execute(f'CREATE DATABASE "{url.database}"')
        logger.info("Created database '%s'", url.database)
    except asyncpg.PostgresError as exc:
        logger.warning("Could not create database '%s': %s", url.database, exc)
    finally:
        await conn.close()


def check_embedding_dimensions(settings: Settings) -> None:
    """Fail fast when the configured embedding size does not fit the vector column."""
    column_dim = VectorChunkModel.__table__.c.embedding.type.dim
    if settings.embedding_dimensions != column_dim:
        raise RuntimeError(
            f"EMBEDDING_DIMENSIONS={settings.embedding_dimensions} does not match "
            f"the vector_chunks.embedding column ({column_dim} dims)"
        )


async def _create_schema() -> None:
    """Enable pgvector, then create the listing and vector index tables."""
    async with engine.begin() as conn:
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: logging, database and schema setup, engine disposal."""
    settings = get_settings()
    setup_logging(settings)
    check_embedding_dimensions(settings)

    await _create_database_if_missing(settings.database_url)
    await _create_schema()

    if settings.openrouter_api_key.strip():
        logger.info(
            "Semantic search enabled (model=%s, namespace='%s')",
            settings.embedding_model,
            settings.products_namespace,
        )
    else:
        logger.warning(
            "OPENROUTER_API_KEY is not configured; listings will not be indexed "
            "and search requests will fail."
        )

    logger.info("%s %s started (%s)", settings.app_title, settings.app_version, settings.app_env)

    yield

    await engine.dispose()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "marketplace.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
