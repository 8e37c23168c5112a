"""Async SQLAlchemy engine and request-scoped sessions for PostgreSQL."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from marketplace.config import get_settings


def _get_async_url(url: str) -> str:
    """Point plain ``postgresql://`` URLs at the asyncpg driver."""
    for prefix in ("postgresql://", "postgres://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url.removeprefix(prefix)
    return url


settings = get_settings()

engine = create_async_engine(
    _get_async_url(settings.database_url),
    echo=(settings.app_env == "development" and settings.log_level_sql == "DEBUG"),
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(engine, expire_on_commit=False)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed when the handler succeeds.

    Listing writes and vector index writes share this session, so a failed
    request rolls back both.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
