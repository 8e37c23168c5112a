"""Centralized logging configuration.

Each Settings ``log_level_*`` field controls a group of loggers, so the
search pipeline can run at DEBUG while SQL and outbound HTTP stay quiet.

Usage:
    from marketplace.infrastructure.logging.log_config import setup_logging
    setup_logging()   # once, from the FastAPI lifespan
"""

import logging
import sys

from marketplace.config import Settings, get_settings

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Settings field -> logger names it governs
_CATEGORY_LOGGERS: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "asyncpg"),
    "log_level_http": ("httpx", "httpcore"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_embedding": (
        "marketplace.application.services.listing_embedding_service",
        "marketplace.application.services.listing_service",
        "marketplace.infrastructure.vector_index",
    ),
    "log_level_search": ("marketplace.application.services.product_search_service",),
    "log_level_openrouter": ("marketplace.infrastructure.openrouter",),
}


def setup_logging(settings: Settings | None = None) -> dict[str, int]:
    """Apply root and per-category log levels; returns the level set per category."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    # uvicorn installs its own handler; tests and scripts do not
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)

    applied: dict[str, int] = {}
    for field_name, logger_names in _CATEGORY_LOGGERS.items():
        level = _parse_level(getattr(settings, field_name))
        for name in logger_names:
            logging.getLogger(name).setLevel(level)
        applied[field_name] = level

    logging.getLogger(__name__).debug(
        "Logging configured: root=%s %s",
        settings.log_level,
        ", ".join(f"{k.removeprefix('log_level_')}={logging.getLevelName(v)}" for k, v in applied.items()),
    )
    return applied


def _parse_level(raw: str) -> int:
    """Level name to logging constant; unknown names map to INFO."""
    level = logging.getLevelNamesMapping().get(raw.strip().upper())
    return level if level is not None else logging.INFO
