"""Database engine factories."""
from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from fintrack.core.config import get_settings
from fintrack.core.logger import get_logger

LOGGER = get_logger(__name__)


def create_sync_engine(url: str | None = None, **kwargs) -> Engine:
    """Create a synchronous SQLAlchemy engine using configured defaults.

    Ledger operations rely on the isolation level configured here: every
    create/update/delete runs as one transaction at this level.
    """

    settings = get_settings()
    resolved_url = url or settings.database.sqlalchemy_url

    options = dict(kwargs)
    options.setdefault("echo", settings.sqlalchemy_echo)
    if settings.database.isolation_level:
        options.setdefault("isolation_level", settings.database.isolation_level)
    options.setdefault("pool_pre_ping", not resolved_url.startswith("sqlite"))

    LOGGER.debug(
        "Creating SQLAlchemy engine",
        extra={"url": url or settings.database.masked_url, "options": options},
    )
    return create_engine(resolved_url, future=True, **options)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Return the process-wide engine bound to the configured database."""

    return create_sync_engine()
