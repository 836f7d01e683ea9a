"""Shared FastAPI dependency definitions."""
from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache

from sqlalchemy.orm import Session, sessionmaker

from fintrack.db.session import get_sessionmaker
from fintrack.services import AccountsService, LedgerService


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    """Build the request session factory on first use."""

    return get_sessionmaker()


def get_db_session() -> Generator[Session, None, None]:
    """Yield a database session suitable for request-scoped usage."""

    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()


def get_ledger_service() -> LedgerService:
    """Return a service instance per request."""

    return LedgerService()


def get_accounts_service() -> AccountsService:
    return AccountsService()
