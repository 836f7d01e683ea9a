"""Opinionated SQLAlchemy session helpers."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from fintrack.core.errors import StorageFailure
from fintrack.core.logger import get_logger

from .engine import create_sync_engine, get_engine

LOGGER = get_logger(__name__)


def get_sessionmaker(url: str | None = None, **kwargs) -> sessionmaker:
    """Return a ``sessionmaker`` bound to the shared engine, or a new one for ``url``."""

    engine = create_sync_engine(url, **kwargs) if url or kwargs else get_engine()
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@contextmanager
def atomic(session: Session) -> Iterator[Session]:
    """Run the block as a single unit of work on ``session``.

    The block commits when it exits normally. Any exception rolls back every
    write made since the session's last commit and is re-raised; database
    errors are re-raised as ``StorageFailure``.
    """

    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        LOGGER.warning("Unit of work rolled back after database error: %s", exc)
        raise StorageFailure("The operation could not be committed") from exc
    except BaseException:
        session.rollback()
        raise


@contextmanager
def session_scope(url: str | None = None, **kwargs) -> Iterator[Session]:
    """Provide a transactional scope for imperative scripts."""

    Session = get_sessionmaker(url, **kwargs)
    session = Session()
    try:
        with atomic(session):
            yield session
    finally:
        session.close()
