"""Database helpers and SQLAlchemy session factories."""

from .engine import create_sync_engine, get_engine
from .session import atomic, get_sessionmaker, session_scope

__all__ = [
    "atomic",
    "create_sync_engine",
    "get_engine",
    "get_sessionmaker",
    "session_scope",
]
