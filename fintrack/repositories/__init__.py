"""Repositories wrapping SQLAlchemy access to ledger tables."""

from .accounts import AccountRepository
from .transactions import TransactionRepository

__all__ = ["AccountRepository", "TransactionRepository"]
