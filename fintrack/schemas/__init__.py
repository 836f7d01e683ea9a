"""Pydantic schemas exchanged at the HTTP boundary."""

from .accounts import AccountCreate, AccountRead
from .transactions import TransactionCreate, TransactionRead, TransactionUpdate

__all__ = [
    "AccountCreate",
    "AccountRead",
    "TransactionCreate",
    "TransactionRead",
    "TransactionUpdate",
]
