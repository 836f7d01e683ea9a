"""Database models for the ledger."""
from __future__ import annotations

from .accounts import FinanceAccount, FinanceAccountType
from .base import Base, new_id
from .transactions import Transaction, TransactionStatus, TransactionType

__all__ = [
    "Base",
    "FinanceAccount",
    "FinanceAccountType",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "new_id",
]
