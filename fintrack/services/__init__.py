"""Service layer entrypoints for ledger logic."""

from .accounts_service import AccountsService
from .authorizer import OwnershipAuthorizer
from .ledger_service import LedgerService
from .reconciliation import BalanceDrift, ReconciliationService

__all__ = [
    "AccountsService",
    "BalanceDrift",
    "LedgerService",
    "OwnershipAuthorizer",
    "ReconciliationService",
]
