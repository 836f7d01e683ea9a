"""Domain exceptions raised by the ledger and its collaborators."""
from __future__ import annotations

from decimal import Decimal


class LedgerError(Exception):
    """Base class for every error the ledger surfaces to callers."""

    status_code: int = 400
    code: str = "ledger_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class LedgerValidationError(LedgerError):
    """The payload is structurally invalid."""

    code = "validation_error"


class InvalidTransfer(LedgerValidationError):
    """A transfer lacks a destination or points back at its source."""

    code = "invalid_transfer"


class NotFound(LedgerError):
    """A referenced transaction or account does not exist."""

    status_code = 404
    code = "not_found"


class Forbidden(LedgerError):
    """The caller may not operate on an account involved in the request."""

    status_code = 403
    code = "forbidden"


class InsufficientBalance(LedgerError):
    """The source account cannot cover the total deduction."""

    code = "insufficient_balance"

    def __init__(self, account_id: str, required: Decimal, available: Decimal | None = None) -> None:
        message = f"Insufficient balance on account {account_id}: {format(required, 'f')} required"
        if available is not None:
            message += f", {format(available, 'f')} available"
        super().__init__(message)
        self.account_id = account_id
        self.required = required
        self.available = available


class StorageFailure(LedgerError):
    """The atomic unit could not be committed. Safe to retry as a whole."""

    status_code = 503
    code = "storage_failure"


__all__ = [
    "Forbidden",
    "InsufficientBalance",
    "InvalidTransfer",
    "LedgerError",
    "LedgerValidationError",
    "NotFound",
    "StorageFailure",
]
