"""Balance arithmetic shared by every ledger operation.

A transaction moves money as a set of postings, one per account it touches:

* ``INCOME``   credits the account with ``amount - fee`` (net income).
* ``EXPENSE``  debits the account by ``amount + fee`` (total deduction).
* ``TRANSFER`` debits the source by ``amount + fee`` and credits the
  destination with ``amount``; the fee leaves the books.

Reversal produces the exact inverse postings and never requires funds.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from fintrack.core.errors import InvalidTransfer, LedgerValidationError
from fintrack.models.transactions import TransactionStatus, TransactionType

ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class Posting:
    """Signed balance change on one account."""

    account_id: str
    delta: Decimal
    requires_funds: bool = False

    @property
    def is_debit(self) -> bool:
        return self.delta < 0


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    """The balance-bearing fields of a transaction."""

    type: TransactionType
    amount: Decimal
    fee_amount: Decimal
    account_id: str
    to_account_id: str | None = None
    status: TransactionStatus = TransactionStatus.COMPLETED

    @classmethod
    def from_record(cls, record: object) -> "LedgerEntry":
        fee = getattr(record, "fee_amount", None)
        return cls(
            type=TransactionType(getattr(record, "type")),
            amount=_decimal(getattr(record, "amount")),
            fee_amount=_decimal(fee) if fee is not None else ZERO,
            account_id=str(getattr(record, "account_id")),
            to_account_id=getattr(record, "to_account_id", None),
            status=TransactionStatus(getattr(record, "status", None) or TransactionStatus.COMPLETED),
        )

    @property
    def total_deduction(self) -> Decimal:
        return self.amount + self.fee_amount

    @property
    def net_income(self) -> Decimal:
        return self.amount - self.fee_amount

    @property
    def is_transfer(self) -> bool:
        return self.type is TransactionType.TRANSFER

    def validate(self) -> None:
        """Raise when the entry cannot be booked."""

        if self.amount <= ZERO:
            raise LedgerValidationError("Amount must be greater than zero")
        if self.fee_amount < ZERO:
            raise LedgerValidationError("Fee amount cannot be negative")
        if self.is_transfer:
            if not self.to_account_id:
                raise InvalidTransfer("Transfer requires a destination account")
            if self.to_account_id == self.account_id:
                raise InvalidTransfer("Cannot transfer to the same account")

    def postings(self) -> tuple[Posting, ...]:
        """Postings that book this entry. Debits are flagged as requiring funds."""

        if self.type is TransactionType.INCOME:
            return (Posting(self.account_id, self.net_income),)
        if self.type is TransactionType.EXPENSE:
            return (Posting(self.account_id, -self.total_deduction, requires_funds=True),)
        postings = [Posting(self.account_id, -self.total_deduction, requires_funds=True)]
        if self.to_account_id:
            postings.append(Posting(self.to_account_id, self.amount))
        return tuple(postings)

    def reversal(self) -> tuple[Posting, ...]:
        """Inverse of :meth:`postings`.

        A stored transfer without a destination only reverses its source side.
        """

        return tuple(Posting(p.account_id, -p.delta) for p in self.postings())

    def effect_on(self, account_id: str) -> Decimal:
        return sum((p.delta for p in self.postings() if p.account_id == account_id), ZERO)


def bears_balance(entry: LedgerEntry, *, apply_non_completed: bool = True) -> bool:
    """Return whether ``entry`` moves balances under the configured status policy."""

    return apply_non_completed or entry.status is TransactionStatus.COMPLETED


def booking_postings(entry: LedgerEntry, *, apply_non_completed: bool = True) -> tuple[Posting, ...]:
    if not bears_balance(entry, apply_non_completed=apply_non_completed):
        return ()
    return entry.postings()


def reversal_postings(entry: LedgerEntry, *, apply_non_completed: bool = True) -> tuple[Posting, ...]:
    if not bears_balance(entry, apply_non_completed=apply_non_completed):
        return ()
    return entry.reversal()


def replay(
    opening_balance: Decimal,
    account_id: str,
    entries: Iterable[LedgerEntry],
    *,
    apply_non_completed: bool = True,
) -> Decimal:
    """Recompute an account's balance from its opening balance and entries."""

    balance = _decimal(opening_balance)
    for entry in entries:
        if bears_balance(entry, apply_non_completed=apply_non_completed):
            balance += entry.effect_on(account_id)
    return balance


def _decimal(value: object) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    if isinstance(value, float):
        raise TypeError("Monetary values must not be floats")
    return Decimal(str(value))


__all__ = [
    "LedgerEntry",
    "Posting",
    "ZERO",
    "bears_balance",
    "booking_postings",
    "replay",
    "reversal_postings",
]
