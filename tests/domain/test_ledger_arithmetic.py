from decimal import Decimal

import pytest

from fintrack.core.errors import InvalidTransfer, LedgerValidationError
from fintrack.domain.ledger import (
    LedgerEntry,
    Posting,
    bears_balance,
    booking_postings,
    replay,
    reversal_postings,
)
from fintrack.models.transactions import TransactionStatus, TransactionType


def _entry(kind: TransactionType, amount: str, fee: str = "0", **kwargs) -> LedgerEntry:
    return LedgerEntry(
        type=kind,
        amount=Decimal(amount),
        fee_amount=Decimal(fee),
        account_id=kwargs.pop("account_id", "acc-1"),
        **kwargs,
    )


def test_income_posting_nets_fee() -> None:
    entry = _entry(TransactionType.INCOME, "100", "5")

    assert entry.postings() == (Posting("acc-1", Decimal("95")),)


def test_expense_posting_requires_funds() -> None:
    entry = _entry(TransactionType.EXPENSE, "100", "10")

    (posting,) = entry.postings()
    assert posting.delta == Decimal("-110")
    assert posting.requires_funds
    assert posting.is_debit


def test_transfer_fee_only_leaves_source() -> None:
    entry = _entry(TransactionType.TRANSFER, "100", "5", to_account_id="acc-2")

    source, destination = entry.postings()
    assert source == Posting("acc-1", Decimal("-105"), requires_funds=True)
    assert destination == Posting("acc-2", Decimal("100"))
    assert not destination.requires_funds


def test_reversal_is_exact_inverse_and_never_needs_funds() -> None:
    entry = _entry(TransactionType.TRANSFER, "30.25", "0.75", to_account_id="acc-2")

    reversal = entry.reversal()

    assert [p.delta for p in reversal] == [Decimal("31.00"), Decimal("-30.25")]
    assert not any(p.requires_funds for p in reversal)
    combined = {p.account_id: Decimal("0") for p in entry.postings()}
    for posting in entry.postings() + reversal:
        combined[posting.account_id] += posting.delta
    assert set(combined.values()) == {Decimal("0")}


def test_stored_transfer_without_destination_reverses_source_only() -> None:
    entry = _entry(TransactionType.TRANSFER, "10")

    assert entry.reversal() == (Posting("acc-1", Decimal("10")),)


@pytest.mark.parametrize(
    ("amount", "fee"),
    [("0", "0"), ("-5", "0"), ("10", "-1")],
)
def test_validate_rejects_non_positive_amount_or_negative_fee(amount: str, fee: str) -> None:
    with pytest.raises(LedgerValidationError):
        _entry(TransactionType.EXPENSE, amount, fee).validate()


def test_validate_transfer_destination() -> None:
    with pytest.raises(InvalidTransfer):
        _entry(TransactionType.TRANSFER, "10").validate()
    with pytest.raises(InvalidTransfer):
        _entry(TransactionType.TRANSFER, "10", to_account_id="acc-1").validate()

    _entry(TransactionType.TRANSFER, "10", to_account_id="acc-2").validate()


def test_effect_on_unrelated_account_is_zero() -> None:
    entry = _entry(TransactionType.TRANSFER, "10", "1", to_account_id="acc-2")

    assert entry.effect_on("acc-1") == Decimal("-11")
    assert entry.effect_on("acc-2") == Decimal("10")
    assert entry.effect_on("acc-3") == Decimal("0")


def test_status_policy_gates_postings() -> None:
    pending = _entry(TransactionType.EXPENSE, "10", status=TransactionStatus.PENDING)

    assert bears_balance(pending)
    assert not bears_balance(pending, apply_non_completed=False)
    assert booking_postings(pending, apply_non_completed=False) == ()
    assert reversal_postings(pending, apply_non_completed=False) == ()
    assert booking_postings(pending) == pending.postings()


def test_replay_matches_running_balance() -> None:
    entries = [
        _entry(TransactionType.INCOME, "200", "2"),
        _entry(TransactionType.EXPENSE, "50", "1"),
        _entry(TransactionType.TRANSFER, "40", "0.5", to_account_id="acc-2"),
        _entry(TransactionType.TRANSFER, "15", account_id="acc-2", to_account_id="acc-1"),
        _entry(TransactionType.EXPENSE, "999", status=TransactionStatus.FAILED),
    ]

    assert replay(Decimal("10"), "acc-1", entries, apply_non_completed=False) == Decimal("131.5")
    assert replay(Decimal("0"), "acc-2", entries, apply_non_completed=False) == Decimal("25")


def test_from_record_defaults_missing_fee() -> None:
    class _Record:
        type = "EXPENSE"
        amount = Decimal("12.50")
        fee_amount = None
        account_id = "acc-9"
        to_account_id = None
        status = "completed"

    entry = LedgerEntry.from_record(_Record())

    assert entry.type is TransactionType.EXPENSE
    assert entry.fee_amount == Decimal("0")
    assert entry.status is TransactionStatus.COMPLETED
    assert entry.total_deduction == Decimal("12.50")


def test_replay_rejects_float_opening_balance() -> None:
    with pytest.raises(TypeError):
        replay(10.0, "acc-1", [])
