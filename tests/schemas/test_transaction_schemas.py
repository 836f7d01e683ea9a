from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from fintrack.models.transactions import TransactionStatus, TransactionType
from fintrack.schemas import AccountCreate, TransactionCreate, TransactionRead, TransactionUpdate


def test_create_defaults() -> None:
    payload = TransactionCreate(type="EXPENSE", amount="12.50", account_id="acc-1")

    assert payload.amount == Decimal("12.50")
    assert payload.fee_amount == Decimal("0")
    assert payload.status is TransactionStatus.COMPLETED
    assert payload.date.tzinfo is not None


def test_create_treats_missing_fee_as_zero() -> None:
    payload = TransactionCreate(type="INCOME", amount=10, fee_amount=None, account_id="acc-1")

    assert payload.fee_amount == Decimal("0")


@pytest.mark.parametrize("field", ["amount", "fee_amount"])
def test_create_rejects_float_money(field: str) -> None:
    fields = {"type": "INCOME", "amount": "10", "account_id": "acc-1", field: 0.1}

    with pytest.raises(ValidationError):
        TransactionCreate(**fields)


@pytest.mark.parametrize(
    "fields",
    [
        {"amount": "0"},
        {"amount": "-1"},
        {"fee_amount": "-0.01"},
        {"amount": "1.00001"},
        {"account_id": ""},
        {"unexpected": "value"},
    ],
)
def test_create_rejects_invalid_values(fields: dict) -> None:
    base = {"type": "EXPENSE", "amount": "10", "account_id": "acc-1"}

    with pytest.raises(ValidationError):
        TransactionCreate(**{**base, **fields})


def test_transfer_requires_distinct_destination() -> None:
    with pytest.raises(ValidationError, match="destination"):
        TransactionCreate(type="TRANSFER", amount="10", account_id="acc-1")
    with pytest.raises(ValidationError, match="different from source"):
        TransactionCreate(type="TRANSFER", amount="10", account_id="acc-1", to_account_id="acc-1")

    payload = TransactionCreate(type="TRANSFER", amount="10", account_id="acc-1", to_account_id="acc-2")
    assert payload.type is TransactionType.TRANSFER


def test_destination_only_allowed_on_transfers() -> None:
    with pytest.raises(ValidationError, match="only allowed for transfers"):
        TransactionCreate(type="EXPENSE", amount="10", account_id="acc-1", to_account_id="acc-2")


def test_tag_ids_are_deduplicated_in_order() -> None:
    payload = TransactionCreate(
        type="EXPENSE", amount="1", account_id="acc-1", tag_ids=["b", "a", "b", "c", "a"]
    )

    assert payload.tag_ids == ["b", "a", "c"]


def test_update_tracks_provided_fields() -> None:
    payload = TransactionUpdate(amount="5", category_id=None)

    assert payload.provided() == {"amount": Decimal("5"), "category_id": None}


@pytest.mark.parametrize("field", ["amount", "fee_amount", "type", "account_id", "date", "status"])
def test_update_rejects_null_for_required_fields(field: str) -> None:
    with pytest.raises(ValidationError, match="cannot be null"):
        TransactionUpdate(**{field: None})


def test_update_rejects_float_amount() -> None:
    with pytest.raises(ValidationError):
        TransactionUpdate(amount=2.5)


def test_read_serializes_money_as_strings() -> None:
    record = TransactionRead(
        id="tx-1",
        amount=Decimal("100.5000"),
        fee_amount=Decimal("0"),
        type=TransactionType.INCOME,
        status=TransactionStatus.COMPLETED,
        date=datetime(2024, 5, 1, tzinfo=timezone.utc),
        account_id="acc-1",
        tag_ids=None,
    )

    dumped = record.model_dump(mode="json")

    assert dumped["amount"] == "100.5000"
    assert dumped["fee_amount"] == "0"
    assert dumped["tag_ids"] == []
    assert dumped["status"] == "completed"


def test_account_create_rejects_float_balance() -> None:
    with pytest.raises(ValidationError):
        AccountCreate(name="Wallet", initial_balance=10.5)

    assert AccountCreate(name="Wallet", initial_balance="10.5").initial_balance == Decimal("10.5")
