"""Tests for account row locking and money storage."""
from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import text
from sqlalchemy.dialects import mysql, sqlite

from fintrack.models.base import ScaledMoney
from fintrack.repositories import AccountRepository
from fintrack.schemas.transactions import TransactionCreate, TransactionUpdate


def test_lock_statement_orders_rows_by_id_for_update() -> None:
    sql = str(AccountRepository.lock_statement(["b", "a"]).compile(dialect=mysql.dialect()))

    assert "ORDER BY finance_account.id" in sql
    assert sql.rstrip().endswith("FOR UPDATE")


def test_lock_returns_existing_accounts_in_id_order(session, make_account) -> None:
    first = make_account("1", name="First")
    second = make_account("2", name="Second")

    locked = AccountRepository(session).lock([second, None, "missing", first, second])

    assert list(locked) == sorted([first, second])
    assert AccountRepository(session).lock([None]) == {}


def test_ledger_locks_every_touched_account_in_id_order(
    session, ledger, alice, make_account, monkeypatch
) -> None:
    source = make_account("100", name="Source")
    old_destination = make_account("0", name="Old")
    new_destination = make_account("0", name="New")
    calls: list[list[str]] = []
    original = AccountRepository.lock

    def recording_lock(self, account_ids):
        locked = original(self, account_ids)
        calls.append(list(locked))
        return locked

    monkeypatch.setattr(AccountRepository, "lock", recording_lock)

    record = ledger.create_transaction(
        session,
        TransactionCreate(type="TRANSFER", amount="10", account_id=source, to_account_id=old_destination),
        alice,
    )
    ledger.update_transaction(session, record.id, TransactionUpdate(to_account_id=new_destination), alice)
    ledger.delete_transaction(session, record.id, alice)

    assert calls == [
        sorted([source, old_destination]),
        sorted([source, old_destination, new_destination]),
        sorted([source, new_destination]),
    ]


def test_sqlite_balances_are_stored_as_scaled_integers(session, make_account) -> None:
    account = make_account("0.7")

    AccountRepository(session).apply_delta(account, Decimal("-0.4"), require_funds=True)
    stored = session.execute(
        text("SELECT current_balance FROM finance_account WHERE id = :id"), {"id": account}
    ).scalar_one()

    assert stored == 3000
    assert AccountRepository(session).balance_of(account) == Decimal("0.3")


def test_scaled_money_converts_decimals_exactly() -> None:
    money = ScaledMoney()
    dialect = sqlite.dialect()

    assert money.process_bind_param(Decimal("12.3456"), dialect) == 123456
    assert money.process_bind_param(Decimal("-0.3"), dialect) == -3000
    assert money.process_bind_param(None, dialect) is None
    assert money.process_result_value(3000, dialect) == Decimal("0.3")
    assert format(money.process_result_value(400000, dialect), "f") == "40.0000"


def test_scaled_money_rejects_floats_and_extra_places() -> None:
    money = ScaledMoney()
    dialect = sqlite.dialect()

    with pytest.raises(TypeError):
        money.process_bind_param(0.3, dialect)
    with pytest.raises(ValueError):
        money.process_bind_param(Decimal("0.00001"), dialect)
