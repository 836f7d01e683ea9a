"""Persistence of finance accounts and their balances."""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Sequence

from sqlalchemy import func, select, update

from fintrack.core.errors import InsufficientBalance, NotFound
from fintrack.core.logger import get_logger
from fintrack.domain.caller import CallerScope
from fintrack.models import FinanceAccount

from .base import BaseRepository

LOGGER = get_logger(__name__)


class AccountRepository(BaseRepository):
    """Account Store: locked reads and relative balance updates."""

    def get(self, account_id: str, *, lock: bool = False) -> FinanceAccount | None:
        """Load an account, refreshing any copy already held by the session.

        With ``lock`` the row is read ``FOR UPDATE`` so concurrent ledger
        operations on the same account serialize on it.
        """

        statement = (
            select(FinanceAccount)
            .where(FinanceAccount.id == account_id)
            .execution_options(populate_existing=True)
        )
        if lock:
            statement = statement.with_for_update()
        return self._session.execute(statement).scalar_one_or_none()

    def lock(self, account_ids: Iterable[str | None]) -> dict[str, FinanceAccount]:
        """Lock every existing account in ``account_ids`` in ascending id order.

        Ledger operations take their account locks through here first, so two
        operations touching the same accounts always acquire them in the same
        order.
        """

        ids = sorted({account_id for account_id in account_ids if account_id})
        if not ids:
            return {}
        rows = self._session.execute(self.lock_statement(ids)).scalars()
        return {account.id: account for account in rows}

    @staticmethod
    def lock_statement(account_ids: Sequence[str]):
        return (
            select(FinanceAccount)
            .where(FinanceAccount.id.in_(account_ids))
            .order_by(FinanceAccount.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )

    def balance_of(self, account_id: str) -> Decimal | None:
        value = self._session.execute(
            select(FinanceAccount.current_balance).where(FinanceAccount.id == account_id)
        ).scalar_one_or_none()
        return None if value is None else self._to_decimal(value)

    def apply_delta(self, account_id: str, delta: Decimal, *, require_funds: bool = False) -> None:
        """Add ``delta`` to the stored balance in a single relative ``UPDATE``.

        When ``require_funds`` is set and ``delta`` is a debit, the update only
        matches while the balance still covers it, so the funds check and the
        write happen in the same statement.
        """

        delta = self._to_decimal(delta)
        if not delta:
            return

        statement = (
            update(FinanceAccount)
            .where(FinanceAccount.id == account_id)
            .values(
                current_balance=FinanceAccount.current_balance + delta,
                updated_at=func.current_timestamp(),
            )
            .execution_options(synchronize_session=False)
        )
        guarded = require_funds and delta < 0
        if guarded:
            statement = statement.where(FinanceAccount.current_balance >= -delta)

        result = self._session.execute(statement)
        if result.rowcount:
            LOGGER.debug("Applied balance delta %s to account %s", format(delta, "f"), account_id)
            return

        available = self.balance_of(account_id)
        if available is None:
            raise NotFound(f"Account {account_id} not found")
        if guarded:
            raise InsufficientBalance(account_id, -delta, available)
        raise NotFound(f"Account {account_id} not found")  # pragma: no cover - row vanished mid-update

    def add(self, account: FinanceAccount) -> FinanceAccount:
        self._session.add(account)
        self._session.flush()
        return account

    def list_for_scope(self, caller: CallerScope) -> Sequence[FinanceAccount]:
        """Accounts of the caller's active scope, newest first."""

        return (
            self._session.execute(
                select(FinanceAccount)
                .where(self.scope_clause(caller))
                .order_by(FinanceAccount.created_at.desc(), FinanceAccount.name)
            )
            .scalars()
            .all()
        )

    def ids_for_scope(self, caller: CallerScope) -> list[str]:
        return list(
            self._session.execute(
                select(FinanceAccount.id).where(self.scope_clause(caller))
            ).scalars()
        )

    def list_all(self) -> Sequence[FinanceAccount]:
        return self._session.execute(select(FinanceAccount).order_by(FinanceAccount.id)).scalars().all()

    @staticmethod
    def scope_clause(caller: CallerScope):
        """Organization accounts when one is selected, otherwise personal ones."""

        if caller.organization_id:
            return FinanceAccount.organization_id == caller.organization_id
        return FinanceAccount.user_id == caller.user_id


__all__ = ["AccountRepository"]
