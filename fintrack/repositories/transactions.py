"""Persistence of ledger transaction records."""
from __future__ import annotations

from typing import Sequence

from sqlalchemy import or_, select

from fintrack.models import FinanceAccount, Transaction

from .base import BaseRepository


class TransactionRepository(BaseRepository):
    """Transaction Store: records and their associations."""

    def get(self, transaction_id: str) -> Transaction | None:
        return self._session.get(Transaction, transaction_id)

    def get_with_source(self, transaction_id: str) -> tuple[Transaction, FinanceAccount] | None:
        """Load a transaction, locked, together with its source account.

        Only the transaction row is locked here; account rows are locked in id
        order by ``AccountRepository.lock``.
        """

        row = self._session.execute(
            select(Transaction, FinanceAccount)
            .join(FinanceAccount, Transaction.account_id == FinanceAccount.id)
            .where(Transaction.id == transaction_id)
            .with_for_update(of=Transaction)
            .execution_options(populate_existing=True)
        ).first()
        if row is None:
            return None
        return row[0], row[1]

    def add(self, record: Transaction) -> Transaction:
        self._session.add(record)
        self._session.flush()
        return record

    def delete(self, record: Transaction) -> None:
        self._session.delete(record)
        self._session.flush()

    def list_for_accounts(self, account_ids: Sequence[str], *, limit: int) -> Sequence[Transaction]:
        """Transactions touching any of ``account_ids``, newest first."""

        if not account_ids:
            return []
        return (
            self._session.execute(
                select(Transaction)
                .where(
                    or_(
                        Transaction.account_id.in_(account_ids),
                        Transaction.to_account_id.in_(account_ids),
                    )
                )
                .order_by(Transaction.date.desc(), Transaction.created_at.desc())
                .limit(limit)
            )
            .scalars()
            .all()
        )

    def list_for_account(self, account_id: str) -> Sequence[Transaction]:
        """Every transaction that books against ``account_id``, oldest first."""

        return (
            self._session.execute(
                select(Transaction)
                .where(
                    or_(
                        Transaction.account_id == account_id,
                        Transaction.to_account_id == account_id,
                    )
                )
                .order_by(Transaction.date, Transaction.created_at)
            )
            .scalars()
            .all()
        )


__all__ = ["TransactionRepository"]
