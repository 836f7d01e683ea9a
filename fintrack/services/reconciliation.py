"""Replay stored transactions to verify account balances."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from fintrack.core.config import LedgerSettings, get_settings
from fintrack.core.errors import NotFound
from fintrack.core.logger import get_logger, progress_manager
from fintrack.domain.ledger import LedgerEntry, replay
from fintrack.repositories import AccountRepository, TransactionRepository

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class BalanceDrift:
    account_id: str
    stored: Decimal
    expected: Decimal

    @property
    def difference(self) -> Decimal:
        return self.stored - self.expected


class ReconciliationService:
    """Compare stored balances with opening balance plus replayed effects."""

    def __init__(self, settings: LedgerSettings | None = None) -> None:
        self._settings = settings or get_settings().ledger

    def replay_balance(self, session: Session, account_id: str) -> Decimal:
        account = AccountRepository(session).get(account_id)
        if account is None:
            raise NotFound(f"Account {account_id} not found")
        entries = (
            LedgerEntry.from_record(record)
            for record in TransactionRepository(session).list_for_account(account_id)
        )
        return replay(
            account.opening_balance,
            account_id,
            entries,
            apply_non_completed=self._settings.apply_non_completed,
        )

    def find_drift(self, session: Session, *, show_progress: bool = False) -> list[BalanceDrift]:
        accounts = AccountRepository(session).list_all()
        iterable = accounts
        if show_progress:
            iterable = progress_manager.track(accounts, description="Replaying accounts", total=len(accounts))

        drifts: list[BalanceDrift] = []
        for account in iterable:
            expected = self.replay_balance(session, account.id)
            stored = Decimal(account.current_balance)
            if stored != expected:
                LOGGER.warning(
                    "Balance drift on account %s: stored=%s expected=%s",
                    account.id,
                    format(stored, "f"),
                    format(expected, "f"),
                )
                drifts.append(BalanceDrift(account_id=account.id, stored=stored, expected=expected))
        return drifts
