"""Opening and listing finance accounts for a caller scope."""
from __future__ import annotations

from typing import Sequence

from sqlalchemy.orm import Session

from fintrack.core.logger import get_logger
from fintrack.db.session import atomic
from fintrack.domain.caller import CallerScope
from fintrack.models import FinanceAccount
from fintrack.repositories import AccountRepository
from fintrack.schemas.accounts import AccountCreate

LOGGER = get_logger(__name__)


class AccountsService:
    """Thin account management used alongside the ledger."""

    def create_account(self, session: Session, payload: AccountCreate, caller: CallerScope) -> FinanceAccount:
        """Open an account owned by the caller's organization, or by the caller."""

        account = FinanceAccount(
            name=payload.name,
            type=payload.type,
            currency=payload.currency.upper(),
            current_balance=payload.initial_balance,
            opening_balance=payload.initial_balance,
            user_id=None if caller.organization_id else caller.user_id,
            organization_id=caller.organization_id,
            is_default=payload.is_default,
        )
        with atomic(session):
            AccountRepository(session).add(account)
        LOGGER.info("Opened account %s", account.id)
        return account

    def list_accounts(self, session: Session, caller: CallerScope) -> Sequence[FinanceAccount]:
        return AccountRepository(session).list_for_scope(caller)
