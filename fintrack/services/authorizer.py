"""Ownership checks for finance accounts."""
from __future__ import annotations

from fintrack.core.errors import Forbidden, NotFound
from fintrack.core.logger import get_logger
from fintrack.domain.caller import CallerScope
from fintrack.models import FinanceAccount
from fintrack.repositories import AccountRepository

LOGGER = get_logger(__name__)


class OwnershipAuthorizer:
    """Decide whether a caller may operate on an account.

    An account is accessible when its organization is the caller's selected
    organization, or when it is a personal account of the caller. No other
    combination grants access; an account with neither owner is never
    accessible.
    """

    def is_authorized(self, account: FinanceAccount, caller: CallerScope) -> bool:
        if account.organization_id is not None and account.organization_id == caller.organization_id:
            return True
        return account.user_id is not None and account.user_id == caller.user_id

    def authorize(self, account: FinanceAccount, caller: CallerScope, *, label: str = "account") -> None:
        if not self.is_authorized(account, caller):
            LOGGER.info("Denied access to %s %s", label, account.id)
            raise Forbidden(f"Forbidden access to {label}")

    def load_authorized(
        self,
        accounts: AccountRepository,
        account_id: str,
        caller: CallerScope,
        *,
        label: str = "account",
    ) -> FinanceAccount:
        """Load ``account_id`` for update and check the caller may use it."""

        account = accounts.get(account_id, lock=True)
        if account is None:
            raise NotFound(f"{label.capitalize()} not found")
        self.authorize(account, caller, label=label)
        return account


__all__ = ["OwnershipAuthorizer"]
