"""Ledger engine: create, update and delete transactions with balanced books."""
from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterable, Iterator, Sequence

from sqlalchemy.orm import Session

from fintrack.core.config import LedgerSettings, get_settings
from fintrack.core.errors import LedgerError, LedgerValidationError, NotFound
from fintrack.core.logger import get_logger, log_context, timeit
from fintrack.db.session import atomic
from fintrack.domain.caller import CallerScope
from fintrack.domain.ledger import LedgerEntry, Posting, booking_postings, reversal_postings
from fintrack.models import FinanceAccount, Transaction, TransactionType
from fintrack.repositories import AccountRepository, TransactionRepository
from fintrack.schemas.transactions import TransactionCreate, TransactionUpdate
from fintrack.services.authorizer import OwnershipAuthorizer

LOGGER = get_logger(__name__)

# Stored as given on update; ``None`` in the payload clears them.
_ASSOCIATION_FIELDS = ("description", "category_id", "payee_id", "tag_ids", "subscription_id")


@contextmanager
def _operation(name: str, caller: CallerScope) -> Iterator[None]:
    """Tag log records with the caller and time one ledger operation."""

    with log_context.scoped(op=name, **caller.log_fields()), timeit(f"ledger.{name}", logger=LOGGER):
        try:
            yield
        except LedgerError as exc:
            LOGGER.info("Ledger %s rejected: %s", name, exc)
            raise


class LedgerService:
    """Apply transaction mutations and their balance effects atomically.

    Every public mutation runs as one unit of work on the supplied session:
    either all balance changes and the record change are committed, or the
    session is rolled back to its state before the call.
    """

    def __init__(
        self,
        settings: LedgerSettings | None = None,
        authorizer: OwnershipAuthorizer | None = None,
    ) -> None:
        self._settings = settings or get_settings().ledger
        self._authorizer = authorizer or OwnershipAuthorizer()

    @property
    def settings(self) -> LedgerSettings:
        return self._settings

    def create_transaction(
        self, session: Session, payload: TransactionCreate, caller: CallerScope
    ) -> Transaction:
        """Book a new transaction and return the persisted record."""

        entry = LedgerEntry(
            type=payload.type,
            amount=payload.amount,
            fee_amount=payload.fee_amount,
            account_id=payload.account_id,
            to_account_id=payload.to_account_id if payload.type is TransactionType.TRANSFER else None,
            status=payload.status,
        )
        entry.validate()

        with _operation("create", caller), atomic(session):
            accounts = AccountRepository(session)
            accounts.lock((entry.account_id, entry.to_account_id))
            self._authorizer.load_authorized(accounts, entry.account_id, caller, label="source account")
            if entry.is_transfer:
                self._load_destination(accounts, entry, caller)

            self._post(accounts, booking_postings(entry, apply_non_completed=self._settings.apply_non_completed))

            record = Transaction(
                amount=entry.amount,
                fee_amount=entry.fee_amount,
                type=entry.type,
                status=entry.status,
                date=payload.date,
                description=payload.description,
                account_id=entry.account_id,
                to_account_id=entry.to_account_id,
                category_id=payload.category_id,
                payee_id=payload.payee_id,
                tag_ids=payload.tag_ids,
                subscription_id=payload.subscription_id,
            )
            TransactionRepository(session).add(record)

        LOGGER.info(
            "Created %s transaction %s on account %s",
            record.type.value,
            record.id,
            record.account_id,
        )
        return record

    def update_transaction(
        self,
        session: Session,
        transaction_id: str,
        payload: TransactionUpdate,
        caller: CallerScope,
    ) -> Transaction:
        """Revert a transaction's stored effect, then book its new values.

        Omitted fields fall back to the stored values. The new source account
        is authorized again even when unchanged, and the funds check runs
        against the balance after the reversal.
        """

        changes = payload.provided()

        with _operation("update", caller), atomic(session):
            accounts = AccountRepository(session)
            record = self._load_owned(session, transaction_id, caller)

            old_entry = LedgerEntry.from_record(record)
            new_entry = self._merge(old_entry, changes)
            accounts.lock(
                (old_entry.account_id, old_entry.to_account_id, new_entry.account_id, new_entry.to_account_id)
            )
            self._post(
                accounts,
                reversal_postings(old_entry, apply_non_completed=self._settings.apply_non_completed),
                check_funds=False,
            )

            self._authorizer.load_authorized(accounts, new_entry.account_id, caller, label="source account")
            new_entry.validate()
            if new_entry.is_transfer:
                self._load_destination(accounts, new_entry, caller)

            self._post(accounts, booking_postings(new_entry, apply_non_completed=self._settings.apply_non_completed))

            record.amount = new_entry.amount
            record.fee_amount = new_entry.fee_amount
            record.type = new_entry.type
            record.status = new_entry.status
            record.account_id = new_entry.account_id
            record.to_account_id = new_entry.to_account_id
            if "date" in changes:
                record.date = changes["date"]
            for name in _ASSOCIATION_FIELDS:
                if name in changes:
                    setattr(record, name, changes[name])
            record.updated_at = datetime.now(timezone.utc)
            session.flush()

        LOGGER.info("Updated transaction %s", record.id)
        return record

    def delete_transaction(self, session: Session, transaction_id: str, caller: CallerScope) -> None:
        """Revert a transaction's effect and remove it.

        There is no balance floor here: deleting income may leave an account
        negative, which is what replaying the remaining transactions yields.
        """

        with _operation("delete", caller), atomic(session):
            accounts = AccountRepository(session)
            record = self._load_owned(session, transaction_id, caller)
            entry = LedgerEntry.from_record(record)
            accounts.lock((entry.account_id, entry.to_account_id))
            self._post(
                accounts,
                reversal_postings(
                    entry,
                    apply_non_completed=self._settings.apply_non_completed,
                ),
                check_funds=False,
            )
            TransactionRepository(session).delete(record)

        LOGGER.info("Deleted transaction %s", transaction_id)

    def list_transactions(
        self, session: Session, caller: CallerScope, *, limit: int | None = None
    ) -> Sequence[Transaction]:
        """Transactions touching any account of the caller's active scope."""

        account_ids = AccountRepository(session).ids_for_scope(caller)
        return TransactionRepository(session).list_for_accounts(
            account_ids, limit=limit or self._settings.list_limit
        )

    def _load_owned(self, session: Session, transaction_id: str, caller: CallerScope) -> Transaction:
        found = TransactionRepository(session).get_with_source(transaction_id)
        if found is None:
            raise NotFound("Transaction not found")
        record, source = found
        self._authorizer.authorize(source, caller, label="transaction")
        return record

    def _load_destination(
        self, accounts: AccountRepository, entry: LedgerEntry, caller: CallerScope
    ) -> FinanceAccount:
        destination = accounts.get(entry.to_account_id, lock=True)
        if destination is None:
            raise NotFound("Destination account not found")
        if self._settings.require_destination_ownership:
            self._authorizer.authorize(destination, caller, label="destination account")
        return destination

    @staticmethod
    def _merge(old: LedgerEntry, changes: dict) -> LedgerEntry:
        new_type = changes.get("type", old.type)
        to_account_id = changes.get("to_account_id", old.to_account_id)
        if new_type is not TransactionType.TRANSFER:
            if changes.get("to_account_id"):
                raise LedgerValidationError("to_account_id is only allowed for transfers")
            to_account_id = None
        return LedgerEntry(
            type=new_type,
            amount=changes.get("amount", old.amount),
            fee_amount=changes.get("fee_amount", old.fee_amount),
            account_id=changes.get("account_id", old.account_id),
            to_account_id=to_account_id,
            status=changes.get("status", old.status),
        )

    @staticmethod
    def _post(accounts: AccountRepository, postings: Iterable[Posting], *, check_funds: bool = True) -> None:
        for posting in postings:
            accounts.apply_delta(
                posting.account_id,
                posting.delta,
                require_funds=check_funds and posting.requires_funds,
            )


__all__ = ["LedgerService"]
