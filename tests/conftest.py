"""Shared fixtures: an in-memory database and account factories."""
from __future__ import annotations

from collections.abc import Callable, Iterator
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from fintrack.core.config import LedgerSettings
from fintrack.domain.caller import CallerScope
from fintrack.models import Base, FinanceAccount, Transaction
from fintrack.services import LedgerService

ALICE = CallerScope(user_id="user-alice")
BOB = CallerScope(user_id="user-bob")
ACME = CallerScope(user_id="user-alice", organization_id="org-acme")


@pytest.fixture()
def alice() -> CallerScope:
    return ALICE


@pytest.fixture()
def bob() -> CallerScope:
    return BOB


@pytest.fixture()
def acme() -> CallerScope:
    """Alice acting for the Acme organization."""

    return ACME


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine: Engine) -> Iterator[Session]:
    """Provide an in-memory database session for each test."""

    SessionLocal = sessionmaker(bind=engine, future=True)
    with SessionLocal() as session:
        yield session


@pytest.fixture()
def ledger_settings() -> LedgerSettings:
    return LedgerSettings()


@pytest.fixture()
def ledger(ledger_settings: LedgerSettings) -> LedgerService:
    return LedgerService(settings=ledger_settings)


@pytest.fixture()
def make_account(session: Session) -> Callable[..., str]:
    """Return a factory that stores an account and returns its id."""

    def _make(
        balance: str = "0",
        *,
        owner: CallerScope = ALICE,
        name: str = "Account",
        personal: bool | None = None,
    ) -> str:
        use_org = owner.organization_id is not None if personal is None else not personal
        account = FinanceAccount(
            name=name,
            currency="USD",
            current_balance=Decimal(balance),
            opening_balance=Decimal(balance),
            user_id=None if use_org else owner.user_id,
            organization_id=owner.organization_id if use_org else None,
        )
        session.add(account)
        session.commit()
        return account.id

    return _make


@pytest.fixture()
def balance_of(session: Session) -> Callable[[str], Decimal]:
    """Read an account balance straight from the database."""

    def _balance(account_id: str) -> Decimal:
        value = session.execute(
            select(FinanceAccount.current_balance).where(FinanceAccount.id == account_id)
        ).scalar_one()
        return Decimal(value)

    return _balance


@pytest.fixture()
def transaction_count(session: Session) -> Callable[[], int]:
    def _count() -> int:
        return session.execute(select(func.count()).select_from(Transaction)).scalar_one()

    return _count
