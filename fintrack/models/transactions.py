"""ORM model for ledger transactions."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import JSON, DateTime, Enum as SQLEnum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .accounts import FinanceAccount
from .base import MONEY, Base, new_id


class TransactionType(str, Enum):
    """Direction of a ledger movement."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


class TransactionStatus(str, Enum):
    """Processing state recorded alongside a transaction."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class Transaction(Base):
    """A single income, expense or transfer booked against finance accounts."""

    __tablename__ = "transaction"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    fee_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    type: Mapped[TransactionType] = mapped_column(
        SQLEnum(TransactionType, native_enum=False, length=16), nullable=False
    )
    status: Mapped[TransactionStatus] = mapped_column(
        SQLEnum(
            TransactionStatus,
            native_enum=False,
            length=16,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        default=TransactionStatus.COMPLETED,
    )
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )
    description: Mapped[str | None] = mapped_column(Text)

    account_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("finance_account.id"), nullable=False, index=True
    )
    to_account_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("finance_account.id"), index=True
    )

    # Owned by the category/payee/tag/subscription collaborators; stored as given.
    category_id: Mapped[str | None] = mapped_column(String(36))
    payee_id: Mapped[str | None] = mapped_column(String(36))
    tag_ids: Mapped[list[str] | None] = mapped_column(JSON)
    subscription_id: Mapped[str | None] = mapped_column(String(36))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )

    account: Mapped[FinanceAccount] = relationship(foreign_keys=[account_id])
    to_account: Mapped[FinanceAccount | None] = relationship(foreign_keys=[to_account_id])
