"""ORM model for finance accounts."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SQLEnum, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from .base import MONEY, Base, new_id


class FinanceAccountType(str, Enum):
    """Kind of money holder an account represents."""

    BANK = "BANK"
    CASH = "CASH"
    MOBILE_WALLET = "MOBILE_WALLET"
    CREDIT_CARD = "CREDIT_CARD"


class FinanceAccount(Base):
    """A wallet, bank account or cash drawer owned by one user or one organization."""

    __tablename__ = "finance_account"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    type: Mapped[FinanceAccountType] = mapped_column(
        SQLEnum(FinanceAccountType, native_enum=False, length=16),
        nullable=False,
        default=FinanceAccountType.BANK,
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    current_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    opening_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    user_id: Mapped[str | None] = mapped_column(String(36), index=True)
    organization_id: Mapped[str | None] = mapped_column(String(36), index=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        owner = f"org={self.organization_id}" if self.organization_id else f"user={self.user_id}"
        return f"<FinanceAccount {self.id} {owner} balance={self.current_balance}>"
