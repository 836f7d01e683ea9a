"""Schemas for finance accounts."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from fintrack.models.accounts import FinanceAccountType
from fintrack.schemas.transactions import reject_float


class AccountCreate(BaseModel):
    """Payload for opening a finance account in the caller's active scope."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=120)
    type: FinanceAccountType = FinanceAccountType.BANK
    currency: str = Field(default="USD", min_length=3, max_length=3)
    initial_balance: Decimal = Field(default=Decimal("0"), max_digits=19, decimal_places=4)
    is_default: bool = False

    @field_validator("initial_balance", mode="before")
    @classmethod
    def _balance_not_float(cls, value: Any) -> Any:
        return reject_float(value)


class AccountRead(BaseModel):
    """Finance account with its current balance."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: FinanceAccountType
    currency: str
    current_balance: Decimal
    user_id: str | None = None
    organization_id: str | None = None
    is_default: bool = False
    created_at: datetime | None = None

    @field_serializer("current_balance")
    def serialize_balance(self, value: Decimal) -> str:
        return format(value, "f")
