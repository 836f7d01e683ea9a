"""Request and response schemas for ledger transactions."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from fintrack.models.transactions import TransactionStatus, TransactionType

# Fields that may be omitted from an update but never explicitly cleared.
_REQUIRED_ON_UPDATE = ("amount", "fee_amount", "type", "account_id", "date", "status")


def reject_float(value: Any) -> Any:
    """Monetary inputs must be decimal strings or integers, never binary floats."""

    if isinstance(value, float):
        raise ValueError("monetary values must be sent as decimal strings or integers")
    return value


def _dedupe(values: Optional[list[str]]) -> Optional[list[str]]:
    if values is None:
        return None
    return list(dict.fromkeys(values))


TagIds = Annotated[list[str], AfterValidator(_dedupe)]


class TransactionCreate(BaseModel):
    """Payload accepted by the create operation."""

    model_config = ConfigDict(extra="forbid")

    amount: Decimal = Field(gt=0, max_digits=19, decimal_places=4)
    fee_amount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=19, decimal_places=4)
    type: TransactionType
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    description: str | None = None
    account_id: str = Field(min_length=1)
    to_account_id: str | None = None
    category_id: str | None = None
    payee_id: str | None = None
    tag_ids: TagIds | None = None
    subscription_id: str | None = None
    status: TransactionStatus = TransactionStatus.COMPLETED

    @field_validator("amount", "fee_amount", mode="before")
    @classmethod
    def _money_not_float(cls, value: Any) -> Any:
        return reject_float(value)

    @field_validator("fee_amount", mode="before")
    @classmethod
    def _default_fee(cls, value: Any) -> Any:
        return Decimal("0") if value in (None, "") else value

    @model_validator(mode="after")
    def _check_transfer(self) -> "TransactionCreate":
        if self.type is TransactionType.TRANSFER:
            if not self.to_account_id:
                raise ValueError("Transfer requires a destination account")
            if self.to_account_id == self.account_id:
                raise ValueError("Transfer requires a destination account different from source")
        elif self.to_account_id:
            raise ValueError("to_account_id is only allowed for transfers")
        return self


class TransactionUpdate(BaseModel):
    """Partial payload accepted by the update operation.

    Omitted fields keep their stored value. Association fields
    (``to_account_id``, ``category_id``, ``payee_id``, ``tag_ids``,
    ``subscription_id``, ``description``) may be cleared with an explicit null.
    """

    model_config = ConfigDict(extra="forbid")

    amount: Decimal | None = Field(default=None, gt=0, max_digits=19, decimal_places=4)
    fee_amount: Decimal | None = Field(default=None, ge=0, max_digits=19, decimal_places=4)
    type: TransactionType | None = None
    date: datetime | None = None
    description: str | None = None
    account_id: str | None = Field(default=None, min_length=1)
    to_account_id: str | None = None
    category_id: str | None = None
    payee_id: str | None = None
    tag_ids: TagIds | None = None
    subscription_id: str | None = None
    status: TransactionStatus | None = None

    @field_validator("amount", "fee_amount", mode="before")
    @classmethod
    def _money_not_float(cls, value: Any) -> Any:
        return reject_float(value)

    @model_validator(mode="after")
    def _check_required_not_cleared(self) -> "TransactionUpdate":
        for name in _REQUIRED_ON_UPDATE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def provided(self) -> dict[str, Any]:
        """Return only the fields the caller actually sent."""

        return {name: getattr(self, name) for name in self.model_fields_set}


class TransactionRead(BaseModel):
    """Persisted transaction as returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    amount: Decimal
    fee_amount: Decimal
    type: TransactionType
    status: TransactionStatus
    date: datetime
    description: str | None = None
    account_id: str
    to_account_id: str | None = None
    category_id: str | None = None
    payee_id: str | None = None
    tag_ids: list[str] = Field(default_factory=list)
    subscription_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("tag_ids", mode="before")
    @classmethod
    def _tags_default(cls, value: Any) -> Any:
        return value or []

    @field_serializer("amount", "fee_amount")
    def serialize_money(self, value: Decimal) -> str:
        return format(value, "f")
