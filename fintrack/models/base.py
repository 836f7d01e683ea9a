"""Base declarative class for SQLAlchemy models."""
from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import BigInteger, Numeric
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

MONEY_SCALE = 4


class ScaledMoney(TypeDecorator):
    """Money stored as an integer count of ``10**-scale`` units.

    SQLite has no fixed-point type, so ``Numeric`` columns there hold floats
    and ``balance + :delta`` drifts. Integers keep relative updates and
    ``>=`` comparisons exact inside the database.
    """

    impl = BigInteger
    cache_ok = True

    def __init__(self, scale: int = MONEY_SCALE) -> None:
        super().__init__()
        self.scale = scale

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, float):
            raise TypeError("Monetary values must not be floats")
        scaled = Decimal(value if isinstance(value, Decimal) else str(value)).scaleb(self.scale)
        if scaled != scaled.to_integral_value():
            raise ValueError(f"{value} has more than {self.scale} decimal places")
        return int(scaled)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(int(value)).scaleb(-self.scale)


# Monetary columns: 19 digits, 4 fractional; scaled integers on SQLite.
MONEY = Numeric(19, MONEY_SCALE, asdecimal=True).with_variant(ScaledMoney(), "sqlite")


def new_id() -> str:
    """Return a fresh opaque identifier."""

    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""

    pass
