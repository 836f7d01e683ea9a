"""Shared helpers for ledger repositories."""
from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session


class BaseRepository:
    """Base repository bound to a single session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    @staticmethod
    def _to_decimal(value: Any) -> Decimal:
        if isinstance(value, Decimal):
            return value
        if value is None:
            return Decimal(0)
        return Decimal(str(value))
