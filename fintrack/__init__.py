"""Ledger service for a personal and organizational finance tracker."""

from .core import get_logger, get_settings

__all__ = ["get_logger", "get_settings"]
