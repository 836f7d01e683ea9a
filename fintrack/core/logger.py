"""Import shim so callers can write ``from fintrack.core.logger import get_logger``."""
from __future__ import annotations

from .log import get_logger, init_logging, log_context, progress_manager, shutdown_logging, timeit

__all__ = [
    "get_logger",
    "init_logging",
    "log_context",
    "progress_manager",
    "shutdown_logging",
    "timeit",
]
