"""Logging setup shared by the API and the maintenance scripts.

Records are handed to a queue on the calling thread and written by a
listener thread to a rich console handler and, when ``LOG_DIR`` is set, to a
file that rolls over at midnight. Fields bound with ``log_context`` are
rendered in front of every message.
"""
from __future__ import annotations

import atexit
import logging
import os
from dataclasses import dataclass, field, replace
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from pathlib import Path
from queue import SimpleQueue
from threading import RLock
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

from .context import ContextFilter, log_context
from .progress import progress_manager
from .timing import timeit

__all__ = [
    "LoggingOptions",
    "get_logger",
    "init_logging",
    "log_context",
    "progress_manager",
    "shutdown_logging",
    "timeit",
]

_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(context)s%(message)s"


def _env_log_dir() -> Optional[Path]:
    value = os.getenv("LOG_DIR")
    return Path(value) if value else None


@dataclass(frozen=True)
class LoggingOptions:
    """What ``init_logging`` installs. Defaults come from ``LOG_LEVEL``/``LOG_DIR``."""

    app_name: str = "fintrack"
    level: str | int = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_dir: Optional[Path] = field(default_factory=_env_log_dir)
    backup_days: int = 14
    rich_tracebacks: bool = True


_lock = RLock()
_active: LoggingOptions | None = None
_queue_handler: QueueHandler | None = None
_listener: QueueListener | None = None
_context_filter = ContextFilter()


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _console_handler(options: LoggingOptions, console: Console) -> logging.Handler:
    handler = RichHandler(
        console=console,
        rich_tracebacks=options.rich_tracebacks,
        show_path=False,
        markup=False,
        log_time_format="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(logging.Formatter("%(context)s%(message)s"))
    return handler


def _file_handler(options: LoggingOptions, directory: Path) -> logging.Handler:
    directory.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        directory / f"{options.app_name}.log",
        when="midnight",
        backupCount=options.backup_days,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _stop_locked() -> None:
    global _active, _queue_handler, _listener
    if _listener is not None:
        _listener.stop()
        for handler in _listener.handlers:
            handler.close()
    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)
    progress_manager.use_console(None)
    _active = None
    _queue_handler = None
    _listener = None


def init_logging(**overrides: object) -> None:
    """Install the queue-backed handlers on the root logger.

    Calling again with the same options does nothing; any other options
    replace the running setup.
    """

    options = replace(LoggingOptions(), **overrides)
    with _lock:
        global _active, _queue_handler, _listener
        if options == _active:
            return
        _stop_locked()

        level = _resolve_level(options.level)
        if options.rich_tracebacks:
            install_rich_traceback(show_locals=False)

        console = Console(stderr=True)
        progress_manager.use_console(console)
        handlers = [_console_handler(options, console)]
        if options.log_dir is not None:
            handlers.append(_file_handler(options, options.log_dir))

        log_queue: SimpleQueue = SimpleQueue()
        queue_handler = QueueHandler(log_queue)
        # context lives in a contextvar, so it is rendered before the record leaves this thread
        queue_handler.addFilter(_context_filter)
        root = logging.getLogger()
        root.setLevel(level)
        root.addHandler(queue_handler)

        listener = QueueListener(log_queue, *handlers)
        listener.start()

        _active = options
        _queue_handler = queue_handler
        _listener = listener


def shutdown_logging() -> None:
    """Flush queued records and detach the handlers."""

    with _lock:
        _stop_locked()


atexit.register(shutdown_logging)


def get_logger(name: str | None = None) -> logging.Logger:
    with _lock:
        if _active is None:
            init_logging()
        app_name = _active.app_name if _active else LoggingOptions.app_name
    return logging.getLogger(name or app_name)
