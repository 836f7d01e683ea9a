"""Caller and job fields rendered in front of log messages."""
from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator

_fields: contextvars.ContextVar[dict[str, object]] = contextvars.ContextVar("log_context", default={})


def _without_none(values: dict[str, object]) -> dict[str, object]:
    return {key: value for key, value in values.items() if value is not None}


class LogContext:
    """Key-value pairs attached to every record logged from the current context."""

    def bind(self, **values: object) -> None:
        """Bind ``values`` until the context ends (for scripts, the whole run)."""

        _fields.set({**_fields.get(), **_without_none(values)})

    @contextmanager
    def scoped(self, **values: object) -> Iterator[None]:
        """Bind ``values`` for the duration of the block only."""

        token = _fields.set({**_fields.get(), **_without_none(values)})
        try:
            yield
        finally:
            _fields.reset(token)

    def as_dict(self) -> dict[str, object]:
        return dict(_fields.get())


class ContextFilter(logging.Filter):
    """Render the bound fields into ``record.context``.

    Records that already carry a context (rendered on the producing thread
    before being queued) are left alone.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "context", None) is None:
            fields = _fields.get()
            record.context = "".join(f"{key}={value} " for key, value in fields.items())
        return True


log_context = LogContext()
