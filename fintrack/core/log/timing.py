"""Timing helpers to log the duration of ledger operations."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from time import perf_counter
from typing import Iterator, Optional


@dataclass
class _Timer:
    label: str
    logger: logging.Logger
    level: int
    unit: str
    expected_total: Optional[int]
    count: int = 0
    start: float = field(default_factory=perf_counter)

    def add(self, amount: int = 1) -> None:
        self.count += amount

    def _resolved_total(self) -> Optional[int]:
        return self.expected_total if self.expected_total is not None else self.count or None

    def finish(self, success: bool = True, error: BaseException | None = None) -> None:
        elapsed = perf_counter() - self.start
        total = self._resolved_total()

        if success:
            message = f"{self.label} completed in {elapsed * 1000:.1f}ms"
            if total is not None:
                message += f" ({total:,} {self.unit})"
            self.logger.log(self.level, message)
            return

        fail_message = f"{self.label} failed after {elapsed * 1000:.1f}ms"
        if error is not None:
            fail_message += f": {type(error).__name__}: {error}"
        # expected domain failures are logged by the caller at a lower level
        self.logger.log(self.level, fail_message)


@contextmanager
def timeit(
    label: str,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
    unit: str = "items",
    total: Optional[int] = None,
) -> Iterator[_Timer]:
    """Time the enclosed block and log how long it took.

    Args:
        label: Description of the operation being timed
        logger: Logger instance to use (defaults to "fintrack.timer")
        level: Logging level for the timing message
        unit: Unit name used when a count is reported
        total: Expected item count, otherwise whatever ``add`` accumulated
    """
    log = logger or logging.getLogger("fintrack.timer")
    timer = _Timer(label=label, logger=log, level=level, unit=unit, expected_total=total)

    try:
        yield timer
    except Exception as exc:
        timer.finish(success=False, error=exc)
        raise
    else:
        timer.finish(success=True)
