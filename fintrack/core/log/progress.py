"""Progress bars for long-running maintenance scripts."""
from __future__ import annotations

from typing import Iterable, Iterator, Optional, TypeVar

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn

T = TypeVar("T")


class ProgressManager:
    """Draw progress bars on the console the log handler writes to."""

    def __init__(self) -> None:
        self.console = Console(stderr=True)

    def use_console(self, console: Optional[Console]) -> None:
        self.console = console or Console(stderr=True)

    def track(
        self,
        iterable: Iterable[T],
        *,
        description: str,
        total: Optional[int] = None,
    ) -> Iterator[T]:
        """Yield from ``iterable`` while advancing a transient progress bar."""

        columns = (
            TextColumn("[bold blue]{task.description}[/]"),
            BarColumn(bar_width=None),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
        )
        with Progress(*columns, console=self.console, transient=True) as progress:
            task_id = progress.add_task(description, total=total)
            for item in iterable:
                yield item
                progress.advance(task_id)


progress_manager = ProgressManager()
