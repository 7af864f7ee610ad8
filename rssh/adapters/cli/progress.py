"""
Rich progress display for file transfers
"""
from typing import Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TransferSpeedColumn,
)

from ...core.logging import get_stdout_console


class TransferProgress:
    """
    Progress callback backed by a Rich progress bar.

    The bar is created on the first callback, once the total is known;
    a total of 0 degrades to a plain byte counter without a percentage.
    """

    def __init__(self, description: str, console: Optional[Console] = None):
        self.description = description
        self.console = console or get_stdout_console()
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None

    def __call__(self, transferred: int, total: int) -> None:
        if self._progress is None:
            self._start(total)
        self._progress.update(self._task, completed=transferred)

    def _start(self, total: int) -> None:
        if total > 0:
            columns = (
                TextColumn("[progress.description]{task.description}"),
                BarColumn(bar_width=40),
                TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
                DownloadColumn(),
                TransferSpeedColumn(),
                TimeElapsedColumn(),
            )
        else:
            columns = (
                TextColumn("[progress.description]{task.description}"),
                DownloadColumn(),
                TransferSpeedColumn(),
                TimeElapsedColumn(),
            )

        self._progress = Progress(
            *columns,
            console=self.console,
            disable=not self.console.is_terminal,
        )
        self._task = self._progress.add_task(self.description, total=total or None)
        self._progress.start()

    def close(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None

    def __enter__(self) -> "TransferProgress":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
