from __future__ import annotations

from rich.console import Console
from rich.progress import (
    Progress, BarColumn, TextColumn, TimeElapsedColumn,
    TimeRemainingColumn, MofNCompleteColumn, SpinnerColumn, TaskID
)

from ..ports.progress import ProgressReporter


class RichProgressReporter(ProgressReporter):
    """Single in-place progress bar; one tick per finished work unit."""

    def __init__(self, console: Console | None = None, title: str = "benchmarking") -> None:
        self.progress = Progress(SpinnerColumn(),
                                 TextColumn(f"[bold]{title}[/]"),
                                 BarColumn(),
                                 MofNCompleteColumn(),
                                 TextColumn("•"),
                                 TimeElapsedColumn(),
                                 TextColumn("→"),
                                 TimeRemainingColumn(),
                                 TextColumn(" • {task.description}"),
                                 console=console,
                                 transient=False,
                                 expand=True,
                                 )
        self.task: TaskID | None = None

    def start(self, total: int, description: str = "") -> None:
        self.progress.start()
        self.task = self.progress.add_task(description=description, total=total)

    def advance(self, description: str | None = None) -> None:
        if self.task is None:
            return
        if description is not None:
            self.progress.update(self.task, advance=1, description=description)
        else:
            self.progress.advance(self.task, 1)

    def finish(self) -> None:
        self.progress.stop()


class NullProgressReporter(ProgressReporter):
    """Used when SHOW_PROGRESS_BAR=false."""

    def __init__(self) -> None:
        self.total = 0
        self.completed = 0

    def start(self, total: int, description: str = "") -> None:
        self.total = total

    def advance(self, description: str | None = None) -> None:
        self.completed += 1

    def finish(self) -> None:
        pass
