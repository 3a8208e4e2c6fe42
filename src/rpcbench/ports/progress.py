# rpcbench/ports/progress.py
from __future__ import annotations

from typing import Protocol


class ProgressReporter(Protocol):
    """Console progress observer. Must never influence dispatch."""

    def start(self, total: int, description: str = "") -> None: ...

    def advance(self, description: str | None = None) -> None: ...

    def finish(self) -> None: ...
