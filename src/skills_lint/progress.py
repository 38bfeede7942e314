"""Terminal progress display for validation runs."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Any

from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

DEFAULT_PROGRESS_COLUMNS = (
    SpinnerColumn(),
    TextColumn("[progress.description]{task.description}"),
    BarColumn(bar_width=None),
    TaskProgressColumn(),
    TextColumn("{task.completed}/{task.total} checks"),
    TimeElapsedColumn(),
)


@dataclass
class ValidationProgress:
    """Context manager that renders a Rich progress bar while checks run."""

    total: int
    description: str
    enabled: bool = False
    transient: bool = True

    _progress: Progress | None = field(init=False, default=None, repr=False)
    _task_id: TaskID | None = field(init=False, default=None, repr=False)
    _context: AbstractContextManager[Any] | None = field(
        init=False, default=None, repr=False
    )

    def __enter__(self) -> "ValidationProgress":
        if not self.enabled:
            return self

        self._progress = Progress(
            *DEFAULT_PROGRESS_COLUMNS,
            transient=self.transient,
        )
        self._context = self._progress
        self._context.__enter__()
        self._task_id = self._progress.add_task(
            self.description,
            total=self.total,
        )
        return self

    def update(
        self,
        completed: int,
        *,
        current_check: str | None = None,
        errors: int | None = None,
    ) -> None:
        """Advance the bar to ``completed`` checks."""
        if self._progress is None or self._task_id is None:
            return
        capped = min(completed, self.total)
        description = self.description
        if current_check:
            description = f"{description} ({current_check})"
        if errors:
            description = f"{description} | errors: {errors}"
        self._progress.update(
            self._task_id,
            completed=capped,
            description=description,
        )

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._context is None:
            return False
        return bool(self._context.__exit__(exc_type, exc, tb))


__all__ = ["ValidationProgress"]
