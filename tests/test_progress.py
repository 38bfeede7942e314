"""Unit tests for the ValidationProgress helper."""

from __future__ import annotations

from typing import Any

import pytest

from skills_lint.progress import ValidationProgress


class _FailingProgress:
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        raise AssertionError("Progress should not be instantiated when disabled")


def test_validation_progress_disabled_skips_rich(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Ensure disabled progress bars avoid constructing Rich primitives."""
    monkeypatch.setattr("skills_lint.progress.Progress", _FailingProgress)
    with ValidationProgress(total=5, description="Skip", enabled=False) as progress:
        progress.update(3, current_check="frontmatter")


def test_validation_progress_updates(monkeypatch: pytest.MonkeyPatch) -> None:
    """Updates clamp to the total and describe the running check."""
    updates: list[dict[str, Any]] = []

    class _StubProgress:
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            updates.clear()

        def __enter__(self) -> "_StubProgress":
            return self

        def __exit__(self, exc_type, exc, tb) -> bool:
            return False

        def add_task(self, description: str, total: int) -> int:
            return 1

        def update(self, task_id: int, **kwargs: Any) -> None:
            updates.append({"task_id": task_id, **kwargs})

    monkeypatch.setattr("skills_lint.progress.Progress", _StubProgress)

    with ValidationProgress(total=10, description="Validating", enabled=True) as progress:
        progress.update(3)
        progress.update(4, current_check="skill-links")
        progress.update(12, errors=2)

    assert [
        (entry["task_id"], entry["completed"], entry["description"])
        for entry in updates
    ] == [
        (1, 3, "Validating"),
        (1, 4, "Validating (skill-links)"),
        (1, 10, "Validating | errors: 2"),
    ]
