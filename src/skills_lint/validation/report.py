"""Findings, the validation report, and its terminal rendering."""

from __future__ import annotations

from collections.abc import Mapping
from itertools import groupby
from typing import Literal

from pydantic import BaseModel, computed_field
from rich.console import Console
from rich.markup import escape

Severity = Literal["ok", "warning", "error"]

_RULE = "=" * 42

_PREFIX = {
    "ok": "[green]OK:[/green]",
    "warning": "[yellow]WARNING:[/yellow]",
    "error": "[red]ERROR:[/red]",
}


class Finding(BaseModel):
    severity: Severity
    check: str
    message: str
    path: str | None = None


class ValidationReport(BaseModel):
    """Everything a validation run found.

    ``passed`` is false when any error was found, or, in strict mode, when
    any warning was found.
    """

    root: str | None = None
    strict: bool = False
    findings: list[Finding] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def errors(self) -> int:
        return sum(1 for finding in self.findings if finding.severity == "error")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def warnings(self) -> int:
        return sum(1 for finding in self.findings if finding.severity == "warning")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def passed(self) -> bool:
        if self.errors:
            return False
        return not (self.strict and self.warnings)

    def problems(self) -> list[Finding]:
        return [finding for finding in self.findings if finding.severity != "ok"]


def render_report(
    report: ValidationReport,
    console: Console,
    *,
    titles: Mapping[str, str] | None = None,
) -> None:
    """Print the report grouped by check, followed by a summary."""
    titles = titles or {}
    console.print(_RULE)
    console.print("skills-lint Repository Validation")
    console.print(_RULE)

    for check, findings in groupby(report.findings, key=lambda finding: finding.check):
        console.print()
        console.print(escape(titles.get(check, f"Checking {check}...")))
        for finding in findings:
            console.print(f"{_PREFIX[finding.severity]} {escape(finding.message)}")

    console.print()
    console.print(_RULE)
    console.print("Validation Summary")
    console.print(_RULE)
    console.print(f"Errors:   [red]{report.errors}[/red]")
    console.print(f"Warnings: [yellow]{report.warnings}[/yellow]")
    if report.strict:
        console.print("Strict mode: warnings fail validation")
    console.print()
    if report.passed:
        console.print("[green]Validation PASSED[/green]")
    else:
        console.print("[red]Validation FAILED[/red]")


__all__ = ["Finding", "Severity", "ValidationReport", "render_report"]
