"""Run every check over a corpus and collect a report."""

from __future__ import annotations

from collections.abc import Sequence

import logfire

from ..config import LintConfig
from ..logging_utils import StructuredLogger, get_structured_logger, log_structured
from ..progress import ValidationProgress
from ..skills.fs import SkillsFS
from .checks import DEFAULT_CHECKS, Check, ValidationContext
from .report import ValidationReport


def validate_repository(
    fs: SkillsFS,
    config: LintConfig | None = None,
    *,
    strict: bool = False,
    checks: Sequence[Check] = DEFAULT_CHECKS,
    root: str | None = None,
    show_progress: bool = False,
    logger: StructuredLogger | None = None,
) -> ValidationReport:
    """Validate the repository held in ``fs``.

    Args:
        fs: The repository, rooted at the directory holding ``skills/``.
        config: Validation settings; defaults apply when omitted.
        strict: Treat warnings as failures.
        checks: Checks to run, in order.
        root: Display name of the repository, recorded on the report.
        show_progress: Render a transient Rich progress bar.
        logger: Structured logger; logfire when omitted.
    """
    config = config or LintConfig()
    log = get_structured_logger(logger)
    report = ValidationReport(root=root, strict=strict)

    with logfire.span("validate repository", root=root, strict=strict):
        ctx = ValidationContext.build(fs, config)
        log_structured(
            log,
            "info",
            "Discovered skills",
            categories=len(ctx.categories),
            skills=len(ctx.skills),
        )

        with ValidationProgress(
            total=len(checks), description="Validating", enabled=show_progress
        ) as progress:
            for index, check in enumerate(checks, start=1):
                progress.update(index - 1, current_check=check.id, errors=report.errors)
                findings = list(check.run(ctx))
                report.findings.extend(findings)
                problems = sum(1 for finding in findings if finding.severity != "ok")
                if problems:
                    log_structured(log, "debug", "Check reported problems", check=check.id, problems=problems)
                progress.update(index, errors=report.errors)

        log_structured(
            log,
            "info" if report.passed else "warning",
            "Validation finished",
            errors=report.errors,
            warnings=report.warnings,
            passed=report.passed,
        )
    return report


def check_titles(checks: Sequence[Check] = DEFAULT_CHECKS) -> dict[str, str]:
    return {check.id: check.title for check in checks}


__all__ = ["check_titles", "validate_repository"]
