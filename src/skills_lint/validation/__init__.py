"""Consistency checks over a skills repository."""

from .checks import DEFAULT_CHECKS, Check, SkillEntry, ValidationContext
from .report import Finding, ValidationReport, render_report
from .runner import check_titles, validate_repository

__all__ = [
    "Check",
    "DEFAULT_CHECKS",
    "Finding",
    "SkillEntry",
    "ValidationContext",
    "ValidationReport",
    "check_titles",
    "render_report",
    "validate_repository",
]
