"""Custom exceptions used across skills-lint."""

from __future__ import annotations


class SkillsLintError(Exception):
    """Base class for errors raised by skills-lint."""


class SkillParseError(SkillsLintError, ValueError):
    """Raised when a SKILL.md document cannot be parsed into front-matter."""

    def __init__(self, message: str, problems: list[str] | None = None) -> None:
        super().__init__(message)
        self.problems: list[str] = list(problems) if problems else [message]


class ConfigError(SkillsLintError):
    """Raised when a skills-lint configuration file is malformed."""


class ScaffoldError(SkillsLintError):
    """Raised when a new skill cannot be created."""


__all__ = ["ConfigError", "ScaffoldError", "SkillParseError", "SkillsLintError"]
