"""Validation and scaffolding for repositories of Markdown knowledge skills."""

from __future__ import annotations

from .catalog import build_catalog
from .config import LintConfig, load_config
from .exceptions import ConfigError, ScaffoldError, SkillParseError, SkillsLintError
from .scaffold import ScaffoldResult, create_skill
from .skills import (
    SkillFrontmatter,
    SkillMd,
    SkillMetadata,
    SkillsFS,
    SkillSummary,
    parse_skill_md,
    render_skill_md,
)
from .validation import Finding, ValidationReport, validate_repository

__all__ = [
    "ConfigError",
    "Finding",
    "LintConfig",
    "ScaffoldError",
    "ScaffoldResult",
    "SkillFrontmatter",
    "SkillMd",
    "SkillMetadata",
    "SkillParseError",
    "SkillSummary",
    "SkillsFS",
    "SkillsLintError",
    "ValidationReport",
    "build_catalog",
    "create_skill",
    "load_config",
    "parse_skill_md",
    "render_skill_md",
    "validate_repository",
]

__version__ = "0.1.0"
