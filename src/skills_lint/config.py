"""Configuration for repository validation and scaffolding."""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigError
from .skills.fs import DEFAULT_EXCLUDE_DIRS

CONFIG_ENV_VAR = "SKILLS_LINT_CONFIG"
CONFIG_FILENAME = ".skills-lint.yaml"

DEFAULT_CATEGORIES = (
    "security",
    "quality",
    "code",
    "data",
    "delivery",
    "operations",
    "meta",
)


class LintConfig(BaseModel):
    """Settings shared by ``validate``, ``new-skill`` and ``catalog``."""

    skills_dir: str = "skills"
    rules_file: str = ".claude/rules.md"
    template_path: str = ".templates/knowledge-skill/SKILL.md"
    valid_categories: list[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    forbidden_patterns: list[str] = Field(
        default_factory=lambda: ["ccsetup", "x-workflows"],
        description="Regular expressions that must not appear under skills_dir.",
    )
    credential_category: str = "security"
    credential_min_length: int = Field(default=32, ge=8)
    credential_allow_markers: list[str] = Field(
        default_factory=lambda: ["placeholder", "example", "${", "your-"]
    )
    step_patterns: list[str] = Field(
        default_factory=lambda: [
            r"\bStep [0-9]",
            r"\bPhase [0-9]",
            r"First,.*Then,",
            r"^\s*[0-9]+\.\s",
        ],
        description="Regular expressions flagging step-by-step execution content.",
    )
    step_exempt_dirs: list[str] = Field(default_factory=lambda: ["references", "examples"])
    exclude_dirs: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))
    max_file_bytes: int | None = Field(default=5_000_000, gt=0)

    model_config = ConfigDict(extra="forbid")

    @field_validator("forbidden_patterns", "step_patterns")
    @classmethod
    def _compile_patterns(cls, patterns: list[str]) -> list[str]:
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from exc
        return patterns


def _config_candidates(root: Path, path: Path | None) -> list[tuple[Path, bool]]:
    """Return (candidate, required) pairs in lookup order."""
    if path is not None:
        return [(path, True)]
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return [(Path(env_path), True)]
    return [(root / CONFIG_FILENAME, False)]


def load_config(root: Path, path: Path | None = None) -> LintConfig:
    """Load configuration for the repository at ``root``.

    Lookup order: explicit ``path``, ``$SKILLS_LINT_CONFIG``, then
    ``<root>/.skills-lint.yaml``. Defaults apply when nothing is found. An
    explicitly requested file that does not exist is an error.
    """
    for candidate, required in _config_candidates(root, path):
        if not candidate.is_file():
            if required:
                raise ConfigError(f"config file not found: {candidate}")
            continue
        try:
            data = yaml.safe_load(candidate.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigError(f"{candidate}: invalid YAML: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"{candidate}: config must be a YAML mapping")
        try:
            return LintConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"{candidate}: {exc}") from exc
    return LintConfig()


__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "DEFAULT_CATEGORIES",
    "LintConfig",
    "load_config",
]
