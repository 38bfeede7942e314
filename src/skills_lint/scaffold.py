"""Create new knowledge skills from the repository template."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import logfire

from .config import LintConfig
from .exceptions import ScaffoldError
from .skills.fs import SKILL_FILENAME
from .validation.checks import NAME_RE

NAME_PLACEHOLDER = "__NAME__"
CATEGORY_PLACEHOLDER = "__CATEGORY__"
DESCRIPTION_PLACEHOLDER = "__DESCRIPTION__"

DEFAULT_TEMPLATE = """---
name: __NAME__
description: __DESCRIPTION__
license: Apache-2.0
compatibility: Works with any agent that reads Markdown skills
allowed-tools: Read Grep Glob
metadata:
  author: ""
  version: "0.1.0"
  category: __CATEGORY__
---

# __NAME__

__DESCRIPTION__

## Key Concepts

| Concept | Summary |
|---|---|
| | |

## Best Practices

-

## When to Load References

- Add reference documents under `references/` and link them here.
"""


@dataclass(frozen=True)
class ScaffoldResult:
    skill_dir: Path
    skill_file: Path
    relative_file: str
    used_template: Path | None

    @property
    def next_step(self) -> str:
        return f"Next: edit {self.relative_file} and replace {DESCRIPTION_PLACEHOLDER} with actual description"


def validate_new_skill(category: str, name: str, config: LintConfig) -> None:
    """Raise ScaffoldError when ``category``/``name`` are not acceptable."""
    if category not in config.valid_categories:
        raise ScaffoldError(f"CATEGORY must be one of: {', '.join(config.valid_categories)}")
    if not NAME_RE.fullmatch(name):
        raise ScaffoldError(f"NAME must match {NAME_RE.pattern} (lowercase, hyphenated)")
    if name.startswith("x-"):
        raise ScaffoldError("NAME must NOT start with x- (knowledge skills don't use x- prefix)")


def render_template(template: str, *, category: str, name: str) -> str:
    return template.replace(NAME_PLACEHOLDER, name).replace(CATEGORY_PLACEHOLDER, category)


def create_skill(
    root: Path,
    category: str,
    name: str,
    *,
    config: LintConfig | None = None,
) -> ScaffoldResult:
    """Create ``skills/<category>/<name>/SKILL.md`` with an empty ``references/``.

    The repository template at ``config.template_path`` is used when present,
    otherwise the built-in template. Nothing is written when validation fails.
    """
    config = config or LintConfig()
    validate_new_skill(category, name, config)

    skill_dir = root / config.skills_dir / category / name
    if skill_dir.exists():
        raise ScaffoldError(f"{config.skills_dir}/{category}/{name} already exists")

    template_file = root / config.template_path
    if template_file.is_file():
        template = template_file.read_text(encoding="utf-8")
        used_template: Path | None = template_file
    else:
        template = DEFAULT_TEMPLATE
        used_template = None

    (skill_dir / "references").mkdir(parents=True)
    skill_file = skill_dir / SKILL_FILENAME
    skill_file.write_text(render_template(template, category=category, name=name), encoding="utf-8")

    logfire.info(
        "Created skill",
        category=category,
        name=name,
        template=str(used_template) if used_template else "built-in",
    )
    return ScaffoldResult(
        skill_dir=skill_dir,
        skill_file=skill_file,
        relative_file=f"{config.skills_dir}/{category}/{name}/{SKILL_FILENAME}",
        used_template=used_template,
    )


__all__ = [
    "DEFAULT_TEMPLATE",
    "ScaffoldResult",
    "create_skill",
    "render_template",
    "validate_new_skill",
]
