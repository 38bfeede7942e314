"""Parsing and rendering for SKILL.md front-matter."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import SkillParseError

_FRONTMATTER_DELIMITER_RE = re.compile(r"^---\s*$")

_KNOWN_KEYS = frozenset(
    {
        "name",
        "description",
        "license",
        "compatibility",
        "metadata",
        "allowed-tools",
        "allowed_tools",
        "user-invocable",
        "user_invocable",
    }
)


class SkillMetadata(BaseModel):
    """The nested ``metadata`` block; unknown keys are preserved."""

    author: str | None = None
    version: str | None = None
    category: str | None = None

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class SkillFrontmatter(BaseModel):
    """Front-matter shared by every skill document.

    ``allowed-tools`` is written either as a space separated string or as a
    YAML list depending on the author; both are accepted and ``tools`` gives
    the normalized form. Keys outside the known set are kept in ``extras``.
    """

    name: str
    description: str
    license: str | None = None
    compatibility: str | None = None
    allowed_tools: str | list[str] | None = Field(default=None, alias="allowed-tools")
    user_invocable: bool | None = Field(default=None, alias="user-invocable")
    metadata: SkillMetadata | None = None

    extras: dict[str, Any] = Field(default_factory=dict, exclude=True)

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @property
    def tools(self) -> list[str]:
        if self.allowed_tools is None:
            return []
        if isinstance(self.allowed_tools, list):
            return [tool.strip() for tool in self.allowed_tools if tool.strip()]
        return split_tool_string(self.allowed_tools)

    @property
    def allowed_tools_style(self) -> Literal["string", "list"] | None:
        if self.allowed_tools is None:
            return None
        return "list" if isinstance(self.allowed_tools, list) else "string"

    @property
    def category(self) -> str | None:
        return self.metadata.category if self.metadata else None

    @property
    def version(self) -> str | None:
        return self.metadata.version if self.metadata else None


@dataclass(slots=True, frozen=True)
class SkillMd:
    frontmatter: SkillFrontmatter
    body: str


def split_tool_string(value: str) -> list[str]:
    """Split ``"Bash(git:*) Read, Grep"`` into tool tokens.

    Whitespace and commas separate tokens except inside parentheses.
    """
    tokens: list[str] = []
    current: list[str] = []
    depth = 0
    for char in value:
        if char == "(":
            depth += 1
        elif char == ")" and depth:
            depth -= 1
        if depth == 0 and (char.isspace() or char == ","):
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(char)
    if current:
        tokens.append("".join(current))
    return tokens


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split a document into its raw front-matter mapping and body."""
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or not _FRONTMATTER_DELIMITER_RE.match(lines[0]):
        raise SkillParseError("SKILL.md must start with YAML frontmatter ('---')")

    end_index: int | None = None
    for idx in range(1, len(lines)):
        if _FRONTMATTER_DELIMITER_RE.match(lines[idx]):
            end_index = idx
            break
    if end_index is None:
        raise SkillParseError("SKILL.md frontmatter block is not closed ('---')")

    yaml_block = "\n".join(lines[1:end_index])
    body = "\n".join(lines[end_index + 1 :])

    try:
        data = yaml.safe_load(yaml_block)
    except yaml.YAMLError as exc:
        raise SkillParseError(f"SKILL.md frontmatter is not valid YAML: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SkillParseError("SKILL.md frontmatter must be a YAML mapping")
    return data, body


def _format_validation_error(exc: ValidationError) -> list[str]:
    problems: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "frontmatter"
        problems.append(f"{location}: {error['msg']}")
    return problems


def parse_frontmatter(data: dict[str, Any]) -> SkillFrontmatter:
    """Validate a raw front-matter mapping."""
    known = {k: v for k, v in data.items() if k in _KNOWN_KEYS}
    extras = {k: v for k, v in data.items() if k not in _KNOWN_KEYS}

    try:
        frontmatter = SkillFrontmatter.model_validate(known)
    except ValidationError as exc:
        problems = _format_validation_error(exc)
        raise SkillParseError(
            "SKILL.md frontmatter is invalid: " + "; ".join(problems), problems
        ) from exc

    if extras:
        frontmatter.extras = dict(extras)
    return frontmatter


def parse_skill_md(text: str) -> SkillMd:
    """Parse a SKILL.md file into frontmatter and body."""
    data, body = split_frontmatter(text)
    return SkillMd(frontmatter=parse_frontmatter(data), body=body)


def render_skill_md(skill: SkillMd) -> str:
    """Render a SkillMd back into SKILL.md text."""
    frontmatter_data = skill.frontmatter.model_dump(
        by_alias=True,
        exclude_none=True,
        exclude={"extras"},
    )
    if skill.frontmatter.extras:
        frontmatter_data.update(skill.frontmatter.extras)

    yaml_text = yaml.safe_dump(
        frontmatter_data,
        sort_keys=False,
        allow_unicode=True,
    ).strip()

    body = skill.body
    if body and not body.startswith("\n"):
        body = "\n" + body

    return f"---\n{yaml_text}\n---{body}\n"


__all__ = [
    "SkillFrontmatter",
    "SkillMd",
    "SkillMetadata",
    "parse_frontmatter",
    "parse_skill_md",
    "render_skill_md",
    "split_frontmatter",
    "split_tool_string",
]
