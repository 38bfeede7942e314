"""Pydantic models describing skills in a corpus."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SkillSummary(BaseModel):
    skill_path: str
    name: str
    description: str
    category: str | None = Field(
        default=None,
        description="metadata.category, falling back to the enclosing directory",
    )
    version: str | None = None


class ReferenceLink(BaseModel):
    skill_path: str
    link: str = Field(description="The path as written in SKILL.md")
    resolved_path: str
    exists: bool
    escapes: bool = Field(default=False, description="The link leaves the skill directory")


__all__ = ["ReferenceLink", "SkillSummary"]
