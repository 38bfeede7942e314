"""Filesystem-first skill documents: parsing, rendering and cross-references."""

from .fs import Directory, File, SkillsFS, normalize_rel_path
from .models import ReferenceLink, SkillSummary
from .references import (
    collect_reference_links,
    find_reference_links,
    find_reference_sections,
    find_skill_links,
    resolve_reference,
)
from .skill_md import (
    SkillFrontmatter,
    SkillMd,
    SkillMetadata,
    parse_skill_md,
    render_skill_md,
    split_frontmatter,
)

__all__ = [
    "Directory",
    "File",
    "ReferenceLink",
    "SkillFrontmatter",
    "SkillMd",
    "SkillMetadata",
    "SkillSummary",
    "SkillsFS",
    "collect_reference_links",
    "find_reference_links",
    "find_reference_sections",
    "find_skill_links",
    "normalize_rel_path",
    "parse_skill_md",
    "render_skill_md",
    "resolve_reference",
    "split_frontmatter",
]
