"""Extraction of cross-references written in skill bodies.

Skills point at two kinds of targets in prose:

* reference documents inside the skill, e.g. ``See `references/indexing.md```
* other skills, e.g. ``See the `code/api-design` skill``
"""

from __future__ import annotations

import re

from .fs import SkillsFS, normalize_rel_path
from .models import ReferenceLink

_REFERENCE_LINK_RE = re.compile(r"(?<![\w./-])(?:\./)?(references/[\w./-]*?[\w-]\.md)\b")
_SKILL_LINK_RE = re.compile(r"`([a-z][-a-z]*/[a-z][-a-z]*)`\s+skill\b")
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")


def _dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered


def find_reference_links(body: str) -> list[str]:
    """Return the distinct ``references/*.md`` paths mentioned in ``body``."""
    return _dedupe(_REFERENCE_LINK_RE.findall(body))


def find_skill_links(body: str) -> list[str]:
    """Return the distinct ``category/name`` skill links mentioned in ``body``."""
    return _dedupe(_SKILL_LINK_RE.findall(body))


def find_reference_sections(body: str) -> list[str]:
    """Return reference links that appear under a "...References..." heading."""
    links: list[str] = []
    section_level: int | None = None
    for line in body.splitlines():
        heading = _HEADING_RE.match(line)
        if heading:
            level = len(heading.group(1))
            if "references" in heading.group(2).lower():
                section_level = level
            elif section_level is not None and level <= section_level:
                section_level = None
            continue
        if section_level is not None:
            links.extend(_REFERENCE_LINK_RE.findall(line))
    return _dedupe(links)


def resolve_reference(skill_dir: str, link: str) -> str:
    """Return the corpus path a reference link inside ``skill_dir`` points to."""
    return normalize_rel_path(f"{skill_dir}/{link}" if skill_dir else link)


def collect_reference_links(fs: SkillsFS, skill_dir: str, body: str) -> list[ReferenceLink]:
    links: list[ReferenceLink] = []
    for link in find_reference_links(body):
        try:
            resolved = resolve_reference(skill_dir, link)
        except ValueError:
            links.append(
                ReferenceLink(
                    skill_path=skill_dir,
                    link=link,
                    resolved_path=f"{skill_dir}/{link}",
                    exists=False,
                    escapes=True,
                )
            )
            continue
        links.append(
            ReferenceLink(
                skill_path=skill_dir,
                link=link,
                resolved_path=resolved,
                exists=fs.is_file(resolved),
            )
        )
    return links


__all__ = [
    "collect_reference_links",
    "find_reference_links",
    "find_reference_sections",
    "find_skill_links",
    "resolve_reference",
]
