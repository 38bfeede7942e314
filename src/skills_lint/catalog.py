"""List the skills in a corpus with their front-matter metadata."""

from __future__ import annotations

from rich.table import Table

from .config import LintConfig
from .exceptions import SkillParseError
from .logging_utils import StructuredLogger, get_structured_logger, log_structured
from .skills.fs import SKILL_FILENAME, SkillsFS
from .skills.models import SkillSummary
from .skills.skill_md import parse_skill_md


def _first_line(text: str) -> str:
    for line in text.strip().splitlines():
        if line.strip():
            return line.strip()
    return ""


def build_catalog(
    fs: SkillsFS,
    config: LintConfig | None = None,
    *,
    logger: StructuredLogger | None = None,
) -> list[SkillSummary]:
    """Summarize every parseable skill under ``config.skills_dir``.

    Skills whose SKILL.md cannot be parsed are logged and left out.
    """
    config = config or LintConfig()
    log = get_structured_logger(logger)
    prefix = f"{config.skills_dir}/"
    summaries: list[SkillSummary] = []
    for skill_dir in fs.iter_skill_dirs():
        if not skill_dir.startswith(prefix):
            continue
        skill_md_path = f"{skill_dir}/{SKILL_FILENAME}"
        try:
            skill = parse_skill_md(fs.read_text(skill_md_path))
        except (SkillParseError, UnicodeDecodeError) as exc:
            log_structured(log, "warning", "Skipping unparseable skill", path=skill_md_path, error=str(exc))
            continue
        parts = skill_dir[len(prefix) :].split("/")
        summaries.append(
            SkillSummary(
                skill_path=skill_dir,
                name=skill.frontmatter.name,
                description=skill.frontmatter.description.strip(),
                category=skill.frontmatter.category or (parts[0] if len(parts) > 1 else None),
                version=skill.frontmatter.version,
            )
        )
    log_structured(log, "info", "Built skill catalog", skills=len(summaries))
    return summaries


def catalog_table(summaries: list[SkillSummary]) -> Table:
    table = Table(title="Skills")
    table.add_column("Category", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Version")
    table.add_column("Description", overflow="fold")
    for summary in summaries:
        table.add_row(
            summary.category or "-",
            summary.name,
            summary.version or "-",
            _first_line(summary.description),
        )
    return table


__all__ = ["build_catalog", "catalog_table"]
