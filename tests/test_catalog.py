from __future__ import annotations

from rich.console import Console

from skills_lint.catalog import build_catalog, catalog_table
from skills_lint.skills import SkillsFS


def test_build_catalog_lists_parseable_skills(sample_fs: SkillsFS, skill_text) -> None:
    sample_fs.write_text("skills/data/broken/SKILL.md", "no front-matter here")
    sample_fs.write_text("skills/meta/commits/SKILL.md", skill_text("commits", category=None, version=None))
    sample_fs.write_text("docs/SKILL.md", skill_text("outside"))

    catalog = build_catalog(sample_fs)

    assert [(s.skill_path, s.name, s.category, s.version) for s in catalog] == [
        ("skills/code/api-design", "api-design", "code", "1.0.0"),
        ("skills/data/database-design", "database-design", "data", "1.2.0"),
        ("skills/meta/commits", "commits", "meta", None),
        ("skills/security/supply-chain", "supply-chain", "security", "1.0.0"),
    ]
    assert catalog[1].description == "Relational schema design guidance."


def test_catalog_table_renders_rows(sample_fs: SkillsFS) -> None:
    console = Console(record=True, width=160, color_system=None)

    console.print(catalog_table(build_catalog(sample_fs)))
    text = console.export_text()

    assert "database-design" in text
    assert "REST API conventions." in text
    assert "1.2.0" in text
