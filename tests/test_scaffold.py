from __future__ import annotations

from pathlib import Path

import pytest

from skills_lint.config import LintConfig
from skills_lint.exceptions import ScaffoldError
from skills_lint.scaffold import create_skill
from skills_lint.skills import SkillsFS, parse_skill_md
from skills_lint.validation import validate_repository


def test_create_skill_with_builtin_template(tmp_path: Path) -> None:
    result = create_skill(tmp_path, "security", "rbac")

    assert result.skill_file == tmp_path / "skills" / "security" / "rbac" / "SKILL.md"
    assert (result.skill_dir / "references").is_dir()
    assert result.used_template is None
    assert result.relative_file == "skills/security/rbac/SKILL.md"
    assert result.next_step == (
        "Next: edit skills/security/rbac/SKILL.md and replace __DESCRIPTION__ with actual description"
    )

    frontmatter = parse_skill_md(result.skill_file.read_text(encoding="utf-8")).frontmatter
    assert frontmatter.name == "rbac"
    assert frontmatter.category == "security"
    assert frontmatter.description == "__DESCRIPTION__"


def test_scaffolded_skill_passes_validation(tmp_path: Path) -> None:
    (tmp_path / ".claude").mkdir()
    (tmp_path / ".claude" / "rules.md").write_text("# Rules\n", encoding="utf-8")
    create_skill(tmp_path, "data", "caching")

    report = validate_repository(SkillsFS.from_disk(tmp_path, include_hidden=True), strict=True)

    assert report.passed, report.problems()


def test_create_skill_uses_repository_template(tmp_path: Path) -> None:
    template = tmp_path / ".templates" / "knowledge-skill" / "SKILL.md"
    template.parent.mkdir(parents=True)
    template.write_text(
        "---\nname: __NAME__\ndescription: __DESCRIPTION__\nmetadata:\n  category: __CATEGORY__\n---\n# __NAME__\n",
        encoding="utf-8",
    )

    result = create_skill(tmp_path, "operations", "incident-response")

    assert result.used_template == template
    assert result.skill_file.read_text(encoding="utf-8") == (
        "---\nname: incident-response\ndescription: __DESCRIPTION__\n"
        "metadata:\n  category: operations\n---\n# incident-response\n"
    )


@pytest.mark.parametrize(
    ("category", "name", "message"),
    [
        ("misc", "rbac", "CATEGORY must be one of"),
        ("security", "RBAC", "NAME must match"),
        ("security", "rbac2", "NAME must match"),
        ("security", "-rbac", "NAME must match"),
        ("security", "x-rbac", "must NOT start with x-"),
        ("security", "rbac\n", "NAME must match"),
    ],
)
def test_create_skill_rejects_bad_input(
    tmp_path: Path, category: str, name: str, message: str
) -> None:
    with pytest.raises(ScaffoldError, match=message):
        create_skill(tmp_path, category, name)
    assert not (tmp_path / "skills").exists()


def test_create_skill_refuses_existing(tmp_path: Path) -> None:
    create_skill(tmp_path, "security", "rbac")
    with pytest.raises(ScaffoldError, match="skills/security/rbac already exists"):
        create_skill(tmp_path, "security", "rbac")


def test_create_skill_honours_configured_categories(tmp_path: Path) -> None:
    config = LintConfig(valid_categories=["research"], skills_dir="kb")

    result = create_skill(tmp_path, "research", "papers", config=config)

    assert result.skill_file == tmp_path / "kb" / "research" / "papers" / "SKILL.md"
