from __future__ import annotations

from collections.abc import Callable, Iterator

import logfire
import pytest

from skills_lint.skills import SkillsFS

SkillTextFactory = Callable[..., str]


@pytest.fixture(scope="session", autouse=True)
def quiet_logfire() -> Iterator[None]:
    logfire.configure(send_to_logfire=False, console=False)
    yield


def _skill_text(
    name: str,
    *,
    category: str | None = "data",
    version: str | None = "1.0.0",
    description: str = "Best practices.",
    allowed_tools: str | list[str] | None = "Read Grep Glob",
    body: str = "# Title\n\nProse only.\n",
) -> str:
    lines = ["---", f"name: {name}", f"description: {description}", "license: Apache-2.0"]
    if isinstance(allowed_tools, list):
        lines.append(f"allowed-tools: [{', '.join(allowed_tools)}]")
    elif allowed_tools is not None:
        lines.append(f"allowed-tools: {allowed_tools}")
    metadata = {"author": "platform-team", "version": version, "category": category}
    metadata_lines = [
        f"  {key}: \"{value}\"" for key, value in metadata.items() if value is not None
    ]
    if metadata_lines:
        lines.append("metadata:")
        lines.extend(metadata_lines)
    lines.append("---")
    return "\n".join(lines) + "\n" + body


@pytest.fixture
def skill_text() -> SkillTextFactory:
    return _skill_text


@pytest.fixture
def sample_fs() -> SkillsFS:
    """A repository that passes every check without warnings."""
    fs = SkillsFS()
    fs.write_text(".claude/rules.md", "# Rules\n")
    fs.write_text(
        "skills/data/database-design/SKILL.md",
        _skill_text(
            "database-design",
            version="1.2.0",
            description="Relational schema design guidance.",
            body=(
                "# Database Design\n\n"
                "Normalize until it hurts. See the `code/api-design` skill for API shapes.\n\n"
                "## When to Load References\n\n"
                "- Index tuning: see `references/indexing.md`\n"
            ),
        ),
    )
    fs.write_text(
        "skills/data/database-design/references/indexing.md",
        "# Indexing\n\nComposite indexes follow the query.\n",
    )
    fs.write_text(
        "skills/code/api-design/SKILL.md",
        _skill_text("api-design", category="code", description="REST API conventions."),
    )
    fs.write_text(
        "skills/security/supply-chain/SKILL.md",
        _skill_text(
            "supply-chain",
            category="security",
            description="SBOM and provenance.",
            body="# Supply Chain\n\nPin digests such as `sha256:<digest>`.\n",
        ),
    )
    return fs
