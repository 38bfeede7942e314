from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from skills_lint.config import CONFIG_ENV_VAR, DEFAULT_CATEGORIES, LintConfig, load_config
from skills_lint.exceptions import ConfigError


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


def test_defaults_when_no_file(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config == LintConfig()
    assert config.valid_categories == list(DEFAULT_CATEGORIES)
    assert config.forbidden_patterns == ["ccsetup", "x-workflows"]


def test_repository_config_file(tmp_path: Path) -> None:
    (tmp_path / ".skills-lint.yaml").write_text(
        "valid_categories: [data, meta]\ncredential_min_length: 40\n", encoding="utf-8"
    )

    config = load_config(tmp_path)

    assert config.valid_categories == ["data", "meta"]
    assert config.credential_min_length == 40
    assert config.rules_file == ".claude/rules.md"


def test_explicit_path_wins_over_env_and_repository(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / ".skills-lint.yaml").write_text("skills_dir: repo\n", encoding="utf-8")
    env_file = tmp_path / "env.yaml"
    env_file.write_text("skills_dir: env\n", encoding="utf-8")
    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("skills_dir: explicit\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(env_file))

    assert load_config(tmp_path, explicit).skills_dir == "explicit"
    assert load_config(tmp_path).skills_dir == "env"


def test_empty_file_means_defaults(tmp_path: Path) -> None:
    (tmp_path / ".skills-lint.yaml").write_text("", encoding="utf-8")
    assert load_config(tmp_path) == LintConfig()


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("unknown_key: 1\n", "unknown_key"),
        ("credential_min_length: 2\n", "credential_min_length"),
        ("- a\n", "must be a YAML mapping"),
        ("valid_categories: [unclosed\n", "invalid YAML"),
        ("forbidden_patterns: ['ccsetup(']\n", "invalid regular expression"),
        ("step_patterns: ['[0-9']\n", "step_patterns"),
    ],
)
def test_malformed_config(tmp_path: Path, content: str, message: str) -> None:
    (tmp_path / ".skills-lint.yaml").write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path)


def test_missing_explicit_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(tmp_path, tmp_path / "nope.yaml")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "also-nope.yaml"))
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(tmp_path)


def test_patterns_are_compiled_on_construction() -> None:
    with pytest.raises(ValidationError, match="invalid regular expression 'ccsetup\\('"):
        LintConfig(forbidden_patterns=["ccsetup("])
    assert LintConfig(step_patterns=[r"\bStage [0-9]"]).step_patterns == [r"\bStage [0-9]"]
