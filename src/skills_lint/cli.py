"""Command-line entry point: ``skills-lint``."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

import logfire
from rich.console import Console
from rich.markup import escape

from . import __version__
from .catalog import build_catalog, catalog_table
from .config import LintConfig, load_config
from .exceptions import ConfigError, ScaffoldError
from .scaffold import create_skill
from .skills.fs import SkillsFS
from .validation import check_titles, render_report, validate_repository


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skills-lint",
        description="Validate and scaffold a repository of Markdown knowledge skills.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command")

    validate = subparsers.add_parser("validate", help="Run repository validation.")
    validate.add_argument(
        "root",
        nargs="?",
        type=Path,
        default=Path("."),
        help="Repository root (the directory holding skills/).",
    )
    validate.add_argument(
        "--strict",
        action="store_true",
        help="Fail on warnings as well as errors.",
    )
    validate.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON instead of coloured text.",
    )
    validate.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while checks run.",
    )
    validate.add_argument("--config", type=Path, default=None, help="Path to a YAML config file.")

    new_skill = subparsers.add_parser(
        "new-skill", help="Create a new knowledge skill (--category security --name rbac)."
    )
    new_skill.add_argument("root", nargs="?", type=Path, default=Path("."), help="Repository root.")
    new_skill.add_argument("--category", required=True, help="Skill category directory.")
    new_skill.add_argument("--name", required=True, help="Skill name (lowercase, hyphenated).")
    new_skill.add_argument("--config", type=Path, default=None, help="Path to a YAML config file.")

    catalog = subparsers.add_parser("catalog", help="List skills with their metadata.")
    catalog.add_argument("root", nargs="?", type=Path, default=Path("."), help="Repository root.")
    catalog.add_argument("--json", action="store_true", help="Print the catalog as JSON.")
    catalog.add_argument("--config", type=Path, default=None, help="Path to a YAML config file.")

    return parser


def _load_fs(root: Path, config: LintConfig) -> SkillsFS:
    return SkillsFS.from_disk(
        root,
        include_hidden=True,
        exclude_dirs=config.exclude_dirs,
        max_file_bytes=config.max_file_bytes,
    )


def _run_validate(args: argparse.Namespace, console: Console) -> int:
    config = load_config(args.root, args.config)
    fs = _load_fs(args.root, config)
    report = validate_repository(
        fs,
        config,
        strict=args.strict,
        root=str(args.root),
        show_progress=args.progress and not args.json,
    )
    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        render_report(report, console, titles=check_titles())
    return 0 if report.passed else 1


def _run_new_skill(args: argparse.Namespace, console: Console) -> int:
    config = load_config(args.root, args.config)
    result = create_skill(args.root, args.category, args.name, config=config)
    console.print(f"Created {escape(result.relative_file)}")
    console.print(escape(result.next_step))
    return 0


def _run_catalog(args: argparse.Namespace, console: Console) -> int:
    config = load_config(args.root, args.config)
    summaries = build_catalog(_load_fs(args.root, config), config)
    if args.json:
        print(json.dumps([summary.model_dump() for summary in summaries], indent=2))
    else:
        console.print(catalog_table(summaries))
    return 0


_COMMANDS = {
    "validate": _run_validate,
    "new-skill": _run_new_skill,
    "catalog": _run_catalog,
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 2

    logfire.configure(console=False, send_to_logfire="if-token-present")
    console = Console(soft_wrap=True)

    if not args.root.is_dir():
        console.print(f"[red]ERROR:[/red] {escape(str(args.root))} is not a directory")
        return 1
    try:
        return _COMMANDS[args.command](args, console)
    except (ConfigError, ScaffoldError, ValueError) as exc:
        console.print(f"[red]ERROR:[/red] {escape(str(exc))}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
