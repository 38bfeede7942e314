"""Repository checks for a skills corpus.

Each check is a generator over a :class:`ValidationContext` yielding
:class:`Finding` records. Checks never stop the run; every check sees the
whole corpus.
"""

from __future__ import annotations

import re
from collections import Counter, defaultdict
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from ..config import LintConfig
from ..exceptions import SkillParseError
from ..skills.fs import SKILL_FILENAME, SkillsFS
from ..skills.references import collect_reference_links, find_skill_links
from ..skills.skill_md import SkillMd, parse_skill_md
from .report import Finding

NAME_RE = re.compile(r"^[a-z][-a-z]*$")
SEMVER_RE = re.compile(r"^\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.+-]+)?$")
_ANGLE_PLACEHOLDER_RE = re.compile(r"<[^>]*>")


@dataclass
class SkillEntry:
    """A ``skills/<category>/<name>`` directory and its parsed SKILL.md."""

    path: str
    category: str
    dir_name: str
    has_skill_md: bool = False
    skill_md: SkillMd | None = None
    parse_error: SkillParseError | None = None

    @property
    def skill_md_path(self) -> str:
        return f"{self.path}/{SKILL_FILENAME}"


@dataclass
class ValidationContext:
    fs: SkillsFS
    config: LintConfig
    categories: list[str] = field(default_factory=list)
    skills: list[SkillEntry] = field(default_factory=list)

    @classmethod
    def build(cls, fs: SkillsFS, config: LintConfig) -> ValidationContext:
        ctx = cls(fs=fs, config=config)
        skills_dir = config.skills_dir
        if not fs.is_dir(skills_dir):
            return ctx
        ctx.categories = fs.subdirs(skills_dir)
        for category in ctx.categories:
            for dir_name in fs.subdirs(f"{skills_dir}/{category}"):
                entry = SkillEntry(
                    path=f"{skills_dir}/{category}/{dir_name}",
                    category=category,
                    dir_name=dir_name,
                )
                entry.has_skill_md = fs.is_file(entry.skill_md_path)
                if entry.has_skill_md:
                    try:
                        entry.skill_md = parse_skill_md(fs.read_text(entry.skill_md_path))
                    except SkillParseError as exc:
                        entry.parse_error = exc
                    except UnicodeDecodeError as exc:
                        entry.parse_error = SkillParseError(f"SKILL.md is not valid UTF-8: {exc}")
                ctx.skills.append(entry)
        return ctx

    @property
    def parsed(self) -> list[tuple[SkillEntry, SkillMd]]:
        return [(entry, entry.skill_md) for entry in self.skills if entry.skill_md]

    def iter_text_files(self, prefix: str) -> Iterator[tuple[str, str]]:
        """Yield (path, text) under ``prefix``, skipping binary files."""
        for path, file in self.fs.iter_files(prefix):
            try:
                yield path, file.read_text()
            except UnicodeDecodeError:
                continue


CheckFn = Callable[[ValidationContext], Iterator[Finding]]


@dataclass(frozen=True)
class Check:
    id: str
    title: str
    run: CheckFn


def check_rules_file(ctx: ValidationContext) -> Iterator[Finding]:
    rules = ctx.config.rules_file
    if ctx.fs.is_file(rules):
        yield Finding(severity="ok", check="rules-file", message=f"{rules} exists", path=rules)
    else:
        yield Finding(severity="error", check="rules-file", message=f"{rules} is missing", path=rules)


def check_categories(ctx: ValidationContext) -> Iterator[Finding]:
    skills_dir = ctx.config.skills_dir
    if not ctx.fs.is_dir(skills_dir):
        yield Finding(
            severity="warning",
            check="categories",
            message=f"{skills_dir}/ directory not found",
            path=skills_dir,
        )
        return
    for category in ctx.categories:
        path = f"{skills_dir}/{category}"
        if category in ctx.config.valid_categories:
            yield Finding(severity="ok", check="categories", message=f"{path} is a valid category", path=path)
        else:
            yield Finding(
                severity="warning",
                check="categories",
                message=f"{path} is not a standard category",
                path=path,
            )


def check_skill_md(ctx: ValidationContext) -> Iterator[Finding]:
    for entry in ctx.skills:
        if entry.has_skill_md:
            yield Finding(
                severity="ok", check="skill-md", message=f"{entry.path} has {SKILL_FILENAME}", path=entry.path
            )
        else:
            yield Finding(
                severity="error",
                check="skill-md",
                message=f"{entry.path} is missing {SKILL_FILENAME}",
                path=entry.path,
            )


def check_frontmatter(ctx: ValidationContext) -> Iterator[Finding]:
    failed = False
    checked = 0
    for entry in ctx.skills:
        if not entry.has_skill_md:
            continue
        checked += 1
        if entry.parse_error is None:
            continue
        failed = True
        for problem in entry.parse_error.problems:
            yield Finding(
                severity="error",
                check="frontmatter",
                message=f"{entry.skill_md_path}: {problem}",
                path=entry.skill_md_path,
            )
    if not failed:
        yield Finding(
            severity="ok",
            check="frontmatter",
            message=f"All {checked} SKILL.md files have valid front-matter",
        )


def check_name_format(ctx: ValidationContext) -> Iterator[Finding]:
    failed = False
    for entry, skill in ctx.parsed:
        name = skill.frontmatter.name
        problem: str | None = None
        if not NAME_RE.fullmatch(name):
            problem = f"name '{name}' must match {NAME_RE.pattern} (lowercase, hyphenated)"
        elif name.startswith("x-"):
            problem = f"name '{name}' must not start with x- (knowledge skills don't use the x- prefix)"
        if problem:
            failed = True
            yield Finding(
                severity="error",
                check="name-format",
                message=f"{entry.skill_md_path}: {problem}",
                path=entry.skill_md_path,
            )
    if not failed:
        yield Finding(severity="ok", check="name-format", message="All skill names are well-formed")


def check_name_matches_dir(ctx: ValidationContext) -> Iterator[Finding]:
    failed = False
    for entry, skill in ctx.parsed:
        if skill.frontmatter.name != entry.dir_name:
            failed = True
            yield Finding(
                severity="warning",
                check="name-matches-dir",
                message=(
                    f"{entry.skill_md_path}: name '{skill.frontmatter.name}' "
                    f"does not match directory '{entry.dir_name}'"
                ),
                path=entry.skill_md_path,
            )
    if not failed:
        yield Finding(
            severity="ok", check="name-matches-dir", message="All skill names match their directories"
        )


def check_unique_names(ctx: ValidationContext) -> Iterator[Finding]:
    owners: dict[str, list[str]] = defaultdict(list)
    for entry, skill in ctx.parsed:
        owners[skill.frontmatter.name].append(entry.path)
    duplicates = {name: paths for name, paths in owners.items() if len(paths) > 1}
    for name in sorted(duplicates):
        yield Finding(
            severity="error",
            check="unique-names",
            message=f"name '{name}' is used by {len(duplicates[name])} skills: {', '.join(duplicates[name])}",
        )
    if not duplicates:
        yield Finding(severity="ok", check="unique-names", message="All skill names are unique")


def check_metadata_category(ctx: ValidationContext) -> Iterator[Finding]:
    failed = False
    for entry, skill in ctx.parsed:
        category = skill.frontmatter.category
        if category is None:
            message = f"{entry.skill_md_path}: metadata.category is missing"
        elif category != entry.category:
            message = (
                f"{entry.skill_md_path}: metadata.category '{category}' "
                f"does not match directory '{entry.category}'"
            )
        else:
            continue
        failed = True
        yield Finding(severity="warning", check="metadata-category", message=message, path=entry.skill_md_path)
    if not failed:
        yield Finding(
            severity="ok", check="metadata-category", message="All metadata.category values match their directories"
        )


def check_metadata_version(ctx: ValidationContext) -> Iterator[Finding]:
    failed = False
    for entry, skill in ctx.parsed:
        version = skill.frontmatter.version
        if version is None:
            message = f"{entry.skill_md_path}: metadata.version is missing"
        elif not SEMVER_RE.match(version):
            message = f"{entry.skill_md_path}: metadata.version '{version}' is not MAJOR.MINOR.PATCH"
        else:
            continue
        failed = True
        yield Finding(severity="warning", check="metadata-version", message=message, path=entry.skill_md_path)
    if not failed:
        yield Finding(severity="ok", check="metadata-version", message="All metadata.version values are semver")


def check_allowed_tools(ctx: ValidationContext) -> Iterator[Finding]:
    failed = False
    styles: Counter[str] = Counter()
    declared: list[tuple[SkillEntry, str]] = []
    for entry, skill in ctx.parsed:
        style = skill.frontmatter.allowed_tools_style
        if style is None:
            continue
        if not skill.frontmatter.tools:
            failed = True
            yield Finding(
                severity="warning",
                check="allowed-tools",
                message=f"{entry.skill_md_path}: allowed-tools is present but empty",
                path=entry.skill_md_path,
            )
        styles[style] += 1
        declared.append((entry, style))

    if len(styles) > 1:
        preferred = "list" if styles["list"] > styles["string"] else "string"
        for entry, style in declared:
            if style != preferred:
                failed = True
                yield Finding(
                    severity="warning",
                    check="allowed-tools",
                    message=(
                        f"{entry.skill_md_path}: allowed-tools is written as a {style}; "
                        f"most skills use a {preferred}"
                    ),
                    path=entry.skill_md_path,
                )
    if not failed:
        yield Finding(severity="ok", check="allowed-tools", message="allowed-tools is declared consistently")


def check_reference_links(ctx: ValidationContext) -> Iterator[Finding]:
    failed = False
    for entry, skill in ctx.parsed:
        for link in collect_reference_links(ctx.fs, entry.path, skill.body):
            if link.exists:
                continue
            failed = True
            if link.escapes:
                yield Finding(
                    severity="error",
                    check="reference-links",
                    message=f"{entry.skill_md_path}: link {link.link} escapes the skill directory",
                    path=entry.skill_md_path,
                )
                continue
            yield Finding(
                severity="error",
                check="reference-links",
                message=f"{entry.skill_md_path}: referenced file {link.link} does not exist",
                path=link.resolved_path,
            )
    if not failed:
        yield Finding(severity="ok", check="reference-links", message="All referenced files exist")


def check_orphan_references(ctx: ValidationContext) -> Iterator[Finding]:
    failed = False
    for entry, skill in ctx.parsed:
        linked = {link.resolved_path for link in collect_reference_links(ctx.fs, entry.path, skill.body)}
        for path, _ in ctx.fs.iter_files(f"{entry.path}/references"):
            if not path.endswith(".md") or path in linked:
                continue
            failed = True
            yield Finding(
                severity="warning",
                check="orphan-references",
                message=f"{path} is not referenced from {entry.skill_md_path}",
                path=path,
            )
    if not failed:
        yield Finding(severity="ok", check="orphan-references", message="All reference files are linked")


def check_skill_links(ctx: ValidationContext) -> Iterator[Finding]:
    failed = False
    skills_dir = ctx.config.skills_dir
    for entry, skill in ctx.parsed:
        for link in find_skill_links(skill.body):
            if ctx.fs.is_file(f"{skills_dir}/{link}/{SKILL_FILENAME}"):
                continue
            failed = True
            yield Finding(
                severity="warning",
                check="skill-links",
                message=f"{entry.skill_md_path}: linked skill {link} does not exist",
                path=entry.skill_md_path,
            )
    if not failed:
        yield Finding(severity="ok", check="skill-links", message="All linked skills exist")


def check_forbidden_deps(ctx: ValidationContext) -> Iterator[Finding]:
    patterns = ctx.config.forbidden_patterns
    if not patterns:
        return
    matcher = re.compile("|".join(f"(?:{pattern})" for pattern in patterns))
    failed = False
    for path, text in ctx.iter_text_files(ctx.config.skills_dir):
        for lineno, line in enumerate(text.splitlines(), start=1):
            match = matcher.search(line)
            if match is None:
                continue
            failed = True
            yield Finding(
                severity="error",
                check="forbidden-deps",
                message=f"{path}:{lineno}: references forbidden dependency '{match.group(0)}'",
                path=path,
            )
    if not failed:
        yield Finding(
            severity="ok",
            check="forbidden-deps",
            message=f"No {'/'.join(patterns)} dependencies found",
        )


def check_credentials(ctx: ValidationContext) -> Iterator[Finding]:
    prefix = f"{ctx.config.skills_dir}/{ctx.config.credential_category}"
    if not ctx.fs.is_dir(prefix):
        return
    candidate_re = re.compile(rf"[A-Za-z0-9]{{{ctx.config.credential_min_length},}}")
    markers = ctx.config.credential_allow_markers
    failed = False
    for path, text in ctx.iter_text_files(prefix):
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not candidate_re.search(line):
                continue
            if any(marker in line for marker in markers) or _ANGLE_PLACEHOLDER_RE.search(line):
                continue
            failed = True
            yield Finding(
                severity="warning",
                check="credentials",
                message=f"{path}:{lineno}: potential credential (review manually)",
                path=path,
            )
    if not failed:
        yield Finding(severity="ok", check="credentials", message="No obvious credential patterns found")


def check_execution_steps(ctx: ValidationContext) -> Iterator[Finding]:
    patterns = [re.compile(pattern) for pattern in ctx.config.step_patterns]
    exempt = set(ctx.config.step_exempt_dirs)
    failed = False
    for path, text in ctx.iter_text_files(ctx.config.skills_dir):
        if exempt.intersection(path.split("/")[:-1]):
            continue
        hits = [
            lineno
            for lineno, line in enumerate(text.splitlines(), start=1)
            if any(pattern.search(line) for pattern in patterns)
        ]
        if not hits:
            continue
        failed = True
        yield Finding(
            severity="warning",
            check="execution-steps",
            message=(
                f"{path}:{hits[0]}: possible execution steps on {len(hits)} line(s); "
                "step-by-step procedures belong in workflow skills"
            ),
            path=path,
        )
    if not failed:
        yield Finding(severity="ok", check="execution-steps", message="No obvious execution patterns found")


DEFAULT_CHECKS: tuple[Check, ...] = (
    Check("rules-file", "Checking rules file...", check_rules_file),
    Check("categories", "Checking category structure...", check_categories),
    Check("skill-md", "Checking skill directories...", check_skill_md),
    Check("frontmatter", "Checking front-matter...", check_frontmatter),
    Check("name-format", "Checking skill names...", check_name_format),
    Check("name-matches-dir", "Checking names against directories...", check_name_matches_dir),
    Check("unique-names", "Checking name uniqueness...", check_unique_names),
    Check("metadata-category", "Checking metadata.category...", check_metadata_category),
    Check("metadata-version", "Checking metadata.version...", check_metadata_version),
    Check("allowed-tools", "Checking allowed-tools...", check_allowed_tools),
    Check("reference-links", "Checking reference links...", check_reference_links),
    Check("orphan-references", "Checking for orphaned references...", check_orphan_references),
    Check("skill-links", "Checking skill cross-references...", check_skill_links),
    Check("forbidden-deps", "Checking for forbidden dependencies...", check_forbidden_deps),
    Check("credentials", "Checking for potential credential leaks...", check_credentials),
    Check("execution-steps", "Checking for execution steps in knowledge skills...", check_execution_steps),
)


__all__ = [
    "Check",
    "CheckFn",
    "DEFAULT_CHECKS",
    "NAME_RE",
    "SEMVER_RE",
    "SkillEntry",
    "ValidationContext",
]
