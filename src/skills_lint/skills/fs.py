"""In-memory filesystem view of a skills corpus."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

SKILL_FILENAME = "SKILL.md"

DEFAULT_EXCLUDE_DIRS = (".git", ".venv", "node_modules", "__pycache__")


def normalize_rel_path(path: str) -> str:
    """Normalize and validate a relative path (posix separators, no '..')."""
    if not path:
        raise ValueError("path must be non-empty")
    if path.startswith("/"):
        raise ValueError("path must be relative")
    segments = path.split("/")
    if ".." in segments:
        raise ValueError("path must not contain '..' segments")
    parts = [segment for segment in segments if segment not in ("", ".")]
    if not parts:
        raise ValueError("path must not resolve to root")
    return "/".join(parts)


@dataclass(slots=True)
class File:
    """A file node in the corpus."""

    content: bytes

    def read_text(self, *, encoding: str = "utf-8") -> str:
        return self.content.decode(encoding)

    @classmethod
    def from_text(cls, text: str, *, encoding: str = "utf-8") -> File:
        return cls(content=text.encode(encoding))


@dataclass(slots=True)
class Directory:
    """A directory node in the corpus."""

    entries: dict[str, Directory | File] = field(default_factory=dict)


class SkillsFS:
    """A minimal, filesystem-like container for a skills repository.

    Paths are always relative to the repository root and use POSIX
    separators. The empty string addresses the root itself.
    """

    def __init__(self, root: Directory | None = None) -> None:
        self._root = root or Directory()

    @property
    def root(self) -> Directory:
        return self._root

    def exists(self, path: str) -> bool:
        try:
            self._get_node(path)
        except KeyError:
            return False
        return True

    def is_file(self, path: str) -> bool:
        try:
            return isinstance(self._get_node(path), File)
        except KeyError:
            return False

    def is_dir(self, path: str) -> bool:
        try:
            return isinstance(self._get_node(path), Directory)
        except KeyError:
            return False

    def read_bytes(self, path: str) -> bytes:
        node = self._get_node(path)
        if not isinstance(node, File):
            raise IsADirectoryError(path)
        return node.content

    def read_text(self, path: str, *, encoding: str = "utf-8") -> str:
        node = self._get_node(path)
        if not isinstance(node, File):
            raise IsADirectoryError(path)
        return node.read_text(encoding=encoding)

    def write_bytes(self, path: str, content: bytes) -> None:
        normalized = normalize_rel_path(path)
        parent, name = self._split_parent(normalized)
        directory = self._mkdirs(parent)
        if isinstance(directory.entries.get(name), Directory):
            raise IsADirectoryError(normalized)
        directory.entries[name] = File(content=content)

    def write_text(self, path: str, text: str, *, encoding: str = "utf-8") -> None:
        self.write_bytes(path, text.encode(encoding))

    def mkdir(self, path: str) -> None:
        self._mkdirs(normalize_rel_path(path))

    def listdir(self, path: str = "") -> list[str]:
        node = self._get_node(path)
        if not isinstance(node, Directory):
            raise NotADirectoryError(path)
        return sorted(node.entries.keys())

    def subdirs(self, path: str = "") -> list[str]:
        """Return the names of the immediate child directories of ``path``."""
        node = self._get_node(path)
        if not isinstance(node, Directory):
            raise NotADirectoryError(path)
        return sorted(
            name for name, child in node.entries.items() if isinstance(child, Directory)
        )

    def iter_files(self, prefix: str = "") -> Iterator[tuple[str, File]]:
        """Yield (path, File) for every file, optionally below ``prefix``."""

        def walk(base: str, directory: Directory) -> Iterator[tuple[str, File]]:
            for name in sorted(directory.entries):
                child = directory.entries[name]
                child_path = f"{base}/{name}" if base else name
                if isinstance(child, File):
                    yield child_path, child
                else:
                    yield from walk(child_path, child)

        if prefix:
            try:
                start = self._get_node(prefix)
            except KeyError:
                return
            if not isinstance(start, Directory):
                return
            yield from walk(normalize_rel_path(prefix), start)
        else:
            yield from walk("", self._root)

    def iter_skill_dirs(self) -> Iterator[str]:
        """Yield directories that contain a SKILL.md file."""

        def walk(base: str, directory: Directory) -> Iterator[str]:
            if isinstance(directory.entries.get(SKILL_FILENAME), File):
                yield base
            for name in sorted(directory.entries):
                child = directory.entries[name]
                if isinstance(child, Directory):
                    yield from walk(f"{base}/{name}" if base else name, child)

        yield from walk("", self._root)

    @classmethod
    def from_disk(
        cls,
        root: Path,
        *,
        include_hidden: bool = False,
        exclude_dirs: Collection[str] = DEFAULT_EXCLUDE_DIRS,
        max_file_bytes: int | None = None,
    ) -> SkillsFS:
        """Load a directory tree into an in-memory filesystem."""
        if not root.exists() or not root.is_dir():
            raise ValueError(f"root must be an existing directory: {root}")

        fs = cls()
        for path in sorted(root.rglob("*")):
            rel_parts = path.relative_to(root).parts
            if any(part in exclude_dirs for part in rel_parts):
                continue
            if not include_hidden and any(part.startswith(".") for part in rel_parts):
                continue
            rel = "/".join(rel_parts)
            if path.is_dir():
                fs.mkdir(rel)
                continue
            content = path.read_bytes()
            if max_file_bytes is not None and len(content) > max_file_bytes:
                raise ValueError(f"file too large: {rel} ({len(content)} bytes)")
            fs.write_bytes(rel, content)
        return fs

    def write_to_disk(self, root: Path) -> list[Path]:
        """Write every file below ``root``; returns the paths written."""
        written: list[Path] = []
        for rel, file in self.iter_files():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(file.content)
            written.append(target)
        return written

    def _split_parent(self, normalized: str) -> tuple[str, str]:
        if "/" not in normalized:
            return "", normalized
        parent, name = normalized.rsplit("/", 1)
        return parent, name

    def _mkdirs(self, path: str) -> Directory:
        if not path:
            return self._root
        current: Directory = self._root
        for segment in normalize_rel_path(path).split("/"):
            existing = current.entries.get(segment)
            if existing is None:
                child = Directory()
                current.entries[segment] = child
                current = child
                continue
            if isinstance(existing, File):
                raise NotADirectoryError(f"{segment} is a file")
            current = existing
        return current

    def _get_node(self, path: str) -> Directory | File:
        if path == "":
            return self._root
        current: Directory | File = self._root
        for segment in normalize_rel_path(path).split("/"):
            if not isinstance(current, Directory):
                raise KeyError(path)
            current = current.entries[segment]
        return current


__all__ = [
    "DEFAULT_EXCLUDE_DIRS",
    "Directory",
    "File",
    "SKILL_FILENAME",
    "SkillsFS",
    "normalize_rel_path",
]
