"""Resolver over a live directory tree."""

from __future__ import annotations

import os
import posixpath
import threading
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Set, Tuple

from ..logging import get_logger
from ..models import FileReference
from .base import Resolver, ResolverError

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
}

logger = get_logger("resolver.directory")


@dataclass
class ExcludeRule:
    """A gitignore-style exclusion pattern."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            if self.directory_only and rel_path.startswith(f"{self.pattern}/"):
                return True
            return False

        for part in rel_path.split("/"):
            if fnmatchcase(part, self.pattern):
                return True
        return False


def build_exclude_rule(pattern: str) -> ExcludeRule | None:
    pattern = pattern.strip()
    if not pattern or pattern.startswith("#"):
        return None

    negate = pattern.startswith("!")
    if negate:
        pattern = pattern[1:]

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return ExcludeRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _is_excluded(rel_path: str, is_dir: bool, rules: Sequence[ExcludeRule]) -> bool:
    excluded = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            excluded = not rule.negate
    return excluded


def glob_matches(path: str, pattern: str) -> bool:
    """Return True when the tree path ``path`` matches ``pattern``.

    Patterns are matched one path segment at a time, so ``*`` and ``?`` never
    cross a ``/``. A ``**`` segment matches any number of directories,
    including none.
    """
    return _match_segments(tuple(path.split("/")), tuple(pattern.split("/")))


def _match_segments(parts: Tuple[str, ...], pattern_parts: Tuple[str, ...]) -> bool:
    if not pattern_parts:
        return not parts
    head, rest = pattern_parts[0], pattern_parts[1:]
    if head == "**":
        return any(_match_segments(parts[index:], rest) for index in range(len(parts) + 1))
    if not parts or not fnmatchcase(parts[0], head):
        return False
    return _match_segments(parts[1:], rest)


class DirectoryResolver(Resolver):
    """Resolve references against files below ``root``.

    References carry root-relative POSIX paths. The file index is built
    lazily on first lookup and reused for the lifetime of the resolver.
    """

    def __init__(self, root: str | Path, *, exclude_paths: Sequence[str] = ()) -> None:
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Scan path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Scan path is not a directory: {root}")
        self.root = root_path
        self._rules = [rule for rule in map(build_exclude_rule, exclude_paths) if rule is not None]
        self._index: List[str] | None = None
        self._index_set: Set[str] = set()
        self._lock = threading.Lock()

    def content_by_reference(self, ref: FileReference) -> str:
        target = self._real_path(ref.path)
        try:
            return target.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise ResolverError(f"unable to read {ref.path}: {exc}") from exc

    def references_by_glob(self, *patterns: str) -> List[FileReference]:
        refs: List[FileReference] = []
        for path in self._paths():
            if any(glob_matches(path, pattern) for pattern in patterns):
                refs.append(FileReference(path))
        return refs

    def relative_reference(self, from_ref: FileReference, path: str) -> Optional[FileReference]:
        if path.startswith("/"):
            candidate = posixpath.normpath(path.lstrip("/"))
        else:
            candidate = posixpath.normpath(posixpath.join(posixpath.dirname(from_ref.path), path))
        if candidate == ".." or candidate.startswith("../"):
            logger.debug("Ignoring %s: resolves outside of %s", path, self.root)
            return None
        if not self._exists(candidate):
            return None
        return FileReference(candidate)

    def _exists(self, tree_path: str) -> bool:
        self._paths()
        return tree_path in self._index_set

    def _real_path(self, tree_path: str) -> Path:
        return self.root.joinpath(*tree_path.split("/"))

    def _paths(self) -> List[str]:
        with self._lock:
            if self._index is None:
                self._index = sorted(self._walk())
                self._index_set = set(self._index)
                logger.debug("Indexed %d files below %s", len(self._index), self.root)
            return self._index

    def _walk(self) -> Iterator[str]:
        def on_error(err: OSError) -> None:
            logger.warning("Error walking directory %s: %s", err.filename, err)

        for dirpath, dirnames, filenames in os.walk(self.root, onerror=on_error):
            current = Path(dirpath)
            rel_dir = current.relative_to(self.root).as_posix() if current != self.root else ""

            kept = []
            for name in dirnames:
                if name in _EXCLUDED_DIRS:
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _is_excluded(rel_path, True, self._rules):
                    continue
                kept.append(name)
            dirnames[:] = kept

            for filename in filenames:
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _is_excluded(rel_path, False, self._rules):
                    continue
                yield rel_path


__all__ = ["DirectoryResolver", "ExcludeRule", "build_exclude_rule", "glob_matches"]
