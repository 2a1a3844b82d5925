"""Discovery of source files that may carry project descriptors."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".vs",
    ".idea",
    "bin",
    "obj",
    "node_modules",
}


@dataclass(frozen=True)
class IgnorePattern:
    """One line of a root ``.gitignore``.

    Directories are pruned while walking, so unrooted patterns only need to
    match the last path component. Negated (``!``) lines are not supported
    and are skipped.
    """

    glob: str
    directory_only: bool = False
    rooted: bool = False

    @classmethod
    def parse(cls, line: str) -> Optional["IgnorePattern"]:
        line = line.strip()
        if not line or line.startswith(("#", "!")):
            return None
        glob = line.rstrip("/")
        if not glob.strip("/"):
            return None
        return cls(
            glob=glob.lstrip("/"),
            directory_only=line.endswith("/"),
            rooted="/" in glob,
        )

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if self.rooted:
            return fnmatchcase(rel_path, self.glob)
        return fnmatchcase(rel_path.rsplit("/", 1)[-1], self.glob)


def load_ignore_patterns(path: Path) -> List[IgnorePattern]:
    if not path.is_file():
        return []
    parsed = (IgnorePattern.parse(line) for line in path.read_text(encoding="utf-8").splitlines())
    return [pattern for pattern in parsed if pattern is not None]


def iter_source_files(root: Path, suffixes: Sequence[str] = (".cs",)) -> Iterator[Path]:
    """Yield files under ``root`` with one of ``suffixes``, in sorted order."""
    root = Path(root).expanduser().resolve()
    if not root.exists():
        raise FileNotFoundError(f"Source path not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Source path is not a directory: {root}")

    wanted = {suffix.lower() for suffix in suffixes}
    patterns = load_ignore_patterns(root / ".gitignore")

    def ignored(rel_path: str, is_dir: bool) -> bool:
        return any(pattern.matches(rel_path, is_dir) for pattern in patterns)

    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        prefix = "" if current == root else current.relative_to(root).as_posix() + "/"

        dirnames[:] = [
            name
            for name in sorted(dirnames)
            if name not in _EXCLUDED_DIRS
            and not ignored(prefix + name, True)
            # Generated project repositories hold copies, not sources.
            and not (current / name / ".git").exists()
        ]

        for filename in sorted(filenames):
            if Path(filename).suffix.lower() in wanted and not ignored(prefix + filename, False):
                yield current / filename


__all__ = ["IgnorePattern", "iter_source_files", "load_ignore_patterns"]
