"""Writers for the transformed source and auxiliary files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..git.repository import GitRepository
from ..logging import get_logger
from ..syntax.model import SourceUnit

README_FILENAME = "README.md"


def write_source(
    unit: SourceUnit,
    project_dir: Path,
    file_name: str,
    repo: GitRepository,
    logger: logging.Logger | None = None,
) -> Optional[Path]:
    """Write ``unit`` verbatim to ``project_dir/file_name`` and stage it."""
    logger = logger or get_logger("writer")
    target = project_dir / file_name
    source = unit.to_full_string()
    # newline="" keeps the original line endings untouched.
    with target.open("w", encoding="utf-8", newline="") as handle:
        handle.write(source)
    if not target.exists():
        logger.error("Source file %s was not created", target)
        return None
    repo.stage(target)
    logger.debug("Wrote %d characters to %s", len(source), target.name)
    return target


def write_readme(project_dir: Path, repo: GitRepository, content: str) -> Path:
    readme = project_dir / README_FILENAME
    readme.write_text(content, encoding="utf-8")
    repo.stage(readme)
    return readme


__all__ = ["README_FILENAME", "write_readme", "write_source"]
