"""Hoist using directives into a shared global-usings file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

from ..git.repository import GitRepository
from ..logging import get_logger
from ..syntax.model import SourceUnit, SyntaxNode

GLOBAL_QUALIFIER = "global"

DEFAULT_GLOBAL_USINGS = "GlobalUsings"


def collect_using_directives(unit: SourceUnit) -> List[SyntaxNode]:
    """Return distinct using directives in first-seen order."""
    seen: set[Tuple[object, str]] = set()
    distinct: List[SyntaxNode] = []
    for node in unit.using_directives:
        key = node.structural_key
        if key in seen:
            continue
        seen.add(key)
        distinct.append(node)
    return distinct


def as_global(node: SyntaxNode) -> str:
    code = " ".join(node.code.split())
    if code.startswith(f"{GLOBAL_QUALIFIER} "):
        return code
    return f"{GLOBAL_QUALIFIER} {code}"


def split_global_usings(
    unit: SourceUnit,
    project_dir: Path,
    repo: GitRepository,
    *,
    suffix: str = ".cs",
    file_stem: str = DEFAULT_GLOBAL_USINGS,
    logger: logging.Logger | None = None,
) -> SourceUnit:
    """Write distinct usings to ``<file_stem><suffix>`` and drop them from ``unit``."""
    logger = logger or get_logger("splitter")
    directives = collect_using_directives(unit)
    if not directives:
        return unit

    for node in directives:
        logger.debug("Using directive: [%s]", node.code)

    usings_file = project_dir / f"{file_stem}{suffix}"
    code = "\n".join(as_global(node) for node in directives)
    with usings_file.open("w", encoding="utf-8", newline="\n") as handle:
        handle.write(code)
    repo.stage(usings_file)
    logger.info("Created global usings at %s (%d directives)", usings_file, len(directives))

    keys = {node.structural_key for node in directives}
    return unit.without(node for node in unit.using_directives if node.structural_key in keys)


__all__ = ["as_global", "collect_using_directives", "split_global_usings"]
