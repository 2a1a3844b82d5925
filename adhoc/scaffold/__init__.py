"""Project directory scaffolding and artifact writers."""

from __future__ import annotations

from .scaffolder import ProjectScaffolder
from .splitter import collect_using_directives, split_global_usings
from .writer import write_readme, write_source

__all__ = [
    "ProjectScaffolder",
    "collect_using_directives",
    "split_global_usings",
    "write_readme",
    "write_source",
]
