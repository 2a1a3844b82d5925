"""Locate descriptor comments in a source unit's leading trivia."""

from __future__ import annotations

import textwrap
from typing import Callable, Dict, Iterator

from ..models import NOTHING_TO_DO, ExpansionResult
from ..syntax.model import SourceUnit, SyntaxKind, SyntaxNode

_DOC_MARKER = "///"

CommentHandler = Callable[[SyntaxNode, SourceUnit], ExpansionResult]


def _candidate(node: SyntaxNode) -> bool:
    return True


def _ignored(node: SyntaxNode) -> bool:
    return False


_DISPATCH: Dict[SyntaxKind, Callable[[SyntaxNode], bool]] = {
    SyntaxKind.SINGLE_LINE_DOCUMENTATION_COMMENT: _candidate,
}


def iter_descriptor_comments(unit: SourceUnit) -> Iterator[SyntaxNode]:
    """Yield leading-trivia nodes that may carry a project descriptor."""
    for node in unit.leading_trivia:
        if _DISPATCH.get(node.kind, _ignored)(node):
            yield node


def extract(unit: SourceUnit, handler: CommentHandler) -> ExpansionResult:
    """Run ``handler`` on descriptor comments until one reports it handled the file."""
    for node in iter_descriptor_comments(unit):
        result = handler(node, unit)
        if result.handled:
            return result
    return NOTHING_TO_DO


def descriptor_text(node: SyntaxNode) -> str:
    """Return the comment body with documentation markers stripped."""
    lines = [line.strip().replace(_DOC_MARKER, "").rstrip() for line in node.text.split("\n")]
    return textwrap.dedent("\n".join(lines)).strip()


__all__ = ["CommentHandler", "descriptor_text", "extract", "iter_descriptor_comments"]
