"""Immutable source model consumed by the expansion pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Tuple


class SyntaxKind(Enum):
    """Closed set of node kinds the pipeline distinguishes."""

    SINGLE_LINE_DOCUMENTATION_COMMENT = "single_line_documentation_comment"
    MULTI_LINE_DOCUMENTATION_COMMENT = "multi_line_documentation_comment"
    SINGLE_LINE_COMMENT = "single_line_comment"
    MULTI_LINE_COMMENT = "multi_line_comment"
    USING_DIRECTIVE = "using_directive"
    CODE = "code"

    @property
    def is_trivia(self) -> bool:
        return self in _TRIVIA_KINDS


_TRIVIA_KINDS = frozenset(
    {
        SyntaxKind.SINGLE_LINE_DOCUMENTATION_COMMENT,
        SyntaxKind.MULTI_LINE_DOCUMENTATION_COMMENT,
        SyntaxKind.SINGLE_LINE_COMMENT,
        SyntaxKind.MULTI_LINE_COMMENT,
    }
)


BYTE_ORDER_MARK = "\ufeff"


def is_blank(text: str) -> bool:
    """True for whitespace, optionally preceded by a byte order mark."""
    return not text.replace(BYTE_ORDER_MARK, "").strip()


def classify_comment(text: str) -> SyntaxKind:
    """Return the comment kind for raw comment text."""
    stripped = text.lstrip()
    if stripped.startswith("///") and not stripped.startswith("////"):
        return SyntaxKind.SINGLE_LINE_DOCUMENTATION_COMMENT
    if stripped.startswith("/**") and not stripped.startswith("/**/"):
        return SyntaxKind.MULTI_LINE_DOCUMENTATION_COMMENT
    if stripped.startswith("/*"):
        return SyntaxKind.MULTI_LINE_COMMENT
    return SyntaxKind.SINGLE_LINE_COMMENT


@dataclass(frozen=True, eq=False)
class SyntaxNode:
    """A contiguous slice of source text.

    ``text`` is the full text of the node, including the indentation and
    line terminator it owns, so dropping the node leaves no residue.
    Nodes compare by identity; use :attr:`structural_key` for value
    comparisons.
    """

    kind: SyntaxKind
    text: str

    @property
    def code(self) -> str:
        return self.text.strip()

    @property
    def structural_key(self) -> Tuple[SyntaxKind, str]:
        return (self.kind, " ".join(self.code.split()))


@dataclass(frozen=True)
class SourceUnit:
    """Parsed representation of one input file.

    The concatenated text of ``nodes`` is exactly the file text. Every
    transformation returns a new unit.
    """

    nodes: Tuple[SyntaxNode, ...]

    @classmethod
    def from_text(cls, text: str) -> "SourceUnit":
        return cls(nodes=(SyntaxNode(SyntaxKind.CODE, text),) if text else ())

    @property
    def leading_trivia(self) -> Tuple[SyntaxNode, ...]:
        """Comment nodes that precede the first piece of code."""
        trivia = []
        for node in self.nodes:
            if node.kind.is_trivia:
                trivia.append(node)
            elif node.kind is SyntaxKind.CODE and is_blank(node.text):
                continue
            else:
                break
        return tuple(trivia)

    @property
    def using_directives(self) -> Tuple[SyntaxNode, ...]:
        return tuple(self.iter_kind(SyntaxKind.USING_DIRECTIVE))

    def iter_kind(self, kind: SyntaxKind) -> Iterator[SyntaxNode]:
        return (node for node in self.nodes if node.kind is kind)

    def without(self, nodes: Iterable[SyntaxNode]) -> "SourceUnit":
        """Return a copy of this unit with the given nodes removed."""
        doomed = {id(node) for node in nodes}
        if not doomed:
            return self
        return SourceUnit(nodes=tuple(node for node in self.nodes if id(node) not in doomed))

    def to_full_string(self) -> str:
        return "".join(node.text for node in self.nodes)


__all__ = ["BYTE_ORDER_MARK", "SourceUnit", "SyntaxKind", "SyntaxNode", "classify_comment", "is_blank"]
