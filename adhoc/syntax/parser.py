"""Tree-sitter powered C# source parser."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List

import tree_sitter_c_sharp
from tree_sitter import Language, Node, Parser

from .model import BYTE_ORDER_MARK, SourceUnit, SyntaxKind, SyntaxNode, classify_comment

_LANGUAGE = Language(tree_sitter_c_sharp.language())


class SourceParser(ABC):
    """Contract for parsers that turn raw text into a :class:`SourceUnit`."""

    @abstractmethod
    def parse(self, text: str) -> SourceUnit:
        """Return the source unit for ``text``."""


@dataclass
class _Span:
    start: int
    end: int
    kind: SyntaxKind


class CSharpParser(SourceParser):
    """Splits C# source into leading comments, using directives and code."""

    def __init__(self) -> None:
        self._parser = Parser(_LANGUAGE)

    def parse(self, text: str) -> SourceUnit:
        bom = BYTE_ORDER_MARK if text.startswith(BYTE_ORDER_MARK) else ""
        source = text[len(bom) :].encode("utf-8")
        tree = self._parser.parse(source)
        spans = self._collect_spans(tree.root_node, source)
        unit = _build_unit(source, spans)
        if bom:
            # Kept as its own node so the first line still starts at offset zero.
            return SourceUnit(nodes=(SyntaxNode(SyntaxKind.CODE, bom), *unit.nodes))
        return unit

    def _collect_spans(self, root: Node, source: bytes) -> List[_Span]:
        first_code = next(
            (child.start_byte for child in root.children if child.type != "comment"),
            len(source),
        )

        spans: List[_Span] = []
        for child in root.children:
            if child.type != "comment" or child.end_byte > first_code:
                continue
            kind = classify_comment(_node_text(child, source))
            start, end = _extend_to_lines(source, child.start_byte, child.end_byte)
            previous = spans[-1] if spans else None
            if (
                previous is not None
                and kind is SyntaxKind.SINGLE_LINE_DOCUMENTATION_COMMENT
                and previous.kind is kind
                and previous.end == start
            ):
                # Consecutive /// lines form one documentation comment.
                previous.end = end
                continue
            spans.append(_Span(start, end, kind))

        for node in _iter_using_directives(root):
            start, end = _extend_to_lines(source, node.start_byte, node.end_byte)
            spans.append(_Span(start, end, SyntaxKind.USING_DIRECTIVE))

        spans.sort(key=lambda span: span.start)
        return spans


def _iter_using_directives(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "using_directive":
            yield node
            continue
        if node.type == "comment":
            continue
        stack.extend(reversed(node.children))


def _node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _extend_to_lines(source: bytes, start: int, end: int) -> tuple[int, int]:
    """Grow a span over its indentation and line break when it owns its lines."""
    line_start = start
    while line_start > 0 and source[line_start - 1 : line_start] in (b" ", b"\t"):
        line_start -= 1
    owns_start = line_start == 0 or source[line_start - 1 : line_start] == b"\n"

    line_end = end
    while line_end < len(source) and source[line_end : line_end + 1] in (b" ", b"\t"):
        line_end += 1

    if not owns_start:
        return start, line_end

    if source.startswith(b"\r\n", line_end):
        return line_start, line_end + 2
    if source.startswith(b"\n", line_end):
        return line_start, line_end + 1
    if line_end == len(source):
        return line_start, line_end
    return start, line_end


def _build_unit(source: bytes, spans: List[_Span]) -> SourceUnit:
    nodes: List[SyntaxNode] = []
    cursor = 0
    for span in spans:
        if span.start < cursor:
            continue
        if span.start > cursor:
            nodes.append(SyntaxNode(SyntaxKind.CODE, source[cursor : span.start].decode("utf-8")))
        nodes.append(SyntaxNode(span.kind, source[span.start : span.end].decode("utf-8")))
        cursor = span.end
    if cursor < len(source):
        nodes.append(SyntaxNode(SyntaxKind.CODE, source[cursor:].decode("utf-8")))
    return SourceUnit(nodes=tuple(nodes))


__all__ = ["CSharpParser", "SourceParser"]
