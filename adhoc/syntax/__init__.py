"""Source model and parser collaborators."""

from __future__ import annotations

from .model import SourceUnit, SyntaxKind, SyntaxNode, classify_comment
from .parser import CSharpParser, SourceParser

__all__ = [
    "CSharpParser",
    "SourceParser",
    "SourceUnit",
    "SyntaxKind",
    "SyntaxNode",
    "classify_comment",
]
