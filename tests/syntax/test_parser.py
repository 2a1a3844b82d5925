"""Tests for the tree-sitter C# parser."""

from __future__ import annotations

import textwrap

from adhoc.syntax.model import BYTE_ORDER_MARK, SyntaxKind
from adhoc.syntax.parser import CSharpParser


def _source(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


def test_parser_preserves_text_exactly() -> None:
    text = _source(
        """
        /// <Project Sdk="X"/>
        using System;

        namespace Demo
        {
            using System.IO;

            class Program {}
        }
        """
    )

    unit = CSharpParser().parse(text)

    assert unit.to_full_string() == text


def test_parser_groups_consecutive_doc_comment_lines() -> None:
    text = _source(
        """
        /// Project:
        ///   _Sdk: X
        // plain comment
        class A {}
        """
    )

    unit = CSharpParser().parse(text)
    trivia = unit.leading_trivia

    assert [node.kind for node in trivia] == [
        SyntaxKind.SINGLE_LINE_DOCUMENTATION_COMMENT,
        SyntaxKind.SINGLE_LINE_COMMENT,
    ]
    assert trivia[0].text == "/// Project:\n///   _Sdk: X\n"


def test_parser_separates_doc_comments_split_by_blank_line() -> None:
    text = "/// first\n\n/// second\nclass A {}\n"

    unit = CSharpParser().parse(text)
    docs = [n for n in unit.leading_trivia if n.kind is SyntaxKind.SINGLE_LINE_DOCUMENTATION_COMMENT]

    assert [n.code for n in docs] == ["/// first", "/// second"]


def test_parser_ignores_comments_after_first_code() -> None:
    text = "using System;\n/// <Project/>\nclass A {}\n"

    unit = CSharpParser().parse(text)

    assert unit.leading_trivia == ()


def test_parser_finds_nested_using_directives() -> None:
    text = _source(
        """
        using System;
        namespace Demo
        {
            using System.IO;
            class A {}
        }
        """
    )

    unit = CSharpParser().parse(text)

    assert [node.code for node in unit.using_directives] == ["using System;", "using System.IO;"]


def test_removing_usings_leaves_no_residual_lines() -> None:
    text = _source(
        """
        using System;
        namespace Demo
        {
            using System.IO;
            class A {}
        }
        """
    )
    unit = CSharpParser().parse(text)

    trimmed = unit.without(unit.using_directives)

    assert trimmed.to_full_string() == _source(
        """
        namespace Demo
        {
            class A {}
        }
        """
    )


def test_parser_handles_comment_only_file() -> None:
    unit = CSharpParser().parse('/// <Project Sdk="X"/>\n')

    assert len(unit.leading_trivia) == 1
    assert unit.without(unit.leading_trivia).to_full_string() == ""


def test_parser_keeps_byte_order_mark_out_of_the_first_line() -> None:
    text = BYTE_ORDER_MARK + '/// <Project Sdk="X"/>\nclass B {}\n'

    unit = CSharpParser().parse(text)

    assert unit.nodes[0].text == BYTE_ORDER_MARK
    assert [node.text for node in unit.leading_trivia] == ['/// <Project Sdk="X"/>\n']
    assert unit.to_full_string() == text
    assert unit.without(unit.leading_trivia).to_full_string() == BYTE_ORDER_MARK + "class B {}\n"


def test_parser_extends_nodes_over_crlf_line_endings() -> None:
    text = '/// <Project Sdk="X"/>\r\nusing System;\r\nclass A\r\n{\r\n}\r\n'

    unit = CSharpParser().parse(text)
    trimmed = unit.without([*unit.leading_trivia, *unit.using_directives])

    assert unit.leading_trivia[0].text == '/// <Project Sdk="X"/>\r\n'
    assert trimmed.to_full_string() == "class A\r\n{\r\n}\r\n"
