"""Tests for the tree-sitter helpers."""

from __future__ import annotations

import pytest

from doccheck.analyzers.tree_sitter import get_language, line_of, node_text, parse_source, previous_comment
from doccheck.errors import ParseError


def test_get_language_caches_grammars() -> None:
    assert get_language("typescript") is get_language("typescript")


def test_get_language_rejects_unknown_grammar() -> None:
    with pytest.raises(ValueError):
        get_language("cobol")


def test_parse_source_exposes_comments_before_declarations() -> None:
    source = b"const a = 1;\n/** Doc. */\nexport function f() {}\n"
    tree = parse_source("javascript", "a.js", source)

    export = tree.root_node.children[-1]
    comment = previous_comment(export)

    assert export.type == "export_statement"
    assert node_text(comment, source) == "/** Doc. */"
    assert line_of(export) == 3


def test_parse_source_reports_error_line() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_source("python", "pkg/mod.py", b"x = 1\n\ndef broken(:\n    pass\n")
    assert excinfo.value.path == "pkg/mod.py"
    assert excinfo.value.message.startswith("syntax error")
