"""Tree-sitter parser construction and node helpers."""

from __future__ import annotations

from typing import Callable, Dict, Optional

import tree_sitter_javascript
import tree_sitter_python
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from ..errors import ParseError

_GRAMMARS: Dict[str, Callable[[], object]] = {
    "javascript": tree_sitter_javascript.language,
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
    "python": tree_sitter_python.language,
}

_LANGUAGES: Dict[str, Language] = {}


def get_language(key: str) -> Language:
    """Return the tree-sitter Language for ``key``, loading it once."""
    language = _LANGUAGES.get(key)
    if language is None:
        try:
            factory = _GRAMMARS[key]
        except KeyError as exc:
            raise ValueError(f"No tree-sitter grammar registered for {key!r}") from exc
        language = Language(factory())
        _LANGUAGES[key] = language
    return language


def parse_source(language_key: str, path: str, source: bytes) -> Tree:
    """Parse ``source`` and raise ParseError when the tree contains syntax errors.

    A fresh Parser is built per call so callers may parse from worker threads.
    """
    parser = Parser(get_language(language_key))
    tree = parser.parse(source)
    if tree.root_node.has_error:
        line = _first_error_line(tree.root_node)
        where = f" near line {line}" if line else ""
        raise ParseError(path, f"syntax error{where}")
    return tree


def node_text(node: Optional[Node], source: bytes) -> str:
    if node is None:
        return ""
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def line_of(node: Node) -> int:
    """1-based line number of the node start."""
    return node.start_point[0] + 1


def previous_comment(node: Node) -> Optional[Node]:
    """Return the comment node structurally preceding ``node``, if any."""
    sibling = node.prev_sibling
    if sibling is not None and sibling.type == "comment":
        return sibling
    return None


def _first_error_line(node: Node) -> Optional[int]:
    if node.type == "ERROR" or node.is_missing:
        return line_of(node)
    for child in node.children:
        if child.has_error:
            found = _first_error_line(child)
            if found:
                return found
    return None


__all__ = [
    "get_language",
    "line_of",
    "node_text",
    "parse_source",
    "previous_comment",
]
