"""Extractor for public Python functions, classes and methods."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Set

from tree_sitter import Node

from ..models import DeclarationKind
from .base import ExtractedFile, ModuleComment, ParsedDeclaration, SymbolExtractor, merge_declarations
from .doc_comments import docstring_references
from .tree_sitter import line_of, node_text, parse_source

_STRING_PREFIX = re.compile(r"^[rRbBuUfF]*")
_PROPERTY_DECORATORS = {"@property", "@cached_property", "@functools.cached_property"}


def _unwrap(node: Node) -> tuple[Node, List[Node]]:
    """Return the definition inside a decorated_definition plus its decorators."""
    if node.type != "decorated_definition":
        return node, []
    decorators = [child for child in node.named_children if child.type == "decorator"]
    definition = node.child_by_field_name("definition") or node
    return definition, decorators


def _docstring(definition: Node, source: bytes) -> Optional[str]:
    body = definition.child_by_field_name("body")
    if body is None:
        return None
    return _leading_string(body, source)


def _leading_string(body: Node, source: bytes) -> Optional[str]:
    for statement in body.named_children:
        if statement.type == "comment":
            continue
        if statement.type == "expression_statement" and statement.named_children:
            literal = statement.named_children[0]
            if literal.type == "string":
                return _string_value(node_text(literal, source))
        return None
    return None


def _string_value(text: str) -> str:
    text = _STRING_PREFIX.sub("", text)
    for quote in ('"""', "'''", '"', "'"):
        if text.startswith(quote) and text.endswith(quote) and len(text) >= 2 * len(quote):
            return text[len(quote) : -len(quote)]
    return text


def _all_names(root: Node, source: bytes) -> Optional[Set[str]]:
    """Return names listed in a module-level ``__all__``, or None without one."""
    names: Optional[Set[str]] = None
    for statement in root.named_children:
        if statement.type != "expression_statement" or not statement.named_children:
            continue
        expression = statement.named_children[0]
        if expression.type not in {"assignment", "augmented_assignment"}:
            continue
        left = expression.child_by_field_name("left")
        right = expression.child_by_field_name("right")
        if left is None or node_text(left, source) != "__all__" or right is None:
            continue
        if right.type not in {"list", "tuple"}:
            continue
        found = {
            _string_value(node_text(item, source))
            for item in right.named_children
            if item.type == "string"
        }
        if expression.type == "augmented_assignment" and names is not None:
            names |= found
        else:
            names = found
    return names


def _is_public(name: str) -> bool:
    return bool(name) and not name.startswith("_")


class PythonExtractor(SymbolExtractor):
    """Public declarations of Python modules and stubs."""

    suffixes = (".py", ".pyi")
    language = "python"

    def extract(self, path: str, source: bytes) -> Iterable[ParsedDeclaration]:
        return self.extract_file(path, source).declarations

    def extract_file(self, path: str, source: bytes) -> ExtractedFile:
        tree = parse_source(self.language, path, source)
        root = tree.root_node
        exported = _all_names(root, source)
        declarations: List[ParsedDeclaration] = []
        for child in root.named_children:
            definition, _ = _unwrap(child)
            if definition.type not in {"function_definition", "class_definition"}:
                continue
            name = node_text(definition.child_by_field_name("name"), source)
            if exported is not None:
                if name not in exported:
                    continue
            elif not _is_public(name):
                continue
            self._collect(definition, name, source, declarations)

        module_comments: List[ModuleComment] = []
        references = docstring_references(_leading_string(root, source) or "")
        if references:
            module_comments.append(ModuleComment(offset=0, line=1, references=references))
        return ExtractedFile(declarations=merge_declarations(declarations), module_comments=module_comments)

    def _collect(
        self,
        definition: Node,
        qualified: str,
        source: bytes,
        declarations: List[ParsedDeclaration],
        *,
        member: bool = False,
        decorators: Iterable[Node] = (),
    ) -> None:
        docstring = _docstring(definition, source)
        if definition.type == "class_definition":
            kind = DeclarationKind.CLASS
        elif not member:
            kind = DeclarationKind.FUNCTION
        elif any(node_text(decorator, source).strip() in _PROPERTY_DECORATORS for decorator in decorators):
            kind = DeclarationKind.PROPERTY
        else:
            kind = DeclarationKind.METHOD

        declarations.append(
            ParsedDeclaration(
                name=qualified,
                kind=kind,
                offset=definition.start_byte,
                line=line_of(definition),
                has_doc_comment=bool(docstring and docstring.strip()),
                references=docstring_references(docstring or ""),
            )
        )
        if kind is not DeclarationKind.CLASS:
            return

        body = definition.child_by_field_name("body")
        if body is None:
            return
        for child in body.named_children:
            inner, inner_decorators = _unwrap(child)
            if inner.type not in {"function_definition", "class_definition"}:
                continue
            name = node_text(inner.child_by_field_name("name"), source)
            if not _is_public(name):
                continue
            self._collect(
                inner,
                f"{qualified}.{name}",
                source,
                declarations,
                member=True,
                decorators=inner_decorators,
            )


__all__ = ["PythonExtractor"]
