"""Helpers for recognising documentation comments and the names they reference.

Only enough structure is read to answer three questions: is a comment a doc
comment that belongs to the next declaration, which identifiers does it point
at, and which JSDoc type aliases does it declare.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Set, Tuple

_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*")
_INLINE_LINK = re.compile(r"\{@link(?:code|plain)?\s+([^}\s|]+)[^}]*\}")
_TYPE_TAGS = (
    "param",
    "arg",
    "argument",
    "returns",
    "return",
    "type",
    "throws",
    "exception",
    "property",
    "prop",
    "this",
    "extends",
    "augments",
    "implements",
    "yields",
    "yield",
    "satisfies",
    "typedef",
    "enum",
)
_TAG = re.compile(r"@(\w+)")
_IMPORT_TAG = re.compile(
    r"@import\s*(?:\{[^}]*\}|\*\s*as\s+[\w$]+|[\w$]+)\s*from\s*(['\"])[^'\"]*\1;?",
    re.DOTALL,
)
_TEMPLATE_TAG = re.compile(r"@template\s+(?:\{[^}]*\}\s*)?([\w$,\s]+)")
_STRING_LITERAL = re.compile(r"'[^']*'|\"[^\"]*\"|`[^`]*`")
_IMPORT_TYPE = re.compile(r"import\(\s*(['\"])[^'\"]*\1\s*\)(?:\.[\w$.]+)?")
_OBJECT_KEY = re.compile(r"([A-Za-z_$][\w$]*)\s*\??\s*:(?!:)")
_FILE_LEVEL_TAGS = {"module", "packageDocumentation", "file", "fileoverview", "overview"}
_DECLARING_TAGS = {"typedef", "callback"}

_SPHINX_ROLE = re.compile(
    r":(?:py:)?(?:class|func|meth|exc|data|attr|obj|mod|const|type):`([^`]+)`"
)

JS_BUILTIN_TYPES = frozenset(
    {
        "any",
        "unknown",
        "never",
        "void",
        "null",
        "undefined",
        "string",
        "number",
        "boolean",
        "bigint",
        "symbol",
        "object",
        "true",
        "false",
        "this",
        "typeof",
        "keyof",
        "readonly",
        "infer",
        "extends",
        "is",
        "asserts",
        "new",
        "unique",
        "in",
        "out",
        "const",
        "function",
        "import",
        "as",
    }
)

PY_BUILTIN_TYPES = frozenset(
    {
        "None",
        "True",
        "False",
        "int",
        "float",
        "complex",
        "str",
        "bytes",
        "bytearray",
        "bool",
        "list",
        "dict",
        "set",
        "frozenset",
        "tuple",
        "object",
        "type",
        "self",
        "cls",
    }
)


@dataclass(frozen=True)
class TypedefDeclaration:
    """A ``@typedef`` or ``@callback`` declared inside a JSDoc block."""

    name: str
    has_description: bool
    references: Tuple[str, ...]


def is_doc_comment(text: str) -> bool:
    """Return True for ``/** ... */`` blocks."""
    stripped = text.strip()
    return stripped.startswith("/**") and not stripped.startswith("/**/")


def comment_body(text: str) -> str:
    """Strip JSDoc delimiters and leading asterisks."""
    stripped = text.strip()
    if stripped.startswith("/**"):
        stripped = stripped[3:]
    if stripped.endswith("*/"):
        stripped = stripped[:-2]
    lines = []
    for line in stripped.splitlines():
        line = line.strip()
        if line.startswith("*"):
            line = line[1:].strip()
        lines.append(line)
    return "\n".join(lines).strip()


def is_attachable(text: str) -> bool:
    """Return True when a doc comment documents the declaration that follows it."""
    if not is_doc_comment(text):
        return False
    body = comment_body(text)
    tags = set(_TAG.findall(body))
    if tags & _FILE_LEVEL_TAGS or tags & _DECLARING_TAGS:
        return False
    return bool(_IMPORT_TAG.sub("", body).strip())


def description_of(text: str) -> str:
    """Return the free text that precedes the first block tag."""
    body = comment_body(text)
    lines: List[str] = []
    for line in body.splitlines():
        if line.startswith("@"):
            break
        lines.append(line)
    return "\n".join(lines).strip()


def template_names(text: str) -> Set[str]:
    names: Set[str] = set()
    for match in _TEMPLATE_TAG.finditer(comment_body(text)):
        names.update(part.strip() for part in match.group(1).split(",") if part.strip())
    return names


def jsdoc_references(text: str) -> Tuple[str, ...]:
    """Return identifiers referenced by a JSDoc block, in order of appearance."""
    body = _IMPORT_TAG.sub("", comment_body(text))
    ignored = set(JS_BUILTIN_TYPES) | template_names(text)
    found: List[str] = []

    def _add(name: str) -> None:
        name = name.strip().replace("#", ".")
        if not name or name.startswith(("http://", "https://", "module:")):
            return
        if name.split(".")[0] in ignored:
            return
        if name not in found:
            found.append(name)

    positions: List[Tuple[int, str]] = []
    for match in _INLINE_LINK.finditer(body):
        positions.append((match.start(), match.group(1)))
    for start, expression in _tag_type_expressions(body):
        for name in type_expression_names(expression):
            positions.append((start, name))
    for _, name in sorted(positions, key=lambda item: item[0]):
        _add(name)
    return tuple(found)


def type_expression_names(expression: str) -> List[str]:
    """Return identifiers used in a JSDoc/TypeScript type expression."""
    cleaned = _IMPORT_TYPE.sub(" ", expression)
    cleaned = _STRING_LITERAL.sub(" ", cleaned)
    cleaned = _OBJECT_KEY.sub(" ", cleaned)
    names: List[str] = []
    for match in _IDENTIFIER.finditer(cleaned):
        previous = cleaned[match.start() - 1] if match.start() else ""
        if previous.isdigit() or previous == ".":
            continue
        name = match.group(0)
        if name not in names:
            names.append(name)
    return names


def jsdoc_typedefs(text: str) -> List[TypedefDeclaration]:
    """Return ``@typedef``/``@callback`` declarations found in a JSDoc block."""
    body = comment_body(text)
    general_description = bool(description_of(text))
    declarations: List[TypedefDeclaration] = []
    for match in re.finditer(r"@(typedef|callback)\b", body):
        cursor = match.end()
        type_expression = ""
        rest = body[cursor:].lstrip()
        if rest.startswith("{"):
            end = _matching_brace(rest, 0)
            if end is None:
                continue
            type_expression = rest[1:end]
            rest = rest[end + 1 :].lstrip()
        name_match = _IDENTIFIER.match(rest)
        if name_match is None:
            continue
        name = name_match.group(0)
        trailing = rest[name_match.end() :].split("\n@", 1)[0].split("\n", 1)[0]
        described = bool(trailing.strip().lstrip("-").strip()) or general_description
        references = tuple(
            ref
            for ref in type_expression_names(type_expression)
            if ref.split(".")[0] not in JS_BUILTIN_TYPES
        )
        declarations.append(
            TypedefDeclaration(name=name, has_description=described, references=references)
        )
    return declarations


def docstring_references(docstring: str) -> Tuple[str, ...]:
    """Return targets of Sphinx cross-reference roles in a Python docstring."""
    found: List[str] = []
    for match in _SPHINX_ROLE.finditer(docstring):
        target = match.group(1).strip()
        explicit = re.search(r"<([^>]+)>\s*$", target)
        if explicit:
            target = explicit.group(1)
        target = target.lstrip("~!.").rstrip("()")
        if not target or target.split(".")[0] in PY_BUILTIN_TYPES:
            continue
        if target not in found:
            found.append(target)
    return tuple(found)


def _tag_type_expressions(body: str) -> Iterator[Tuple[int, str]]:
    for match in _TAG.finditer(body):
        if match.group(1) not in _TYPE_TAGS:
            continue
        cursor = match.end()
        while cursor < len(body) and body[cursor] in " \t\n":
            cursor += 1
        if cursor >= len(body) or body[cursor] != "{":
            continue
        end = _matching_brace(body, cursor)
        if end is None:
            continue
        yield match.start(), body[cursor + 1 : end]


def _matching_brace(text: str, start: int) -> Optional[int]:
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


__all__ = [
    "JS_BUILTIN_TYPES",
    "PY_BUILTIN_TYPES",
    "TypedefDeclaration",
    "comment_body",
    "description_of",
    "docstring_references",
    "is_attachable",
    "is_doc_comment",
    "jsdoc_references",
    "jsdoc_typedefs",
    "type_expression_names",
]
