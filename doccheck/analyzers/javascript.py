"""Extractor for exported JavaScript and TypeScript declarations."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from tree_sitter import Node

from ..models import DeclarationKind
from .base import ExtractedFile, ModuleComment, ParsedDeclaration, SymbolExtractor, merge_declarations
from .doc_comments import is_attachable, is_doc_comment, jsdoc_references, jsdoc_typedefs
from .tree_sitter import line_of, node_text, parse_source, previous_comment

_FUNCTION_VALUES = {
    "function",
    "function_expression",
    "generator_function",
    "arrow_function",
}
_CLASS_VALUES = {"class"}
_FUNCTION_DECLARATIONS = {
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
}
_CLASS_DECLARATIONS = {"class_declaration", "abstract_class_declaration"}
_VARIABLE_DECLARATIONS = {"lexical_declaration", "variable_declaration"}
_SIMPLE_DECLARATIONS = {
    "interface_declaration": DeclarationKind.INTERFACE,
    "type_alias_declaration": DeclarationKind.TYPE_ALIAS,
    "enum_declaration": DeclarationKind.ENUM,
}
_METHOD_MEMBERS = {"method_definition", "method_signature", "abstract_method_signature"}
_FIELD_MEMBERS = {"field_definition", "public_field_definition"}
_HIDDEN_ACCESSIBILITY = {"private", "protected"}


class _Doc:
    """Attached documentation for one declaration."""

    __slots__ = ("present", "references")

    def __init__(self, comment: Optional[Node], source: bytes) -> None:
        text = node_text(comment, source) if comment is not None else ""
        self.present = bool(text) and is_attachable(text)
        self.references: Tuple[str, ...] = jsdoc_references(text) if self.present else ()


class _FileWalker:
    """Walks one parsed file and collects exported declarations."""

    def __init__(self, source: bytes) -> None:
        self.source = source
        self.declarations: List[ParsedDeclaration] = []
        self.module_comments: List[ModuleComment] = []
        self._locals: Dict[str, Tuple[Node, Node]] = {}
        self._exported: Set[str] = set()

    def walk(self, root: Node) -> List[ParsedDeclaration]:
        self._index_locals(root)
        for child in root.children:
            if child.type == "comment":
                self._top_level_comment(child)
            elif child.type == "export_statement":
                self._export(child)
        return self.declarations

    # ------------------------------------------------------------------
    # Top level

    def _index_locals(self, root: Node) -> None:
        for child in root.children:
            if child.type == "export_statement":
                declaration = child.child_by_field_name("declaration")
                if declaration is not None:
                    self._exported.update(name for name, _ in self._declared_names(declaration))
                elif child.child_by_field_name("source") is None:
                    self._exported.update(self._clause_locals(child))
                continue
            for name, declaration in self._declared_names(child):
                self._locals.setdefault(name, (child, declaration))

    def _declared_names(self, node: Node) -> Iterator[Tuple[str, Node]]:
        target = node
        if target.type == "ambient_declaration" and target.named_children:
            target = target.named_children[0]
        if target.type in _VARIABLE_DECLARATIONS:
            for declarator in target.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name_node = declarator.child_by_field_name("name")
                if name_node is not None and name_node.type == "identifier":
                    yield node_text(name_node, self.source), target
            return
        name_node = target.child_by_field_name("name")
        if name_node is not None and (
            target.type in _FUNCTION_DECLARATIONS
            or target.type in _CLASS_DECLARATIONS
            or target.type in _SIMPLE_DECLARATIONS
        ):
            yield node_text(name_node, self.source), target

    def _clause_locals(self, statement: Node) -> Iterator[str]:
        for clause in statement.named_children:
            if clause.type != "export_clause":
                continue
            for specifier in clause.named_children:
                if specifier.type != "export_specifier":
                    continue
                name = node_text(specifier.child_by_field_name("name"), self.source)
                alias = specifier.child_by_field_name("alias")
                if alias is None or node_text(alias, self.source) != "default":
                    yield name

    def _top_level_comment(self, comment: Node) -> None:
        text = node_text(comment, self.source)
        if not is_doc_comment(text):
            return
        shared_refs = jsdoc_references(text)
        typedefs = jsdoc_typedefs(text)
        for typedef in typedefs:
            self._add(
                typedef.name,
                DeclarationKind.TYPE_ALIAS,
                comment,
                typedef.has_description,
                tuple(dict.fromkeys(typedef.references + shared_refs)),
            )
        # @module / @packageDocumentation blocks document no declaration
        if not typedefs and not is_attachable(text) and shared_refs:
            self.module_comments.append(
                ModuleComment(offset=comment.start_byte, line=line_of(comment), references=shared_refs)
            )

    def _export(self, statement: Node) -> None:
        doc = _Doc(previous_comment(statement), self.source)
        declaration = statement.child_by_field_name("declaration")
        if declaration is not None:
            default = any(child.type == "default" for child in statement.children)
            self._declaration(declaration, doc, default=default)
            return

        value = statement.child_by_field_name("value")
        if value is not None:
            if value.type == "identifier" and self._default_alias(node_text(value, self.source)):
                return
            self._add("default", _classify_value(value), statement, doc.present, doc.references)
            return

        if statement.child_by_field_name("source") is not None:
            # re-exports surface where the original declaration is scanned
            return

        for clause in statement.named_children:
            if clause.type != "export_clause":
                continue
            for specifier in clause.named_children:
                if specifier.type != "export_specifier":
                    continue
                local = node_text(specifier.child_by_field_name("name"), self.source)
                alias = specifier.child_by_field_name("alias")
                exported = node_text(alias, self.source) if alias is not None else local
                found = self._locals.get(local)
                if found is None:
                    continue
                outer, declaration = found
                local_doc = _Doc(previous_comment(outer), self.source)
                self._declaration(declaration, local_doc, rename=exported, only=local)

    def _default_alias(self, name: str) -> bool:
        """Handle ``export default <identifier>`` naming a declaration in this file."""
        if name in self._exported:
            # already a symbol; the default export is only a reference to it
            return True
        found = self._locals.get(name)
        if found is None:
            return False
        outer, declaration = found
        self._declaration(declaration, _Doc(previous_comment(outer), self.source), rename="default", only=name)
        return True

    def _declaration(
        self,
        node: Node,
        doc: _Doc,
        *,
        rename: Optional[str] = None,
        only: Optional[str] = None,
        default: bool = False,
    ) -> None:
        if node.type == "ambient_declaration" and node.named_children:
            self._declaration(node.named_children[0], doc, rename=rename, only=only, default=default)
            return

        if node.type in _VARIABLE_DECLARATIONS:
            constant = node_text(node, self.source).lstrip().startswith("const")
            for declarator in node.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name_node = declarator.child_by_field_name("name")
                if name_node is None or name_node.type != "identifier":
                    continue
                name = node_text(name_node, self.source)
                if only is not None and name != only:
                    continue
                value = declarator.child_by_field_name("value")
                kind = DeclarationKind.CONST if constant else DeclarationKind.VARIABLE
                if value is not None and value.type in _FUNCTION_VALUES | _CLASS_VALUES:
                    kind = _classify_value(value)
                self._add(rename or name, kind, declarator, doc.present, doc.references)
                if kind is DeclarationKind.CLASS and value is not None:
                    self._members(rename or name, value)
            return

        name_node = node.child_by_field_name("name")
        name = rename or (node_text(name_node, self.source) if name_node is not None else "")
        if not name:
            name = "default" if default else ""
        if not name:
            return

        if node.type in _FUNCTION_DECLARATIONS:
            self._add(name, DeclarationKind.FUNCTION, node, doc.present, doc.references)
        elif node.type in _CLASS_DECLARATIONS:
            self._add(name, DeclarationKind.CLASS, node, doc.present, doc.references)
            self._members(name, node)
        elif node.type in _SIMPLE_DECLARATIONS:
            self._add(name, _SIMPLE_DECLARATIONS[node.type], node, doc.present, doc.references)

    # ------------------------------------------------------------------
    # Class members

    def _members(self, owner: str, class_node: Node) -> None:
        body = class_node.child_by_field_name("body")
        if body is None:
            return
        for member in body.named_children:
            if member.type in _METHOD_MEMBERS:
                kind = DeclarationKind.METHOD
            elif member.type in _FIELD_MEMBERS:
                kind = DeclarationKind.PROPERTY
            else:
                continue
            name_node = member.child_by_field_name("name") or member.child_by_field_name("property")
            if name_node is None or name_node.type == "private_property_identifier":
                continue
            if self._hidden(member):
                continue
            name = node_text(name_node, self.source).strip("'\"")
            doc = _Doc(previous_comment(member), self.source)
            self._add(f"{owner}.{name}", kind, member, doc.present, doc.references)
            if name == "constructor" and member.type == "method_definition":
                self._constructor_properties(owner, member)

    def _constructor_properties(self, owner: str, constructor: Node) -> None:
        body = constructor.child_by_field_name("body")
        if body is None:
            return
        for statement in body.named_children:
            if statement.type != "expression_statement" or not statement.named_children:
                continue
            expression = statement.named_children[0]
            if expression.type != "assignment_expression":
                continue
            left = expression.child_by_field_name("left")
            if left is None or left.type != "member_expression":
                continue
            target = left.child_by_field_name("object")
            prop = left.child_by_field_name("property")
            if target is None or target.type != "this" or prop is None:
                continue
            if prop.type == "private_property_identifier":
                continue
            doc = _Doc(previous_comment(statement), self.source)
            self._add(
                f"{owner}.{node_text(prop, self.source)}",
                DeclarationKind.PROPERTY,
                statement,
                doc.present,
                doc.references,
            )

    def _hidden(self, member: Node) -> bool:
        for child in member.children:
            if child.type == "accessibility_modifier":
                return node_text(child, self.source).strip() in _HIDDEN_ACCESSIBILITY
        return False

    # ------------------------------------------------------------------

    def _add(
        self,
        name: str,
        kind: DeclarationKind,
        node: Node,
        documented: bool,
        references: Tuple[str, ...],
    ) -> None:
        self.declarations.append(
            ParsedDeclaration(
                name=name,
                kind=kind,
                offset=node.start_byte,
                line=line_of(node),
                has_doc_comment=documented,
                references=references,
            )
        )


def _classify_value(value: Node) -> DeclarationKind:
    if value.type in _FUNCTION_VALUES:
        return DeclarationKind.FUNCTION
    if value.type in _CLASS_VALUES:
        return DeclarationKind.CLASS
    return DeclarationKind.VARIABLE


class JavaScriptExtractor(SymbolExtractor):
    """Exported declarations from ES modules."""

    suffixes = (".js", ".mjs", ".cjs", ".jsx")
    language = "javascript"

    def extract(self, path: str, source: bytes) -> Iterable[ParsedDeclaration]:
        return self.extract_file(path, source).declarations

    def extract_file(self, path: str, source: bytes) -> ExtractedFile:
        tree = parse_source(self.language, path, source)
        walker = _FileWalker(source)
        declarations = merge_declarations(walker.walk(tree.root_node))
        return ExtractedFile(declarations=declarations, module_comments=walker.module_comments)


class TypeScriptExtractor(JavaScriptExtractor):
    """Exported declarations from TypeScript sources and declaration files."""

    suffixes = (".d.ts", ".ts", ".mts", ".cts")
    language = "typescript"


class TsxExtractor(JavaScriptExtractor):
    suffixes = (".tsx",)
    language = "tsx"


__all__ = [
    "JavaScriptExtractor",
    "TsxExtractor",
    "TypeScriptExtractor",
]
