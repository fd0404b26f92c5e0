"""Base classes for symbol extractors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Iterable, List, Tuple

from ..models import DeclarationKind


@dataclass(frozen=True)
class ParsedDeclaration:
    """An exported declaration found in one file, before module qualification."""

    name: str
    kind: DeclarationKind
    offset: int
    line: int
    has_doc_comment: bool
    references: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ModuleComment:
    """A file-level doc block (``@module``, module docstring) and what it references."""

    offset: int
    line: int
    references: Tuple[str, ...]


@dataclass(frozen=True)
class ExtractedFile:
    """Everything an extractor found in one file."""

    declarations: List[ParsedDeclaration]
    module_comments: List[ModuleComment] = field(default_factory=list)


class SymbolExtractor(ABC):
    """Contract for per-language extractors of exported declarations."""

    #: Filename suffixes handled by the extractor, longest first wins on lookup.
    suffixes: ClassVar[Tuple[str, ...]] = ()
    language: ClassVar[str] = ""

    @abstractmethod
    def extract(self, path: str, source: bytes) -> Iterable[ParsedDeclaration]:
        """Yield exported declarations. Raise ParseError for unparsable input."""

    def extract_file(self, path: str, source: bytes) -> ExtractedFile:
        """Return declarations plus file-level doc blocks.

        Extractors that know about module documentation override this; the
        default only wraps ``extract``.
        """
        return ExtractedFile(declarations=list(self.extract(path, source)))


def merge_declarations(declarations: Iterable[ParsedDeclaration]) -> List[ParsedDeclaration]:
    """Collapse overloads and accessor pairs that share a name within one file.

    The first definition keeps its position; the merged symbol counts as
    documented when any of its definitions is.
    """
    merged: Dict[str, ParsedDeclaration] = {}
    for declaration in declarations:
        existing = merged.get(declaration.name)
        if existing is None:
            merged[declaration.name] = declaration
            continue
        merged[declaration.name] = ParsedDeclaration(
            name=existing.name,
            kind=existing.kind,
            offset=existing.offset,
            line=existing.line,
            has_doc_comment=existing.has_doc_comment or declaration.has_doc_comment,
            references=tuple(dict.fromkeys(existing.references + declaration.references)),
        )
    return list(merged.values())
