"""Core data models shared across docs-check components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

MISSING_DOCUMENTATION = "MissingDocumentation"


class DeclarationKind(str, Enum):
    """Classification of an exported declaration."""

    FUNCTION = "Function"
    CLASS = "Class"
    TYPE_ALIAS = "TypeAlias"
    CONST = "Const"
    ENUM = "Enum"
    INTERFACE = "Interface"
    VARIABLE = "Variable"
    METHOD = "Method"
    PROPERTY = "Property"

    @classmethod
    def parse(cls, value: str) -> "DeclarationKind":
        """Look up a kind by its value or member name, case-insensitively."""
        lowered = value.strip().lower()
        for kind in cls:
            if lowered in {kind.value.lower(), kind.name.lower()}:
                return kind
        raise ValueError(f"Unknown declaration kind: {value}")


@dataclass(frozen=True)
class SourceFile:
    """A resolved entry-point file."""

    path: str
    contents_hash: str
    root: str = ""
    relative_path: str = ""


@dataclass(frozen=True, order=True)
class DefinitionSite:
    """Where a declaration lives: file path first, then byte offset."""

    path: str
    offset: int
    line: int = 0

    def __str__(self) -> str:
        return f"{self.path}:{self.line}" if self.line else self.path


@dataclass(frozen=True)
class Symbol:
    """Exported declaration discovered while walking entry points."""

    qualified_name: str
    kind: DeclarationKind
    definition_site: DefinitionSite
    has_doc_comment: bool
    references: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ModuleDoc:
    """A file-level doc block that references other symbols but documents none."""

    site: DefinitionSite
    references: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ParseFailure:
    """A file that could not be turned into symbols."""

    path: str
    message: str


def ordered_symbols(symbols: Mapping[str, Symbol]) -> Tuple[Symbol, ...]:
    """Return symbols sorted by definition site (file path, then offset)."""
    return tuple(
        sorted(symbols.values(), key=lambda symbol: (symbol.definition_site, symbol.qualified_name))
    )


class SymbolGraph(Mapping[str, Symbol]):
    """Read-only mapping of qualified name to Symbol for a single run."""

    def __init__(
        self,
        symbols: Mapping[str, Symbol] | None = None,
        parse_errors: Tuple[ParseFailure, ...] = (),
        module_names: Mapping[str, str] | None = None,
        module_docs: Tuple[ModuleDoc, ...] = (),
    ) -> None:
        self._symbols: Mapping[str, Symbol] = MappingProxyType(dict(symbols or {}))
        self.parse_errors = tuple(parse_errors)
        # path -> module prefix applied to that file's symbols ("" for none)
        self.module_names: Mapping[str, str] = MappingProxyType(dict(module_names or {}))
        self.module_docs = tuple(sorted(module_docs, key=lambda doc: doc.site))

    def __getitem__(self, key: str) -> Symbol:
        return self._symbols[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def local_name(self, symbol: Symbol) -> str:
        """Return the symbol name without its module prefix."""
        prefix = self.module_names.get(symbol.definition_site.path, "")
        if prefix and symbol.qualified_name.startswith(f"{prefix}."):
            return symbol.qualified_name[len(prefix) + 1 :]
        return symbol.qualified_name


@dataclass(frozen=True)
class CoverageViolation:
    """A symbol that should be documented but is not."""

    symbol: str
    reason: str = MISSING_DOCUMENTATION
    site: Optional[DefinitionSite] = None
    kind: Optional[DeclarationKind] = None

    def to_record(self) -> Dict[str, object]:
        return {"symbol": self.symbol, "reason": self.reason}


@dataclass(frozen=True)
class LinkEntry:
    """Outcome of resolving one external reference."""

    reference: str
    resolved_url: Optional[str]
    referenced_by: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def resolved(self) -> bool:
        return self.resolved_url is not None

    def to_record(self) -> Dict[str, object]:
        return {"reference": self.reference, "resolvedURL": self.resolved_url}


CoverageReport = Tuple[CoverageViolation, ...]
LinkReport = Tuple[LinkEntry, ...]


@dataclass(frozen=True)
class CheckResult:
    """Everything a single pipeline run produced."""

    files: Tuple[SourceFile, ...]
    coverage: CoverageReport
    links: LinkReport
    parse_errors: Tuple[ParseFailure, ...] = ()
    stale_exemptions: Tuple[str, ...] = ()
    symbol_count: int = 0
    strict: bool = False

    @property
    def unresolved_links(self) -> LinkReport:
        return tuple(entry for entry in self.links if not entry.resolved)

    @property
    def exit_code(self) -> int:
        if self.coverage:
            return 1
        if self.strict and (self.unresolved_links or self.stale_exemptions or self.parse_errors):
            return 1
        return 0

    def warnings(self) -> Tuple[str, ...]:
        messages = [f"Stale exemption: {name} does not match any exported symbol" for name in self.stale_exemptions]
        messages.extend(f"Unresolved external link: {entry.reference}" for entry in self.unresolved_links)
        messages.extend(f"Parse error in {failure.path}: {failure.message}" for failure in self.parse_errors)
        return tuple(messages)
