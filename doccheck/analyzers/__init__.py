"""Symbol extractors and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Iterable, List, Optional, Sequence, Set

from .base import ExtractedFile, ModuleComment, ParsedDeclaration, SymbolExtractor, merge_declarations
from .javascript import JavaScriptExtractor, TsxExtractor, TypeScriptExtractor
from .python import PythonExtractor

_ENTRY_POINT_GROUP = "doccheck.extractors"

_BUILTIN_FACTORIES: dict[str, Callable[[], SymbolExtractor]] = {
    "javascript": JavaScriptExtractor,
    "typescript": TypeScriptExtractor,
    "tsx": TsxExtractor,
    "python": PythonExtractor,
}


def discover_extractors(enabled: Sequence[str] | None = None) -> List[SymbolExtractor]:
    """Return instantiated extractors, honoring optional enabled names."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    extractors: List[SymbolExtractor] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[], SymbolExtractor]) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        instance = factory()
        if not isinstance(instance, SymbolExtractor):
            raise TypeError(f"Extractor factory for '{name}' did not return a SymbolExtractor instance")
        extractors.append(instance)
        seen.add(key)
        if enabled_set is not None:
            enabled_set.discard(key)

    for name, factory in _BUILTIN_FACTORIES.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        name = entry.name
        try:
            loaded = entry.load()
        except Exception as exc:
            raise RuntimeError(f"Failed to load extractor entry point '{name}': {exc}") from exc

        def _factory(obj: object = loaded) -> SymbolExtractor:
            return _coerce_extractor(obj)

        _add(name, _factory)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise ValueError(f"Unknown extractors requested: {missing}")

    return extractors


def extractor_for(path: str, extractors: Iterable[SymbolExtractor]) -> Optional[SymbolExtractor]:
    """Return the extractor whose longest matching suffix fits ``path``."""
    lower = path.lower()
    best: Optional[SymbolExtractor] = None
    best_length = 0
    for extractor in extractors:
        for suffix in extractor.suffixes:
            if lower.endswith(suffix) and len(suffix) > best_length:
                best, best_length = extractor, len(suffix)
    return best


def _coerce_extractor(obj: object) -> SymbolExtractor:
    if isinstance(obj, SymbolExtractor):
        return obj
    if isinstance(obj, type) and issubclass(obj, SymbolExtractor):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, SymbolExtractor):
            return instance
    raise TypeError("Extractor entry point must be a SymbolExtractor subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points(group=_ENTRY_POINT_GROUP)


__all__ = [
    "ExtractedFile",
    "JavaScriptExtractor",
    "ModuleComment",
    "ParsedDeclaration",
    "PythonExtractor",
    "SymbolExtractor",
    "TsxExtractor",
    "TypeScriptExtractor",
    "discover_extractors",
    "extractor_for",
    "merge_declarations",
]
