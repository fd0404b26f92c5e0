"""Symbol graph construction across resolved entry points."""

from __future__ import annotations

import hashlib
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .analyzers import ExtractedFile, SymbolExtractor, discover_extractors, extractor_for
from .errors import DuplicateSymbolError, ParseError
from .logging import get_logger
from .models import DefinitionSite, ModuleDoc, ParseFailure, SourceFile, Symbol, SymbolGraph

_DECLARATION_SUFFIXES = (".d.ts", ".d.mts", ".d.cts")
_INDEX_MODULES = {"index", "__init__"}

_Outcome = Union[ExtractedFile, ParseFailure]

logger = get_logger("graph")


def _display_path(file: SourceFile) -> str:
    return file.relative_path or file.path


def _strip_suffix(relative: str) -> str:
    lower = relative.lower()
    for suffix in _DECLARATION_SUFFIXES:
        if lower.endswith(suffix):
            return relative[: -len(suffix)]
    stem, _ = os.path.splitext(relative)
    return stem


def module_names_for(files: Sequence[SourceFile]) -> Dict[str, str]:
    """Map each file's display path to the module prefix of its symbols.

    A single entry file contributes unprefixed names; otherwise names are
    prefixed with the file path relative to the files' common directory.
    """
    if len(files) <= 1:
        return {_display_path(file): "" for file in files}

    parents = [str(Path(file.path).parent) for file in files]
    base = Path(os.path.commonpath(parents))
    names: Dict[str, str] = {}
    for file in files:
        relative = PurePosixPath(Path(file.path).relative_to(base).as_posix())
        module = _strip_suffix(relative.as_posix())
        parts = module.split("/")
        if len(parts) > 1 and parts[-1] in _INDEX_MODULES:
            parts = parts[:-1]
        if file.path.lower().endswith((".py", ".pyi")):
            module = ".".join(parts)
        else:
            module = "/".join(parts)
        names[_display_path(file)] = module
    return names


class SymbolGraphBuilder:
    """Parses resolved files and assembles the exported symbol graph."""

    def __init__(
        self,
        extractors: Optional[Iterable[SymbolExtractor]] = None,
        *,
        jobs: int = 1,
    ) -> None:
        self.extractors = list(extractors) if extractors is not None else discover_extractors()
        self.jobs = max(1, jobs)

    def build(self, files: Sequence[SourceFile]) -> SymbolGraph:
        """Return the symbol graph for ``files``.

        Per-file parse failures are collected on the graph. Two declarations
        with the same qualified name raise DuplicateSymbolError.
        """
        module_names = module_names_for(files)
        symbols: Dict[str, Symbol] = {}
        failures: List[ParseFailure] = []
        module_docs: List[ModuleDoc] = []

        for file, outcome in self._parse_all(files):
            display = _display_path(file)
            if isinstance(outcome, ParseFailure):
                logger.warning("Skipping %s: %s", outcome.path, outcome.message)
                failures.append(outcome)
                continue

            prefix = module_names.get(display, "")
            for declaration in outcome.declarations:
                qualified = f"{prefix}.{declaration.name}" if prefix else declaration.name
                site = DefinitionSite(path=display, offset=declaration.offset, line=declaration.line)
                existing = symbols.get(qualified)
                if existing is not None:
                    raise DuplicateSymbolError(qualified, str(existing.definition_site), str(site))
                symbols[qualified] = Symbol(
                    qualified_name=qualified,
                    kind=declaration.kind,
                    definition_site=site,
                    has_doc_comment=declaration.has_doc_comment,
                    references=declaration.references,
                )
            module_docs.extend(
                ModuleDoc(DefinitionSite(path=display, offset=comment.offset, line=comment.line), comment.references)
                for comment in outcome.module_comments
            )
            logger.debug("Collected %d symbol(s) from %s", len(outcome.declarations), display)

        return SymbolGraph(symbols, tuple(failures), module_names, tuple(module_docs))

    def _parse_all(self, files: Sequence[SourceFile]) -> List[Tuple[SourceFile, _Outcome]]:
        if self.jobs == 1 or len(files) < 2:
            return [(file, self._parse_file(file)) for file in files]

        pool = ThreadPoolExecutor(max_workers=self.jobs, thread_name_prefix="doccheck-parse")
        try:
            futures = [pool.submit(self._parse_file, file) for file in files]
            results = [(file, future.result()) for file, future in zip(files, futures)]
        except BaseException:
            pool.shutdown(wait=False, cancel_futures=True)
            raise
        pool.shutdown(wait=True)
        return results

    def _parse_file(self, file: SourceFile) -> _Outcome:
        display = _display_path(file)
        extractor = extractor_for(file.path, self.extractors)
        if extractor is None:
            return ParseFailure(display, "no extractor handles this file type")

        try:
            source = Path(file.path).read_bytes()
        except OSError as exc:
            return ParseFailure(display, f"cannot read file: {exc.strerror or exc}")

        if file.contents_hash and hashlib.sha256(source).hexdigest() != file.contents_hash:
            return ParseFailure(display, "file changed after entry points were resolved")

        try:
            source.decode("utf-8")
        except UnicodeDecodeError:
            return ParseFailure(display, "file is not valid UTF-8")

        try:
            return extractor.extract_file(display, source)
        except ParseError as exc:
            return ParseFailure(exc.path, exc.message)


__all__ = ["SymbolGraphBuilder", "module_names_for"]
