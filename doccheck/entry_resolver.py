"""Entry point resolution: glob patterns to concrete source files."""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Pattern, Sequence

from .errors import PatternError
from .globs import compile_pattern, expand_braces, normalize_pattern, split_base, validate_pattern
from .logging import get_logger
from .models import SourceFile

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
    ".tox",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}

logger = get_logger("entry_resolver")


@dataclass
class IgnoreRule:
    """An ``exclude`` pattern from the configuration."""

    pattern: str
    directory_only: bool
    has_slash: bool
    regexes: List[Pattern[str]]

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False

        if self.has_slash:
            return any(regex.fullmatch(rel_path) for regex in self.regexes)

        for part in rel_path.split("/"):
            if any(regex.fullmatch(part) for regex in self.regexes):
                return True
        return False


def _build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = normalize_pattern(pattern)
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern.rstrip("/")

    has_slash = "/" in pattern
    regexes = [compile_pattern(expanded) for expanded in expand_braces(pattern)]
    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        has_slash=has_slash,
        regexes=regexes,
    )


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


def _iter_files(base: Path) -> Iterator[Path]:
    """Yield files under ``base`` in sorted, reproducible order."""
    for dirpath, dirnames, filenames in os.walk(base):
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
        current_dir = Path(dirpath)
        for filename in sorted(filenames):
            if filename in _EXCLUDED_FILES:
                continue
            yield current_dir / filename


def _hash_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _relative_to(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return Path(os.path.relpath(path, root)).as_posix()


class EntryResolver:
    """Expands entry-point globs into a deduplicated, order-stable file list."""

    def __init__(
        self,
        root: Path,
        *,
        exclude: Sequence[str] = (),
        strict: bool = False,
    ) -> None:
        self.root = Path(root).expanduser().resolve()
        self.strict = strict
        self._rules: List[IgnoreRule] = []
        for pattern in exclude:
            validate_pattern(pattern)
            rule = _build_ignore_rule(pattern)
            if rule is not None:
                self._rules.append(rule)

    def resolve(self, patterns: Sequence[str]) -> tuple[SourceFile, ...]:
        """Return source files matched by ``patterns``, in pattern order."""
        if not self.root.is_dir():
            raise PatternError(f"Entry point root is not a directory: {self.root}")

        for pattern in patterns:
            validate_pattern(pattern)

        seen: Dict[Path, SourceFile] = {}
        for pattern in patterns:
            matched = self._match(pattern)
            if not matched:
                if self.strict:
                    raise PatternError(f"Entry pattern matched no files: {pattern}", pattern=pattern)
                logger.warning("Entry pattern matched no files: %s", pattern)
                continue
            logger.debug("Pattern %s matched %d file(s)", pattern, len(matched))
            for path in matched:
                if path in seen:
                    continue
                seen[path] = SourceFile(
                    path=str(path),
                    contents_hash=_hash_file(path),
                    root=str(self.root),
                    relative_path=_relative_to(path, self.root),
                )
        return tuple(seen.values())

    def _match(self, pattern: str) -> List[Path]:
        matched: Dict[Path, None] = {}
        for expanded in expand_braces(normalize_pattern(pattern)):
            for path in self._match_expanded(expanded):
                matched.setdefault(path, None)
        return sorted(matched, key=lambda item: _relative_to(item, self.root))

    def _match_expanded(self, pattern: str) -> Iterator[Path]:
        base_str, rest = split_base(pattern)
        base = (self.root / base_str).resolve() if base_str else self.root
        if not rest:
            return
        regex = compile_pattern(rest)
        if not base.is_dir():
            return

        for path in _iter_files(base):
            rel_to_base = path.relative_to(base).as_posix()
            if not regex.fullmatch(rel_to_base):
                continue
            if self._rules:
                rel_to_root = _relative_to(path, self.root)
                if self._excluded(rel_to_root):
                    continue
            yield path

    def _excluded(self, rel_path: str) -> bool:
        parts = rel_path.split("/")
        for depth in range(1, len(parts)):
            if _should_ignore("/".join(parts[:depth]), True, self._rules):
                return True
        return _should_ignore(rel_path, False, self._rules)


__all__ = ["EntryResolver", "IgnoreRule"]
