"""Exception hierarchy for docs-check runs."""

from __future__ import annotations

from typing import Optional

__all__ = [
    "DocsCheckError",
    "ConfigError",
    "ConfigNotFoundError",
    "PatternError",
    "ParseError",
    "DuplicateSymbolError",
]


class DocsCheckError(RuntimeError):
    """Base class for docs-check failures."""


class ConfigError(DocsCheckError):
    """Raised when the configuration file is missing or malformed."""


class PatternError(ConfigError):
    """Raised for an invalid entry pattern, or a strict pattern that matches nothing."""

    def __init__(self, message: str, *, pattern: Optional[str] = None) -> None:
        super().__init__(message)
        self.pattern = pattern


class ParseError(DocsCheckError):
    """Raised when a single source file cannot be parsed. Recoverable."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class DuplicateSymbolError(DocsCheckError):
    """Raised when two declarations share a qualified name."""

    def __init__(self, qualified_name: str, first: str, second: str) -> None:
        super().__init__(
            f"Duplicate symbol {qualified_name!r} defined at {first} and {second}"
        )
        self.qualified_name = qualified_name
        self.first = first
        self.second = second


class ConfigNotFoundError(ConfigError):
    """Raised when no configuration file exists at the given path."""
