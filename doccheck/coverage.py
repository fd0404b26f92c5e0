"""Documentation coverage checks over the symbol graph."""

from __future__ import annotations

from typing import AbstractSet, Iterable, Mapping, Optional, Tuple

from .logging import get_logger
from .models import (
    MISSING_DOCUMENTATION,
    CoverageReport,
    CoverageViolation,
    DeclarationKind,
    Symbol,
    ordered_symbols,
)

logger = get_logger("coverage")


class CoverageChecker:
    """Reports exported symbols that lack documentation and are not exempt."""

    def __init__(self, required_kinds: Optional[Iterable[DeclarationKind]] = None) -> None:
        self.required_kinds = frozenset(required_kinds) if required_kinds is not None else frozenset(DeclarationKind)

    def check(
        self,
        symbols: Mapping[str, Symbol],
        exemptions: AbstractSet[str],
    ) -> CoverageReport:
        """Return violations ordered by definition site (file path, then offset)."""
        violations = []
        for symbol in ordered_symbols(symbols):
            if symbol.has_doc_comment or symbol.qualified_name in exemptions:
                continue
            if symbol.kind not in self.required_kinds:
                continue
            violations.append(
                CoverageViolation(
                    symbol=symbol.qualified_name,
                    reason=MISSING_DOCUMENTATION,
                    site=symbol.definition_site,
                    kind=symbol.kind,
                )
            )
        logger.debug("%d of %d symbol(s) missing documentation", len(violations), len(symbols))
        return tuple(violations)

    @staticmethod
    def stale_exemptions(
        symbols: Mapping[str, Symbol],
        exemptions: AbstractSet[str],
    ) -> Tuple[str, ...]:
        """Return exemptions that name no exported symbol, sorted."""
        stale = tuple(sorted(name for name in exemptions if name not in symbols))
        for name in stale:
            logger.warning("Stale exemption: %s does not match any exported symbol", name)
        return stale


__all__ = ["CoverageChecker"]
