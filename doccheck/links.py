"""Resolution of external symbol references to documentation URLs."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Set, Tuple
from urllib.parse import quote

from .builtin_links import builtin_url, is_javascript_path
from .config import URL_PLACEHOLDER, WILDCARD_KEY
from .logging import get_logger
from .models import DefinitionSite, LinkEntry, LinkReport, Symbol, SymbolGraph, ordered_symbols

logger = get_logger("links")

# (site, referrer name, references) for every place that can cite a symbol
_Referrer = Tuple[DefinitionSite, str, Tuple[str, ...]]


def expand_url(template: str, name: str) -> str:
    """Substitute ``{name}`` in a URL template."""
    if URL_PLACEHOLDER not in template:
        return template
    return template.replace(URL_PLACEHOLDER, quote(name, safe="."))


def lookup_url(reference: str, link_map: Mapping[str, str], *, builtins: bool = False) -> Optional[str]:
    """Return the URL for ``reference``.

    The configured map is tried by exact key, then by first segment. With
    ``builtins`` the JavaScript platform names come next, and ``*`` is last.
    """
    url = link_map.get(reference)
    if url is not None:
        return expand_url(url, reference)
    head = reference.split(".", 1)[0]
    if head != reference:
        url = link_map.get(head)
        if url is not None:
            return expand_url(url, head)
    if builtins:
        url = builtin_url(reference)
        if url is not None:
            return url
    url = link_map.get(WILDCARD_KEY)
    if url is not None:
        return expand_url(url, reference)
    return None


class ExternalLinkResolver:
    """Maps references that leave the local symbol graph onto external URLs."""

    def __init__(self, *, builtin_links: bool = True) -> None:
        self.builtin_links = builtin_links

    def resolve(
        self,
        symbols: Mapping[str, Symbol],
        link_map: Mapping[str, str],
    ) -> LinkReport:
        """Return one entry per distinct external reference, in order of first use.

        File-level doc blocks carried by a SymbolGraph count as referrers too.
        """
        local = self._local_names(symbols)
        users: Dict[str, List[str]] = {}
        from_javascript: Set[str] = set()
        for site, referrer, references in self._referrers(symbols):
            for reference in references:
                if self._is_local(reference, local):
                    continue
                referenced_by = users.setdefault(reference, [])
                if referrer not in referenced_by:
                    referenced_by.append(referrer)
                if is_javascript_path(site.path):
                    from_javascript.add(reference)

        report: List[LinkEntry] = []
        for reference, referenced_by in users.items():
            builtins = self.builtin_links and reference in from_javascript
            url = lookup_url(reference, link_map, builtins=builtins)
            if url is None:
                logger.warning(
                    "Unresolved external link: %s (referenced by %s)", reference, referenced_by[0]
                )
            report.append(LinkEntry(reference=reference, resolved_url=url, referenced_by=tuple(referenced_by)))
        return tuple(report)

    @staticmethod
    def _referrers(symbols: Mapping[str, Symbol]) -> List[_Referrer]:
        referrers: List[_Referrer] = [
            (symbol.definition_site, symbol.qualified_name, symbol.references)
            for symbol in ordered_symbols(symbols)
        ]
        if isinstance(symbols, SymbolGraph):
            for doc in symbols.module_docs:
                module = symbols.module_names.get(doc.site.path) or doc.site.path
                referrers.append((doc.site, module, doc.references))
        referrers.sort(key=lambda item: item[0])
        return referrers

    @staticmethod
    def _local_names(symbols: Mapping[str, Symbol]) -> Set[str]:
        names = set(symbols)
        if isinstance(symbols, SymbolGraph):
            names.update(symbols.local_name(symbol) for symbol in symbols.values())
        return names

    @staticmethod
    def _is_local(reference: str, local: Set[str]) -> bool:
        parts = reference.split(".")
        return any(".".join(parts[:length]) in local for length in range(len(parts), 0, -1))


__all__ = ["ExternalLinkResolver", "expand_url", "lookup_url"]
