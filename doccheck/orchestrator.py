"""Pipeline orchestration for a docs-check run."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from .config import CheckConfig, load_config
from .coverage import CoverageChecker
from .entry_resolver import EntryResolver
from .graph import SymbolGraphBuilder
from .links import ExternalLinkResolver
from .logging import get_logger
from .models import CheckResult


class Orchestrator:
    """Runs entry resolution, graph building, coverage and link checks in order.

    Each stage is constructed per run from the supplied configuration, so a
    single orchestrator can be reused across configurations.
    """

    def __init__(
        self,
        resolver_factory: Optional[Callable[[CheckConfig], EntryResolver]] = None,
        builder_factory: Optional[Callable[[CheckConfig], SymbolGraphBuilder]] = None,
        checker_factory: Optional[Callable[[CheckConfig], CoverageChecker]] = None,
        link_resolver: ExternalLinkResolver | None = None,
    ) -> None:
        self._resolver_factory = resolver_factory or _default_resolver
        self._builder_factory = builder_factory or _default_builder
        self._checker_factory = checker_factory or _default_checker
        self.link_resolver = link_resolver or ExternalLinkResolver()
        self.logger = get_logger("orchestrator")

    def run(self, config: CheckConfig) -> CheckResult:
        """Check documentation for ``config`` and return the combined result."""
        self.logger.info("Starting docs-check run for %s", config.root)

        files = self._resolver_factory(config).resolve(config.entry_points)
        self.logger.debug("Resolved %d entry file(s)", len(files))

        graph = self._builder_factory(config).build(files)
        self.logger.debug("Symbol graph holds %d symbol(s)", len(graph))

        checker = self._checker_factory(config)
        coverage = checker.check(graph, config.intentionally_not_documented)
        stale = checker.stale_exemptions(graph, config.intentionally_not_documented)
        links = self.link_resolver.resolve(graph, config.external_symbol_link_mappings)

        result = CheckResult(
            files=files,
            coverage=coverage,
            links=links,
            parse_errors=graph.parse_errors,
            stale_exemptions=stale,
            symbol_count=len(graph),
            strict=config.strict,
        )
        self.logger.info(
            "Checked %d symbol(s) in %d file(s): %d undocumented, %d unresolved link(s)",
            result.symbol_count,
            len(files),
            len(coverage),
            len(result.unresolved_links),
        )
        return result

    def run_path(
        self,
        config_path: str | Path,
        *,
        strict: Optional[bool] = None,
        jobs: Optional[int] = None,
    ) -> CheckResult:
        """Load the configuration at ``config_path`` and run it."""
        config = load_config(Path(config_path).expanduser())
        if strict is not None or jobs is not None:
            config = config.with_overrides(strict=strict, jobs=jobs)
        return self.run(config)


def _default_resolver(config: CheckConfig) -> EntryResolver:
    return EntryResolver(config.root, exclude=config.exclude, strict=config.strict_patterns)


def _default_builder(config: CheckConfig) -> SymbolGraphBuilder:
    return SymbolGraphBuilder(jobs=config.jobs)


def _default_checker(config: CheckConfig) -> CoverageChecker:
    return CoverageChecker(config.required_to_be_documented)


__all__ = ["Orchestrator"]
