"""Tests for extractor discovery utilities."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from doccheck.analyzers import (
    JavaScriptExtractor,
    PythonExtractor,
    SymbolExtractor,
    TsxExtractor,
    TypeScriptExtractor,
    discover_extractors,
    extractor_for,
)


class DummyExtractor(SymbolExtractor):
    """Test extractor used for plugin discovery validation."""

    suffixes = (".rb",)
    language = "ruby"

    def extract(self, path, source):  # pragma: no cover - unused
        return []


def test_discover_extractors_returns_builtin_extractors() -> None:
    extractors = discover_extractors()
    classes = {type(extractor) for extractor in extractors}
    assert {JavaScriptExtractor, TypeScriptExtractor, TsxExtractor, PythonExtractor} <= classes


def test_discover_extractors_respects_enabled_filter() -> None:
    extractors = discover_extractors(["Python"])
    assert len(extractors) == 1
    assert isinstance(extractors[0], PythonExtractor)


def test_discover_extractors_loads_entry_points(monkeypatch: pytest.MonkeyPatch) -> None:
    dummy_entry = SimpleNamespace(name="ruby", load=lambda: DummyExtractor)
    monkeypatch.setattr("doccheck.analyzers._iter_entry_points", lambda: [dummy_entry])

    extractors = discover_extractors(["ruby"])

    assert len(extractors) == 1
    assert isinstance(extractors[0], DummyExtractor)


def test_discover_extractors_rejects_non_extractor_entry_points(monkeypatch: pytest.MonkeyPatch) -> None:
    bogus = SimpleNamespace(name="bogus", load=lambda: object)
    monkeypatch.setattr("doccheck.analyzers._iter_entry_points", lambda: [bogus])

    with pytest.raises(TypeError):
        discover_extractors(["bogus"])


def test_discover_extractors_raises_for_unknown_name() -> None:
    with pytest.raises(ValueError):
        discover_extractors(["does-not-exist"])


@pytest.mark.parametrize(
    "path, expected",
    [
        ("lib/a.js", JavaScriptExtractor),
        ("lib/a.mjs", JavaScriptExtractor),
        ("src/index.ts", TypeScriptExtractor),
        ("types/index.d.ts", TypeScriptExtractor),
        ("ui/App.tsx", TsxExtractor),
        ("pkg/mod.pyi", PythonExtractor),
    ],
)
def test_extractor_for_picks_by_suffix(path: str, expected: type) -> None:
    extractor = extractor_for(path, discover_extractors())
    assert isinstance(extractor, expected)


def test_extractor_for_returns_none_for_unknown_suffix() -> None:
    assert extractor_for("README.md", discover_extractors()) is None
