"""Tests for doccheck.reporting."""

from __future__ import annotations

import json
from pathlib import Path

from doccheck.models import (
    CheckResult,
    CoverageViolation,
    DeclarationKind,
    DefinitionSite,
    LinkEntry,
    ParseFailure,
    SourceFile,
)
from doccheck.reporting import iter_records, render_json, render_text, write_jsonl


def _result(**overrides) -> CheckResult:
    values = dict(
        files=(SourceFile(path="/repo/lib/a.js", contents_hash="abc", relative_path="lib/a.js"),),
        coverage=(
            CoverageViolation(
                symbol="foo",
                site=DefinitionSite(path="lib/a.js", offset=0, line=3),
                kind=DeclarationKind.FUNCTION,
            ),
        ),
        links=(
            LinkEntry("Buffer", "https://example.org/Buffer"),
            LinkEntry("Stream", None),
        ),
        stale_exemptions=("bar",),
        symbol_count=2,
    )
    values.update(overrides)
    return CheckResult(**values)


def test_records_list_violations_before_links() -> None:
    assert list(iter_records(_result())) == [
        {"symbol": "foo", "reason": "MissingDocumentation"},
        {"reference": "Buffer", "resolvedURL": "https://example.org/Buffer"},
        {"reference": "Stream", "resolvedURL": None},
    ]


def test_write_jsonl_emits_one_object_per_line(tmp_path: Path) -> None:
    target = write_jsonl(_result(), tmp_path / "out" / "report.jsonl")

    lines = target.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line) for line in lines] == list(iter_records(_result()))
    assert '"resolvedURL": null' in lines[-1]


def test_render_json_includes_exit_code_and_warnings() -> None:
    payload = json.loads(render_json(_result(parse_errors=(ParseFailure("lib/b.js", "syntax error"),))))

    assert payload["exit_code"] == 1
    assert payload["files"] == ["lib/a.js"]
    assert payload["stale_exemptions"] == ["bar"]
    assert payload["parse_errors"] == [{"path": "lib/b.js", "message": "syntax error"}]


def test_render_text_summarises_the_run() -> None:
    text = render_text(_result())

    assert "2 symbol(s) in 1 file(s)" in text
    assert "lib/a.js:3  foo (Function)" in text
    assert "Buffer -> https://example.org/Buffer" in text
    assert "Stream -> UNRESOLVED" in text
    assert "Stale exemption: bar" in text
    assert "Result: FAILED" in text


def test_render_text_reports_ok_for_clean_runs() -> None:
    text = render_text(_result(coverage=(), links=(), stale_exemptions=()))

    assert "Missing documentation" not in text
    assert "Result: OK" in text


def test_render_text_uses_override_template(tmp_path: Path) -> None:
    (tmp_path / "report.txt.j2").write_text("custom {{ exit_code }}\n", encoding="utf-8")

    assert render_text(_result(), templates_dir=tmp_path).strip() == "custom 1"
