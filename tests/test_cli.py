"""CLI behaviour tests."""

from __future__ import annotations

import json

import pytest

from doccheck.cli import EXIT_FAILED, EXIT_FATAL, EXIT_OK, _build_parser, main
from tests._fixtures.repo_builder import RepoBuilder


def test_cli_parses_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(["docs.yml", "--strict", "--jobs", "3", "--format", "json", "-v"])
    assert args.config_path == "docs.yml"
    assert args.strict is True
    assert args.jobs == 3
    assert args.format == "json"
    assert args.verbose is True


def test_cli_leaves_strict_unset_by_default() -> None:
    args = _build_parser().parse_args(["docs.yml"])
    assert args.strict is None
    assert args.jobs is None
    assert args.report_file is None


def test_cli_rejects_non_positive_jobs() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["docs.yml", "--jobs", "0"])


def test_main_returns_failure_for_undocumented_exports(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"lib/a.js": "export function foo() {}\n"})
    config_file = repo_builder.write_config({"entryPoints": ["./lib/a.*"]})

    code = main([str(config_file)])

    assert code == EXIT_FAILED
    assert "foo" in capsys.readouterr().out


def test_main_writes_jsonl_report(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"lib/a.js": "/**\n * Reads a {@link Buffer}.\n */\nexport function read() {}\n"})
    config_file = repo_builder.write_config({"entryPoints": ["lib/a.js"]})
    report = repo_builder.path() / "report.jsonl"

    code = main([str(config_file), "--report-file", str(report), "--format", "json"])

    assert code == EXIT_OK
    records = [json.loads(line) for line in report.read_text(encoding="utf-8").splitlines()]
    assert records == [{"reference": "Buffer", "resolvedURL": None}]


def test_main_strict_flag_escalates_warnings(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"lib/a.js": "/**\n * Reads a {@link Buffer}.\n */\nexport function read() {}\n"})
    config_file = repo_builder.write_config({"entryPoints": ["lib/a.js"]})

    assert main([str(config_file), "--strict"]) == EXIT_FAILED


@pytest.mark.parametrize(
    "config, message",
    [
        ({"entryPoints": ["lib/[a.js"]}, "Unclosed"),
        ({"entryPoints": ["lib/*.js"], "intentionallyNotDocumented": ["x", "x"]}, "duplicate"),
        ({"entryPoints": ["lib/none/*.js"], "strictPatterns": True}, "matched no files"),
    ],
)
def test_main_returns_fatal_for_config_errors(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str], config: dict, message: str
) -> None:
    config_file = repo_builder.write_config(config)

    assert main([str(config_file)]) == EXIT_FATAL
    err = capsys.readouterr().err
    assert err.startswith("docs-check: ") or "\ndocs-check: " in err
    assert message in err


def test_main_returns_fatal_for_duplicate_symbols(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "lib/a.js": "export function foo() {}\n",
            "lib/a.d.ts": "export declare function foo(): void;\n",
        }
    )
    config_file = repo_builder.write_config({"entryPoints": ["lib/a.*"]})

    assert main([str(config_file)]) == EXIT_FATAL


def test_main_returns_fatal_for_missing_config(tmp_path) -> None:
    assert main([str(tmp_path / "nope.yml")]) == EXIT_FATAL


def test_main_logs_component_names_and_writes_log_file(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"lib/a.js": "/**\n * Reads a {@link Buffer}.\n */\nexport function read() {}\n"})
    config_file = repo_builder.write_config({"entryPoints": ["lib/a.js"]})
    log_file = repo_builder.path() / "logs" / "run.log"

    assert main([str(config_file), "--log-file", str(log_file)]) == EXIT_OK

    err = capsys.readouterr().err
    assert "[docs-check] WARNING links: Unresolved external link: Buffer (referenced by read)" in err
    assert "graph: Collected 1 symbol(s) from lib/a.js" in log_file.read_text(encoding="utf-8")
