"""CLI entrypoint for docs-check."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .errors import DocsCheckError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .reporting import render_json, render_text, write_jsonl

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_FATAL = 2


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docs-check",
        description="Check documentation coverage and external symbol links.",
    )
    parser.add_argument(
        "config_path",
        help="Path to .docs-check.yml, or a directory containing one.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail on unresolved links, stale exemptions and parse errors.",
    )
    parser.add_argument(
        "--jobs",
        type=_positive_int,
        default=None,
        help="Number of parser threads (overrides the config file).",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Report format written to stdout.",
    )
    parser.add_argument(
        "--report-file",
        type=Path,
        default=None,
        help="Also write a JSON Lines report to this path.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug-level logs to this file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run docs-check and return its exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    orchestrator = Orchestrator()
    try:
        result = orchestrator.run_path(args.config_path, strict=args.strict, jobs=args.jobs)
    except DocsCheckError as exc:
        print(f"docs-check: {exc}", file=sys.stderr)
        return EXIT_FATAL

    if args.format == "json":
        print(render_json(result))
    else:
        print(render_text(result))

    if args.report_file is not None:
        try:
            write_jsonl(result, args.report_file)
        except OSError as exc:
            print(f"docs-check: cannot write report file: {exc}", file=sys.stderr)
            return EXIT_FATAL

    return result.exit_code


def run() -> None:
    """Console-script wrapper that exits with the run's status."""
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
