"""Text, JSON and JSON Lines renderings of a CheckResult."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterator, List

from jinja2 import Environment, FileSystemLoader

from .models import CheckResult

_TEMPLATES_DIR = Path(__file__).with_name("templates")
_TEXT_TEMPLATE = "report.txt.j2"


def _create_env(templates_dir: Path | None = None) -> Environment:
    directories: List[str] = []
    if templates_dir:
        directories.append(str(templates_dir))
    directories.append(str(_TEMPLATES_DIR))
    loader = FileSystemLoader(directories)
    return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


def render_text(result: CheckResult, *, templates_dir: Path | None = None) -> str:
    """Render the human-readable report.

    A ``report.txt.j2`` inside ``templates_dir`` overrides the bundled one.
    """
    template = _create_env(templates_dir).get_template(_TEXT_TEMPLATE)
    return template.render(
        symbol_count=result.symbol_count,
        file_count=len(result.files),
        coverage=result.coverage,
        links=result.links,
        warnings=result.warnings(),
        exit_code=result.exit_code,
        strict=result.strict,
    )


def iter_records(result: CheckResult) -> Iterator[Dict[str, object]]:
    """Yield violation records, then link records."""
    for violation in result.coverage:
        yield violation.to_record()
    for entry in result.links:
        yield entry.to_record()


def to_payload(result: CheckResult) -> Dict[str, object]:
    return {
        "exit_code": result.exit_code,
        "strict": result.strict,
        "files": [file.relative_path or file.path for file in result.files],
        "symbol_count": result.symbol_count,
        "coverage": [violation.to_record() for violation in result.coverage],
        "links": [entry.to_record() for entry in result.links],
        "stale_exemptions": list(result.stale_exemptions),
        "parse_errors": [
            {"path": failure.path, "message": failure.message} for failure in result.parse_errors
        ],
    }


def render_json(result: CheckResult) -> str:
    return json.dumps(to_payload(result), indent=2)


def write_jsonl(result: CheckResult, path: Path) -> Path:
    """Write the JSON Lines report to ``path`` and return it."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        for record in iter_records(result):
            handle.write(json.dumps(record))
            handle.write("\n")
    return target


__all__ = ["iter_records", "render_json", "render_text", "to_payload", "write_jsonl"]
