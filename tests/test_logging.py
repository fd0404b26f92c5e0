"""Tests for doccheck.logging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from doccheck.logging import component_of, configure_logging, get_logger


def test_component_of_strips_the_package_prefix() -> None:
    assert component_of("doccheck.links") == "links"
    assert component_of("doccheck.analyzers.javascript") == "analyzers.javascript"
    assert component_of("doccheck") == "core"


def test_console_lines_name_the_component(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging()

    get_logger("links").warning("Unresolved external link: %s", "Buffer")
    get_logger("graph").debug("hidden below INFO")

    err = capsys.readouterr().err
    assert "[docs-check] WARNING links: Unresolved external link: Buffer" in err
    assert "hidden below INFO" not in err


def test_log_file_keeps_debug_records(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    log_file = tmp_path / "logs" / "docs-check.log"
    logger = configure_logging(log_file=log_file)

    get_logger("graph").debug("Collected 2 symbol(s) from lib/a.js")
    for handler in logger.handlers:
        handler.flush()

    assert "DEBUG graph: Collected 2 symbol(s) from lib/a.js" in log_file.read_text(encoding="utf-8")
    assert "Collected" not in capsys.readouterr().err


def test_reconfiguring_replaces_handlers() -> None:
    configure_logging()
    logger = configure_logging(verbose=True)

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
