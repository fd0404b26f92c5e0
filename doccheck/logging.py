"""Logging setup for docs-check runs.

Every stage logs through ``get_logger("<component>")``. Console lines name the
component that emitted them, e.g. ``[docs-check] WARNING links: ...``.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "doccheck"
_CORE_COMPONENT = "core"
_CONSOLE_FORMAT = "[docs-check] %(levelname)s %(component)s: %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(component)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the logger of one docs-check component."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def component_of(logger_name: str) -> str:
    """Map ``doccheck.links`` to ``links``; the package logger itself is ``core``."""
    prefix = f"{_LOGGER_NAME}."
    if logger_name.startswith(prefix):
        return logger_name[len(prefix) :]
    return _CORE_COMPONENT


class ComponentFilter(logging.Filter):
    """Attach ``record.component`` so formatters can print it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.component = component_of(record.name)
        return True


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send docs-check logs to stderr and, when given, to ``log_file``.

    Calling it again replaces the handlers installed by the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    components = ComponentFilter()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.addFilter(components)
    stream_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(components)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)
        # the file sink keeps debug detail even when the console is at INFO
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["ComponentFilter", "component_of", "configure_logging", "get_logger"]
