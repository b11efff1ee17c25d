"""Logging setup for the ``folio`` logger hierarchy.

Three output modes, chosen by CLI flags:
- human: ``[LEVEL] message`` (level tag coloured on a TTY)
- verbose: ``[LEVEL][HH:MM:SS] message``
- json: one ``{"level": ..., "ts": ..., "msg": ...}`` object per line

Everything is written to stderr; stdout is reserved for command output such
as issue listings and ``--json`` reports.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO

ROOT_LOGGER = "folio"

_RESET = "\033[0m"
_LEVEL_COLORS = {
    logging.DEBUG: "\033[90m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[31m",
}


class LogMode(Enum):
    """Log output mode."""

    HUMAN = "human"
    VERBOSE = "verbose"
    JSON = "json"


class TextFormatter(logging.Formatter):
    """Single-line text output for people reading a terminal.

    Args:
        timestamps: Add ``[HH:MM:SS]`` after the level tag
        use_colors: Colour the level tag
    """

    def __init__(self, timestamps: bool = False, use_colors: bool = False) -> None:
        super().__init__()
        self.timestamps = timestamps
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        tag = f"[{record.levelname}]"
        if self.use_colors:
            tag = f"{_LEVEL_COLORS.get(record.levelno, _RESET)}{tag}{_RESET}"
        if self.timestamps:
            tag += datetime.fromtimestamp(record.created).strftime("[%H:%M:%S]")

        text = f"{tag} {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


class JSONFormatter(logging.Formatter):
    """JSON lines for CI logs. Fields passed to ``structured`` are merged in."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "msg": record.getMessage(),
        }
        entry.update(getattr(record, "fields", {}))
        return json.dumps(entry, default=str)


class FolioLogger(logging.Logger):
    """Logger that can attach machine-readable fields to a message."""

    def structured(self, level: int, msg: str, **fields: Any) -> None:
        """Log ``msg`` with extra fields (only shown by the JSON formatter)."""
        self.log(level, msg, extra={"fields": fields}, stacklevel=2)


logging.setLoggerClass(FolioLogger)


def get_logger(name: str = ROOT_LOGGER) -> FolioLogger:
    """Get a logger under the ``folio`` hierarchy."""
    return logging.getLogger(name)  # type: ignore[return-value]


def setup_logging(
    mode: LogMode = LogMode.HUMAN,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> None:
    """Install a single handler on the ``folio`` logger.

    Calling it again replaces the previous handler.

    Args:
        mode: Output mode
        level: Minimum level
        stream: Output stream (stderr when None)
    """
    stream = stream or sys.stderr

    if mode is LogMode.JSON:
        formatter: logging.Formatter = JSONFormatter()
    else:
        use_colors = hasattr(stream, "isatty") and stream.isatty()
        formatter = TextFormatter(timestamps=mode is LogMode.VERBOSE, use_colors=use_colors)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)


def configure_from_cli(verbose: bool = False, quiet: bool = False, ci: bool = False) -> None:
    """Map the global CLI flags onto a log mode and level.

    ``--ci`` wins over ``--verbose`` for the mode; ``--quiet`` wins over
    ``--verbose`` for the level.
    """
    if ci:
        mode = LogMode.JSON
    elif verbose:
        mode = LogMode.VERBOSE
    else:
        mode = LogMode.HUMAN

    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    setup_logging(mode=mode, level=level)
