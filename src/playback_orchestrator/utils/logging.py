"""Console logging setup for applications embedding the orchestrator."""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

from playback_orchestrator.domain.shared.exceptions import ConfigurationError
from playback_orchestrator.domain.shared.messages import ErrorMessages

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ColoredFormatter(logging.Formatter):
    """Applies ANSI colors to the level name.

    Disabled when ``NO_COLOR`` is set or the stream is not a TTY.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str | None = None, datefmt: str | None = None, stream: TextIO | None = None) -> None:
        super().__init__(fmt, datefmt)
        self._stream = stream

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = self._stream or sys.stderr
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if self._use_color():
            color = self.COLORS.get(record.levelno, "")
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(log_level: str = "INFO", *, stream: TextIO | None = None) -> None:
    """Install a root console handler at ``log_level``.

    Raises:
        ConfigurationError: If ``log_level`` is not a standard level name.
    """
    level_name = log_level.upper()
    if level_name not in VALID_LEVELS:
        raise ConfigurationError(
            ErrorMessages.INVALID_LOG_LEVEL.format(level=log_level, valid_levels=VALID_LEVELS),
            option="log_level",
        )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(ColoredFormatter(LOG_FORMAT, DATE_FORMAT, stream=handler.stream))

    logging.basicConfig(level=level_name, handlers=[handler], force=True)
