"""Tests for ColoredFormatter and setup_logging."""

import logging
from io import StringIO

import pytest

from playback_orchestrator.domain.shared.exceptions import ConfigurationError
from playback_orchestrator.utils.logging import ColoredFormatter, setup_logging

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


def _make_record(level: int, message: str = "test") -> logging.LogRecord:
    return logging.LogRecord(
        name="playback_orchestrator.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


def _tty_stream() -> StringIO:
    stream = StringIO()
    stream.isatty = lambda: True  # type: ignore[method-assign]
    return stream


@pytest.fixture(autouse=True)
def no_color_unset(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)


class TestColoredFormatter:
    @pytest.mark.parametrize("level", list(LEVEL_COLORS))
    def test_color_applied_per_level(self, level: int):
        """Should wrap the level name in the level's ANSI color."""
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_tty_stream())

        output = fmt.format(_make_record(level))

        assert output.startswith(LEVEL_COLORS[level])
        assert RESET in output

    def test_no_color_env(self, monkeypatch):
        """Should not color output when NO_COLOR is set."""
        monkeypatch.setenv("NO_COLOR", "1")
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_tty_stream())

        assert "\033[" not in fmt.format(_make_record(logging.INFO))

    def test_no_color_without_tty(self):
        """Should not color output for non-TTY streams."""
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=StringIO())

        assert fmt.format(_make_record(logging.ERROR)) == "ERROR | test"

    def test_original_record_not_mutated(self):
        """Should leave the record untouched for other handlers."""
        fmt = ColoredFormatter("%(levelname)s", stream=_tty_stream())
        record = _make_record(logging.WARNING)

        fmt.format(record)

        assert record.levelname == "WARNING"


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_installs_handler(self):
        """Should route records through one formatted console handler."""
        stream = StringIO()

        setup_logging("debug", stream=stream)
        logging.getLogger("playback_orchestrator.test").debug("hello %s", "queue")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, ColoredFormatter)
        assert "| DEBUG    | playback_orchestrator.test | hello queue" in stream.getvalue()

    def test_invalid_level(self):
        """Should raise ConfigurationError for unknown levels."""
        with pytest.raises(ConfigurationError) as exc_info:
            setup_logging("chatty")
        assert exc_info.value.option == "log_level"
