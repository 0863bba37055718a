"""Unit tests for logging configuration and the structlog adapter."""

import io
import json
import logging
from unittest.mock import Mock

import pytest
import structlog
from structlog.testing import capture_logs

from mailer_logger.config import Settings
from mailer_logger.events import CommandEvent
from mailer_logger.levels import LogLevel
from mailer_logger.logging import StructlogLogger, setup_logging, setup_logging_from_settings
from mailer_logger.plugin import MailerLoggerPlugin


@pytest.fixture
def mailer_stream():
    """Collect records written to the stdlib "mailer" logger."""
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    stdlib_logger = logging.getLogger("mailer")
    previous_level = stdlib_logger.level
    stdlib_logger.addHandler(handler)
    stdlib_logger.setLevel(logging.DEBUG)

    yield stream

    stdlib_logger.removeHandler(handler)
    stdlib_logger.setLevel(previous_level)
    structlog.reset_defaults()


def _json_lines(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


@pytest.mark.unit
def test_setup_logging_renders_json(mailer_stream):
    """Test that the json format renders level, logger and context."""
    setup_logging(log_level="INFO", log_format="json")

    StructlogLogger(name="mailer").log(
        LogLevel.INFO, "[MAILER] MESSAGE (sendPerformed): ", {"result": 16}
    )

    [entry] = _json_lines(mailer_stream)
    assert entry["event"] == "[MAILER] MESSAGE (sendPerformed): "
    assert entry["level"] == "INFO"
    assert entry["logger"] == "mailer"
    assert entry["result"] == 16
    assert "timestamp" in entry


@pytest.mark.unit
def test_setup_logging_renders_console(mailer_stream):
    """Test that the console format writes the prefixed message."""
    setup_logging(log_level="DEBUG", log_format="console")

    StructlogLogger(name="mailer").log(LogLevel.DEBUG, "[MAILER] >> EHLO example.com")

    assert "[MAILER] >> EHLO example.com" in mailer_stream.getvalue()


@pytest.mark.unit
def test_setup_logging_from_settings(monkeypatch):
    """Test that log_level and log_format come from settings."""
    setup = Mock()
    monkeypatch.setattr("mailer_logger.logging.setup_logging", setup)

    setup_logging_from_settings(Settings(log_level="DEBUG", log_format="console"))

    setup.assert_called_once_with(log_level="DEBUG", log_format="console")


@pytest.mark.unit
def test_plugin_from_settings_writes_json(mailer_stream, transport):
    """Test a settings-built plugin logs through the configured pipeline."""
    settings = Settings(prefix="[ENV] ", log_level="DEBUG", log_format="json")

    plugin = MailerLoggerPlugin.from_settings(settings=settings)
    plugin.command_sent(CommandEvent(source=transport, command="NOOP"))

    entries = [entry for entry in _json_lines(mailer_stream) if entry["event"].startswith("[ENV] ")]
    assert len(entries) == 1
    assert entries[0]["event"] == "[ENV] >> NOOP"
    assert entries[0]["level"] == "DEBUG"


@pytest.mark.unit
def test_structlog_logger_binds_context():
    """Test that the adapter passes level, message and context through."""
    bound = Mock()
    adapter = StructlogLogger(bound=bound)

    adapter.log(LogLevel.ERROR, "[MAILER] !! boom", {"result": 4096})

    bound.log.assert_called_once_with(40, "[MAILER] !! boom", result=4096)


@pytest.mark.unit
def test_structlog_logger_captured():
    """Test that entries reach structlog with their level name."""
    structlog.reset_defaults()
    adapter = StructlogLogger(name="mailer")

    with capture_logs() as logs:
        adapter.log(LogLevel.INFO, "[MAILER] MESSAGE (sendPerformed): ", {"result": 16})

    assert logs == [
        {
            "event": "[MAILER] MESSAGE (sendPerformed): ",
            "log_level": "info",
            "result": 16,
        }
    ]
