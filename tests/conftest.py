"""Pytest configuration and shared fixtures."""

from email.message import EmailMessage
from unittest.mock import Mock

import pytest


class SmtpTransport:
    """Stand-in transport; only its type name is logged."""


@pytest.fixture
def mock_settings():
    """Mock settings for testing."""
    from mailer_logger.config import Settings

    return Settings(
        prefix="[TEST] ",
        levels={"command_sent": "info", "response_received": None},
        log_level="DEBUG",
        log_format="console",
    )


@pytest.fixture
def mock_logger():
    """Logger capability that records log(level, message, context) calls."""
    return Mock(spec=["log"])


@pytest.fixture
def plugin(mock_logger):
    """Plugin with default levels writing to the mock logger."""
    from mailer_logger.plugin import MailerLoggerPlugin

    return MailerLoggerPlugin(mock_logger)


@pytest.fixture
def transport():
    """Transport instance used as event source."""
    return SmtpTransport()


@pytest.fixture
def sample_message():
    """Sample email message for testing."""
    message = EmailMessage()
    message["From"] = "sender@example.com"
    message["To"] = "recipient@example.com"
    message["Subject"] = "Test Email"
    message.set_content("This is a test email.")
    return message
