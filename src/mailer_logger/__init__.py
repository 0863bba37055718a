"""Mailer Logger.

A listener plugin that logs mailer activity through a leveled logger.
"""

from mailer_logger.errors import MailerLoggerError, TransportError
from mailer_logger.levels import DEFAULT_LEVELS, DISABLED, LogLevel, MailerEvent
from mailer_logger.plugin import DEFAULT_PREFIX, MailerLoggerPlugin

__version__ = "0.1.0"
__author__ = "Cakemail Team"
__email__ = "devops@cakemail.com"

# Package metadata
__all__ = [
    "__version__",
    "__author__",
    "__email__",
    "DEFAULT_LEVELS",
    "DEFAULT_PREFIX",
    "DISABLED",
    "LogLevel",
    "MailerEvent",
    "MailerLoggerError",
    "MailerLoggerPlugin",
    "TransportError",
]
