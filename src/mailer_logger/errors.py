"""Error classes raised by the mailer logger."""


class MailerLoggerError(Exception):
    """Base class for mailer logger errors."""

    pass


class TransportError(MailerLoggerError):
    """Transport failure re-raised after a transport exception was logged."""

    def __init__(self, message: str) -> None:
        """Initialize transport error.

        Args:
            message: Message text of the original transport exception
        """
        super().__init__(message)
        self.message = message
