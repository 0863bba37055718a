"""Prometheus metrics definitions for the mailer logger."""

from prometheus_client import Counter

mailer_events_logged_total = Counter(
    "mailer_events_logged_total",
    "Total number of mailer events forwarded to the logger",
    ["event"],
)

mailer_events_suppressed_total = Counter(
    "mailer_events_suppressed_total",
    "Total number of mailer events dropped by a disabled level",
    ["event"],
)

mailer_transport_exceptions_total = Counter(
    "mailer_transport_exceptions_total",
    "Total number of transport exceptions logged and re-raised",
)
