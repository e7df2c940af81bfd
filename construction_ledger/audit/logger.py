"""
Ledger Event Logger

DESIGN DECISION: Every mutation of the ledger is logged as a structured
event. The logger:
- Writes to the local structured log only
- Never raises (a logging failure must not undo a ledger mutation)
- Maps event severity onto log levels
"""

import logging

import structlog

from construction_ledger.models.events import LedgerEvent, LedgerEventSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_log_level(level: str) -> None:
    """Route the ledger's stdlib loggers at ``level`` to stderr."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("construction_ledger").setLevel(level)


class LedgerEventLogger:
    """Central event logging service for the ledger."""

    def __init__(self, name: str = "construction_ledger"):
        self._logger = structlog.get_logger(name)

    def log(self, event: LedgerEvent) -> bool:
        """
        Log a ledger event.

        Returns False if the log call itself failed.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity == LedgerEventSeverity.ERROR:
                self._logger.error("ledger_event", **log_dict)
            elif event.severity == LedgerEventSeverity.WARNING:
                self._logger.warning("ledger_event", **log_dict)
            elif event.severity == LedgerEventSeverity.DEBUG:
                self._logger.debug("ledger_event", **log_dict)
            else:
                self._logger.info("ledger_event", **log_dict)
        except Exception:
            return False

        return True
