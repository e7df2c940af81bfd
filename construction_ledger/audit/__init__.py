"""Event logging package."""

from construction_ledger.audit.logger import LedgerEventLogger, configure_log_level

__all__ = ["LedgerEventLogger", "configure_log_level"]
