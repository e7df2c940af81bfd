"""Form validation package."""

from construction_ledger.validation.validator import LedgerValidator

__all__ = ["LedgerValidator"]
