"""
Data Models Package

This package contains all Pydantic models used by the construction ledger.
All data flowing through the ledger must conform to these schemas.
"""

from construction_ledger.models.enums import (
    ClientStatus,
    ExpenseCategory,
    ExpenseStatus,
    PaymentMethod,
    PaymentType,
    ProjectType,
    StageStatus,
)
from construction_ledger.models.ledger import (
    Client,
    ClientUpdate,
    Expense,
    ExpenseUpdate,
    LedgerSnapshot,
    Payment,
    PaymentUpdate,
    Project,
    SnapshotMetadata,
    Stage,
    StageUpdate,
    ValidationIssue,
    ValidationResult,
)
from construction_ledger.models.events import (
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventSeverity,
    LedgerEventType,
)

__all__ = [
    # Enums
    "ClientStatus",
    "ExpenseCategory",
    "ExpenseStatus",
    "PaymentMethod",
    "PaymentType",
    "ProjectType",
    "StageStatus",
    # Ledger models
    "Client",
    "ClientUpdate",
    "Expense",
    "ExpenseUpdate",
    "LedgerSnapshot",
    "Payment",
    "PaymentUpdate",
    "Project",
    "SnapshotMetadata",
    "Stage",
    "StageUpdate",
    "ValidationIssue",
    "ValidationResult",
    # Event models
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventSeverity",
    "LedgerEventType",
]
