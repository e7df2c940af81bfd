"""
Ledger Event Models

Every mutation of the ledger emits one event to the structured log.
This provides:
1. Traceability when a stage's paid value and the payment log disagree
2. Debugging information when stored data falls back to seed

DESIGN DECISION: Events go to the local log only. The payment log is the
only history the ledger persists.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class LedgerEventType(str, Enum):
    """Types of events the ledger emits."""
    # Lifecycle
    LEDGER_OPENED = "ledger_opened"
    LEDGER_CLOSED = "ledger_closed"

    # Stages
    STAGE_ADDED = "stage_added"
    STAGE_UPDATED = "stage_updated"
    STAGE_DELETED = "stage_deleted"

    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"

    # Clients
    CLIENT_ADDED = "client_added"
    CLIENT_UPDATED = "client_updated"
    CLIENT_DELETED = "client_deleted"

    # Bulk changes
    STAGES_REORDERED = "stages_reordered"
    COLLECTION_RESET = "collection_reset"
    PAYMENTS_CLEARED = "payments_cleared"

    # Payments
    PAYMENT_RECORDED = "payment_recorded"
    PAYMENT_SYNTHESIZED = "payment_synthesized"
    PAYMENT_UPDATED = "payment_updated"
    PAYMENT_DELETED = "payment_deleted"
    LINKED_ITEM_MISSING = "linked_item_missing"

    # Persistence
    COLLECTION_LOADED = "collection_loaded"
    COLLECTION_SEEDED = "collection_seeded"
    SERIALIZATION_FAILED = "serialization_failed"
    SAVE_FAILED = "save_failed"
    SNAPSHOT_IMPORTED = "snapshot_imported"


class LedgerEventSeverity(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LedgerEvent(BaseModel):
    """A single ledger event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: LedgerEventType
    severity: LedgerEventSeverity = LedgerEventSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (stage, expense, payment, client, collection)"
    )
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class LedgerEventBuilder:
    """
    Helper class to build ledger events with common patterns.

    Usage:
        event = LedgerEventBuilder.payment_synthesized(payment_id=..., ...)
    """

    @staticmethod
    def ledger_opened(
        stages: int, expenses: int, payments: int, clients: int = 0
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_OPENED,
            entity_type="ledger",
            description="Ledger opened",
            details={
                "stages": stages,
                "expenses": expenses,
                "payments": payments,
                "clients": clients,
            },
        )

    @staticmethod
    def ledger_closed() -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_CLOSED,
            entity_type="ledger",
            description="Ledger closed",
        )

    @staticmethod
    def entity_changed(
        event_type: LedgerEventType,
        entity_type: str,
        entity_id: str,
        name: str,
        details: Optional[dict] = None,
    ) -> LedgerEvent:
        """Added, updated or deleted a stage, expense, payment or client."""
        return LedgerEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} '{name}' {event_type.value.split('_')[-1]}",
            details=details or {},
        )

    @staticmethod
    def payment_synthesized(
        payment_id: str,
        item_id: str,
        item_name: str,
        amount: int,
        payment_type: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.PAYMENT_SYNTHESIZED,
            entity_type="payment",
            entity_id=payment_id,
            description=f"Payment of {amount} logged for '{item_name}'",
            details={"item_id": item_id, "amount": amount, "type": payment_type},
        )

    @staticmethod
    def linked_item_missing(payment_id: str, item_id: str, payment_type: str) -> LedgerEvent:
        """The payment points at a stage or expense that no longer exists."""
        return LedgerEvent(
            event_type=LedgerEventType.LINKED_ITEM_MISSING,
            entity_type="payment",
            entity_id=payment_id,
            description="Linked item no longer exists; only the payment was changed",
            details={"item_id": item_id, "type": payment_type},
        )

    @staticmethod
    def collection_loaded(key: str, count: int, seeded: bool) -> LedgerEvent:
        return LedgerEvent(
            event_type=(
                LedgerEventType.COLLECTION_SEEDED if seeded
                else LedgerEventType.COLLECTION_LOADED
            ),
            entity_type="collection",
            entity_id=key,
            description=(
                f"Collection '{key}' seeded with {count} records" if seeded
                else f"Collection '{key}' loaded with {count} records"
            ),
            details={"count": count},
        )

    @staticmethod
    def serialization_failed(key: str, error_message: str) -> LedgerEvent:
        """Stored data could not be parsed; the seed is used instead."""
        return LedgerEvent(
            event_type=LedgerEventType.SERIALIZATION_FAILED,
            severity=LedgerEventSeverity.WARNING,
            entity_type="collection",
            entity_id=key,
            description=f"Stored '{key}' is unreadable, falling back to seed data",
            error_message=error_message,
        )

    @staticmethod
    def save_failed(key: str, error_message: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SAVE_FAILED,
            severity=LedgerEventSeverity.ERROR,
            entity_type="collection",
            entity_id=key,
            description=f"Could not save '{key}'",
            error_message=error_message,
        )

    @staticmethod
    def snapshot_imported(
        stages: int, expenses: int, payments: int, clients: int = 0
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SNAPSHOT_IMPORTED,
            entity_type="ledger",
            description="Snapshot imported, all collections replaced",
            details={
                "stages": stages,
                "expenses": expenses,
                "payments": payments,
                "clients": clients,
            },
        )

    @staticmethod
    def stages_reordered(start_index: int, end_index: int, stage_id: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.STAGES_REORDERED,
            entity_type="stage",
            entity_id=stage_id,
            description=f"Stage moved from position {start_index} to {end_index}",
            details={"start_index": start_index, "end_index": end_index},
        )

    @staticmethod
    def collection_reset(key: str, count: int) -> LedgerEvent:
        """A collection was replaced by its seed data."""
        return LedgerEvent(
            event_type=LedgerEventType.COLLECTION_RESET,
            severity=LedgerEventSeverity.WARNING,
            entity_type="collection",
            entity_id=key,
            description=f"Collection '{key}' reset to {count} seed records",
            details={"count": count},
        )

    @staticmethod
    def payments_cleared(count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.PAYMENTS_CLEARED,
            severity=LedgerEventSeverity.WARNING,
            entity_type="payment",
            description=f"Payment log cleared, {count} entries removed",
            details={"count": count},
        )
