"""
Enumerations shared by the ledger models and the money utilities.

Kept apart from the models so the pure calculation functions can
return typed statuses without importing the pydantic models.
"""

from enum import Enum


class StageStatus(str, Enum):
    """
    Three-state status of a construction stage.

    Always derived from (paid, amount); never stored as a source of truth.
    """
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class ExpenseStatus(str, Enum):
    """Binary status of an expense, derived from (paid, amount)."""
    PENDING = "pending"
    PAID = "paid"


class PaymentType(str, Enum):
    """What a payment was applied against."""
    CONSTRUCTION = "construction"  # linked to a Stage
    EXPENSE = "expense"            # linked to an Expense
    OTHER = "other"                # manual entry, no linked item


class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    DESIGN DECISION: Using explicit categories rather than free text ensures
    consistent grouping in the category breakdown.
    """
    BOREWELL = "borewell"
    SUMP = "sump"
    SEPTIC_TANK = "septic-tank"
    ELECTRICAL = "electrical"
    PLUMBING = "plumbing"
    MATERIAL = "material"
    LABOR = "labor"
    PERMIT = "permit"
    TRANSPORT = "transport"
    OTHER = "other"


class PaymentMethod(str, Enum):
    """How money changed hands. Optional on every payment."""
    CASH = "cash"
    BANK_TRANSFER = "bank-transfer"
    CHEQUE = "cheque"
    UPI = "upi"
    ONLINE = "online"


class ClientStatus(str, Enum):
    """Where a client's project stands. Set by the user, not derived."""
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"


class ProjectType(str, Enum):
    RESIDENTIAL_HOUSE = "residential-house"
    COMMERCIAL_BUILDING = "commercial-building"
    VILLA_CONSTRUCTION = "villa-construction"
    APARTMENT_COMPLEX = "apartment-complex"
    RENOVATION = "renovation"
    EXTENSION = "extension"
    INDUSTRIAL_BUILDING = "industrial-building"
    OTHER = "other"
