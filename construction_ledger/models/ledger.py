"""
Core Data Models for the Construction Ledger

These models define the schemas for the project, its stages, its expenses
and the payment log. They are designed to:
1. Enforce the field-level invariants at runtime (non-negative paid, 1..100%)
2. Derive status from (paid, amount) so it can never drift
3. Round-trip through JSON for the persistence adapter

DESIGN DECISION: Status is a computed field. It is written out when a
collection is serialized (the presentation layer reads it), and ignored
when a collection is loaded, so stored data can never override it.
"""

import datetime as dt
from typing import ClassVar, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)

from construction_ledger import calculations
from construction_ledger.models.enums import (
    ClientStatus,
    ExpenseCategory,
    ExpenseStatus,
    PaymentMethod,
    PaymentType,
    ProjectType,
    StageStatus,
)


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


# =============================================================================
# PROJECT (read-only reference data)
# =============================================================================

class Project(BaseModel):
    """
    The single tracked project.

    Created once at startup from settings; the ledger never mutates it.
    ``total_cost`` defaults to rate * area when not given explicitly.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(default="PGK Construction", min_length=1)
    engineer: Optional[str] = None
    per_sqft_rate: int = Field(..., gt=0, description="INR per square foot")
    total_sqft: int = Field(..., gt=0, description="Built-up area")
    total_cost: int = Field(
        default=0,
        ge=0,
        description="Fixed construction budget in INR"
    )

    @model_validator(mode='before')
    @classmethod
    def default_total_cost(cls, data):
        if isinstance(data, dict) and not data.get("total_cost"):
            rate = data.get("per_sqft_rate")
            area = data.get("total_sqft")
            if isinstance(rate, int) and isinstance(area, int):
                data = {**data, "total_cost": rate * area}
        return data


# =============================================================================
# STAGES AND EXPENSES
# =============================================================================

class Stage(BaseModel):
    """
    One construction phase, costed as a percentage of the project total.

    ``paid`` may exceed ``amount``; overpayment is a valid state and
    reads as completed.
    """
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    percentage: int = Field(..., ge=1, le=100)
    amount: int = Field(..., ge=0, description="Stage cost in INR")
    paid: int = Field(default=0, ge=0, description="Amount paid so far in INR")
    date: Optional[dt.date] = None
    notes: str = Field(default="", max_length=1000)
    created_at: dt.datetime = Field(default_factory=utcnow)
    updated_at: dt.datetime = Field(default_factory=utcnow)

    @computed_field
    @property
    def status(self) -> StageStatus:
        return calculations.compute_status_tri_state(self.paid, self.amount)

    @property
    def balance(self) -> int:
        return calculations.compute_balance(self.amount, self.paid)


class Expense(BaseModel):
    """A cost outside the staged budget, tracked on its own amount."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    amount: int = Field(..., gt=0, description="Expense cost in INR")
    paid: int = Field(default=0, ge=0)
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: Optional[dt.date] = None
    notes: str = Field(default="", max_length=1000)
    vendor: Optional[str] = Field(default=None, max_length=200)
    created_at: dt.datetime = Field(default_factory=utcnow)
    updated_at: dt.datetime = Field(default_factory=utcnow)

    @computed_field
    @property
    def status(self) -> ExpenseStatus:
        return calculations.compute_status_binary(self.paid, self.amount)

    @property
    def balance(self) -> int:
        return calculations.compute_balance(self.amount, self.paid)


# =============================================================================
# PAYMENT LOG
# =============================================================================

class Payment(BaseModel):
    """
    One entry in the payment log.

    ``item_id`` is a weak reference. It stays valid, and keeps its value,
    after the stage or expense it points to is deleted; lookups treat a
    dangling id as an expected outcome.

    ``total_paid`` and ``balance`` are snapshots taken when the payment was
    recorded. They are never recomputed.
    """
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    id: str = Field(..., min_length=1)
    item_id: Optional[str] = Field(
        default=None,
        description="Stage or expense this payment was applied to"
    )
    item_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Name of the item at payment time"
    )
    amount: int = Field(..., gt=0, description="Amount paid in INR")
    type: PaymentType
    date: dt.date
    notes: str = Field(default="", max_length=1000)
    method: Optional[PaymentMethod] = None
    total_paid: Optional[int] = Field(default=None, ge=0)
    balance: Optional[int] = Field(default=None, ge=0)
    created_at: dt.datetime = Field(default_factory=utcnow)
    updated_at: Optional[dt.datetime] = None

    @model_validator(mode='after')
    def validate_link(self) -> 'Payment':
        """Manual entries are never linked to an item."""
        if self.type == PaymentType.OTHER and self.item_id is not None:
            raise ValueError("Payments of type 'other' cannot reference an item")
        return self

    @property
    def is_linked(self) -> bool:
        return self.item_id is not None


# =============================================================================
# CLIENTS
# =============================================================================

class Client(BaseModel):
    """
    A customer of the construction firm.

    Clients are contact records. Their status is set by the user and is
    not derived from any payment figures.
    """
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(default="", max_length=50)
    email: str = Field(default="", max_length=200)
    address: str = Field(default="", max_length=500)
    project_type: ProjectType = ProjectType.OTHER
    budget: int = Field(default=0, ge=0, description="Client budget in INR")
    status: ClientStatus = ClientStatus.PLANNING
    join_date: dt.date
    project_start: Optional[dt.date] = None
    project_area: Optional[int] = Field(default=None, gt=0, description="Square feet")
    notes: str = Field(default="", max_length=1000)
    created_at: dt.datetime = Field(default_factory=utcnow)
    updated_at: dt.datetime = Field(default_factory=utcnow)


# =============================================================================
# UPDATE COMMANDS
# =============================================================================

class _UpdateCommand(BaseModel):
    """
    Base for typed partial updates.

    Only fields the caller actually passed are applied. Unknown fields are
    rejected, and passing None for a required field is an error rather
    than a way to clear it.
    """
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    required_fields: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode='after')
    def reject_null_required(self):
        for name in self.required_fields:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be set to null")
        return self

    def changes(self) -> dict:
        """Fields explicitly set on this command."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class StageUpdate(_UpdateCommand):
    """Fields a caller may change on a stage. A change to ``paid`` may log a payment."""

    required_fields: ClassVar[tuple[str, ...]] = ("name", "percentage", "amount", "paid", "notes")

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    percentage: Optional[int] = Field(default=None, ge=1, le=100)
    amount: Optional[int] = Field(default=None, ge=0)
    paid: Optional[int] = Field(default=None, ge=0)
    date: Optional[dt.date] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class ExpenseUpdate(_UpdateCommand):
    """Fields a caller may change on an expense. A change to ``paid`` may log a payment."""

    required_fields: ClassVar[tuple[str, ...]] = ("name", "amount", "paid", "category", "notes")

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    amount: Optional[int] = Field(default=None, gt=0)
    paid: Optional[int] = Field(default=None, ge=0)
    category: Optional[ExpenseCategory] = None
    date: Optional[dt.date] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    vendor: Optional[str] = Field(default=None, max_length=200)


class PaymentUpdate(_UpdateCommand):
    """
    Fields a caller may change on a payment.

    The link (``item_id``, ``type``) and the snapshots are fixed once the
    payment is recorded.
    """

    required_fields: ClassVar[tuple[str, ...]] = ("item_name", "amount", "date", "notes")

    item_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    amount: Optional[int] = Field(default=None, gt=0)
    date: Optional[dt.date] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    method: Optional[PaymentMethod] = None


class ClientUpdate(_UpdateCommand):
    required_fields: ClassVar[tuple[str, ...]] = (
        "name", "phone", "email", "address", "project_type",
        "budget", "status", "join_date", "notes",
    )

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=200)
    address: Optional[str] = Field(default=None, max_length=500)
    project_type: Optional[ProjectType] = None
    budget: Optional[int] = Field(default=None, ge=0)
    status: Optional[ClientStatus] = None
    join_date: Optional[dt.date] = None
    project_start: Optional[dt.date] = None
    project_area: Optional[int] = Field(default=None, gt=0)
    notes: Optional[str] = Field(default=None, max_length=1000)


# =============================================================================
# SNAPSHOT (export / import)
# =============================================================================

class SnapshotMetadata(BaseModel):
    exported_at: dt.datetime = Field(default_factory=utcnow)
    version: str = "1.0"
    total_stages: int = Field(default=0, ge=0)
    total_expenses: int = Field(default=0, ge=0)
    total_payments: int = Field(default=0, ge=0)
    total_clients: int = Field(default=0, ge=0)


class LedgerSnapshot(BaseModel):
    """
    Full export of the ledger collections.

    ``clients`` defaults to empty so exports made before clients were
    tracked still import.
    """

    metadata: SnapshotMetadata = Field(default_factory=SnapshotMetadata)
    stages: list[Stage] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    payments: list[Payment] = Field(default_factory=list)
    clients: list[Client] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_unique_ids(self) -> 'LedgerSnapshot':
        for label, items in (
            ("stage", self.stages),
            ("expense", self.expenses),
            ("payment", self.payments),
            ("client", self.clients),
        ):
            ids = [item.id for item in items]
            if len(ids) != len(set(ids)):
                raise ValueError(f"Duplicate {label} ids in snapshot")
        return self


# =============================================================================
# FORM VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in user-entered data."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'out_of_range', 'future_date')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Outcome of a form check. Warnings never block."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    def errors_by_field(self) -> dict[str, str]:
        """First error message per field, for showing next to form inputs."""
        errors: dict[str, str] = {}
        for issue in self.issues:
            if issue.severity == "error":
                errors.setdefault(issue.field, issue.message)
        return errors
