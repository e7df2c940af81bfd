"""
Form Validation

Checks user-entered stage, expense and payment data before the
presentation layer calls the ledger.

DESIGN DECISION: These checks are advisory and live outside the store.
The store accepts overpayment and past or future dates; a form is where
"payment cannot exceed the balance" belongs. Keeping the two apart means
the store's rules stay the same whichever screen calls it.

IMPORTANT: Validation NEVER silently fixes input.
It reports issues for the user to correct.
"""

from datetime import date, timedelta
from typing import Callable, Optional, Union

from construction_ledger.calculations import compute_balance
from construction_ledger.config import get_settings
from construction_ledger.models.enums import ExpenseCategory
from construction_ledger.models.ledger import (
    Expense,
    Stage,
    ValidationIssue,
    ValidationResult,
)


class LedgerValidator:
    """Validates form input for stages, expenses and payments."""

    def __init__(
        self,
        today: Optional[Callable[[], date]] = None,
        future_date_tolerance_days: Optional[int] = None,
        min_stage_name_length: Optional[int] = None,
    ):
        """
        Args:
            today: Current-date provider. Defaults to date.today.
            future_date_tolerance_days: Overrides the configured tolerance.
            min_stage_name_length: Overrides the configured minimum.
        """
        self._today = today or date.today
        if future_date_tolerance_days is None or min_stage_name_length is None:
            settings = get_settings().app
            if future_date_tolerance_days is None:
                future_date_tolerance_days = settings.future_date_tolerance_days
            if min_stage_name_length is None:
                min_stage_name_length = settings.min_stage_name_length
        self._tolerance = timedelta(days=future_date_tolerance_days)
        self._min_name = min_stage_name_length

    def _check_future_date(
        self,
        field: str,
        value: Optional[date],
        label: str,
    ) -> list[ValidationIssue]:
        if value and value > self._today() + self._tolerance:
            return [ValidationIssue(
                field=field,
                issue_type="future_date",
                message=f"{label} cannot be in the future",
            )]
        return []

    def validate_stage(
        self,
        name: Optional[str],
        percentage: Optional[int],
        amount: Optional[int] = None,
        start_date: Optional[date] = None,
    ) -> ValidationResult:
        """
        Check a stage form.

        ``amount`` is only checked when the form lets the user override it.
        """
        issues = []

        if not name or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Stage name is required",
            ))
        elif len(name.strip()) < self._min_name:
            issues.append(ValidationIssue(
                field="name",
                issue_type="too_short",
                message=f"Stage name must be at least {self._min_name} characters",
            ))

        if percentage is None or not 1 <= percentage <= 100:
            issues.append(ValidationIssue(
                field="percentage",
                issue_type="out_of_range",
                message="Percentage must be between 1 and 100",
            ))

        if amount is not None and amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message="Amount must be greater than 0",
            ))

        issues.extend(self._check_future_date("date", start_date, "Start date"))

        return ValidationResult(issues=issues)

    def validate_expense(
        self,
        name: Optional[str],
        amount: Optional[int],
        expense_date: Optional[date],
        category: Optional[str],
    ) -> ValidationResult:
        """Check an expense form."""
        issues = []

        if not name or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Expense name is required",
            ))

        if amount is None or amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message="Amount must be greater than 0",
            ))

        if expense_date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
            ))
        else:
            issues.extend(self._check_future_date("date", expense_date, "Date"))

        if not category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
            ))
        elif category not in {c.value for c in ExpenseCategory}:
            issues.append(ValidationIssue(
                field="category",
                issue_type="invalid_value",
                message="Invalid category selected",
            ))

        return ValidationResult(issues=issues)

    def validate_payment(
        self,
        amount: Optional[int],
        payment_date: Optional[date],
        description: Optional[str],
        item: Optional[Union[Stage, Expense]] = None,
    ) -> ValidationResult:
        """
        Check a payment form.

        When the payment is against ``item``, the amount may not exceed the
        item's outstanding balance.
        """
        issues = []

        if amount is None or amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message="Payment amount must be greater than 0",
            ))
        elif item is not None:
            balance = compute_balance(item.amount, item.paid)
            if amount > balance:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="exceeds_balance",
                    message=f"Payment amount cannot exceed balance of {balance}",
                ))

        if payment_date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Payment date is required",
            ))
        else:
            issues.extend(self._check_future_date("date", payment_date, "Payment date"))

        if not description or not description.strip():
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Payment description is required",
            ))

        return ValidationResult(issues=issues)
