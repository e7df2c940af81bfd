"""
Money and status calculations.

Every function here is pure: no I/O, no mutation, no error path for
well-typed input. Amounts are whole rupees held in ``int``.

Callers are responsible for rejecting negative amounts and percentages
before calling; the ledger store does that at its boundary.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Iterable

from construction_ledger.models.enums import ExpenseStatus, StageStatus

if TYPE_CHECKING:
    from construction_ledger.models.ledger import Expense, Project, Stage


# =============================================================================
# PER-ITEM CALCULATIONS
# =============================================================================

def compute_status_tri_state(paid: int, amount: int) -> StageStatus:
    """
    Derive a stage status.

    pending when nothing is paid, completed once paid reaches the amount
    (overpayment included), in-progress in between.
    """
    if paid == 0:
        return StageStatus.PENDING
    if paid >= amount:
        return StageStatus.COMPLETED
    return StageStatus.IN_PROGRESS


def compute_status_binary(paid: int, amount: int) -> ExpenseStatus:
    """Derive an expense status: paid once paid reaches the amount."""
    if paid >= amount:
        return ExpenseStatus.PAID
    return ExpenseStatus.PENDING


def compute_balance(amount: int, paid: int) -> int:
    """Outstanding amount, floored at zero."""
    return max(0, amount - paid)


def round_half_up(value: Decimal) -> int:
    """Round to the nearest rupee, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_stage_amount(total_cost: int, percentage: int) -> int:
    """
    Share of the total cost for a stage percentage.

    Exact integer arithmetic with round-half-up, so 15% of 1,031,250
    is 154,688 on every platform.
    """
    return round_half_up(Decimal(total_cost) * Decimal(percentage) / Decimal(100))


def compute_percentage(part: int, total: int) -> int:
    """Whole-number percentage of ``part`` in ``total``; 0 when total is 0."""
    if total <= 0:
        return 0
    return round_half_up(Decimal(part) * Decimal(100) / Decimal(total))


# =============================================================================
# COLLECTION AGGREGATES
# =============================================================================

def paid_construction_amount(stages: Iterable["Stage"]) -> int:
    return sum(stage.paid for stage in stages)


def balance_construction_amount(project: "Project", stages: Iterable["Stage"]) -> int:
    """Budget left on the fixed construction cost. Negative when overpaid."""
    return project.total_cost - paid_construction_amount(stages)


def overall_progress(stages: Iterable["Stage"]) -> int:
    """Sum of percentages over completed stages."""
    return sum(
        stage.percentage
        for stage in stages
        if stage.status == StageStatus.COMPLETED
    )


def total_expenses_amount(expenses: Iterable["Expense"]) -> int:
    return sum(expense.amount for expense in expenses)


def paid_expenses_amount(expenses: Iterable["Expense"]) -> int:
    return sum(expense.paid for expense in expenses)


def balance_expenses_amount(expenses: Iterable["Expense"]) -> int:
    expenses = list(expenses)
    return total_expenses_amount(expenses) - paid_expenses_amount(expenses)


def total_project_cost(project: "Project", expenses: Iterable["Expense"]) -> int:
    return project.total_cost + total_expenses_amount(expenses)


def total_paid(stages: Iterable["Stage"], expenses: Iterable["Expense"]) -> int:
    """
    Aggregate paid across stages and expenses.

    Sums the entities' ``paid`` fields, not the payment log; the two can
    diverge when a stage's paid value is edited downwards.
    """
    return paid_construction_amount(stages) + paid_expenses_amount(expenses)


def financial_progress(
    project: "Project",
    stages: Iterable["Stage"],
    expenses: Iterable["Expense"],
) -> int:
    """Total paid as a whole-number percentage of the total project cost."""
    expenses = list(expenses)
    return compute_percentage(
        total_paid(stages, expenses),
        total_project_cost(project, expenses),
    )


def financial_risk(
    project: "Project",
    stages: Iterable["Stage"],
    expenses: Iterable["Expense"],
) -> int:
    """
    Risk score from 0 (settled) to 5 (little paid, most still owed).

    Up to 3 points for a low paid percentage and up to 3 for a high share
    of the total project cost still outstanding, capped at 5.
    """
    stages, expenses = list(stages), list(expenses)
    grand_total = total_project_cost(project, expenses)
    outstanding = grand_total - total_paid(stages, expenses)
    paid_percentage = financial_progress(project, stages, expenses)

    score = 0
    if paid_percentage < 20:
        score += 3
    elif paid_percentage < 50:
        score += 2
    elif paid_percentage < 80:
        score += 1

    if grand_total > 0:
        # outstanding / grand_total compared in tenths, without floats
        if outstanding * 10 > grand_total * 7:
            score += 3
        elif outstanding * 10 > grand_total * 5:
            score += 2
        elif outstanding * 10 > grand_total * 3:
            score += 1

    return min(score, 5)


def cost_distribution(project: "Project", expenses: Iterable["Expense"]) -> tuple[int, int]:
    """
    Whole-number shares of the construction budget and of the expenses in
    the total project cost, as (construction, additional).
    """
    expenses = list(expenses)
    grand_total = total_project_cost(project, expenses)
    return (
        compute_percentage(project.total_cost, grand_total),
        compute_percentage(total_expenses_amount(expenses), grand_total),
    )
