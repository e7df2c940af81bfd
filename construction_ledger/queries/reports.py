"""
Ledger Reports

DESIGN DECISION: Reports are read-only and DETERMINISTIC.
They read the store's collections and never change them. Everything the
dashboards show (counts, breakdowns, upcoming payments, period reports)
is computed here from the same stage, expense and payment records the
store keeps consistent.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

from pydantic import BaseModel, Field

from construction_ledger import calculations
from construction_ledger.ledger import InvalidArgumentError, LedgerStore
from construction_ledger.models.enums import (
    ClientStatus,
    ExpenseStatus,
    PaymentType,
    ProjectType,
    StageStatus,
)
from construction_ledger.models.ledger import Client, Payment, utcnow


# =============================================================================
# REPORT MODELS
# =============================================================================

class UpcomingPayment(BaseModel):
    stage_id: str
    stage: str
    amount: int = Field(ge=0, description="Outstanding balance on the stage")
    status: StageStatus


class StageStats(BaseModel):
    total_stages: int
    completed_stages: int
    in_progress_stages: int
    pending_stages: int
    total_cost: int
    total_paid: int
    total_balance: int
    overall_progress: int
    current_stage: str
    completion_percentage: int
    financial_progress: int


class CategoryTotals(BaseModel):
    total: int = 0
    paid: int = 0
    balance: int = 0
    count: int = 0


class ExpenseStats(BaseModel):
    total_expenses: int
    paid_expenses: int
    pending_expenses: int
    total_amount: int
    total_paid: int
    total_balance: int
    category_breakdown: dict[str, CategoryTotals]
    monthly_expenses: dict[str, CategoryTotals]
    completion_percentage: int
    financial_progress: int


class MonthlyPayments(BaseModel):
    construction: int = 0
    expense: int = 0
    other: int = 0
    total: int = 0


class PaymentStats(BaseModel):
    total_construction_payments: int
    total_expense_payments: int
    total_other_payments: int
    total_payments: int
    total_payment_count: int
    average_payment: int
    monthly_payments: dict[str, MonthlyPayments]


class PaymentReport(BaseModel):
    start_date: date
    end_date: date
    description: str
    total_amount: int
    construction_amount: int
    expense_amount: int
    other_amount: int
    payment_count: int
    payments: list[Payment]


class LedgerSummary(BaseModel):
    """Project-wide figures for the dashboard header."""

    project_name: str
    total_construction_cost: int
    paid_construction_amount: int
    balance_construction_amount: int
    total_expenses_amount: int
    paid_expenses_amount: int
    balance_expenses_amount: int
    total_project_cost: int
    total_paid: int
    total_balance: int
    overall_progress: int
    financial_progress: int
    financial_risk: int = Field(ge=0, le=5)
    construction_share: int = Field(description="Construction budget as a percentage of the total")
    additional_share: int = Field(description="Expenses as a percentage of the total")


class ClientStats(BaseModel):
    total_clients: int
    active_clients: int
    completed_clients: int
    planning_clients: int
    on_hold_clients: int
    total_budget: int
    project_types: dict[str, int]
    recent_clients: list[Client] = Field(description="Joined in the last 90 days, newest first")
    active_percentage: int
    completion_rate: int


class ClientReportEntry(BaseModel):
    id: str
    name: str
    status: ClientStatus
    project_type: ProjectType
    budget: int
    join_date: date
    phone: str
    email: str


class ClientReport(BaseModel):
    generated_at: datetime = Field(default_factory=utcnow)
    summary: ClientStats
    clients: list[ClientReportEntry]


# =============================================================================
# REPORTER
# =============================================================================

class LedgerReporter:
    """
    Builds reports from a ledger store.

    GUARANTEES:
    - Only reads; never mutates the store
    - Totals use the items' paid values, except payment reports, which
      sum the payment log
    """

    RECENT_CLIENT_DAYS = 90

    def __init__(self, store: LedgerStore, today: Optional[Callable[[], date]] = None):
        self._store = store
        self._today = today or date.today

    def summary(self) -> LedgerSummary:
        store = self._store
        construction_share, additional_share = store.cost_distribution
        return LedgerSummary(
            project_name=store.project.name,
            total_construction_cost=store.total_construction_cost,
            paid_construction_amount=store.paid_construction_amount,
            balance_construction_amount=store.balance_construction_amount,
            total_expenses_amount=store.total_expenses_amount,
            paid_expenses_amount=store.paid_expenses_amount,
            balance_expenses_amount=store.balance_expenses_amount,
            total_project_cost=store.total_project_cost,
            total_paid=store.total_paid,
            total_balance=store.total_balance,
            overall_progress=store.overall_progress,
            financial_progress=store.financial_progress,
            financial_risk=store.financial_risk,
            construction_share=construction_share,
            additional_share=additional_share,
        )

    def stage_stats(self) -> StageStats:
        stages = self._store.stages
        by_status = defaultdict(int)
        for stage in stages:
            by_status[stage.status] += 1

        total_cost = sum(stage.amount for stage in stages)
        total_paid = calculations.paid_construction_amount(stages)

        # First in-progress stage, else the first completed one.
        current = next(
            (s for s in stages if s.status == StageStatus.IN_PROGRESS),
            next((s for s in stages if s.status == StageStatus.COMPLETED), None),
        )

        return StageStats(
            total_stages=len(stages),
            completed_stages=by_status[StageStatus.COMPLETED],
            in_progress_stages=by_status[StageStatus.IN_PROGRESS],
            pending_stages=by_status[StageStatus.PENDING],
            total_cost=total_cost,
            total_paid=total_paid,
            total_balance=total_cost - total_paid,
            overall_progress=calculations.overall_progress(stages),
            current_stage=current.name if current else "Not Started",
            completion_percentage=calculations.compute_percentage(
                by_status[StageStatus.COMPLETED], len(stages)
            ),
            financial_progress=calculations.compute_percentage(total_paid, total_cost),
        )

    def upcoming_payments(self, count: int = 3) -> list[UpcomingPayment]:
        """The next ``count`` unfinished stages, in schedule order, with their balances."""
        unfinished = [
            stage for stage in self._store.stages
            if stage.status != StageStatus.COMPLETED
        ]
        return [
            UpcomingPayment(
                stage_id=stage.id,
                stage=stage.name,
                amount=stage.balance,
                status=stage.status,
            )
            for stage in unfinished[:count]
        ]

    def expense_stats(self) -> ExpenseStats:
        expenses = self._store.expenses
        categories: dict[str, CategoryTotals] = defaultdict(CategoryTotals)
        months: dict[str, CategoryTotals] = defaultdict(CategoryTotals)

        for expense in expenses:
            buckets = [categories[expense.category.value]]
            if expense.date:
                buckets.append(months[expense.date.strftime("%Y-%m")])
            for bucket in buckets:
                bucket.total += expense.amount
                bucket.paid += expense.paid
                bucket.balance += expense.amount - expense.paid
                bucket.count += 1

        paid_count = sum(1 for e in expenses if e.status == ExpenseStatus.PAID)
        total_amount = calculations.total_expenses_amount(expenses)
        total_paid = calculations.paid_expenses_amount(expenses)

        return ExpenseStats(
            total_expenses=len(expenses),
            paid_expenses=paid_count,
            pending_expenses=len(expenses) - paid_count,
            total_amount=total_amount,
            total_paid=total_paid,
            total_balance=total_amount - total_paid,
            category_breakdown=dict(categories),
            monthly_expenses=dict(sorted(months.items())),
            completion_percentage=calculations.compute_percentage(paid_count, len(expenses)),
            financial_progress=calculations.compute_percentage(total_paid, total_amount),
        )

    def payment_stats(self) -> PaymentStats:
        payments = self._store.payments
        totals = {payment_type: 0 for payment_type in PaymentType}
        months: dict[str, MonthlyPayments] = defaultdict(MonthlyPayments)

        for payment in payments:
            totals[payment.type] += payment.amount
            month = months[payment.date.strftime("%Y-%m")]
            setattr(month, payment.type.value, getattr(month, payment.type.value) + payment.amount)
            month.total += payment.amount

        total = sum(totals.values())
        return PaymentStats(
            total_construction_payments=totals[PaymentType.CONSTRUCTION],
            total_expense_payments=totals[PaymentType.EXPENSE],
            total_other_payments=totals[PaymentType.OTHER],
            total_payments=total,
            total_payment_count=len(payments),
            average_payment=(
                calculations.round_half_up(Decimal(total) / Decimal(len(payments))) if payments else 0
            ),
            monthly_payments=dict(sorted(months.items())),
        )

    def payment_report(self, start_date: date, end_date: date) -> PaymentReport:
        """
        Payments dated within [start_date, end_date], newest first.

        Raises:
            InvalidArgumentError: if the range is reversed
        """
        if end_date < start_date:
            raise InvalidArgumentError("Report end date is before start date")

        payments = [
            payment for payment in self._store.get_all_payments()
            if start_date <= payment.date <= end_date
        ]

        def total_of(payment_type: Optional[PaymentType]) -> int:
            return sum(
                p.amount for p in payments
                if payment_type is None or p.type == payment_type
            )

        return PaymentReport(
            start_date=start_date,
            end_date=end_date,
            description=f"Payments {self._date_range_str(start_date, end_date)}",
            total_amount=total_of(None),
            construction_amount=total_of(PaymentType.CONSTRUCTION),
            expense_amount=total_of(PaymentType.EXPENSE),
            other_amount=total_of(PaymentType.OTHER),
            payment_count=len(payments),
            payments=payments,
        )

    def client_stats(self) -> ClientStats:
        clients = self._store.clients
        by_status = defaultdict(int)
        project_types: dict[str, int] = defaultdict(int)
        for client in clients:
            by_status[client.status] += 1
            project_types[client.project_type.value] += 1

        cutoff = self._today() - timedelta(days=self.RECENT_CLIENT_DAYS)
        recent = sorted(
            (client for client in clients if client.join_date > cutoff),
            key=lambda client: client.join_date,
            reverse=True,
        )

        return ClientStats(
            total_clients=len(clients),
            active_clients=by_status[ClientStatus.ACTIVE],
            completed_clients=by_status[ClientStatus.COMPLETED],
            planning_clients=by_status[ClientStatus.PLANNING],
            on_hold_clients=by_status[ClientStatus.ON_HOLD],
            total_budget=sum(client.budget for client in clients),
            project_types=dict(project_types),
            recent_clients=recent,
            active_percentage=calculations.compute_percentage(
                by_status[ClientStatus.ACTIVE], len(clients)
            ),
            completion_rate=calculations.compute_percentage(
                by_status[ClientStatus.COMPLETED], len(clients)
            ),
        )

    def client_report(self) -> ClientReport:
        """Client statistics plus one contact line per client, in list order."""
        return ClientReport(
            summary=self.client_stats(),
            clients=[
                ClientReportEntry(
                    id=client.id,
                    name=client.name,
                    status=client.status,
                    project_type=client.project_type,
                    budget=client.budget,
                    join_date=client.join_date,
                    phone=client.phone,
                    email=client.email,
                )
                for client in self._store.clients
            ],
        )

    def _date_range_str(self, date_from: date, date_to: date) -> str:
        """Format date range for description."""
        if date_from == date_to:
            return f"on {date_from.strftime('%d %b %Y')}"
        elif date_from.month == date_to.month and date_from.year == date_to.year:
            return f"in {date_from.strftime('%B %Y')}"
        elif date_from.year == date_to.year:
            return f"from {date_from.strftime('%b')} to {date_to.strftime('%b %Y')}"
        return f"from {date_from.strftime('%b %Y')} to {date_to.strftime('%b %Y')}"
