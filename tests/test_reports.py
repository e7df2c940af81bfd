"""
Tests for the read-only ledger reports.
"""

from datetime import date

import pytest

from construction_ledger.ledger import InvalidArgumentError
from construction_ledger.models.enums import ClientStatus, ExpenseCategory, PaymentType, StageStatus
from construction_ledger.models.ledger import Expense, Payment, Stage
from construction_ledger.queries import LedgerReporter
from construction_ledger.seed import LedgerSeed, default_seed


@pytest.fixture
def seeded_store(make_store, project):
    return make_store(default_seed(project))


@pytest.fixture
def reporter(seeded_store):
    return LedgerReporter(seeded_store)


class TestSummary:
    """Tests for the dashboard summary."""

    def test_seeded_summary(self, reporter):
        """Seed data: Advance and Basement paid on stages, two expenses paid."""
        summary = reporter.summary()
        assert summary.total_construction_cost == 1031250
        assert summary.paid_construction_amount == 206250 + 50000
        assert summary.total_expenses_amount == 90000
        assert summary.paid_expenses_amount == 65000
        assert summary.total_paid == 256250 + 65000
        assert summary.total_balance == 1031250 + 90000 - 321250
        assert summary.overall_progress == 20

    def test_seeded_risk_and_cost_split(self, reporter):
        """29% paid (2 points) with 71% outstanding (3 points)."""
        summary = reporter.summary()
        assert summary.financial_risk == 5
        assert summary.construction_share == 92
        assert summary.additional_share == 8


class TestStageStats:
    """Tests for stage statistics."""

    def test_counts_and_current_stage(self, reporter):
        stats = reporter.stage_stats()
        assert stats.total_stages == 9
        assert stats.completed_stages == 1
        assert stats.in_progress_stages == 1
        assert stats.pending_stages == 7
        assert stats.current_stage == "Basement"
        assert stats.completion_percentage == 11

    def test_not_started(self, make_store):
        store = make_store(LedgerSeed(stages=[
            Stage(id="s1", name="Lintel", percentage=15, amount=1000),
        ]))
        assert LedgerReporter(store).stage_stats().current_stage == "Not Started"

    def test_completed_stage_is_current_when_nothing_in_progress(self, make_store):
        store = make_store(LedgerSeed(stages=[
            Stage(id="s1", name="Advance", percentage=20, amount=1000, paid=1000),
            Stage(id="s2", name="Lintel", percentage=15, amount=1000),
        ]))
        assert LedgerReporter(store).stage_stats().current_stage == "Advance"


class TestUpcomingPayments:
    """Tests for the upcoming payments list."""

    def test_next_three_unfinished_stages(self, reporter):
        upcoming = reporter.upcoming_payments()
        assert [u.stage for u in upcoming] == ["Basement", "Lintel", "Roof Level"]
        assert upcoming[0].amount == 154688 - 50000
        assert upcoming[0].status == StageStatus.IN_PROGRESS


class TestExpenseStats:
    """Tests for expense statistics."""

    def test_breakdowns(self, reporter):
        stats = reporter.expense_stats()
        assert stats.total_expenses == 3
        assert stats.paid_expenses == 2
        assert stats.pending_expenses == 1
        assert stats.category_breakdown["septic-tank"].balance == 25000
        assert stats.monthly_expenses["2023-09"].paid == 65000
        assert stats.monthly_expenses["2023-10"].count == 1

    def test_undated_expense_not_in_monthly(self, make_store):
        store = make_store(LedgerSeed(expenses=[
            Expense(id="e1", name="Cement", amount=9000, category=ExpenseCategory.MATERIAL),
        ]))
        stats = LedgerReporter(store).expense_stats()
        assert stats.category_breakdown["material"].total == 9000
        assert stats.monthly_expenses == {}


class TestPaymentReports:
    """Tests for payment statistics and period reports."""

    @pytest.fixture
    def store(self, make_store):
        return make_store(LedgerSeed(payments=[
            Payment(id="p1", item_id="s1", item_name="Advance", amount=1000,
                    type=PaymentType.CONSTRUCTION, date=date(2024, 1, 5)),
            Payment(id="p2", item_id="e1", item_name="Sump", amount=500,
                    type=PaymentType.EXPENSE, date=date(2024, 1, 20)),
            Payment(id="p3", item_name="Permit", amount=250,
                    type=PaymentType.OTHER, date=date(2024, 2, 2)),
        ]))

    def test_payment_stats(self, store):
        stats = LedgerReporter(store).payment_stats()
        assert stats.total_payments == 1750
        assert stats.total_payment_count == 3
        assert stats.average_payment == 583
        assert stats.monthly_payments["2024-01"].construction == 1000
        assert stats.monthly_payments["2024-01"].total == 1500
        assert stats.monthly_payments["2024-02"].other == 250

    def test_payment_stats_empty(self, make_store):
        assert LedgerReporter(make_store()).payment_stats().average_payment == 0

    def test_report_for_month(self, store):
        report = LedgerReporter(store).payment_report(date(2024, 1, 1), date(2024, 1, 31))
        assert report.description == "Payments in January 2024"
        assert report.payment_count == 2
        assert [p.id for p in report.payments] == ["p2", "p1"]
        assert report.construction_amount == 1000
        assert report.expense_amount == 500
        assert report.other_amount == 0

    def test_report_across_months(self, store):
        report = LedgerReporter(store).payment_report(date(2024, 1, 1), date(2024, 2, 29))
        assert report.description == "Payments from Jan to Feb 2024"
        assert report.total_amount == 1750

    def test_report_rejects_reversed_range(self, store):
        with pytest.raises(InvalidArgumentError):
            LedgerReporter(store).payment_report(date(2024, 2, 1), date(2024, 1, 1))


class TestClientReports:
    """Tests for client statistics and the client report."""

    @pytest.fixture
    def client_reporter(self, seeded_store):
        return LedgerReporter(seeded_store, today=lambda: date(2023, 10, 1))

    def test_client_stats(self, client_reporter):
        stats = client_reporter.client_stats()
        assert stats.total_clients == 3
        assert stats.active_clients == 1
        assert stats.completed_clients == 1
        assert stats.planning_clients == 1
        assert stats.on_hold_clients == 0
        assert stats.total_budget == 2500000 + 5000000 + 7500000
        assert stats.project_types == {
            "residential-house": 1,
            "commercial-building": 1,
            "villa-construction": 1,
        }
        assert stats.active_percentage == 33
        assert stats.completion_rate == 33

    def test_recent_clients_newest_first(self, client_reporter):
        """Only clients who joined in the last 90 days, newest first."""
        recent = client_reporter.client_stats().recent_clients
        assert [c.name for c in recent] == ["Vikram Singh", "Rajesh Kumar"]

    def test_status_change_moves_counts(self, seeded_store, client_reporter):
        seeded_store.update_client_status("vikram-singh", ClientStatus.ACTIVE)
        stats = client_reporter.client_stats()
        assert stats.active_clients == 2
        assert stats.planning_clients == 0
        assert stats.active_percentage == 67

    def test_no_clients(self, make_store):
        stats = LedgerReporter(make_store()).client_stats()
        assert stats.total_clients == 0
        assert stats.active_percentage == 0
        assert stats.completion_rate == 0
        assert stats.recent_clients == []

    def test_client_report(self, client_reporter):
        report = client_reporter.client_report()
        assert report.summary.total_clients == 3
        assert [entry.id for entry in report.clients] == [
            "rajesh-kumar", "priya-sharma", "vikram-singh",
        ]
        first = report.clients[0]
        assert first.phone == "+91 9876543210"
        assert first.email == "rajesh@example.com"
        assert first.budget == 2500000
        assert first.join_date == date(2023, 8, 15)
