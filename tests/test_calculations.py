"""
Tests for the money and status calculations.
"""

from decimal import Decimal

import pytest

from construction_ledger import calculations
from construction_ledger.models.enums import ExpenseStatus, StageStatus
from construction_ledger.models.ledger import Expense, Project, Stage


class TestStatusDerivation:
    """Tests for tri-state and binary status."""

    @pytest.mark.parametrize("paid,expected", [
        (0, StageStatus.PENDING),
        (50000, StageStatus.IN_PROGRESS),
        (100000, StageStatus.COMPLETED),
        (150000, StageStatus.COMPLETED),
    ])
    def test_tri_state(self, paid, expected):
        """Stage status follows paid against a 100,000 amount."""
        assert calculations.compute_status_tri_state(paid, 100000) == expected

    def test_tri_state_zero_amount_zero_paid_is_pending(self):
        """Nothing paid reads as pending even on a zero-cost stage."""
        assert calculations.compute_status_tri_state(0, 0) == StageStatus.PENDING

    @pytest.mark.parametrize("paid,expected", [
        (0, ExpenseStatus.PENDING),
        (24999, ExpenseStatus.PENDING),
        (25000, ExpenseStatus.PAID),
        (30000, ExpenseStatus.PAID),
    ])
    def test_binary(self, paid, expected):
        """Expense status is paid only once paid reaches the amount."""
        assert calculations.compute_status_binary(paid, 25000) == expected


class TestAmounts:
    """Tests for balance, rounding and percentages."""

    def test_balance_floored_at_zero(self):
        """Overpayment never produces a negative balance."""
        assert calculations.compute_balance(40000, 50000) == 0
        assert calculations.compute_balance(100000, 60000) == 40000

    def test_stage_amount_exact(self):
        """20% of 1,031,250 is exact."""
        assert calculations.compute_stage_amount(1031250, 20) == 206250

    def test_stage_amount_rounds_half_up(self):
        """15% of 1,031,250 is 154,687.5 and rounds up."""
        assert calculations.compute_stage_amount(1031250, 15) == 154688

    def test_round_half_up(self):
        """Halves round away from zero."""
        assert calculations.round_half_up(Decimal("2.5")) == 3
        assert calculations.round_half_up(Decimal("2.49")) == 2

    def test_percentage_of_zero_total(self):
        """A zero total gives 0% instead of dividing by zero."""
        assert calculations.compute_percentage(10, 0) == 0

    def test_percentage(self):
        """Percentages are whole numbers."""
        assert calculations.compute_percentage(1, 3) == 33
        assert calculations.compute_percentage(2, 3) == 67


class TestAggregates:
    """Tests for collection-level sums."""

    @pytest.fixture
    def project(self):
        return Project(per_sqft_rate=1650, total_sqft=625)

    @pytest.fixture
    def stages(self):
        return [
            Stage(id="a", name="Advance", percentage=20, amount=206250, paid=206250),
            Stage(id="b", name="Basement", percentage=15, amount=154688, paid=50000),
            Stage(id="c", name="Lintel", percentage=15, amount=154688, paid=0),
        ]

    @pytest.fixture
    def expenses(self):
        return [
            Expense(id="x", name="Borewell", amount=50000, paid=50000),
            Expense(id="y", name="Septic Tank", amount=25000, paid=0),
        ]

    def test_construction_totals(self, project, stages):
        """Paid sums the stages; balance is measured against the fixed budget."""
        assert calculations.paid_construction_amount(stages) == 256250
        assert calculations.balance_construction_amount(project, stages) == 1031250 - 256250

    def test_overall_progress_counts_completed_only(self, stages):
        """Only the completed Advance stage counts toward progress."""
        assert calculations.overall_progress(stages) == 20

    def test_expense_totals(self, expenses):
        """Expense totals sum amount and paid."""
        assert calculations.total_expenses_amount(expenses) == 75000
        assert calculations.paid_expenses_amount(expenses) == 50000
        assert calculations.balance_expenses_amount(expenses) == 25000

    def test_project_totals(self, project, stages, expenses):
        """Project cost adds expenses to the construction budget."""
        assert calculations.total_project_cost(project, expenses) == 1031250 + 75000
        assert calculations.total_paid(stages, expenses) == 306250
        assert calculations.financial_progress(project, stages, expenses) == 28


class TestRiskAndDistribution:
    """Tests for the financial risk score and the cost split."""

    @staticmethod
    def _whole_budget_stage(paid):
        return Stage(id="s", name="Everything", percentage=100, amount=1031250, paid=paid)

    def test_nothing_paid_is_capped_at_five(self, project):
        """3 points for 0% paid plus 3 for 100% outstanding, capped at 5."""
        stages = [self._whole_budget_stage(0)]
        assert calculations.financial_risk(project, stages, []) == 5

    def test_partly_paid(self, project):
        """60% paid scores 1, 40% outstanding scores 1."""
        stages = [self._whole_budget_stage(618750)]
        assert calculations.financial_risk(project, stages, []) == 2

    def test_outstanding_ratio_boundary_is_exclusive(self, project):
        """Exactly 70% outstanding falls in the 2-point band."""
        stages = [self._whole_budget_stage(309375)]
        assert calculations.financial_risk(project, stages, []) == 2 + 2

    @pytest.mark.parametrize("paid", [1031250, 1100000])
    def test_settled_or_overpaid_scores_zero(self, project, paid):
        assert calculations.financial_risk(project, [self._whole_budget_stage(paid)], []) == 0

    def test_expenses_count_toward_risk(self, project):
        """An unpaid expense raises the outstanding share."""
        stages = [self._whole_budget_stage(1031250)]
        expenses = [Expense(id="x", name="Compound wall", amount=1031250, paid=0)]
        # 50% paid: 1 point; exactly 50% outstanding: 1 point
        assert calculations.financial_risk(project, stages, expenses) == 2

    def test_cost_distribution(self, project):
        expenses = [
            Expense(id="x", name="Borewell", amount=50000),
            Expense(id="y", name="Septic Tank", amount=25000),
        ]
        assert calculations.cost_distribution(project, expenses) == (93, 7)

    def test_cost_distribution_without_expenses(self, project):
        assert calculations.cost_distribution(project, []) == (100, 0)
