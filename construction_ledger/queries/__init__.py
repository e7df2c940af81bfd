"""Read-only ledger reports."""

from construction_ledger.queries.reports import (
    CategoryTotals,
    ClientReport,
    ClientReportEntry,
    ClientStats,
    ExpenseStats,
    LedgerReporter,
    LedgerSummary,
    MonthlyPayments,
    PaymentReport,
    PaymentStats,
    StageStats,
    UpcomingPayment,
)

__all__ = [
    "CategoryTotals",
    "ClientReport",
    "ClientReportEntry",
    "ClientStats",
    "ExpenseStats",
    "LedgerReporter",
    "LedgerSummary",
    "MonthlyPayments",
    "PaymentReport",
    "PaymentStats",
    "StageStats",
    "UpcomingPayment",
]
