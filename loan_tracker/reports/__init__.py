"""Derived read-only views and their console rendering."""

from loan_tracker.reports.console import ConsoleReport, table
from loan_tracker.reports.dashboard import (
    ALL,
    DashboardSummary,
    InstallmentListView,
    LoanListView,
    LoanProgress,
    consortiums_for_company,
    dashboard_summary,
    filter_consortiums,
    filter_installments,
    filter_loans,
    installments_for_company,
    last_paid_installment,
    loans_for_company,
    monthly_totals,
    next_installment,
)

__all__ = [
    "ALL",
    "ConsoleReport",
    "DashboardSummary",
    "InstallmentListView",
    "LoanListView",
    "LoanProgress",
    "consortiums_for_company",
    "dashboard_summary",
    "filter_consortiums",
    "filter_installments",
    "filter_loans",
    "installments_for_company",
    "last_paid_installment",
    "loans_for_company",
    "monthly_totals",
    "next_installment",
    "table",
]
