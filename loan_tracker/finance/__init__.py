"""Loan math: amortization, schedules and reconciliation."""

from loan_tracker.finance.amortization import (
    SimulationResult,
    effective_annual_rate,
    financed_value,
    installment_value,
    simulate_loan,
)
from loan_tracker.finance.schedule import (
    build_schedule,
    installment_status,
    local_today,
    normalize_statuses,
    reconcile_loan,
    reconcile_loans,
)

__all__ = [
    "SimulationResult",
    "build_schedule",
    "effective_annual_rate",
    "financed_value",
    "installment_status",
    "installment_value",
    "local_today",
    "normalize_statuses",
    "reconcile_loan",
    "reconcile_loans",
    "simulate_loan",
]
