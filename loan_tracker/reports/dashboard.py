"""Read-only derived views over the store's collections."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable

from loan_tracker.formatters import collation_key
from loan_tracker.models import Consortium, Installment, InstallmentStatus, Loan, LoanStatus

ALL = "all"
_ZERO = Decimal("0")


def _total(values: Iterable[Decimal]) -> Decimal:
    return sum(values, _ZERO)


# Company filter


def loans_for_company(loans: Iterable[Loan], company_id: str = ALL) -> list[Loan]:
    return [loan for loan in loans if company_id == ALL or loan.company_id == company_id]


def consortiums_for_company(consortiums: Iterable[Consortium], company_id: str = ALL) -> list[Consortium]:
    return [c for c in consortiums if company_id == ALL or c.company_id == company_id]


def installments_for_company(
    installments: Iterable[Installment],
    loans: Iterable[Loan],
    company_id: str = ALL,
) -> list[Installment]:
    """Installments whose loan belongs to ``company_id``."""
    if company_id == ALL:
        return list(installments)
    loan_ids = {loan.id for loan in loans if loan.company_id == company_id}
    return [item for item in installments if item.loan_id in loan_ids]


# Dashboard


@dataclass(frozen=True)
class LoanProgress:
    """A loan with its next unpaid and last paid installments."""

    loan: Loan
    next_installment: Installment | None
    last_paid: Installment | None


@dataclass(frozen=True)
class DashboardSummary:
    loan_debt: Decimal
    consortium_debt: Decimal
    total_debt: Decimal
    active_loans: int
    paid_installments: int
    pending_installments: int
    overdue_installments: int
    progress: list[LoanProgress] = field(default_factory=list)


def next_installment(installments: Iterable[Installment], loan_id: str) -> Installment | None:
    """Unpaid installment of ``loan_id`` with the lowest sequence."""
    unpaid = [i for i in installments if i.loan_id == loan_id and i.status != InstallmentStatus.PAID]
    return min(unpaid, key=lambda i: i.sequence, default=None)


def last_paid_installment(installments: Iterable[Installment], loan_id: str) -> Installment | None:
    paid = [i for i in installments if i.loan_id == loan_id and i.status == InstallmentStatus.PAID]
    return max(paid, key=lambda i: i.sequence, default=None)


def dashboard_summary(
    loans: Iterable[Loan],
    installments: Iterable[Installment],
    consortiums: Iterable[Consortium],
    company_id: str = ALL,
) -> DashboardSummary:
    """Debt totals, installment counts and per-loan progress for one company or all."""
    loans = loans_for_company(loans, company_id)
    installments = installments_for_company(installments, loans, company_id)
    consortiums = consortiums_for_company(consortiums, company_id)

    loan_debt = _total(loan.amount_to_pay for loan in loans)
    consortium_debt = _total(c.outstanding_balance for c in consortiums)
    statuses = [item.status for item in installments]

    return DashboardSummary(
        loan_debt=loan_debt,
        consortium_debt=consortium_debt,
        total_debt=loan_debt + consortium_debt,
        active_loans=sum(1 for loan in loans if loan.status == LoanStatus.ACTIVE),
        paid_installments=statuses.count(InstallmentStatus.PAID),
        pending_installments=statuses.count(InstallmentStatus.PENDING),
        overdue_installments=statuses.count(InstallmentStatus.OVERDUE),
        progress=[
            LoanProgress(
                loan=loan,
                next_installment=next_installment(installments, loan.id),
                last_paid=last_paid_installment(installments, loan.id),
            )
            for loan in loans
        ],
    )


# Lists


@dataclass(frozen=True)
class LoanListView:
    loans: list[Loan]
    active_count: int
    finished_count: int
    total_value: Decimal


def filter_loans(loans: Iterable[Loan], status: LoanStatus | None = None) -> LoanListView:
    loans = list(loans)
    selected = [loan for loan in loans if status is None or loan.status == status]
    return LoanListView(
        loans=selected,
        active_count=sum(1 for loan in loans if loan.status == LoanStatus.ACTIVE),
        finished_count=sum(1 for loan in loans if loan.status == LoanStatus.FINISHED),
        total_value=_total(loan.total_value for loan in selected),
    )


@dataclass(frozen=True)
class InstallmentListView:
    installments: list[Installment]
    paid_count: int
    pending_count: int
    overdue_count: int
    total_value: Decimal
    paid_value: Decimal


def filter_installments(
    installments: Iterable[Installment],
    status: InstallmentStatus | None = None,
    loan_id: str | None = None,
    start: date | None = None,
    end: date | None = None,
) -> InstallmentListView:
    """Installments matching every given criterion; dates are inclusive."""
    selected = []
    for item in installments:
        if status is not None and item.status != status:
            continue
        if loan_id is not None and item.loan_id != loan_id:
            continue
        if start is not None and (item.due_date is None or item.due_date < start):
            continue
        if end is not None and (item.due_date is None or item.due_date > end):
            continue
        selected.append(item)

    statuses = [item.status for item in selected]
    return InstallmentListView(
        installments=selected,
        paid_count=statuses.count(InstallmentStatus.PAID),
        pending_count=statuses.count(InstallmentStatus.PENDING),
        overdue_count=statuses.count(InstallmentStatus.OVERDUE),
        total_value=_total(item.value for item in selected),
        paid_value=_total(item.value for item in selected if item.status == InstallmentStatus.PAID),
    )


def filter_consortiums(
    consortiums: Iterable[Consortium],
    category: str | None = None,
    administrator: str | None = None,
    search: str = "",
) -> list[Consortium]:
    """Filter by category and administrator; ``search`` matches accent- and case-insensitively."""
    needle = collation_key(search.strip())
    selected = []
    for item in consortiums:
        if category and item.category != category:
            continue
        if administrator and collation_key(item.administrator) != collation_key(administrator):
            continue
        if needle:
            haystack = " ".join((item.observation, item.group_code, item.quota, item.administrator))
            if needle not in collation_key(haystack):
                continue
        selected.append(item)
    return selected


def monthly_totals(installments: Iterable[Installment]) -> dict[str, Decimal]:
    """Sum of installment values per ``YYYY-MM`` of the due date, in month order."""
    totals: dict[str, Decimal] = defaultdict(lambda: _ZERO)
    for item in installments:
        if item.due_date is None:
            continue
        totals[item.due_date.strftime("%Y-%m")] += item.value
    return dict(sorted(totals.items()))
