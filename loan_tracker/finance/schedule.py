"""Installment schedules, automatic statuses and loan reconciliation."""

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterable
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from loan_tracker.config import DEFAULT_TIMEZONE
from loan_tracker.models import Installment, InstallmentStatus, Loan, LoanStatus


def local_today(tz: str = DEFAULT_TIMEZONE) -> date:
    """Current calendar date in the business timezone."""
    return datetime.now(ZoneInfo(tz)).date()


def today_in(tz: str = DEFAULT_TIMEZONE) -> Callable[[], date]:
    """Clock returning today's date in ``tz``."""
    return lambda: local_today(tz)


def installment_status(installment: Installment, today: date) -> InstallmentStatus:
    """Status an installment should have on ``today``.

    Paid installments stay paid. An installment falling due today is treated
    as debited automatically; one past its due date is overdue.
    """
    if installment.status == InstallmentStatus.PAID:
        return InstallmentStatus.PAID
    if installment.due_date is None:
        return installment.status
    if installment.due_date < today:
        return InstallmentStatus.OVERDUE
    if installment.due_date == today:
        return InstallmentStatus.PAID
    return InstallmentStatus.PENDING


def normalize_statuses(
    installments: Iterable[Installment], today: date
) -> tuple[list[Installment], list[Installment]]:
    """Apply the automatic status rule to every installment.

    Returns
    -------
    tuple[list[Installment], list[Installment]]
        All installments (unchanged ones by identity) and the subset that
        changed.
    """
    normalized: list[Installment] = []
    updates: list[Installment] = []
    for item in installments:
        status = installment_status(item, today)
        if status != item.status:
            item = replace(item, status=status)
            updates.append(item)
        normalized.append(item)
    return normalized, updates


def build_schedule(
    loan: Loan,
    today: date,
    new_id: Callable[[], str] | None = None,
) -> list[Installment]:
    """Generate the monthly installments of a newly created loan.

    The first installment falls on the loan's start date; each one carries the
    loan's installment value and interest-per-installment.
    """
    if loan.installments <= 0 or loan.start_date is None:
        return []

    schedule = []
    for index in range(loan.installments):
        draft = Installment(
            loan_id=loan.id or "",
            sequence=index + 1,
            due_date=loan.start_date + relativedelta(months=index),
            value=loan.installment_value,
            interest=loan.interest_per_installment,
            status=InstallmentStatus.PENDING,
            id=new_id() if new_id else None,
        )
        schedule.append(replace(draft, status=installment_status(draft, today)))
    return schedule


def reconcile_loan(loan: Loan, installments: Iterable[Installment]) -> Loan:
    """Recompute a loan's payment counters from its installments.

    Finished loans and loans without installments are returned as-is, as is any
    loan whose counters already agree.
    """
    if loan.status == LoanStatus.FINISHED:
        return loan

    related = [item for item in installments if item.loan_id == loan.id]
    if not related:
        return loan

    paid = [item for item in related if item.status == InstallmentStatus.PAID]
    pending = [item for item in related if item.status != InstallmentStatus.PAID]
    amount_paid = sum((item.value for item in paid), Decimal("0"))
    amount_to_pay = sum((item.value for item in pending), Decimal("0"))
    total = loan.installments or len(related)
    remaining = max(len(pending), max(total - len(paid), 0))

    if (
        amount_paid == loan.amount_paid
        and amount_to_pay == loan.amount_to_pay
        and len(paid) == loan.paid_installments
        and remaining == loan.remaining_installments
    ):
        return loan

    return replace(
        loan,
        amount_paid=amount_paid,
        amount_to_pay=amount_to_pay,
        paid_installments=len(paid),
        remaining_installments=remaining,
    )


def reconcile_loans(
    loans: Iterable[Loan], installments: list[Installment]
) -> tuple[list[Loan], list[Loan]]:
    """Reconcile every loan; returns all loans and the subset that changed."""
    reconciled: list[Loan] = []
    updates: list[Loan] = []
    for loan in loans:
        updated = reconcile_loan(loan, installments)
        if updated is not loan:
            updates.append(updated)
        reconciled.append(updated)
    return reconciled, updates
