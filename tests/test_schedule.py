"""Tests for schedules, automatic statuses and loan reconciliation."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

from loan_tracker.finance import (
    build_schedule,
    installment_status,
    local_today,
    normalize_statuses,
    reconcile_loan,
    reconcile_loans,
)
from loan_tracker.models import Installment, InstallmentStatus, Loan, LoanStatus

TODAY = date(2024, 9, 10)


def make_installment(sequence: int, due: date, status=InstallmentStatus.PENDING, value="100") -> Installment:
    return Installment(
        id=f"i{sequence}",
        loan_id="loan-1",
        sequence=sequence,
        due_date=due,
        value=Decimal(value),
        status=status,
    )


class TestInstallmentStatus:
    def test_paid_stays_paid(self) -> None:
        item = make_installment(1, date(2024, 12, 1), InstallmentStatus.PAID)

        assert installment_status(item, TODAY) == InstallmentStatus.PAID

    def test_past_due_is_overdue(self) -> None:
        assert installment_status(make_installment(1, date(2024, 9, 9)), TODAY) == InstallmentStatus.OVERDUE

    def test_due_today_is_paid(self) -> None:
        assert installment_status(make_installment(1, TODAY), TODAY) == InstallmentStatus.PAID

    def test_future_is_pending(self) -> None:
        item = make_installment(1, date(2024, 9, 11), InstallmentStatus.OVERDUE)

        assert installment_status(item, TODAY) == InstallmentStatus.PENDING

    def test_without_due_date_keeps_status(self) -> None:
        item = replace(make_installment(1, TODAY), due_date=None, status=InstallmentStatus.OVERDUE)

        assert installment_status(item, TODAY) == InstallmentStatus.OVERDUE


class TestNormalizeStatuses:
    def test_returns_changed_subset(self) -> None:
        unchanged = make_installment(1, date(2024, 8, 10), InstallmentStatus.PAID)
        changed = make_installment(2, date(2024, 9, 1))

        items, updates = normalize_statuses([unchanged, changed], TODAY)

        assert items[0] is unchanged
        assert items[1].status == InstallmentStatus.OVERDUE
        assert updates == [items[1]]
        assert changed.status == InstallmentStatus.PENDING

    def test_idempotent(self) -> None:
        items, _ = normalize_statuses([make_installment(1, date(2024, 9, 1))], TODAY)

        _, updates = normalize_statuses(items, TODAY)

        assert updates == []


class TestBuildSchedule:
    def test_monthly_from_start_date(self) -> None:
        loan = Loan(
            id="loan-1",
            start_date=date(2024, 1, 31),
            installments=4,
            installment_value=Decimal("250"),
            interest_per_installment=Decimal("20"),
        )

        schedule = build_schedule(loan, date(2024, 1, 1))

        assert [i.sequence for i in schedule] == [1, 2, 3, 4]
        assert [i.due_date for i in schedule] == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
        ]
        assert all(i.loan_id == "loan-1" for i in schedule)
        assert all(i.value == Decimal("250") and i.interest == Decimal("20") for i in schedule)
        assert all(i.status == InstallmentStatus.PENDING for i in schedule)

    def test_statuses_follow_today(self) -> None:
        loan = Loan(id="loan-1", start_date=date(2024, 8, 10), installments=3)

        statuses = [i.status for i in build_schedule(loan, TODAY)]

        assert statuses == [InstallmentStatus.OVERDUE, InstallmentStatus.PAID, InstallmentStatus.PENDING]

    def test_uses_id_factory(self) -> None:
        ids = iter(["a", "b"])
        loan = Loan(id="loan-1", start_date=TODAY, installments=2)

        schedule = build_schedule(loan, TODAY, new_id=lambda: next(ids))

        assert [i.id for i in schedule] == ["a", "b"]

    def test_empty_without_start_date(self) -> None:
        assert build_schedule(Loan(id="loan-1", installments=3), TODAY) == []


class TestReconcileLoan:
    def test_counters_from_installments(self) -> None:
        loan = Loan(id="loan-1", installments=10)
        installments = [
            make_installment(1, date(2024, 7, 10), InstallmentStatus.PAID),
            make_installment(2, date(2024, 8, 10), InstallmentStatus.PAID),
            make_installment(3, date(2024, 9, 10), InstallmentStatus.OVERDUE),
        ]

        updated = reconcile_loan(loan, installments)

        assert updated.amount_paid == Decimal("200")
        assert updated.amount_to_pay == Decimal("100")
        assert updated.paid_installments == 2
        assert updated.remaining_installments == 8

    def test_remaining_never_below_unpaid_count(self) -> None:
        loan = Loan(id="loan-1", installments=1)
        installments = [make_installment(1, TODAY), make_installment(2, TODAY)]

        assert reconcile_loan(loan, installments).remaining_installments == 2

    def test_finished_loan_untouched(self) -> None:
        loan = Loan(id="loan-1", installments=2, status=LoanStatus.FINISHED, paid_installments=2)

        assert reconcile_loan(loan, [make_installment(1, TODAY)]) is loan

    def test_loan_without_installments_untouched(self) -> None:
        loan = Loan(id="loan-1", installments=2, amount_to_pay=Decimal("500"))

        assert reconcile_loan(loan, []) is loan

    def test_consistent_loan_returned_as_is(self) -> None:
        loan = Loan(
            id="loan-1",
            installments=1,
            paid_installments=1,
            remaining_installments=0,
            amount_paid=Decimal("100"),
        )
        paid = make_installment(1, TODAY, InstallmentStatus.PAID)

        assert reconcile_loan(loan, [paid]) is loan

    def test_reconcile_loans_reports_changes(self) -> None:
        other = Loan(id="loan-2", installments=1)
        loan = Loan(id="loan-1", installments=1)

        loans, changed = reconcile_loans([loan, other], [make_installment(1, TODAY, InstallmentStatus.PAID)])

        assert loans[1] is other
        assert [item.id for item in changed] == ["loan-1"]


class TestLocalToday:
    def test_returns_date(self) -> None:
        assert isinstance(local_today("America/Sao_Paulo"), date)
