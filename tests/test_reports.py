"""Tests for dashboard views and console rendering."""

from datetime import date
from decimal import Decimal
from io import StringIO

from loan_tracker.models import InstallmentStatus, LoanStatus
from loan_tracker.reports import (
    ALL,
    ConsoleReport,
    dashboard_summary,
    filter_consortiums,
    filter_installments,
    filter_loans,
    installments_for_company,
    loans_for_company,
    monthly_totals,
    table,
)
from loan_tracker.reports import console
from loan_tracker.store import DataStore

DISTRIBUICOES = "empresa-logica-distribuicoes"


class TestCompanyFilter:
    def test_all(self, store: DataStore) -> None:
        assert len(loans_for_company(store.loans, ALL)) == 6
        assert len(installments_for_company(store.installments, store.loans, ALL)) == 12

    def test_one_company(self, store: DataStore) -> None:
        loans = loans_for_company(store.loans, "empresa-logica-transporte")

        assert [loan.id for loan in loans] == ["loan-cdc-278"]
        items = installments_for_company(store.installments, store.loans, "empresa-logica-transporte")
        assert {i.loan_id for i in items} == {"loan-cdc-278"}


class TestDashboardSummary:
    def test_company_summary(self, store: DataStore) -> None:
        summary = dashboard_summary(store.loans, store.installments, store.consortiums, DISTRIBUICOES)

        assert summary.loan_debt == Decimal("33212.42")
        assert summary.consortium_debt == Decimal("1063922.15")
        assert summary.total_debt == Decimal("1097134.57")
        assert summary.active_loans == 3
        assert summary.paid_installments == 3
        assert summary.pending_installments == 1
        assert summary.overdue_installments == 2

    def test_progress(self, store: DataStore) -> None:
        summary = dashboard_summary(store.loans, store.installments, store.consortiums, DISTRIBUICOES)

        progress = next(p for p in summary.progress if p.loan.id == "loan-fgi-237")
        assert progress.next_installment.sequence == 29
        assert progress.last_paid.sequence == 28

    def test_company_without_consortiums(self, store: DataStore) -> None:
        summary = dashboard_summary(
            store.loans, store.installments, store.consortiums, "empresa-logica-distribuidora"
        )

        assert summary.consortium_debt == Decimal("0")
        assert summary.active_loans == 2

    def test_empty(self) -> None:
        summary = dashboard_summary([], [], [])

        assert summary.total_debt == Decimal("0")
        assert summary.progress == []


class TestListViews:
    def test_filter_loans(self, store: DataStore) -> None:
        view = filter_loans(store.loans, LoanStatus.FINISHED)

        assert view.loans == []
        assert view.active_count == 6
        assert view.finished_count == 0
        assert view.total_value == Decimal("0")

    def test_filter_installments_by_status(self, store: DataStore) -> None:
        view = filter_installments(store.installments, InstallmentStatus.OVERDUE)

        assert len(view.installments) == 5
        assert view.overdue_count == 5
        assert view.paid_value == Decimal("0")

    def test_date_range_is_inclusive(self, store: DataStore) -> None:
        view = filter_installments(
            store.installments,
            loan_id="loan-fgi-237",
            start=date(2024, 8, 26),
            end=date(2024, 8, 26),
        )

        assert [i.sequence for i in view.installments] == [29]
        assert view.total_value == Decimal("15897.66")

    def test_totals(self, store: DataStore) -> None:
        view = filter_installments(store.installments, loan_id="loan-fgi-282")

        assert view.paid_count == 1
        assert view.pending_count == 1
        assert view.total_value == Decimal("19629.66")
        assert view.paid_value == Decimal("9814.83")

    def test_filter_consortiums(self, store: DataStore) -> None:
        items = store.consortiums

        assert len(filter_consortiums(items, search="mercedes")) == 2
        assert len(filter_consortiums(items, administrator="santander")) == 2
        assert [c.id for c in filter_consortiums(items, search="itau")] == ["consortium-pwo-1f23"]
        assert len(filter_consortiums(items, category="MACHINERY")) == 1
        assert filter_consortiums(items, category="VEHICLE", search="PWO") == []

    def test_monthly_totals(self, store: DataStore) -> None:
        items = installments_for_company(store.installments, store.loans, DISTRIBUICOES)

        totals = monthly_totals(items)

        assert list(totals) == ["2024-07", "2024-08", "2024-09"]
        assert totals["2024-07"] == Decimal("23397.59")
        assert totals["2024-08"] == Decimal("33212.42")
        assert totals["2024-09"] == Decimal("9814.83")


class TestConsoleReport:
    def test_table(self) -> None:
        lines = table(["A", "Name"], [["1", "Ana"], ["22", "Bo"]])

        assert lines == ["A   Name", "--  ----", "1   Ana", "22  Bo"]

    def test_section_output(self) -> None:
        stream = StringIO()

        assert ConsoleReport(stream).section("Companies", lambda: ["line"])
        assert "Companies\n" in stream.getvalue()
        assert "line\n" in stream.getvalue()

    def test_retry_once(self) -> None:
        attempts = []

        def flaky() -> list[str]:
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("temporary")
            return ["ok"]

        stream = StringIO()
        assert ConsoleReport(stream).section("Flaky", flaky)
        assert len(attempts) == 2

    def test_failed_section_is_isolated(self) -> None:
        def broken() -> list[str]:
            raise RuntimeError("boom")

        stream = StringIO()
        report = ConsoleReport(stream)

        ok = report.render([("Broken", broken), ("Fine", lambda: ["still here"])])

        assert not ok
        assert report.failed == ["Broken"]
        assert "[Broken unavailable: boom]" in stream.getvalue()
        assert "still here" in stream.getvalue()

    def test_summary_lines(self, store: DataStore) -> None:
        summary = dashboard_summary(store.loans, store.installments, store.consortiums, DISTRIBUICOES)

        lines = console.summary_lines(summary)

        assert "Loan debt:        R$ 33.212,42" in lines
        assert any("Capital de Giro FGI 237/1497/2806" in line and "26/08/2024" in line for line in lines)

    def test_installment_lines_show_reference(self, store: DataStore) -> None:
        view = filter_installments(store.installments, loan_id="loan-cdc-278")

        lines = console.installment_lines(view, store.loans)

        assert lines[2].startswith("CDC 278/3302/5517")
        assert lines[-1].startswith("Paid: 1  Pending: 0  Overdue: 1")
