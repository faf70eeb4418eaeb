"""Plain-text rendering of reports for the terminal."""

from __future__ import annotations

import sys
from typing import Callable, Iterable, Sequence, TextIO

from loan_tracker.finance import SimulationResult
from loan_tracker.formatters import format_currency, format_date, format_percentage
from loan_tracker.logging import get_logger
from loan_tracker.models import Company, Consortium, Installment, Loan, UserProfile
from loan_tracker.reports.dashboard import DashboardSummary, InstallmentListView, LoanListView

logger = get_logger(__name__)

Section = Callable[[], list[str]]


def table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> list[str]:
    """Left-aligned fixed-width table."""
    rows = [[str(cell) for cell in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]

    def line(cells: Sequence[str]) -> str:
        return "  ".join(cell.ljust(w) for cell, w in zip(cells, widths)).rstrip()

    return [line(headers), line(["-" * w for w in widths])] + [line(row) for row in rows]


class ConsoleReport:
    """Write report sections to a stream.

    Each section is rendered independently. A terminal offers no retry button,
    so a section that raises is re-rendered automatically, ``retries`` times and
    without prompting; if it still fails an error line takes its place while the
    other sections are still written. Titles of sections that failed are kept
    in ``failed``.
    """

    def __init__(self, stream: TextIO | None = None, retries: int = 1) -> None:
        self.stream = stream or sys.stdout
        self.retries = retries
        self.failed: list[str] = []

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream)

    def section(self, title: str, build: Section) -> bool:
        """Render one section; returns whether it succeeded."""
        self._print(f"\n{'=' * 60}")
        self._print(title)
        self._print("=" * 60)

        for attempt in range(self.retries + 1):
            try:
                lines = build()
            except Exception as exc:
                logger.exception("Section %r failed (attempt %d)", title, attempt + 1)
                error = exc
                continue
            for text in lines:
                self._print(text)
            return True

        self.failed.append(title)
        self._print(f"[{title} unavailable: {error}]")
        return False

    def render(self, sections: Iterable[tuple[str, Section]]) -> bool:
        """Render every section; returns whether all succeeded."""
        results = [self.section(title, build) for title, build in sections]
        return all(results)


# Section builders


def company_lines(companies: Iterable[Company]) -> list[str]:
    return table(
        ["ID", "Name", "Nickname", "CNPJ", "Address"],
        ([c.id, c.name, c.nickname, c.tax_id, c.address] for c in companies),
    )


def loan_lines(view: LoanListView) -> list[str]:
    lines = table(
        ["ID", "Reference", "Bank", "Status", "Start", "Installment", "Paid", "To pay"],
        (
            [
                loan.id,
                loan.reference,
                loan.bank,
                loan.status.value,
                format_date(loan.start_date),
                format_currency(loan.installment_value),
                f"{loan.paid_installments}/{loan.installments}",
                format_currency(loan.amount_to_pay),
            ]
            for loan in view.loans
        ),
    )
    lines.append("")
    lines.append(
        f"Active: {view.active_count}  Finished: {view.finished_count}  "
        f"Total value: {format_currency(view.total_value)}"
    )
    return lines


def installment_lines(view: InstallmentListView, loans: Iterable[Loan] = ()) -> list[str]:
    references = {loan.id: loan.reference for loan in loans}
    lines = table(
        ["Loan", "#", "Due", "Value", "Interest", "Status"],
        (
            [
                references.get(item.loan_id, item.loan_id),
                str(item.sequence),
                format_date(item.due_date),
                format_currency(item.value),
                format_currency(item.interest),
                item.status.value,
            ]
            for item in view.installments
        ),
    )
    lines.append("")
    lines.append(
        f"Paid: {view.paid_count}  Pending: {view.pending_count}  Overdue: {view.overdue_count}  "
        f"Total: {format_currency(view.total_value)}  Paid value: {format_currency(view.paid_value)}"
    )
    return lines


def consortium_lines(consortiums: Iterable[Consortium]) -> list[str]:
    return table(
        ["ID", "Observation", "Group", "Quota", "Administrator", "Category", "Installment", "Balance"],
        (
            [
                c.id,
                c.observation,
                c.group_code,
                c.quota,
                c.administrator,
                c.category,
                format_currency(c.current_installment_value),
                format_currency(c.outstanding_balance),
            ]
            for c in consortiums
        ),
    )


def user_lines(users: Iterable[UserProfile]) -> list[str]:
    return table(
        ["ID", "Name", "E-mail", "Role", "Linked"],
        ([u.id, u.name, u.email, u.role.value, "yes" if u.user_id else "no"] for u in users),
    )


def summary_lines(summary: DashboardSummary) -> list[str]:
    lines = [
        f"Loan debt:        {format_currency(summary.loan_debt)}",
        f"Consortium debt:  {format_currency(summary.consortium_debt)}",
        f"Total debt:       {format_currency(summary.total_debt)}",
        f"Active loans:     {summary.active_loans}",
        f"Installments:     {summary.paid_installments} paid, "
        f"{summary.pending_installments} pending, {summary.overdue_installments} overdue",
        "",
    ]
    lines += table(
        ["Loan", "Next due", "Next value", "Last paid"],
        (
            [
                p.loan.reference,
                format_date(p.next_installment.due_date) if p.next_installment else "-",
                format_currency(p.next_installment.value) if p.next_installment else "-",
                format_date(p.last_paid.due_date) if p.last_paid else "-",
            ]
            for p in summary.progress
        ),
    )
    return lines


def monthly_lines(totals: dict) -> list[str]:
    return table(["Month", "Total"], ([month, format_currency(value)] for month, value in totals.items()))


def simulation_lines(principal, installments: int, rate, result: SimulationResult) -> list[str]:
    return [
        f"Principal:               {format_currency(principal)}",
        f"Installments:            {installments}",
        f"Monthly rate:            {format_percentage(rate)}",
        f"Installment value:       {format_currency(result.installment_value)}",
        f"Interest/installment:    {format_currency(result.interest_per_installment)}",
        f"Total interest:          {format_currency(result.total_interest)}",
        f"Total amount:            {format_currency(result.total_amount)}",
    ]
