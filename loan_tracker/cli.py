"""Command-line dashboard for loans, consortiums and installments.

Configuration comes from the environment (see ``AppConfig.from_env``); without
backend credentials every command runs against the in-memory sample data.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from datetime import date
from typing import Callable, Sequence

import httpx

from loan_tracker.backend import AdminGateway, AuthGateway, StorageBackend, create_auth, create_backend
from loan_tracker.config import AppConfig
from loan_tracker.exceptions import AuthError, LoanTrackerError
from loan_tracker.finance import simulate_loan
from loan_tracker.formatters import parse_number
from loan_tracker.logging import get_logger, setup_logging
from loan_tracker.models import InstallmentStatus, LoanStatus, Role
from loan_tracker.reports import (
    ALL,
    ConsoleReport,
    consortiums_for_company,
    dashboard_summary,
    filter_consortiums,
    filter_installments,
    filter_loans,
    installments_for_company,
    loans_for_company,
    monthly_totals,
)
from loan_tracker.reports import console
from loan_tracker.result import MutationResult
from loan_tracker.store import DataStore, UserStore, settle_consortium, settle_loan

logger = get_logger(__name__)


@dataclass
class App:
    """Objects shared by the commands of one invocation."""

    config: AppConfig
    backend: StorageBackend
    auth: AuthGateway
    store: DataStore
    users: UserStore
    report: ConsoleReport

    @classmethod
    def create(cls, config: AppConfig, transport: httpx.BaseTransport | None = None) -> "App":
        backend = create_backend(config.backend, transport=transport)
        return cls(
            config=config,
            backend=backend,
            auth=create_auth(config.backend, backend, transport=transport),
            store=DataStore(backend, timezone=config.timezone),
            users=UserStore(backend, AdminGateway(config.backend, transport=transport)),
            report=ConsoleReport(),
        )

    def sign_in(self) -> bool:
        """Sign in with the configured account when a hosted backend is in use.

        Mock mode needs no session. Data requests made after a successful
        sign-in carry the user's access token.
        """
        if not self.backend.is_connected:
            return True
        backend = self.config.backend
        if not backend.has_credentials:
            print("Error: sign-in required. Set SUPABASE_EMAIL and SUPABASE_PASSWORD", file=sys.stderr)
            return False
        try:
            self.auth.sign_in_with_password(backend.email, backend.password)
        except AuthError as e:
            print(f"Error: sign-in failed: {e}", file=sys.stderr)
            return False
        return True

    def close(self) -> None:
        self.users.admin.close()
        self.auth.close()
        self.backend.close()


def _fail(result: MutationResult) -> int:
    print(f"Error ({result.error_kind.value}): {result.error}", file=sys.stderr)
    return 1


def _load(app: App) -> bool:
    result = app.store.refresh()
    if not result:
        _fail(result)
    return result.success


def cmd_dashboard(app: App, args: argparse.Namespace) -> int:
    if not _load(app):
        return 1
    store = app.store

    def summary() -> list[str]:
        return console.summary_lines(
            dashboard_summary(store.loans, store.installments, store.consortiums, args.company)
        )

    def monthly() -> list[str]:
        return console.monthly_lines(
            monthly_totals(installments_for_company(store.installments, store.loans, args.company))
        )

    ok = app.report.render([("Dashboard", summary), ("Installments per month", monthly)])
    return 0 if ok else 1


def cmd_companies(app: App, args: argparse.Namespace) -> int:
    if not _load(app):
        return 1
    ok = app.report.section("Companies", lambda: console.company_lines(app.store.companies))
    return 0 if ok else 1


def cmd_loans(app: App, args: argparse.Namespace) -> int:
    if not _load(app):
        return 1
    status = LoanStatus(args.status.upper()) if args.status else None

    def build() -> list[str]:
        return console.loan_lines(filter_loans(loans_for_company(app.store.loans, args.company), status))

    return 0 if app.report.section("Loans", build) else 1


def cmd_installments(app: App, args: argparse.Namespace) -> int:
    if not _load(app):
        return 1
    store = app.store
    status = InstallmentStatus(args.status.upper()) if args.status else None
    items = installments_for_company(store.installments, store.loans, args.company)
    view = filter_installments(items, status, args.loan, args.date_from, args.date_to)

    sections = [("Installments", lambda: console.installment_lines(view, store.loans))]
    if args.monthly:
        sections.append(("Installments per month", lambda: console.monthly_lines(monthly_totals(view.installments))))
    return 0 if app.report.render(sections) else 1


def cmd_consortiums(app: App, args: argparse.Namespace) -> int:
    if not _load(app):
        return 1

    def build() -> list[str]:
        items = consortiums_for_company(app.store.consortiums, args.company)
        return console.consortium_lines(
            filter_consortiums(items, args.category, args.administrator, args.search or "")
        )

    return 0 if app.report.section("Consortiums", build) else 1


def cmd_simulate(args: argparse.Namespace) -> int:
    principal = parse_number(args.principal)
    installments = parse_number(args.installments)
    rate = parse_number(args.rate)
    try:
        result = simulate_loan(principal, installments, rate)
    except LoanTrackerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    for text in console.simulation_lines(principal, installments, rate, result):
        print(text)
    return 0


def cmd_settle_loan(app: App, args: argparse.Namespace) -> int:
    if not _load(app):
        return 1
    loan = app.store.find_loan(args.loan_id)
    if loan is None:
        print(f"Error: loan {args.loan_id} not found", file=sys.stderr)
        return 1
    if loan.status != LoanStatus.ACTIVE:
        print(f"Error: loan {args.loan_id} is already finished", file=sys.stderr)
        return 1
    result = settle_loan(app.store, loan)
    if not result:
        return _fail(result)
    print(f"Loan {loan.reference} settled")
    return 0


def cmd_settle_consortium(app: App, args: argparse.Namespace) -> int:
    if not _load(app):
        return 1
    consortium = app.store.find_consortium(args.consortium_id)
    if consortium is None:
        print(f"Error: consortium {args.consortium_id} not found", file=sys.stderr)
        return 1
    result = settle_consortium(app.store, consortium)
    if not result:
        return _fail(result)
    print(f"Consortium {consortium.observation} settled")
    return 0


def cmd_sync_statuses(app: App, args: argparse.Namespace) -> int:
    if not _load(app):
        return 1
    result = app.store.sync_installment_statuses()
    if not result:
        return _fail(result)
    print(f"{len(result.data)} installment statuses updated")
    return 0


def cmd_reset(app: App, args: argparse.Namespace) -> int:
    if not args.yes:
        print("Refusing to delete all data without --yes", file=sys.stderr)
        return 1
    if not _load(app):
        return 1
    result = app.store.reset_data()
    if not result:
        return _fail(result)
    print("All data deleted")
    return 0


def cmd_users(app: App, args: argparse.Namespace) -> int:
    result = app.users.refresh()
    if not result:
        return _fail(result)
    return 0 if app.report.section("Users", lambda: console.user_lines(app.users.users)) else 1


def cmd_invite(app: App, args: argparse.Namespace) -> int:
    result = app.users.invite_user(args.name, args.email, Role(args.role.upper()))
    if not result:
        return _fail(result)
    print(f"Invitation sent to {args.email}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loan-tracker",
        description="Track corporate loans, consortium quotas and installments",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    def with_company(p: argparse.ArgumentParser) -> argparse.ArgumentParser:
        p.add_argument("--company", default=ALL, help="Company id, or 'all' (default)")
        return p

    with_company(sub.add_parser("dashboard", help="Debt summary and next installments"))
    sub.add_parser("companies", help="List companies")

    loans = with_company(sub.add_parser("loans", help="List loans"))
    loans.add_argument("--status", choices=["active", "finished"], help="Filter by status")

    installments = with_company(sub.add_parser("installments", help="List installments"))
    installments.add_argument("--loan", help="Loan id")
    installments.add_argument("--status", choices=["paid", "pending", "overdue"], help="Filter by status")
    installments.add_argument("--from", dest="date_from", type=date.fromisoformat, help="Due on or after (YYYY-MM-DD)")
    installments.add_argument("--to", dest="date_to", type=date.fromisoformat, help="Due on or before (YYYY-MM-DD)")
    installments.add_argument("--monthly", action="store_true", help="Also show totals per month")

    consortiums = with_company(sub.add_parser("consortiums", help="List consortium quotas"))
    consortiums.add_argument("--category", help="Filter by category")
    consortiums.add_argument("--administrator", help="Filter by administrator")
    consortiums.add_argument("--search", help="Free-text search")

    simulate = sub.add_parser("simulate", help="Simulate a fixed-installment loan")
    simulate.add_argument("principal", help="Amount financed, e.g. 100000 or 100.000,00")
    simulate.add_argument("installments", help="Number of monthly installments")
    simulate.add_argument("rate", help="Monthly interest rate in percent, e.g. 1,25")

    settle = sub.add_parser("settle-loan", help="Mark a loan as fully paid")
    settle.add_argument("loan_id")
    settle_c = sub.add_parser("settle-consortium", help="Mark a consortium quota as fully paid")
    settle_c.add_argument("consortium_id")

    sub.add_parser("sync-statuses", help="Update installment statuses for today")

    reset = sub.add_parser("reset", help="Delete all companies, loans, installments and consortiums")
    reset.add_argument("--yes", action="store_true", help="Confirm deletion")

    sub.add_parser("users", help="List users")
    invite = sub.add_parser("invite", help="Invite a user by e-mail")
    invite.add_argument("name")
    invite.add_argument("email")
    invite.add_argument("--role", choices=[r.value.lower() for r in Role], default="manager")

    return parser


COMMANDS: dict[str, Callable[[App, argparse.Namespace], int]] = {
    "dashboard": cmd_dashboard,
    "companies": cmd_companies,
    "loans": cmd_loans,
    "installments": cmd_installments,
    "consortiums": cmd_consortiums,
    "settle-loan": cmd_settle_loan,
    "settle-consortium": cmd_settle_consortium,
    "sync-statuses": cmd_sync_statuses,
    "reset": cmd_reset,
    "users": cmd_users,
    "invite": cmd_invite,
}


def main(
    argv: Sequence[str] | None = None,
    config: AppConfig | None = None,
    transport: httpx.BaseTransport | None = None,
) -> int:
    """Entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)
    config = config or AppConfig.from_env()
    setup_logging(args.log_level or config.log_level, config.log_format)

    if args.command == "simulate":
        return cmd_simulate(args)

    try:
        app = App.create(config, transport=transport)
    except LoanTrackerError as e:
        logger.error("Could not start: %s", e)
        return 1
    try:
        if not app.sign_in():
            return 1
        return COMMANDS[args.command](app, args)
    finally:
        app.close()


if __name__ == "__main__":
    sys.exit(main())
