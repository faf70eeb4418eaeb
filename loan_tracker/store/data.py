"""In-memory source of truth mediating between reports and the backend."""

from __future__ import annotations

from dataclasses import fields, replace
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, TypeVar

from loan_tracker.backend import StorageBackend
from loan_tracker.config import BackendMode, DEFAULT_TIMEZONE
from loan_tracker.exceptions import (
    BackendError,
    BackendNotConfiguredError,
    EntityNotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from loan_tracker.finance.schedule import (
    build_schedule,
    installment_status,
    normalize_statuses,
    reconcile_loan,
    reconcile_loans,
    today_in,
)
from loan_tracker.logging import get_logger
from loan_tracker.models import (
    Company,
    Consortium,
    Installment,
    Loan,
    sort_companies,
    sort_consortiums,
    sort_installments,
    sort_loans,
)
from loan_tracker.result import ErrorKind, MutationResult

logger = get_logger(__name__)

T = TypeVar("T")

REQUIRED_FIELDS: dict[type, tuple[str, ...]] = {
    Company: ("name", "nickname", "tax_id", "address"),
    Loan: ("company_id", "reference", "bank", "start_date", "end_date"),
    Consortium: ("company_id", "observation", "group_code", "quota", "administrator", "category"),
    Installment: ("loan_id", "due_date"),
}

DATE_FIELDS = ("start_date", "end_date", "due_date", "as_of_date", "contract_start")

FIELD_LABELS = {
    "tax_id": "tax id",
    "company_id": "company",
    "loan_id": "loan",
    "start_date": "start date",
    "end_date": "end date",
    "due_date": "due date",
    "group_code": "group code",
}


def _label(name: str) -> str:
    return FIELD_LABELS.get(name, name)


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def validate_record(record: object) -> None:
    """Check required fields, non-negative numbers and date types of a record.

    Raises
    ------
    ValidationError
        On the first problem found.
    """
    entity = type(record)
    for name in REQUIRED_FIELDS.get(entity, ()):
        if _is_blank(getattr(record, name)):
            raise ValidationError(f"{entity.__name__}: {_label(name)} is required")

    for f in fields(record):
        value = getattr(record, f.name)
        if isinstance(f.default, Decimal):
            if isinstance(value, bool) or not isinstance(value, (Decimal, int, float)):
                raise ValidationError(f"{entity.__name__}: {f.name} must be a number, got {value!r}")
            if not Decimal(str(value)).is_finite():
                raise ValidationError(f"{entity.__name__}: {f.name} must be finite")
            if value < 0:
                raise ValidationError(f"{entity.__name__}: {f.name} must not be negative")
        elif isinstance(f.default, int) and not isinstance(f.default, bool):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"{entity.__name__}: {f.name} must be a whole number, got {value!r}")
            if value < 0:
                raise ValidationError(f"{entity.__name__}: {f.name} must not be negative")
        elif f.name in DATE_FIELDS and value is not None and not isinstance(value, date):
            raise ValidationError(f"{entity.__name__}: {_label(f.name)} must be a date, got {value!r}")

    if isinstance(record, Loan) and record.installments < 1:
        raise ValidationError("Loan: installment count must be at least 1")
    if isinstance(record, Consortium) and record.total_installments < 1:
        raise ValidationError("Consortium: total installments must be at least 1")
    if isinstance(record, Installment) and record.sequence < 1:
        raise ValidationError("Installment: sequence must be at least 1")


def run_mutation(action: str, operation: Callable[[], T]) -> MutationResult[T]:
    """Run a mutation, turning library exceptions into a failed result."""
    try:
        data = operation()
    except ValidationError as exc:
        return MutationResult.fail(str(exc), ErrorKind.VALIDATION)
    except EntityNotFoundError as exc:
        return MutationResult.fail(str(exc), ErrorKind.REFERENCE)
    except BackendNotConfiguredError as exc:
        return MutationResult.fail(str(exc), ErrorKind.NOT_CONFIGURED)
    except BackendError as exc:
        logger.error("%s failed: %s", action, exc)
        return MutationResult.fail(str(exc), ErrorKind.BACKEND)
    return MutationResult.ok(data)


def splice(items: list[T], stored: T, sort: Callable[[Iterable[T]], list[T]]) -> list[T]:
    """New collection with ``stored`` replacing any record with the same id."""
    return sort([item for item in items if item.id != stored.id] + [stored])


def merge(items: list[T], updates: list[T], sort: Callable[[Iterable[T]], list[T]]) -> list[T]:
    by_id = {item.id: item for item in updates}
    return sort(by_id.pop(item.id, item) for item in items)


class DataStore:
    """Session state for companies, loans, installments and consortiums.

    Every mutation validates before any I/O, calls the backend, and only on
    success replaces the affected collections with new lists. Records that a
    mutation does not touch keep their identity, and a failed mutation leaves
    every collection exactly as it was.

    Parameters
    ----------
    backend : StorageBackend
        Live or in-memory storage, selected once by ``create_backend``.
    today : Callable[[], date] | None
        Clock for installment statuses; defaults to the current date in
        ``timezone``.
    timezone : str
        Business timezone used when ``today`` is not given.
    """

    def __init__(
        self,
        backend: StorageBackend,
        today: Callable[[], date] | None = None,
        timezone: str = DEFAULT_TIMEZONE,
    ) -> None:
        self.backend = backend
        self.today = today or today_in(timezone)
        self.companies: list[Company] = []
        self.loans: list[Loan] = []
        self.installments: list[Installment] = []
        self.consortiums: list[Consortium] = []
        self.error: str | None = None
        self.loading = False

    @property
    def mode(self) -> BackendMode:
        return self.backend.mode

    @property
    def is_connected(self) -> bool:
        return self.backend.is_connected

    # Lookups

    def find_company(self, company_id: str) -> Company | None:
        return next((c for c in self.companies if c.id == company_id), None)

    def find_loan(self, loan_id: str) -> Loan | None:
        return next((loan for loan in self.loans if loan.id == loan_id), None)

    def find_installment(self, installment_id: str) -> Installment | None:
        return next((i for i in self.installments if i.id == installment_id), None)

    def find_consortium(self, consortium_id: str) -> Consortium | None:
        return next((c for c in self.consortiums if c.id == consortium_id), None)

    def installments_for(self, loan_id: str) -> list[Installment]:
        return [item for item in self.installments if item.loan_id == loan_id]

    # Loading

    def refresh(self) -> MutationResult[None]:
        """Reload every collection and bring statuses and loan counters up to date.

        A load failure sets ``error`` and leaves the collections untouched.
        Writing back normalized statuses and reconciled counters is
        best-effort: failures are logged and the normalized values are still
        shown.
        """
        self.loading = True
        try:
            companies = self.backend.companies.list()
            loans = self.backend.loans.list()
            installments = self.backend.installments.list()
            consortiums = self.backend.consortiums.list()
        except BackendError as exc:
            self.error = str(exc)
            logger.error("Failed to load data: %s", exc)
            return MutationResult.fail(str(exc), ErrorKind.BACKEND)
        finally:
            self.loading = False

        installments, changed_installments = normalize_statuses(installments, self.today())
        loans, changed_loans = reconcile_loans(loans, installments)
        self._write_back(changed_installments, changed_loans)

        self.companies = sort_companies(companies)
        self.loans = sort_loans(loans)
        self.installments = sort_installments(installments)
        self.consortiums = sort_consortiums(consortiums)
        self.error = None
        logger.info(
            "Loaded %d companies, %d loans, %d installments, %d consortiums",
            len(self.companies),
            len(self.loans),
            len(self.installments),
            len(self.consortiums),
        )
        return MutationResult.ok()

    def _write_back(self, installments: list[Installment], loans: list[Loan]) -> None:
        try:
            if installments:
                self.backend.installments.upsert_many(installments)
                logger.info("Updated status of %d installments", len(installments))
            if loans:
                self.backend.loans.upsert_many(loans)
                logger.info("Reconciled %d loans with their installments", len(loans))
        except BackendError as exc:
            logger.warning("Could not persist reconciled data: %s", exc)

    # Mutation plumbing

    def _run(self, action: str, operation: Callable[[], T]) -> MutationResult[T]:
        return run_mutation(action, operation)

    def _require_company(self, company_id: str) -> Company:
        company = self.find_company(company_id)
        if company is None:
            raise ReferentialIntegrityError(f"Company {company_id} not found")
        return company

    def _require_loan(self, loan_id: str) -> Loan:
        loan = self.find_loan(loan_id)
        if loan is None:
            raise ReferentialIntegrityError(f"Loan {loan_id} not found")
        return loan

    # Companies

    def save_company(self, company: Company) -> MutationResult[Company]:
        def operation() -> Company:
            validate_record(company)
            stored = self.backend.companies.upsert(company)
            self.companies = splice(self.companies, stored, sort_companies)
            return stored

        return self._run("save company", operation)

    def delete_company(self, company_id: str) -> MutationResult[None]:
        """Delete a company with its loans, their installments and its consortiums."""

        def operation() -> None:
            self._require_company(company_id)
            loan_ids = {loan.id for loan in self.loans if loan.company_id == company_id}
            installment_ids = [i.id for i in self.installments if i.loan_id in loan_ids]
            consortium_ids = [c.id for c in self.consortiums if c.company_id == company_id]

            self.backend.installments.delete_many(installment_ids)
            self.backend.loans.delete_many(sorted(loan_ids))
            self.backend.consortiums.delete_many(consortium_ids)
            self.backend.companies.delete(company_id)

            self.installments = [i for i in self.installments if i.loan_id not in loan_ids]
            self.loans = [loan for loan in self.loans if loan.id not in loan_ids]
            self.consortiums = [c for c in self.consortiums if c.company_id != company_id]
            self.companies = [c for c in self.companies if c.id != company_id]
            logger.info(
                "Deleted company %s with %d loans, %d installments, %d consortiums",
                company_id,
                len(loan_ids),
                len(installment_ids),
                len(consortium_ids),
            )

        return self._run("delete company", operation)

    # Loans

    def save_loan(self, loan: Loan) -> MutationResult[Loan]:
        """Create or update a loan.

        A loan not yet in the collection also gets its installment schedule.
        If the schedule cannot be stored, the new loan is removed again and
        the call fails.
        """

        def operation() -> Loan:
            validate_record(loan)
            self._require_company(loan.company_id)
            is_new = loan.id is None or self.find_loan(loan.id) is None

            stored = self.backend.loans.upsert(loan)
            if not is_new:
                self.loans = splice(self.loans, stored, sort_loans)
                return stored

            schedule = build_schedule(stored, self.today())
            try:
                created = self.backend.installments.upsert_many(schedule)
            except BackendError:
                self._discard_loan(stored)
                raise

            self.loans = splice(self.loans, stored, sort_loans)
            self.installments = sort_installments(self.installments + created)
            logger.info("Created loan %s with %d installments", stored.id, len(created))
            return stored

        return self._run("save loan", operation)

    def _discard_loan(self, loan: Loan) -> None:
        try:
            self.backend.loans.delete(loan.id)
        except BackendError as exc:
            logger.error("Could not remove loan %s after schedule failure: %s", loan.id, exc)

    def delete_loan(self, loan_id: str) -> MutationResult[None]:
        def operation() -> None:
            self._require_loan(loan_id)
            installment_ids = [i.id for i in self.installments if i.loan_id == loan_id]
            self.backend.installments.delete_many(installment_ids)
            self.backend.loans.delete(loan_id)
            self.installments = [i for i in self.installments if i.loan_id != loan_id]
            self.loans = [loan for loan in self.loans if loan.id != loan_id]

        return self._run("delete loan", operation)

    # Installments

    def save_installment(self, installment: Installment) -> MutationResult[Installment]:
        """Create or update an installment and reconcile its loan's counters."""

        def operation() -> Installment:
            validate_record(installment)
            self._require_loan(installment.loan_id)
            for other in self.installments_for(installment.loan_id):
                if other.sequence == installment.sequence and other.id != installment.id:
                    raise ValidationError(
                        f"Installment {installment.sequence} already exists for this loan"
                    )

            record = replace(installment, status=installment_status(installment, self.today()))
            stored = self.backend.installments.upsert(record)
            self.installments = splice(self.installments, stored, sort_installments)
            self._reconcile_parent(stored.loan_id)
            return stored

        return self._run("save installment", operation)

    def delete_installment(self, installment_id: str) -> MutationResult[None]:
        def operation() -> None:
            installment = self.find_installment(installment_id)
            if installment is None:
                raise EntityNotFoundError(f"Installment {installment_id} not found")
            self.backend.installments.delete(installment_id)
            self.installments = [i for i in self.installments if i.id != installment_id]
            self._reconcile_parent(installment.loan_id)

        return self._run("delete installment", operation)

    def _reconcile_parent(self, loan_id: str) -> None:
        loan = self.find_loan(loan_id)
        if loan is None:
            return
        updated = reconcile_loan(loan, self.installments)
        if updated is loan:
            return
        try:
            stored = self.backend.loans.upsert(updated)
        except BackendError as exc:
            logger.warning("Could not update counters of loan %s: %s", loan_id, exc)
            return
        self.loans = splice(self.loans, stored, sort_loans)

    def sync_installment_statuses(self) -> MutationResult[list[Installment]]:
        """Re-apply the automatic status rule and persist what changed."""

        def operation() -> list[Installment]:
            installments, changed = normalize_statuses(self.installments, self.today())
            _, changed_loans = reconcile_loans(self.loans, installments)
            self.backend.installments.upsert_many(changed)
            self.backend.loans.upsert_many(changed_loans)
            self.installments = merge(self.installments, changed, sort_installments)
            self.loans = merge(self.loans, changed_loans, sort_loans)
            logger.info("Synchronized %d installment statuses", len(changed))
            return changed

        return self._run("sync installment statuses", operation)

    # Consortiums

    def save_consortium(self, consortium: Consortium) -> MutationResult[Consortium]:
        def operation() -> Consortium:
            validate_record(consortium)
            self._require_company(consortium.company_id)
            stored = self.backend.consortiums.upsert(consortium)
            self.consortiums = splice(self.consortiums, stored, sort_consortiums)
            return stored

        return self._run("save consortium", operation)

    def delete_consortium(self, consortium_id: str) -> MutationResult[None]:
        def operation() -> None:
            if self.find_consortium(consortium_id) is None:
                raise EntityNotFoundError(f"Consortium {consortium_id} not found")
            self.backend.consortiums.delete(consortium_id)
            self.consortiums = [c for c in self.consortiums if c.id != consortium_id]

        return self._run("delete consortium", operation)

    # Reset

    def reset_data(self) -> MutationResult[None]:
        """Delete all data, children before parents.

        Local state is cleared only when every table was cleared. Tables
        already cleared on the backend before a failure stay cleared.
        """

        def operation() -> None:
            for store in (
                self.backend.installments,
                self.backend.consortiums,
                self.backend.loans,
                self.backend.companies,
            ):
                store.clear()
                logger.debug("Cleared %s", store.table)
            self.installments = []
            self.consortiums = []
            self.loans = []
            self.companies = []
            logger.info("All data reset")

        return self._run("reset data", operation)
