"""Identity and display ordering shared across models."""

import uuid
from datetime import date
from typing import Any, Iterable, TypeVar

from loan_tracker.formatters import collation_key
from loan_tracker.models.company import Company
from loan_tracker.models.consortium import Consortium
from loan_tracker.models.loan import Installment, Loan
from loan_tracker.models.user import UserProfile

T = TypeVar("T")


def new_id() -> str:
    """Opaque identifier for records created without a backend."""
    return str(uuid.uuid4())


def sort_companies(items: Iterable[Company]) -> list[Company]:
    return sorted(items, key=lambda c: collation_key(c.name))


def sort_loans(items: Iterable[Loan]) -> list[Loan]:
    """Most recent start date first; loans without a start date last."""
    return sorted(items, key=lambda loan: loan.start_date or date.min, reverse=True)


def sort_installments(items: Iterable[Installment]) -> list[Installment]:
    return sorted(items, key=lambda i: i.sequence)


def sort_consortiums(items: Iterable[Consortium]) -> list[Consortium]:
    return sorted(items, key=lambda c: collation_key(c.observation))


def sort_users(items: Iterable[UserProfile]) -> list[UserProfile]:
    return sorted(items, key=lambda u: collation_key(u.name))


_SORTERS: dict[type, Any] = {
    Company: sort_companies,
    Loan: sort_loans,
    Installment: sort_installments,
    Consortium: sort_consortiums,
    UserProfile: sort_users,
}


def sort_records(entity: type, items: Iterable[T]) -> list[T]:
    """Sort records of ``entity`` in display order."""
    return _SORTERS[entity](items)
