"""Domain models for loan tracking."""

from loan_tracker.models.company import Company
from loan_tracker.models.consortium import Consortium
from loan_tracker.models.enums import ConsortiumCategory, InstallmentStatus, LoanStatus, Role
from loan_tracker.models.loan import Installment, Loan
from loan_tracker.models.user import UserProfile
from loan_tracker.models.base import (
    new_id,
    sort_companies,
    sort_consortiums,
    sort_installments,
    sort_loans,
    sort_records,
    sort_users,
)

__all__ = [
    "Company",
    "Consortium",
    "ConsortiumCategory",
    "Installment",
    "InstallmentStatus",
    "Loan",
    "LoanStatus",
    "Role",
    "UserProfile",
    "new_id",
    "sort_companies",
    "sort_consortiums",
    "sort_installments",
    "sort_loans",
    "sort_records",
    "sort_users",
]
