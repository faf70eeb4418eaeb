"""Loan and installment models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from loan_tracker.models.enums import InstallmentStatus, LoanStatus


@dataclass
class Loan:
    """Loan contract owned by a company."""

    company_id: str = ""
    reference: str = ""
    bank: str = ""
    total_value: Decimal = Decimal("0")
    start_date: date | None = None
    end_date: date | None = None
    status: LoanStatus = LoanStatus.ACTIVE
    operation: str = ""
    operation_number: str = ""
    upfront_value: Decimal = Decimal("0")
    financed_value: Decimal = Decimal("0")
    interest_value: Decimal = Decimal("0")
    installments: int = 0  # Number of installments in the contract
    installment_value: Decimal = Decimal("0")
    installment_value_no_interest: Decimal = Decimal("0")
    interest_per_installment: Decimal = Decimal("0")
    nominal_rate: Decimal = Decimal("0")  # Monthly, in percent
    effective_annual_rate: Decimal = Decimal("0")  # In percent
    paid_installments: int = 0
    remaining_installments: int = 0
    amount_paid: Decimal = Decimal("0")
    amount_to_pay: Decimal = Decimal("0")
    as_of_date: date | None = None
    contract_start: date | None = None
    id: str | None = None


@dataclass
class Installment:
    """Loan installment (parcela)."""

    loan_id: str = ""
    sequence: int = 0  # 1, 2, 3, ... unique within a loan
    due_date: date | None = None
    value: Decimal = Decimal("0")
    interest: Decimal = Decimal("0")
    status: InstallmentStatus = InstallmentStatus.PENDING
    id: str | None = None
