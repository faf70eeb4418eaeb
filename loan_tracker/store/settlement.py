"""Settlement: marking a loan or consortium as fully paid.

Settlement is a transformation of the record fed into the regular save
operation of the store; there is no separate state machine.
"""

from dataclasses import replace
from decimal import Decimal

from loan_tracker.models import Consortium, Loan, LoanStatus
from loan_tracker.result import MutationResult
from loan_tracker.store.data import DataStore

_ZERO = Decimal("0")


def settled_loan(loan: Loan) -> Loan:
    """Copy of ``loan`` with every installment paid and nothing left to pay."""
    return replace(
        loan,
        status=LoanStatus.FINISHED,
        paid_installments=loan.installments,
        remaining_installments=0,
        amount_paid=loan.amount_paid + loan.amount_to_pay,
        amount_to_pay=_ZERO,
    )


def settled_consortium(consortium: Consortium) -> Consortium:
    """Copy of ``consortium`` with its balance cleared."""
    return replace(
        consortium,
        installments_to_pay=0,
        amount_to_pay=_ZERO,
        outstanding_balance=_ZERO,
        paid_installments=consortium.total_installments,
    )


def settle_loan(store: DataStore, loan: Loan) -> MutationResult[Loan]:
    return store.save_loan(settled_loan(loan))


def settle_consortium(store: DataStore, consortium: Consortium) -> MutationResult[Consortium]:
    return store.save_consortium(settled_consortium(consortium))
