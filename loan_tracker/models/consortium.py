"""Consortium quota model."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class Consortium:
    """Consortium quota held by a company."""

    company_id: str = ""
    observation: str = ""  # Free-form label, e.g. the vehicle plate
    group_code: str = ""
    quota: str = ""
    administrator: str = ""
    category: str = ""
    current_installment_value: Decimal = Decimal("0")
    total_installments: int = 0
    credit_to_receive: Decimal = Decimal("0")
    outstanding_balance: Decimal = Decimal("0")
    amount_paid: Decimal = Decimal("0")
    amount_to_pay: Decimal = Decimal("0")
    installments_to_pay: int = 0
    paid_installments: int = 0
    id: str | None = None
