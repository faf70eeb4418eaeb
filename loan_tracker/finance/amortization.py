"""Fixed-installment (PRICE) amortization math.

All functions are pure and work on unrounded ``Decimal`` values; callers round
only when presenting results (see ``loan_tracker.formatters``).
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from loan_tracker.exceptions import ValidationError

_HUNDRED = Decimal("100")
_ONE = Decimal("1")


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of a loan simulation."""

    installment_value: Decimal
    interest_per_installment: Decimal
    total_interest: Decimal
    total_amount: Decimal


def _as_decimal(value: Any, name: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{name} must be a number, got {value!r}") from None
    if not number.is_finite():
        raise ValidationError(f"{name} must be finite, got {value!r}")
    return number


def _as_count(value: Any, name: str) -> int:
    number = _as_decimal(value, name)
    if number != number.to_integral_value():
        raise ValidationError(f"{name} must be a whole number, got {value!r}")
    return int(number)


def installment_value(principal: Any, installments: Any, rate: Any) -> Decimal:
    """Fixed installment for ``principal`` over ``installments`` periods.

    Parameters
    ----------
    principal : Decimal | float | int
        Amount financed, must be positive.
    installments : int
        Number of periods, at least 1.
    rate : Decimal | float | int
        Periodic interest rate in percent (``1.25`` means 1.25% per period).

    Returns
    -------
    Decimal
        ``P * i / (1 - (1 + i) ** -n)`` with ``i = rate / 100``; ``P / n``
        when the rate is zero.

    Raises
    ------
    ValidationError
        If any input is non-numeric, non-finite or out of range.
    """
    p = _as_decimal(principal, "principal")
    n = _as_count(installments, "installments")
    r = _as_decimal(rate, "rate")

    if p <= 0:
        raise ValidationError(f"principal must be positive, got {p}")
    if n < 1:
        raise ValidationError(f"installments must be at least 1, got {n}")
    if r < 0:
        raise ValidationError(f"rate must not be negative, got {r}")

    if r == 0:
        return p / n

    i = r / _HUNDRED
    return p * i / (_ONE - (_ONE + i) ** -n)


def simulate_loan(principal: Any, installments: Any, rate: Any) -> SimulationResult:
    """Simulate a fixed-installment loan.

    Example
    -------
    >>> result = simulate_loan(100000, 24, "1.25")
    >>> round(result.installment_value, 2)
    Decimal('4848.66')
    """
    value = installment_value(principal, installments, rate)
    n = _as_count(installments, "installments")
    total_amount = value * n
    total_interest = total_amount - _as_decimal(principal, "principal")
    return SimulationResult(
        installment_value=value,
        interest_per_installment=total_interest / n,
        total_interest=total_interest,
        total_amount=total_amount,
    )


def financed_value(amount: Any, upfront: Any = 0) -> Decimal:
    """Amount left to finance after a down payment."""
    return _as_decimal(amount, "amount") - _as_decimal(upfront, "upfront")


def effective_annual_rate(monthly_rate: Any) -> Decimal:
    """Compound a monthly percentage rate into an annual percentage rate."""
    r = _as_decimal(monthly_rate, "monthly_rate")
    if r < 0:
        raise ValidationError(f"monthly_rate must not be negative, got {r}")
    return ((_ONE + r / _HUNDRED) ** 12 - _ONE) * _HUNDRED
