"""pt-BR presentation and form-input helpers.

Rounding happens here and nowhere else: amounts flow through the engine and
the store unrounded and are quantized only when rendered.
"""

import unicodedata
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

_CENTS = Decimal("0.01")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def format_currency(value: Any) -> str:
    """Format an amount as Brazilian reais, e.g. ``R$ 1.234,56``."""
    amount = _to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    integer, _, cents = f"{abs(amount):.2f}".partition(".")
    grouped = f"{int(integer):,}".replace(",", ".")
    return f"{sign}R$ {grouped},{cents}"


def format_date(value: date | str | None) -> str:
    """Format a date as ``dd/mm/yyyy``; accepts ISO strings."""
    if value is None or value == "":
        return ""
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime("%d/%m/%Y")


def format_percentage(value: Any) -> str:
    """Format a percentage with two decimals, e.g. ``1.25%``."""
    return f"{_to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)}%"


def parse_number(text: str) -> Decimal:
    """Parse a number typed into a form.

    Text containing a comma is read as pt-BR (``1.234,56``); anything else as a
    plain decimal (``1234.56``). Empty or invalid input parses to zero.
    """
    if not text or not text.strip():
        return Decimal("0")
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    sanitized = "".join(text.split())
    try:
        number = Decimal(sanitized)
    except InvalidOperation:
        return Decimal("0")
    return number if number.is_finite() else Decimal("0")


def parse_integer(text: str) -> int:
    """Parse a non-negative integer typed into a form."""
    number = parse_number(text).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return max(0, int(number))


def collation_key(text: str) -> str:
    """Accent- and case-insensitive sort key (pt-BR base sensitivity)."""
    decomposed = unicodedata.normalize("NFKD", text or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()
