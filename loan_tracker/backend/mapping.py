"""Field mapping between domain records and backend rows.

Every table has a declarative ``TableMapping`` listing, per attribute, the
backend column and how its value is coerced. ``to_row`` and ``from_row`` are
inverses of each other for every record the store produces.
"""

from dataclasses import dataclass, fields
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable

from loan_tracker.exceptions import BackendError
from loan_tracker.models import (
    Company,
    Consortium,
    Installment,
    InstallmentStatus,
    Loan,
    LoanStatus,
    Role,
    UserProfile,
)


def to_decimal(value: Any) -> Decimal:
    """Coerce a numeric column; strings are parsed, anything else becomes 0."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return number if number.is_finite() else Decimal("0")


def to_int(value: Any) -> int:
    """Coerce an integer column; non-numeric or absent values become 0."""
    return int(to_decimal(value))


def to_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def to_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def to_text(value: Any) -> str:
    return "" if value is None else str(value)


def to_optional_text(value: Any) -> str | None:
    return None if value in (None, "") else str(value)


def serialize_value(value: Any) -> Any:
    """Serialize a value for a JSON request body."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class Column:
    """One attribute <-> column pair."""

    attr: str
    name: str
    parse: Callable[[Any], Any]
    writable: bool = True


@dataclass(frozen=True)
class TableMapping:
    """Mapping for one backend table."""

    table: str
    entity: type
    columns: tuple[Column, ...]
    order_by: str
    ascending: bool = True
    omit_empty: tuple[str, ...] = ("id",)

    def to_row(self, record: Any) -> dict[str, Any]:
        """Convert a record to a row payload; missing ids are left out."""
        row = {}
        for column in self.columns:
            if not column.writable:
                continue
            value = getattr(record, column.attr)
            if column.name in self.omit_empty and not value:
                continue
            row[column.name] = serialize_value(value)
        return row

    def from_row(self, row: dict[str, Any]) -> Any:
        """Build a record from a row, coercing every column.

        Raises
        ------
        BackendError
            If a date or timestamp column holds an unparsable value.
        """
        values = {}
        for column in self.columns:
            raw = row.get(column.name)
            try:
                values[column.attr] = column.parse(raw)
            except ValueError:
                raise BackendError(f"{self.table}.{column.name}: invalid value {raw!r}") from None
        return self.entity(**values)


def _enum(enum_cls: type[Enum], default: Enum) -> Callable[[Any], Enum]:
    def parse(value: Any) -> Enum:
        if value is None or value == "":
            return default
        try:
            return enum_cls(str(value).upper())
        except ValueError:
            return default

    return parse


COMPANIES = TableMapping(
    table="companies",
    entity=Company,
    columns=(
        Column("id", "id", to_optional_text),
        Column("name", "name", to_text),
        Column("nickname", "nickname", to_text),
        Column("tax_id", "cnpj", to_text),
        Column("address", "address", to_text),
    ),
    order_by="name",
)

LOANS = TableMapping(
    table="loans",
    entity=Loan,
    columns=(
        Column("id", "id", to_optional_text),
        Column("company_id", "company_id", to_text),
        Column("reference", "reference", to_text),
        Column("bank", "bank", to_text),
        Column("total_value", "total_value", to_decimal),
        Column("start_date", "start_date", to_date),
        Column("end_date", "end_date", to_date),
        Column("status", "status", _enum(LoanStatus, LoanStatus.ACTIVE)),
        Column("operation", "operation", to_text),
        Column("operation_number", "operation_number", to_text),
        Column("upfront_value", "upfront_value", to_decimal),
        Column("financed_value", "financed_value", to_decimal),
        Column("interest_value", "interest_value", to_decimal),
        Column("installments", "installments", to_int),
        Column("installment_value", "installment_value", to_decimal),
        Column("installment_value_no_interest", "installment_value_no_interest", to_decimal),
        Column("interest_per_installment", "interest_per_installment", to_decimal),
        Column("nominal_rate", "nominal_rate", to_decimal),
        Column("effective_annual_rate", "effective_annual_rate", to_decimal),
        Column("paid_installments", "paid_installments", to_int),
        Column("remaining_installments", "remaining_installments", to_int),
        Column("amount_paid", "amount_paid", to_decimal),
        Column("amount_to_pay", "amount_to_pay", to_decimal),
        Column("as_of_date", "as_of_date", to_date),
        Column("contract_start", "contract_start", to_date),
    ),
    order_by="start_date",
    ascending=False,
)

INSTALLMENTS = TableMapping(
    table="installments",
    entity=Installment,
    columns=(
        Column("id", "id", to_optional_text),
        Column("loan_id", "loan_id", to_text),
        Column("sequence", "sequence", to_int),
        Column("due_date", "date", to_date),
        Column("value", "value", to_decimal),
        Column("interest", "interest", to_decimal),
        Column("status", "status", _enum(InstallmentStatus, InstallmentStatus.PENDING)),
    ),
    order_by="sequence",
)

CONSORTIUMS = TableMapping(
    table="consortiums",
    entity=Consortium,
    columns=(
        Column("id", "id", to_optional_text),
        Column("company_id", "company_id", to_text),
        Column("observation", "observation", to_text),
        Column("group_code", "group_code", to_text),
        Column("quota", "quota", to_text),
        Column("administrator", "administrator", to_text),
        Column("category", "category", to_text),
        Column("current_installment_value", "current_installment_value", to_decimal),
        Column("total_installments", "total_installments", to_int),
        Column("credit_to_receive", "credit_to_receive", to_decimal),
        Column("outstanding_balance", "outstanding_balance", to_decimal),
        Column("amount_paid", "amount_paid", to_decimal),
        Column("amount_to_pay", "amount_to_pay", to_decimal),
        Column("installments_to_pay", "installments_to_pay", to_int),
        Column("paid_installments", "paid_installments", to_int),
    ),
    order_by="observation",
)

USER_PROFILES = TableMapping(
    table="user_profiles",
    entity=UserProfile,
    columns=(
        Column("id", "id", to_optional_text),
        Column("user_id", "user_id", to_optional_text),
        Column("name", "name", to_text),
        Column("email", "email", to_text),
        Column("role", "role", _enum(Role, Role.MANAGER)),
        Column("created_at", "created_at", to_datetime, writable=False),
        Column("updated_at", "updated_at", to_datetime, writable=False),
    ),
    order_by="name",
    omit_empty=("id", "user_id"),
)

MAPPINGS: dict[str, TableMapping] = {
    mapping.table: mapping
    for mapping in (COMPANIES, LOANS, INSTALLMENTS, CONSORTIUMS, USER_PROFILES)
}


def mapping_for(entity: type) -> TableMapping:
    """Look up the mapping of an entity class."""
    for mapping in MAPPINGS.values():
        if mapping.entity is entity:
            return mapping
    raise KeyError(entity.__name__)


def attribute_names(entity: type) -> list[str]:
    """Dataclass attribute names of an entity, in declaration order."""
    return [f.name for f in fields(entity)]
