"""Company model."""

from dataclasses import dataclass


@dataclass
class Company:
    """Company that owns loans and consortium quotas."""

    name: str = ""
    nickname: str = ""
    tax_id: str = ""  # CNPJ, e.g. 12.345.678/0001-90
    address: str = ""
    id: str | None = None
