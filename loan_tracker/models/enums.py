"""Enumeration types for loan-tracker entities."""

from enum import Enum


class LoanStatus(str, Enum):
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"


class InstallmentStatus(str, Enum):
    PAID = "PAID"
    PENDING = "PENDING"
    OVERDUE = "OVERDUE"


class Role(str, Enum):
    MASTER = "MASTER"
    MANAGER = "MANAGER"
    FINANCE = "FINANCE"


class ConsortiumCategory(str, Enum):
    """Suggested consortium categories; free-form categories are also accepted."""

    VEHICLE = "VEHICLE"
    REAL_ESTATE = "REAL_ESTATE"
    SERVICES = "SERVICES"
    MACHINERY = "MACHINERY"
    OTHER = "OTHER"
