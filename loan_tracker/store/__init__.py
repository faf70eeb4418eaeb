"""Session state: loan data, settlement and users."""

from loan_tracker.store.data import DataStore, run_mutation, validate_record
from loan_tracker.store.settlement import settle_consortium, settle_loan, settled_consortium, settled_loan
from loan_tracker.store.users import UserStore, validate_profile

__all__ = [
    "DataStore",
    "UserStore",
    "run_mutation",
    "settle_consortium",
    "settle_loan",
    "settled_consortium",
    "settled_loan",
    "validate_profile",
    "validate_record",
]
