"""loan-tracker: corporate loans, consortium quotas and installment schedules."""

__version__ = "0.1.0"
