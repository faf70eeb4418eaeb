"""Custom exception hierarchy for loan-tracker."""


class LoanTrackerError(Exception):
    """Base exception for all loan-tracker errors."""


class ValidationError(LoanTrackerError):
    """Raised when input fails validation before any I/O is attempted."""


class EntityNotFoundError(LoanTrackerError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class ConfigurationError(LoanTrackerError):
    """Raised when configuration is invalid or missing."""


class BackendNotConfiguredError(ConfigurationError):
    """Raised when an operation needs backend credentials that are not set."""


class BackendError(LoanTrackerError):
    """Raised when a backend call fails (network, constraint, HTTP error)."""


class AuthError(BackendError):
    """Raised when the authentication service rejects a request."""
