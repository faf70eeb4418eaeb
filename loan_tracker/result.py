"""Discriminated success/failure result returned by every mutation."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Category of a failed mutation."""

    VALIDATION = "VALIDATION"
    REFERENCE = "REFERENCE"
    BACKEND = "BACKEND"
    NOT_CONFIGURED = "NOT_CONFIGURED"


@dataclass(frozen=True)
class MutationResult(Generic[T]):
    """Outcome of a store mutation.

    Mutations never raise for validation or backend failures; callers inspect
    ``success`` and read either ``data`` or ``error``.

    Usage::

        result = store.save_company(company)
        if result:
            print(result.data.id)
        else:
            print(result.error_kind, result.error)
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> "MutationResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, kind: ErrorKind = ErrorKind.BACKEND) -> "MutationResult[T]":
        return cls(success=False, error=error, error_kind=kind)

    def __bool__(self) -> bool:
        return self.success

    def unwrap(self) -> T:
        """Return the data, raising ``ValueError`` if the mutation failed."""
        if not self.success:
            raise ValueError(f"Mutation failed: {self.error}")
        return self.data
