"""Discriminated results returned by every public core operation.

No exception crosses from the core into the presentation layer. An
operation returns either ``Success`` carrying its payload or ``Failure``
carrying a typed ``ErrorKind``, a summary message and optional
field-keyed validation messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Categories of operation failure."""

    VALIDATION = "validation"
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_SUSPENDED = "account_suspended"
    ACCOUNT_INACTIVE = "account_inactive"
    EMAIL_TAKEN = "email_taken"
    UNAUTHENTICATED = "unauthenticated"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    FORBIDDEN_SELF_DELETE = "forbidden_self_delete"
    CONFIGURATION = "configuration"
    STORE = "store"


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome with its payload."""

    value: T

    @property
    def ok(self) -> bool:
        """Always True."""
        return True


@dataclass(frozen=True)
class Failure:
    """Failed outcome.

    Attributes:
        kind: What went wrong.
        message: Human-readable summary, safe to show to the end user.
        errors: Field name to list of messages, for form validation.
    """

    kind: ErrorKind
    message: str
    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Always False."""
        return False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the error payload shape used by the HTTP layer."""
        return {
            "success": False,
            "error": self.kind.value,
            "message": self.message,
            "errors": self.errors,
        }


Result = Success[T] | Failure


def unauthenticated() -> Failure:
    """Failure for an operation that needs a logged-in user."""
    return Failure(ErrorKind.UNAUTHENTICATED, "Unauthorized")


def permission_denied(message: str = "Permission denied") -> Failure:
    """Failure for a missing permission."""
    return Failure(ErrorKind.PERMISSION_DENIED, message)


def not_found(message: str) -> Failure:
    """Failure for a missing record."""
    return Failure(ErrorKind.NOT_FOUND, message)


def store_failure(message: str) -> Failure:
    """Generic failure for an infrastructure error."""
    return Failure(ErrorKind.STORE, message)
