"""Error types and functions showing how failures are raised, wrapped and inspected."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any


class NotFoundError(LookupError):
    """Raised when a requested item does not exist."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)


class ValidationError(ValueError):
    """Raised when a field holds an unacceptable value."""

    def __init__(self, field: str, message: str, text: str | None = None) -> None:
        self.field = field
        self.message = message
        super().__init__(text if text is not None else f"{field}: {message}")


class PanicRecoveredError(RuntimeError):
    """Raised when a guarded call fails and the failure is caught at a boundary."""


def load_user(user_id: int) -> None:
    """Load a user, raising NotFoundError for 0 and ValidationError for negatives."""
    if user_id == 0:
        raise NotFoundError("load user: not found") from NotFoundError()
    if user_id < 0:
        field, message = "id", "must be positive"
        raise ValidationError(
            field, message, f"load user: validation failed on {field}: {message}"
        )


def validate_age(age: int) -> None:
    """Reject a negative age."""
    if age < 0:
        raise ValidationError("Age", "must be non-negative")


def divide(a: float, b: float) -> float:
    """Divide floats, raising ZeroDivisionError when b is zero."""
    if b == 0:
        raise ZeroDivisionError("division by zero")
    return a / b


def divide_int(a: int, b: int) -> int:
    """Divide integers, truncating toward zero."""
    if b == 0:
        raise ZeroDivisionError("division by zero")
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def read_file(filename: str) -> None:
    """Always fail to read, raising an error that wraps the underlying cause."""
    cause = FileNotFoundError("file not found")
    raise FileNotFoundError(f"failed to read {filename}: {cause}") from cause


def recover_at_boundary(fn: Callable[[], Any]) -> Any:
    """Call fn; turn any exception it raises into PanicRecoveredError."""
    try:
        return fn()
    except Exception as exc:
        raise PanicRecoveredError(f"panic recovered: {exc}") from exc