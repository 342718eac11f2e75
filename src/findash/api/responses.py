"""Result values returned across the service boundary."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


def utc_now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(timezone.utc)


class ApiErrorKind(str, Enum):
    """Machine-readable error categories."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    SERVER_ERROR = "SERVER_ERROR"
    PROCESSING_ERROR = "PROCESSING_ERROR"


@dataclass(frozen=True)
class ApiError:
    """Tagged error value."""

    kind: ApiErrorKind
    message: str
    details: Optional[dict[str, Any]] = None
    timestamp: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """Either ``data`` or ``error`` is set, never both."""

    data: Optional[T] = None
    error: Optional[ApiError] = None
    timestamp: datetime = field(default_factory=utc_now)

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, data: T) -> "ApiResponse[T]":
        """Wrap a successful result."""
        return cls(data=data)

    @classmethod
    def fail(
        cls,
        kind: ApiErrorKind,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> "ApiResponse[T]":
        """Wrap an error of the given kind."""
        return cls(error=ApiError(kind=kind, message=message, details=details))
