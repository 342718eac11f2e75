"""Request validation helpers.

Raw request values arrive as plain mappings. ``RequestValidator`` checks
each field, remembers every failure and raises a single ValidationError
listing all of them, so a request is never partially applied.
"""

import uuid
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from findash.domain.errors import ValidationError
from findash.utils.date_parser import parse_iso_date

MAX_SEARCH_LENGTH = 100


def is_valid_uuid(value: object) -> bool:
    """Return True for a canonical hyphenated UUID string."""
    if not isinstance(value, str):
        return False
    try:
        return str(uuid.UUID(value)) == value.lower()
    except ValueError:
        return False


class RequestValidator:
    """Collects field errors while reading a raw request mapping."""

    def __init__(self, params: Optional[Mapping[str, Any]], allowed: Iterable[str]):
        self.params = dict(params or {})
        self.errors: dict[str, str] = {}
        for key in self.params:
            if key not in allowed:
                self.errors[key] = "unknown field"

    def _value(self, name: str) -> Any:
        return self.params.get(name)

    def add_error(self, name: str, message: str) -> None:
        """Record an error unless the field already has one."""
        self.errors.setdefault(name, message)

    def integer(
        self,
        name: str,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
        message: Optional[str] = None,
    ) -> Optional[int]:
        """Read an optional integer field within bounds."""
        value = self._value(name)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            self.add_error(name, message or "must be an integer")
            return None
        if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
            if message is None:
                if maximum is None:
                    message = f"must be at least {minimum}"
                elif minimum is None:
                    message = f"must be at most {maximum}"
                else:
                    message = f"must be between {minimum} and {maximum}"
            self.add_error(name, message)
            return None
        return value

    def boolean(self, name: str) -> Optional[bool]:
        """Read an optional boolean field."""
        value = self._value(name)
        if value is None:
            return None
        if not isinstance(value, bool):
            self.add_error(name, "must be a boolean")
            return None
        return value

    def iso_date(self, name: str) -> Optional[date]:
        """Read an optional YYYY-MM-DD date (date objects pass through)."""
        value = self._value(name)
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return parse_iso_date(value)
        except ValueError:
            self.add_error(name, "must be a valid date in YYYY-MM-DD format")
            return None

    def uuid(self, name: str) -> Optional[str]:
        """Read an optional UUID string."""
        value = self._value(name)
        if value is None:
            return None
        if not is_valid_uuid(value):
            self.add_error(name, "must be a valid UUID")
            return None
        return value.lower()

    def text(self, name: str, max_length: int = MAX_SEARCH_LENGTH) -> Optional[str]:
        """Read an optional string no longer than max_length."""
        value = self._value(name)
        if value is None:
            return None
        if not isinstance(value, str):
            self.add_error(name, "must be a string")
            return None
        if len(value) > max_length:
            self.add_error(name, f"cannot exceed {max_length} characters")
            return None
        return value

    def choice(self, name: str, options: Mapping[str, Any]) -> Any:
        """Read an optional value that must be one of the option keys."""
        value = self._value(name)
        if value is None:
            return None
        key = getattr(value, "value", value)
        if not isinstance(key, str) or key not in options:
            self.add_error(name, f"must be one of {', '.join(options)}")
            return None
        return options[key]

    def raise_if_errors(self) -> None:
        """Raise ValidationError describing every collected failure."""
        if self.errors:
            raise ValidationError(self.errors)
