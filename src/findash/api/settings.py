"""Settings for the simulated backend service."""

from dataclasses import dataclass, fields, replace
from datetime import date
from typing import Any

from findash.domain.entities import GenerationConfig
from findash.domain.errors import ValidationError
from findash.domain.query import PageSettings

_INTEGER_FIELDS = (
    "network_delay_ms",
    "delay_jitter_ms",
    "default_page_size",
    "min_page_size",
    "max_page_size",
    "simulation_seed",
)


@dataclass(frozen=True)
class ServiceSettings:
    """Latency/error simulation knobs and page size bounds.

    Attributes:
        network_delay_ms: Base simulated delay per request.
        delay_jitter_ms: Extra delay drawn uniformly from [0, jitter).
        error_rate: Probability in [0, 1] of a simulated server error.
        default_page_size: Page size used when a request omits one.
        min_page_size: Lower clamp for requested page sizes.
        max_page_size: Upper clamp for requested page sizes.
        simulation_seed: Seed for the delay/error draws.
        include_inactive: List inactive accounts when a request does not
            filter on the active flag.
    """

    network_delay_ms: int = 250
    delay_jitter_ms: int = 100
    error_rate: float = 0.02
    default_page_size: int = 50
    min_page_size: int = 10
    max_page_size: int = 100
    simulation_seed: int = 1
    include_inactive: bool = False

    def __post_init__(self):
        errors = {}
        for name in _INTEGER_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                errors[name] = "must be an integer"
        if isinstance(self.error_rate, bool) or not isinstance(self.error_rate, (int, float)):
            errors["error_rate"] = "must be a number"
        if not isinstance(self.include_inactive, bool):
            errors["include_inactive"] = "must be a boolean"
        # Range checks need well-typed values
        if errors:
            raise ValidationError(errors)

        if self.network_delay_ms < 0:
            errors["network_delay_ms"] = "must not be negative"
        if self.delay_jitter_ms < 0:
            errors["delay_jitter_ms"] = "must not be negative"
        if not 0 <= self.error_rate <= 1:
            errors["error_rate"] = "must be between 0 and 1"
        if not 1 <= self.min_page_size <= self.max_page_size:
            errors["min_page_size"] = "must be at least 1 and not above max_page_size"
        elif not self.min_page_size <= self.default_page_size <= self.max_page_size:
            errors["default_page_size"] = "must be between min_page_size and max_page_size"
        if errors:
            raise ValidationError(errors)

    @property
    def page_settings(self) -> PageSettings:
        return PageSettings(
            default_page_size=self.default_page_size,
            min_page_size=self.min_page_size,
            max_page_size=self.max_page_size,
        )

    def replace(self, **changes: Any) -> "ServiceSettings":
        """Return a copy with the given fields changed.

        Raises:
            ValidationError: If a field is unknown or a value is invalid
        """
        known = {f.name for f in fields(self)}
        unknown = {name: "unknown field" for name in changes if name not in known}
        if unknown:
            raise ValidationError(unknown)
        return replace(self, **changes)


DEFAULT_DATASET_SIZE = 1000
DEFAULT_SEED = 42
DEFAULT_DATE_RANGE = (date(2024, 1, 1), date(2024, 12, 31))


def default_generation_config() -> GenerationConfig:
    """Return the dataset config used when none is given."""
    return GenerationConfig(
        dataset_size=DEFAULT_DATASET_SIZE,
        date_range_start=DEFAULT_DATE_RANGE[0],
        date_range_end=DEFAULT_DATE_RANGE[1],
        include_vat=True,
        seed=DEFAULT_SEED,
    )
