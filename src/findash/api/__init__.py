"""Async service facade for findash."""

from findash.api.responses import ApiError, ApiErrorKind, ApiResponse
from findash.api.service import LedgerService, ServiceState
from findash.api.settings import ServiceSettings, default_generation_config

__all__ = [
    "ApiError",
    "ApiErrorKind",
    "ApiResponse",
    "LedgerService",
    "ServiceState",
    "ServiceSettings",
    "default_generation_config",
]
