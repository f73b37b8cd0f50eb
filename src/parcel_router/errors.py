"""Custom exceptions for the parcel router."""

from __future__ import annotations


class ParcelRouterError(Exception):
    """Base error for routing failures."""


class JobRequestError(ParcelRouterError, ValueError):
    """Raised when a job request is invalid. Carries a short message for the console."""

    message = "Error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.message)
        self.detail = detail or self.message


class InvalidJobSizeError(JobRequestError):
    message = "Invalid job size"


class InvalidPostalCodeError(JobRequestError):
    message = "Invalid postal code"


class DuplicatePostalCodeError(JobRequestError):
    message = "Duplicate postal code"


class IllegalInputError(JobRequestError):
    message = "Illegal input"


class CatalogError(ParcelRouterError, ValueError):
    """Raised when the postal register source is malformed."""


class EngineStateError(ParcelRouterError, RuntimeError):
    """Raised when the route engine is driven out of protocol."""
