"""Custom exceptions for relaying comparisons."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(eq=False)
class RelayError(Exception):
    """
    Base exception for upload relay and comparison errors.

    The ``message`` is safe to show to the end user; ``details`` carries
    extra context for logs.

    Attributes:
        message: Human-readable error description.
        details: Additional error details.
    """
    message: str
    details: Optional[dict] = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


@dataclass(eq=False)
class UploadValidationError(RelayError):
    """
    Exception raised when an incoming upload is incomplete or too large.
    """


@dataclass(eq=False)
class ResponseFormatError(RelayError):
    """
    Exception raised when the backend payload does not have the expected shape.
    """


@dataclass(eq=False)
class BackendUnavailableError(RelayError):
    """
    Exception raised when the backend cannot be reached.

    Covers connection failures and timeouts; HTTP error statuses are not
    transport failures and are reported separately.
    """
    url: Optional[str] = None


@dataclass(eq=False)
class ComparisonRequestError(RelayError):
    """
    Exception raised when the backend rejects a comparison request.
    """
    status_code: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


@dataclass(eq=False)
class AuthenticationRequiredError(RelayError):
    """
    Exception raised when a viewer request carries no bearer token.
    """
