"""Upload and response parsers for the Clause Compare Relay."""

from .exceptions import (
    AuthenticationRequiredError,
    BackendUnavailableError,
    ComparisonRequestError,
    RelayError,
    ResponseFormatError,
    UploadValidationError,
)
from .response_parser import ComparisonResponseParser, parse_comparison_response
from .upload_parser import (
    BASELINE_FIELD,
    COMPARE_FIELD,
    DEFAULT_MAX_FILE_SIZE,
    UploadParser,
)

__all__ = [
    "AuthenticationRequiredError",
    "BackendUnavailableError",
    "ComparisonRequestError",
    "RelayError",
    "ResponseFormatError",
    "UploadValidationError",
    "ComparisonResponseParser",
    "parse_comparison_response",
    "BASELINE_FIELD",
    "COMPARE_FIELD",
    "DEFAULT_MAX_FILE_SIZE",
    "UploadParser",
]
