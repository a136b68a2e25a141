"""Data models for configuration management."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_BACKEND_URL = "http://localhost:5000"
COMPARE_PATH = "/api/ai/compareDocuments"


@dataclass
class RelaySettings:
    """
    Runtime settings of the relay and viewer.

    ``api_base_url`` is the backend the viewer calls directly; when unset
    it falls back to ``backend_url``, which the upload proxy uses.
    """
    backend_url: str = DEFAULT_BACKEND_URL
    api_base_url: Optional[str] = None
    max_file_size_mb: int = 50
    max_compare_files: int = 2
    request_timeout: float = 60.0
    connect_timeout: float = 10.0
    session_cookie_name: str = "access_token"
    home_url: str = "/"
    audit_enabled: bool = True
    audit_database_url: str = "sqlite:///./clause_compare_audit.db"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def proxy_endpoint(self) -> str:
        """Backend compare endpoint used by the upload proxy."""
        return f"{self.backend_url.rstrip('/')}{COMPARE_PATH}"

    @property
    def viewer_endpoint(self) -> str:
        """Backend compare endpoint used by the comparison viewer."""
        base = self.api_base_url or self.backend_url
        return f"{base.rstrip('/')}{COMPARE_PATH}"

    @property
    def max_file_size(self) -> int:
        """Maximum upload size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.message = message
        self.validation_result = validation_result
