"""Configuration management for the Clause Compare Relay."""

from .config_manager import ENV_VARS, ConfigurationManager, load_settings
from .models import (
    COMPARE_PATH,
    DEFAULT_BACKEND_URL,
    ConfigurationError,
    RelaySettings,
    ValidationResult,
)

__all__ = [
    "ENV_VARS",
    "ConfigurationManager",
    "load_settings",
    "COMPARE_PATH",
    "DEFAULT_BACKEND_URL",
    "ConfigurationError",
    "RelaySettings",
    "ValidationResult",
]
