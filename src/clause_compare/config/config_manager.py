"""Configuration Manager implementation for the Clause Compare Relay.

Settings are resolved in increasing priority from built-in defaults, an
optional JSON file, an optional ``.env`` file and the process environment.
"""

import json
import logging
import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from dotenv import dotenv_values

from .models import ConfigurationError, RelaySettings, ValidationResult

logger = logging.getLogger(__name__)

# Environment variable -> RelaySettings field
ENV_VARS: Dict[str, str] = {
    "BACKEND_URL": "backend_url",
    "API_BASE_URL": "api_base_url",
    "COMPARE_MAX_FILE_SIZE_MB": "max_file_size_mb",
    "COMPARE_MAX_COMPARE_FILES": "max_compare_files",
    "COMPARE_REQUEST_TIMEOUT": "request_timeout",
    "COMPARE_CONNECT_TIMEOUT": "connect_timeout",
    "COMPARE_SESSION_COOKIE": "session_cookie_name",
    "COMPARE_HOME_URL": "home_url",
    "COMPARE_AUDIT_ENABLED": "audit_enabled",
    "COMPARE_AUDIT_DATABASE_URL": "audit_database_url",
    "LOG_LEVEL": "log_level",
    "COMPARE_HOST": "host",
    "COMPARE_PORT": "port",
}

CONFIG_FILE_ENV = "COMPARE_CONFIG_FILE"

_INT_FIELDS = {"max_file_size_mb", "max_compare_files", "port"}
_FLOAT_FIELDS = {"request_timeout", "connect_timeout"}
_BOOL_FIELDS = {"audit_enabled"}
_URL_FIELDS = {"backend_url", "api_base_url"}
_VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
_TRUTHY = {"1", "true", "yes", "y", "on"}
_FALSY = {"0", "false", "no", "n", "off"}


class ConfigurationManager:
    """
    Manager for relay configuration.

    Handles loading, validation, and access to the runtime settings.
    """

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        env_file: Optional[Union[str, Path]] = ".env",
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize the configuration manager.

        Args:
            config_file: Optional JSON settings file. Falls back to the
                ``COMPARE_CONFIG_FILE`` environment variable.
            env_file: Optional ``.env`` file; ignored if it does not exist.
            environ: Environment mapping, defaults to ``os.environ``.
        """
        self._environ = dict(os.environ if environ is None else environ)
        config_file = config_file or self._environ.get(CONFIG_FILE_ENV)
        self._config_file = Path(config_file) if config_file else None
        self._env_file = Path(env_file) if env_file else None
        self._values: Dict[str, Any] = {}
        self._settings = RelaySettings()
        self._is_loaded = False

    @property
    def settings(self) -> RelaySettings:
        """Get the current settings."""
        return self._settings

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._is_loaded

    def load(self) -> RelaySettings:
        """
        Resolve settings from every configured source.

        Returns:
            The validated RelaySettings.

        Raises:
            ConfigurationError: If any source holds an invalid value.
        """
        result = ValidationResult(is_valid=True)

        if self._config_file is not None:
            result = result.merge(self.load_from_file(self._config_file, apply=False))

        if self._env_file is not None and self._env_file.exists():
            dotenv_env = {k: v for k, v in dotenv_values(self._env_file).items() if v is not None}
            result = result.merge(self.load_from_environment(dotenv_env, apply=False))

        result = result.merge(self.load_from_environment(self._environ, apply=False))

        if not result.is_valid:
            raise ConfigurationError(
                "Relay configuration validation failed",
                validation_result=result
            )

        for warning in result.warnings:
            logger.warning(warning)

        self._apply()
        return self._settings

    def load_from_dict(self, data: Dict[str, Any], apply: bool = True) -> ValidationResult:
        """
        Load settings from a dictionary keyed by RelaySettings field names.

        Args:
            data: Raw settings values.
            apply: Apply the values to ``settings`` immediately.

        Returns:
            ValidationResult indicating success or failure with details.

        Raises:
            ConfigurationError: If validation fails and ``apply`` is set.
        """
        result = ValidationResult(is_valid=True)
        known = {f.name for f in fields(RelaySettings)}
        values: Dict[str, Any] = {}

        for key, raw in data.items():
            if key not in known:
                result.add_warning(f"Unknown configuration key ignored: '{key}'")
                continue
            value_result, value = self._validate_value(key, raw)
            result = result.merge(value_result)
            if value_result.is_valid:
                values[key] = value

        if apply and not result.is_valid:
            raise ConfigurationError(
                "Relay configuration validation failed",
                validation_result=result
            )

        self._values.update(values)
        if apply:
            self._apply()
        return result

    def load_from_file(self, path: Union[str, Path], apply: bool = True) -> ValidationResult:
        """Load settings from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in configuration file {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must hold a JSON object: {path}")

        return self.load_from_dict(data, apply=apply)

    def load_from_environment(
        self,
        environ: Mapping[str, str],
        apply: bool = True,
    ) -> ValidationResult:
        """Load settings from environment-style variables (see ``ENV_VARS``)."""
        data = {
            field_name: environ[var]
            for var, field_name in ENV_VARS.items()
            if var in environ and environ[var] != ""
        }
        return self.load_from_dict(data, apply=apply)

    def _validate_value(self, key: str, raw: Any) -> tuple[ValidationResult, Any]:
        """Validate and coerce a single settings value."""
        result = ValidationResult(is_valid=True)
        prefix = f"Setting '{key}'"
        value = raw

        if key in _BOOL_FIELDS:
            if isinstance(raw, bool):
                value = raw
            elif str(raw).strip().lower() in _TRUTHY:
                value = True
            elif str(raw).strip().lower() in _FALSY:
                value = False
            else:
                result.add_error(f"{prefix}: expected a boolean, got {raw!r}")
        elif key in _INT_FIELDS:
            try:
                value = int(raw)
            except (TypeError, ValueError):
                result.add_error(f"{prefix}: expected an integer, got {raw!r}")
            else:
                if value <= 0:
                    result.add_error(f"{prefix}: must be positive")
                elif key == "max_compare_files" and value > 2:
                    result.add_error(f"{prefix}: at most 2 compared documents are supported")
        elif key in _FLOAT_FIELDS:
            try:
                value = float(raw)
            except (TypeError, ValueError):
                result.add_error(f"{prefix}: expected a number, got {raw!r}")
            else:
                if value <= 0:
                    result.add_error(f"{prefix}: must be positive")
        else:
            if raw is None and key == "api_base_url":
                return result, None
            if not isinstance(raw, str) or not raw.strip():
                result.add_error(f"{prefix}: must be a non-empty string")
                return result, None
            value = raw.strip()

            if key in _URL_FIELDS and not value.startswith(("http://", "https://")):
                result.add_error(f"{prefix}: must be an http(s) URL")
            elif key == "log_level":
                value = value.upper()
                if value not in _VALID_LOG_LEVELS:
                    result.add_error(f"{prefix}: must be one of {_VALID_LOG_LEVELS}")

        return result, value

    def _apply(self) -> None:
        self._settings = RelaySettings(**self._values)
        self._is_loaded = True

    def reset(self) -> None:
        """Reset to default settings."""
        self._values = {}
        self._settings = RelaySettings()
        self._is_loaded = False

    def to_dict(self) -> Dict[str, Any]:
        """Export the current settings as a dictionary."""
        return self._settings.to_dict()


def load_settings(config_file: Optional[Union[str, Path]] = None) -> RelaySettings:
    """Load settings from the default sources."""
    return ConfigurationManager(config_file=config_file).load()
