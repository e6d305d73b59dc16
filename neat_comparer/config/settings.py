"""
Configuration loader for the comparison library

Reads library settings from defaults, an optional YAML file and environment
variables (highest precedence), validating file contents against a JSON schema.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import jsonschema
import yaml

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""

    pass


# Environment variable names
CONFIG_FILE_ENV = "NEAT_COMPARER_CONFIG_FILE"
LOG_LEVEL_ENV = "NEAT_COMPARER_LOG_LEVEL"
REPORT_DIR_ENV = "NEAT_COMPARER_REPORT_DIR"
VALUE_PREVIEW_LENGTH_ENV = "NEAT_COMPARER_VALUE_PREVIEW_LENGTH"
REDACTED_PROPERTIES_ENV = "NEAT_COMPARER_REDACTED_PROPERTIES"

DEFAULTS: Dict[str, Any] = {
    "log_level": "WARNING",
    "report_dir": "comparison_reports",
    "value_preview_length": 80,
    "redacted_properties": [],
}

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

SETTINGS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "log_level": {"type": "string", "enum": LOG_LEVELS},
        "report_dir": {"type": "string", "minLength": 1},
        "value_preview_length": {"type": "integer", "minimum": 4},
        "redacted_properties": {"type": "array", "items": {"type": "string"}},
    },
    "additionalProperties": False,
}

_SETTINGS_CACHE: Optional["Settings"] = None


class Settings:
    """
    Library settings resolved from defaults, YAML file and environment.

    Attributes:
        log_level: Numeric logging level for library loggers
        log_level_name: Name of the logging level ("WARNING", ...)
        report_dir: Default output directory of DiffReporter
        value_preview_length: Maximum characters of a value rendered in logs/reports
        redacted_properties: Property names whose values are masked in reports
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize settings.

        Args:
            config_path: YAML settings file, falls back to $NEAT_COMPARER_CONFIG_FILE

        Raises:
            ConfigurationError: If the file or an environment value is invalid
        """
        values = dict(DEFAULTS)

        config_path = config_path or os.getenv(CONFIG_FILE_ENV)
        if config_path:
            values.update(self._load_from_file(config_path))

        values.update(self._load_from_env())

        self.log_level_name: str = values["log_level"]
        self.log_level: int = logging.getLevelName(self.log_level_name)
        self.report_dir: str = values["report_dir"]
        self.value_preview_length: int = values["value_preview_length"]
        self.redacted_properties: List[str] = list(values["redacted_properties"])

    def is_redacted(self, property_name: str) -> bool:
        """Return True if values of the named property must be masked."""
        return property_name in self.redacted_properties

    @staticmethod
    def _load_from_file(config_path: str) -> Dict[str, Any]:
        """
        Load settings from a YAML file and validate them against SETTINGS_SCHEMA.

        Raises:
            ConfigurationError: If the file is missing, not valid YAML or fails validation
        """
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except FileNotFoundError as e:
            logger.error(f"Settings file not found: {config_path}")
            raise ConfigurationError(f"Settings file not found: {config_path}") from e
        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML in settings file: {e}")
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not content:
            logger.warning(f"Empty settings file: {config_path}")
            return {}

        try:
            jsonschema.validate(instance=content, schema=SETTINGS_SCHEMA)
        except jsonschema.ValidationError as e:
            logger.error(f"Settings file failed schema validation: {e.message}")
            raise ConfigurationError(f"Settings validation failed: {e.message}") from e

        logger.debug(f"Loaded settings from {config_path}")
        return content

    @staticmethod
    def _load_from_env() -> Dict[str, Any]:
        """
        Read settings overrides from environment variables.

        Raises:
            ConfigurationError: If a value cannot be parsed
        """
        values: Dict[str, Any] = {}

        log_level = os.getenv(LOG_LEVEL_ENV)
        if log_level:
            log_level = log_level.strip().upper()
            if log_level not in LOG_LEVELS:
                raise ConfigurationError(
                    f"{LOG_LEVEL_ENV} must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
                )
            values["log_level"] = log_level

        report_dir = os.getenv(REPORT_DIR_ENV)
        if report_dir:
            values["report_dir"] = report_dir

        preview_length = os.getenv(VALUE_PREVIEW_LENGTH_ENV)
        if preview_length:
            try:
                parsed = int(preview_length)
            except ValueError as e:
                raise ConfigurationError(
                    f"{VALUE_PREVIEW_LENGTH_ENV} must be an integer, got {preview_length!r}"
                ) from e
            if parsed < 4:
                raise ConfigurationError(f"{VALUE_PREVIEW_LENGTH_ENV} must be at least 4")
            values["value_preview_length"] = parsed

        redacted = os.getenv(REDACTED_PROPERTIES_ENV)
        if redacted is not None:
            values["redacted_properties"] = [
                name.strip() for name in redacted.split(",") if name.strip()
            ]

        return values


# Module-level convenience functions
def get_settings() -> Settings:
    """Get the cached Settings instance, loading it on first use."""
    global _SETTINGS_CACHE
    if _SETTINGS_CACHE is None:
        _SETTINGS_CACHE = Settings()
    return _SETTINGS_CACHE


def reset_settings() -> None:
    """Drop the cached Settings so the next get_settings() reloads them."""
    global _SETTINGS_CACHE
    _SETTINGS_CACHE = None
