"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        data_dir: Optional[str] = None,
        log_level: Optional[str] = None,
        sheet_export_url: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        self.data_dir = data_dir
        self.log_level = log_level
        self.sheet_export_url = sheet_export_url
        self.environment = environment or "production"


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional:
    - IBBI_DATA_DIR: Override storage.data_dir
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - GOOGLE_SHEET_CSV_URL: Override sheet.export_url
    - ENVIRONMENT: Deployment environment name attached to log records

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    data_dir = os.getenv("IBBI_DATA_DIR") or None
    log_level = os.getenv("LOG_LEVEL") or None
    sheet_export_url = os.getenv("GOOGLE_SHEET_CSV_URL") or None
    environment = os.getenv("ENVIRONMENT") or None

    if log_level:
        log_level = log_level.strip().upper()
        if log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    if sheet_export_url and not sheet_export_url.strip().lower().startswith(("http://", "https://")):
        errors.append(
            f"Invalid GOOGLE_SHEET_CSV_URL: '{sheet_export_url}'. Must be an http(s) URL."
        )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and adjust the values",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(
        data_dir=data_dir,
        log_level=log_level,
        sheet_export_url=sheet_export_url.strip() if sheet_export_url else None,
        environment=environment,
    )
