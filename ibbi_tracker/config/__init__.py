"""Configuration management module for the IBBI tracker."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import apply_environment_overrides, load_config
from .models import (
    DEFAULT_BROWSER_HEADERS,
    DEFAULT_USER_AGENT,
    AppConfig,
    HttpConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    SheetConfig,
    SiteConfig,
    StorageConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "load_environment_config",
    "apply_environment_overrides",
    # Configuration models
    "AppConfig",
    "SiteConfig",
    "HttpConfig",
    "StorageConfig",
    "SheetConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Defaults
    "DEFAULT_USER_AGENT",
    "DEFAULT_BROWSER_HEADERS",
    # Exceptions
    "ConfigurationError",
]
