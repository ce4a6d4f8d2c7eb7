"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List
from urllib.parse import urlparse

from .models import DEFAULT_ORIGIN

KNOWN_SECTIONS = frozenset({"site", "http", "storage", "sheet", "logging"})

PAGE_URL_KEYS = ("assignments_url", "announcements_url", "public_announcements_url")


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for risky but valid settings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    unknown = sorted(str(key) for key in config_dict if key not in KNOWN_SECTIONS)
    if unknown:
        warning_messages.append(f"Unknown configuration sections will be ignored: {', '.join(unknown)}")

    http = config_dict.get("http", {})
    if isinstance(http, dict) and http.get("verify_tls") is False:
        warning_messages.append(
            "TLS certificate verification is disabled; responses are not authenticated"
        )

    site = config_dict.get("site", {})
    if isinstance(site, dict):
        origin = site.get("origin", DEFAULT_ORIGIN)
        origin_host = urlparse(str(origin)).netloc.lower()
        for key in PAGE_URL_KEYS:
            url = site.get(key)
            if isinstance(url, str) and urlparse(url).netloc.lower() != origin_host:
                warning_messages.append(
                    f"site.{key} ({url}) is outside the configured origin {origin}; "
                    "relative links will still resolve against the origin"
                )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
