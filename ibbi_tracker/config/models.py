"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Dict, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

DEFAULT_ORIGIN = "https://ibbi.gov.in"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)

# The site rejects requests that do not look like a desktop browser navigation
DEFAULT_BROWSER_HEADERS: Dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Encoding": "gzip, deflate, br",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Cache-Control": "max-age=0",
}


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


def _require_http_url(value: str) -> str:
    stripped = value.strip()
    parsed = urlparse(stripped)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"Must be an absolute http(s) URL, got '{value}'")
    return stripped


class SiteConfig(BaseModel):
    """Origin and source page URLs of the regulator's site."""

    origin: str = Field(DEFAULT_ORIGIN, description="Origin used to absolutize relative links")
    assignments_url: str = Field(
        f"{DEFAULT_ORIGIN}/resolution-plans", description="Assignments page"
    )
    announcements_url: str = Field(
        f"{DEFAULT_ORIGIN}/en/whats-new", description="Announcements page"
    )
    public_announcements_url: str = Field(
        f"{DEFAULT_ORIGIN}/en/public-announcement", description="Public announcements page"
    )

    @field_validator("origin")
    @classmethod
    def normalize_origin(cls, v: str) -> str:
        """Require an absolute URL and drop any trailing slash."""
        return _require_http_url(v).rstrip("/")

    @field_validator("assignments_url", "announcements_url", "public_announcements_url")
    @classmethod
    def validate_page_url(cls, v: str) -> str:
        return _require_http_url(v)


class HttpConfig(BaseModel):
    """HTTP client settings shared by every page fetch."""

    timeout: int = Field(30, ge=5, le=300, description="Request timeout in seconds")
    verify_tls: bool = Field(
        False,
        description="Verify TLS certificates (the site's chain does not validate everywhere)",
    )
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header")
    headers: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_BROWSER_HEADERS),
        description="Additional request headers",
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        """Strip whitespace from user agent."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class StorageConfig(BaseModel):
    """Where the per-kind text files and the run marker live."""

    data_dir: str = Field("data", min_length=1, description="Output directory")


class SheetConfig(BaseModel):
    """Published-CSV export of the hand-maintained spreadsheet."""

    export_url: Optional[str] = Field(None, description="Published CSV export URL")

    @field_validator("export_url")
    @classmethod
    def validate_export_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return _require_http_url(v)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )
    file: Optional[str] = Field(None, description="Also write logs to this file")

    # Defaults go through validation too, so they are stored as plain strings
    model_config = {"use_enum_values": True, "validate_default": True}


class AppConfig(BaseModel):
    """Root configuration object for the IBBI tracker."""

    site: SiteConfig = Field(default_factory=SiteConfig, description="Source site")
    http: HttpConfig = Field(default_factory=HttpConfig, description="HTTP client settings")
    storage: StorageConfig = Field(default_factory=StorageConfig, description="Output storage")
    sheet: SheetConfig = Field(default_factory=SheetConfig, description="Spreadsheet export")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
