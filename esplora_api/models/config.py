"""Client configuration using Pydantic models and settings."""

import re
from typing import Dict, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from esplora_api.errors import ConfigError

DEFAULT_USER_AGENT = "esplora-api-python/0.1.0"

# RFC 9110 token characters
HEADER_NAME_PATTERN = re.compile(r"^[!#$%&'*+.^_`|~0-9A-Za-z-]+$")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "text")


def _check_header_value(value: str) -> str:
    if "\r" in value or "\n" in value:
        raise ValueError("header values must not contain line breaks")
    try:
        value.encode("ascii")
    except UnicodeEncodeError:
        raise ValueError("header values must be ASCII") from None
    return value


class ClientOptions(BaseModel):
    """Optional transport settings for a client."""

    authorization: Optional[str] = Field(
        default=None,
        description="Value sent in the Authorization header"
    )
    headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers sent with every request"
    )
    timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Request timeout in seconds, no timeout when unset"
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header"
    )

    class Config:
        frozen = True

    @field_validator("authorization", "user_agent")
    @classmethod
    def validate_header_value(cls, v):
        if v is not None:
            _check_header_value(v)
        return v

    @field_validator("headers")
    @classmethod
    def validate_headers(cls, v):
        for name, value in v.items():
            if not HEADER_NAME_PATTERN.match(name):
                raise ValueError(f"invalid header name {name!r}")
            _check_header_value(value)
        return v

    def build_headers(self) -> Dict[str, str]:
        """Default headers for the transport."""
        headers = {"User-Agent": self.user_agent}
        headers.update(self.headers)
        if self.authorization is not None:
            headers["Authorization"] = self.authorization
        return headers


class ClientConfig(BaseModel):
    """Immutable configuration shared by both client flavours."""

    base_url: str = Field(..., description="Esplora API root, e.g. https://blockstream.info/api")
    options: ClientOptions = Field(default_factory=ClientOptions)

    class Config:
        frozen = True

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v):
        if not v or not v.strip():
            raise ValueError("base URL must not be empty")
        parts = urlsplit(v.strip())
        if parts.scheme not in ("http", "https"):
            raise ValueError("base URL must use the http or https scheme")
        if not parts.netloc or not parts.hostname:
            raise ValueError("base URL has no host")
        if parts.query or parts.fragment:
            raise ValueError("base URL must not carry a query or fragment")
        return v.strip().rstrip("/")

    @classmethod
    def create(cls, base_url: str, options: Optional[ClientOptions] = None) -> "ClientConfig":
        """Build a config, raising ``ConfigError`` on any invalid value."""
        try:
            return cls(base_url=base_url, options=options or ClientOptions())
        except ValidationError as e:
            raise ConfigError(f"Invalid client configuration: {e}") from e


class EsploraSettings(BaseSettings):
    """Settings read from the environment or a .env file (ESPLORA_ prefix)."""

    url: str = Field(default="https://blockstream.info/api", description="Esplora API base URL")
    authorization: Optional[str] = Field(default=None, description="Authorization header value")
    timeout: Optional[float] = Field(default=None, gt=0, description="Request timeout in seconds")

    # Logging Settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json|text)")
    log_file: Optional[str] = Field(default=None, description="Log file path")
    log_max_size_mb: int = Field(default=10, description="Max log file size in MB")
    log_backup_count: int = Field(default=5, description="Number of log backups")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "ESPLORA_"
        case_sensitive = False
        extra = "ignore"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        if v.upper() not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v.lower() not in LOG_FORMATS:
            raise ValueError(f"log format must be one of {', '.join(LOG_FORMATS)}")
        return v.lower()

    def client_options(self) -> ClientOptions:
        try:
            return ClientOptions(authorization=self.authorization, timeout=self.timeout)
        except ValidationError as e:
            raise ConfigError(f"Invalid client options: {e}") from e
