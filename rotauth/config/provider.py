"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

DEFAULT_GUEST_TOKEN_URL = "https://api.twitter.com/1.1/guest/activate.json"


@dataclass
class PlatformConfig:
    """Platform authentication configuration."""
    auth_token: str
    guest_token_url: str
    request_timeout: float
    bootstrap_csrf_token: Optional[str] = None
    bootstrap_cookie: Optional[str] = None

    @property
    def bootstrap_record(self) -> Optional[Dict[str, str]]:
        """Credential record to use before the first rotation, if configured."""
        if self.bootstrap_csrf_token and self.bootstrap_cookie:
            return {"csrf_token": self.bootstrap_csrf_token, "cookie": self.bootstrap_cookie}
        return None


@dataclass
class StorageConfig:
    """Credential store configuration."""
    redis_url: str
    credentials_key: str


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_platform_config(self) -> PlatformConfig:
        """Get platform authentication configuration."""
        ...

    def get_storage_config(self) -> StorageConfig:
        """Get credential store configuration."""
        ...

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_platform_config(self) -> PlatformConfig:
        """Get platform configuration from environment variables."""
        # The shared token is required - there is no anonymous fallback
        auth_token = os.getenv("PLATFORM_AUTH_TOKEN")
        if not auth_token:
            raise ValueError(
                "PLATFORM_AUTH_TOKEN environment variable is required. "
                "Set it to the platform's application bearer token (without the 'Bearer ' prefix)."
            )

        return PlatformConfig(
            auth_token=auth_token.strip(),
            guest_token_url=os.getenv("GUEST_TOKEN_URL", DEFAULT_GUEST_TOKEN_URL),
            request_timeout=float(os.getenv("HTTP_TIMEOUT", "10")),
            bootstrap_csrf_token=os.getenv("BOOTSTRAP_CSRF_TOKEN") or None,
            bootstrap_cookie=os.getenv("BOOTSTRAP_COOKIE") or None,
        )

    def get_storage_config(self) -> StorageConfig:
        """Get credential store configuration from environment variables."""
        return StorageConfig(
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            credentials_key=os.getenv("CREDENTIALS_KEY", "auth:credentials"),
        )

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration from environment variables."""
        return LoggingConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
