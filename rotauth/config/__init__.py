"""
Config Module - Black Box Interface

Purpose: Supply platform, storage and logging settings
Interface: ConfigProvider, EnvConfigProvider
Hidden: Environment variable names and defaults

Can be replaced with any provider exposing the same three getters.
"""

from .provider import (
    ConfigProvider,
    EnvConfigProvider,
    LoggingConfig,
    PlatformConfig,
    StorageConfig,
)

__all__ = [
    "ConfigProvider",
    "EnvConfigProvider",
    "LoggingConfig",
    "PlatformConfig",
    "StorageConfig",
]
