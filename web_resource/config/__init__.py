"""
Configuration management for web_resource.
"""

from .loader import ConfigLoader, load_config
from .models import (
    CacheSettings,
    FetchConfig,
    GlobalConfig,
    LoggingConfig,
    LogLevel,
    ResourceSettings,
)

__all__ = [
    "ConfigLoader",
    "load_config",
    "CacheSettings",
    "FetchConfig",
    "GlobalConfig",
    "LoggingConfig",
    "LogLevel",
    "ResourceSettings",
]
