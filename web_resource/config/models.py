"""
Configuration models for web_resource.

Every section has usable defaults, so ``GlobalConfig()`` alone is a valid configuration.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..cache.backends import CacheBackendType


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """How the package logger writes records."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )


class FetchConfig(BaseModel):
    """Settings for the aiohttp fetch client."""

    total_timeout: float = Field(default=30.0, gt=0, description="Total request timeout in seconds")
    connect_timeout: float = Field(default=10.0, gt=0, description="Connection timeout in seconds")
    read_timeout: float = Field(default=20.0, gt=0, description="Socket read timeout in seconds")
    max_response_size: int = Field(
        default=10 * 1024 * 1024, gt=0, description="Maximum response size in bytes"
    )
    max_connections_per_host: int = Field(default=10, ge=1)
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; web-resource/1.0)",
        description="User-Agent header sent with every request",
    )


class ResourceSettings(BaseModel):
    """Settings for resource resolution."""

    ttl_seconds: int = Field(default=7200, ge=1, description="Lifetime of cached resource data")
    default_thumbnail: Optional[Path] = Field(
        default=None, description="Fallback thumbnail; the packaged image when unset"
    )
    namespace_prefix: str = Field(default="link_", description="Cache namespace prefix for fields")

    @field_validator("namespace_prefix")
    @classmethod
    def _non_empty_prefix(cls, value: str) -> str:
        if not value:
            raise ValueError("namespace_prefix must not be empty")
        return value


class CacheSettings(BaseModel):
    """Persistent cache backend selection."""

    backend: CacheBackendType = Field(default=CacheBackendType.MEMORY)
    max_size: int = Field(default=1000, ge=1, description="Memory backend entry limit")
    redis_url: str = Field(default="redis://localhost:6379")
    key_prefix: str = Field(default="webresource:")


class GlobalConfig(BaseModel):
    """Top-level configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    resource: ResourceSettings = Field(default_factory=ResourceSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
