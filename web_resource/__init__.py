"""
Lazily populated, cache-backed web resources.

This package resolves a URL into a typed resource (HTML page, image, audio,
video or generic file) and exposes derived fields such as ``meta``, ``images``
and ``feeds``. Each field is computed on first demand and cached both on the
instance and in a pluggable persistent cache.

Features:
- Async API built on AIOHTTP with pooled sessions
- Content classification through a priority-ordered handler registry
- Per-field caching with partial-hit merging for batched lookups
- In-memory and Redis cache backends
- Configuration with Pydantic, overridable through environment variables

Example:
    ```python
    from web_resource import AiohttpFetchClient, MemoryCacheBackend, Resource

    async with AiohttpFetchClient() as client:
        resource = await Resource.instance("example.com", MemoryCacheBackend(), client)
        meta = await resource.get("meta")
    ```
"""

from .cache import (
    CacheBackendInterface,
    CacheBackendType,
    MemoryCacheBackend,
    RedisCacheBackend,
    create_cache_backend,
)
from .config import (
    CacheSettings,
    ConfigLoader,
    FetchConfig,
    GlobalConfig,
    LoggingConfig,
    ResourceSettings,
    load_config,
)
from .exceptions import (
    BadFieldRequestError,
    BadRequestError,
    CacheError,
    FetchFailedError,
    InvalidURLError,
    UnhandledResourceTypeError,
    WebResourceError,
)
from .http import AiohttpFetchClient, FetchClient
from .models import (
    ABSENT,
    CacheRecord,
    ClassificationRecord,
    FetchResponse,
    ResourceIdentity,
    ResourceType,
)
from .resources import (
    AudioResource,
    GenericResource,
    HtmlResource,
    ImageResource,
    Resource,
    ResourceTypeRegistry,
    VideoResource,
    default_thumbnail,
    resource_registry,
)

__version__ = "0.1.0"

__all__ = [
    # Resources
    "Resource",
    "GenericResource",
    "HtmlResource",
    "ImageResource",
    "AudioResource",
    "VideoResource",
    "ResourceTypeRegistry",
    "resource_registry",
    "default_thumbnail",
    # Models
    "ABSENT",
    "CacheRecord",
    "ClassificationRecord",
    "FetchResponse",
    "ResourceIdentity",
    "ResourceType",
    # Ports
    "FetchClient",
    "AiohttpFetchClient",
    "CacheBackendInterface",
    "CacheBackendType",
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "create_cache_backend",
    # Configuration
    "GlobalConfig",
    "FetchConfig",
    "ResourceSettings",
    "CacheSettings",
    "LoggingConfig",
    "ConfigLoader",
    "load_config",
    # Exceptions
    "WebResourceError",
    "BadRequestError",
    "InvalidURLError",
    "BadFieldRequestError",
    "UnhandledResourceTypeError",
    "FetchFailedError",
    "CacheError",
]
