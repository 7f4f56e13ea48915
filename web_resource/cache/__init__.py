"""
Cache backends for web_resource.

A backend is the persistent tier of the resource lookup: every computed field
of a resource is written here under ``link_<field>`` keyed by the URL hash.
"""

from .backends import (
    CacheBackendInterface,
    CacheBackendType,
    MemoryCacheBackend,
    RedisCacheBackend,
    create_cache_backend,
)

__all__ = [
    "CacheBackendInterface",
    "CacheBackendType",
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "create_cache_backend",
]
