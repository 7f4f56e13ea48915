"""
Persistent cache backends for resource data.

Entries are addressed by a (namespace, key) pair, e.g. ``("link_meta",
sha1(url))``, and carry an absolute expiry timestamp. Every field of a resource
lives in its own namespace, so losing one entry never invalidates another.
"""

from __future__ import annotations

import copy
import json
import logging
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from ..exceptions import CacheError
from ..models.base import CacheRecord

try:
    import redis.asyncio as redis
    REDIS_AVAILABLE = True
except ImportError:
    redis = None  # type: ignore
    REDIS_AVAILABLE = False

logger = logging.getLogger(__name__)


class CacheBackendType(str, Enum):
    """Available persistent cache backends."""
    MEMORY = "memory"
    REDIS = "redis"


class CacheBackendInterface(ABC):
    """Persistent tier of the resource field lookup."""

    @abstractmethod
    async def get(self, namespace: str, key: str) -> Optional[CacheRecord]:
        """Get a live entry, or None if missing or expired."""
        pass

    @abstractmethod
    async def store(self, namespace: str, key: str, data: Any, expires_at: int) -> None:
        """Store ``data`` until the absolute timestamp ``expires_at``."""
        pass

    @abstractmethod
    async def get_all(
        self, key: str, fields: Iterable[str], namespace_prefix: str
    ) -> Dict[str, CacheRecord]:
        """
        Get every live entry for ``key`` among ``namespace_prefix + field``.

        Returns:
            Mapping of field name (without prefix) to its record; misses are omitted
        """
        pass

    @abstractmethod
    async def delete(self, namespace: str, key: str) -> bool:
        """Delete an entry."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Clear all entries."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None

    @staticmethod
    def _make_key(namespace: str, key: str) -> str:
        return f"{namespace}:{key}"


class MemoryCacheBackend(CacheBackendInterface):
    """Process-local backend; least recently used entries are evicted first."""

    def __init__(self, max_size: int = 1000):
        """
        Args:
            max_size: Entry limit before eviction starts
        """
        self.max_size = max_size
        self.cache: "OrderedDict[str, CacheRecord]" = OrderedDict()
        self.stats = {"hits": 0, "misses": 0, "stores": 0, "evictions": 0}

    def _lookup(self, full_key: str) -> Optional[CacheRecord]:
        record = self.cache.get(full_key)
        if record is None:
            self.stats["misses"] += 1
            return None

        if record.is_expired:
            del self.cache[full_key]
            self.stats["misses"] += 1
            return None

        self.cache.move_to_end(full_key)
        self.stats["hits"] += 1
        # Hand out copies so callers cannot mutate what is stored
        return CacheRecord(data=copy.deepcopy(record.data), expires_at=record.expires_at)

    async def get(self, namespace: str, key: str) -> Optional[CacheRecord]:
        return self._lookup(self._make_key(namespace, key))

    async def store(self, namespace: str, key: str, data: Any, expires_at: int) -> None:
        full_key = self._make_key(namespace, key)
        self.cache.pop(full_key, None)

        while len(self.cache) >= self.max_size and self.cache:
            self.cache.popitem(last=False)
            self.stats["evictions"] += 1

        self.cache[full_key] = CacheRecord(data=copy.deepcopy(data), expires_at=expires_at)
        self.stats["stores"] += 1

    async def get_all(
        self, key: str, fields: Iterable[str], namespace_prefix: str
    ) -> Dict[str, CacheRecord]:
        found: Dict[str, CacheRecord] = {}
        for field in fields:
            record = self._lookup(self._make_key(f"{namespace_prefix}{field}", key))
            if record is not None:
                found[field] = record
        return found

    async def delete(self, namespace: str, key: str) -> bool:
        return self.cache.pop(self._make_key(namespace, key), None) is not None

    async def clear(self) -> None:
        self.cache.clear()

    def __len__(self) -> int:
        return len(self.cache)


class RedisCacheBackend(CacheBackendInterface):
    """Backend storing JSON-encoded records in Redis, expiring them server-side."""

    def __init__(self, redis_url: str = "redis://localhost:6379",
                 key_prefix: str = "webresource:",
                 client: Optional[Any] = None):
        """
        Args:
            redis_url: Connection URL used when no client is given
            key_prefix: Prepended to every key this backend touches
            client: Pre-built ``redis.asyncio`` client (skips ``from_url``)
        """
        if client is None and not REDIS_AVAILABLE:
            raise ImportError("redis package is required for Redis backend")

        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self.redis_client: Optional[Any] = client

    async def _get_client(self) -> Any:
        """Return the client, connecting on first use."""
        if self.redis_client is None:
            self.redis_client = redis.from_url(self.redis_url)
        return self.redis_client

    def _prefixed(self, namespace: str, key: str) -> str:
        return f"{self.key_prefix}{self._make_key(namespace, key)}"

    def _decode(self, full_key: str, raw: Any) -> Optional[CacheRecord]:
        if raw is None:
            return None
        try:
            record = CacheRecord.model_validate(json.loads(raw))
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError, TypeError) as e:
            logger.warning(f"Ignoring malformed cache entry {full_key}: {e}")
            return None
        if record.is_expired:
            return None
        return record

    async def get(self, namespace: str, key: str) -> Optional[CacheRecord]:
        client = await self._get_client()
        full_key = self._prefixed(namespace, key)
        return self._decode(full_key, await client.get(full_key))

    async def store(self, namespace: str, key: str, data: Any, expires_at: int) -> None:
        if expires_at <= int(time.time()):
            return

        try:
            payload = json.dumps({"data": data, "expires_at": expires_at})
        except (TypeError, ValueError) as e:
            raise CacheError(f"Cannot serialize value for {namespace}: {e}") from e

        client = await self._get_client()
        await client.set(self._prefixed(namespace, key), payload, exat=expires_at)

    async def get_all(
        self, key: str, fields: Iterable[str], namespace_prefix: str
    ) -> Dict[str, CacheRecord]:
        field_list: List[str] = list(fields)
        if not field_list:
            return {}

        client = await self._get_client()
        full_keys = [self._prefixed(f"{namespace_prefix}{field}", key) for field in field_list]
        values = await client.mget(full_keys)

        found: Dict[str, CacheRecord] = {}
        for field, full_key, raw in zip(field_list, full_keys, values):
            record = self._decode(full_key, raw)
            if record is not None:
                found[field] = record
        return found

    async def delete(self, namespace: str, key: str) -> bool:
        client = await self._get_client()
        return bool(await client.delete(self._prefixed(namespace, key)))

    async def clear(self) -> None:
        client = await self._get_client()
        keys = await client.keys(f"{self.key_prefix}*")
        if keys:
            await client.delete(*keys)

    async def close(self) -> None:
        if self.redis_client is not None:
            await self.redis_client.aclose()
            self.redis_client = None


def create_cache_backend(backend_type: CacheBackendType = CacheBackendType.MEMORY,
                         **kwargs: Any) -> CacheBackendInterface:
    """
    Create a cache backend.

    Args:
        backend_type: Type of cache backend
        **kwargs: Backend-specific configuration

    Returns:
        Configured cache backend
    """
    if backend_type == CacheBackendType.MEMORY:
        return MemoryCacheBackend(max_size=kwargs.get("max_size", 1000))
    elif backend_type == CacheBackendType.REDIS:
        return RedisCacheBackend(
            redis_url=kwargs.get("redis_url", "redis://localhost:6379"),
            key_prefix=kwargs.get("key_prefix", "webresource:")
        )
    else:
        raise ValueError(f"Unsupported backend type: {backend_type}")
