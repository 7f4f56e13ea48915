"""
Resource identity and classification models.

ResourceType is the closed set of handler variants. A ClassificationRecord is
what gets persisted under the ``link_basic`` namespace the first time a URL is
resolved; a ResourceIdentity is rebuilt on every resolution from the URL alone.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field

from ..utils.url import url_cache_key


class ResourceType(str, Enum):
    """Content categories a resource can be classified into."""

    HTML = "html"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    GENERIC = "generic"


@dataclass(frozen=True)
class ResourceIdentity:
    """
    Immutable identity of a resolved resource.

    Attributes:
        url: Normalized, validated URL
        cache_key: Deterministic hash of ``url`` used as the persistent cache key
        ttl_seconds: Lifetime of values this resource writes to the cache
        expiry_timestamp: Absolute expiry (epoch seconds) for those values
    """

    url: str
    cache_key: str
    ttl_seconds: int
    expiry_timestamp: int

    @classmethod
    def for_url(cls, url: str, ttl_seconds: int) -> ResourceIdentity:
        return cls(
            url=url,
            cache_key=url_cache_key(url),
            ttl_seconds=ttl_seconds,
            expiry_timestamp=int(time.time()) + ttl_seconds,
        )


class ClassificationRecord(BaseModel):
    """
    Classification of a URL, persisted once per URL.

    ``body`` holds the compressed, base64-encoded response body (see
    ``utils.text.encode_body``) and is emptied before the record is handed to
    a handler so the body is only ever read back through the ``basic`` field.
    """

    mime_type: str = ""
    body: str = ""
    url: str
    handler: ResourceType = Field(default=ResourceType.GENERIC)

    def without_body(self) -> ClassificationRecord:
        return self.model_copy(update={"body": ""})
