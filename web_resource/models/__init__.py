"""
Data models for web_resource.
"""

from .base import ABSENT, CacheRecord, FetchResponse
from .resource import ClassificationRecord, ResourceIdentity, ResourceType

__all__ = [
    "ABSENT",
    "CacheRecord",
    "FetchResponse",
    "ClassificationRecord",
    "ResourceIdentity",
    "ResourceType",
]
