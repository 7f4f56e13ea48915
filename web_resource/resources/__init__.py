"""
Resource handlers and classification.

Use ``await Resource.instance(url, cache, client)`` to resolve a URL into the
handler that matches its content.
"""

from .base import FieldComputer, Resource, fetch_classification
from .generic import GenericResource
from .html import HtmlResource
from .media import AudioResource, ImageResource, MediaResource, VideoResource
from .registry import ResourceTypeRegistry, resource_registry
from .thumbnail import DEFAULT_THUMBNAIL, default_thumbnail

__all__ = [
    "Resource",
    "FieldComputer",
    "fetch_classification",
    "GenericResource",
    "HtmlResource",
    "MediaResource",
    "ImageResource",
    "AudioResource",
    "VideoResource",
    "ResourceTypeRegistry",
    "resource_registry",
    "DEFAULT_THUMBNAIL",
    "default_thumbnail",
]
