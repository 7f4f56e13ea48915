"""
Registry of resource handler types and content classification.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Type, Union

from ..models.resource import ResourceType
from .base import Resource
from .generic import GenericResource
from .html import HtmlResource
from .media import AudioResource, ImageResource, VideoResource

logger = logging.getLogger(__name__)

HandlerType = Type[Resource]


class ResourceTypeRegistry:
    """
    Ordered registry of resource handlers (pluggable).

    ``classify()`` asks every registered handler whether it applies and picks
    the one with the highest ``PRIORITY``. Among handlers sharing the top
    priority, the one registered first wins. When nothing applies the
    fallback handler's type is returned.
    """

    def __init__(
        self,
        handlers: Iterable[HandlerType] = (),
        fallback: HandlerType = GenericResource,
    ) -> None:
        self._handlers: Dict[ResourceType, HandlerType] = {}
        self.fallback = fallback
        for handler in handlers:
            self.register(handler)

    def register(self, handler: HandlerType) -> None:
        """Register a handler; re-registering a type replaces it in place."""
        self._handlers[handler.RESOURCE_TYPE] = handler

    def unregister(self, resource_type: Union[ResourceType, str]) -> None:
        self._handlers.pop(ResourceType(resource_type), None)

    def get(self, resource_type: Union[ResourceType, str]) -> Optional[HandlerType]:
        """Return the handler class for ``resource_type``, or None if not registered."""
        resource_type = ResourceType(resource_type)
        if resource_type in self._handlers:
            return self._handlers[resource_type]
        if resource_type == self.fallback.RESOURCE_TYPE:
            return self.fallback
        return None

    def available(self) -> Dict[ResourceType, HandlerType]:
        return dict(self._handlers)

    def classify(self, url: str, mime_type: str, body: bytes) -> ResourceType:
        """
        Determine the resource type of a response.

        Args:
            url: Resource URL
            mime_type: Lower-cased mime type
            body: Raw response body

        Returns:
            The matching resource type, or the fallback type
        """
        best: Optional[HandlerType] = None
        for handler in self._handlers.values():
            if not handler.applies(url, mime_type, body):
                continue
            if best is None or handler.PRIORITY > best.PRIORITY:
                best = handler

        if best is None:
            logger.debug(f"No handler applies to {url} ({mime_type}), using fallback")
            return self.fallback.RESOURCE_TYPE
        return best.RESOURCE_TYPE


# Global default registry instance
resource_registry = ResourceTypeRegistry(
    [AudioResource, HtmlResource, ImageResource, VideoResource]
)


__all__ = [
    "ResourceTypeRegistry",
    "resource_registry",
]
