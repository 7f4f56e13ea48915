"""
Handlers for binary media: images, audio and video.

These are classified purely by mime type prefix; the body is never inspected.
"""

from __future__ import annotations

from typing import Any, Dict, List

from ..models.resource import ResourceType
from .base import FieldComputer, Resource


class MediaResource(Resource):
    """Base for handlers matched by a mime type prefix such as ``image/``."""

    MIME_PREFIX = ""
    LABEL = "Media"

    @classmethod
    def applies(cls, url: str, mime_type: str, body: bytes) -> bool:
        return bool(cls.MIME_PREFIX) and (mime_type or "").lower().startswith(cls.MIME_PREFIX)

    def _field_computers(self) -> Dict[str, FieldComputer]:
        computers = super()._field_computers()
        computers.update({"meta": self._compute_meta, "images": self._compute_images})
        return computers

    async def _compute_meta(self) -> Dict[str, Any]:
        return {
            "title": self.url,
            "description": f"{self.LABEL} from {self.url}",
            "author": "",
        }

    async def _compute_images(self) -> List[str]:
        return [self.default_thumbnail()]


class ImageResource(MediaResource):
    """An image; it serves as its own thumbnail."""

    RESOURCE_TYPE = ResourceType.IMAGE
    PRIORITY = 1
    MIME_PREFIX = "image/"
    LABEL = "Image"

    async def _compute_images(self) -> List[str]:
        return [self.url, self.default_thumbnail()]


class AudioResource(MediaResource):
    RESOURCE_TYPE = ResourceType.AUDIO
    PRIORITY = 1
    MIME_PREFIX = "audio/"
    LABEL = "Audio"


class VideoResource(MediaResource):
    RESOURCE_TYPE = ResourceType.VIDEO
    PRIORITY = 1
    MIME_PREFIX = "video/"
    LABEL = "Video"
