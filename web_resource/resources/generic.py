"""
Fallback handler for resources no other handler claims.
"""

from __future__ import annotations

from typing import Any, Dict, List

from ..models.resource import ResourceType
from .base import FieldComputer, Resource


class GenericResource(Resource):
    """Resource of unknown type; only the URL itself is known about it."""

    RESOURCE_TYPE = ResourceType.GENERIC
    PRIORITY = 0

    def _field_computers(self) -> Dict[str, FieldComputer]:
        computers = super()._field_computers()
        computers.update({"meta": self._compute_meta, "images": self._compute_images})
        return computers

    async def _compute_meta(self) -> Dict[str, Any]:
        return {"title": self.url, "description": "", "author": ""}

    async def _compute_images(self) -> List[str]:
        return [self.default_thumbnail()]
