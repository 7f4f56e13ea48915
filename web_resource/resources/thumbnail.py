"""
Fallback thumbnail shipped with the package.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..config.models import ResourceSettings

DEFAULT_THUMBNAIL = Path(__file__).with_name("defaultthumbnail.png")


def default_thumbnail(settings: Optional[ResourceSettings] = None) -> str:
    """Return the fallback thumbnail path, honouring ``settings.default_thumbnail``."""
    if settings is not None and settings.default_thumbnail is not None:
        return str(settings.default_thumbnail)
    return str(DEFAULT_THUMBNAIL)
