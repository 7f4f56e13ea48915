"""
Common value types shared by the cache and fetch ports.

These models are deliberately free of runtime dependencies on the resource
handlers so that backends and clients can import them without cycles.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Absent(Enum):
    """Marker type for a field that the resource type cannot provide."""

    ABSENT = "absent"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


#: Returned by ``Resource.get`` for fields with no compute routine.
ABSENT = _Absent.ABSENT


class CacheRecord(BaseModel):
    """A persisted value together with its absolute expiry (epoch seconds)."""

    data: Any = None
    expires_at: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= int(time.time())


@dataclass
class FetchResponse:
    """Result of a GET issued through a fetch client."""

    body: bytes
    mime_type: str
    status_code: Optional[int] = None
    url: Optional[str] = None
