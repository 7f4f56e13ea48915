"""
Exception hierarchy for the web_resource library.

Every error raised by the library derives from WebResourceError so callers can
catch library failures with a single except clause. Unsupported fields are not
errors: they resolve to the ABSENT sentinel instead.
"""

from __future__ import annotations

from typing import Any, Optional

from .models.resource import ResourceType


class WebResourceError(Exception):
    """
    Base exception for all resource resolution operations.

    Attributes:
        message: Human-readable error message
        url: URL that caused the error (if applicable)
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, url: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.details = kwargs


class BadRequestError(WebResourceError):
    """Raised when the caller supplied malformed input."""

    pass


class InvalidURLError(BadRequestError):
    """Raised when a URL fails normalization or validation."""

    pass


class BadFieldRequestError(BadRequestError):
    """Raised when a field name is not a plain alphabetic identifier."""

    def __init__(self, message: str, field: Any = None, url: Optional[str] = None) -> None:
        super().__init__(message, url)
        self.field = field


class UnhandledResourceTypeError(WebResourceError):
    """
    Raised when a classification names a resource type with no registered handler.

    Classification always falls back to the generic handler, so this only
    surfaces when a handler was unregistered after its records were cached.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        resource_type: Optional[ResourceType] = None,
    ) -> None:
        super().__init__(message, url)
        self.resource_type = resource_type


class FetchFailedError(WebResourceError):
    """Raised when a resource could not be retrieved."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, url)
        self.status_code = status_code


class CacheError(WebResourceError):
    """Raised when a cache backend cannot serialize or persist an entry."""

    pass


__all__ = [
    "WebResourceError",
    "BadRequestError",
    "InvalidURLError",
    "BadFieldRequestError",
    "UnhandledResourceTypeError",
    "FetchFailedError",
    "CacheError",
]
