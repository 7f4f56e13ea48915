"""
URL canonicalization for resources.

Resources are identified by their normalized URL, so normalization must be
stable: the same input always yields the same string, and therefore the same
cache key.
"""

from __future__ import annotations

import hashlib
import ipaddress
import re
from urllib.parse import urlsplit, urlunsplit

_DEFAULT_PORTS = {"http": 80, "https": 443}


class URLValidator:
    """Canonicalize and validate resource URLs (http and https only)."""

    VALID_SCHEMES = frozenset(_DEFAULT_PORTS)
    DEFAULT_SCHEME = "http"

    HOST_LABEL = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")
    HAS_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")

    @classmethod
    def _valid_host(cls, host: str) -> bool:
        try:
            ipaddress.ip_address(host.strip("[]"))
            return True
        except ValueError:
            pass
        labels = host.rstrip(".").split(".")
        return all(cls.HOST_LABEL.match(label) for label in labels)

    @classmethod
    def is_valid_url(cls, url: str) -> bool:
        """
        Check that ``url`` is an absolute http(s) URL with a well-formed host.

        Args:
            url: Candidate URL, normally already normalized

        Returns:
            bool: Whether the URL can be resolved as a resource
        """
        if not isinstance(url, str) or not url or any(ch.isspace() for ch in url):
            return False
        try:
            parts = urlsplit(url)
            # Out-of-range ports only surface when .port is read
            parts.port
        except ValueError:
            return False

        if parts.scheme.lower() not in cls.VALID_SCHEMES or not parts.hostname:
            return False
        return cls._valid_host(parts.hostname.lower())

    @classmethod
    def normalize_url(cls, url: str) -> str:
        """
        Canonicalize a URL.

        ``example.com/page`` and ``//example.com/page`` gain an ``http`` scheme,
        scheme and host are lower-cased, the scheme's default port and any
        fragment are dropped, and an empty path becomes ``/``. Input that
        cannot be parsed comes back stripped, for validation to reject.

        Args:
            url: URL as supplied by the caller

        Returns:
            str: Canonical form of ``url``
        """
        if not isinstance(url, str):
            return url
        url = url.strip()
        if not url:
            return url
        if url.startswith("//"):
            url = f"{cls.DEFAULT_SCHEME}:{url}"
        elif not cls.HAS_SCHEME.match(url):
            url = f"{cls.DEFAULT_SCHEME}://{url}"

        try:
            parts = urlsplit(url)
            port = parts.port
        except ValueError:
            return url

        scheme = parts.scheme.lower()
        netloc = (parts.hostname or "").lower()
        if ":" in netloc:
            netloc = f"[{netloc}]"
        if port is not None and port != _DEFAULT_PORTS.get(scheme):
            netloc = f"{netloc}:{port}"
        if parts.username:
            credentials = parts.username
            if parts.password:
                credentials = f"{credentials}:{parts.password}"
            netloc = f"{credentials}@{netloc}"

        path = parts.path if parts.path.startswith("/") else f"/{parts.path}"
        return urlunsplit((scheme, netloc, path, parts.query, ""))


def normalize_url(url: str) -> str:
    """Shortcut for ``URLValidator.normalize_url``."""
    return URLValidator.normalize_url(url)


def is_valid_url(url: str) -> bool:
    """Shortcut for ``URLValidator.is_valid_url``."""
    return URLValidator.is_valid_url(url)


def url_cache_key(url: str) -> str:
    """Return the persistent cache key for a normalized URL (SHA-1 hex digest)."""
    return hashlib.sha1(url.encode("utf-8")).hexdigest()
