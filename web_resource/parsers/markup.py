"""
Markup extraction helpers used by the HTML resource handler.

All extraction goes through BeautifulSoup with the stdlib ``html.parser``
backend, which tolerates the broken markup commonly found in the wild.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

FEED_TYPES = {"application/rss+xml", "application/atom+xml"}


def _rel_value(rel: Any) -> str:
    # bs4 parses rel as a multi-valued attribute
    if isinstance(rel, (list, tuple)):
        return " ".join(rel)
    return rel or ""


class MarkupExtractor:
    """Extract metatags, OpenGraph properties, images and feeds from HTML."""

    def __init__(self, html: Union[str, bytes], base_url: Optional[str] = None):
        """
        Initialize the extractor.

        Args:
            html: Document markup. Raw bytes are decoded by BeautifulSoup, which
                honours a declared charset and falls back to Windows-1252.
            base_url: Base URL for resolving relative links
        """
        self.base_url = base_url
        self.soup = BeautifulSoup(html, "html.parser")

    def _absolute(self, url: str) -> str:
        url = url.strip()
        if self.base_url:
            return urljoin(self.base_url, url)
        return url

    def extract_metatags(self) -> Dict[str, Any]:
        """
        Collect ``<meta name=... content=...>`` pairs and ``<link>`` relations.

        Returns:
            Mapping of lower-cased meta names to content, plus a ``link`` key
            mapping each ``rel`` value to its (absolute) href
        """
        metatags: Dict[str, Any] = {}
        for meta in self.soup.find_all("meta"):
            name = meta.get("name") or meta.get("http-equiv")
            content = meta.get("content")
            if name and content is not None:
                metatags.setdefault(name.strip().lower(), content.strip())

        links: Dict[str, str] = {}
        for link in self.extract_links():
            links.setdefault(link["rel"], link["href"])
        if links:
            metatags["link"] = links

        return metatags

    def extract_links(self) -> List[Dict[str, str]]:
        """Return every ``<link>`` element with a rel and href, in document order."""
        links = []
        for tag in self.soup.find_all("link"):
            rel = _rel_value(tag.get("rel")).strip().lower()
            href = tag.get("href")
            if rel and href:
                links.append({"rel": rel, "href": self._absolute(href)})
        return links

    def extract_opengraph(self) -> Dict[str, str]:
        """
        Collect OpenGraph properties.

        ``og:`` prefixes are removed (``og:title`` becomes ``title``); other
        namespaced properties such as ``article:author`` keep their prefix. The
        first occurrence of a property wins.
        """
        og: Dict[str, str] = {}
        for meta in self.soup.find_all("meta"):
            prop = meta.get("property")
            content = meta.get("content")
            if not prop or content is None:
                continue
            prop = prop.strip().lower()
            if prop.startswith("og:"):
                prop = prop[3:]
            og.setdefault(prop, content.strip())
        return og

    def extract_images(self) -> List[str]:
        """Return absolute ``<img src>`` URLs in document order, without duplicates."""
        images: List[str] = []
        seen = set()
        for img in self.soup.find_all("img"):
            src = img.get("src")
            if not src or not src.strip() or src.strip().startswith("data:"):
                continue
            url = self._absolute(src)
            if url not in seen:
                seen.add(url)
                images.append(url)
        return images

    def extract_rss_feeds(self) -> List[str]:
        """Return absolute URLs of RSS and Atom feeds advertised via ``<link rel="alternate">``."""
        feeds: List[str] = []
        for tag in self.soup.find_all("link"):
            rel = _rel_value(tag.get("rel")).lower().split()
            feed_type = (tag.get("type") or "").strip().lower()
            href = tag.get("href")
            if "alternate" in rel and feed_type in FEED_TYPES and href:
                url = self._absolute(href)
                if url not in feeds:
                    feeds.append(url)
        logger.debug(f"Found {len(feeds)} feeds in document")
        return feeds


def extract_metatags(html: Union[str, bytes]) -> Dict[str, Any]:
    """Convenience function for metatag extraction."""
    return MarkupExtractor(html).extract_metatags()


def extract_opengraph(html: Union[str, bytes]) -> Dict[str, str]:
    """Convenience function for OpenGraph extraction."""
    return MarkupExtractor(html).extract_opengraph()


def extract_images(html: Union[str, bytes], base_url: Optional[str] = None) -> List[str]:
    """Convenience function for image extraction."""
    return MarkupExtractor(html, base_url).extract_images()


def extract_rss_feeds(html: Union[str, bytes], base_url: Optional[str] = None) -> List[str]:
    """Convenience function for feed extraction."""
    return MarkupExtractor(html, base_url).extract_rss_feeds()
