"""
Handler for HTML documents.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from ..models.resource import ResourceType
from ..parsers.markup import MarkupExtractor
from ..utils.text import clean_text, force_utf8
from .base import FieldComputer, Resource

logger = logging.getLogger(__name__)

# Classification only looks at the start of the document
SNIFF_BYTES = 64 * 1024

_TITLE_PATTERN = re.compile(r"<title>(.+?)</title>", re.IGNORECASE | re.DOTALL)


class HtmlResource(Resource):
    """
    An HTML page.

    Metatags, OpenGraph properties and ``<link>`` elements are parsed once per
    instance, the first time a field needs them, and are never persisted.
    """

    RESOURCE_TYPE = ResourceType.HTML
    PRIORITY = 1

    INDICATORS = ("<!doctype", "<html")

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._markup: Optional[MarkupExtractor] = None
        self._metatags: Optional[Dict[str, Any]] = None
        self._opengraph: Optional[Dict[str, str]] = None

    @classmethod
    def applies(cls, url: str, mime_type: str, body: bytes) -> bool:
        text = clean_text(body[:SNIFF_BYTES]).lower()
        return any(text.startswith(indicator) for indicator in cls.INDICATORS)

    def _field_computers(self) -> Dict[str, FieldComputer]:
        computers = super()._field_computers()
        computers.update(
            {
                "meta": self._compute_meta,
                "images": self._compute_images,
                "feeds": self._compute_feeds,
            }
        )
        return computers

    async def _extract_data(self) -> MarkupExtractor:
        if self._markup is None:
            await self.get("basic")
            self._markup = MarkupExtractor(self.body(), base_url=self.url)
            self._metatags = self._markup.extract_metatags()
            self._opengraph = self._markup.extract_opengraph()
            logger.debug(
                f"Parsed {len(self._metatags)} metatags and "
                f"{len(self._opengraph)} opengraph properties from {self.url}"
            )
        return self._markup

    async def _compute_meta(self) -> Dict[str, Any]:
        """
        Title, description and author, each taken from OpenGraph first and
        the page's metatags second.

        ``links`` is the ordered list of ``{"rel", "href"}`` entries for every
        ``<link>`` element rather than a rel-to-href mapping, so repeated rels
        such as several ``alternate`` links are all kept. The first href per
        rel is still available to the handler through ``_metatags["link"]``.
        """
        markup = await self._extract_data()
        og = self._opengraph or {}
        metatags = self._metatags or {}

        if og.get("title"):
            title = force_utf8(og["title"])
        elif metatags.get("title"):
            title = force_utf8(metatags["title"])
        else:
            match = _TITLE_PATTERN.search(force_utf8(self.body()))
            title = force_utf8(match.group(1).strip()) if match else self.url

        if og.get("description"):
            description = force_utf8(og["description"])
        else:
            description = force_utf8(metatags.get("description", ""))

        author = og.get("article:author") or og.get("author") or metatags.get("author", "")

        return {
            "title": title,
            "description": description,
            "author": force_utf8(author),
            "links": markup.extract_links(),
        }

    async def _compute_images(self) -> List[str]:
        markup = await self._extract_data()
        og = self._opengraph or {}
        links = (self._metatags or {}).get("link", {})

        images: List[str] = []
        if og.get("image"):
            images.append(og["image"])
        if links.get("image_src"):
            images.append(links["image_src"])
        images.extend(markup.extract_images())
        images.append(self.default_thumbnail())
        return images

    async def _compute_feeds(self) -> List[str]:
        markup = await self._extract_data()
        return markup.extract_rss_feeds()
