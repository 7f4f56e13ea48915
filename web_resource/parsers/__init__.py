"""
Markup parsers for web_resource.
"""

from .markup import (
    MarkupExtractor,
    extract_images,
    extract_metatags,
    extract_opengraph,
    extract_rss_feeds,
)

__all__ = [
    "MarkupExtractor",
    "extract_metatags",
    "extract_opengraph",
    "extract_images",
    "extract_rss_feeds",
]
