"""
Utility helpers for web_resource.
"""

from .text import clean_text, decode_body, encode_body, force_utf8
from .url import URLValidator, is_valid_url, normalize_url, url_cache_key

__all__ = [
    "URLValidator",
    "is_valid_url",
    "normalize_url",
    "url_cache_key",
    "clean_text",
    "force_utf8",
    "encode_body",
    "decode_body",
]
