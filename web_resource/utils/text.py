"""
Text and body helpers used during classification and persistence.
"""

from __future__ import annotations

import base64
import binascii
import zlib
from typing import Union

_BOM = "\ufeff"
_CONTROL_CHARS = "".join(chr(i) for i in range(0x21))
_COMMENT_OPEN = "<!--"
_COMMENT_CLOSE = "-->"


def _to_text(body: Union[bytes, str]) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


def clean_text(body: Union[bytes, str]) -> str:
    """
    Remove common garbage at the start of a body so its type can be sniffed.

    Strips a UTF-8 byte-order mark, leading control characters and whitespace
    (``\\x00``-``\\x20``) and any number of leading HTML comments.

    Args:
        body: Raw response body

    Returns:
        The cleaned body text
    """
    text = _to_text(body)
    if text.startswith(_BOM):
        text = text[len(_BOM):]
    text = text.lstrip(_CONTROL_CHARS)
    while text.startswith(_COMMENT_OPEN):
        end = text.find(_COMMENT_CLOSE, len(_COMMENT_OPEN))
        if end == -1:
            return ""
        text = text[end + len(_COMMENT_CLOSE):].lstrip(_CONTROL_CHARS)
    return text


def force_utf8(value: Union[bytes, str, None]) -> str:
    """
    Coerce a value of questionable encoding into a valid UTF-8 string.

    Bytes that are not valid UTF-8 are decoded as Windows-1252, and lone
    surrogates in strings are replaced.
    """
    if value is None:
        return ""
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value.decode("cp1252", errors="replace")
    return str(value).encode("utf-8", errors="replace").decode("utf-8")


def encode_body(body: bytes) -> str:
    """Compress (raw deflate, level 9) and base64-encode a body for storage."""
    if not body:
        return ""
    compressor = zlib.compressobj(9, zlib.DEFLATED, -zlib.MAX_WBITS)
    compressed = compressor.compress(body) + compressor.flush()
    return base64.b64encode(compressed).decode("ascii")


def decode_body(encoded: str) -> bytes:
    """
    Reverse ``encode_body``.

    Raises:
        ValueError: If the value is not valid base64 or not a deflate stream
    """
    if not encoded:
        return b""
    try:
        return zlib.decompress(base64.b64decode(encoded, validate=True), -zlib.MAX_WBITS)
    except (binascii.Error, zlib.error) as e:
        raise ValueError(f"Stored body could not be decoded: {e}") from e
