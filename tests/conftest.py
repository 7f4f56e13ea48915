"""
Shared test fixtures and configuration for the web_resource test suite.
"""

from typing import Dict, List, Optional, Tuple, Union

import pytest

from web_resource.cache.backends import MemoryCacheBackend
from web_resource.exceptions import FetchFailedError
from web_resource.http.client import FetchClient
from web_resource.models.base import FetchResponse
from web_resource.resources.html import HtmlResource
from web_resource.resources.media import AudioResource, ImageResource, VideoResource
from web_resource.resources.registry import ResourceTypeRegistry

HTML_PAGE = b"""<!DOCTYPE html>
<html>
<head>
<title>Plain title</title>
<meta property="og:title" content="OG title">
<meta property="og:description" content="OG description">
<meta property="og:image" content="http://cdn.example.com/og.png">
<meta name="description" content="Meta description">
<meta name="author" content="Jane Doe">
<link rel="image_src" href="/thumb.png">
<link rel="alternate" type="application/rss+xml" href="/feed.xml">
<link rel="stylesheet" href="/style.css">
</head>
<body>
<img src="/a.png"><img src="b.png"><img src="/a.png">
</body>
</html>
"""


class FakeFetchClient(FetchClient):
    """Fetch client serving canned responses; unknown URLs are unreachable."""

    def __init__(self, responses: Optional[Dict[str, Union[FetchResponse, Exception]]] = None):
        self.responses = dict(responses or {})
        self.sizes: Dict[str, int] = {}
        self.calls: List[str] = []
        self.head_calls: List[str] = []

    def add(self, url: str, body: bytes, mime_type: str) -> None:
        self.responses[url] = FetchResponse(body=body, mime_type=mime_type, status_code=200, url=url)

    async def get(self, url: str) -> FetchResponse:
        self.calls.append(url)
        response = self.responses.get(url)
        if response is None:
            raise FetchFailedError("Connection refused", url=url)
        if isinstance(response, Exception):
            raise response
        return response

    async def content_length(self, url: str) -> Optional[int]:
        self.head_calls.append(url)
        return self.sizes.get(url)


class SpyCacheBackend(MemoryCacheBackend):
    """Memory backend that records every call made to it."""

    def __init__(self, max_size: int = 1000):
        super().__init__(max_size=max_size)
        self.get_calls: List[Tuple[str, str]] = []
        self.get_all_calls: List[Tuple[str, List[str], str]] = []
        self.store_calls: List[Tuple[str, str, int]] = []

    async def get(self, namespace, key):
        self.get_calls.append((namespace, key))
        return await super().get(namespace, key)

    async def get_all(self, key, fields, namespace_prefix):
        fields = list(fields)
        self.get_all_calls.append((key, fields, namespace_prefix))
        return await super().get_all(key, fields, namespace_prefix)

    async def store(self, namespace, key, data, expires_at):
        self.store_calls.append((namespace, key, expires_at))
        await super().store(namespace, key, data, expires_at)

    def stored_namespaces(self) -> List[str]:
        return [namespace for namespace, _, _ in self.store_calls]


@pytest.fixture
def fetch_client() -> FakeFetchClient:
    """Fetch client with an HTML page, an image and an audio file."""
    client = FakeFetchClient()
    client.add("http://example.com/page.html", b"<!doctype html><title>Hi</title>", "text/html")
    client.add("http://example.com/blog/post", HTML_PAGE, "text/html")
    client.add("http://example.com/cat.jpg", b"\xff\xd8\xff\xe0\x00\x10JFIF", "image/jpeg")
    client.add("http://example.com/song.mp3", b"ID3\x03\x00", "audio/mpeg")
    client.add("http://example.com/clip.mp4", b"\x00\x00\x00\x18ftypmp42", "video/mp4")
    client.add("http://example.com/data.bin", b"\x00\x01\x02", "application/octet-stream")
    return client


@pytest.fixture
def cache() -> SpyCacheBackend:
    """Recording in-memory cache backend."""
    return SpyCacheBackend()


@pytest.fixture
def registry() -> ResourceTypeRegistry:
    """Fresh registry with the default handlers in the default order."""
    return ResourceTypeRegistry([AudioResource, HtmlResource, ImageResource, VideoResource])


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires network)"
    )
