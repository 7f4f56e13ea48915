"""
Tests for the per-type field computations of the resource handlers.
"""

import pytest

from web_resource.models.base import ABSENT
from web_resource.resources.base import Resource
from web_resource.resources.generic import GenericResource
from web_resource.resources.html import HtmlResource
from web_resource.resources.media import AudioResource, ImageResource, VideoResource
from web_resource.resources.thumbnail import DEFAULT_THUMBNAIL

THUMBNAIL = str(DEFAULT_THUMBNAIL)


async def html_resource(cache, fetch_client, registry, url, body):
    fetch_client.add(url, body, "text/html")
    resource = await Resource.instance(url, cache, fetch_client, registry=registry)
    assert isinstance(resource, HtmlResource)
    return resource


class TestHtmlResource:
    """Test metadata, image and feed extraction for HTML pages."""

    @pytest.mark.asyncio
    async def test_opengraph_preferred(self, cache, fetch_client, registry):
        resource = await Resource.instance("example.com/blog/post", cache, fetch_client, registry=registry)

        meta = await resource.get("meta")

        assert meta["title"] == "OG title"
        assert meta["description"] == "OG description"
        assert meta["author"] == "Jane Doe"
        assert meta["links"] == [
            {"rel": "image_src", "href": "http://example.com/thumb.png"},
            {"rel": "alternate", "href": "http://example.com/feed.xml"},
            {"rel": "stylesheet", "href": "http://example.com/style.css"},
        ]

    @pytest.mark.asyncio
    async def test_metatags_before_title_tag(self, cache, fetch_client, registry):
        body = (
            b"<html><head><title>Tag title</title>"
            b'<meta name="title" content="Meta title">'
            b'<meta name="description" content="Meta description">'
            b"</head></html>"
        )
        resource = await html_resource(cache, fetch_client, registry, "http://example.com/m", body)

        meta = await resource.get("meta")

        assert meta["title"] == "Meta title"
        assert meta["description"] == "Meta description"
        assert meta["author"] == ""

    @pytest.mark.asyncio
    async def test_title_tag_fallback(self, cache, fetch_client, registry):
        body = b"<!DOCTYPE html>\n<html><head><TITLE>\n  Multi\n  line\n</TITLE></head></html>"
        resource = await html_resource(cache, fetch_client, registry, "http://example.com/t", body)

        meta = await resource.get("meta")

        assert meta["title"] == "Multi\n  line"

    @pytest.mark.asyncio
    async def test_url_fallback(self, cache, fetch_client, registry):
        resource = await html_resource(
            cache, fetch_client, registry, "http://example.com/untitled", b"<html><body>x</body></html>"
        )

        meta = await resource.get("meta")

        assert meta == {
            "title": "http://example.com/untitled",
            "description": "",
            "author": "",
            "links": [],
        }

    @pytest.mark.asyncio
    async def test_article_author(self, cache, fetch_client, registry):
        body = (
            b"<html><head>"
            b'<meta property="article:author" content="OG Author">'
            b'<meta name="author" content="Meta Author">'
            b"</head></html>"
        )
        resource = await html_resource(cache, fetch_client, registry, "http://example.com/a", body)

        assert (await resource.get("meta"))["author"] == "OG Author"

    @pytest.mark.asyncio
    async def test_non_utf8_title(self, cache, fetch_client, registry):
        body = b"<html><head><title>Caf\xe9</title></head></html>"
        resource = await html_resource(cache, fetch_client, registry, "http://example.com/cafe", body)

        assert (await resource.get("meta"))["title"] == "Café"

    @pytest.mark.asyncio
    async def test_non_utf8_opengraph_and_description(self, cache, fetch_client, registry):
        body = (
            b"<html><head><title>Caf\xe9</title>"
            b'<meta property="og:title" content="Caf\xe9 de Fl\xf4re">'
            b'<meta name="description" content="Cr\xe8me br\xfbl\xe9e et th\xe9 glac\xe9">'
            b'<meta name="author" content="Ren\xe9e">'
            b"</head></html>"
        )
        resource = await html_resource(cache, fetch_client, registry, "http://example.com/flore", body)

        meta = await resource.get("meta")

        assert meta["title"] == "Café de Flôre"
        assert meta["description"] == "Crème brûlée et thé glacé"
        assert meta["author"] == "Renée"

    @pytest.mark.asyncio
    async def test_images_order(self, cache, fetch_client, registry):
        resource = await Resource.instance("example.com/blog/post", cache, fetch_client, registry=registry)

        images = await resource.get("images")

        assert images == [
            "http://cdn.example.com/og.png",
            "http://example.com/thumb.png",
            "http://example.com/a.png",
            "http://example.com/blog/b.png",
            THUMBNAIL,
        ]

    @pytest.mark.asyncio
    async def test_images_never_empty(self, cache, fetch_client, registry):
        resource = await html_resource(cache, fetch_client, registry, "http://example.com/bare", b"<html></html>")

        assert await resource.get("images") == [THUMBNAIL]

    @pytest.mark.asyncio
    async def test_feeds(self, cache, fetch_client, registry):
        body = (
            b"<html><head>"
            b'<link rel="alternate" type="application/rss+xml" href="/rss">'
            b'<link rel="alternate" type="application/atom+xml" href="https://feeds.example.com/atom">'
            b'<link rel="alternate" hreflang="de" href="/de/">'
            b"</head></html>"
        )
        resource = await html_resource(cache, fetch_client, registry, "http://example.com/f", body)

        assert await resource.get("feeds") == [
            "http://example.com/rss",
            "https://feeds.example.com/atom",
        ]

    @pytest.mark.asyncio
    async def test_markup_parsed_once(self, cache, fetch_client, registry):
        """Scratch parse state is built once and shared by every field."""
        resource = await Resource.instance("example.com/blog/post", cache, fetch_client, registry=registry)

        await resource.get("meta")
        markup = resource._markup
        await resource.get("images")
        await resource.get("feeds")

        assert resource._markup is markup
        assert cache.get_calls.count(("link_basic", resource.cache_key)) == 2

    @pytest.mark.asyncio
    async def test_scratch_state_not_persisted(self, cache, fetch_client, registry):
        resource = await Resource.instance("example.com/blog/post", cache, fetch_client, registry=registry)

        await resource.get_all(["meta", "images", "feeds"])

        assert sorted(cache.stored_namespaces()) == ["link_basic", "link_feeds", "link_images", "link_meta"]


class TestMediaResources:
    """Test image, audio and video handlers."""

    @pytest.mark.asyncio
    async def test_image_meta(self, cache, fetch_client):
        resource = ImageResource("http://example.com/cat.jpg", cache, fetch_client)

        assert await resource.get("meta") == {
            "author": "",
            "title": "http://example.com/cat.jpg",
            "description": "Image from http://example.com/cat.jpg",
        }
        assert fetch_client.calls == []

    @pytest.mark.asyncio
    async def test_audio(self, cache, fetch_client, registry):
        resource = await Resource.instance("example.com/song.mp3", cache, fetch_client, registry=registry)

        assert isinstance(resource, AudioResource)
        assert (await resource.get("meta"))["description"] == "Audio from http://example.com/song.mp3"
        assert await resource.get("images") == [THUMBNAIL]
        assert await resource.get("feeds") is ABSENT

    @pytest.mark.asyncio
    async def test_video(self, cache, fetch_client, registry):
        resource = await Resource.instance("example.com/clip.mp4", cache, fetch_client, registry=registry)

        assert isinstance(resource, VideoResource)
        assert (await resource.get("meta"))["description"] == "Video from http://example.com/clip.mp4"
        assert await resource.get("images") == [THUMBNAIL]


class TestGenericResource:
    """Test the fallback handler."""

    @pytest.mark.asyncio
    async def test_fields(self, cache, fetch_client):
        resource = GenericResource("http://example.com/data.bin", cache, fetch_client)

        assert await resource.get("meta") == {
            "title": "http://example.com/data.bin",
            "description": "",
            "author": "",
        }
        assert await resource.get("images") == [THUMBNAIL]
