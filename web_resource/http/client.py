"""
Fetch clients used to retrieve resource bodies.

``FetchClient`` is the port the resource layer depends on; ``AiohttpFetchClient``
is the production implementation backed by a pooled ``aiohttp.ClientSession``.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import aiohttp
from aiohttp import ClientSession, ClientTimeout, TCPConnector

from ..config.models import FetchConfig
from ..exceptions import FetchFailedError
from ..models.base import FetchResponse

logger = logging.getLogger(__name__)


class FetchClient(ABC):
    """Abstract fetch port."""

    @abstractmethod
    async def get(self, url: str) -> FetchResponse:
        """
        Retrieve ``url``.

        Raises:
            FetchFailedError: If the resource is unreachable
        """
        raise NotImplementedError

    async def content_length(self, url: str) -> Optional[int]:
        """Return the remote size of ``url`` in bytes, or None if unknown."""
        return None


class AiohttpFetchClient(FetchClient):
    """
    Fetch client backed by aiohttp.

    Use as an async context manager, or call ``close()`` when done. A session
    is created lazily on first use.

    Example:
        ```python
        async with AiohttpFetchClient(FetchConfig(total_timeout=10)) as client:
            response = await client.get("https://example.com/")
            print(response.mime_type, len(response.body))
        ```
    """

    chunk_size = 64 * 1024

    def __init__(self, config: Optional[FetchConfig] = None) -> None:
        self.config = config or FetchConfig()
        self._session: Optional[ClientSession] = None

    async def __aenter__(self) -> AiohttpFetchClient:
        await self._create_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _create_session(self) -> None:
        """Create the aiohttp session; calling it again has no effect."""
        if self._session is not None:
            return

        timeout = ClientTimeout(
            total=self.config.total_timeout,
            connect=self.config.connect_timeout,
            sock_read=self.config.read_timeout,
        )
        connector = TCPConnector(
            limit_per_host=self.config.max_connections_per_host,
            ssl=self.config.verify_ssl,
        )
        self._session = ClientSession(
            timeout=timeout,
            connector=connector,
            headers={"User-Agent": self.config.user_agent, "Accept": "*/*"},
            raise_for_status=False,
        )

    async def close(self) -> None:
        """Close the session and cleanup resources."""
        if self._session:
            await self._session.close()
            self._session = None

    async def get(self, url: str) -> FetchResponse:
        if self._session is None:
            await self._create_session()
        assert self._session is not None

        try:
            async with self._session.get(url, allow_redirects=True) as response:
                if response.status >= 400:
                    raise FetchFailedError(
                        f"HTTP {response.status} {response.reason}",
                        url=url,
                        status_code=response.status,
                    )

                declared = response.content_length
                if declared is not None and declared > self.config.max_response_size:
                    raise FetchFailedError(
                        f"Response size {declared} exceeds maximum {self.config.max_response_size}",
                        url=url,
                        status_code=response.status,
                    )

                chunks = []
                size = 0
                async for chunk in response.content.iter_chunked(self.chunk_size):
                    size += len(chunk)
                    if size > self.config.max_response_size:
                        raise FetchFailedError(
                            f"Response exceeds maximum size {self.config.max_response_size}",
                            url=url,
                            status_code=response.status,
                        )
                    chunks.append(chunk)
                body = b"".join(chunks)

                logger.debug(f"Fetched {url}: {response.status}, {len(body)} bytes")
                return FetchResponse(
                    body=body,
                    mime_type=(response.content_type or "").lower(),
                    status_code=response.status,
                    url=str(response.url),
                )

        except aiohttp.ClientError as e:
            raise FetchFailedError(f"Request failed: {e}", url=url) from e
        except asyncio.TimeoutError as e:
            raise FetchFailedError("Request timed out", url=url) from e

    async def content_length(self, url: str) -> Optional[int]:
        if self._session is None:
            await self._create_session()
        assert self._session is not None

        try:
            async with self._session.head(url, allow_redirects=True) as response:
                if response.status >= 400:
                    return None
                value = response.headers.get("Content-Length")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"HEAD {url} failed: {e}")
            return None

        try:
            return int(value) if value is not None else None
        except ValueError:
            return None
