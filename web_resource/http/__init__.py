"""
HTTP fetch clients for web_resource.
"""

from .client import AiohttpFetchClient, FetchClient

__all__ = ["FetchClient", "AiohttpFetchClient"]
