#!/usr/bin/env python3
"""
Command-line interface for the web_resource library.

Resolves a URL and prints the requested fields as JSON:

    web-resource example.com/page.html --field meta --field feeds
"""

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

from .cache.backends import create_cache_backend
from .config.loader import load_config
from .config.models import LogLevel
from .exceptions import WebResourceError
from .http.client import AiohttpFetchClient
from .logging.manager import cleanup_logging, setup_logging
from .resources.base import Resource

DEFAULT_FIELDS = ["meta", "images"]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="web-resource",
        description="Resolve a URL into a typed resource and print its fields as JSON",
    )
    parser.add_argument("url", help="URL to resolve (scheme defaults to http://)")
    parser.add_argument(
        "-f",
        "--field",
        dest="fields",
        action="append",
        metavar="NAME",
        help="Field to retrieve; may be repeated (default: meta images)",
    )
    parser.add_argument("--ttl", type=int, help="Cache lifetime in seconds")
    parser.add_argument(
        "--refresh", action="store_true", help="Ignore cached values and recompute"
    )
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        help="Logging level (default from configuration)",
    )
    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation")
    return parser


async def resolve(args: argparse.Namespace) -> Dict[str, Any]:
    """Resolve ``args.url`` and collect the requested fields."""
    config = load_config(args.config)
    if args.log_level:
        config.logging.level = LogLevel(args.log_level)
    setup_logging(config.logging)

    cache = create_cache_backend(
        config.cache.backend,
        max_size=config.cache.max_size,
        redis_url=config.cache.redis_url,
        key_prefix=config.cache.key_prefix,
    )
    fields: List[str] = args.fields or DEFAULT_FIELDS

    try:
        async with AiohttpFetchClient(config.fetch) as client:
            resource = await Resource.instance(
                args.url,
                cache,
                client,
                ttl=args.ttl,
                settings=config.resource,
            )
            values = await resource.get_all(fields, force_refresh=args.refresh)
            return {
                "url": resource.url,
                "type": resource.resource_type.value,
                "mime_type": resource.mime_type,
                "fields": values,
            }
    finally:
        await cache.close()


async def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        result = await resolve(args)
    except WebResourceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    finally:
        cleanup_logging()

    print(json.dumps(result, indent=args.indent, default=str))
    return 0


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
