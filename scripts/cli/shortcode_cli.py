#!/usr/bin/env python3
"""
Command-line interface for the short code service.

Runs operations directly against the configured mapping store.

Usage:
    python shortcode_cli.py encode <value>
    python shortcode_cli.py decode <code>
    python shortcode_cli.py health
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Optional

from shortcodes.database import create_store
from shortcodes.database.cache import RedisCache
from shortcodes.errors import ShortCodeError
from shortcodes.service import ShortCodeService
from shortcodes.common.logging_config import setup_logging


class ShortCodeCLI:
    """Command-line interface for the short code service."""

    def __init__(self, db_url: str, redis_url: Optional[str] = None, verbose: bool = False):
        """Initialize CLI."""
        self.db_url = db_url
        self.redis_url = redis_url
        self.verbose = verbose
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.store = None
        self.cache = None
        self.service = None

    async def initialize(self):
        """Initialize store and service."""
        self.store = create_store(self.db_url, logger=self.logger)
        await self.store.initialize()

        if self.redis_url:
            self.cache = RedisCache(
                redis_url=self.redis_url,
                logger=self.logger,
            )
            await self.cache.connect()

        self.service = ShortCodeService(
            store=self.store,
            cache=self.cache,
            logger=self.logger,
        )

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    def _print_result(self, payload: dict, ok: bool) -> int:
        print(json.dumps(payload, indent=2), file=sys.stdout if ok else sys.stderr)
        return 0 if ok else 1

    async def encode(self, value: str) -> int:
        """Encode a value."""
        try:
            code = await self.service.encode(value)
        except ShortCodeError as e:
            return self._print_result({"success": False, "error": str(e)}, ok=False)
        return self._print_result({"success": True, "value": value, "code": code}, ok=True)

    async def decode(self, code: str) -> int:
        """Decode a short code."""
        try:
            value = await self.service.decode(code)
        except ShortCodeError as e:
            return self._print_result({"success": False, "error": str(e)}, ok=False)
        return self._print_result({"success": True, "code": code, "value": value}, ok=True)

    async def health(self) -> int:
        """Check store and cache health."""
        health_status = await self.service.health_check()
        return self._print_result({"success": health_status["overall"], "health": health_status}, ok=health_status["overall"])


async def main() -> int:
    parser = argparse.ArgumentParser(description="Short code service CLI")
    parser.add_argument(
        "--database-url",
        default=os.getenv("DATABASE_URL", "sqlite://./shortcodes.db"),
        help="Mapping store URL",
    )
    parser.add_argument(
        "--redis-url",
        default=os.getenv("REDIS_URL"),
        help="Redis connection URL (optional)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    encode_parser = subparsers.add_parser("encode", help="Get the short code for a value")
    encode_parser.add_argument("value", help="Value to encode")

    decode_parser = subparsers.add_parser("decode", help="Get the value for a short code")
    decode_parser.add_argument("code", help="Short code to decode")

    subparsers.add_parser("health", help="Check service health")

    args = parser.parse_args()

    cli = ShortCodeCLI(args.database_url, args.redis_url, args.verbose)
    try:
        await cli.initialize()
        if args.command == "encode":
            return await cli.encode(args.value)
        elif args.command == "decode":
            return await cli.decode(args.code)
        return await cli.health()
    except (ShortCodeError, ValueError) as e:
        print(json.dumps({"success": False, "error": f"Error: {e}"}, indent=2), file=sys.stderr)
        return 1
    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
