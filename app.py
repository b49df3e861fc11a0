#!/usr/bin/env python3
"""
Main entry point for the short code service.

Concurrency: one process serves many connections through async I/O
(FastAPI + a pooled or executor-backed mapping store + redis.asyncio).
Run several instances behind a load balancer to scale out; the store
transactions keep assignments consistent across processes.

Usage:
    python app.py

Environment variables:
    DATABASE_URL - Mapping store URL (sqlite://... or postgresql://...)
    CREATE_TABLES - Create the mappings table on startup (default true)
    REDIS_URL - Redis connection URL (optional)
    LISTEN_ADDR - host:port to listen on (overrides HOST and PORT)
    HOST, PORT - Address to listen on
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from shortcodes.database import create_store
from shortcodes.database.cache import RedisCache
from shortcodes.service import ShortCodeService
from shortcodes.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting short code service...")

    store = create_store(
        config.database_url,
        pool_max_size=config.pool_max_size,
        connection_timeout_seconds=config.connection_timeout_seconds,
        logger=logger,
    )
    logger.info(f"Using {type(store).__name__}")

    if config.create_tables:
        await store.initialize()

    # Initialize cache (optional)
    if config.redis_url:
        logger.info("Connecting to Redis")
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
        await cache.connect()
    else:
        logger.info("Redis caching disabled")
        cache = None

    service = ShortCodeService(
        store=store,
        cache=cache,
        logger=logger,
    )

    app.state.service = service

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down short code service...")
    await service.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Short Code Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url', 'redis_url'})}")

    host, port = config.bind_address()

    # Store and service are created in lifespan
    app = create_app(service_instance=None, config=config)
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {host}:{port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
