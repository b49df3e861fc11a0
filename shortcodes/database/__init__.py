"""Database layer for the short code service."""

import logging
from typing import Optional

from .base import MappingStoreBase, MappingTransaction
from .models import MappingRow
from .sqlite import SQLiteMappingStore


def create_store(
    db_config: str,
    pool_max_size: int = 10,
    connection_timeout_seconds: int = 30,
    logger: Optional[logging.Logger] = None,
) -> MappingStoreBase:
    """Build the store matching the scheme of a database URL.

    Args:
        db_config: sqlite://..., postgres://... or postgresql://... URL
        pool_max_size: Maximum size of the PostgreSQL connection pool
        connection_timeout_seconds: Connection (or SQLite busy) timeout
        logger: Optional logger instance

    Returns:
        Store instance

    Raises:
        ValueError: If the URL scheme is not supported
    """
    scheme = db_config.split(":", 1)[0].lower()

    if scheme == "sqlite":
        return SQLiteMappingStore(
            db_config,
            busy_timeout_seconds=connection_timeout_seconds,
            logger=logger,
        )
    elif scheme in ("postgres", "postgresql"):
        from .postgres import PostgresMappingStore
        return PostgresMappingStore(
            db_config,
            pool_max_size=pool_max_size,
            connection_timeout_seconds=connection_timeout_seconds,
            logger=logger,
        )
    else:
        raise ValueError(f"Unsupported database URL scheme: {scheme}. Choose 'sqlite', 'postgres' or 'postgresql'.")


__all__ = [
    "MappingStoreBase",
    "MappingTransaction",
    "MappingRow",
    "SQLiteMappingStore",
    "create_store",
]
