"""Pytest configuration and fixtures."""

import sqlite3
from contextlib import closing
from typing import AsyncGenerator

import pytest

from shortcodes.database.sqlite import SQLiteMappingStore
from shortcodes.generator import ShortCodeGenerator
from shortcodes.service import ShortCodeService
from shortcodes.common.logging_config import setup_logging


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def db_url(tmp_path) -> str:
    """SQLite URL pointing into a per-test temporary directory."""
    return f"sqlite://{(tmp_path / 'shortcodes.db').as_posix()}"


@pytest.fixture
async def test_store(db_url, logger) -> AsyncGenerator[SQLiteMappingStore, None]:
    """Create test store instance with the schema in place."""
    store = SQLiteMappingStore(db_config=db_url, logger=logger)
    await store.initialize()

    yield store

    await store.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator()


@pytest.fixture
async def service(test_store, short_code_generator, logger) -> ShortCodeService:
    """Create service instance."""
    return ShortCodeService(
        store=test_store,
        cache=None,  # No cache for tests
        short_code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
def count_rows(test_store):
    """Count stored rows for a value, bypassing the store API."""
    def _count(value: str) -> int:
        with closing(sqlite3.connect(test_store.db_path)) as conn:
            return conn.execute("SELECT COUNT(*) FROM mappings WHERE value = ?", (value,)).fetchone()[0]
    return _count


@pytest.fixture
def set_next_identity(test_store):
    """Make the store hand out the given identity on the next insert."""
    def _set(identity: int) -> None:
        with closing(sqlite3.connect(test_store.db_path)) as conn:
            conn.execute("DELETE FROM sqlite_sequence WHERE name = 'mappings'")
            conn.execute(
                "INSERT INTO sqlite_sequence (name, seq) VALUES ('mappings', ?)",
                (identity - 1,),
            )
            conn.commit()
    return _set


@pytest.fixture
def sample_values():
    """Sample values for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "plain text with spaces",
        "ünïcødé ✓",
    ]
