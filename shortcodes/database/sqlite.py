"""SQLite implementation of the mapping store."""

import asyncio
import logging
import sqlite3
from contextlib import asynccontextmanager, closing
from datetime import datetime, timezone
from functools import partial
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Optional, Tuple

from ..errors import StoreError
from .base import MappingStoreBase, MappingTransaction
from .models import MappingRow

MEMORY_PATHS = {":memory:", "file::memory:"}

SELECT_BY_VALUE_SQL = "SELECT id, value, code, created_at FROM mappings WHERE value = ?"
SELECT_BY_CODE_SQL = "SELECT value FROM mappings WHERE code = ?"
SELECT_CODE_SQL = "SELECT code FROM mappings WHERE id = ?"
INSERT_SQL = "INSERT INTO mappings (value) VALUES (?) ON CONFLICT(value) DO NOTHING"
UPDATE_CODE_SQL = "UPDATE mappings SET code = ? WHERE id = ? AND code IS NULL"


def sqlite_path_from_url(db_url: str) -> str:
    """Extract the database file path from a SQLite URL.

    Accepts sqlite://./db.sqlite, sqlite:./db.sqlite and
    sqlite:///abs/path.sqlite. A trailing query string (e.g. ?mode=rwc)
    is ignored.

    Args:
        db_url: SQLite connection URL

    Returns:
        Filesystem path of the database

    Raises:
        ValueError: If the URL is not a file-backed SQLite URL
    """
    if db_url.startswith("sqlite://"):
        path = db_url[len("sqlite://"):]
    elif db_url.startswith("sqlite:"):
        path = db_url[len("sqlite:"):]
        if path.startswith("//"):
            path = path[2:]
    else:
        raise ValueError(f"Not a SQLite URL: {db_url}")

    path = path.split("?", 1)[0]

    if path in MEMORY_PATHS:
        # every connection would get its own private database
        raise ValueError("In-memory SQLite databases are not supported, use a file path")
    if not path:
        raise ValueError(f"SQLite URL has no database path: {db_url}")

    return path


def _row_to_mapping(row: Tuple[Any, ...]) -> MappingRow:
    identity, value, code, created_at = row
    return MappingRow(
        identity=identity,
        value=value,
        code=code,
        created_at=datetime.fromtimestamp(created_at, tz=timezone.utc) if created_at is not None else None,
    )


class SQLiteTransaction(MappingTransaction):
    """Unit of work bound to one SQLite connection holding the write lock."""

    def __init__(self, store: "SQLiteMappingStore", conn: sqlite3.Connection):
        self._store = store
        self._conn = conn

    async def insert_if_absent(self, value: str) -> None:
        await self._store._run(self._conn.execute, INSERT_SQL, (value,))

    async def get_by_value(self, value: str) -> Optional[MappingRow]:
        def _run_sync() -> Optional[MappingRow]:
            row = self._conn.execute(SELECT_BY_VALUE_SQL, (value,)).fetchone()
            return _row_to_mapping(row) if row else None
        return await self._store._run(_run_sync)

    async def set_code_if_unset(self, identity: int, code: str) -> bool:
        def _run_sync() -> bool:
            try:
                cursor = self._conn.execute(UPDATE_CODE_SQL, (code, identity))
            except sqlite3.IntegrityError:
                # code already held by a row a concurrent writer committed
                return False
            return cursor.rowcount == 1
        return await self._store._run(_run_sync)

    async def get_code(self, identity: int) -> Optional[str]:
        def _run_sync() -> Optional[str]:
            row = self._conn.execute(SELECT_CODE_SQL, (identity,)).fetchone()
            return row[0] if row else None
        return await self._store._run(_run_sync)


class SQLiteMappingStore(MappingStoreBase):
    """SQLite implementation of the mapping store.

    SQLite admits a single writer, so transactions started from this
    process queue on an asyncio lock before taking the database's
    RESERVED lock with BEGIN IMMEDIATE. Blocking sqlite3 calls run in the
    event loop's default executor.
    """

    CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS mappings (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        code        TEXT UNIQUE,
        value       TEXT NOT NULL UNIQUE,
        created_at  INTEGER NOT NULL DEFAULT (strftime('%s','now'))
    )
    """

    CREATE_INDEX_SQL = "CREATE INDEX IF NOT EXISTS idx_mappings_code ON mappings(code)"

    def __init__(
        self,
        db_config: str,
        busy_timeout_seconds: float = 30,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize SQLite store.

        Args:
            db_config: SQLite URL (sqlite://path/to/file.db)
            busy_timeout_seconds: How long a connection waits on a locked database
            logger: Optional logger instance
        """
        super().__init__(db_config)

        self.logger = logger or logging.getLogger(__name__)
        self.db_path = sqlite_path_from_url(db_config)
        self.busy_timeout_seconds = busy_timeout_seconds
        self._write_lock = asyncio.Lock()

        self._ensure_file_exists()

    def _ensure_file_exists(self) -> None:
        """Create the database file and its parent directory if missing."""
        path = Path(self.db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        if not path.exists():
            path.touch()
            self.logger.info(f"Created SQLite database file {path}")

    def _connect(self) -> sqlite3.Connection:
        # isolation_level=None: transactions are opened explicitly
        return sqlite3.connect(
            self.db_path,
            timeout=self.busy_timeout_seconds,
            isolation_level=None,
            check_same_thread=False,
        )

    def _begin(self) -> sqlite3.Connection:
        conn = self._connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking sqlite3 call in the executor, mapping driver errors."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, partial(func, *args))
        except sqlite3.Error as e:
            self.logger.error(f"SQLite error on {self.db_path}: {e}")
            raise StoreError(str(e)) from e

    async def initialize(self) -> None:
        def _run_sync() -> None:
            with closing(self._connect()) as conn:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute(self.CREATE_TABLE_SQL)
                conn.execute(self.CREATE_INDEX_SQL)

        self.logger.info("Creating mappings table if not exists...")
        await self._run(_run_sync)
        self.logger.info("Table creation completed successfully")

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SQLiteTransaction]:
        async with self._write_lock:
            conn = await self._run(self._begin)
            try:
                yield SQLiteTransaction(self, conn)
                await self._run(conn.execute, "COMMIT")
            except BaseException:
                if conn.in_transaction:
                    try:
                        conn.rollback()
                    except sqlite3.Error as e:
                        self.logger.warning(f"Rollback failed, closing connection instead: {e}")
                raise
            finally:
                conn.close()

    async def get_by_value(self, value: str) -> Optional[MappingRow]:
        def _run_sync() -> Optional[MappingRow]:
            with closing(self._connect()) as conn:
                row = conn.execute(SELECT_BY_VALUE_SQL, (value,)).fetchone()
            return _row_to_mapping(row) if row else None
        return await self._run(_run_sync)

    async def get_by_code(self, code: str) -> Optional[str]:
        def _run_sync() -> Optional[str]:
            with closing(self._connect()) as conn:
                row = conn.execute(SELECT_BY_CODE_SQL, (code,)).fetchone()
            return row[0] if row else None
        return await self._run(_run_sync)

    async def health_check(self) -> bool:
        def _run_sync() -> None:
            with closing(self._connect()) as conn:
                conn.execute("SELECT 1 FROM mappings LIMIT 1").fetchone()

        try:
            await self._run(_run_sync)
            return True
        except StoreError as e:
            self.logger.error(f"Health check failed: {e}")
            return False

    async def close(self) -> None:
        """Connections are per operation; nothing is held open between calls."""
        self.logger.debug(f"Closed SQLite store {self.db_path}")
