"""SQLite access through aiosqlite.

Every run of the alert check or the digest is a short one-shot command, so
there are two ways to get a connection from get_db():

- After init_db(), a single shared connection is used until close_db().
  The pipelines do this so a run opens the database file exactly once.
- Without init_db(), each get_db() block opens its own connection and
  closes it on exit (scripts, tests, ad-hoc callers).

Example:
    async with get_db() as db:
        row = await db.fetchone(load_template("readings_latest.sql"))
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from functools import cache
from pathlib import Path
from typing import Any, cast

import aiosqlite

from plantmon.lib.config import get_settings
from plantmon.lib.db.types import SQLParams
from plantmon.lib.exceptions import DatabaseNotConnectedError
from plantmon.logging import get_logger

_logger = get_logger("lib.db")

_SQL_DIR = Path(__file__).resolve().parent.parent / "sql"

# Applied in order by Database.create_schema()
_SCHEMA_TEMPLATES = (
    "init_readings_table.sql",
    "idx_readings.sql",
    "init_alerts_table.sql",
    "idx_alerts.sql",
)


@cache
def load_template(name: str) -> str:
    """Return the text of a SQL file from the sql/ directory.

    Raises:
        FileNotFoundError: If there is no template with that name.
    """
    path = _SQL_DIR / name
    if not path.is_file():
        raise FileNotFoundError(f"SQL template not found: {path}")
    return path.read_text()


def _row_to_dict(cursor: aiosqlite.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    columns = [col[0] for col in cursor.description or ()]
    return dict(zip(columns, row))


class Database:
    """Thin async wrapper over one aiosqlite connection.

    Writes commit immediately unless they run inside ``transaction()``.
    Rows are returned as plain dicts keyed by column name.
    """

    def __init__(self, db_path: str | None = None):
        self._db_path = db_path or get_settings().db_path
        self._conn: aiosqlite.Connection | None = None
        self._batched = False

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    async def connect(self) -> None:
        if self._conn is not None:
            return
        self._conn = await aiosqlite.connect(
            self._db_path, timeout=get_settings().db_timeout_sec
        )
        self._conn.row_factory = _row_to_dict  # type: ignore[assignment]

    async def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        await conn.close()

    async def __aenter__(self) -> Database:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def _connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise DatabaseNotConnectedError()
        return self._conn

    async def _autocommit(self) -> None:
        if not self._batched:
            await self._connection.commit()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Group the writes of the block into one commit.

        Usage:
            async with db.transaction():
                await db.execute("DELETE FROM alerts")
                await db.execute("DELETE FROM readings")
        """
        conn = self._connection
        await conn.execute("BEGIN")
        self._batched = True
        try:
            yield
        except BaseException:
            await conn.rollback()
            raise
        else:
            await conn.commit()
        finally:
            self._batched = False

    async def execute(self, sql: str, params: SQLParams = ()) -> int:
        """Run a write statement and return the number of affected rows."""
        cursor = await self._connection.execute(sql, params)
        await self._autocommit()
        return cursor.rowcount

    async def insert(self, sql: str, params: SQLParams = ()) -> int:
        """Run an INSERT and return the id of the new row."""
        cursor = await self._connection.execute(sql, params)
        await self._autocommit()
        return cast(int, cursor.lastrowid)

    async def executemany(
        self, sql: str, params_seq: Sequence[SQLParams]
    ) -> None:
        await self._connection.executemany(sql, params_seq)
        await self._autocommit()

    async def create_schema(self) -> None:
        """Create the readings and alerts tables if they are missing."""
        await self._connection.execute("PRAGMA journal_mode=WAL")
        for name in _SCHEMA_TEMPLATES:
            await self._connection.executescript(load_template(name))

    async def fetchone(
        self, sql: str, params: SQLParams = ()
    ) -> dict[str, Any] | None:
        async with self._connection.execute(sql, params) as cursor:
            return cast(dict[str, Any] | None, await cursor.fetchone())

    async def fetchall(
        self, sql: str, params: SQLParams = ()
    ) -> list[dict[str, Any]]:
        async with self._connection.execute(sql, params) as cursor:
            return cast(list[dict[str, Any]], await cursor.fetchall())


_shared: Database | None = None


@asynccontextmanager
async def get_db() -> AsyncIterator[Database]:
    """Yield the shared connection, or a short-lived one if there is none."""
    if _shared is not None:
        yield _shared
        return
    async with Database() as db:
        yield db


async def init_db() -> None:
    """Open the shared connection for this run and make sure the schema exists."""
    global _shared
    if _shared is None:
        _shared = Database()
        await _shared.connect()
        _logger.info("Opened database %s", get_settings().db_path)
    await _shared.create_schema()


async def close_db() -> None:
    """Close the shared connection, if one is open."""
    global _shared
    if _shared is None:
        return
    db, _shared = _shared, None
    await db.close()
    _logger.info("Closed database connection")
