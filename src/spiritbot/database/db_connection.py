"""
Database connection management: one short-lived connection per operation.

Every badge-store call opens its own aiosqlite connection, applies the
pragmas below, runs a single transaction and closes the connection again.
No connection or transaction outlives the handler invocation that opened
it. SQLite's WAL mode lets those independent connections read concurrently
while its own locking serialises the writers.

Usage
-----
    async with DatabaseConnectionContext(path) as conn:
        await conn.execute("INSERT ...")
        await conn.commit()
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import Optional, Type

import aiosqlite

from spiritbot.util.logger import get_logger

logger = get_logger("database_connection")

# ── Pragmas applied every time a connection is opened ───────────────────────
_PRAGMAS = [
    "PRAGMA journal_mode = WAL",
    "PRAGMA foreign_keys = ON",
    "PRAGMA synchronous = NORMAL",    # safe with WAL; faster than FULL
    "PRAGMA busy_timeout = 5000",     # wait for a concurrent writer instead of failing
]


class DatabaseConnectionContext:
    """
    Async context manager yielding a freshly opened aiosqlite connection.

    Rows are returned as ``aiosqlite.Row`` so callers can index them by
    column name. Uncommitted work is rolled back when the block raises.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._conn: Optional[aiosqlite.Connection] = None

    async def __aenter__(self) -> aiosqlite.Connection:
        self._conn = await aiosqlite.connect(self._path)
        self._conn.row_factory = aiosqlite.Row
        for pragma in _PRAGMAS:
            await self._conn.execute(pragma)
        return self._conn

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if self._conn is None:
            return
        try:
            if exc_type is not None:
                await self._conn.rollback()
                logger.debug("[DB CONNECTION] Rolled back after %s", exc_type.__name__)
        finally:
            await self._conn.close()
            self._conn = None
