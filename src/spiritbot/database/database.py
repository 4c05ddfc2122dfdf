"""
Badge/profile store backed by SQLite.

Each public coroutine opens its own connection through
:class:`DatabaseConnectionContext` and commits a single transaction, so no
transaction ever spans two handler invocations. Concurrent grants for the
same (user, badge) pair are serialised by SQLite's write lock; the upsert
itself is atomic.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import aiosqlite

from spiritbot.database.badges import BadgeRepository
from spiritbot.database.db_connection import DatabaseConnectionContext
from spiritbot.database.db_schema import SchemaManager
from spiritbot.datatypes.badge_datatypes import BadgeKind, UserBadge
from spiritbot.util.logger import get_logger

logger = get_logger("database")


class Database:
    """Owns the badge store file. ``initialize`` once, then grant, revoke and list."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._ready = False
        self._badges = BadgeRepository()

    def get_connection(self) -> DatabaseConnectionContext:
        return DatabaseConnectionContext(self.db_path)

    async def initialize(self) -> bool:
        """Create the file, tables and badge catalog. Returns False if SQLite refuses."""
        if self._ready:
            return True

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            async with self.get_connection() as conn:
                await SchemaManager.initialize_schema(conn)
        except (OSError, aiosqlite.Error):
            logger.exception("[DATABASE] Could not prepare badge store at %s", self.db_path)
            return False

        self._ready = True
        logger.info("[DATABASE] Badge store ready at %s", self.db_path)
        return True

    def shutdown(self) -> None:
        if self._ready:
            self._ready = False
            logger.info("[DATABASE] Badge store closed")

    async def grant_badge(self, user_id: int, kind: BadgeKind) -> None:
        """Increment the user's count for ``kind``, starting at 1."""
        async with self.get_connection() as conn:
            await self._badges.grant(conn, user_id, kind)

    async def revoke_badge(self, user_id: int, kind: BadgeKind) -> None:
        """Decrement the user's count for ``kind``; the row goes away at zero."""
        async with self.get_connection() as conn:
            await self._badges.revoke(conn, user_id, kind)

    async def list_badges(self, user_id: int) -> List[UserBadge]:
        async with self.get_connection() as conn:
            return await self._badges.list_for_user(conn, user_id)
