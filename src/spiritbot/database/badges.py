"""
Badge grant, revoke and lookup queries.
"""

from typing import List

import aiosqlite

from spiritbot.datatypes.badge_datatypes import Badge, BadgeKind, UserBadge
from spiritbot.util.logger import get_logger

logger = get_logger("database_badges")


class UnknownBadgeError(LookupError):
    """Raised when a badge kind is missing from the catalog table."""


class BadgeRepository:
    """SQL for the user_badges join table. Every method runs on a caller-owned connection."""

    @staticmethod
    async def _badge_id(db: aiosqlite.Connection, kind: BadgeKind) -> int:
        cursor = await db.execute("SELECT id FROM badges WHERE name = ?", (kind.value,))
        row = await cursor.fetchone()
        if row is None:
            raise UnknownBadgeError(f"Badge {kind.value!r} is not in the catalog")
        return row["id"]

    async def grant(self, db: aiosqlite.Connection, user_id: int, kind: BadgeKind) -> None:
        """
        Increment the user's count for ``kind``, creating the row at 1.

        Args:
            db: Open database connection
            user_id: Discord user id
            kind: Catalog badge to grant
        """
        badge_id = await self._badge_id(db, kind)
        await db.execute("INSERT OR IGNORE INTO users (id) VALUES (?)", (user_id,))
        await db.execute(
            """
            INSERT INTO user_badges (user_id, badge_id, count) VALUES (?, ?, 1)
            ON CONFLICT(user_id, badge_id) DO UPDATE SET count = count + 1
            """,
            (user_id, badge_id),
        )
        await db.commit()
        logger.debug("[BADGES] Granted %s to user %s", kind, user_id)

    async def revoke(self, db: aiosqlite.Connection, user_id: int, kind: BadgeKind) -> None:
        """
        Decrement the user's count for ``kind``, deleting the row when it reaches zero.

        Revoking a badge the user does not hold changes nothing.
        """
        badge_id = await self._badge_id(db, kind)
        await db.execute(
            "DELETE FROM user_badges WHERE user_id = ? AND badge_id = ? AND count <= 1",
            (user_id, badge_id),
        )
        await db.execute(
            "UPDATE user_badges SET count = count - 1 WHERE user_id = ? AND badge_id = ?",
            (user_id, badge_id),
        )
        await db.commit()
        logger.debug("[BADGES] Revoked %s from user %s", kind, user_id)

    async def list_for_user(self, db: aiosqlite.Connection, user_id: int) -> List[UserBadge]:
        """Return every badge row of the user, ordered by catalog id."""
        cursor = await db.execute(
            """
            SELECT b.name, b.description, b.emote, ub.count
            FROM user_badges ub
            JOIN badges b ON b.id = ub.badge_id
            WHERE ub.user_id = ?
            ORDER BY b.id
            """,
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [
            UserBadge(
                user_id=user_id,
                badge=Badge(name=row["name"], description=row["description"], emote=row["emote"]),
                count=row["count"],
            )
            for row in rows
        ]
