"""
Database schema initialization.

Creates the users / badges / user_badges tables, seeds the static badge
catalog and records the schema version.
"""

import aiosqlite

from spiritbot.datatypes.badge_datatypes import BADGE_CATALOG
from spiritbot.util.logger import get_logger

logger = get_logger("database_schema")

SCHEMA_VERSION = 1


class SchemaManager:
    """Manages database schema creation and reference data."""

    @staticmethod
    async def initialize_schema(db: aiosqlite.Connection) -> None:
        """
        Create all tables and indexes, then seed the badge catalog.

        Args:
            db: Open database connection
        """
        await SchemaManager._create_tables(db)
        await SchemaManager._create_indexes(db)
        await SchemaManager._seed_badges(db)
        await SchemaManager._update_schema_version(db)
        await db.commit()
        logger.info("[SCHEMA] Database schema initialized")

    @staticmethod
    async def _create_tables(db: aiosqlite.Connection) -> None:
        """Create all required database tables."""
        await db.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS badges (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                description TEXT NOT NULL DEFAULT '',
                emote TEXT NOT NULL DEFAULT ''
            )
        """)

        # One row per (user, badge); a zero count is never stored
        await db.execute("""
            CREATE TABLE IF NOT EXISTS user_badges (
                user_id INTEGER NOT NULL,
                badge_id INTEGER NOT NULL,
                count INTEGER NOT NULL DEFAULT 1 CHECK (count >= 1),
                PRIMARY KEY (user_id, badge_id),
                FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
                FOREIGN KEY (badge_id) REFERENCES badges(id) ON DELETE CASCADE
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    @staticmethod
    async def _create_indexes(db: aiosqlite.Connection) -> None:
        await db.execute("CREATE INDEX IF NOT EXISTS idx_user_badges_user ON user_badges(user_id)")

    @staticmethod
    async def _seed_badges(db: aiosqlite.Connection) -> None:
        """Insert or refresh every catalog badge."""
        await db.executemany(
            """
            INSERT INTO badges (name, description, emote) VALUES (?, ?, ?)
            ON CONFLICT(name) DO UPDATE SET description = excluded.description, emote = excluded.emote
            """,
            [(badge.name, badge.description, badge.emote) for badge in BADGE_CATALOG],
        )

    @staticmethod
    async def _update_schema_version(db: aiosqlite.Connection) -> None:
        await db.execute("INSERT OR IGNORE INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
