"""
Database package for SpiritBot.

Persistent badge/profile store on SQLite via aiosqlite.

Public API:
    - Database: schema setup plus grant_badge / revoke_badge / list_badges
"""
