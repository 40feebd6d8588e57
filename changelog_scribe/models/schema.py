# changelog_scribe/models/schema.py
"""
Database schema definition for SQLite changelog persistence.

Provides DDL for tables, indexes, and schema initialization.
"""

import logging

import aiosqlite

logger = logging.getLogger(__name__)

# Schema version for future migrations
SCHEMA_VERSION = 1

# Records are immutable once written; payload holds the camelCase JSON.
# start_ts is startDate normalized to UTC so that string order == time order.
CHANGELOGS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS changelogs (
    id TEXT PRIMARY KEY,
    start_ts TEXT NOT NULL,
    created_at TEXT NOT NULL,
    payload TEXT NOT NULL
)
"""

CHANGELOGS_INDEX_SQL = (
    "CREATE INDEX IF NOT EXISTS idx_changelogs_start ON changelogs(start_ts DESC, created_at DESC)"
)


async def _get_schema_version(db: aiosqlite.Connection) -> int:
    """
    Get current schema version from database.

    Returns:
        Schema version (0 if no version table exists)
    """
    try:
        cursor = await db.execute("SELECT version FROM schema_version LIMIT 1")
        row = await cursor.fetchone()
        return row[0] if row else 0
    except aiosqlite.OperationalError:
        return 0


async def _set_schema_version(db: aiosqlite.Connection, version: int) -> None:
    await db.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER)")
    await db.execute("DELETE FROM schema_version")
    await db.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))


async def init_db(db_path: str) -> None:
    """
    Create tables and indexes, enable WAL mode, record schema version.

    Args:
        db_path: Path to SQLite database file
    """
    async with aiosqlite.connect(db_path) as db:
        await db.execute("PRAGMA journal_mode=WAL")

        current = await _get_schema_version(db)
        if current > SCHEMA_VERSION:
            raise RuntimeError(
                f"Database schema v{current} is newer than supported v{SCHEMA_VERSION}"
            )

        await db.execute(CHANGELOGS_TABLE_SQL)
        await db.execute(CHANGELOGS_INDEX_SQL)

        if current < SCHEMA_VERSION:
            await _set_schema_version(db, SCHEMA_VERSION)
            logger.info(f"Initialized changelog schema v{SCHEMA_VERSION} at {db_path}")

        await db.commit()
