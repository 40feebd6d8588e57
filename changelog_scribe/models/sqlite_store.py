# changelog_scribe/models/sqlite_store.py
"""
SQLite-backed changelog persistence.

Append-only table with WAL mode and IMMEDIATE transactions. Pages are read
by startDate descending with a startAfter-style cursor.
"""

import logging
from datetime import datetime, timezone
from uuid import uuid4

import aiosqlite

from changelog_scribe.models.changelog import ChangelogRecord
from changelog_scribe.models.responses import ChangelogPage
from changelog_scribe.models.schema import init_db
from changelog_scribe.models.store import ChangelogStore
from changelog_scribe.validation.sanitize import normalize_timestamp

logger = logging.getLogger(__name__)


def generate_record_id() -> str:
    """20-character hex record ID."""
    return uuid4().hex[:20]


class SQLiteChangelogStore(ChangelogStore):
    """
    Async SQLite-backed changelog storage.

    Features:
        - WAL mode for concurrent reads during writes
        - IMMEDIATE transactions for appends
        - No persistent connections (avoids resource leaks)
    """

    def __init__(self, db_path: str) -> None:
        """
        Initialize SQLite changelog store.

        Args:
            db_path: Path to SQLite database file
        """
        self._db_path = db_path
        logger.info(f"Created SQLiteChangelogStore with path: {db_path}")

    @property
    def db_path(self) -> str:
        return self._db_path

    async def initialize(self) -> None:
        """Initialize database schema."""
        await init_db(self._db_path)

    async def append(self, record: ChangelogRecord) -> str:
        """
        Persist a new changelog record.

        Args:
            record: Record to store (its ``id`` is replaced)

        Returns:
            The assigned record ID

        Raises:
            InvalidDateError: If record.start_date is not a valid timestamp
        """
        record_id = generate_record_id()
        start_ts = normalize_timestamp(record.start_date, "startDate")
        payload = record.model_copy(update={"id": record_id}).model_dump_json(by_alias=True)

        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")
            try:
                await db.execute(
                    "INSERT INTO changelogs (id, start_ts, created_at, payload) VALUES (?, ?, ?, ?)",
                    (
                        record_id,
                        start_ts,
                        datetime.now(timezone.utc).isoformat(),
                        payload,
                    ),
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        logger.info(f"Stored changelog {record_id} (startDate={record.start_date})")
        return record_id

    async def get(self, record_id: str) -> ChangelogRecord | None:
        async with aiosqlite.connect(self._db_path) as db:
            cursor = await db.execute(
                "SELECT payload FROM changelogs WHERE id = ?", (record_id,)
            )
            row = await cursor.fetchone()

        if not row:
            return None
        return ChangelogRecord.model_validate_json(row[0])

    async def page(
        self, page_size: int, last_timestamp: str | None = None
    ) -> ChangelogPage:
        """
        Read one page of records ordered by startDate, newest first.

        Args:
            page_size: Maximum records to return
            last_timestamp: Cursor from the previous page (exclusive)

        Returns:
            ChangelogPage
        """
        if page_size < 1:
            raise ValueError("page_size must be positive")

        async with aiosqlite.connect(self._db_path) as db:
            if last_timestamp:
                cursor = await db.execute(
                    "SELECT payload FROM changelogs WHERE start_ts < ? "
                    "ORDER BY start_ts DESC, created_at DESC LIMIT ?",
                    (normalize_timestamp(last_timestamp, "lastTimestamp"), page_size),
                )
            else:
                cursor = await db.execute(
                    "SELECT payload FROM changelogs "
                    "ORDER BY start_ts DESC, created_at DESC LIMIT ?",
                    (page_size,),
                )
            rows = await cursor.fetchall()

        items = [ChangelogRecord.model_validate_json(row[0]) for row in rows]
        return ChangelogPage(
            items=items,
            has_more=len(items) == page_size,
            last_timestamp=items[-1].start_date if items else None,
        )

    async def close(self) -> None:
        """
        Checkpoint WAL and close database.

        Truncates WAL file to avoid unbounded growth.
        """
        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute("PRAGMA wal_checkpoint(TRUNCATE)")
                logger.info("WAL checkpoint completed")
        except Exception as e:
            logger.warning(f"WAL checkpoint failed: {e}")
