# changelog_scribe/models/memory_store.py
"""In-memory changelog store with the same ordering and cursor rules as SQLite."""

import itertools
import logging

from changelog_scribe.models.changelog import ChangelogRecord
from changelog_scribe.models.responses import ChangelogPage
from changelog_scribe.models.sqlite_store import generate_record_id
from changelog_scribe.models.store import ChangelogStore
from changelog_scribe.validation.sanitize import normalize_timestamp

logger = logging.getLogger(__name__)


class InMemoryChangelogStore(ChangelogStore):
    """Process-local changelog storage (tests and ``--memory`` CLI runs)."""

    def __init__(self) -> None:
        # (start_ts, insertion seq, record)
        self._rows: list[tuple[str, int, ChangelogRecord]] = []
        self._seq = itertools.count()

    async def append(self, record: ChangelogRecord) -> str:
        record_id = generate_record_id()
        start_ts = normalize_timestamp(record.start_date, "startDate")
        stored = record.model_copy(update={"id": record_id}, deep=True)
        self._rows.append((start_ts, next(self._seq), stored))
        logger.info(f"Stored changelog {record_id} in memory")
        return record_id

    async def get(self, record_id: str) -> ChangelogRecord | None:
        for _, _, record in self._rows:
            if record.id == record_id:
                return record.model_copy(deep=True)
        return None

    async def page(
        self, page_size: int, last_timestamp: str | None = None
    ) -> ChangelogPage:
        if page_size < 1:
            raise ValueError("page_size must be positive")

        rows = sorted(self._rows, key=lambda r: (r[0], r[1]), reverse=True)
        if last_timestamp:
            cursor = normalize_timestamp(last_timestamp, "lastTimestamp")
            rows = [r for r in rows if r[0] < cursor]

        items = [record.model_copy(deep=True) for _, _, record in rows[:page_size]]
        return ChangelogPage(
            items=items,
            has_more=len(items) == page_size,
            last_timestamp=items[-1].start_date if items else None,
        )
