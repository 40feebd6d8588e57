# changelog_scribe/models/store.py
"""
Changelog store protocol definition.

Defines the abstract interface that InMemoryChangelogStore and
SQLiteChangelogStore implement. Stores are append-only and page through
records by ``startDate`` descending using the last-seen ``startDate`` as
the cursor.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from changelog_scribe.models.changelog import ChangelogRecord
    from changelog_scribe.models.responses import ChangelogPage


class ChangelogStore(ABC):
    """Abstract base class for changelog persistence."""

    async def initialize(self) -> None:
        """Prepare the backing storage (no-op by default)."""

    async def close(self) -> None:
        """Release resources (no-op by default)."""

    @abstractmethod
    async def append(self, record: "ChangelogRecord") -> str:
        """
        Persist a new changelog record.

        Args:
            record: Record to store (its ``id`` is ignored)

        Returns:
            The store-assigned record ID
        """

    @abstractmethod
    async def get(self, record_id: str) -> "ChangelogRecord | None":
        """Get a record by ID, or None if unknown."""

    @abstractmethod
    async def page(
        self, page_size: int, last_timestamp: str | None = None
    ) -> "ChangelogPage":
        """
        Read one page of records ordered by startDate, newest first.

        Args:
            page_size: Maximum records to return
            last_timestamp: startDate of the last record from the previous
                page; only records strictly older are returned

        Returns:
            ChangelogPage with has_more = (page came back full)

        Raises:
            InvalidDateError: If last_timestamp is not a valid timestamp
        """
