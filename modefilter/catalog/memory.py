"""In-memory entry store.

Holds a catalog snapshot in dictionaries. Used for the seeded demo catalog
and in tests; behaves exactly like the SQL store.
"""

from collections.abc import Iterable, Sequence

import structlog

from modefilter.catalog.store import EntryQuery, sort_entries
from modefilter.domain.entities import ClassificationGroup, Entry
from modefilter.domain.value_objects import Axis

logger = structlog.get_logger()


class InMemoryEntryStore:
    """Entry store over an in-memory snapshot.

    Example usage:
        store = InMemoryEntryStore(entries=entries, groups=groups)
        ids = await store.find_ids(EntryQuery(order=SortKey.PRICE_ASC))
    """

    def __init__(
        self,
        entries: Iterable[Entry] = (),
        groups: Iterable[ClassificationGroup] = (),
    ) -> None:
        """Initialize the store.

        Args:
            entries: Catalog entries.
            groups: Classification groups across all axes.
        """
        self._entries: dict[int, Entry] = {entry.id: entry for entry in entries}
        self._groups: dict[int, ClassificationGroup] = {group.id: group for group in groups}

    def __len__(self) -> int:
        return len(self._entries)

    def add_entry(self, entry: Entry) -> None:
        """Insert or replace an entry."""
        self._entries[entry.id] = entry

    def add_group(self, group: ClassificationGroup) -> None:
        """Insert or replace a group."""
        self._groups[group.id] = group

    def _slug_ids(self, slug: str) -> frozenset[int]:
        return frozenset(
            group.id
            for group in self._groups.values()
            if group.axis == Axis.CATEGORY and group.slug == slug
        )

    async def find_ids(self, query: EntryQuery) -> list[int]:
        """Return ids of published entries matching the query."""
        base_ids = None
        if query.base_group_slug is not None:
            base_ids = self._slug_ids(query.base_group_slug)
        matching = [entry for entry in self._entries.values() if query.matches(entry, base_ids)]
        return [entry.id for entry in sort_entries(matching, query.order)]

    async def get_entries(self, entry_ids: Sequence[int]) -> list[Entry]:
        """Load entries in the requested order, skipping unknown ids."""
        return [self._entries[entry_id] for entry_id in entry_ids if entry_id in self._entries]

    async def get_groups(self, axis: Axis | None = None) -> list[ClassificationGroup]:
        """Return groups ordered by id, optionally for one axis."""
        groups = sorted(self._groups.values(), key=lambda group: group.id)
        if axis is None:
            return groups
        return [group for group in groups if group.axis == axis]

    async def count_memberships(self, axis: Axis, entry_ids: Sequence[int]) -> dict[int, int]:
        """Count pool members per group of one axis."""
        counts: dict[int, int] = {}
        for entry_id in set(entry_ids):
            entry = self._entries.get(entry_id)
            if entry is None:
                continue
            for group_id in entry.group_ids(axis):
                counts[group_id] = counts.get(group_id, 0) + 1
        return counts

    async def ping(self) -> None:
        """The in-memory store is always reachable."""
        logger.debug("memory_store_ping", entries=len(self._entries), groups=len(self._groups))
