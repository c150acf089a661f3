"""SQL entry store.

Implements the entry store contract over the entries/groups/entry_groups
tables with async SQLAlchemy. Every database failure is reported as
BackendUnavailableError.
"""

from collections.abc import Sequence
from typing import Any

import structlog
from sqlalchemy import case, delete, func, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from modefilter.catalog.models import EntryRecord, GroupRecord, entry_groups, membership_rows
from modefilter.catalog.store import EntryQuery
from modefilter.domain.entities import ClassificationGroup, Entry
from modefilter.domain.exceptions import BackendUnavailableError
from modefilter.domain.value_objects import Axis, SortKey, Visibility

logger = structlog.get_logger()

# Keeps IN lists below the bound-parameter limits of every backend
CHUNK_SIZE = 500


def _chunks(ids: Sequence[int]) -> list[Sequence[int]]:
    return [ids[i : i + CHUNK_SIZE] for i in range(0, len(ids), CHUNK_SIZE)]


class SqlEntryStore:
    """Entry store backed by a relational database.

    Example usage:
        async with get_session_factory()() as session:
            store = SqlEntryStore(session)
            ids = await store.find_ids(EntryQuery(base_group_slug="shoes"))
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize store with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def _execute(self, statement: Any, params: Any = None) -> Any:
        """Execute a statement, translating driver failures."""
        try:
            return await self.session.execute(statement, params)
        except (SQLAlchemyError, OSError) as e:
            logger.error("entry_store_query_failed", error=str(e), error_type=type(e).__name__)
            raise BackendUnavailableError("entry_store", str(e)) from e

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _build_select(self, query: EntryQuery) -> Any:
        """Translate an EntryQuery into a SELECT of entry ids."""
        conditions = [EntryRecord.visibility == Visibility.PUBLISHED.value]

        if query.base_group_slug is not None:
            base = (
                select(entry_groups.c.entry_id)
                .join(GroupRecord, GroupRecord.id == entry_groups.c.group_id)
                .where(
                    GroupRecord.axis == Axis.CATEGORY.value,
                    GroupRecord.slug == query.base_group_slug,
                )
            )
            conditions.append(EntryRecord.id.in_(base))

        for constraint in query.groups:
            members = select(entry_groups.c.entry_id).where(
                entry_groups.c.axis == constraint.axis.value,
                entry_groups.c.group_id.in_(constraint.group_ids),
            )
            if constraint.exclude:
                conditions.append(EntryRecord.id.not_in(members))
            else:
                conditions.append(EntryRecord.id.in_(members))

        if query.price_range is not None:
            conditions.append(EntryRecord.price.is_not(None))
            conditions.append(
                EntryRecord.price.between(query.price_range.lower, query.price_range.upper)
            )

        if query.rating_min is not None:
            conditions.append(EntryRecord.rating_average >= query.rating_min)

        if query.stock_status is not None:
            conditions.append(EntryRecord.stock_status == query.stock_status.value)

        statement = select(EntryRecord.id).where(*conditions)

        unpriced_last = case((EntryRecord.price.is_(None), 1), else_=0)
        if query.order == SortKey.PRICE_ASC:
            return statement.order_by(unpriced_last, EntryRecord.price.asc(), EntryRecord.id.asc())
        if query.order == SortKey.PRICE_DESC:
            return statement.order_by(unpriced_last, EntryRecord.price.desc(), EntryRecord.id.asc())
        return statement.order_by(EntryRecord.published_at.desc(), EntryRecord.id.desc())

    async def find_ids(self, query: EntryQuery) -> list[int]:
        """Return ids of published entries matching the query."""
        result = await self._execute(self._build_select(query))
        return list(result.scalars().all())

    async def get_entries(self, entry_ids: Sequence[int]) -> list[Entry]:
        """Load entries with memberships, in the requested order."""
        ids = list(dict.fromkeys(entry_ids))
        records: dict[int, EntryRecord] = {}
        memberships: dict[int, dict[Axis, list[int]]] = {}

        for chunk in _chunks(ids):
            result = await self._execute(select(EntryRecord).where(EntryRecord.id.in_(chunk)))
            for record in result.scalars().all():
                records[record.id] = record

            result = await self._execute(
                select(entry_groups.c.entry_id, entry_groups.c.group_id, entry_groups.c.axis)
                .where(entry_groups.c.entry_id.in_(chunk))
                .order_by(entry_groups.c.group_id)
            )
            for entry_id, group_id, axis in result.all():
                memberships.setdefault(entry_id, {}).setdefault(Axis(axis), []).append(group_id)

        entries: list[Entry] = []
        for entry_id in entry_ids:
            record = records.get(entry_id)
            if record is None:
                continue
            groups = {axis: tuple(gids) for axis, gids in memberships.get(entry_id, {}).items()}
            entries.append(record.to_domain(groups))
        return entries

    async def get_groups(self, axis: Axis | None = None) -> list[ClassificationGroup]:
        """Return groups ordered by id, optionally for one axis."""
        statement = select(GroupRecord).order_by(GroupRecord.id)
        if axis is not None:
            statement = statement.where(GroupRecord.axis == axis.value)
        result = await self._execute(statement)
        return [record.to_domain() for record in result.scalars().all()]

    async def count_memberships(self, axis: Axis, entry_ids: Sequence[int]) -> dict[int, int]:
        """Count pool members per group of one axis."""
        counts: dict[int, int] = {}
        for chunk in _chunks(list(set(entry_ids))):
            result = await self._execute(
                select(entry_groups.c.group_id, func.count(entry_groups.c.entry_id))
                .where(
                    entry_groups.c.axis == axis.value,
                    entry_groups.c.entry_id.in_(chunk),
                )
                .group_by(entry_groups.c.group_id)
            )
            for group_id, count in result.all():
                counts[group_id] = counts.get(group_id, 0) + count
        return counts

    async def ping(self) -> None:
        """Run a trivial query to check connectivity."""
        await self._execute(select(1))

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    async def replace_catalog(
        self,
        groups: Sequence[ClassificationGroup],
        entries: Sequence[Entry],
    ) -> None:
        """Replace the stored catalog with the given snapshot.

        Used by the seeding script and tests; the caller commits.

        Args:
            groups: Groups to store.
            entries: Entries to store, memberships included.
        """
        await self._execute(delete(entry_groups))
        await self._execute(delete(EntryRecord))
        await self._execute(delete(GroupRecord))
        self.session.add_all([GroupRecord.from_domain(group) for group in groups])
        self.session.add_all([EntryRecord.from_domain(entry) for entry in entries])
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            raise BackendUnavailableError("entry_store", str(e)) from e
        rows = [row for entry in entries for row in membership_rows(entry)]
        if rows:
            await self._execute(insert(entry_groups), rows)
        logger.info("catalog_replaced", groups=len(groups), entries=len(entries))
