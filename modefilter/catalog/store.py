"""Entry store adapter contract.

The entry store is the read-only, query-capable view of the catalog. It
filters published entries by group membership, price range, minimum
rating and stock status, returns matching ids in a stable order, and
loads full entries and groups on demand.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from modefilter.domain.entities import ClassificationGroup, Entry
from modefilter.domain.value_objects import Axis, PriceRange, SortKey, StockStatus


@dataclass(frozen=True)
class GroupConstraint:
    """Membership constraint on one axis.

    Attributes:
        axis: Classification axis.
        group_ids: Candidate groups.
        exclude: When True the entry must belong to none of the groups,
            otherwise to at least one.
    """

    axis: Axis
    group_ids: tuple[int, ...]
    exclude: bool = False

    def matches(self, entry: Entry) -> bool:
        """Evaluate the constraint against an entry."""
        member = entry.belongs_to_any(self.axis, frozenset(self.group_ids))
        return not member if self.exclude else member


@dataclass(frozen=True)
class EntryQuery:
    """Conjunction of constraints over published entries.

    Attributes:
        groups: Membership constraints, all of which must hold.
        base_group_slug: Category slug the entry must belong to.
        price_range: Inclusive price range; unpriced entries never match.
        rating_min: Minimum average rating.
        stock_status: Required stock status.
        order: DEFAULT (newest first), PRICE_ASC or PRICE_DESC. Any other
            key is ordered like DEFAULT.
    """

    groups: tuple[GroupConstraint, ...] = field(default_factory=tuple)
    base_group_slug: str | None = None
    price_range: PriceRange | None = None
    rating_min: float | None = None
    stock_status: StockStatus | None = None
    order: SortKey = SortKey.DEFAULT

    def matches(self, entry: Entry, base_group_ids: frozenset[int] | None = None) -> bool:
        """Evaluate every constraint except the base group slug.

        Args:
            entry: Entry to test.
            base_group_ids: Ids the slug resolved to, when a slug is set.

        Returns:
            True if the entry satisfies the query.
        """
        if not entry.is_published:
            return False
        if self.base_group_slug is not None:
            if not base_group_ids or not entry.belongs_to_any(Axis.CATEGORY, base_group_ids):
                return False
        if not all(constraint.matches(entry) for constraint in self.groups):
            return False
        if self.price_range is not None and not self.price_range.contains(entry.price):
            return False
        if self.rating_min is not None and entry.rating_average < self.rating_min:
            return False
        if self.stock_status is not None and entry.stock_status != self.stock_status:
            return False
        return True


def sort_entries(entries: Sequence[Entry], order: SortKey) -> list[Entry]:
    """Order entries the way every store orders query results.

    Newest first with id descending as tiebreak by default. Price orders
    break ties by id ascending and put unpriced entries last.
    """
    if order == SortKey.PRICE_ASC:
        priced = sorted((e for e in entries if e.has_price), key=lambda e: (e.price, e.id))
        return priced + [e for e in sorted(entries, key=lambda e: e.id) if not e.has_price]
    if order == SortKey.PRICE_DESC:
        priced = sorted((e for e in entries if e.has_price), key=lambda e: (-e.price, e.id))
        return priced + [e for e in sorted(entries, key=lambda e: e.id) if not e.has_price]
    return sorted(entries, key=lambda e: (e.published_at, e.id), reverse=True)


class EntryStore(Protocol):
    """Read-only query interface over the catalog."""

    async def find_ids(self, query: EntryQuery) -> list[int]:
        """Return ids of all published entries matching the query, in order."""
        ...

    async def get_entries(self, entry_ids: Sequence[int]) -> list[Entry]:
        """Load entries in the requested order; unknown ids are skipped."""
        ...

    async def get_groups(self, axis: Axis | None = None) -> list[ClassificationGroup]:
        """Return all groups, optionally restricted to one axis."""
        ...

    async def count_memberships(self, axis: Axis, entry_ids: Sequence[int]) -> dict[int, int]:
        """Count, per group of an axis, how many of the given entries belong to it.

        Groups with no member among the entries are omitted.
        """
        ...

    async def ping(self) -> None:
        """Check the store is reachable; raise BackendUnavailableError if not."""
        ...
