"""Domain entities for the ModeFilter system.

Entities are read-only snapshots of catalog data owned by the external
entry store: catalog entries and the classification groups they belong to.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from modefilter.domain.base import Entity
from modefilter.domain.value_objects import (
    AXIS_ORDER,
    Axis,
    StockStatus,
    Visibility,
)


def _epoch() -> datetime:
    return datetime(1970, 1, 1, tzinfo=timezone.utc)


# ============================================================================
# Classification Group Entity
# ============================================================================


@dataclass(eq=False)
class ClassificationGroup(Entity[int]):
    """A named value within one classification axis (a "term").

    Attributes:
        id: Stable integer identifier, unique across all axes.
        axis: Axis the group belongs to.
        name: Display name.
        slug: URL-safe identifier, unique within the axis.
        count: Store-wide membership count.
        attributes: Group attribute store (holds the group mode default).
    """

    id: int
    axis: Axis
    name: str
    slug: str
    count: int = 0
    attributes: Mapping[str, str] = field(default_factory=dict)


# ============================================================================
# Entry Entity
# ============================================================================


@dataclass(eq=False)
class Entry(Entity[int]):
    """One catalog item.

    Attributes:
        id: Stable integer identifier.
        title: Display title.
        visibility: Published or hidden.
        groups: Group ids per axis the entry belongs to.
        price: Current price, None when the entry has no price.
        rating_average: Average review rating (0 when unrated).
        rating_count: Number of reviews.
        stock_status: Stock status.
        attributes: Entry attribute store (holds the entry mode override).
        excerpt: Short description shown on cards.
        permalink: Link to the entry page.
        image_url: Primary image, if any.
        on_sale: Whether a sale price is active.
        published_at: Publication time, drives the default ordering.
    """

    id: int
    title: str
    visibility: Visibility = Visibility.PUBLISHED
    groups: Mapping[Axis, tuple[int, ...]] = field(default_factory=dict)
    price: Decimal | None = None
    rating_average: float = 0.0
    rating_count: int = 0
    stock_status: StockStatus = StockStatus.IN_STOCK
    attributes: Mapping[str, str] = field(default_factory=dict)
    excerpt: str = ""
    permalink: str = ""
    image_url: str | None = None
    on_sale: bool = False
    published_at: datetime = field(default_factory=_epoch)

    @property
    def is_published(self) -> bool:
        """Check whether the entry is publicly visible."""
        return self.visibility == Visibility.PUBLISHED

    @property
    def has_price(self) -> bool:
        """Check whether the entry has a resolvable price."""
        return self.price is not None

    @property
    def has_rating(self) -> bool:
        """Check whether the entry has any rating data."""
        return self.rating_count > 0 or self.rating_average > 0

    def group_ids(self, axis: Axis) -> tuple[int, ...]:
        """Get the entry's groups on one axis in stable (ascending id) order.

        Args:
            axis: Classification axis.

        Returns:
            Sorted tuple of group ids.
        """
        return tuple(sorted(set(self.groups.get(axis, ()))))

    def all_group_ids(self) -> list[int]:
        """Get every group id in resolution order (axis order, then id)."""
        ordered: list[int] = []
        for axis in AXIS_ORDER:
            ordered.extend(self.group_ids(axis))
        return ordered

    def belongs_to_any(self, axis: Axis, group_ids: set[int] | frozenset[int]) -> bool:
        """Check whether the entry is a member of any of the given groups."""
        return any(group_id in group_ids for group_id in self.groups.get(axis, ()))
