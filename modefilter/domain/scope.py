"""Request scope value objects.

Everything a listing request says about *which* entries it wants
(``RequestScope`` and ``ActiveSelections``), *which facets* it shows
(``FacetOptions``) and *how* the page is displayed (``DisplayOptions``).
All objects validate on construction so malformed requests fail before
any backend call.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Self

from modefilter.domain.base import ValueObject
from modefilter.domain.exceptions import ScopeValidationError
from modefilter.domain.value_objects import (
    CANONICAL_FACET_ORDER,
    Axis,
    ExcerptLengthType,
    FacetId,
    FilterPosition,
    FiltersMode,
    LayoutParams,
    PaginationStrategy,
    PoolType,
    PriceRange,
    SortDirection,
    SortKey,
    TermsOrderBy,
    clamp,
)

MAX_PER_PAGE = 100


def validate_rating(value: object, field_name: str = "rating_min") -> int | None:
    """Parse a minimum rating; valid values are 1 to 5.

    Args:
        value: Raw value ("", None or a number).
        field_name: Field name reported on failure.

    Returns:
        The rating, or None when absent.

    Raises:
        ScopeValidationError: If the value is not an integer in range.
    """
    if value is None or value == "":
        return None
    try:
        rating = int(str(value))
    except ValueError:
        raise ScopeValidationError(field_name, f"'{value}' is not an integer") from None
    if not 1 <= rating <= 5:
        raise ScopeValidationError(field_name, "must be between 1 and 5")
    return rating


def _group_map(
    raw: Mapping[Axis, Iterable[int]] | None, field_name: str
) -> Mapping[Axis, tuple[int, ...]]:
    groups: dict[Axis, tuple[int, ...]] = {}
    for axis, ids in (raw or {}).items():
        cleaned: list[int] = []
        for group_id in ids:
            if group_id <= 0:
                raise ScopeValidationError(field_name, f"invalid group id {group_id}")
            if group_id not in cleaned:
                cleaned.append(group_id)
        if cleaned:
            groups[Axis(axis)] = tuple(cleaned)
    return MappingProxyType(groups)


# ============================================================================
# Request Scope
# ============================================================================


@dataclass(frozen=True)
class RequestScope(ValueObject):
    """Base constraints of a listing request.

    Attributes:
        pool_type: Sellable or catalog-only listing.
        base_group_slug: Category slug restricting the sellable pool.
        includes: Per axis, entries must belong to one of these groups.
        excludes: Per axis, entries must belong to none of these groups.
        price_range: Fixed price range of the widget.
        rating_min: Fixed minimum rating (1-5).
        sort: Sort key.
        random_seed: Seed for the random sort.
    """

    pool_type: PoolType = PoolType.SELLABLE
    base_group_slug: str | None = None
    includes: Mapping[Axis, tuple[int, ...]] = field(default_factory=dict)
    excludes: Mapping[Axis, tuple[int, ...]] = field(default_factory=dict)
    price_range: PriceRange | None = None
    rating_min: int | None = None
    sort: SortKey = SortKey.DEFAULT
    random_seed: int | None = None

    def __post_init__(self) -> None:
        """Normalize group maps and validate ranges."""
        object.__setattr__(self, "includes", _group_map(self.includes, "includes"))
        object.__setattr__(self, "excludes", _group_map(self.excludes, "excludes"))
        if self.base_group_slug is not None:
            slug = self.base_group_slug.strip()
            object.__setattr__(self, "base_group_slug", slug or None)
        if self.rating_min is not None:
            validate_rating(self.rating_min)

    @property
    def applies_base_group(self) -> bool:
        """The base group only restricts the sellable pool."""
        return self.pool_type == PoolType.SELLABLE and self.base_group_slug is not None


# ============================================================================
# Active Facet Selections
# ============================================================================


@dataclass(frozen=True)
class ActiveSelections(ValueObject):
    """Chips the shopper has selected, sent with every fetch.

    Attributes:
        groups: Selected group ids per classification axis.
        price_range: Range of the selected price chip.
        rating_min: Value of the selected rating chip.
    """

    groups: Mapping[Axis, tuple[int, ...]] = field(default_factory=dict)
    price_range: PriceRange | None = None
    rating_min: int | None = None

    def __post_init__(self) -> None:
        """Normalize the group map and validate the rating."""
        object.__setattr__(self, "groups", _group_map(self.groups, "active_facet_selections"))
        if self.rating_min is not None:
            validate_rating(self.rating_min, "rating")

    @classmethod
    def from_chip_values(
        cls,
        categories: Iterable[int] = (),
        tags: Iterable[int] = (),
        brands: Iterable[int] = (),
        price: str = "",
        rating: str = "",
    ) -> Self:
        """Build selections from raw chip values.

        Args:
            categories: Selected category ids.
            tags: Selected tag ids.
            brands: Selected brand ids.
            price: Price chip value (``min|max``), "" for All.
            rating: Rating chip value, "" for All.

        Returns:
            Validated selections.
        """
        return cls(
            groups={
                Axis.CATEGORY: tuple(categories),
                Axis.TAG: tuple(tags),
                Axis.BRAND: tuple(brands),
            },
            price_range=PriceRange.from_chip_value(price),
            rating_min=validate_rating(rating, "rating"),
        )

    @property
    def is_empty(self) -> bool:
        """Whether nothing is selected."""
        return not self.groups and self.price_range is None and self.rating_min is None

    def selected_ids(self, axis: Axis) -> tuple[int, ...]:
        """Selected group ids on one axis."""
        return self.groups.get(axis, ())


# ============================================================================
# Facet Options
# ============================================================================


@dataclass(frozen=True)
class FacetOptions(ValueObject):
    """Which facets the widget shows and how chips are built.

    Attributes:
        mode: Manual (render requested as-is) or auto (intersect detection).
        requested: Facets asked for by the widget, in caller order.
        limit: Number of group chips before overflow (1-200).
        order_by: Chip ordering for categories.
        order_dir: Chip ordering direction for categories.
        show_more: Keep overflow chips (hidden) instead of truncating.
    """

    mode: FiltersMode = FiltersMode.MANUAL
    requested: tuple[FacetId, ...] = field(default_factory=tuple)
    limit: int = 12
    order_by: TermsOrderBy = TermsOrderBy.COUNT
    order_dir: SortDirection = SortDirection.DESC
    show_more: bool = True

    def __post_init__(self) -> None:
        """Clamp the limit and drop repeated facets."""
        object.__setattr__(self, "limit", clamp(self.limit, 1, 200))
        unique: list[FacetId] = []
        for facet in self.requested:
            if facet not in unique:
                unique.append(facet)
        object.__setattr__(self, "requested", tuple(unique))

    def enabled(self) -> tuple[FacetId, ...]:
        """Facets whose selections are honored by the pool builder.

        Manual mode enables exactly the requested list; auto mode with an
        empty list enables every facet.
        """
        if self.requested:
            return self.requested
        if self.mode == FiltersMode.AUTO:
            return CANONICAL_FACET_ORDER
        return ()


# ============================================================================
# Display Options
# ============================================================================


@dataclass(frozen=True)
class DisplayOptions(ValueObject):
    """Presentation parameters of the grid.

    Attributes:
        columns: Grid columns (>= 1).
        per_page: Page size (1-100).
        pagination: Pagination strategy.
        layout: Grid layout parameters.
        custom_layout: Card parts such as ``badge|image|!price|title``.
        show_excerpt: Whether cards show the excerpt.
        excerpt_length: Excerpt length (1-500).
        excerpt_length_type: Unit of ``excerpt_length``.
        catalog_button_text: Label of the enquiry button, "" for settings.
        load_more_text: Label of the load-more button.
        filter_position: Sidebar position.
    """

    columns: int = 3
    per_page: int = 9
    pagination: PaginationStrategy = PaginationStrategy.LOAD_MORE
    layout: LayoutParams = field(default_factory=LayoutParams)
    custom_layout: str = ""
    show_excerpt: bool = True
    excerpt_length: int = 20
    excerpt_length_type: ExcerptLengthType = ExcerptLengthType.WORDS
    catalog_button_text: str = ""
    load_more_text: str = "Load more"
    filter_position: FilterPosition = FilterPosition.LEFT

    def __post_init__(self) -> None:
        """Validate sizes and clamp the excerpt length."""
        if self.columns < 1:
            raise ScopeValidationError("columns", "must be at least 1")
        if not 1 <= self.per_page <= MAX_PER_PAGE:
            raise ScopeValidationError("per_page", f"must be between 1 and {MAX_PER_PAGE}")
        object.__setattr__(self, "excerpt_length", clamp(self.excerpt_length, 1, 500))

