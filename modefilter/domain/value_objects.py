"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Self

from modefilter.domain.base import ValueObject
from modefilter.domain.exceptions import ScopeValidationError


# ============================================================================
# Modes
# ============================================================================


class EffectiveMode(str, Enum):
    """Resolved sell/catalog status of one entry at request time."""

    SELLABLE = "sellable"
    CATALOG_ONLY = "catalog_only"

    @classmethod
    def from_store_value(cls, value: object) -> Self | None:
        """Translate an attribute-store value into a mode.

        The attribute stores use the vocabulary ``sell`` / ``catalog``.
        Anything else (missing, empty, other spellings) is not an override.

        Args:
            value: Raw attribute-store value.

        Returns:
            The mode, or None if the value is not a valid override.
        """
        if not isinstance(value, str):
            return None
        return _STORE_VOCABULARY.get(value)

    def to_store_value(self) -> str:
        """Return the attribute-store spelling of this mode."""
        return "catalog" if self == EffectiveMode.CATALOG_ONLY else "sell"


_STORE_VOCABULARY = {
    "sell": EffectiveMode.SELLABLE,
    "catalog": EffectiveMode.CATALOG_ONLY,
}


class GlobalMode(str, Enum):
    """Process-wide storefront mode."""

    SELL = "sell"
    CATALOG = "catalog"
    HYBRID = "hybrid"

    def fallback_mode(self) -> EffectiveMode:
        """Mode used when no entry or group override applies.

        Hybrid behaves like sell at this last tier.
        """
        if self == GlobalMode.CATALOG:
            return EffectiveMode.CATALOG_ONLY
        return EffectiveMode.SELLABLE


class PoolType(str, Enum):
    """Which eligible set a listing request asks for."""

    SELLABLE = "sellable"
    CATALOG_ONLY = "catalog_only"

    @property
    def target_mode(self) -> EffectiveMode:
        """Effective mode an entry must have to be eligible."""
        return EffectiveMode(self.value)


# ============================================================================
# Classification
# ============================================================================


class Axis(str, Enum):
    """Classification axis. Declaration order is the resolution order."""

    CATEGORY = "category"
    TAG = "tag"
    BRAND = "brand"

    @property
    def facet_id(self) -> "FacetId":
        """Facet that exposes this axis."""
        return _AXIS_FACETS[self]


AXIS_ORDER: tuple[Axis, ...] = (Axis.CATEGORY, Axis.TAG, Axis.BRAND)


class FacetId(str, Enum):
    """Filterable dimension of a listing."""

    CATEGORIES = "categories"
    TAGS = "tags"
    BRANDS = "brands"
    PRICE = "price"
    RATING = "rating"

    @property
    def axis(self) -> Axis | None:
        """Classification axis behind this facet, None for price/rating."""
        return _FACET_AXES.get(self)

    @property
    def filter_key(self) -> str:
        """Key the client sends selections under."""
        return _FILTER_KEYS[self]

    @property
    def label(self) -> str:
        """Display title of the facet block."""
        return _FACET_LABELS[self]

    @property
    def is_single_select(self) -> bool:
        """Price and rating accept exactly one chip at a time."""
        return self in (FacetId.PRICE, FacetId.RATING)

    @classmethod
    def parse(cls, name: str) -> Self | None:
        """Parse a facet name, accepting singular and plural aliases.

        Args:
            name: Raw facet name from a widget attribute.

        Returns:
            The facet, or None if the name is unknown.
        """
        return _FACET_ALIASES.get(name.strip().lower())

    @classmethod
    def parse_list(cls, names: list[str] | str) -> list[Self]:
        """Parse a list (or CSV) of facet names, dropping unknown and repeats."""
        if isinstance(names, str):
            names = names.split(",")
        parsed: list[FacetId] = []
        for name in names:
            facet = cls.parse(name)
            if facet is not None and facet not in parsed:
                parsed.append(facet)
        return parsed


CANONICAL_FACET_ORDER: tuple[FacetId, ...] = (
    FacetId.CATEGORIES,
    FacetId.TAGS,
    FacetId.BRANDS,
    FacetId.PRICE,
    FacetId.RATING,
)

_AXIS_FACETS = {
    Axis.CATEGORY: FacetId.CATEGORIES,
    Axis.TAG: FacetId.TAGS,
    Axis.BRAND: FacetId.BRANDS,
}
_FACET_AXES = {facet: axis for axis, facet in _AXIS_FACETS.items()}
_FILTER_KEYS = {
    FacetId.CATEGORIES: "category",
    FacetId.TAGS: "tag",
    FacetId.BRANDS: "brand",
    FacetId.PRICE: "price",
    FacetId.RATING: "rating",
}
_FACET_LABELS = {
    FacetId.CATEGORIES: "Categories",
    FacetId.TAGS: "Tags",
    FacetId.BRANDS: "Brands",
    FacetId.PRICE: "Price",
    FacetId.RATING: "Rating",
}
_FACET_ALIASES = {
    "category": FacetId.CATEGORIES,
    "categories": FacetId.CATEGORIES,
    "tag": FacetId.TAGS,
    "tags": FacetId.TAGS,
    "brand": FacetId.BRANDS,
    "brands": FacetId.BRANDS,
    "price": FacetId.PRICE,
    "rating": FacetId.RATING,
}


# ============================================================================
# Entry Attributes
# ============================================================================


class Visibility(str, Enum):
    """Publication state of an entry."""

    PUBLISHED = "published"
    HIDDEN = "hidden"


class StockStatus(str, Enum):
    """Stock status of an entry."""

    IN_STOCK = "instock"
    OUT_OF_STOCK = "outofstock"
    ON_BACKORDER = "onbackorder"


class SortKey(str, Enum):
    """Listing sort keys accepted from the sort bar."""

    DEFAULT = ""
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    IN_STOCK = "in_stock"
    PREORDER = "preorder"
    OUT_OF_STOCK = "out_of_stock"
    RANDOM = "random"

    @classmethod
    def parse(cls, value: str | None) -> Self:
        """Parse a sort key; ``date`` is an alias of the default order.

        Raises:
            ScopeValidationError: If the key is unknown.
        """
        raw = (value or "").strip().lower()
        if raw == "date":
            raw = ""
        try:
            return cls(raw)
        except ValueError:
            raise ScopeValidationError("sort", f"unknown sort key '{value}'") from None

    @property
    def stock_filter(self) -> StockStatus | None:
        """Stock sorts are really equality filters on stock status."""
        return _STOCK_SORTS.get(self)


_STOCK_SORTS = {
    SortKey.IN_STOCK: StockStatus.IN_STOCK,
    SortKey.PREORDER: StockStatus.ON_BACKORDER,
    SortKey.OUT_OF_STOCK: StockStatus.OUT_OF_STOCK,
}


# ============================================================================
# Display
# ============================================================================


class PaginationStrategy(str, Enum):
    """How the client pages through the eligible set."""

    LOAD_MORE = "load_more"
    NUMBERS = "numbers"
    INFINITE = "infinite"
    NONE = "none"

    @property
    def appends(self) -> bool:
        """Whether new pages are appended to the grid instead of replacing it."""
        return self in (PaginationStrategy.LOAD_MORE, PaginationStrategy.INFINITE)


class GridLayout(str, Enum):
    """Grid arrangement of entry cards."""

    GRID = "grid"
    MASONRY = "masonry"
    JUSTIFIED = "justified"


class FiltersMode(str, Enum):
    """Facet-selection mode."""

    MANUAL = "manual"
    AUTO = "auto"


class TermsOrderBy(str, Enum):
    """Ordering of classification chips."""

    COUNT = "count"
    NAME = "name"


class SortDirection(str, Enum):
    """Ascending or descending chip order."""

    ASC = "ASC"
    DESC = "DESC"


class FilterPosition(str, Enum):
    """Where the facet sidebar sits relative to the grid."""

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"


class ExcerptLengthType(str, Enum):
    """Unit used when trimming card excerpts."""

    WORDS = "words"
    CHARS = "chars"


class ResponseStatus(str, Enum):
    """Status of a successful fetch."""

    OK = "ok"
    NO_RESULTS = "no_results"


class TriggerSource(str, Enum):
    """What caused the client widget to fetch."""

    CLICK = "click"
    VIEWPORT_INTERSECTION = "viewport_intersection"
    PROGRAMMATIC = "programmatic"


# ============================================================================
# Settings
# ============================================================================


@dataclass(frozen=True)
class GlobalSettings(ValueObject):
    """Process-wide storefront settings, read once per request."""

    global_mode: GlobalMode = GlobalMode.SELL
    hide_prices: bool = True
    replace_button: bool = True
    button_label: str = "Enquire"
    button_url: str = ""


# ============================================================================
# Ranges and Layout
# ============================================================================


NO_UPPER_PRICE = Decimal("999999999")


def _to_decimal(value: object, field_name: str) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ScopeValidationError(field_name, f"'{value}' is not a number") from None
    if not amount.is_finite():
        raise ScopeValidationError(field_name, "must be a finite number")
    return amount


@dataclass(frozen=True)
class PriceRange(ValueObject):
    """Inclusive price range; a missing bound is open.

    Attributes:
        min_price: Lower bound, or None.
        max_price: Upper bound, or None.
    """

    min_price: Decimal | None = None
    max_price: Decimal | None = None

    def __post_init__(self) -> None:
        """Validate the bounds."""
        if self.min_price is not None and self.min_price < 0:
            raise ScopeValidationError("price_min", "cannot be negative")
        if self.max_price is not None and self.max_price < 0:
            raise ScopeValidationError("price_max", "cannot be negative")
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ScopeValidationError("price_min", "cannot exceed price_max")

    @classmethod
    def from_bounds(cls, min_price: object, max_price: object) -> Self | None:
        """Build a range from raw bounds; None when both are absent."""
        low = _to_decimal(min_price, "price_min")
        high = _to_decimal(max_price, "price_max")
        if low is None and high is None:
            return None
        return cls(min_price=low, max_price=high)

    @classmethod
    def from_chip_value(cls, value: str) -> Self | None:
        """Parse a price chip value such as ``50|100`` or ``200|``.

        Returns:
            The range, or None for the "All" chip.
        """
        if not value:
            return None
        low, sep, high = value.partition("|")
        if not sep:
            raise ScopeValidationError("price", f"malformed price chip '{value}'")
        return cls.from_bounds(low, high)

    @property
    def lower(self) -> Decimal:
        """Lower bound with the open side closed at zero."""
        return self.min_price if self.min_price is not None else Decimal("0")

    @property
    def upper(self) -> Decimal:
        """Upper bound with the open side closed at a very large price."""
        return self.max_price if self.max_price is not None else NO_UPPER_PRICE

    def contains(self, price: Decimal | None) -> bool:
        """Check whether a price falls in the range; unpriced never matches."""
        if price is None:
            return False
        return self.lower <= price <= self.upper


def clamp(value: int, low: int, high: int) -> int:
    """Clamp an integer into ``[low, high]``."""
    return max(low, min(high, value))


@dataclass(frozen=True)
class LayoutParams(ValueObject):
    """Grid layout parameters echoed back to the client."""

    grid_layout: GridLayout = GridLayout.GRID
    masonry_gap: int = 20
    justified_row_height: int = 220

    @classmethod
    def normalized(
        cls,
        grid_layout: GridLayout = GridLayout.GRID,
        masonry_gap: int = 20,
        justified_row_height: int = 220,
    ) -> Self:
        """Build layout params with gap and row height clamped to range."""
        return cls(
            grid_layout=grid_layout,
            masonry_gap=clamp(masonry_gap, 0, 200),
            justified_row_height=clamp(justified_row_height, 50, 1200),
        )


# ============================================================================
# Facet Blocks
# ============================================================================


@dataclass(frozen=True)
class Chip(ValueObject):
    """One selectable value within a facet block."""

    value: str
    label: str
    is_default_chip: bool = False
    is_overflow: bool = False


@dataclass(frozen=True)
class FacetBlock(ValueObject):
    """Request-scoped chip list for one facet."""

    facet: FacetId
    chips: tuple[Chip, ...] = field(default_factory=tuple)
    has_more: bool = False

    @property
    def label(self) -> str:
        """Display title."""
        return self.facet.label

    @property
    def filter_key(self) -> str:
        """Key selections are sent under."""
        return self.facet.filter_key

    @property
    def group_chips(self) -> tuple[Chip, ...]:
        """Chips other than the synthetic "All" chip."""
        return tuple(chip for chip in self.chips if not chip.is_default_chip)

    @property
    def overflow_count(self) -> int:
        """Number of chips hidden behind "show more"."""
        return sum(1 for chip in self.chips if chip.is_overflow)
