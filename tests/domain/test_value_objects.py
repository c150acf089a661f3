"""Tests for domain value objects and request scope."""

from decimal import Decimal

import pytest

from modefilter.domain import (
    ActiveSelections,
    Axis,
    DisplayOptions,
    EffectiveMode,
    FacetBlock,
    FacetId,
    FacetOptions,
    FiltersMode,
    LayoutParams,
    PoolType,
    PriceRange,
    RequestScope,
    SortKey,
    StockStatus,
)
from modefilter.domain.exceptions import ScopeValidationError
from modefilter.domain.value_objects import Chip


class TestEffectiveMode:
    """Tests for attribute-store vocabulary."""

    def test_store_values_round_trip(self) -> None:
        """``sell`` and ``catalog`` map to the two modes."""
        assert EffectiveMode.from_store_value("sell") == EffectiveMode.SELLABLE
        assert EffectiveMode.from_store_value("catalog") == EffectiveMode.CATALOG_ONLY
        assert EffectiveMode.CATALOG_ONLY.to_store_value() == "catalog"

    @pytest.mark.parametrize("value", [None, "", "SELL", "sellable", 1])
    def test_other_values_are_not_overrides(self, value) -> None:
        """Anything outside the vocabulary is ignored."""
        assert EffectiveMode.from_store_value(value) is None

    def test_pool_target_mode(self) -> None:
        """Each pool type targets the matching mode."""
        assert PoolType.SELLABLE.target_mode == EffectiveMode.SELLABLE
        assert PoolType.CATALOG_ONLY.target_mode == EffectiveMode.CATALOG_ONLY


class TestFacetId:
    """Tests for facet names."""

    def test_parse_accepts_aliases(self) -> None:
        """Singular and plural names parse to the same facet."""
        assert FacetId.parse("Category") == FacetId.CATEGORIES
        assert FacetId.parse(" brands ") == FacetId.BRANDS
        assert FacetId.parse("colour") is None

    def test_parse_list_drops_unknown_and_repeats(self) -> None:
        """CSV lists keep caller order without duplicates."""
        assert FacetId.parse_list("price,tag,bogus,tags") == [FacetId.PRICE, FacetId.TAGS]

    def test_axis_mapping(self) -> None:
        """Only classification facets have an axis."""
        assert FacetId.TAGS.axis == Axis.TAG
        assert FacetId.PRICE.axis is None
        assert Axis.BRAND.facet_id == FacetId.BRANDS


class TestSortKey:
    """Tests for sort keys."""

    def test_date_is_default(self) -> None:
        """``date`` and empty both mean the default order."""
        assert SortKey.parse("date") == SortKey.DEFAULT
        assert SortKey.parse(None) == SortKey.DEFAULT

    def test_unknown_key_rejected(self) -> None:
        """Unknown sort keys are validation errors."""
        with pytest.raises(ScopeValidationError) as exc_info:
            SortKey.parse("popularity")
        assert exc_info.value.field == "sort"

    def test_stock_sorts_filter(self) -> None:
        """Stock sorts translate into stock filters."""
        assert SortKey.PREORDER.stock_filter == StockStatus.ON_BACKORDER
        assert SortKey.PRICE_ASC.stock_filter is None


class TestPriceRange:
    """Tests for PriceRange."""

    def test_from_chip_value(self) -> None:
        """Chip values parse into open or closed ranges."""
        assert PriceRange.from_chip_value("50|100") == PriceRange(Decimal("50"), Decimal("100"))
        assert PriceRange.from_chip_value("200|") == PriceRange(Decimal("200"), None)
        assert PriceRange.from_chip_value("") is None

    def test_malformed_chip_rejected(self) -> None:
        """A chip value without separator is rejected."""
        with pytest.raises(ScopeValidationError):
            PriceRange.from_chip_value("50")

    def test_negative_price_rejected(self) -> None:
        """Negative bounds are rejected."""
        with pytest.raises(ScopeValidationError):
            PriceRange.from_bounds("-1", None)

    def test_min_above_max_rejected(self) -> None:
        """price_min above price_max is rejected."""
        with pytest.raises(ScopeValidationError) as exc_info:
            PriceRange.from_bounds("100", "50")
        assert exc_info.value.field == "price_min"

    def test_non_numeric_rejected(self) -> None:
        """Non-numeric bounds are rejected."""
        with pytest.raises(ScopeValidationError):
            PriceRange.from_bounds("cheap", None)

    def test_contains_is_inclusive_and_skips_unpriced(self) -> None:
        """Bounds are inclusive; unpriced entries never match."""
        price_range = PriceRange(Decimal("50"), Decimal("100"))
        assert price_range.contains(Decimal("50"))
        assert price_range.contains(Decimal("100"))
        assert not price_range.contains(Decimal("100.01"))
        assert not price_range.contains(None)


class TestRequestScope:
    """Tests for RequestScope."""

    def test_group_maps_are_deduplicated(self) -> None:
        """Repeated ids collapse and empty axes are dropped."""
        scope = RequestScope(includes={Axis.CATEGORY: (3, 3, 4), Axis.TAG: ()})
        assert dict(scope.includes) == {Axis.CATEGORY: (3, 4)}

    def test_non_positive_group_id_rejected(self) -> None:
        """Group ids must be positive."""
        with pytest.raises(ScopeValidationError):
            RequestScope(excludes={Axis.BRAND: (0,)})

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range_rejected(self, rating: int) -> None:
        """Ratings must lie in 1-5."""
        with pytest.raises(ScopeValidationError):
            RequestScope(rating_min=rating)

    def test_base_group_only_applies_to_sellable(self) -> None:
        """The base group never restricts the catalog pool."""
        assert RequestScope(base_group_slug="shoes").applies_base_group
        catalog = RequestScope(pool_type=PoolType.CATALOG_ONLY, base_group_slug="shoes")
        assert not catalog.applies_base_group
        assert not RequestScope(base_group_slug="  ").applies_base_group


class TestActiveSelections:
    """Tests for ActiveSelections."""

    def test_from_chip_values(self) -> None:
        """Chip values become typed selections."""
        selections = ActiveSelections.from_chip_values(
            categories=[4], price="0|50", rating="4"
        )
        assert selections.selected_ids(Axis.CATEGORY) == (4,)
        assert selections.selected_ids(Axis.TAG) == ()
        assert selections.price_range == PriceRange(Decimal("0"), Decimal("50"))
        assert selections.rating_min == 4
        assert not selections.is_empty

    def test_empty(self) -> None:
        """All-chips selections are empty."""
        assert ActiveSelections.from_chip_values().is_empty

    def test_invalid_rating_chip_rejected(self) -> None:
        """Rating chip values outside 1-5 are rejected."""
        with pytest.raises(ScopeValidationError):
            ActiveSelections.from_chip_values(rating="9")


class TestFacetOptions:
    """Tests for FacetOptions."""

    def test_limit_is_clamped(self) -> None:
        """The chip limit is clamped into 1-200."""
        assert FacetOptions(limit=0).limit == 1
        assert FacetOptions(limit=500).limit == 200

    def test_enabled_facets(self) -> None:
        """Auto mode with no list enables everything; manual needs a list."""
        assert FacetOptions(mode=FiltersMode.MANUAL).enabled() == ()
        assert len(FacetOptions(mode=FiltersMode.AUTO).enabled()) == 5
        requested = FacetOptions(requested=(FacetId.PRICE, FacetId.PRICE))
        assert requested.enabled() == (FacetId.PRICE,)


class TestDisplayOptions:
    """Tests for DisplayOptions and layout."""

    def test_per_page_bounds(self) -> None:
        """per_page must lie in 1-100."""
        with pytest.raises(ScopeValidationError):
            DisplayOptions(per_page=0)
        with pytest.raises(ScopeValidationError):
            DisplayOptions(per_page=101)

    def test_layout_is_clamped(self) -> None:
        """Gap and row height are clamped to their ranges."""
        layout = LayoutParams.normalized(masonry_gap=999, justified_row_height=10)
        assert layout.masonry_gap == 200
        assert layout.justified_row_height == 50

    def test_excerpt_length_is_clamped(self) -> None:
        """Excerpt length is clamped to 1-500."""
        assert DisplayOptions(excerpt_length=0).excerpt_length == 1


class TestFacetBlock:
    """Tests for FacetBlock helpers."""

    def test_group_chips_and_overflow(self) -> None:
        """The default chip is excluded from group chips."""
        block = FacetBlock(
            facet=FacetId.TAGS,
            chips=(
                Chip(value="", label="All", is_default_chip=True),
                Chip(value="1", label="A"),
                Chip(value="2", label="B", is_overflow=True),
            ),
            has_more=True,
        )
        assert [chip.value for chip in block.group_chips] == ["1", "2"]
        assert block.overflow_count == 1
        assert block.filter_key == "tag"
        assert block.label == "Tags"
