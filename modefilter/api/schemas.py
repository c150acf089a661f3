"""API schemas for ModeFilter API.

Pydantic models for request/response validation and serialization, plus
the conversions into domain value objects. Domain construction performs
the semantic checks (price bounds, ratings, sort keys) and raises
``ScopeValidationError`` on failure.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from modefilter.domain.scope import ActiveSelections, DisplayOptions, FacetOptions, RequestScope
from modefilter.domain.value_objects import (
    Axis,
    Chip,
    ExcerptLengthType,
    FacetBlock,
    FacetId,
    FilterPosition,
    FiltersMode,
    GridLayout,
    LayoutParams,
    PaginationStrategy,
    PoolType,
    PriceRange,
    ResponseStatus,
    SortDirection,
    SortKey,
    TermsOrderBy,
)


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Scope and Display Schemas
# ============================================================================


class GroupIdsSchema(BaseModel):
    """Group ids per classification axis."""

    categories: list[int] = Field(default_factory=list, description="Category ids")
    tags: list[int] = Field(default_factory=list, description="Tag ids")
    brands: list[int] = Field(default_factory=list, description="Brand ids")

    def to_domain(self) -> dict[Axis, tuple[int, ...]]:
        """Convert to a per-axis id map."""
        return {
            Axis.CATEGORY: tuple(self.categories),
            Axis.TAG: tuple(self.tags),
            Axis.BRAND: tuple(self.brands),
        }


class ScopeSchema(BaseModel):
    """Base constraints of a listing widget."""

    pool_type: PoolType = Field(default=PoolType.SELLABLE, description="Listing pool type")
    base_group: str | None = Field(
        default=None, description="Category slug restricting the sellable pool"
    )
    includes: GroupIdsSchema = Field(default_factory=GroupIdsSchema)
    excludes: GroupIdsSchema = Field(default_factory=GroupIdsSchema)
    price_min: Decimal | None = Field(default=None, description="Fixed minimum price")
    price_max: Decimal | None = Field(default=None, description="Fixed maximum price")
    rating_min: int | None = Field(default=None, description="Fixed minimum rating (1-5)")
    sort: str = Field(default="", description="Sort key")
    random_seed: int | None = Field(default=None, description="Seed for the random sort")

    def to_domain(self) -> RequestScope:
        """Convert to a validated request scope."""
        return RequestScope(
            pool_type=self.pool_type,
            base_group_slug=self.base_group,
            includes=self.includes.to_domain(),
            excludes=self.excludes.to_domain(),
            price_range=PriceRange.from_bounds(self.price_min, self.price_max),
            rating_min=self.rating_min,
            sort=SortKey.parse(self.sort),
            random_seed=self.random_seed,
        )


class DisplaySchema(BaseModel):
    """Presentation parameters of the grid."""

    columns: int = Field(default=3, ge=1, description="Grid columns")
    per_page: int = Field(default=9, ge=1, le=100, description="Page size")
    pagination: PaginationStrategy = Field(default=PaginationStrategy.LOAD_MORE)
    grid_layout: GridLayout = Field(default=GridLayout.GRID)
    masonry_gap: int = Field(default=20, description="Masonry gap in px (clamped 0-200)")
    justified_row_height: int = Field(
        default=220, description="Justified row height in px (clamped 50-1200)"
    )
    custom_layout: str = Field(default="", description="Card parts, e.g. 'image|title|!price'")
    show_excerpt: bool = True
    excerpt_length: int = Field(default=20, description="Excerpt length (clamped 1-500)")
    excerpt_length_type: ExcerptLengthType = Field(default=ExcerptLengthType.WORDS)
    catalog_button_text: str = Field(default="", description="Enquiry button label")
    load_more_text: str = Field(default="Load more", description="Load-more button label")
    filter_position: FilterPosition = Field(default=FilterPosition.LEFT)

    def to_domain(self) -> DisplayOptions:
        """Convert to display options."""
        return DisplayOptions(
            columns=self.columns,
            per_page=self.per_page,
            pagination=self.pagination,
            layout=LayoutParams.normalized(
                grid_layout=self.grid_layout,
                masonry_gap=self.masonry_gap,
                justified_row_height=self.justified_row_height,
            ),
            custom_layout=self.custom_layout,
            show_excerpt=self.show_excerpt,
            excerpt_length=self.excerpt_length,
            excerpt_length_type=self.excerpt_length_type,
            catalog_button_text=self.catalog_button_text,
            load_more_text=self.load_more_text,
            filter_position=self.filter_position,
        )


class FacetOptionsFields(BaseModel):
    """Facet options shared by fetch and embed requests."""

    filters_mode: FiltersMode = Field(default=FiltersMode.MANUAL, description="manual or auto")
    filters: list[str] | str = Field(
        default_factory=list, description="Facets to show (list or CSV)"
    )
    terms_limit: int = Field(default=12, description="Chips before overflow (clamped 1-200)")
    terms_order_by: TermsOrderBy = Field(default=TermsOrderBy.COUNT)
    terms_order: SortDirection = Field(default=SortDirection.DESC)
    show_more_terms: bool = Field(default=True, description="Keep overflow chips")

    def to_facet_options(self) -> FacetOptions:
        """Convert to facet options."""
        return FacetOptions(
            mode=self.filters_mode,
            requested=tuple(FacetId.parse_list(self.filters)),
            limit=self.terms_limit,
            order_by=self.terms_order_by,
            order_dir=self.terms_order,
            show_more=self.show_more_terms,
        )


# ============================================================================
# Fetch Schemas
# ============================================================================


class ActiveSelectionsSchema(BaseModel):
    """Chips currently selected by the shopper."""

    categories: list[int] = Field(default_factory=list)
    tags: list[int] = Field(default_factory=list)
    brands: list[int] = Field(default_factory=list)
    price: str = Field(default="", description="Price chip value 'min|max', '' for All")
    rating: str | int = Field(default="", description="Rating chip value, '' for All")

    def to_domain(self) -> ActiveSelections:
        """Convert to validated selections."""
        return ActiveSelections.from_chip_values(
            categories=self.categories,
            tags=self.tags,
            brands=self.brands,
            price=self.price,
            rating=str(self.rating),
        )


class FetchRequest(FacetOptionsFields):
    """Request for one page of a listing widget."""

    token: str | None = Field(default=None, description="Fetch token issued by the embed")
    scope: ScopeSchema = Field(default_factory=ScopeSchema)
    display: DisplaySchema = Field(default_factory=DisplaySchema)
    active_facet_selections: ActiveSelectionsSchema = Field(
        default_factory=ActiveSelectionsSchema
    )
    page: int = Field(default=1, description="Requested page (clamped)")
    include_facets: bool = Field(default=False, description="Initial render: build facets")


class ChipSchema(BaseModel):
    """One selectable chip."""

    value: str
    label: str
    is_default_chip: bool = False
    is_overflow: bool = False


class FacetBlockSchema(BaseModel):
    """Chip list of one facet."""

    facet: FacetId
    label: str
    filter_key: str
    chips: list[ChipSchema]
    has_more: bool = False


class LayoutParamsSchema(BaseModel):
    """Grid layout parameters echoed to the client."""

    grid_layout: GridLayout
    masonry_gap: int
    justified_row_height: int


class FetchResponse(BaseModel):
    """One rendered page of a listing widget."""

    status: ResponseStatus = Field(..., description="ok or no_results")
    entries_html: str = Field(..., description="Rendered cards in pool order")
    entry_ids: list[int] = Field(..., description="Ids of the rendered entries")
    page: int = Field(..., description="Page served")
    total_pages: int = Field(..., description="Number of pages (>= 1)")
    total_count: int = Field(..., description="Size of the eligible set")
    columns: int
    per_page: int
    layout_params: LayoutParamsSchema
    facet_blocks: list[FacetBlockSchema] | None = Field(
        default=None, description="Facet blocks, on initial render only"
    )
    message: str | None = None
    pool_truncated: bool = Field(
        default=False, description="Candidate pool hit the configured cap"
    )


# ============================================================================
# Embed Schemas
# ============================================================================


class EmbedRequest(FacetOptionsFields):
    """Widget attributes from the host page.

    Include/exclude lists are CSVs of group ids, slugs or names.
    """

    pool_type: PoolType = Field(default=PoolType.SELLABLE)
    category: str | None = Field(default=None, description="Base category slug")
    include_categories: str = ""
    include_tags: str = ""
    include_brands: str = ""
    exclude_categories: str = ""
    exclude_tags: str = ""
    exclude_brands: str = ""
    price_min: Decimal | None = None
    price_max: Decimal | None = None
    rating_min: int | None = None
    sort: str = ""
    random_seed: int | None = None
    display: DisplaySchema = Field(default_factory=DisplaySchema)

    def includes(self) -> dict[Axis, str]:
        """Raw include CSVs per axis."""
        return {
            Axis.CATEGORY: self.include_categories,
            Axis.TAG: self.include_tags,
            Axis.BRAND: self.include_brands,
        }

    def excludes(self) -> dict[Axis, str]:
        """Raw exclude CSVs per axis."""
        return {
            Axis.CATEGORY: self.exclude_categories,
            Axis.TAG: self.exclude_tags,
            Axis.BRAND: self.exclude_brands,
        }


class EmbedResponse(BaseModel):
    """Rendered widget shell."""

    html: str = Field(..., description="Shell markup")
    token: str = Field(..., description="Fetch token for this widget")
    widget_attrs: dict[str, Any] = Field(..., description="Attributes posted back on fetch")
    facet_blocks: list[FacetBlockSchema] = Field(default_factory=list)


# ============================================================================
# Converters
# ============================================================================


def chip_to_schema(chip: Chip) -> ChipSchema:
    """Convert a chip to its schema."""
    return ChipSchema(
        value=chip.value,
        label=chip.label,
        is_default_chip=chip.is_default_chip,
        is_overflow=chip.is_overflow,
    )


def block_to_schema(block: FacetBlock) -> FacetBlockSchema:
    """Convert a facet block to its schema."""
    return FacetBlockSchema(
        facet=block.facet,
        label=block.label,
        filter_key=block.filter_key,
        chips=[chip_to_schema(chip) for chip in block.chips],
        has_more=block.has_more,
    )
