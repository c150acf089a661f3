"""Embed directive.

Renders the initial shell of a listing widget: the facet sidebar, sort
bar, empty grid and pagination anchor. Entries are not rendered here; the
shell carries the widget attributes and a fresh fetch token, and the
client populates the grid through the fetch endpoint.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any

import structlog

from modefilter.application.facets import FacetService, facet_source_pool
from modefilter.application.pool_builder import CandidatePoolBuilder
from modefilter.catalog.overrides import AttributeStoreOverrides
from modefilter.catalog.store import EntryStore
from modefilter.catalog.taxonomy import TermResolver
from modefilter.domain.mode_resolution import ModeCache, ModeResolver
from modefilter.domain.scope import (
    DisplayOptions,
    FacetOptions,
    RequestScope,
    validate_rating,
)
from modefilter.domain.value_objects import (
    AXIS_ORDER,
    Axis,
    FacetBlock,
    PoolType,
    PriceRange,
    SortKey,
)
from modefilter.infrastructure.config import settings
from modefilter.infrastructure.settings_provider import SettingsProvider, get_settings_provider
from modefilter.infrastructure.tokens import FetchTokenSigner, get_token_signer
from modefilter.rendering.shell import ShellRenderer

logger = structlog.get_logger()

CATALOG_BUTTON_TEXT = "Enquire now"


@dataclass(frozen=True)
class EmbedCommand:
    """Raw widget attributes from the host page.

    Include/exclude lists are CSVs of ids, slugs or names per axis and are
    resolved against the store before anything else happens.

    Attributes:
        pool_type: Sellable or catalog-only listing.
        base_group_slug: Category slug restricting the sellable pool.
        includes: Raw include CSV per axis.
        excludes: Raw exclude CSV per axis.
        price_range: Fixed price range.
        rating_min: Fixed minimum rating.
        sort: Initial sort key.
        random_seed: Seed for the random sort.
        facets: Facet options.
        display: Display options.
    """

    pool_type: PoolType = PoolType.SELLABLE
    base_group_slug: str | None = None
    includes: Mapping[Axis, str] = field(default_factory=dict)
    excludes: Mapping[Axis, str] = field(default_factory=dict)
    price_range: PriceRange | None = None
    rating_min: int | None = None
    sort: SortKey = SortKey.DEFAULT
    random_seed: int | None = None
    facets: FacetOptions = field(default_factory=FacetOptions)
    display: DisplayOptions = field(default_factory=DisplayOptions)


@dataclass
class EmbedResult:
    """Rendered widget shell."""

    html: str
    token: str
    widget_attrs: dict[str, Any]
    facet_blocks: list[FacetBlock]
    scope: RequestScope


def _decimal_text(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


def _id_lists(groups: Mapping[Axis, tuple[int, ...]]) -> dict[str, list[int]]:
    return {axis.facet_id.value: list(groups.get(axis, ())) for axis in AXIS_ORDER}


def widget_attributes(
    scope: RequestScope,
    facets: FacetOptions,
    display: DisplayOptions,
    token: str,
) -> dict[str, Any]:
    """Serialize a widget into the attributes its client posts back.

    The result has the shape of a fetch request body without the page,
    the active selections and the initial-render flag.

    Args:
        scope: Resolved request scope.
        facets: Facet options.
        display: Display options.
        token: Fetch token.

    Returns:
        JSON-serializable attributes.
    """
    price_range = scope.price_range or PriceRange()
    return {
        "token": token,
        "scope": {
            "pool_type": scope.pool_type.value,
            "base_group": scope.base_group_slug,
            "includes": _id_lists(scope.includes),
            "excludes": _id_lists(scope.excludes),
            "price_min": _decimal_text(price_range.min_price),
            "price_max": _decimal_text(price_range.max_price),
            "rating_min": scope.rating_min,
            "sort": scope.sort.value,
            "random_seed": scope.random_seed,
        },
        "display": {
            "columns": display.columns,
            "per_page": display.per_page,
            "pagination": display.pagination.value,
            "grid_layout": display.layout.grid_layout.value,
            "masonry_gap": display.layout.masonry_gap,
            "justified_row_height": display.layout.justified_row_height,
            "custom_layout": display.custom_layout,
            "show_excerpt": display.show_excerpt,
            "excerpt_length": display.excerpt_length,
            "excerpt_length_type": display.excerpt_length_type.value,
            "catalog_button_text": display.catalog_button_text,
            "load_more_text": display.load_more_text,
            "filter_position": display.filter_position.value,
        },
        "filters_mode": facets.mode.value,
        "filters": [facet.value for facet in facets.requested],
        "terms_limit": facets.limit,
        "terms_order_by": facets.order_by.value,
        "terms_order": facets.order_dir.value,
        "show_more_terms": facets.show_more,
    }


class EmbedService:
    """Renders widget shells."""

    def __init__(
        self,
        store: EntryStore,
        settings_provider: SettingsProvider | None = None,
        signer: FetchTokenSigner | None = None,
        shell_renderer: ShellRenderer | None = None,
        max_pool_size: int | None = None,
        facet_sample_size: int | None = None,
    ) -> None:
        """Initialize service.

        Args:
            store: Entry store for this request.
            settings_provider: Global settings source.
            signer: Fetch token signer.
            shell_renderer: Shell renderer.
            max_pool_size: Candidate cap. Defaults to settings.
            facet_sample_size: Entries sampled for price/rating detection.
        """
        self.store = store
        self.settings_provider = settings_provider or get_settings_provider()
        self.signer = signer or get_token_signer()
        self.shell_renderer = shell_renderer or ShellRenderer()
        self.pool_builder = CandidatePoolBuilder(store, max_pool_size)
        self.facet_service = FacetService(store, facet_sample_size or settings.facet_sample_size)

    async def embed(self, command: EmbedCommand) -> EmbedResult:
        """Render the shell for a widget.

        Args:
            command: Raw widget attributes.

        Returns:
            EmbedResult with the shell HTML and the issued token.

        Raises:
            ScopeValidationError: If a resolved scope is invalid.
            BackendUnavailableError: If the entry store fails.
        """
        # Scope fields that need no term lookup are checked before the store.
        rating_min = validate_rating(command.rating_min)

        groups = await self.store.get_groups()
        terms = TermResolver(groups)
        scope = RequestScope(
            pool_type=command.pool_type,
            base_group_slug=command.base_group_slug,
            includes={axis: terms.resolve(axis, raw) for axis, raw in command.includes.items()},
            excludes={axis: terms.resolve(axis, raw) for axis, raw in command.excludes.items()},
            price_range=command.price_range,
            rating_min=rating_min,
            sort=command.sort,
            random_seed=command.random_seed,
        )

        resolver = ModeResolver(
            self.settings_provider.get_global_settings(),
            AttributeStoreOverrides(),
            {group.id: group for group in groups},
            ModeCache(),
        )
        source = await facet_source_pool(self.pool_builder, resolver, scope)
        blocks = await self.facet_service.build_blocks(source, command.facets, dict(scope.excludes))

        token = self.signer.issue()
        attrs = widget_attributes(scope, command.facets, command.display, token)
        html = self.shell_renderer.render(blocks, attrs, command.display, scope.sort)

        logger.info(
            "widget_embedded",
            pool_type=scope.pool_type.value,
            facet_source_count=len(source),
            facet_blocks=[block.facet.value for block in blocks],
        )
        return EmbedResult(
            html=html,
            token=token,
            widget_attrs=attrs,
            facet_blocks=blocks,
            scope=scope,
        )

    async def embed_catalog(self, command: EmbedCommand) -> EmbedResult:
        """Render a catalog-only widget.

        Forces the catalog pool and defaults the enquiry button label.

        Args:
            command: Raw widget attributes.

        Returns:
            EmbedResult.
        """
        display = command.display
        if not display.catalog_button_text:
            display = replace(display, catalog_button_text=CATALOG_BUTTON_TEXT)
        return await self.embed(
            replace(command, pool_type=PoolType.CATALOG_ONLY, display=display)
        )


def get_embed_service(store: EntryStore) -> EmbedService:
    """Build the embed service for a request's entry store."""
    return EmbedService(store)
