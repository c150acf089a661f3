"""Fetch request handler.

Serves one page of a listing widget: builds the candidate pool, filters
it by effective mode, slices the requested page and renders its cards.
On the initial render it also builds the facet blocks. Every request gets
its own ``ModeCache``; nothing survives between requests.
"""

from dataclasses import dataclass, field

import structlog

from modefilter.application.eligibility import EligibilityFilter
from modefilter.application.facets import FacetService, facet_source_pool
from modefilter.application.pool_builder import CandidatePoolBuilder
from modefilter.catalog.overrides import AttributeStoreOverrides
from modefilter.catalog.store import EntryStore
from modefilter.domain.mode_resolution import ModeCache, ModeResolver
from modefilter.domain.scope import ActiveSelections, DisplayOptions, FacetOptions, RequestScope
from modefilter.domain.value_objects import FacetBlock, LayoutParams, ResponseStatus
from modefilter.infrastructure.config import settings
from modefilter.infrastructure.settings_provider import SettingsProvider, get_settings_provider
from modefilter.rendering.cards import CardRenderer, JinjaCardRenderer, render_cards

logger = structlog.get_logger()

NO_RESULTS_MESSAGE = "No products found."


@dataclass(frozen=True)
class FetchCommand:
    """One fetch request from a widget.

    Attributes:
        scope: Base constraints of the widget.
        selections: Chips currently selected by the shopper.
        facets: Facet options of the widget.
        display: Display options.
        page: Requested page (clamped when served).
        include_facets: Initial render; build facet blocks too.
    """

    scope: RequestScope
    selections: ActiveSelections = field(default_factory=ActiveSelections)
    facets: FacetOptions = field(default_factory=FacetOptions)
    display: DisplayOptions = field(default_factory=DisplayOptions)
    page: int = 1
    include_facets: bool = False


@dataclass
class FetchResult:
    """Outcome of a fetch request."""

    status: ResponseStatus
    entries_html: str
    entry_ids: list[int]
    page: int
    total_pages: int
    total_count: int
    columns: int
    per_page: int
    layout: LayoutParams
    facet_blocks: list[FacetBlock] | None = None
    message: str | None = None
    pool_truncated: bool = False


class FetchService:
    """Handles fetch requests against one entry store."""

    def __init__(
        self,
        store: EntryStore,
        settings_provider: SettingsProvider | None = None,
        renderer: CardRenderer | None = None,
        max_pool_size: int | None = None,
        facet_sample_size: int | None = None,
    ) -> None:
        """Initialize service.

        Args:
            store: Entry store for this request.
            settings_provider: Global settings source.
            renderer: Card renderer.
            max_pool_size: Candidate cap. Defaults to settings.
            facet_sample_size: Entries sampled for price/rating detection.
        """
        self.store = store
        self.settings_provider = settings_provider or get_settings_provider()
        self.renderer = renderer or JinjaCardRenderer()
        self.pool_builder = CandidatePoolBuilder(store, max_pool_size)
        self.facet_service = FacetService(store, facet_sample_size or settings.facet_sample_size)

    async def fetch(self, command: FetchCommand) -> FetchResult:
        """Serve one page of a widget.

        Args:
            command: Fetch command.

        Returns:
            FetchResult with status ``ok`` or ``no_results``.

        Raises:
            BackendUnavailableError: If the entry store fails.
        """
        scope = command.scope
        display = command.display
        global_settings = self.settings_provider.get_global_settings()

        groups = {group.id: group for group in await self.store.get_groups()}
        cache = ModeCache()
        resolver = ModeResolver(global_settings, AttributeStoreOverrides(), groups, cache)

        pool = await self.pool_builder.build_pool(
            scope, command.selections, command.facets.enabled()
        )
        entries = {entry.id: entry for entry in await self.store.get_entries(pool.ids)}
        page = EligibilityFilter(resolver, entries).filter_and_page(
            pool.ids, scope.pool_type, max(1, command.page), display.per_page
        )

        facet_blocks: list[FacetBlock] | None = None
        if command.include_facets:
            source = await facet_source_pool(self.pool_builder, resolver, scope)
            facet_blocks = await self.facet_service.build_blocks(
                source, command.facets, dict(scope.excludes)
            )

        entries_html = render_cards(
            self.renderer,
            [(entries[entry_id], resolver.resolve(entries[entry_id])) for entry_id in page.ids],
            scope.pool_type,
            display,
            global_settings,
        )

        logger.info(
            "fetch_completed",
            pool_type=scope.pool_type.value,
            candidate_count=len(pool),
            store_count=pool.store_count,
            eligible_count=page.total_count,
            page=page.page,
            total_pages=page.total_pages,
            pool_truncated=pool.truncated,
            tiers=cache.tier_counts(),
            **cache.stats(),
        )

        empty = page.total_count == 0
        return FetchResult(
            status=ResponseStatus.NO_RESULTS if empty else ResponseStatus.OK,
            entries_html=entries_html,
            entry_ids=page.ids,
            page=page.page,
            total_pages=page.total_pages,
            total_count=page.total_count,
            columns=display.columns,
            per_page=page.page_size,
            layout=display.layout,
            facet_blocks=facet_blocks,
            message=NO_RESULTS_MESSAGE if empty else None,
            pool_truncated=pool.truncated,
        )


def get_fetch_service(store: EntryStore) -> FetchService:
    """Build the fetch service for a request's entry store."""
    return FetchService(store)
