"""Facet detector and chip builder.

Decides which facets a widget shows for a pool and builds their chip
lists. Classification facets list the groups that intersect the pool;
price and rating facets are fixed chip ladders.
"""

from collections.abc import Sequence

import structlog

from modefilter.application.eligibility import EligibilityFilter
from modefilter.application.pool_builder import CandidatePoolBuilder
from modefilter.catalog.store import EntryStore
from modefilter.domain.exceptions import BackendUnavailableError
from modefilter.domain.mode_resolution import ModeResolver
from modefilter.domain.scope import FacetOptions, RequestScope
from modefilter.domain.value_objects import (
    CANONICAL_FACET_ORDER,
    Axis,
    Chip,
    FacetBlock,
    FacetId,
    FiltersMode,
    SortDirection,
    TermsOrderBy,
)
from modefilter.infrastructure.config import settings

logger = structlog.get_logger()

ALL_CHIP = Chip(value="", label="All", is_default_chip=True)

PRICE_CHIPS: tuple[Chip, ...] = (
    ALL_CHIP,
    Chip(value="0|50", label="Under 50"),
    Chip(value="50|100", label="50–100"),
    Chip(value="100|200", label="100–200"),
    Chip(value="200|", label="200+"),
)

RATING_CHIPS: tuple[Chip, ...] = (
    ALL_CHIP,
    Chip(value="5", label="★★★★★"),
    Chip(value="4", label="★★★★☆ & up"),
    Chip(value="3", label="★★★☆☆ & up"),
    Chip(value="2", label="★★☆☆☆ & up"),
    Chip(value="1", label="★☆☆☆☆ & up"),
)

FIXED_LADDERS: dict[FacetId, tuple[Chip, ...]] = {
    FacetId.PRICE: PRICE_CHIPS,
    FacetId.RATING: RATING_CHIPS,
}


def select_facets(
    mode: FiltersMode,
    requested: Sequence[FacetId],
    detected: set[FacetId],
) -> list[FacetId]:
    """Decide which facets to render.

    Manual mode renders the requested list as-is. Auto mode renders every
    detected facet (canonical order) when nothing was requested, otherwise
    the requested facets that were detected (caller order).

    Args:
        mode: Facet-selection mode.
        requested: Facets the caller asked for.
        detected: Facets with non-empty membership in the pool.

    Returns:
        Facets to render, in display order.
    """
    if mode == FiltersMode.MANUAL:
        return list(requested)
    if not requested:
        return [facet for facet in CANONICAL_FACET_ORDER if facet in detected]
    return [facet for facet in requested if facet in detected]


class FacetDetector:
    """Detects which facets have non-empty membership in a pool."""

    def __init__(self, store: EntryStore, sample_size: int | None = None) -> None:
        """Initialize detector.

        Args:
            store: Entry store.
            sample_size: Entries sampled for price/rating detection.
        """
        self.store = store
        self.sample_size = sample_size or settings.facet_sample_size

    async def detect(
        self,
        pool: Sequence[int],
        exclusions: dict[Axis, tuple[int, ...]] | None = None,
    ) -> set[FacetId]:
        """Detect non-empty facets for a pool.

        A facet whose detection fails is treated as absent and logged.

        Args:
            pool: Pool entry ids.
            exclusions: Excluded group ids per axis.

        Returns:
            Set of detected facets.
        """
        exclusions = exclusions or {}
        detected: set[FacetId] = set()
        if not pool:
            return detected

        for axis in (Axis.CATEGORY, Axis.TAG, Axis.BRAND):
            try:
                counts = await self.store.count_memberships(axis, pool)
            except BackendUnavailableError as e:
                logger.warning("facet_detection_failed", facet=axis.facet_id.value, error=e.reason)
                continue
            excluded = set(exclusions.get(axis, ()))
            if any(count > 0 for group_id, count in counts.items() if group_id not in excluded):
                detected.add(axis.facet_id)

        try:
            sample = await self.store.get_entries(list(pool[: self.sample_size]))
        except BackendUnavailableError as e:
            logger.warning("facet_detection_failed", facet="price,rating", error=e.reason)
            return detected

        if any(entry.has_price for entry in sample):
            detected.add(FacetId.PRICE)
        if any(entry.has_rating for entry in sample):
            detected.add(FacetId.RATING)
        return detected


class ChipBuilder:
    """Builds facet blocks."""

    def __init__(self, store: EntryStore) -> None:
        """Initialize builder.

        Args:
            store: Entry store.
        """
        self.store = store

    async def build_chips(
        self,
        facet: FacetId,
        pool: Sequence[int],
        limit: int = 12,
        order_by: TermsOrderBy = TermsOrderBy.COUNT,
        order_dir: SortDirection = SortDirection.DESC,
        show_more: bool = True,
        exclusions: Sequence[int] = (),
    ) -> FacetBlock | None:
        """Build the block for one facet.

        Args:
            facet: Facet to build.
            pool: Pool entry ids.
            limit: Group chips shown before overflow.
            order_by: Category chip ordering.
            order_dir: Category chip direction.
            show_more: Keep overflow chips instead of truncating.
            exclusions: Group ids never shown.

        Returns:
            FacetBlock, or None when the block would have no group chips.
        """
        axis = facet.axis
        if axis is None:
            return FacetBlock(facet=facet, chips=FIXED_LADDERS[facet])

        counts = await self.store.count_memberships(axis, pool)
        excluded = set(exclusions)
        groups = [
            group
            for group in await self.store.get_groups(axis)
            if counts.get(group.id, 0) > 0 and group.id not in excluded
        ]
        if not groups:
            return None

        with_counts = axis == Axis.CATEGORY
        if not with_counts:
            # Tag and brand blocks are always name ascending
            order_by, order_dir = TermsOrderBy.NAME, SortDirection.ASC

        groups.sort(key=lambda g: (g.name.lower(), g.id))
        if order_by == TermsOrderBy.COUNT:
            groups.sort(key=lambda g: counts[g.id], reverse=order_dir == SortDirection.DESC)
        elif order_dir == SortDirection.DESC:
            groups.sort(key=lambda g: g.name.lower(), reverse=True)

        has_more = show_more and len(groups) > limit
        if not show_more:
            groups = groups[:limit]

        chips = [ALL_CHIP]
        for index, group in enumerate(groups):
            label = f"{group.name} ({counts[group.id]})" if with_counts else group.name
            chips.append(
                Chip(
                    value=str(group.id),
                    label=label,
                    is_overflow=show_more and index >= limit,
                )
            )
        return FacetBlock(facet=facet, chips=tuple(chips), has_more=has_more)


class FacetService:
    """Detects and builds every facet block of a widget."""

    def __init__(self, store: EntryStore, sample_size: int | None = None) -> None:
        self.detector = FacetDetector(store, sample_size)
        self.builder = ChipBuilder(store)

    async def build_blocks(
        self,
        pool: Sequence[int],
        options: FacetOptions,
        exclusions: dict[Axis, tuple[int, ...]] | None = None,
    ) -> list[FacetBlock]:
        """Build the facet blocks for a pool.

        An empty pool yields no blocks. A block that fails to build is
        omitted and logged.

        Args:
            pool: Facet source pool.
            options: Facet options of the widget.
            exclusions: Excluded group ids per axis.

        Returns:
            Facet blocks in display order.
        """
        exclusions = exclusions or {}
        if not pool:
            return []

        if options.mode == FiltersMode.AUTO:
            detected = await self.detector.detect(pool, exclusions)
            facets = select_facets(options.mode, options.requested, detected)
        else:
            facets = select_facets(options.mode, options.requested, set())

        blocks: list[FacetBlock] = []
        for facet in facets:
            axis = facet.axis
            try:
                block = await self.builder.build_chips(
                    facet,
                    pool,
                    limit=options.limit,
                    order_by=options.order_by,
                    order_dir=options.order_dir,
                    show_more=options.show_more,
                    exclusions=exclusions.get(axis, ()) if axis else (),
                )
            except BackendUnavailableError as e:
                logger.warning("facet_build_failed", facet=facet.value, error=e.reason)
                continue
            if block is not None:
                blocks.append(block)
        return blocks


async def facet_source_pool(
    builder: CandidatePoolBuilder,
    resolver: ModeResolver,
    scope: RequestScope,
) -> list[int]:
    """Entry ids the facet chips of a widget describe.

    The sellable pool with a base group uses the base-group set as-is;
    every other pool is the scope's published set filtered by mode.

    Args:
        builder: Pool builder bound to the request's store.
        resolver: Request-scoped mode resolver.
        scope: Request scope.

    Returns:
        Facet source ids in default order.
    """
    source = await builder.build_facet_source(scope)
    if scope.applies_base_group:
        return source.ids
    entries = {entry.id: entry for entry in await builder.store.get_entries(source.ids)}
    return EligibilityFilter(resolver, entries).filter(source.ids, scope.pool_type)
