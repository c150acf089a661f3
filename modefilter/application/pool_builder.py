"""Candidate pool builder.

Translates a request scope plus active facet selections into an entry
store query and returns every matching published entry id, unfiltered by
mode. An empty scope returns the full published set.

Pool sizes are capped at ``max_candidate_pool``; a truncated pool keeps
the first ids in store order and is flagged so the response can say so.
"""

import random
from dataclasses import dataclass

import structlog

from modefilter.catalog.store import EntryQuery, EntryStore, GroupConstraint
from modefilter.domain.scope import ActiveSelections, RequestScope
from modefilter.domain.value_objects import (
    AXIS_ORDER,
    FacetId,
    PriceRange,
    SortKey,
)
from modefilter.infrastructure.config import settings

logger = structlog.get_logger()


@dataclass
class CandidatePool:
    """Ordered candidate ids for one request.

    Attributes:
        ids: Candidate entry ids in pool order.
        truncated: Whether the store returned more than the cap.
        store_count: Number of ids the store matched before the cap.
    """

    ids: list[int]
    truncated: bool = False
    store_count: int = 0

    def __len__(self) -> int:
        return len(self.ids)


class CandidatePoolBuilder:
    """Builds candidate pools through the entry store.

    Example usage:
        builder = CandidatePoolBuilder(store)
        pool = await builder.build_pool(scope, selections, enabled=(FacetId.PRICE,))
    """

    def __init__(self, store: EntryStore, max_pool_size: int | None = None) -> None:
        """Initialize builder.

        Args:
            store: Entry store to query.
            max_pool_size: Candidate cap. Defaults to settings.
        """
        self.store = store
        self.max_pool_size = max_pool_size or settings.max_candidate_pool

    def build_query(
        self,
        scope: RequestScope,
        selections: ActiveSelections | None = None,
        enabled: tuple[FacetId, ...] = (),
    ) -> EntryQuery:
        """Translate scope and selections into a store query.

        Args:
            scope: Request scope.
            selections: Active chip selections.
            enabled: Facets whose selections are honored.

        Returns:
            Conjunctive EntryQuery.
        """
        selections = selections or ActiveSelections()
        constraints: list[GroupConstraint] = []

        for axis in AXIS_ORDER:
            included = scope.includes.get(axis)
            if included:
                constraints.append(GroupConstraint(axis=axis, group_ids=included))
            selected = selections.selected_ids(axis)
            if selected and axis.facet_id in enabled:
                constraints.append(GroupConstraint(axis=axis, group_ids=selected))
            excluded = scope.excludes.get(axis)
            if excluded:
                constraints.append(GroupConstraint(axis=axis, group_ids=excluded, exclude=True))

        # A selected price chip replaces the widget's fixed range
        price_range: PriceRange | None = scope.price_range
        if FacetId.PRICE in enabled and selections.price_range is not None:
            price_range = selections.price_range

        rating_min = scope.rating_min
        if FacetId.RATING in enabled and selections.rating_min is not None:
            rating_min = selections.rating_min

        order = scope.sort if scope.sort in (SortKey.PRICE_ASC, SortKey.PRICE_DESC) else SortKey.DEFAULT

        return EntryQuery(
            groups=tuple(constraints),
            base_group_slug=scope.base_group_slug if scope.applies_base_group else None,
            price_range=price_range,
            rating_min=float(rating_min) if rating_min is not None else None,
            stock_status=scope.sort.stock_filter,
            order=order,
        )

    async def build_pool(
        self,
        scope: RequestScope,
        selections: ActiveSelections | None = None,
        enabled: tuple[FacetId, ...] = (),
    ) -> CandidatePool:
        """Query the store for every candidate matching the scope.

        Args:
            scope: Request scope.
            selections: Active chip selections.
            enabled: Facets whose selections are honored.

        Returns:
            CandidatePool in store order (shuffled for the random sort).
        """
        query = self.build_query(scope, selections, enabled)
        ids = await self.store.find_ids(query)
        return self._finish(ids, scope)

    async def build_facet_source(self, scope: RequestScope) -> CandidatePool:
        """Query the pool the facet chips describe.

        Active selections, fixed price/rating ranges and stock sorts are
        ignored: facets describe the widget's pool, not the filtered view.

        Args:
            scope: Request scope.

        Returns:
            CandidatePool in default order.
        """
        base_scope = RequestScope(
            pool_type=scope.pool_type,
            base_group_slug=scope.base_group_slug,
            includes=scope.includes,
            excludes=scope.excludes,
        )
        ids = await self.store.find_ids(self.build_query(base_scope))
        return self._finish(ids, base_scope)

    def _finish(self, ids: list[int], scope: RequestScope) -> CandidatePool:
        store_count = len(ids)
        truncated = store_count > self.max_pool_size
        if truncated:
            logger.warning(
                "candidate_pool_truncated",
                store_count=store_count,
                max_pool_size=self.max_pool_size,
            )
            ids = ids[: self.max_pool_size]

        if scope.sort == SortKey.RANDOM:
            rng = random.Random(scope.random_seed) if scope.random_seed is not None else random.Random()
            ids = list(ids)
            rng.shuffle(ids)

        return CandidatePool(ids=ids, truncated=truncated, store_count=store_count)
