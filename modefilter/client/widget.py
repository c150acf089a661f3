"""Listing widget client.

Drives one widget instance from the shopper's side: keeps the chip
selections, sort and page, posts fetch requests and folds the responses
into the widget state.

A widget has one in-flight slot. Filter, sort and page-number changes
supersede the in-flight fetch: it is cancelled and its response, should
it still arrive, is discarded by request id. Load-more and infinite
triggers are ignored while a fetch is in flight.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Protocol

import structlog

from modefilter.application.eligibility import page_window
from modefilter.client.api_client import APIError, APIResponse
from modefilter.domain.chip_selection import ChipSelection
from modefilter.domain.state_machines import FetchStatus, validate_fetch_transition
from modefilter.domain.value_objects import (
    FacetId,
    PaginationStrategy,
    SortKey,
    TriggerSource,
)

logger = structlog.get_logger()

ERROR_MESSAGE = "An error occurred while loading products."
TOKEN_ERROR_MESSAGE = "Security check failed. Please refresh the page."


class FetchTransport(Protocol):
    """Anything that can post a fetch request."""

    async def fetch_products(
        self, body: dict[str, Any], request_id: str | None = None
    ) -> APIResponse:
        """Post a fetch request body."""
        ...


@dataclass
class PaginationControl:
    """What the pagination anchor shows after a fetch.

    Attributes:
        kind: Effective pagination strategy.
        pages: Page buttons of the numbered control.
        prev_page: Target of the previous button, None when disabled.
        next_page: Target of the next/load-more button or sentinel, None
            when there is nothing more.
        label: Load-more button label.
    """

    kind: PaginationStrategy
    pages: list[int] = field(default_factory=list)
    prev_page: int | None = None
    next_page: int | None = None
    label: str = ""


@dataclass
class WidgetState:
    """Client-side state of one widget."""

    status: FetchStatus = FetchStatus.IDLE
    selections: dict[FacetId, ChipSelection] = field(default_factory=dict)
    sort: SortKey = SortKey.DEFAULT
    page: int = 1
    total_pages: int = 1
    total_count: int = 0
    entries_html: list[str] = field(default_factory=list)
    entry_ids: list[int] = field(default_factory=list)
    facet_blocks: list[dict[str, Any]] = field(default_factory=list)
    expanded: set[FacetId] = field(default_factory=set)
    message: str | None = None
    error: APIError | None = None


class WidgetController:
    """State machine of one listing widget.

    Example usage:
        controller = WidgetController("w1", attrs, client)
        await controller.load_initial()
        await controller.select_chip(FacetId.CATEGORIES, "4")
        await controller.load_more()
    """

    def __init__(
        self,
        widget_id: str,
        attributes: dict[str, Any],
        transport: FetchTransport,
        intersection_supported: bool = True,
    ) -> None:
        """Initialize controller.

        Args:
            widget_id: Widget identifier used in logs and errors.
            attributes: Widget attributes serialized into the shell.
            transport: Fetch transport (usually ModeFilterAPIClient).
            intersection_supported: Whether the page can observe the
                infinite-scroll sentinel; infinite degrades to load-more
                when it cannot.
        """
        self.widget_id = widget_id
        self.attributes = attributes
        self.transport = transport
        self.intersection_supported = intersection_supported
        self.state = WidgetState(sort=SortKey.parse(attributes.get("scope", {}).get("sort")))
        self._request_seq = 0
        self._inflight: asyncio.Task[APIResponse] | None = None
        self._last_request: tuple[int, bool, bool] | None = None

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def pagination(self) -> PaginationStrategy:
        """Effective pagination strategy."""
        display = self.attributes.get("display", {})
        strategy = PaginationStrategy(display.get("pagination", PaginationStrategy.LOAD_MORE))
        if strategy == PaginationStrategy.INFINITE and not self.intersection_supported:
            return PaginationStrategy.LOAD_MORE
        return strategy

    @property
    def has_next(self) -> bool:
        """Whether a later page exists."""
        return self.state.page < self.state.total_pages

    def selection(self, facet: FacetId) -> ChipSelection:
        """Current selection of one facet block."""
        return self.state.selections.get(facet) or ChipSelection.of(facet)

    def pagination_control(self) -> PaginationControl:
        """Describe the pagination anchor for the current state."""
        kind = self.pagination
        state = self.state
        if kind == PaginationStrategy.NONE or state.total_pages <= 1:
            return PaginationControl(kind=kind)

        if kind == PaginationStrategy.NUMBERS:
            return PaginationControl(
                kind=kind,
                pages=page_window(state.page, state.total_pages),
                prev_page=state.page - 1 if state.page > 1 else None,
                next_page=state.page + 1 if self.has_next else None,
            )

        next_page = state.page + 1 if self.has_next else None
        label = ""
        if kind == PaginationStrategy.LOAD_MORE and next_page is not None:
            load_more_text = self.attributes.get("display", {}).get("load_more_text", "Load more")
            label = f"{load_more_text} (Page {state.page} of {state.total_pages})"
        return PaginationControl(kind=kind, next_page=next_page, label=label)

    def build_body(self, page: int, include_facets: bool = False) -> dict[str, Any]:
        """Build a fetch request body from attributes and current state.

        Args:
            page: Page to request.
            include_facets: Ask for facet blocks.

        Returns:
            JSON-serializable request body.
        """
        scope = dict(self.attributes.get("scope", {}))
        scope["sort"] = self.state.sort.value
        selections: dict[str, Any] = {}
        for facet in (FacetId.CATEGORIES, FacetId.TAGS, FacetId.BRANDS):
            selections[facet.value] = list(self.selection(facet).group_ids())
        selections["price"] = self.selection(FacetId.PRICE).single_value()
        selections["rating"] = self.selection(FacetId.RATING).single_value()

        body = {key: value for key, value in self.attributes.items() if key != "scope"}
        body.update(
            scope=scope,
            active_facet_selections=selections,
            page=page,
            include_facets=include_facets,
        )
        return body

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    async def load_initial(self, include_facets: bool = False) -> bool:
        """Load the first page.

        Widgets mounted from an embed shell already show its facet blocks,
        so facets are only requested when the caller asks for them.

        Args:
            include_facets: Ask the server for facet blocks as well.

        Returns:
            Whether the response was applied.
        """
        return await self._start(page=1, append=False, include_facets=include_facets)

    async def select_chip(self, facet: FacetId, value: str) -> bool:
        """Apply a chip click and reload from page 1.

        Args:
            facet: Facet block of the chip.
            value: Chip value, "" for the "All" chip.

        Returns:
            Whether the response was applied (False when superseded).
        """
        self.state.selections[facet] = self.selection(facet).toggle(value)
        return await self._start(page=1, append=False)

    async def set_sort(self, sort: SortKey | str) -> bool:
        """Change the sort key and reload from page 1."""
        self.state.sort = sort if isinstance(sort, SortKey) else SortKey.parse(sort)
        return await self._start(page=1, append=False)

    async def go_to_page(self, page: int) -> bool:
        """Jump to a page of the numbered control."""
        if page < 1:
            return False
        return await self._start(page=page, append=False)

    async def load_more(self, trigger: TriggerSource = TriggerSource.CLICK) -> bool:
        """Append the next page.

        Ignored while a fetch is in flight, when there is no next page,
        and for sentinel intersections unless infinite scroll is active.

        Args:
            trigger: What caused the request.

        Returns:
            Whether a page was appended.
        """
        if self.state.status.is_busy() or not self.has_next:
            return False
        if (
            trigger == TriggerSource.VIEWPORT_INTERSECTION
            and self.pagination != PaginationStrategy.INFINITE
        ):
            return False
        return await self._start(page=self.state.page + 1, append=True)

    async def retry(self) -> bool:
        """Repeat the last request after a failure (explicit user action)."""
        if self.state.status != FetchStatus.FAILED or self._last_request is None:
            return False
        page, append, include_facets = self._last_request
        return await self._start(page=page, append=append, include_facets=include_facets)

    def toggle_more(self, facet: FacetId) -> bool:
        """Show or hide the overflow chips of a block; returns the new state."""
        if facet in self.state.expanded:
            self.state.expanded.discard(facet)
            return False
        self.state.expanded.add(facet)
        return True

    # ------------------------------------------------------------------
    # Fetch lifecycle
    # ------------------------------------------------------------------

    def _transition(self, target: FetchStatus) -> None:
        validate_fetch_transition(self.widget_id, self.state.status, target)
        self.state.status = target

    def _supersede(self) -> None:
        if self._inflight is not None and not self._inflight.done():
            logger.debug(
                "widget_fetch_superseded",
                widget_id=self.widget_id,
                request_seq=self._request_seq,
            )
            self._inflight.cancel()

    async def _start(self, page: int, append: bool, include_facets: bool = False) -> bool:
        self._supersede()
        self._request_seq += 1
        seq = self._request_seq
        self._last_request = (page, append, include_facets)
        self._transition(FetchStatus.LOADING)

        body = self.build_body(page, include_facets)
        task = asyncio.create_task(
            self.transport.fetch_products(body, request_id=f"{self.widget_id}-{seq}")
        )
        self._inflight = task
        try:
            response = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if seq != self._request_seq and not (current and current.cancelling()):
                return False
            raise

        if seq != self._request_seq:
            logger.debug(
                "widget_stale_response_discarded",
                widget_id=self.widget_id,
                request_seq=seq,
            )
            return False

        self._inflight = None
        self._apply(response, append)
        return True

    def _apply(self, response: APIResponse, append: bool) -> None:
        state = self.state
        if not response.success or response.data is None:
            state.error = response.error
            state.message = (
                TOKEN_ERROR_MESSAGE
                if response.error and response.error.error_code == "INVALID_TOKEN"
                else ERROR_MESSAGE
            )
            self._transition(FetchStatus.FAILED)
            logger.warning(
                "widget_fetch_failed",
                widget_id=self.widget_id,
                error_code=response.error.error_code if response.error else None,
            )
            return

        data = response.data
        state.error = None
        state.page = int(data.get("page", 1))
        state.total_pages = int(data.get("total_pages", 1))
        state.total_count = int(data.get("total_count", 0))
        state.message = data.get("message")
        if data.get("facet_blocks") is not None:
            state.facet_blocks = data["facet_blocks"]

        html = data.get("entries_html", "")
        ids = list(data.get("entry_ids", []))
        if append and self.pagination.appends:
            state.entries_html.append(html)
            state.entry_ids.extend(ids)
        else:
            state.entries_html = [html] if html else []
            state.entry_ids = ids

        empty = data.get("status") == "no_results"
        self._transition(FetchStatus.EMPTY if empty else FetchStatus.LOADED)
