"""Eligibility filter and pager.

The eligibility filter resolves the mode of every candidate and keeps
those matching the requested pool type. The pager slices the resulting
eligible set; every pagination strategy consumes the same slice contract.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from modefilter.domain.entities import Entry
from modefilter.domain.mode_resolution import ModeResolver
from modefilter.domain.value_objects import PoolType


# ============================================================================
# Pager
# ============================================================================


@dataclass(frozen=True)
class PageResult:
    """One page of the eligible set.

    Attributes:
        ids: Entry ids on the page, in pool order.
        page: Page actually served (after clamping).
        total_count: Size of the eligible set.
        total_pages: Number of pages, at least 1.
        page_size: Page size used.
    """

    ids: list[int]
    page: int
    total_count: int
    total_pages: int
    page_size: int

    @property
    def has_next(self) -> bool:
        """Whether a later page exists."""
        return self.page < self.total_pages


def calc_total_pages(total_count: int, page_size: int) -> int:
    """Number of pages for a set, never less than one.

    Args:
        total_count: Size of the set.
        page_size: Entries per page (>= 1).

    Returns:
        ``max(1, ceil(total_count / page_size))``.
    """
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    return max(1, math.ceil(total_count / page_size))


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp a requested page into ``[1, total_pages]``."""
    return max(1, min(page, total_pages))


def paginate(eligible: Sequence[int], page: int, page_size: int) -> PageResult:
    """Slice an eligible set for a requested page.

    Out-of-range pages are clamped, so slicing never fails.

    Args:
        eligible: Eligible ids in pool order.
        page: Requested 1-based page.
        page_size: Entries per page.

    Returns:
        PageResult for the clamped page.
    """
    total_count = len(eligible)
    total_pages = calc_total_pages(total_count, page_size)
    served = clamp_page(page, total_pages)
    offset = (served - 1) * page_size
    return PageResult(
        ids=list(eligible[offset : offset + page_size]),
        page=served,
        total_count=total_count,
        total_pages=total_pages,
        page_size=page_size,
    )


def page_window(page: int, total_pages: int, width: int = 5) -> list[int]:
    """Page numbers shown by the numbered pagination control.

    The window starts two pages before the current one and holds at most
    ``width`` pages.

    Args:
        page: Current page.
        total_pages: Number of pages.
        width: Maximum buttons shown.

    Returns:
        Ascending page numbers.
    """
    start = max(1, page - 2)
    end = min(total_pages, start + width - 1)
    return list(range(start, end + 1))


# ============================================================================
# Eligibility Filter
# ============================================================================


class EligibilityFilter:
    """Keeps candidates whose effective mode matches the pool type.

    Candidates without a loaded entry (deleted between query and load) are
    dropped, as are repeated ids.
    """

    def __init__(self, resolver: ModeResolver, entries: Mapping[int, Entry]) -> None:
        """Initialize filter.

        Args:
            resolver: Request-scoped mode resolver.
            entries: Loaded candidate entries by id.
        """
        self.resolver = resolver
        self.entries = entries

    def filter(self, candidates: Sequence[int], pool_type: PoolType) -> list[int]:
        """Return the eligible set in candidate order.

        Args:
            candidates: Candidate ids in pool order.
            pool_type: Requested pool type.

        Returns:
            Eligible ids.
        """
        target = pool_type.target_mode
        seen: set[int] = set()
        eligible: list[int] = []
        for entry_id in candidates:
            if entry_id in seen:
                continue
            seen.add(entry_id)
            entry = self.entries.get(entry_id)
            if entry is None:
                continue
            if self.resolver.resolve(entry) == target:
                eligible.append(entry_id)
        return eligible

    def filter_and_page(
        self,
        candidates: Sequence[int],
        pool_type: PoolType,
        page: int,
        page_size: int,
    ) -> PageResult:
        """Filter candidates and slice the requested page.

        Args:
            candidates: Candidate ids in pool order.
            pool_type: Requested pool type.
            page: Requested page (clamped).
            page_size: Entries per page.

        Returns:
            PageResult.
        """
        return paginate(self.filter(candidates, pool_type), page, page_size)
