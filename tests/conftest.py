"""Shared fixtures for ModeFilter tests."""

from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from modefilter.catalog.memory import InMemoryEntryStore
from modefilter.catalog.overrides import override_attributes
from modefilter.domain.entities import ClassificationGroup, Entry
from modefilter.domain.value_objects import Axis, EffectiveMode, StockStatus, Visibility

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)

EntryFactory = Callable[..., Entry]
GroupFactory = Callable[..., ClassificationGroup]


@pytest.fixture
def make_entry() -> EntryFactory:
    """Factory for entries; later ids are published later."""

    def _make(
        entry_id: int,
        *,
        categories: Iterable[int] = (),
        tags: Iterable[int] = (),
        brands: Iterable[int] = (),
        price: str | Decimal | None = None,
        rating: float = 0.0,
        rating_count: int = 0,
        stock: StockStatus = StockStatus.IN_STOCK,
        override: EffectiveMode | None = None,
        visibility: Visibility = Visibility.PUBLISHED,
        excerpt: str = "",
        on_sale: bool = False,
    ) -> Entry:
        return Entry(
            id=entry_id,
            title=f"Entry {entry_id}",
            visibility=visibility,
            groups={
                Axis.CATEGORY: tuple(categories),
                Axis.TAG: tuple(tags),
                Axis.BRAND: tuple(brands),
            },
            price=Decimal(price) if price is not None else None,
            rating_average=rating,
            rating_count=rating_count,
            stock_status=stock,
            attributes=override_attributes(override),
            excerpt=excerpt,
            permalink=f"/products/entry-{entry_id}",
            on_sale=on_sale,
            published_at=BASE_TIME + timedelta(minutes=entry_id),
        )

    return _make


@pytest.fixture
def make_group() -> GroupFactory:
    """Factory for classification groups."""

    def _make(
        group_id: int,
        axis: Axis = Axis.CATEGORY,
        name: str | None = None,
        *,
        default: EffectiveMode | None = None,
        count: int = 0,
    ) -> ClassificationGroup:
        name = name or f"{axis.value.title()} {group_id}"
        return ClassificationGroup(
            id=group_id,
            axis=axis,
            name=name,
            slug=name.lower().replace(" ", "-"),
            count=count,
            attributes=override_attributes(default, group=True),
        )

    return _make


@pytest.fixture
def scenario_store(make_entry: EntryFactory, make_group: GroupFactory) -> InMemoryEntryStore:
    """25 published entries: 10 in a catalog-default category, 15 sellable.

    Group 1 "Furniture" carries a catalog default; group 2 "Shoes" none.
    """
    groups = [
        make_group(1, name="Furniture", default=EffectiveMode.CATALOG_ONLY),
        make_group(2, name="Shoes"),
        make_group(10, Axis.TAG, "Summer"),
        make_group(20, Axis.BRAND, "Acme"),
    ]
    entries = [
        make_entry(i, categories=[1], brands=[20], price="100", rating=4.0, rating_count=3)
        for i in range(1, 11)
    ] + [
        make_entry(i, categories=[2], tags=[10], price=str(i), rating=3.0, rating_count=1)
        for i in range(11, 26)
    ]
    return InMemoryEntryStore(entries=entries, groups=groups)
