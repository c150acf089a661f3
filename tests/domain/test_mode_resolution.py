"""Tests for the mode resolution engine."""

import pytest

from modefilter.catalog.overrides import ENTRY_OVERRIDE_KEY, AttributeStoreOverrides
from modefilter.domain import (
    Axis,
    EffectiveMode,
    GlobalMode,
    GlobalSettings,
    ModeCache,
    ModeResolver,
    ResolutionTier,
)
from modefilter.domain.entities import Entry


def make_resolver(groups, global_mode=GlobalMode.SELL, cache=None) -> ModeResolver:
    return ModeResolver(
        settings=GlobalSettings(global_mode=global_mode),
        overrides=AttributeStoreOverrides(),
        groups={group.id: group for group in groups},
        cache=cache,
    )


class TestGlobalTier:
    """Tests for the global fallback."""

    @pytest.mark.parametrize(
        ("global_mode", "expected"),
        [
            (GlobalMode.SELL, EffectiveMode.SELLABLE),
            (GlobalMode.CATALOG, EffectiveMode.CATALOG_ONLY),
            (GlobalMode.HYBRID, EffectiveMode.SELLABLE),
        ],
    )
    def test_global_mode_applies_without_overrides(self, make_entry, global_mode, expected) -> None:
        """Without overrides the global mode decides; hybrid means sell."""
        resolver = make_resolver([], global_mode)
        resolution = resolver.explain(make_entry(1))
        assert resolution.mode == expected
        assert resolution.tier == ResolutionTier.GLOBAL


class TestEntryTier:
    """Tests for per-entry overrides."""

    def test_entry_override_beats_group_and_global(self, make_entry, make_group) -> None:
        """An entry override wins regardless of group default or global mode."""
        group = make_group(1, default=EffectiveMode.CATALOG_ONLY)
        entry = make_entry(1, categories=[1], override=EffectiveMode.SELLABLE)
        resolver = make_resolver([group], GlobalMode.CATALOG)

        resolution = resolver.explain(entry)
        assert resolution.mode == EffectiveMode.SELLABLE
        assert resolution.tier == ResolutionTier.ENTRY

    def test_invalid_override_falls_through(self) -> None:
        """Unknown attribute values are not overrides."""
        entry = Entry(id=1, title="x", attributes={ENTRY_OVERRIDE_KEY: "Catalog"})
        resolver = make_resolver([], GlobalMode.SELL)
        assert resolver.explain(entry).tier == ResolutionTier.GLOBAL


class TestGroupTier:
    """Tests for group defaults."""

    def test_first_group_in_axis_order_wins(self, make_entry, make_group) -> None:
        """A category default beats tag and brand defaults."""
        groups = [
            make_group(5, Axis.CATEGORY, "Shoes", default=EffectiveMode.CATALOG_ONLY),
            make_group(1, Axis.TAG, "Sale", default=EffectiveMode.SELLABLE),
            make_group(2, Axis.BRAND, "Acme", default=EffectiveMode.SELLABLE),
        ]
        entry = make_entry(1, categories=[5], tags=[1], brands=[2])

        resolution = make_resolver(groups).explain(entry)
        assert resolution.mode == EffectiveMode.CATALOG_ONLY
        assert resolution.tier == ResolutionTier.GROUP
        assert resolution.group_id == 5

    def test_lowest_id_wins_within_axis(self, make_entry, make_group) -> None:
        """Within an axis groups are walked in ascending id order."""
        groups = [
            make_group(7, default=EffectiveMode.SELLABLE),
            make_group(3, default=EffectiveMode.CATALOG_ONLY),
        ]
        entry = make_entry(1, categories=[7, 3])

        resolution = make_resolver(groups, GlobalMode.CATALOG).explain(entry)
        assert resolution.mode == EffectiveMode.CATALOG_ONLY
        assert resolution.group_id == 3

    def test_groups_without_default_are_skipped(self, make_entry, make_group) -> None:
        """A later group's default applies when earlier ones have none."""
        groups = [
            make_group(1),
            make_group(9, Axis.BRAND, "Acme", default=EffectiveMode.CATALOG_ONLY),
        ]
        entry = make_entry(1, categories=[1], brands=[9])
        assert make_resolver(groups).resolve(entry) == EffectiveMode.CATALOG_ONLY

    def test_unknown_group_ids_are_skipped(self, make_entry) -> None:
        """Memberships of groups missing from the lookup do not break resolution."""
        entry = make_entry(1, categories=[404])
        assert make_resolver([], GlobalMode.SELL).resolve(entry) == EffectiveMode.SELLABLE


class TestModeCache:
    """Tests for the request-scoped cache."""

    def test_repeated_resolution_hits_cache(self, make_entry) -> None:
        """Second resolution of the same entry is served from the cache."""
        cache = ModeCache()
        resolver = make_resolver([], cache=cache)
        entry = make_entry(1)

        first = resolver.explain(entry)
        second = resolver.explain(entry)

        assert first == second
        assert cache.hits == 1
        assert cache.misses == 1
        assert len(cache) == 1

    def test_tier_counts(self, make_entry, make_group) -> None:
        """Tier counts summarize which tier decided each entry."""
        cache = ModeCache()
        resolver = make_resolver(
            [make_group(1, default=EffectiveMode.CATALOG_ONLY)], cache=cache
        )
        resolver.resolve(make_entry(1, override=EffectiveMode.CATALOG_ONLY))
        resolver.resolve(make_entry(2, categories=[1]))
        resolver.resolve(make_entry(3))

        assert cache.tier_counts() == {"entry": 1, "group": 1, "global": 1}
        assert cache.stats()["cache_size"] == 3

    def test_resolution_is_deterministic(self, make_entry, make_group) -> None:
        """Fresh resolvers agree on every entry."""
        groups = [make_group(1, default=EffectiveMode.CATALOG_ONLY), make_group(2)]
        entries = [make_entry(i, categories=[1 + i % 2]) for i in range(1, 20)]

        first = [make_resolver(groups).resolve(e) for e in entries]
        second = [make_resolver(groups).resolve(e) for e in entries]
        assert first == second
