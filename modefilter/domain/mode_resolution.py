"""Mode resolution engine.

Resolves the effective mode of an entry through the override hierarchy:

1. the entry's own attribute-store override;
2. the first group default found walking the entry's groups in axis order
   (category, tag, brand) and ascending group id within an axis;
3. the global mode, with hybrid treated as sell.

Absent or invalid data at any tier falls through to the next one, so
resolution is total. Results are memoized in a request-scoped ``ModeCache``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from modefilter.domain.entities import ClassificationGroup, Entry
from modefilter.domain.value_objects import EffectiveMode, GlobalSettings


class ModeOverrideReader(Protocol):
    """Typed accessor for mode overrides held in attribute stores."""

    def get_mode_override(self, entity: Entry | ClassificationGroup) -> EffectiveMode | None:
        """Return the entity's mode override, or None when absent or invalid."""
        ...


class ResolutionTier(str, Enum):
    """Tier of the hierarchy that decided an entry's mode."""

    ENTRY = "entry"
    GROUP = "group"
    GLOBAL = "global"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one entry.

    Attributes:
        mode: Effective mode.
        tier: Tier that produced the mode.
        group_id: Deciding group when tier is GROUP.
    """

    mode: EffectiveMode
    tier: ResolutionTier
    group_id: int | None = None


# ============================================================================
# Request-scoped Cache
# ============================================================================


@dataclass
class ModeCache:
    """Per-request memo of resolutions keyed by entry id.

    Create one at the start of a request and drop it at the end; never
    store it on a module, app or thread.
    """

    _resolutions: dict[int, Resolution] = field(default_factory=dict)
    hits: int = 0
    misses: int = 0

    def get(self, entry_id: int) -> Resolution | None:
        """Look up a memoized resolution, counting the hit or miss."""
        resolution = self._resolutions.get(entry_id)
        if resolution is None:
            self.misses += 1
        else:
            self.hits += 1
        return resolution

    def put(self, entry_id: int, resolution: Resolution) -> None:
        """Memoize a resolution."""
        self._resolutions[entry_id] = resolution

    def __len__(self) -> int:
        return len(self._resolutions)

    def tier_counts(self) -> dict[str, int]:
        """Count memoized resolutions per deciding tier."""
        counts = {tier.value: 0 for tier in ResolutionTier}
        for resolution in self._resolutions.values():
            counts[resolution.tier.value] += 1
        return counts

    def stats(self) -> dict[str, int]:
        """Summary for the request log line."""
        return {"cache_hits": self.hits, "cache_misses": self.misses, "cache_size": len(self)}


# ============================================================================
# Resolver
# ============================================================================


class ModeResolver:
    """Resolves effective modes for entries.

    A pure read over the entry, the group attribute stores and the global
    settings. The group lookup only needs to contain groups the resolved
    entries belong to; unknown group ids are skipped.
    """

    def __init__(
        self,
        settings: GlobalSettings,
        overrides: ModeOverrideReader,
        groups: Mapping[int, ClassificationGroup],
        cache: ModeCache | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            settings: Immutable global settings for this request.
            overrides: Attribute-store override accessor.
            groups: Group lookup by id.
            cache: Request-scoped cache; a private one is created if omitted.
        """
        self._settings = settings
        self._overrides = overrides
        self._groups = groups
        self.cache = cache if cache is not None else ModeCache()

    def resolve(self, entry: Entry) -> EffectiveMode:
        """Resolve the effective mode of an entry.

        Args:
            entry: Entry to resolve.

        Returns:
            SELLABLE or CATALOG_ONLY.
        """
        return self.explain(entry).mode

    def explain(self, entry: Entry) -> Resolution:
        """Resolve an entry and report which tier decided.

        Args:
            entry: Entry to resolve.

        Returns:
            Resolution with mode and deciding tier.
        """
        cached = self.cache.get(entry.id)
        if cached is not None:
            return cached
        resolution = self._resolve_uncached(entry)
        self.cache.put(entry.id, resolution)
        return resolution

    def _resolve_uncached(self, entry: Entry) -> Resolution:
        own = self._overrides.get_mode_override(entry)
        if own is not None:
            return Resolution(mode=own, tier=ResolutionTier.ENTRY)

        for group_id in entry.all_group_ids():
            group = self._groups.get(group_id)
            if group is None:
                continue
            default = self._overrides.get_mode_override(group)
            if default is not None:
                return Resolution(mode=default, tier=ResolutionTier.GROUP, group_id=group_id)

        return Resolution(
            mode=self._settings.global_mode.fallback_mode(),
            tier=ResolutionTier.GLOBAL,
        )
