"""Domain layer - Entities, value objects, mode resolution, state machines.

This module exports the core domain building blocks:

- **Entities**: Read-only catalog snapshots (Entry, ClassificationGroup)
- **Value Objects**: Immutable objects compared by value (PriceRange, Chip, FacetBlock)
- **Scope**: What a listing request asks for (RequestScope, ActiveSelections)
- **Mode Resolution**: Override hierarchy resolving sellable/catalog-only
- **State Machines**: Widget fetch lifecycle (FetchStatus)
- **Exceptions**: Domain-specific errors

Example usage:
    from modefilter.domain import GlobalSettings, GlobalMode, ModeResolver

    resolver = ModeResolver(
        settings=GlobalSettings(global_mode=GlobalMode.HYBRID),
        overrides=AttributeStoreOverrides(),
        groups={group.id: group for group in groups},
    )
    resolver.resolve(entry)  # EffectiveMode.SELLABLE
"""

# Base classes
from modefilter.domain.base import Entity, ValueObject

# Chip selection
from modefilter.domain.chip_selection import ChipSelection

# Entities
from modefilter.domain.entities import ClassificationGroup, Entry

# Exceptions
from modefilter.domain.exceptions import (
    BackendUnavailableError,
    DomainError,
    InvalidStateTransitionError,
    InvalidTokenError,
    ScopeValidationError,
)

# Mode resolution
from modefilter.domain.mode_resolution import (
    ModeCache,
    ModeOverrideReader,
    ModeResolver,
    Resolution,
    ResolutionTier,
)

# Scope
from modefilter.domain.scope import (
    ActiveSelections,
    DisplayOptions,
    FacetOptions,
    RequestScope,
)

# State Machines
from modefilter.domain.state_machines import FetchStatus, validate_fetch_transition

# Value Objects
from modefilter.domain.value_objects import (
    AXIS_ORDER,
    CANONICAL_FACET_ORDER,
    Axis,
    Chip,
    EffectiveMode,
    FacetBlock,
    FacetId,
    FiltersMode,
    GlobalMode,
    GlobalSettings,
    GridLayout,
    LayoutParams,
    PaginationStrategy,
    PoolType,
    PriceRange,
    ResponseStatus,
    SortKey,
    StockStatus,
    TriggerSource,
    Visibility,
)

__all__ = [
    # Base
    "Entity",
    "ValueObject",
    # Entities
    "ClassificationGroup",
    "Entry",
    # Exceptions
    "BackendUnavailableError",
    "DomainError",
    "InvalidStateTransitionError",
    "InvalidTokenError",
    "ScopeValidationError",
    # Mode resolution
    "ModeCache",
    "ModeOverrideReader",
    "ModeResolver",
    "Resolution",
    "ResolutionTier",
    # Scope
    "ActiveSelections",
    "ChipSelection",
    "DisplayOptions",
    "FacetOptions",
    "RequestScope",
    # State machines
    "FetchStatus",
    "validate_fetch_transition",
    # Value objects
    "AXIS_ORDER",
    "CANONICAL_FACET_ORDER",
    "Axis",
    "Chip",
    "EffectiveMode",
    "FacetBlock",
    "FacetId",
    "FiltersMode",
    "GlobalMode",
    "GlobalSettings",
    "GridLayout",
    "LayoutParams",
    "PaginationStrategy",
    "PoolType",
    "PriceRange",
    "ResponseStatus",
    "SortKey",
    "StockStatus",
    "TriggerSource",
    "Visibility",
]
