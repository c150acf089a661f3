"""Domain building blocks.

Catalog snapshots are entities (identity by id); everything derived per
request is an immutable value object.
"""

from abc import ABC
from dataclasses import dataclass
from typing import Generic, TypeVar


# ============================================================================
# Value Object Base
# ============================================================================


@dataclass(frozen=True)
class ValueObject(ABC):
    """Immutable, attribute-compared object.

    Example:
        @dataclass(frozen=True)
        class PriceRange(ValueObject):
            min_price: Decimal | None
            max_price: Decimal | None
    """

    pass


# ============================================================================
# Entity Base
# ============================================================================


T = TypeVar("T", bound=int | str)


@dataclass(eq=False)
class Entity(ABC, Generic[T]):
    """Object identified by its id.

    Two snapshots of the same entry compare equal even when their other
    fields differ. Subclasses are declared with ``eq=False`` so dataclass
    does not replace the comparison.

    Attributes:
        id: Store identifier.
    """

    id: T

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
