"""Chip selection rules.

Price and rating chips are single-select. Classification chips are
multi-select with an "All" chip that is active exactly when no specific
chip is selected.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Self

from modefilter.domain.base import ValueObject
from modefilter.domain.value_objects import FacetId


@dataclass(frozen=True)
class ChipSelection(ValueObject):
    """Selected chip values of one facet block.

    An empty ``values`` tuple means the "All" chip is active.

    Attributes:
        facet: Facet the selection belongs to.
        values: Selected specific chip values in selection order.
    """

    facet: FacetId
    values: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, facet: FacetId, values: Iterable[str] = ()) -> Self:
        """Build a normalized selection (blanks and repeats dropped)."""
        selection = cls(facet=facet)
        for value in values:
            if value and value not in selection.values:
                selection = replace(selection, values=selection.values + (value,))
        if facet.is_single_select and len(selection.values) > 1:
            selection = replace(selection, values=selection.values[-1:])
        return selection

    @property
    def all_active(self) -> bool:
        """Whether the default "All" chip is active."""
        return not self.values

    def is_active(self, value: str) -> bool:
        """Check whether a chip value is currently active."""
        if value == "":
            return self.all_active
        return value in self.values

    def toggle(self, value: str) -> Self:
        """Apply a click on a chip and return the new selection.

        Args:
            value: Clicked chip value; "" is the "All" chip.

        Returns:
            New selection honoring single/multi-select rules.
        """
        if value == "":
            return replace(self, values=())
        if self.facet.is_single_select:
            return replace(self, values=(value,))
        if value in self.values:
            return replace(self, values=tuple(v for v in self.values if v != value))
        return replace(self, values=self.values + (value,))

    def single_value(self) -> str:
        """Selected value of a single-select facet, "" when "All"."""
        return self.values[0] if self.values else ""

    def group_ids(self) -> tuple[int, ...]:
        """Selected values parsed as group ids (non-numeric values skipped)."""
        ids: list[int] = []
        for value in self.values:
            if value.isdigit():
                ids.append(int(value))
        return tuple(ids)
