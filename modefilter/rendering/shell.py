"""Widget shell rendering.

The shell is the initial markup of a listing widget: facet sidebar, sort
bar, an empty grid and the pagination anchor. Entries are filled in later
by the client through the fetch endpoint.
"""

import json
from typing import Any

from jinja2 import Environment

from modefilter.domain.scope import DisplayOptions
from modefilter.domain.value_objects import FacetBlock, SortKey
from modefilter.rendering.cards import get_environment

SORT_OPTIONS: tuple[tuple[str, str], ...] = (
    (SortKey.DEFAULT.value, "Default"),
    (SortKey.PRICE_ASC.value, "Price: Low to High"),
    (SortKey.PRICE_DESC.value, "Price: High to Low"),
    (SortKey.IN_STOCK.value, "In Stock"),
    (SortKey.PREORDER.value, "Pre-Order"),
    (SortKey.OUT_OF_STOCK.value, "Out of Stock"),
)


class ShellRenderer:
    """Renders ``shell.html.j2``."""

    template_name = "shell.html.j2"

    def __init__(self, environment: Environment | None = None) -> None:
        self.environment = environment or get_environment()

    def render(
        self,
        blocks: list[FacetBlock],
        widget_attrs: dict[str, Any],
        display: DisplayOptions,
        sort: SortKey = SortKey.DEFAULT,
    ) -> str:
        """Render the widget shell.

        Args:
            blocks: Facet blocks for the sidebar.
            widget_attrs: Attributes the client sends back on every fetch.
            display: Display options.
            sort: Initially selected sort key.

        Returns:
            Shell HTML.
        """
        template = self.environment.get_template(self.template_name)
        return template.render(
            blocks=blocks,
            widget_attrs=json.dumps(widget_attrs, separators=(",", ":"), ensure_ascii=False),
            filter_position=display.filter_position.value,
            grid_layout=display.layout.grid_layout.value,
            columns=display.columns,
            pagination=display.pagination.value,
            sort_options=SORT_OPTIONS,
            sort=sort.value,
        )
