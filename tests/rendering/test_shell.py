"""Tests for widget shell rendering."""

from modefilter.domain.scope import DisplayOptions
from modefilter.domain.value_objects import (
    Chip,
    FacetBlock,
    FacetId,
    FilterPosition,
    SortKey,
)
from modefilter.rendering.shell import ShellRenderer


def category_block() -> FacetBlock:
    return FacetBlock(
        facet=FacetId.CATEGORIES,
        chips=(
            Chip(value="", label="All", is_default_chip=True),
            Chip(value="4", label="Chairs"),
            Chip(value="7", label="Tables", is_overflow=True),
        ),
        has_more=True,
    )


class TestShellRenderer:
    """Tests for ShellRenderer."""

    def test_sidebar_chips(self) -> None:
        html = ShellRenderer().render([category_block()], {}, DisplayOptions())

        assert 'data-filter-block="category"' in html
        assert 'class="modep-chip is-selected modep-chip--all" data-term=""' in html
        assert 'data-term="4">Chairs</button>' in html
        assert 'data-term="7" data-hidden="1" hidden>Tables</button>' in html
        assert 'data-action="toggle-more"' in html
        assert "Toggle Filters" in html

    def test_top_filters_have_no_toggle(self) -> None:
        display = DisplayOptions(filter_position=FilterPosition.TOP)
        html = ShellRenderer().render([category_block()], {}, display)

        assert "modep--filters-top" in html
        assert "Toggle Filters" not in html

    def test_selected_sort(self) -> None:
        html = ShellRenderer().render([], {}, DisplayOptions(), sort=SortKey.PRICE_ASC)

        assert '<option value="price_asc" selected>' in html
        assert '<option value="" selected>' not in html

    def test_widget_attrs_serialized(self) -> None:
        """Attributes are embedded as escaped JSON."""
        html = ShellRenderer().render([], {"token": "t"}, DisplayOptions())

        assert 'data-widget-attrs="{&#34;token&#34;:&#34;t&#34;}"' in html

    def test_empty_grid_and_pagination_anchor(self) -> None:
        html = ShellRenderer().render([], {}, DisplayOptions(columns=4))

        assert "--modep-cols: 4;" in html
        assert "modep-pagination--load_more" in html
