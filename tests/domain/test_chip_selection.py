"""Tests for chip selection rules."""

from modefilter.domain import ChipSelection, FacetId


class TestMultiSelect:
    """Classification chips are multi-select."""

    def test_all_is_active_when_nothing_selected(self) -> None:
        """The "All" chip is active for an empty selection."""
        selection = ChipSelection.of(FacetId.CATEGORIES)
        assert selection.all_active
        assert selection.is_active("")

    def test_toggle_adds_and_removes(self) -> None:
        """Clicking a chip twice returns to "All"."""
        selection = ChipSelection.of(FacetId.TAGS).toggle("3").toggle("5")
        assert selection.values == ("3", "5")
        assert not selection.is_active("")

        selection = selection.toggle("3").toggle("5")
        assert selection.all_active

    def test_all_chip_clears_selection(self) -> None:
        """Clicking "All" deselects every specific chip."""
        selection = ChipSelection.of(FacetId.BRANDS, ["1", "2"]).toggle("")
        assert selection.all_active

    def test_all_active_exactly_when_no_specific_chip(self) -> None:
        """After any click sequence "All" is active iff nothing else is."""
        selection = ChipSelection.of(FacetId.CATEGORIES)
        for value in ["1", "2", "1", "", "4", "4"]:
            selection = selection.toggle(value)
            assert selection.all_active == (len(selection.values) == 0)

    def test_group_ids_skip_non_numeric(self) -> None:
        """Only numeric chip values become group ids."""
        selection = ChipSelection.of(FacetId.CATEGORIES, ["4", "x", "9"])
        assert selection.group_ids() == (4, 9)


class TestSingleSelect:
    """Price and rating chips are single-select."""

    def test_selecting_replaces_previous(self) -> None:
        """A second price chip replaces the first."""
        selection = ChipSelection.of(FacetId.PRICE).toggle("0|50").toggle("50|100")
        assert selection.values == ("50|100",)
        assert selection.single_value() == "50|100"

    def test_reselecting_keeps_chip(self) -> None:
        """Clicking the active rating chip keeps it selected."""
        selection = ChipSelection.of(FacetId.RATING).toggle("4").toggle("4")
        assert selection.single_value() == "4"

    def test_of_keeps_last_value(self) -> None:
        """Building a single-select selection keeps one value."""
        selection = ChipSelection.of(FacetId.RATING, ["3", "5"])
        assert selection.values == ("5",)

    def test_all_returns_empty_value(self) -> None:
        """The "All" chip maps to an empty value."""
        assert ChipSelection.of(FacetId.PRICE).toggle("200|").toggle("").single_value() == ""
