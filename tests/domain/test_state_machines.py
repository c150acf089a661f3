"""Tests for domain state machines."""

import pytest

from modefilter.domain import FetchStatus
from modefilter.domain.exceptions import InvalidStateTransitionError
from modefilter.domain.state_machines import validate_fetch_transition


class TestFetchStatus:
    """Tests for FetchStatus state machine."""

    def test_idle_can_only_start_loading(self) -> None:
        """IDLE can transition only to LOADING."""
        assert FetchStatus.IDLE.allowed_transitions() == [FetchStatus.LOADING]

    def test_loading_can_be_superseded(self) -> None:
        """LOADING can transition to LOADING when a newer fetch supersedes."""
        assert FetchStatus.LOADING.can_transition_to(FetchStatus.LOADING)

    def test_loading_settles(self) -> None:
        """LOADING settles into LOADED, EMPTY or FAILED."""
        for target in (FetchStatus.LOADED, FetchStatus.EMPTY, FetchStatus.FAILED):
            assert FetchStatus.LOADING.can_transition_to(target)

    def test_settled_states_only_reload(self) -> None:
        """Settled states can only start a new fetch."""
        for status in (FetchStatus.LOADED, FetchStatus.EMPTY, FetchStatus.FAILED):
            assert status.is_settled()
            assert status.allowed_transitions() == [FetchStatus.LOADING]

    def test_loaded_cannot_jump_to_failed(self) -> None:
        """LOADED cannot transition straight to FAILED."""
        assert not FetchStatus.LOADED.can_transition_to(FetchStatus.FAILED)

    def test_busy(self) -> None:
        """Only LOADING is busy."""
        assert FetchStatus.LOADING.is_busy()
        assert not FetchStatus.IDLE.is_busy()
        assert not FetchStatus.IDLE.is_settled()


class TestValidateFetchTransition:
    """Tests for the transition helper."""

    def test_valid_transition_passes(self) -> None:
        """Valid transitions do not raise."""
        validate_fetch_transition("w1", FetchStatus.IDLE, FetchStatus.LOADING)

    def test_invalid_transition_raises(self) -> None:
        """Invalid transitions raise with details."""
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            validate_fetch_transition("w1", FetchStatus.IDLE, FetchStatus.LOADED)

        details = exc_info.value.details
        assert details["entity_type"] == "Widget"
        assert details["entity_id"] == "w1"
        assert details["allowed_transitions"] == ["loading"]
