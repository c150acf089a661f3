"""State machines for the listing widget.

Deterministic state machine that defines the valid fetch transitions of
one widget instance. A widget has at most one fetch in flight; issuing a
new fetch while loading supersedes the previous one.
"""

from enum import Enum

from modefilter.domain.exceptions import InvalidStateTransitionError


# ============================================================================
# Widget Fetch State Machine
# ============================================================================


class FetchStatus(str, Enum):
    """Widget fetch lifecycle states.

    State diagram:
        IDLE
          │
          │ fetch
          ▼
        LOADING ◄──────┐ supersede
          │   │   │    │
          │   │   └────┘
          │   │
          │   └──────────────► FAILED ──┐
          ▼                             │
        LOADED / EMPTY ─────────────────┴──► LOADING (next fetch)
    """

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    EMPTY = "empty"
    FAILED = "failed"

    def can_transition_to(self, target: "FetchStatus") -> bool:
        """Check if transition to target state is valid.

        Args:
            target: Target state to transition to.

        Returns:
            True if transition is valid.
        """
        return target in _FETCH_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["FetchStatus"]:
        """Get list of valid target states.

        Returns:
            List of states that can be transitioned to.
        """
        return sorted(_FETCH_TRANSITIONS.get(self, set()), key=lambda s: s.value)

    def is_busy(self) -> bool:
        """Check if a fetch is in flight.

        Returns:
            True while loading.
        """
        return self == FetchStatus.LOADING

    def is_settled(self) -> bool:
        """Check if the last fetch has finished, successfully or not."""
        return self in {FetchStatus.LOADED, FetchStatus.EMPTY, FetchStatus.FAILED}


# Fetch transitions (defined outside enum to avoid Enum restrictions)
_FETCH_TRANSITIONS: dict[FetchStatus, set[FetchStatus]] = {
    FetchStatus.IDLE: {FetchStatus.LOADING},
    FetchStatus.LOADING: {
        FetchStatus.LOADING,  # superseded by a newer fetch
        FetchStatus.LOADED,
        FetchStatus.EMPTY,
        FetchStatus.FAILED,
    },
    FetchStatus.LOADED: {FetchStatus.LOADING},
    FetchStatus.EMPTY: {FetchStatus.LOADING},
    FetchStatus.FAILED: {FetchStatus.LOADING},
}


# ============================================================================
# State Machine Helpers
# ============================================================================


def validate_fetch_transition(
    widget_id: str,
    current_status: FetchStatus,
    target_status: FetchStatus,
) -> None:
    """Validate and raise if a widget fetch transition is invalid.

    Args:
        widget_id: Widget identifier for error message.
        current_status: Current fetch status.
        target_status: Target fetch status.

    Raises:
        InvalidStateTransitionError: If transition is not valid.
    """
    if not current_status.can_transition_to(target_status):
        raise InvalidStateTransitionError(
            entity_type="Widget",
            entity_id=widget_id,
            current_state=current_status.value,
            target_state=target_status.value,
            allowed_transitions=[s.value for s in current_status.allowed_transitions()],
        )
