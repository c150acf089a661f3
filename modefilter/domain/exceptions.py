"""Domain exceptions.

All domain-level errors raised while serving a catalog request. The API
layer maps each family to a distinct, machine-readable error code.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Validation Errors
# ============================================================================


class ScopeValidationError(DomainError):
    """Raised when a request scope is malformed or out of range.

    Always raised before any backend call is made.
    """

    error_code = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str) -> None:
        """Initialize scope validation error.

        Args:
            field: Name of the offending scope field.
            reason: Explanation of why the value is rejected.
        """
        super().__init__(
            f"Invalid value for '{field}': {reason}",
            details={"field": field, "reason": reason},
        )
        self.field = field
        self.reason = reason


# ============================================================================
# Authentication Errors
# ============================================================================


class InvalidTokenError(DomainError):
    """Raised when a fetch token is missing, malformed, expired or forged."""

    error_code = "INVALID_TOKEN"

    def __init__(self, reason: str) -> None:
        """Initialize invalid token error.

        Args:
            reason: Short machine-friendly reason (missing, malformed, ...).
        """
        super().__init__(
            "Security check failed",
            details={"reason": reason},
        )
        self.reason = reason


# ============================================================================
# Backend Errors
# ============================================================================


class BackendUnavailableError(DomainError):
    """Raised when the entry store or another required subsystem fails.

    The message is generic on purpose; ``details`` are only logged.
    """

    error_code = "BACKEND_UNAVAILABLE"

    def __init__(self, backend: str, reason: str) -> None:
        """Initialize backend unavailable error.

        Args:
            backend: Name of the failing backend (e.g. "entry_store").
            reason: Internal diagnostic, never sent to clients.
        """
        super().__init__(
            "The catalog is temporarily unavailable. Please try again.",
            details={"backend": backend, "reason": reason},
        )
        self.backend = backend
        self.reason = reason


# ============================================================================
# State Machine Errors
# ============================================================================


class InvalidStateTransitionError(DomainError):
    """Raised when an invalid state transition is attempted."""

    error_code = "INVALID_STATE_TRANSITION"

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        current_state: str,
        target_state: str,
        allowed_transitions: list[str] | None = None,
    ) -> None:
        """Initialize invalid state transition error.

        Args:
            entity_type: Type of entity (e.g., "Widget").
            entity_id: ID of the entity.
            current_state: Current state of the entity.
            target_state: Attempted target state.
            allowed_transitions: List of allowed target states from current state.
        """
        allowed = allowed_transitions or []
        message = (
            f"Cannot transition {entity_type}({entity_id}) "
            f"from '{current_state}' to '{target_state}'. "
            f"Allowed transitions: {allowed}"
        )
        super().__init__(
            message,
            details={
                "entity_type": entity_type,
                "entity_id": entity_id,
                "current_state": current_state,
                "target_state": target_state,
                "allowed_transitions": allowed,
            },
        )
