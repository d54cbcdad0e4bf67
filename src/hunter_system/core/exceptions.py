"""Custom exception hierarchy for the Hunter System engine.

All exceptions inherit from HunterSystemError, enabling unified error
handling at the engine boundary while preserving domain-specific context.
Engine helpers raise these internally; ``engine.system.apply_command``
converts them into result values so no exception reaches the host.

Example:
    >>> from hunter_system.core.exceptions import NotFoundError
    >>> raise NotFoundError("Dungeon not found", entity="dungeon", entity_id="dungeon_0")
"""

from __future__ import annotations

from typing import Any


class HunterSystemError(Exception):
    """Base exception for all Hunter System errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Engine Domain Exceptions
# =============================================================================


class EngineError(HunterSystemError):
    """Base exception for progression engine errors."""


class NotFoundError(EngineError):
    """Raised when a dungeon, item, or shadow id does not resolve.

    No state is mutated when this is raised.
    """

    def __init__(
        self,
        message: str,
        *,
        entity: str | None = None,
        entity_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize not-found error with entity context.

        Args:
            message: Human-readable error description.
            entity: Kind of entity looked up ('dungeon', 'item', 'shadow').
            entity_id: The identifier that failed to resolve.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if entity:
            combined_details["entity"] = entity
        if entity_id:
            combined_details["entity_id"] = entity_id
        super().__init__(message, details=combined_details)


class InsufficientResourceError(EngineError):
    """Raised when the wallet cannot cover a cost (upgrade or purchase)."""

    def __init__(
        self,
        message: str,
        *,
        required: int | None = None,
        available: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize insufficient resource error with cost context.

        Args:
            message: Human-readable error description.
            required: Amount the operation costs.
            available: Amount the player holds.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if required is not None:
            combined_details["required"] = required
        if available is not None:
            combined_details["available"] = available
        super().__init__(message, details=combined_details)


class InvariantViolationError(EngineError):
    """Raised when a computed value breaks an engine invariant.

    These are recovered locally through a documented fallback and logged;
    they never reach the host.
    """

    def __init__(
        self,
        message: str,
        *,
        invariant: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invariant violation with the invariant name.

        Args:
            message: Human-readable error description.
            invariant: Short name of the violated invariant.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if invariant:
            combined_details["invariant"] = invariant
        super().__init__(message, details=combined_details)


class MigrationError(HunterSystemError):
    """Raised when persisted state cannot be normalized to the current schema."""

    def __init__(
        self,
        message: str,
        *,
        schema_version: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if schema_version is not None:
            combined_details["schema_version"] = schema_version
        super().__init__(message, details=combined_details)


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(HunterSystemError):
    """Raised when engine configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(HunterSystemError):
    """Raised when command or state data fails validation."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "HunterSystemError",
    # Engine exceptions
    "EngineError",
    "NotFoundError",
    "InsufficientResourceError",
    "InvariantViolationError",
    "MigrationError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
]
