"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from hunter_system.core.exceptions import (
    ConfigurationError,
    EngineError,
    HunterSystemError,
    InsufficientResourceError,
    InvariantViolationError,
    MigrationError,
    NotFoundError,
    ValidationError,
)


class TestHunterSystemError:
    """Tests for the base HunterSystemError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = HunterSystemError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = HunterSystemError(
            "Test error",
            details={"key": "value", "count": 42},
        )
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        exc = HunterSystemError("Test", details={"x": 1})
        repr_str = repr(exc)
        assert "HunterSystemError" in repr_str
        assert "Test" in repr_str
        assert "x" in repr_str


class TestEngineExceptions:
    """Tests for engine domain exceptions."""

    def test_not_found_with_entity(self) -> None:
        """Test NotFoundError records the entity and id."""
        exc = NotFoundError("Item not found", entity="item", entity_id="abc")
        assert exc.details["entity"] == "item"
        assert exc.details["entity_id"] == "abc"

    def test_insufficient_resource_amounts(self) -> None:
        """Test InsufficientResourceError records both amounts."""
        exc = InsufficientResourceError("Not enough shards", required=300, available=120)
        assert exc.details == {"required": 300, "available": 120}

    def test_insufficient_resource_zero_available(self) -> None:
        """Test a zero balance is still recorded."""
        exc = InsufficientResourceError("Not enough shards", required=100, available=0)
        assert exc.details["available"] == 0

    def test_invariant_violation_name(self) -> None:
        """Test InvariantViolationError records the invariant."""
        exc = InvariantViolationError("Zero power", invariant="power_nonzero")
        assert exc.details["invariant"] == "power_nonzero"

    def test_migration_error_version(self) -> None:
        """Test MigrationError records the schema version."""
        exc = MigrationError("Too new", schema_version=9)
        assert exc.details["schema_version"] == 9


class TestConfigAndValidationExceptions:
    """Tests for configuration and validation exceptions."""

    def test_configuration_error_key(self) -> None:
        """Test ConfigurationError with config key."""
        exc = ConfigurationError("Bad bands", config_key="success_bands")
        assert exc.details["config_key"] == "success_bands"

    def test_validation_error_field(self) -> None:
        """Test ValidationError with field context."""
        exc = ValidationError("Bad value", field_name="shards", invalid_value=-5)
        assert exc.details["field_name"] == "shards"
        assert exc.details["invalid_value"] == -5


class TestExceptionHierarchy:
    """Tests for exception inheritance."""

    @pytest.mark.parametrize(
        "exc_class",
        [NotFoundError, InsufficientResourceError, InvariantViolationError],
    )
    def test_engine_errors(self, exc_class: type[Exception]) -> None:
        """Test engine errors share the EngineError base."""
        assert issubclass(exc_class, EngineError)
        assert issubclass(exc_class, HunterSystemError)

    @pytest.mark.parametrize(
        "exc_class",
        [MigrationError, ConfigurationError, ValidationError],
    )
    def test_root_errors(self, exc_class: type[Exception]) -> None:
        """Test non-engine errors inherit directly from the root."""
        assert issubclass(exc_class, HunterSystemError)
        assert not issubclass(exc_class, EngineError)

    def test_catch_all(self) -> None:
        """Test catching every engine error through the root class."""
        with pytest.raises(HunterSystemError):
            raise NotFoundError("missing")
