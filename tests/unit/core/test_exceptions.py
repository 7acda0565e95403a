"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from character_forge.core.exceptions import (
    CharacterForgeError,
    ConfigurationError,
    DiceNotationError,
    DiceRollError,
    MigrationError,
    PersistenceError,
    RulesEngineError,
    StorageError,
    UnknownEquipmentError,
    ValidationError,
)


class TestCharacterForgeError:
    """Tests for the base CharacterForgeError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = CharacterForgeError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = CharacterForgeError("Test error", details={"key": "value", "count": 42})
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        repr_str = repr(CharacterForgeError("Test", details={"x": 1}))
        assert "CharacterForgeError" in repr_str
        assert "Test" in repr_str
        assert "x" in repr_str


class TestContextualExceptions:
    """Tests for exceptions that fold keyword context into details."""

    def test_configuration_error(self) -> None:
        exc = ConfigurationError("Bad value", config_key="history_size")
        assert exc.details["config_key"] == "history_size"

    def test_validation_error(self) -> None:
        exc = ValidationError("Too few", field_name="uses", invalid_value=0)
        assert exc.details == {"field_name": "uses", "invalid_value": 0}

    def test_dice_notation_error(self) -> None:
        exc = DiceNotationError("Invalid", expression="2x6")
        assert exc.details["expression"] == "2x6"

    def test_unknown_equipment_error(self) -> None:
        exc = UnknownEquipmentError("Unknown", slug="mithral-plate")
        assert exc.details["slug"] == "mithral-plate"

    def test_persistence_error(self) -> None:
        exc = PersistenceError("Write failed", operation="save_character", record_id="abc")
        assert exc.details == {"operation": "save_character", "record_id": "abc"}

    def test_migration_error_keeps_zero_version(self) -> None:
        exc = MigrationError("Failed", version=0)
        assert exc.details["version"] == 0


class TestExceptionHierarchy:
    """Tests for exception inheritance."""

    @pytest.mark.parametrize(
        ("exc_type", "parent"),
        [
            (ConfigurationError, CharacterForgeError),
            (ValidationError, CharacterForgeError),
            (RulesEngineError, CharacterForgeError),
            (DiceRollError, RulesEngineError),
            (DiceNotationError, DiceRollError),
            (UnknownEquipmentError, RulesEngineError),
            (StorageError, CharacterForgeError),
            (PersistenceError, StorageError),
            (MigrationError, StorageError),
        ],
    )
    def test_inheritance(self, exc_type: type[Exception], parent: type[Exception]) -> None:
        assert issubclass(exc_type, parent)

    def test_catch_all(self) -> None:
        """Test that the base class catches every domain error."""
        with pytest.raises(CharacterForgeError):
            raise DiceNotationError("Unsupported dice notation", expression="2x6")
