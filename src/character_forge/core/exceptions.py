"""Custom exception hierarchy for Character Forge.

Every error raised by the rules engine inherits from CharacterForgeError,
so callers at the application boundary can catch a single type while still
seeing domain-specific context in ``details``.

Boundary conditions such as leveling past 20 or spending a resource that is
already exhausted are not errors; they are reported through
``CharacterUpdate`` results instead.

Example:
    >>> from character_forge.core.exceptions import DiceNotationError
    >>> raise DiceNotationError("Unsupported dice notation", expression="2x6")
"""

from __future__ import annotations

from typing import Any


class CharacterForgeError(Exception):
    """Base exception for all Character Forge errors.

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
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration and Validation Exceptions
# =============================================================================


class ConfigurationError(CharacterForgeError):
    """Raised when application settings are missing or inconsistent."""

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


class ValidationError(CharacterForgeError):
    """Raised when an input falls outside the domain an operation accepts.

    Used for genuinely malformed input (an unknown ability name, a negative
    spend amount). Never used for boundary no-ops.
    """

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


# =============================================================================
# Rules Engine Exceptions
# =============================================================================


class RulesEngineError(CharacterForgeError):
    """Base exception for rules engine errors."""


class DiceRollError(RulesEngineError):
    """Raised when a dice roll cannot be produced.

    This typically occurs when a dice expression is rejected by the parser
    or when confirmed physical results do not match the pending roll.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class DiceNotationError(DiceRollError):
    """Raised when dice notation does not match the supported grammar.

    Covers both syntactic failures (``"2x6"``) and out-of-range values
    (``"0d6"``, ``"1000d6"``, ``"2d20kh3"``).
    """


class UnknownEquipmentError(RulesEngineError):
    """Raised when an equipment slug is not present in the catalog."""

    def __init__(
        self,
        message: str,
        *,
        slug: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if slug:
            combined_details["slug"] = slug
        super().__init__(message, details=combined_details)


# =============================================================================
# Storage Exceptions
# =============================================================================


class StorageError(CharacterForgeError):
    """Base exception for storage errors."""


class PersistenceError(StorageError):
    """Raised when the underlying store rejects a read or write.

    In-memory state is never rolled back when this is raised; callers
    must re-synchronize from the store themselves.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        record_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize persistence error with operation context.

        Args:
            message: Human-readable error description.
            operation: The storage operation that failed (e.g. "save_character").
            record_id: Identifier of the record involved, if any.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if operation:
            combined_details["operation"] = operation
        if record_id:
            combined_details["record_id"] = record_id
        super().__init__(message, details=combined_details)


class MigrationError(StorageError):
    """Raised when a schema migration step cannot be applied."""

    def __init__(
        self,
        message: str,
        *,
        version: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize migration error with version context.

        Args:
            message: Human-readable error description.
            version: The schema version of the failing step.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if version is not None:
            combined_details["version"] = version
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "CharacterForgeError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Rules engine exceptions
    "RulesEngineError",
    "DiceRollError",
    "DiceNotationError",
    "UnknownEquipmentError",
    # Storage exceptions
    "StorageError",
    "PersistenceError",
    "MigrationError",
]
