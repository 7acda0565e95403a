"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        CharacterForgeError: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Input validation errors.
        DiceRollError / DiceNotationError: Dice engine errors.
        PersistenceError / MigrationError: Storage errors.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        configure_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
        character_context: Scope log entries to one character.
"""

from __future__ import annotations

from character_forge.core.config import (
    DiceSettings,
    RulesSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
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
from character_forge.core.logging import (
    bind_context,
    character_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


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
    # Configuration
    "Settings",
    "StorageSettings",
    "DiceSettings",
    "RulesSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "character_context",
]
