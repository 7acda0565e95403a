"""Configuration management for Character Forge.

This module provides centralized configuration management using pydantic-settings,
supporting environment variables, .env files, and runtime configuration overrides.

Example:
    >>> from character_forge.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.dice.history_size
    10

Environment Variables:
    CHARACTER_FORGE_DATABASE_PATH: Path to the SQLite character store
    CHARACTER_FORGE_DICE_HISTORY_SIZE: Number of rolls kept in the roll history
    CHARACTER_FORGE_RULES_DEFAULT_EDITION: Edition tag for newly created characters
    CHARACTER_FORGE_RULES_HP_METHOD: Hit point gain on level up (average or roll)
    CHARACTER_FORGE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from character_forge.core.exceptions import ConfigurationError


class StorageSettings(BaseSettings):
    """Configuration for the persisted character store.

    Attributes:
        database_path: Path to the SQLite database file.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHARACTER_FORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/character_forge.db"),
        description="Path to SQLite database",
    )

    @field_validator("database_path", mode="after")
    @classmethod
    def reject_directory(cls, value: Path) -> Path:
        """Ensure the database path does not point at an existing directory.

        Args:
            value: The path to validate.

        Returns:
            The validated path.

        Raises:
            ConfigurationError: If the path is an existing directory.
        """
        if value.is_dir():
            raise ConfigurationError(
                f"database_path ({value}) is a directory, expected a file path",
                config_key="database_path",
            )
        return value


class DiceSettings(BaseSettings):
    """Configuration for the dice roll engine.

    Attributes:
        history_size: Number of most recent rolls retained in the history.
        max_dice_count: Largest dice count accepted in custom notation.
        max_die_sides: Largest die size accepted in custom notation.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHARACTER_FORGE_DICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    history_size: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Rolls retained in history",
    )
    max_dice_count: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum dice per notation",
    )
    max_die_sides: int = Field(
        default=1000,
        ge=2,
        le=10000,
        description="Maximum sides per die",
    )

    @model_validator(mode="after")
    def validate_advantage_possible(self) -> "DiceSettings":
        """Ensure advantage and disadvantage rolls stay within the dice limits.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If fewer than two d20 may be rolled at once.
        """
        if self.max_dice_count < 2 or self.max_die_sides < 20:
            raise ConfigurationError(
                f"max_dice_count ({self.max_dice_count}) and max_die_sides "
                f"({self.max_die_sides}) must allow rolling 2d20",
                config_key="max_dice_count",
            )
        return self


class RulesSettings(BaseSettings):
    """Configuration for rules behavior.

    Attributes:
        default_edition: Edition tag applied to newly created characters.
        legacy_edition: Edition tag assumed for records that predate tagging.
        hp_method: Hit point gain on level up when no roll is supplied.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHARACTER_FORGE_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_edition: Literal["2014", "2024"] = Field(
        default="2024",
        description="Edition for new characters",
    )
    legacy_edition: Literal["2014", "2024"] = Field(
        default="2014",
        description="Edition assumed for untagged records",
    )
    hp_method: Literal["average", "roll"] = Field(
        default="average",
        description="Hit point gain on level up",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        storage: Character store settings.
        dice: Dice engine settings.
        rules: Rules behavior settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHARACTER_FORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    # Application metadata
    app_name: str = Field(
        default="Character Forge",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)
    dice: DiceSettings = Field(default_factory=DiceSettings)
    rules: RulesSettings = Field(default_factory=RulesSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if not in debug mode.
        """
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.

    Example:
        >>> settings = get_settings()
        >>> settings.app_name
        'Character Forge'
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    This is primarily useful for testing or when environment variables
    have changed at runtime.
    """
    get_settings.cache_clear()


__all__ = [
    "StorageSettings",
    "DiceSettings",
    "RulesSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
