"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Character Forge test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from character_forge.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "CHARACTER_FORGE_DEBUG": "true",
        "CHARACTER_FORGE_LOG_LEVEL": "DEBUG",
        "CHARACTER_FORGE_DICE_HISTORY_SIZE": "5",
        "CHARACTER_FORGE_RULES_HP_METHOD": "roll",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def sample_ability_scores() -> dict[str, int]:
    """Provide sample character ability scores.

    Returns:
        Dictionary of ability scores.
    """
    return {
        "strength": 14,
        "dexterity": 16,
        "constitution": 14,
        "intelligence": 10,
        "wisdom": 12,
        "charisma": 8,
    }


@pytest.fixture
def sample_character(sample_ability_scores: dict[str, int]) -> Any:
    """Create a level 1 Fighter built through the creation flow.

    Args:
        sample_ability_scores: Character ability scores.

    Returns:
        Character instance.
    """
    from character_forge.engine.creation import create_character
    from character_forge.models.character import AbilityScores
    from character_forge.models.enums import Skill

    return create_character(
        "Thorin",
        "Fighter",
        AbilityScores(**sample_ability_scores),
        species="Dwarf",
        background="Soldier",
        skill_proficiencies=[Skill.ATHLETICS, Skill.PERCEPTION],
    )


@pytest.fixture
def sample_wizard() -> Any:
    """Create a level 1 Wizard with a pending cantrip choice.

    Returns:
        Character instance.
    """
    from character_forge.engine.creation import create_character
    from character_forge.models.character import AbilityScores

    return create_character(
        "Elara",
        "Wizard",
        AbilityScores(strength=8, dexterity=14, constitution=12, intelligence=16, wisdom=12, charisma=10),
        species="Elf",
    )


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def roll_history() -> Any:
    """Create an in-memory roll history with the default capacity.

    Returns:
        RollHistory instance.
    """
    from character_forge.engine.history import RollHistory

    return RollHistory(capacity=10)


@pytest.fixture
def dice_roller(roll_history: Any) -> Any:
    """Create a DiceRoller with a fixed seed for reproducible tests.

    Returns:
        DiceRoller instance with fixed seed.
    """
    from character_forge.engine.dice import DiceRoller

    return DiceRoller(history=roll_history, seed=42)


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path to a throwaway database file."""
    return tmp_path / "forge.db"


@pytest.fixture
def database(db_path: Path) -> Any:
    """Create a CharacterDatabase in a temporary directory.

    Returns:
        CharacterDatabase instance.
    """
    from character_forge.storage.database import CharacterDatabase

    return CharacterDatabase(db_path)
