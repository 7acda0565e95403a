"""Character Forge - D&D 5E character rules engine.

Derives the numbers on a character sheet from raw inputs and drives the
character through its lifecycle:

- Derived stats (modifiers, saves, skills, initiative, passive scores)
- Armor class from equipped armor and shield
- Limited-use resources with short/long rest recharge
- Dice rolls with advantage, criticals and a bounded history (d20 library)
- Level up/down with pending choices
- Versioned migrations for persisted records

Example:
    >>> from character_forge import CharacterSession, Ability
    >>>
    >>> session = CharacterSession("forge.db")
    >>> hero = session.create_character("Thorin", "Fighter", level=3)
    >>> hero = session.equip_armor(hero, "chain-mail").character
    >>> hero.armor_class
    16
    >>> roll = session.roll_ability_check(hero, Ability.STR)

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas and static rules tables.
    engine: Pure rules operations over a Character.
    storage: SQLite persistence and schema migrations.
    session: Facade binding the engine to a store and roll history.
"""

from __future__ import annotations

# Core
from character_forge.core.config import Settings, get_settings
from character_forge.core.exceptions import (
    CharacterForgeError,
    DiceNotationError,
    DiceRollError,
    MigrationError,
    PersistenceError,
    ValidationError,
)

# Models
from character_forge.models import (
    Ability,
    AbilityScores,
    Character,
    CharacterUpdate,
    DiceRoll,
    Edition,
    EquipmentCatalogEntry,
    PendingChoice,
    RechargeType,
    ResourceTracker,
    RollType,
    Skill,
)

# Engine
from character_forge.engine import (
    DerivedStats,
    DiceRoller,
    RollHistory,
    compute_derived_stats,
    create_character,
    level_down,
    level_up,
    long_rest,
    recharge_resources,
    refresh_resources,
    resolve_armor_class,
    short_rest,
    spend_resource,
)

# Storage
from character_forge.storage import CURRENT_SCHEMA_VERSION, CharacterDatabase, migrate

from character_forge.session import CharacterSession


__version__ = "0.1.0"

__all__ = [
    # Core
    "Settings",
    "get_settings",
    "CharacterForgeError",
    "ValidationError",
    "DiceRollError",
    "DiceNotationError",
    "PersistenceError",
    "MigrationError",
    # Models
    "Ability",
    "AbilityScores",
    "Character",
    "CharacterUpdate",
    "DiceRoll",
    "Edition",
    "EquipmentCatalogEntry",
    "PendingChoice",
    "RechargeType",
    "ResourceTracker",
    "RollType",
    "Skill",
    # Engine
    "DerivedStats",
    "compute_derived_stats",
    "resolve_armor_class",
    "refresh_resources",
    "spend_resource",
    "recharge_resources",
    "DiceRoller",
    "RollHistory",
    "level_up",
    "level_down",
    "short_rest",
    "long_rest",
    "create_character",
    # Storage
    "CURRENT_SCHEMA_VERSION",
    "CharacterDatabase",
    "migrate",
    "CharacterSession",
]
