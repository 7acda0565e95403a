"""Pydantic V2 schemas and static rules data for Character Forge.

Modules:
    enums: Ability, skill, equipment and roll enumerations.
    character: The persisted Character record and its building blocks.
    dice: Pending and resolved dice roll records.
    equipment: Read-only equipment catalog.
    progression: Level progression and class resource tables.
    results: Explicit outcome type for engine mutations.
"""

from __future__ import annotations

from character_forge.models.character import (
    AbilityScores,
    Character,
    Currency,
    HitDice,
    InventoryEntry,
    LevelUpRecord,
    PendingChoice,
    ResourceTracker,
    SkillEntry,
    Spellcasting,
    ability_modifier,
)
from character_forge.models.dice import DicePool, DiceRoll, PendingRoll
from character_forge.models.enums import (
    Ability,
    ArmorCategory,
    ChoiceType,
    CriticalResult,
    DamageType,
    Edition,
    EquipmentCategory,
    RechargeType,
    RollKind,
    RollType,
    Skill,
    WeaponCategory,
)
from character_forge.models.equipment import EquipmentCatalog, EquipmentCatalogEntry, get_catalog
from character_forge.models.results import CharacterUpdate


__all__ = [
    # Enums
    "Ability",
    "Skill",
    "Edition",
    "EquipmentCategory",
    "ArmorCategory",
    "WeaponCategory",
    "DamageType",
    "RechargeType",
    "RollKind",
    "RollType",
    "CriticalResult",
    "ChoiceType",
    # Character
    "ability_modifier",
    "AbilityScores",
    "HitDice",
    "SkillEntry",
    "Spellcasting",
    "InventoryEntry",
    "Currency",
    "ResourceTracker",
    "PendingChoice",
    "LevelUpRecord",
    "Character",
    # Dice
    "DicePool",
    "PendingRoll",
    "DiceRoll",
    # Equipment
    "EquipmentCatalogEntry",
    "EquipmentCatalog",
    "get_catalog",
    # Results
    "CharacterUpdate",
]
