"""Enumeration types for Character Forge.

This module defines the enumeration types used by the rules engine,
including ability scores, skills, equipment categories, recharge
triggers, and dice roll tags.
"""

from __future__ import annotations

from enum import StrEnum


class Ability(StrEnum):
    """D&D 5E ability scores."""

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"

    @property
    def full_name(self) -> str:
        """Get the full name of the ability.

        Returns:
            Full ability name (e.g., 'Strength' for STR).
        """
        return self.value.capitalize()

    @property
    def abbreviation(self) -> str:
        """Get the three-letter abbreviation.

        Returns:
            Three-letter abbreviation (e.g., 'STR').
        """
        return self.name


class Skill(StrEnum):
    """D&D 5E skills and their associated abilities."""

    # Strength skills
    ATHLETICS = "athletics"

    # Dexterity skills
    ACROBATICS = "acrobatics"
    SLEIGHT_OF_HAND = "sleight_of_hand"
    STEALTH = "stealth"

    # Intelligence skills
    ARCANA = "arcana"
    HISTORY = "history"
    INVESTIGATION = "investigation"
    NATURE = "nature"
    RELIGION = "religion"

    # Wisdom skills
    ANIMAL_HANDLING = "animal_handling"
    INSIGHT = "insight"
    MEDICINE = "medicine"
    PERCEPTION = "perception"
    SURVIVAL = "survival"

    # Charisma skills
    DECEPTION = "deception"
    INTIMIDATION = "intimidation"
    PERFORMANCE = "performance"
    PERSUASION = "persuasion"

    @property
    def ability(self) -> Ability:
        """Get the ability score this skill is checked against.

        Returns:
            The Ability enum value associated with this skill.
        """
        return SKILL_ABILITIES[self]

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


SKILL_ABILITIES: dict[Skill, Ability] = {
    Skill.ATHLETICS: Ability.STR,
    Skill.ACROBATICS: Ability.DEX,
    Skill.SLEIGHT_OF_HAND: Ability.DEX,
    Skill.STEALTH: Ability.DEX,
    Skill.ARCANA: Ability.INT,
    Skill.HISTORY: Ability.INT,
    Skill.INVESTIGATION: Ability.INT,
    Skill.NATURE: Ability.INT,
    Skill.RELIGION: Ability.INT,
    Skill.ANIMAL_HANDLING: Ability.WIS,
    Skill.INSIGHT: Ability.WIS,
    Skill.MEDICINE: Ability.WIS,
    Skill.PERCEPTION: Ability.WIS,
    Skill.SURVIVAL: Ability.WIS,
    Skill.DECEPTION: Ability.CHA,
    Skill.INTIMIDATION: Ability.CHA,
    Skill.PERFORMANCE: Ability.CHA,
    Skill.PERSUASION: Ability.CHA,
}


class Edition(StrEnum):
    """Rules edition a character was built under."""

    PHB_2014 = "2014"
    PHB_2024 = "2024"


class EquipmentCategory(StrEnum):
    """Top-level equipment catalog categories."""

    ARMOR = "armor"
    WEAPON = "weapon"
    GEAR = "gear"


class ArmorCategory(StrEnum):
    """Armor categories that drive the armor class rule table."""

    LIGHT = "Light"
    MEDIUM = "Medium"
    HEAVY = "Heavy"
    SHIELD = "Shield"


class WeaponCategory(StrEnum):
    """Weapon proficiency groups."""

    SIMPLE = "Simple"
    MARTIAL = "Martial"


class DamageType(StrEnum):
    """D&D 5E weapon damage types."""

    BLUDGEONING = "bludgeoning"
    PIERCING = "piercing"
    SLASHING = "slashing"


class RechargeType(StrEnum):
    """When a limited-use resource returns to full."""

    NONE = "none"
    SHORT_REST = "short-rest"
    LONG_REST = "long-rest"


class RollKind(StrEnum):
    """What a dice roll was made for."""

    ABILITY = "ability"
    SKILL = "skill"
    INITIATIVE = "initiative"
    SAVING_THROW = "saving-throw"
    ATTACK = "attack"
    DAMAGE = "damage"
    HIT_DIE = "hit-die"
    COMPLEX = "complex"


class RollType(StrEnum):
    """How a d20 check is rolled."""

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


class CriticalResult(StrEnum):
    """Natural 20 or natural 1 on a single kept d20."""

    SUCCESS = "success"
    FAILURE = "failure"


class ChoiceType(StrEnum):
    """Follow-up decisions surfaced by the leveling state machine."""

    ABILITY_SCORE_IMPROVEMENT = "asi"
    SUBCLASS = "subclass"
    CANTRIP = "cantrip"


__all__ = [
    "Ability",
    "Skill",
    "SKILL_ABILITIES",
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
]
