"""Rules constants shared across the Character Forge engine.

Values follow the D&D 5E Player's Handbook unless noted otherwise.
"""

from __future__ import annotations

# =============================================================================
# Level Bounds
# =============================================================================

MIN_LEVEL = 1
"""Lowest character level."""

MAX_LEVEL = 20
"""Highest character level."""

# =============================================================================
# Ability Scores
# =============================================================================

MIN_ABILITY_SCORE = 1
"""Minimum ability score (1 is barely functioning)."""

MAX_ABILITY_SCORE = 30
"""Maximum ability score any creature can reach."""

PC_ABILITY_SCORE_CAP = 20
"""Ability score cap for ability score improvements (PHB p.15)."""

ASI_POINTS = 2
"""Points granted by a single ability score improvement."""

DEFAULT_ABILITY_SCORE = 10
"""Score used when a record is missing an ability."""

# =============================================================================
# Armor Class
# =============================================================================

UNARMORED_BASE_AC = 10
"""Base armor class with no armor equipped."""

SHIELD_AC_BONUS = 2
"""Flat armor class bonus from a shield."""

DEFAULT_MEDIUM_ARMOR_MAX_DEX = 2
"""Dexterity cap for medium armor when the catalog entry omits one."""

MAX_EQUIPPED_WEAPONS = 2
"""Weapons (including a shield) that may be equipped at once."""

# =============================================================================
# Checks and Dice
# =============================================================================

PASSIVE_CHECK_BASE = 10
"""Base value for passive checks such as passive Perception."""

CHECK_DIE_SIDES = 20
"""Sides of the die used for ability checks, saves and attacks."""

NATURAL_CRITICAL = 20
"""Raw d20 value that is a critical success."""

NATURAL_FUMBLE = 1
"""Raw d20 value that is a critical failure."""

SPELL_LEVELS = 9
"""Number of spell slot levels tracked per character."""

DEFAULT_SPEED = 30
"""Walking speed in feet when a species does not specify one."""

DEFAULT_HIT_DIE = 8
"""Hit die for classes missing from the progression tables."""


__all__ = [
    "MIN_LEVEL",
    "MAX_LEVEL",
    "MIN_ABILITY_SCORE",
    "MAX_ABILITY_SCORE",
    "PC_ABILITY_SCORE_CAP",
    "ASI_POINTS",
    "DEFAULT_ABILITY_SCORE",
    "UNARMORED_BASE_AC",
    "SHIELD_AC_BONUS",
    "DEFAULT_MEDIUM_ARMOR_MAX_DEX",
    "MAX_EQUIPPED_WEAPONS",
    "PASSIVE_CHECK_BASE",
    "CHECK_DIE_SIDES",
    "NATURAL_CRITICAL",
    "NATURAL_FUMBLE",
    "SPELL_LEVELS",
    "DEFAULT_SPEED",
    "DEFAULT_HIT_DIE",
]
