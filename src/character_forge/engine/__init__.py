"""Rules engine for Character Forge.

Every operation takes a Character and returns a new one (inside a
``CharacterUpdate`` when the operation may be declined); nothing here
touches storage.

Submodules:
    stats: Derived statistics (modifiers, saves, skills, initiative)
    armor: Armor class resolution from equipped gear
    resources: Limited-use resource tracking and recharge
    dice: Dice rolling with D&D 5E mechanics (d20 library)
    history: Bounded roll history
    leveling: Level up/down state machine and pending choices
    rest: Short and long rests
    inventory: Item and equip flows
    creation: New character construction

Example:
    >>> from character_forge.engine import create_character, level_up
    >>>
    >>> hero = create_character("Thorin", "Fighter", level=3)
    >>> result = level_up(hero)
    >>> result.character.level
    4
"""

from __future__ import annotations

# =============================================================================
# Derived Statistics and Armor
# =============================================================================
from character_forge.engine.armor import (
    armor_class_for,
    equipped_armor_entry,
    has_shield_equipped,
    resolve_armor_class,
)
from character_forge.engine.stats import (
    DerivedStats,
    apply_derived_stats,
    calculate_derived_stats,
    compute_derived_stats,
    saving_throw_bonus,
    skill_bonus,
)

# =============================================================================
# Resources
# =============================================================================
from character_forge.engine.resources import (
    can_use_resource,
    expected_resources,
    get_resource_uses,
    recharge_resources,
    recharges_on,
    refresh_resources,
    spend_resource,
    with_refreshed_resources,
)

# =============================================================================
# Dice Rolling
# =============================================================================
from character_forge.engine.dice import DiceNotation, DiceRoller, parse_notation
from character_forge.engine.history import RollHistory, RollHistoryStore

# =============================================================================
# Progression and Character Flows
# =============================================================================
from character_forge.engine.leveling import (
    apply_ability_score_improvement,
    choose_feat,
    choose_subclass,
    learn_cantrip,
    level_down,
    level_up,
    level_up_preview,
)
from character_forge.engine.rest import long_rest, short_rest
from character_forge.engine.inventory import (
    add_item,
    equip_armor,
    equip_weapon,
    unequip_armor,
    unequip_weapon,
)
from character_forge.engine.creation import create_character


__all__ = [
    # Stats and armor
    "DerivedStats",
    "calculate_derived_stats",
    "compute_derived_stats",
    "apply_derived_stats",
    "saving_throw_bonus",
    "skill_bonus",
    "resolve_armor_class",
    "equipped_armor_entry",
    "has_shield_equipped",
    "armor_class_for",
    # Resources
    "expected_resources",
    "refresh_resources",
    "with_refreshed_resources",
    "get_resource_uses",
    "can_use_resource",
    "spend_resource",
    "recharges_on",
    "recharge_resources",
    # Dice
    "DiceNotation",
    "DiceRoller",
    "parse_notation",
    "RollHistory",
    "RollHistoryStore",
    # Progression
    "level_up_preview",
    "level_up",
    "level_down",
    "apply_ability_score_improvement",
    "choose_feat",
    "choose_subclass",
    "learn_cantrip",
    "short_rest",
    "long_rest",
    "add_item",
    "equip_armor",
    "unequip_armor",
    "equip_weapon",
    "unequip_weapon",
    "create_character",
]
