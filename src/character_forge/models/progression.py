"""D&D 5E level progression data.

Static tables consulted by the leveling state machine and the resource
tracker:
- Proficiency bonus by level
- Hit dice by class
- Spell slots by caster type and level
- Ability score improvement and subclass levels
- Cantrips known
- Limited-use class resources

All lookups are pure; nothing here touches a character record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from character_forge.core.constants import DEFAULT_HIT_DIE, MAX_LEVEL, MIN_LEVEL, SPELL_LEVELS
from character_forge.models.enums import Ability, Edition, RechargeType


# =============================================================================
# Proficiency Bonus by Level (PHB p.15)
# =============================================================================

PROFICIENCY_BONUS_BY_LEVEL: dict[int, int] = {
    level: 2 + (level - 1) // 4 for level in range(MIN_LEVEL, MAX_LEVEL + 1)
}


def get_proficiency_bonus(level: int) -> int:
    """Get proficiency bonus for a given level.

    Levels outside 1-20 are clamped to the nearest valid level.
    """
    clamped = min(max(level, MIN_LEVEL), MAX_LEVEL)
    return PROFICIENCY_BONUS_BY_LEVEL[clamped]


# =============================================================================
# Hit Dice by Class
# =============================================================================

CLASS_HIT_DIE: dict[str, int] = {
    "Barbarian": 12,
    "Fighter": 10,
    "Paladin": 10,
    "Ranger": 10,
    "Bard": 8,
    "Cleric": 8,
    "Druid": 8,
    "Monk": 8,
    "Rogue": 8,
    "Warlock": 8,
    "Sorcerer": 6,
    "Wizard": 6,
}


def get_hit_die(class_name: str) -> int:
    """Get hit die size for a class."""
    return CLASS_HIT_DIE.get(class_name, DEFAULT_HIT_DIE)


def average_hit_die_roll(hit_die: int) -> int:
    """Fixed hit point value for a hit die, rounded up (PHB p.15)."""
    return hit_die // 2 + 1


def calculate_hp_increase(hit_die: int, con_mod: int, roll: int | None = None) -> int:
    """Calculate HP gained for one level.

    Args:
        hit_die: Sides on the class hit die.
        con_mod: Constitution modifier.
        roll: Raw hit die roll. When omitted the fixed average is used.

    Returns:
        HP gained, never less than 1.
    """
    from_die = average_hit_die_roll(hit_die) if roll is None else max(1, roll)
    return max(1, from_die + con_mod)


# =============================================================================
# Saving Throw Proficiencies
# =============================================================================

CLASS_SAVING_THROWS: dict[str, tuple[Ability, Ability]] = {
    "Barbarian": (Ability.STR, Ability.CON),
    "Bard": (Ability.DEX, Ability.CHA),
    "Cleric": (Ability.WIS, Ability.CHA),
    "Druid": (Ability.INT, Ability.WIS),
    "Fighter": (Ability.STR, Ability.CON),
    "Monk": (Ability.STR, Ability.DEX),
    "Paladin": (Ability.WIS, Ability.CHA),
    "Ranger": (Ability.STR, Ability.DEX),
    "Rogue": (Ability.DEX, Ability.INT),
    "Sorcerer": (Ability.CON, Ability.CHA),
    "Warlock": (Ability.WIS, Ability.CHA),
    "Wizard": (Ability.INT, Ability.WIS),
}


def get_saving_throw_proficiencies(class_name: str) -> list[Ability]:
    return list(CLASS_SAVING_THROWS.get(class_name, ()))


# =============================================================================
# Spell Slots
# =============================================================================

# Full casters: Bard, Cleric, Druid, Sorcerer, Wizard
FULL_CASTER_SLOTS: dict[int, tuple[int, ...]] = {
    1: (2,),
    2: (3,),
    3: (4, 2),
    4: (4, 3),
    5: (4, 3, 2),
    6: (4, 3, 3),
    7: (4, 3, 3, 1),
    8: (4, 3, 3, 2),
    9: (4, 3, 3, 3, 1),
    10: (4, 3, 3, 3, 2),
    11: (4, 3, 3, 3, 2, 1),
    12: (4, 3, 3, 3, 2, 1),
    13: (4, 3, 3, 3, 2, 1, 1),
    14: (4, 3, 3, 3, 2, 1, 1),
    15: (4, 3, 3, 3, 2, 1, 1, 1),
    16: (4, 3, 3, 3, 2, 1, 1, 1),
    17: (4, 3, 3, 3, 2, 1, 1, 1, 1),
    18: (4, 3, 3, 3, 3, 1, 1, 1, 1),
    19: (4, 3, 3, 3, 3, 2, 1, 1, 1),
    20: (4, 3, 3, 3, 3, 2, 2, 1, 1),
}

# Half casters: Paladin, Ranger (no slots at level 1)
HALF_CASTER_SLOTS: dict[int, tuple[int, ...]] = {
    1: (),
    2: (2,),
    3: (3,),
    4: (3,),
    5: (4, 2),
    6: (4, 2),
    7: (4, 3),
    8: (4, 3),
    9: (4, 3, 2),
    10: (4, 3, 2),
    11: (4, 3, 3),
    12: (4, 3, 3),
    13: (4, 3, 3, 1),
    14: (4, 3, 3, 1),
    15: (4, 3, 3, 2),
    16: (4, 3, 3, 2),
    17: (4, 3, 3, 3, 1),
    18: (4, 3, 3, 3, 1),
    19: (4, 3, 3, 3, 2),
    20: (4, 3, 3, 3, 2),
}

# Third casters: Eldritch Knight, Arcane Trickster (no slots before level 3)
THIRD_CASTER_SLOTS: dict[int, tuple[int, ...]] = {
    1: (),
    2: (),
    3: (2,),
    4: (3,),
    5: (3,),
    6: (3,),
    7: (4, 2),
    8: (4, 2),
    9: (4, 2),
    10: (4, 3),
    11: (4, 3),
    12: (4, 3),
    13: (4, 3, 2),
    14: (4, 3, 2),
    15: (4, 3, 2),
    16: (4, 3, 3),
    17: (4, 3, 3),
    18: (4, 3, 3),
    19: (4, 3, 3, 1),
    20: (4, 3, 3, 1),
}

# Warlock pact magic: level -> (slot count, slot level)
WARLOCK_PACT_SLOTS: dict[int, tuple[int, int]] = {
    1: (1, 1),
    2: (2, 1),
    3: (2, 2),
    4: (2, 2),
    5: (2, 3),
    6: (2, 3),
    7: (2, 4),
    8: (2, 4),
    9: (2, 5),
    10: (2, 5),
    11: (3, 5),
    12: (3, 5),
    13: (3, 5),
    14: (3, 5),
    15: (3, 5),
    16: (3, 5),
    17: (4, 5),
    18: (4, 5),
    19: (4, 5),
    20: (4, 5),
}

FULL_CASTERS = frozenset({"Bard", "Cleric", "Druid", "Sorcerer", "Wizard"})
HALF_CASTERS = frozenset({"Paladin", "Ranger"})
PACT_CASTERS = frozenset({"Warlock"})
THIRD_CASTER_SUBCLASSES = frozenset({"Eldritch Knight", "Arcane Trickster"})


def _pad_slots(slots: tuple[int, ...]) -> list[int]:
    return list(slots) + [0] * (SPELL_LEVELS - len(slots))


def get_spell_slots(class_name: str, level: int, subclass: str | None = None) -> list[int]:
    """Get the spell slot table for a class at a given level.

    Args:
        class_name: The character's class.
        level: The character's level.
        subclass: Subclass name, used for third casters.

    Returns:
        Nine entries, index 0 holding 1st-level slots. Non-casters get all
        zeros. Warlock pact slots are placed at their pact slot level.
    """
    if class_name in FULL_CASTERS:
        return _pad_slots(FULL_CASTER_SLOTS.get(level, ()))
    if class_name in HALF_CASTERS:
        return _pad_slots(HALF_CASTER_SLOTS.get(level, ()))
    if class_name in PACT_CASTERS:
        slots = [0] * SPELL_LEVELS
        pact = WARLOCK_PACT_SLOTS.get(level)
        if pact is not None:
            count, slot_level = pact
            slots[slot_level - 1] = count
        return slots
    if subclass in THIRD_CASTER_SUBCLASSES:
        return _pad_slots(THIRD_CASTER_SLOTS.get(level, ()))
    return [0] * SPELL_LEVELS


# =============================================================================
# Spellcasting Ability by Class
# =============================================================================

SPELLCASTING_ABILITY: dict[str, Ability] = {
    "Bard": Ability.CHA,
    "Cleric": Ability.WIS,
    "Druid": Ability.WIS,
    "Paladin": Ability.CHA,
    "Ranger": Ability.WIS,
    "Sorcerer": Ability.CHA,
    "Warlock": Ability.CHA,
    "Wizard": Ability.INT,
}

SUBCLASS_SPELLCASTING_ABILITY: dict[str, Ability] = {
    "Eldritch Knight": Ability.INT,
    "Arcane Trickster": Ability.INT,
}


def get_spellcasting_ability(class_name: str, subclass: str | None = None) -> Ability | None:
    """Get the spellcasting ability for a class, or None for non-casters."""
    if class_name in SPELLCASTING_ABILITY:
        return SPELLCASTING_ABILITY[class_name]
    if subclass is not None:
        return SUBCLASS_SPELLCASTING_ABILITY.get(subclass)
    return None


# =============================================================================
# Cantrips Known
# =============================================================================

CANTRIPS_KNOWN: dict[str, dict[int, int]] = {
    "Bard": {1: 2, 4: 3, 10: 4},
    "Cleric": {1: 3, 4: 4, 10: 5},
    "Druid": {1: 2, 4: 3, 10: 4},
    "Sorcerer": {1: 4, 4: 5, 10: 6},
    "Warlock": {1: 2, 4: 3, 10: 4},
    "Wizard": {1: 3, 4: 4, 10: 5},
}


def _step_lookup(table: dict[int, int], level: int) -> int:
    """Value of a step table at ``level`` (the highest key not above it)."""
    value = 0
    for threshold, amount in sorted(table.items()):
        if level >= threshold:
            value = amount
    return value


def get_cantrips_known(class_name: str, level: int) -> int:
    """Get number of cantrips known at a level."""
    return _step_lookup(CANTRIPS_KNOWN.get(class_name, {}), level)


# =============================================================================
# Ability Score Improvements and Subclasses
# =============================================================================

STANDARD_ASI_LEVELS = frozenset({4, 8, 12, 16, 19})
FIGHTER_ASI_LEVELS = frozenset({4, 6, 8, 12, 14, 16, 19})
ROGUE_ASI_LEVELS = frozenset({4, 8, 10, 12, 16, 19})


def is_asi_level(class_name: str, level: int) -> bool:
    """Check if this level grants an ability score improvement or feat."""
    if class_name == "Fighter":
        return level in FIGHTER_ASI_LEVELS
    if class_name == "Rogue":
        return level in ROGUE_ASI_LEVELS
    return level in STANDARD_ASI_LEVELS


# 2014 classes that pick a subclass before level 3; every 2024 class picks at 3
SUBCLASS_LEVELS_2014: dict[str, int] = {
    "Cleric": 1,
    "Sorcerer": 1,
    "Warlock": 1,
    "Druid": 2,
    "Wizard": 2,
}
DEFAULT_SUBCLASS_LEVEL = 3


def get_subclass_level(class_name: str, edition: Edition | str = Edition.PHB_2024) -> int:
    """Level at which a class chooses its subclass under the given edition."""
    if Edition(edition) == Edition.PHB_2014:
        return SUBCLASS_LEVELS_2014.get(class_name, DEFAULT_SUBCLASS_LEVEL)
    return DEFAULT_SUBCLASS_LEVEL


# =============================================================================
# Class Features by Level
# =============================================================================

# Only levels that unlock something are listed; subclass and ASI levels are
# surfaced as pending choices instead.
CLASS_FEATURES: dict[str, dict[int, tuple[str, ...]]] = {
    "Barbarian": {
        1: ("Rage", "Unarmored Defense"),
        2: ("Reckless Attack", "Danger Sense"),
        5: ("Extra Attack", "Fast Movement"),
        7: ("Feral Instinct",),
        9: ("Brutal Critical",),
        11: ("Relentless Rage",),
        15: ("Persistent Rage",),
        18: ("Indomitable Might",),
        20: ("Primal Champion",),
    },
    "Bard": {
        1: ("Spellcasting", "Bardic Inspiration"),
        2: ("Jack of All Trades", "Song of Rest"),
        3: ("Expertise",),
        5: ("Font of Inspiration",),
        6: ("Countercharm",),
        10: ("Magical Secrets",),
        20: ("Superior Inspiration",),
    },
    "Cleric": {
        1: ("Spellcasting",),
        2: ("Channel Divinity",),
        5: ("Destroy Undead",),
        10: ("Divine Intervention",),
    },
    "Druid": {
        1: ("Druidic", "Spellcasting"),
        2: ("Wild Shape",),
        18: ("Timeless Body", "Beast Spells"),
        20: ("Archdruid",),
    },
    "Fighter": {
        1: ("Fighting Style", "Second Wind"),
        2: ("Action Surge",),
        5: ("Extra Attack",),
        9: ("Indomitable",),
    },
    "Monk": {
        1: ("Unarmored Defense", "Martial Arts"),
        2: ("Ki", "Unarmored Movement"),
        3: ("Deflect Missiles",),
        4: ("Slow Fall",),
        5: ("Extra Attack", "Stunning Strike"),
        7: ("Evasion", "Stillness of Mind"),
        10: ("Purity of Body",),
        14: ("Diamond Soul",),
        18: ("Empty Body",),
        20: ("Perfect Self",),
    },
    "Paladin": {
        1: ("Divine Sense", "Lay on Hands"),
        2: ("Fighting Style", "Spellcasting", "Divine Smite"),
        3: ("Divine Health", "Channel Divinity"),
        5: ("Extra Attack",),
        6: ("Aura of Protection",),
        10: ("Aura of Courage",),
        11: ("Improved Divine Smite",),
        14: ("Cleansing Touch",),
    },
    "Ranger": {
        1: ("Favored Enemy", "Natural Explorer"),
        2: ("Fighting Style", "Spellcasting"),
        3: ("Primeval Awareness",),
        5: ("Extra Attack",),
        8: ("Land's Stride",),
        10: ("Hide in Plain Sight",),
        14: ("Vanish",),
        18: ("Feral Senses",),
        20: ("Foe Slayer",),
    },
    "Rogue": {
        1: ("Expertise", "Sneak Attack", "Thieves' Cant"),
        2: ("Cunning Action",),
        5: ("Uncanny Dodge",),
        7: ("Evasion",),
        11: ("Reliable Talent",),
        14: ("Blindsense",),
        15: ("Slippery Mind",),
        18: ("Elusive",),
        20: ("Stroke of Luck",),
    },
    "Sorcerer": {
        1: ("Spellcasting",),
        2: ("Font of Magic",),
        3: ("Metamagic",),
        20: ("Sorcerous Restoration",),
    },
    "Warlock": {
        1: ("Pact Magic",),
        2: ("Eldritch Invocations",),
        3: ("Pact Boon",),
        11: ("Mystic Arcanum",),
        20: ("Eldritch Master",),
    },
    "Wizard": {
        1: ("Spellcasting", "Arcane Recovery"),
        18: ("Spell Mastery",),
        20: ("Signature Spells",),
    },
}


def get_features_at_level(class_name: str, level: int) -> list[str]:
    """Get features unlocked exactly at a level."""
    return list(CLASS_FEATURES.get(class_name, {}).get(level, ()))


# =============================================================================
# Limited-Use Class Resources
# =============================================================================


class UsesScaling(StrEnum):
    """How a resource's maximum uses are derived."""

    TABLE = "table"
    LEVEL = "level"
    LEVEL_TIMES_FIVE = "level_x5"
    PROFICIENCY_BONUS = "proficiency_bonus"
    ABILITY_MODIFIER = "ability_modifier"


@dataclass(frozen=True)
class ResourceDefinition:
    """Static description of one limited-use class resource.

    Attributes:
        id: Slug used as the tracker id.
        name: Display name.
        description: What the resource does.
        unlock_level: First level at which the resource exists.
        scaling: How maximum uses are derived.
        uses_by_level: Step table of uses, for ``UsesScaling.TABLE``.
        ability: Ability whose modifier sets the uses, for
            ``UsesScaling.ABILITY_MODIFIER``.
        bonus: Flat amount added to scaled uses.
        recharge_by_level: Step table of recharge triggers; the entry with
            the highest level not above the character level applies.
    """

    id: str
    name: str
    description: str
    unlock_level: int
    scaling: UsesScaling
    recharge_by_level: dict[int, RechargeType]
    uses_by_level: dict[int, int] = field(default_factory=dict)
    ability: Ability | None = None
    bonus: int = 0

    def max_uses(self, level: int, ability_modifiers: dict[Ability, int]) -> int:
        """Maximum uses at a level.

        Ability-scaled resources never drop below one use.
        """
        if self.scaling is UsesScaling.TABLE:
            return _step_lookup(self.uses_by_level, level)
        if self.scaling is UsesScaling.LEVEL:
            return level + self.bonus
        if self.scaling is UsesScaling.LEVEL_TIMES_FIVE:
            return level * 5 + self.bonus
        if self.scaling is UsesScaling.PROFICIENCY_BONUS:
            return get_proficiency_bonus(level) + self.bonus
        modifier = ability_modifiers.get(self.ability, 0) if self.ability else 0
        return max(1, modifier + self.bonus)

    def recharge(self, level: int) -> RechargeType:
        recharge = RechargeType.NONE
        for threshold, trigger in sorted(self.recharge_by_level.items()):
            if level >= threshold:
                recharge = trigger
        return recharge


_SHORT = RechargeType.SHORT_REST
_LONG = RechargeType.LONG_REST

CLASS_RESOURCES: dict[str, tuple[ResourceDefinition, ...]] = {
    "Barbarian": (
        ResourceDefinition(
            id="rage",
            name="Rage",
            description="Enter a rage for bonus damage and resistance to physical damage.",
            unlock_level=1,
            scaling=UsesScaling.TABLE,
            uses_by_level={1: 2, 3: 3, 6: 4, 12: 5, 17: 6},
            recharge_by_level={1: _LONG},
        ),
    ),
    "Bard": (
        ResourceDefinition(
            id="bardic-inspiration",
            name="Bardic Inspiration",
            description="Grant an ally an inspiration die.",
            unlock_level=1,
            scaling=UsesScaling.ABILITY_MODIFIER,
            ability=Ability.CHA,
            recharge_by_level={1: _LONG, 5: _SHORT},
        ),
    ),
    "Cleric": (
        ResourceDefinition(
            id="channel-divinity",
            name="Channel Divinity",
            description="Channel divine energy for turn undead or a domain effect.",
            unlock_level=2,
            scaling=UsesScaling.TABLE,
            uses_by_level={2: 1, 6: 2, 18: 3},
            recharge_by_level={2: _SHORT},
        ),
    ),
    "Druid": (
        ResourceDefinition(
            id="wild-shape",
            name="Wild Shape",
            description="Transform into a beast you have seen before.",
            unlock_level=2,
            scaling=UsesScaling.TABLE,
            uses_by_level={2: 2},
            recharge_by_level={2: _SHORT},
        ),
    ),
    "Fighter": (
        ResourceDefinition(
            id="second-wind",
            name="Second Wind",
            description="Regain 1d10 + fighter level hit points as a bonus action.",
            unlock_level=1,
            scaling=UsesScaling.TABLE,
            uses_by_level={1: 1},
            recharge_by_level={1: _SHORT},
        ),
        ResourceDefinition(
            id="action-surge",
            name="Action Surge",
            description="Take one additional action on your turn.",
            unlock_level=2,
            scaling=UsesScaling.TABLE,
            uses_by_level={2: 1, 17: 2},
            recharge_by_level={2: _SHORT},
        ),
        ResourceDefinition(
            id="indomitable",
            name="Indomitable",
            description="Reroll a failed saving throw.",
            unlock_level=9,
            scaling=UsesScaling.TABLE,
            uses_by_level={9: 1, 13: 2, 17: 3},
            recharge_by_level={9: _LONG},
        ),
    ),
    "Monk": (
        ResourceDefinition(
            id="ki",
            name="Ki Points",
            description="Fuel Flurry of Blows, Patient Defense and Step of the Wind.",
            unlock_level=2,
            scaling=UsesScaling.LEVEL,
            recharge_by_level={2: _SHORT},
        ),
    ),
    "Paladin": (
        ResourceDefinition(
            id="lay-on-hands",
            name="Lay on Hands",
            description="Pool of healing equal to five times paladin level.",
            unlock_level=1,
            scaling=UsesScaling.LEVEL_TIMES_FIVE,
            recharge_by_level={1: _LONG},
        ),
        ResourceDefinition(
            id="divine-sense",
            name="Divine Sense",
            description="Detect celestials, fiends and undead nearby.",
            unlock_level=1,
            scaling=UsesScaling.ABILITY_MODIFIER,
            ability=Ability.CHA,
            bonus=1,
            recharge_by_level={1: _LONG},
        ),
        ResourceDefinition(
            id="channel-divinity",
            name="Channel Divinity",
            description="Channel divine energy for an oath effect.",
            unlock_level=3,
            scaling=UsesScaling.TABLE,
            uses_by_level={3: 1},
            recharge_by_level={3: _SHORT},
        ),
    ),
    "Rogue": (
        ResourceDefinition(
            id="stroke-of-luck",
            name="Stroke of Luck",
            description="Turn a miss into a hit, or treat a failed check as a 20.",
            unlock_level=20,
            scaling=UsesScaling.TABLE,
            uses_by_level={20: 1},
            recharge_by_level={20: _SHORT},
        ),
    ),
    "Sorcerer": (
        ResourceDefinition(
            id="sorcery-points",
            name="Sorcery Points",
            description="Create spell slots or fuel metamagic.",
            unlock_level=2,
            scaling=UsesScaling.LEVEL,
            recharge_by_level={2: _LONG},
        ),
    ),
    "Wizard": (
        ResourceDefinition(
            id="arcane-recovery",
            name="Arcane Recovery",
            description="Recover expended spell slots during a short rest.",
            unlock_level=1,
            scaling=UsesScaling.TABLE,
            uses_by_level={1: 1},
            recharge_by_level={1: _LONG},
        ),
    ),
}


def get_class_resources(class_name: str, level: int) -> list[ResourceDefinition]:
    """Resources a class has unlocked at or below ``level``."""
    return [
        definition
        for definition in CLASS_RESOURCES.get(class_name, ())
        if definition.unlock_level <= level
    ]


# =============================================================================
# Level Up Plan
# =============================================================================


@dataclass(frozen=True)
class LevelUpPlan:
    """Everything a class gains at one level, independent of any character.

    Attributes:
        class_name: The class being leveled.
        level: The level being gained.
        hit_die: Sides on the class hit die.
        proficiency_bonus: Proficiency bonus at the new level.
        features: Features unlocked at the new level.
        spell_slots: Slot table at the new level.
        cantrips_gained: Additional cantrips known at the new level.
        grants_asi: Whether the level grants an ability score improvement.
        grants_subclass: Whether the level is the subclass selection level.
    """

    class_name: str
    level: int
    hit_die: int
    proficiency_bonus: int
    features: tuple[str, ...]
    spell_slots: tuple[int, ...]
    cantrips_gained: int
    grants_asi: bool
    grants_subclass: bool


def get_level_up_plan(
    class_name: str,
    new_level: int,
    *,
    subclass: str | None = None,
    edition: Edition | str = Edition.PHB_2024,
) -> LevelUpPlan:
    """Get all the information needed to apply a level up.

    Args:
        class_name: The class being leveled.
        new_level: The level being gained.
        subclass: The subclass, if already chosen.
        edition: Rules edition, which moves some subclass levels.

    Returns:
        The LevelUpPlan for ``new_level``.
    """
    cantrips_gained = get_cantrips_known(class_name, new_level) - get_cantrips_known(
        class_name, new_level - 1
    )
    return LevelUpPlan(
        class_name=class_name,
        level=new_level,
        hit_die=get_hit_die(class_name),
        proficiency_bonus=get_proficiency_bonus(new_level),
        features=tuple(get_features_at_level(class_name, new_level)),
        spell_slots=tuple(get_spell_slots(class_name, new_level, subclass)),
        cantrips_gained=max(0, cantrips_gained),
        grants_asi=is_asi_level(class_name, new_level),
        grants_subclass=new_level == get_subclass_level(class_name, edition),
    )


__all__ = [
    "PROFICIENCY_BONUS_BY_LEVEL",
    "get_proficiency_bonus",
    "CLASS_HIT_DIE",
    "get_hit_die",
    "average_hit_die_roll",
    "calculate_hp_increase",
    "CLASS_SAVING_THROWS",
    "get_saving_throw_proficiencies",
    "get_spell_slots",
    "get_spellcasting_ability",
    "get_cantrips_known",
    "is_asi_level",
    "get_subclass_level",
    "CLASS_FEATURES",
    "get_features_at_level",
    "UsesScaling",
    "ResourceDefinition",
    "CLASS_RESOURCES",
    "get_class_resources",
    "LevelUpPlan",
    "get_level_up_plan",
]
