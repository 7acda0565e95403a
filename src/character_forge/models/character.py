"""Pydantic V2 schemas for the persisted character record.

A Character is replaced as a whole document on every mutation: engine
functions take a character, work on a deep copy, and hand the copy back
inside a ``CharacterUpdate``. Nothing in this module mutates shared state.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from character_forge.core.constants import (
    DEFAULT_ABILITY_SCORE,
    DEFAULT_SPEED,
    MAX_ABILITY_SCORE,
    MAX_EQUIPPED_WEAPONS,
    MAX_LEVEL,
    MIN_ABILITY_SCORE,
    MIN_LEVEL,
    SPELL_LEVELS,
)
from character_forge.models.enums import Ability, ChoiceType, Edition, RechargeType, Skill


AbilityScore = Annotated[
    int, Field(ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE, description="Ability score")
]
Level = Annotated[int, Field(ge=MIN_LEVEL, le=MAX_LEVEL, description="Character level")]
SlotTable = Annotated[list[int], Field(min_length=SPELL_LEVELS, max_length=SPELL_LEVELS)]


def ability_modifier(score: int) -> int:
    """Calculate the modifier for an ability score.

    Out-of-range scores are not rejected; the formula is applied as is.

    Args:
        score: The raw ability score.

    Returns:
        ``floor((score - 10) / 2)``.
    """
    return (score - 10) // 2


def _empty_slots() -> list[int]:
    return [0] * SPELL_LEVELS


def _default_skills() -> dict[Skill, SkillEntry]:
    return {skill: SkillEntry() for skill in Skill}


def _utcnow() -> datetime:
    return datetime.now()


# =============================================================================
# Character Building Blocks
# =============================================================================


class AbilityScores(BaseModel):
    """The six ability scores of a character.

    Attributes:
        strength: Strength score (1-30).
        dexterity: Dexterity score (1-30).
        constitution: Constitution score (1-30).
        intelligence: Intelligence score (1-30).
        wisdom: Wisdom score (1-30).
        charisma: Charisma score (1-30).
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    strength: AbilityScore = DEFAULT_ABILITY_SCORE
    dexterity: AbilityScore = DEFAULT_ABILITY_SCORE
    constitution: AbilityScore = DEFAULT_ABILITY_SCORE
    intelligence: AbilityScore = DEFAULT_ABILITY_SCORE
    wisdom: AbilityScore = DEFAULT_ABILITY_SCORE
    charisma: AbilityScore = DEFAULT_ABILITY_SCORE

    def score(self, ability: Ability) -> int:
        """Get the raw score for an ability."""
        return getattr(self, Ability(ability).value)

    def modifier(self, ability: Ability) -> int:
        """Get the modifier for an ability."""
        return ability_modifier(self.score(ability))

    def as_dict(self) -> dict[Ability, int]:
        """Map every ability to its raw score."""
        return {ability: self.score(ability) for ability in Ability}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def modifiers(self) -> dict[str, int]:
        """Modifiers for all six abilities, keyed by ability name."""
        return {ability.value: self.modifier(ability) for ability in Ability}


class HitDice(BaseModel):
    """Pool of hit dice spent on short rests.

    Attributes:
        current: Hit dice remaining.
        max: Hit dice available when fully rested (equal to level).
        die_size: Sides on each hit die.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    current: Annotated[int, Field(ge=0)] = 1
    max: Annotated[int, Field(ge=1, le=MAX_LEVEL)] = 1
    die_size: Annotated[int, Field(ge=4, le=12)] = 8

    @model_validator(mode="after")
    def check_current_within_max(self) -> "HitDice":
        if self.current > self.max:
            raise ValueError(f"current hit dice ({self.current}) exceed max ({self.max})")
        return self


class SkillEntry(BaseModel):
    """One row of the skill table.

    Attributes:
        proficient: Whether the proficiency bonus applies.
        expertise: Whether the proficiency bonus applies twice.
        value: Last computed total bonus for the skill.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    proficient: bool = False
    expertise: bool = False
    value: int = 0


class Spellcasting(BaseModel):
    """Spellcasting block for casters.

    Slot tables are nine entries long, index 0 holding 1st-level slots.

    Attributes:
        ability: Spellcasting ability.
        cantrips_known: Cantrips the character knows.
        spells_known: Leveled spells known or prepared.
        spell_slots: Maximum slots per spell level.
        used_spell_slots: Slots expended per spell level.
        cantrip_choices_by_level: Cantrips learned at each character level,
            used to reverse a choice when that level is abandoned.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    ability: Ability
    cantrips_known: list[str] = Field(default_factory=list)
    spells_known: list[str] = Field(default_factory=list)
    spell_slots: SlotTable = Field(default_factory=_empty_slots)
    used_spell_slots: SlotTable = Field(default_factory=_empty_slots)
    cantrip_choices_by_level: dict[int, list[str]] = Field(default_factory=dict)

    def available_slots(self, spell_level: int) -> int:
        """Slots of the given spell level (1-9) still unspent."""
        index = spell_level - 1
        return max(0, self.spell_slots[index] - self.used_spell_slots[index])


class InventoryEntry(BaseModel):
    """Quantity and equipped flag for one catalog item."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    quantity: Annotated[int, Field(ge=0)] = 1
    equipped: bool = False


class Currency(BaseModel):
    """Coin purse."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    cp: Annotated[int, Field(ge=0)] = 0
    sp: Annotated[int, Field(ge=0)] = 0
    ep: Annotated[int, Field(ge=0)] = 0
    gp: Annotated[int, Field(ge=0)] = 0
    pp: Annotated[int, Field(ge=0)] = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_in_copper(self) -> int:
        return self.cp + self.sp * 10 + self.ep * 50 + self.gp * 100 + self.pp * 1000


class ResourceTracker(BaseModel):
    """A limited-use ability bound to a character.

    ``max_uses`` is recomputed from class and level whenever the character is
    loaded or changes level; ``current_uses`` is persisted and always kept
    within ``[0, max_uses]``.

    Attributes:
        id: Stable slug identifying the resource (e.g. ``"rage"``).
        name: Display name.
        description: What the resource does.
        max_uses: Uses available after a full recharge.
        current_uses: Uses remaining.
        recharge_type: Rest that restores the resource.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    max_uses: Annotated[int, Field(ge=0)]
    current_uses: Annotated[int, Field(ge=0)]
    recharge_type: RechargeType = RechargeType.LONG_REST

    @model_validator(mode="before")
    @classmethod
    def clamp_current_uses(cls, data: Any) -> Any:
        """Clamp persisted uses into ``[0, max_uses]`` before validation."""
        if not isinstance(data, dict):
            return data
        max_uses = data.get("max_uses")
        current = data.get("current_uses")
        if isinstance(max_uses, int) and isinstance(current, int):
            data = {**data, "current_uses": min(max(0, current), max(0, max_uses))}
        return data

    @property
    def is_exhausted(self) -> bool:
        return self.current_uses == 0


class PendingChoice(BaseModel):
    """A follow-up decision the player owes after a level change.

    Attributes:
        choice_type: Kind of decision.
        level: Character level that granted the decision.
        count: How many picks the decision covers (e.g. two cantrips).
        description: Human-readable prompt.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    choice_type: ChoiceType
    level: Level
    count: Annotated[int, Field(ge=1)] = 1
    description: str = ""


class LevelUpRecord(BaseModel):
    """Audit entry for one level gained.

    The stored HP delta and feature list let a level down reverse exactly
    what the corresponding level up added, even when the gain was rolled.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    level: Level
    hp_gained: Annotated[int, Field(ge=1)]
    hp_rolled: int | None = None
    proficiency_bonus: int
    features_gained: tuple[str, ...] = ()
    timestamp: datetime = Field(default_factory=_utcnow)


# =============================================================================
# Character
# =============================================================================


class Character(BaseModel):
    """A player character as persisted in the character store.

    Invariants: ``1 <= level <= 20`` and ``hit_dice.current <= hit_dice.max``
    are validated. ``0 <= hit_points <= max_hit_points`` is expected but not
    enforced on every path.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    # Identity
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(min_length=1, max_length=100)
    species: str = ""
    class_name: str = Field(min_length=1)
    subclass: str | None = None
    background: str = ""
    alignment: str = ""
    edition: Edition = Edition.PHB_2024
    level: Level = 1

    # Abilities and proficiency
    abilities: AbilityScores = Field(default_factory=AbilityScores)
    proficiency_bonus: Annotated[int, Field(ge=2, le=6)] = 2

    # Combat block
    hit_points: Annotated[int, Field(ge=0)] = 1
    max_hit_points: Annotated[int, Field(ge=1)] = 1
    temporary_hit_points: Annotated[int, Field(ge=0)] = 0
    hit_dice: HitDice = Field(default_factory=HitDice)
    armor_class: int = 10
    initiative: int = 0
    speed: Annotated[int, Field(ge=0)] = DEFAULT_SPEED

    # Skills and saves
    skills: dict[Skill, SkillEntry] = Field(default_factory=_default_skills)
    saving_throw_proficiencies: list[Ability] = Field(default_factory=list)

    spellcasting: Spellcasting | None = None

    # Inventory block
    equipped_armor: str | None = None
    equipped_weapons: list[str] = Field(default_factory=list, max_length=MAX_EQUIPPED_WEAPONS)
    inventory: dict[str, InventoryEntry] = Field(default_factory=dict)
    currency: Currency = Field(default_factory=Currency)

    resources: list[ResourceTracker] = Field(default_factory=list)

    # Progression bookkeeping
    pending_choices: list[PendingChoice] = Field(default_factory=list)
    level_history: list[LevelUpRecord] = Field(default_factory=list)
    class_features: list[str] = Field(default_factory=list)
    feats: list[str] = Field(default_factory=list)
    feat_choices_by_level: dict[int, list[str]] = Field(default_factory=dict)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("skills", mode="after")
    @classmethod
    def fill_missing_skills(cls, value: dict[Skill, SkillEntry]) -> dict[Skill, SkillEntry]:
        """Ensure all 18 skills are present in the table."""
        return {skill: value.get(skill, SkillEntry()) for skill in Skill}

    @field_validator("saving_throw_proficiencies", mode="after")
    @classmethod
    def dedupe_saves(cls, value: list[Ability]) -> list[Ability]:
        return [ability for ability in Ability if ability in value]

    def ability_modifier(self, ability: Ability) -> int:
        """Get the modifier for one of the character's abilities."""
        return self.abilities.modifier(ability)

    def get_resource(self, resource_id: str) -> ResourceTracker | None:
        """Find a resource tracker by id."""
        for tracker in self.resources:
            if tracker.id == resource_id:
                return tracker
        return None

    def has_shield_equipped(self, shield_slugs: frozenset[str] | set[str]) -> bool:
        """Check whether any equipped item is one of the given shield slugs."""
        return any(slug in shield_slugs for slug in self.equipped_weapons)

    @property
    def is_spellcaster(self) -> bool:
        return self.spellcasting is not None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_max_level(self) -> bool:
        """Whether the character can no longer level up."""
        return self.level >= MAX_LEVEL

    def touch(self) -> None:
        """Stamp the record as modified now."""
        self.updated_at = _utcnow()


__all__ = [
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
]
