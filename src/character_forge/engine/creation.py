"""Character creation.

A new character is always built at level 1 and then walked up the leveling
state machine one step at a time, so a level 5 character carries the same
level history and pending choices as one leveled by hand.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from character_forge.core.config import get_settings
from character_forge.core.constants import MAX_LEVEL, MIN_LEVEL
from character_forge.core.exceptions import ValidationError
from character_forge.core.logging import get_logger
from character_forge.engine.leveling import level_up
from character_forge.engine.resources import refresh_resources
from character_forge.engine.stats import apply_derived_stats
from character_forge.models.character import (
    AbilityScores,
    Character,
    HitDice,
    PendingChoice,
    SkillEntry,
    Spellcasting,
)
from character_forge.models.enums import Ability, ChoiceType, Edition, Skill
from character_forge.models.progression import (
    get_cantrips_known,
    get_features_at_level,
    get_hit_die,
    get_proficiency_bonus,
    get_saving_throw_proficiencies,
    get_spell_slots,
    get_spellcasting_ability,
    get_subclass_level,
)


logger = get_logger(__name__)


def _to_scores(abilities: AbilityScores | Mapping[Ability, int] | None) -> AbilityScores:
    if abilities is None:
        return AbilityScores()
    if isinstance(abilities, AbilityScores):
        return abilities.model_copy()
    return AbilityScores(**{Ability(ability).value: score for ability, score in abilities.items()})


def create_character(
    name: str,
    class_name: str,
    abilities: AbilityScores | Mapping[Ability, int] | None = None,
    *,
    species: str = "",
    background: str = "",
    alignment: str = "",
    subclass: str | None = None,
    skill_proficiencies: Iterable[Skill] = (),
    level: int = MIN_LEVEL,
    edition: Edition | str | None = None,
    hp_rolls: Sequence[int] | None = None,
) -> Character:
    """Build a new character.

    Args:
        name: Character name.
        class_name: Class, e.g. ``"Fighter"``.
        abilities: Ability scores; all 10 when omitted.
        species: Species name.
        background: Background name.
        alignment: Alignment.
        subclass: Subclass, if already decided.
        skill_proficiencies: Skills the character is proficient in.
        level: Target level (1-20).
        edition: Rules edition. Defaults to the configured default edition.
        hp_rolls: Raw hit die rolls for levels 2 and up, in order. Levels
            without a roll take the fixed average.

    Returns:
        The new character at the requested level.

    Raises:
        ValidationError: If the level is out of range.
    """
    if not MIN_LEVEL <= level <= MAX_LEVEL:
        raise ValidationError(
            f"Level must be between {MIN_LEVEL} and {MAX_LEVEL}",
            field_name="level",
            invalid_value=level,
        )
    edition = Edition(edition or get_settings().rules.default_edition)
    scores = _to_scores(abilities)

    hit_die = get_hit_die(class_name)
    max_hp = max(1, hit_die + scores.modifier(Ability.CON))

    spellcasting = None
    ability = get_spellcasting_ability(class_name, subclass)
    if ability is not None:
        spellcasting = Spellcasting(ability=ability, spell_slots=get_spell_slots(class_name, MIN_LEVEL, subclass))

    pending: list[PendingChoice] = []
    if subclass is None and get_subclass_level(class_name, edition) == MIN_LEVEL:
        pending.append(
            PendingChoice(
                choice_type=ChoiceType.SUBCLASS,
                level=MIN_LEVEL,
                description=f"Choose a {class_name} subclass",
            )
        )
    cantrips = get_cantrips_known(class_name, MIN_LEVEL)
    if cantrips and spellcasting is not None:
        pending.append(
            PendingChoice(
                choice_type=ChoiceType.CANTRIP,
                level=MIN_LEVEL,
                count=cantrips,
                description=f"Learn {cantrips} cantrip(s)",
            )
        )

    proficient = set(skill_proficiencies)
    character = Character(
        name=name,
        species=species,
        class_name=class_name,
        subclass=subclass,
        background=background,
        alignment=alignment,
        edition=edition,
        abilities=scores,
        proficiency_bonus=get_proficiency_bonus(MIN_LEVEL),
        hit_points=max_hp,
        max_hit_points=max_hp,
        hit_dice=HitDice(current=1, max=1, die_size=hit_die),
        skills={skill: SkillEntry(proficient=skill in proficient) for skill in Skill},
        saving_throw_proficiencies=get_saving_throw_proficiencies(class_name),
        spellcasting=spellcasting,
        pending_choices=pending,
        class_features=get_features_at_level(class_name, MIN_LEVEL),
    )
    character.resources = refresh_resources(character)
    character = apply_derived_stats(character)

    rolls = list(hp_rolls or [])
    for index in range(level - MIN_LEVEL):
        hp_roll = rolls[index] if index < len(rolls) else None
        character = level_up(character, hp_roll=hp_roll).character

    logger.info(
        "Character created",
        character_id=character.id,
        name=name,
        class_name=class_name,
        level=character.level,
        edition=str(edition),
    )
    return character


__all__ = ["create_character"]
