"""Derived statistics calculator.

Combines ability scores, proficiency bonus and proficiency flags into the
secondary numbers shown on a character sheet: ability modifiers, saving
throws, skills, initiative and passive scores. Every function here is pure
and cheap enough to call on each render.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping

from pydantic import BaseModel, ConfigDict, computed_field

from character_forge.core.constants import PASSIVE_CHECK_BASE
from character_forge.engine.armor import armor_class_for
from character_forge.models.character import AbilityScores, Character, SkillEntry, ability_modifier
from character_forge.models.enums import Ability, Skill
from character_forge.models.equipment import EquipmentCatalog


class DerivedStats(BaseModel):
    """Secondary statistics computed from a character's raw inputs.

    Attributes:
        proficiency_bonus: Proficiency bonus the values were computed with.
        ability_modifiers: Modifier per ability.
        saving_throws: Saving throw bonus per ability.
        skills: Skill bonus per skill.
        initiative: Initiative bonus.
    """

    model_config = ConfigDict(frozen=True)

    proficiency_bonus: int
    ability_modifiers: dict[Ability, int]
    saving_throws: dict[Ability, int]
    skills: dict[Skill, int]
    initiative: int

    def passive(self, skill: Skill) -> int:
        """Passive score for a skill (10 + skill bonus)."""
        return PASSIVE_CHECK_BASE + self.skills[skill]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def passive_perception(self) -> int:
        return self.passive(Skill.PERCEPTION)


def saving_throw_bonus(modifier: int, proficiency_bonus: int, proficient: bool) -> int:
    """Saving throw bonus: modifier, plus proficiency when proficient."""
    return modifier + (proficiency_bonus if proficient else 0)


def skill_bonus(modifier: int, proficiency_bonus: int, proficient: bool, expertise: bool) -> int:
    """Skill bonus with proficiency applied once, or twice for expertise.

    Expertise implies proficiency, so ``proficient`` is not required when
    ``expertise`` is set.
    """
    if expertise:
        return modifier + 2 * proficiency_bonus
    if proficient:
        return modifier + proficiency_bonus
    return modifier


def calculate_derived_stats(
    ability_scores: Mapping[Ability, int] | AbilityScores,
    proficiency_bonus: int,
    skill_proficiencies: Mapping[Skill, SkillEntry],
    save_proficiencies: Collection[Ability],
) -> DerivedStats:
    """Compute every derived statistic from raw inputs.

    Scores outside 1-30 are not rejected; the modifier formula is applied
    as is.

    Args:
        ability_scores: Raw score per ability.
        proficiency_bonus: Current proficiency bonus.
        skill_proficiencies: Proficiency and expertise flags per skill.
            Missing skills count as untrained.
        save_proficiencies: Abilities with saving throw proficiency.

    Returns:
        The computed DerivedStats.
    """
    scores = (
        ability_scores.as_dict() if isinstance(ability_scores, AbilityScores) else ability_scores
    )
    modifiers = {ability: ability_modifier(scores[ability]) for ability in Ability}
    saves = {
        ability: saving_throw_bonus(
            modifiers[ability], proficiency_bonus, ability in save_proficiencies
        )
        for ability in Ability
    }
    skills: dict[Skill, int] = {}
    for skill in Skill:
        flags = skill_proficiencies.get(skill)
        skills[skill] = skill_bonus(
            modifiers[skill.ability],
            proficiency_bonus,
            proficient=bool(flags and flags.proficient),
            expertise=bool(flags and flags.expertise),
        )
    return DerivedStats(
        proficiency_bonus=proficiency_bonus,
        ability_modifiers=modifiers,
        saving_throws=saves,
        skills=skills,
        initiative=modifiers[Ability.DEX],
    )


def compute_derived_stats(character: Character) -> DerivedStats:
    """Compute derived statistics for a character."""
    return calculate_derived_stats(
        character.abilities,
        character.proficiency_bonus,
        character.skills,
        character.saving_throw_proficiencies,
    )


def apply_derived_stats(character: Character, catalog: EquipmentCatalog | None = None) -> Character:
    """Return a copy of the character with its stored derived numbers refreshed.

    Refreshes skill values, initiative and armor class.
    """
    derived = compute_derived_stats(character)
    updated = character.model_copy(deep=True)
    updated.skills = {
        skill: entry.model_copy(update={"value": derived.skills[skill]})
        for skill, entry in character.skills.items()
    }
    updated.initiative = derived.initiative
    updated.armor_class = armor_class_for(updated, catalog)
    return updated


__all__ = [
    "DerivedStats",
    "saving_throw_bonus",
    "skill_bonus",
    "calculate_derived_stats",
    "compute_derived_stats",
    "apply_derived_stats",
]
