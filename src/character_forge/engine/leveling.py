"""Leveling state machine.

Levels move one step at a time. A level up applies, in order: proficiency
bonus, hit points and hit dice, spell slots, follow-up choices (ability
score improvement, subclass, cantrips), class features and resource
refresh. A level down mirrors it, reversing the hit point gain stored in
the level history and any choice made at the abandoned level.

Both directions return a ``CharacterUpdate``; stepping past level 1 or 20
is declined rather than raised.
"""

from __future__ import annotations

from collections.abc import Mapping

from character_forge.core.constants import (
    ASI_POINTS,
    MAX_LEVEL,
    MIN_LEVEL,
    PC_ABILITY_SCORE_CAP,
    SPELL_LEVELS,
)
from character_forge.core.exceptions import ValidationError
from character_forge.core.logging import get_logger
from character_forge.engine.resources import refresh_resources
from character_forge.engine.stats import apply_derived_stats
from character_forge.models.character import (
    Character,
    HitDice,
    LevelUpRecord,
    PendingChoice,
    Spellcasting,
)
from character_forge.models.enums import Ability, ChoiceType
from character_forge.models.progression import (
    LevelUpPlan,
    calculate_hp_increase,
    get_features_at_level,
    get_hit_die,
    get_level_up_plan,
    get_proficiency_bonus,
    get_spell_slots,
    get_spellcasting_ability,
    get_subclass_level,
)
from character_forge.models.results import CharacterUpdate


logger = get_logger(__name__)


# =============================================================================
# Helpers
# =============================================================================


def _choices_for_plan(plan: LevelUpPlan, character: Character) -> list[PendingChoice]:
    """Follow-up decisions owed for a level gained."""
    choices: list[PendingChoice] = []
    if plan.grants_asi:
        choices.append(
            PendingChoice(
                choice_type=ChoiceType.ABILITY_SCORE_IMPROVEMENT,
                level=plan.level,
                description=f"Increase ability scores by a total of {ASI_POINTS}",
            )
        )
    if plan.grants_subclass and not character.subclass:
        choices.append(
            PendingChoice(
                choice_type=ChoiceType.SUBCLASS,
                level=plan.level,
                description=f"Choose a {character.class_name} subclass",
            )
        )
    if plan.cantrips_gained > 0 and character.spellcasting is not None:
        choices.append(
            PendingChoice(
                choice_type=ChoiceType.CANTRIP,
                level=plan.level,
                count=plan.cantrips_gained,
                description=f"Learn {plan.cantrips_gained} new cantrip(s)",
            )
        )
    return choices


def _first_pending(character: Character, choice_type: ChoiceType) -> PendingChoice | None:
    for choice in character.pending_choices:
        if choice.choice_type == choice_type:
            return choice
    return None


def _without_choice(choices: list[PendingChoice], target: PendingChoice) -> list[PendingChoice]:
    """Drop the first occurrence of ``target``."""
    remaining = list(choices)
    remaining.remove(target)
    return remaining


def _finalize(character: Character) -> Character:
    """Refresh resources and derived numbers, then stamp the record."""
    character.resources = refresh_resources(character)
    updated = apply_derived_stats(character)
    updated.touch()
    return updated


# =============================================================================
# Level Transitions
# =============================================================================


def level_up_preview(character: Character) -> LevelUpPlan | None:
    """What the next level would grant, or None at level 20."""
    if character.level >= MAX_LEVEL:
        return None
    return get_level_up_plan(
        character.class_name,
        character.level + 1,
        subclass=character.subclass,
        edition=character.edition,
    )


def level_up(character: Character, *, hp_roll: int | None = None) -> CharacterUpdate:
    """Advance a character by one level.

    Args:
        character: The character to level up.
        hp_roll: Raw hit die roll for the hit point gain. When omitted the
            fixed average is used.

    Returns:
        CharacterUpdate with the leveled character and any new pending
        choices. Declined at level 20.

    Raises:
        ValidationError: If ``hp_roll`` cannot come from the class hit die.
    """
    plan = level_up_preview(character)
    if plan is None:
        return CharacterUpdate.declined(character, f"{character.name} is already at level {MAX_LEVEL}")

    if hp_roll is not None and not 1 <= hp_roll <= plan.hit_die:
        raise ValidationError(
            f"Hit die roll must be between 1 and {plan.hit_die}",
            field_name="hp_roll",
            invalid_value=hp_roll,
        )

    hp_gained = calculate_hp_increase(plan.hit_die, character.ability_modifier(Ability.CON), hp_roll)

    updated = character.model_copy(deep=True)
    updated.level = plan.level
    updated.proficiency_bonus = plan.proficiency_bonus

    updated.max_hit_points = character.max_hit_points + hp_gained
    updated.hit_points = updated.max_hit_points
    dice_max = min(character.hit_dice.max + 1, MAX_LEVEL)
    updated.hit_dice = HitDice(
        current=min(character.hit_dice.current + 1, dice_max),
        max=dice_max,
        die_size=plan.hit_die,
    )

    if updated.spellcasting is None and any(plan.spell_slots):
        ability = get_spellcasting_ability(character.class_name, character.subclass)
        if ability is not None:
            updated.spellcasting = Spellcasting(ability=ability)
    if updated.spellcasting is not None:
        updated.spellcasting.used_spell_slots = [0] * SPELL_LEVELS
        updated.spellcasting.spell_slots = list(plan.spell_slots)

    new_choices = _choices_for_plan(plan, updated)
    updated.pending_choices = [*character.pending_choices, *new_choices]
    features_gained = tuple(feature for feature in plan.features if feature not in character.class_features)
    updated.class_features = [*character.class_features, *features_gained]
    updated.level_history = [
        *character.level_history,
        LevelUpRecord(
            level=plan.level,
            hp_gained=hp_gained,
            hp_rolled=hp_roll,
            proficiency_bonus=plan.proficiency_bonus,
            features_gained=features_gained,
        ),
    ]
    updated = _finalize(updated)

    logger.info(
        "Character leveled up",
        character_id=character.id,
        level=plan.level,
        hp_gained=hp_gained,
        pending_choices=[str(choice.choice_type) for choice in new_choices],
    )
    return CharacterUpdate(
        character=updated,
        reason=f"{character.name} reached level {plan.level} (+{hp_gained} HP)",
        pending_choices=new_choices,
    )


def level_down(character: Character) -> CharacterUpdate:
    """Remove one level, reversing what the matching level up granted.

    Args:
        character: The character to level down.

    Returns:
        CharacterUpdate with the reduced character. Declined at level 1.
    """
    if character.level <= MIN_LEVEL:
        return CharacterUpdate.declined(character, f"{character.name} is already at level {MIN_LEVEL}")

    abandoned = character.level
    new_level = abandoned - 1

    record_index = next(
        (i for i in range(len(character.level_history) - 1, -1, -1)
         if character.level_history[i].level == abandoned),
        None,
    )
    if record_index is not None:
        record = character.level_history[record_index]
        hp_lost = record.hp_gained
        features_lost: tuple[str, ...] = record.features_gained
    else:
        hp_lost = calculate_hp_increase(
            get_hit_die(character.class_name), character.ability_modifier(Ability.CON)
        )
        features_lost = tuple(get_features_at_level(character.class_name, abandoned))

    updated = character.model_copy(deep=True)
    updated.level = new_level
    updated.proficiency_bonus = get_proficiency_bonus(new_level)

    updated.max_hit_points = max(1, character.max_hit_points - hp_lost)
    updated.hit_points = updated.max_hit_points
    dice_max = max(1, character.hit_dice.max - 1)
    updated.hit_dice = HitDice(
        current=min(max(0, character.hit_dice.current - 1), dice_max),
        max=dice_max,
        die_size=character.hit_dice.die_size,
    )

    updated.class_features = [feature for feature in character.class_features if feature not in features_lost]

    feat_choices = dict(updated.feat_choices_by_level)
    removed_feats = feat_choices.pop(abandoned, [])
    if removed_feats:
        updated.feat_choices_by_level = feat_choices
        updated.feats = [feat for feat in character.feats if feat not in removed_feats]

    if updated.subclass and new_level < get_subclass_level(character.class_name, character.edition):
        updated.subclass = None

    removed_cantrips: list[str] = []
    if updated.spellcasting is not None:
        if get_spellcasting_ability(character.class_name, updated.subclass) is None:
            updated.spellcasting = None
        else:
            spellcasting = updated.spellcasting
            slots = get_spell_slots(character.class_name, new_level, updated.subclass)
            spellcasting.used_spell_slots = [
                min(used, cap) for used, cap in zip(spellcasting.used_spell_slots, slots)
            ]
            spellcasting.spell_slots = slots
            by_level = dict(spellcasting.cantrip_choices_by_level)
            removed_cantrips = by_level.pop(abandoned, [])
            spellcasting.cantrip_choices_by_level = by_level
            spellcasting.cantrips_known = [
                cantrip for cantrip in spellcasting.cantrips_known if cantrip not in removed_cantrips
            ]

    updated.pending_choices = [choice for choice in character.pending_choices if choice.level <= new_level]
    history = list(character.level_history)
    if record_index is not None:
        del history[record_index]
    updated.level_history = history
    updated = _finalize(updated)

    logger.info(
        "Character leveled down",
        character_id=character.id,
        level=new_level,
        hp_lost=hp_lost,
        cantrips_removed=removed_cantrips,
        feats_removed=removed_feats,
    )
    return CharacterUpdate(
        character=updated,
        reason=f"{character.name} returned to level {new_level} (-{hp_lost} HP)",
    )


# =============================================================================
# Pending Choice Resolution
# =============================================================================


def apply_ability_score_improvement(
    character: Character,
    increases: Mapping[Ability, int],
) -> CharacterUpdate:
    """Resolve a pending ability score improvement.

    Args:
        character: The character with an outstanding improvement.
        increases: Points per ability, totalling exactly two.

    Returns:
        CharacterUpdate with raised scores. Declined when no improvement is
        pending.

    Raises:
        ValidationError: If the increases do not total two points or would
            push a score above 20.
    """
    choice = _first_pending(character, ChoiceType.ABILITY_SCORE_IMPROVEMENT)
    if choice is None:
        return CharacterUpdate.declined(character, "No ability score improvement pending")

    if any(points < 1 for points in increases.values()) or sum(increases.values()) != ASI_POINTS:
        raise ValidationError(
            f"Ability score improvement must add exactly {ASI_POINTS} points",
            field_name="increases",
            invalid_value={str(k): v for k, v in increases.items()},
        )

    updated = character.model_copy(deep=True)
    for ability, points in increases.items():
        ability = Ability(ability)
        new_score = character.abilities.score(ability) + points
        if new_score > PC_ABILITY_SCORE_CAP:
            raise ValidationError(
                f"{ability.full_name} cannot exceed {PC_ABILITY_SCORE_CAP}",
                field_name=ability.value,
                invalid_value=new_score,
            )
        setattr(updated.abilities, ability.value, new_score)

    updated.pending_choices = _without_choice(character.pending_choices, choice)
    updated = _finalize(updated)

    logger.info(
        "Ability score improvement applied",
        character_id=character.id,
        increases={str(k): v for k, v in increases.items()},
    )
    summary = ", ".join(f"{Ability(k).abbreviation} +{v}" for k, v in increases.items())
    return CharacterUpdate(character=updated, reason=f"Ability scores increased ({summary})")


def choose_feat(character: Character, feat: str) -> CharacterUpdate:
    """Resolve a pending ability score improvement by taking a feat instead.

    The feat is recorded against the level that granted the improvement,
    so leveling back below it removes the feat again.

    Returns:
        CharacterUpdate with the feat added. Declined when no improvement
        is pending or the feat is already taken.

    Raises:
        ValidationError: If ``feat`` is blank.
    """
    feat = (feat or "").strip()
    if not feat:
        raise ValidationError("Feat name cannot be empty", field_name="feat", invalid_value=feat)
    choice = _first_pending(character, ChoiceType.ABILITY_SCORE_IMPROVEMENT)
    if choice is None:
        return CharacterUpdate.declined(character, "No ability score improvement pending")
    if feat in character.feats:
        return CharacterUpdate.declined(character, f"{character.name} already has {feat}")

    updated = character.model_copy(deep=True)
    updated.feats = [*character.feats, feat]
    by_level = dict(updated.feat_choices_by_level)
    by_level[choice.level] = [*by_level.get(choice.level, []), feat]
    updated.feat_choices_by_level = by_level
    updated.pending_choices = _without_choice(character.pending_choices, choice)
    updated = _finalize(updated)

    logger.info("Feat chosen", character_id=character.id, feat=feat, level=choice.level)
    return CharacterUpdate(character=updated, reason=f"{character.name} took {feat}")


def choose_subclass(character: Character, subclass: str) -> CharacterUpdate:
    """Record the character's subclass.

    Third-caster subclasses (Eldritch Knight, Arcane Trickster) gain a
    spellcasting block here.

    Raises:
        ValidationError: If ``subclass`` is blank.
    """
    subclass = (subclass or "").strip()
    if not subclass:
        raise ValidationError("Subclass name cannot be empty", field_name="subclass", invalid_value=subclass)
    if character.subclass:
        return CharacterUpdate.declined(character, f"{character.name} is already a {character.subclass}")
    required = get_subclass_level(character.class_name, character.edition)
    if character.level < required:
        return CharacterUpdate.declined(
            character, f"{character.class_name} chooses a subclass at level {required}"
        )

    updated = character.model_copy(deep=True)
    updated.subclass = subclass
    choice = _first_pending(character, ChoiceType.SUBCLASS)
    if choice is not None:
        updated.pending_choices = _without_choice(character.pending_choices, choice)

    if updated.spellcasting is None:
        ability = get_spellcasting_ability(character.class_name, subclass)
        if ability is not None:
            updated.spellcasting = Spellcasting(
                ability=ability,
                spell_slots=get_spell_slots(character.class_name, character.level, subclass),
            )
    updated = _finalize(updated)

    logger.info("Subclass chosen", character_id=character.id, subclass=subclass)
    return CharacterUpdate(character=updated, reason=f"{character.name} became a {subclass}")


def learn_cantrip(character: Character, cantrip: str) -> CharacterUpdate:
    """Resolve one pick of a pending cantrip choice.

    The cantrip is recorded against the level that granted it so a later
    level down can remove it again.

    Raises:
        ValidationError: If ``cantrip`` is blank.
    """
    cantrip = (cantrip or "").strip()
    if not cantrip:
        raise ValidationError("Cantrip name cannot be empty", field_name="cantrip", invalid_value=cantrip)
    if character.spellcasting is None:
        return CharacterUpdate.declined(character, f"{character.name} cannot cast spells")
    choice = _first_pending(character, ChoiceType.CANTRIP)
    if choice is None:
        return CharacterUpdate.declined(character, "No cantrip choice pending")
    if cantrip in character.spellcasting.cantrips_known:
        return CharacterUpdate.declined(character, f"{cantrip} is already known")

    by_level = {level: list(names) for level, names in character.spellcasting.cantrip_choices_by_level.items()}
    by_level[choice.level] = [*by_level.get(choice.level, []), cantrip]
    updated = character.model_copy(deep=True)
    updated.spellcasting = character.spellcasting.model_copy(
        update={
            "cantrips_known": [*character.spellcasting.cantrips_known, cantrip],
            "cantrip_choices_by_level": by_level,
        },
        deep=True,
    )

    remaining = _without_choice(character.pending_choices, choice)
    if choice.count > 1:
        index = character.pending_choices.index(choice)
        remaining.insert(index, choice.model_copy(update={"count": choice.count - 1}))
    updated.pending_choices = remaining
    updated.touch()

    logger.info("Cantrip learned", character_id=character.id, cantrip=cantrip, level=choice.level)
    return CharacterUpdate(character=updated, reason=f"Learned {cantrip}")


__all__ = [
    "level_up_preview",
    "level_up",
    "level_down",
    "apply_ability_score_improvement",
    "choose_feat",
    "choose_subclass",
    "learn_cantrip",
]
