"""Short and long rests."""

from __future__ import annotations

from character_forge.core.exceptions import ValidationError
from character_forge.core.logging import get_logger
from character_forge.engine.dice import DiceRoller
from character_forge.engine.resources import recharge_resources
from character_forge.models.character import Character, HitDice
from character_forge.models.enums import Ability, RechargeType
from character_forge.models.results import CharacterUpdate


logger = get_logger(__name__)


def short_rest(
    character: Character,
    hit_dice_to_spend: int = 0,
    roller: DiceRoller | None = None,
) -> CharacterUpdate:
    """Take a short rest, optionally spending hit dice to heal.

    Each hit die heals its roll plus the Constitution modifier, at least 1,
    and healing stops at maximum hit points. Short-rest resources recharge.

    Args:
        character: The resting character.
        hit_dice_to_spend: Hit dice to roll for healing.
        roller: Roller for the hit dice. A fresh one is created if omitted.

    Returns:
        CharacterUpdate with the rested character. Declined when more hit
        dice are requested than remain.

    Raises:
        ValidationError: If ``hit_dice_to_spend`` is negative.
    """
    if hit_dice_to_spend < 0:
        raise ValidationError(
            "Hit dice to spend cannot be negative",
            field_name="hit_dice_to_spend",
            invalid_value=hit_dice_to_spend,
        )
    if hit_dice_to_spend > character.hit_dice.current:
        return CharacterUpdate.declined(
            character,
            f"Only {character.hit_dice.current} hit dice remaining",
        )

    healed = 0
    if hit_dice_to_spend:
        roller = roller or DiceRoller()
        con_mod = character.ability_modifier(Ability.CON)
        for _ in range(hit_dice_to_spend):
            roll = roller.roll_hit_die(character.hit_dice.die_size, con_mod)
            healed += max(1, roll.total)

    rested = recharge_resources(character, RechargeType.SHORT_REST).character
    rested.hit_points = min(character.max_hit_points, character.hit_points + healed)
    rested.hit_dice = HitDice(
        current=character.hit_dice.current - hit_dice_to_spend,
        max=character.hit_dice.max,
        die_size=character.hit_dice.die_size,
    )

    logger.info(
        "Short rest taken",
        character_id=character.id,
        hit_dice_spent=hit_dice_to_spend,
        healed=rested.hit_points - character.hit_points,
    )
    return CharacterUpdate(
        character=rested,
        reason=f"Short rest: spent {hit_dice_to_spend} hit dice, now at {rested.hit_points} HP",
    )


def long_rest(character: Character) -> CharacterUpdate:
    """Take a long rest.

    Restores hit points, clears temporary hit points, regains half the
    maximum hit dice (at least one), resets spell slots and recharges
    long-rest and short-rest resources.
    """
    rested = recharge_resources(character, RechargeType.LONG_REST).character
    rested.hit_points = character.max_hit_points
    rested.temporary_hit_points = 0

    dice = character.hit_dice
    regained = max(1, dice.max // 2)
    rested.hit_dice = HitDice(
        current=min(dice.max, dice.current + regained),
        max=dice.max,
        die_size=dice.die_size,
    )

    if rested.spellcasting is not None:
        rested.spellcasting.used_spell_slots = [0] * len(rested.spellcasting.used_spell_slots)

    logger.info("Long rest taken", character_id=character.id, hit_dice=rested.hit_dice.current)
    return CharacterUpdate(character=rested, reason="Long rest: fully restored")


__all__ = [
    "short_rest",
    "long_rest",
]
