"""Dice rolling mechanics for D&D 5E.

Raw dice come from the d20 library. Keep rules, totals and critical
detection are applied here so that the same resolution runs whether the
dice were drawn pseudo-randomly or read off physical dice.

Every roll is two-phase: ``prepare_*`` draws predicted dice into a
``PendingRoll``; ``confirm`` turns it into an immutable ``DiceRoll``, using
either the predicted dice or authoritative results supplied by the caller.
The ``roll_*`` methods do both in one step.
"""

from __future__ import annotations

import random
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import d20

from character_forge.core.config import DiceSettings, get_settings
from character_forge.core.constants import CHECK_DIE_SIDES, NATURAL_CRITICAL, NATURAL_FUMBLE
from character_forge.core.exceptions import DiceNotationError, DiceRollError
from character_forge.core.logging import get_logger
from character_forge.engine.history import RollHistory
from character_forge.models.dice import DicePool, DiceRoll, KeepRule, PendingRoll
from character_forge.models.enums import Ability, CriticalResult, RollKind, RollType, Skill


logger = get_logger(__name__)


NOTATION_PATTERN = re.compile(r"^(\d+)d(\d+)(?:(kh|kl)(\d+)?)?([+-]\d+)?$")
"""``NdS``, optional ``kh``/``kl`` with a keep count (default 1), optional ``+M``/``-M``."""


# =============================================================================
# Notation Parsing
# =============================================================================


@dataclass(frozen=True)
class DiceNotation:
    """A parsed dice expression.

    Attributes:
        count: Dice rolled.
        sides: Sides per die.
        keep: Keep-highest or keep-lowest rule, if any.
        keep_count: Dice kept under the keep rule.
        modifier: Flat modifier.
    """

    count: int
    sides: int
    keep: KeepRule | None = None
    keep_count: int | None = None
    modifier: int = 0


def parse_notation(notation: str, settings: DiceSettings | None = None) -> DiceNotation:
    """Parse and range-check dice notation such as ``4d6kh3+2``.

    Args:
        notation: The notation to parse. Case and spaces are ignored.
        settings: Dice limits; defaults to the application settings.

    Returns:
        The parsed DiceNotation.

    Raises:
        DiceNotationError: If the notation does not match the grammar or a
            count, size or keep value is out of range.
    """
    settings = settings or get_settings().dice
    cleaned = (notation or "").replace(" ", "").lower()
    match = NOTATION_PATTERN.match(cleaned)
    if match is None:
        raise DiceNotationError(
            "Invalid dice notation, expected NdS[kh|klK][+/-M]",
            expression=notation,
        )

    count = int(match.group(1))
    sides = int(match.group(2))
    keep = match.group(3)
    keep_count = int(match.group(4)) if match.group(4) else (1 if keep else None)
    modifier = int(match.group(5)) if match.group(5) else 0

    if not 1 <= count <= settings.max_dice_count:
        raise DiceNotationError(
            f"Dice count must be between 1 and {settings.max_dice_count}",
            expression=notation,
            details={"count": count},
        )
    if not 2 <= sides <= settings.max_die_sides:
        raise DiceNotationError(
            f"Die size must be between 2 and {settings.max_die_sides}",
            expression=notation,
            details={"sides": sides},
        )
    if keep_count is not None and not 1 <= keep_count <= count:
        raise DiceNotationError(
            f"Keep count must be between 1 and {count}",
            expression=notation,
            details={"keep_count": keep_count},
        )
    return DiceNotation(count=count, sides=sides, keep=keep, keep_count=keep_count, modifier=modifier)


def _kept_indices(results: Sequence[int], keep: KeepRule | None, keep_count: int | None) -> list[int]:
    """Indices of the dice that count, in roll order."""
    if keep is None or keep_count is None:
        return list(range(len(results)))
    ranked = sorted(range(len(results)), key=lambda i: results[i], reverse=keep == "kh")
    return sorted(ranked[:keep_count])


def _render_expression(notation: str, results: Sequence[int], kept: set[int], total: int) -> str:
    """Breakdown in d20's style, dropped dice struck through."""
    shown = ", ".join(
        str(value) if index in kept else f"~~{value}~~" for index, value in enumerate(results)
    )
    return f"{notation} ({shown}) = {total}"


def _raw_dice_values(expr: Any) -> list[int]:
    """Collect every die value from a d20 expression tree."""
    values: list[int] = []

    def traverse(node: Any) -> None:
        if isinstance(node, d20.Dice):
            values.extend(die.number for die in node.values)
        elif hasattr(node, "children"):
            for child in node.children:
                traverse(child)

    traverse(expr)
    return values


_ROLL_TYPE_SUFFIX = {
    RollType.ADVANTAGE: " (Advantage)",
    RollType.DISADVANTAGE: " (Disadvantage)",
}


# =============================================================================
# Dice Roller
# =============================================================================


class DiceRoller:
    """Dice rolling with D&D 5E mechanics.

    Example:
        >>> roller = DiceRoller(history=RollHistory(capacity=10))
        >>> result = roller.roll_ability(Ability.STR, 2)
        >>> result.total == result.dice_results[0] + 2
        True
    """

    def __init__(
        self,
        *,
        history: RollHistory | None = None,
        seed: int | None = None,
        settings: DiceSettings | None = None,
    ) -> None:
        """Initialize the dice roller.

        Args:
            history: History that records every confirmed roll.
            seed: Optional random seed for reproducible rolls.
            settings: Dice limits; defaults to the application settings.
        """
        self._history = history
        self._settings = settings or get_settings().dice
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed, has_history=history is not None)

    @property
    def history(self) -> RollHistory | None:
        return self._history

    # -------------------------------------------------------------------------
    # Core primitive
    # -------------------------------------------------------------------------

    def roll_dice(self, count: int, sides: int) -> list[int]:
        """Roll ``count`` independent dice with ``sides`` faces.

        Raises:
            DiceRollError: If the dice library rejects the roll.
        """
        expression = f"{count}d{sides}"
        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(f"Dice roll failed: {exc}", expression=expression) from exc
        return _raw_dice_values(result.expr)

    # -------------------------------------------------------------------------
    # Two-phase rolls
    # -------------------------------------------------------------------------

    def prepare(
        self,
        kind: RollKind,
        label: str,
        notation: DiceNotation,
        *,
        roll_type: RollType = RollType.NORMAL,
        detects_critical: bool = False,
    ) -> PendingRoll:
        """Draw predicted dice for a roll without resolving it."""
        return PendingRoll(
            kind=kind,
            label=label,
            count=notation.count,
            sides=notation.sides,
            keep=notation.keep,
            keep_count=notation.keep_count,
            modifier=notation.modifier,
            predicted=tuple(self.roll_dice(notation.count, notation.sides)),
            roll_type=roll_type,
            detects_critical=detects_critical,
        )

    def prepare_check(
        self,
        kind: RollKind,
        label: str,
        modifier: int,
        *,
        roll_type: RollType = RollType.NORMAL,
    ) -> PendingRoll:
        """Prepare a d20 check, doubling the die for advantage or disadvantage."""
        roll_type = RollType(roll_type)
        if roll_type == RollType.NORMAL:
            notation = DiceNotation(count=1, sides=CHECK_DIE_SIDES, modifier=modifier)
        else:
            notation = DiceNotation(
                count=2,
                sides=CHECK_DIE_SIDES,
                keep="kh" if roll_type == RollType.ADVANTAGE else "kl",
                keep_count=1,
                modifier=modifier,
            )
        return self.prepare(
            kind,
            label + _ROLL_TYPE_SUFFIX.get(roll_type, ""),
            notation,
            roll_type=roll_type,
            detects_critical=True,
        )

    def prepare_complex(self, label: str, notation: str) -> PendingRoll:
        """Prepare a custom-notation roll.

        Raises:
            DiceNotationError: If the notation is malformed or out of range.
        """
        return self.prepare(RollKind.COMPLEX, label, parse_notation(notation, self._settings))

    def confirm(self, pending: PendingRoll, dice_results: Sequence[int] | None = None) -> DiceRoll:
        """Resolve a pending roll into an immutable DiceRoll.

        Args:
            pending: The roll to resolve.
            dice_results: Authoritative raw dice (e.g. read off physical
                dice). Defaults to the predicted dice.

        Returns:
            The resolved DiceRoll, also recorded in the history if present.

        Raises:
            DiceRollError: If the supplied results do not fit the pending roll.
        """
        results = tuple(pending.predicted if dice_results is None else dice_results)
        if len(results) != pending.count:
            raise DiceRollError(
                f"Expected {pending.count} dice results, got {len(results)}",
                expression=pending.notation,
            )
        if any(not 1 <= value <= pending.sides for value in results):
            raise DiceRollError(
                f"Dice results must be between 1 and {pending.sides}",
                expression=pending.notation,
                details={"results": list(results)},
            )

        kept = _kept_indices(results, pending.keep, pending.keep_count)
        kept_values = tuple(results[i] for i in kept)
        total = sum(kept_values) + pending.modifier

        critical: CriticalResult | None = None
        if pending.detects_critical and pending.sides == CHECK_DIE_SIDES and len(kept_values) == 1:
            if kept_values[0] == NATURAL_CRITICAL:
                critical = CriticalResult.SUCCESS
            elif kept_values[0] == NATURAL_FUMBLE:
                critical = CriticalResult.FAILURE

        roll = DiceRoll(
            id=pending.id,
            kind=pending.kind,
            label=pending.label,
            notation=pending.notation,
            dice_results=kept_values,
            modifier=pending.modifier,
            total=total,
            critical=critical,
            roll_type=pending.roll_type,
            pools=(DicePool(count=pending.count, sides=pending.sides, results=results),),
            expression=_render_expression(pending.notation, results, set(kept), total),
        )

        logger.info(
            "Dice rolled",
            label=roll.label,
            notation=roll.notation,
            total=roll.total,
            critical=roll.critical,
        )
        if self._history is not None:
            self._history.record(roll)
        return roll

    # -------------------------------------------------------------------------
    # Single d20 checks
    # -------------------------------------------------------------------------

    def roll_ability(
        self,
        ability: Ability,
        modifier: int,
        *,
        roll_type: RollType = RollType.NORMAL,
    ) -> DiceRoll:
        """Roll an ability check."""
        return self.confirm(
            self.prepare_check(RollKind.ABILITY, Ability(ability).full_name, modifier, roll_type=roll_type)
        )

    def roll_skill(
        self,
        skill: Skill,
        modifier: int,
        *,
        roll_type: RollType = RollType.NORMAL,
    ) -> DiceRoll:
        """Roll a skill check."""
        return self.confirm(
            self.prepare_check(RollKind.SKILL, Skill(skill).display_name, modifier, roll_type=roll_type)
        )

    def roll_initiative(
        self,
        modifier: int,
        *,
        roll_type: RollType = RollType.NORMAL,
    ) -> DiceRoll:
        """Roll initiative."""
        return self.confirm(
            self.prepare_check(RollKind.INITIATIVE, "Initiative", modifier, roll_type=roll_type)
        )

    def roll_saving_throw(
        self,
        ability: Ability,
        modifier: int,
        *,
        roll_type: RollType = RollType.NORMAL,
    ) -> DiceRoll:
        """Roll a saving throw.

        Args:
            ability: The ability being saved with.
            modifier: Full saving throw bonus, proficiency included.
            roll_type: Normal, advantage or disadvantage.
        """
        label = f"{Ability(ability).full_name} Save"
        return self.confirm(
            self.prepare_check(RollKind.SAVING_THROW, label, modifier, roll_type=roll_type)
        )

    def roll_attack(
        self,
        weapon_name: str,
        attack_bonus: int,
        *,
        roll_type: RollType = RollType.NORMAL,
    ) -> DiceRoll:
        """Roll an attack with a weapon.

        Args:
            weapon_name: Weapon used, for the label.
            attack_bonus: Ability modifier plus proficiency bonus.
            roll_type: Normal, advantage or disadvantage.
        """
        return self.confirm(
            self.prepare_check(RollKind.ATTACK, f"{weapon_name} Attack", attack_bonus, roll_type=roll_type)
        )

    def roll_advantage(self, label: str, modifier: int, *, kind: RollKind = RollKind.COMPLEX) -> DiceRoll:
        """Roll 2d20, keep the higher, add ``modifier``."""
        return self.confirm(self.prepare_check(kind, label, modifier, roll_type=RollType.ADVANTAGE))

    def roll_disadvantage(self, label: str, modifier: int, *, kind: RollKind = RollKind.COMPLEX) -> DiceRoll:
        """Roll 2d20, keep the lower, add ``modifier``."""
        return self.confirm(self.prepare_check(kind, label, modifier, roll_type=RollType.DISADVANTAGE))

    # -------------------------------------------------------------------------
    # Multi-die rolls (never critical)
    # -------------------------------------------------------------------------

    def roll_complex(self, label: str, notation: str) -> DiceRoll:
        """Roll custom notation such as ``4d6kh3`` or ``2d8+3``.

        Raises:
            DiceNotationError: If the notation is malformed or out of range.
        """
        return self.confirm(self.prepare_complex(label, notation))

    def roll_damage(
        self,
        weapon_name: str,
        damage_dice: str,
        ability_modifier: int = 0,
        *,
        damage_type: str | None = None,
        critical_hit: bool = False,
    ) -> DiceRoll:
        """Roll weapon damage.

        Args:
            weapon_name: Weapon used, for the label.
            damage_dice: Weapon damage notation (e.g. ``"1d8"``).
            ability_modifier: Modifier added to the damage.
            damage_type: Damage type shown in the label.
            critical_hit: Roll twice the dice on a critical hit.

        Raises:
            DiceNotationError: If ``damage_dice`` is malformed.
        """
        parsed = parse_notation(damage_dice, self._settings)
        notation = DiceNotation(
            count=parsed.count * 2 if critical_hit else parsed.count,
            sides=parsed.sides,
            keep=parsed.keep,
            keep_count=parsed.keep_count,
            modifier=parsed.modifier + ability_modifier,
        )
        label = f"{weapon_name} Damage"
        if damage_type:
            label += f" ({damage_type})"
        if critical_hit:
            label += " (Critical)"
        return self.confirm(self.prepare(RollKind.DAMAGE, label, notation))

    def roll_hit_die(self, die_size: int, con_modifier: int) -> DiceRoll:
        """Roll one hit die plus the Constitution modifier."""
        notation = DiceNotation(count=1, sides=die_size, modifier=con_modifier)
        return self.confirm(self.prepare(RollKind.HIT_DIE, f"Hit Die (d{die_size})", notation))


__all__ = [
    "NOTATION_PATTERN",
    "DiceNotation",
    "parse_notation",
    "DiceRoller",
]
