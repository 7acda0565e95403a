"""Dice roll records.

A roll moves through two states. ``PendingRoll`` carries the intent: what
was asked for and the pseudo-random dice predicted for it. ``DiceRoll`` is
the resolved, immutable record built once the authoritative dice are known,
whether those are the predicted values or results read off physical dice.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field

from character_forge.models.enums import CriticalResult, RollKind, RollType


KeepRule = Literal["kh", "kl"]


class DicePool(BaseModel):
    """Raw results of one group of identical dice.

    Attributes:
        count: Number of dice rolled.
        sides: Sides on each die.
        results: Every raw value, kept or discarded, in roll order.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    count: Annotated[int, Field(ge=1)]
    sides: Annotated[int, Field(ge=2)]
    results: tuple[int, ...]


class PendingRoll(BaseModel):
    """A roll that has been requested but not yet confirmed.

    Attributes:
        id: Identifier carried over to the resolved roll.
        kind: What the roll is for.
        label: Human-readable label.
        count: Dice rolled.
        sides: Sides per die.
        keep: Keep-highest or keep-lowest rule, if any.
        keep_count: Dice kept under the keep rule.
        modifier: Flat modifier added to the kept dice.
        predicted: Pseudo-random results drawn when the roll was prepared.
        roll_type: Normal, advantage or disadvantage.
        detects_critical: Whether natural 20/1 tagging applies.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(default_factory=lambda: str(uuid4()))
    kind: RollKind
    label: str
    count: Annotated[int, Field(ge=1)]
    sides: Annotated[int, Field(ge=2)]
    keep: KeepRule | None = None
    keep_count: Annotated[int, Field(ge=1)] | None = None
    modifier: int = 0
    predicted: tuple[int, ...]
    roll_type: RollType = RollType.NORMAL
    detects_critical: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def notation(self) -> str:
        """Dice notation such as ``1d20+3`` or ``2d20kh1-1``."""
        keep = f"{self.keep}{self.keep_count}" if self.keep else ""
        if self.modifier > 0:
            mod = f"+{self.modifier}"
        elif self.modifier < 0:
            mod = str(self.modifier)
        else:
            mod = ""
        return f"{self.count}d{self.sides}{keep}{mod}"


class DiceRoll(BaseModel):
    """Immutable record of one resolved roll.

    Attributes:
        id: Unique roll identifier.
        kind: Roll kind tag.
        label: Human-readable label (e.g. "Strength (Advantage)").
        notation: Dice notation string.
        dice_results: Kept dice values that count toward the total.
        modifier: Flat modifier applied.
        total: Kept dice plus modifier.
        critical: Natural 20 or 1 on a single kept d20, otherwise None.
        timestamp: When the roll was resolved.
        roll_type: Normal, advantage or disadvantage.
        pools: Raw dice including discarded ones.
        expression: Rendered breakdown of the roll.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(default_factory=lambda: str(uuid4()))
    kind: RollKind
    label: str
    notation: str
    dice_results: tuple[int, ...]
    modifier: int = 0
    total: int
    critical: CriticalResult | None = None
    timestamp: datetime = Field(default_factory=datetime.now)
    roll_type: RollType = RollType.NORMAL
    pools: tuple[DicePool, ...] = ()
    expression: str | None = None

    @property
    def is_critical_success(self) -> bool:
        return self.critical == CriticalResult.SUCCESS

    @property
    def is_critical_failure(self) -> bool:
        return self.critical == CriticalResult.FAILURE


__all__ = [
    "KeepRule",
    "DicePool",
    "PendingRoll",
    "DiceRoll",
]
