"""Bounded roll history.

The history is an explicit object owned by a session and injected into the
dice roller. It keeps the most recent rolls (10 by default), evicting the
oldest first, and writes the whole sequence through to an optional store
after every change.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator, Sequence
from typing import Protocol

from character_forge.core.config import get_settings
from character_forge.core.logging import get_logger
from character_forge.models.dice import DiceRoll


logger = get_logger(__name__)


class RollHistoryStore(Protocol):
    """Persistence backend for the roll history."""

    def load_roll_history(self) -> list[DiceRoll]: ...

    def save_roll_history(self, rolls: Sequence[DiceRoll]) -> None: ...


class RollHistory:
    """Fixed-capacity, append-only sequence of recent rolls.

    Example:
        >>> history = RollHistory(capacity=3)
        >>> for roll in rolls:
        ...     history.record(roll)
        >>> len(history)
        3
    """

    def __init__(
        self,
        *,
        capacity: int | None = None,
        store: RollHistoryStore | None = None,
    ) -> None:
        """Initialize the history, loading persisted rolls if a store is given.

        Args:
            capacity: Maximum rolls retained. Defaults to the dice settings.
            store: Optional persistence backend.
        """
        self._capacity = capacity or get_settings().dice.history_size
        self._rolls: deque[DiceRoll] = deque(maxlen=self._capacity)
        self._store = store
        if store is not None:
            self._rolls.extend(store.load_roll_history())

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def rolls(self) -> tuple[DiceRoll, ...]:
        """Retained rolls, oldest first."""
        return tuple(self._rolls)

    @property
    def latest(self) -> DiceRoll | None:
        return self._rolls[-1] if self._rolls else None

    def record(self, roll: DiceRoll) -> None:
        """Append a roll, evicting the oldest when full.

        Raises:
            PersistenceError: If the store rejects the write. The roll stays
                in memory.
        """
        self._rolls.append(roll)
        self._persist()

    def clear(self) -> None:
        """Remove every roll."""
        self._rolls.clear()
        self._persist()
        logger.info("Roll history cleared")

    def _persist(self) -> None:
        if self._store is not None:
            self._store.save_roll_history(tuple(self._rolls))

    def __len__(self) -> int:
        return len(self._rolls)

    def __iter__(self) -> Iterator[DiceRoll]:
        return iter(tuple(self._rolls))


__all__ = [
    "RollHistoryStore",
    "RollHistory",
]
