"""Explicit outcomes for engine operations that may be declined."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from character_forge.models.character import Character, PendingChoice


class CharacterUpdate(BaseModel):
    """Result of a mutation applied to a character.

    When ``applied`` is False the character is the unchanged input and
    ``reason`` explains why the operation was declined (level 20 reached,
    not enough uses left, weapon hands full). Callers never need to diff
    before and after states to detect a no-op.

    Attributes:
        character: The resulting character (a new object when applied).
        applied: Whether the operation changed anything.
        reason: Human-readable message for the player.
        pending_choices: Choices newly surfaced by this operation.
    """

    model_config = ConfigDict(frozen=True)

    character: Character
    applied: bool = True
    reason: str = ""
    pending_choices: list[PendingChoice] = Field(default_factory=list)

    @classmethod
    def declined(cls, character: Character, reason: str) -> "CharacterUpdate":
        """Build a result for an operation that was not applied."""
        return cls(character=character, applied=False, reason=reason)

    def __bool__(self) -> bool:
        return self.applied


__all__ = ["CharacterUpdate"]
