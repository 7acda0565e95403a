"""Limited-use resource tracking with recharge triggers.

Expected trackers are derived from class and level on every load and on
every level change, then merged into the character's existing trackers:

- an existing tracker with the same id gets the new maximum, and its
  current uses are clamped to it;
- a missing tracker is created at full uses;
- trackers outside the expected set are left alone (no deletion).
"""

from __future__ import annotations

from character_forge.core.exceptions import ValidationError
from character_forge.core.logging import get_logger
from character_forge.models.character import AbilityScores, Character, ResourceTracker
from character_forge.models.enums import Ability, RechargeType
from character_forge.models.progression import get_class_resources
from character_forge.models.results import CharacterUpdate


logger = get_logger(__name__)


# =============================================================================
# Expected Set and Reconciliation
# =============================================================================


def expected_resources(class_name: str, level: int, abilities: AbilityScores) -> list[ResourceTracker]:
    """Build full trackers for every resource unlocked at ``level``.

    Args:
        class_name: The character's class.
        level: The character's level.
        abilities: Ability scores for modifier-scaled resources.

    Returns:
        Trackers with ``current_uses == max_uses``.
    """
    modifiers = {ability: abilities.modifier(ability) for ability in Ability}
    trackers = []
    for definition in get_class_resources(class_name, level):
        max_uses = definition.max_uses(level, modifiers)
        trackers.append(
            ResourceTracker(
                id=definition.id,
                name=definition.name,
                description=definition.description,
                max_uses=max_uses,
                current_uses=max_uses,
                recharge_type=definition.recharge(level),
            )
        )
    return trackers


def refresh_resources(character: Character) -> list[ResourceTracker]:
    """Reconcile the character's trackers with the expected set.

    The input character is not modified.

    Returns:
        The merged tracker list, existing order first, new trackers appended.
    """
    expected = {
        tracker.id: tracker
        for tracker in expected_resources(character.class_name, character.level, character.abilities)
    }
    merged: list[ResourceTracker] = []
    seen: set[str] = set()

    for tracker in character.resources:
        seen.add(tracker.id)
        fresh = expected.get(tracker.id)
        if fresh is None:
            merged.append(tracker.model_copy())
            continue
        merged.append(
            tracker.model_copy(
                update={
                    "name": fresh.name,
                    "description": fresh.description,
                    "max_uses": fresh.max_uses,
                    "current_uses": min(tracker.current_uses, fresh.max_uses),
                    "recharge_type": fresh.recharge_type,
                }
            )
        )

    for resource_id, fresh in expected.items():
        if resource_id not in seen:
            merged.append(fresh)
            logger.debug("Resource unlocked", character_id=character.id, resource=resource_id)

    return merged


def with_refreshed_resources(character: Character) -> Character:
    """Return a copy of the character with reconciled trackers."""
    updated = character.model_copy(deep=True)
    updated.resources = refresh_resources(character)
    return updated


# =============================================================================
# Queries
# =============================================================================


def get_resource_uses(character: Character, resource_id: str) -> tuple[int, int] | None:
    """Get ``(current_uses, max_uses)`` for a tracker, or None if absent."""
    tracker = character.get_resource(resource_id)
    if tracker is None:
        return None
    return tracker.current_uses, tracker.max_uses


def can_use_resource(character: Character, resource_id: str, uses: int = 1) -> bool:
    """Check whether a tracker has at least ``uses`` remaining."""
    tracker = character.get_resource(resource_id)
    return tracker is not None and tracker.current_uses >= uses


# =============================================================================
# Spend and Recharge
# =============================================================================


def spend_resource(character: Character, resource_id: str, uses: int = 1) -> CharacterUpdate:
    """Spend uses of a resource.

    Declined, with the character unchanged, when the tracker does not exist
    or has fewer than ``uses`` remaining.

    Args:
        character: The character spending the resource.
        resource_id: Tracker id (e.g. ``"rage"``).
        uses: Number of uses to spend.

    Returns:
        CharacterUpdate describing the outcome.

    Raises:
        ValidationError: If ``uses`` is less than 1.
    """
    if uses < 1:
        raise ValidationError(
            "Resource uses to spend must be at least 1",
            field_name="uses",
            invalid_value=uses,
        )

    tracker = character.get_resource(resource_id)
    if tracker is None:
        return CharacterUpdate.declined(character, f"{character.name} has no resource '{resource_id}'")
    if tracker.current_uses < uses:
        return CharacterUpdate.declined(
            character,
            f"Not enough uses of {tracker.name} ({tracker.current_uses}/{tracker.max_uses} remaining)",
        )

    updated = character.model_copy(deep=True)
    updated.resources = [
        t.model_copy(update={"current_uses": max(0, t.current_uses - uses)}) if t.id == resource_id else t
        for t in updated.resources
    ]
    updated.touch()

    remaining = tracker.current_uses - uses
    logger.info(
        "Resource spent",
        character_id=character.id,
        resource=resource_id,
        uses=uses,
        remaining=remaining,
    )
    return CharacterUpdate(
        character=updated,
        reason=f"Used {tracker.name} ({remaining}/{tracker.max_uses} remaining)",
    )


def recharges_on(tracker: ResourceTracker, trigger: RechargeType) -> bool:
    """Whether a rest of type ``trigger`` restores the tracker.

    A long rest restores both long-rest and short-rest trackers.
    """
    if trigger == RechargeType.LONG_REST:
        return tracker.recharge_type in (RechargeType.LONG_REST, RechargeType.SHORT_REST)
    if trigger == RechargeType.SHORT_REST:
        return tracker.recharge_type == RechargeType.SHORT_REST
    return False


def recharge_resources(character: Character, trigger: RechargeType | str) -> CharacterUpdate:
    """Reset every tracker restored by the given rest to its maximum.

    Args:
        character: The resting character.
        trigger: ``"short-rest"`` or ``"long-rest"``.

    Returns:
        CharacterUpdate with the recharged character.

    Raises:
        ValidationError: If the trigger is not a rest.
    """
    try:
        rest = RechargeType(trigger)
    except ValueError as exc:
        raise ValidationError(
            f"Unknown recharge trigger: {trigger}",
            field_name="trigger",
            invalid_value=trigger,
        ) from exc
    if rest == RechargeType.NONE:
        raise ValidationError(
            "Recharge trigger must be a short or long rest",
            field_name="trigger",
            invalid_value=str(trigger),
        )

    updated = character.model_copy(deep=True)
    restored: list[str] = []
    trackers = []
    for tracker in updated.resources:
        if recharges_on(tracker, rest):
            if tracker.current_uses < tracker.max_uses:
                restored.append(tracker.name)
            tracker = tracker.model_copy(update={"current_uses": tracker.max_uses})
        trackers.append(tracker)
    updated.resources = trackers
    updated.touch()

    logger.info("Resources recharged", character_id=character.id, trigger=str(rest), restored=restored)
    reason = f"Restored {', '.join(restored)}" if restored else "All resources already full"
    return CharacterUpdate(character=updated, reason=reason)


__all__ = [
    "expected_resources",
    "refresh_resources",
    "with_refreshed_resources",
    "get_resource_uses",
    "can_use_resource",
    "spend_resource",
    "recharges_on",
    "recharge_resources",
]
