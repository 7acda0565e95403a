"""Versioned migrations for persisted character records.

Records are plain JSON dictionaries. Every step carries the schema version
it produces and runs across all records before the next step starts. Steps
are idempotent, so replaying one over already-migrated data changes
nothing.

Schema history:
    1. Records gain an ``edition`` tag; untagged records are legacy.
    2. ``race`` is renamed to ``species``; ``race`` stays as an alias.
    3. Missing sub-structures are initialised to empty defaults.
    4. The ``race`` alias is retired.
"""

from __future__ import annotations

from collections.abc import Callable, MutableSequence
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from character_forge.core.config import get_settings
from character_forge.core.constants import MAX_LEVEL, MIN_LEVEL, SPELL_LEVELS
from character_forge.core.exceptions import MigrationError
from character_forge.core.logging import get_logger
from character_forge.models.progression import get_hit_die


logger = get_logger(__name__)


Record = dict[str, Any]


@dataclass(frozen=True)
class MigrationStep:
    """One schema revision.

    Attributes:
        version: Schema version the step produces.
        description: What the step changes.
        apply: In-place transformation of a single record.
    """

    version: int
    description: str
    apply: Callable[[Record], None]


# =============================================================================
# Steps
# =============================================================================


def _tag_edition(record: Record) -> None:
    if not record.get("edition"):
        record["edition"] = get_settings().rules.legacy_edition


def _rename_race(record: Record) -> None:
    if record.get("race") and not record.get("species"):
        record["species"] = record["race"]
    record.setdefault("species", "")


def _init_substructures(record: Record) -> None:
    for key in (
        "skills",
        "inventory",
        "currency",
    ):
        if not isinstance(record.get(key), dict):
            record[key] = {}
    for key in (
        "saving_throw_proficiencies",
        "equipped_weapons",
        "resources",
        "pending_choices",
        "level_history",
        "class_features",
        "feats",
    ):
        if not isinstance(record.get(key), list):
            record[key] = []

    if not isinstance(record.get("hit_dice"), dict):
        level = record.get("level") if isinstance(record.get("level"), int) else MIN_LEVEL
        level = min(max(level, MIN_LEVEL), MAX_LEVEL)
        record["hit_dice"] = {
            "current": level,
            "max": level,
            "die_size": get_hit_die(str(record.get("class_name", ""))),
        }

    spellcasting = record.get("spellcasting")
    if isinstance(spellcasting, dict):
        spellcasting.setdefault("cantrips_known", [])
        spellcasting.setdefault("spells_known", [])
        spellcasting.setdefault("spell_slots", [0] * SPELL_LEVELS)
        spellcasting.setdefault("used_spell_slots", [0] * SPELL_LEVELS)
        spellcasting.setdefault("cantrip_choices_by_level", {})


def _retire_race_alias(record: Record) -> None:
    race = record.pop("race", None)
    if race and not record.get("species"):
        record["species"] = race


MIGRATIONS: tuple[MigrationStep, ...] = (
    MigrationStep(1, "Tag records with a rules edition", _tag_edition),
    MigrationStep(2, "Rename race to species", _rename_race),
    MigrationStep(3, "Initialise missing sub-structures", _init_substructures),
    MigrationStep(4, "Retire the race alias", _retire_race_alias),
)

CURRENT_SCHEMA_VERSION = MIGRATIONS[-1].version


# =============================================================================
# Runner
# =============================================================================


def migrate(store_version: int, records: MutableSequence[Record]) -> int:
    """Bring every record from ``store_version`` up to the current schema.

    Steps whose version is above ``store_version`` run in ascending order,
    each across all records before the next. Records are modified in place.

    Args:
        store_version: Schema version the records were written with.
        records: The persisted records.

    Returns:
        The schema version the records now conform to.

    Raises:
        MigrationError: If the store is newer than this code or a record is
            not a JSON object.
    """
    if store_version > CURRENT_SCHEMA_VERSION:
        raise MigrationError(
            f"Store schema {store_version} is newer than supported schema {CURRENT_SCHEMA_VERSION}",
            version=store_version,
        )

    for step in MIGRATIONS:
        if step.version <= store_version:
            continue
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise MigrationError(
                    f"Cannot apply '{step.description}' to a non-object record",
                    version=step.version,
                    details={"index": index, "type": type(record).__name__},
                )
            step.apply(record)
        logger.info(
            "Migration applied",
            version=step.version,
            description=step.description,
            records=len(records),
        )

    return max(store_version, CURRENT_SCHEMA_VERSION)


# =============================================================================
# Read-time Fallback
# =============================================================================


def ensure_mandatory_fields(record: Record) -> Record:
    """Patch fields a character cannot load without.

    Applied on every read, after migrations. Anything patched here means
    the stored record was corrupted, so each patch is logged as a warning.

    Args:
        record: A migrated character record.

    Returns:
        A patched copy of the record.
    """
    patched = dict(record)
    defaulted: list[str] = []

    def default(key: str, value: Any) -> None:
        if patched.get(key) in (None, ""):
            patched[key] = value
            defaulted.append(key)

    default("id", str(uuid4()))
    default("name", "Unnamed Adventurer")
    default("class_name", "Fighter")
    default("edition", get_settings().rules.legacy_edition)

    level = patched.get("level")
    if not isinstance(level, int) or not MIN_LEVEL <= level <= MAX_LEVEL:
        patched["level"] = MIN_LEVEL if not isinstance(level, int) else min(max(level, MIN_LEVEL), MAX_LEVEL)
        defaulted.append("level")

    max_hp = patched.get("max_hit_points")
    if not isinstance(max_hp, int) or max_hp < 1:
        hp = patched.get("hit_points")
        patched["max_hit_points"] = hp if isinstance(hp, int) and hp >= 1 else 1
        defaulted.append("max_hit_points")
    hp = patched.get("hit_points")
    if not isinstance(hp, int) or hp < 0:
        patched["hit_points"] = patched["max_hit_points"]
        defaulted.append("hit_points")

    if defaulted:
        logger.warning(
            "Character record missing mandatory fields, defaults applied",
            character_id=patched["id"],
            fields=defaulted,
        )
    return patched


__all__ = [
    "MigrationStep",
    "MIGRATIONS",
    "CURRENT_SCHEMA_VERSION",
    "migrate",
    "ensure_mandatory_fields",
]
