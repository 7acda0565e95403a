"""Tests for schema migrations and the read-time fallback."""

from __future__ import annotations

import copy
import json

import pytest

from character_forge.core.exceptions import MigrationError
from character_forge.storage.migrations import (
    CURRENT_SCHEMA_VERSION,
    MIGRATIONS,
    ensure_mandatory_fields,
    migrate,
)


def _legacy_record() -> dict:
    return {
        "id": "legacy-1",
        "name": "Old Timer",
        "class_name": "Rogue",
        "level": 3,
        "race": "Halfling",
        "max_hit_points": 20,
        "hit_points": 20,
    }


class TestMigrationSteps:
    """Tests for the individual steps."""

    def test_versions_ascending(self) -> None:
        versions = [step.version for step in MIGRATIONS]

        assert versions == sorted(versions)
        assert len(set(versions)) == len(versions)
        assert CURRENT_SCHEMA_VERSION == versions[-1]

    @pytest.mark.parametrize("step", MIGRATIONS, ids=lambda step: f"v{step.version}")
    def test_each_step_idempotent(self, step) -> None:
        once = _legacy_record()
        step.apply(once)
        twice = copy.deepcopy(once)
        step.apply(twice)

        assert twice == once

    def test_rename_keeps_alias(self) -> None:
        record = _legacy_record()
        MIGRATIONS[1].apply(record)

        assert record["species"] == "Halfling"
        assert record["race"] == "Halfling"

    def test_rename_keeps_existing_species(self) -> None:
        record = _legacy_record() | {"species": "Gnome"}
        MIGRATIONS[1].apply(record)

        assert record["species"] == "Gnome"

    @pytest.mark.parametrize("step", MIGRATIONS, ids=lambda step: f"v{step.version}")
    def test_step_noop_on_migrated_record(self, step) -> None:
        records = [_legacy_record()]
        migrate(0, records)
        before = json.dumps(records[0], sort_keys=True)

        step.apply(records[0])

        assert json.dumps(records[0], sort_keys=True) == before

    def test_existing_edition_untouched(self) -> None:
        record = _legacy_record() | {"edition": "2024"}
        MIGRATIONS[0].apply(record)

        assert record["edition"] == "2024"


class TestMigrate:
    """Tests for the migration runner."""

    def test_full_upgrade(self) -> None:
        records = [_legacy_record()]

        version = migrate(0, records)
        record = records[0]

        assert version == CURRENT_SCHEMA_VERSION
        assert record["edition"] == "2014"
        assert record["species"] == "Halfling"
        assert "race" not in record
        assert record["hit_dice"] == {"current": 3, "max": 3, "die_size": 8}
        assert record["skills"] == {}
        assert record["resources"] == []

    def test_rerun_is_noop(self) -> None:
        records = [_legacy_record()]
        migrate(0, records)
        migrated = copy.deepcopy(records)

        migrate(0, records)

        assert records == migrated

    def test_current_store_untouched(self) -> None:
        records = [_legacy_record()]

        assert migrate(CURRENT_SCHEMA_VERSION, records) == CURRENT_SCHEMA_VERSION
        assert records == [_legacy_record()]

    def test_only_later_steps_run(self) -> None:
        records = [{"name": "Mid", "class_name": "Wizard", "species": "Elf", "race": "Elf"}]

        migrate(2, records)

        assert "edition" not in records[0]
        assert "race" not in records[0]
        assert records[0]["hit_dice"]["die_size"] == 6

    def test_spellcasting_defaults(self) -> None:
        records = [_legacy_record() | {"spellcasting": {"ability": "intelligence"}}]
        migrate(0, records)

        spellcasting = records[0]["spellcasting"]
        assert spellcasting["spell_slots"] == [0] * 9
        assert spellcasting["cantrip_choices_by_level"] == {}

    def test_empty_store(self) -> None:
        assert migrate(0, []) == CURRENT_SCHEMA_VERSION

    def test_newer_store(self) -> None:
        with pytest.raises(MigrationError) as exc_info:
            migrate(CURRENT_SCHEMA_VERSION + 1, [])

        assert exc_info.value.details["version"] == CURRENT_SCHEMA_VERSION + 1

    def test_non_object_record(self) -> None:
        with pytest.raises(MigrationError) as exc_info:
            migrate(0, [_legacy_record(), ["not", "a", "record"]])

        assert exc_info.value.details["index"] == 1
        assert exc_info.value.details["type"] == "list"


class TestEnsureMandatoryFields:
    """Tests for the read-time fallback."""

    def test_complete_record_unchanged(self) -> None:
        record = _legacy_record() | {"edition": "2024"}
        assert ensure_mandatory_fields(record) == record

    def test_empty_record(self) -> None:
        patched = ensure_mandatory_fields({})

        assert patched["id"]
        assert patched["name"] == "Unnamed Adventurer"
        assert patched["class_name"] == "Fighter"
        assert patched["edition"] == "2014"
        assert patched["level"] == 1
        assert patched["max_hit_points"] == 1
        assert patched["hit_points"] == 1

    def test_level_clamped(self) -> None:
        assert ensure_mandatory_fields(_legacy_record() | {"level": 25})["level"] == 20
        assert ensure_mandatory_fields(_legacy_record() | {"level": 0})["level"] == 1

    def test_max_hp_from_current(self) -> None:
        patched = ensure_mandatory_fields(_legacy_record() | {"max_hit_points": None, "hit_points": 14})
        assert patched["max_hit_points"] == 14

    def test_input_not_mutated(self) -> None:
        record: dict = {"name": ""}
        ensure_mandatory_fields(record)
        assert record == {"name": ""}
