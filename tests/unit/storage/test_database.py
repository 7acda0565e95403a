"""Tests for SQLite persistence."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

import pytest

from character_forge.core.exceptions import MigrationError, PersistenceError
from character_forge.engine.history import RollHistory
from character_forge.engine.leveling import level_up
from character_forge.engine.resources import spend_resource
from character_forge.models.character import Character
from character_forge.models.dice import DiceRoll
from character_forge.models.enums import Edition, RollKind
from character_forge.storage.database import CharacterDatabase
from character_forge.storage.migrations import CURRENT_SCHEMA_VERSION


def _write_raw(db_path: Path, documents: list[dict], version: int | None = None) -> None:
    """Create a store by hand, the way an older release would have left it."""
    conn = sqlite3.connect(str(db_path))
    conn.execute("""
        CREATE TABLE characters (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            class_name TEXT NOT NULL,
            level INTEGER NOT NULL,
            document_json TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """)
    for document in documents:
        conn.execute(
            "INSERT INTO characters VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                document["id"],
                document.get("name", ""),
                document.get("class_name", ""),
                document.get("level", 1),
                json.dumps(document),
                "2024-01-01T00:00:00",
                "2024-01-01T00:00:00",
            ),
        )
    if version is not None:
        conn.execute("CREATE TABLE schema_version (version INTEGER PRIMARY KEY)")
        conn.execute("INSERT INTO schema_version VALUES (?)", (version,))
    conn.commit()
    conn.close()


def _corrupt(db_path: Path, character_id: str, document_json: str, row_id: str | None = None) -> None:
    """Overwrite a stored document, or insert a copy of its row under ``row_id``."""
    conn = sqlite3.connect(str(db_path))
    if row_id is None:
        conn.execute("UPDATE characters SET document_json = ? WHERE id = ?", (document_json, character_id))
    else:
        conn.execute(
            """
            INSERT INTO characters (id, name, class_name, level, document_json, created_at, updated_at)
            SELECT ?, name, class_name, level, ?, created_at, updated_at FROM characters WHERE id = ?
            """,
            (row_id, document_json, character_id),
        )
    conn.commit()
    conn.close()


def _roll(total: int) -> DiceRoll:
    return DiceRoll(
        kind=RollKind.COMPLEX, label="Test", notation="1d20", dice_results=(total,), total=total
    )


class TestSchema:
    """Tests for opening and versioning the store."""

    def test_new_store_at_current_version(self, database: CharacterDatabase) -> None:
        assert database.schema_version == CURRENT_SCHEMA_VERSION
        assert database.get_character_count() == 0

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        db = CharacterDatabase(tmp_path / "nested" / "dir" / "forge.db")
        assert db.db_path.exists()

    def test_reopen_keeps_version(self, db_path: Path) -> None:
        CharacterDatabase(db_path)
        assert CharacterDatabase(db_path).schema_version == CURRENT_SCHEMA_VERSION

    def test_newer_store_rejected(self, db_path: Path) -> None:
        _write_raw(db_path, [], version=CURRENT_SCHEMA_VERSION + 1)

        with pytest.raises(MigrationError):
            CharacterDatabase(db_path)

    def test_unopenable_path(self, tmp_path: Path) -> None:
        with pytest.raises(PersistenceError):
            CharacterDatabase(tmp_path)


class TestLegacyStore:
    """Tests for upgrading a store written before schema versioning."""

    def test_legacy_record_migrated_on_open(self, db_path: Path) -> None:
        _write_raw(
            db_path,
            [
                {
                    "id": "legacy-1",
                    "name": "Old Timer",
                    "class_name": "Rogue",
                    "level": 3,
                    "race": "Halfling",
                    "max_hit_points": 20,
                    "hit_points": 20,
                }
            ],
        )

        db = CharacterDatabase(db_path)
        character = db.get_character("legacy-1")

        assert db.schema_version == CURRENT_SCHEMA_VERSION
        assert character is not None
        assert character.species == "Halfling"
        assert character.edition == Edition.PHB_2014
        assert (character.hit_dice.max, character.hit_dice.die_size) == (3, 8)

        conn = sqlite3.connect(str(db_path))
        stored = json.loads(conn.execute("SELECT document_json FROM characters").fetchone()[0])
        conn.close()
        assert "race" not in stored
        assert stored["species"] == "Halfling"

    def test_resources_reconciled_on_load(self, db_path: Path) -> None:
        _write_raw(db_path, [{"id": "b-1", "name": "Grog", "class_name": "Barbarian", "level": 3}])

        character = CharacterDatabase(db_path).get_character("b-1")

        rage = character.get_resource("rage")
        assert rage is not None
        assert (rage.current_uses, rage.max_uses) == (3, 3)

    def test_unknown_keys_ignored(self, db_path: Path) -> None:
        _write_raw(
            db_path,
            [{"id": "c-1", "name": "Vex", "class_name": "Ranger", "level": 2, "conditions": ["poisoned"]}],
            version=CURRENT_SCHEMA_VERSION,
        )

        character = CharacterDatabase(db_path).get_character("c-1")

        assert character.name == "Vex"
        assert "conditions" not in character.model_dump()

    def test_missing_mandatory_fields_patched(self, db_path: Path) -> None:
        _write_raw(db_path, [{"id": "w-1", "class_name": "Wizard", "level": 2}], version=CURRENT_SCHEMA_VERSION)

        character = CharacterDatabase(db_path).get_character("w-1")

        assert character.name == "Unnamed Adventurer"
        assert character.max_hit_points == 1

    def test_invalid_record(self, db_path: Path) -> None:
        _write_raw(
            db_path,
            [{"id": "bad", "name": "Bad", "class_name": "Fighter", "abilities": {"strength": 99}}],
            version=CURRENT_SCHEMA_VERSION,
        )

        with pytest.raises(PersistenceError) as exc_info:
            CharacterDatabase(db_path).get_character("bad")

        assert exc_info.value.details["record_id"] == "bad"


class TestCorruptRecords:
    """Tests for stored documents that cannot be read."""

    def test_corrupt_document(self, database: CharacterDatabase, sample_character: Character) -> None:
        database.save_character(sample_character)
        _corrupt(database.db_path, sample_character.id, "{not json")

        with pytest.raises(PersistenceError) as exc_info:
            database.get_character(sample_character.id)

        assert exc_info.value.details["record_id"] == sample_character.id
        assert exc_info.value.details["operation"] == "load_character"

    def test_non_object_document(self, database: CharacterDatabase, sample_character: Character) -> None:
        database.save_character(sample_character)
        _corrupt(database.db_path, sample_character.id, "[1, 2]")

        with pytest.raises(PersistenceError):
            database.get_character(sample_character.id)

    def test_listing_skips_corrupt_document(
        self, database: CharacterDatabase, sample_character: Character, sample_wizard: Character
    ) -> None:
        database.save_character(sample_character)
        database.save_character(sample_wizard)
        _corrupt(database.db_path, sample_character.id, "{not json")

        assert [c.name for c in database.list_characters()] == ["Elara"]

    def test_corrupt_document_during_migration(self, db_path: Path) -> None:
        _write_raw(db_path, [{"id": "ok", "name": "Grog", "class_name": "Barbarian", "level": 2, "race": "Goliath"}])
        _corrupt(db_path, "ok", "{not json", row_id="bad")

        db = CharacterDatabase(db_path)

        assert db.schema_version == CURRENT_SCHEMA_VERSION
        assert db.get_character("ok").species == "Goliath"
        with pytest.raises(PersistenceError):
            db.get_character("bad")


class TestCharacterOperations:
    """Tests for character CRUD."""

    def test_round_trip(self, database: CharacterDatabase, sample_character: Character) -> None:
        database.save_character(sample_character)
        loaded = database.get_character(sample_character.id)

        assert loaded is not None
        assert loaded.model_dump() == sample_character.model_dump()

    def test_resource_uses_persisted(self, database: CharacterDatabase, sample_character: Character) -> None:
        spent = spend_resource(sample_character, "second-wind").character
        database.save_character(spent)

        loaded = database.get_character(spent.id)

        assert loaded.get_resource("second-wind").current_uses == 0

    def test_missing(self, database: CharacterDatabase) -> None:
        assert database.get_character("nope") is None

    def test_save_replaces(self, database: CharacterDatabase, sample_character: Character) -> None:
        database.save_character(sample_character)
        database.save_character(level_up(sample_character).character)

        assert database.get_character_count() == 1
        assert database.get_character(sample_character.id).level == 2

    def test_list_most_recent_first(
        self, database: CharacterDatabase, sample_character: Character, sample_wizard: Character
    ) -> None:
        database.save_character(sample_character)
        database.save_character(sample_wizard)
        database.save_character(sample_character)

        assert [c.name for c in database.list_characters()] == ["Thorin", "Elara"]

    def test_delete(self, database: CharacterDatabase, sample_character: Character) -> None:
        database.save_character(sample_character)

        assert database.delete_character(sample_character.id)
        assert not database.delete_character(sample_character.id)
        assert database.get_character_count() == 0


class TestRollHistoryOperations:
    """Tests for the persisted roll history."""

    def test_empty(self, database: CharacterDatabase) -> None:
        assert database.load_roll_history() == []

    def test_save_keeps_newest(self, db_path: Path) -> None:
        db = CharacterDatabase(db_path, history_limit=10)
        db.save_roll_history([_roll(total) for total in range(1, 13)])

        loaded = db.load_roll_history()

        assert [roll.total for roll in loaded] == list(range(3, 13))

    def test_history_survives_reopen(self, db_path: Path) -> None:
        history = RollHistory(capacity=10, store=CharacterDatabase(db_path))
        history.record(_roll(7))
        history.record(_roll(12))

        reopened = RollHistory(capacity=10, store=CharacterDatabase(db_path))

        assert [roll.total for roll in reopened] == [7, 12]
        assert reopened.latest.id == history.latest.id
