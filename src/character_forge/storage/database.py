"""SQLite persistence layer for Character Forge.

Provides persistent storage for:
- Character records (one JSON document per character, replaced whole)
- The recent roll history (a capped, ordered list)

Opening a store reads its schema version and runs pending migrations over
every stored record before any query is served.

Default location: ``data/character_forge.db`` (see ``StorageSettings``).
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Generator, Sequence
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from character_forge.core.config import get_settings
from character_forge.core.exceptions import PersistenceError
from character_forge.core.logging import get_logger
from character_forge.engine.resources import with_refreshed_resources
from character_forge.models.character import Character
from character_forge.models.dice import DiceRoll
from character_forge.storage.migrations import (
    CURRENT_SCHEMA_VERSION,
    ensure_mandatory_fields,
    migrate,
)


logger = get_logger(__name__)


class CharacterDatabase:
    """SQLite store for characters and roll history.

    Example:
        >>> db = CharacterDatabase(tmp_path / "forge.db")
        >>> db.save_character(character)
        >>> db.get_character(character.id).name
        'Thorin'
    """

    SCHEMA_VERSION = CURRENT_SCHEMA_VERSION

    def __init__(self, db_path: str | Path | None = None, *, history_limit: int | None = None) -> None:
        """Open the store, creating and migrating it as needed.

        Args:
            db_path: Path to the database file. Defaults to the storage settings.
            history_limit: Rolls kept in the persisted history. Defaults to
                the dice settings.
        """
        settings = get_settings()
        self.db_path = Path(db_path) if db_path is not None else settings.storage.database_path
        self.history_limit = history_limit or settings.dice.history_size

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_schema()
        self._run_migrations()

        logger.info("Database initialized", path=str(self.db_path), schema_version=self.schema_version)

    @contextmanager
    def _get_connection(
        self,
        operation: str,
        record_id: str | None = None,
    ) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup.

        Raises:
            PersistenceError: If SQLite fails; the transaction is rolled back.
        """
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as exc:
            raise PersistenceError(
                f"Cannot open database: {exc}", operation=operation, record_id=record_id
            ) from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise PersistenceError(
                f"Database {operation} failed: {exc}", operation=operation, record_id=record_id
            ) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Create tables if they do not exist."""
        with self._get_connection("init_schema") as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS characters (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    class_name TEXT NOT NULL,
                    level INTEGER NOT NULL,
                    document_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS roll_history (
                    position INTEGER PRIMARY KEY,
                    roll_json TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_characters_updated
                ON characters(updated_at DESC)
            """)

    # =========================================================================
    # Schema Version and Migrations
    # =========================================================================

    @property
    def schema_version(self) -> int:
        """Schema version of the stored records (0 for an untagged store)."""
        with self._get_connection("read_schema_version") as conn:
            row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
            return row[0] if row and row[0] is not None else 0

    def _run_migrations(self) -> None:
        """Migrate every stored record to the current schema, once per open."""
        store_version = self.schema_version
        if store_version == self.SCHEMA_VERSION:
            return

        with self._get_connection("migrate") as conn:
            rows = []
            records = []
            for row in conn.execute("SELECT id, document_json FROM characters").fetchall():
                try:
                    records.append(self._decode(row["id"], row["document_json"], "migrate"))
                except PersistenceError as exc:
                    # Left as stored; reading it raises the same error
                    logger.warning("Skipping unreadable record", record_id=row["id"], error=exc.message)
                    continue
                rows.append(row)
            new_version = migrate(store_version, records)

            for row, record in zip(rows, records):
                conn.execute(
                    """
                    UPDATE characters
                    SET name = ?, class_name = ?, level = ?, document_json = ?
                    WHERE id = ?
                    """,
                    (
                        record.get("name") or "",
                        record.get("class_name") or "",
                        record.get("level") or 1,
                        json.dumps(record, default=str),
                        row["id"],
                    ),
                )
            conn.execute("DELETE FROM schema_version")
            conn.execute("INSERT INTO schema_version (version) VALUES (?)", (new_version,))

        logger.info(
            "Store migrated",
            from_version=store_version,
            to_version=new_version,
            records=len(records),
        )

    # =========================================================================
    # Character Operations
    # =========================================================================

    def save_character(self, character: Character) -> None:
        """Insert or replace a character document.

        Raises:
            PersistenceError: If the write fails.
        """
        document = json.dumps(character.model_dump(mode="json"))
        with self._get_connection("save_character", character.id) as conn:
            conn.execute(
                """
                INSERT INTO characters (id, name, class_name, level, document_json, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    class_name = excluded.class_name,
                    level = excluded.level,
                    document_json = excluded.document_json,
                    updated_at = excluded.updated_at
                """,
                (
                    character.id,
                    character.name,
                    character.class_name,
                    character.level,
                    document,
                    character.created_at.isoformat(),
                    datetime.now().isoformat(),
                ),
            )

        logger.info("Character saved", character_id=character.id, level=character.level)

    @staticmethod
    def _decode(record_id: str, document_json: str, operation: str) -> dict[str, Any]:
        """Parse a stored document, which must be a JSON object.

        Raises:
            PersistenceError: If the document is not valid JSON or not an object.
        """
        try:
            record = json.loads(document_json)
        except json.JSONDecodeError as exc:
            raise PersistenceError(
                f"Stored character is not valid JSON: {exc.msg}",
                operation=operation,
                record_id=record_id,
            ) from exc
        if not isinstance(record, dict):
            raise PersistenceError(
                f"Stored character is a {type(record).__name__}, not an object",
                operation=operation,
                record_id=record_id,
            )
        return record

    def _load(self, record_id: str, document_json: str) -> Character:
        record = ensure_mandatory_fields(self._decode(record_id, document_json, "load_character"))
        try:
            character = Character.model_validate(record)
        except PydanticValidationError as exc:
            raise PersistenceError(
                f"Stored character is invalid: {exc.error_count()} error(s)",
                operation="load_character",
                record_id=record_id,
            ) from exc
        return with_refreshed_resources(character)

    def get_character(self, character_id: str) -> Character | None:
        """Get a character by ID.

        Returns:
            The character with resources reconciled, or None if not found.

        Raises:
            PersistenceError: If the read fails or the record cannot be
                validated.
        """
        with self._get_connection("get_character", character_id) as conn:
            row = conn.execute(
                "SELECT document_json FROM characters WHERE id = ?", (character_id,)
            ).fetchone()

        if row is None:
            return None
        return self._load(character_id, row["document_json"])

    def list_characters(self) -> list[Character]:
        """Get every readable character, most recently updated first.

        Records that cannot be loaded are skipped with a warning;
        ``get_character`` raises for them.
        """
        with self._get_connection("list_characters") as conn:
            rows = conn.execute(
                "SELECT id, document_json FROM characters ORDER BY updated_at DESC"
            ).fetchall()
        characters = []
        for row in rows:
            try:
                characters.append(self._load(row["id"], row["document_json"]))
            except PersistenceError as exc:
                logger.warning("Skipping unreadable character", record_id=row["id"], error=exc.message)
        return characters

    def delete_character(self, character_id: str) -> bool:
        """Delete a character.

        Returns:
            True if deleted, False if not found.
        """
        with self._get_connection("delete_character", character_id) as conn:
            deleted = conn.execute("DELETE FROM characters WHERE id = ?", (character_id,)).rowcount > 0

        if deleted:
            logger.info("Character deleted", character_id=character_id)
        return deleted

    def get_character_count(self) -> int:
        with self._get_connection("count_characters") as conn:
            return conn.execute("SELECT COUNT(*) FROM characters").fetchone()[0]

    # =========================================================================
    # Roll History Operations
    # =========================================================================

    def load_roll_history(self) -> list[DiceRoll]:
        """Get the persisted rolls, oldest first."""
        with self._get_connection("load_roll_history") as conn:
            rows = conn.execute("SELECT roll_json FROM roll_history ORDER BY position").fetchall()
        return [DiceRoll.model_validate_json(row["roll_json"]) for row in rows]

    def save_roll_history(self, rolls: Sequence[DiceRoll]) -> None:
        """Replace the persisted history with the newest ``history_limit`` rolls."""
        kept = list(rolls)[-self.history_limit:]
        with self._get_connection("save_roll_history") as conn:
            conn.execute("DELETE FROM roll_history")
            conn.executemany(
                "INSERT INTO roll_history (position, roll_json) VALUES (?, ?)",
                [(position, roll.model_dump_json()) for position, roll in enumerate(kept)],
            )


__all__ = ["CharacterDatabase"]
