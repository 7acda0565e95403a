"""Storage module for Character Forge persistence.

Provides SQLite-based storage for:
- Character records (migrated to the current schema on open)
- The recent roll history
"""

from character_forge.storage.database import CharacterDatabase
from character_forge.storage.migrations import (
    CURRENT_SCHEMA_VERSION,
    MIGRATIONS,
    MigrationStep,
    ensure_mandatory_fields,
    migrate,
)

__all__ = [
    "CharacterDatabase",
    "CURRENT_SCHEMA_VERSION",
    "MIGRATIONS",
    "MigrationStep",
    "ensure_mandatory_fields",
    "migrate",
]
