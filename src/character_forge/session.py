"""Character session facade.

A ``CharacterSession`` owns one store, one roll history and one dice
roller. It loads and saves characters and forwards engine operations,
saving every applied change before handing the result back.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from character_forge.core.config import get_settings
from character_forge.core.constants import MAX_LEVEL
from character_forge.core.exceptions import ValidationError
from character_forge.core.logging import character_context, get_logger
from character_forge.engine import (
    DiceRoller,
    RollHistory,
    add_item,
    apply_ability_score_improvement,
    apply_derived_stats,
    choose_feat,
    choose_subclass,
    compute_derived_stats,
    create_character,
    equip_armor,
    equip_weapon,
    learn_cantrip,
    level_down,
    level_up,
    long_rest,
    short_rest,
    spend_resource,
    unequip_armor,
    unequip_weapon,
)
from character_forge.models.character import Character
from character_forge.models.dice import DiceRoll
from character_forge.models.enums import Ability, RollType, Skill
from character_forge.models.equipment import EquipmentCatalog, EquipmentCatalogEntry, get_catalog
from character_forge.models.progression import get_hit_die
from character_forge.models.results import CharacterUpdate
from character_forge.storage import CharacterDatabase


logger = get_logger(__name__)


class CharacterSession:
    """Entry point tying the rules engine to persistence.

    Example:
        >>> session = CharacterSession(tmp_path / "forge.db")
        >>> hero = session.create_character("Thorin", "Fighter")
        >>> result = session.level_up(hero)
        >>> session.load_character(hero.id).level
        2
    """

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        seed: int | None = None,
        catalog: EquipmentCatalog | None = None,
    ) -> None:
        """Open the store and restore the persisted roll history.

        Args:
            db_path: Database file. Defaults to the storage settings.
            seed: Optional random seed for reproducible rolls.
            catalog: Equipment catalog. Defaults to the built-in catalog.
        """
        self.database = CharacterDatabase(db_path)
        self.history = RollHistory(store=self.database)
        self.roller = DiceRoller(history=self.history, seed=seed)
        self.catalog = catalog or get_catalog()

    @property
    def recent_rolls(self) -> tuple[DiceRoll, ...]:
        return self.history.rolls

    # =========================================================================
    # Persistence
    # =========================================================================

    def create_character(self, name: str, class_name: str, **kwargs: Any) -> Character:
        """Create and save a new character. See ``create_character``."""
        character = create_character(name, class_name, **kwargs)
        self.database.save_character(character)
        return character

    def load_character(self, character_id: str) -> Character | None:
        """Load a character with resources and derived numbers refreshed."""
        character = self.database.get_character(character_id)
        if character is None:
            return None
        return apply_derived_stats(character, self.catalog)

    def save_character(self, character: Character) -> None:
        self.database.save_character(character)

    def list_characters(self) -> list[Character]:
        return self.database.list_characters()

    def delete_character(self, character_id: str) -> bool:
        return self.database.delete_character(character_id)

    def _commit(self, update: CharacterUpdate) -> CharacterUpdate:
        if update.applied:
            self.database.save_character(update.character)
        else:
            logger.debug("Update declined", character_id=update.character.id, reason=update.reason)
        return update

    def _apply(self, character: Character, operation: Any, *args: Any, **kwargs: Any) -> CharacterUpdate:
        """Run an engine operation with the character bound to the log context, then commit."""
        with character_context(character.id, character_name=character.name):
            return self._commit(operation(character, *args, **kwargs))

    # =========================================================================
    # Engine Operations
    # =========================================================================

    def level_up(self, character: Character, *, hp_roll: int | None = None) -> CharacterUpdate:
        """Level up, rolling the hit die when the rules settings ask for it."""
        if hp_roll is None and character.level < MAX_LEVEL and get_settings().rules.hp_method == "roll":
            hit_die = get_hit_die(character.class_name)
            hp_roll = self.roller.roll_hit_die(hit_die, 0).dice_results[0]
        return self._apply(character, level_up, hp_roll=hp_roll)

    def level_down(self, character: Character) -> CharacterUpdate:
        return self._apply(character, level_down)

    def apply_ability_score_improvement(
        self, character: Character, increases: Mapping[Ability, int]
    ) -> CharacterUpdate:
        return self._apply(character, apply_ability_score_improvement, increases)

    def choose_feat(self, character: Character, feat: str) -> CharacterUpdate:
        return self._apply(character, choose_feat, feat)

    def choose_subclass(self, character: Character, subclass: str) -> CharacterUpdate:
        return self._apply(character, choose_subclass, subclass)

    def learn_cantrip(self, character: Character, cantrip: str) -> CharacterUpdate:
        return self._apply(character, learn_cantrip, cantrip)

    def spend_resource(self, character: Character, resource_id: str, uses: int = 1) -> CharacterUpdate:
        return self._apply(character, spend_resource, resource_id, uses)

    def short_rest(self, character: Character, hit_dice_to_spend: int = 0) -> CharacterUpdate:
        return self._apply(character, short_rest, hit_dice_to_spend, self.roller)

    def long_rest(self, character: Character) -> CharacterUpdate:
        return self._apply(character, long_rest)

    def add_item(self, character: Character, slug: str, quantity: int = 1) -> CharacterUpdate:
        return self._apply(character, add_item, slug, quantity, self.catalog)

    def equip_armor(self, character: Character, slug: str) -> CharacterUpdate:
        return self._apply(character, equip_armor, slug, self.catalog)

    def unequip_armor(self, character: Character) -> CharacterUpdate:
        return self._apply(character, unequip_armor, self.catalog)

    def equip_weapon(self, character: Character, slug: str) -> CharacterUpdate:
        return self._apply(character, equip_weapon, slug, self.catalog)

    def unequip_weapon(self, character: Character, slug: str) -> CharacterUpdate:
        return self._apply(character, unequip_weapon, slug, self.catalog)

    # =========================================================================
    # Character-aware Rolls
    # =========================================================================

    def roll_ability_check(
        self, character: Character, ability: Ability, *, roll_type: RollType = RollType.NORMAL
    ) -> DiceRoll:
        return self.roller.roll_ability(ability, character.ability_modifier(ability), roll_type=roll_type)

    def roll_skill_check(
        self, character: Character, skill: Skill, *, roll_type: RollType = RollType.NORMAL
    ) -> DiceRoll:
        bonus = compute_derived_stats(character).skills[Skill(skill)]
        return self.roller.roll_skill(skill, bonus, roll_type=roll_type)

    def roll_saving_throw(
        self, character: Character, ability: Ability, *, roll_type: RollType = RollType.NORMAL
    ) -> DiceRoll:
        bonus = compute_derived_stats(character).saving_throws[Ability(ability)]
        return self.roller.roll_saving_throw(ability, bonus, roll_type=roll_type)

    def roll_initiative(self, character: Character, *, roll_type: RollType = RollType.NORMAL) -> DiceRoll:
        return self.roller.roll_initiative(compute_derived_stats(character).initiative, roll_type=roll_type)

    def _weapon_modifier(self, character: Character, weapon: EquipmentCatalogEntry) -> int:
        """Ability modifier for a weapon: DEX for ranged, the better of STR/DEX for finesse."""
        strength = character.ability_modifier(Ability.STR)
        dexterity = character.ability_modifier(Ability.DEX)
        if "ammunition" in weapon.properties:
            return dexterity
        if "finesse" in weapon.properties:
            return max(strength, dexterity)
        return strength

    def roll_attack(
        self, character: Character, weapon_slug: str, *, roll_type: RollType = RollType.NORMAL
    ) -> DiceRoll:
        """Roll an attack with a catalog weapon, assuming proficiency.

        Raises:
            UnknownEquipmentError: If the slug is not in the catalog.
        """
        weapon = self.catalog.require(weapon_slug)
        bonus = self._weapon_modifier(character, weapon) + character.proficiency_bonus
        return self.roller.roll_attack(weapon.name, bonus, roll_type=roll_type)

    def roll_damage(self, character: Character, weapon_slug: str, *, critical_hit: bool = False) -> DiceRoll:
        """Roll damage for a catalog weapon.

        Raises:
            UnknownEquipmentError: If the slug is not in the catalog.
            ValidationError: If the item has no damage dice.
        """
        weapon = self.catalog.require(weapon_slug)
        if not weapon.damage_dice:
            raise ValidationError(
                f"{weapon.name} deals no damage", field_name="weapon_slug", invalid_value=weapon_slug
            )
        return self.roller.roll_damage(
            weapon.name,
            weapon.damage_dice,
            self._weapon_modifier(character, weapon),
            damage_type=str(weapon.damage_type) if weapon.damage_type else None,
            critical_hit=critical_hit,
        )


__all__ = ["CharacterSession"]
