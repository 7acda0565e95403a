"""Inventory and equip flows.

Body armor occupies one slot; weapons and shields share two hand slots.
Every change recomputes armor class from the catalog.
"""

from __future__ import annotations

from character_forge.core.constants import MAX_EQUIPPED_WEAPONS
from character_forge.core.exceptions import ValidationError
from character_forge.core.logging import get_logger
from character_forge.engine.armor import armor_class_for
from character_forge.models.character import Character, InventoryEntry
from character_forge.models.equipment import EquipmentCatalog, get_catalog
from character_forge.models.results import CharacterUpdate


logger = get_logger(__name__)


def _set_equipped(character: Character, slug: str, equipped: bool) -> None:
    """Flag an inventory entry, adding one item if the slug is missing."""
    inventory = dict(character.inventory)
    entry = inventory.get(slug)
    if entry is None:
        inventory[slug] = InventoryEntry(quantity=1, equipped=equipped)
    else:
        inventory[slug] = entry.model_copy(update={"equipped": equipped})
    character.inventory = inventory


def _recompute(character: Character, catalog: EquipmentCatalog) -> Character:
    character.armor_class = armor_class_for(character, catalog)
    character.touch()
    return character


def add_item(
    character: Character,
    slug: str,
    quantity: int = 1,
    catalog: EquipmentCatalog | None = None,
) -> CharacterUpdate:
    """Add catalog items to the inventory.

    Raises:
        UnknownEquipmentError: If the slug is not in the catalog.
        ValidationError: If ``quantity`` is less than 1.
    """
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1", field_name="quantity", invalid_value=quantity)
    item = (catalog or get_catalog()).require(slug)

    updated = character.model_copy(deep=True)
    inventory = dict(updated.inventory)
    entry = inventory.get(slug)
    if entry is None:
        inventory[slug] = InventoryEntry(quantity=quantity)
    else:
        inventory[slug] = entry.model_copy(update={"quantity": entry.quantity + quantity})
    updated.inventory = inventory
    updated.touch()

    logger.debug("Item added", character_id=character.id, slug=slug, quantity=quantity)
    return CharacterUpdate(character=updated, reason=f"Added {quantity} x {item.name}")


def equip_armor(
    character: Character,
    slug: str,
    catalog: EquipmentCatalog | None = None,
) -> CharacterUpdate:
    """Wear body armor, replacing any armor already worn.

    Shields are routed to a hand slot through ``equip_weapon``.

    Raises:
        UnknownEquipmentError: If the slug is not in the catalog.
        ValidationError: If the item is not armor.
    """
    catalog = catalog or get_catalog()
    item = catalog.require(slug)
    if item.is_shield:
        return equip_weapon(character, slug, catalog)
    if not item.is_armor:
        raise ValidationError(f"{item.name} is not armor", field_name="slug", invalid_value=slug)
    if character.equipped_armor == slug:
        return CharacterUpdate.declined(character, f"{item.name} is already worn")

    updated = character.model_copy(deep=True)
    if updated.equipped_armor and updated.equipped_armor in updated.inventory:
        _set_equipped(updated, updated.equipped_armor, False)
    updated.equipped_armor = slug
    _set_equipped(updated, slug, True)
    updated = _recompute(updated, catalog)

    logger.info("Armor equipped", character_id=character.id, slug=slug, armor_class=updated.armor_class)
    return CharacterUpdate(character=updated, reason=f"Wearing {item.name} (AC {updated.armor_class})")


def unequip_armor(character: Character, catalog: EquipmentCatalog | None = None) -> CharacterUpdate:
    """Take off body armor."""
    if not character.equipped_armor:
        return CharacterUpdate.declined(character, f"{character.name} is not wearing armor")

    catalog = catalog or get_catalog()
    updated = character.model_copy(deep=True)
    removed = updated.equipped_armor
    if removed in updated.inventory:
        _set_equipped(updated, removed, False)
    updated.equipped_armor = None
    updated = _recompute(updated, catalog)

    logger.info("Armor removed", character_id=character.id, slug=removed, armor_class=updated.armor_class)
    return CharacterUpdate(character=updated, reason=f"Removed armor (AC {updated.armor_class})")


def equip_weapon(
    character: Character,
    slug: str,
    catalog: EquipmentCatalog | None = None,
) -> CharacterUpdate:
    """Ready a weapon or shield in a free hand slot.

    Declined when both hand slots are taken or the item is already held.

    Raises:
        UnknownEquipmentError: If the slug is not in the catalog.
        ValidationError: If the item is neither a weapon nor a shield.
    """
    catalog = catalog or get_catalog()
    item = catalog.require(slug)
    if not (item.is_weapon or item.is_shield):
        raise ValidationError(f"{item.name} cannot be held", field_name="slug", invalid_value=slug)
    if slug in character.equipped_weapons:
        return CharacterUpdate.declined(character, f"{item.name} is already equipped")
    if len(character.equipped_weapons) >= MAX_EQUIPPED_WEAPONS:
        return CharacterUpdate.declined(
            character,
            f"Hands full: unequip one of {', '.join(character.equipped_weapons)} first",
        )

    updated = character.model_copy(deep=True)
    updated.equipped_weapons = [*updated.equipped_weapons, slug]
    _set_equipped(updated, slug, True)
    updated = _recompute(updated, catalog)

    logger.info("Weapon equipped", character_id=character.id, slug=slug)
    return CharacterUpdate(character=updated, reason=f"Equipped {item.name}")


def unequip_weapon(
    character: Character,
    slug: str,
    catalog: EquipmentCatalog | None = None,
) -> CharacterUpdate:
    """Put away a held weapon or shield."""
    if slug not in character.equipped_weapons:
        return CharacterUpdate.declined(character, f"{slug} is not equipped")

    catalog = catalog or get_catalog()
    updated = character.model_copy(deep=True)
    updated.equipped_weapons = [held for held in updated.equipped_weapons if held != slug]
    if slug in updated.inventory:
        _set_equipped(updated, slug, False)
    updated = _recompute(updated, catalog)

    logger.info("Weapon unequipped", character_id=character.id, slug=slug)
    return CharacterUpdate(character=updated, reason=f"Unequipped {slug}")


__all__ = [
    "add_item",
    "equip_armor",
    "unequip_armor",
    "equip_weapon",
    "unequip_weapon",
]
