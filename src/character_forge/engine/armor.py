"""Armor class resolution.

Rule table, evaluated in order:

1. No armor: 10 + DEX modifier.
2. Light armor: base + DEX modifier (negative modifiers apply).
3. Medium armor: base + min(DEX modifier, max bonus), max bonus defaulting
   to 2. Negative modifiers are not floored.
4. Heavy armor: base only, DEX ignored.

A shield adds a flat +2 on top of whichever branch applies.
"""

from __future__ import annotations

from character_forge.core.constants import (
    DEFAULT_MEDIUM_ARMOR_MAX_DEX,
    SHIELD_AC_BONUS,
    UNARMORED_BASE_AC,
)
from character_forge.core.logging import get_logger
from character_forge.models.character import Character
from character_forge.models.enums import Ability, ArmorCategory
from character_forge.models.equipment import EquipmentCatalog, EquipmentCatalogEntry, get_catalog


logger = get_logger(__name__)


def resolve_armor_class(
    dex_modifier: int,
    equipped_armor: EquipmentCatalogEntry | None = None,
    has_shield: bool = False,
) -> int:
    """Compute armor class from Dexterity, body armor and shield.

    Args:
        dex_modifier: The wearer's Dexterity modifier.
        equipped_armor: Catalog entry of the worn body armor, if any. A
            shield entry passed here counts as no body armor.
        has_shield: Whether a shield is among the equipped items.

    Returns:
        The resulting armor class.

    Example:
        >>> chain_mail = get_catalog()["chain-mail"]
        >>> resolve_armor_class(3, chain_mail, has_shield=True)
        18
    """
    if equipped_armor is None or equipped_armor.is_shield:
        armor_class = UNARMORED_BASE_AC + dex_modifier
    else:
        base = equipped_armor.base_ac if equipped_armor.base_ac is not None else UNARMORED_BASE_AC
        category = equipped_armor.armor_category
        if category == ArmorCategory.LIGHT:
            armor_class = base + dex_modifier
        elif category == ArmorCategory.MEDIUM:
            cap = (
                equipped_armor.max_dex_bonus
                if equipped_armor.max_dex_bonus is not None
                else DEFAULT_MEDIUM_ARMOR_MAX_DEX
            )
            armor_class = base + min(dex_modifier, cap)
        else:
            armor_class = base

    if has_shield:
        armor_class += SHIELD_AC_BONUS
    return armor_class


def equipped_armor_entry(
    character: Character,
    catalog: EquipmentCatalog | None = None,
) -> EquipmentCatalogEntry | None:
    """Look up the character's body armor in the catalog.

    Unknown slugs are treated as no armor and logged, so a stale record
    still renders.
    """
    if not character.equipped_armor:
        return None
    catalog = catalog or get_catalog()
    entry = catalog.get(character.equipped_armor)
    if entry is None:
        logger.warning(
            "Equipped armor not in catalog, treating as unarmored",
            character_id=character.id,
            slug=character.equipped_armor,
        )
    return entry


def has_shield_equipped(character: Character, catalog: EquipmentCatalog | None = None) -> bool:
    """Check for a shield among equipped weapons (or a legacy armor slot)."""
    catalog = catalog or get_catalog()
    shields = catalog.shield_slugs
    return character.has_shield_equipped(shields) or character.equipped_armor in shields


def armor_class_for(character: Character, catalog: EquipmentCatalog | None = None) -> int:
    """Resolve armor class for a character's current equipment."""
    catalog = catalog or get_catalog()
    return resolve_armor_class(
        character.ability_modifier(Ability.DEX),
        equipped_armor_entry(character, catalog),
        has_shield_equipped(character, catalog),
    )


__all__ = [
    "resolve_armor_class",
    "equipped_armor_entry",
    "has_shield_equipped",
    "armor_class_for",
]
