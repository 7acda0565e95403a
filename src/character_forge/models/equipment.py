"""D&D 5E equipment catalog.

Static, read-only reference data for armor, shields and weapons based on
the Player's Handbook (chapter 5). The catalog is built once per process
through ``get_catalog()`` and never mutated by the engine.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

from character_forge.core.exceptions import UnknownEquipmentError
from character_forge.models.enums import ArmorCategory, DamageType, EquipmentCategory, WeaponCategory


class EquipmentCatalogEntry(BaseModel):
    """One catalog item.

    Attributes:
        slug: Stable identifier (e.g. ``"chain-mail"``).
        name: Display name.
        equipment_category: Armor, weapon or gear.
        armor_category: Light, Medium, Heavy or Shield for armor.
        base_ac: Base armor class (shield: the bonus it grants).
        max_dex_bonus: Dexterity cap for medium armor, None when unspecified.
        weapon_category: Simple or Martial for weapons.
        damage_dice: Weapon damage dice (e.g. ``"1d8"``).
        damage_type: Weapon damage type.
        properties: Weapon properties (finesse, light, ...).
        strength_requirement: Minimum Strength to avoid a speed penalty.
        stealth_disadvantage: Whether the armor hinders Stealth.
        weight: Weight in pounds.
        cost_cp: Price in copper pieces.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    slug: str
    name: str
    equipment_category: EquipmentCategory
    armor_category: ArmorCategory | None = None
    base_ac: int | None = None
    max_dex_bonus: int | None = None
    weapon_category: WeaponCategory | None = None
    damage_dice: str | None = None
    damage_type: DamageType | None = None
    properties: tuple[str, ...] = ()
    strength_requirement: int | None = None
    stealth_disadvantage: bool = False
    weight: float = Field(default=0.0, ge=0)
    cost_cp: int = Field(default=0, ge=0)

    @property
    def is_armor(self) -> bool:
        return self.equipment_category == EquipmentCategory.ARMOR and not self.is_shield

    @property
    def is_shield(self) -> bool:
        return self.armor_category == ArmorCategory.SHIELD

    @property
    def is_weapon(self) -> bool:
        return self.equipment_category == EquipmentCategory.WEAPON


def _armor(
    slug: str,
    name: str,
    category: ArmorCategory,
    base_ac: int,
    *,
    max_dex: int | None = None,
    strength: int | None = None,
    stealth: bool = False,
    weight: float,
    cost_gp: int,
) -> EquipmentCatalogEntry:
    return EquipmentCatalogEntry(
        slug=slug,
        name=name,
        equipment_category=EquipmentCategory.ARMOR,
        armor_category=category,
        base_ac=base_ac,
        max_dex_bonus=max_dex,
        strength_requirement=strength,
        stealth_disadvantage=stealth,
        weight=weight,
        cost_cp=cost_gp * 100,
    )


def _weapon(
    slug: str,
    name: str,
    category: WeaponCategory,
    damage_dice: str,
    damage_type: DamageType,
    *properties: str,
    weight: float,
    cost_cp: int,
) -> EquipmentCatalogEntry:
    return EquipmentCatalogEntry(
        slug=slug,
        name=name,
        equipment_category=EquipmentCategory.WEAPON,
        weapon_category=category,
        damage_dice=damage_dice,
        damage_type=damage_type,
        properties=properties,
        weight=weight,
        cost_cp=cost_cp,
    )


_LIGHT = ArmorCategory.LIGHT
_MEDIUM = ArmorCategory.MEDIUM
_HEAVY = ArmorCategory.HEAVY
_SIMPLE = WeaponCategory.SIMPLE
_MARTIAL = WeaponCategory.MARTIAL

# =============================================================================
# Armor (PHB p.145)
# =============================================================================

ARMOR: tuple[EquipmentCatalogEntry, ...] = (
    _armor("padded", "Padded Armor", _LIGHT, 11, stealth=True, weight=8, cost_gp=5),
    _armor("leather", "Leather Armor", _LIGHT, 11, weight=10, cost_gp=10),
    _armor("studded-leather", "Studded Leather Armor", _LIGHT, 12, weight=13, cost_gp=45),
    _armor("hide", "Hide Armor", _MEDIUM, 12, max_dex=2, weight=12, cost_gp=10),
    _armor("chain-shirt", "Chain Shirt", _MEDIUM, 13, max_dex=2, weight=20, cost_gp=50),
    _armor("scale-mail", "Scale Mail", _MEDIUM, 14, max_dex=2, stealth=True, weight=45, cost_gp=50),
    _armor("breastplate", "Breastplate", _MEDIUM, 14, max_dex=2, weight=20, cost_gp=400),
    _armor("half-plate", "Half Plate", _MEDIUM, 15, max_dex=2, stealth=True, weight=40, cost_gp=750),
    _armor("ring-mail", "Ring Mail", _HEAVY, 14, stealth=True, weight=40, cost_gp=30),
    _armor("chain-mail", "Chain Mail", _HEAVY, 16, strength=13, stealth=True, weight=55, cost_gp=75),
    _armor("splint", "Splint Armor", _HEAVY, 17, strength=15, stealth=True, weight=60, cost_gp=200),
    _armor("plate", "Plate Armor", _HEAVY, 18, strength=15, stealth=True, weight=65, cost_gp=1500),
    _armor("shield", "Shield", ArmorCategory.SHIELD, 2, weight=6, cost_gp=10),
)

# =============================================================================
# Weapons (PHB p.149)
# =============================================================================

_B = DamageType.BLUDGEONING
_P = DamageType.PIERCING
_S = DamageType.SLASHING

WEAPONS: tuple[EquipmentCatalogEntry, ...] = (
    _weapon("club", "Club", _SIMPLE, "1d4", _B, "light", weight=2, cost_cp=10),
    _weapon("dagger", "Dagger", _SIMPLE, "1d4", _P, "finesse", "light", "thrown", weight=1, cost_cp=200),
    _weapon("greatclub", "Greatclub", _SIMPLE, "1d8", _B, "two-handed", weight=10, cost_cp=20),
    _weapon("handaxe", "Handaxe", _SIMPLE, "1d6", _S, "light", "thrown", weight=2, cost_cp=500),
    _weapon("javelin", "Javelin", _SIMPLE, "1d6", _P, "thrown", weight=2, cost_cp=50),
    _weapon("mace", "Mace", _SIMPLE, "1d6", _B, weight=4, cost_cp=500),
    _weapon("quarterstaff", "Quarterstaff", _SIMPLE, "1d6", _B, "versatile", weight=4, cost_cp=20),
    _weapon("spear", "Spear", _SIMPLE, "1d6", _P, "thrown", "versatile", weight=3, cost_cp=100),
    _weapon("light-crossbow", "Light Crossbow", _SIMPLE, "1d8", _P, "ammunition", "loading", "two-handed", weight=5, cost_cp=2500),
    _weapon("shortbow", "Shortbow", _SIMPLE, "1d6", _P, "ammunition", "two-handed", weight=2, cost_cp=2500),
    _weapon("battleaxe", "Battleaxe", _MARTIAL, "1d8", _S, "versatile", weight=4, cost_cp=1000),
    _weapon("greataxe", "Greataxe", _MARTIAL, "1d12", _S, "heavy", "two-handed", weight=7, cost_cp=3000),
    _weapon("greatsword", "Greatsword", _MARTIAL, "2d6", _S, "heavy", "two-handed", weight=6, cost_cp=5000),
    _weapon("longsword", "Longsword", _MARTIAL, "1d8", _S, "versatile", weight=3, cost_cp=1500),
    _weapon("rapier", "Rapier", _MARTIAL, "1d8", _P, "finesse", weight=2, cost_cp=2500),
    _weapon("scimitar", "Scimitar", _MARTIAL, "1d6", _S, "finesse", "light", weight=3, cost_cp=2500),
    _weapon("shortsword", "Shortsword", _MARTIAL, "1d6", _P, "finesse", "light", weight=2, cost_cp=1000),
    _weapon("warhammer", "Warhammer", _MARTIAL, "1d8", _B, "versatile", weight=2, cost_cp=1500),
    _weapon("longbow", "Longbow", _MARTIAL, "1d8", _P, "ammunition", "heavy", "two-handed", weight=2, cost_cp=5000),
)


class EquipmentCatalog(Mapping[str, EquipmentCatalogEntry]):
    """Read-only lookup of catalog entries by slug."""

    def __init__(self, entries: tuple[EquipmentCatalogEntry, ...] | list[EquipmentCatalogEntry]) -> None:
        self._entries = {entry.slug: entry for entry in entries}

    def __getitem__(self, slug: str) -> EquipmentCatalogEntry:
        return self._entries[slug]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def require(self, slug: str) -> EquipmentCatalogEntry:
        """Get an entry, raising UnknownEquipmentError when the slug is unknown."""
        try:
            return self._entries[slug]
        except KeyError as exc:
            raise UnknownEquipmentError(f"Unknown equipment: {slug}", slug=slug) from exc

    @property
    def shield_slugs(self) -> frozenset[str]:
        return frozenset(slug for slug, entry in self._entries.items() if entry.is_shield)


@lru_cache(maxsize=1)
def get_catalog() -> EquipmentCatalog:
    """Get the process-wide equipment catalog."""
    return EquipmentCatalog(ARMOR + WEAPONS)


__all__ = [
    "EquipmentCatalogEntry",
    "EquipmentCatalog",
    "ARMOR",
    "WEAPONS",
    "get_catalog",
]
