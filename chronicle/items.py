"""
Standard item database.

A representative set of weapons, armor, potions and adventuring gear. Lookups
are case-insensitive and always return fresh instances, so callers may mutate
what they get back.
"""

from dataclasses import dataclass
from typing import Optional

from chronicle.world.health import DamageType
from chronicle.world.inventory import (
    ArmorItem,
    ArmorType,
    Item,
    ItemType,
    WeaponItem,
    WeaponProperty,
)

F = WeaponProperty.FINESSE
L = WeaponProperty.LIGHT
H = WeaponProperty.HEAVY
TWO = WeaponProperty.TWO_HANDED
V = WeaponProperty.VERSATILE
T = WeaponProperty.THROWN
AMMO = WeaponProperty.AMMUNITION
LOAD = WeaponProperty.LOADING
R = WeaponProperty.REACH


# name: (damage dice, damage type, properties, ranged, weight, value gp)
_WEAPONS = {
    "club": ("1d4", DamageType.BLUDGEONING, [L], False, 2.0, 0.1),
    "dagger": ("1d4", DamageType.PIERCING, [F, L, T], False, 1.0, 2.0),
    "handaxe": ("1d6", DamageType.SLASHING, [L, T], False, 2.0, 5.0),
    "mace": ("1d6", DamageType.BLUDGEONING, [], False, 4.0, 5.0),
    "quarterstaff": ("1d6", DamageType.BLUDGEONING, [V], False, 4.0, 0.2),
    "spear": ("1d6", DamageType.PIERCING, [T, V], False, 3.0, 1.0),
    "shortsword": ("1d6", DamageType.PIERCING, [F, L], False, 2.0, 10.0),
    "scimitar": ("1d6", DamageType.SLASHING, [F, L], False, 3.0, 25.0),
    "rapier": ("1d8", DamageType.PIERCING, [F], False, 2.0, 25.0),
    "longsword": ("1d8", DamageType.SLASHING, [V], False, 3.0, 15.0),
    "battleaxe": ("1d8", DamageType.SLASHING, [V], False, 4.0, 10.0),
    "warhammer": ("1d8", DamageType.BLUDGEONING, [V], False, 2.0, 15.0),
    "glaive": ("1d10", DamageType.SLASHING, [H, R, TWO], False, 6.0, 20.0),
    "greataxe": ("1d12", DamageType.SLASHING, [H, TWO], False, 7.0, 30.0),
    "greatsword": ("2d6", DamageType.SLASHING, [H, TWO], False, 6.0, 50.0),
    "maul": ("2d6", DamageType.BLUDGEONING, [H, TWO], False, 10.0, 10.0),
    "shortbow": ("1d6", DamageType.PIERCING, [AMMO, TWO], True, 2.0, 25.0),
    "longbow": ("1d8", DamageType.PIERCING, [AMMO, H, TWO], True, 2.0, 50.0),
    "light crossbow": ("1d8", DamageType.PIERCING, [AMMO, LOAD, TWO], True, 5.0, 25.0),
    "hand crossbow": ("1d6", DamageType.PIERCING, [AMMO, L, LOAD], True, 3.0, 75.0),
}

# name: (armor type, base AC, strength requirement, stealth disadvantage, weight, value gp)
_ARMOR = {
    "padded armor": (ArmorType.LIGHT, 11, None, True, 8.0, 5.0),
    "leather armor": (ArmorType.LIGHT, 11, None, False, 10.0, 10.0),
    "studded leather": (ArmorType.LIGHT, 12, None, False, 13.0, 45.0),
    "hide armor": (ArmorType.MEDIUM, 12, None, False, 12.0, 10.0),
    "chain shirt": (ArmorType.MEDIUM, 13, None, False, 20.0, 50.0),
    "scale mail": (ArmorType.MEDIUM, 14, None, True, 45.0, 50.0),
    "breastplate": (ArmorType.MEDIUM, 14, None, False, 20.0, 400.0),
    "half plate": (ArmorType.MEDIUM, 15, None, True, 40.0, 750.0),
    "ring mail": (ArmorType.HEAVY, 14, None, True, 40.0, 30.0),
    "chain mail": (ArmorType.HEAVY, 16, 13, True, 55.0, 75.0),
    "splint armor": (ArmorType.HEAVY, 17, 15, True, 60.0, 200.0),
    "plate armor": (ArmorType.HEAVY, 18, 15, True, 65.0, 1500.0),
}


@dataclass(frozen=True)
class PotionData:
    name: str
    dice: str
    bonus: int
    value_gp: float

    @property
    def healing_expression(self) -> str:
        return f"{self.dice}+{self.bonus}" if self.bonus else self.dice


_POTIONS = {
    "potion of healing": PotionData("Potion of Healing", "2d4", 2, 50.0),
    "healing potion": PotionData("Healing Potion", "2d4", 2, 50.0),
    "potion of greater healing": PotionData("Potion of Greater Healing", "4d4", 4, 150.0),
    "potion of superior healing": PotionData("Potion of Superior Healing", "8d4", 8, 500.0),
    "potion of supreme healing": PotionData("Potion of Supreme Healing", "10d4", 20, 1350.0),
}

# name: (item type, weight, value gp)
_GEAR = {
    "shield": (ItemType.SHIELD, 6.0, 10.0),
    "rope": (ItemType.ADVENTURING_GEAR, 5.0, 1.0),
    "torch": (ItemType.ADVENTURING_GEAR, 1.0, 0.01),
    "rations": (ItemType.ADVENTURING_GEAR, 2.0, 0.5),
    "bedroll": (ItemType.ADVENTURING_GEAR, 7.0, 1.0),
    "waterskin": (ItemType.ADVENTURING_GEAR, 5.0, 0.2),
    "arrows": (ItemType.AMMUNITION, 0.05, 0.05),
    "crossbow bolts": (ItemType.AMMUNITION, 0.075, 0.05),
    "thieves' tools": (ItemType.TOOL, 1.0, 25.0),
    "healer's kit": (ItemType.TOOL, 3.0, 5.0),
    "spell scroll": (ItemType.SCROLL, 0.0, 50.0),
}


def _title(name: str) -> str:
    return " ".join(word.capitalize() for word in name.split(" "))


def get_weapon(name: str) -> Optional[WeaponItem]:
    data = _WEAPONS.get(name.strip().lower())
    if data is None:
        return None
    dice, damage_type, properties, ranged, weight, value = data
    base = Item(
        name=_title(name.strip().lower()),
        weight=weight,
        value_gp=value,
        item_type=ItemType.WEAPON,
    )
    return WeaponItem(
        base=base,
        damage_dice=dice,
        damage_type=damage_type,
        properties=list(properties),
        ranged=ranged,
    )


def get_armor(name: str) -> Optional[ArmorItem]:
    data = _ARMOR.get(name.strip().lower())
    if data is None:
        return None
    armor_type, base_ac, str_req, stealth, weight, value = data
    base = Item(
        name=_title(name.strip().lower()),
        weight=weight,
        value_gp=value,
        item_type=ItemType.ARMOR,
    )
    return ArmorItem(
        base=base,
        armor_type=armor_type,
        base_ac=base_ac,
        strength_requirement=str_req,
        stealth_disadvantage=stealth,
    )


def get_potion(name: str) -> Optional[PotionData]:
    return _POTIONS.get(name.strip().lower())


def find_item(name: str) -> Optional[Item]:
    """Look up any standard item and return it as a plain inventory Item."""
    key = name.strip().lower()

    weapon = get_weapon(key)
    if weapon is not None:
        return weapon.base
    armor = get_armor(key)
    if armor is not None:
        return armor.base

    potion = get_potion(key)
    if potion is not None:
        return Item(
            name=potion.name,
            weight=0.5,
            value_gp=potion.value_gp,
            item_type=ItemType.POTION,
            magical=True,
            description=f"Restores {potion.healing_expression} hit points.",
        )

    gear = _GEAR.get(key)
    if gear is not None:
        item_type, weight, value = gear
        return Item(name=_title(key), weight=weight, value_gp=value, item_type=item_type)

    return None
