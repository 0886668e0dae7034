"""
Items, inventory and equipment.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from chronicle.world.health import DamageType


class ItemType(str, Enum):
    WEAPON = "weapon"
    ARMOR = "armor"
    SHIELD = "shield"
    POTION = "potion"
    SCROLL = "scroll"
    WAND = "wand"
    RING = "ring"
    WONDROUS = "wondrous"
    AMMUNITION = "ammunition"
    ADVENTURING_GEAR = "adventuring_gear"
    TOOL = "tool"
    TREASURE = "treasure"
    OTHER = "other"

    @classmethod
    def parse(cls, text: Optional[str]) -> "ItemType":
        if not text:
            return cls.OTHER
        key = text.strip().lower().replace(" ", "_")
        aliases = {"gear": cls.ADVENTURING_GEAR, "wondrous_item": cls.WONDROUS}
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            return cls.OTHER


class WeaponProperty(str, Enum):
    FINESSE = "finesse"
    LIGHT = "light"
    HEAVY = "heavy"
    TWO_HANDED = "two_handed"
    VERSATILE = "versatile"
    THROWN = "thrown"
    AMMUNITION = "ammunition"
    LOADING = "loading"
    REACH = "reach"


class ArmorType(str, Enum):
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


@dataclass
class Item:
    name: str
    quantity: int = 1
    weight: float = 0.0
    value_gp: float = 0.0
    description: Optional[str] = None
    item_type: ItemType = ItemType.OTHER
    magical: bool = False


@dataclass
class WeaponItem:
    base: Item
    damage_dice: str = "1d8"
    damage_type: DamageType = DamageType.SLASHING
    properties: list[WeaponProperty] = field(default_factory=list)
    ranged: bool = False

    @property
    def name(self) -> str:
        return self.base.name

    def is_two_handed(self) -> bool:
        return WeaponProperty.TWO_HANDED in self.properties

    def is_finesse(self) -> bool:
        return WeaponProperty.FINESSE in self.properties

    def is_ranged(self) -> bool:
        return self.ranged


@dataclass
class ArmorItem:
    base: Item
    armor_type: ArmorType = ArmorType.MEDIUM
    base_ac: int = 14
    strength_requirement: Optional[int] = None
    stealth_disadvantage: bool = False

    @property
    def name(self) -> str:
        return self.base.name

    def armor_class(self, dex_modifier: int) -> int:
        if self.armor_type == ArmorType.LIGHT:
            return self.base_ac + dex_modifier
        if self.armor_type == ArmorType.MEDIUM:
            return self.base_ac + min(dex_modifier, 2)
        return self.base_ac


@dataclass
class Equipment:
    armor: Optional[ArmorItem] = None
    shield: Optional[Item] = None
    main_hand: Optional[WeaponItem] = None
    off_hand: Optional[Item] = None

    SLOTS = ("armor", "shield", "main_hand", "off_hand")

    def item_name_in(self, slot: str) -> Optional[str]:
        """Name of the item in a slot ('weapon' is an alias of 'main_hand')."""
        if slot == "weapon":
            slot = "main_hand"
        if slot not in self.SLOTS:
            return None
        item = getattr(self, slot)
        return item.name if item is not None else None

    def slot_holding(self, item_name: str) -> Optional[str]:
        """The slot an item is equipped in, matched case-insensitively."""
        for slot in self.SLOTS:
            name = self.item_name_in(slot)
            if name is not None and name.lower() == item_name.lower():
                return slot
        return None


@dataclass
class Inventory:
    items: list[Item] = field(default_factory=list)
    gold: int = 0
    silver: int = 0

    def find_item(self, name: str) -> Optional[Item]:
        key = name.lower()
        for item in self.items:
            if item.name.lower() == key:
                return item
        return None

    def add_item(self, item: Item) -> int:
        """Add an item, stacking by name. Returns the new quantity held."""
        existing = self.find_item(item.name)
        if existing is not None:
            existing.quantity += item.quantity
            return existing.quantity
        self.items.append(item)
        return item.quantity

    def remove_item(self, name: str, quantity: int = 1) -> bool:
        """Remove a quantity of an item; the entry is dropped when it reaches zero."""
        existing = self.find_item(name)
        if existing is None or existing.quantity < quantity:
            return False
        existing.quantity -= quantity
        if existing.quantity == 0:
            self.items.remove(existing)
        return True

    def total_weight(self) -> float:
        return sum(item.weight * item.quantity for item in self.items)
