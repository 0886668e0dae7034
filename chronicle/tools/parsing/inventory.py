"""
Items, equipment and currency.

show_inventory is not parsed here; it is a read-only query handled by
chronicle.tools.info.
"""

from typing import Optional

from chronicle.rules.types import (
    AddItem,
    AdjustGold,
    AdjustSilver,
    EquipItem,
    Intent,
    RemoveItem,
    UnequipItem,
    UseItem,
)
from chronicle.tools.parsing.fields import (
    ToolInput,
    optional_bool,
    optional_float,
    optional_int,
    optional_str,
    required_int,
    required_str,
    run_parser,
)
from chronicle.world.game_world import GameWorld


def _quantity(data: ToolInput) -> Optional[int]:
    quantity = optional_int(data, "quantity", 1)
    return quantity if quantity > 0 else None


def _give_item(data: ToolInput, world: GameWorld) -> Optional[Intent]:
    item_name = required_str(data, "item_name")
    quantity = _quantity(data)
    if quantity is None:
        return None
    return AddItem(
        item_name=item_name,
        quantity=quantity,
        item_type=optional_str(data, "item_type"),
        description=optional_str(data, "description"),
        magical=optional_bool(data, "magical"),
        weight=optional_float(data, "weight"),
        value_gp=optional_float(data, "value_gp"),
    )


def _remove_item(data: ToolInput, world: GameWorld) -> Optional[Intent]:
    item_name = required_str(data, "item_name")
    quantity = _quantity(data)
    if quantity is None:
        return None
    return RemoveItem(item_name, quantity)


def _use_item(data: ToolInput, world: GameWorld) -> Intent:
    return UseItem(required_str(data, "item_name"), optional_str(data, "target"))


def _equip_item(data: ToolInput, world: GameWorld) -> Intent:
    return EquipItem(required_str(data, "item_name"))


def _unequip_item(data: ToolInput, world: GameWorld) -> Intent:
    return UnequipItem(required_str(data, "slot"))


def _adjust_gold(data: ToolInput, world: GameWorld) -> Intent:
    return AdjustGold(required_int(data, "amount"), optional_str(data, "reason", "gold adjustment"))


def _adjust_silver(data: ToolInput, world: GameWorld) -> Intent:
    return AdjustSilver(
        required_int(data, "amount"), optional_str(data, "reason", "silver adjustment")
    )


_PARSERS = {
    "give_item": _give_item,
    "remove_item": _remove_item,
    "use_item": _use_item,
    "equip_item": _equip_item,
    "unequip_item": _unequip_item,
    "adjust_gold": _adjust_gold,
    "adjust_silver": _adjust_silver,
}


def parse_inventory_tool(name: str, data: ToolInput, world: GameWorld) -> Optional[Intent]:
    return run_parser(_PARSERS, name, data, world)
