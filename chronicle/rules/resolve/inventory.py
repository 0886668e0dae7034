"""
Inventory, equipment and currency resolvers.
"""

from chronicle.items import get_armor, get_potion, get_weapon
from chronicle.rules.helpers import roll_with_fallback
from chronicle.rules.types import (
    AddItem,
    AdjustGold,
    AdjustSilver,
    DiceRolled,
    EquipItem,
    GoldChanged,
    HpChanged,
    ItemAdded,
    ItemEquipped,
    ItemRemoved,
    ItemUnequipped,
    ItemUsed,
    RemoveItem,
    Resolution,
    SilverChanged,
    UnequipItem,
    UseItem,
)
from chronicle.world.abilities import Ability
from chronicle.world.conditions import Condition
from chronicle.world.game_world import GameWorld
from chronicle.world.inventory import ArmorType, ItemType

DEFAULT_POTION_HEALING = "2d4+2"

_SLOT_FOR_TYPE = {
    ItemType.WEAPON: "main_hand",
    ItemType.ARMOR: "armor",
    ItemType.SHIELD: "shield",
}


def _quantity_prefix(quantity: int) -> str:
    return f"{quantity} x " if quantity > 1 else ""


def resolve_add_item(intent: AddItem, world: GameWorld) -> Resolution:
    character = world.player_character
    existing = character.inventory.find_item(intent.item_name)
    new_total = (existing.quantity if existing else 0) + intent.quantity
    return Resolution(
        f"{character.name} receives {_quantity_prefix(intent.quantity)}{intent.item_name} "
        f"(now has {new_total} total)",
        [
            ItemAdded(
                item_name=intent.item_name,
                quantity=intent.quantity,
                new_total=new_total,
                item_type=intent.item_type,
                description=intent.description,
                magical=intent.magical,
                weight=intent.weight,
                value_gp=intent.value_gp,
            )
        ],
    )


def resolve_remove_item(intent: RemoveItem, world: GameWorld) -> Resolution:
    character = world.player_character
    existing = character.inventory.find_item(intent.item_name)
    if existing is None:
        # Equipped items no longer sit in the inventory
        slot = character.equipment.slot_holding(intent.item_name)
        if slot is None:
            return Resolution(f"{character.name} doesn't have any {intent.item_name}")
        return Resolution(
            f"{character.name} loses {intent.item_name} (0 remaining)",
            [ItemRemoved(intent.item_name, 1, 0)],
        )
    if existing.quantity < intent.quantity:
        return Resolution(
            f"{character.name} doesn't have enough {intent.item_name} "
            f"(has {existing.quantity}, needs {intent.quantity})"
        )
    remaining = existing.quantity - intent.quantity
    return Resolution(
        f"{character.name} loses {_quantity_prefix(intent.quantity)}{intent.item_name} "
        f"({remaining} remaining)",
        [ItemRemoved(intent.item_name, intent.quantity, remaining)],
    )


def resolve_equip_item(intent: EquipItem, world: GameWorld) -> Resolution:
    character = world.player_character
    item = character.inventory.find_item(intent.item_name)
    if item is None:
        return Resolution(f"{character.name} doesn't have {intent.item_name} in their inventory")

    slot = _SLOT_FOR_TYPE.get(item.item_type)
    if slot is None:
        return Resolution(f"{item.name} cannot be equipped (not a weapon, armor, or shield)")

    equipment = character.equipment
    if slot == "shield" and equipment.main_hand is not None and equipment.main_hand.is_two_handed():
        return Resolution(
            f"Cannot equip {item.name} - {equipment.main_hand.name} requires two hands"
        )

    if slot == "main_hand":
        weapon = get_weapon(item.name)
        if weapon is not None and weapon.is_two_handed() and equipment.shield is not None:
            return Resolution(
                f"Cannot equip {item.name} - it requires two hands but a shield is equipped. "
                "Unequip the shield first."
            )

    effect = ItemEquipped(item.name, slot)
    if slot == "armor":
        armor = get_armor(item.name)
        strength = character.ability_scores.get(Ability.STRENGTH)
        if (
            armor is not None
            and armor.armor_type == ArmorType.HEAVY
            and armor.strength_requirement is not None
            and strength < armor.strength_requirement
        ):
            return Resolution(
                f"{character.name} equips {item.name} but doesn't meet the Strength "
                f"{armor.strength_requirement} requirement (has {strength}). "
                "Movement speed reduced by 10 feet.",
                [effect],
            )

    return Resolution(f"{character.name} equips {item.name} in slot {slot}", [effect])


def resolve_unequip_item(intent: UnequipItem, world: GameWorld) -> Resolution:
    character = world.player_character
    slot = intent.slot.strip().lower()
    if slot not in ("armor", "shield", "main_hand", "weapon", "off_hand"):
        return Resolution(
            f"Unknown equipment slot: {intent.slot}. Valid slots: armor, shield, main_hand, off_hand"
        )
    if slot == "weapon":
        slot = "main_hand"

    item_name = character.equipment.item_name_in(slot)
    if item_name is None:
        return Resolution(f"Nothing equipped in {slot} slot")
    return Resolution(
        f"{character.name} unequips {item_name}",
        [ItemUnequipped(item_name, slot)],
    )


def resolve_use_item(intent: UseItem, world: GameWorld) -> Resolution:
    character = world.player_character
    if character.has_condition(Condition.UNCONSCIOUS):
        return Resolution(f"{character.name} is unconscious and cannot use items!")

    item = character.inventory.find_item(intent.item_name)
    if item is None:
        return Resolution(f"{character.name} doesn't have {intent.item_name} in their inventory")

    remaining = item.quantity - 1
    potion = get_potion(item.name)
    if potion is not None or item.item_type == ItemType.POTION:
        expression = potion.healing_expression if potion is not None else DEFAULT_POTION_HEALING
        healing = roll_with_fallback(expression, "1d4", f"{item.name} healing")
        hp = character.hit_points
        new_current = min(hp.maximum, hp.current + healing.total)
        return Resolution(
            f"{character.name} drinks {item.name} and heals for {healing.total} HP",
            [
                DiceRolled(healing, f"{item.name} healing"),
                ItemUsed(item.name, f"Healed {healing.total} HP"),
                HpChanged(character.id, healing.total, new_current, hp.maximum),
                ItemRemoved(item.name, 1, remaining),
            ],
        )

    if item.item_type == ItemType.SCROLL:
        return Resolution(
            f"{character.name} reads {item.name} and it crumbles to dust",
            [ItemUsed(item.name, "Scroll consumed"), ItemRemoved(item.name, 1, remaining)],
        )

    return Resolution(f"{item.name} is not a consumable item")


def _adjust_currency(
    world: GameWorld,
    amount: int,
    reason: str,
    current: int,
    label: str,
    unit: str,
    effect_type,
) -> Resolution:
    name = world.player_character.name
    new_total = current + amount
    if new_total < 0:
        return Resolution(
            f"{name} doesn't have enough {label} (has {current} {unit}, needs {-amount} {unit})"
        )
    verb = "gains" if amount >= 0 else "spends"
    reason_text = f" {reason}" if reason else ""
    return Resolution(
        f"{name} {verb} {abs(amount)} {unit}{reason_text} (now has {new_total} {unit})",
        [effect_type(amount, new_total, reason)],
    )


def resolve_adjust_gold(intent: AdjustGold, world: GameWorld) -> Resolution:
    gold = world.player_character.inventory.gold
    return _adjust_currency(world, intent.amount, intent.reason, gold, "gold", "gp", GoldChanged)


def resolve_adjust_silver(intent: AdjustSilver, world: GameWorld) -> Resolution:
    silver = world.player_character.inventory.silver
    return _adjust_currency(world, intent.amount, intent.reason, silver, "silver", "sp", SilverChanged)

