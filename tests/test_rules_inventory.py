"""
Tests for inventory, equipment and currency resolvers.
"""

from chronicle.items import find_item, get_weapon
from chronicle.rules.types import (
    AddItem,
    AdjustGold,
    AdjustSilver,
    EquipItem,
    RemoveItem,
    UnequipItem,
    UseItem,
)
from chronicle.world import (
    AbilityScores,
    CharacterClass,
    Condition,
    GameWorld,
    Item,
    ItemType,
    create_character,
)


def _give(world, name, quantity=1):
    item = find_item(name) or Item(name)
    item.quantity = quantity
    world.player_character.inventory.add_item(item)


class TestAddRemove:
    def test_add_new_item(self, engine, world):
        resolution = engine.resolve(AddItem("Torch", 3), world)
        assert resolution.narrative == "Aria receives 3 x Torch (now has 3 total)"
        assert resolution.effects[0].new_total == 3

    def test_add_stacks_onto_existing(self, engine, world):
        _give(world, "torch", 2)
        resolution = engine.resolve(AddItem("torch"), world)
        assert resolution.narrative == "Aria receives torch (now has 3 total)"

    def test_remove_missing_item(self, engine, world):
        resolution = engine.resolve(RemoveItem("Rope"), world)
        assert resolution.narrative == "Aria doesn't have any Rope"
        assert resolution.effects == []

    def test_remove_more_than_held(self, engine, world):
        _give(world, "arrows", 2)
        resolution = engine.resolve(RemoveItem("Arrows", 5), world)
        assert resolution.narrative == "Aria doesn't have enough Arrows (has 2, needs 5)"
        assert resolution.effects == []

    def test_remove_reports_remaining(self, engine, world):
        _give(world, "arrows", 20)
        resolution = engine.resolve(RemoveItem("Arrows", 3), world)
        assert resolution.effects[0].remaining == 17

    def test_remove_equipped_item(self, engine, world):
        world.player_character.equipment.main_hand = get_weapon("longsword")
        resolution = engine.resolve(RemoveItem("longsword"), world)
        assert resolution.effect_kinds() == ["item_removed"]
        assert resolution.effects[0].remaining == 0


class TestEquip:
    def test_equip_weapon(self, engine, world):
        _give(world, "longsword")
        resolution = engine.resolve(EquipItem("longsword"), world)
        assert resolution.narrative == "Aria equips Longsword in slot main_hand"
        assert (resolution.effects[0].item_name, resolution.effects[0].slot) == ("Longsword", "main_hand")

    def test_equip_requires_inventory(self, engine, world):
        resolution = engine.resolve(EquipItem("Rope"), world)
        assert resolution.narrative == "Aria doesn't have Rope in their inventory"

    def test_gear_cannot_be_equipped(self, engine, world):
        _give(world, "torch")
        resolution = engine.resolve(EquipItem("Torch"), world)
        assert resolution.narrative == "Torch cannot be equipped (not a weapon, armor, or shield)"
        assert resolution.effects == []

    def test_two_handed_weapon_blocked_by_shield(self, engine, world):
        world.player_character.equipment.shield = find_item("shield")
        _give(world, "greatsword")
        resolution = engine.resolve(EquipItem("Greatsword"), world)
        assert "requires two hands but a shield is equipped" in resolution.narrative
        assert resolution.effects == []

    def test_shield_blocked_by_two_handed_weapon(self, engine, world):
        world.player_character.equipment.main_hand = get_weapon("greatsword")
        _give(world, "shield")
        resolution = engine.resolve(EquipItem("Shield"), world)
        assert resolution.narrative == "Cannot equip Shield - Greatsword requires two hands"

    def test_heavy_armor_strength_warning_still_equips(self, engine):
        weakling = create_character("Pip", CharacterClass.FIGHTER, ability_scores=AbilityScores(strength=10))
        world = GameWorld(player_character=weakling)
        _give(world, "chain mail")
        resolution = engine.resolve(EquipItem("Chain Mail"), world)
        assert "doesn't meet the Strength 13 requirement (has 10)" in resolution.narrative
        assert resolution.effect_kinds() == ["item_equipped"]
        assert resolution.effects[0].slot == "armor"


class TestUnequip:
    def test_unknown_slot(self, engine, world):
        resolution = engine.resolve(UnequipItem("belt"), world)
        assert resolution.narrative.startswith("Unknown equipment slot: belt")

    def test_empty_slot(self, engine, world):
        resolution = engine.resolve(UnequipItem("main_hand"), world)
        assert resolution.narrative == "Nothing equipped in main_hand slot"

    def test_weapon_alias(self, engine, world):
        world.player_character.equipment.main_hand = get_weapon("longsword")
        resolution = engine.resolve(UnequipItem("Weapon"), world)
        assert resolution.narrative == "Aria unequips Longsword"
        assert resolution.effects[0].slot == "main_hand"


class TestUseItem:
    def test_drink_potion(self, engine, world, fixed_rolls):
        world.player_character.hit_points.current = 5
        _give(world, "potion of healing")
        fixed_rolls(3)
        resolution = engine.resolve(UseItem("Potion of Healing"), world)
        assert resolution.narrative == "Aria drinks Potion of Healing and heals for 8 HP"
        assert resolution.effect_kinds() == ["dice_rolled", "item_used", "hp_changed", "item_removed"]
        hp_changed = resolution.effects[2]
        assert hp_changed.new_current == 11
        assert resolution.effects[3].remaining == 0

    def test_unknown_potion_uses_default_healing(self, engine, world, fixed_rolls):
        world.player_character.hit_points.current = 1
        world.player_character.inventory.add_item(Item("Murky Draught", item_type=ItemType.POTION))
        fixed_rolls(1)
        resolution = engine.resolve(UseItem("Murky Draught"), world)
        # 2d4+2 with ones
        assert resolution.effects[0].roll.total == 4

    def test_read_scroll(self, engine, world):
        _give(world, "spell scroll")
        resolution = engine.resolve(UseItem("spell scroll"), world)
        assert resolution.narrative == "Aria reads Spell Scroll and it crumbles to dust"
        assert resolution.effect_kinds() == ["item_used", "item_removed"]

    def test_non_consumable(self, engine, world):
        _give(world, "rope")
        resolution = engine.resolve(UseItem("Rope"), world)
        assert resolution.narrative == "Rope is not a consumable item"

    def test_unconscious_cannot_use_items(self, engine, world):
        world.player_character.add_condition(Condition.UNCONSCIOUS, "Dropped to 0 HP")
        _give(world, "potion of healing")
        resolution = engine.resolve(UseItem("Potion of Healing"), world)
        assert resolution.narrative == "Aria is unconscious and cannot use items!"


class TestCurrency:
    def test_gain_gold(self, engine, world):
        world.player_character.inventory.gold = 10
        resolution = engine.resolve(AdjustGold(5, "for the job"), world)
        assert resolution.narrative == "Aria gains 5 gp for the job (now has 15 gp)"
        assert resolution.effects[0].new_total == 15

    def test_cannot_overspend(self, engine, world):
        world.player_character.inventory.gold = 10
        resolution = engine.resolve(AdjustGold(-15), world)
        assert resolution.narrative == "Aria doesn't have enough gold (has 10 gp, needs 15 gp)"
        assert resolution.effects == []

    def test_spend_silver(self, engine, world):
        world.player_character.inventory.silver = 8
        resolution = engine.resolve(AdjustSilver(-3, "on ale"), world)
        assert resolution.narrative == "Aria spends 3 sp on ale (now has 5 sp)"
        assert resolution.effect_kinds() == ["silver_changed"]
