"""
Tests for class feature and spellcasting resolvers.
"""

import pytest

from chronicle.rules.types import (
    CastSpell,
    EndRage,
    RestoreSpellSlot,
    UseActionSurge,
    UseBardicInspiration,
    UseDivineSmite,
    UseKi,
    UseLayOnHands,
    UseRage,
    UseSecondWind,
)
from chronicle.world import CharacterClass


class TestRage:
    def test_enter_rage(self, engine, make_world):
        world = make_world(CharacterClass.BARBARIAN, name="Grom")
        resolution = engine.resolve(UseRage("player"), world)
        assert resolution.narrative.startswith("Grom enters a RAGE!")
        assert resolution.effect_kinds() == ["rage_started", "class_resource_used", "feature_used"]
        assert resolution.effects[0].damage_bonus == 2
        assert resolution.effects[2].uses_remaining == 1

    def test_already_raging(self, engine, make_world):
        world = make_world(CharacterClass.BARBARIAN, name="Grom")
        world.player_character.class_resources.rage_active = True
        resolution = engine.resolve(UseRage("player"), world)
        assert resolution.narrative == "Grom is already raging!"

    def test_no_uses_left(self, engine, make_world):
        world = make_world(CharacterClass.BARBARIAN, name="Grom")
        world.player_character.find_feature("Rage").uses.current = 0
        resolution = engine.resolve(UseRage("player"), world)
        assert "no rage uses remaining" in resolution.narrative
        assert resolution.effects == []

    def test_end_rage_when_not_raging(self, engine, make_world):
        world = make_world(CharacterClass.BARBARIAN, name="Grom")
        resolution = engine.resolve(EndRage("player"), world)
        assert resolution.narrative == "Grom is not currently raging."

    def test_end_rage(self, engine, make_world):
        world = make_world(CharacterClass.BARBARIAN, name="Grom")
        world.player_character.class_resources.rage_active = True
        resolution = engine.resolve(EndRage("player", "unconscious"), world)
        assert "knocked unconscious" in resolution.narrative
        assert resolution.effect_kinds() == ["rage_ended", "class_resource_used"]


class TestKi:
    def test_spend_ki(self, engine, make_world):
        world = make_world(CharacterClass.MONK, level=3, name="Lin")
        resolution = engine.resolve(UseKi("player", 2, "flurry of blows"), world)
        assert resolution.narrative.startswith("Lin spends 2 ki points. Flurry of Blows:")
        assert resolution.effects[0].amount == 2

    def test_not_enough_ki(self, engine, make_world):
        world = make_world(CharacterClass.MONK, level=3, name="Lin")
        resolution = engine.resolve(UseKi("player", 5, "stunning_strike"), world)
        assert resolution.narrative == "Lin doesn't have enough ki points! Has 3 but needs 5."


class TestLayOnHands:
    def test_heal_self(self, engine, make_world):
        world = make_world(CharacterClass.PALADIN, level=2, name="Ser")
        world.player_character.hit_points.current = 10
        resolution = engine.resolve(UseLayOnHands("player", "Ser", hp_amount=5), world)
        assert "(5 HP remaining in pool)" in resolution.narrative
        assert resolution.effect_kinds() == ["class_resource_used", "hp_changed"]
        assert resolution.effects[1].new_current == 15

    def test_heal_other_has_no_hp_effect(self, engine, make_world):
        world = make_world(CharacterClass.PALADIN, level=2, name="Ser")
        resolution = engine.resolve(UseLayOnHands("player", "Goblin", hp_amount=3), world)
        assert resolution.effect_kinds() == ["class_resource_used"]

    def test_cure_costs_five(self, engine, make_world):
        world = make_world(CharacterClass.PALADIN, level=2, name="Ser")
        resolution = engine.resolve(
            UseLayOnHands("player", "Ser", hp_amount=8, cure_disease=True), world
        )
        assert "doesn't have enough in their Lay on Hands pool" in resolution.narrative
        assert "needs 13" in resolution.narrative


class TestDivineSmite:
    def test_smite_spends_slot(self, engine, make_world, fixed_rolls):
        world = make_world(CharacterClass.PALADIN, level=2, name="Ser")
        fixed_rolls(5)
        resolution = engine.resolve(UseDivineSmite("player"), world)
        assert "2d8 = 10 radiant damage" in resolution.narrative
        assert resolution.effect_kinds() == ["dice_rolled", "class_resource_used", "spell_slot_used"]
        assert resolution.effects[2].remaining == 1

    def test_extra_die_against_undead(self, engine, make_world, fixed_rolls):
        world = make_world(CharacterClass.PALADIN, level=2, name="Ser")
        fixed_rolls(5)
        resolution = engine.resolve(UseDivineSmite("player", target_is_undead_or_fiend=True), world)
        assert "3d8 = 15 radiant damage (extra damage vs undead/fiend)" in resolution.narrative

    def test_no_slots(self, engine, make_world):
        world = make_world(CharacterClass.PALADIN, level=1, name="Ser")
        resolution = engine.resolve(UseDivineSmite("player"), world)
        assert resolution.narrative == "Ser has no level 1 spell slots remaining!"


class TestFighterFeatures:
    def test_second_wind(self, engine, world, fixed_rolls):
        world.player_character.hit_points.current = 3
        fixed_rolls(4)
        resolution = engine.resolve(UseSecondWind("player"), world)
        assert "Regains 1d10+1 = 5 HP. (Now at 8/11)" in resolution.narrative
        assert resolution.effect_kinds() == [
            "dice_rolled",
            "hp_changed",
            "class_resource_used",
            "feature_used",
        ]
        assert resolution.effects[3].uses_remaining == 0

    def test_second_wind_already_used(self, engine, world):
        world.player_character.class_resources.second_wind_used = True
        resolution = engine.resolve(UseSecondWind("player"), world)
        assert "already used Second Wind" in resolution.narrative

    def test_action_surge(self, engine, make_world):
        world = make_world(CharacterClass.FIGHTER, level=2)
        resolution = engine.resolve(UseActionSurge("player", "attack again"), world)
        assert resolution.narrative.endswith("attack again")
        assert resolution.effect_kinds() == ["class_resource_used", "feature_used"]

    def test_action_surge_already_used(self, engine, make_world):
        world = make_world(CharacterClass.FIGHTER, level=2)
        world.player_character.class_resources.action_surge_used = True
        resolution = engine.resolve(UseActionSurge("player"), world)
        assert "already used Action Surge" in resolution.narrative


class TestBardicInspiration:
    def test_inspire(self, engine, make_world):
        world = make_world(CharacterClass.BARD, name="Lyra")
        resolution = engine.resolve(UseBardicInspiration("player", "Aria"), world)
        assert resolution.narrative.startswith("Lyra inspires Aria")
        assert resolution.effects[1].uses_remaining == 0

    def test_no_uses(self, engine, make_world):
        world = make_world(CharacterClass.BARD, name="Lyra")
        world.player_character.find_feature("Bardic Inspiration").uses.current = 0
        resolution = engine.resolve(UseBardicInspiration("player", "Aria"), world)
        assert "no Bardic Inspiration uses remaining" in resolution.narrative


class TestCastSpell:
    """Tests for spellcasting resolution."""

    @pytest.fixture
    def wizard_world(self, make_world):
        return make_world(CharacterClass.WIZARD, name="Mira")

    def test_cantrip_attack(self, engine, wizard_world, fixed_rolls):
        fixed_rolls(15)
        resolution = engine.resolve(CastSpell("player", "Fire Bolt", target_names=("orc",)), wizard_world)
        # INT +1, proficiency +2
        assert "against orc: 18 vs AC 10. Hit! Deals 10 fire damage." in resolution.narrative
        assert resolution.effect_kinds() == ["dice_rolled", "attack_hit", "dice_rolled"]

    def test_cantrip_miss(self, engine, wizard_world, fixed_rolls):
        fixed_rolls(1)
        resolution = engine.resolve(CastSpell("player", "Fire Bolt"), wizard_world)
        assert "Miss!" in resolution.narrative
        assert resolution.effect_kinds() == ["dice_rolled", "attack_missed"]

    def test_save_spell_uses_slot(self, engine, wizard_world, fixed_rolls):
        fixed_rolls(6)
        resolution = engine.resolve(CastSpell("player", "Burning Hands"), wizard_world)
        assert "DC 11 Dexterity saving throw (half damage on success)" in resolution.narrative
        assert "On a failed save: 18 fire damage." in resolution.narrative
        assert resolution.effect_kinds() == ["dice_rolled", "spell_slot_used"]
        assert resolution.effects[1].level == 1
        assert resolution.effects[1].remaining == 1

    def test_utility_spell_narrates_description(self, engine, wizard_world):
        resolution = engine.resolve(CastSpell("player", "Shield"), wizard_world)
        assert "+5 AC" in resolution.narrative
        assert resolution.effect_kinds() == ["spell_slot_used"]

    def test_no_slot_at_level(self, engine, wizard_world):
        resolution = engine.resolve(CastSpell("player", "Burning Hands", spell_level=2), wizard_world)
        assert resolution.narrative == "Mira has no level 2 spell slots remaining!"

    def test_slot_below_spell_level(self, engine, wizard_world):
        resolution = engine.resolve(CastSpell("player", "Fireball", spell_level=1), wizard_world)
        assert resolution.narrative.startswith("Cannot cast Fireball using a level 1 slot")

    def test_unknown_spell(self, engine, wizard_world):
        resolution = engine.resolve(CastSpell("player", "Wish"), wizard_world)
        assert resolution.narrative.startswith("Unknown spell: 'Wish'")

    def test_non_caster(self, engine, world):
        resolution = engine.resolve(CastSpell("player", "Fire Bolt"), world)
        assert resolution.narrative == "Aria doesn't have spellcasting ability!"

    def test_healing_self(self, engine, make_world, fixed_rolls):
        world = make_world(CharacterClass.CLERIC, name="Ansel")
        world.player_character.hit_points.current = 2
        fixed_rolls(5)
        resolution = engine.resolve(CastSpell("player", "Cure Wounds"), world)
        assert "Ansel heals Ansel for 5 HP." in resolution.narrative
        assert resolution.effect_kinds() == ["dice_rolled", "hp_changed", "spell_slot_used"]
        assert resolution.effects[1].new_current == 7

    def test_healing_other_has_no_hp_effect(self, engine, make_world, fixed_rolls):
        world = make_world(CharacterClass.CLERIC, name="Ansel")
        fixed_rolls(5)
        resolution = engine.resolve(CastSpell("player", "Cure Wounds", target_names=("Aria",)), world)
        assert resolution.effect_kinds() == ["dice_rolled", "spell_slot_used"]


class TestRestoreSpellSlot:
    def test_invalid_level(self, engine, world):
        resolution = engine.resolve(RestoreSpellSlot(0), world)
        assert resolution.narrative == "Invalid spell slot level: 0. Must be between 1 and 9."
        assert resolution.effects == []

    def test_restore(self, engine, make_world):
        world = make_world(CharacterClass.WIZARD, name="Mira")
        world.player_character.spellcasting.spell_slots.use_slot(1)
        resolution = engine.resolve(RestoreSpellSlot(1, "Arcane Recovery"), world)
        assert resolution.narrative == "Level 1 spell slot restored by Arcane Recovery"
        assert resolution.effects[0].new_remaining == 2
