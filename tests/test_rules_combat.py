"""
Tests for combat resolvers: attacks, damage, healing, conditions and
turn order.
"""

from chronicle.dice import Advantage
from chronicle.rules.effects import EffectApplier
from chronicle.rules.types import (
    ApplyCondition,
    Attack,
    CombatantInit,
    Damage,
    EndCombat,
    Heal,
    NextTurn,
    RemoveCondition,
    RollInitiative,
    StartCombat,
)
from chronicle.world import CharacterClass, Condition, DamageType


class TestAttack:
    """Tests for attack resolution."""

    def test_hit_rolls_damage(self, engine, combat_world, fixed_rolls):
        fixed_rolls(15)
        resolution = engine.resolve(Attack("player", "goblin-1", "longsword"), combat_world)
        assert resolution.narrative == (
            "Aria attacks with Longsword (roll: 19 vs AC 13) - HIT! Deals 10 slashing damage."
        )
        assert resolution.effect_kinds() == ["dice_rolled", "attack_hit", "dice_rolled"]
        assert resolution.effects[1].target_name == "Goblin"

    def test_miss(self, engine, combat_world, fixed_rolls):
        fixed_rolls(5)
        resolution = engine.resolve(Attack("player", "goblin-1", "longsword"), combat_world)
        assert resolution.narrative.endswith("- MISS!")
        assert resolution.effect_kinds() == ["dice_rolled", "attack_missed"]

    def test_natural_one_always_misses(self, engine, combat_world, fixed_rolls):
        fixed_rolls(1)
        combat_world.combat.find_combatant("goblin-1").armor_class = 1
        resolution = engine.resolve(Attack("player", "goblin-1", "longsword"), combat_world)
        assert "MISS!" in resolution.narrative

    def test_critical_doubles_dice(self, engine, combat_world, fixed_rolls):
        fixed_rolls(20)
        resolution = engine.resolve(Attack("player", "goblin-1", "longsword"), combat_world)
        assert "CRITICAL HIT!" in resolution.narrative
        assert resolution.effects[1].is_critical
        # 2d8 (16) + STR 2
        assert resolution.effects[2].roll.total == 18

    def test_unconscious_cannot_attack(self, engine, combat_world):
        combat_world.player_character.add_condition(Condition.UNCONSCIOUS, "Dropped to 0 HP")
        resolution = engine.resolve(Attack("player", "goblin-1", "longsword"), combat_world)
        assert resolution.narrative == "Aria is unconscious and cannot attack!"
        assert resolution.effects == []

    def test_unknown_weapon_falls_back_to_unarmed(self, engine, combat_world, fixed_rolls):
        fixed_rolls(15)
        resolution = engine.resolve(Attack("player", "goblin-1", "bare knuckles"), combat_world)
        # flat 1 damage + STR 2
        assert resolution.narrative.endswith("Deals 3 bludgeoning damage.")

    def test_sneak_attack_with_advantage(self, engine, make_world, fixed_rolls):
        world = make_world(CharacterClass.ROGUE, name="Vex")
        fixed_rolls(15)
        resolution = engine.resolve(Attack("player", "bandit", "dagger", Advantage.ADVANTAGE), world)
        assert resolution.effect_kinds() == [
            "dice_rolled",
            "attack_hit",
            "dice_rolled",
            "dice_rolled",
            "sneak_attack_used",
        ]
        # 1d4+2 (6) plus 1d6 sneak attack (6)
        assert resolution.narrative.endswith("Deals 12 piercing damage.")

    def test_no_sneak_attack_without_advantage_or_ally(self, engine, make_world, fixed_rolls):
        world = make_world(CharacterClass.ROGUE, name="Vex")
        fixed_rolls(15)
        resolution = engine.resolve(Attack("player", "bandit", "dagger"), world)
        assert "sneak_attack_used" not in resolution.effect_kinds()

    def test_rage_bonus_on_strength_melee(self, engine, make_world, fixed_rolls):
        world = make_world(CharacterClass.BARBARIAN, name="Grom")
        resources = world.player_character.class_resources
        resources.rage_active = True
        resources.rage_damage_bonus = 2
        fixed_rolls(15)
        resolution = engine.resolve(Attack("player", "orc", "greataxe"), world)
        # 1d12 (12) + STR 2 + rage 2
        assert resolution.narrative.endswith("Deals 16 slashing damage.")


class TestDamage:
    """Tests for damage against the player and other combatants."""

    def test_combatant_damage(self, engine, combat_world):
        resolution = engine.resolve(Damage("goblin-1", 5, DamageType.SLASHING, "sword"), combat_world)
        assert resolution.narrative == "Goblin takes 5 slashing damage from sword (HP: 2/7 - bloodied)"
        effect = resolution.effects[0]
        assert (effect.target_id, effect.amount, effect.new_current, effect.new_max) == ("goblin-1", -5, 2, 7)
        assert not effect.dropped_to_zero

    def test_combatant_dropped(self, engine, combat_world):
        resolution = engine.resolve(Damage("Goblin", 10, DamageType.FIRE, "fireball"), combat_world)
        assert "DOWN!" in resolution.narrative
        assert resolution.effects[0].new_current == 0
        assert resolution.effects[0].dropped_to_zero

    def test_unknown_target_is_soft_failure(self, engine, world):
        resolution = engine.resolve(Damage("orc", 5, DamageType.SLASHING, "axe"), world)
        assert resolution.narrative == "No combatant named 'orc' is in combat"
        assert resolution.effects == []

    def test_player_damage(self, engine, world):
        resolution = engine.resolve(Damage("player", 4, DamageType.PIERCING, "arrow"), world)
        assert resolution.narrative == "Aria takes 4 piercing damage from arrow (HP: 7/11)"
        assert resolution.effects[0].amount == -4
        assert resolution.effects[0].new_current == 7
        assert world.player_character.hit_points.current == 11

    def test_player_dropped_to_zero(self, engine, world):
        resolution = engine.resolve(Damage("Aria", 11, DamageType.BLUDGEONING, "ogre"), world)
        assert "UNCONSCIOUS!" in resolution.narrative
        assert resolution.effect_kinds() == ["hp_changed"]
        assert resolution.effects[0].dropped_to_zero

    def test_massive_damage_kills(self, engine, world):
        resolution = engine.resolve(Damage("player", 22, DamageType.BLUDGEONING, "giant"), world)
        assert "INSTANT DEATH" in resolution.narrative
        assert resolution.effect_kinds() == ["hp_changed", "character_died"]

    def test_temporary_hit_points_absorb_in_preview(self, engine, world):
        world.player_character.hit_points.add_temp_hp(5)
        resolution = engine.resolve(Damage("player", 8, DamageType.COLD, "frost"), world)
        assert resolution.effects[0].new_current == 8

    def test_damage_while_unconscious_is_death_save_failure(self, engine, world):
        world.player_character.hit_points.current = 0
        resolution = engine.resolve(Damage("player", 3, DamageType.PIERCING, "dagger"), world)
        assert "(Failures: 1/3)" in resolution.narrative
        assert resolution.effect_kinds() == ["death_save_failure"]

    def test_third_failure_while_unconscious_kills(self, engine, world):
        character = world.player_character
        character.hit_points.current = 0
        character.death_saves.failures = 2
        resolution = engine.resolve(Damage("player", 3, DamageType.PIERCING, "dagger"), world)
        assert resolution.effect_kinds() == ["death_save_failure", "character_died"]

    def test_massive_damage_while_unconscious(self, engine, world):
        world.player_character.hit_points.current = 0
        resolution = engine.resolve(Damage("player", 11, DamageType.FIRE, "dragon"), world)
        assert resolution.effect_kinds() == ["character_died"]


class TestHeal:
    def test_partial_heal(self, engine, world):
        world.player_character.hit_points.current = 5
        resolution = engine.resolve(Heal("player", 3, "bandage"), world)
        assert resolution.narrative == "Aria heals 3 hit points from bandage (HP: 8/11)"
        assert resolution.effects[0].amount == 3

    def test_heal_caps_at_maximum(self, engine, world):
        world.player_character.hit_points.current = 5
        resolution = engine.resolve(Heal("player", 20, "priest"), world)
        assert "fully healed" in resolution.narrative
        assert resolution.effects[0].amount == 6

    def test_heal_from_zero_regains_consciousness(self, engine, world):
        world.player_character.hit_points.current = 0
        resolution = engine.resolve(Heal("player", 2, "potion"), world)
        assert "regains consciousness" in resolution.narrative

    def test_heal_combatant(self, engine, combat_world):
        combat_world.combat.find_combatant("goblin-1").current_hp = 2
        resolution = engine.resolve(Heal("goblin-1", 10, "shaman"), combat_world)
        assert resolution.narrative == "Goblin heals 5 hit points from shaman (HP: 7/7)"

    def test_heal_unknown_target(self, engine, world):
        resolution = engine.resolve(Heal("stranger", 5), world)
        assert resolution.effects == []


class TestConditions:
    def test_apply_condition(self, engine, combat_world):
        resolution = engine.resolve(ApplyCondition("goblin-1", Condition.POISONED, "venom"), combat_world)
        assert resolution.narrative == "Goblin is now Poisoned (venom)"
        assert resolution.effect_kinds() == ["condition_applied"]

    def test_apply_condition_with_duration(self, engine, world):
        resolution = engine.resolve(ApplyCondition("player", Condition.STUNNED, "spell", 2), world)
        assert resolution.narrative == "Aria is now Stunned (spell) for 2 rounds"

    def test_remove_condition(self, engine, world):
        resolution = engine.resolve(RemoveCondition("player", Condition.PRONE), world)
        assert resolution.narrative == "Aria is no longer Prone"
        assert resolution.effect_kinds() == ["condition_removed"]


class TestCombatFlow:
    def test_start_combat_rolls_initiative(self, engine, world, fixed_rolls):
        fixed_rolls(10)
        combatants = (
            CombatantInit("player", "Aria", is_player=True),
            CombatantInit("orc-1", "Orc", current_hp=15, max_hp=15, armor_class=13, initiative_modifier=1),
        )
        resolution = engine.resolve(StartCombat(combatants), world)
        assert resolution.effect_kinds() == [
            "combat_started",
            "initiative_rolled",
            "combatant_added",
            "initiative_rolled",
            "combatant_added",
        ]
        player_added = resolution.effects[2]
        assert player_added.id == world.player_character.id
        assert player_added.initiative == 12
        assert player_added.max_hp == 11
        assert resolution.effects[4].initiative == 11
        assert world.combat is None

    def test_start_combat_during_combat_replaces_roster(self, engine, combat_world, fixed_rolls):
        fixed_rolls(10)
        combatants = (
            CombatantInit("player", "Aria", is_player=True),
            CombatantInit("orc-1", "Orc", current_hp=15, max_hp=15, armor_class=13),
        )
        resolution = engine.resolve(StartCombat(combatants), combat_world)
        EffectApplier(combat_world).apply_all(resolution.effects)
        names = combat_world.combat.initiative_order()
        assert names.count("Aria") == 1
        assert sorted(names) == ["Aria", "Orc"]
        assert combat_world.combat.find_combatant("goblin-1") is None

    def test_end_combat(self, engine, combat_world):
        assert engine.resolve(EndCombat(), combat_world).effect_kinds() == ["combat_ended"]

    def test_next_turn_previews_without_mutating(self, engine, combat_world):
        resolution = engine.resolve(NextTurn(), combat_world)
        assert resolution.narrative == "Next turn: Goblin (Round 1)"
        assert resolution.effects[0].current_combatant == "Goblin"
        assert combat_world.combat.turn_index == 0

    def test_next_turn_outside_combat(self, engine, world):
        resolution = engine.resolve(NextTurn(), world)
        assert resolution.narrative == "No combat in progress"
        assert resolution.effects == []

    def test_roll_initiative_for_player_uses_dex(self, engine, world, fixed_rolls):
        fixed_rolls(7)
        resolution = engine.resolve(RollInitiative("player", "Aria", modifier=5, is_player=True), world)
        assert resolution.narrative == "Aria rolls initiative: 7 + 2 = 9"
        assert resolution.effect_kinds() == ["dice_rolled", "initiative_rolled"]
