"""
Tests for the effect applier: effects are the only path by which the world
and story memory change.
"""

import pytest

from chronicle.dice import RollResult
from chronicle.items import get_weapon
from chronicle.rules.effects import EffectApplier, apply_effects
from chronicle.rules.types import (
    AbilityScoreModified,
    CharacterDied,
    ClassResourceUsed,
    CombatantAdded,
    CombatEnded,
    ConditionApplied,
    ConsequenceRegistered,
    ConsequenceTriggered,
    DiceRolled,
    EventCancelled,
    EventScheduled,
    EventTriggered,
    ExperienceGained,
    FactRemembered,
    FeatureUsed,
    GoldChanged,
    HpChanged,
    ItemAdded,
    ItemEquipped,
    ItemRemoved,
    ItemUnequipped,
    KnowledgeShared,
    LevelUp,
    LocationChanged,
    LocationCreated,
    LocationsConnected,
    LocationUpdated,
    NpcCreated,
    NpcMoved,
    NpcRemoved,
    QuestCompleted,
    QuestCreated,
    QuestObjectiveCompleted,
    RageEnded,
    RageStarted,
    RestCompleted,
    RestType,
    SneakAttackUsed,
    SpellSlotUsed,
    StateAsserted,
    StateType,
    TimeAdvanced,
    TurnAdvanced,
)
from chronicle.story_memory import ConsequenceStatus, EventStatus, RelationshipType
from chronicle.story_memory.scheduled_event import AfterDuration
from chronicle.world import (
    NPC,
    Ability,
    CharacterClass,
    Condition,
    Disposition,
    Item,
    Location,
    LocationType,
    QuestStatus,
)


def _add_npc(world, name, **kwargs):
    npc = NPC(name, **kwargs)
    world.npcs[npc.id] = npc
    return npc


def _add_location(world, name, location_type=LocationType.OTHER):
    location = Location(name, location_type)
    world.known_locations[location.id] = location
    return location


class TestDispatch:
    def test_informational_effects_change_nothing(self, applier, world):
        before = world.player_character.hit_points.current
        applier.apply(DiceRolled(RollResult.minimal("1d20"), "attack"))
        assert world.player_character.hit_points.current == before

    def test_apply_effects_runs_in_order(self, world):
        apply_effects([GoldChanged(5, 5), GoldChanged(-2, 3)], world)
        assert world.player_character.inventory.gold == 3


class TestHitPoints:
    """Tests for hp_changed and the death effects."""

    def test_damage_to_zero_knocks_unconscious(self, applier, world):
        character = world.player_character
        applier.apply(HpChanged(character.id, -11, 0, 11, True))
        assert character.hit_points.current == 0
        assert character.has_condition(Condition.UNCONSCIOUS)

    def test_healing_from_zero_wakes_and_resets_saves(self, applier, world):
        character = world.player_character
        character.hit_points.current = 0
        character.add_condition(Condition.UNCONSCIOUS, "Dropped to 0 HP")
        character.death_saves.failures = 2
        applier.apply(HpChanged("player", 4, 4, 11))
        assert character.hit_points.current == 4
        assert not character.has_condition(Condition.UNCONSCIOUS)
        assert character.death_saves.failures == 0

    def test_player_damage_syncs_combatant(self, combat_world):
        character = combat_world.player_character
        EffectApplier(combat_world).apply(HpChanged(character.id, -3, 8, 11))
        assert combat_world.combat.find_combatant(character.id).current_hp == 8

    def test_combatant_hp_is_clamped(self, combat_world):
        applier = EffectApplier(combat_world)
        applier.apply(HpChanged("goblin-1", -20, 0, 7, True))
        goblin = combat_world.combat.find_combatant("goblin-1")
        assert goblin.current_hp == 0
        applier.apply(HpChanged("goblin-1", 50, 7, 7))
        assert goblin.current_hp == 7

    def test_unknown_target_is_ignored(self, applier, world):
        applier.apply(HpChanged("ghost", -5, 0, 5))
        assert world.player_character.hit_points.current == 11

    def test_character_died(self, applier, world):
        applier.apply(CharacterDied(world.player_character.id, "massive damage"))
        assert world.player_character.hit_points.current == 0
        assert world.player_character.death_saves.failures == 3

    def test_conditions_on_others_are_narrative_only(self, applier, world):
        applier.apply(ConditionApplied("goblin-1", Condition.PRONE, "shove"))
        applier.apply(ConditionApplied("player", Condition.POISONED, "venom", 3))
        assert world.player_character.has_condition(Condition.POISONED)
        assert not world.player_character.has_condition(Condition.PRONE)


class TestCombatEffects:
    def test_combatant_added_starts_combat(self, applier, world):
        applier.apply(CombatantAdded("orc-1", "Orc", 12, current_hp=15, max_hp=15))
        assert world.in_combat()
        assert world.combat.initiative_order() == ["Orc"]

    def test_combat_ended(self, combat_world):
        EffectApplier(combat_world).apply(CombatEnded())
        assert combat_world.combat is None

    def test_turn_advanced_ticks_conditions(self, combat_world):
        character = combat_world.player_character
        character.add_condition(Condition.STUNNED, "spell", 1)
        EffectApplier(combat_world).apply(TurnAdvanced(1, "Goblin"))
        assert combat_world.combat.turn_index == 1
        assert not character.has_condition(Condition.STUNNED)

    def test_sneak_attack_used(self, combat_world):
        character = combat_world.player_character
        EffectApplier(combat_world).apply(SneakAttackUsed(character.id, 1))
        assert character.id in combat_world.combat.sneak_attack_used


class TestTimeAndProgression:
    def test_time_advanced(self, applier, world):
        applier.apply(TimeAdvanced(90))
        assert (world.game_time.hour, world.game_time.minute) == (9, 30)

    def test_long_rest_restores_hit_points(self, applier, world):
        world.player_character.hit_points.current = 2
        applier.apply(RestCompleted(RestType.LONG))
        assert world.player_character.hit_points.current == 11

    def test_level_up_adds_average_hit_points(self, applier, world):
        character = world.player_character
        applier.apply(ExperienceGained(300, 300))
        applier.apply(LevelUp(2))
        # d10 average 6 + CON 1
        assert character.hit_points.maximum == 18
        assert character.level == 2
        assert character.hit_dice.total == {10: 2}
        assert character.experience == 300

    def test_level_up_grows_spell_slots(self, make_world):
        world = make_world(CharacterClass.WIZARD, name="Mira")
        EffectApplier(world).apply(LevelUp(3))
        slots = world.player_character.spellcasting.spell_slots
        assert (slots.get(1).total, slots.get(2).total) == (4, 2)

    def test_feature_used_sets_remaining(self, applier, world):
        applier.apply(FeatureUsed("Second Wind", 0))
        assert world.player_character.find_feature("Second Wind").uses.current == 0

    def test_spell_slot_used(self, make_world):
        world = make_world(CharacterClass.WIZARD, name="Mira")
        EffectApplier(world).apply(SpellSlotUsed(1, 1))
        assert world.player_character.spellcasting.spell_slots.get(1).used == 1

    def test_ability_score_is_clamped(self, applier, world):
        applier.apply(AbilityScoreModified(Ability.CHARISMA, -20, "curse"))
        assert world.player_character.ability_scores.get(Ability.CHARISMA) == 1


class TestClassResources:
    def test_ki_points(self, make_world):
        world = make_world(CharacterClass.MONK, level=3, name="Lin")
        EffectApplier(world).apply(ClassResourceUsed("Lin", "Ki Points", "flurry", 2))
        assert world.player_character.class_resources.ki_points == 1

    def test_action_surge_flag(self, applier, world):
        applier.apply(ClassResourceUsed("Aria", "Action Surge", "extra action"))
        assert world.player_character.class_resources.action_surge_used

    def test_rage_lifecycle(self, make_world):
        world = make_world(CharacterClass.BARBARIAN, name="Grom")
        applier = EffectApplier(world)
        resources = world.player_character.class_resources
        applier.apply(RageStarted(world.player_character.id, 2))
        assert (resources.rage_active, resources.rage_damage_bonus, resources.rage_rounds_remaining) == (
            True, 2, 10,
        )
        applier.apply(RageEnded(world.player_character.id, "voluntary"))
        assert not resources.rage_active
        assert resources.rage_rounds_remaining is None


class TestInventoryEffects:
    def test_item_added_uses_catalogue(self, applier, world):
        applier.apply(ItemAdded("longsword", 1, 1))
        item = world.player_character.inventory.find_item("Longsword")
        assert item.weight == 3

    def test_unknown_item_added(self, applier, world):
        applier.apply(ItemAdded("Silver Locket", 1, 1, item_type="treasure", value_gp=25))
        item = world.player_character.inventory.find_item("silver locket")
        assert item.value_gp == 25

    def test_item_removed_from_equipment(self, applier, world):
        world.player_character.equipment.main_hand = get_weapon("dagger")
        applier.apply(ItemRemoved("Dagger", 1, 0))
        assert world.player_character.equipment.main_hand is None

    def test_equip_returns_old_item(self, applier, world):
        character = world.player_character
        character.equipment.main_hand = get_weapon("dagger")
        character.inventory.add_item(Item("Longsword"))
        applier.apply(ItemEquipped("Longsword", "main_hand"))
        assert character.equipment.main_hand.name == "Longsword"
        assert character.inventory.find_item("Longsword") is None
        assert character.inventory.find_item("Dagger").quantity == 1

    def test_unequip_returns_item(self, applier, world):
        character = world.player_character
        character.equipment.main_hand = get_weapon("dagger")
        applier.apply(ItemUnequipped("Dagger", "weapon"))
        assert character.equipment.main_hand is None
        assert character.inventory.find_item("Dagger") is not None


class TestQuestEffects:
    def test_created_quest_upserts_by_name(self, applier, world):
        applier.apply(QuestCreated("Rats", "first"))
        applier.apply(QuestCreated("Rats", "second"))
        assert len(world.quests) == 1
        assert world.quests[0].description == "second"

    def test_objective_completed_by_substring(self, applier, world):
        applier.apply(QuestCreated("Rats", objectives=(("Kill the rat king", False),)))
        applier.apply(QuestObjectiveCompleted("rats", "rat king"))
        assert world.quests[0].objectives[0].completed

    def test_completed_quest_leaves_optional_objectives(self, applier, world):
        applier.apply(
            QuestCreated("Rats", objectives=(("Kill the rats", False), ("Save the cheese", True)))
        )
        applier.apply(QuestCompleted("Rats"))
        quest = world.quests[0]
        assert quest.status == QuestStatus.COMPLETED
        assert [o.completed for o in quest.objectives] == [True, False]

    def test_missing_quest_is_ignored(self, applier, world):
        applier.apply(QuestCompleted("Nothing Here"))
        assert world.quests == []


class TestNpcEffects:
    def test_created_npc_resolves_location(self, applier, world):
        inn = _add_location(world, "Prancing Pony", LocationType.BUILDING)
        applier.apply(NpcCreated("Barliman", location="prancing pony", disposition=Disposition.FRIENDLY))
        npc = world.find_npc("Barliman")
        assert npc.location_id == inn.id
        assert npc.disposition == Disposition.FRIENDLY

    def test_move_to_unknown_location_clears_id(self, applier, world):
        inn = _add_location(world, "Prancing Pony")
        npc = _add_npc(world, "Barliman", location_id=inn.id)
        applier.apply(NpcMoved("Barliman", "Prancing Pony", "Rivendell"))
        assert npc.location_id is None

    def test_temporary_removal_keeps_npc(self, applier, world):
        inn = _add_location(world, "Prancing Pony")
        npc = _add_npc(world, "Bill", location_id=inn.id)
        applier.apply(NpcRemoved("Bill", "travelling", permanent=False))
        assert world.find_npc("Bill") is npc
        assert npc.location_id is None

    def test_permanent_removal(self, applier, world):
        _add_npc(world, "Bill")
        applier.apply(NpcRemoved("Bill", "slain"))
        assert world.find_npc("Bill") is None


class TestLocationEffects:
    def test_bidirectional_connection_uses_opposite_direction(self, applier, world):
        bree = _add_location(world, "Bree")
        mill = _add_location(world, "Old Mill")
        applier.apply(LocationsConnected("Bree", "Old Mill", "north", 30))
        assert bree.connections[0].direction == "north"
        assert mill.connections[0].direction == "south"
        assert mill.connections[0].travel_time_minutes == 30

    def test_one_way_connection(self, applier, world):
        bree = _add_location(world, "Bree")
        mill = _add_location(world, "Old Mill")
        applier.apply(LocationsConnected("Bree", "Old Mill", "east", bidirectional=False))
        assert bree.is_connected_to("Old Mill")
        assert mill.connections == []

    def test_connection_to_unknown_location_is_ignored(self, applier, world):
        bree = _add_location(world, "Bree")
        applier.apply(LocationsConnected("Bree", "Mordor", "east"))
        assert bree.connections == []

    def test_recreated_location_keeps_connections(self, applier, world):
        bree = _add_location(world, "Bree")
        _add_location(world, "Old Mill")
        applier.apply(LocationsConnected("Bree", "Old Mill", "north"))
        applier.apply(LocationCreated("Bree", LocationType.TOWN, "A busy town."))
        recreated = world.find_location("Bree")
        assert recreated.id == bree.id
        assert recreated.description == "A busy town."
        assert recreated.is_connected_to("Old Mill")

    def test_location_updated(self, applier, world):
        mill = _add_location(world, "Old Mill")
        mill.items.append("sack")
        applier.apply(LocationUpdated("Old Mill", "changed", add_items=("key",), remove_items=("sack",)))
        assert mill.items == ["key"]

    def test_location_changed_registers_new_place(self, applier, world):
        applier.apply(LocationChanged("Unknown", "Bree", "town"))
        assert world.current_location.name == "Bree"
        assert world.current_location.location_type == LocationType.TOWN
        assert world.find_location("Unknown") is not None


class TestStateAsserted:
    def test_disposition(self, applier, world):
        npc = _add_npc(world, "Barliman")
        applier.apply(StateAsserted("Barliman", StateType.DISPOSITION, "neutral", "hostile"))
        assert npc.disposition == Disposition.HOSTILE

    def test_unknown_disposition_is_ignored(self, applier, world):
        npc = _add_npc(world, "Barliman")
        applier.apply(StateAsserted("Barliman", StateType.DISPOSITION, "neutral", "grumpy"))
        assert npc.disposition == Disposition.NEUTRAL

    def test_status_replaces_previous_status(self, applier, world):
        npc = _add_npc(world, "Barliman", known_information=["Status: asleep", "Owns an inn"])
        applier.apply(StateAsserted("Barliman", StateType.STATUS, None, "awake"))
        assert npc.known_information == ["Owns an inn", "Status: awake"]

    def test_location_note(self, applier, world):
        npc = _add_npc(world, "Barliman")
        applier.apply(StateAsserted("Barliman", StateType.LOCATION, None, "the cellar"))
        assert npc.known_information == ["Currently at the cellar"]

    def test_relationship_reaches_memory(self, applier, world, memory):
        _add_npc(world, "Bill")
        applier.apply(
            StateAsserted("Bill", StateType.RELATIONSHIP, None, "rival", "feud", target_entity="Ted")
        )
        relationship = memory.relationships[0]
        assert relationship.relationship_type == RelationshipType.RIVAL
        assert memory.entity_name(relationship.to_entity) == "Ted"


class TestStoryMemoryEffects:
    def test_fact_remembered(self, applier, memory):
        applier.apply(FactRemembered("Barliman", "npc", "Forgets messages", "character", ("Gandalf",)))
        fact = memory.facts[0]
        assert fact.content == "Forgets messages"
        assert memory.entity_name(fact.subject) == "Barliman"

    def test_consequence_keeps_reported_id(self, applier, memory):
        applier.apply(ConsequenceRegistered("c-123", "the player returns", "guards attack", "major"))
        assert memory.get_consequence("c-123").consequence_description == "guards attack"
        applier.apply(ConsequenceTriggered("c-123", "guards attack"))
        assert memory.get_consequence("c-123").status == ConsequenceStatus.TRIGGERED

    def test_knowledge_shared_updates_npc_and_memory(self, applier, world, memory):
        npc = _add_npc(world, "Barliman")
        applier.apply(KnowledgeShared("Barliman", "The ranger is Aragorn", "told_by"))
        assert "The ranger is Aragorn" in npc.known_information
        assert memory.knowledge[0].content == "The ranger is Aragorn"

    def test_event_lifecycle(self, applier, world, memory):
        trigger = AfterDuration(60, world.game_time.total_minutes() + 60)
        applier.apply(EventScheduled("Riders arrive", trigger, "in 1 hour"))
        applier.apply(EventScheduled("Market opens", trigger, "in 1 hour"))
        applier.apply(EventCancelled("market", "holiday"))
        applier.apply(EventTriggered("Riders arrive", event_id=1))
        statuses = [event.status for event in memory.scheduled_events]
        assert statuses == [EventStatus.TRIGGERED, EventStatus.CANCELLED]

    def test_memory_effects_without_memory_are_skipped(self, world):
        EffectApplier(world).apply(FactRemembered("Barliman", "npc", "Forgets messages"))
        assert world.npcs == {}


@pytest.mark.parametrize("amount, expected", [(-4, 7), (3, 11)])
def test_player_hp_changes_by_amount(applier, world, amount, expected):
    world.player_character.hit_points.current = 8 if amount > 0 else 11
    applier.apply(HpChanged("player", amount, expected, 11))
    assert world.player_character.hit_points.current == expected
