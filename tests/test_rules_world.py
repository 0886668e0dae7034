"""
Tests for world-building resolvers (NPCs, locations, quests, asserted
state) and the experience, feature and story-memory intents.
"""

from chronicle.rules.types import (
    AddQuestObjective,
    AssertState,
    CancelEvent,
    ChangeLocation,
    CompleteQuest,
    ConnectLocations,
    CreateLocation,
    CreateNpc,
    CreateQuest,
    FailQuest,
    GainExperience,
    ModifyAbilityScore,
    Move,
    MoveNpc,
    RegisterConsequence,
    RememberFact,
    RemoveNpc,
    ScheduleEvent,
    ShareKnowledge,
    StateType,
    UpdateLocation,
    UpdateNpc,
    UseFeature,
)
from chronicle.story_memory.scheduled_event import AfterDuration, EventVisibility, TimeOfDayTrigger
from chronicle.world import NPC, Ability, Condition, Disposition, Location, LocationType


def _add_npc(world, name, **kwargs):
    npc = NPC(name, **kwargs)
    world.npcs[npc.id] = npc
    return npc


class TestQuests:
    def test_create_quest(self, engine, world):
        intent = CreateQuest("Rat Problem", "Clear the cellar", giver="Barliman",
                             objectives=(("Kill the rats", False),))
        resolution = engine.resolve(intent, world)
        assert resolution.narrative == 'Quest Started: "Rat Problem" (from Barliman)'
        assert resolution.effects[0].objectives == (("Kill the rats", False),)

    def test_add_optional_objective(self, engine, world):
        resolution = engine.resolve(AddQuestObjective("Rat Problem", "Find the nest", True), world)
        assert resolution.narrative == 'New objective for "Rat Problem": Find the nest (optional)'

    def test_complete_and_fail_do_not_check_existence(self, engine, world):
        completed = engine.resolve(CompleteQuest("Nothing Here"), world)
        failed = engine.resolve(FailQuest("Nothing Here", "too slow"), world)
        assert completed.narrative == 'Quest Completed: "Nothing Here"'
        assert failed.narrative == 'Quest Failed: "Nothing Here" - too slow'
        assert completed.effect_kinds() == ["quest_completed"]


class TestNpcs:
    def test_create_npc(self, engine, world):
        intent = CreateNpc("Barliman", occupation="innkeeper", disposition=Disposition.FRIENDLY,
                           location="Prancing Pony")
        resolution = engine.resolve(intent, world)
        assert resolution.narrative == "NPC Barliman (friendly) (innkeeper) at Prancing Pony enters the world"
        assert resolution.effect_kinds() == ["npc_created"]

    def test_duplicate_npc_is_rejected(self, engine, world):
        _add_npc(world, "Barliman")
        resolution = engine.resolve(CreateNpc("barliman"), world)
        assert resolution.narrative.startswith("DUPLICATE NPC ERROR")
        assert resolution.effects == []

    def test_update_unknown_npc(self, engine, world):
        resolution = engine.resolve(UpdateNpc("Ghost"), world)
        assert resolution.narrative == "NPC 'Ghost' not found in the world"
        assert resolution.effects == []

    def test_update_lists_changes(self, engine, world):
        _add_npc(world, "Barliman")
        intent = UpdateNpc("Barliman", disposition=Disposition.HOSTILE, add_information="owes money")
        resolution = engine.resolve(intent, world)
        assert resolution.narrative == "NPC Barliman updated: disposition changed, new information learned"

    def test_move_npc_records_previous_location(self, engine, world):
        tavern = Location("Prancing Pony", LocationType.BUILDING)
        world.known_locations[tavern.id] = tavern
        _add_npc(world, "Barliman", location_id=tavern.id)
        resolution = engine.resolve(MoveNpc("Barliman", "Market", "shopping"), world)
        assert resolution.narrative == "NPC Barliman moves to Market (shopping)"
        effect = resolution.effects[0]
        assert (effect.from_location, effect.to_location) == ("Prancing Pony", "Market")

    def test_remove_npc(self, engine, world):
        _add_npc(world, "Bill")
        permanent = engine.resolve(RemoveNpc("Bill", "slain"), world)
        temporary = engine.resolve(RemoveNpc("Bill", "travelling", permanent=False), world)
        assert permanent.narrative == "NPC Bill permanently removed: slain"
        assert temporary.narrative == "NPC Bill temporarily removed: travelling"

    def test_remove_unknown_npc(self, engine, world):
        assert engine.resolve(RemoveNpc("Nobody"), world).effects == []


class TestLocations:
    def test_create_location(self, engine, world):
        intent = CreateLocation("Old Mill", LocationType.BUILDING, "A ruined mill.", parent_location="Bree",
                                items=("millstone",))
        resolution = engine.resolve(intent, world)
        assert resolution.narrative == (
            "New location created: Old Mill (building) in Bree with items: millstone - A ruined mill."
        )

    def test_connect_locations(self, engine, world):
        resolution = engine.resolve(ConnectLocations("Bree", "Old Mill", "north", 30, False), world)
        assert resolution.narrative == (
            "Locations connected: Bree to Old Mill (north direction), 30 minutes travel time (one-way)"
        )

    def test_update_unknown_location(self, engine, world):
        resolution = engine.resolve(UpdateLocation("Atlantis"), world)
        assert resolution.narrative == "Location 'Atlantis' not found in the world"

    def test_update_current_location(self, engine, world):
        resolution = engine.resolve(UpdateLocation("unknown", add_items=("key",)), world)
        assert resolution.narrative == "Location unknown updated: added items: key"
        assert resolution.effect_kinds() == ["location_updated"]

    def test_change_location(self, engine, world):
        resolution = engine.resolve(ChangeLocation("Bree", "town"), world)
        assert resolution.narrative == "You travel from Unknown to Bree."
        assert resolution.effects[0].previous_location == "Unknown"


class TestMove:
    def test_move_is_narrative_only(self, engine, world):
        resolution = engine.resolve(Move("player", "the door", 20), world)
        assert resolution.narrative == "Aria moves 20 feet to the door."
        assert resolution.effects == []

    def test_combat_speed_limit(self, engine, combat_world):
        resolution = engine.resolve(Move("player", "the archer", 45), combat_world)
        assert resolution.narrative == "Aria can only move 30 feet this turn (45 feet requested)."

    def test_unconscious_cannot_move(self, engine, world):
        world.player_character.add_condition(Condition.UNCONSCIOUS, "Dropped to 0 HP")
        resolution = engine.resolve(Move("player", "away"), world)
        assert resolution.narrative == "Aria is unconscious and cannot move!"


class TestAssertState:
    def test_disposition_records_old_value(self, engine, world):
        _add_npc(world, "Barliman")
        resolution = engine.resolve(
            AssertState("Barliman", StateType.DISPOSITION, "friendly", "paid in full"), world
        )
        assert resolution.narrative == "Barliman's disposition is now friendly (reason: paid in full)"
        assert resolution.effects[0].old_value == "neutral"

    def test_relationship_with_target(self, engine, world):
        resolution = engine.resolve(
            AssertState("Bill", StateType.RELATIONSHIP, "rival", "feud", target_entity="Ted"), world
        )
        assert resolution.narrative == "Bill's relationship with Ted is now rival (reason: feud)"
        assert resolution.effects[0].old_value is None


class TestExperienceAndFeatures:
    def test_gain_experience(self, engine, world):
        resolution = engine.resolve(GainExperience(50), world)
        assert resolution.narrative == "Gained 50 experience points (Total: 50)"
        assert resolution.effect_kinds() == ["experience_gained"]

    def test_level_up_threshold(self, engine, world):
        world.player_character.experience = 250
        resolution = engine.resolve(GainExperience(50), world)
        assert resolution.effect_kinds() == ["experience_gained", "level_up"]
        assert resolution.effects[1].new_level == 2

    def test_use_feature(self, engine, world):
        resolution = engine.resolve(UseFeature("player", "Second Wind"), world)
        assert resolution.narrative == "Aria uses Second Wind (0 uses remaining)"
        assert resolution.effects[0].uses_remaining == 0

    def test_missing_feature(self, engine, world):
        resolution = engine.resolve(UseFeature("player", "Wild Shape"), world)
        assert resolution.narrative == "Aria does not have the feature Wild Shape"

    def test_modify_ability_score(self, engine, world):
        resolution = engine.resolve(ModifyAbilityScore(Ability.STRENGTH, -2, "curse", "1 hour"), world)
        assert resolution.narrative == "Strength modified by -2 for 1 hour from curse"


class TestStoryMemoryIntents:
    def test_remember_fact(self, engine, world):
        resolution = engine.resolve(
            RememberFact("Barliman", "npc", "Forgets messages", related_entities=("Gandalf",)), world
        )
        assert resolution.narrative == "Noted: Barliman (npc) - Forgets messages (related: Gandalf)"

    def test_register_consequence_mints_id(self, engine, world):
        intent = RegisterConsequence("the player returns", "the guards attack", "MAJOR", importance=0.8,
                                     expires_in_turns=5)
        first = engine.resolve(intent, world).effects[0]
        second = engine.resolve(intent, world).effects[0]
        assert first.consequence_id != second.consequence_id
        assert first.severity == "major"

    def test_unknown_severity_defaults_to_moderate(self, engine, world):
        effect = engine.resolve(RegisterConsequence("x", "y", "apocalyptic"), world).effects[0]
        assert effect.severity == "moderate"

    def test_share_knowledge(self, engine, world):
        resolution = engine.resolve(
            ShareKnowledge("Barliman", "The ranger is Aragorn", "told_by", "unverified", "at the bar"), world
        )
        assert resolution.narrative == (
            'Barliman now knows: "The ranger is Aragorn" (from: told_by, unverified) [at the bar]'
        )


class TestScheduleEvent:
    def test_relative_private_event(self, engine, world):
        intent = ScheduleEvent("The Black Riders arrive", hours=2, location="Bree", visibility="secret")
        resolution = engine.resolve(intent, world)
        assert resolution.narrative == 'Scheduled: "The Black Riders arrive" in 2 hours at Bree (private)'
        effect = resolution.effects[0]
        assert isinstance(effect.trigger, AfterDuration)
        assert effect.trigger.trigger_at_minute == world.game_time.total_minutes() + 120
        assert effect.visibility == EventVisibility.PRIVATE

    def test_daily_event(self, engine, world):
        resolution = engine.resolve(
            ScheduleEvent("Market opens", daily_hour=9, repeating=True, visibility="hinted"), world
        )
        assert resolution.narrative == 'Scheduled: "Market opens" daily at 09:00 (hinted)'
        assert resolution.effects[0].trigger == TimeOfDayTrigger(9, 0)

    def test_no_timing(self, engine, world):
        resolution = engine.resolve(ScheduleEvent("Something stirs"), world)
        assert resolution.effects[0].trigger is None
        assert "at an unspecified time" in resolution.narrative

    def test_cancel_event(self, engine, world):
        resolution = engine.resolve(CancelEvent("Market", "holiday"), world)
        assert resolution.narrative == 'Event cancelled: "Market" - holiday'
        assert resolution.effect_kinds() == ["event_cancelled"]
