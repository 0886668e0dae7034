"""
Tool registry: the fixed set of tools the narrator may call.

The registry is built once and is immutable; it is what a narrator
integration advertises to the model.
"""

from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    required: tuple[str, ...] = ()


_TOOLS = (
    # Checks
    ToolDefinition("roll_dice", "Roll dice using standard notation such as 2d6+3 or 4d6kh3.", ("notation",)),
    ToolDefinition("skill_check", "Have the player make a skill check against a DC.", ("skill", "dc")),
    ToolDefinition("ability_check", "Have the player make a raw ability check against a DC.", ("ability", "dc")),
    ToolDefinition("saving_throw", "Have the player make a saving throw against a DC.", ("ability", "dc")),
    ToolDefinition("concentration_check", "Constitution save to keep concentrating after taking damage.", ("damage_taken",)),
    ToolDefinition("death_save", "Roll a death saving throw for the unconscious player."),
    # Combat
    ToolDefinition("attack", "The player attacks a target with a weapon.", ("target",)),
    ToolDefinition("apply_damage", "Deal damage to the player or a combatant.", ("amount", "damage_type")),
    ToolDefinition("apply_healing", "Restore hit points to the player or a combatant.", ("amount",)),
    ToolDefinition("apply_condition", "Apply a condition such as poisoned or prone.", ("condition",)),
    ToolDefinition("remove_condition", "Remove a condition.", ("condition",)),
    ToolDefinition("start_combat", "Begin combat with the listed combatants and roll initiative."),
    ToolDefinition("end_combat", "End the current combat."),
    ToolDefinition("next_turn", "Advance to the next combatant's turn."),
    ToolDefinition("roll_initiative", "Roll initiative for one combatant."),
    # Inventory
    ToolDefinition("give_item", "Add an item to the player's inventory.", ("item_name",)),
    ToolDefinition("remove_item", "Remove an item from the player's inventory.", ("item_name",)),
    ToolDefinition("use_item", "Use or consume an item.", ("item_name",)),
    ToolDefinition("equip_item", "Equip an item from the inventory.", ("item_name",)),
    ToolDefinition("unequip_item", "Unequip whatever is in a slot.", ("slot",)),
    ToolDefinition("adjust_gold", "Add or remove gold pieces.", ("amount",)),
    ToolDefinition("adjust_silver", "Add or remove silver pieces.", ("amount",)),
    # Class features
    ToolDefinition("use_rage", "Barbarian enters a rage."),
    ToolDefinition("end_rage", "End an active rage."),
    ToolDefinition("use_ki", "Monk spends ki points on an ability.", ("points", "ability")),
    ToolDefinition("use_lay_on_hands", "Paladin heals or cures from the Lay on Hands pool.", ("target",)),
    ToolDefinition("use_divine_smite", "Paladin expends a spell slot for radiant damage.", ("spell_slot_level",)),
    ToolDefinition("use_bardic_inspiration", "Bard grants an inspiration die.", ("target",)),
    ToolDefinition("use_action_surge", "Fighter takes an additional action.", ("action_taken",)),
    ToolDefinition("use_second_wind", "Fighter regains hit points as a bonus action."),
    # World
    ToolDefinition("short_rest", "Take a short rest."),
    ToolDefinition("long_rest", "Take a long rest."),
    ToolDefinition("change_location", "Move the party to a new location.", ("new_location",)),
    ToolDefinition("move", "Move within the current scene.", ("destination",)),
    ToolDefinition("cast_spell", "The player casts a spell.", ("spell_name",)),
    ToolDefinition("gain_experience", "Award experience points.", ("amount",)),
    ToolDefinition("use_feature", "Use a limited-use class or racial feature.", ("feature_name",)),
    ToolDefinition("remember_fact", "Record a story fact for later recall.", ("subject_name", "fact")),
    ToolDefinition(
        "register_consequence",
        "Register a consequence that fires when its trigger happens.",
        ("trigger_description", "consequence_description"),
    ),
    # Quests
    ToolDefinition("create_quest", "Create a quest.", ("name",)),
    ToolDefinition("add_quest_objective", "Add an objective to a quest.", ("quest_name", "objective")),
    ToolDefinition("complete_objective", "Mark a quest objective complete.", ("quest_name", "objective_description")),
    ToolDefinition("complete_quest", "Mark a quest complete.", ("quest_name",)),
    ToolDefinition("fail_quest", "Mark a quest failed.", ("quest_name",)),
    ToolDefinition("update_quest", "Update a quest's description or rewards.", ("quest_name",)),
    # NPCs
    ToolDefinition("create_npc", "Create an NPC.", ("name", "description", "personality")),
    ToolDefinition("update_npc", "Update an NPC's disposition, notes or description.", ("npc_name",)),
    ToolDefinition("move_npc", "Move an NPC to another location.", ("npc_name", "destination")),
    ToolDefinition("remove_npc", "Remove an NPC from the scene or the world.", ("npc_name", "reason")),
    # Locations
    ToolDefinition("create_location", "Create a location.", ("name", "location_type", "description")),
    ToolDefinition("connect_locations", "Connect two locations.", ("from_location", "to_location")),
    ToolDefinition("update_location", "Update a location's description, items or NPCs.", ("location_name",)),
    # Gameplay
    ToolDefinition("modify_ability_score", "Change an ability score.", ("ability", "modifier", "source")),
    ToolDefinition("advance_time", "Advance the game clock.", ("minutes",)),
    ToolDefinition("restore_spell_slot", "Restore one expended spell slot.", ("slot_level", "source")),
    # State, knowledge and schedule
    ToolDefinition(
        "assert_state",
        "Declare a change to an entity's disposition, location, status, knowledge or relationship.",
        ("entity_name", "state_type", "new_value", "reason"),
    ),
    ToolDefinition(
        "share_knowledge",
        "Record that an entity learned something, and how reliable it is.",
        ("knowing_entity", "content", "source"),
    ),
    ToolDefinition("schedule_event", "Schedule an event at a time, after a delay or daily.", ("description",)),
    ToolDefinition("cancel_event", "Cancel a scheduled event.", ("event_description", "reason")),
    # Read-only queries
    ToolDefinition("show_inventory", "Show the player's inventory and equipment."),
    ToolDefinition("query_state", "Look up an NPC's current state.", ("entity_name",)),
    ToolDefinition("query_knowledge", "Look up what an NPC knows.", ("entity_name",)),
    ToolDefinition("check_schedule", "List upcoming scheduled events."),
)


@lru_cache(maxsize=1)
def build_tool_registry() -> tuple[ToolDefinition, ...]:
    return _TOOLS


def tool_names() -> frozenset[str]:
    return frozenset(tool.name for tool in build_tool_registry())
