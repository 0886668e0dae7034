"""
Informational tools.

These answer the narrator's questions about the current state directly from
the world and story memory. They never produce intents and never mutate
anything.
"""

from typing import Callable, Optional
import logging

from chronicle.story_memory import StoryMemory
from chronicle.tools.parsing.fields import ToolInput, optional_bool, optional_str
from chronicle.world.game_world import GameWorld
from chronicle.world.npcs import NPC

logger = logging.getLogger(__name__)

INFO_TOOLS = ("show_inventory", "query_state", "query_knowledge", "check_schedule")


def _unknown_entity(name: str) -> str:
    return f"No entity found with name '{name}'. Check spelling or create the NPC first."


def _knowledge_lines(npc: NPC, topic: Optional[str] = None) -> list[str]:
    if topic is None:
        return list(npc.known_information)
    key = topic.lower()
    return [info for info in npc.known_information if key in info.lower()]


# =============================================================================
# INVENTORY
# =============================================================================

def show_inventory(data: ToolInput, world: GameWorld, memory: StoryMemory) -> str:
    character = world.player_character
    equipment = character.equipment
    inventory = character.inventory

    lines = [f"=== {character.name}'s Inventory ===", ""]
    lines.append(f"Currency: {inventory.gold} gp, {inventory.silver} sp")
    lines.append("")
    lines.append(f"Current AC: {character.armor_class()}")
    lines.append("")

    lines.append("Equipment:")
    armor = equipment.armor
    if armor is not None:
        stealth = " [Stealth Disadvantage]" if armor.stealth_disadvantage else ""
        lines.append(
            f"  Armor: {armor.name} ({armor.armor_type.value.title()} armor, "
            f"base AC {armor.base_ac}){stealth}"
        )
    else:
        lines.append("  Armor: None (unarmored)")
    if equipment.shield is not None:
        lines.append(f"  Shield: {equipment.shield.name} (+2 AC)")
    else:
        lines.append("  Shield: None")
    weapon = equipment.main_hand
    if weapon is not None:
        two_handed = " [Two-Handed]" if weapon.is_two_handed() else ""
        lines.append(
            f"  Main Hand: {weapon.name} ({weapon.damage_dice} {weapon.damage_type.value}){two_handed}"
        )
    else:
        lines.append("  Main Hand: Empty")
    if equipment.off_hand is not None:
        lines.append(f"  Off Hand: {equipment.off_hand.name}")

    if not inventory.items:
        lines.extend(["", "Inventory: Empty"])
    else:
        lines.extend(["", "Inventory:"])
        for item in inventory.items:
            quantity = f" (x{item.quantity})" if item.quantity > 1 else ""
            value = f" [{item.value_gp:.0f} gp]" if item.value_gp > 0 else ""
            lines.append(f"  - {item.name}{quantity}{value}")

    lines.extend(["", f"Total Weight: {inventory.total_weight():.1f} lb"])
    return "\n".join(lines) + "\n"


# =============================================================================
# ENTITY STATE AND KNOWLEDGE
# =============================================================================

def query_state(data: ToolInput, world: GameWorld, memory: StoryMemory) -> str:
    entity_name = optional_str(data, "entity_name")
    if entity_name is None:
        return "Error: entity_name is required"
    state_type = optional_str(data, "state_type", "all")

    npc = world.find_npc(entity_name)
    if npc is None:
        return _unknown_entity(entity_name)

    location = world.npc_location_name(npc) or "Unknown"
    knowledge = _knowledge_lines(npc)
    lines = [f"=== State of {npc.name} ===", ""]

    if state_type == "disposition":
        lines.append(f"Disposition: {npc.disposition.value}")
    elif state_type == "location":
        lines.append(f"Location: {location}")
    elif state_type == "knowledge":
        if knowledge:
            lines.append("Knowledge:")
            lines.extend(f"  - {info}" for info in knowledge)
        else:
            lines.append("Knowledge: (none recorded)")
    else:
        lines.append(f"Disposition: {npc.disposition.value}")
        lines.append(f"Location: {location}")
        lines.append(f"Occupation: {npc.occupation or 'Unknown'}")
        if knowledge:
            lines.append("Knowledge:")
            lines.extend(f"  - {info}" for info in knowledge)
    return "\n".join(lines) + "\n"


def query_knowledge(data: ToolInput, world: GameWorld, memory: StoryMemory) -> str:
    """
    What an NPC knows: the NPC's own notes plus any knowledge entries
    recorded for them in story memory, optionally filtered by topic.
    """
    entity_name = optional_str(data, "entity_name")
    if entity_name is None:
        return "Error: entity_name is required"
    topic = optional_str(data, "topic")

    npc = world.find_npc(entity_name)
    if npc is None:
        return _unknown_entity(entity_name)

    lines = [f"=== Knowledge of {npc.name} ===", ""]
    known = _knowledge_lines(npc, topic)

    entity_id = memory.find_entity_id(npc.name)
    entries = memory.knowledge_of(entity_id) if entity_id else []
    if topic is not None:
        entries = [k for k in entries if topic.lower() in k.content.lower()]

    if not npc.known_information and not entries and topic is None:
        lines.append("No recorded knowledge.")
    elif not known and not entries:
        if topic is not None:
            lines.append(f"No knowledge about '{topic}'.")
        else:
            lines.append("No recorded knowledge.")
    else:
        lines.append(f"{npc.name} knows:")
        lines.extend(f"  - {info}" for info in known)
        for entry in entries:
            source = entry.learned_from.description() if entry.learned_from else "unknown source"
            lines.append(
                f"  - {entry.content} ({entry.verification_status.display_name}, {source})"
            )
    return "\n".join(lines) + "\n"


# =============================================================================
# SCHEDULE
# =============================================================================

def check_schedule(data: ToolInput, world: GameWorld, memory: StoryMemory) -> str:
    location = optional_str(data, "location")
    include_private = optional_bool(data, "include_private")

    events = memory.pending_events() if include_private else memory.visible_pending_events()
    if location is not None:
        key = location.lower()
        events = [e for e in events if e.location and key in e.location.lower()]

    result = "=== Upcoming Events ===\n\n"
    if not events:
        if location is not None:
            return result + f"No upcoming events at {location}.\n"
        return result + "No upcoming events scheduled.\n"
    return result + memory.build_schedule_summary(
        world.game_time, events=events, include_private=include_private
    )


_INFO_HANDLERS: dict[str, Callable[[ToolInput, GameWorld, StoryMemory], str]] = {
    "show_inventory": show_inventory,
    "query_state": query_state,
    "query_knowledge": query_knowledge,
    "check_schedule": check_schedule,
}


def is_info_tool(name: str) -> bool:
    return name in _INFO_HANDLERS


def execute_info_tool(
    name: str, data: ToolInput, world: GameWorld, memory: StoryMemory
) -> Optional[str]:
    """
    Run an informational tool.

    Returns:
        Formatted text, or None if the name is not an informational tool
    """
    handler = _INFO_HANDLERS.get(name)
    if handler is None:
        return None
    if not isinstance(data, dict):
        data = {}
    logger.debug(f"Info tool '{name}' queried")
    return handler(data, world, memory)
