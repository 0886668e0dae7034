"""
Tool call parsing: narrator tool calls in, rules intents out.

Each domain module owns a set of tool names. parse_tool_call tries them in a
fixed order and returns the first intent produced, or None when no parser
accepts the call.
"""

from typing import Optional
import logging

from chronicle.rules.types import Intent
from chronicle.tools.parsing.checks import parse_checks_tool
from chronicle.tools.parsing.class_features import parse_class_features_tool
from chronicle.tools.parsing.combat import parse_combat_tool
from chronicle.tools.parsing.fields import ToolInput, ToolInputError
from chronicle.tools.parsing.gameplay import parse_gameplay_tool
from chronicle.tools.parsing.inventory import parse_inventory_tool
from chronicle.tools.parsing.knowledge import parse_knowledge_tool
from chronicle.tools.parsing.locations import parse_locations_tool
from chronicle.tools.parsing.npc import parse_npc_tool
from chronicle.tools.parsing.quests import parse_quests_tool
from chronicle.tools.parsing.schedule import parse_schedule_tool
from chronicle.tools.parsing.state import parse_state_tool
from chronicle.tools.parsing.world import parse_world_tool
from chronicle.world.game_world import GameWorld

logger = logging.getLogger(__name__)

PARSER_CHAIN = (
    parse_checks_tool,
    parse_combat_tool,
    parse_inventory_tool,
    parse_class_features_tool,
    parse_world_tool,
    parse_quests_tool,
    parse_npc_tool,
    parse_locations_tool,
    parse_gameplay_tool,
    parse_state_tool,
    parse_knowledge_tool,
    parse_schedule_tool,
)


def parse_tool_call(name: str, data: ToolInput, world: GameWorld) -> Optional[Intent]:
    """
    Convert a tool call into an intent.

    Args:
        name: Tool name as sent by the narrator
        data: Decoded JSON input for the tool
        world: Current world, used for defaults such as the player's id

    Returns:
        The intent, or None if the tool is unknown or its input is invalid
    """
    for parser in PARSER_CHAIN:
        intent = parser(name, data, world)
        if intent is not None:
            return intent
    logger.debug(f"No intent for tool call '{name}'")
    return None


__all__ = [
    "PARSER_CHAIN",
    "ToolInput",
    "ToolInputError",
    "parse_tool_call",
]
