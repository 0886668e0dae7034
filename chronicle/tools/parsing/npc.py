"""
NPC creation, updates, movement and removal.
"""

from typing import Optional

from chronicle.rules.types import CreateNpc, Intent, MoveNpc, RemoveNpc, UpdateNpc
from chronicle.tools.parsing.fields import (
    ToolInput,
    optional_bool,
    optional_str,
    required_str,
    run_parser,
    string_list,
)
from chronicle.world.game_world import GameWorld
from chronicle.world.npcs import Disposition


def _create_npc(data: ToolInput, world: GameWorld) -> Intent:
    return CreateNpc(
        name=required_str(data, "name"),
        description=required_str(data, "description"),
        personality=required_str(data, "personality"),
        occupation=optional_str(data, "occupation"),
        disposition=Disposition.parse(optional_str(data, "disposition")) or Disposition.NEUTRAL,
        location=optional_str(data, "location"),
        known_information=string_list(data, "known_information"),
    )


def _update_npc(data: ToolInput, world: GameWorld) -> Intent:
    # add_information may be one string or a list of them
    information = optional_str(data, "add_information")
    if information is None:
        information = "; ".join(string_list(data, "add_information")) or None
    return UpdateNpc(
        npc_name=required_str(data, "npc_name"),
        disposition=Disposition.parse(optional_str(data, "disposition")),
        add_information=information,
        new_description=optional_str(data, "new_description"),
        new_personality=optional_str(data, "new_personality"),
    )


def _move_npc(data: ToolInput, world: GameWorld) -> Intent:
    return MoveNpc(
        npc_name=required_str(data, "npc_name"),
        destination=required_str(data, "destination"),
        reason=optional_str(data, "reason"),
    )


def _remove_npc(data: ToolInput, world: GameWorld) -> Intent:
    return RemoveNpc(
        npc_name=required_str(data, "npc_name"),
        reason=required_str(data, "reason"),
        permanent=optional_bool(data, "permanent", False),
    )


_PARSERS = {
    "create_npc": _create_npc,
    "update_npc": _update_npc,
    "move_npc": _move_npc,
    "remove_npc": _remove_npc,
}


def parse_npc_tool(name: str, data: ToolInput, world: GameWorld) -> Optional[Intent]:
    return run_parser(_PARSERS, name, data, world)
