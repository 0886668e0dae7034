"""
Location creation, connections and updates.
"""

from typing import Optional

from chronicle.rules.types import ConnectLocations, CreateLocation, Intent, UpdateLocation
from chronicle.tools.parsing.fields import (
    ToolInput,
    optional_bool,
    optional_int,
    optional_str,
    required_str,
    run_parser,
    string_list,
)
from chronicle.world.game_world import GameWorld
from chronicle.world.locations import LocationType


def _create_location(data: ToolInput, world: GameWorld) -> Intent:
    return CreateLocation(
        name=required_str(data, "name"),
        location_type=LocationType.parse(required_str(data, "location_type")),
        description=required_str(data, "description"),
        parent_location=optional_str(data, "parent_location"),
        items=string_list(data, "items"),
        npcs_present=string_list(data, "npcs_present"),
    )


def _connect_locations(data: ToolInput, world: GameWorld) -> Optional[Intent]:
    travel_time = optional_int(data, "travel_time_minutes")
    if travel_time is not None and travel_time < 0:
        return None
    return ConnectLocations(
        from_location=required_str(data, "from_location"),
        to_location=required_str(data, "to_location"),
        direction=optional_str(data, "direction"),
        travel_time_minutes=travel_time,
        bidirectional=optional_bool(data, "bidirectional", True),
    )


def _update_location(data: ToolInput, world: GameWorld) -> Intent:
    return UpdateLocation(
        location_name=required_str(data, "location_name"),
        new_description=optional_str(data, "new_description"),
        add_items=string_list(data, "add_items"),
        remove_items=string_list(data, "remove_items"),
        add_npcs=string_list(data, "add_npcs"),
        remove_npcs=string_list(data, "remove_npcs"),
    )


_PARSERS = {
    "create_location": _create_location,
    "connect_locations": _connect_locations,
    "update_location": _update_location,
}


def parse_locations_tool(name: str, data: ToolInput, world: GameWorld) -> Optional[Intent]:
    return run_parser(_PARSERS, name, data, world)
