"""
Scheduled events and their cancellation.

An event with no time fields is accepted; it never comes due on its own
and can only be cancelled.
"""

from typing import Optional

from chronicle.rules.types import CancelEvent, Intent, ScheduleEvent
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


def _non_negative(data: ToolInput, key: str) -> Optional[int]:
    value = optional_int(data, key)
    return value if value is not None and value >= 0 else None


def _schedule_event(data: ToolInput, world: GameWorld) -> Intent:
    return ScheduleEvent(
        description=required_str(data, "description"),
        minutes=_non_negative(data, "minutes"),
        hours=_non_negative(data, "hours"),
        day=_non_negative(data, "day"),
        month=_non_negative(data, "month"),
        year=optional_int(data, "year"),
        hour=_non_negative(data, "hour"),
        daily_hour=_non_negative(data, "daily_hour"),
        daily_minute=_non_negative(data, "daily_minute"),
        location=optional_str(data, "location"),
        involved_entities=string_list(data, "involved_entities"),
        visibility=optional_str(data, "visibility", "public"),
        repeating=optional_bool(data, "repeating"),
    )


def _cancel_event(data: ToolInput, world: GameWorld) -> Intent:
    return CancelEvent(required_str(data, "event_description"), required_str(data, "reason"))


_PARSERS = {
    "schedule_event": _schedule_event,
    "cancel_event": _cancel_event,
}


def parse_schedule_tool(name: str, data: ToolInput, world: GameWorld) -> Optional[Intent]:
    return run_parser(_PARSERS, name, data, world)
