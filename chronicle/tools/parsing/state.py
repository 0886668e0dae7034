"""
Declarative state assertions.
"""

from typing import Optional

from chronicle.rules.types import AssertState, Intent, StateType
from chronicle.tools.parsing.fields import (
    ToolInput,
    ToolInputError,
    optional_str,
    required_str,
    run_parser,
)
from chronicle.world.game_world import GameWorld


def _assert_state(data: ToolInput, world: GameWorld) -> Intent:
    state_type = StateType.parse(required_str(data, "state_type"))
    if state_type is None:
        raise ToolInputError(f"unknown state type '{data.get('state_type')}'")
    return AssertState(
        entity_name=required_str(data, "entity_name"),
        state_type=state_type,
        new_value=required_str(data, "new_value"),
        reason=required_str(data, "reason"),
        target_entity=optional_str(data, "target_entity"),
    )


_PARSERS = {"assert_state": _assert_state}


def parse_state_tool(name: str, data: ToolInput, world: GameWorld) -> Optional[Intent]:
    return run_parser(_PARSERS, name, data, world)
