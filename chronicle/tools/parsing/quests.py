"""
Quest creation, objectives and completion.
"""

from typing import Any, Optional

from chronicle.rules.types import (
    AddQuestObjective,
    CompleteObjective,
    CompleteQuest,
    CreateQuest,
    FailQuest,
    Intent,
    UpdateQuest,
)
from chronicle.tools.parsing.fields import (
    ToolInput,
    optional_bool,
    optional_str,
    required_str,
    run_parser,
    string_list,
)
from chronicle.world.game_world import GameWorld


def _objectives(value: Any) -> tuple[tuple[str, bool], ...]:
    """Objectives as plain strings or {"description", "optional"} objects."""
    if not isinstance(value, list):
        return ()
    objectives = []
    for entry in value:
        if isinstance(entry, str):
            objectives.append((entry, False))
        elif isinstance(entry, dict) and isinstance(entry.get("description"), str):
            objectives.append((entry["description"], optional_bool(entry, "optional")))
    return tuple(objectives)


def _create_quest(data: ToolInput, world: GameWorld) -> Intent:
    return CreateQuest(
        name=required_str(data, "name"),
        description=optional_str(data, "description", ""),
        giver=optional_str(data, "giver"),
        objectives=_objectives(data.get("objectives")),
        rewards=string_list(data, "rewards"),
    )


def _add_quest_objective(data: ToolInput, world: GameWorld) -> Intent:
    return AddQuestObjective(
        quest_name=required_str(data, "quest_name"),
        objective=required_str(data, "objective"),
        optional=optional_bool(data, "optional"),
    )


def _complete_objective(data: ToolInput, world: GameWorld) -> Intent:
    return CompleteObjective(
        required_str(data, "quest_name"), required_str(data, "objective_description")
    )


def _complete_quest(data: ToolInput, world: GameWorld) -> Intent:
    return CompleteQuest(required_str(data, "quest_name"), optional_str(data, "completion_note"))


def _fail_quest(data: ToolInput, world: GameWorld) -> Intent:
    return FailQuest(required_str(data, "quest_name"), optional_str(data, "failure_reason", ""))


def _update_quest(data: ToolInput, world: GameWorld) -> Intent:
    return UpdateQuest(
        quest_name=required_str(data, "quest_name"),
        new_description=optional_str(data, "new_description"),
        add_rewards=string_list(data, "add_rewards"),
    )


_PARSERS = {
    "create_quest": _create_quest,
    "add_quest_objective": _add_quest_objective,
    "complete_objective": _complete_objective,
    "complete_quest": _complete_quest,
    "fail_quest": _fail_quest,
    "update_quest": _update_quest,
}


def parse_quests_tool(name: str, data: ToolInput, world: GameWorld) -> Optional[Intent]:
    return run_parser(_PARSERS, name, data, world)
