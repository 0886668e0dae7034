"""
Ability score changes, time advancement and spell slot restoration.
"""

from typing import Optional

from chronicle.rules.types import AdvanceTime, Intent, ModifyAbilityScore, RestoreSpellSlot
from chronicle.tools.parsing.fields import (
    ToolInput,
    ToolInputError,
    optional_str,
    required_int,
    required_str,
    run_parser,
)
from chronicle.world.abilities import Ability
from chronicle.world.game_world import GameWorld


def _modify_ability_score(data: ToolInput, world: GameWorld) -> Intent:
    ability = Ability.parse(required_str(data, "ability"))
    if ability is None:
        raise ToolInputError(f"unknown ability '{data.get('ability')}'")
    return ModifyAbilityScore(
        ability=ability,
        modifier=required_int(data, "modifier"),
        source=required_str(data, "source"),
        duration=optional_str(data, "duration"),
    )


def _advance_time(data: ToolInput, world: GameWorld) -> Optional[Intent]:
    minutes = required_int(data, "minutes")
    return AdvanceTime(minutes) if minutes >= 0 else None


def _restore_spell_slot(data: ToolInput, world: GameWorld) -> Optional[Intent]:
    slot_level = required_int(data, "slot_level")
    source = required_str(data, "source")
    if not 1 <= slot_level <= 9:
        return None
    return RestoreSpellSlot(slot_level, source)


_PARSERS = {
    "modify_ability_score": _modify_ability_score,
    "advance_time": _advance_time,
    "restore_spell_slot": _restore_spell_slot,
}


def parse_gameplay_tool(name: str, data: ToolInput, world: GameWorld) -> Optional[Intent]:
    return run_parser(_PARSERS, name, data, world)
