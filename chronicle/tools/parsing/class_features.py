"""
Class feature tools. The acting character is always the player.
"""

from typing import Optional

from chronicle.rules.types import (
    EndRage,
    Intent,
    UseActionSurge,
    UseBardicInspiration,
    UseDivineSmite,
    UseKi,
    UseLayOnHands,
    UseRage,
    UseSecondWind,
)
from chronicle.tools.parsing.fields import (
    ToolInput,
    optional_bool,
    optional_int,
    optional_str,
    required_int,
    required_str,
    run_parser,
)
from chronicle.world.game_world import GameWorld


def _use_rage(data: ToolInput, world: GameWorld) -> Intent:
    return UseRage(world.player_character.id)


def _end_rage(data: ToolInput, world: GameWorld) -> Intent:
    return EndRage(world.player_character.id, optional_str(data, "reason", "voluntary"))


def _use_ki(data: ToolInput, world: GameWorld) -> Optional[Intent]:
    points = required_int(data, "points")
    ability = required_str(data, "ability")
    if points <= 0:
        return None
    return UseKi(world.player_character.id, points, ability)


def _use_lay_on_hands(data: ToolInput, world: GameWorld) -> Intent:
    return UseLayOnHands(
        character_id=world.player_character.id,
        target_name=required_str(data, "target"),
        hp_amount=max(0, optional_int(data, "hp_amount", 0)),
        cure_disease=optional_bool(data, "cure_disease"),
        neutralize_poison=optional_bool(data, "neutralize_poison"),
    )


def _use_divine_smite(data: ToolInput, world: GameWorld) -> Intent:
    return UseDivineSmite(
        character_id=world.player_character.id,
        spell_slot_level=required_int(data, "spell_slot_level"),
        target_is_undead_or_fiend=optional_bool(data, "target_is_undead_or_fiend"),
    )


def _use_bardic_inspiration(data: ToolInput, world: GameWorld) -> Intent:
    return UseBardicInspiration(
        character_id=world.player_character.id,
        target_name=required_str(data, "target"),
        die_size=optional_str(data, "die_size", "d6"),
    )


def _use_action_surge(data: ToolInput, world: GameWorld) -> Intent:
    return UseActionSurge(world.player_character.id, required_str(data, "action_taken"))


def _use_second_wind(data: ToolInput, world: GameWorld) -> Intent:
    return UseSecondWind(world.player_character.id)


_PARSERS = {
    "use_rage": _use_rage,
    "end_rage": _end_rage,
    "use_ki": _use_ki,
    "use_lay_on_hands": _use_lay_on_hands,
    "use_divine_smite": _use_divine_smite,
    "use_bardic_inspiration": _use_bardic_inspiration,
    "use_action_surge": _use_action_surge,
    "use_second_wind": _use_second_wind,
}


def parse_class_features_tool(name: str, data: ToolInput, world: GameWorld) -> Optional[Intent]:
    return run_parser(_PARSERS, name, data, world)
