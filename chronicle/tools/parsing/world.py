"""
Rests, travel, spells, experience, features, facts and consequences.
"""

from typing import Optional

from chronicle.rules.types import (
    CastSpell,
    ChangeLocation,
    GainExperience,
    Intent,
    LongRest,
    Move,
    RegisterConsequence,
    RememberFact,
    ShortRest,
    UseFeature,
)
from chronicle.tools.parsing.fields import (
    ToolInput,
    optional_float,
    optional_int,
    optional_str,
    required_int,
    required_str,
    run_parser,
    string_list,
)
from chronicle.world.game_world import GameWorld


def _short_rest(data: ToolInput, world: GameWorld) -> Intent:
    return ShortRest()


def _long_rest(data: ToolInput, world: GameWorld) -> Intent:
    return LongRest()


def _change_location(data: ToolInput, world: GameWorld) -> Intent:
    return ChangeLocation(
        new_location=required_str(data, "new_location"),
        location_type=optional_str(data, "location_type"),
        description=optional_str(data, "description"),
    )


def _move(data: ToolInput, world: GameWorld) -> Optional[Intent]:
    distance = optional_int(data, "distance_feet")
    if distance is not None and distance < 0:
        return None
    return Move(world.player_character.id, required_str(data, "destination"), distance)


def _cast_spell(data: ToolInput, world: GameWorld) -> Optional[Intent]:
    slot_level = optional_int(data, "slot_level", 0)
    if not 0 <= slot_level <= 9:
        return None
    return CastSpell(
        caster_id=world.player_character.id,
        spell_name=required_str(data, "spell_name"),
        spell_level=slot_level,
        target_names=string_list(data, "targets"),
    )


def _gain_experience(data: ToolInput, world: GameWorld) -> Optional[Intent]:
    amount = required_int(data, "amount")
    return GainExperience(amount) if amount > 0 else None


def _use_feature(data: ToolInput, world: GameWorld) -> Intent:
    return UseFeature(world.player_character.id, required_str(data, "feature_name"))


def _remember_fact(data: ToolInput, world: GameWorld) -> Intent:
    return RememberFact(
        subject_name=required_str(data, "subject_name"),
        subject_type=optional_str(data, "subject_type", "other"),
        fact=required_str(data, "fact"),
        category=optional_str(data, "category", "other"),
        related_entities=string_list(data, "related_entities"),
        importance=optional_float(data, "importance", 0.5),
    )


def _register_consequence(data: ToolInput, world: GameWorld) -> Intent:
    return RegisterConsequence(
        trigger_description=required_str(data, "trigger_description"),
        consequence_description=required_str(data, "consequence_description"),
        severity=optional_str(data, "severity", "moderate"),
        related_entities=string_list(data, "related_entities"),
        importance=optional_float(data, "importance", 0.5),
        expires_in_turns=optional_int(data, "expires_in_turns"),
    )


_PARSERS = {
    "short_rest": _short_rest,
    "long_rest": _long_rest,
    "change_location": _change_location,
    "move": _move,
    "cast_spell": _cast_spell,
    "gain_experience": _gain_experience,
    "use_feature": _use_feature,
    "remember_fact": _remember_fact,
    "register_consequence": _register_consequence,
}


def parse_world_tool(name: str, data: ToolInput, world: GameWorld) -> Optional[Intent]:
    return run_parser(_PARSERS, name, data, world)
