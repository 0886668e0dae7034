"""
Dice rolls, skill and ability checks, saving throws.
"""

from typing import Optional

from chronicle.rules.types import (
    AbilityCheck,
    ConcentrationCheck,
    DeathSave,
    Intent,
    RollDice,
    SavingThrow,
    SkillCheck,
)
from chronicle.tools.parsing.fields import (
    ToolInput,
    ToolInputError,
    advantage,
    optional_str,
    required_int,
    required_str,
    run_parser,
)
from chronicle.world.abilities import Ability, Skill
from chronicle.world.game_world import GameWorld


def _ability(data: ToolInput) -> Ability:
    ability = Ability.parse(required_str(data, "ability"))
    if ability is None:
        raise ToolInputError(f"unknown ability '{data.get('ability')}'")
    return ability


def _roll_dice(data: ToolInput, world: GameWorld) -> Intent:
    return RollDice(required_str(data, "notation"), optional_str(data, "purpose", ""))


def _skill_check(data: ToolInput, world: GameWorld) -> Intent:
    skill = Skill.parse(required_str(data, "skill"))
    if skill is None:
        raise ToolInputError(f"unknown skill '{data.get('skill')}'")
    return SkillCheck(
        character_id=world.player_character.id,
        skill=skill,
        dc=required_int(data, "dc"),
        advantage=advantage(data),
        description=optional_str(data, "description", ""),
    )


def _ability_check(data: ToolInput, world: GameWorld) -> Intent:
    return AbilityCheck(
        character_id=world.player_character.id,
        ability=_ability(data),
        dc=required_int(data, "dc"),
        advantage=advantage(data),
        description=optional_str(data, "description", ""),
    )


def _saving_throw(data: ToolInput, world: GameWorld) -> Intent:
    return SavingThrow(
        character_id=world.player_character.id,
        ability=_ability(data),
        dc=required_int(data, "dc"),
        advantage=advantage(data),
        source=optional_str(data, "source", ""),
    )


def _concentration_check(data: ToolInput, world: GameWorld) -> Optional[Intent]:
    damage_taken = required_int(data, "damage_taken")
    if damage_taken <= 0:
        return None
    return ConcentrationCheck(
        character_id=world.player_character.id,
        damage_taken=damage_taken,
        spell_name=optional_str(data, "spell_name", "the spell"),
    )


def _death_save(data: ToolInput, world: GameWorld) -> Intent:
    return DeathSave(world.player_character.id)


_PARSERS = {
    "roll_dice": _roll_dice,
    "skill_check": _skill_check,
    "ability_check": _ability_check,
    "saving_throw": _saving_throw,
    "concentration_check": _concentration_check,
    "death_save": _death_save,
}


def parse_checks_tool(name: str, data: ToolInput, world: GameWorld) -> Optional[Intent]:
    return run_parser(_PARSERS, name, data, world)
