"""
Attacks, damage, healing, conditions and combat flow.

Targets are given by name; an omitted target means the player character.
"""

from typing import Any, Optional
import uuid

from chronicle.rules.types import (
    ApplyCondition,
    Attack,
    CombatantInit,
    Damage,
    EndCombat,
    Heal,
    Intent,
    NextTurn,
    RemoveCondition,
    RollInitiative,
    StartCombat,
)
from chronicle.tools.parsing.fields import (
    ToolInput,
    ToolInputError,
    advantage,
    optional_bool,
    optional_int,
    optional_str,
    required_int,
    required_str,
    run_parser,
)
from chronicle.world.conditions import Condition
from chronicle.world.game_world import GameWorld
from chronicle.world.health import DamageType


def _target(data: ToolInput, world: GameWorld) -> str:
    return optional_str(data, "target") or world.player_character.id


def _condition(data: ToolInput) -> Condition:
    condition = Condition.parse(required_str(data, "condition"))
    if condition is None:
        raise ToolInputError(f"unknown condition '{data.get('condition')}'")
    return condition


def _attack(data: ToolInput, world: GameWorld) -> Intent:
    return Attack(
        attacker_id=world.player_character.id,
        target_id=required_str(data, "target"),
        weapon_name=optional_str(data, "weapon", ""),
        advantage=advantage(data),
    )


def _apply_damage(data: ToolInput, world: GameWorld) -> Optional[Intent]:
    amount = required_int(data, "amount")
    damage_type = DamageType.parse(required_str(data, "damage_type"))
    if amount <= 0 or damage_type is None:
        return None
    return Damage(
        target_id=_target(data, world),
        amount=amount,
        damage_type=damage_type,
        source=optional_str(data, "source", "unknown"),
    )


def _apply_healing(data: ToolInput, world: GameWorld) -> Optional[Intent]:
    amount = required_int(data, "amount")
    if amount <= 0:
        return None
    return Heal(
        target_id=_target(data, world),
        amount=amount,
        source=optional_str(data, "source", "unknown"),
    )


def _apply_condition(data: ToolInput, world: GameWorld) -> Intent:
    return ApplyCondition(
        target_id=_target(data, world),
        condition=_condition(data),
        source=optional_str(data, "source", ""),
        duration_rounds=optional_int(data, "duration_rounds"),
    )


def _remove_condition(data: ToolInput, world: GameWorld) -> Intent:
    return RemoveCondition(_target(data, world), _condition(data))


def _combatant(entry: Any) -> CombatantInit:
    if not isinstance(entry, dict):
        raise ToolInputError("combatant entries must be objects")
    max_hp = optional_int(entry, "max_hp", optional_int(entry, "hp", 1))
    return CombatantInit(
        id=optional_str(entry, "id") or str(uuid.uuid4()),
        name=required_str(entry, "name"),
        is_player=optional_bool(entry, "is_player"),
        is_ally=optional_bool(entry, "is_ally"),
        current_hp=optional_int(entry, "current_hp", max_hp),
        max_hp=max_hp,
        armor_class=optional_int(entry, "armor_class", 10),
        initiative_modifier=optional_int(entry, "initiative_modifier", 0),
    )


def _start_combat(data: ToolInput, world: GameWorld) -> Intent:
    """The player joins the roster unless an entry already marks them."""
    entries = data.get("combatants")
    combatants = [_combatant(e) for e in entries] if isinstance(entries, list) else []
    if not any(c.is_player for c in combatants):
        character = world.player_character
        combatants.insert(0, CombatantInit(id=character.id, name=character.name, is_player=True))
    return StartCombat(tuple(combatants))


def _end_combat(data: ToolInput, world: GameWorld) -> Intent:
    return EndCombat()


def _next_turn(data: ToolInput, world: GameWorld) -> Intent:
    return NextTurn()


def _roll_initiative(data: ToolInput, world: GameWorld) -> Intent:
    character = world.player_character
    name = optional_str(data, "name") or character.name
    player = name.lower() == character.name.lower()
    return RollInitiative(
        character_id=character.id if player else name,
        name=name,
        modifier=optional_int(data, "modifier", 0),
        is_player=player,
    )


_PARSERS = {
    "attack": _attack,
    "apply_damage": _apply_damage,
    "apply_healing": _apply_healing,
    "apply_condition": _apply_condition,
    "remove_condition": _remove_condition,
    "start_combat": _start_combat,
    "end_combat": _end_combat,
    "next_turn": _next_turn,
    "roll_initiative": _roll_initiative,
}


def parse_combat_tool(name: str, data: ToolInput, world: GameWorld) -> Optional[Intent]:
    return run_parser(_PARSERS, name, data, world)
