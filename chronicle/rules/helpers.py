"""
Helpers shared by the resolvers.
"""

from typing import Optional
import logging
import math
import re

from chronicle.dice import Advantage, DiceError, DiceRoller, RollResult
from chronicle.world.character import Character
from chronicle.world.combat import Combatant
from chronicle.world.game_world import GameWorld

logger = logging.getLogger(__name__)

_DICE_COUNT = re.compile(r"(\d*)d(\d+)")

# Total experience needed to reach each level, index 0 is level 1.
XP_THRESHOLDS = [
    0, 300, 900, 2700, 6500, 14000, 23000, 34000, 48000, 64000,
    85000, 100000, 120000, 140000, 165000, 195000, 225000, 265000, 305000, 355000,
]


def roll_with_fallback(primary: str, fallback: str, reason: str = "") -> RollResult:
    """
    Roll primary; on invalid notation roll fallback, and if that fails too
    return the minimal 1-on-a-d4 result. Never raises.
    """
    try:
        return DiceRoller.roll(primary, reason)
    except DiceError as e:
        logger.warning(f"Invalid dice '{primary}' ({e}), falling back to '{fallback}'")
    try:
        return DiceRoller.roll(fallback, reason)
    except DiceError as e:
        logger.warning(f"Invalid fallback dice '{fallback}' ({e}), using minimal roll")
    return RollResult.minimal(reason)


def roll_check(modifier: int, advantage: Advantage, reason: str = "") -> RollResult:
    notation = f"1d20+{modifier}" if modifier >= 0 else f"1d20{modifier}"
    return DiceRoller.roll_with_advantage(notation, advantage, reason)


def double_dice(expression: str) -> str:
    """Double every dice count in an expression ('2d6+3' -> '4d6+3'); a flat value doubles."""
    if "d" not in expression.lower():
        try:
            return str(int(expression) * 2)
        except ValueError:
            return expression

    def _double(match: re.Match) -> str:
        count = int(match.group(1) or 1)
        return f"{count * 2}d{match.group(2)}"

    return _DICE_COUNT.sub(_double, expression.lower())


def with_bonus(expression: str, bonus: int) -> str:
    if bonus > 0:
        return f"{expression}+{bonus}"
    if bonus < 0:
        return f"{expression}{bonus}"
    return expression


def sneak_attack_dice(rogue_level: int) -> int:
    return math.ceil(rogue_level / 2)


def level_for_experience(experience: int) -> int:
    level = 1
    for i, threshold in enumerate(XP_THRESHOLDS):
        if experience >= threshold:
            level = i + 1
    return level


def rage_damage_bonus(barbarian_level: int) -> int:
    if barbarian_level >= 16:
        return 4
    if barbarian_level >= 9:
        return 3
    return 2


def is_player(world: GameWorld, target_id: Optional[str]) -> bool:
    """True when target_id names the player character (by id, by name, or empty)."""
    character = world.player_character
    if not target_id:
        return True
    return target_id == character.id or target_id.lower() in (character.name.lower(), "player")


def find_combatant(world: GameWorld, key: str) -> Optional[Combatant]:
    if world.combat is None or not key:
        return None
    return world.combat.find_combatant(key)


def character_for(world: GameWorld, character_id: Optional[str]) -> Character:
    """The character an intent acts on; only the player character has a full sheet."""
    return world.player_character


def hp_status(current: int, maximum: int) -> str:
    if current <= maximum // 4:
        return f" (HP: {current}/{maximum} - critically wounded)"
    if current <= maximum // 2:
        return f" (HP: {current}/{maximum} - bloodied)"
    return f" (HP: {current}/{maximum})"


def plural(count: int, word: str) -> str:
    return word if count == 1 else f"{word}s"
