"""
Field readers shared by the tool parsers.

Tool input arrives as decoded JSON from the narrator model. Required fields
that are missing or of the wrong type raise ToolInputError; run_parser turns
that into None so that no exception crosses the parsing boundary.
"""

from typing import Any, Callable, Mapping, Optional
import logging

from chronicle.dice import Advantage
from chronicle.rules.types import Intent
from chronicle.world.game_world import GameWorld

logger = logging.getLogger(__name__)

ToolInput = Mapping[str, Any]
ToolParser = Callable[[ToolInput, GameWorld], Optional[Intent]]


class ToolInputError(ValueError):
    """A required tool field is missing or has the wrong type."""


def _as_int(value: Any) -> Optional[int]:
    # bool is an int subclass; JSON true is never a number here
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def required_str(data: ToolInput, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ToolInputError(f"'{key}' must be a string")
    return value


def optional_str(data: ToolInput, key: str, default: Optional[str] = None) -> Optional[str]:
    value = data.get(key)
    return value if isinstance(value, str) else default


def required_int(data: ToolInput, key: str) -> int:
    value = _as_int(data.get(key))
    if value is None:
        raise ToolInputError(f"'{key}' must be an integer")
    return value


def optional_int(data: ToolInput, key: str, default: Optional[int] = None) -> Optional[int]:
    value = _as_int(data.get(key))
    return default if value is None else value


def optional_float(data: ToolInput, key: str, default: Optional[float] = None) -> Optional[float]:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)


def optional_bool(data: ToolInput, key: str, default: bool = False) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def string_list(data: ToolInput, key: str) -> tuple[str, ...]:
    """Strings from a list field; non-string entries are skipped."""
    value = data.get(key)
    if not isinstance(value, list):
        return ()
    return tuple(v for v in value if isinstance(v, str))


def advantage(data: ToolInput) -> Advantage:
    """
    Read advantage either as a string field ("advantage": "disadvantage")
    or as boolean flags ("advantage": true, "disadvantage": true).
    """
    value = data.get("advantage")
    if isinstance(value, str):
        try:
            return Advantage(value.strip().lower())
        except ValueError:
            return Advantage.NORMAL
    return Advantage.from_flags(
        advantage=optional_bool(data, "advantage"),
        disadvantage=optional_bool(data, "disadvantage"),
    )


def run_parser(
    parsers: Mapping[str, ToolParser],
    name: str,
    data: Any,
    world: GameWorld,
) -> Optional[Intent]:
    """Run the parser registered for name; None for unknown tools or bad input."""
    parser = parsers.get(name)
    if parser is None:
        return None
    if not isinstance(data, Mapping):
        data = {}
    try:
        return parser(data, world)
    except ToolInputError as e:
        logger.debug(f"Rejected {name} tool call: {e}")
        return None
