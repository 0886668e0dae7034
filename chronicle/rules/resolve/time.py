"""
Rests and the passage of time.
"""

from chronicle.rules.types import (
    AdvanceTime,
    LongRest,
    Resolution,
    RestCompleted,
    RestType,
    ShortRest,
    TimeAdvanced,
)
from chronicle.world.game_world import GameWorld

SHORT_REST_MINUTES = 60
LONG_REST_MINUTES = 480


def _rest(world: GameWorld, rest_type: RestType, minutes: int, duration: str) -> Resolution:
    if world.in_combat():
        return Resolution(f"Cannot take a {rest_type.value} rest while in combat!")
    return Resolution(
        f"The party takes a {rest_type.value} rest, spending {duration} resting.",
        [TimeAdvanced(minutes), RestCompleted(rest_type)],
    )


def resolve_short_rest(intent: ShortRest, world: GameWorld) -> Resolution:
    return _rest(world, RestType.SHORT, SHORT_REST_MINUTES, "1 hour")


def resolve_long_rest(intent: LongRest, world: GameWorld) -> Resolution:
    return _rest(world, RestType.LONG, LONG_REST_MINUTES, "8 hours")


def resolve_advance_time(intent: AdvanceTime, world: GameWorld) -> Resolution:
    hours, minutes = divmod(max(0, intent.minutes), 60)
    if hours > 0 and minutes > 0:
        text = f"{hours} hours and {minutes} minutes pass."
    elif hours > 0:
        text = f"{hours} hours pass."
    else:
        text = f"{minutes} minutes pass."
    return Resolution(text, [TimeAdvanced(intent.minutes)])
