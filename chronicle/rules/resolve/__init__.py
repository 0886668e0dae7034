"""
Resolvers grouped by rule domain.

Each module defines one `resolve_<kind>(intent, world)` function per intent
kind it handles. The rules engine looks them up by name.
"""

from chronicle.rules.resolve import (
    checks,
    class_features,
    combat,
    inventory,
    misc,
    quests,
    spells,
    time,
    world,
)

DOMAINS = (checks, combat, spells, time, inventory, class_features, quests, world, misc)

__all__ = ["DOMAINS"]
