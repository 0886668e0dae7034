"""
Rules engine: intents in, resolutions out, effects applied in order.

Intent and effect variants live in chronicle.rules.types.
"""

from chronicle.rules.effects import EffectApplier, apply_effect, apply_effects
from chronicle.rules.engine import RulesEngine
from chronicle.rules.types import (
    CombatantInit,
    Effect,
    Intent,
    Resolution,
    RestType,
    StateType,
)

__all__ = [
    "CombatantInit",
    "Effect",
    "EffectApplier",
    "Intent",
    "Resolution",
    "RestType",
    "RulesEngine",
    "StateType",
    "apply_effect",
    "apply_effects",
]
