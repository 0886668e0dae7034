"""
Conditions that can be applied to a character.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Condition(str, Enum):
    """Standard conditions."""

    BLINDED = "blinded"
    CHARMED = "charmed"
    DEAFENED = "deafened"
    FRIGHTENED = "frightened"
    GRAPPLED = "grappled"
    INCAPACITATED = "incapacitated"
    INVISIBLE = "invisible"
    PARALYZED = "paralyzed"
    PETRIFIED = "petrified"
    POISONED = "poisoned"
    PRONE = "prone"
    RESTRAINED = "restrained"
    STUNNED = "stunned"
    UNCONSCIOUS = "unconscious"
    EXHAUSTION = "exhaustion"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    def is_incapacitating(self) -> bool:
        return self in (
            Condition.INCAPACITATED,
            Condition.PARALYZED,
            Condition.PETRIFIED,
            Condition.STUNNED,
            Condition.UNCONSCIOUS,
        )

    @classmethod
    def parse(cls, text: str) -> Optional["Condition"]:
        key = text.strip().lower()
        try:
            return cls(key)
        except ValueError:
            return None


@dataclass
class ActiveCondition:
    """A condition currently affecting a character."""

    condition: Condition
    source: str
    duration_rounds: Optional[int] = None
    level: int = 1  # only meaningful for exhaustion

    def __str__(self) -> str:
        if self.condition == Condition.EXHAUSTION:
            return f"Exhaustion ({self.level})"
        return self.condition.display_name
