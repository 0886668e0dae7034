"""
Hit points, hit dice and death saving throws.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import math


@dataclass
class DamageResult:
    damage_taken: int
    dropped_to_zero: bool


@dataclass
class HitPoints:
    """
    Current, maximum and temporary hit points.

    Current hit points are kept within [0, maximum].
    """

    current: int
    maximum: int
    temporary: int = 0

    @classmethod
    def full(cls, maximum: int) -> "HitPoints":
        return cls(current=maximum, maximum=maximum)

    def take_damage(self, amount: int) -> DamageResult:
        """Apply damage, temporary hit points absorb it first."""
        remaining = amount
        if self.temporary > 0:
            absorbed = min(self.temporary, remaining)
            self.temporary -= absorbed
            remaining -= absorbed

        self.current = max(0, self.current - remaining)
        return DamageResult(damage_taken=amount, dropped_to_zero=self.current == 0)

    def heal(self, amount: int) -> int:
        """Heal up to maximum; returns the amount actually healed."""
        old = self.current
        self.current = max(0, min(self.maximum, self.current + amount))
        return self.current - old

    def add_temp_hp(self, amount: int) -> None:
        # Temporary hit points don't stack
        self.temporary = max(self.temporary, amount)

    def is_unconscious(self) -> bool:
        return self.current <= 0

    def ratio(self) -> float:
        if self.maximum <= 0:
            return 0.0
        return max(0.0, self.current / self.maximum)


@dataclass
class HitDice:
    """Hit dice pool keyed by die size (e.g. {10: 3} for 3d10)."""

    total: dict[int, int] = field(default_factory=dict)
    remaining: dict[int, int] = field(default_factory=dict)

    def add(self, sides: int, count: int = 1) -> None:
        self.total[sides] = self.total.get(sides, 0) + count
        self.remaining[sides] = self.remaining.get(sides, 0) + count

    def spend(self, sides: int) -> bool:
        if self.remaining.get(sides, 0) > 0:
            self.remaining[sides] -= 1
            return True
        return False

    def recover_half(self) -> None:
        for sides, total in self.total.items():
            to_recover = math.ceil(total / 2)
            self.remaining[sides] = min(total, self.remaining.get(sides, 0) + to_recover)

    def recover_all(self) -> None:
        self.remaining = dict(self.total)


@dataclass
class DeathSaves:
    successes: int = 0
    failures: int = 0

    def add_success(self) -> bool:
        """Returns True once the character is stable (three successes)."""
        self.successes += 1
        return self.successes >= 3

    def add_failure(self) -> bool:
        """Returns True once the character is dead (three failures)."""
        self.failures += 1
        return self.failures >= 3

    def reset(self) -> None:
        self.successes = 0
        self.failures = 0


class DamageType(str, Enum):
    SLASHING = "slashing"
    PIERCING = "piercing"
    BLUDGEONING = "bludgeoning"
    FIRE = "fire"
    COLD = "cold"
    LIGHTNING = "lightning"
    THUNDER = "thunder"
    ACID = "acid"
    POISON = "poison"
    NECROTIC = "necrotic"
    RADIANT = "radiant"
    FORCE = "force"
    PSYCHIC = "psychic"

    @classmethod
    def parse(cls, text: str) -> Optional["DamageType"]:
        try:
            return cls(text.strip().lower())
        except ValueError:
            return None
