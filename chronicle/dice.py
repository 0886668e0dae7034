"""
Dice engine for the Chronicle rules engine.

All randomness in the rules engine goes through DiceRoller so that rolls are
logged and reproducible under a fixed seed.

Notation: NdS[kh|kl M][+/-B], several dice groups may be chained with '+'
(e.g. '2d6+1d4+3'). 'kh' keeps the highest M dice, 'kl' the lowest.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import logging
import random
import re

logger = logging.getLogger(__name__)

# Oldest rolls are dropped once the log is full
ROLL_LOG_LIMIT = 1000


class DiceError(ValueError):
    """Raised when dice notation cannot be parsed."""


class Advantage(str, Enum):
    """Advantage state of a d20 roll."""

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"

    def combine(self, other: "Advantage") -> "Advantage":
        """
        Combine two advantage sources.

        Disadvantage from either source wins, so a forced disadvantage
        (heavy armor on a Stealth check) is never cancelled out.
        """
        if Advantage.DISADVANTAGE in (self, other):
            return Advantage.DISADVANTAGE
        if Advantage.ADVANTAGE in (self, other):
            return Advantage.ADVANTAGE
        return Advantage.NORMAL

    @classmethod
    def from_flags(cls, advantage: bool = False, disadvantage: bool = False) -> "Advantage":
        if disadvantage:
            return cls.DISADVANTAGE
        if advantage:
            return cls.ADVANTAGE
        return cls.NORMAL


# =============================================================================
# NOTATION PARSING
# =============================================================================


_TERM_PATTERN = re.compile(r"([+-]?)([^+-]+)")
_DICE_PATTERN = re.compile(r"^(\d*)d(\d+)(?:(kh|kl)(\d+))?$")


@dataclass(frozen=True)
class DiceGroup:
    """One NdS group of a dice expression."""

    count: int
    sides: int
    keep: Optional[str] = None  # "kh" or "kl"
    keep_count: Optional[int] = None

    def __str__(self) -> str:
        text = f"{self.count}d{self.sides}"
        if self.keep:
            text += f"{self.keep}{self.keep_count}"
        return text


@dataclass(frozen=True)
class DiceExpression:
    """A parsed dice expression."""

    notation: str
    groups: tuple[DiceGroup, ...]
    modifier: int = 0


def parse(notation: str) -> DiceExpression:
    """
    Parse dice notation into a DiceExpression.

    Raises:
        DiceError: If the notation is empty or malformed.
    """
    if not notation or not notation.strip():
        raise DiceError("Empty dice notation")

    text = re.sub(r"\s+", "", notation).lower()
    terms = _TERM_PATTERN.findall(text)
    if "".join(sign + body for sign, body in terms) != text:
        raise DiceError(f"Invalid dice notation: {notation!r}")

    groups: list[DiceGroup] = []
    modifier = 0
    for sign, body in terms:
        if body.isdigit():
            value = int(body)
            modifier += -value if sign == "-" else value
            continue

        match = _DICE_PATTERN.match(body)
        if not match:
            raise DiceError(f"Invalid dice term {body!r} in {notation!r}")
        if sign == "-":
            raise DiceError(f"Subtracting dice is not supported: {notation!r}")

        count = int(match.group(1)) if match.group(1) else 1
        sides = int(match.group(2))
        if count < 1 or sides < 1:
            raise DiceError(f"Dice count and sides must be positive: {notation!r}")

        keep = match.group(3)
        keep_count = int(match.group(4)) if match.group(4) else None
        if keep and not (1 <= keep_count <= count):
            raise DiceError(f"Cannot keep {keep_count} of {count} dice: {notation!r}")

        groups.append(DiceGroup(count=count, sides=sides, keep=keep, keep_count=keep_count))

    if not groups:
        raise DiceError(f"No dice in notation: {notation!r}")

    return DiceExpression(notation=notation.strip(), groups=tuple(groups), modifier=modifier)


# =============================================================================
# ROLL RESULTS
# =============================================================================


@dataclass
class GroupResult:
    """Faces rolled for one dice group."""

    sides: int
    rolls: list[int]
    kept: list[int]

    @property
    def subtotal(self) -> int:
        return sum(self.kept)


@dataclass
class RollResult:
    """Result of a dice roll with full information."""

    expression: str
    groups: list[GroupResult]
    modifier: int
    total: int
    reason: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def components(self) -> list[GroupResult]:
        return self.groups

    @property
    def rolls(self) -> list[int]:
        """All kept faces, in group order."""
        return [face for group in self.groups for face in group.kept]

    def _first_d20_face(self) -> Optional[int]:
        for group in self.groups:
            if group.sides == 20 and group.kept:
                return group.kept[0]
        return None

    @property
    def natural_20(self) -> bool:
        return self._first_d20_face() == 20

    @property
    def natural_1(self) -> bool:
        return self._first_d20_face() == 1

    @property
    def natural(self) -> int:
        """The unmodified face of the first die (the d20 face on checks)."""
        face = self._first_d20_face()
        if face is not None:
            return face
        return self.rolls[0] if self.rolls else 0

    def __str__(self) -> str:
        if self.modifier > 0:
            return f"{self.expression}: {self.rolls} + {self.modifier} = {self.total}"
        elif self.modifier < 0:
            return f"{self.expression}: {self.rolls} - {abs(self.modifier)} = {self.total}"
        return f"{self.expression}: {self.rolls} = {self.total}"

    @classmethod
    def minimal(cls, reason: str = "") -> "RollResult":
        """The deterministic last-resort result: 1 on a d4."""
        return cls(
            expression="1d4",
            groups=[GroupResult(sides=4, rolls=[1], kept=[1])],
            modifier=0,
            total=1,
            reason=reason,
        )


# =============================================================================
# DICE ROLLER
# =============================================================================


class DiceRoller:
    """
    Centralized randomization interface.
    All dice rolls must go through this class for reproducibility and logging.
    """

    _instance = None
    _seed: Optional[int] = None
    _roll_log: deque = deque(maxlen=ROLL_LOG_LIMIT)

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def set_seed(cls, seed: int) -> None:
        """Set random seed for reproducibility."""
        cls._seed = seed
        random.seed(seed)

    @classmethod
    def roll(cls, notation: str, reason: str = "") -> RollResult:
        """
        Roll dice using standard notation (e.g. '2d6', '1d20+5', '4d6kh3').

        Args:
            notation: Dice notation string
            reason: Why this roll is being made (for logging)

        Returns:
            RollResult with individual faces and total

        Raises:
            DiceError: If the notation is malformed
        """
        expression = parse(notation)

        groups = []
        for group in expression.groups:
            rolls = [random.randint(1, group.sides) for _ in range(group.count)]
            if group.keep == "kh":
                kept = sorted(rolls, reverse=True)[: group.keep_count]
            elif group.keep == "kl":
                kept = sorted(rolls)[: group.keep_count]
            else:
                kept = list(rolls)
            groups.append(GroupResult(sides=group.sides, rolls=rolls, kept=kept))

        total = sum(g.subtotal for g in groups) + expression.modifier
        result = RollResult(
            expression=expression.notation,
            groups=groups,
            modifier=expression.modifier,
            total=total,
            reason=reason,
        )

        cls._roll_log.append(result)
        logger.debug(f"Rolled {result} ({reason})" if reason else f"Rolled {result}")
        return result

    @classmethod
    def roll_d20(cls, modifier: int = 0, reason: str = "") -> RollResult:
        """Convenience method for a single d20 roll with a flat modifier."""
        return cls.roll(_with_modifier("1d20", modifier), reason)

    @classmethod
    def roll_with_advantage(
        cls,
        notation: str,
        advantage: Advantage = Advantage.NORMAL,
        reason: str = "",
    ) -> RollResult:
        """
        Roll once (NORMAL) or twice keeping the higher (ADVANTAGE) or lower
        (DISADVANTAGE) total.
        """
        first = cls.roll(notation, reason)
        if advantage == Advantage.NORMAL:
            return first

        second = cls.roll(notation, reason)
        if advantage == Advantage.ADVANTAGE:
            return first if first.total >= second.total else second
        return first if first.total <= second.total else second

    @classmethod
    def get_roll_log(cls) -> list:
        """Get the most recent rolls, oldest first (at most ROLL_LOG_LIMIT)."""
        return list(cls._roll_log)

    @classmethod
    def clear_roll_log(cls) -> None:
        """Clear the roll log."""
        cls._roll_log = deque(maxlen=ROLL_LOG_LIMIT)


def _with_modifier(notation: str, modifier: int) -> str:
    if modifier > 0:
        return f"{notation}+{modifier}"
    if modifier < 0:
        return f"{notation}{modifier}"
    return notation


def roll(notation: str, reason: str = "") -> RollResult:
    """Module-level shortcut for DiceRoller.roll."""
    return DiceRoller.roll(notation, reason)


def roll_with_advantage(
    notation: str, advantage: Advantage = Advantage.NORMAL, reason: str = ""
) -> RollResult:
    """Module-level shortcut for DiceRoller.roll_with_advantage."""
    return DiceRoller.roll_with_advantage(notation, advantage, reason)


def roll_d20(modifier: int = 0, advantage: Advantage = Advantage.NORMAL, reason: str = "") -> RollResult:
    """Roll a d20 check with a flat modifier and advantage state."""
    return DiceRoller.roll_with_advantage(_with_modifier("1d20", modifier), advantage, reason)
