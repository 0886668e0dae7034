"""
Ability scores, skills and proficiency.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Ability(str, Enum):
    """The six ability scores."""

    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    CONSTITUTION = "constitution"
    INTELLIGENCE = "intelligence"
    WISDOM = "wisdom"
    CHARISMA = "charisma"

    @property
    def abbreviation(self) -> str:
        return self.value[:3].upper()

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, text: str) -> Optional["Ability"]:
        """Parse a full name or three-letter abbreviation (case-insensitive)."""
        key = text.strip().lower()
        for ability in cls:
            if key in (ability.value, ability.value[:3]):
                return ability
        return None


class Skill(str, Enum):
    """Skills, each keyed to one ability."""

    ATHLETICS = "athletics"
    ACROBATICS = "acrobatics"
    SLEIGHT_OF_HAND = "sleight_of_hand"
    STEALTH = "stealth"
    ARCANA = "arcana"
    HISTORY = "history"
    INVESTIGATION = "investigation"
    NATURE = "nature"
    RELIGION = "religion"
    ANIMAL_HANDLING = "animal_handling"
    INSIGHT = "insight"
    MEDICINE = "medicine"
    PERCEPTION = "perception"
    SURVIVAL = "survival"
    DECEPTION = "deception"
    INTIMIDATION = "intimidation"
    PERFORMANCE = "performance"
    PERSUASION = "persuasion"

    @property
    def ability(self) -> Ability:
        return _SKILL_ABILITIES[self]

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title().replace(" Of ", " of ")

    @classmethod
    def parse(cls, text: str) -> Optional["Skill"]:
        """Parse 'Sleight of Hand', 'sleight_of_hand' or 'sleightofhand'."""
        key = text.strip().lower().replace(" ", "_").replace("-", "_")
        compact = key.replace("_", "")
        for skill in cls:
            if key == skill.value or compact == skill.value.replace("_", ""):
                return skill
        return None


_SKILL_ABILITIES = {
    Skill.ATHLETICS: Ability.STRENGTH,
    Skill.ACROBATICS: Ability.DEXTERITY,
    Skill.SLEIGHT_OF_HAND: Ability.DEXTERITY,
    Skill.STEALTH: Ability.DEXTERITY,
    Skill.ARCANA: Ability.INTELLIGENCE,
    Skill.HISTORY: Ability.INTELLIGENCE,
    Skill.INVESTIGATION: Ability.INTELLIGENCE,
    Skill.NATURE: Ability.INTELLIGENCE,
    Skill.RELIGION: Ability.INTELLIGENCE,
    Skill.ANIMAL_HANDLING: Ability.WISDOM,
    Skill.INSIGHT: Ability.WISDOM,
    Skill.MEDICINE: Ability.WISDOM,
    Skill.PERCEPTION: Ability.WISDOM,
    Skill.SURVIVAL: Ability.WISDOM,
    Skill.DECEPTION: Ability.CHARISMA,
    Skill.INTIMIDATION: Ability.CHARISMA,
    Skill.PERFORMANCE: Ability.CHARISMA,
    Skill.PERSUASION: Ability.CHARISMA,
}


class ProficiencyLevel(str, Enum):
    NONE = "none"
    PROFICIENT = "proficient"
    EXPERTISE = "expertise"

    def multiplier(self) -> int:
        return {"none": 0, "proficient": 1, "expertise": 2}[self.value]


def proficiency_bonus(level: int) -> int:
    """Proficiency bonus for a total character level (1-20)."""
    level = max(1, min(20, level))
    return 2 + (level - 1) // 4


@dataclass
class AbilityScores:
    """Container for the six ability scores."""

    strength: int = 10
    dexterity: int = 10
    constitution: int = 10
    intelligence: int = 10
    wisdom: int = 10
    charisma: int = 10

    @classmethod
    def standard_array(cls) -> "AbilityScores":
        return cls(15, 14, 13, 12, 10, 8)

    def get(self, ability: Ability) -> int:
        return getattr(self, ability.value)

    def set(self, ability: Ability, value: int) -> None:
        setattr(self, ability.value, value)

    def modifier(self, ability: Ability) -> int:
        # Floor division: 8-9 -> -1, 10-11 -> 0, 12-13 -> +1
        return (self.get(ability) - 10) // 2
