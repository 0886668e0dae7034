"""
The player character: classes, features, resources and derived statistics.

A Character is built once from a character sheet at session start (see
create_character) and afterwards only changed by the effect applier.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import math
import uuid

from chronicle.world.abilities import (
    Ability,
    AbilityScores,
    ProficiencyLevel,
    Skill,
    proficiency_bonus,
)
from chronicle.world.conditions import ActiveCondition, Condition
from chronicle.world.health import DeathSaves, HitDice, HitPoints
from chronicle.world.inventory import Equipment, Inventory
from chronicle.world.spellcasting import SpellcastingData, SpellSlots


# =============================================================================
# CLASSES
# =============================================================================


class CharacterClass(str, Enum):
    BARBARIAN = "barbarian"
    BARD = "bard"
    CLERIC = "cleric"
    DRUID = "druid"
    FIGHTER = "fighter"
    MONK = "monk"
    PALADIN = "paladin"
    RANGER = "ranger"
    ROGUE = "rogue"
    SORCERER = "sorcerer"
    WARLOCK = "warlock"
    WIZARD = "wizard"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def hit_die(self) -> int:
        if self == CharacterClass.BARBARIAN:
            return 12
        if self in (CharacterClass.FIGHTER, CharacterClass.PALADIN, CharacterClass.RANGER):
            return 10
        if self in (CharacterClass.SORCERER, CharacterClass.WIZARD):
            return 6
        return 8

    @property
    def spellcasting_ability(self) -> Optional[Ability]:
        if self in (CharacterClass.BARD, CharacterClass.SORCERER, CharacterClass.WARLOCK,
                    CharacterClass.PALADIN):
            return Ability.CHARISMA
        if self in (CharacterClass.CLERIC, CharacterClass.DRUID, CharacterClass.RANGER):
            return Ability.WISDOM
        if self == CharacterClass.WIZARD:
            return Ability.INTELLIGENCE
        return None

    @property
    def saving_throws(self) -> tuple[Ability, Ability]:
        return _CLASS_SAVES[self]

    def spell_slots_at_level(self, level: int) -> list[int]:
        """Spell slot totals (levels 1-9) at a class level."""
        level = max(1, min(20, level))
        if self in _FULL_CASTERS:
            return list(_FULL_CASTER_SLOTS[level - 1])
        if self in (CharacterClass.PALADIN, CharacterClass.RANGER):
            if level < 2:
                return [0] * 9
            return list(_FULL_CASTER_SLOTS[math.ceil(level / 2) - 1][:5]) + [0] * 4
        return [0] * 9

    @classmethod
    def parse(cls, text: str) -> Optional["CharacterClass"]:
        try:
            return cls(text.strip().lower())
        except ValueError:
            return None


_CLASS_SAVES = {
    CharacterClass.BARBARIAN: (Ability.STRENGTH, Ability.CONSTITUTION),
    CharacterClass.BARD: (Ability.DEXTERITY, Ability.CHARISMA),
    CharacterClass.CLERIC: (Ability.WISDOM, Ability.CHARISMA),
    CharacterClass.DRUID: (Ability.INTELLIGENCE, Ability.WISDOM),
    CharacterClass.FIGHTER: (Ability.STRENGTH, Ability.CONSTITUTION),
    CharacterClass.MONK: (Ability.STRENGTH, Ability.DEXTERITY),
    CharacterClass.PALADIN: (Ability.WISDOM, Ability.CHARISMA),
    CharacterClass.RANGER: (Ability.STRENGTH, Ability.DEXTERITY),
    CharacterClass.ROGUE: (Ability.DEXTERITY, Ability.INTELLIGENCE),
    CharacterClass.SORCERER: (Ability.CONSTITUTION, Ability.CHARISMA),
    CharacterClass.WARLOCK: (Ability.WISDOM, Ability.CHARISMA),
    CharacterClass.WIZARD: (Ability.INTELLIGENCE, Ability.WISDOM),
}

_FULL_CASTERS = (
    CharacterClass.BARD,
    CharacterClass.CLERIC,
    CharacterClass.DRUID,
    CharacterClass.SORCERER,
    CharacterClass.WARLOCK,
    CharacterClass.WIZARD,
)

_FULL_CASTER_SLOTS = [
    (2, 0, 0, 0, 0, 0, 0, 0, 0),
    (3, 0, 0, 0, 0, 0, 0, 0, 0),
    (4, 2, 0, 0, 0, 0, 0, 0, 0),
    (4, 3, 0, 0, 0, 0, 0, 0, 0),
    (4, 3, 2, 0, 0, 0, 0, 0, 0),
    (4, 3, 3, 0, 0, 0, 0, 0, 0),
    (4, 3, 3, 1, 0, 0, 0, 0, 0),
    (4, 3, 3, 2, 0, 0, 0, 0, 0),
    (4, 3, 3, 3, 1, 0, 0, 0, 0),
    (4, 3, 3, 3, 2, 0, 0, 0, 0),
    (4, 3, 3, 3, 2, 1, 0, 0, 0),
    (4, 3, 3, 3, 2, 1, 0, 0, 0),
    (4, 3, 3, 3, 2, 1, 1, 0, 0),
    (4, 3, 3, 3, 2, 1, 1, 0, 0),
    (4, 3, 3, 3, 2, 1, 1, 1, 0),
    (4, 3, 3, 3, 2, 1, 1, 1, 0),
    (4, 3, 3, 3, 2, 1, 1, 1, 1),
    (4, 3, 3, 3, 3, 1, 1, 1, 1),
    (4, 3, 3, 3, 3, 2, 1, 1, 1),
    (4, 3, 3, 3, 3, 2, 2, 1, 1),
]


def rage_uses_at_level(level: int) -> int:
    if level <= 2:
        return 2
    if level <= 5:
        return 3
    if level <= 11:
        return 4
    if level <= 16:
        return 5
    return 6


def rage_damage_at_level(level: int) -> int:
    if level <= 8:
        return 2
    if level <= 15:
        return 3
    return 4


@dataclass
class ClassLevel:
    character_class: CharacterClass
    level: int = 1
    subclass: Optional[str] = None


# =============================================================================
# FEATURES AND RESOURCES
# =============================================================================


class RechargeType(str, Enum):
    SHORT_REST = "short_rest"
    LONG_REST = "long_rest"
    DAWN = "dawn"


@dataclass
class FeatureUses:
    current: int
    maximum: int
    recharge: RechargeType = RechargeType.LONG_REST


@dataclass
class Feature:
    name: str
    description: str = ""
    source: str = ""
    uses: Optional[FeatureUses] = None


@dataclass
class ClassResources:
    """Per-class pools that are not modelled as features with uses."""

    # Barbarian
    rage_active: bool = False
    rage_rounds_remaining: Optional[int] = None
    rage_damage_bonus: int = 0

    # Monk
    ki_points: int = 0
    max_ki_points: int = 0

    # Paladin
    lay_on_hands_pool: int = 0
    lay_on_hands_max: int = 0

    # Fighter
    action_surge_used: bool = False
    second_wind_used: bool = False

    def reset_short_rest(self) -> None:
        self.ki_points = self.max_ki_points
        self.action_surge_used = False
        self.second_wind_used = False

    def reset_long_rest(self) -> None:
        self.reset_short_rest()
        self.lay_on_hands_pool = self.lay_on_hands_max
        self.rage_active = False
        self.rage_rounds_remaining = None
        self.rage_damage_bonus = 0


# =============================================================================
# CHARACTER
# =============================================================================


@dataclass
class Character:
    name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    race: str = "Human"
    classes: list[ClassLevel] = field(default_factory=list)
    level: int = 1
    ability_scores: AbilityScores = field(default_factory=AbilityScores)
    skill_proficiencies: dict[Skill, ProficiencyLevel] = field(default_factory=dict)
    saving_throw_proficiencies: set[Ability] = field(default_factory=set)
    hit_points: HitPoints = field(default_factory=lambda: HitPoints.full(10))
    hit_dice: HitDice = field(default_factory=HitDice)
    death_saves: DeathSaves = field(default_factory=DeathSaves)
    conditions: list[ActiveCondition] = field(default_factory=list)
    spellcasting: Optional[SpellcastingData] = None
    features: list[Feature] = field(default_factory=list)
    class_resources: ClassResources = field(default_factory=ClassResources)
    inventory: Inventory = field(default_factory=Inventory)
    equipment: Equipment = field(default_factory=Equipment)
    experience: int = 0
    speed: int = 30

    # -------------------------------------------------------------------------
    # Derived statistics
    # -------------------------------------------------------------------------

    def proficiency_bonus(self) -> int:
        return proficiency_bonus(self.level)

    def ability_modifier(self, ability: Ability) -> int:
        return self.ability_scores.modifier(ability)

    def skill_modifier(self, skill: Skill) -> int:
        prof = self.skill_proficiencies.get(skill, ProficiencyLevel.NONE)
        return self.ability_modifier(skill.ability) + prof.multiplier() * self.proficiency_bonus()

    def saving_throw_modifier(self, ability: Ability) -> int:
        bonus = self.proficiency_bonus() if ability in self.saving_throw_proficiencies else 0
        return self.ability_modifier(ability) + bonus

    def initiative_modifier(self) -> int:
        return self.ability_modifier(Ability.DEXTERITY)

    def armor_class(self) -> int:
        dex = self.ability_modifier(Ability.DEXTERITY)
        if self.equipment.armor is not None:
            ac = self.equipment.armor.armor_class(dex)
        else:
            ac = 10 + dex
        if self.equipment.shield is not None:
            ac += 2
        return ac

    def class_level(self, character_class: CharacterClass) -> int:
        for entry in self.classes:
            if entry.character_class == character_class:
                return entry.level
        return 0

    def primary_class(self) -> Optional[CharacterClass]:
        return self.classes[0].character_class if self.classes else None

    # -------------------------------------------------------------------------
    # Conditions and features
    # -------------------------------------------------------------------------

    def has_condition(self, condition: Condition) -> bool:
        return any(c.condition == condition for c in self.conditions)

    def add_condition(
        self,
        condition: Condition,
        source: str,
        duration_rounds: Optional[int] = None,
    ) -> None:
        """Add a condition; re-applying an existing one refreshes source and duration."""
        for active in self.conditions:
            if active.condition == condition:
                active.source = source
                active.duration_rounds = duration_rounds
                return
        self.conditions.append(ActiveCondition(condition, source, duration_rounds))

    def remove_condition(self, condition: Condition) -> bool:
        before = len(self.conditions)
        self.conditions = [c for c in self.conditions if c.condition != condition]
        return len(self.conditions) != before

    def tick_conditions(self) -> list[Condition]:
        """Count down timed conditions by one round; returns the ones that expired."""
        expired = []
        remaining = []
        for active in self.conditions:
            if active.duration_rounds is not None:
                active.duration_rounds = max(0, active.duration_rounds - 1)
                if active.duration_rounds == 0:
                    expired.append(active.condition)
                    continue
            remaining.append(active)
        self.conditions = remaining
        return expired

    def find_feature(self, name: str) -> Optional[Feature]:
        key = name.lower()
        for feature in self.features:
            if feature.name.lower() == key:
                return feature
        return None

    def recharge_features(self, long_rest: bool) -> None:
        for feature in self.features:
            if feature.uses is None:
                continue
            if long_rest or feature.uses.recharge == RechargeType.SHORT_REST:
                feature.uses.current = feature.uses.maximum


# =============================================================================
# CHARACTER CREATION
# =============================================================================


def create_character(
    name: str,
    character_class: CharacterClass,
    level: int = 1,
    ability_scores: Optional[AbilityScores] = None,
    skills: Optional[list[Skill]] = None,
    race: str = "Human",
) -> Character:
    """
    Build a character from a minimal character sheet.

    Hit points use the maximum hit die at level 1 and the average afterwards,
    plus the Constitution modifier per level. Spell slots, class resources and
    signature features are set up for the class and level.
    """
    scores = ability_scores or AbilityScores.standard_array()
    con_mod = scores.modifier(Ability.CONSTITUTION)
    die = character_class.hit_die
    max_hp = max(1, die + con_mod) + max(0, level - 1) * max(1, die // 2 + 1 + con_mod)

    character = Character(
        name=name,
        race=race,
        classes=[ClassLevel(character_class, level)],
        level=level,
        ability_scores=scores,
        skill_proficiencies={s: ProficiencyLevel.PROFICIENT for s in (skills or [])},
        saving_throw_proficiencies=set(character_class.saving_throws),
        hit_points=HitPoints.full(max_hp),
    )
    character.hit_dice.add(die, level)

    ability = character_class.spellcasting_ability
    slots = character_class.spell_slots_at_level(level)
    if ability is not None and any(slots):
        character.spellcasting = SpellcastingData(
            ability=ability, spell_slots=SpellSlots.with_totals(slots)
        )
    elif ability is not None and character_class in _FULL_CASTERS:
        character.spellcasting = SpellcastingData(ability=ability)

    _add_class_features(character, character_class, level)
    return character


def _add_class_features(character: Character, character_class: CharacterClass, level: int) -> None:
    resources = character.class_resources
    if character_class == CharacterClass.BARBARIAN:
        uses = rage_uses_at_level(level)
        character.features.append(
            Feature("Rage", "Enter a battle rage.", "Barbarian",
                    FeatureUses(uses, uses, RechargeType.LONG_REST))
        )
    elif character_class == CharacterClass.FIGHTER:
        character.features.append(
            Feature("Second Wind", "Regain 1d10 + fighter level HP.", "Fighter",
                    FeatureUses(1, 1, RechargeType.SHORT_REST))
        )
        if level >= 2:
            character.features.append(
                Feature("Action Surge", "Take one additional action.", "Fighter",
                        FeatureUses(1, 1, RechargeType.SHORT_REST))
            )
    elif character_class == CharacterClass.MONK and level >= 2:
        resources.ki_points = level
        resources.max_ki_points = level
    elif character_class == CharacterClass.PALADIN:
        resources.lay_on_hands_max = level * 5
        resources.lay_on_hands_pool = level * 5
    elif character_class == CharacterClass.ROGUE:
        character.features.append(
            Feature("Sneak Attack", f"{math.ceil(level / 2)}d6 extra damage once per turn.", "Rogue")
        )
    elif character_class == CharacterClass.BARD:
        uses = max(1, character.ability_modifier(Ability.CHARISMA))
        recharge = RechargeType.SHORT_REST if level >= 5 else RechargeType.LONG_REST
        character.features.append(
            Feature("Bardic Inspiration", "Inspire an ally with a bonus die.", "Bard",
                    FeatureUses(uses, uses, recharge))
        )
