"""
Spell database.

A representative selection of spells covering the three resolution paths the
rules engine knows about: spell attacks, saving-throw spells and healing
spells. Everything else resolves as a utility spell and is narrated from its
description.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import re

from chronicle.world.abilities import Ability
from chronicle.world.health import DamageType

_DICE = re.compile(r"^(\d+)d(\d+)$")


class SpellSchool(str, Enum):
    ABJURATION = "abjuration"
    CONJURATION = "conjuration"
    DIVINATION = "divination"
    ENCHANTMENT = "enchantment"
    EVOCATION = "evocation"
    ILLUSION = "illusion"
    NECROMANCY = "necromancy"
    TRANSMUTATION = "transmutation"


class DamageScaling(str, Enum):
    NONE = "none"
    CANTRIP = "cantrip"      # extra dice at character levels 5, 11 and 17
    PER_SLOT = "per_slot"    # extra dice per slot level above the spell's level


class SpellAttackType(str, Enum):
    MELEE = "melee"
    RANGED = "ranged"


@dataclass(frozen=True)
class SpellData:
    name: str
    level: int
    school: SpellSchool
    description: str
    concentration: bool = False
    damage_dice: Optional[str] = None
    damage_type: Optional[DamageType] = None
    healing_dice: Optional[str] = None
    scaling: DamageScaling = DamageScaling.NONE
    scaling_dice: Optional[str] = None
    save_type: Optional[Ability] = None
    save_effect: Optional[str] = None
    attack_type: Optional[SpellAttackType] = None
    classes: tuple[str, ...] = field(default_factory=tuple)

    def is_cantrip(self) -> bool:
        return self.level == 0

    def _scaled(self, dice: Optional[str], caster_level: int, slot_level: int) -> Optional[str]:
        if dice is None:
            return None
        match = _DICE.match(dice)
        if match is None:
            return dice
        count, sides = int(match.group(1)), int(match.group(2))

        if self.scaling == DamageScaling.CANTRIP:
            multiplier = 1 + sum(1 for threshold in (5, 11, 17) if caster_level >= threshold)
            return f"{count * multiplier}d{sides}"

        if self.scaling == DamageScaling.PER_SLOT and self.scaling_dice and slot_level > self.level:
            extra = slot_level - self.level
            extra_match = _DICE.match(self.scaling_dice)
            if extra_match is None:
                return dice
            extra_count, extra_sides = int(extra_match.group(1)), int(extra_match.group(2))
            if extra_sides == sides:
                return f"{count + extra * extra_count}d{sides}"
            return f"{dice}+{extra * extra_count}d{extra_sides}"

        return dice

    def effective_damage_dice(self, caster_level: int, slot_level: int) -> Optional[str]:
        return self._scaled(self.damage_dice, caster_level, slot_level)

    def effective_healing_dice(self, slot_level: int) -> Optional[str]:
        return self._scaled(self.healing_dice, 1, slot_level)


_SPELLS = [
    # Cantrips
    SpellData(
        "Fire Bolt", 0, SpellSchool.EVOCATION,
        "You hurl a mote of fire at a creature or object within range.",
        damage_dice="1d10", damage_type=DamageType.FIRE, scaling=DamageScaling.CANTRIP,
        attack_type=SpellAttackType.RANGED, classes=("sorcerer", "wizard"),
    ),
    SpellData(
        "Eldritch Blast", 0, SpellSchool.EVOCATION,
        "A beam of crackling energy streaks toward a creature within range.",
        damage_dice="1d10", damage_type=DamageType.FORCE, scaling=DamageScaling.CANTRIP,
        attack_type=SpellAttackType.RANGED, classes=("warlock",),
    ),
    SpellData(
        "Sacred Flame", 0, SpellSchool.EVOCATION,
        "Flame-like radiance descends on a creature that you can see within range.",
        damage_dice="1d8", damage_type=DamageType.RADIANT, scaling=DamageScaling.CANTRIP,
        save_type=Ability.DEXTERITY, save_effect="no damage", classes=("cleric",),
    ),
    SpellData(
        "Ray of Frost", 0, SpellSchool.EVOCATION,
        "A frigid beam of blue-white light streaks toward a creature within range.",
        damage_dice="1d8", damage_type=DamageType.COLD, scaling=DamageScaling.CANTRIP,
        attack_type=SpellAttackType.RANGED, classes=("sorcerer", "wizard"),
    ),
    SpellData(
        "Guidance", 0, SpellSchool.DIVINATION,
        "You touch a willing creature. It can add 1d4 to one ability check of its choice.",
        concentration=True, classes=("cleric", "druid"),
    ),
    SpellData(
        "Light", 0, SpellSchool.EVOCATION,
        "You touch an object and it sheds bright light in a 20-foot radius for one hour.",
        classes=("bard", "cleric", "sorcerer", "wizard"),
    ),
    # Level 1
    SpellData(
        "Cure Wounds", 1, SpellSchool.EVOCATION,
        "A creature you touch regains hit points.",
        healing_dice="1d8", scaling=DamageScaling.PER_SLOT, scaling_dice="1d8",
        classes=("bard", "cleric", "druid", "paladin", "ranger"),
    ),
    SpellData(
        "Healing Word", 1, SpellSchool.EVOCATION,
        "A creature of your choice that you can see within range regains hit points.",
        healing_dice="1d4", scaling=DamageScaling.PER_SLOT, scaling_dice="1d4",
        classes=("bard", "cleric", "druid"),
    ),
    SpellData(
        "Bless", 1, SpellSchool.ENCHANTMENT,
        "Up to three creatures add 1d4 to attack rolls and saving throws for the duration.",
        concentration=True, classes=("cleric", "paladin"),
    ),
    SpellData(
        "Magic Missile", 1, SpellSchool.EVOCATION,
        "Three glowing darts of magical force each deal 1d4+1 force damage to a target you can see.",
        classes=("sorcerer", "wizard"),
    ),
    SpellData(
        "Burning Hands", 1, SpellSchool.EVOCATION,
        "A thin sheet of flames shoots forth from your outstretched fingertips in a 15-foot cone.",
        damage_dice="3d6", damage_type=DamageType.FIRE, scaling=DamageScaling.PER_SLOT,
        scaling_dice="1d6", save_type=Ability.DEXTERITY, save_effect="half damage",
        classes=("sorcerer", "wizard"),
    ),
    SpellData(
        "Guiding Bolt", 1, SpellSchool.EVOCATION,
        "A flash of light streaks toward a creature of your choice within range.",
        damage_dice="4d6", damage_type=DamageType.RADIANT, scaling=DamageScaling.PER_SLOT,
        scaling_dice="1d6", attack_type=SpellAttackType.RANGED, classes=("cleric",),
    ),
    SpellData(
        "Thunderwave", 1, SpellSchool.EVOCATION,
        "A wave of thunderous force sweeps out from you in a 15-foot cube.",
        damage_dice="2d8", damage_type=DamageType.THUNDER, scaling=DamageScaling.PER_SLOT,
        scaling_dice="1d8", save_type=Ability.CONSTITUTION, save_effect="half damage",
        classes=("bard", "druid", "sorcerer", "wizard"),
    ),
    SpellData(
        "Shield", 1, SpellSchool.ABJURATION,
        "An invisible barrier of magical force grants +5 AC until the start of your next turn.",
        classes=("sorcerer", "wizard"),
    ),
    SpellData(
        "Sleep", 1, SpellSchool.ENCHANTMENT,
        "Creatures in a 20-foot radius fall into a magical slumber.",
        classes=("bard", "sorcerer", "wizard"),
    ),
    # Level 2
    SpellData(
        "Spiritual Weapon", 2, SpellSchool.EVOCATION,
        "You create a floating spectral weapon that can strike creatures near it.",
        damage_dice="1d8", damage_type=DamageType.FORCE, attack_type=SpellAttackType.MELEE,
        classes=("cleric",),
    ),
    SpellData(
        "Hold Person", 2, SpellSchool.ENCHANTMENT,
        "A humanoid that you can see within range must succeed on a Wisdom save or be paralyzed.",
        concentration=True, save_type=Ability.WISDOM, save_effect="negates effect",
        classes=("bard", "cleric", "druid", "sorcerer", "warlock", "wizard"),
    ),
    SpellData(
        "Scorching Ray", 2, SpellSchool.EVOCATION,
        "You create rays of fire and hurl them at targets within range.",
        damage_dice="2d6", damage_type=DamageType.FIRE, attack_type=SpellAttackType.RANGED,
        classes=("sorcerer", "wizard"),
    ),
    # Level 3
    SpellData(
        "Fireball", 3, SpellSchool.EVOCATION,
        "A bright streak flashes to a point you choose and blossoms into an explosion of flame.",
        damage_dice="8d6", damage_type=DamageType.FIRE, scaling=DamageScaling.PER_SLOT,
        scaling_dice="1d6", save_type=Ability.DEXTERITY, save_effect="half damage",
        classes=("sorcerer", "wizard"),
    ),
    SpellData(
        "Lightning Bolt", 3, SpellSchool.EVOCATION,
        "A stroke of lightning forming a line 100 feet long blasts out from you.",
        damage_dice="8d6", damage_type=DamageType.LIGHTNING, scaling=DamageScaling.PER_SLOT,
        scaling_dice="1d6", save_type=Ability.DEXTERITY, save_effect="half damage",
        classes=("sorcerer", "wizard"),
    ),
]

SPELL_DATABASE: dict[str, SpellData] = {spell.name.lower(): spell for spell in _SPELLS}


def get_spell(name: str) -> Optional[SpellData]:
    """Look up a spell by name (case-insensitive)."""
    return SPELL_DATABASE.get(name.strip().lower())


def spells_by_level(level: int) -> list[SpellData]:
    return [spell for spell in _SPELLS if spell.level == level]


def spells_for_class(class_name: str) -> list[SpellData]:
    key = class_name.lower()
    return [spell for spell in _SPELLS if key in spell.classes]
