"""
World model for the Chronicle rules engine.

The world is read by the rules engine and mutated only by the effect applier.
"""

from chronicle.world.abilities import (
    Ability,
    AbilityScores,
    ProficiencyLevel,
    Skill,
    proficiency_bonus,
)
from chronicle.world.character import (
    Character,
    CharacterClass,
    ClassLevel,
    ClassResources,
    Feature,
    FeatureUses,
    RechargeType,
    create_character,
)
from chronicle.world.combat import Combatant, CombatState
from chronicle.world.conditions import ActiveCondition, Condition
from chronicle.world.game_time import GameTime, TimeOfDay
from chronicle.world.game_world import GameMode, GameWorld
from chronicle.world.health import DamageType, DeathSaves, HitDice, HitPoints
from chronicle.world.inventory import (
    ArmorItem,
    ArmorType,
    Equipment,
    Inventory,
    Item,
    ItemType,
    WeaponItem,
    WeaponProperty,
)
from chronicle.world.locations import Location, LocationConnection, LocationType
from chronicle.world.npcs import NPC, Disposition
from chronicle.world.quests import Quest, QuestObjective, QuestStatus
from chronicle.world.spellcasting import SlotInfo, SpellcastingData, SpellSlots

__all__ = [
    "Ability",
    "AbilityScores",
    "ActiveCondition",
    "ArmorItem",
    "ArmorType",
    "Character",
    "CharacterClass",
    "ClassLevel",
    "ClassResources",
    "Combatant",
    "CombatState",
    "Condition",
    "DamageType",
    "DeathSaves",
    "Disposition",
    "Equipment",
    "Feature",
    "FeatureUses",
    "GameMode",
    "GameTime",
    "GameWorld",
    "HitDice",
    "HitPoints",
    "Inventory",
    "Item",
    "ItemType",
    "Location",
    "LocationConnection",
    "LocationType",
    "NPC",
    "ProficiencyLevel",
    "Quest",
    "QuestObjective",
    "QuestStatus",
    "RechargeType",
    "Skill",
    "SlotInfo",
    "SpellcastingData",
    "SpellSlots",
    "TimeOfDay",
    "WeaponItem",
    "WeaponProperty",
    "create_character",
    "proficiency_bonus",
]
