"""
Intents, effects and resolutions.

An Intent is a requested action awaiting rules resolution. The rules engine
turns it into a Resolution: player-facing narrative plus an ordered list of
Effects. Effects are facts about what happened and are the only channel
through which the world or story memory may change.

Every variant is a frozen dataclass carrying a `kind` class attribute. The
engine dispatches on it (`resolve_<kind>`), and so does the effect applier
(`_apply_<kind>`). List-valued fields are tuples so that variants stay
hashable and immutable.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, Optional

from chronicle.dice import Advantage, RollResult
from chronicle.story_memory.scheduled_event import (
    EventTrigger,
    EventVisibility,
    trigger_to_dict,
)
from chronicle.world.abilities import Ability, Skill
from chronicle.world.conditions import Condition
from chronicle.world.health import DamageType
from chronicle.world.locations import LocationType
from chronicle.world.npcs import Disposition


class RestType(str, Enum):
    SHORT = "short"
    LONG = "long"


class StateType(str, Enum):
    """Kinds of entity state the narrator can assert directly."""

    DISPOSITION = "disposition"
    LOCATION = "location"
    STATUS = "status"
    KNOWLEDGE = "knowledge"
    RELATIONSHIP = "relationship"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["StateType"]:
        if not text:
            return None
        try:
            return cls(text.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class CombatantInit:
    """A combatant as supplied when combat starts."""

    id: str
    name: str
    is_player: bool = False
    is_ally: bool = False
    current_hp: int = 1
    max_hp: int = 1
    armor_class: int = 10
    initiative_modifier: int = 0


# =============================================================================
# INTENTS
# =============================================================================


class Intent:
    """Base class of every intent variant."""

    kind: ClassVar[str] = ""


# --- checks ------------------------------------------------------------------


@dataclass(frozen=True)
class SkillCheck(Intent):
    kind: ClassVar[str] = "skill_check"

    character_id: str
    skill: Skill
    dc: int
    advantage: Advantage = Advantage.NORMAL
    description: str = ""


@dataclass(frozen=True)
class AbilityCheck(Intent):
    kind: ClassVar[str] = "ability_check"

    character_id: str
    ability: Ability
    dc: int
    advantage: Advantage = Advantage.NORMAL
    description: str = ""


@dataclass(frozen=True)
class SavingThrow(Intent):
    kind: ClassVar[str] = "saving_throw"

    character_id: str
    ability: Ability
    dc: int
    advantage: Advantage = Advantage.NORMAL
    source: str = ""


@dataclass(frozen=True)
class RollDice(Intent):
    kind: ClassVar[str] = "roll_dice"

    notation: str
    purpose: str = ""


@dataclass(frozen=True)
class ConcentrationCheck(Intent):
    kind: ClassVar[str] = "concentration_check"

    character_id: str
    damage_taken: int
    spell_name: str


@dataclass(frozen=True)
class DeathSave(Intent):
    kind: ClassVar[str] = "death_save"

    character_id: str


# --- combat ------------------------------------------------------------------


@dataclass(frozen=True)
class Attack(Intent):
    kind: ClassVar[str] = "attack"

    attacker_id: str
    target_id: str
    weapon_name: str
    advantage: Advantage = Advantage.NORMAL


@dataclass(frozen=True)
class Damage(Intent):
    kind: ClassVar[str] = "damage"

    target_id: str
    amount: int
    damage_type: DamageType
    source: str = ""


@dataclass(frozen=True)
class Heal(Intent):
    kind: ClassVar[str] = "heal"

    target_id: str
    amount: int
    source: str = ""


@dataclass(frozen=True)
class ApplyCondition(Intent):
    kind: ClassVar[str] = "apply_condition"

    target_id: str
    condition: Condition
    source: str = ""
    duration_rounds: Optional[int] = None


@dataclass(frozen=True)
class RemoveCondition(Intent):
    kind: ClassVar[str] = "remove_condition"

    target_id: str
    condition: Condition


@dataclass(frozen=True)
class StartCombat(Intent):
    kind: ClassVar[str] = "start_combat"

    combatants: tuple[CombatantInit, ...] = ()


@dataclass(frozen=True)
class EndCombat(Intent):
    kind: ClassVar[str] = "end_combat"


@dataclass(frozen=True)
class NextTurn(Intent):
    kind: ClassVar[str] = "next_turn"


@dataclass(frozen=True)
class RollInitiative(Intent):
    kind: ClassVar[str] = "roll_initiative"

    character_id: str
    name: str
    modifier: int = 0
    is_player: bool = False


# --- spells ------------------------------------------------------------------


@dataclass(frozen=True)
class CastSpell(Intent):
    kind: ClassVar[str] = "cast_spell"

    caster_id: str
    spell_name: str
    spell_level: int = 0  # 0 means "cast at the spell's own level"
    target_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class RestoreSpellSlot(Intent):
    kind: ClassVar[str] = "restore_spell_slot"

    slot_level: int
    source: str = ""


# --- time --------------------------------------------------------------------


@dataclass(frozen=True)
class ShortRest(Intent):
    kind: ClassVar[str] = "short_rest"


@dataclass(frozen=True)
class LongRest(Intent):
    kind: ClassVar[str] = "long_rest"


@dataclass(frozen=True)
class AdvanceTime(Intent):
    kind: ClassVar[str] = "advance_time"

    minutes: int


# --- inventory ---------------------------------------------------------------


@dataclass(frozen=True)
class AddItem(Intent):
    kind: ClassVar[str] = "add_item"

    item_name: str
    quantity: int = 1
    item_type: Optional[str] = None
    description: Optional[str] = None
    magical: bool = False
    weight: Optional[float] = None
    value_gp: Optional[float] = None


@dataclass(frozen=True)
class RemoveItem(Intent):
    kind: ClassVar[str] = "remove_item"

    item_name: str
    quantity: int = 1


@dataclass(frozen=True)
class EquipItem(Intent):
    kind: ClassVar[str] = "equip_item"

    item_name: str


@dataclass(frozen=True)
class UnequipItem(Intent):
    kind: ClassVar[str] = "unequip_item"

    slot: str


@dataclass(frozen=True)
class UseItem(Intent):
    kind: ClassVar[str] = "use_item"

    item_name: str
    target_id: Optional[str] = None


@dataclass(frozen=True)
class AdjustGold(Intent):
    kind: ClassVar[str] = "adjust_gold"

    amount: int
    reason: str = ""


@dataclass(frozen=True)
class AdjustSilver(Intent):
    kind: ClassVar[str] = "adjust_silver"

    amount: int
    reason: str = ""


# --- class features ----------------------------------------------------------


@dataclass(frozen=True)
class UseRage(Intent):
    kind: ClassVar[str] = "use_rage"

    character_id: str


@dataclass(frozen=True)
class EndRage(Intent):
    kind: ClassVar[str] = "end_rage"

    character_id: str
    reason: str = "voluntary"


@dataclass(frozen=True)
class UseKi(Intent):
    kind: ClassVar[str] = "use_ki"

    character_id: str
    points: int
    ability: str


@dataclass(frozen=True)
class UseLayOnHands(Intent):
    kind: ClassVar[str] = "use_lay_on_hands"

    character_id: str
    target_name: str
    hp_amount: int = 0
    cure_disease: bool = False
    neutralize_poison: bool = False


@dataclass(frozen=True)
class UseDivineSmite(Intent):
    kind: ClassVar[str] = "use_divine_smite"

    character_id: str
    spell_slot_level: int = 1
    target_is_undead_or_fiend: bool = False


@dataclass(frozen=True)
class UseActionSurge(Intent):
    kind: ClassVar[str] = "use_action_surge"

    character_id: str
    action_taken: str = ""


@dataclass(frozen=True)
class UseSecondWind(Intent):
    kind: ClassVar[str] = "use_second_wind"

    character_id: str


@dataclass(frozen=True)
class UseBardicInspiration(Intent):
    kind: ClassVar[str] = "use_bardic_inspiration"

    character_id: str
    target_name: str
    die_size: str = "d6"


# --- quests ------------------------------------------------------------------


@dataclass(frozen=True)
class CreateQuest(Intent):
    kind: ClassVar[str] = "create_quest"

    name: str
    description: str = ""
    giver: Optional[str] = None
    objectives: tuple[tuple[str, bool], ...] = ()  # (description, optional)
    rewards: tuple[str, ...] = ()


@dataclass(frozen=True)
class AddQuestObjective(Intent):
    kind: ClassVar[str] = "add_quest_objective"

    quest_name: str
    objective: str
    optional: bool = False


@dataclass(frozen=True)
class CompleteObjective(Intent):
    kind: ClassVar[str] = "complete_objective"

    quest_name: str
    objective_description: str


@dataclass(frozen=True)
class CompleteQuest(Intent):
    kind: ClassVar[str] = "complete_quest"

    quest_name: str
    completion_note: Optional[str] = None


@dataclass(frozen=True)
class FailQuest(Intent):
    kind: ClassVar[str] = "fail_quest"

    quest_name: str
    failure_reason: str = ""


@dataclass(frozen=True)
class UpdateQuest(Intent):
    kind: ClassVar[str] = "update_quest"

    quest_name: str
    new_description: Optional[str] = None
    add_rewards: tuple[str, ...] = ()


# --- world building ----------------------------------------------------------


@dataclass(frozen=True)
class CreateNpc(Intent):
    kind: ClassVar[str] = "create_npc"

    name: str
    description: str = ""
    personality: str = ""
    occupation: Optional[str] = None
    disposition: Disposition = Disposition.NEUTRAL
    location: Optional[str] = None
    known_information: tuple[str, ...] = ()


@dataclass(frozen=True)
class UpdateNpc(Intent):
    kind: ClassVar[str] = "update_npc"

    npc_name: str
    disposition: Optional[Disposition] = None
    add_information: Optional[str] = None
    new_description: Optional[str] = None
    new_personality: Optional[str] = None


@dataclass(frozen=True)
class MoveNpc(Intent):
    kind: ClassVar[str] = "move_npc"

    npc_name: str
    destination: str
    reason: Optional[str] = None


@dataclass(frozen=True)
class RemoveNpc(Intent):
    kind: ClassVar[str] = "remove_npc"

    npc_name: str
    reason: str = ""
    permanent: bool = True


@dataclass(frozen=True)
class CreateLocation(Intent):
    kind: ClassVar[str] = "create_location"

    name: str
    location_type: LocationType = LocationType.OTHER
    description: str = ""
    parent_location: Optional[str] = None
    items: tuple[str, ...] = ()
    npcs_present: tuple[str, ...] = ()


@dataclass(frozen=True)
class ConnectLocations(Intent):
    kind: ClassVar[str] = "connect_locations"

    from_location: str
    to_location: str
    direction: Optional[str] = None
    travel_time_minutes: Optional[int] = None
    bidirectional: bool = True


@dataclass(frozen=True)
class UpdateLocation(Intent):
    kind: ClassVar[str] = "update_location"

    location_name: str
    new_description: Optional[str] = None
    add_items: tuple[str, ...] = ()
    remove_items: tuple[str, ...] = ()
    add_npcs: tuple[str, ...] = ()
    remove_npcs: tuple[str, ...] = ()


@dataclass(frozen=True)
class ChangeLocation(Intent):
    kind: ClassVar[str] = "change_location"

    new_location: str
    location_type: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class Move(Intent):
    kind: ClassVar[str] = "move"

    character_id: str
    destination: str
    distance_feet: Optional[int] = None


@dataclass(frozen=True)
class AssertState(Intent):
    kind: ClassVar[str] = "assert_state"

    entity_name: str
    state_type: StateType
    new_value: str
    reason: str = ""
    target_entity: Optional[str] = None


# --- misc --------------------------------------------------------------------


@dataclass(frozen=True)
class GainExperience(Intent):
    kind: ClassVar[str] = "gain_experience"

    amount: int


@dataclass(frozen=True)
class UseFeature(Intent):
    kind: ClassVar[str] = "use_feature"

    character_id: str
    feature_name: str


@dataclass(frozen=True)
class RememberFact(Intent):
    kind: ClassVar[str] = "remember_fact"

    subject_name: str
    subject_type: str
    fact: str
    category: str = "other"
    related_entities: tuple[str, ...] = ()
    importance: float = 0.5


@dataclass(frozen=True)
class RegisterConsequence(Intent):
    kind: ClassVar[str] = "register_consequence"

    trigger_description: str
    consequence_description: str
    severity: str = "moderate"
    related_entities: tuple[str, ...] = ()
    importance: float = 0.5
    expires_in_turns: Optional[int] = None


@dataclass(frozen=True)
class ModifyAbilityScore(Intent):
    kind: ClassVar[str] = "modify_ability_score"

    ability: Ability
    modifier: int
    source: str = ""
    duration: Optional[str] = None


@dataclass(frozen=True)
class ShareKnowledge(Intent):
    kind: ClassVar[str] = "share_knowledge"

    knowing_entity: str
    content: str
    source: str = "unknown"
    verification: str = "unknown"
    context: Optional[str] = None


@dataclass(frozen=True)
class ScheduleEvent(Intent):
    kind: ClassVar[str] = "schedule_event"

    description: str
    minutes: Optional[int] = None
    hours: Optional[int] = None
    day: Optional[int] = None
    month: Optional[int] = None
    year: Optional[int] = None
    hour: Optional[int] = None
    daily_hour: Optional[int] = None
    daily_minute: Optional[int] = None
    location: Optional[str] = None
    involved_entities: tuple[str, ...] = ()
    visibility: str = "public"
    repeating: bool = False


@dataclass(frozen=True)
class CancelEvent(Intent):
    kind: ClassVar[str] = "cancel_event"

    event_description: str
    reason: str = ""


# =============================================================================
# EFFECTS
# =============================================================================


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, RollResult):
        return {
            "expression": value.expression,
            "rolls": value.rolls,
            "modifier": value.modifier,
            "total": value.total,
        }
    if isinstance(value, (tuple, list)):
        return [_plain(v) for v in value]
    return value


class Effect:
    """Base class of every effect variant."""

    kind: ClassVar[str] = ""

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form for renderers: {"kind": ..., <fields>}."""
        data: dict[str, Any] = {"kind": self.kind}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "trigger":
                data[f.name] = trigger_to_dict(value)
            else:
                data[f.name] = _plain(value)
        return data


# --- dice and checks ---------------------------------------------------------


@dataclass(frozen=True)
class DiceRolled(Effect):
    kind: ClassVar[str] = "dice_rolled"

    roll: RollResult
    purpose: str = ""


@dataclass(frozen=True)
class CheckSucceeded(Effect):
    kind: ClassVar[str] = "check_succeeded"

    check_type: str
    roll: int
    dc: int


@dataclass(frozen=True)
class CheckFailed(Effect):
    kind: ClassVar[str] = "check_failed"

    check_type: str
    roll: int
    dc: int


# --- combat ------------------------------------------------------------------


@dataclass(frozen=True)
class AttackHit(Effect):
    kind: ClassVar[str] = "attack_hit"

    attacker_name: str
    target_name: str
    attack_roll: int
    target_ac: int
    is_critical: bool = False


@dataclass(frozen=True)
class AttackMissed(Effect):
    kind: ClassVar[str] = "attack_missed"

    attacker_name: str
    target_name: str
    attack_roll: int
    target_ac: int


@dataclass(frozen=True)
class SneakAttackUsed(Effect):
    kind: ClassVar[str] = "sneak_attack_used"

    character_id: str
    damage_dice: int


@dataclass(frozen=True)
class HpChanged(Effect):
    kind: ClassVar[str] = "hp_changed"

    target_id: str
    amount: int
    new_current: int
    new_max: int
    dropped_to_zero: bool = False


@dataclass(frozen=True)
class ConditionApplied(Effect):
    kind: ClassVar[str] = "condition_applied"

    target_id: str
    condition: Condition
    source: str = ""
    duration_rounds: Optional[int] = None


@dataclass(frozen=True)
class ConditionRemoved(Effect):
    kind: ClassVar[str] = "condition_removed"

    target_id: str
    condition: Condition


@dataclass(frozen=True)
class CombatStarted(Effect):
    kind: ClassVar[str] = "combat_started"


@dataclass(frozen=True)
class CombatEnded(Effect):
    kind: ClassVar[str] = "combat_ended"


@dataclass(frozen=True)
class TurnAdvanced(Effect):
    kind: ClassVar[str] = "turn_advanced"

    round: int
    current_combatant: str


@dataclass(frozen=True)
class InitiativeRolled(Effect):
    kind: ClassVar[str] = "initiative_rolled"

    character_id: str
    name: str
    roll: int
    total: int


@dataclass(frozen=True)
class CombatantAdded(Effect):
    kind: ClassVar[str] = "combatant_added"

    id: str
    name: str
    initiative: int
    is_ally: bool = False
    current_hp: int = 1
    max_hp: int = 1
    armor_class: int = 10
    is_player: bool = False


@dataclass(frozen=True)
class DeathSaveFailure(Effect):
    kind: ClassVar[str] = "death_save_failure"

    target_id: str
    failures: int
    total_failures: int
    source: str = ""


@dataclass(frozen=True)
class DeathSaveSuccess(Effect):
    kind: ClassVar[str] = "death_save_success"

    target_id: str
    roll: int
    total_successes: int


@dataclass(frozen=True)
class DeathSavesReset(Effect):
    kind: ClassVar[str] = "death_saves_reset"

    target_id: str


@dataclass(frozen=True)
class Stabilized(Effect):
    kind: ClassVar[str] = "stabilized"

    target_id: str


@dataclass(frozen=True)
class CharacterDied(Effect):
    kind: ClassVar[str] = "character_died"

    target_id: str
    cause: str


@dataclass(frozen=True)
class ConcentrationBroken(Effect):
    kind: ClassVar[str] = "concentration_broken"

    character_id: str
    spell_name: str
    damage_taken: int
    roll: int
    dc: int


@dataclass(frozen=True)
class ConcentrationMaintained(Effect):
    kind: ClassVar[str] = "concentration_maintained"

    character_id: str
    spell_name: str
    roll: int
    dc: int


# --- character progression and resources --------------------------------------


@dataclass(frozen=True)
class TimeAdvanced(Effect):
    kind: ClassVar[str] = "time_advanced"

    minutes: int


@dataclass(frozen=True)
class RestCompleted(Effect):
    kind: ClassVar[str] = "rest_completed"

    rest_type: RestType


@dataclass(frozen=True)
class ExperienceGained(Effect):
    kind: ClassVar[str] = "experience_gained"

    amount: int
    new_total: int


@dataclass(frozen=True)
class LevelUp(Effect):
    kind: ClassVar[str] = "level_up"

    new_level: int


@dataclass(frozen=True)
class FeatureUsed(Effect):
    kind: ClassVar[str] = "feature_used"

    feature_name: str
    uses_remaining: int


@dataclass(frozen=True)
class SpellSlotUsed(Effect):
    kind: ClassVar[str] = "spell_slot_used"

    level: int
    remaining: int


@dataclass(frozen=True)
class SpellSlotRestored(Effect):
    kind: ClassVar[str] = "spell_slot_restored"

    level: int
    new_remaining: int


@dataclass(frozen=True)
class AbilityScoreModified(Effect):
    kind: ClassVar[str] = "ability_score_modified"

    ability: Ability
    modifier: int
    source: str = ""


@dataclass(frozen=True)
class ClassResourceUsed(Effect):
    kind: ClassVar[str] = "class_resource_used"

    character_name: str
    resource_name: str
    description: str
    amount: int = 0


@dataclass(frozen=True)
class RageStarted(Effect):
    kind: ClassVar[str] = "rage_started"

    character_id: str
    damage_bonus: int


@dataclass(frozen=True)
class RageEnded(Effect):
    kind: ClassVar[str] = "rage_ended"

    character_id: str
    reason: str = ""


# --- inventory ---------------------------------------------------------------


@dataclass(frozen=True)
class ItemAdded(Effect):
    kind: ClassVar[str] = "item_added"

    item_name: str
    quantity: int
    new_total: int
    item_type: Optional[str] = None
    description: Optional[str] = None
    magical: bool = False
    weight: Optional[float] = None
    value_gp: Optional[float] = None


@dataclass(frozen=True)
class ItemRemoved(Effect):
    kind: ClassVar[str] = "item_removed"

    item_name: str
    quantity: int
    remaining: int


@dataclass(frozen=True)
class ItemEquipped(Effect):
    kind: ClassVar[str] = "item_equipped"

    item_name: str
    slot: str


@dataclass(frozen=True)
class ItemUnequipped(Effect):
    kind: ClassVar[str] = "item_unequipped"

    item_name: str
    slot: str


@dataclass(frozen=True)
class ItemUsed(Effect):
    kind: ClassVar[str] = "item_used"

    item_name: str
    result: str


@dataclass(frozen=True)
class GoldChanged(Effect):
    kind: ClassVar[str] = "gold_changed"

    amount: int
    new_total: int
    reason: str = ""


@dataclass(frozen=True)
class SilverChanged(Effect):
    kind: ClassVar[str] = "silver_changed"

    amount: int
    new_total: int
    reason: str = ""


@dataclass(frozen=True)
class AcChanged(Effect):
    kind: ClassVar[str] = "ac_changed"

    new_ac: int
    source: str = ""


# --- quests ------------------------------------------------------------------


@dataclass(frozen=True)
class QuestCreated(Effect):
    kind: ClassVar[str] = "quest_created"

    name: str
    description: str = ""
    giver: Optional[str] = None
    objectives: tuple[tuple[str, bool], ...] = ()
    rewards: tuple[str, ...] = ()


@dataclass(frozen=True)
class QuestObjectiveAdded(Effect):
    kind: ClassVar[str] = "quest_objective_added"

    quest_name: str
    objective: str
    optional: bool = False


@dataclass(frozen=True)
class QuestObjectiveCompleted(Effect):
    kind: ClassVar[str] = "quest_objective_completed"

    quest_name: str
    objective_description: str


@dataclass(frozen=True)
class QuestCompleted(Effect):
    kind: ClassVar[str] = "quest_completed"

    quest_name: str
    completion_note: Optional[str] = None


@dataclass(frozen=True)
class QuestFailed(Effect):
    kind: ClassVar[str] = "quest_failed"

    quest_name: str
    failure_reason: str = ""


@dataclass(frozen=True)
class QuestUpdated(Effect):
    kind: ClassVar[str] = "quest_updated"

    quest_name: str
    new_description: Optional[str] = None
    add_rewards: tuple[str, ...] = ()


# --- world building ----------------------------------------------------------


@dataclass(frozen=True)
class LocationChanged(Effect):
    kind: ClassVar[str] = "location_changed"

    previous_location: str
    new_location: str
    location_type: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class NpcCreated(Effect):
    kind: ClassVar[str] = "npc_created"

    name: str
    location: Optional[str] = None
    description: str = ""
    personality: str = ""
    occupation: Optional[str] = None
    disposition: Disposition = Disposition.NEUTRAL
    known_information: tuple[str, ...] = ()


@dataclass(frozen=True)
class NpcUpdated(Effect):
    kind: ClassVar[str] = "npc_updated"

    npc_name: str
    changes: str
    disposition: Optional[Disposition] = None
    add_information: Optional[str] = None
    new_description: Optional[str] = None
    new_personality: Optional[str] = None


@dataclass(frozen=True)
class NpcMoved(Effect):
    kind: ClassVar[str] = "npc_moved"

    npc_name: str
    from_location: Optional[str]
    to_location: str


@dataclass(frozen=True)
class NpcRemoved(Effect):
    kind: ClassVar[str] = "npc_removed"

    npc_name: str
    reason: str = ""
    permanent: bool = True


@dataclass(frozen=True)
class LocationCreated(Effect):
    kind: ClassVar[str] = "location_created"

    name: str
    location_type: LocationType = LocationType.OTHER
    description: str = ""
    parent_location: Optional[str] = None
    items: tuple[str, ...] = ()
    npcs_present: tuple[str, ...] = ()


@dataclass(frozen=True)
class LocationsConnected(Effect):
    kind: ClassVar[str] = "locations_connected"

    from_location: str
    to_location: str
    direction: Optional[str] = None
    travel_time_minutes: Optional[int] = None
    bidirectional: bool = True


@dataclass(frozen=True)
class LocationUpdated(Effect):
    kind: ClassVar[str] = "location_updated"

    location_name: str
    changes: str
    new_description: Optional[str] = None
    add_items: tuple[str, ...] = ()
    remove_items: tuple[str, ...] = ()
    add_npcs: tuple[str, ...] = ()
    remove_npcs: tuple[str, ...] = ()


@dataclass(frozen=True)
class StateAsserted(Effect):
    kind: ClassVar[str] = "state_asserted"

    entity_name: str
    state_type: StateType
    old_value: Optional[str]
    new_value: str
    reason: str = ""
    target_entity: Optional[str] = None


# --- story memory ------------------------------------------------------------


@dataclass(frozen=True)
class FactRemembered(Effect):
    kind: ClassVar[str] = "fact_remembered"

    subject_name: str
    subject_type: str
    fact: str
    category: str = "other"
    related_entities: tuple[str, ...] = ()
    importance: float = 0.5


@dataclass(frozen=True)
class ConsequenceRegistered(Effect):
    kind: ClassVar[str] = "consequence_registered"

    consequence_id: str
    trigger_description: str
    consequence_description: str
    severity: str = "moderate"
    related_entities: tuple[str, ...] = ()
    importance: float = 0.5
    expires_in_turns: Optional[int] = None


@dataclass(frozen=True)
class ConsequenceTriggered(Effect):
    kind: ClassVar[str] = "consequence_triggered"

    consequence_id: str
    consequence_description: str


@dataclass(frozen=True)
class KnowledgeShared(Effect):
    kind: ClassVar[str] = "knowledge_shared"

    knowing_entity: str
    content: str
    source: str = "unknown"
    verification: str = "unknown"
    context: Optional[str] = None


@dataclass(frozen=True)
class EventScheduled(Effect):
    kind: ClassVar[str] = "event_scheduled"

    description: str
    trigger: Optional[EventTrigger]
    trigger_description: str
    location: Optional[str] = None
    visibility: EventVisibility = EventVisibility.PUBLIC
    involved_entities: tuple[str, ...] = ()
    repeating: bool = False


@dataclass(frozen=True)
class EventCancelled(Effect):
    kind: ClassVar[str] = "event_cancelled"

    description: str
    reason: str = ""


@dataclass(frozen=True)
class EventTriggered(Effect):
    kind: ClassVar[str] = "event_triggered"

    description: str
    location: Optional[str] = None
    event_id: Optional[int] = None


# =============================================================================
# RESOLUTION
# =============================================================================


@dataclass
class Resolution:
    """Narrative text plus the ordered effects of one resolved intent."""

    narrative: str
    effects: list[Effect] = field(default_factory=list)

    def with_effect(self, effect: Effect) -> "Resolution":
        self.effects.append(effect)
        return self

    def with_effects(self, effects: list[Effect]) -> "Resolution":
        self.effects.extend(effects)
        return self

    def effect_kinds(self) -> list[str]:
        return [e.kind for e in self.effects]
