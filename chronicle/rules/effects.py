"""
Effect applier: the single place where the game world and story memory change.

Effects are applied strictly in order. Each effect kind has a handler method
named `_apply_<kind>`; informational effects (dice rolls, hits, misses,
check outcomes) have nothing to apply and are skipped.

Effects that reference something that no longer exists (an NPC removed
earlier in the turn, a quest that was never created) are logged and
ignored rather than raised.
"""

from dataclasses import replace
from typing import Iterable, Optional
import logging

from chronicle.items import find_item, get_armor, get_weapon
from chronicle.rules.helpers import is_player
from chronicle.rules.types import Effect, RestType, StateType
from chronicle.story_memory.relationship import RelationshipType
from chronicle.story_memory.store import StoryMemory
from chronicle.world.abilities import Ability
from chronicle.world.character import CharacterClass, rage_uses_at_level
from chronicle.world.combat import Combatant
from chronicle.world.conditions import Condition
from chronicle.world.game_world import GameWorld
from chronicle.world.inventory import ArmorItem, Item, ItemType, WeaponItem
from chronicle.world.locations import Location, LocationType
from chronicle.world.npcs import NPC, Disposition
from chronicle.world.quests import Quest, QuestObjective, QuestStatus
from chronicle.world.spellcasting import SpellcastingData, SpellSlots

logger = logging.getLogger(__name__)

RAGE_DURATION_ROUNDS = 10

_INFORMATIONAL = frozenset(
    {
        "dice_rolled",
        "check_succeeded",
        "check_failed",
        "attack_hit",
        "attack_missed",
        "initiative_rolled",
        "item_used",
        "ac_changed",
        "concentration_broken",
        "concentration_maintained",
    }
)

_OPPOSITE_DIRECTIONS = {
    "north": "south",
    "south": "north",
    "east": "west",
    "west": "east",
    "northeast": "southwest",
    "southwest": "northeast",
    "northwest": "southeast",
    "southeast": "northwest",
    "up": "down",
    "down": "up",
    "in": "out",
    "out": "in",
}


class EffectApplier:
    """Applies effects to a world and, when given, a story memory."""

    def __init__(self, world: GameWorld, memory: Optional[StoryMemory] = None):
        self.world = world
        self.memory = memory

    def apply(self, effect: Effect) -> None:
        if effect.kind in _INFORMATIONAL:
            return
        handler = getattr(self, f"_apply_{effect.kind}", None)
        if handler is None:
            logger.warning(f"No handler for effect kind: {effect.kind}")
            return
        handler(effect)
        logger.debug(f"Applied effect: {effect.kind}")

    def apply_all(self, effects: Iterable[Effect]) -> None:
        for effect in effects:
            self.apply(effect)

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    @property
    def character(self):
        return self.world.player_character

    def _find_location(self, name: str) -> Optional[Location]:
        location = self.world.find_location(name)
        if location is None and self.world.current_location.name.lower() == name.lower():
            return self.world.current_location
        return location

    def _needs_memory(self, kind: str) -> bool:
        if self.memory is None:
            logger.debug(f"No story memory attached, {kind} only affects the world")
            return False
        return True

    # =========================================================================
    # HIT POINTS, CONDITIONS AND DEATH
    # =========================================================================

    def _apply_hp_changed(self, effect) -> None:
        world = self.world
        if not is_player(world, effect.target_id):
            combatant = world.combat.find_combatant(effect.target_id) if world.combat else None
            if combatant is None:
                logger.warning(f"HP change for unknown target: {effect.target_id}")
                return
            combatant.current_hp = max(0, min(combatant.max_hp, combatant.current_hp + effect.amount))
            return

        character = self.character
        hp = character.hit_points
        was_down = hp.current == 0
        if effect.amount < 0:
            hp.take_damage(-effect.amount)
        else:
            hp.heal(effect.amount)

        if hp.current == 0:
            if not character.has_condition(Condition.UNCONSCIOUS):
                character.add_condition(Condition.UNCONSCIOUS, "Dropped to 0 HP")
        elif was_down:
            character.remove_condition(Condition.UNCONSCIOUS)
            character.death_saves.reset()

        if world.combat is not None:
            world.combat.update_combatant_hp(character.id, hp.current)

    def _apply_condition_applied(self, effect) -> None:
        if not is_player(self.world, effect.target_id):
            logger.debug(f"Condition {effect.condition.value} on {effect.target_id} is narrative only")
            return
        self.character.add_condition(effect.condition, effect.source, effect.duration_rounds)

    def _apply_condition_removed(self, effect) -> None:
        if is_player(self.world, effect.target_id):
            self.character.remove_condition(effect.condition)

    def _apply_death_save_failure(self, effect) -> None:
        self.character.death_saves.failures = min(3, effect.total_failures)

    def _apply_death_save_success(self, effect) -> None:
        self.character.death_saves.successes = min(3, effect.total_successes)

    def _apply_death_saves_reset(self, effect) -> None:
        self.character.death_saves.reset()

    def _apply_stabilized(self, effect) -> None:
        self.character.death_saves.reset()
        logger.info(f"{self.character.name} is stable")

    def _apply_character_died(self, effect) -> None:
        character = self.character
        character.hit_points.current = 0
        character.death_saves.failures = 3
        logger.info(f"{character.name} died: {effect.cause}")

    # =========================================================================
    # COMBAT
    # =========================================================================

    def _apply_combat_started(self, effect) -> None:
        if self.world.in_combat():
            logger.info("Combat restarted, previous initiative order discarded")
        self.world.start_combat()

    def _apply_combat_ended(self, effect) -> None:
        if self.world.in_combat():
            self.world.end_combat()

    def _apply_combatant_added(self, effect) -> None:
        combat = self.world.combat
        if combat is None:
            logger.warning(f"Combatant {effect.name} added outside combat, starting combat")
            combat = self.world.start_combat()
        combat.add_combatant(
            Combatant(
                id=effect.id,
                name=effect.name,
                initiative=effect.initiative,
                is_player=effect.is_player,
                is_ally=effect.is_ally,
                current_hp=effect.current_hp,
                max_hp=effect.max_hp,
                armor_class=effect.armor_class,
            )
        )

    def _apply_turn_advanced(self, effect) -> None:
        if self.world.combat is None:
            return
        self.world.combat.next_turn()
        expired = self.character.tick_conditions()
        for condition in expired:
            logger.debug(f"Condition expired: {condition.value}")

    def _apply_sneak_attack_used(self, effect) -> None:
        if self.world.combat is not None:
            self.world.combat.sneak_attack_used.add(effect.character_id)

    # =========================================================================
    # TIME, EXPERIENCE AND RESOURCES
    # =========================================================================

    def _apply_time_advanced(self, effect) -> None:
        days = self.world.game_time.advance_minutes(effect.minutes)
        if days:
            logger.debug(f"{days} day(s) passed, now {self.world.game_time}")

    def _apply_rest_completed(self, effect) -> None:
        if effect.rest_type == RestType.LONG:
            self.world.long_rest()
        else:
            self.world.short_rest()

    def _apply_experience_gained(self, effect) -> None:
        self.character.experience = effect.new_total

    def _apply_level_up(self, effect) -> None:
        character = self.character
        gained = effect.new_level - character.level
        if gained <= 0:
            return

        character_class = character.primary_class()
        con_mod = character.ability_modifier(Ability.CONSTITUTION)
        die = character_class.hit_die if character_class else 8
        hp_gain = max(1, die // 2 + 1 + con_mod) * gained
        character.hit_points.maximum += hp_gain
        character.hit_points.current += hp_gain
        character.hit_dice.add(die, gained)
        character.level = effect.new_level

        if character_class is not None:
            class_level = character.classes[0]
            class_level.level += gained
            self._level_up_spell_slots(character_class, class_level.level)
            self._level_up_resources(character_class, class_level.level, gained)

        logger.info(f"{character.name} reached level {effect.new_level} (+{hp_gain} HP)")

    def _level_up_spell_slots(self, character_class: CharacterClass, level: int) -> None:
        character = self.character
        ability = character_class.spellcasting_ability
        totals = character_class.spell_slots_at_level(level)
        if ability is None or not any(totals):
            return
        if character.spellcasting is None:
            character.spellcasting = SpellcastingData(ability, SpellSlots.with_totals(totals))
            return
        for slot, total in zip(character.spellcasting.spell_slots.slots, totals):
            slot.total = max(slot.total, total)

    def _level_up_resources(self, character_class: CharacterClass, level: int, gained: int) -> None:
        character = self.character
        resources = character.class_resources
        if character_class == CharacterClass.MONK and level >= 2:
            added = level - resources.max_ki_points
            resources.max_ki_points = level
            resources.ki_points += max(0, added)
        elif character_class == CharacterClass.PALADIN:
            resources.lay_on_hands_max = 5 * level
            resources.lay_on_hands_pool += 5 * gained
        elif character_class == CharacterClass.BARBARIAN:
            rage = character.find_feature("Rage")
            if rage is not None and rage.uses is not None:
                new_max = rage_uses_at_level(level)
                rage.uses.current += max(0, new_max - rage.uses.maximum)
                rage.uses.maximum = new_max

    def _apply_feature_used(self, effect) -> None:
        feature = self.character.find_feature(effect.feature_name)
        if feature is None or feature.uses is None:
            return
        feature.uses.current = max(0, effect.uses_remaining)

    def _apply_spell_slot_used(self, effect) -> None:
        casting = self.character.spellcasting
        if casting is None or not casting.spell_slots.use_slot(effect.level):
            logger.warning(f"Could not expend a level {effect.level} spell slot")

    def _apply_spell_slot_restored(self, effect) -> None:
        casting = self.character.spellcasting
        if casting is not None:
            casting.spell_slots.restore_slot(effect.level)

    def _apply_ability_score_modified(self, effect) -> None:
        scores = self.character.ability_scores
        value = scores.get(effect.ability) + effect.modifier
        scores.set(effect.ability, max(1, min(30, value)))

    def _apply_class_resource_used(self, effect) -> None:
        resources = self.character.class_resources
        if effect.resource_name == "Ki Points":
            resources.ki_points = max(0, resources.ki_points - effect.amount)
        elif effect.resource_name == "Lay on Hands":
            resources.lay_on_hands_pool = max(0, resources.lay_on_hands_pool - effect.amount)
        elif effect.resource_name == "Action Surge":
            resources.action_surge_used = True
        elif effect.resource_name == "Second Wind":
            resources.second_wind_used = True

    def _apply_rage_started(self, effect) -> None:
        resources = self.character.class_resources
        resources.rage_active = True
        resources.rage_damage_bonus = effect.damage_bonus
        resources.rage_rounds_remaining = RAGE_DURATION_ROUNDS

    def _apply_rage_ended(self, effect) -> None:
        resources = self.character.class_resources
        resources.rage_active = False
        resources.rage_damage_bonus = 0
        resources.rage_rounds_remaining = None

    # =========================================================================
    # INVENTORY
    # =========================================================================

    def _apply_item_added(self, effect) -> None:
        catalogue = find_item(effect.item_name)
        if catalogue is not None:
            item = replace(catalogue, quantity=effect.quantity)
            if effect.description:
                item.description = effect.description
            if effect.magical:
                item.magical = True
        else:
            item = Item(
                name=effect.item_name,
                quantity=effect.quantity,
                weight=effect.weight or 0.0,
                value_gp=effect.value_gp or 0.0,
                description=effect.description,
                item_type=ItemType.parse(effect.item_type),
                magical=effect.magical,
            )
        self.character.inventory.add_item(item)

    def _apply_item_removed(self, effect) -> None:
        character = self.character
        if character.inventory.remove_item(effect.item_name, effect.quantity):
            return
        slot = character.equipment.slot_holding(effect.item_name)
        if slot is not None:
            setattr(character.equipment, slot, None)
            return
        logger.warning(f"Cannot remove {effect.quantity} x {effect.item_name}: not held")

    def _apply_item_equipped(self, effect) -> None:
        character = self.character
        held = character.inventory.find_item(effect.item_name)
        base = replace(held, quantity=1) if held is not None else Item(effect.item_name)
        slot = "main_hand" if effect.slot == "weapon" else effect.slot

        self._return_to_inventory(slot)
        equipment = character.equipment
        if slot == "armor":
            armor = get_armor(base.name) or ArmorItem(base=base)
            equipment.armor = armor
        elif slot == "main_hand":
            weapon = get_weapon(base.name) or WeaponItem(base=base)
            equipment.main_hand = weapon
        elif slot in ("shield", "off_hand"):
            setattr(equipment, slot, base)
        else:
            logger.warning(f"Unknown equipment slot: {effect.slot}")
            return
        character.inventory.remove_item(base.name, 1)

    def _apply_item_unequipped(self, effect) -> None:
        slot = "main_hand" if effect.slot == "weapon" else effect.slot
        self._return_to_inventory(slot)

    def _return_to_inventory(self, slot: str) -> None:
        equipment = self.character.equipment
        equipped = getattr(equipment, slot, None)
        if equipped is None:
            return
        base = equipped.base if isinstance(equipped, (WeaponItem, ArmorItem)) else equipped
        self.character.inventory.add_item(replace(base, quantity=1))
        setattr(equipment, slot, None)

    def _apply_gold_changed(self, effect) -> None:
        self.character.inventory.gold = effect.new_total

    def _apply_silver_changed(self, effect) -> None:
        self.character.inventory.silver = effect.new_total

    # =========================================================================
    # QUESTS
    # =========================================================================

    def _find_quest(self, name: str) -> Optional[Quest]:
        quest = self.world.find_quest(name)
        if quest is None:
            logger.warning(f"Quest not found: {name}")
        return quest

    def _apply_quest_created(self, effect) -> None:
        quest = Quest(
            name=effect.name,
            description=effect.description,
            objectives=[QuestObjective(d, optional=o) for d, o in effect.objectives],
            rewards=list(effect.rewards),
            giver=effect.giver,
        )
        quests = self.world.quests
        for i, existing in enumerate(quests):
            if existing.name == effect.name:
                quest.id = existing.id
                quests[i] = quest
                return
        quests.append(quest)

    def _apply_quest_objective_added(self, effect) -> None:
        quest = self._find_quest(effect.quest_name)
        if quest is not None:
            quest.objectives.append(QuestObjective(effect.objective, optional=effect.optional))

    def _apply_quest_objective_completed(self, effect) -> None:
        quest = self._find_quest(effect.quest_name)
        if quest is None:
            return
        objective = quest.find_objective(effect.objective_description)
        if objective is None:
            logger.warning(
                f"No objective matching '{effect.objective_description}' in quest {quest.name}"
            )
            return
        objective.completed = True

    def _apply_quest_completed(self, effect) -> None:
        quest = self._find_quest(effect.quest_name)
        if quest is None:
            return
        quest.status = QuestStatus.COMPLETED
        for objective in quest.objectives:
            if not objective.optional:
                objective.completed = True

    def _apply_quest_failed(self, effect) -> None:
        quest = self._find_quest(effect.quest_name)
        if quest is not None:
            quest.status = QuestStatus.FAILED

    def _apply_quest_updated(self, effect) -> None:
        quest = self._find_quest(effect.quest_name)
        if quest is None:
            return
        if effect.new_description:
            quest.description = effect.new_description
        quest.rewards.extend(effect.add_rewards)

    # =========================================================================
    # NPCS
    # =========================================================================

    def _find_npc(self, name: str) -> Optional[NPC]:
        npc = self.world.find_npc(name)
        if npc is None:
            logger.warning(f"NPC not found: {name}")
        return npc

    def _location_id(self, name: Optional[str]) -> Optional[str]:
        if not name:
            return None
        location = self._find_location(name)
        return location.id if location is not None else None

    def _apply_npc_created(self, effect) -> None:
        npc = NPC(
            name=effect.name,
            description=effect.description,
            personality=effect.personality,
            occupation=effect.occupation,
            disposition=effect.disposition,
            location_id=self._location_id(effect.location),
            known_information=list(effect.known_information),
        )
        for existing in list(self.world.npcs.values()):
            if existing.name == effect.name:
                npc.id = existing.id
                break
        self.world.npcs[npc.id] = npc

    def _apply_npc_updated(self, effect) -> None:
        npc = self._find_npc(effect.npc_name)
        if npc is None:
            return
        if effect.disposition is not None:
            npc.disposition = effect.disposition
        if effect.add_information:
            npc.learn(effect.add_information)
        if effect.new_description is not None:
            npc.description = effect.new_description
        if effect.new_personality is not None:
            npc.personality = effect.new_personality

    def _apply_npc_moved(self, effect) -> None:
        npc = self._find_npc(effect.npc_name)
        if npc is not None:
            npc.location_id = self._location_id(effect.to_location)

    def _apply_npc_removed(self, effect) -> None:
        npc = self._find_npc(effect.npc_name)
        if npc is None:
            return
        if effect.permanent:
            del self.world.npcs[npc.id]
        else:
            npc.location_id = None

    # =========================================================================
    # LOCATIONS
    # =========================================================================

    def _apply_location_created(self, effect) -> None:
        location = Location(
            name=effect.name,
            location_type=effect.location_type,
            description=effect.description,
            parent_location=effect.parent_location,
            items=list(effect.items),
            npcs_present=list(effect.npcs_present),
        )
        for existing in self.world.known_locations.values():
            if existing.name == effect.name:
                location.id = existing.id
                location.connections = existing.connections
                break
        self.world.known_locations[location.id] = location

    def _apply_locations_connected(self, effect) -> None:
        origin = self._find_location(effect.from_location)
        destination = self._find_location(effect.to_location)
        if origin is None or destination is None:
            missing = effect.from_location if origin is None else effect.to_location
            logger.warning(f"Cannot connect locations, unknown location: {missing}")
            return
        travel = effect.travel_time_minutes or 0
        origin.connect_to(destination, effect.direction, travel)
        if effect.bidirectional:
            reverse = _OPPOSITE_DIRECTIONS.get((effect.direction or "").lower())
            destination.connect_to(origin, reverse, travel)

    def _apply_location_updated(self, effect) -> None:
        location = self._find_location(effect.location_name)
        if location is None:
            logger.warning(f"Location not found: {effect.location_name}")
            return
        if effect.new_description is not None:
            location.description = effect.new_description
        location.items.extend(i for i in effect.add_items if i not in location.items)
        location.items = [i for i in location.items if i not in effect.remove_items]
        location.npcs_present.extend(n for n in effect.add_npcs if n not in location.npcs_present)
        location.npcs_present = [n for n in location.npcs_present if n not in effect.remove_npcs]

    def _apply_location_changed(self, effect) -> None:
        world = self.world
        previous = world.current_location
        if previous.id not in world.known_locations and world.find_location(previous.name) is None:
            world.known_locations[previous.id] = previous

        location = world.find_location(effect.new_location)
        if location is None:
            location = Location(
                name=effect.new_location,
                location_type=LocationType.parse(effect.location_type),
                description=effect.description or "",
            )
            world.known_locations[location.id] = location
        world.current_location = location

    # =========================================================================
    # ASSERTED STATE AND KNOWLEDGE
    # =========================================================================

    def _apply_state_asserted(self, effect) -> None:
        npc = self.world.find_npc(effect.entity_name)
        if npc is None:
            logger.debug(f"State asserted for {effect.entity_name}, no NPC record to update")
            return

        value = effect.new_value
        if effect.state_type == StateType.DISPOSITION:
            disposition = Disposition.parse(value)
            if disposition is None:
                logger.warning(f"Ignoring unknown disposition '{value}' for {npc.name}")
                return
            npc.disposition = disposition
        elif effect.state_type == StateType.LOCATION:
            location_id = self._location_id(value)
            if location_id is not None:
                npc.location_id = location_id
            marker = f"at {value}".lower()
            if not any(marker in info.lower() for info in npc.known_information):
                npc.known_information.append(f"Currently at {value}")
        elif effect.state_type == StateType.STATUS:
            npc.known_information = [
                info for info in npc.known_information if not info.startswith("Status:")
            ]
            npc.known_information.append(f"Status: {value}")
        elif effect.state_type == StateType.KNOWLEDGE:
            npc.learn(value)
        elif effect.state_type == StateType.RELATIONSHIP:
            if effect.target_entity and self.memory is not None:
                self.memory.add_relationship(
                    npc.name,
                    effect.target_entity,
                    RelationshipType.parse(value),
                    description=effect.reason,
                )

    def _apply_knowledge_shared(self, effect) -> None:
        npc = self.world.find_npc(effect.knowing_entity)
        if npc is not None:
            npc.learn(effect.content)
        if self._needs_memory(effect.kind):
            self.memory.share_knowledge(
                effect.knowing_entity,
                effect.content,
                source=effect.source,
                verification=effect.verification,
                context=effect.context,
            )

    # =========================================================================
    # STORY MEMORY
    # =========================================================================

    def _apply_fact_remembered(self, effect) -> None:
        if self._needs_memory(effect.kind):
            self.memory.remember_fact(
                effect.fact,
                category=effect.category,
                subject_name=effect.subject_name,
                subject_type=effect.subject_type,
                related_entities=effect.related_entities,
                importance=effect.importance,
            )

    def _apply_consequence_registered(self, effect) -> None:
        if self._needs_memory(effect.kind):
            self.memory.register_consequence(
                effect.trigger_description,
                effect.consequence_description,
                severity=effect.severity,
                related_entities=effect.related_entities,
                importance=effect.importance,
                expires_in_turns=effect.expires_in_turns,
                consequence_id=effect.consequence_id,
            )

    def _apply_consequence_triggered(self, effect) -> None:
        if self._needs_memory(effect.kind):
            if not self.memory.trigger_consequence(effect.consequence_id):
                logger.warning(f"Consequence {effect.consequence_id} is not pending")

    def _apply_event_scheduled(self, effect) -> None:
        if self._needs_memory(effect.kind):
            self.memory.schedule_event(
                effect.description,
                effect.trigger,
                self.world.game_time,
                location=effect.location,
                involved_entities=effect.involved_entities,
                visibility=effect.visibility,
                repeating=effect.repeating,
            )

    def _apply_event_cancelled(self, effect) -> None:
        if self._needs_memory(effect.kind):
            if self.memory.cancel_event(effect.description) is None:
                logger.warning(f"No pending event matches '{effect.description}'")

    def _apply_event_triggered(self, effect) -> None:
        if effect.event_id is not None and self._needs_memory(effect.kind):
            self.memory.fire_event(effect.event_id, self.world.game_time)


def apply_effect(effect: Effect, world: GameWorld, memory: Optional[StoryMemory] = None) -> None:
    """Apply one effect to the world (and story memory, when given)."""
    EffectApplier(world, memory).apply(effect)


def apply_effects(
    effects: Iterable[Effect],
    world: GameWorld,
    memory: Optional[StoryMemory] = None,
) -> None:
    """Apply effects strictly in order."""
    EffectApplier(world, memory).apply_all(effects)
