"""
The game world: everything the rules engine reads and the effect applier writes.

Invariant: combat is not None exactly when mode is GameMode.COMBAT.
start_combat() and end_combat() are the only transitions between the two.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import logging
import uuid

from chronicle.world.character import Character
from chronicle.world.combat import CombatState
from chronicle.world.conditions import Condition
from chronicle.world.game_time import GameTime
from chronicle.world.locations import Location, LocationType
from chronicle.world.npcs import NPC
from chronicle.world.quests import Quest

logger = logging.getLogger(__name__)


class GameMode(str, Enum):
    EXPLORATION = "exploration"
    COMBAT = "combat"


@dataclass
class GameWorld:
    player_character: Character
    campaign_name: str = "default"
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    mode: GameMode = GameMode.EXPLORATION
    combat: Optional[CombatState] = None
    game_time: GameTime = field(default_factory=GameTime)
    current_location: Location = field(
        default_factory=lambda: Location("Unknown", LocationType.OTHER)
    )
    known_locations: dict[str, Location] = field(default_factory=dict)
    npcs: dict[str, NPC] = field(default_factory=dict)
    quests: list[Quest] = field(default_factory=list)
    narrative_history: list[str] = field(default_factory=list)

    # =========================================================================
    # COMBAT
    # =========================================================================

    def in_combat(self) -> bool:
        return self.combat is not None

    def start_combat(self) -> CombatState:
        self.combat = CombatState()
        self.mode = GameMode.COMBAT
        logger.info("Combat started")
        return self.combat

    def end_combat(self) -> None:
        self.combat = None
        self.mode = GameMode.EXPLORATION
        logger.info("Combat ended")

    # =========================================================================
    # RESTS
    # =========================================================================

    def short_rest(self) -> None:
        character = self.player_character
        character.hit_dice.recover_half()
        character.class_resources.reset_short_rest()
        character.recharge_features(long_rest=False)

    def long_rest(self) -> None:
        character = self.player_character
        character.hit_points.current = character.hit_points.maximum
        character.hit_points.temporary = 0
        character.hit_dice.recover_all()
        character.death_saves.reset()
        character.remove_condition(Condition.UNCONSCIOUS)
        if character.spellcasting is not None:
            character.spellcasting.spell_slots.recover_all()
        character.class_resources.reset_long_rest()
        character.recharge_features(long_rest=True)

    # =========================================================================
    # NAME LOOKUPS
    # =========================================================================

    def find_npc(self, name: str) -> Optional[NPC]:
        key = name.lower()
        for npc in self.npcs.values():
            if npc.name.lower() == key:
                return npc
        return None

    def find_location(self, name: str) -> Optional[Location]:
        key = name.lower()
        for location in self.known_locations.values():
            if location.name.lower() == key:
                return location
        return None

    def find_quest(self, name: str) -> Optional[Quest]:
        key = name.lower()
        for quest in self.quests:
            if quest.name.lower() == key:
                return quest
        return None

    def npc_location_name(self, npc: NPC) -> Optional[str]:
        if npc.location_id is None:
            return None
        location = self.known_locations.get(npc.location_id)
        return location.name if location else None
