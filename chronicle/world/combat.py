"""
Combat state: roster in initiative order, round and turn tracking.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Combatant:
    id: str
    name: str
    initiative: int
    is_player: bool = False
    is_ally: bool = False
    current_hp: int = 1
    max_hp: int = 1
    armor_class: int = 10

    def is_alive(self) -> bool:
        return self.current_hp > 0


@dataclass
class CombatState:
    """
    Active combat.

    Combatants are kept sorted by initiative, highest first; ties keep the
    order in which combatants were added.
    """

    combatants: list[Combatant] = field(default_factory=list)
    turn_index: int = 0
    round: int = 1
    sneak_attack_used: set[str] = field(default_factory=set)

    def add_combatant(self, combatant: Combatant) -> None:
        position = len(self.combatants)
        for i, existing in enumerate(self.combatants):
            if combatant.initiative > existing.initiative:
                position = i
                break
        self.combatants.insert(position, combatant)

    def current_combatant(self) -> Optional[Combatant]:
        if not self.combatants:
            return None
        return self.combatants[self.turn_index % len(self.combatants)]

    def next_turn(self) -> None:
        """Advance to the next combatant, starting a new round on wraparound."""
        self.sneak_attack_used.clear()
        if not self.combatants:
            return
        self.turn_index = (self.turn_index + 1) % len(self.combatants)
        if self.turn_index == 0:
            self.round += 1

    def find_combatant(self, key: str) -> Optional[Combatant]:
        """Find by id, or by name case-insensitively."""
        for combatant in self.combatants:
            if combatant.id == key:
                return combatant
        lowered = key.lower()
        for combatant in self.combatants:
            if combatant.name.lower() == lowered:
                return combatant
        return None

    def update_combatant_hp(self, combatant_id: str, hp: int) -> None:
        combatant = self.find_combatant(combatant_id)
        if combatant is not None:
            combatant.current_hp = hp

    def initiative_order(self) -> list[str]:
        return [c.name for c in self.combatants]
