"""
Spell slots and spellcasting data.
"""

from dataclasses import dataclass, field

from chronicle.world.abilities import Ability, AbilityScores


@dataclass
class SlotInfo:
    total: int = 0
    used: int = 0

    def available(self) -> int:
        return max(0, self.total - self.used)


@dataclass
class SpellSlots:
    """Nine spell slot levels, index 0 is level 1."""

    slots: list[SlotInfo] = field(default_factory=lambda: [SlotInfo() for _ in range(9)])

    @classmethod
    def with_totals(cls, totals: list[int]) -> "SpellSlots":
        padded = list(totals)[:9] + [0] * (9 - min(9, len(totals)))
        return cls(slots=[SlotInfo(total=t) for t in padded])

    def get(self, level: int) -> SlotInfo:
        return self.slots[level - 1]

    def use_slot(self, level: int) -> bool:
        """Expend a slot; False (and no change) outside 1..9 or when none remain."""
        if 1 <= level <= 9:
            slot = self.slots[level - 1]
            if slot.available() > 0:
                slot.used += 1
                return True
        return False

    def restore_slot(self, level: int) -> bool:
        if 1 <= level <= 9:
            slot = self.slots[level - 1]
            if slot.used > 0:
                slot.used -= 1
                return True
        return False

    def recover_all(self) -> None:
        for slot in self.slots:
            slot.used = 0


@dataclass
class SpellcastingData:
    ability: Ability
    spell_slots: SpellSlots = field(default_factory=SpellSlots)
    spells_known: list[str] = field(default_factory=list)
    spells_prepared: list[str] = field(default_factory=list)
    cantrips_known: list[str] = field(default_factory=list)

    def spell_save_dc(self, scores: AbilityScores, proficiency: int) -> int:
        return max(8, 8 + scores.modifier(self.ability) + proficiency)

    def spell_attack_bonus(self, scores: AbilityScores, proficiency: int) -> int:
        return scores.modifier(self.ability) + proficiency
