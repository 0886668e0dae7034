"""
Spellcasting and spell slot restoration.
"""

from chronicle.rules.helpers import double_dice, find_combatant, roll_with_fallback, with_bonus
from chronicle.rules.types import (
    AttackHit,
    AttackMissed,
    CastSpell,
    DiceRolled,
    HpChanged,
    Resolution,
    RestoreSpellSlot,
    SpellSlotRestored,
    SpellSlotUsed,
)
from chronicle.spells import get_spell
from chronicle.world.game_world import GameWorld


def resolve_cast_spell(intent: CastSpell, world: GameWorld) -> Resolution:
    character = world.player_character
    name = character.name

    spell = get_spell(intent.spell_name)
    if spell is None:
        return Resolution(f"Unknown spell: '{intent.spell_name}'. The spell is not in the database.")

    if spell.is_cantrip():
        slot_level = 0
    elif intent.spell_level == 0:
        slot_level = spell.level
    elif intent.spell_level < spell.level:
        return Resolution(
            f"Cannot cast {spell.name} using a level {intent.spell_level} slot - "
            f"requires at least level {spell.level}."
        )
    else:
        slot_level = intent.spell_level

    casting = character.spellcasting
    if casting is None:
        return Resolution(f"{name} doesn't have spellcasting ability!")

    available = 0
    if slot_level > 0:
        available = casting.spell_slots.get(slot_level).available() if slot_level <= 9 else 0
        if available == 0:
            return Resolution(f"{name} has no level {slot_level} spell slots remaining!")

    scores = character.ability_scores
    proficiency = character.proficiency_bonus()
    modifier = scores.modifier(casting.ability)
    attack_bonus = casting.spell_attack_bonus(scores, proficiency)
    save_dc = casting.spell_save_dc(scores, proficiency)

    if slot_level > spell.level and spell.level > 0:
        header = f"{name} casts {spell.name} (upcast at level {slot_level})!"
    elif slot_level > 0:
        header = f"{name} casts {spell.name} (level {slot_level} slot)!"
    else:
        header = f"{name} casts {spell.name}!"
    parts = [header]
    if spell.concentration:
        parts.append("(Concentration)")

    resolution = Resolution("")
    damage_dice = spell.effective_damage_dice(character.level, slot_level)
    damage_type = spell.damage_type.value if spell.damage_type else "magical"

    if spell.attack_type is not None:
        attack_kind = spell.attack_type.value
        purpose = f"{attack_kind} spell attack"
        roll = roll_with_fallback(with_bonus("1d20", attack_bonus), "1d20", purpose)
        resolution.with_effect(DiceRolled(roll, purpose))

        target_name = intent.target_names[0] if intent.target_names else "target"
        target = find_combatant(world, target_name)
        target_ac = target.armor_class if target is not None else 10
        parts.append(
            f"Makes a {attack_kind} spell attack against {target_name}: {roll.total} vs AC {target_ac}."
        )

        is_critical = roll.natural_20
        if not roll.natural_1 and (roll.total >= target_ac or is_critical):
            parts.append("Hit!")
            resolution.with_effect(AttackHit(name, target_name, roll.total, target_ac, is_critical))
            if damage_dice:
                dice = double_dice(damage_dice) if is_critical else damage_dice
                damage = roll_with_fallback(dice, "1d4", f"{spell.name} damage")
                resolution.with_effect(DiceRolled(damage, f"{spell.name} damage"))
                parts.append(f"Deals {damage.total} {damage_type} damage.")
        else:
            parts.append("Miss!")
            resolution.with_effect(AttackMissed(name, target_name, roll.total, target_ac))

    elif spell.save_type is not None:
        effect_on_success = spell.save_effect or "negates effect"
        parts.append(
            f"Targets must make a DC {save_dc} {spell.save_type.display_name} saving throw "
            f"({effect_on_success} on success)."
        )
        if damage_dice:
            damage = roll_with_fallback(damage_dice, "1d4", f"{spell.name} damage")
            resolution.with_effect(DiceRolled(damage, f"{spell.name} damage"))
            parts.append(f"On a failed save: {damage.total} {damage_type} damage.")

    elif spell.healing_dice is not None:
        healing_dice = spell.effective_healing_dice(slot_level) or spell.healing_dice
        formula = with_bonus(healing_dice, modifier)
        healing = roll_with_fallback(formula, healing_dice, f"{spell.name} healing")
        resolution.with_effect(DiceRolled(healing, f"{spell.name} healing"))
        target_name = intent.target_names[0] if intent.target_names else name
        parts.append(f"{name} heals {target_name} for {healing.total} HP.")
        if target_name.lower() == name.lower():
            hp = character.hit_points
            new_current = min(hp.maximum, hp.current + max(0, healing.total))
            resolution.with_effect(
                HpChanged(character.id, new_current - hp.current, new_current, hp.maximum)
            )

    else:
        parts.append(spell.description)

    if slot_level > 0:
        resolution.with_effect(SpellSlotUsed(slot_level, available - 1))

    resolution.narrative = " ".join(parts)
    return resolution


def resolve_restore_spell_slot(intent: RestoreSpellSlot, world: GameWorld) -> Resolution:
    level = intent.slot_level
    if not 1 <= level <= 9:
        return Resolution(f"Invalid spell slot level: {level}. Must be between 1 and 9.")

    casting = world.player_character.spellcasting
    new_remaining = 0
    if casting is not None:
        new_remaining = casting.spell_slots.get(level).available() + 1
    return Resolution(
        f"Level {level} spell slot restored by {intent.source}",
        [SpellSlotRestored(level, new_remaining)],
    )
