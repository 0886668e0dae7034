"""
Combat resolvers: attacks, damage, healing, conditions and turn order.

Nothing here mutates the world. Damage and healing are worked out on copies
of the hit points so the narrative can describe the result before the
HpChanged effect is applied.
"""

import copy

from chronicle.dice import Advantage, DiceRoller
from chronicle.items import get_weapon
from chronicle.rules.helpers import (
    double_dice,
    find_combatant,
    hp_status,
    is_player,
    roll_check,
    roll_with_fallback,
    sneak_attack_dice,
    with_bonus,
)
from chronicle.rules.types import (
    ApplyCondition,
    Attack,
    AttackHit,
    AttackMissed,
    CharacterDied,
    CombatantAdded,
    CombatEnded,
    CombatStarted,
    ConditionApplied,
    ConditionRemoved,
    Damage,
    DeathSaveFailure,
    DiceRolled,
    EndCombat,
    Heal,
    HpChanged,
    InitiativeRolled,
    NextTurn,
    RemoveCondition,
    Resolution,
    RollInitiative,
    SneakAttackUsed,
    StartCombat,
    TurnAdvanced,
)
from chronicle.world.abilities import Ability
from chronicle.world.character import CharacterClass
from chronicle.world.conditions import Condition
from chronicle.world.game_world import GameWorld
from chronicle.world.health import DamageType, HitPoints
from chronicle.world.inventory import Item, ItemType, WeaponItem

UNARMED = "Unarmed Strike"


def _weapon_for(world: GameWorld, weapon_name: str) -> WeaponItem:
    weapon = get_weapon(weapon_name) if weapon_name else None
    if weapon is not None:
        return weapon
    equipped = world.player_character.equipment.main_hand
    if equipped is not None:
        return equipped
    return WeaponItem(
        base=Item(weapon_name or UNARMED, item_type=ItemType.WEAPON),
        damage_dice="1d1",
        damage_type=DamageType.BLUDGEONING,
    )


def _target_name(world: GameWorld, target_id: str) -> str:
    if target_id and is_player(world, target_id):
        return world.player_character.name
    combatant = find_combatant(world, target_id)
    if combatant is not None:
        return combatant.name
    npc = world.find_npc(target_id) if target_id else None
    return npc.name if npc is not None else (target_id or "target")


# =============================================================================
# ATTACKS
# =============================================================================


def resolve_attack(intent: Attack, world: GameWorld) -> Resolution:
    character = world.player_character
    if character.has_condition(Condition.UNCONSCIOUS):
        return Resolution(f"{character.name} is unconscious and cannot attack!")

    target = find_combatant(world, intent.target_id)
    if intent.target_id == character.id:
        target_ac = character.armor_class()
        target_name = character.name
    elif target is not None:
        target_ac = target.armor_class
        target_name = target.name
    else:
        target_ac = 10
        target_name = "target"

    weapon = _weapon_for(world, intent.weapon_name)
    str_mod = character.ability_modifier(Ability.STRENGTH)
    dex_mod = character.ability_modifier(Ability.DEXTERITY)
    if weapon.is_ranged():
        ability_mod, strength_melee = dex_mod, False
    elif weapon.is_finesse():
        ability_mod, strength_melee = max(str_mod, dex_mod), str_mod >= dex_mod
    else:
        ability_mod, strength_melee = str_mod, True

    attack_mod = ability_mod + character.proficiency_bonus()
    purpose = f"Attack with {weapon.name}"
    attack_roll = roll_check(attack_mod, intent.advantage, purpose)
    narrative = f"{character.name} attacks with {weapon.name} (roll: {attack_roll.total} vs AC {target_ac})"
    resolution = Resolution(narrative, [DiceRolled(attack_roll, purpose)])

    is_critical = attack_roll.natural_20
    hit = not attack_roll.natural_1 and (attack_roll.total >= target_ac or is_critical)
    if not hit:
        resolution.narrative += " - MISS!"
        return resolution.with_effect(
            AttackMissed(character.name, target_name, attack_roll.total, target_ac)
        )

    resolution.narrative += " - CRITICAL HIT!" if is_critical else " - HIT!"
    resolution.with_effect(
        AttackHit(character.name, target_name, attack_roll.total, target_ac, is_critical)
    )

    rage_bonus = 0
    resources = character.class_resources
    if strength_melee and resources.rage_active:
        rage_bonus = resources.rage_damage_bonus

    dice = double_dice(weapon.damage_dice) if is_critical else weapon.damage_dice
    damage_roll = roll_with_fallback(with_bonus(dice, ability_mod + rage_bonus), "1d4", "Damage")
    resolution.with_effect(DiceRolled(damage_roll, "Damage"))
    total_damage = damage_roll.total

    rogue_level = character.class_level(CharacterClass.ROGUE)
    if rogue_level > 0 and (weapon.is_finesse() or weapon.is_ranged()):
        has_ally = world.combat is not None and any(
            c.is_ally and not c.is_player and c.is_alive() and c.id != intent.target_id
            for c in world.combat.combatants
        )
        used = world.combat is not None and character.id in world.combat.sneak_attack_used
        if (intent.advantage == Advantage.ADVANTAGE or has_ally) and not used:
            count = sneak_attack_dice(rogue_level)
            dice_count = count * 2 if is_critical else count
            sneak_roll = roll_with_fallback(f"{dice_count}d6", "1d6", "Sneak Attack")
            total_damage += sneak_roll.total
            resolution.with_effect(DiceRolled(sneak_roll, "Sneak Attack"))
            resolution.with_effect(SneakAttackUsed(character.id, count))
            resolution.narrative += f" Sneak Attack adds {sneak_roll.total} damage."

    resolution.narrative += f" Deals {total_damage} {weapon.damage_type.value} damage."
    return resolution


# =============================================================================
# DAMAGE AND HEALING
# =============================================================================


def _unknown_target(target_id: str) -> Resolution:
    return Resolution(f"No combatant named '{target_id}' is in combat")


def _damage_combatant(intent: Damage, world: GameWorld) -> Resolution:
    combatant = find_combatant(world, intent.target_id)
    new_hp = max(0, combatant.current_hp - intent.amount)
    dropped = new_hp == 0 and combatant.current_hp > 0
    if new_hp == 0:
        status = f" (HP: 0/{combatant.max_hp} - DOWN!)"
    else:
        status = hp_status(new_hp, combatant.max_hp)
    return Resolution(
        f"{combatant.name} takes {intent.amount} {intent.damage_type.value} damage "
        f"from {intent.source}{status}",
        [HpChanged(combatant.id, -intent.amount, new_hp, combatant.max_hp, dropped)],
    )


def resolve_damage(intent: Damage, world: GameWorld) -> Resolution:
    if not is_player(world, intent.target_id):
        if find_combatant(world, intent.target_id) is None:
            return _unknown_target(intent.target_id)
        return _damage_combatant(intent, world)

    character = world.player_character
    name = character.name
    damage_type = intent.damage_type.value
    hp = character.hit_points

    if hp.current == 0:
        prefix = f"{name} takes {intent.amount} {damage_type} damage from {intent.source} while unconscious"
        if intent.amount >= hp.maximum:
            return Resolution(
                f"{prefix} - INSTANT DEATH! (Damage {intent.amount} >= max HP {hp.maximum})",
                [CharacterDied(character.id, f"Massive damage while unconscious from {intent.source}")],
            )
        failures = character.death_saves.failures + 1
        failure = DeathSaveFailure(character.id, 1, failures, intent.source)
        if failures >= 3:
            return Resolution(
                f"{prefix} - death save failure! Total failures: 3 - {name} DIES!",
                [failure, CharacterDied(character.id, "Failed 3 death saving throws")],
            )
        return Resolution(f"{prefix} - death save failure! (Failures: {failures}/3)", [failure])

    preview = copy.copy(hp)
    result = preview.take_damage(intent.amount)
    dropped = result.dropped_to_zero
    overflow = intent.amount - (hp.current + hp.temporary) if dropped else 0
    instant_death = dropped and overflow >= hp.maximum

    if instant_death:
        status = (
            f" (INSTANT DEATH! Massive damage ({overflow} overflow) exceeds max HP of {hp.maximum})"
        )
    elif dropped:
        status = (
            f" (HP: 0/{hp.maximum} - UNCONSCIOUS! Character falls and begins making death saving throws)"
        )
    else:
        status = hp_status(preview.current, preview.maximum)

    resolution = Resolution(
        f"{name} takes {intent.amount} {damage_type} damage from {intent.source}{status}",
        [HpChanged(character.id, -intent.amount, preview.current, preview.maximum, dropped)],
    )
    if instant_death:
        resolution.with_effect(CharacterDied(character.id, f"Massive damage from {intent.source}"))
    return resolution


def resolve_heal(intent: Heal, world: GameWorld) -> Resolution:
    if not is_player(world, intent.target_id):
        combatant = find_combatant(world, intent.target_id)
        if combatant is None:
            return _unknown_target(intent.target_id)
        new_hp = min(combatant.max_hp, combatant.current_hp + intent.amount)
        healed = new_hp - combatant.current_hp
        return Resolution(
            f"{combatant.name} heals {healed} hit points from {intent.source}"
            f" (HP: {new_hp}/{combatant.max_hp})",
            [HpChanged(combatant.id, healed, new_hp, combatant.max_hp)],
        )

    character = world.player_character
    preview: HitPoints = copy.copy(character.hit_points)
    was_down = preview.current == 0
    healed = preview.heal(intent.amount)

    if was_down and preview.current > 0:
        status = f" (HP: {preview.current}/{preview.maximum} - regains consciousness!)"
    elif preview.current == preview.maximum:
        status = f" (HP: {preview.current}/{preview.maximum} - fully healed)"
    else:
        status = f" (HP: {preview.current}/{preview.maximum})"

    return Resolution(
        f"{character.name} heals {healed} hit points from {intent.source}{status}",
        [HpChanged(character.id, healed, preview.current, preview.maximum)],
    )


# =============================================================================
# CONDITIONS
# =============================================================================


def resolve_apply_condition(intent: ApplyCondition, world: GameWorld) -> Resolution:
    name = _target_name(world, intent.target_id)
    duration = f" for {intent.duration_rounds} rounds" if intent.duration_rounds is not None else ""
    return Resolution(
        f"{name} is now {intent.condition.display_name} ({intent.source}){duration}",
        [ConditionApplied(intent.target_id, intent.condition, intent.source, intent.duration_rounds)],
    )


def resolve_remove_condition(intent: RemoveCondition, world: GameWorld) -> Resolution:
    name = _target_name(world, intent.target_id)
    return Resolution(
        f"{name} is no longer {intent.condition.display_name}",
        [ConditionRemoved(intent.target_id, intent.condition)],
    )


# =============================================================================
# COMBAT FLOW
# =============================================================================


def resolve_start_combat(intent: StartCombat, world: GameWorld) -> Resolution:
    character = world.player_character
    resolution = Resolution("Combat begins! Roll for initiative.", [CombatStarted()])

    for init in intent.combatants:
        modifier = character.initiative_modifier() if init.is_player else init.initiative_modifier
        roll = DiceRoller.roll("1d20", f"Initiative ({init.name})")
        total = roll.total + modifier
        combatant_id = character.id if init.is_player else init.id
        resolution.with_effect(InitiativeRolled(combatant_id, init.name, roll.total, total))
        resolution.with_effect(
            CombatantAdded(
                id=combatant_id,
                name=init.name,
                initiative=total,
                is_ally=init.is_ally,
                current_hp=character.hit_points.current if init.is_player else init.current_hp,
                max_hp=character.hit_points.maximum if init.is_player else init.max_hp,
                armor_class=character.armor_class() if init.is_player else init.armor_class,
                is_player=init.is_player,
            )
        )
    return resolution


def resolve_end_combat(intent: EndCombat, world: GameWorld) -> Resolution:
    return Resolution("Combat ends.", [CombatEnded()])


def resolve_next_turn(intent: NextTurn, world: GameWorld) -> Resolution:
    if world.combat is None:
        return Resolution("No combat in progress")

    preview = copy.deepcopy(world.combat)
    preview.next_turn()
    current = preview.current_combatant()
    current_name = current.name if current is not None else "Unknown"
    return Resolution(
        f"Next turn: {current_name} (Round {preview.round})",
        [TurnAdvanced(preview.round, current_name)],
    )


def resolve_roll_initiative(intent: RollInitiative, world: GameWorld) -> Resolution:
    modifier = intent.modifier
    if intent.is_player:
        modifier = world.player_character.initiative_modifier()
    roll = DiceRoller.roll("1d20", "Initiative")
    total = roll.total + modifier
    return Resolution(
        f"{intent.name} rolls initiative: {roll.total} + {modifier} = {total}",
        [
            DiceRolled(roll, "Initiative"),
            InitiativeRolled(intent.character_id, intent.name, roll.total, total),
        ],
    )
