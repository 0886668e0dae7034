"""
Checks, saving throws, raw dice, concentration and death saves.
"""

from chronicle.dice import Advantage, DiceError, DiceRoller
from chronicle.rules.helpers import character_for, roll_check
from chronicle.rules.types import (
    AbilityCheck,
    CheckFailed,
    CheckSucceeded,
    CharacterDied,
    ConcentrationBroken,
    ConcentrationCheck,
    ConcentrationMaintained,
    ConditionRemoved,
    DeathSave,
    DeathSaveFailure,
    DeathSavesReset,
    DeathSaveSuccess,
    DiceRolled,
    HpChanged,
    Resolution,
    RollDice,
    SavingThrow,
    SkillCheck,
    Stabilized,
)
from chronicle.world.abilities import Ability, Skill
from chronicle.world.conditions import Condition
from chronicle.world.game_world import GameWorld

# Abilities whose checks and saves an unconscious creature fails automatically
_PHYSICAL = (Ability.STRENGTH, Ability.DEXTERITY)


def _outcome(success: bool, check_type: str, total: int, dc: int):
    if success:
        return CheckSucceeded(check_type, total, dc)
    return CheckFailed(check_type, total, dc)


def resolve_skill_check(intent: SkillCheck, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    skill_name = intent.skill.display_name

    if character.has_condition(Condition.UNCONSCIOUS) and intent.skill.ability in _PHYSICAL:
        return Resolution(
            f"{character.name} is unconscious and automatically fails the {skill_name} check!",
            [CheckFailed(skill_name, 0, intent.dc)],
        )

    advantage = intent.advantage
    armor_note = ""
    armor = character.equipment.armor
    if intent.skill == Skill.STEALTH and armor is not None and armor.stealth_disadvantage:
        advantage = advantage.combine(Advantage.DISADVANTAGE)
        armor_note = " [armor disadvantage]"

    purpose = f"{skill_name} check - {intent.description}"
    roll = roll_check(character.skill_modifier(intent.skill), advantage, purpose)
    success = roll.total >= intent.dc
    verb = "succeeds" if success else "fails"

    return Resolution(
        f"{character.name} {verb} ({skill_name} check: {roll.total} vs DC {intent.dc}){armor_note}",
        [DiceRolled(roll, purpose), _outcome(success, skill_name, roll.total, intent.dc)],
    )


def resolve_ability_check(intent: AbilityCheck, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    abbr = intent.ability.abbreviation

    if character.has_condition(Condition.UNCONSCIOUS) and intent.ability in _PHYSICAL:
        return Resolution(
            f"{character.name} is unconscious and automatically fails the {abbr} check!",
            [CheckFailed(f"{abbr} check", 0, intent.dc)],
        )

    purpose = f"{abbr} check - {intent.description}"
    roll = roll_check(character.ability_modifier(intent.ability), intent.advantage, purpose)
    success = roll.total >= intent.dc
    verb = "succeeds" if success else "fails"

    return Resolution(
        f"{character.name} {verb} ({abbr} check: {roll.total} vs DC {intent.dc})",
        [DiceRolled(roll, purpose), _outcome(success, abbr, roll.total, intent.dc)],
    )


def resolve_saving_throw(intent: SavingThrow, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    abbr = intent.ability.abbreviation

    if character.has_condition(Condition.UNCONSCIOUS) and intent.ability in _PHYSICAL:
        return Resolution(
            f"{character.name} is unconscious and automatically fails the {abbr} saving throw!",
            [CheckFailed(f"{abbr} save", 0, intent.dc)],
        )

    purpose = f"{abbr} save vs {intent.source}"
    roll = roll_check(character.saving_throw_modifier(intent.ability), intent.advantage, purpose)
    success = roll.total >= intent.dc
    verb = "succeeds" if success else "fails"

    return Resolution(
        f"{character.name} {verb} on {abbr} saving throw ({roll.total} vs DC {intent.dc})",
        [DiceRolled(roll, purpose), _outcome(success, f"{abbr} save", roll.total, intent.dc)],
    )


def resolve_roll_dice(intent: RollDice, world: GameWorld) -> Resolution:
    try:
        roll = DiceRoller.roll(intent.notation, intent.purpose)
    except DiceError as e:
        return Resolution(f"Failed to roll {intent.notation}: {e}")
    return Resolution(
        f"Rolling {intent.notation} for {intent.purpose}: {roll}",
        [DiceRolled(roll, intent.purpose)],
    )


def resolve_concentration_check(intent: ConcentrationCheck, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    dc = max(10, intent.damage_taken // 2)
    modifier = character.saving_throw_modifier(Ability.CONSTITUTION)
    purpose = f"Concentration save ({intent.spell_name})"
    roll = roll_check(modifier, Advantage.NORMAL, purpose)

    intro = (
        f"{character.name} makes a DC {dc} Constitution save to maintain concentration "
        f"on {intent.spell_name}. Rolls {roll.total}"
    )
    if roll.total >= dc:
        return Resolution(
            f"{intro} - SUCCESS! Concentration maintained.",
            [
                DiceRolled(roll, purpose),
                ConcentrationMaintained(character.id, intent.spell_name, roll.total, dc),
            ],
        )
    return Resolution(
        f"{intro} - FAILED! Concentration is broken!",
        [
            DiceRolled(roll, purpose),
            ConcentrationBroken(character.id, intent.spell_name, intent.damage_taken, roll.total, dc),
        ],
    )


def resolve_death_save(intent: DeathSave, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    name = character.name
    if character.hit_points.current > 0:
        return Resolution(f"{name} is not dying and doesn't need to make a death save.")

    roll = DiceRoller.roll("1d20", "Death save")
    face = roll.natural
    saves = character.death_saves
    rolled = DiceRolled(roll, "Death save")

    if face == 20:
        return Resolution(
            f"{name} rolls a NATURAL 20 on their death save! They regain 1 HP and become conscious!",
            [
                rolled,
                DeathSavesReset(character.id),
                HpChanged(character.id, 1, 1, character.hit_points.maximum),
                ConditionRemoved(character.id, Condition.UNCONSCIOUS),
            ],
        )

    if face == 1:
        total = min(3, saves.failures + 2)
        failure = DeathSaveFailure(character.id, 2, total, "Natural 1 on death save")
        if saves.failures + 2 >= 3:
            return Resolution(
                f"{name} rolls a NATURAL 1 on their death save! Two failures! {name} has died!",
                [rolled, failure, CharacterDied(character.id, "Failed death saves")],
            )
        return Resolution(
            f"{name} rolls a NATURAL 1 on their death save! That counts as TWO failures! ({total}/3)",
            [rolled, failure],
        )

    if face >= 10:
        successes = saves.successes + 1
        success = DeathSaveSuccess(character.id, face, successes)
        if successes >= 3:
            return Resolution(
                f"{name} rolls {face} on their death save - SUCCESS! "
                f"With 3 successes, {name} is now STABLE!",
                [rolled, success, Stabilized(character.id)],
            )
        return Resolution(
            f"{name} rolls {face} on their death save - SUCCESS! ({successes}/3 successes)",
            [rolled, success],
        )

    failures = saves.failures + 1
    failure = DeathSaveFailure(character.id, 1, failures, "Death save")
    if failures >= 3:
        return Resolution(
            f"{name} rolls {face} on their death save - FAILURE! With 3 failures, {name} has DIED!",
            [rolled, failure, CharacterDied(character.id, "Failed death saves")],
        )
    return Resolution(
        f"{name} rolls {face} on their death save - FAILURE! ({failures}/3 failures)",
        [rolled, failure],
    )
