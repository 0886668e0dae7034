"""
Class feature resolvers: rage, ki, lay on hands, divine smite, bardic
inspiration, action surge and second wind.
"""

from chronicle.rules.helpers import (
    character_for,
    is_player,
    plural,
    rage_damage_bonus,
    roll_with_fallback,
)
from chronicle.rules.types import (
    ClassResourceUsed,
    DiceRolled,
    EndRage,
    FeatureUsed,
    HpChanged,
    RageEnded,
    RageStarted,
    Resolution,
    SpellSlotUsed,
    UseActionSurge,
    UseBardicInspiration,
    UseDivineSmite,
    UseKi,
    UseLayOnHands,
    UseRage,
    UseSecondWind,
)
from chronicle.world.character import CharacterClass
from chronicle.world.game_world import GameWorld

LAY_ON_HANDS_CURE_COST = 5

_KI_ABILITIES = {
    "flurry_of_blows": "Flurry of Blows: Make two unarmed strikes as a bonus action.",
    "patient_defense": "Patient Defense: Take the Dodge action as a bonus action.",
    "step_of_the_wind": "Step of the Wind: Disengage or Dash as a bonus action, jump distance doubled.",
    "stunning_strike": (
        "Stunning Strike: Target must make a CON save or be Stunned until the end of your next turn."
    ),
}

_RAGE_END_REASONS = {
    "duration_expired": "Rage ended (1 minute duration expired).",
    "unconscious": "Rage ended (knocked unconscious).",
    "no_combat_action": "Rage ended (turn ended without attacking or taking damage).",
    "voluntary": "Rage ended voluntarily.",
}


def _feature_uses(world: GameWorld, feature_name: str) -> int:
    feature = world.player_character.find_feature(feature_name)
    if feature is None or feature.uses is None:
        return 0
    return feature.uses.current


# =============================================================================
# BARBARIAN
# =============================================================================


def resolve_use_rage(intent: UseRage, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    name = character.name
    if character.class_resources.rage_active:
        return Resolution(f"{name} is already raging!")

    uses = _feature_uses(world, "Rage")
    if uses <= 0:
        return Resolution(f"{name} has no rage uses remaining! (Recovers on long rest)")

    bonus = rage_damage_bonus(character.class_level(CharacterClass.BARBARIAN))
    return Resolution(
        f"{name} enters a RAGE! Gains: advantage on STR checks/saves, +{bonus} rage damage to "
        "melee attacks, resistance to bludgeoning/piercing/slashing damage. Cannot cast spells "
        "or concentrate while raging.",
        [
            RageStarted(character.id, bonus),
            ClassResourceUsed(name, "Rage", f"Entered rage (1 minute, +{bonus} damage)"),
            FeatureUsed("Rage", uses - 1),
        ],
    )


def resolve_end_rage(intent: EndRage, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    if not character.class_resources.rage_active:
        return Resolution(f"{character.name} is not currently raging.")

    text = _RAGE_END_REASONS.get(intent.reason, "Rage ended.")
    return Resolution(
        f"{character.name}'s rage ends. {text}",
        [
            RageEnded(character.id, intent.reason),
            ClassResourceUsed(character.name, "Rage", text),
        ],
    )


# =============================================================================
# MONK
# =============================================================================


def resolve_use_ki(intent: UseKi, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    available = character.class_resources.ki_points
    if available < intent.points:
        return Resolution(
            f"{character.name} doesn't have enough ki points! "
            f"Has {available} but needs {intent.points}."
        )

    key = intent.ability.strip().lower().replace(" ", "_")
    description = _KI_ABILITIES.get(key, intent.ability)
    return Resolution(
        f"{character.name} spends {intent.points} ki {plural(intent.points, 'point')}. {description}",
        [
            ClassResourceUsed(
                character.name, "Ki Points", f"Spent {intent.points} ki for {intent.ability}",
                amount=intent.points,
            )
        ],
    )


# =============================================================================
# PALADIN
# =============================================================================


def resolve_use_lay_on_hands(intent: UseLayOnHands, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    cost = intent.hp_amount
    if intent.cure_disease:
        cost += LAY_ON_HANDS_CURE_COST
    if intent.neutralize_poison:
        cost += LAY_ON_HANDS_CURE_COST

    pool = character.class_resources.lay_on_hands_pool
    if pool < cost:
        return Resolution(
            f"{character.name} doesn't have enough in their Lay on Hands pool! "
            f"Has {pool} HP but needs {cost}."
        )

    parts = []
    if intent.hp_amount > 0:
        parts.append(f"restores {intent.hp_amount} HP")
    if intent.cure_disease:
        parts.append("cures one disease")
    if intent.neutralize_poison:
        parts.append("neutralizes one poison")

    resolution = Resolution(
        f"{character.name} uses Lay on Hands on {intent.target_name}: {', '.join(parts)}. "
        f"({pool - cost} HP remaining in pool)",
        [
            ClassResourceUsed(
                character.name, "Lay on Hands", f"Used {cost} points on {intent.target_name}",
                amount=cost,
            )
        ],
    )
    if intent.hp_amount > 0 and is_player(world, intent.target_name):
        hp = character.hit_points
        new_current = min(hp.maximum, hp.current + intent.hp_amount)
        resolution.with_effect(
            HpChanged(character.id, new_current - hp.current, new_current, hp.maximum)
        )
    return resolution


def resolve_use_divine_smite(intent: UseDivineSmite, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    level = intent.spell_slot_level
    casting = character.spellcasting
    available = 0
    if casting is not None and 1 <= level <= 9:
        available = casting.spell_slots.get(level).available()
    if available == 0:
        return Resolution(f"{character.name} has no level {level} spell slots remaining!")

    base = 2 + min(level - 1, 3)
    dice_count = min(base + 1, 6) if intent.target_is_undead_or_fiend else min(base, 5)
    roll = roll_with_fallback(f"{dice_count}d8", "2d8", "Divine Smite damage")
    extra = " (extra damage vs undead/fiend)" if intent.target_is_undead_or_fiend else ""

    return Resolution(
        f"{character.name} channels divine power into their strike! Divine Smite deals "
        f"{dice_count}d8 = {roll.total} radiant damage{extra}. (Level {level} slot expended)",
        [
            DiceRolled(roll, "Divine Smite damage"),
            ClassResourceUsed(
                character.name, "Divine Smite",
                f"Level {level} slot for {roll.total} radiant damage",
            ),
            SpellSlotUsed(level, available - 1),
        ],
    )


# =============================================================================
# BARD
# =============================================================================


def resolve_use_bardic_inspiration(intent: UseBardicInspiration, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    uses = _feature_uses(world, "Bardic Inspiration")
    if uses <= 0:
        return Resolution(
            f"{character.name} has no Bardic Inspiration uses remaining! "
            "(Recovers on long rest, or short rest at level 5+)"
        )

    target = intent.target_name
    return Resolution(
        f"{character.name} inspires {target} with a rousing performance! {target} gains a "
        f"{intent.die_size} Bardic Inspiration die they can add to one ability check, attack "
        "roll, or saving throw within the next 10 minutes.",
        [
            ClassResourceUsed(
                character.name, "Bardic Inspiration", f"Inspired {target} ({intent.die_size})"
            ),
            FeatureUsed("Bardic Inspiration", uses - 1),
        ],
    )


# =============================================================================
# FIGHTER
# =============================================================================


def resolve_use_action_surge(intent: UseActionSurge, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    if character.class_resources.action_surge_used:
        return Resolution(
            f"{character.name} has already used Action Surge! (Recovers on short/long rest)"
        )

    return Resolution(
        f"{character.name} surges with renewed vigor! Takes an additional action this turn: "
        f"{intent.action_taken}",
        [
            ClassResourceUsed(character.name, "Action Surge", f"Extra action: {intent.action_taken}"),
            FeatureUsed("Action Surge", max(0, _feature_uses(world, "Action Surge") - 1)),
        ],
    )


def resolve_use_second_wind(intent: UseSecondWind, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    if character.class_resources.second_wind_used:
        return Resolution(
            f"{character.name} has already used Second Wind! (Recovers on short/long rest)"
        )

    fighter_level = max(1, character.class_level(CharacterClass.FIGHTER))
    roll = roll_with_fallback(f"1d10+{fighter_level}", "1d10+1", "Second Wind healing")
    hp = character.hit_points
    new_current = min(hp.maximum, hp.current + roll.total)
    healed = new_current - hp.current

    return Resolution(
        f"{character.name} catches their breath with Second Wind! Regains 1d10+{fighter_level} = "
        f"{roll.total} HP. (Now at {new_current}/{hp.maximum})",
        [
            DiceRolled(roll, "Second Wind healing"),
            HpChanged(character.id, healed, new_current, hp.maximum),
            ClassResourceUsed(character.name, "Second Wind", f"Healed {roll.total} HP"),
            FeatureUsed("Second Wind", max(0, _feature_uses(world, "Second Wind") - 1)),
        ],
    )
