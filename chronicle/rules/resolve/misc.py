"""
Experience, features, ability scores and the story-memory intents
(facts, consequences, knowledge and scheduled events).
"""

import uuid

from chronicle.rules.helpers import character_for, level_for_experience
from chronicle.rules.types import (
    AbilityScoreModified,
    CancelEvent,
    ConsequenceRegistered,
    EventCancelled,
    EventScheduled,
    ExperienceGained,
    FactRemembered,
    FeatureUsed,
    GainExperience,
    KnowledgeShared,
    LevelUp,
    ModifyAbilityScore,
    RegisterConsequence,
    RememberFact,
    Resolution,
    ScheduleEvent,
    ShareKnowledge,
    UseFeature,
)
from chronicle.story_memory.consequence import ConsequenceSeverity
from chronicle.story_memory.scheduled_event import (
    EventVisibility,
    build_trigger,
    describe_trigger,
)
from chronicle.world.game_world import GameWorld


def resolve_gain_experience(intent: GainExperience, world: GameWorld) -> Resolution:
    character = world.player_character
    new_total = character.experience + intent.amount
    resolution = Resolution(
        f"Gained {intent.amount} experience points (Total: {new_total})",
        [ExperienceGained(intent.amount, new_total)],
    )
    new_level = level_for_experience(new_total)
    if new_level > character.level:
        resolution.with_effect(LevelUp(new_level))
    return resolution


def resolve_use_feature(intent: UseFeature, world: GameWorld) -> Resolution:
    character = character_for(world, intent.character_id)
    feature = next((f for f in character.features if f.name == intent.feature_name), None)
    if feature is None:
        return Resolution(f"{character.name} does not have the feature {intent.feature_name}")
    if feature.uses is None:
        return Resolution(f"{character.name} uses {feature.name}")
    if feature.uses.current <= 0:
        return Resolution(f"{character.name} has no uses of {feature.name} remaining")

    remaining = feature.uses.current - 1
    return Resolution(
        f"{character.name} uses {feature.name} ({remaining} uses remaining)",
        [FeatureUsed(feature.name, remaining)],
    )


def resolve_modify_ability_score(intent: ModifyAbilityScore, world: GameWorld) -> Resolution:
    modifier = f"+{intent.modifier}" if intent.modifier >= 0 else str(intent.modifier)
    duration = f" for {intent.duration}" if intent.duration else " permanently"
    return Resolution(
        f"{intent.ability.display_name} modified by {modifier}{duration} from {intent.source}",
        [AbilityScoreModified(intent.ability, intent.modifier, intent.source)],
    )


# =============================================================================
# STORY MEMORY
# =============================================================================


def resolve_remember_fact(intent: RememberFact, world: GameWorld) -> Resolution:
    related = f" (related: {', '.join(intent.related_entities)})" if intent.related_entities else ""
    return Resolution(
        f"Noted: {intent.subject_name} ({intent.subject_type}) - {intent.fact}{related}",
        [
            FactRemembered(
                subject_name=intent.subject_name,
                subject_type=intent.subject_type,
                fact=intent.fact,
                category=intent.category,
                related_entities=intent.related_entities,
                importance=intent.importance,
            )
        ],
    )


def resolve_register_consequence(intent: RegisterConsequence, world: GameWorld) -> Resolution:
    consequence_id = str(uuid.uuid4())
    severity = ConsequenceSeverity.parse(intent.severity).value
    expiry = (
        f" (expires in {intent.expires_in_turns} turns)"
        if intent.expires_in_turns is not None
        else ""
    )
    return Resolution(
        f"Consequence registered: If {intent.trigger_description}, then "
        f"{intent.consequence_description} ({severity} severity, "
        f"importance {intent.importance:.1f}){expiry}",
        [
            ConsequenceRegistered(
                consequence_id=consequence_id,
                trigger_description=intent.trigger_description,
                consequence_description=intent.consequence_description,
                severity=severity,
                related_entities=intent.related_entities,
                importance=intent.importance,
                expires_in_turns=intent.expires_in_turns,
            )
        ],
    )


def resolve_share_knowledge(intent: ShareKnowledge, world: GameWorld) -> Resolution:
    context = f" [{intent.context}]" if intent.context else ""
    return Resolution(
        f'{intent.knowing_entity} now knows: "{intent.content}" '
        f"(from: {intent.source}, {intent.verification}){context}",
        [
            KnowledgeShared(
                knowing_entity=intent.knowing_entity,
                content=intent.content,
                source=intent.source,
                verification=intent.verification,
                context=intent.context,
            )
        ],
    )


def resolve_schedule_event(intent: ScheduleEvent, world: GameWorld) -> Resolution:
    trigger = build_trigger(
        world.game_time.total_minutes(),
        minutes=intent.minutes,
        hours=intent.hours,
        day=intent.day,
        month=intent.month,
        year=intent.year,
        hour=intent.hour,
        daily_hour=intent.daily_hour,
        daily_minute=intent.daily_minute,
    )
    trigger_description = describe_trigger(trigger, intent.repeating)
    visibility = EventVisibility.parse(intent.visibility) or EventVisibility.PUBLIC

    location = f" at {intent.location}" if intent.location else ""
    if visibility == EventVisibility.PRIVATE:
        visibility_note = " (private)"
    elif visibility == EventVisibility.HINTED:
        visibility_note = " (hinted)"
    else:
        visibility_note = ""

    return Resolution(
        f'Scheduled: "{intent.description}" {trigger_description}{location}{visibility_note}',
        [
            EventScheduled(
                description=intent.description,
                trigger=trigger,
                trigger_description=trigger_description,
                location=intent.location,
                visibility=visibility,
                involved_entities=intent.involved_entities,
                repeating=intent.repeating,
            )
        ],
    )


def resolve_cancel_event(intent: CancelEvent, world: GameWorld) -> Resolution:
    return Resolution(
        f'Event cancelled: "{intent.event_description}" - {intent.reason}',
        [EventCancelled(intent.event_description, intent.reason)],
    )
