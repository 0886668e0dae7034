"""
Quest resolvers.

Quest intents are narrated without checking that the quest exists; the
effect applier looks the quest up by name and logs a warning when it is
missing.
"""

from chronicle.rules.types import (
    AddQuestObjective,
    CompleteObjective,
    CompleteQuest,
    CreateQuest,
    FailQuest,
    QuestCompleted,
    QuestCreated,
    QuestFailed,
    QuestObjectiveAdded,
    QuestObjectiveCompleted,
    QuestUpdated,
    Resolution,
    UpdateQuest,
)
from chronicle.world.game_world import GameWorld


def resolve_create_quest(intent: CreateQuest, world: GameWorld) -> Resolution:
    giver = f" (from {intent.giver})" if intent.giver else ""
    return Resolution(
        f'Quest Started: "{intent.name}"{giver}',
        [
            QuestCreated(
                name=intent.name,
                description=intent.description,
                giver=intent.giver,
                objectives=intent.objectives,
                rewards=intent.rewards,
            )
        ],
    )


def resolve_add_quest_objective(intent: AddQuestObjective, world: GameWorld) -> Resolution:
    optional = " (optional)" if intent.optional else ""
    return Resolution(
        f'New objective for "{intent.quest_name}": {intent.objective}{optional}',
        [QuestObjectiveAdded(intent.quest_name, intent.objective, intent.optional)],
    )


def resolve_complete_objective(intent: CompleteObjective, world: GameWorld) -> Resolution:
    return Resolution(
        f'Objective completed for "{intent.quest_name}": {intent.objective_description}',
        [QuestObjectiveCompleted(intent.quest_name, intent.objective_description)],
    )


def resolve_complete_quest(intent: CompleteQuest, world: GameWorld) -> Resolution:
    note = f" - {intent.completion_note}" if intent.completion_note else ""
    return Resolution(
        f'Quest Completed: "{intent.quest_name}"{note}',
        [QuestCompleted(intent.quest_name, intent.completion_note)],
    )


def resolve_fail_quest(intent: FailQuest, world: GameWorld) -> Resolution:
    return Resolution(
        f'Quest Failed: "{intent.quest_name}" - {intent.failure_reason}',
        [QuestFailed(intent.quest_name, intent.failure_reason)],
    )


def resolve_update_quest(intent: UpdateQuest, world: GameWorld) -> Resolution:
    changes = []
    if intent.new_description:
        changes.append("description changed")
    if intent.add_rewards:
        changes.append(f"rewards added: {', '.join(intent.add_rewards)}")
    summary = "; ".join(changes) if changes else "no changes"
    return Resolution(
        f'Quest "{intent.quest_name}" updated; {summary}',
        [QuestUpdated(intent.quest_name, intent.new_description, intent.add_rewards)],
    )
