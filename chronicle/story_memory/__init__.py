"""
Story memory: narrative consistency across context windows and sessions.

The store indexes entities by name and keeps facts, relationships,
consequences, knowledge (who knows what) and scheduled events. Nothing is
deleted; records change status instead.
"""

from chronicle.story_memory.consequence import (
    Consequence,
    ConsequenceSeverity,
    ConsequenceStatus,
)
from chronicle.story_memory.entity import Entity, EntityIndex, EntityType, StoryMoment
from chronicle.story_memory.fact import FactCategory, FactSource, StoryFact
from chronicle.story_memory.knowledge import (
    KnowledgeEntry,
    KnowledgeSource,
    SourceKind,
    VerificationStatus,
)
from chronicle.story_memory.persistence import (
    StoryMemoryLoadError,
    load_story_memory,
    save_story_memory,
)
from chronicle.story_memory.relationship import Relationship, RelationshipType
from chronicle.story_memory.scheduled_event import (
    AfterDuration,
    AtTime,
    EventStatus,
    EventTrigger,
    EventVisibility,
    ScheduledEvent,
    TimeOfDayTrigger,
    build_trigger,
    describe_trigger,
)
from chronicle.story_memory.store import StoryMemory

__all__ = [
    "AfterDuration",
    "AtTime",
    "Consequence",
    "ConsequenceSeverity",
    "ConsequenceStatus",
    "Entity",
    "EntityIndex",
    "EntityType",
    "EventStatus",
    "EventTrigger",
    "EventVisibility",
    "FactCategory",
    "FactSource",
    "KnowledgeEntry",
    "KnowledgeSource",
    "ScheduledEvent",
    "SourceKind",
    "StoryFact",
    "StoryMemory",
    "StoryMemoryLoadError",
    "StoryMoment",
    "Relationship",
    "RelationshipType",
    "TimeOfDayTrigger",
    "VerificationStatus",
    "build_trigger",
    "describe_trigger",
    "load_story_memory",
    "save_story_memory",
]
