"""
StoryMemory: the long-lived narrative consistency store.

Holds every entity, fact, relationship, consequence, knowledge entry and
scheduled event the story has established. The narrator's context window is
rebuilt from this store each turn, so nothing is ever hard-deleted: things
are superseded, expired, cancelled or triggered instead.

Entities are created on first mention. Everything else refers to entities by
id; callers pass display names and the store resolves them through the
EntityIndex.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Union
import logging

from chronicle.story_memory.consequence import Consequence, ConsequenceSeverity
from chronicle.story_memory.entity import Entity, EntityIndex, EntityType
from chronicle.story_memory.fact import FactCategory, FactSource, StoryFact
from chronicle.story_memory.knowledge import (
    KnowledgeEntry,
    KnowledgeSource,
    VerificationStatus,
)
from chronicle.story_memory.relationship import Relationship, RelationshipType
from chronicle.story_memory.scheduled_event import (
    EventTrigger,
    EventVisibility,
    ScheduledEvent,
    TimeOfDayTrigger,
    describe_duration,
)
from chronicle.world.game_time import GameTime

logger = logging.getLogger(__name__)

SCHEDULE_SUMMARY_LIMIT = 10


@dataclass
class StoryMemory:
    entities: dict[str, Entity] = field(default_factory=dict)
    entity_index: EntityIndex = field(default_factory=EntityIndex)
    facts: list[StoryFact] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)
    consequences: dict[str, Consequence] = field(default_factory=dict)
    knowledge: list[KnowledgeEntry] = field(default_factory=list)
    scheduled_events: list[ScheduledEvent] = field(default_factory=list)
    next_event_id: int = 1
    current_turn: int = 0

    # =========================================================================
    # ENTITIES
    # =========================================================================

    def get_or_create_entity(
        self,
        name: str,
        entity_type: EntityType = EntityType.OTHER,
        description: str = "",
    ) -> Entity:
        """
        Return the entity registered under name, creating it on first mention.

        An existing entity keeps its type; a missing description is filled in.
        """
        entity_id = self.entity_index.get(name)
        if entity_id is not None:
            entity = self.entities[entity_id]
            entity.touch(self.current_turn)
            if entity.entity_type == EntityType.OTHER and entity_type != EntityType.OTHER:
                entity.entity_type = entity_type
            if description and not entity.description:
                entity.description = description
            return entity

        entity = Entity(
            name=name.strip(),
            entity_type=entity_type,
            description=description,
            first_mentioned_turn=self.current_turn,
            last_mentioned_turn=self.current_turn,
        )
        self.entities[entity.id] = entity
        self.entity_index.register(entity.name, entity.id)
        return entity

    def find_entity_id(self, name: str) -> Optional[str]:
        """Case-insensitive exact match first, then a substring match."""
        return self.entity_index.get(name) or self.entity_index.search(name)

    def get_entity(self, entity_id: str) -> Optional[Entity]:
        return self.entities.get(entity_id)

    def entity_name(self, entity_id: str) -> str:
        entity = self.entities.get(entity_id)
        return entity.name if entity else entity_id

    def _entity_ids(self, names: Iterable[str]) -> list[str]:
        ids = []
        for name in names:
            if not name or not name.strip():
                continue
            entity_id = self.get_or_create_entity(name).id
            if entity_id not in ids:
                ids.append(entity_id)
        return ids

    # =========================================================================
    # FACTS AND RELATIONSHIPS
    # =========================================================================

    def remember_fact(
        self,
        content: str,
        category: Union[FactCategory, str] = FactCategory.OTHER,
        subject_name: Optional[str] = None,
        subject_type: Optional[str] = None,
        related_entities: Iterable[str] = (),
        importance: float = 0.5,
        source: FactSource = FactSource.NARRATOR,
    ) -> StoryFact:
        if not isinstance(category, FactCategory):
            category = FactCategory.parse(category)

        subject_id = None
        if subject_name:
            subject = self.get_or_create_entity(subject_name, EntityType.parse(subject_type))
            subject.add_moment(self.current_turn, content)
            subject_id = subject.id

        fact = StoryFact(
            content=content,
            category=category,
            subject=subject_id,
            related_entities=self._entity_ids(related_entities),
            importance=max(0.0, min(1.0, importance)),
            turn=self.current_turn,
            source=source,
        )
        self.facts.append(fact)
        return fact

    def recent_facts(self, window: int = 10) -> list[StoryFact]:
        """The last window facts, most recent first."""
        if window <= 0:
            return []
        return list(reversed(self.facts[-window:]))

    def facts_by_category(self, category: FactCategory) -> list[StoryFact]:
        return [f for f in self.facts if f.category == category]

    def facts_about(self, entity_id: str) -> list[StoryFact]:
        return [f for f in self.facts if f.involves(entity_id)]

    def add_relationship(
        self,
        from_name: str,
        to_name: str,
        relationship_type: Union[RelationshipType, str] = RelationshipType.OTHER,
        description: str = "",
        strength: float = 0.5,
    ) -> Relationship:
        if not isinstance(relationship_type, RelationshipType):
            relationship_type = RelationshipType.parse(relationship_type)
        relationship = Relationship(
            from_entity=self.get_or_create_entity(from_name).id,
            to_entity=self.get_or_create_entity(to_name).id,
            relationship_type=relationship_type,
            description=description,
            strength=max(0.0, min(1.0, strength)),
            established_turn=self.current_turn,
        )
        self.relationships.append(relationship)
        return relationship

    def relationships_for(self, entity_id: str) -> list[Relationship]:
        return [
            r for r in self.relationships
            if r.from_entity == entity_id or r.to_entity == entity_id
        ]

    # =========================================================================
    # CONSEQUENCES
    # =========================================================================

    def register_consequence(
        self,
        trigger_description: str,
        consequence_description: str,
        severity: Union[ConsequenceSeverity, str, None] = None,
        related_entities: Iterable[str] = (),
        importance: float = 0.5,
        expires_in_turns: Optional[int] = None,
        consequence_id: Optional[str] = None,
    ) -> Consequence:
        """
        Register a pending consequence.

        consequence_id lets the caller supply an id it has already reported
        (the rules engine mints one while resolving register_consequence).
        """
        if not isinstance(severity, ConsequenceSeverity):
            severity = ConsequenceSeverity.parse(severity)
        consequence = Consequence(
            trigger_description=trigger_description,
            consequence_description=consequence_description,
            severity=severity,
            related_entities=self._entity_ids(related_entities),
            importance=max(0.0, min(1.0, importance)),
            created_turn=self.current_turn,
            expires_in_turns=expires_in_turns,
        )
        if consequence_id:
            consequence.id = consequence_id
        self.consequences[consequence.id] = consequence
        return consequence

    def get_consequence(self, consequence_id: str) -> Optional[Consequence]:
        return self.consequences.get(consequence_id)

    def pending_consequences(self) -> list[Consequence]:
        return [c for c in self.consequences.values() if c.is_pending()]

    def pending_consequences_by_importance(self) -> list[Consequence]:
        # sorted() is stable, so equal importance keeps registration order
        return sorted(self.pending_consequences(), key=lambda c: c.importance, reverse=True)

    def trigger_consequence(self, consequence_id: str) -> bool:
        consequence = self.consequences.get(consequence_id)
        if consequence is None or not consequence.trigger(self.current_turn):
            return False
        logger.info(f"Consequence triggered: {consequence.consequence_description}")
        return True

    def cancel_consequence(self, consequence_id: str) -> bool:
        consequence = self.consequences.get(consequence_id)
        return consequence is not None and consequence.cancel(self.current_turn)

    def tick_turn(self) -> list[Consequence]:
        """Advance the turn counter and expire consequences whose time is up."""
        self.current_turn += 1
        expired = []
        for consequence in self.pending_consequences():
            if consequence.has_expired_at(self.current_turn):
                consequence.expire(self.current_turn)
                expired.append(consequence)
        if expired:
            logger.debug(f"{len(expired)} consequence(s) expired at turn {self.current_turn}")
        return expired

    # =========================================================================
    # KNOWLEDGE
    # =========================================================================

    def share_knowledge(
        self,
        knowing_entity_name: str,
        content: str,
        source: Optional[str] = None,
        verification: Optional[str] = None,
        context: Optional[str] = None,
        fact_id: Optional[str] = None,
    ) -> KnowledgeEntry:
        """
        Record that an entity knows something.

        Earlier entries about the same topic are left current; superseding is
        an explicit decision for the caller.
        """
        knower = self.get_or_create_entity(knowing_entity_name, EntityType.NPC)
        source_id = self.entity_index.get(source) if source else None
        entry = KnowledgeEntry(
            knowing_entity=knower.id,
            content=content,
            verification_status=VerificationStatus.parse(verification),
            learned_at_turn=self.current_turn,
            fact_id=fact_id,
            learned_from=KnowledgeSource.from_str(source, source_id),
            context=context,
        )
        self.knowledge.append(entry)
        return entry

    def knowledge_of(self, entity_id: str, include_superseded: bool = False) -> list[KnowledgeEntry]:
        return [
            k for k in self.knowledge
            if k.knowing_entity == entity_id and (include_superseded or k.is_current)
        ]

    # =========================================================================
    # SCHEDULED EVENTS
    # =========================================================================

    def schedule_event(
        self,
        description: str,
        trigger: Optional[EventTrigger],
        game_time: GameTime,
        location: Optional[str] = None,
        involved_entities: Iterable[str] = (),
        visibility: EventVisibility = EventVisibility.PUBLIC,
        repeating: bool = False,
        repeat_interval_minutes: Optional[int] = None,
    ) -> ScheduledEvent:
        event = ScheduledEvent(
            id=self.next_event_id,
            description=description,
            trigger=trigger,
            scheduled_at_turn=self.current_turn,
            scheduled_at_minute=game_time.total_minutes(),
            location=location,
            involved_entities=list(involved_entities),
            visibility=visibility,
            repeating=repeating,
            repeat_interval_minutes=repeat_interval_minutes,
        )
        self.next_event_id += 1
        self.scheduled_events.append(event)
        logger.info(f"Scheduled event #{event.id}: {description} ({event.describe()})")
        return event

    def get_event(self, event_id: int) -> Optional[ScheduledEvent]:
        for event in self.scheduled_events:
            if event.id == event_id:
                return event
        return None

    def pending_events(self) -> list[ScheduledEvent]:
        return [e for e in self.scheduled_events if e.is_pending()]

    def visible_pending_events(self) -> list[ScheduledEvent]:
        """Pending events the player could know about (public and hinted)."""
        return [e for e in self.pending_events() if e.visibility != EventVisibility.PRIVATE]

    def cancel_event(self, description: str) -> Optional[ScheduledEvent]:
        """Cancel the first pending event whose description contains the text."""
        key = description.lower()
        for event in self.pending_events():
            if key in event.description.lower():
                event.cancel()
                logger.info(f"Cancelled event #{event.id}: {event.description}")
                return event
        return None

    def due_events(self, game_time: GameTime) -> list[ScheduledEvent]:
        return [e for e in self.pending_events() if e.is_due(game_time)]

    def fire_event(self, event_id: int, game_time: GameTime) -> Optional[ScheduledEvent]:
        """
        Trigger one event. Repeating events are re-armed for their first
        occurrence after the current time, so each check fires them at most
        once however much time has passed.
        """
        event = self.get_event(event_id)
        if event is None or not event.is_pending():
            return None
        event.mark_triggered()
        if event.repeating:
            now = game_time.total_minutes()
            if isinstance(event.trigger, TimeOfDayTrigger):
                next_minute = event.trigger.trigger_minute(now + 1)
            else:
                due_at = event.next_trigger_minute()
                interval = event.interval()
                missed = (now - due_at) // interval + 1
                next_minute = due_at + missed * interval
            event.reschedule(next_minute)
        logger.info(f"Scheduled event #{event.id} triggered: {event.description}")
        return event

    def check_due_events(self, game_time: GameTime) -> list[ScheduledEvent]:
        """Trigger every due event; returns the events that fired."""
        fired = []
        for event in self.due_events(game_time):
            if self.fire_event(event.id, game_time) is not None:
                fired.append(event)
        return fired

    # =========================================================================
    # CONTEXT TEXT
    # =========================================================================

    def build_schedule_summary(
        self,
        game_time: GameTime,
        events: Optional[list[ScheduledEvent]] = None,
        include_private: bool = False,
    ) -> str:
        """One line per upcoming event, soonest first. Empty when there are none."""
        if events is None:
            events = self.pending_events() if include_private else self.visible_pending_events()
        if not events:
            return ""

        now = game_time.total_minutes()

        def sort_key(event: ScheduledEvent) -> tuple[int, int]:
            due_at = event.next_trigger_minute()
            return (1, 0) if due_at is None else (0, due_at)

        lines = []
        for event in sorted(events, key=sort_key)[:SCHEDULE_SUMMARY_LIMIT]:
            due_at = event.next_trigger_minute()
            if due_at is None:
                when = "at an unspecified time"
            elif isinstance(event.trigger, TimeOfDayTrigger):
                when = event.describe()
            elif due_at <= now:
                when = "due now"
            else:
                when = describe_duration(due_at - now)

            line = f"- {event.description} ({when})"
            if event.location:
                line += f" at {event.location}"
            if include_private and event.visibility == EventVisibility.PRIVATE:
                line += " [PRIVATE]"
            elif event.visibility == EventVisibility.HINTED:
                line += " [hinted]"
            lines.append(line)
        return "\n".join(lines) + "\n"

    def build_consequences_for_relevance(self) -> str:
        blocks = []
        for consequence in self.pending_consequences_by_importance():
            blocks.append(
                f"- ID: {consequence.id}\n"
                f"  Trigger: {consequence.trigger_description}\n"
                f"  Consequence: {consequence.consequence_description}\n"
                f"  Severity: {consequence.severity.value}, "
                f"Importance: {consequence.importance:.1f}"
            )
        return "\n".join(blocks)

    def build_context_summary(self, fact_window: int = 10) -> str:
        """Text block for the narrator's context; sections with nothing to say are left out."""
        sections = []

        facts = self.recent_facts(fact_window)
        if facts:
            lines = ["Recent facts:"]
            for fact in facts:
                lines.append(f"- [{fact.category.value}] {fact.content}")
            sections.append("\n".join(lines))

        consequences = self.pending_consequences_by_importance()
        if consequences:
            lines = ["Pending consequences:"]
            for c in consequences:
                lines.append(
                    f"- If {c.trigger_description}, then {c.consequence_description} "
                    f"({c.severity.value})"
                )
            sections.append("\n".join(lines))

        if self.entities:
            names = ", ".join(
                f"{e.name} ({e.entity_type.value})" for e in self.entities.values()
            )
            sections.append(f"Known entities: {names}")

        return "\n\n".join(sections)

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        return {
            "entities": [e.to_dict() for e in self.entities.values()],
            "facts": [f.to_dict() for f in self.facts],
            "relationships": [r.to_dict() for r in self.relationships],
            "consequences": [c.to_dict() for c in self.consequences.values()],
            "knowledge": [k.to_dict() for k in self.knowledge],
            "scheduled_events": [e.to_dict() for e in self.scheduled_events],
            "next_event_id": self.next_event_id,
            "current_turn": self.current_turn,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoryMemory":
        memory = cls(
            next_event_id=data.get("next_event_id", 1),
            current_turn=data.get("current_turn", 0),
        )
        for entity_data in data.get("entities", []):
            entity = Entity.from_dict(entity_data)
            memory.entities[entity.id] = entity
            memory.entity_index.register(entity.name, entity.id)
        memory.facts = [StoryFact.from_dict(f) for f in data.get("facts", [])]
        memory.relationships = [Relationship.from_dict(r) for r in data.get("relationships", [])]
        for consequence_data in data.get("consequences", []):
            consequence = Consequence.from_dict(consequence_data)
            memory.consequences[consequence.id] = consequence
        memory.knowledge = [KnowledgeEntry.from_dict(k) for k in data.get("knowledge", [])]
        memory.scheduled_events = [
            ScheduledEvent.from_dict(e) for e in data.get("scheduled_events", [])
        ]
        return memory
