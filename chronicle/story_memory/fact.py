"""
Story facts: the append-only record of what the narrative has established.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
import uuid


class FactCategory(str, Enum):
    EVENT = "event"
    DIALOGUE = "dialogue"
    DISCOVERY = "discovery"
    RELATIONSHIP = "relationship"
    CHARACTER = "character"
    LOCATION = "location"
    ITEM = "item"
    LORE = "lore"
    OTHER = "other"

    @classmethod
    def parse(cls, text: Optional[str]) -> "FactCategory":
        if not text:
            return cls.OTHER
        try:
            return cls(text.strip().lower())
        except ValueError:
            return cls.OTHER


class FactSource(str, Enum):
    NARRATOR = "narrator"
    PLAYER = "player"
    INFERRED = "inferred"


@dataclass
class StoryFact:
    content: str
    category: FactCategory = FactCategory.OTHER
    subject: Optional[str] = None  # entity id
    related_entities: list[str] = field(default_factory=list)  # entity ids
    importance: float = 0.5
    turn: int = 0
    source: FactSource = FactSource.NARRATOR
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def involves(self, entity_id: str) -> bool:
        return self.subject == entity_id or entity_id in self.related_entities

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "category": self.category.value,
            "subject": self.subject,
            "related_entities": list(self.related_entities),
            "importance": self.importance,
            "turn": self.turn,
            "source": self.source.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoryFact":
        return cls(
            content=data["content"],
            category=FactCategory.parse(data.get("category")),
            subject=data.get("subject"),
            related_entities=list(data.get("related_entities", [])),
            importance=data.get("importance", 0.5),
            turn=data.get("turn", 0),
            source=FactSource(data.get("source", "narrator")),
            id=data["id"],
        )
