"""
Story entities and the name index.

Entities are anything the narrative refers to by name: NPCs, places, items,
factions. The world model addresses things by display name while story
memory addresses them by id; EntityIndex is the bridge between the two.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
import uuid


class EntityType(str, Enum):
    NPC = "npc"
    LOCATION = "location"
    ITEM = "item"
    FACTION = "faction"
    CREATURE = "creature"
    EVENT = "event"
    PLAYER = "player"
    OTHER = "other"

    @classmethod
    def parse(cls, text: Optional[str]) -> "EntityType":
        if not text:
            return cls.OTHER
        key = text.strip().lower()
        aliases = {
            "person": cls.NPC,
            "character": cls.NPC,
            "place": cls.LOCATION,
            "object": cls.ITEM,
            "organization": cls.FACTION,
            "group": cls.FACTION,
            "monster": cls.CREATURE,
            "pc": cls.PLAYER,
        }
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            return cls.OTHER


@dataclass
class StoryMoment:
    """A notable thing that happened to or around an entity."""

    turn: int
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"turn": self.turn, "description": self.description}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoryMoment":
        return cls(turn=data["turn"], description=data["description"])


@dataclass
class Entity:
    name: str
    entity_type: EntityType = EntityType.OTHER
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    description: str = ""
    moments: list[StoryMoment] = field(default_factory=list)
    first_mentioned_turn: int = 0
    last_mentioned_turn: int = 0

    def add_moment(self, turn: int, description: str) -> None:
        self.moments.append(StoryMoment(turn, description))
        self.last_mentioned_turn = max(self.last_mentioned_turn, turn)

    def touch(self, turn: int) -> None:
        self.last_mentioned_turn = max(self.last_mentioned_turn, turn)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "entity_type": self.entity_type.value,
            "description": self.description,
            "moments": [m.to_dict() for m in self.moments],
            "first_mentioned_turn": self.first_mentioned_turn,
            "last_mentioned_turn": self.last_mentioned_turn,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Entity":
        return cls(
            name=data["name"],
            entity_type=EntityType.parse(data.get("entity_type")),
            id=data["id"],
            description=data.get("description", ""),
            moments=[StoryMoment.from_dict(m) for m in data.get("moments", [])],
            first_mentioned_turn=data.get("first_mentioned_turn", 0),
            last_mentioned_turn=data.get("last_mentioned_turn", 0),
        )


class EntityIndex:
    """Case-insensitive display name to entity id."""

    def __init__(self):
        self._by_name: dict[str, str] = {}

    def register(self, name: str, entity_id: str) -> None:
        self._by_name[name.strip().lower()] = entity_id

    def get(self, name: str) -> Optional[str]:
        return self._by_name.get(name.strip().lower())

    def search(self, fragment: str) -> Optional[str]:
        """First registered name containing fragment."""
        key = fragment.strip().lower()
        if not key:
            return None
        for name, entity_id in self._by_name.items():
            if key in name:
                return entity_id
        return None

    def __contains__(self, name: str) -> bool:
        return name.strip().lower() in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)
