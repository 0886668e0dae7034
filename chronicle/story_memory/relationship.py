"""
Directed relationships between story entities.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class RelationshipType(str, Enum):
    ALLY = "ally"
    ENEMY = "enemy"
    FRIEND = "friend"
    RIVAL = "rival"
    FAMILY = "family"
    ROMANTIC = "romantic"
    EMPLOYER = "employer"
    EMPLOYEE = "employee"
    MEMBER_OF = "member_of"
    LEADER_OF = "leader_of"
    LOCATED_IN = "located_in"
    OWNS = "owns"
    KNOWS = "knows"
    OTHER = "other"

    @classmethod
    def parse(cls, text: Optional[str]) -> "RelationshipType":
        if not text:
            return cls.OTHER
        key = text.strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            return cls.OTHER


@dataclass
class Relationship:
    from_entity: str  # entity id
    to_entity: str  # entity id
    relationship_type: RelationshipType = RelationshipType.OTHER
    description: str = ""
    strength: float = 0.5  # 0.0 (weak) to 1.0 (strong)
    established_turn: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "from_entity": self.from_entity,
            "to_entity": self.to_entity,
            "relationship_type": self.relationship_type.value,
            "description": self.description,
            "strength": self.strength,
            "established_turn": self.established_turn,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Relationship":
        return cls(
            from_entity=data["from_entity"],
            to_entity=data["to_entity"],
            relationship_type=RelationshipType.parse(data.get("relationship_type")),
            description=data.get("description", ""),
            strength=data.get("strength", 0.5),
            established_turn=data.get("established_turn", 0),
        )
