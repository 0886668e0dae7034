"""
Consequences: future ramifications of player actions.

A consequence pairs a trigger ("if the player returns to the mill") with an
outcome ("the miller's sons are waiting"). Status moves one way only:

    PENDING -> TRIGGERED | EXPIRED | CANCELLED
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
import uuid


class ConsequenceSeverity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, text: Optional[str]) -> "ConsequenceSeverity":
        """Unknown or missing severities normalize to MODERATE."""
        if not text:
            return cls.MODERATE
        try:
            return cls(text.strip().lower())
        except ValueError:
            return cls.MODERATE


class ConsequenceStatus(str, Enum):
    PENDING = "pending"
    TRIGGERED = "triggered"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


@dataclass
class Consequence:
    trigger_description: str
    consequence_description: str
    severity: ConsequenceSeverity = ConsequenceSeverity.MODERATE
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    related_entities: list[str] = field(default_factory=list)  # entity ids
    importance: float = 0.5
    created_turn: int = 0
    expires_in_turns: Optional[int] = None
    status: ConsequenceStatus = ConsequenceStatus.PENDING
    resolved_turn: Optional[int] = None

    def is_pending(self) -> bool:
        return self.status == ConsequenceStatus.PENDING

    def _resolve(self, status: ConsequenceStatus, turn: Optional[int]) -> bool:
        if not self.is_pending():
            return False
        self.status = status
        self.resolved_turn = turn
        return True

    def trigger(self, turn: Optional[int] = None) -> bool:
        """Mark as triggered; returns False if it was no longer pending."""
        return self._resolve(ConsequenceStatus.TRIGGERED, turn)

    def expire(self, turn: Optional[int] = None) -> bool:
        return self._resolve(ConsequenceStatus.EXPIRED, turn)

    def cancel(self, turn: Optional[int] = None) -> bool:
        return self._resolve(ConsequenceStatus.CANCELLED, turn)

    def has_expired_at(self, turn: int) -> bool:
        if self.expires_in_turns is None:
            return False
        return turn - self.created_turn >= self.expires_in_turns

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "trigger_description": self.trigger_description,
            "consequence_description": self.consequence_description,
            "severity": self.severity.value,
            "related_entities": list(self.related_entities),
            "importance": self.importance,
            "created_turn": self.created_turn,
            "expires_in_turns": self.expires_in_turns,
            "status": self.status.value,
            "resolved_turn": self.resolved_turn,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Consequence":
        return cls(
            trigger_description=data["trigger_description"],
            consequence_description=data["consequence_description"],
            severity=ConsequenceSeverity.parse(data.get("severity")),
            id=data["id"],
            related_entities=list(data.get("related_entities", [])),
            importance=data.get("importance", 0.5),
            created_turn=data.get("created_turn", 0),
            expires_in_turns=data.get("expires_in_turns"),
            status=ConsequenceStatus(data.get("status", "pending")),
            resolved_turn=data.get("resolved_turn"),
        )
