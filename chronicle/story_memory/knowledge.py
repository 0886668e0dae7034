"""
Knowledge tracking: who knows what, and how they came to know it.

This models information asymmetry. An NPC may believe a rumour that is
false, or hold knowledge that has since become outdated. Entries are never
deleted; superseded knowledge is flagged with is_current = False so the
history of what someone believed remains available.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
import uuid


class VerificationStatus(str, Enum):
    TRUE = "true"
    FALSE = "false"
    PARTIALLY_TRUE = "partially_true"
    UNKNOWN = "unknown"
    OUTDATED = "outdated"

    @classmethod
    def parse(cls, text: Optional[str]) -> "VerificationStatus":
        key = (text or "").strip().lower()
        if key in ("true", "verified", "fact"):
            return cls.TRUE
        if key in ("false", "lie", "misinformation"):
            return cls.FALSE
        if key in ("partial", "partially_true", "partially true"):
            return cls.PARTIALLY_TRUE
        if key in ("outdated", "stale"):
            return cls.OUTDATED
        return cls.UNKNOWN

    @property
    def display_name(self) -> str:
        return {
            "true": "verified",
            "false": "false",
            "partially_true": "partially true",
            "unknown": "unverified",
            "outdated": "outdated",
        }[self.value]


class SourceKind(str, Enum):
    ENTITY = "entity"
    OBSERVATION = "observation"
    WRITTEN = "written"
    PLAYER = "player"
    BACKGROUND = "background"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class KnowledgeSource:
    """
    Where a piece of knowledge came from.

    detail holds the informing entity's id for ENTITY sources and the name of
    the document for WRITTEN sources.
    """

    kind: SourceKind = SourceKind.UNKNOWN
    detail: Optional[str] = None

    @classmethod
    def from_str(cls, text: Optional[str], entity_id: Optional[str] = None) -> "KnowledgeSource":
        key = (text or "").strip().lower()
        if key in ("observation", "observed", "witnessed"):
            return cls(SourceKind.OBSERVATION)
        if key in ("player", "the player", "pc"):
            return cls(SourceKind.PLAYER)
        if key in ("background", "always knew"):
            return cls(SourceKind.BACKGROUND)
        if key in ("unknown", ""):
            return cls(SourceKind.UNKNOWN)
        if entity_id is not None:
            return cls(SourceKind.ENTITY, entity_id)
        return cls(SourceKind.WRITTEN, text.strip())

    def description(self) -> str:
        if self.kind == SourceKind.ENTITY:
            return "from another entity"
        if self.kind == SourceKind.OBSERVATION:
            return "from direct observation"
        if self.kind == SourceKind.WRITTEN:
            return f"from written source: {self.detail}"
        if self.kind == SourceKind.PLAYER:
            return "from the player"
        if self.kind == SourceKind.BACKGROUND:
            return "background knowledge"
        return "unknown source"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "detail": self.detail}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KnowledgeSource":
        return cls(SourceKind(data.get("kind", "unknown")), data.get("detail"))


@dataclass
class KnowledgeEntry:
    knowing_entity: str  # entity id
    content: str
    verification_status: VerificationStatus = VerificationStatus.UNKNOWN
    learned_at_turn: int = 0
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    fact_id: Optional[str] = None
    learned_from: Optional[KnowledgeSource] = None
    is_current: bool = True
    context: Optional[str] = None

    def supersede(self) -> None:
        """Mark as no longer current. Calling it again changes nothing."""
        self.is_current = False

    def update_verification(self, status: VerificationStatus) -> None:
        self.verification_status = status

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "knowing_entity": self.knowing_entity,
            "content": self.content,
            "verification_status": self.verification_status.value,
            "learned_at_turn": self.learned_at_turn,
            "fact_id": self.fact_id,
            "learned_from": self.learned_from.to_dict() if self.learned_from else None,
            "is_current": self.is_current,
            "context": self.context,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KnowledgeEntry":
        source = data.get("learned_from")
        return cls(
            knowing_entity=data["knowing_entity"],
            content=data["content"],
            verification_status=VerificationStatus(data.get("verification_status", "unknown")),
            learned_at_turn=data.get("learned_at_turn", 0),
            id=data["id"],
            fact_id=data.get("fact_id"),
            learned_from=KnowledgeSource.from_dict(source) if source else None,
            is_current=data.get("is_current", True),
            context=data.get("context"),
        )
