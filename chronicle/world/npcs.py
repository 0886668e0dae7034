"""
Non-player characters.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import uuid


class Disposition(str, Enum):
    HOSTILE = "hostile"
    UNFRIENDLY = "unfriendly"
    NEUTRAL = "neutral"
    FRIENDLY = "friendly"
    HELPFUL = "helpful"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["Disposition"]:
        if not text:
            return None
        try:
            return cls(text.strip().lower())
        except ValueError:
            return None


@dataclass
class NPC:
    name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    description: str = ""
    personality: str = ""
    occupation: Optional[str] = None
    disposition: Disposition = Disposition.NEUTRAL
    location_id: Optional[str] = None
    known_information: list[str] = field(default_factory=list)

    def learn(self, information: str) -> bool:
        """Record information once; returns False if it was already known."""
        if information in self.known_information:
            return False
        self.known_information.append(information)
        return True
