"""
Quests and their objectives.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import uuid


class QuestStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    ABANDONED = "abandoned"


@dataclass
class QuestObjective:
    description: str
    completed: bool = False
    optional: bool = False


@dataclass
class Quest:
    name: str
    description: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: QuestStatus = QuestStatus.ACTIVE
    objectives: list[QuestObjective] = field(default_factory=list)
    rewards: list[str] = field(default_factory=list)
    giver: Optional[str] = None

    def is_complete(self) -> bool:
        """
        True when there is at least one objective and every objective is done.

        Objectives flagged optional still count here.
        """
        return bool(self.objectives) and all(o.completed for o in self.objectives)

    def find_objective(self, text: str) -> Optional[QuestObjective]:
        """First objective whose description contains text (case-insensitive)."""
        key = text.lower()
        for objective in self.objectives:
            if key in objective.description.lower():
                return objective
        return None
