"""
Scheduled events: things that will happen at a point in game time whether
or not the player is there to see them.

Three trigger kinds are supported:
- AtTime: a calendar date, optionally at an hour
- AfterDuration: a number of minutes after the event was scheduled
- TimeOfDayTrigger: a clock time, usually combined with repeating=True for
  daily events such as a market opening

Events are never removed. Triggered and cancelled events keep their status
so the schedule doubles as a record of what has happened.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional, Union

from chronicle.world.game_time import MINUTES_PER_DAY, GameTime


class EventVisibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    HINTED = "hinted"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["EventVisibility"]:
        key = (text or "").strip().lower()
        if key == "public":
            return cls.PUBLIC
        if key in ("private", "secret"):
            return cls.PRIVATE
        if key in ("hinted", "hint"):
            return cls.HINTED
        return None


class EventStatus(str, Enum):
    SCHEDULED = "scheduled"
    TRIGGERED = "triggered"
    CANCELLED = "cancelled"


# =============================================================================
# TRIGGERS
# =============================================================================


def describe_duration(total_minutes: int) -> str:
    if total_minutes < 60:
        return f"in {total_minutes} minutes"
    if total_minutes < MINUTES_PER_DAY:
        hours, minutes = divmod(total_minutes, 60)
        if minutes:
            return f"in {hours} hours and {minutes} minutes"
        return f"in {hours} hours"
    return f"in {total_minutes // MINUTES_PER_DAY} days"


@dataclass(frozen=True)
class AtTime:
    kind: ClassVar[str] = "at_time"

    year: int
    month: int
    day: int
    hour: Optional[int] = None

    def trigger_minute(self, anchor_minute: int) -> int:
        return GameTime(self.year, self.month, self.day, self.hour or 0, 0).total_minutes()

    def describe(self, repeating: bool = False) -> str:
        if self.hour is not None:
            return f"on {self.month}/{self.day}/{self.year} at {self.hour:02d}:00"
        return f"on {self.month}/{self.day}/{self.year}"


@dataclass(frozen=True)
class AfterDuration:
    kind: ClassVar[str] = "after_duration"

    minutes_from_creation: int
    trigger_at_minute: int

    def trigger_minute(self, anchor_minute: int) -> int:
        return self.trigger_at_minute

    def describe(self, repeating: bool = False) -> str:
        return describe_duration(self.minutes_from_creation)


@dataclass(frozen=True)
class TimeOfDayTrigger:
    kind: ClassVar[str] = "time_of_day"

    hour: int
    minute: int = 0

    def trigger_minute(self, anchor_minute: int) -> int:
        """First occurrence of this clock time at or after anchor_minute."""
        day_start = anchor_minute - anchor_minute % MINUTES_PER_DAY
        candidate = day_start + self.hour * 60 + self.minute
        if candidate < anchor_minute:
            candidate += MINUTES_PER_DAY
        return candidate

    def describe(self, repeating: bool = False) -> str:
        prefix = "daily at" if repeating else "at"
        return f"{prefix} {self.hour:02d}:{self.minute:02d}"


EventTrigger = Union[AtTime, AfterDuration, TimeOfDayTrigger]

_TRIGGER_TYPES = {t.kind: t for t in (AtTime, AfterDuration, TimeOfDayTrigger)}


def describe_trigger(trigger: Optional[EventTrigger], repeating: bool = False) -> str:
    if trigger is None:
        return "at an unspecified time"
    return trigger.describe(repeating)


def build_trigger(
    current_minute: int,
    minutes: Optional[int] = None,
    hours: Optional[int] = None,
    day: Optional[int] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    hour: Optional[int] = None,
    daily_hour: Optional[int] = None,
    daily_minute: Optional[int] = None,
) -> Optional[EventTrigger]:
    """
    Build a trigger from the timing fields of a schedule request.

    A daily clock time takes precedence over an absolute date, which takes
    precedence over a relative duration. Returns None when no timing is
    given; such events are never due and exist only to be cancelled or
    narrated.
    """
    if daily_hour is not None:
        return TimeOfDayTrigger(daily_hour, daily_minute or 0)
    if day is not None and month is not None and year is not None:
        return AtTime(year, month, day, hour)
    if minutes is not None or hours is not None:
        total = (minutes or 0) + (hours or 0) * 60
        return AfterDuration(total, current_minute + total)
    return None


def trigger_to_dict(trigger: Optional[EventTrigger]) -> Optional[dict[str, Any]]:
    if trigger is None:
        return None
    data = {"kind": trigger.kind}
    data.update(trigger.__dict__)
    return data


def trigger_from_dict(data: Optional[dict[str, Any]]) -> Optional[EventTrigger]:
    if data is None:
        return None
    values = dict(data)
    trigger_type = _TRIGGER_TYPES[values.pop("kind")]
    return trigger_type(**values)


# =============================================================================
# SCHEDULED EVENT
# =============================================================================


@dataclass
class ScheduledEvent:
    id: int
    description: str
    trigger: Optional[EventTrigger]
    scheduled_at_turn: int = 0
    scheduled_at_minute: int = 0
    location: Optional[str] = None
    involved_entities: list[str] = field(default_factory=list)
    visibility: EventVisibility = EventVisibility.PUBLIC
    repeating: bool = False
    repeat_interval_minutes: Optional[int] = None
    status: EventStatus = EventStatus.SCHEDULED

    def is_pending(self) -> bool:
        return self.status == EventStatus.SCHEDULED

    def mark_triggered(self) -> None:
        self.status = EventStatus.TRIGGERED

    def cancel(self) -> None:
        self.status = EventStatus.CANCELLED

    def next_trigger_minute(self) -> Optional[int]:
        if self.trigger is None:
            return None
        return self.trigger.trigger_minute(self.scheduled_at_minute)

    def is_due(self, game_time: GameTime) -> bool:
        if not self.is_pending():
            return False
        due_at = self.next_trigger_minute()
        return due_at is not None and game_time.total_minutes() >= due_at

    def interval(self) -> int:
        if self.repeat_interval_minutes:
            return self.repeat_interval_minutes
        if isinstance(self.trigger, AfterDuration) and self.trigger.minutes_from_creation > 0:
            return self.trigger.minutes_from_creation
        return MINUTES_PER_DAY

    def reschedule(self, new_trigger_minute: int) -> None:
        """
        Re-arm a repeating event so it next fires at new_trigger_minute.

        One-shot events are left as they are.
        """
        if not self.repeating:
            return
        self.status = EventStatus.SCHEDULED
        if isinstance(self.trigger, TimeOfDayTrigger):
            self.scheduled_at_minute = new_trigger_minute
        elif isinstance(self.trigger, AfterDuration):
            self.trigger = AfterDuration(self.trigger.minutes_from_creation, new_trigger_minute)
        elif self.trigger is not None:
            self.trigger = AfterDuration(self.interval(), new_trigger_minute)

    def describe(self) -> str:
        return describe_trigger(self.trigger, self.repeating)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "trigger": trigger_to_dict(self.trigger),
            "scheduled_at_turn": self.scheduled_at_turn,
            "scheduled_at_minute": self.scheduled_at_minute,
            "location": self.location,
            "involved_entities": list(self.involved_entities),
            "visibility": self.visibility.value,
            "repeating": self.repeating,
            "repeat_interval_minutes": self.repeat_interval_minutes,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduledEvent":
        return cls(
            id=data["id"],
            description=data["description"],
            trigger=trigger_from_dict(data.get("trigger")),
            scheduled_at_turn=data.get("scheduled_at_turn", 0),
            scheduled_at_minute=data.get("scheduled_at_minute", 0),
            location=data.get("location"),
            involved_entities=list(data.get("involved_entities", [])),
            visibility=EventVisibility(data.get("visibility", "public")),
            repeating=data.get("repeating", False),
            repeat_interval_minutes=data.get("repeat_interval_minutes"),
            status=EventStatus(data.get("status", "scheduled")),
        )
