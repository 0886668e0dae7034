"""
In-game calendar and clock.

The calendar uses twelve 30-day months. total_minutes() gives an absolute
minute count that scheduled events are measured against.
"""

from dataclasses import dataclass
from enum import Enum

MINUTES_PER_DAY = 24 * 60
DAYS_PER_MONTH = 30
MONTHS_PER_YEAR = 12


class TimeOfDay(str, Enum):
    DAWN = "dawn"
    MORNING = "morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"
    DUSK = "dusk"
    EVENING = "evening"
    NIGHT = "night"


@dataclass
class GameTime:
    year: int = 1492
    month: int = 1  # 1-12
    day: int = 1    # 1-30
    hour: int = 8   # 0-23
    minute: int = 0

    def total_minutes(self) -> int:
        days = (self.year * MONTHS_PER_YEAR + (self.month - 1)) * DAYS_PER_MONTH + (self.day - 1)
        return days * MINUTES_PER_DAY + self.hour * 60 + self.minute

    @classmethod
    def from_total_minutes(cls, total: int) -> "GameTime":
        days, remainder = divmod(total, MINUTES_PER_DAY)
        months, day = divmod(days, DAYS_PER_MONTH)
        year, month = divmod(months, MONTHS_PER_YEAR)
        return cls(year=year, month=month + 1, day=day + 1, hour=remainder // 60, minute=remainder % 60)

    def advance_minutes(self, minutes: int) -> int:
        """Advance the clock; returns the number of day boundaries crossed."""
        before = self.total_minutes() // MINUTES_PER_DAY
        advanced = GameTime.from_total_minutes(self.total_minutes() + max(0, minutes))
        self.year, self.month, self.day = advanced.year, advanced.month, advanced.day
        self.hour, self.minute = advanced.hour, advanced.minute
        return self.total_minutes() // MINUTES_PER_DAY - before

    def advance_hours(self, hours: int) -> int:
        return self.advance_minutes(hours * 60)

    def time_of_day(self) -> TimeOfDay:
        if 5 <= self.hour < 7:
            return TimeOfDay.DAWN
        elif 7 <= self.hour < 11:
            return TimeOfDay.MORNING
        elif 11 <= self.hour < 14:
            return TimeOfDay.MIDDAY
        elif 14 <= self.hour < 17:
            return TimeOfDay.AFTERNOON
        elif 17 <= self.hour < 19:
            return TimeOfDay.DUSK
        elif 19 <= self.hour < 23:
            return TimeOfDay.EVENING
        return TimeOfDay.NIGHT

    def is_daylight(self) -> bool:
        return 6 <= self.hour < 20

    def clock(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def __str__(self) -> str:
        return f"Day {self.day}, Month {self.month}, Year {self.year} at {self.clock()} ({self.time_of_day().value})"
