"""
Domain models for availability rules and materialized intervals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as Date
from datetime import datetime, time
from typing import FrozenSet, Union

import pendulum
from pendulum import DateTime


@dataclass(frozen=True, order=True)
class WallClockTime:
    """
    A naive time of day with minute precision.

    Carries no calendar date and no timezone; it is interpreted literally as
    a civil clock time in whichever zone availability is requested.
    """
    hour: int
    minute: int = 0

    def __post_init__(self):
        if not 0 <= self.hour <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"Minute must be between 0 and 59, got {self.minute}")

    def minutes_since_midnight(self) -> int:
        """Return the offset of this clock time from midnight in minutes."""
        return self.hour * 60 + self.minute

    @classmethod
    def from_time(cls, value: time) -> "WallClockTime":
        """Build from a ``datetime.time``, dropping seconds and tzinfo."""
        return cls(hour=value.hour, minute=value.minute)

    @classmethod
    def from_datetime(cls, value: datetime) -> "WallClockTime":
        """
        Build from a timestamp whose UTC hour and minute carry the clock time.

        The date component is ignored. Naive values are treated as UTC.
        """
        utc_value = pendulum.instance(value).in_timezone("UTC")
        return cls(hour=utc_value.hour, minute=utc_value.minute)

    @classmethod
    def parse(cls, value: str) -> "WallClockTime":
        """Parse an ``HH:MM`` string."""
        try:
            hour_part, minute_part = value.strip().split(":")[:2]
            return cls(hour=int(hour_part), minute=int(minute_part))
        except ValueError as exc:
            raise ValueError(f"Invalid clock time '{value}', expected HH:MM") from exc

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class AvailabilityRule:
    """
    A recurring weekly rule.

    ``days`` holds weekday indices with 0=Sunday through 6=Saturday.
    """
    start_time: WallClockTime
    end_time: WallClockTime
    days: FrozenSet[int] = field(default_factory=frozenset)

    @property
    def date(self) -> None:
        return None

    def is_override(self) -> bool:
        return False

    def is_recurring(self) -> bool:
        return True


@dataclass(frozen=True)
class DateOverrideRule:
    """
    Availability for one calendar date, replacing any recurring rule on it.
    """
    date: Date
    start_time: WallClockTime
    end_time: WallClockTime

    def is_override(self) -> bool:
        return True

    def is_recurring(self) -> bool:
        return False


Rule = Union[AvailabilityRule, DateOverrideRule]


def weekday_index(dt: DateTime) -> int:
    """Weekday of ``dt`` in its own zone, 0=Sunday through 6=Saturday."""
    return dt.isoweekday() % 7


WEEKDAY_NAMES = {
    0: "Sunday",
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
}


@dataclass(frozen=True)
class Interval:
    """
    A concrete bookable window, both ends expressed in the target timezone.

    Equality and hashing follow the underlying instants.
    """
    start: DateTime
    end: DateTime

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def date_key(self) -> str:
        """Civil date of ``start`` in its own zone as ``YYYY-MM-DD``."""
        return self.start.format("YYYY-MM-DD")

    def weekday_name(self) -> str:
        return WEEKDAY_NAMES[weekday_index(self.start)]

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


def describe_rule(rule: Rule) -> str:
    """Human-readable one-line description of a rule."""
    window = f"{rule.start_time} - {rule.end_time}"
    if isinstance(rule, DateOverrideRule):
        return f"{rule.date.isoformat()} {window}"
    day_names = ", ".join(WEEKDAY_NAMES[day][:3] for day in sorted(rule.days) if day in WEEKDAY_NAMES)
    return f"{day_names or '(no days)'} {window}"

