"""
Core business logic for materializing bookable intervals.

Pure domain logic: no I/O, no shared state. Every call works only on its
arguments and returns a freshly built list.
"""

from __future__ import annotations

import logging
from datetime import date as Date
from datetime import datetime
from typing import Dict, List, Sequence, Tuple

import pendulum
from pendulum import DateTime

from .exceptions import InvalidTimezoneError
from .models import (
    AvailabilityRule,
    DateOverrideRule,
    Interval,
    Rule,
    WallClockTime,
    weekday_index,
)

logger = logging.getLogger(__name__)

MergedDays = Dict[str, List[Interval]]


def resolve_timezone(name: str):
    """
    Resolve a zone identifier through pendulum's zone database.

    Raises:
        InvalidTimezoneError: If the identifier is unknown
    """
    try:
        return pendulum.timezone(name)
    except (ValueError, KeyError) as exc:
        raise InvalidTimezoneError(f"Invalid timezone '{name}': {exc}") from exc


def to_utc(value: datetime) -> DateTime:
    """Convert an instant to a UTC pendulum DateTime. Naive values are UTC."""
    return pendulum.instance(value).in_timezone("UTC")


class AvailabilityMaterializer:
    """
    Turns weekly rules and date overrides into concrete intervals.

    Algorithm:
    1. Partition rules into recurring rules and date overrides
    2. Walk each UTC calendar day of the range and expand recurring rules
    3. Expand each override onto its own date
    4. Merge per date key, an override list replacing the whole day
    5. Flatten the per-day lists
    """

    def __init__(self, timezone: str):
        self.timezone = timezone
        self._tz = resolve_timezone(timezone)

    def materialize(
        self,
        availability: Sequence[Rule],
        date_from: datetime,
        date_to: datetime,
    ) -> List[Interval]:
        """
        Materialize intervals for ``[date_from, date_to)``.

        Args:
            availability: Recurring rules and date overrides, may be empty
            date_from: Start of the range; its UTC calendar date starts the walk
            date_to: Exclusive end of the walk

        Returns:
            Intervals in the target timezone, in no guaranteed order
        """
        recurring, overrides = self.partition(availability)

        working_days = self.expand_recurring(recurring, date_from, date_to)
        override_days = self.expand_overrides(overrides)
        merged = self.merge(working_days, override_days)

        logger.debug(
            "Materialized %d recurring and %d override rule(s) into %d day(s) for %s",
            len(recurring),
            len(overrides),
            len(merged),
            self.timezone,
        )
        return self.flatten(merged)

    @staticmethod
    def partition(
        availability: Sequence[Rule],
    ) -> Tuple[List[AvailabilityRule], List[DateOverrideRule]]:
        """Split rules by presence of a date."""
        recurring: List[AvailabilityRule] = []
        overrides: List[DateOverrideRule] = []

        for rule in availability:
            if rule.date is not None:
                overrides.append(rule)
            else:
                recurring.append(rule)

        return recurring, overrides

    def expand_recurring(
        self,
        rules: Sequence[AvailabilityRule],
        date_from: datetime,
        date_to: datetime,
    ) -> MergedDays:
        """
        Expand recurring rules over every UTC calendar day before ``date_to``.

        The walked day's civil date is anchored directly to midnight in the
        target zone, and the weekday filter is applied to the anchored start.
        """
        days: MergedDays = {}

        start_utc = to_utc(date_from)
        end_utc = to_utc(date_to)

        if end_utc <= start_utc:
            logger.debug("Empty range %s - %s, skipping recurring expansion", start_utc, end_utc)

        current = pendulum.datetime(start_utc.year, start_utc.month, start_utc.day, tz="UTC")

        while current < end_utc:
            for rule in rules:
                start = self._at_clock_time(current.date(), rule.start_time)

                if weekday_index(start) not in rule.days:
                    continue

                end = self._at_clock_time(current.date(), rule.end_time)
                days.setdefault(start.format("YYYY-MM-DD"), []).append(
                    Interval(start=start, end=end)
                )

            current = current.add(days=1)

        return days

    def expand_overrides(self, overrides: Sequence[DateOverrideRule]) -> MergedDays:
        """Expand each override onto its own civil date."""
        days: MergedDays = {}

        for override in overrides:
            start = self._at_clock_time(override.date, override.start_time)
            end = self._at_clock_time(override.date, override.end_time)
            days.setdefault(start.format("YYYY-MM-DD"), []).append(
                Interval(start=start, end=end)
            )

        return days

    @staticmethod
    def merge(working_days: MergedDays, override_days: MergedDays) -> MergedDays:
        """
        Merge per date key. An override list replaces the recurring list for
        its date as a whole; lists are never concatenated.
        """
        merged: MergedDays = {key: list(intervals) for key, intervals in working_days.items()}

        for key, intervals in override_days.items():
            merged[key] = list(intervals)

        return merged

    @staticmethod
    def flatten(merged: MergedDays) -> List[Interval]:
        """Concatenate all per-day lists in mapping order."""
        return [interval for intervals in merged.values() for interval in intervals]

    def _at_clock_time(self, day: Date, clock: WallClockTime) -> DateTime:
        """Anchor ``day`` to the target zone and set the wall-clock time on it."""
        anchored = pendulum.datetime(day.year, day.month, day.day, tz=self._tz)
        return anchored.set(hour=clock.hour, minute=clock.minute, second=0, microsecond=0)


def materialize(
    timezone: str,
    availability: Sequence[Rule],
    date_from: datetime,
    date_to: datetime,
) -> List[Interval]:
    """Functional entry point; see ``AvailabilityMaterializer.materialize``."""
    return AvailabilityMaterializer(timezone).materialize(availability, date_from, date_to)
