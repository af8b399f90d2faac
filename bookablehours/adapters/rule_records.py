"""
Boundary schema for availability rule records.

Rule records arrive from configuration or JSON files in the shape the
scheduling frontend stores them: ``startTime``/``endTime`` as timestamps whose
UTC hour and minute are the wall-clock time (their date is ignored), plus
either a ``date`` (override) or a ``days`` list (recurring). Validation happens
here so the materializer can trust its input.
"""

from __future__ import annotations

from datetime import date as Date
from datetime import datetime, time
from typing import Any, Iterable, List, Mapping, Optional

import pendulum
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..domain.exceptions import RuleValidationError
from ..domain.models import AvailabilityRule, DateOverrideRule, Rule, WallClockTime


class RuleRecord(BaseModel):
    """A single availability rule record, recurring or override."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    start_time: WallClockTime = Field(alias="startTime")
    end_time: WallClockTime = Field(alias="endTime")
    date: Optional[Date] = None
    days: Optional[List[int]] = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_clock_time(cls, value: Any) -> WallClockTime:
        """Accept timestamps, ``time`` objects and ``HH:MM`` strings."""
        if isinstance(value, WallClockTime):
            return value
        if isinstance(value, datetime):
            return WallClockTime.from_datetime(value)
        if isinstance(value, time):
            return WallClockTime.from_time(value)
        if isinstance(value, str):
            if "T" in value or len(value) > 8:
                parsed = pendulum.parse(value, exact=True)
                if not isinstance(parsed, datetime):
                    raise ValueError(f"Expected a timestamp or HH:MM, got {value!r}")
                return WallClockTime.from_datetime(parsed)
            return WallClockTime.parse(value)
        if isinstance(value, int) and not isinstance(value, bool):
            # YAML 1.1 reads unquoted 9:00 as the base-60 integer 540
            raise ValueError(
                f"Unsupported clock time value: {value!r}. "
                f"Quote HH:MM values in YAML, e.g. \"09:00\""
            )
        raise ValueError(f"Unsupported clock time value: {value!r}")

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value: Any) -> Optional[Date]:
        """Keep only the civil (UTC) date of timestamps."""
        if value is None or value == "":
            return None
        if isinstance(value, str):
            value = pendulum.parse(value, exact=True)
        if isinstance(value, datetime):
            utc_value = pendulum.instance(value).in_timezone("UTC")
            return Date(utc_value.year, utc_value.month, utc_value.day)
        if isinstance(value, Date):
            return Date(value.year, value.month, value.day)
        raise ValueError(f"Unsupported date value: {value!r}, expected YYYY-MM-DD or a timestamp")

    @field_validator("days")
    @classmethod
    def validate_days(cls, value: Optional[List[int]]) -> Optional[List[int]]:
        """Ensure weekdays are in valid range and deduplicated."""
        if value is None:
            return None
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"days must be between 0 and 6, got {invalid_days}")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        return deduped

    @model_validator(mode="after")
    def validate_shape(self) -> "RuleRecord":
        """Exactly one of date/days, and the window must open before it closes."""
        if self.date is None and self.days is None:
            raise ValueError("A rule needs either 'date' or 'days'")
        if self.date is not None and self.days is not None:
            raise ValueError("A rule cannot have both 'date' and 'days'")
        if self.end_time.minutes_since_midnight() <= self.start_time.minutes_since_midnight():
            raise ValueError(
                f"endTime {self.end_time} must be later than startTime {self.start_time}"
            )
        return self

    def to_rule(self) -> Rule:
        """Convert to the matching domain rule."""
        if self.date is not None:
            return DateOverrideRule(
                date=self.date,
                start_time=self.start_time,
                end_time=self.end_time,
            )
        return AvailabilityRule(
            start_time=self.start_time,
            end_time=self.end_time,
            days=frozenset(self.days or []),
        )


def parse_rule_records(records: Iterable[Mapping[str, Any]]) -> List[Rule]:
    """
    Validate raw rule records and convert them to domain rules.

    Raises:
        RuleValidationError: Listing every failing record by index
    """
    rules: List[Rule] = []
    errors: List[str] = []

    for index, record in enumerate(records):
        try:
            rules.append(RuleRecord.model_validate(record).to_rule())
        except ValidationError as exc:
            messages = "; ".join(error["msg"] for error in exc.errors())
            errors.append(f"record {index}: {messages}")

    if errors:
        raise RuleValidationError("Invalid availability rules: " + " | ".join(errors))

    return rules
