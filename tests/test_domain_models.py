"""
Tests for domain models.
"""

from datetime import date, datetime, time, timezone

import pendulum
import pytest

from bookablehours.domain.models import (
    AvailabilityRule,
    DateOverrideRule,
    Interval,
    WallClockTime,
    describe_rule,
    weekday_index,
)


class TestWallClockTime:
    """Tests for WallClockTime model."""

    def test_minutes_since_midnight(self):
        assert WallClockTime(9, 30).minutes_since_midnight() == 570

    def test_invalid_hour_raises_error(self):
        with pytest.raises(ValueError, match="Hour must be between 0 and 23"):
            WallClockTime(24, 0)

    def test_invalid_minute_raises_error(self):
        with pytest.raises(ValueError, match="Minute must be between 0 and 59"):
            WallClockTime(9, 60)

    def test_parse(self):
        assert WallClockTime.parse("08:05") == WallClockTime(8, 5)
        assert WallClockTime.parse("17:00:00") == WallClockTime(17, 0)

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError, match="expected HH:MM"):
            WallClockTime.parse("nine")

    def test_from_datetime_uses_utc_fields(self):
        """The date component is ignored and the UTC clock is kept."""
        value = datetime(1970, 1, 1, 9, 15, tzinfo=timezone.utc)
        assert WallClockTime.from_datetime(value) == WallClockTime(9, 15)

        shifted = pendulum.parse("2024-06-01T11:15:00+02:00")
        assert WallClockTime.from_datetime(shifted) == WallClockTime(9, 15)

    def test_from_time(self):
        assert WallClockTime.from_time(time(7, 45, 30)) == WallClockTime(7, 45)

    def test_ordering_and_str(self):
        assert WallClockTime(9, 0) < WallClockTime(9, 1) < WallClockTime(10, 0)
        assert str(WallClockTime(7, 5)) == "07:05"


class TestRules:
    """Tests for recurring and override rules."""

    def test_recurring_rule_kind(self):
        rule = AvailabilityRule(WallClockTime(9), WallClockTime(17), frozenset({1, 2}))

        assert rule.date is None
        assert rule.is_recurring()
        assert not rule.is_override()

    def test_override_rule_kind(self):
        rule = DateOverrideRule(date(2024, 1, 1), WallClockTime(9), WallClockTime(17))

        assert rule.is_override()
        assert not rule.is_recurring()

    def test_describe_rule(self):
        recurring = AvailabilityRule(WallClockTime(9), WallClockTime(17), frozenset({5, 1}))
        single = DateOverrideRule(date(2024, 12, 24), WallClockTime(10), WallClockTime(14))

        assert describe_rule(recurring) == "Mon, Fri 09:00 - 17:00"
        assert describe_rule(single) == "2024-12-24 10:00 - 14:00"


class TestInterval:
    """Tests for Interval model."""

    def test_duration_and_date_key(self):
        start = pendulum.datetime(2024, 11, 25, 9, 0, tz="Europe/Berlin")
        interval = Interval(start=start, end=start.add(hours=8))

        assert interval.duration_minutes() == 480
        assert interval.date_key() == "2024-11-25"
        assert interval.weekday_name() == "Monday"
        assert str(interval) == "2024-11-25 09:00 - 17:00"

    def test_equality_follows_instants(self):
        berlin = pendulum.datetime(2024, 11, 25, 9, 0, tz="Europe/Berlin")
        utc = berlin.in_timezone("UTC")

        assert Interval(berlin, berlin.add(hours=1)) == Interval(utc, utc.add(hours=1))
        assert len({Interval(berlin, berlin.add(hours=1)), Interval(utc, utc.add(hours=1))}) == 1

    def test_weekday_index_counts_from_sunday(self):
        assert weekday_index(pendulum.datetime(2024, 1, 7, tz="UTC")) == 0
        assert weekday_index(pendulum.datetime(2024, 1, 1, tz="UTC")) == 1
        assert weekday_index(pendulum.datetime(2024, 1, 6, tz="UTC")) == 6
