"""
Application services for serving materialized availability.

The service coordinates loading rules via a rule source adapter and delegates
the actual interval computation to the domain-level
``AvailabilityMaterializer``. This keeps the CLI thin and improves testability
by allowing the rule source to be replaced via a simple protocol.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Protocol, Sequence

from ..domain.exceptions import InvalidRangeError
from ..domain.materializer import AvailabilityMaterializer, to_utc
from ..domain.models import Interval, Rule

logger = logging.getLogger(__name__)

DEFAULT_MAX_RANGE_DAYS = 366


class RuleSourceProtocol(Protocol):
    """Protocol describing the rule source behaviour needed by the service."""

    def load_rules(self) -> List[Rule]:
        """Return validated availability rules."""


class StaticRuleSource:
    """Rule source over an in-memory list of rules."""

    def __init__(self, rules: Iterable[Rule]):
        self._rules = list(rules)

    def load_rules(self) -> List[Rule]:
        return list(self._rules)


class AvailabilityService:
    """
    Orchestrates rule retrieval and interval materialization.

    The materializer does not bound the day walk itself, so the service
    rejects ranges longer than ``max_range_days`` before invoking it.
    """

    def __init__(
        self,
        rule_source: RuleSourceProtocol,
        max_range_days: int = DEFAULT_MAX_RANGE_DAYS,
    ) -> None:
        self._rule_source = rule_source
        self._max_range_days = max_range_days

    def get_availability(
        self,
        *,
        timezone: str,
        date_from: datetime,
        date_to: datetime,
    ) -> List[Interval]:
        """
        Load rules and materialize them for ``[date_from, date_to)``.

        Output order is unspecified; use ``sort_intervals`` or
        ``group_by_date`` when presentation order matters.
        """
        self._check_range(date_from, date_to)

        rules = self._rule_source.load_rules()
        materializer = AvailabilityMaterializer(timezone)

        return materializer.materialize(rules, date_from, date_to)

    def _check_range(self, date_from: datetime, date_to: datetime) -> None:
        span_days = (to_utc(date_to) - to_utc(date_from)).total_seconds() / 86400

        if span_days > self._max_range_days:
            logger.warning(
                "Rejecting range of %.1f days (maximum %d)", span_days, self._max_range_days
            )
            raise InvalidRangeError(
                f"Requested range spans {span_days:.1f} days, "
                f"maximum is {self._max_range_days}"
            )

    @staticmethod
    def sort_intervals(intervals: Sequence[Interval]) -> List[Interval]:
        """Sort intervals by start, then end."""
        return sorted(intervals, key=lambda interval: (interval.start, interval.end))

    @staticmethod
    def group_by_date(intervals: Sequence[Interval]) -> Dict[str, List[Interval]]:
        """
        Group intervals under their date key.

        Keys are ascending and each day's intervals are sorted by start.
        """
        grouped: Dict[str, List[Interval]] = {}

        for interval in AvailabilityService.sort_intervals(intervals):
            grouped.setdefault(interval.date_key(), []).append(interval)

        return dict(sorted(grouped.items()))
