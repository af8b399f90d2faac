"""
Domain layer - Pure business logic without external dependencies.
"""

from .materializer import AvailabilityMaterializer, materialize
from .models import AvailabilityRule, DateOverrideRule, Interval, Rule, WallClockTime

__all__ = [
    "AvailabilityMaterializer",
    "AvailabilityRule",
    "DateOverrideRule",
    "Interval",
    "Rule",
    "WallClockTime",
    "materialize",
]
