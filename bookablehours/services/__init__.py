"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_service import AvailabilityService, RuleSourceProtocol, StaticRuleSource

__all__ = ["AvailabilityService", "RuleSourceProtocol", "StaticRuleSource"]
