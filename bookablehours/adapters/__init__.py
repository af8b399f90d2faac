"""
Adapters layer - Rule record sources and boundary validation.
"""

from .json_rule_source import JsonRuleSource
from .rule_records import RuleRecord, parse_rule_records

__all__ = ["JsonRuleSource", "RuleRecord", "parse_rule_records"]
