"""
Rule source reading availability records from a JSON file.
"""

import json
import logging
from pathlib import Path
from typing import List

from ..domain.exceptions import RuleSourceError
from ..domain.models import Rule
from .rule_records import parse_rule_records

logger = logging.getLogger(__name__)


class JsonRuleSource:
    """
    Loads rule records from a JSON file.

    The file holds either a list of records or an object with an
    ``availability`` key containing that list.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load_rules(self) -> List[Rule]:
        """
        Read and validate the rule file.

        Raises:
            RuleSourceError: If the file is missing, unreadable or not valid JSON
            RuleValidationError: If a record is malformed
        """
        if not self.path.exists():
            raise RuleSourceError(f"Rule file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise RuleSourceError(f"Invalid JSON in {self.path}: {exc}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise RuleSourceError(f"Cannot read {self.path}: {exc}") from exc

        if isinstance(data, dict):
            data = data.get("availability", [])

        if not isinstance(data, list):
            raise RuleSourceError(f"{self.path} must contain a list of availability records")

        rules = parse_rule_records(data)
        logger.debug("Loaded %d rule(s) from %s", len(rules), self.path)
        return rules
