"""
Availability rules loaded from a local JSON export.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.exceptions import InvalidRuleError, RuleSourceError
from ..domain.models import AvailabilityRule

logger = logging.getLogger(__name__)


def parse_records(records: List[Dict[str, Any]]) -> List[AvailabilityRule]:
    """
    Turn storage rows into rules, skipping rows that cannot be parsed.

    A broken row is a data-quality problem for that row only; it is logged
    and the remaining rows are still returned.
    """
    rules: List[AvailabilityRule] = []

    for record in records:
        if not isinstance(record, dict):
            logger.warning("Skipping non-object availability record: %r", record)
            continue
        try:
            rules.append(AvailabilityRule.from_record(record))
        except InvalidRuleError as exc:
            logger.warning("Skipping availability record %s: %s", record.get("id"), exc)

    return rules


class JsonRuleSource:
    """
    Reads ``availability_slots`` rows from a JSON file.

    The file holds either a list of rows or an object with an
    ``availability_slots`` list, as produced by a table export.
    """

    def __init__(self, path: Path):
        """
        Initialize the source.

        Args:
            path: Path to the JSON export
        """
        self.path = path

    def _load_records(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            raise FileNotFoundError(f"Rules file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise RuleSourceError(f"Invalid JSON in {self.path}: {exc}") from exc

        if isinstance(data, dict):
            data = data.get("availability_slots", [])

        if not isinstance(data, list):
            raise RuleSourceError(
                f"{self.path} must contain a list of availability records."
            )

        return data

    def get_rules(self, mentor_id: Optional[str] = None) -> List[AvailabilityRule]:
        """
        Load rules from the file.

        Args:
            mentor_id: Only return rules of this mentor; all rules when None

        Returns:
            List of parsed AvailabilityRule objects
        """
        rules = parse_records(self._load_records())

        if mentor_id is not None:
            rules = [rule for rule in rules if rule.mentor_id == mentor_id]

        logger.debug("Loaded %d rule(s) from %s", len(rules), self.path)
        return rules
