"""
Adapters layer - External storage holding availability rules.
"""

from .json_rule_source import JsonRuleSource, parse_records
from .rest_rule_source import RestRuleSource

__all__ = ["JsonRuleSource", "RestRuleSource", "parse_records"]
