"""
Rules Module - Pattern-based response engine
============================================

This module provides the rule-based responder:
- Case-insensitive regex rule groups compiled once at startup
- Ordered first-match-wins group selection
- Uniform random response selection with a caller-owned random stream
- Numbered ``!<n>`` placeholder substitution
"""

from .compiler import (
    RawRuleGroup,
    compile_pattern,
    compile_rules,
    flatten_categories,
    load_raw_rules,
    load_rule_table,
)
from .engine import Responder
from .matcher import MatchResult, find_match, require_match
from .selector import select_response
from .table import RuleGroup, RuleTable
from .templates import fill_template, placeholder_indices

__all__ = [
    "RawRuleGroup",
    "compile_pattern",
    "compile_rules",
    "flatten_categories",
    "load_raw_rules",
    "load_rule_table",
    "Responder",
    "MatchResult",
    "find_match",
    "require_match",
    "select_response",
    "RuleGroup",
    "RuleTable",
    "fill_template",
    "placeholder_indices",
]
