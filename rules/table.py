"""
Rule Table - Immutable compiled rule groups
===========================================

A rule table is an ordered tuple of rule groups. Order is precedence:
the first group holding a matching pattern answers, and inside a group
the first matching pattern supplies the captures.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Tuple


@dataclass(frozen=True)
class RuleGroup:
    """
    Alternative patterns sharing one set of alternative responses.

    Attributes:
        patterns (tuple): Compiled case-insensitive patterns, in order
        responses (tuple): Response templates with ``!<n>`` placeholders
        category (str): Category the group was loaded from
    """
    patterns: Tuple[re.Pattern, ...]
    responses: Tuple[str, ...]
    category: str = ""

    def __post_init__(self):
        if not self.patterns:
            raise ValueError("RuleGroup requires at least one pattern")
        if not self.responses:
            raise ValueError("RuleGroup requires at least one response")

    @property
    def max_captures(self) -> int:
        """Largest number of capture groups among the group's patterns."""
        return max(pattern.groups for pattern in self.patterns)


@dataclass(frozen=True)
class RuleTable:
    """Ordered, read-only sequence of rule groups."""
    groups: Tuple[RuleGroup, ...] = ()

    def __iter__(self) -> Iterator[RuleGroup]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    def __getitem__(self, index: int) -> RuleGroup:
        return self.groups[index]

    @property
    def pattern_count(self) -> int:
        return sum(len(group.patterns) for group in self.groups)

    def categories(self) -> Tuple[str, ...]:
        """Distinct category names in table order."""
        seen = []
        for group in self.groups:
            if group.category not in seen:
                seen.append(group.category)
        return tuple(seen)
