"""
Matcher - Ordered first-match scan over the rule table
======================================================

Scans groups in table order and, within each group, patterns in group
order. The first pattern found anywhere in the input decides the
result. Matching is deterministic; randomness only enters later, when a
response is picked.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from core.exceptions import NoMatchError
from core.logging import get_logger
from .table import RuleTable

logger = get_logger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """
    Result of a rule group matching an input line.

    Attributes:
        responses (tuple): The matched group's response templates
        captures (tuple): Captured substrings, group 1 first; the whole
            match is not included
        group_index (int): Position of the matched group in the table
        pattern (str): Source of the pattern that matched
    """
    responses: Tuple[str, ...]
    captures: Tuple[str, ...] = ()
    group_index: int = -1
    pattern: str = ""


def find_match(text: str, table: RuleTable) -> Optional[MatchResult]:
    """
    Find the first rule group with a pattern matching the input.

    Args:
        text: Raw input line
        table: Compiled rule table

    Returns:
        MatchResult if some pattern matched, None otherwise
    """
    for index, group in enumerate(table):
        for pattern in group.patterns:
            match = pattern.search(text)
            if match is None:
                continue

            # Optional groups that did not take part capture nothing
            captures = tuple(value or "" for value in match.groups())
            logger.debug(
                f"Input matched group {index} ({group.category}) via {pattern.pattern!r}"
            )
            return MatchResult(
                responses=group.responses,
                captures=captures,
                group_index=index,
                pattern=pattern.pattern,
            )

    return None


def require_match(text: str, table: RuleTable) -> MatchResult:
    """
    Like find_match, but a missing match is an error.

    Raises:
        NoMatchError: If no group matched, usually a table without a
            trailing catch-all
    """
    result = find_match(text, table)
    if result is None:
        raise NoMatchError(
            "No rule group matched the input",
            text=text,
            details={"groups": len(table)}
        )
    return result
