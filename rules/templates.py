"""
Template Filler - Placeholder substitution for response templates
=================================================================

Response templates carry numbered placeholders of the form ``!<n>``
(zero-based). Filling replaces them with the substrings captured by the
pattern that matched.
"""

import re
from typing import List, Sequence


PLACEHOLDER_RE = re.compile(r"!(\d+)")


def fill_template(template: str, captures: Sequence[str]) -> str:
    """
    Substitute captured text into a response template.

    Indices are processed in ascending order, each one replacing every
    literal ``!<n>`` in the string as updated so far. Substitution stops
    once the captures run out, so a placeholder with no matching capture
    is left in the output as-is.

    Args:
        template: Response template
        captures: Captured substrings, capture group 1 first

    Returns:
        Filled reply string

    Example:
        >>> fill_template("What would change if you got !0?", ["a vacation"])
        'What would change if you got a vacation?'
        >>> fill_template("!2 is missing", ["x"])
        '!2 is missing'
    """
    result = template
    for index, value in enumerate(captures):
        # Plain substring replacement: "!1" also hits the prefix of "!10"
        result = result.replace(f"!{index}", value)
    return result


def placeholder_indices(template: str) -> List[int]:
    """
    Get the placeholder indices a template refers to.

    Args:
        template: Response template

    Returns:
        Sorted list of distinct indices
    """
    return sorted({int(match.group(1)) for match in PLACEHOLDER_RE.finditer(template)})
