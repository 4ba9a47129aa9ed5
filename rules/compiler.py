"""
Pattern Compiler - Build the rule table from raw rule data
==========================================================

Raw rules are plain pattern and response strings grouped into named
categories. This module flattens the categories into one ordered list,
compiles every pattern once, and returns an immutable RuleTable.
Compilation is all-or-nothing: an invalid pattern aborts the whole
table.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import yaml

from core.exceptions import PatternCompileError, RuleLoadError
from core.logging import get_logger
from .table import RuleGroup, RuleTable
from .templates import placeholder_indices

logger = get_logger(__name__)

DEFAULT_RULES_FILE = Path(__file__).parent / "data" / "default_rules.yaml"
FALLBACK_CATEGORY = "fallback"


@dataclass
class RawRuleGroup:
    """
    Uncompiled rule group as read from configuration.

    Attributes:
        patterns (list): Regular expression sources
        responses (list): Response templates
        category (str): Category the group belongs to
    """
    patterns: List[str]
    responses: List[str]
    category: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any], category: str = "") -> "RawRuleGroup":
        """Create a raw group from a ``{patterns, responses}`` mapping."""
        if not isinstance(data, dict):
            raise RuleLoadError(
                "Rule group must be a mapping with 'patterns' and 'responses'",
                {"category": category, "group": data}
            )

        patterns = data.get("patterns") or []
        responses = data.get("responses") or []

        for key, values in (("patterns", patterns), ("responses", responses)):
            if not isinstance(values, list) or not values:
                raise RuleLoadError(
                    f"Rule group needs a non-empty '{key}' list",
                    {"category": category, "group": data}
                )
            if not all(isinstance(value, str) for value in values):
                raise RuleLoadError(
                    f"Rule group '{key}' must contain only strings",
                    {"category": category, "group": data}
                )

        return cls(patterns=list(patterns), responses=list(responses), category=category)


def compile_pattern(source: str, group_index: int = -1) -> re.Pattern:
    """
    Compile one pattern source case-insensitively.

    Anchors and other constructs keep their regular meaning; only
    IGNORECASE is added.

    Raises:
        PatternCompileError: If the source is not a valid regex
    """
    try:
        return re.compile(source, re.IGNORECASE)
    except re.error as e:
        raise PatternCompileError(
            f"Invalid pattern {source!r}: {e}",
            pattern=source,
            group_index=group_index,
        ) from e


def compile_rules(raw: Iterable[RawRuleGroup]) -> RuleTable:
    """
    Compile raw rule groups into a rule table.

    Group order and pattern order are preserved exactly.

    Args:
        raw: Raw groups in precedence order

    Returns:
        Compiled RuleTable

    Raises:
        PatternCompileError: On the first invalid pattern
        RuleLoadError: If a group has no patterns or no responses
    """
    groups = []

    for index, raw_group in enumerate(raw):
        if not raw_group.patterns or not raw_group.responses:
            raise RuleLoadError(
                "Rule group needs at least one pattern and one response",
                {"group_index": index, "category": raw_group.category}
            )

        patterns = tuple(compile_pattern(source, index) for source in raw_group.patterns)
        group = RuleGroup(
            patterns=patterns,
            responses=tuple(raw_group.responses),
            category=raw_group.category,
        )
        _warn_unfillable_placeholders(group, index)
        groups.append(group)

    table = RuleTable(groups=tuple(groups))
    logger.debug(f"Compiled {len(table)} rule groups ({table.pattern_count} patterns)")
    return table


def unfillable_placeholders(group: RuleGroup) -> Dict[str, List[int]]:
    """
    Find placeholders no pattern in the group can supply.

    Returns:
        Mapping of template to the indices that will stay literal
    """
    available = group.max_captures
    problems = {}
    for template in group.responses:
        missing = [i for i in placeholder_indices(template) if i >= available]
        if missing:
            problems[template] = missing
    return problems


def _warn_unfillable_placeholders(group: RuleGroup, index: int) -> None:
    for template, missing in unfillable_placeholders(group).items():
        logger.warning(
            f"Group {index} ({group.category or 'uncategorised'}): template {template!r} "
            f"references placeholders {missing} beyond available captures"
        )


def flatten_categories(
    categories: Mapping[str, Sequence[Any]],
    order: Optional[Sequence[str]] = None
) -> List[RawRuleGroup]:
    """
    Concatenate categories into one ordered list of raw groups.

    Categories named in ``order`` come first, in that order. Any others
    follow in mapping order, except the fallback category, which always
    closes the table so the catch-all keeps the lowest precedence.

    Args:
        categories: Mapping of category name to list of group mappings
        order: Category precedence (optional)

    Returns:
        Flattened list of RawRuleGroup

    Raises:
        RuleLoadError: If ``order`` names an undefined category
    """
    order = list(order or [])

    missing = [name for name in order if name not in categories]
    if missing:
        raise RuleLoadError(
            f"Category order names undefined categories: {', '.join(missing)}",
            {"defined": list(categories)}
        )

    names = order + [name for name in categories if name not in order]
    if FALLBACK_CATEGORY in names:
        names.remove(FALLBACK_CATEGORY)
        names.append(FALLBACK_CATEGORY)

    raw = []
    for name in names:
        groups = categories[name] or []
        if not isinstance(groups, list):
            raise RuleLoadError(f"Category '{name}' must be a list of rule groups")
        raw.extend(RawRuleGroup.from_dict(group, category=name) for group in groups)

    return raw


def load_raw_rules(
    path: Optional[Path] = None,
    category_order: Optional[Sequence[str]] = None
) -> List[RawRuleGroup]:
    """
    Load raw rule groups from a YAML rules file.

    The file looks like::

        order: [greetings, needs, fallback]
        categories:
          greetings:
            - patterns: ["hello", "good (morning|evening)"]
              responses: ["Hi. What brings you here?"]

    Args:
        path: Rules file (defaults to the packaged rules)
        category_order: Overrides the file's own ``order``

    Returns:
        Flattened list of RawRuleGroup

    Raises:
        RuleLoadError: If the file cannot be read or is malformed
    """
    rules_path = Path(path) if path else DEFAULT_RULES_FILE

    try:
        with open(rules_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise RuleLoadError(f"Failed to parse rules file: {e}", {"path": str(rules_path)})
    except OSError as e:
        raise RuleLoadError(f"Failed to read rules file: {e}", {"path": str(rules_path)})

    if not isinstance(data, dict) or not isinstance(data.get("categories"), dict):
        raise RuleLoadError(
            "Rules file must define a 'categories' mapping",
            {"path": str(rules_path)}
        )

    order = category_order if category_order else data.get("order")
    raw = flatten_categories(data["categories"], order)

    logger.debug(f"Loaded {len(raw)} rule groups from {rules_path}")
    return raw


def load_rule_table(
    path: Optional[Path] = None,
    category_order: Optional[Sequence[str]] = None
) -> RuleTable:
    """Load and compile a rules file in one step."""
    return compile_rules(load_raw_rules(path, category_order))
