"""
Responder - Match, select and fill in one call
==============================================

This module ties the rule table, matcher, selector and template filler
together into the object the conversation loop talks to.
"""

import random
from pathlib import Path
from typing import Optional, Sequence

from core.config import Config
from core.logging import get_logger
from .compiler import load_rule_table
from .matcher import find_match
from .selector import select_response
from .table import RuleTable
from .templates import fill_template

logger = get_logger(__name__)


class Responder:
    """
    Rule-based responder over a compiled rule table.

    The table is built once and never modified. The responder owns one
    random stream for picking responses; callers that need per-request
    streams can pass their own to respond().

    Example:
        responder = Responder.from_file(seed=7)

        reply = responder.respond("I need a vacation")
        if reply is not None:
            print(reply)
    """

    def __init__(self, table: RuleTable, rng: Optional[random.Random] = None):
        """
        Initialize responder.

        Args:
            table: Compiled rule table
            rng: Random stream (seeded from system entropy if omitted)
        """
        self._table = table
        self._rng = rng if rng is not None else random.Random()

    @property
    def table(self) -> RuleTable:
        """The compiled rule table, read-only."""
        return self._table

    @property
    def group_count(self) -> int:
        """Number of rule groups in the table."""
        return len(self._table)

    def respond(self, text: str, rng: Optional[random.Random] = None) -> Optional[str]:
        """
        Produce a reply for one line of input.

        Args:
            text: Raw input line
            rng: Random stream for this call only (optional)

        Returns:
            Reply string, or None if no rule group matched
        """
        result = find_match(text, self._table)
        if result is None:
            logger.warning(
                "No rule group matched; the rule table has no catch-all group"
            )
            return None

        template = select_response(result.responses, rng if rng is not None else self._rng)
        return fill_template(template, result.captures)

    @classmethod
    def from_file(
        cls,
        path: Optional[Path] = None,
        seed: Optional[int] = None,
        category_order: Optional[Sequence[str]] = None
    ) -> "Responder":
        """
        Build a responder from a rules file.

        Args:
            path: Rules file (defaults to the packaged rules)
            seed: Seed for the response stream (optional)
            category_order: Category precedence override (optional)

        Raises:
            RuleLoadError: If the rules cannot be loaded or compiled
        """
        table = load_rule_table(path, category_order)
        rng = random.Random(seed) if seed is not None else None
        logger.info(f"Responder ready with {len(table)} rule groups")
        return cls(table, rng)

    @classmethod
    def from_config(cls, config: Config) -> "Responder":
        """Build a responder from application configuration."""
        return cls.from_file(
            path=Path(config.rules.rules_file).expanduser() if config.rules.rules_file else None,
            seed=config.session.seed,
            category_order=config.rules.category_order or None,
        )
