"""
Response Selector - Uniform random choice of a response template
================================================================
"""

import random
from typing import Sequence


def select_response(responses: Sequence[str], rng: random.Random) -> str:
    """
    Pick one response template uniformly at random.

    The caller owns the random source; this module keeps no random
    state of its own. Exactly one draw is taken from ``rng``.

    Args:
        responses: Non-empty sequence of templates
        rng: Random source

    Returns:
        The chosen template

    Raises:
        ValueError: If responses is empty
    """
    if not responses:
        raise ValueError("Cannot select from an empty response set")

    return responses[rng.randrange(len(responses))]
