"""
Test Response Selector
======================

Unit tests for random response selection.
"""

import random
from collections import Counter

import pytest
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from rules.selector import select_response


class CountingRandom(random.Random):
    """Random stream that counts randrange draws."""

    def __init__(self, seed=None):
        super().__init__(seed)
        self.draws = 0

    def randrange(self, *args, **kwargs):
        self.draws += 1
        return super().randrange(*args, **kwargs)


class TestSelectResponse:
    """Tests for select_response."""

    def test_single_response(self):
        """Test the only response is always chosen."""
        assert select_response(["only"], random.Random(1)) == "only"

    def test_empty_responses(self):
        """Test selecting from nothing is an error."""
        with pytest.raises(ValueError):
            select_response([], random.Random(1))

    def test_result_within_set(self):
        """Test every draw is one of the responses."""
        responses = ["a", "b", "c", "d"]
        rng = random.Random(99)

        for _ in range(200):
            assert select_response(responses, rng) in responses

    def test_seeded_is_reproducible(self):
        """Test the same seed gives the same sequence."""
        responses = [str(i) for i in range(10)]

        first = [select_response(responses, random.Random(7)) for _ in range(5)]
        second = [select_response(responses, random.Random(7)) for _ in range(5)]

        assert first == second

    def test_one_draw_per_call(self):
        """Test exactly one value is consumed from the stream."""
        rng = CountingRandom(3)

        select_response(["a", "b", "c"], rng)

        assert rng.draws == 1

    def test_roughly_uniform(self):
        """Test each response is picked about equally often."""
        responses = ["a", "b", "c", "d"]
        rng = random.Random(12345)
        draws = 8000

        counts = Counter(select_response(responses, rng) for _ in range(draws))

        expected = draws / len(responses)
        for response in responses:
            assert abs(counts[response] - expected) < expected * 0.1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
