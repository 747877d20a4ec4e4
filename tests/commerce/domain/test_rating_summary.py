"""Tests for the rating summary arithmetic."""

import pytest
from commerce.rating.aggregator import summarize


class TestSummarize:
    def test_no_reviews(self):
        assert summarize([]) == (0.0, 0)

    def test_single_review(self):
        assert summarize([4]) == (4.0, 1)

    def test_two_reviews(self):
        assert summarize([5, 2]) == (3.5, 2)

    @pytest.mark.parametrize(
        "scores,expected",
        [
            ([4, 4, 5], 4.3),  # 4.333...
            ([5, 5, 4], 4.7),  # 4.666...
            ([1, 2], 1.5),
            ([3, 4, 4, 4], 3.8),  # 3.75 rounds half up
            ([1, 1, 1, 2], 1.3),  # 1.25 rounds half up
        ],
    )
    def test_rounded_to_one_decimal(self, scores, expected):
        average, count = summarize(scores)
        assert average == expected
        assert count == len(scores)

    def test_order_independent(self):
        assert summarize([1, 5, 3]) == summarize([3, 1, 5])
