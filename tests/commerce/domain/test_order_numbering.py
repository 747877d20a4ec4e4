"""Tests for order number generation."""

import re
from datetime import UTC, datetime

from commerce.order import numbering
from commerce.order.numbering import MAX_ATTEMPTS, generate_order_number


class _Numbers:
    """Stands in for the order repository's number lookup."""

    def __init__(self, taken=(), taken_widths=()):
        self.taken = set(taken)
        self.taken_widths = set(taken_widths)
        self.checked = []

    def number_taken(self, number):
        self.checked.append(number)
        suffix = number.split("-")[-1]
        return number in self.taken or len(suffix) in self.taken_widths


NOW = datetime(2026, 10, 19, tzinfo=UTC)


class TestGenerateOrderNumber:
    def test_format(self):
        number = generate_order_number(_Numbers(), now=NOW)
        assert re.fullmatch(r"YP2610-\d{4}", number)

    def test_skips_taken_numbers(self, monkeypatch):
        suffixes = iter([1234, 1234, 42])
        monkeypatch.setattr(numbering.random, "randint", lambda a, b: next(suffixes))
        repo = _Numbers(taken={"YP2610-1234"})
        assert generate_order_number(repo, now=NOW) == "YP2610-0042"
        assert repo.checked == ["YP2610-1234", "YP2610-1234", "YP2610-0042"]

    def test_widens_suffix_after_repeated_collisions(self):
        repo = _Numbers(taken_widths={4})
        number = generate_order_number(repo, now=NOW)
        assert re.fullmatch(r"YP2610-\d{6}", number)
        assert len(repo.checked) == MAX_ATTEMPTS + 1

    def test_defaults_to_current_month(self):
        number = generate_order_number(_Numbers())
        assert number.startswith(f"YP{datetime.now(UTC):%y%m}-")
