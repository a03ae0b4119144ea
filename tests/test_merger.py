"""
Unit tests for merging provider options with the KITAS overrides.
"""

import itertools

import pytest

from visagate.datasource.kitas import KITAS_OVERRIDES
from visagate.datasource.types import VisaOption
from visagate.services.merger import merge_and_sort


def make_option(option_id: str, days: int, cost: float, priority: int = 100) -> VisaOption:
    return VisaOption(
        id=option_id,
        name=option_id,
        type="iVisa",
        visa_required=True,
        processing_time=f"{days} days",
        processing_time_days=days,
        cost=cost,
        cost_currency="USD",
        description="",
        requirements=(),
        validity="90 days",
        source="iVisa",
        priority=priority,
    )


class TestMergeAndSort:
    """Test cases for merge_and_sort."""

    @pytest.fixture
    def options(self):
        return [
            make_option("six-expensive", 6, 149.99, priority=100),
            make_option("six-cheap", 6, 99.99, priority=101),
            make_option("fifteen", 15, 1_500_000, priority=102),
        ]

    def test_orders_by_days_then_cost_for_every_input_order(self, options):
        for permutation in itertools.permutations(options):
            result = merge_and_sort(permutation, "US", KITAS_OVERRIDES)
            assert [o.id for o in result] == ["six-cheap", "six-expensive", "fifteen"]

    def test_priority_breaks_remaining_ties(self):
        low = make_option("low", 5, 10.0, priority=1)
        high = make_option("high", 5, 10.0, priority=7)
        assert [o.id for o in merge_and_sort([high, low], "US", ())] == ["low", "high"]

    def test_full_ties_keep_input_order(self):
        first = make_option("first", 5, 10.0, priority=1)
        second = make_option("second", 5, 10.0, priority=1)
        assert [o.id for o in merge_and_sort([first, second], "US", ())] == [
            "first",
            "second",
        ]
        assert [o.id for o in merge_and_sort([second, first], "US", ())] == [
            "second",
            "first",
        ]

    @pytest.mark.parametrize("destination", ["ID", "id", "Id"])
    def test_overrides_included_for_indonesia(self, options, destination):
        result = merge_and_sort(options, destination, KITAS_OVERRIDES)
        assert len(result) == len(options) + len(KITAS_OVERRIDES)
        for override in KITAS_OVERRIDES:
            assert override in result

    def test_overrides_excluded_elsewhere(self, options):
        result = merge_and_sort(options, "US", KITAS_OVERRIDES)
        assert not any(o.type == "KITAS" for o in result)
        assert len(result) == len(options)

    def test_cost_compared_without_currency_conversion(self):
        usd = make_option("usd", 15, 2_000_000.0)
        result = merge_and_sort([usd], "ID", KITAS_OVERRIDES)
        family = next(o for o in result if o.id == "kitas-family")
        # 15 days each; IDR 1,500,000 sorts before "USD" 2,000,000
        assert result.index(family) < result.index(usd)

    def test_inputs_are_not_mutated(self, options):
        snapshot = list(options)
        merge_and_sort(options, "ID", KITAS_OVERRIDES)
        assert options == snapshot

    def test_overrides_sorted_among_themselves(self):
        result = merge_and_sort([], "ID", KITAS_OVERRIDES)
        assert [o.id for o in result] == [
            "kitas-family",
            "kitas-student",
            "kitas-work",
            "kitas-investment",
        ]
