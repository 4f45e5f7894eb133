"""Unit tests for ingredient and outcome frequency counting."""

from healthlog.services.frequency import (
    OutcomeAggregator,
    OutcomeTally,
    count_ingredients,
    iter_ingredients,
    normalize_ingredient,
)
from tests.factories import create_food


class TestNormalizeIngredient:
    def test_trims_and_lowercases(self):
        assert normalize_ingredient("  Whole Milk ") == "whole milk"


class TestCountIngredients:
    """Tests for total consumption counts."""

    def test_counts_across_entries(self):
        food = [
            create_food("2024-01-01", ingredients=["Milk", "bread"]),
            create_food("2024-01-02", ingredients=["milk "]),
        ]

        assert count_ingredients(food) == {"milk": 2, "bread": 1}

    def test_duplicate_in_one_entry_counts_twice(self):
        """Test that an ingredient listed twice in one entry counts twice."""
        food = [create_food(ingredients=["milk", "Milk"])]

        assert count_ingredients(food) == {"milk": 2}

    def test_entries_without_ingredients_are_ignored(self):
        food = [create_food(ingredients=[]), create_food(ingredients=["  "])]

        assert count_ingredients(food) == {}

    def test_first_seen_order(self):
        food = [
            create_food(ingredients=["rice", "beans"]),
            create_food(ingredients=["beans", "corn"]),
        ]

        assert list(count_ingredients(food)) == ["rice", "beans", "corn"]

    def test_iter_ingredients_pairs_event(self):
        entry = create_food(ingredients=["Egg"])

        assert list(iter_ingredients([entry])) == [(entry, "egg")]


class TestOutcomeTally:
    """Tests for per-pair running statistics."""

    def test_record_accumulates(self):
        tally = OutcomeTally(ingredient="milk", outcome="bloating")
        tally.record(240, factors=["low_hydration"], medications=["lactase"])
        tally.record(180, factors=["low_hydration", "poor_sleep"])

        assert tally.occurrences == 2
        assert tally.delays == [240, 180]
        assert tally.average_delay_minutes == 210
        assert tally.factor_counts == {"low_hydration": 2, "poor_sleep": 1}
        assert tally.medication_counts == {"lactase": 1}

    def test_majority_is_strict(self):
        """Test that a factor present in exactly half the occurrences is not a majority."""
        tally = OutcomeTally(ingredient="milk", outcome="bloating")
        tally.record(60, factors=["poor_sleep", "no_exercise"])
        tally.record(60, factors=["no_exercise"])

        assert tally.majority_factors() == ["no_exercise"]

    def test_medication_counted_once_per_occurrence(self):
        tally = OutcomeTally(ingredient="milk", outcome="bloating")
        tally.record(60, medications=["ibuprofen", "ibuprofen"])

        assert tally.medication_counts == {"ibuprofen": 1}
        assert tally.majority_medications() == ["ibuprofen"]

    def test_average_delay_without_records(self):
        assert OutcomeTally(ingredient="a", outcome="b").average_delay_minutes == 0.0


class TestOutcomeAggregator:
    def test_keys_are_independent(self):
        """Test that one ingredient can match several outcomes independently."""
        aggregator = OutcomeAggregator()
        aggregator.record("milk", "bloating", 60)
        aggregator.record("milk", "gas", 90)
        aggregator.record("milk", "bloating", 120)

        assert len(aggregator) == 2
        assert aggregator.get("milk", "bloating").occurrences == 2
        assert aggregator.get("milk", "gas").occurrences == 1
        assert aggregator.get("bread", "gas") is None

    def test_iterates_in_first_seen_order(self):
        aggregator = OutcomeAggregator()
        aggregator.record("b", "x", 1)
        aggregator.record("a", "x", 1)
        aggregator.record("b", "x", 1)

        assert [(t.ingredient, t.outcome) for t in aggregator] == [("b", "x"), ("a", "x")]
