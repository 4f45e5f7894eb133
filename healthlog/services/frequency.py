"""Frequency counting for ingredients and ingredient-outcome pairs."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Tuple

from healthlog.models import FoodEvent


def normalize_ingredient(name: str) -> str:
    return name.strip().lower()


def normalize_symptom(name: str) -> str:
    """Trimmed symptom name; an empty result means the entry names no symptom."""
    return name.strip()


def iter_ingredients(food_events: Iterable[FoodEvent]) -> Iterator[Tuple[FoodEvent, str]]:
    """
    Yield (food_event, normalized_ingredient) for every listed ingredient.

    Blank ingredient strings are skipped; entries without ingredients
    yield nothing. An ingredient listed twice in one entry is yielded twice.
    """
    for event in food_events:
        for ingredient in event.ingredients:
            normalized = normalize_ingredient(ingredient)
            if normalized:
                yield event, normalized


def count_ingredients(food_events: Iterable[FoodEvent]) -> Dict[str, int]:
    """Total consumption count per normalized ingredient, in first-seen order."""
    counts: Dict[str, int] = {}
    for _, ingredient in iter_ingredients(food_events):
        counts[ingredient] = counts.get(ingredient, 0) + 1
    return counts


@dataclass
class OutcomeTally:
    """Running statistics for one (ingredient, outcome) pair."""

    ingredient: str
    outcome: str
    occurrences: int = 0
    delays: List[int] = field(default_factory=list)  # minutes
    factor_counts: Dict[str, int] = field(default_factory=dict)
    medication_counts: Dict[str, int] = field(default_factory=dict)

    def record(
        self,
        delay_minutes: int,
        factors: Iterable[str] = (),
        medications: Iterable[str] = (),
    ) -> None:
        self.occurrences += 1
        self.delays.append(delay_minutes)
        for factor in factors:
            self.factor_counts[factor] = self.factor_counts.get(factor, 0) + 1
        for name in set(medications):
            self.medication_counts[name] = self.medication_counts.get(name, 0) + 1

    @property
    def average_delay_minutes(self) -> float:
        if not self.delays:
            return 0.0
        return sum(self.delays) / len(self.delays)

    def majority_factors(self) -> List[str]:
        """Factors that held in more than half of the occurrences."""
        return [f for f, n in self.factor_counts.items() if n * 2 > self.occurrences]

    def majority_medications(self) -> List[str]:
        return [m for m, n in self.medication_counts.items() if n * 2 > self.occurrences]


class OutcomeAggregator:
    """Tallies keyed by (ingredient, outcome), iterated in first-seen order."""

    def __init__(self):
        self._tallies: Dict[Tuple[str, str], OutcomeTally] = {}

    def record(
        self,
        ingredient: str,
        outcome: str,
        delay_minutes: int,
        factors: Iterable[str] = (),
        medications: Iterable[str] = (),
    ) -> OutcomeTally:
        key = (ingredient, outcome)
        tally = self._tallies.get(key)
        if tally is None:
            tally = OutcomeTally(ingredient=ingredient, outcome=outcome)
            self._tallies[key] = tally
        tally.record(delay_minutes, factors, medications)
        return tally

    def get(self, ingredient: str, outcome: str) -> OutcomeTally | None:
        return self._tallies.get((ingredient, outcome))

    def __iter__(self) -> Iterator[OutcomeTally]:
        return iter(self._tallies.values())

    def __len__(self) -> int:
        return len(self._tallies)
