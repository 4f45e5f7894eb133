"""Same-day lifestyle context for food exposures."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from healthlog.config import settings
from healthlog.models import (
    ExerciseEvent,
    FoodEvent,
    KnownAllergy,
    LogBundle,
    MedicationLogEvent,
    SleepSample,
    WaterEvent,
)
from healthlog.services.temporal import event_instant

logger = logging.getLogger(__name__)


# Conditions that may make a symptom more likely
LOW_HYDRATION = "low_hydration"
POOR_SLEEP = "poor_sleep"
NO_EXERCISE = "no_exercise"
RISK_FACTORS = (LOW_HYDRATION, POOR_SLEEP, NO_EXERCISE)

# Conditions that may make a symptom less likely
ADEQUATE_HYDRATION = "adequate_hydration"
GOOD_SLEEP = "good_sleep"
EXERCISE = "exercise"
PROTECTIVE_FACTORS = (ADEQUATE_HYDRATION, GOOD_SLEEP, EXERCISE)


def allergy_matches(ingredient: str, allergy_name: str) -> bool:
    """Case-insensitive substring match in either direction."""
    ingredient = ingredient.strip().lower()
    allergy_name = allergy_name.strip().lower()
    if not ingredient or not allergy_name:
        return False
    return allergy_name in ingredient or ingredient in allergy_name


@dataclass(frozen=True)
class ExposureContext:
    """Lifestyle context around a single food event."""

    water_ml: float
    sleep_quality: Optional[int]
    exercised: bool
    medications: Tuple[str, ...]
    risk_factors: Tuple[str, ...]
    protective_factors: Tuple[str, ...]


class DailyContext:
    """Per-day hydration, sleep, exercise and medication lookups for one bundle."""

    LOW_WATER_ML = settings.low_water_ml
    ADEQUATE_WATER_ML = settings.adequate_water_ml
    POOR_SLEEP_BELOW = settings.poor_sleep_below
    GOOD_SLEEP_FROM = settings.good_sleep_from
    MEDICATION_WINDOW = timedelta(hours=settings.medication_window_hours)

    def __init__(
        self,
        water: Iterable[WaterEvent] = (),
        sleep: Iterable[SleepSample] = (),
        exercise: Iterable[ExerciseEvent] = (),
        medications: Iterable[MedicationLogEvent] = (),
        allergies: Iterable[KnownAllergy] = (),
    ):
        self._water: Dict[date, float] = {}
        for entry in water:
            self._water[entry.date] = self._water.get(entry.date, 0.0) + entry.amount

        # First sample for a date wins
        self._sleep: Dict[date, int] = {}
        for sample in sleep:
            self._sleep.setdefault(sample.date, sample.quality)

        self._exercise_days = {entry.date for entry in exercise}
        self._medications: List[Tuple[datetime, str]] = [
            (event_instant(m), m.medication_name) for m in medications
        ]
        self.allergies: List[KnownAllergy] = list(allergies)

    @classmethod
    def from_bundle(cls, bundle: LogBundle) -> "DailyContext":
        return cls(
            water=bundle.water,
            sleep=bundle.sleep,
            exercise=bundle.exercise,
            medications=bundle.medications,
            allergies=bundle.allergies,
        )

    def water_total(self, day: date) -> float:
        return self._water.get(day, 0.0)

    def sleep_quality(self, day: date) -> Optional[int]:
        return self._sleep.get(day)

    def exercised(self, day: date) -> bool:
        return day in self._exercise_days

    def active_medications(self, at: datetime) -> List[str]:
        """Medications logged in the trailing window up to and including ``at``."""
        start = at - self.MEDICATION_WINDOW
        names: List[str] = []
        for logged_at, name in self._medications:
            if start <= logged_at <= at and name not in names:
                names.append(name)
        return names

    def matching_allergies(self, ingredient: str) -> List[KnownAllergy]:
        return [a for a in self.allergies if allergy_matches(ingredient, a.name)]

    def is_known_allergen(self, ingredient: str) -> bool:
        return any(allergy_matches(ingredient, a.name) for a in self.allergies)

    def exposure_context(self, food_event: FoodEvent) -> ExposureContext:
        """
        Tag a food event with the lifestyle conditions of its day.

        Hydration between the low and adequate thresholds and a middling or
        missing sleep score contribute neither a risk nor a protective flag.
        """
        day = food_event.date
        water_ml = self.water_total(day)
        sleep = self.sleep_quality(day)
        exercised = self.exercised(day)

        risk: List[str] = []
        protective: List[str] = []

        if water_ml < self.LOW_WATER_ML:
            risk.append(LOW_HYDRATION)
        elif water_ml >= self.ADEQUATE_WATER_ML:
            protective.append(ADEQUATE_HYDRATION)

        if sleep is not None:
            if sleep < self.POOR_SLEEP_BELOW:
                risk.append(POOR_SLEEP)
            elif sleep >= self.GOOD_SLEEP_FROM:
                protective.append(GOOD_SLEEP)

        if exercised:
            protective.append(EXERCISE)
        else:
            risk.append(NO_EXERCISE)

        return ExposureContext(
            water_ml=water_ml,
            sleep_quality=sleep,
            exercised=exercised,
            medications=tuple(self.active_medications(event_instant(food_event))),
            risk_factors=tuple(risk),
            protective_factors=tuple(protective),
        )


def protective_factors_for(
    exposures: Iterable[Tuple[ExposureContext, bool]],
) -> List[str]:
    """
    Find conditions associated with an outcome NOT following an exposure.

    Builds a 2x2 table per protective condition from every exposure of an
    ingredient: outcome rate when the condition held vs. when it did not.
    A condition is protective when both groups are non-empty and the rate
    with the condition is strictly lower.

    Args:
        exposures: (context, outcome_followed) for each exposure

    Returns:
        Protective condition names in PROTECTIVE_FACTORS order
    """
    exposures = list(exposures)
    found = []
    for factor in PROTECTIVE_FACTORS:
        with_hits = with_total = without_hits = without_total = 0
        for context, followed in exposures:
            if factor in context.protective_factors:
                with_total += 1
                with_hits += int(followed)
            else:
                without_total += 1
                without_hits += int(followed)

        if with_total == 0 or without_total == 0:
            continue
        # with_hits / with_total < without_hits / without_total
        if with_hits * without_total < without_hits * with_total:
            found.append(factor)

    logger.debug(
        "protective_factors_for: %d exposures, protective=%s", len(exposures), found
    )
    return found
