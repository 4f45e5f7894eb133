"""Correlation service for ingredient-symptom and ingredient-wellness associations."""

import logging
import math
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from healthlog.config import settings
from healthlog.models import (
    AllergyMatch,
    AllergyWarning,
    Correlation,
    FoodEvent,
    KnownAllergy,
    LogBundle,
    PositiveCorrelation,
    SymptomEvent,
    WellnessSample,
)
from healthlog.services.context_service import (
    RISK_FACTORS,
    DailyContext,
    ExposureContext,
    allergy_matches,
    protective_factors_for,
)
from healthlog.services.frequency import (
    OutcomeAggregator,
    OutcomeTally,
    count_ingredients,
    iter_ingredients,
    normalize_symptom,
)
from healthlog.services.temporal import (
    combine,
    event_instant,
    events_after,
    in_window,
    minutes_between,
)

logger = logging.getLogger(__name__)


# Wellness fields that count as an improvement when the mood is "happy"
IMPROVEMENT_CATEGORIES = (
    ("overall", "overall_mood"),
    ("morning", "morning_energy"),
    ("afternoon", "afternoon_energy"),
    ("evening", "evening_mood"),
)

ALLERGY_ACTIONS = {
    "anaphylaxis": "URGENT: Avoid completely. Carry your emergency medication and seek immediate care after any exposure.",
    "severe": "Strongly avoid this food and discuss the exposure with your doctor.",
}
DEFAULT_ALLERGY_ACTION = "Consider avoiding or limiting this food."

# Per food event: outcome name -> minutes to its earliest occurrence
OutcomeDelays = Dict[str, int]


def round_half_up(value: float, digits: int = 1) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def format_window(window_hours: float) -> str:
    return f"{window_hours:g}hr"


def format_delay(hours: float) -> str:
    return f"{hours:.1f} hours"


class CorrelationService:
    """Service for building correlations from a snapshot of journal logs."""

    # Minimum sample sizes (loaded from central config)
    MIN_SYMPTOM_OCCURRENCES = settings.min_symptom_occurrences
    HIGH_CONFIDENCE_OCCURRENCES = settings.high_confidence_occurrences
    MEDIUM_CONFIDENCE_OCCURRENCES = settings.medium_confidence_occurrences
    POSITIVE_MIN_OCCURRENCES = settings.positive_min_occurrences
    POSITIVE_MIN_PERCENTAGE = settings.positive_min_percentage

    DEFAULT_WINDOW_HOURS = settings.default_window_hours
    ALLERGY_LOOKBACK_DAYS = settings.allergy_lookback_days
    WELLNESS_TIME = settings.wellness_nominal_time

    def confidence_tier(self, occurrences: int) -> str:
        """Coarse reliability label from the occurrence count alone."""
        if occurrences >= self.HIGH_CONFIDENCE_OCCURRENCES:
            return "high"
        if occurrences >= self.MEDIUM_CONFIDENCE_OCCURRENCES:
            return "medium"
        return "low"

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def _symptom_delays(
        self, anchor: datetime, symptoms: Sequence[SymptomEvent], window_minutes: float
    ) -> OutcomeDelays:
        """Earliest delay per symptom name within the window after anchor."""
        delays: OutcomeDelays = {}
        for symptom in events_after(anchor, symptoms, window_minutes):
            name = normalize_symptom(symptom.symptom)
            if not name:
                continue
            delay = minutes_between(anchor, event_instant(symptom))
            if name not in delays or delay < delays[name]:
                delays[name] = delay
        return delays

    def _wellness_delays(
        self, anchor: datetime, samples: Sequence[WellnessSample], window_minutes: float
    ) -> OutcomeDelays:
        """Earliest delay per improvement category within the window after anchor."""
        delays: OutcomeDelays = {}
        for sample in samples:
            instant = combine(sample.date, self.WELLNESS_TIME)
            if not in_window(anchor, instant, window_minutes):
                continue
            delay = minutes_between(anchor, instant)
            for field_name, category in IMPROVEMENT_CATEGORIES:
                if getattr(sample, field_name) != "happy":
                    continue
                if category not in delays or delay < delays[category]:
                    delays[category] = delay
        return delays

    def _aggregate_symptoms(
        self,
        food_events: Iterable[FoodEvent],
        symptom_events: Sequence[SymptomEvent],
        window_hours: float,
        context: Optional[DailyContext] = None,
    ) -> Tuple[OutcomeAggregator, Dict[str, List[Tuple[ExposureContext, Set[str]]]]]:
        """
        Join food events to the symptoms that followed them.

        Each ingredient occurrence is counted at most once per symptom name,
        using the earliest matching symptom for its delay.

        Returns:
            Tuple of (aggregator, exposures) where exposures maps each
            ingredient to (context, symptom names that followed) for every
            time it was eaten. Exposures are only collected with a context.
        """
        window_minutes = window_hours * 60
        aggregator = OutcomeAggregator()
        exposures: Dict[str, List[Tuple[ExposureContext, Set[str]]]] = {}

        for food in food_events:
            if not food.ingredients:
                continue
            anchor = event_instant(food)
            delays = self._symptom_delays(anchor, symptom_events, window_minutes)
            exposure = context.exposure_context(food) if context else None

            for _, ingredient in iter_ingredients([food]):
                for symptom, delay in delays.items():
                    if exposure is None:
                        aggregator.record(ingredient, symptom, delay)
                    else:
                        aggregator.record(
                            ingredient,
                            symptom,
                            delay,
                            factors=exposure.risk_factors,
                            medications=exposure.medications,
                        )
                if exposure is not None:
                    exposures.setdefault(ingredient, []).append((exposure, set(delays)))

        return aggregator, exposures

    # ------------------------------------------------------------------
    # Record building
    # ------------------------------------------------------------------

    def _correlation_from_tally(
        self, tally: OutcomeTally, total: int, window_hours: float
    ) -> Correlation:
        hours = round_half_up(tally.average_delay_minutes / 60)
        return Correlation(
            id=f"{tally.ingredient}|{tally.outcome}",
            ingredient=tally.ingredient,
            symptom=tally.outcome,
            occurrences=tally.occurrences,
            total=total,
            percentage=round_half_up(tally.occurrences / total * 100),
            average_delay_hours=hours,
            average_delay=format_delay(hours),
            time_window=format_window(window_hours),
            confidence=self.confidence_tier(tally.occurrences),
        )

    def build_correlations(
        self,
        food_events: Sequence[FoodEvent],
        symptom_events: Sequence[SymptomEvent],
        window_hours: Optional[float] = None,
    ) -> List[Correlation]:
        """
        Find ingredients that were repeatedly followed by a symptom.

        Pairs with fewer than MIN_SYMPTOM_OCCURRENCES occurrences are dropped.
        The result is sorted by percentage descending; equal percentages keep
        the order in which the pair was first seen.

        Args:
            food_events: Food log (already filtered to the analysis period)
            symptom_events: Symptom log for the same period
            window_hours: Maximum hours between eating and the symptom

        Returns:
            List of Correlation records
        """
        if window_hours is None:
            window_hours = self.DEFAULT_WINDOW_HOURS
        aggregator, _ = self._aggregate_symptoms(food_events, symptom_events, window_hours)
        totals = count_ingredients(food_events)

        correlations = [
            self._correlation_from_tally(tally, totals[tally.ingredient], window_hours)
            for tally in aggregator
            if tally.occurrences >= self.MIN_SYMPTOM_OCCURRENCES
        ]
        correlations.sort(key=lambda c: c.percentage, reverse=True)

        logger.debug(
            "build_correlations: %d pairs observed, %d above threshold (window=%sh)",
            len(aggregator),
            len(correlations),
            window_hours,
        )
        return correlations

    def build_enhanced_correlations(
        self, bundle: LogBundle, window_hours: Optional[float] = None
    ) -> List[Correlation]:
        """
        Build correlations annotated with lifestyle context.

        On top of build_correlations() each record carries:
        - risk_factors: risk conditions present in a strict majority of occurrences
        - protective_factors: conditions under which the symptom followed
          less often than without them (see protective_factors_for)
        - medications: medications active in a strict majority of occurrences
        - known_allergy: the ingredient matches a known allergy
        """
        if window_hours is None:
            window_hours = self.DEFAULT_WINDOW_HOURS
        context = DailyContext.from_bundle(bundle)
        aggregator, exposures = self._aggregate_symptoms(
            bundle.food, bundle.symptoms, window_hours, context=context
        )
        totals = count_ingredients(bundle.food)

        correlations = []
        for tally in aggregator:
            if tally.occurrences < self.MIN_SYMPTOM_OCCURRENCES:
                continue

            correlation = self._correlation_from_tally(
                tally, totals[tally.ingredient], window_hours
            )
            majority = set(tally.majority_factors())
            correlation.risk_factors = [f for f in RISK_FACTORS if f in majority]
            correlation.protective_factors = protective_factors_for(
                (exposure, tally.outcome in followed)
                for exposure, followed in exposures.get(tally.ingredient, [])
            )
            correlation.medications = tally.majority_medications()
            correlation.known_allergy = context.is_known_allergen(tally.ingredient)
            correlations.append(correlation)

        correlations.sort(key=lambda c: c.percentage, reverse=True)

        logger.debug(
            "build_enhanced_correlations: %d correlations, %d with risk factors",
            len(correlations),
            sum(1 for c in correlations if c.risk_factors),
        )
        return correlations

    def build_positive_correlations(
        self, bundle: LogBundle, window_hours: Optional[float] = None
    ) -> List[PositiveCorrelation]:
        """
        Find ingredients that were repeatedly followed by a good day.

        Wellness samples have no clock time and are placed at WELLNESS_TIME
        on their date. Each "happy" field yields one improvement category.
        Pairs need POSITIVE_MIN_OCCURRENCES occurrences and a rate of at
        least POSITIVE_MIN_PERCENTAGE.
        """
        if window_hours is None:
            window_hours = self.DEFAULT_WINDOW_HOURS
        window_minutes = window_hours * 60
        aggregator = OutcomeAggregator()

        for food in bundle.food:
            if not food.ingredients:
                continue
            anchor = event_instant(food)
            delays = self._wellness_delays(anchor, bundle.wellness, window_minutes)
            for _, ingredient in iter_ingredients([food]):
                for category, delay in delays.items():
                    aggregator.record(ingredient, category, delay)

        totals = count_ingredients(bundle.food)
        positives = []
        for tally in aggregator:
            total = totals[tally.ingredient]
            rate = tally.occurrences / total * 100
            if tally.occurrences < self.POSITIVE_MIN_OCCURRENCES or rate < self.POSITIVE_MIN_PERCENTAGE:
                continue

            hours = round_half_up(tally.average_delay_minutes / 60)
            positives.append(
                PositiveCorrelation(
                    id=f"{tally.ingredient}|{tally.outcome}",
                    ingredient=tally.ingredient,
                    improvement=tally.outcome,
                    occurrences=tally.occurrences,
                    total=total,
                    percentage=round_half_up(rate),
                    average_delay_hours=hours,
                    average_delay=format_delay(hours),
                    time_window=format_window(window_hours),
                    confidence=self.confidence_tier(tally.occurrences),
                )
            )

        positives.sort(key=lambda c: c.percentage, reverse=True)
        logger.debug("build_positive_correlations: %d positive correlations", len(positives))
        return positives

    # ------------------------------------------------------------------
    # Allergies
    # ------------------------------------------------------------------

    def allergy_action(self, severity: str) -> str:
        return ALLERGY_ACTIONS.get(severity, DEFAULT_ALLERGY_ACTION)

    def detect_allergy_warnings(
        self,
        food_events: Sequence[FoodEvent],
        allergies: Sequence[KnownAllergy],
        today: date,
        lookback_days: Optional[int] = None,
    ) -> List[AllergyWarning]:
        """
        Flag recent meals containing a known allergen.

        Args:
            food_events: Food log
            allergies: Known allergies
            today: Reference date supplied by the caller
            lookback_days: Days before ``today`` to scan (default ALLERGY_LOOKBACK_DAYS)

        Returns:
            One AllergyWarning per allergy with at least one matching meal
        """
        if lookback_days is None:
            lookback_days = self.ALLERGY_LOOKBACK_DAYS
        cutoff = today - timedelta(days=lookback_days)
        recent = [food for food in food_events if food.date >= cutoff]

        warnings = []
        for allergy in allergies:
            matches = []
            for food in recent:
                hits = [i for i in food.ingredients if allergy_matches(i, allergy.name)]
                if hits:
                    matches.append(
                        AllergyMatch(date=food.date, description=food.description, ingredients=hits)
                    )
            if matches:
                warnings.append(
                    AllergyWarning(
                        allergy=allergy.name,
                        severity=allergy.severity,
                        matches=matches,
                        action=self.allergy_action(allergy.severity),
                    )
                )

        if warnings:
            logger.info(
                "detect_allergy_warnings: %d allergies matched meals since %s",
                len(warnings),
                cutoff,
            )
        return warnings


# Singleton instance
correlation_service = CorrelationService()
