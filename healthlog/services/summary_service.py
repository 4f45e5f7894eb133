"""Descriptive statistics and timeline data for the insights view."""

import logging
from datetime import date
from typing import Dict, Iterable, List, Sequence

from healthlog.models import (
    AllergyWarning,
    Correlation,
    DayTypeStats,
    FoodEvent,
    FoodTimelinePoint,
    LogBundle,
    PositiveCorrelation,
    SummaryStats,
    SymptomEvent,
    SymptomTimelinePoint,
    TimelinePoint,
)
from healthlog.models.analysis import EntryTotals
from healthlog.services.context_service import DailyContext
from healthlog.services.frequency import count_ingredients, normalize_symptom
from healthlog.services.temporal import event_instant

logger = logging.getLogger(__name__)


def most_frequent(counts: Dict[str, int]) -> str:
    """Key with the highest count; the first one seen wins ties. "None" if empty."""
    top = "None"
    max_count = 0
    for key, count in counts.items():
        if count > max_count:
            max_count = count
            top = key
    return top


def day_type_stats(days: Iterable[date], context: DailyContext) -> DayTypeStats:
    """
    Average lifestyle factors over a set of days.

    Days without water logged count as 0 ml. Sleep is averaged only over
    days that have a sleep score.
    """
    days = sorted(days)
    if not days:
        return DayTypeStats()

    water = [context.water_total(d) for d in days]
    sleep = [q for q in (context.sleep_quality(d) for d in days) if q is not None]
    exercise_days = sum(1 for d in days if context.exercised(d))

    return DayTypeStats(
        days=len(days),
        average_water_ml=round(sum(water) / len(days), 1),
        average_sleep_quality=round(sum(sleep) / len(sleep), 1) if sleep else None,
        exercise_rate=round(exercise_days / len(days) * 100, 1),
    )


class SummaryService:
    """Service for summary statistics and chronological timelines."""

    @staticmethod
    def summarize(
        bundle: LogBundle,
        correlations: Sequence[Correlation] = (),
        positive_correlations: Sequence[PositiveCorrelation] = (),
        warnings: Sequence[AllergyWarning] = (),
    ) -> SummaryStats:
        """
        Compute descriptive statistics for an analysis period.

        Args:
            bundle: Logs for the analysis period
            correlations: Symptom correlations for the same period
            positive_correlations: Wellness correlations for the same period
            warnings: Allergy warnings

        Returns:
            SummaryStats; all zeros and "None" for an empty bundle
        """
        all_dates = bundle.logged_dates()
        symptom_dates = {s.date for s in bundle.symptoms}
        good_dates = all_dates - symptom_dates

        symptom_counts: Dict[str, int] = {}
        for entry in bundle.symptoms:
            name = normalize_symptom(entry.symptom)
            if name:
                symptom_counts[name] = symptom_counts.get(name, 0) + 1

        context = DailyContext.from_bundle(bundle)

        stats = SummaryStats(
            total_days=len(all_dates),
            symptom_days=len(symptom_dates),
            symptom_free_days=len(all_dates) - len(symptom_dates),
            top_ingredient=most_frequent(count_ingredients(bundle.food)),
            top_symptom=most_frequent(symptom_counts),
            total_entries=EntryTotals(food=len(bundle.food), symptoms=len(bundle.symptoms)),
            symptom_day_stats=day_type_stats(symptom_dates, context),
            good_day_stats=day_type_stats(good_dates, context),
            correlation_count=len(correlations),
            high_confidence_count=sum(1 for c in correlations if c.confidence == "high"),
            positive_correlation_count=len(positive_correlations),
            allergy_warning_count=len(warnings),
        )

        logger.debug(
            "summarize: %d days (%d with symptoms), top ingredient=%s, top symptom=%s",
            stats.total_days,
            stats.symptom_days,
            stats.top_ingredient,
            stats.top_symptom,
        )
        return stats

    @staticmethod
    def build_timeline(
        food_events: Sequence[FoodEvent], symptom_events: Sequence[SymptomEvent]
    ) -> List[TimelinePoint]:
        """Merge food and symptom events into one list sorted by time."""
        points: List[TimelinePoint] = []

        for entry in food_events:
            points.append(
                FoodTimelinePoint(
                    date=entry.date,
                    time=entry.time,
                    timestamp=event_instant(entry),
                    description=entry.description,
                    payload=entry,
                )
            )

        for entry in symptom_events:
            points.append(
                SymptomTimelinePoint(
                    date=entry.date,
                    time=entry.time,
                    timestamp=event_instant(entry),
                    description=entry.symptom,
                    payload=entry,
                )
            )

        points.sort(key=lambda p: p.timestamp)
        return points


# Singleton instance
summary_service = SummaryService()
