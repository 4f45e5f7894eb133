"""Insights service orchestrating a full analysis run."""

import logging
from datetime import date, timedelta
from typing import List, Optional

from pydantic import BaseModel

from healthlog.models import (
    AllergyWarning,
    Correlation,
    LogBundle,
    PositiveCorrelation,
    SummaryStats,
    TimelinePoint,
)
from healthlog.services.correlation_service import CorrelationService
from healthlog.services.summary_service import SummaryService

logger = logging.getLogger(__name__)


class InsightsReport(BaseModel):
    """Everything the insights view shows for one analysis period."""

    window_hours: float
    date_range_start: Optional[date] = None
    correlations: List[Correlation] = []
    enhanced_correlations: List[Correlation] = []
    positive_correlations: List[PositiveCorrelation] = []
    allergy_warnings: List[AllergyWarning] = []
    summary: SummaryStats
    timeline: List[TimelinePoint] = []


class InsightsService:
    """Service for running a complete insights analysis over a log snapshot."""

    def __init__(self, correlation_service: Optional[CorrelationService] = None):
        """Initialize insights service."""
        self.correlations = correlation_service or CorrelationService()

    def analyze(
        self,
        bundle: LogBundle,
        today: date,
        window_hours: Optional[float] = None,
        date_range_days: Optional[int] = None,
        lookback_days: Optional[int] = None,
    ) -> InsightsReport:
        """
        Run complete insights analysis.

        Orchestrates the analysis flow:
        1. Apply the date-range cutoff (None = all time)
        2. Build plain and context-enhanced symptom correlations
        3. Build positive (wellness) correlations
        4. Detect recent allergy exposures
        5. Summarize and build the timeline

        Args:
            bundle: Snapshot of every log category
            today: Reference date; the engine never reads the clock itself
            window_hours: Time window between meal and outcome
            date_range_days: Only analyze the last N days
            lookback_days: Allergy detection lookback

        Returns:
            InsightsReport
        """
        if window_hours is None:
            window_hours = self.correlations.DEFAULT_WINDOW_HOURS

        start = None
        if date_range_days is not None:
            start = today - timedelta(days=date_range_days)
            bundle = bundle.since(start)

        correlations = self.correlations.build_correlations(
            bundle.food, bundle.symptoms, window_hours
        )
        enhanced = self.correlations.build_enhanced_correlations(bundle, window_hours)
        positive = self.correlations.build_positive_correlations(bundle, window_hours)
        warnings = self.correlations.detect_allergy_warnings(
            bundle.food, bundle.allergies, today, lookback_days
        )

        report = InsightsReport(
            window_hours=window_hours,
            date_range_start=start,
            correlations=correlations,
            enhanced_correlations=enhanced,
            positive_correlations=positive,
            allergy_warnings=warnings,
            summary=SummaryService.summarize(bundle, enhanced, positive, warnings),
            timeline=SummaryService.build_timeline(bundle.food, bundle.symptoms),
        )

        logger.info(
            "Insights analysis: %d food, %d symptom entries since %s -> %d correlations, "
            "%d positive, %d allergy warnings",
            len(bundle.food),
            len(bundle.symptoms),
            start or "all time",
            len(correlations),
            len(positive),
            len(warnings),
        )
        return report


# Singleton instance
insights_service = InsightsService()
