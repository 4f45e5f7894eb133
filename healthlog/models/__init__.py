"""
Data models for healthlog.

Log entries come from the journal's record store; analysis models are
produced by the insights engine.
"""

from healthlog.models.logs import (
    FoodEvent,
    SymptomEvent,
    WaterEvent,
    ExerciseEvent,
    MedicationLogEvent,
    SleepSample,
    WellnessSample,
    KnownAllergy,
    LogBundle,
)
from healthlog.models.analysis import (
    Correlation,
    PositiveCorrelation,
    AllergyMatch,
    AllergyWarning,
    DayTypeStats,
    SummaryStats,
    FoodTimelinePoint,
    SymptomTimelinePoint,
    TimelinePoint,
    SymptomPrediction,
    ImprovementPrediction,
    MealPrediction,
)

__all__ = [
    "FoodEvent",
    "SymptomEvent",
    "WaterEvent",
    "ExerciseEvent",
    "MedicationLogEvent",
    "SleepSample",
    "WellnessSample",
    "KnownAllergy",
    "LogBundle",
    "Correlation",
    "PositiveCorrelation",
    "AllergyMatch",
    "AllergyWarning",
    "DayTypeStats",
    "SummaryStats",
    "FoodTimelinePoint",
    "SymptomTimelinePoint",
    "TimelinePoint",
    "SymptomPrediction",
    "ImprovementPrediction",
    "MealPrediction",
]
