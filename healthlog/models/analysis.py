"""
Analysis results produced by the insights engine.

These are recomputed on every analysis run and never persisted.
"""

from datetime import date as Date, datetime, time as Time
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, Field

from healthlog.models.logs import AllergySeverity, FoodEvent, SymptomEvent


Confidence = Literal["low", "medium", "high"]
PredictedSeverity = Literal["mild", "moderate", "severe"]
RiskLevel = Literal["low", "medium", "high"]


# --- Correlations ---


class Correlation(BaseModel):
    # id, occurrences and total may be omitted on records supplied for prediction
    id: str = ""  # "ingredient|symptom"
    ingredient: str
    symptom: str
    occurrences: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    percentage: float = Field(ge=0, le=100)
    average_delay_hours: float = 0.0
    average_delay: str = "0.0 hours"
    time_window: str = ""
    confidence: Confidence = "low"
    # Populated by enhanced analysis only
    risk_factors: list[str] = []
    protective_factors: list[str] = []
    medications: list[str] = []
    known_allergy: bool = False


class PositiveCorrelation(BaseModel):
    id: str = ""  # "ingredient|improvement"
    ingredient: str
    improvement: str
    occurrences: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    percentage: float = Field(ge=0, le=100)
    average_delay_hours: float = 0.0
    average_delay: str = "0.0 hours"
    time_window: str = ""
    confidence: Confidence = "low"


class AllergyMatch(BaseModel):
    date: Date
    description: str
    ingredients: list[str]


class AllergyWarning(BaseModel):
    allergy: str
    severity: AllergySeverity
    matches: list[AllergyMatch]
    action: str


# --- Summary ---


class EntryTotals(BaseModel):
    food: int = 0
    symptoms: int = 0


class DayTypeStats(BaseModel):
    days: int = 0
    average_water_ml: float = 0.0
    average_sleep_quality: Optional[float] = None
    exercise_rate: float = 0.0  # percent of days with any exercise


class SummaryStats(BaseModel):
    total_days: int = 0
    symptom_days: int = 0
    symptom_free_days: int = 0
    top_ingredient: str = "None"
    top_symptom: str = "None"
    total_entries: EntryTotals = Field(default_factory=EntryTotals)
    symptom_day_stats: DayTypeStats = Field(default_factory=DayTypeStats)
    good_day_stats: DayTypeStats = Field(default_factory=DayTypeStats)
    correlation_count: int = 0
    high_confidence_count: int = 0
    positive_correlation_count: int = 0
    allergy_warning_count: int = 0


# --- Timeline (discriminated union on kind) ---


class FoodTimelinePoint(BaseModel):
    kind: Literal["food"] = "food"
    date: Date
    time: Time
    timestamp: datetime
    description: str
    payload: FoodEvent


class SymptomTimelinePoint(BaseModel):
    kind: Literal["symptom"] = "symptom"
    date: Date
    time: Time
    timestamp: datetime
    description: str
    payload: SymptomEvent


TimelinePoint = Annotated[
    FoodTimelinePoint | SymptomTimelinePoint,
    Field(discriminator="kind"),
]


# --- Meal prediction ---


class SymptomPrediction(BaseModel):
    symptom: str
    probability: float
    severity: PredictedSeverity
    confidence: Confidence = "low"
    ingredients: list[str] = []
    risk_factors: list[str] = []
    known_allergy: bool = False


class ImprovementPrediction(BaseModel):
    improvement: str
    probability: float
    ingredients: list[str] = []


class MealPrediction(BaseModel):
    ingredients: list[str]
    symptom_predictions: list[SymptomPrediction] = []
    improvement_predictions: list[ImprovementPrediction] = []
    allergy_warnings: list[str] = []
    overall_risk_level: RiskLevel = "low"
    recommendation: str = ""
