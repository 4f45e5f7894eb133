"""Insights API endpoints for correlation analysis and meal prediction."""
from datetime import date
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, HTTPException, Query
from pydantic import BaseModel, Field

from healthlog.config import settings
from healthlog.models import (
    AllergyWarning,
    Correlation,
    FoodEvent,
    KnownAllergy,
    LogBundle,
    MealPrediction,
    PositiveCorrelation,
    SymptomEvent,
    TimelinePoint,
)
from healthlog.services.correlation_service import correlation_service
from healthlog.services.import_service import BackupFormatError, load_backup
from healthlog.services.insights_service import InsightsReport, insights_service
from healthlog.services.prediction_service import prediction_service
from healthlog.services.summary_service import summary_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/insights", tags=["insights"])


class AnalyzeRequest(BaseModel):
    """Request model for running an insights analysis."""

    logs: LogBundle = Field(default_factory=LogBundle)
    window_hours: float = Field(default=settings.default_window_hours, gt=0)
    date_range_days: int | None = Field(default=None, ge=0)  # None = all time
    lookback_days: int = Field(default=settings.allergy_lookback_days, ge=0)
    today: date | None = None  # Defaults to the server's current date


class PredictRequest(BaseModel):
    """Request model for predicting the outcome of a planned meal."""

    ingredients: list[str] = Field(min_length=1)
    correlations: list[Correlation] = []
    positive_correlations: list[PositiveCorrelation] = []
    allergies: list[KnownAllergy] = []


class AllergyWarningsRequest(BaseModel):
    food: list[FoodEvent] = []
    allergies: list[KnownAllergy] = []
    lookback_days: int = Field(default=settings.allergy_lookback_days, ge=0)
    today: date | None = None


class TimelineRequest(BaseModel):
    food: list[FoodEvent] = []
    symptoms: list[SymptomEvent] = []


@router.post("/analyze", response_model=InsightsReport)
async def analyze(request: AnalyzeRequest = Body(...)):
    """
    Run the full insights analysis over the supplied logs.

    Returns:
        Correlations, positive correlations, allergy warnings, summary
        statistics and timeline for the requested period
    """
    return insights_service.analyze(
        request.logs,
        today=request.today or date.today(),
        window_hours=request.window_hours,
        date_range_days=request.date_range_days,
        lookback_days=request.lookback_days,
    )


@router.post("/import", response_model=InsightsReport)
async def analyze_backup(
    backup: Dict[str, Any] = Body(...),
    window_hours: float = Query(default=settings.default_window_hours, gt=0),
    date_range_days: int | None = Query(default=None, ge=0),
    today: date | None = Query(default=None),
):
    """Analyze a journal JSON backup as exported by the app."""
    try:
        bundle = load_backup(backup)
    except BackupFormatError as e:
        logger.warning("Rejected backup upload: %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    return insights_service.analyze(
        bundle,
        today=today or date.today(),
        window_hours=window_hours,
        date_range_days=date_range_days,
    )


@router.post("/predict", response_model=MealPrediction)
async def predict(request: PredictRequest = Body(...)):
    """Predict symptoms and improvements for a hypothetical meal."""
    return prediction_service.predict_meal(
        request.ingredients,
        request.correlations,
        request.positive_correlations,
        request.allergies,
    )


@router.post("/allergy-warnings", response_model=List[AllergyWarning])
async def allergy_warnings(request: AllergyWarningsRequest = Body(...)):
    """Flag recent meals that contain a known allergen."""
    return correlation_service.detect_allergy_warnings(
        request.food,
        request.allergies,
        today=request.today or date.today(),
        lookback_days=request.lookback_days,
    )


@router.post("/timeline", response_model=List[TimelinePoint])
async def timeline(request: TimelineRequest = Body(...)):
    """Food and symptom events in chronological order."""
    return summary_service.build_timeline(request.food, request.symptoms)
