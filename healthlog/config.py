from datetime import time

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Correlation thresholds
    min_symptom_occurrences: int = 3
    high_confidence_occurrences: int = 10
    medium_confidence_occurrences: int = 5

    # Positive correlations use a looser bar than symptom correlations
    positive_min_occurrences: int = 2
    positive_min_percentage: float = 40.0

    # Analysis window defaults
    default_window_hours: float = 6
    allergy_lookback_days: int = 7

    # Contextual factor thresholds
    low_water_ml: int = 1000  # below this is low hydration
    adequate_water_ml: int = 2000  # at or above this is adequate hydration
    poor_sleep_below: int = 3
    good_sleep_from: int = 4
    medication_window_hours: int = 24

    # Wellness samples carry no clock time, so they are pinned to midday
    wellness_nominal_time: time = time(12, 0)

    # Meal prediction thresholds (percent)
    prediction_high_risk: float = 70.0
    prediction_medium_risk: float = 50.0
    prediction_improvement_min: float = 50.0

    class Config:
        env_file = ".env"
        env_prefix = "HEALTHLOG_"


settings = Settings()
