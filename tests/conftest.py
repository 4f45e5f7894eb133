"""
Test configuration and fixtures for healthlog.

- TestClient for the FastAPI app
- Ready-made log scenarios
- Sample JSON backup written to a temporary file
"""

import json
from datetime import date
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from healthlog.main import app
from healthlog.models import LogBundle
from tests.factories import (
    create_allergy,
    create_exercise,
    create_food,
    create_sleep,
    create_symptom,
    create_test_scenario_milk_intolerance,
    create_water,
    create_wellness,
)


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def client() -> TestClient:
    """Create a test client for the app."""
    return TestClient(app)


# =============================================================================
# Scenario Fixtures
# =============================================================================


@pytest.fixture
def milk_scenario() -> Dict[str, Any]:
    """Three milk breakfasts, each followed by bloating four hours later."""
    return create_test_scenario_milk_intolerance(days=3)


@pytest.fixture
def today() -> date:
    return date(2024, 1, 10)


@pytest.fixture
def journal_bundle() -> LogBundle:
    """
    A week of mixed logs.

    - Milk at breakfast on days 1-5, bloating at 12:00 on days 1-4
    - Oats at breakfast on days 1-3, a happy overall mood on days 1-3
    - Low water and poor sleep on symptom days, plenty of both on day 5
    - Peanut butter snack on day 6 with a known peanut allergy
    """
    food = []
    symptoms = []
    water = []
    sleep = []
    wellness = []
    exercise = []

    for day in range(1, 6):
        d = f"2024-01-0{day}"
        ingredients = ["Milk", "oats"] if day <= 3 else ["milk"]
        food.append(create_food(d, "08:00", ingredients))
        if day <= 4:
            symptoms.append(create_symptom(d, "12:00", "bloating"))
            water.append(create_water(d, "09:00", 500))
            sleep.append(create_sleep(d, 2))
        else:
            water.append(create_water(d, "09:00", 2500))
            sleep.append(create_sleep(d, 5))
            exercise.append(create_exercise(d))
        if day <= 3:
            wellness.append(create_wellness(d, overall="happy"))

    food.append(create_food("2024-01-06", "15:00", ["peanut butter", "crackers"], "PB crackers"))

    return LogBundle(
        food=food,
        symptoms=symptoms,
        water=water,
        sleep=sleep,
        wellness=wellness,
        exercise=exercise,
        allergies=[create_allergy("peanut", "anaphylaxis", ["hives"])],
    )


@pytest.fixture
def backup_data() -> Dict[str, Any]:
    """A journal JSON backup in the app's export format."""
    return {
        "version": "2.0",
        "exportDate": "2024-01-05T10:00:00.000Z",
        "foodEntries": [
            {"id": 1, "type": "breakfast", "description": "Latte", "time": "08:00",
             "ingredients": ["Milk", "coffee"], "date": f"2024-01-0{d}"}
            for d in range(1, 4)
        ],
        "symptomEntries": [
            {"id": 1, "symptom": "bloating", "severity": "mild", "time": "11:30",
             "description": "", "date": f"2024-01-0{d}"}
            for d in range(1, 4)
        ],
        "waterEntries": [{"amount": 750, "time": "09:00", "date": "2024-01-01"}],
        "bowelEntries": [{"type": 4, "time": "07:00", "date": "2024-01-01"}],
        "sleepEntries": [{"date": "2024-01-01", "sleepQuality": 4, "mood": "good"}],
        "medicineEntries": [
            {"medicationId": "m1", "medicationName": "Lactase", "dosage": "1",
             "time": "07:55", "date": "2024-01-01"}
        ],
        "knownAllergies": [{"name": "Shellfish", "severity": "severe", "symptoms": []}],
        "settings": [{"dailyWaterGoal": 2000}],
    }


@pytest.fixture
def backup_file(tmp_path, backup_data):
    path = tmp_path / "health-tracker-backup.json"
    path.write_text(json.dumps(backup_data))
    return path
