"""
Integration tests for the Insights API.

Tests the HTTP endpoints end to end:
- Full analysis of posted logs
- Backup upload
- Meal prediction
- Allergy warnings and timeline
- Request validation
"""
from fastapi.testclient import TestClient


def _food(day, at, ingredients, description="Meal"):
    return {"date": day, "time": at, "mealType": "breakfast",
            "description": description, "ingredients": ingredients}


def _symptom(day, at, symptom="bloating"):
    return {"date": day, "time": at, "symptom": symptom, "severity": "moderate"}


def _milk_logs():
    days = ["2024-01-01", "2024-01-02", "2024-01-03"]
    return {
        "food": [_food(d, "08:00", ["milk"]) for d in days],
        "symptoms": [_symptom(d, "12:00") for d in days],
    }


class TestAnalyzeEndpoint:
    """Tests for POST /insights/analyze."""

    def test_milk_correlation(self, client: TestClient):
        response = client.post(
            "/insights/analyze",
            json={"logs": _milk_logs(), "window_hours": 6, "today": "2024-01-10"},
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["correlations"]) == 1
        corr = data["correlations"][0]
        assert corr["id"] == "milk|bloating"
        assert corr["percentage"] == 100.0
        assert corr["confidence"] == "low"
        assert corr["average_delay"] == "4.0 hours"
        assert corr["time_window"] == "6hr"
        assert data["summary"]["total_days"] == 3

    def test_timeline_points_have_kind(self, client: TestClient):
        response = client.post(
            "/insights/analyze",
            json={"logs": _milk_logs(), "today": "2024-01-10"},
        )

        kinds = [p["kind"] for p in response.json()["timeline"]]
        assert kinds == ["food", "symptom"] * 3

    def test_date_range(self, client: TestClient):
        response = client.post(
            "/insights/analyze",
            json={"logs": _milk_logs(), "date_range_days": 3, "today": "2024-01-04"},
        )

        data = response.json()
        assert data["date_range_start"] == "2024-01-01"
        assert len(data["correlations"]) == 1

    def test_empty_logs(self, client: TestClient):
        response = client.post("/insights/analyze", json={})

        assert response.status_code == 200
        assert response.json()["correlations"] == []

    def test_rejects_non_positive_window(self, client: TestClient):
        response = client.post("/insights/analyze", json={"window_hours": 0})

        assert response.status_code == 422

    def test_rejects_bad_time(self, client: TestClient):
        logs = {"food": [_food("2024-01-01", "25:99", ["milk"])]}

        response = client.post("/insights/analyze", json={"logs": logs})

        assert response.status_code == 422


class TestImportEndpoint:
    """Tests for POST /insights/import."""

    def test_analyzes_backup(self, client: TestClient, backup_data):
        response = client.post(
            "/insights/import",
            params={"window_hours": 6, "today": "2024-01-10"},
            json=backup_data,
        )

        assert response.status_code == 200
        data = response.json()
        assert [c["ingredient"] for c in data["correlations"]] == ["milk", "coffee"]
        assert data["enhanced_correlations"][0]["risk_factors"] == ["low_hydration", "no_exercise"]

    def test_invalid_backup(self, client: TestClient):
        response = client.post("/insights/import", json={"foodEntries": []})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid backup file format"


class TestPredictEndpoint:
    """Tests for POST /insights/predict."""

    def test_high_risk(self, client: TestClient):
        response = client.post(
            "/insights/predict",
            json={
                "ingredients": ["Milk"],
                "correlations": [{
                    "id": "milk|bloating", "ingredient": "milk", "symptom": "bloating",
                    "occurrences": 8, "total": 10, "percentage": 80.0, "confidence": "medium",
                }],
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["overall_risk_level"] == "high"
        assert data["symptom_predictions"][0]["severity"] == "severe"

    def test_percentage_only_correlations(self, client: TestClient):
        """Test that correlations without id or counts are accepted."""
        response = client.post(
            "/insights/predict",
            json={
                "ingredients": ["milk"],
                "correlations": [{
                    "ingredient": "milk", "symptom": "bloating",
                    "percentage": 55.0, "confidence": "medium",
                }],
                "positive_correlations": [{
                    "ingredient": "milk", "improvement": "overall_mood", "percentage": 60.0,
                }],
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["overall_risk_level"] == "medium"
        assert data["improvement_predictions"][0]["improvement"] == "overall_mood"

    def test_allergy_override(self, client: TestClient):
        response = client.post(
            "/insights/predict",
            json={
                "ingredients": ["peanut butter"],
                "allergies": [{"name": "peanut", "severity": "anaphylaxis"}],
            },
        )

        data = response.json()
        assert data["allergy_warnings"]
        assert data["recommendation"].startswith("AVOID")

    def test_requires_ingredients(self, client: TestClient):
        response = client.post("/insights/predict", json={"ingredients": []})

        assert response.status_code == 422


class TestAllergyWarningsEndpoint:
    def test_recent_match(self, client: TestClient):
        response = client.post(
            "/insights/allergy-warnings",
            json={
                "food": [_food("2024-01-08", "12:00", ["Shrimp"], "Pad thai")],
                "allergies": [{"name": "shrimp", "severity": "severe"}],
                "today": "2024-01-10",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["matches"][0]["description"] == "Pad thai"
        assert data[0]["action"].startswith("Strongly avoid")


class TestTimelineEndpoint:
    def test_sorted(self, client: TestClient):
        response = client.post(
            "/insights/timeline",
            json={
                "food": [_food("2024-01-02", "08:00", ["milk"])],
                "symptoms": [_symptom("2024-01-01", "20:00")],
            },
        )

        assert response.status_code == 200
        assert [p["kind"] for p in response.json()] == ["symptom", "food"]
