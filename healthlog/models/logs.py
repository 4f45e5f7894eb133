"""
Journal log entries as supplied by the record store.

Field names are snake_case in Python; the camelCase keys written by the
journal's JSON backup (``mealType``, ``sleepQuality``, ``medicationName``)
are accepted as aliases.
"""

from datetime import date as Date, time as Time
from typing import Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


MealType = Literal["breakfast", "lunch", "dinner", "snack"]
SymptomSeverity = Literal["mild", "moderate", "severe"]
AllergySeverity = Literal["mild", "moderate", "severe", "anaphylaxis"]
Mood = Literal["happy", "neutral", "sad", "very-sad"]


class JournalEntry(BaseModel):
    """Base for every logged record."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: Optional[Union[str, int]] = None


class TimedEntry(JournalEntry):
    date: Date
    time: Time


class FoodEvent(TimedEntry):
    meal_type: MealType = Field(
        default="snack", validation_alias=AliasChoices("meal_type", "mealType", "type")
    )
    description: str = ""
    ingredients: list[str] = []
    portion: Optional[str] = None
    notes: Optional[str] = None


class SymptomEvent(TimedEntry):
    symptom: str
    severity: SymptomSeverity = "mild"
    description: str = ""
    triggers: Optional[str] = None


class WaterEvent(TimedEntry):
    amount: float = Field(ge=0)  # ml


class ExerciseEvent(TimedEntry):
    name: Optional[str] = None
    duration: Optional[int] = None  # minutes


class MedicationLogEvent(TimedEntry):
    medication_name: str


class SleepSample(JournalEntry):
    date: Date
    quality: int = Field(
        ge=1, le=5, validation_alias=AliasChoices("quality", "sleepQuality", "sleep_quality")
    )


class WellnessSample(JournalEntry):
    """Subjective wellness for a day. There is no time of day on these."""

    date: Date
    overall: Optional[Mood] = None
    morning: Optional[Mood] = None
    afternoon: Optional[Mood] = None
    evening: Optional[Mood] = None


class KnownAllergy(JournalEntry):
    name: str
    severity: AllergySeverity = "moderate"
    symptoms: list[str] = []
    notes: Optional[str] = None


class LogBundle(BaseModel):
    """Snapshot of every log category for one analysis run."""

    model_config = ConfigDict(populate_by_name=True)

    food: list[FoodEvent] = []
    symptoms: list[SymptomEvent] = []
    water: list[WaterEvent] = []
    exercise: list[ExerciseEvent] = []
    sleep: list[SleepSample] = []
    wellness: list[WellnessSample] = []
    medications: list[MedicationLogEvent] = []
    allergies: list[KnownAllergy] = []

    def since(self, cutoff: Date) -> "LogBundle":
        """Return a copy holding only entries dated on or after ``cutoff``.

        Known allergies are not dated and are always kept.
        """
        return LogBundle(
            food=[e for e in self.food if e.date >= cutoff],
            symptoms=[e for e in self.symptoms if e.date >= cutoff],
            water=[e for e in self.water if e.date >= cutoff],
            exercise=[e for e in self.exercise if e.date >= cutoff],
            sleep=[e for e in self.sleep if e.date >= cutoff],
            wellness=[e for e in self.wellness if e.date >= cutoff],
            medications=[e for e in self.medications if e.date >= cutoff],
            allergies=list(self.allergies),
        )

    def logged_dates(self) -> set[Date]:
        """All dates with at least one logged event of any category."""
        dated = (
            self.food,
            self.symptoms,
            self.water,
            self.exercise,
            self.sleep,
            self.wellness,
            self.medications,
        )
        return {entry.date for entries in dated for entry in entries}
