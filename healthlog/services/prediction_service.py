"""Risk prediction for a hypothetical meal from existing correlations."""

import logging
from typing import Dict, List, Sequence

from healthlog.config import settings
from healthlog.models import (
    Correlation,
    ImprovementPrediction,
    KnownAllergy,
    MealPrediction,
    PositiveCorrelation,
    SymptomPrediction,
)
from healthlog.services.context_service import allergy_matches
from healthlog.services.frequency import normalize_ingredient

logger = logging.getLogger(__name__)


KNOWN_ALLERGY = "known_allergy"


class PredictionService:
    """Service for predicting symptoms and improvements for a planned meal."""

    HIGH_RISK = settings.prediction_high_risk
    MEDIUM_RISK = settings.prediction_medium_risk
    IMPROVEMENT_MIN = settings.prediction_improvement_min

    def severity_for(self, probability: float) -> str:
        if probability >= self.HIGH_RISK:
            return "severe"
        if probability >= self.MEDIUM_RISK:
            return "moderate"
        return "mild"

    def risk_level(self, predictions: Sequence[SymptomPrediction]) -> str:
        highest = max((p.probability for p in predictions), default=0.0)
        if highest >= self.HIGH_RISK:
            return "high"
        if highest >= self.MEDIUM_RISK:
            return "medium"
        return "low"

    def predict_meal(
        self,
        ingredients: Sequence[str],
        correlations: Sequence[Correlation],
        positive_correlations: Sequence[PositiveCorrelation] = (),
        allergies: Sequence[KnownAllergy] = (),
    ) -> MealPrediction:
        """
        Predict how a meal made of ``ingredients`` is likely to go.

        For each ingredient:
        1. Check it against known allergies
        2. Take the highest correlation percentage per symptom; the winning
           correlation supplies the risk factors and confidence
        3. Collect improvements with a rate of at least IMPROVEMENT_MIN

        Any allergy match overrides the recommendation regardless of the
        computed risk level.

        Args:
            ingredients: Free-text ingredient names for the planned meal
            correlations: Symptom correlations from a previous analysis
            positive_correlations: Wellness correlations from a previous analysis
            allergies: Known allergies

        Returns:
            MealPrediction (not persisted)
        """
        normalized: List[str] = []
        for name in ingredients:
            ingredient = normalize_ingredient(name)
            if ingredient and ingredient not in normalized:
                normalized.append(ingredient)

        allergy_warnings: List[str] = []
        allergens: List[str] = []
        symptoms: Dict[str, SymptomPrediction] = {}
        improvements: Dict[str, ImprovementPrediction] = {}

        for ingredient in normalized:
            for allergy in allergies:
                if not allergy_matches(ingredient, allergy.name):
                    continue
                if ingredient not in allergens:
                    allergens.append(ingredient)
                warning = f"{ingredient} matches your known {allergy.name} allergy ({allergy.severity})"
                if allergy.symptoms:
                    warning += f"; past reactions: {', '.join(allergy.symptoms)}"
                allergy_warnings.append(warning)

            is_allergen = ingredient in allergens
            for correlation in correlations:
                if correlation.ingredient != ingredient:
                    continue

                prediction = symptoms.get(correlation.symptom)
                if prediction is None:
                    prediction = SymptomPrediction(
                        symptom=correlation.symptom,
                        probability=correlation.percentage,
                        severity=self.severity_for(correlation.percentage),
                        confidence=correlation.confidence,
                        risk_factors=list(correlation.risk_factors),
                    )
                    symptoms[correlation.symptom] = prediction
                elif correlation.percentage > prediction.probability:
                    prediction.probability = correlation.percentage
                    prediction.severity = self.severity_for(correlation.percentage)
                    prediction.confidence = correlation.confidence
                    prediction.risk_factors = list(correlation.risk_factors)

                if ingredient not in prediction.ingredients:
                    prediction.ingredients.append(ingredient)
                if is_allergen or correlation.known_allergy:
                    prediction.known_allergy = True

            for positive in positive_correlations:
                if positive.ingredient != ingredient or positive.percentage < self.IMPROVEMENT_MIN:
                    continue
                improvement = improvements.get(positive.improvement)
                if improvement is None:
                    improvement = ImprovementPrediction(
                        improvement=positive.improvement, probability=positive.percentage
                    )
                    improvements[positive.improvement] = improvement
                elif positive.percentage > improvement.probability:
                    improvement.probability = positive.percentage
                if ingredient not in improvement.ingredients:
                    improvement.ingredients.append(ingredient)

        for symptom in symptoms.values():
            if symptom.known_allergy and KNOWN_ALLERGY not in symptom.risk_factors:
                symptom.risk_factors.append(KNOWN_ALLERGY)

        symptom_predictions = sorted(symptoms.values(), key=lambda p: p.probability, reverse=True)
        improvement_predictions = sorted(
            improvements.values(), key=lambda p: p.probability, reverse=True
        )
        risk_level = self.risk_level(symptom_predictions)

        prediction = MealPrediction(
            ingredients=normalized,
            symptom_predictions=symptom_predictions,
            improvement_predictions=improvement_predictions,
            allergy_warnings=allergy_warnings,
            overall_risk_level=risk_level,
            recommendation=self._recommendation(
                risk_level, symptom_predictions, improvement_predictions, allergens
            ),
        )

        logger.debug(
            "predict_meal: %d ingredients, risk=%s, %d symptom predictions, %d allergy warnings",
            len(normalized),
            risk_level,
            len(symptom_predictions),
            len(allergy_warnings),
        )
        return prediction

    def _recommendation(
        self,
        risk_level: str,
        symptom_predictions: Sequence[SymptomPrediction],
        improvement_predictions: Sequence[ImprovementPrediction],
        allergens: Sequence[str],
    ) -> str:
        if allergens:
            return (
                f"AVOID: this meal contains known allergens ({', '.join(allergens)}). "
                "Do not eat it."
            )

        if risk_level == "high":
            top = symptom_predictions[0]
            text = (
                f"High risk of {top.symptom} ({top.probability:g}%). "
                f"Consider leaving out {', '.join(top.ingredients)}."
            )
        elif risk_level == "medium":
            top = symptom_predictions[0]
            text = (
                f"Moderate risk of {top.symptom} ({top.probability:g}%). "
                "Try a smaller portion and watch how you feel."
            )
        else:
            text = "Low risk based on your history."

        if improvement_predictions:
            names = ", ".join(p.improvement.replace("_", " ") for p in improvement_predictions)
            text += f" This meal has been followed by better {names}."
        return text


# Singleton instance
prediction_service = PredictionService()
