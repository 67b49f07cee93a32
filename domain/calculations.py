from __future__ import annotations

from typing import Any, Iterable

from domain.entities import ImageAnalysisResult, NutritionTotals, ResolvedDish


DEFAULT_CONFIDENCE = 0.8


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def as_non_negative(value: Any) -> float:
    # bool is an int subclass; "true" is not a nutrient amount
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return max(0.0, float(value))


def normalize_confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_CONFIDENCE
    if value != value:  # NaN
        return DEFAULT_CONFIDENCE
    return clamp(float(value), 0.0, 1.0)


def _countable(totals: NutritionTotals) -> NutritionTotals | None:
    # zero calories means "nothing countable": omit instead of reporting zeros
    return totals if totals.calories > 0 else None


def sum_dish_totals(dishes: Iterable[ResolvedDish]) -> NutritionTotals | None:
    totals = NutritionTotals()
    for dish in dishes:
        facts = dish.nutrition
        if facts is not None:
            totals = totals + NutritionTotals.from_facts(facts)
    return _countable(totals)


def sum_image_totals(images: Iterable[ImageAnalysisResult]) -> NutritionTotals | None:
    totals = NutritionTotals()
    for image in images:
        if image.total_nutrition is not None:
            totals = totals + image.total_nutrition
    return _countable(totals)
