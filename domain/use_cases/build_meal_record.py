from __future__ import annotations

from domain.dtos import MealDishRecord, MealRecord
from domain.entities import ImageAnalysisResult, MealType, ResolvedDish
from domain.errors import InvalidInputError


MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")


def _dish_record(dish: ResolvedDish) -> MealDishRecord:
    facts = dish.nutrition
    if facts is None:
        # unresolved dishes are still listed, with zero nutrients
        return MealDishRecord(
            dish_name=dish.name,
            serving_size=dish.serving_size,
            serving_qty=1.0,
            serving_unit="serving",
            serving_weight_grams=0.0,
            calories=0.0,
            protein=0.0,
            total_fat=0.0,
            saturated_fat=0.0,
            cholesterol=0.0,
            sodium=0.0,
            total_carbohydrate=0.0,
            dietary_fiber=0.0,
            sugars=0.0,
        )
    return MealDishRecord(
        dish_name=dish.name,
        serving_size=dish.serving_size,
        serving_qty=facts.serving_qty or 1.0,
        serving_unit=facts.serving_unit or "serving",
        serving_weight_grams=facts.serving_weight_grams,
        calories=facts.calories,
        protein=facts.protein,
        total_fat=facts.total_fat,
        saturated_fat=facts.saturated_fat,
        cholesterol=facts.cholesterol,
        sodium=facts.sodium,
        total_carbohydrate=facts.total_carbohydrate,
        dietary_fiber=facts.dietary_fiber,
        sugars=facts.sugars,
    )


def build_meal_record(analysis: ImageAnalysisResult, meal_name: str, meal_type: MealType) -> MealRecord:
    """Shape one analyzed image into the record the meal store writes.

    Images without totals have nothing countable and are refused.
    """
    if analysis.total_nutrition is None:
        raise InvalidInputError("Nothing to save: no nutrition data for this image")
    if not meal_name or not meal_name.strip():
        raise InvalidInputError("Meal name is required")
    if meal_type not in MEAL_TYPES:
        raise InvalidInputError(f"Unknown meal type: {meal_type}")
    totals = analysis.total_nutrition
    return MealRecord(
        meal_name=meal_name.strip(),
        meal_type=meal_type,
        image_url=analysis.image.url,
        description=analysis.description,
        total_calories=totals.calories,
        total_protein=totals.protein,
        total_carbs=totals.carbs,
        total_fat=totals.fat,
        total_fiber=totals.fiber,
        total_sodium=totals.sodium,
        dishes=[_dish_record(d) for d in analysis.dishes],
    )
