from __future__ import annotations

from dataclasses import dataclass
from typing import List

from domain.entities import MealType


@dataclass
class MealDishRecord:
    dish_name: str
    serving_size: str
    serving_qty: float
    serving_unit: str
    serving_weight_grams: float
    calories: float
    protein: float
    total_fat: float
    saturated_fat: float
    cholesterol: float
    sodium: float
    total_carbohydrate: float
    dietary_fiber: float
    sugars: float


@dataclass
class MealRecord:
    meal_name: str
    meal_type: MealType
    image_url: str
    description: str
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    total_fiber: float
    total_sodium: float
    dishes: List[MealDishRecord]
