from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union


MealType = Literal["breakfast", "lunch", "dinner", "snack"]

NUTRITION_NOT_FOUND = "Nutrition data not found"


@dataclass(frozen=True)
class ImageRef:
    """An uploaded image as handed over by the upload storage."""

    url: str
    key: str
    name: str


@dataclass(frozen=True)
class NutritionFacts:
    food_name: str
    serving_qty: float
    serving_unit: str
    serving_weight_grams: float
    calories: float = 0.0
    total_fat: float = 0.0
    saturated_fat: float = 0.0
    cholesterol: float = 0.0
    sodium: float = 0.0
    total_carbohydrate: float = 0.0
    dietary_fiber: float = 0.0
    sugars: float = 0.0
    protein: float = 0.0


@dataclass(frozen=True)
class DishCandidate:
    name: str
    serving_size: str


@dataclass(frozen=True)
class DishLookupMiss:
    reason: str = NUTRITION_NOT_FOUND


DishOutcome = Union[NutritionFacts, DishLookupMiss]


@dataclass(frozen=True)
class ResolvedDish:
    """A dish candidate holding exactly one of nutrition facts or a miss reason."""

    candidate: DishCandidate
    outcome: DishOutcome

    @property
    def name(self) -> str:
        return self.candidate.name

    @property
    def serving_size(self) -> str:
        return self.candidate.serving_size

    @property
    def nutrition(self) -> NutritionFacts | None:
        return self.outcome if isinstance(self.outcome, NutritionFacts) else None

    @property
    def error(self) -> str | None:
        return self.outcome.reason if isinstance(self.outcome, DishLookupMiss) else None


@dataclass(frozen=True)
class NutritionTotals:
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sodium: float = 0.0

    @classmethod
    def from_facts(cls, facts: NutritionFacts) -> NutritionTotals:
        return cls(
            calories=facts.calories,
            protein=facts.protein,
            carbs=facts.total_carbohydrate,
            fat=facts.total_fat,
            fiber=facts.dietary_fiber,
            sodium=facts.sodium,
        )

    def __add__(self, other: NutritionTotals) -> NutritionTotals:
        if not isinstance(other, NutritionTotals):
            return NotImplemented
        return NutritionTotals(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
            fiber=self.fiber + other.fiber,
            sodium=self.sodium + other.sodium,
        )


@dataclass(frozen=True)
class VisionAnalysis:
    """What the vision model said about one image, before nutrition lookup."""

    description: str
    confidence: float
    objects: tuple[str, ...] = ()
    dishes: tuple[DishCandidate, ...] = ()


@dataclass(frozen=True)
class ImageAnalysisResult:
    image: ImageRef
    description: str
    confidence: float
    objects: tuple[str, ...] = ()
    dishes: tuple[ResolvedDish, ...] = ()
    total_nutrition: NutritionTotals | None = None


@dataclass(frozen=True)
class BatchAnalysisResult:
    images: tuple[ImageAnalysisResult, ...] = field(default_factory=tuple)
    overall_total_nutrition: NutritionTotals | None = None
