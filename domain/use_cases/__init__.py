from .analyze_images import (
    BatchAnalysisOrchestrator,
    DishResolver,
    ImageAnalyzer,
    ImageNutritionAggregator,
    ImageSource,
)
from .build_meal_record import build_meal_record

__all__ = [
    "BatchAnalysisOrchestrator",
    "DishResolver",
    "ImageAnalyzer",
    "ImageNutritionAggregator",
    "ImageSource",
    "build_meal_record",
]
