from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from domain.entities import (
    BatchAnalysisResult,
    ImageAnalysisResult,
    ImageRef,
    NutritionFacts,
    NutritionTotals,
    ResolvedDish,
)


class ImageIn(BaseModel):
    url: str = Field(..., min_length=1, examples=["https://utfs.io/f/abc123.jpg"])
    key: str = Field(..., examples=["abc123.jpg"])
    name: str = Field(..., examples=["lunch.jpg"])

    def to_entity(self) -> ImageRef:
        return ImageRef(url=self.url, key=self.key, name=self.name)


class AnalyzeImagesRequest(BaseModel):
    images: list[ImageIn] = Field(default_factory=list)


class NutritionFactsOut(BaseModel):
    food_name: str
    serving_qty: float
    serving_unit: str
    serving_weight_grams: float
    nf_calories: float
    nf_total_fat: float
    nf_saturated_fat: float
    nf_cholesterol: float
    nf_sodium: float
    nf_total_carbohydrate: float
    nf_dietary_fiber: float
    nf_sugars: float
    nf_protein: float

    @classmethod
    def from_entity(cls, facts: NutritionFacts) -> NutritionFactsOut:
        return cls(
            food_name=facts.food_name,
            serving_qty=facts.serving_qty,
            serving_unit=facts.serving_unit,
            serving_weight_grams=facts.serving_weight_grams,
            nf_calories=facts.calories,
            nf_total_fat=facts.total_fat,
            nf_saturated_fat=facts.saturated_fat,
            nf_cholesterol=facts.cholesterol,
            nf_sodium=facts.sodium,
            nf_total_carbohydrate=facts.total_carbohydrate,
            nf_dietary_fiber=facts.dietary_fiber,
            nf_sugars=facts.sugars,
            nf_protein=facts.protein,
        )


class DishOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    serving_size: str = Field(..., alias="servingSize")
    nutrition: NutritionFactsOut | None = None
    error: str | None = None

    @classmethod
    def from_entity(cls, dish: ResolvedDish) -> DishOut:
        facts = dish.nutrition
        return cls(
            name=dish.name,
            serving_size=dish.serving_size,
            nutrition=NutritionFactsOut.from_entity(facts) if facts is not None else None,
            error=dish.error,
        )


class NutritionTotalsOut(BaseModel):
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    sodium: float

    @classmethod
    def from_entity(cls, totals: NutritionTotals | None) -> NutritionTotalsOut | None:
        if totals is None:
            return None
        return cls(
            calories=totals.calories,
            protein=totals.protein,
            carbs=totals.carbs,
            fat=totals.fat,
            fiber=totals.fiber,
            sodium=totals.sodium,
        )


class ImageAnalysisOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(..., alias="imageUrl")
    image_name: str = Field(..., alias="imageName")
    image_key: str = Field(..., alias="imageKey")
    description: str
    confidence: float = Field(..., ge=0, le=1)
    objects: list[str] = Field(default_factory=list)
    dishes: list[DishOut] = Field(default_factory=list)
    total_nutrition: NutritionTotalsOut | None = Field(None, alias="totalNutrition")

    @classmethod
    def from_entity(cls, result: ImageAnalysisResult) -> ImageAnalysisOut:
        return cls(
            image_url=result.image.url,
            image_name=result.image.name,
            image_key=result.image.key,
            description=result.description,
            confidence=result.confidence,
            objects=list(result.objects),
            dishes=[DishOut.from_entity(d) for d in result.dishes],
            total_nutrition=NutritionTotalsOut.from_entity(result.total_nutrition),
        )


class BatchAnalysisOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    images: list[ImageAnalysisOut]
    overall_total_nutrition: NutritionTotalsOut | None = Field(None, alias="overallTotalNutrition")

    @classmethod
    def from_entity(cls, result: BatchAnalysisResult) -> BatchAnalysisOut:
        return cls(
            images=[ImageAnalysisOut.from_entity(r) for r in result.images],
            overall_total_nutrition=NutritionTotalsOut.from_entity(result.overall_total_nutrition),
        )


class ErrorResponse(BaseModel):
    error: str
