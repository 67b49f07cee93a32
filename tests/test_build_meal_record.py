import pytest

from conftest import make_facts
from domain.entities import (
    DishCandidate,
    DishLookupMiss,
    ImageAnalysisResult,
    ImageRef,
    NutritionTotals,
    ResolvedDish,
)
from domain.errors import InvalidInputError
from domain.use_cases import build_meal_record


@pytest.fixture
def analyzed_image() -> ImageAnalysisResult:
    eggs = make_facts("scrambled eggs", 200.0, protein=14.0, total_fat=15.0, saturated_fat=5.0, sodium=340.0)
    return ImageAnalysisResult(
        image=ImageRef(url="https://files.example/a.jpg", key="a.jpg", name="breakfast.jpg"),
        description="Eggs and a mystery",
        confidence=0.8,
        objects=("egg",),
        dishes=(
            ResolvedDish(candidate=DishCandidate(name="scrambled eggs", serving_size="2 eggs"), outcome=eggs),
            ResolvedDish(candidate=DishCandidate(name="mystery stew", serving_size="1 bowl"), outcome=DishLookupMiss()),
        ),
        total_nutrition=NutritionTotals(calories=200.0, protein=14.0, fat=15.0, sodium=340.0),
    )


def test_record_carries_totals_and_every_dish(analyzed_image) -> None:
    record = build_meal_record(analyzed_image, "  Sunday breakfast ", "breakfast")

    assert record.meal_name == "Sunday breakfast"
    assert record.meal_type == "breakfast"
    assert record.image_url == "https://files.example/a.jpg"
    assert record.description == "Eggs and a mystery"
    assert record.total_calories == 200.0
    assert record.total_protein == 14.0
    assert record.total_sodium == 340.0
    assert [d.dish_name for d in record.dishes] == ["scrambled eggs", "mystery stew"]
    eggs, stew = record.dishes
    assert eggs.serving_size == "2 eggs"
    assert eggs.saturated_fat == 5.0
    assert eggs.serving_weight_grams == 100.0
    assert stew.calories == 0.0
    assert stew.serving_qty == 1.0
    assert stew.serving_unit == "serving"


def test_image_without_totals_is_refused(analyzed_image) -> None:
    empty = ImageAnalysisResult(image=analyzed_image.image, description="nothing", confidence=0.0)

    with pytest.raises(InvalidInputError, match="Nothing to save"):
        build_meal_record(empty, "Snack", "snack")


@pytest.mark.parametrize(("name", "meal_type"), [("", "lunch"), ("Lunch", "brunch")])
def test_invalid_name_or_type_is_refused(analyzed_image, name, meal_type) -> None:
    with pytest.raises(InvalidInputError):
        build_meal_record(analyzed_image, name, meal_type)
