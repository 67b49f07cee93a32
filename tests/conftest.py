"""
Shared fixtures for the analysis pipeline tests.

Collaborators (image storage, vision model, nutrition lookup) are replaced
by small in-memory fakes so that ordering and failure paths can be driven
deterministically.
"""

import asyncio
from typing import Any

import pytest

from domain.entities import DishCandidate, ImageRef, NutritionFacts, VisionAnalysis
from domain.use_cases import BatchAnalysisOrchestrator, ImageNutritionAggregator


def make_facts(name: str, calories: float, **fields: float) -> NutritionFacts:
    return NutritionFacts(
        food_name=name,
        serving_qty=1.0,
        serving_unit="serving",
        serving_weight_grams=fields.pop("serving_weight_grams", 100.0),
        calories=calories,
        **fields,
    )


class FakeImageSource:
    """Returns the URL itself as the image bytes."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self.failing = failing or set()
        self.fetched: list[str] = []

    async def fetch(self, url: str) -> bytes:
        self.fetched.append(url)
        if url in self.failing:
            raise RuntimeError(f"404 Not Found: {url}")
        return url.encode()


class FakeAnalyzer:
    """Vision model stand-in keyed by image URL.

    ``results`` maps URL to a VisionAnalysis or an exception to raise,
    ``delays`` maps URL to seconds to sleep before answering.
    """

    def __init__(self, results: dict[str, Any], delays: dict[str, float] | None = None) -> None:
        self.results = results
        self.delays = delays or {}
        self.calls: list[tuple[str, str]] = []

    async def analyze(self, image_bytes: bytes, mime_type: str) -> VisionAnalysis:
        url = image_bytes.decode()
        self.calls.append((url, mime_type))
        await asyncio.sleep(self.delays.get(url, 0))
        outcome = self.results[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeResolver:
    def __init__(self, facts: dict[str, NutritionFacts], delays: dict[str, float] | None = None) -> None:
        self.facts = facts
        self.delays = delays or {}
        self.queries: list[str] = []

    async def resolve(self, dish_name: str) -> NutritionFacts | None:
        self.queries.append(dish_name)
        await asyncio.sleep(self.delays.get(dish_name, 0))
        return self.facts.get(dish_name)


# ═══════════════════════════════════════════════════════════
# DOMAIN FIXTURES
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def image_a() -> ImageRef:
    return ImageRef(url="https://files.example/a.jpg", key="a.jpg", name="breakfast.jpg")


@pytest.fixture
def image_b() -> ImageRef:
    return ImageRef(url="https://files.example/b.png", key="b.png", name="lunch.png")


@pytest.fixture
def nutrition_db() -> dict[str, NutritionFacts]:
    """Known dishes with round numbers so sums are exact."""
    return {
        "scrambled eggs": make_facts("scrambled eggs", 200.0, protein=14.0, total_fat=15.0, total_carbohydrate=2.0, sodium=340.0),
        "buttered toast": make_facts("buttered toast", 150.0, protein=4.0, total_fat=6.0, total_carbohydrate=20.0, dietary_fiber=2.0, sodium=210.0),
        "caesar salad": make_facts("caesar salad", 100.0, protein=5.0, total_fat=7.0, total_carbohydrate=6.0, dietary_fiber=3.0, sodium=300.0),
        "black coffee": make_facts("black coffee", 0.0, sodium=5.0),
    }


@pytest.fixture
def breakfast_vision() -> VisionAnalysis:
    return VisionAnalysis(
        description="Two eggs with toast",
        confidence=0.9,
        objects=("egg", "bread", "butter"),
        dishes=(
            DishCandidate(name="scrambled eggs", serving_size="2 eggs"),
            DishCandidate(name="buttered toast", serving_size="1 slice"),
        ),
    )


@pytest.fixture
def lunch_vision() -> VisionAnalysis:
    return VisionAnalysis(
        description="A bowl of salad",
        confidence=0.85,
        objects=("lettuce", "croutons"),
        dishes=(DishCandidate(name="caesar salad", serving_size="1 bowl"),),
    )


@pytest.fixture
def make_orchestrator():
    """Build an orchestrator wired to the given fakes."""

    def _make(analyzer: FakeAnalyzer, resolver: FakeResolver, source: FakeImageSource | None = None, max_images: int | None = None) -> BatchAnalysisOrchestrator:
        aggregator = ImageNutritionAggregator(source or FakeImageSource(), analyzer, resolver)
        return BatchAnalysisOrchestrator(aggregator, max_images=max_images)

    return _make
