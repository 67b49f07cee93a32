from __future__ import annotations

from typing import Protocol, Sequence

import structlog

from core.concurrency import gather_indexed
from domain.calculations import sum_dish_totals, sum_image_totals
from domain.entities import (
    BatchAnalysisResult,
    DishCandidate,
    DishLookupMiss,
    ImageAnalysisResult,
    ImageRef,
    NutritionFacts,
    ResolvedDish,
    VisionAnalysis,
)
from domain.errors import InvalidInputError
from services.vision.photo_pipeline import mime_type_for_image


log = structlog.get_logger(__name__)


class DishResolver(Protocol):
    async def resolve(self, dish_name: str) -> NutritionFacts | None: ...


class ImageAnalyzer(Protocol):
    async def analyze(self, image_bytes: bytes, mime_type: str) -> VisionAnalysis: ...


class ImageSource(Protocol):
    async def fetch(self, url: str) -> bytes: ...


class ImageNutritionAggregator:
    """Analyzes one image and resolves every proposed dish.

    ``aggregate_one`` never raises: a failed download or vision call becomes
    a zero-confidence result, a failed dish lookup becomes a per-dish miss.
    """

    def __init__(self, source: ImageSource, analyzer: ImageAnalyzer, resolver: DishResolver) -> None:
        self.source = source
        self.analyzer = analyzer
        self.resolver = resolver

    async def _resolve_dish(self, candidate: DishCandidate) -> ResolvedDish:
        try:
            facts = await self.resolver.resolve(candidate.name)
        except Exception as e:
            log.warning("nutrition_lookup_failed", dish=candidate.name, error=str(e) or type(e).__name__)
            facts = None
        if facts is None:
            return ResolvedDish(candidate=candidate, outcome=DishLookupMiss())
        return ResolvedDish(candidate=candidate, outcome=facts)

    async def aggregate_one(self, image: ImageRef) -> ImageAnalysisResult:
        try:
            data = await self.source.fetch(image.url)
            vision = await self.analyzer.analyze(data, mime_type_for_image(image.url, image.name))
            dishes = await gather_indexed(vision.dishes, self._resolve_dish)
        except Exception as e:
            log.warning("image_analysis_failed", image=image.name, error=str(e) or type(e).__name__)
            return ImageAnalysisResult(
                image=image,
                description=f"Failed to analyze image: {str(e) or type(e).__name__}",
                confidence=0.0,
            )
        return ImageAnalysisResult(
            image=image,
            description=vision.description,
            confidence=vision.confidence,
            objects=vision.objects,
            dishes=tuple(dishes),
            total_nutrition=sum_dish_totals(dishes),
        )


class BatchAnalysisOrchestrator:
    def __init__(self, aggregator: ImageNutritionAggregator, *, max_images: int | None = None) -> None:
        self.aggregator = aggregator
        self.max_images = max_images

    def check_batch(self, images: Sequence[ImageRef]) -> None:
        if not images:
            raise InvalidInputError("No images provided")
        if self.max_images is not None and len(images) > self.max_images:
            raise InvalidInputError(f"Too many images: at most {self.max_images} per request")

    async def analyze_batch(self, images: Sequence[ImageRef]) -> BatchAnalysisResult:
        self.check_batch(images)
        log.info("analysis_started", images=len(images))
        results = await gather_indexed(images, self.aggregator.aggregate_one)
        overall = sum_image_totals(results)
        log.info("analysis_complete", images=len(results), overall_calories=overall.calories if overall else 0.0)
        return BatchAnalysisResult(images=tuple(results), overall_total_nutrition=overall)
