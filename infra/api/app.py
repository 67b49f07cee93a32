from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import Settings, settings as default_settings
from domain.errors import ConfigurationError, DomainError
from domain.use_cases import BatchAnalysisOrchestrator, ImageNutritionAggregator
from services.nutrition.nutritionix import NutritionixResolver
from services.vision.gemini_vision import GeminiImageAnalyzer
from services.vision.photo_pipeline import ImageFetcher
from .schemas import AnalyzeImagesRequest, BatchAnalysisOut, ErrorResponse


STATUS_MESSAGE = "Image analysis API is running. Use POST to analyze images."


def build_orchestrator(cfg: Settings, client: httpx.AsyncClient) -> BatchAnalysisOrchestrator | None:
    if not cfg.gemini_api_key:
        return None
    analyzer = GeminiImageAnalyzer.from_api_key(
        cfg.gemini_api_key,
        model=cfg.gemini_model,
        timeout=cfg.vision_timeout_s,
    )
    resolver = NutritionixResolver(
        client,
        cfg.nutritionix_app_id,
        cfg.nutritionix_api_key,
        base_url=cfg.nutritionix_base_url,
        timeout=cfg.nutrition_timeout_s,
    )
    fetcher = ImageFetcher(client, timeout=cfg.image_fetch_timeout_s)
    aggregator = ImageNutritionAggregator(fetcher, analyzer, resolver)
    return BatchAnalysisOrchestrator(aggregator, max_images=cfg.max_images_per_batch)


def create_app(
    cfg: Settings | None = None,
    *,
    orchestrator: BatchAnalysisOrchestrator | None = None,
) -> FastAPI:
    cfg = cfg or default_settings
    log = structlog.get_logger("api")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.orchestrator is not None:
            yield
            return
        async with httpx.AsyncClient() as client:
            app.state.orchestrator = build_orchestrator(cfg, client)
            if not cfg.nutritionix_configured:
                log.warning("nutritionix_not_configured")
            yield
            app.state.orchestrator = None

    app = FastAPI(title="Meal Photo Nutrition API", version="0.1.0", lifespan=lifespan)
    app.state.orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.allowed_origins.split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def trace_requests(request: Request, call_next):
        trace_id = request.headers.get("X-Trace-Id") or uuid.uuid4().hex[:12]
        structlog.contextvars.bind_contextvars(trace_id=trace_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            response.headers["X-Trace-Id"] = trace_id
            return response
        finally:
            structlog.contextvars.unbind_contextvars("trace_id")

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        log.info("request_rejected", code=exc.code, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/analyze-image")
    def analyze_image_status() -> dict[str, str]:
        return {"message": STATUS_MESSAGE}

    @app.post(
        "/api/analyze-image",
        response_model=BatchAnalysisOut,
        response_model_exclude_none=True,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def analyze_images(payload: AnalyzeImagesRequest, request: Request):
        if not cfg.gemini_api_key:
            raise ConfigurationError("Gemini API key not configured")
        orch: BatchAnalysisOrchestrator | None = request.app.state.orchestrator
        if orch is None:
            raise ConfigurationError("Image analysis is not initialized")
        images = [img.to_entity() for img in payload.images]
        orch.check_batch(images)
        try:
            result = await orch.analyze_batch(images)
        except DomainError:
            raise
        except Exception:
            log.exception("analysis_error", images=len(images))
            return JSONResponse(status_code=500, content={"error": "Failed to analyze images"})
        return BatchAnalysisOut.from_entity(result)

    return app
