from __future__ import annotations

import asyncio
import json
import re
from typing import Any

import structlog
from google import genai
from google.genai import types

from domain.calculations import normalize_confidence
from domain.entities import DishCandidate, VisionAnalysis
from domain.errors import AIUnavailableError


log = structlog.get_logger(__name__)


VISION_PROMPT = (
    "Analyze this food image in detail. Provide:\n"
    "1. A detailed description of what you see (keep it concise)\n"
    "2. List of specific dishes/food items with their approximate serving sizes"
    " (be specific about dish names for nutrition lookup)\n"
    "3. List of ingredients/objects you can identify\n"
    "4. Your confidence level in the analysis\n\n"
    "For dishes, use common, searchable names (e.g., \"chicken breast grilled\","
    " \"caesar salad\", \"chocolate chip cookie\" rather than vague terms).\n\n"
    "Respond in JSON with the following structure:\n"
    "{\n"
    "  \"description\": \"detailed description of the food image\",\n"
    "  \"dishes\": [{\"name\": \"specific dish name\", \"servingSize\": \"1 serving\" or \"1 cup\" etc}],\n"
    "  \"objects\": [\"ingredient1\", \"ingredient2\"],\n"
    "  \"confidence\": 0.95\n"
    "}"
)

DEGRADED_CONFIDENCE = 0.75
DEFAULT_SERVING_SIZE = "1 serving"

_FENCE_RE = re.compile(r"```(?:json)?\n?|\n?```")


def _parse_dishes(raw: Any) -> tuple[DishCandidate, ...]:
    if not isinstance(raw, list):
        return ()
    dishes: list[DishCandidate] = []
    for it in raw:
        if not isinstance(it, dict):
            continue
        name = it.get("name")
        if not isinstance(name, str) or not name.strip():
            continue
        serving = it.get("servingSize")
        if not isinstance(serving, str) or not serving.strip():
            serving = DEFAULT_SERVING_SIZE
        dishes.append(DishCandidate(name=name.strip(), serving_size=serving))
    return tuple(dishes)


def parse_vision_response(text: str) -> VisionAnalysis:
    """Turn raw model output into a VisionAnalysis.

    Output that is not a JSON object after stripping code fences degrades to
    the raw text as description with a fixed confidence and no dishes.
    """
    clean = _FENCE_RE.sub("", text).strip()
    try:
        data = json.loads(clean)
    except ValueError:
        data = None
    if not isinstance(data, dict):
        log.info("vision_parse_fallback", length=len(text))
        return VisionAnalysis(description=text, confidence=DEGRADED_CONFIDENCE)

    description = data.get("description")
    objects = data.get("objects")
    return VisionAnalysis(
        description=description if isinstance(description, str) else "",
        confidence=normalize_confidence(data.get("confidence")),
        objects=tuple(o for o in objects if isinstance(o, str)) if isinstance(objects, list) else (),
        dishes=_parse_dishes(data.get("dishes")),
    )


class GeminiImageAnalyzer:
    """Asks Gemini to describe one food image and propose searchable dishes.

    Transport failures and timeouts are raised as AIUnavailableError; format
    drift in the answer is absorbed by parse_vision_response.
    """

    def __init__(self, client: genai.Client, *, model: str = "gemini-1.5-flash", timeout: float = 9.0) -> None:
        self._client = client
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_api_key(cls, api_key: str, *, model: str = "gemini-1.5-flash", timeout: float = 9.0) -> GeminiImageAnalyzer:
        return cls(genai.Client(api_key=api_key), model=model, timeout=timeout)

    async def analyze(self, image_bytes: bytes, mime_type: str) -> VisionAnalysis:
        contents = [
            VISION_PROMPT,
            types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
        ]
        try:
            resp = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=self.model,
                    contents=contents,
                    config=types.GenerateContentConfig(
                        temperature=0.2,
                        response_mime_type="application/json",
                    ),
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise AIUnavailableError(f"Vision model timed out after {self.timeout:g}s") from e
        except Exception as e:
            raise AIUnavailableError(f"Vision model request failed: {e}") from e
        return parse_vision_response(resp.text or "")
