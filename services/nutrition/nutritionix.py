from __future__ import annotations

from typing import Any

import httpx
import structlog

from domain.calculations import as_non_negative
from domain.entities import NutritionFacts


log = structlog.get_logger(__name__)


NATURAL_NUTRIENTS_PATH = "/v2/natural/nutrients"


def parse_nutritionix_food(entry: dict[str, Any]) -> NutritionFacts:
    qty = entry.get("serving_qty")
    unit = entry.get("serving_unit")
    return NutritionFacts(
        food_name=str(entry.get("food_name") or ""),
        serving_qty=as_non_negative(qty) if qty is not None else 1.0,
        serving_unit=unit if isinstance(unit, str) and unit else "serving",
        serving_weight_grams=as_non_negative(entry.get("serving_weight_grams")),
        calories=as_non_negative(entry.get("nf_calories")),
        total_fat=as_non_negative(entry.get("nf_total_fat")),
        saturated_fat=as_non_negative(entry.get("nf_saturated_fat")),
        cholesterol=as_non_negative(entry.get("nf_cholesterol")),
        sodium=as_non_negative(entry.get("nf_sodium")),
        total_carbohydrate=as_non_negative(entry.get("nf_total_carbohydrate")),
        dietary_fiber=as_non_negative(entry.get("nf_dietary_fiber")),
        sugars=as_non_negative(entry.get("nf_sugars")),
        protein=as_non_negative(entry.get("nf_protein")),
    )


class NutritionixResolver:
    """Looks up one dish by name in the Nutritionix natural-language endpoint.

    Every failure (missing credentials, transport error, timeout, non-2xx,
    malformed body) is reported as ``None``, same as an empty match list.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        app_id: str | None,
        api_key: str | None,
        *,
        base_url: str = "https://trackapi.nutritionix.com",
        timeout: float = 5.0,
    ) -> None:
        self._client = client
        self.app_id = app_id
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.app_id and self.api_key)

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-app-id": self.app_id or "",
            "x-app-key": self.api_key or "",
        }

    async def resolve(self, dish_name: str) -> NutritionFacts | None:
        if not self.configured:
            log.warning("nutritionix_not_configured", dish=dish_name)
            return None
        if not dish_name or not dish_name.strip():
            return None
        try:
            resp = await self._client.post(
                f"{self.base_url}{NATURAL_NUTRIENTS_PATH}",
                json={"query": dish_name},
                headers=self._headers(),
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            log.warning("nutrition_lookup_failed", dish=dish_name, error=str(e) or type(e).__name__)
            return None
        if not resp.is_success:
            log.warning("nutrition_lookup_failed", dish=dish_name, status=resp.status_code)
            return None
        try:
            data = resp.json()
        except ValueError:
            log.warning("nutrition_lookup_failed", dish=dish_name, error="invalid_json")
            return None
        foods = data.get("foods") if isinstance(data, dict) else None
        if not isinstance(foods, list) or not foods:
            return None
        # upstream relevance ranking is trusted as-is
        first = foods[0]
        if not isinstance(first, dict):
            log.warning("nutrition_lookup_failed", dish=dish_name, error="malformed_entry")
            return None
        return parse_nutritionix_food(first)
