"""FatSecret food & recipe search, plus normalization of its search payloads."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Any

import httpx

from fatfit.config import settings
from fatfit.errors import ProviderError
from fatfit.tracker.models import FoodItem
from fatfit.tracker.token_cache import TokenCache, response_details

logger = logging.getLogger(__name__)

# food_description looks like "Per 100g - Calories: 120kcal | Fat: 3.00g | Carbs: 20.00g | Protein: 5.00g"
_CALORIES_RE = re.compile(r"Calories:\s*(\d+)\s*kcal", re.IGNORECASE)
_FAT_RE = re.compile(r"Fat:\s*([\d.]+)g", re.IGNORECASE)
_CARBS_RE = re.compile(r"Carbs:\s*([\d.]+)g", re.IGNORECASE)
_PROTEIN_RE = re.compile(r"Protein:\s*([\d.]+)g", re.IGNORECASE)


def _match_float(pattern: re.Pattern[str], text: str) -> float | None:
    m = pattern.search(text)
    if m is None:
        return None
    try:
        return float(m.group(1))
    except ValueError:
        return None


def parse_description(description: Any) -> dict[str, float | int | None]:
    """Pull kcal/fat/carbs/protein out of a free-text description. Missing values are None."""
    text = description if isinstance(description, str) else ""
    kcal = _CALORIES_RE.search(text)
    return {
        "food_kcal": int(kcal.group(1)) if kcal else None,
        "food_fat": _match_float(_FAT_RE, text),
        "food_carbs": _match_float(_CARBS_RE, text),
        "food_protein": _match_float(_PROTEIN_RE, text),
    }


def _as_text(value: Any) -> str | None:
    return None if value is None else str(value)


def filter_foods(payload: Any) -> list[FoodItem]:
    """Flatten a foods.search payload into FoodItems.

    Returns an empty list when foods.food is absent or not a list. Never raises.
    """
    foods = payload.get("foods") if isinstance(payload, dict) else None
    food_list = foods.get("food") if isinstance(foods, dict) else None
    if not isinstance(food_list, list):
        logger.warning("No foods found or invalid structure: %r", food_list)
        return []

    items: list[FoodItem] = []
    for food in food_list:
        if not isinstance(food, dict):
            logger.warning("Skipping malformed food entry: %r", food)
            continue
        items.append(
            FoodItem(
                food_id=_as_text(food.get("food_id")),
                food_name=_as_text(food.get("food_name")),
                brand_name=_as_text(food.get("brand_name")),
                **parse_description(food.get("food_description")),
            )
        )
    return items


def extract_recipes(payload: Any) -> list[dict[str, Any]]:
    """Recipe list from a recipes.search payload, or an empty list."""
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []
    recipes = payload.get("recipes")
    if isinstance(recipes, list):
        return recipes
    if isinstance(recipes, dict) and isinstance(recipes.get("recipe"), list):
        return recipes["recipe"]
    return []


class FatSecretClient:
    """Bearer-authenticated calls to the FatSecret platform API."""

    def __init__(
        self,
        tokens: TokenCache,
        api_url: str,
        recipes_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._tokens = tokens
        self._api_url = api_url
        self._recipes_url = recipes_url
        self._timeout = timeout
        self._transport = transport

    async def _send(self, method: str, url: str, what: str, **kwargs: Any) -> Any:
        token = await self._tokens.get_token()
        headers = {"Authorization": f"Bearer {token}", "Accept": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Error during FatSecret %s: %s", what, exc)
            raise ProviderError(f"FatSecret {what} failed", details=str(exc)) from exc

        if resp.is_error:
            details = response_details(resp)
            logger.error("FatSecret %s error: %s - %s", what, resp.status_code, details)
            if resp.status_code == 401:
                self._tokens.invalidate(token)
            raise ProviderError(f"FatSecret {what} failed", resp.status_code, details)

        try:
            return resp.json()
        except ValueError as exc:
            logger.error("FatSecret %s returned non-JSON body: %s", what, resp.text)
            raise ProviderError(f"FatSecret {what} failed", resp.status_code, resp.text) from exc

    async def search_foods(self, query: str) -> Any:
        return await self._send(
            "POST",
            self._api_url,
            "food search",
            data={"method": "foods.search", "search_expression": query, "format": "json"},
        )

    async def search_recipes(
        self,
        query: str,
        max_results: int = 20,
        page_number: int = 0,
        must_have_images: bool = False,
        recipe_types: str | None = None,
        recipe_types_matchall: bool | None = None,
    ) -> list[dict[str, Any]]:
        params: dict[str, str] = {
            "search_expression": query,
            "max_results": str(max_results),
            "page_number": str(page_number),
            "must_have_images": "true" if must_have_images else "false",
            "format": "json",
        }
        if recipe_types:
            params["recipe_types"] = recipe_types
        if recipe_types_matchall is not None:
            params["recipe_types_matchall"] = "true" if recipe_types_matchall else "false"

        data = await self._send("GET", self._recipes_url, "recipe search", params=params)
        return extract_recipes(data)


@lru_cache
def get_fatsecret_client() -> FatSecretClient:
    """Process-wide client sharing one TokenCache for the configured credentials."""
    tokens = TokenCache(
        settings.fatsecret_client_id,
        settings.fatsecret_client_secret,
        settings.fatsecret_token_url,
        scope=settings.fatsecret_scope,
        margin_s=settings.token_expiry_margin_s,
        timeout=settings.http_timeout,
    )
    return FatSecretClient(
        tokens,
        settings.fatsecret_api_url,
        settings.fatsecret_recipes_url,
        timeout=settings.http_timeout,
    )
