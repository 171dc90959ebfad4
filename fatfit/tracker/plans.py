"""Fitness Tribe AI client: nutrition and workout plan generation."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

import httpx

from fatfit.config import settings
from fatfit.errors import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)

NUTRITION_PLAN_PATH = "/nutrition-plans/generate"
WORKOUT_PLAN_PATH = "/workout-plans/generate"


class FitnessPlanClient:
    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    async def _post(self, path: str, payload: dict[str, Any]) -> Any:
        if not self._api_key:
            logger.error("FITNESS_API_KEY is not configured")
            raise ConfigurationError("Fitness Tribe API key is not configured")

        headers = {"Authorization": f"Bearer {self._api_key}"}
        logger.debug("POST %s%s payload=%s", self._base_url, path, payload)
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url, timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.post(path, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Could not reach Fitness Tribe API (%s): %s", path, exc)
            raise ProviderError("Could not contact Fitness Tribe API", details=str(exc)) from exc

        try:
            body = resp.json()
        except ValueError:
            body = resp.text

        if resp.is_error:
            logger.error("Fitness Tribe API error on %s: %s - %s", path, resp.status_code, body)
            raise ProviderError("Fitness Tribe API error", resp.status_code, body)
        return body

    async def generate_nutrition_plan(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Request a meal plan. A body with `detail` or without `meal_plan` is an upstream error."""
        plan = await self._post(NUTRITION_PLAN_PATH, payload)
        if not isinstance(plan, dict):
            logger.error("Fitness Tribe API returned no nutrition plan: %r", plan)
            raise ProviderError("No response from Fitness Tribe API", details=plan)
        if plan.get("detail"):
            logger.error("Fitness Tribe API reported an error: %s", plan["detail"])
            raise ProviderError("Fitness Tribe API error", details=plan["detail"])
        if "meal_plan" not in plan:
            logger.error("Fitness Tribe API response has no meal_plan: %s", plan)
            raise ProviderError("Could not generate nutrition plan", details=plan)
        return plan

    async def generate_workout_plan(self, payload: dict[str, Any]) -> Any:
        return await self._post(WORKOUT_PLAN_PATH, payload)


@lru_cache
def get_plan_client() -> FitnessPlanClient:
    return FitnessPlanClient(
        settings.fitness_api_base_url,
        settings.fitness_api_key,
        timeout=settings.http_timeout,
    )
