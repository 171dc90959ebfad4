"""Food & recipe search proxy and the per-meal calorie counter."""

from __future__ import annotations

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fatfit.config import settings
from fatfit.db import get_session
from fatfit.tracker import store
from fatfit.tracker.fatsecret import FatSecretClient, filter_foods, get_fatsecret_client
from fatfit.tracker.models import (
    FoodItem,
    FoodLogRequest,
    FoodRemoveRequest,
    MealType,
    RecipeLogRequest,
    TotalCalories,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["food"])


def _today() -> date:
    return datetime.now(ZoneInfo(settings.default_tz)).date()


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@router.get("/fatsecret-search", response_model=list[FoodItem])
async def search_foods(
    q: str | None = Query(default=None, description="Search expression"),
    fatsecret: FatSecretClient = Depends(get_fatsecret_client),
) -> list[FoodItem]:
    if not q:
        raise HTTPException(status_code=400, detail="Missing search query")
    return filter_foods(await fatsecret.search_foods(q))


@router.get("/api/recipes/search")
async def search_recipes(
    q: str = Query(default=""),
    max_results: int = Query(default=20, ge=1, le=50),
    page_number: int = Query(default=0, ge=0),
    must_have_images: bool = Query(default=False),
    recipe_types: str | None = Query(default=None),
    recipe_types_matchall: bool | None = Query(default=None),
    fatsecret: FatSecretClient = Depends(get_fatsecret_client),
) -> list[dict]:
    return await fatsecret.search_recipes(
        q,
        max_results=max_results,
        page_number=page_number,
        must_have_images=must_have_images,
        recipe_types=recipe_types,
        recipe_types_matchall=recipe_types_matchall,
    )


# ---------------------------------------------------------------------------
# Meal logging
# ---------------------------------------------------------------------------


@router.post("/api/calories/{username}", status_code=201)
async def log_foods(
    username: str,
    body: FoodLogRequest,
    session: AsyncSession = Depends(get_session),
) -> dict:
    foods = [f.model_dump() for f in body.foods]
    await store.append_foods(session, username, body.meal_type.value, foods, _today())
    return {
        "success": True,
        "message": f"Added {len(foods)} food(s) to {body.meal_type.value} for {username}.",
    }


@router.post("/api/recipes-calories/{username}", status_code=201)
async def log_recipes(
    username: str,
    body: RecipeLogRequest,
    session: AsyncSession = Depends(get_session),
) -> dict:
    foods = [f.model_dump() for f in body.foods]
    await store.append_foods(session, username, body.meal_type.value, foods, _today())
    return {
        "success": True,
        "message": f"Added {len(foods)} recipe(s) to {body.meal_type.value} for {username}.",
    }


@router.delete("/food/{username}/{meal_type}")
async def remove_food(
    username: str,
    meal_type: MealType,
    body: FoodRemoveRequest = Body(...),
    session: AsyncSession = Depends(get_session),
) -> dict:
    modified = await store.remove_food(session, username, meal_type.value, body.food_name)
    if modified == 0:
        raise HTTPException(status_code=404, detail="Food item not found for this user and mealType.")
    return {
        "success": True,
        "message": f"Food item '{body.food_name}' was deleted from {meal_type.value} for {username}.",
    }


# ---------------------------------------------------------------------------
# Calorie counter
# ---------------------------------------------------------------------------


@router.get("/caloriecounter/{username}/total")
async def get_total(
    username: str,
    session: AsyncSession = Depends(get_session),
) -> dict:
    total = await store.fetch_total_calories(session, username)
    return {"username": username, "totalCalories": total}


@router.put("/caloriecounter/{username}/total")
async def put_total(
    username: str,
    body: TotalCalories,
    session: AsyncSession = Depends(get_session),
) -> dict:
    await store.upsert_total_calories(session, username, body.total_calories)
    return {"success": True, "username": username, "totalCalories": body.total_calories}


@router.get("/caloriecounter/{username}/{meal_type}")
async def get_meal(
    username: str,
    meal_type: MealType,
    day: date | None = Query(default=None, description="Only this day (default: all days)"),
    session: AsyncSession = Depends(get_session),
) -> dict:
    foods = await store.fetch_meal_foods(session, username, meal_type.value, day)
    return {"foods": foods}
