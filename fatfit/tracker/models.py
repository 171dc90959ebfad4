"""Request/response contracts: Pydantic v2 models.

Wire names (camelCase aliases, food_* keys) follow what the web frontend sends
and reads.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snacks = "snacks"


class FoodItem(BaseModel):
    """A single normalized foods.search result."""

    food_id: str | None = None
    food_name: str | None = None
    brand_name: str | None = None
    food_kcal: int | None = None
    food_fat: float | None = None
    food_carbs: float | None = None
    food_protein: float | None = None


class LoggedFood(BaseModel):
    """A food logged against a meal: full macros required."""

    name: str = Field(min_length=1)
    calories: float
    protein: float
    carbs: float
    fat: float

    model_config = {"extra": "allow"}


class LoggedRecipe(BaseModel):
    """A recipe logged against a meal: only name and calories required."""

    name: str = Field(min_length=1)
    calories: float

    model_config = {"extra": "allow"}


class FoodLogRequest(BaseModel):
    foods: list[LoggedFood]
    meal_type: MealType = Field(alias="mealType")

    model_config = {"populate_by_name": True}


class RecipeLogRequest(BaseModel):
    foods: list[LoggedRecipe]
    meal_type: MealType = Field(alias="mealType")

    model_config = {"populate_by_name": True}


class FoodRemoveRequest(BaseModel):
    food_name: str = Field(alias="foodName", min_length=1)

    model_config = {"populate_by_name": True}


class TotalCalories(BaseModel):
    total_calories: float = Field(alias="totalCalories")

    model_config = {"populate_by_name": True}


class CheckUserRequest(BaseModel):
    username: str | None = None
    email: str | None = None


class RenameUserRequest(BaseModel):
    new_username: str = Field(alias="newUsername")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _not_blank(self) -> RenameUserRequest:
        self.new_username = self.new_username.strip()
        return self


class AnswersRequest(BaseModel):
    username: str = Field(min_length=1)
    answers: dict[str, Any]


class ProfileResponse(BaseModel):
    user: dict[str, Any]
    extracted_user_answers: dict[str, Any] | None = Field(default=None, serialization_alias="extractedUserAnswers")
    daily_calorie_target: int | None = Field(default=None, serialization_alias="dailyCalorieTarget")
    message: str = ""
