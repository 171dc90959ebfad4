"""Users, quiz answers, profile page and AI plan endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from fatfit.auth import verify_token
from fatfit.config import settings
from fatfit.db import get_session
from fatfit.tracker import quiz, store
from fatfit.tracker.calories import calculate_calories
from fatfit.tracker.models import AnswersRequest, CheckUserRequest, ProfileResponse, RenameUserRequest
from fatfit.tracker.plans import FitnessPlanClient, get_plan_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


def _require_username(username: str) -> str:
    if not username or username.strip() in ("", "undefined", "null"):
        raise HTTPException(status_code=400, detail="Username is required in the URL.")
    return username


async def _load_answers(session: AsyncSession, username: str) -> dict:
    if await store.fetch_user(session, username) is None:
        raise HTTPException(status_code=404, detail="User not found.")
    answers = await store.fetch_latest_answers(session, username)
    if answers is None:
        raise HTTPException(status_code=404, detail="No quiz answers found for this user.")
    return answers


@router.get("/quiz")
async def get_quiz() -> list[dict]:
    return quiz.list_questions()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@router.post("/check-user")
async def check_user(
    body: CheckUserRequest,
    session: AsyncSession = Depends(get_session),
) -> dict:
    if not body.username and not body.email:
        raise HTTPException(status_code=400, detail="Username or email missing")
    existing = await store.find_user(session, body.username, body.email)
    return {"exists": existing is not None}


@router.put("/user/{username}")
async def rename_user(
    username: str,
    body: RenameUserRequest,
    session: AsyncSession = Depends(get_session),
) -> dict:
    if not body.new_username:
        raise HTTPException(status_code=400, detail="New username is required.")
    if await store.fetch_user(session, body.new_username) is not None:
        raise HTTPException(status_code=400, detail="Username already taken.")
    if not await store.rename_user(session, username, body.new_username):
        raise HTTPException(status_code=404, detail="User not found.")
    logger.info("Renamed user %s -> %s", username, body.new_username)
    return {"message": "Username updated successfully."}


@router.delete("/user/{username}")
async def delete_user(
    username: str,
    session: AsyncSession = Depends(get_session),
) -> dict:
    if not await store.delete_user(session, username):
        raise HTTPException(status_code=404, detail="User not found.")
    logger.info("Deleted user %s", username)
    return {"message": "User deleted successfully."}


@router.post("/answers", status_code=201)
async def save_answers(
    body: AnswersRequest,
    session: AsyncSession = Depends(get_session),
) -> dict:
    await store.save_answers(session, body.username, body.answers)
    return {"success": True, "message": "Answers saved successfully!"}


# ---------------------------------------------------------------------------
# Profile page
# ---------------------------------------------------------------------------


@router.get("/fatfit/{username}", response_model=ProfileResponse)
async def profile_page(
    username: str,
    session: AsyncSession = Depends(get_session),
    _: dict = Depends(verify_token),
) -> ProfileResponse:
    user = await store.fetch_user(session, username)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found.")

    extracted = None
    target = None
    answers = await store.fetch_latest_answers(session, username)
    if answers is not None:
        extracted = quiz.extracted_answers(answers)
        target = calculate_calories(quiz.profile_from_answers(answers), quiz.goal_from_answers(answers))

    return ProfileResponse(
        user=user,
        extracted_user_answers=extracted,
        daily_calorie_target=target,
        message=f"Welcome to your personalized FatFit page, {username}!",
    )


# ---------------------------------------------------------------------------
# AI plans
# ---------------------------------------------------------------------------


@router.post("/api/fitness-tribe/recipes/{username}")
async def nutrition_plan(
    username: str,
    session: AsyncSession = Depends(get_session),
    plans: FitnessPlanClient = Depends(get_plan_client),
) -> dict:
    answers = await _load_answers(session, _require_username(username))
    payload = quiz.nutrition_plan_request(answers, settings.plan_duration_weeks)
    logger.info("Nutrition plan requested for %s", username)
    return await plans.generate_nutrition_plan(payload)


@router.post("/api/fitness-tribe/workout/{username}")
async def workout_plan(
    username: str,
    session: AsyncSession = Depends(get_session),
    plans: FitnessPlanClient = Depends(get_plan_client),
):
    answers = await _load_answers(session, _require_username(username))
    payload = quiz.workout_plan_request(answers)
    logger.info("Workout plan requested for %s", username)
    return await plans.generate_workout_plan(payload)
