"""Onboarding quiz definition and answer extraction.

Answers are stored as a flat mapping keyed by "<number>.<question text>",
exactly as the frontend submits them. Everything here degrades to safe
defaults on malformed answers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fatfit.tracker.calories import Goal, Profile, Sex, convert_goal, parse_number


@dataclass(frozen=True, slots=True)
class QuizQuestion:
    number: int
    text: str
    kind: str  # "number" | "single" | "multiple"
    options: list[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.number}.{self.text}"


QUESTIONS: list[QuizQuestion] = [
    QuizQuestion(1, "What is your age?", "number"),
    QuizQuestion(2, "What is your gender?", "single", ["Male", "Female"]),
    QuizQuestion(3, "What is your current weight?", "number"),
    QuizQuestion(4, "What is your height?", "number"),
    QuizQuestion(
        5,
        "What is your primary goal?",
        "single",
        ["Lose weight", "Maintain current weight", "Gain muscle"],
    ),
    QuizQuestion(
        6,
        "What are your dietary preferences?",
        "multiple",
        ["None", "Vegetarian", "Vegan", "Pescatarian", "Keto", "Paleo", "Gluten-free"],
    ),
    QuizQuestion(
        7,
        "Do you have any food intolerances or allergies?",
        "multiple",
        ["None", "Lactose", "Gluten", "Nuts", "Shellfish", "Eggs", "Soy"],
    ),
    QuizQuestion(
        8,
        "How many days per week do you plan to work out?",
        "single",
        ["2 days", "3 days", "4 days", "5 days", "6 days", "7 days"],
    ),
]

AGE, GENDER, WEIGHT, HEIGHT, GOAL, DIET, INTOLERANCES, WORKOUT_DAYS = (q.key for q in QUESTIONS)

DEFAULT_WORKOUTS_PER_WEEK = 3
WORKOUT_DAY_OPTIONS: dict[str, int] = {f"{n} days": n for n in range(2, 8)}


def list_questions() -> list[dict]:
    return [
        {"number": q.number, "key": q.key, "question": q.text, "type": q.kind, "options": q.options}
        for q in QUESTIONS
    ]


def _as_int(raw: Any) -> int | None:
    value = parse_number(raw)
    return int(value) if value is not None else None


def profile_from_answers(answers: dict[str, Any]) -> Profile:
    return Profile(
        age=answers.get(AGE),
        height_cm=answers.get(HEIGHT),
        weight_kg=answers.get(WEIGHT),
        sex=Sex.from_text(answers.get(GENDER)),
    )


def goal_from_answers(answers: dict[str, Any]) -> Goal:
    return convert_goal(answers.get(GOAL))


def _without_none(raw: Any) -> list[str]:
    if isinstance(raw, list):
        return [opt for opt in raw if isinstance(opt, str) and opt != "None"]
    if isinstance(raw, str) and raw and raw != "None":
        return [raw]
    return []


def dietary_preferences(answers: dict[str, Any]) -> list[str]:
    return _without_none(answers.get(DIET))


def food_intolerances(answers: dict[str, Any]) -> list[str]:
    return _without_none(answers.get(INTOLERANCES))


def workouts_per_week(answers: dict[str, Any]) -> int:
    """Accept an integer 2 to 7 directly, else map "N days" text, else default 3."""
    raw = answers.get(WORKOUT_DAYS)
    if raw is None or isinstance(raw, bool):
        return DEFAULT_WORKOUTS_PER_WEEK
    value = parse_number(raw)
    if value is not None and value.is_integer() and 2 <= value <= 7:
        return int(value)
    if isinstance(raw, str):
        return WORKOUT_DAY_OPTIONS.get(raw.strip(), DEFAULT_WORKOUTS_PER_WEEK)
    return DEFAULT_WORKOUTS_PER_WEEK


def extracted_answers(answers: dict[str, Any]) -> dict[str, Any]:
    """Biometrics summary shown on the profile page."""
    gender = answers.get(GENDER)
    return {
        "age": _as_int(answers.get(AGE)),
        "gender": gender.lower() if isinstance(gender, str) else None,
        "weight": parse_number(answers.get(WEIGHT)),
        "height": parse_number(answers.get(HEIGHT)),
        "goal": goal_from_answers(answers).value,
    }


def _base_plan_fields(answers: dict[str, Any]) -> dict[str, Any]:
    gender = answers.get(GENDER)
    return {
        "weight": parse_number(answers.get(WEIGHT)),
        "height": parse_number(answers.get(HEIGHT)),
        "age": _as_int(answers.get(AGE)),
        "sex": gender.lower() if isinstance(gender, str) else None,
        "goal": goal_from_answers(answers).value,
    }


def nutrition_plan_request(answers: dict[str, Any], duration_weeks: int = 4) -> dict[str, Any]:
    payload = _base_plan_fields(answers)
    payload["dietary_preferences"] = dietary_preferences(answers)
    payload["food_intolerances"] = food_intolerances(answers)
    payload["duration_weeks"] = duration_weeks
    return payload


def workout_plan_request(answers: dict[str, Any]) -> dict[str, Any]:
    payload = _base_plan_fields(answers)
    payload["workouts_per_week"] = workouts_per_week(answers)
    return payload
