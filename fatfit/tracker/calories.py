"""Goal normalization and daily calorie targets: pure, never raises."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Goal(str, Enum):
    lose = "lose"
    gain = "gain"
    keep = "keep"


class Sex(str, Enum):
    male = "male"
    other = "other"

    @classmethod
    def from_text(cls, raw: Any) -> Sex:
        if isinstance(raw, str) and raw.strip().lower() == "male":
            return cls.male
        return cls.other


# Quiz phrases, matched exactly (case-sensitive)
GOAL_PHRASES: dict[str, Goal] = {
    "Lose weight": Goal.lose,
    "Gain muscle": Goal.gain,
    "Maintain current weight": Goal.keep,
}

GOAL_FACTORS: dict[Goal, float] = {
    Goal.lose: 0.8,  # 20% deficit
    Goal.gain: 1.2,  # 20% surplus
    Goal.keep: 1.0,
}

_LEADING_NUMBER_RE = re.compile(r"^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)")


@dataclass(frozen=True, slots=True)
class Profile:
    """Biometrics as read from quiz answers. Values may still be raw strings."""

    age: Any = None
    height_cm: Any = None
    weight_kg: Any = None
    sex: Sex = Sex.other


def convert_goal(raw: Any) -> Goal:
    """Map a quiz goal phrase to a Goal. Unknown or non-string input maps to keep."""
    if not isinstance(raw, str):
        logger.warning("convert_goal received non-string input: %r", raw)
        return Goal.keep
    return GOAL_PHRASES.get(raw, Goal.keep)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def parse_number(raw: Any) -> float | None:
    """Finite float from a number or the leading number of a string, else None.

    Trailing text is ignored, so "80 kg" and "180cm" read as 80 and 180.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        m = _LEADING_NUMBER_RE.match(raw)
        if m is None:
            return None
        raw = m.group(1)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def bmr_mifflin_st_jeor(weight_kg: float, height_cm: float, age_years: int, sex: Sex) -> float:
    """Mifflin-St Jeor BMR formula. Returns kcal/day."""
    base = 10.0 * weight_kg + 6.25 * height_cm - 5.0 * age_years
    if sex is Sex.male:
        return base + 5.0
    return base - 161.0


def calculate_calories(profile: Profile, goal: Goal | str | None) -> int:
    """Daily calorie target for a profile and goal.

    Returns 0 (with a logged warning) when age, height or weight is not numeric.
    A raw goal phrase is accepted and normalized via convert_goal.
    """
    age = parse_number(profile.age)
    height = parse_number(profile.height_cm)
    weight = parse_number(profile.weight_kg)
    if age is None or height is None or weight is None:
        logger.warning(
            "calculate_calories received non-numeric biometrics: age=%r height=%r weight=%r",
            profile.age,
            profile.height_cm,
            profile.weight_kg,
        )
        return 0

    if not isinstance(goal, Goal):
        goal = convert_goal(goal)

    bmr = bmr_mifflin_st_jeor(weight, height, int(age), Sex.from_text(profile.sex))
    return round_half_up(bmr * GOAL_FACTORS[goal])
