"""Document store: async access to users, quiz_answers, food_entries, calorie_totals.

JSONB columns hold the document-shaped parts (quiz answers, per-meal food
arrays). food_entries is unique on (username, meal_type, entry_date) so a
day's meal is one row whose foods array grows by append.
Lookups return None / empty lists when nothing is found: never raise on
missing rows.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession


def _as_json(value: Any) -> Any:
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return value


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


async def fetch_user(session: AsyncSession, username: str) -> dict[str, Any] | None:
    """User document without credentials."""
    result = await session.execute(
        text("SELECT username, fullname, email, rights FROM users WHERE username = :username"),
        {"username": username},
    )
    row = result.fetchone()
    if row is None:
        return None
    return dict(zip(result.keys(), row))


async def find_user(
    session: AsyncSession,
    username: str | None = None,
    email: str | None = None,
) -> dict[str, Any] | None:
    """Match on username OR email, whichever are given."""
    clauses: list[str] = []
    params: dict[str, Any] = {}
    if username:
        clauses.append("username = :username")
        params["username"] = username
    if email:
        clauses.append("email = :email")
        params["email"] = email
    if not clauses:
        return None

    result = await session.execute(
        text("SELECT username, email FROM users WHERE " + " OR ".join(clauses) + " LIMIT 1"),
        params,
    )
    row = result.fetchone()
    if row is None:
        return None
    return dict(zip(result.keys(), row))


async def rename_user(session: AsyncSession, username: str, new_username: str) -> bool:
    """Rename in users and quiz_answers. False when the user does not exist."""
    result = await session.execute(
        text("UPDATE users SET username = :new WHERE username = :old"),
        {"old": username, "new": new_username},
    )
    if result.rowcount == 0:
        await session.rollback()
        return False
    await session.execute(
        text("UPDATE quiz_answers SET username = :new WHERE username = :old"),
        {"old": username, "new": new_username},
    )
    await session.commit()
    return True


async def delete_user(session: AsyncSession, username: str) -> bool:
    """Delete the user and their quiz answers. False when no user row was deleted."""
    result = await session.execute(
        text("DELETE FROM users WHERE username = :username"), {"username": username}
    )
    await session.execute(
        text("DELETE FROM quiz_answers WHERE username = :username"), {"username": username}
    )
    await session.commit()
    return result.rowcount > 0


# ---------------------------------------------------------------------------
# Quiz answers
# ---------------------------------------------------------------------------


async def save_answers(session: AsyncSession, username: str, answers: dict[str, Any]) -> None:
    await session.execute(
        text(
            "INSERT INTO quiz_answers (username, answers, submitted_at) "
            "VALUES (:username, CAST(:answers AS JSONB), :submitted_at)"
        ),
        {
            "username": username,
            "answers": json.dumps(answers),
            "submitted_at": datetime.now(timezone.utc),
        },
    )
    await session.commit()


async def fetch_latest_answers(session: AsyncSession, username: str) -> dict[str, Any] | None:
    result = await session.execute(
        text(
            "SELECT answers FROM quiz_answers WHERE username = :username "
            "ORDER BY submitted_at DESC LIMIT 1"
        ),
        {"username": username},
    )
    row = result.fetchone()
    if row is None:
        return None
    answers = _as_json(row[0])
    return answers if isinstance(answers, dict) else None


# ---------------------------------------------------------------------------
# Food entries
# ---------------------------------------------------------------------------


async def append_foods(
    session: AsyncSession,
    username: str,
    meal_type: str,
    foods: list[dict[str, Any]],
    entry_date: date,
) -> None:
    """Upsert the day's meal row, appending `foods` to its array."""
    await session.execute(
        text(
            "INSERT INTO food_entries (username, meal_type, entry_date, foods) "
            "VALUES (:username, :meal_type, :entry_date, CAST(:foods AS JSONB)) "
            "ON CONFLICT (username, meal_type, entry_date) "
            "DO UPDATE SET foods = food_entries.foods || EXCLUDED.foods"
        ),
        {
            "username": username,
            "meal_type": meal_type,
            "entry_date": entry_date,
            "foods": json.dumps(foods),
        },
    )
    await session.commit()


async def fetch_meal_foods(
    session: AsyncSession,
    username: str,
    meal_type: str,
    entry_date: date | None = None,
) -> list[dict[str, Any]]:
    """All foods logged for a meal, flattened across days (or for one day)."""
    query = "SELECT foods FROM food_entries WHERE username = :username AND meal_type = :meal_type"
    params: dict[str, Any] = {"username": username, "meal_type": meal_type}
    if entry_date is not None:
        query += " AND entry_date = :entry_date"
        params["entry_date"] = entry_date
    query += " ORDER BY entry_date"

    result = await session.execute(text(query), params)
    foods: list[dict[str, Any]] = []
    for (raw,) in result.fetchall():
        items = _as_json(raw)
        if isinstance(items, list):
            foods.extend(items)
    return foods


async def remove_food(session: AsyncSession, username: str, meal_type: str, food_name: str) -> int:
    """Drop every food named `food_name` from the meal on all days. Returns rows modified."""
    result = await session.execute(
        text(
            "UPDATE food_entries SET foods = COALESCE("
            "(SELECT jsonb_agg(f) FROM jsonb_array_elements(foods) AS f "
            "WHERE f->>'name' IS DISTINCT FROM :food_name), '[]'::jsonb) "
            "WHERE username = :username AND meal_type = :meal_type "
            "AND foods @> jsonb_build_array(jsonb_build_object('name', CAST(:food_name AS TEXT)))"
        ),
        {"username": username, "meal_type": meal_type, "food_name": food_name},
    )
    await session.commit()
    return result.rowcount


# ---------------------------------------------------------------------------
# Daily calorie totals
# ---------------------------------------------------------------------------


async def fetch_total_calories(session: AsyncSession, username: str) -> float:
    result = await session.execute(
        text("SELECT total_calories FROM calorie_totals WHERE username = :username"),
        {"username": username},
    )
    row = result.fetchone()
    return row[0] if row is not None and row[0] is not None else 0


async def upsert_total_calories(session: AsyncSession, username: str, total_calories: float) -> None:
    await session.execute(
        text(
            "INSERT INTO calorie_totals (username, total_calories) VALUES (:username, :total) "
            "ON CONFLICT (username) DO UPDATE SET total_calories = EXCLUDED.total_calories"
        ),
        {"username": username, "total": total_calories},
    )
    await session.commit()


async def clear_calorie_totals(session: AsyncSession) -> int:
    result = await session.execute(text("DELETE FROM calorie_totals"))
    await session.commit()
    return result.rowcount
