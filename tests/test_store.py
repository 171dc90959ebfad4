"""Tests for the document store queries (fake session, no Postgres)."""

from __future__ import annotations

import json
from datetime import date

from fatfit.tracker import store
from tests.conftest import FakeSession


class TestUsers:
    async def test_fetch_user(self):
        session = FakeSession(rows=[{"username": "ana", "fullname": "Ana", "email": "a@x", "rights": 0}])
        user = await store.fetch_user(session, "ana")
        assert user == {"username": "ana", "fullname": "Ana", "email": "a@x", "rights": 0}
        sql, params = session.statements[0]
        assert "password" not in sql
        assert params == {"username": "ana"}

    async def test_fetch_user_missing(self):
        assert await store.fetch_user(FakeSession(), "ghost") is None

    async def test_find_user_by_email_only(self):
        session = FakeSession()
        await store.find_user(session, email="a@x")
        sql, params = session.statements[0]
        assert "email = :email" in sql
        assert "username = :username" not in sql
        assert params == {"email": "a@x"}

    async def test_find_user_needs_a_key(self):
        session = FakeSession()
        assert await store.find_user(session) is None
        assert session.statements == []

    async def test_rename_unknown_user(self):
        session = FakeSession(rowcount=0)
        assert await store.rename_user(session, "ghost", "new") is False
        assert len(session.statements) == 1
        assert session.rollbacks == 1

    async def test_rename_moves_answers(self):
        session = FakeSession(rowcount=1)
        assert await store.rename_user(session, "ana", "anna") is True
        assert "quiz_answers" in session.statements[1][0]
        assert session.commits == 1

    async def test_delete_user(self):
        session = FakeSession(rowcount=1)
        assert await store.delete_user(session, "ana") is True
        assert len(session.statements) == 2


class TestAnswers:
    async def test_save_serializes_answers(self):
        session = FakeSession()
        await store.save_answers(session, "ana", {"1.What is your age?": "30"})
        _, params = session.statements[0]
        assert json.loads(params["answers"]) == {"1.What is your age?": "30"}
        assert session.commits == 1

    async def test_latest_answers_decodes_text(self):
        session = FakeSession(rows=[{"answers": '{"5.What is your primary goal?": "Gain muscle"}'}])
        answers = await store.fetch_latest_answers(session, "ana")
        assert answers == {"5.What is your primary goal?": "Gain muscle"}

    async def test_latest_answers_missing(self):
        assert await store.fetch_latest_answers(FakeSession(), "ana") is None


class TestFoodEntries:
    async def test_append_upserts(self):
        session = FakeSession()
        foods = [{"name": "Egg", "calories": 70}]
        await store.append_foods(session, "ana", "breakfast", foods, date(2026, 2, 15))
        sql, params = session.statements[0]
        assert "ON CONFLICT (username, meal_type, entry_date)" in sql
        assert "food_entries.foods || EXCLUDED.foods" in sql
        assert params["entry_date"] == date(2026, 2, 15)
        assert json.loads(params["foods"]) == foods

    async def test_fetch_meal_flattens_days(self):
        session = FakeSession(
            rows=[
                {"foods": [{"name": "Egg"}]},
                {"foods": [{"name": "Toast"}, {"name": "Jam"}]},
                {"foods": None},
            ]
        )
        foods = await store.fetch_meal_foods(session, "ana", "breakfast")
        assert [f["name"] for f in foods] == ["Egg", "Toast", "Jam"]
        assert "entry_date = :entry_date" not in session.statements[0][0]

    async def test_fetch_meal_single_day(self):
        session = FakeSession()
        await store.fetch_meal_foods(session, "ana", "lunch", date(2026, 2, 15))
        sql, params = session.statements[0]
        assert "entry_date = :entry_date" in sql
        assert params["entry_date"] == date(2026, 2, 15)

    async def test_remove_food_returns_modified(self):
        session = FakeSession(rowcount=2)
        assert await store.remove_food(session, "ana", "dinner", "Soup") == 2


class TestTotals:
    async def test_total_defaults_to_zero(self):
        assert await store.fetch_total_calories(FakeSession(), "ana") == 0

    async def test_total(self):
        session = FakeSession(rows=[{"total_calories": 1650}])
        assert await store.fetch_total_calories(session, "ana") == 1650

    async def test_clear_returns_deleted(self):
        session = FakeSession(rowcount=7)
        assert await store.clear_calorie_totals(session) == 7
        assert session.statements[0][0] == "DELETE FROM calorie_totals"
