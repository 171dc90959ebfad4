"""Shared fixtures for the test suite."""

from __future__ import annotations

from typing import Any
import pytest
from httpx import ASGITransport, AsyncClient

from fatfit.db import get_session
from fatfit.main import app


# ---------------------------------------------------------------------------
# Fake DB session (no real Postgres needed)
# ---------------------------------------------------------------------------

class FakeSession:
    """Minimal stand-in for AsyncSession: records statements, returns canned rows."""

    def __init__(self, rows: list[dict[str, Any]] | None = None, rowcount: int = 1):
        self._rows = rows or []
        self.rowcount = rowcount
        self.statements: list[tuple[str, dict[str, Any] | None]] = []
        self.commits = 0
        self.rollbacks = 0

    async def execute(self, stmt, params=None):
        self.statements.append((str(stmt), params))
        return FakeResult(self._rows, self.rowcount)

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]], rowcount: int = 1):
        self._rows = rows
        self._keys = list(rows[0].keys()) if rows else []
        self.rowcount = rowcount

    def keys(self):
        return self._keys

    def fetchone(self):
        if not self._rows:
            return None
        return tuple(self._rows[0][k] for k in self._keys)

    def fetchall(self):
        return [tuple(r[k] for k in self._keys) for r in self._rows]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_session():
    """Return a FakeSession with no rows (override _rows in tests if needed)."""
    return FakeSession()


@pytest.fixture()
def override_session(fake_session):
    """Override the FastAPI dependency so no real DB is needed."""
    async def _override():
        yield fake_session

    app.dependency_overrides[get_session] = _override
    yield fake_session
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_session):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def make_answers(
    age: Any = "30",
    gender: str = "Male",
    weight: Any = "80",
    height: Any = "180",
    goal: Any = "Maintain current weight",
    **extra: Any,
) -> dict[str, Any]:
    """Helper to build a stored quiz answers document."""
    answers = {
        "1.What is your age?": age,
        "2.What is your gender?": gender,
        "3.What is your current weight?": weight,
        "4.What is your height?": height,
        "5.What is your primary goal?": goal,
    }
    answers.update(extra)
    return answers
