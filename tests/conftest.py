"""Shared fixtures: app factory, in-memory person store, planning repository mocks."""

import os
from unittest.mock import AsyncMock

import asyncpg
import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("JWT_SECRET", "test-secret-key-with-enough-length-for-hs256")

from auth import repository as auth_repository  # noqa: E402
from auth import security  # noqa: E402
from core.config import Settings  # noqa: E402
from main import create_app  # noqa: E402
from planning import repository as planning_repository  # noqa: E402

TEST_SECRET = "test-secret-key-with-enough-length-for-hs256"


class FakePersonStore:
    """Stands in for the `personne` table, with a unique index on email."""

    def __init__(self):
        self.rows: list[dict] = []

    async def get_person_by_email(self, email: str) -> dict | None:
        for row in self.rows:
            if row["email"] == email:
                return dict(row)
        return None

    async def create_person(self, *, nom: str, prenom: str, email: str, password_hash: str) -> None:
        if any(row["email"] == email for row in self.rows):
            raise asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
        self.rows.append(
            {
                "id": len(self.rows) + 1,
                "nom": nom,
                "prenom": prenom,
                "email": email,
                "password": password_hash,
            }
        )


@pytest.fixture
def settings():
    return Settings(jwt_secret=TEST_SECRET, rate_limit_max=1000)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # No context manager: the lifespan (DB pool) is not started.
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def person_store(monkeypatch):
    store = FakePersonStore()
    monkeypatch.setattr(auth_repository, "get_person_by_email", store.get_person_by_email)
    monkeypatch.setattr(auth_repository, "create_person", store.create_person)
    return store


@pytest.fixture
def planning_repo(monkeypatch):
    mocks = {
        "list_detailed_tasks": AsyncMock(return_value=[]),
        "list_person_skills": AsyncMock(return_value=[]),
        "assign_task": AsyncMock(return_value=None),
        "update_remaining_time": AsyncMock(return_value=None),
    }
    for name, mock in mocks.items():
        monkeypatch.setattr(planning_repository, name, mock)
    return mocks


@pytest.fixture
def auth_headers(settings):
    token = security.build_access_token(user_id=1, email="alice@example.com", settings=settings)
    return {"Authorization": f"Bearer {token}"}
