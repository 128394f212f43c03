from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from recipeshare import create_app
from recipeshare.memory_storage import InMemoryRecipeStorage
from recipeshare.service import RecipeService


class FakeClock:
    """Deterministic clock; every call moves time forward by one minute."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(minutes=1)
        return current


def make_payload(**overrides):
    payload = {
        "title": "Lemon Garlic Chicken",
        "ingredients": ["2 chicken breasts", "1 lemon", "3 cloves garlic"],
        "steps": [
            "Season the chicken with salt and pepper",
            "Sear the chicken in a hot pan for six minutes per side",
            "Finish with lemon juice and minced garlic",
        ],
        "cookingTime": 30,
        "dietaryTags": ["High-Protein", "Quick"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> InMemoryRecipeStorage:
    return InMemoryRecipeStorage()


@pytest.fixture
def service(storage, clock) -> RecipeService:
    return RecipeService(storage, clock=clock)


@pytest.fixture
def app(storage):
    app = create_app(storage=storage, config={"TESTING": True})
    return app


@pytest.fixture
def client(app):
    return app.test_client()
