from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, List, Protocol

from .models import Recipe


class RecipeRepository(Protocol):
    """Protocol describing the behaviour required by the recipe service."""

    def list_recipes(self) -> Iterable[Recipe]:
        """Return every stored recipe, in no particular order."""

    def get_recipe(self, recipe_id: int) -> Recipe:
        """Return a single recipe or raise :class:`KeyError` if missing."""

    def add_recipe(
        self,
        *,
        title: str,
        ingredients: List[str],
        steps: List[str],
        cooking_time: int,
        dietary_tags: List[str],
        created_at: datetime,
        updated_at: datetime,
    ) -> Recipe:
        """Persist a new recipe under a freshly assigned id and return it."""

    def update_recipe(self, recipe_id: int, *, updated_at: datetime, **changes: Any) -> Recipe:
        """Write only the given attributes and ``updated_at``, return the stored recipe.

        ``changes`` holds a subset of ``title``, ``ingredients``, ``steps``,
        ``cooking_time`` and ``dietary_tags``; every other stored value is
        kept. Raise :class:`KeyError` if the recipe is gone.
        """

    def delete_recipe(self, recipe_id: int) -> None:
        """Remove a recipe or raise :class:`KeyError` if missing."""


__all__ = ["RecipeRepository"]
