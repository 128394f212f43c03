from __future__ import annotations

import copy
import threading
from datetime import datetime
from typing import Any, Dict, Iterable, List

from .mapping import merge_update
from .models import Recipe
from .storage import RecipeRepository


class InMemoryRecipeStorage(RecipeRepository):
    """Process-local storage used for development and tests.

    Ids start at 1 and are never reused. Recipes are copied on the way in
    and out so callers cannot change stored state behind the store's back.
    """

    def __init__(self) -> None:
        self._recipes: Dict[int, Recipe] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def list_recipes(self) -> Iterable[Recipe]:
        with self._lock:
            return [copy.deepcopy(recipe) for recipe in self._recipes.values()]

    def get_recipe(self, recipe_id: int) -> Recipe:
        with self._lock:
            try:
                return copy.deepcopy(self._recipes[recipe_id])
            except KeyError:
                raise KeyError(f"Recipe '{recipe_id}' does not exist.") from None

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
        with self._lock:
            recipe = Recipe(
                id=self._next_id,
                title=title,
                ingredients=list(ingredients),
                steps=list(steps),
                cooking_time=cooking_time,
                dietary_tags=list(dietary_tags),
                created_at=created_at,
                updated_at=updated_at,
            )
            self._recipes[recipe.id] = recipe
            self._next_id += 1
            return copy.deepcopy(recipe)

    def update_recipe(self, recipe_id: int, *, updated_at: datetime, **changes: Any) -> Recipe:
        with self._lock:
            recipe = self._recipes.get(recipe_id)
            if recipe is None:
                raise KeyError(f"Recipe '{recipe_id}' does not exist.")

            updated = merge_update(recipe, changes)
            updated.updated_at = updated_at
            self._recipes[recipe_id] = updated
            return copy.deepcopy(updated)

    def delete_recipe(self, recipe_id: int) -> None:
        with self._lock:
            if self._recipes.pop(recipe_id, None) is None:
                raise KeyError(f"Recipe '{recipe_id}' does not exist.")


__all__ = ["InMemoryRecipeStorage"]
