from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from .errors import RecipeNotFound, ValidationFailed
from .filters import RecipeFilters, sort_by_title
from .mapping import fields_from_payload, update_changes
from .models import Recipe
from .storage import RecipeRepository
from .validation import ValidationMode, validate

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RecipeService:
    """Recipe operations on top of a :class:`RecipeRepository`.

    Writes are all-or-nothing with respect to validation: a payload is
    checked completely before the store is touched. Store ``KeyError``s are
    reported as :class:`RecipeNotFound`; other store failures propagate.
    """

    def __init__(self, storage: RecipeRepository, clock: Optional[Clock] = None) -> None:
        self._storage = storage
        self._clock = clock or utc_now

    def list_recipes(self, filters: Optional[RecipeFilters] = None) -> List[Recipe]:
        filters = filters or RecipeFilters()
        predicate = filters.predicate()
        matches = [recipe for recipe in self._storage.list_recipes() if predicate(recipe)]
        logger.debug("Listing %d recipes for %s", len(matches), filters)
        return sort_by_title(matches)

    def get_recipe(self, recipe_id: int) -> Recipe:
        try:
            return self._storage.get_recipe(recipe_id)
        except KeyError:
            raise RecipeNotFound(recipe_id) from None

    def create_recipe(self, payload: Any) -> Recipe:
        violations = validate(payload, ValidationMode.CREATE)
        if violations:
            raise ValidationFailed(violations)

        now = self._clock()
        recipe = self._storage.add_recipe(
            **fields_from_payload(payload), created_at=now, updated_at=now
        )
        logger.info("Created recipe %s (%r)", recipe.id, recipe.title)
        return recipe

    def update_recipe(self, recipe_id: int, payload: Any) -> Recipe:
        current = self.get_recipe(recipe_id)

        violations = validate(payload, ValidationMode.UPDATE)
        if violations:
            raise ValidationFailed(violations)

        changes = update_changes(payload)
        now = self._clock()
        if current.created_at is not None and now < current.created_at:
            now = current.created_at

        try:
            # only provided fields reach the store; concurrent writes to others survive
            updated = self._storage.update_recipe(recipe_id, updated_at=now, **changes)
        except KeyError:
            logger.info("Recipe %s vanished before it could be updated", recipe_id)
            raise RecipeNotFound(recipe_id) from None

        logger.info("Updated recipe %s", recipe_id)
        return updated

    def delete_recipe(self, recipe_id: int) -> None:
        try:
            self._storage.delete_recipe(recipe_id)
        except KeyError:
            raise RecipeNotFound(recipe_id) from None
        logger.info("Deleted recipe %s", recipe_id)

    def list_distinct_tags(self) -> List[str]:
        tags = {tag for recipe in self._storage.list_recipes() for tag in recipe.dietary_tags}
        return sorted(tags)


__all__ = ["Clock", "RecipeService", "utc_now"]
