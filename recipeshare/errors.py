from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from .validation import Violation


class RecipeError(Exception):
    pass


class RecipeNotFound(RecipeError):
    def __init__(self, recipe_id: int):
        super().__init__(f"Recipe with ID {recipe_id} not found.")
        self.recipe_id = recipe_id


class ValidationFailed(RecipeError):
    def __init__(self, violations: List["Violation"]):
        fields = ", ".join(violation.field for violation in violations)
        super().__init__(f"Validation failed for: {fields}")
        self.violations = list(violations)


class StoreUnavailable(RecipeError):
    def __init__(self, reason: str = "Recipe store is unavailable."):
        super().__init__(reason)
        self.reason = reason


__all__ = ["RecipeError", "RecipeNotFound", "ValidationFailed", "StoreUnavailable"]
