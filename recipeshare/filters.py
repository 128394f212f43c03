"""Query filters for the recipe listing.

All matching is case-insensitive: the tag filter compares casefolded
strings the same way tag validation does, the title search is a casefolded
substring match and the ingredient search matches a whole ingredient line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Mapping, Optional

from .errors import ValidationFailed
from .models import Recipe
from .validation import Violation

RecipePredicate = Callable[[Recipe], bool]


def _accept_all(recipe: Recipe) -> bool:
    return True


def has_dietary_tag(tag: str) -> RecipePredicate:
    wanted = tag.casefold()

    def predicate(recipe: Recipe) -> bool:
        return any(existing.casefold() == wanted for existing in recipe.dietary_tags)

    return predicate


def cooks_within(max_cooking_time: int) -> RecipePredicate:
    def predicate(recipe: Recipe) -> bool:
        return recipe.cooking_time <= max_cooking_time

    return predicate


def matches_search(text: str) -> RecipePredicate:
    wanted = text.casefold()

    def predicate(recipe: Recipe) -> bool:
        if wanted in recipe.title.casefold():
            return True
        return any(ingredient.casefold() == wanted for ingredient in recipe.ingredients)

    return predicate


def all_of(predicates: Iterable[RecipePredicate]) -> RecipePredicate:
    checks = list(predicates)
    if not checks:
        return _accept_all

    def predicate(recipe: Recipe) -> bool:
        return all(check(recipe) for check in checks)

    return predicate


def build_predicate(
    dietary_tag: Optional[str] = None,
    max_cooking_time: Optional[int] = None,
    search: Optional[str] = None,
) -> RecipePredicate:
    """AND together every supplied criterion; absent criteria accept everything."""

    predicates: List[RecipePredicate] = []
    if dietary_tag:
        predicates.append(has_dietary_tag(dietary_tag))
    if max_cooking_time is not None:
        predicates.append(cooks_within(max_cooking_time))
    if search:
        predicates.append(matches_search(search))
    return all_of(predicates)


def sort_by_title(recipes: Iterable[Recipe]) -> List[Recipe]:
    return sorted(recipes, key=lambda recipe: (recipe.title, recipe.id))


@dataclass(frozen=True)
class RecipeFilters:
    dietary_tag: Optional[str] = None
    max_cooking_time: Optional[int] = None
    search: Optional[str] = None

    @classmethod
    def from_query(cls, args: Mapping[str, str]) -> "RecipeFilters":
        """Build filters from HTTP query arguments, ignoring empty values."""

        raw_max = (args.get("maxCookingTime") or "").strip()
        max_cooking_time: Optional[int] = None
        if raw_max:
            try:
                max_cooking_time = int(raw_max)
            except ValueError:
                raise ValidationFailed(
                    [Violation("maxCookingTime", "Max cooking time must be a whole number of minutes")]
                ) from None

        return cls(
            dietary_tag=args.get("dietaryTag") or None,
            max_cooking_time=max_cooking_time,
            search=args.get("search") or None,
        )

    def predicate(self) -> RecipePredicate:
        return build_predicate(
            dietary_tag=self.dietary_tag,
            max_cooking_time=self.max_cooking_time,
            search=self.search,
        )


__all__ = [
    "RecipeFilters",
    "RecipePredicate",
    "all_of",
    "build_predicate",
    "cooks_within",
    "has_dietary_tag",
    "matches_search",
    "sort_by_title",
]
