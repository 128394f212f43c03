"""Conversions between JSON payloads and :class:`Recipe` records."""

from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from .models import Recipe
from .validation import is_provided

# public JSON key -> Recipe attribute, for the client-editable fields
EDITABLE_FIELDS: Dict[str, str] = {
    "title": "title",
    "ingredients": "ingredients",
    "steps": "steps",
    "cookingTime": "cooking_time",
    "dietaryTags": "dietary_tags",
}


def _copy(value: Any) -> Any:
    return list(value) if isinstance(value, list) else value


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def recipe_to_dict(recipe: Recipe) -> Dict[str, Any]:
    return {
        "id": recipe.id,
        "title": recipe.title,
        "ingredients": list(recipe.ingredients),
        "steps": list(recipe.steps),
        "cookingTime": recipe.cooking_time,
        "dietaryTags": list(recipe.dietary_tags),
        "createdAt": _timestamp(recipe.created_at),
        "updatedAt": _timestamp(recipe.updated_at),
    }


def update_changes(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Return the Recipe attributes a validated update payload provides.

    Absent or null fields are left out so the store keeps their value. Lists
    are replaced as a whole, never merged item by item.
    """

    return {
        attribute: _copy(payload[key])
        for key, attribute in EDITABLE_FIELDS.items()
        if is_provided(payload, key)
    }


def fields_from_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Return storage keyword arguments for a validated create payload."""

    fields = update_changes(payload)
    fields.setdefault("dietary_tags", [])
    return fields


def merge_update(recipe: Recipe, changes: Mapping[str, Any]) -> Recipe:
    """Return a copy of ``recipe`` with the given attributes overwritten."""

    unknown = set(changes) - set(EDITABLE_FIELDS.values())
    if unknown:
        raise TypeError(f"Not editable recipe fields: {', '.join(sorted(unknown))}")
    return dataclasses.replace(recipe, **{key: _copy(value) for key, value in changes.items()})


__all__ = [
    "EDITABLE_FIELDS",
    "fields_from_payload",
    "merge_update",
    "recipe_to_dict",
    "update_changes",
]
