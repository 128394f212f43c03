"""Field rules for recipe payloads.

Payloads are the decoded JSON objects sent by clients, keyed by the public
field names (``title``, ``cookingTime``, ...). :func:`validate` walks an
explicit, ordered rule table and collects every violated field in a single
pass. Within one field the first failing rule wins, so each field is
reported at most once.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Tuple

from .tags import DIETARY_TAGS, is_known_tag

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 200
INGREDIENT_MIN_LENGTH = 2
STEP_MIN_LENGTH = 10
COOKING_TIME_MIN = 1
COOKING_TIME_MAX = 1440


class ValidationMode(Enum):
    CREATE = "create"
    UPDATE = "update"


class Violation(NamedTuple):
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class Rule:
    field: str
    check: Callable[[Any], bool]
    message: str


def _is_text(value: Any) -> bool:
    return isinstance(value, str)


def _is_text_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _is_whole_number(value: Any) -> bool:
    # bool is an int subclass; JSON true/false is not a cooking time
    return isinstance(value, int) and not isinstance(value, bool)


def _not_empty(value: Any) -> bool:
    return len(value) > 0


def _trimmed_length_between(low: int, high: int) -> Callable[[str], bool]:
    def check(value: str) -> bool:
        return low <= len(value.strip()) <= high

    return check


def _every_item_at_least(length: int) -> Callable[[List[str]], bool]:
    def check(items: List[str]) -> bool:
        return all(len(item.strip()) >= length for item in items)

    return check


def _between(low: int, high: int) -> Callable[[int], bool]:
    def check(value: int) -> bool:
        return low <= value <= high

    return check


def _all_known_tags(tags: List[str]) -> bool:
    return all(is_known_tag(tag) for tag in tags)


# (field, message when a required field is missing on create; None = optional)
FIELDS: Tuple[Tuple[str, Optional[str]], ...] = (
    ("title", "Title is required"),
    ("ingredients", "At least one ingredient is required"),
    ("steps", "At least one step is required"),
    ("cookingTime", "Cooking time is required"),
    ("dietaryTags", None),
)

RULES: Tuple[Rule, ...] = (
    Rule("title", _is_text, "Title must be a string"),
    Rule(
        "title",
        _trimmed_length_between(TITLE_MIN_LENGTH, TITLE_MAX_LENGTH),
        f"Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters",
    ),
    Rule("ingredients", _is_text_list, "Ingredients must be a list of strings"),
    Rule("ingredients", _not_empty, "At least one ingredient is required"),
    Rule(
        "ingredients",
        _every_item_at_least(INGREDIENT_MIN_LENGTH),
        f"All ingredients must be at least {INGREDIENT_MIN_LENGTH} characters long and not empty.",
    ),
    Rule("steps", _is_text_list, "Steps must be a list of strings"),
    Rule("steps", _not_empty, "At least one step is required"),
    Rule(
        "steps",
        _every_item_at_least(STEP_MIN_LENGTH),
        f"All steps must be at least {STEP_MIN_LENGTH} characters long and not empty.",
    ),
    Rule("cookingTime", _is_whole_number, "Cooking time must be a whole number of minutes"),
    Rule(
        "cookingTime",
        _between(COOKING_TIME_MIN, COOKING_TIME_MAX),
        f"Cooking time must be between {COOKING_TIME_MIN} and {COOKING_TIME_MAX} minutes (24 hours)",
    ),
    Rule("dietaryTags", _is_text_list, "Dietary tags must be a list of strings"),
    Rule(
        "dietaryTags",
        _all_known_tags,
        f"Invalid dietary tags. Valid options are: {', '.join(DIETARY_TAGS)}",
    ),
)


def is_provided(payload: Mapping[str, Any], field: str) -> bool:
    """A field counts as provided when the key is present with a non-null value."""

    return payload.get(field) is not None


def validate(payload: Any, mode: ValidationMode) -> List[Violation]:
    """Return every rule violation in ``payload``; an empty list means valid."""

    if not isinstance(payload, Mapping):
        return [Violation("body", "Request body must be a JSON object.")]

    violations: List[Violation] = []
    for field, required_message in FIELDS:
        if not is_provided(payload, field):
            if mode is ValidationMode.CREATE and required_message is not None:
                violations.append(Violation(field, required_message))
            continue

        value = payload[field]
        for rule in RULES:
            if rule.field == field and not rule.check(value):
                violations.append(Violation(field, rule.message))
                break

    return violations


__all__ = [
    "FIELDS",
    "RULES",
    "Rule",
    "ValidationMode",
    "Violation",
    "is_provided",
    "validate",
]
