from __future__ import annotations

from typing import Dict, Optional, Tuple

DIETARY_TAGS: Tuple[str, ...] = (
    "Vegan",
    "Vegetarian",
    "Gluten-Free",
    "Dairy-Free",
    "Keto",
    "Paleo",
    "Low-Carb",
    "High-Protein",
    "Quick",
    "Comfort Food",
    "Italian",
    "Asian",
    "Mexican",
    "Mediterranean",
    "Healthy",
)

_BY_FOLDED: Dict[str, str] = {tag.casefold(): tag for tag in DIETARY_TAGS}


def canonical_tag(tag: str) -> Optional[str]:
    """Return the vocabulary spelling of ``tag`` or ``None`` if it is unknown."""

    return _BY_FOLDED.get(tag.casefold())


def is_known_tag(tag: str) -> bool:
    return canonical_tag(tag) is not None


__all__ = ["DIETARY_TAGS", "canonical_tag", "is_known_tag"]
