from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class Recipe:
    """Domain object representing a stored recipe."""

    id: int
    title: str
    ingredients: List[str]
    steps: List[str]
    cooking_time: int
    dietary_tags: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


__all__ = ["Recipe"]
