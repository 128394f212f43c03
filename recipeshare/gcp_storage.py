from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterable, Iterator, List, Optional

from google.api_core import exceptions as gcloud_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore

from .errors import StoreUnavailable
from .mapping import EDITABLE_FIELDS
from .models import Recipe
from .storage import RecipeRepository

logger = logging.getLogger(__name__)

COUNTER_COLLECTION = "counters"


@firestore.transactional
def _allocate_id(transaction: firestore.Transaction, counter_ref: Any) -> int:
    snapshot = counter_ref.get(transaction=transaction)
    current = (snapshot.to_dict() or {}).get("value", 0) if snapshot.exists else 0
    next_id = int(current) + 1
    transaction.set(counter_ref, {"value": next_id})
    return next_id


@contextmanager
def _store_errors(recipe_id: Optional[int] = None) -> Iterator[None]:
    """Translate Firestore failures into the storage contract's exceptions.

    ``NotFound`` only means a missing recipe when a recipe id is involved;
    otherwise (a missing database, say) the store itself is unusable.
    """

    try:
        yield
    except gcloud_exceptions.NotFound as exc:
        if recipe_id is None:
            logger.error("Firestore resource not found: %s", exc)
            raise StoreUnavailable() from exc
        raise KeyError(f"Recipe '{recipe_id}' does not exist.") from None
    except (
        gcloud_exceptions.GoogleAPICallError,
        gcloud_exceptions.RetryError,
        auth_exceptions.GoogleAuthError,
    ) as exc:
        logger.error("Firestore request failed: %s", exc)
        raise StoreUnavailable() from exc


class FirestoreRecipeStorage(RecipeRepository):
    """GCP backed recipe storage using Firestore.

    Each recipe lives in its own document named after its integer id. Ids
    come from a counter document updated inside a transaction so concurrent
    writers never hand out the same id twice.
    """

    def __init__(
        self,
        *,
        project: Optional[str] = None,
        collection_name: str = "recipes",
    ) -> None:
        self._project = project
        self._collection_name = collection_name

        self._firestore_client = firestore.Client(project=project)
        self._collection = self._firestore_client.collection(collection_name)
        self._counter_ref = self._firestore_client.collection(COUNTER_COLLECTION).document(
            collection_name
        )

    @classmethod
    def from_env(cls) -> "FirestoreRecipeStorage":
        """Build a storage instance from environment variables."""

        project = os.environ.get("GCP_PROJECT")
        collection_name = os.environ.get("RECIPES_COLLECTION", "recipes")
        return cls(project=project, collection_name=collection_name)

    def list_recipes(self) -> Iterable[Recipe]:
        # no order_by: Firestore drops documents missing the ordered field
        with _store_errors():
            docs = list(self._collection.stream())

        recipes = []
        for doc in docs:
            recipe = self._doc_to_recipe(doc.id, doc.to_dict() or {})
            if recipe is None:
                logger.warning("Skipping recipe document %r without a numeric id", doc.id)
                continue
            recipes.append(recipe)
        return recipes

    def get_recipe(self, recipe_id: int) -> Recipe:
        with _store_errors(recipe_id):
            snapshot = self._collection.document(str(recipe_id)).get()

        recipe = self._doc_to_recipe(snapshot.id, snapshot.to_dict() or {}) if snapshot.exists else None
        if recipe is None:
            raise KeyError(f"Recipe '{recipe_id}' does not exist.")
        return recipe

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
        with _store_errors():
            recipe_id = _allocate_id(self._firestore_client.transaction(), self._counter_ref)
            doc = {
                "id": recipe_id,
                "title": title,
                "ingredients": list(ingredients),
                "steps": list(steps),
                "cooking_time": cooking_time,
                "dietary_tags": list(dietary_tags),
                "created_at": created_at,
                "updated_at": updated_at,
            }
            # create() fails instead of overwriting if the id is somehow taken
            self._collection.document(str(recipe_id)).create(doc)

        logger.debug("Stored recipe %s in collection %s", recipe_id, self._collection_name)
        return Recipe(
            id=recipe_id,
            title=title,
            ingredients=list(ingredients),
            steps=list(steps),
            cooking_time=cooking_time,
            dietary_tags=list(dietary_tags),
            created_at=created_at,
            updated_at=updated_at,
        )

    def update_recipe(self, recipe_id: int, *, updated_at: datetime, **changes: Any) -> Recipe:
        unknown = set(changes) - set(EDITABLE_FIELDS.values())
        if unknown:
            raise TypeError(f"Not editable recipe fields: {', '.join(sorted(unknown))}")

        doc_ref = self._collection.document(str(recipe_id))
        update_doc = {
            field: list(value) if isinstance(value, list) else value
            for field, value in changes.items()
        }
        update_doc["updated_at"] = updated_at

        with _store_errors(recipe_id):
            # update() touches only the given fields and raises NotFound when
            # the document was deleted meanwhile
            doc_ref.update(update_doc)
            snapshot = doc_ref.get()

        recipe = self._doc_to_recipe(snapshot.id, snapshot.to_dict() or {}) if snapshot.exists else None
        if recipe is None:
            raise KeyError(f"Recipe '{recipe_id}' does not exist.")
        return recipe

    def delete_recipe(self, recipe_id: int) -> None:
        doc_ref = self._collection.document(str(recipe_id))

        with _store_errors(recipe_id):
            snapshot = doc_ref.get()
            if not snapshot.exists:
                raise KeyError(f"Recipe '{recipe_id}' does not exist.")
            doc_ref.delete()

    def _doc_to_recipe(self, doc_id: str, data: dict) -> Optional[Recipe]:
        """Build a recipe from a document, or ``None`` if it has no usable id."""

        raw_id = data.get("id")
        recipe_id = _to_int(doc_id if raw_id is None else raw_id)
        if recipe_id is None:
            return None

        created_at = data.get("created_at")
        updated_at = data.get("updated_at")

        return Recipe(
            id=recipe_id,
            title=str(data.get("title", "")),
            ingredients=_string_list(data.get("ingredients")),
            steps=_string_list(data.get("steps")),
            cooking_time=_to_int(data.get("cooking_time")) or 0,
            dietary_tags=_string_list(data.get("dietary_tags")),
            created_at=created_at if isinstance(created_at, datetime) else None,
            updated_at=updated_at if isinstance(updated_at, datetime) else None,
        )


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _string_list(value: Any) -> List[str]:
    if isinstance(value, list):
        return [str(item) for item in value]
    return []


__all__ = ["FirestoreRecipeStorage"]
