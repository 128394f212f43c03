from __future__ import annotations

from typing import Tuple

from flask import Blueprint, Response, current_app, jsonify, request, url_for

from .filters import RecipeFilters
from .mapping import recipe_to_dict
from .service import RecipeService
from .tags import DIETARY_TAGS

bp = Blueprint("recipes", __name__, url_prefix="/api/recipes")


def _service() -> RecipeService:
    return current_app.config["RECIPE_SERVICE"]


@bp.get("")
def list_recipes() -> Response:
    filters = RecipeFilters.from_query(request.args)
    recipes = _service().list_recipes(filters)
    return jsonify([recipe_to_dict(recipe) for recipe in recipes])


@bp.get("/<int:recipe_id>")
def get_recipe(recipe_id: int) -> Response:
    return jsonify(recipe_to_dict(_service().get_recipe(recipe_id)))


@bp.post("")
def create_recipe() -> Tuple[Response, int, dict]:
    # a missing or malformed body is reported by validation as a "body" violation
    payload = request.get_json(silent=True)
    recipe = _service().create_recipe(payload)
    location = url_for("recipes.get_recipe", recipe_id=recipe.id)
    return jsonify(recipe_to_dict(recipe)), 201, {"Location": location}


@bp.put("/<int:recipe_id>")
def update_recipe(recipe_id: int) -> Response:
    payload = request.get_json(silent=True)
    recipe = _service().update_recipe(recipe_id, payload)
    return jsonify(recipe_to_dict(recipe))


@bp.delete("/<int:recipe_id>")
def delete_recipe(recipe_id: int) -> Tuple[str, int]:
    _service().delete_recipe(recipe_id)
    return "", 204


@bp.get("/tags")
def list_tags() -> Response:
    return jsonify(_service().list_distinct_tags())


@bp.get("/tags/vocabulary")
def tag_vocabulary() -> Response:
    return jsonify(list(DIETARY_TAGS))


__all__ = ["bp"]
