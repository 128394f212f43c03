import os
from typing import Any, Iterable, List, Mapping, Optional

from flask import Flask, Response, json, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from . import api
from .errors import RecipeNotFound, StoreUnavailable, ValidationFailed
from .memory_storage import InMemoryRecipeStorage
from .models import Recipe
from .seed import seed_if_empty
from .service import RecipeService
from .storage import RecipeRepository

try:
    from .gcp_storage import FirestoreRecipeStorage
except ImportError:  # pragma: no cover - allows running tests without optional deps
    FirestoreRecipeStorage = None  # type: ignore[assignment,misc]

DEFAULT_CORS_ORIGINS = "http://localhost:3000"
CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


def create_app(
    storage: Optional[RecipeRepository] = None,
    config: Optional[Mapping[str, Any]] = None,
) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    storage:
        Optional recipe repository. When ``None`` the backend named by
        ``RECIPE_STORAGE_BACKEND`` is built: ``firestore`` (the default,
        configured through environment variables) or ``memory``.
    config:
        Optional mapping applied on top of the environment-derived settings.
    """

    app = Flask(__name__)
    app.config.setdefault("MAX_CONTENT_LENGTH", 1024 * 1024)
    app.config.update(
        RECIPE_STORAGE_BACKEND=os.environ.get("RECIPE_STORAGE_BACKEND", "firestore"),
        SEED_DATA=_env_flag(os.environ.get("SEED_DATA")),
        CORS_ALLOWED_ORIGINS=os.environ.get("CORS_ALLOWED_ORIGINS", DEFAULT_CORS_ORIGINS),
    )
    if config:
        app.config.update(config)
    app.config["CORS_ALLOWED_ORIGINS"] = _split_origins(app.config["CORS_ALLOWED_ORIGINS"])
    app.json.sort_keys = False  # type: ignore[attr-defined]

    if storage is None:
        storage = _build_storage(app.config["RECIPE_STORAGE_BACKEND"])
    app.config["RECIPE_STORAGE"] = storage
    app.config["RECIPE_SERVICE"] = RecipeService(storage)
    app.logger.info("Using %s for recipe storage", type(storage).__name__)

    if app.config["SEED_DATA"]:
        seed_if_empty(storage)

    app.register_blueprint(api.bp)
    _register_error_handlers(app)

    CORS(
        app,
        origins=app.config["CORS_ALLOWED_ORIGINS"],
        methods=CORS_ALLOWED_METHODS,
        allow_headers=["Content-Type"],
    )

    @app.get("/health")
    def health() -> Response:
        return jsonify(ok=True)

    return app


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationFailed)
    def validation_failed(exc: ValidationFailed):
        body = {
            "message": "One or more validation errors occurred.",
            "errors": [violation.to_dict() for violation in exc.violations],
        }
        return jsonify(body), 400

    @app.errorhandler(RecipeNotFound)
    def recipe_not_found(exc: RecipeNotFound):
        return jsonify(message=str(exc)), 404

    @app.errorhandler(StoreUnavailable)
    def store_unavailable(exc: StoreUnavailable):
        app.logger.error("Recipe store unavailable: %s", exc)
        return jsonify(message="Recipe store is unavailable."), 503

    @app.errorhandler(HTTPException)
    def http_error(exc: HTTPException):
        response = exc.get_response()
        response.data = json.dumps({"message": exc.description})
        response.content_type = "application/json"
        return response


def _build_storage(backend: str) -> RecipeRepository:
    backend = backend.strip().lower()
    if backend == "memory":
        return InMemoryRecipeStorage()
    if backend == "firestore":
        if FirestoreRecipeStorage is None:
            raise RuntimeError(
                "google-cloud-firestore is not installed. Install it or set "
                "RECIPE_STORAGE_BACKEND=memory, or pass an explicit storage backend to create_app."
            )
        return FirestoreRecipeStorage.from_env()
    raise ValueError(f"Unknown recipe storage backend: {backend!r}")


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def _split_origins(value: Any) -> List[str]:
    if isinstance(value, str):
        value = value.split(",")
    origins: Iterable[str] = value or []
    return [origin.strip() for origin in origins if origin.strip()]


__all__ = ["create_app", "Recipe"]
