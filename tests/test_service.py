from __future__ import annotations

from datetime import datetime, timezone

import pytest

from conftest import FakeClock, make_payload
from recipeshare.errors import RecipeNotFound, StoreUnavailable, ValidationFailed
from recipeshare.filters import RecipeFilters
from recipeshare.memory_storage import InMemoryRecipeStorage
from recipeshare.service import RecipeService


def seed_two(service):
    vegan = service.create_recipe(
        make_payload(title="Vegan Curry", dietaryTags=["Vegan", "Quick"], cookingTime=30)
    )
    veggie = service.create_recipe(
        make_payload(title="Cheese Omelette", dietaryTags=["Vegetarian"], cookingTime=60)
    )
    return vegan, veggie


def test_create_assigns_id_and_timestamps(service, clock):
    expected_time = clock.now

    recipe = service.create_recipe(make_payload())

    assert recipe.id == 1
    assert recipe.title == "Lemon Garlic Chicken"
    assert recipe.cooking_time == 30
    assert recipe.dietary_tags == ["High-Protein", "Quick"]
    assert recipe.created_at == recipe.updated_at == expected_time


def test_create_defaults_dietary_tags_to_empty(service):
    payload = make_payload()
    del payload["dietaryTags"]

    assert service.create_recipe(payload).dietary_tags == []


def test_create_then_get_round_trip(service):
    created = service.create_recipe(make_payload())
    assert service.get_recipe(created.id) == created


def test_create_rejects_invalid_payload_without_writing(service, storage):
    with pytest.raises(ValidationFailed) as excinfo:
        service.create_recipe({"title": "AB", "ingredients": [], "steps": ["Short"], "cookingTime": 0})

    assert [v.field for v in excinfo.value.violations] == ["title", "ingredients", "steps", "cookingTime"]
    assert list(storage.list_recipes()) == []


def test_get_missing_recipe(service):
    with pytest.raises(RecipeNotFound) as excinfo:
        service.get_recipe(999)

    assert str(excinfo.value) == "Recipe with ID 999 not found."
    assert excinfo.value.recipe_id == 999


def test_update_only_changes_provided_fields(service):
    original = service.create_recipe(make_payload())

    updated = service.update_recipe(original.id, {"title": "New Title"})

    assert updated.title == "New Title"
    assert updated.updated_at > original.updated_at
    assert updated.ingredients == original.ingredients
    assert updated.steps == original.steps
    assert updated.cooking_time == original.cooking_time
    assert updated.dietary_tags == original.dietary_tags
    assert updated.created_at == original.created_at
    assert service.get_recipe(original.id) == updated


def test_update_replaces_lists_wholesale(service):
    original = service.create_recipe(make_payload(dietaryTags=["Quick", "Healthy"]))

    updated = service.update_recipe(original.id, {"ingredients": ["rice"], "dietaryTags": []})

    assert updated.ingredients == ["rice"]
    assert updated.dietary_tags == []


def test_update_ignores_null_fields(service):
    original = service.create_recipe(make_payload())

    updated = service.update_recipe(original.id, {"title": None, "cookingTime": 90})

    assert updated.title == original.title
    assert updated.cooking_time == 90


def test_update_missing_recipe(service):
    with pytest.raises(RecipeNotFound):
        service.update_recipe(999, {"title": "X"})


def test_update_with_violations_leaves_record_untouched(service):
    original = service.create_recipe(make_payload())

    with pytest.raises(ValidationFailed) as excinfo:
        service.update_recipe(original.id, {"title": "Fine title", "cookingTime": 0})

    assert [v.field for v in excinfo.value.violations] == ["cookingTime"]
    assert service.get_recipe(original.id) == original


def test_update_never_moves_updated_at_before_created_at(storage):
    later = datetime(2030, 1, 1, tzinfo=timezone.utc)
    earlier = datetime(2020, 1, 1, tzinfo=timezone.utc)
    created = RecipeService(storage, clock=FakeClock(later)).create_recipe(make_payload())

    updated = RecipeService(storage, clock=FakeClock(earlier)).update_recipe(created.id, {"cookingTime": 5})

    assert updated.updated_at == created.created_at


class VanishingStorage(InMemoryRecipeStorage):
    """Deletes the record between the service's lookup and its write."""

    def update_recipe(self, recipe_id, **fields):
        super().delete_recipe(recipe_id)
        return super().update_recipe(recipe_id, **fields)


def test_update_of_concurrently_deleted_recipe_is_not_found(clock):
    storage = VanishingStorage()
    service = RecipeService(storage, clock=clock)
    recipe = service.create_recipe(make_payload())

    with pytest.raises(RecipeNotFound):
        service.update_recipe(recipe.id, {"title": "Too late"})


class InterleavingStorage(InMemoryRecipeStorage):
    """Commits another client's cooking time change right before the service writes."""

    def update_recipe(self, recipe_id, **fields):
        super().update_recipe(recipe_id, updated_at=fields["updated_at"], cooking_time=99)
        return super().update_recipe(recipe_id, **fields)


def test_update_keeps_concurrent_changes_to_other_fields(clock):
    storage = InterleavingStorage()
    service = RecipeService(storage, clock=clock)
    recipe = service.create_recipe(make_payload(cookingTime=30))

    updated = service.update_recipe(recipe.id, {"title": "Renamed title"})

    assert updated.title == "Renamed title"
    assert updated.cooking_time == 99
    assert storage.get_recipe(recipe.id).cooking_time == 99


class UnavailableStorage(InMemoryRecipeStorage):
    def list_recipes(self):
        raise StoreUnavailable()


def test_store_outage_propagates(clock):
    service = RecipeService(UnavailableStorage(), clock=clock)

    with pytest.raises(StoreUnavailable):
        service.list_recipes()


def test_delete_then_get_is_not_found(service):
    recipe = service.create_recipe(make_payload())

    service.delete_recipe(recipe.id)

    with pytest.raises(RecipeNotFound):
        service.get_recipe(recipe.id)


def test_delete_missing_recipe(service):
    with pytest.raises(RecipeNotFound):
        service.delete_recipe(42)


def test_list_filters_by_tag_and_cooking_time(service):
    vegan, _ = seed_two(service)

    assert service.list_recipes(RecipeFilters(dietary_tag="Vegan")) == [vegan]
    assert service.list_recipes(RecipeFilters(max_cooking_time=45)) == [vegan]


def test_list_is_sorted_by_title(service):
    for title in ["Zucchini Bread", "Apple Crumble", "Mango Salsa"]:
        service.create_recipe(make_payload(title=title))

    titles = [recipe.title for recipe in service.list_recipes()]

    assert titles == ["Apple Crumble", "Mango Salsa", "Zucchini Bread"]


def test_list_with_no_matches_is_empty(service):
    seed_two(service)
    assert service.list_recipes(RecipeFilters(search="lasagne")) == []


def test_list_distinct_tags(service):
    seed_two(service)
    assert service.list_distinct_tags() == ["Quick", "Vegan", "Vegetarian"]


def test_list_distinct_tags_on_empty_store(service):
    assert service.list_distinct_tags() == []


def test_list_distinct_tags_deduplicates_exact_strings(service):
    service.create_recipe(make_payload(title="Vegan Curry", dietaryTags=["Vegan", "Quick"]))
    service.create_recipe(make_payload(title="Green Salad", dietaryTags=["Quick", "vegan", "Healthy"]))
    service.create_recipe(make_payload(title="Fruit Bowl", dietaryTags=["Quick", "Quick"]))

    # case variants are distinct strings; ordinal sort puts uppercase first
    assert service.list_distinct_tags() == ["Healthy", "Quick", "Vegan", "vegan"]
