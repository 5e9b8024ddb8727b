# tests/test_food.py
"""Tests for recipes and shopping lists."""

import pytest

from food.commands import (
    add_recipe_ingredient,
    add_recipe_to_shopping_list,
    add_shopping_item,
    create_recipe,
    create_shopping_list,
    delete_recipe,
    delete_shopping_item,
    delete_shopping_list,
    toggle_shopping_item,
)
from food.models import RecipeIngredient, ShoppingListItem


PANCAKES = [
    {"ingredient_name": "Flour", "quantity": "200", "unit": "g"},
    {"ingredient_name": "Milk", "quantity": "300", "unit": "ml"},
    {"ingredient_name": "Salt"},
]


@pytest.fixture
def recipe(actor):
    return create_recipe(actor, "Pancakes", instructions="Mix, fry.", ingredients=PANCAKES).data


@pytest.fixture
def shopping_list(actor):
    return create_shopping_list(actor, "Weekend").data


@pytest.mark.django_db
class TestRecipes:

    def test_create_with_ingredients(self, recipe):
        rows = list(recipe.ingredients.order_by("id").values_list("ingredient_name", "quantity", "unit"))
        assert rows == [("Flour", "200", "g"), ("Milk", "300", "ml"), ("Salt", "", "")]

    def test_add_ingredient(self, actor, recipe):
        result = add_recipe_ingredient(actor, recipe.pk, "Egg", quantity="2")

        assert result.success
        assert recipe.ingredients.count() == 4

    def test_delete_removes_ingredients(self, actor, recipe):
        result = delete_recipe(actor, recipe.pk)

        assert result.data == {"ingredients_deleted": 3}
        assert not RecipeIngredient.objects.exists()

    def test_other_workspace_recipe_is_missing(self, other_actor, recipe):
        assert delete_recipe(other_actor, recipe.pk).not_found


@pytest.mark.django_db
class TestShoppingLists:

    def test_add_recipe_copies_ingredients(self, actor, recipe, shopping_list):
        result = add_recipe_to_shopping_list(actor, shopping_list.pk, recipe.pk)

        assert len(result.data) == 3
        items = ShoppingListItem.objects.filter(shopping_list=shopping_list)
        assert set(items.values_list("ingredient_name", flat=True)) == {"Flour", "Milk", "Salt"}
        assert all(item.recipe_source_id == recipe.pk for item in items)

    def test_toggle_item(self, actor, shopping_list):
        item = add_shopping_item(actor, shopping_list.pk, "Bread").data

        assert toggle_shopping_item(actor, item.pk).data.completed is True
        assert toggle_shopping_item(actor, item.pk).data.completed is False

    def test_completed_items_sort_last(self, actor, shopping_list):
        bread = add_shopping_item(actor, shopping_list.pk, "Bread").data
        add_shopping_item(actor, shopping_list.pk, "Butter")
        toggle_shopping_item(actor, bread.pk)

        names = list(shopping_list.items.values_list("ingredient_name", flat=True))

        assert names == ["Butter", "Bread"]

    def test_item_of_other_workspace_is_missing(self, actor, other_actor, shopping_list):
        item = add_shopping_item(actor, shopping_list.pk, "Bread").data

        assert toggle_shopping_item(other_actor, item.pk).not_found
        assert delete_shopping_item(other_actor, item.pk).not_found
        assert delete_shopping_item(actor, item.pk).success

    def test_unknown_recipe_source(self, actor, shopping_list):
        result = add_shopping_item(actor, shopping_list.pk, "Bread", recipe_source_id=999)
        assert result.not_found

    def test_deleting_recipe_keeps_items(self, actor, recipe, shopping_list):
        add_recipe_to_shopping_list(actor, shopping_list.pk, recipe.pk)

        delete_recipe(actor, recipe.pk)

        assert ShoppingListItem.objects.filter(shopping_list=shopping_list, recipe_source__isnull=True).count() == 3

    def test_delete_list_removes_items(self, actor, shopping_list):
        add_shopping_item(actor, shopping_list.pk, "Bread")

        result = delete_shopping_list(actor, shopping_list.pk)

        assert result.data == {"items_deleted": 1}


@pytest.mark.django_db
class TestFoodAPI:

    def test_create_recipe(self, owner_client, ws_url):
        response = owner_client.post(ws_url("food/recipes/"), {
            "name": "Pancakes",
            "ingredients": [{"ingredient_name": "Flour", "quantity": "200", "unit": "g"}],
        }, format="json")

        assert response.status_code == 201
        assert response.data["ingredients"][0]["ingredient_name"] == "Flour"

    def test_toggle_endpoint(self, owner_client, ws_url, actor, shopping_list):
        item = add_shopping_item(actor, shopping_list.pk, "Bread").data

        response = owner_client.post(ws_url(f"food/shopping-items/{item.pk}/toggle/"))

        assert response.status_code == 200
        assert response.data["completed"] is True

    def test_viewer_cannot_add_items(self, member_client, ws_url, viewer_actor, shopping_list):
        response = member_client.post(
            ws_url(f"food/shopping-lists/{shopping_list.pk}/items/"), {"ingredient_name": "Bread"}, format="json",
        )
        assert response.status_code == 403
