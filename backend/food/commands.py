# food/commands.py
"""
Command layer for food: recipes with their ingredients, and shopping lists.
"""

import logging

from django.db import transaction

from accounts.authz import ActorContext, Capability, require
from accounts.commands import CommandResult
from accounts.models import PermissionModule
from food.models import Recipe, RecipeIngredient, ShoppingList, ShoppingListItem

logger = logging.getLogger(__name__)

MODULE = PermissionModule.FOOD


def _ingredient_rows(ingredients):
    for ingredient in ingredients or []:
        yield {
            "ingredient_name": ingredient["ingredient_name"],
            "quantity": ingredient.get("quantity") or "",
            "unit": ingredient.get("unit") or "",
        }


# =============================================================================
# Recipes
# =============================================================================

@transaction.atomic
def create_recipe(actor: ActorContext, name: str, instructions: str = "", ingredients=None) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    recipe = Recipe.objects.create(
        workspace=actor.workspace,
        user=actor.user,
        name=name,
        instructions=instructions,
    )
    RecipeIngredient.objects.bulk_create(
        RecipeIngredient(recipe=recipe, **row) for row in _ingredient_rows(ingredients)
    )
    return CommandResult.ok(recipe)


@transaction.atomic
def update_recipe(actor: ActorContext, recipe_id: int, **changes) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        recipe = Recipe.objects.select_for_update().get(pk=recipe_id, workspace=actor.workspace)
    except Recipe.DoesNotExist:
        return CommandResult.missing("Recipe")

    for field in ("name", "instructions"):
        if field in changes:
            setattr(recipe, field, changes[field])
    recipe.save()
    return CommandResult.ok(recipe)


@transaction.atomic
def delete_recipe(actor: ActorContext, recipe_id: int) -> CommandResult:
    """Delete a recipe and its ingredients."""
    require(actor, MODULE, Capability.DELETE)

    try:
        recipe = Recipe.objects.select_for_update().get(pk=recipe_id, workspace=actor.workspace)
    except Recipe.DoesNotExist:
        return CommandResult.missing("Recipe")

    ingredients, _ = recipe.ingredients.all().delete()
    recipe.delete()
    logger.info(f"Deleted recipe {recipe_id} with {ingredients} ingredients")
    return CommandResult.ok({"ingredients_deleted": ingredients})


@transaction.atomic
def add_recipe_ingredient(
    actor: ActorContext,
    recipe_id: int,
    ingredient_name: str,
    quantity: str = "",
    unit: str = "",
) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    try:
        recipe = Recipe.objects.get(pk=recipe_id, workspace=actor.workspace)
    except Recipe.DoesNotExist:
        return CommandResult.missing("Recipe")

    ingredient = RecipeIngredient.objects.create(
        recipe=recipe,
        ingredient_name=ingredient_name,
        quantity=quantity or "",
        unit=unit or "",
    )
    return CommandResult.ok(ingredient)


# =============================================================================
# Shopping lists
# =============================================================================

@transaction.atomic
def create_shopping_list(actor: ActorContext, name: str) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    shopping_list = ShoppingList.objects.create(workspace=actor.workspace, user=actor.user, name=name)
    return CommandResult.ok(shopping_list)


@transaction.atomic
def delete_shopping_list(actor: ActorContext, list_id: int) -> CommandResult:
    require(actor, MODULE, Capability.DELETE)

    try:
        shopping_list = ShoppingList.objects.select_for_update().get(pk=list_id, workspace=actor.workspace)
    except ShoppingList.DoesNotExist:
        return CommandResult.missing("Shopping list")

    items, _ = shopping_list.items.all().delete()
    shopping_list.delete()
    return CommandResult.ok({"items_deleted": items})


def _list_in_workspace(actor: ActorContext, list_id: int):
    return ShoppingList.objects.filter(pk=list_id, workspace=actor.workspace).first()


@transaction.atomic
def add_shopping_item(
    actor: ActorContext,
    list_id: int,
    ingredient_name: str,
    quantity: str = "",
    unit: str = "",
    recipe_source_id: int = None,
) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    shopping_list = _list_in_workspace(actor, list_id)
    if shopping_list is None:
        return CommandResult.missing("Shopping list")

    recipe = None
    if recipe_source_id is not None:
        recipe = Recipe.objects.filter(pk=recipe_source_id, workspace=actor.workspace).first()
        if recipe is None:
            return CommandResult.missing("Recipe")

    item = ShoppingListItem.objects.create(
        shopping_list=shopping_list,
        ingredient_name=ingredient_name,
        quantity=quantity or "",
        unit=unit or "",
        recipe_source=recipe,
    )
    return CommandResult.ok(item)


@transaction.atomic
def add_recipe_to_shopping_list(actor: ActorContext, list_id: int, recipe_id: int) -> CommandResult:
    """Copy every ingredient of a recipe onto a shopping list."""
    require(actor, MODULE, Capability.ADD)

    shopping_list = _list_in_workspace(actor, list_id)
    if shopping_list is None:
        return CommandResult.missing("Shopping list")

    try:
        recipe = Recipe.objects.get(pk=recipe_id, workspace=actor.workspace)
    except Recipe.DoesNotExist:
        return CommandResult.missing("Recipe")

    items = ShoppingListItem.objects.bulk_create(
        ShoppingListItem(
            shopping_list=shopping_list,
            ingredient_name=ingredient.ingredient_name,
            quantity=ingredient.quantity,
            unit=ingredient.unit,
            recipe_source=recipe,
        )
        for ingredient in recipe.ingredients.all()
    )
    return CommandResult.ok(items)


def _item_in_workspace(actor: ActorContext, item_id: int):
    return (
        ShoppingListItem.objects.select_for_update()
        .filter(pk=item_id, shopping_list__workspace=actor.workspace)
        .first()
    )


@transaction.atomic
def toggle_shopping_item(actor: ActorContext, item_id: int) -> CommandResult:
    require(actor, MODULE, Capability.ADD)

    item = _item_in_workspace(actor, item_id)
    if item is None:
        return CommandResult.missing("Item")

    item.completed = not item.completed
    item.save(update_fields=["completed"])
    return CommandResult.ok(item)


@transaction.atomic
def delete_shopping_item(actor: ActorContext, item_id: int) -> CommandResult:
    require(actor, MODULE, Capability.DELETE)

    item = _item_in_workspace(actor, item_id)
    if item is None:
        return CommandResult.missing("Item")

    item.delete()
    return CommandResult.ok()
