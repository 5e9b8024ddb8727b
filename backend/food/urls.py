# food/urls.py
"""
URL configuration for food API (mounted under /api/workspaces/<id>/food/).

Endpoints:
- /recipes/ - Recipes with ingredients
- /shopping-lists/ - Shopping lists with items
- /shopping-items/<id>/ - Toggle or delete a single item
"""

from django.urls import path

from .views import (
    RecipeListCreateView,
    RecipeDetailView,
    RecipeIngredientCreateView,
    ShoppingListListCreateView,
    ShoppingListDetailView,
    ShoppingItemCreateView,
    ShoppingListAddRecipeView,
    ShoppingItemToggleView,
    ShoppingItemDetailView,
)

app_name = "food"

urlpatterns = [
    path("recipes/", RecipeListCreateView.as_view(), name="recipe-list-create"),
    path("recipes/<int:pk>/", RecipeDetailView.as_view(), name="recipe-detail"),
    path("recipes/<int:pk>/ingredients/", RecipeIngredientCreateView.as_view(), name="recipe-ingredient-create"),
    path("shopping-lists/", ShoppingListListCreateView.as_view(), name="shopping-list-list-create"),
    path("shopping-lists/<int:pk>/", ShoppingListDetailView.as_view(), name="shopping-list-detail"),
    path("shopping-lists/<int:pk>/items/", ShoppingItemCreateView.as_view(), name="shopping-item-create"),
    path("shopping-lists/<int:pk>/add-recipe/", ShoppingListAddRecipeView.as_view(), name="shopping-list-add-recipe"),
    path("shopping-items/<int:item_id>/", ShoppingItemDetailView.as_view(), name="shopping-item-detail"),
    path("shopping-items/<int:item_id>/toggle/", ShoppingItemToggleView.as_view(), name="shopping-item-toggle"),
]
