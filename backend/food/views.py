# food/views.py
"""
Food API: recipes with ingredients and shopping lists with items.
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import Capability, resolve_actor, require
from accounts.models import PermissionModule
from accounts.responses import failure_response
from .commands import (
    create_recipe,
    update_recipe,
    delete_recipe,
    add_recipe_ingredient,
    create_shopping_list,
    delete_shopping_list,
    add_shopping_item,
    add_recipe_to_shopping_list,
    toggle_shopping_item,
    delete_shopping_item,
)
from .models import Recipe, ShoppingList
from .serializers import (
    RecipeSerializer,
    RecipeIngredientSerializer,
    IngredientInputSerializer,
    RecipeCreateSerializer,
    RecipeUpdateSerializer,
    ShoppingListSerializer,
    ShoppingListItemSerializer,
    ShoppingListCreateSerializer,
    ShoppingItemCreateSerializer,
    AddRecipeSerializer,
)

MODULE = PermissionModule.FOOD


# =============================================================================
# Recipes
# =============================================================================

class RecipeListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        recipes = Recipe.objects.filter(workspace=actor.workspace).prefetch_related("ingredients")
        return Response(RecipeSerializer(recipes, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = RecipeCreateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_recipe(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(RecipeSerializer(result.data).data, status=status.HTTP_201_CREATED)


class RecipeDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = RecipeUpdateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = update_recipe(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(RecipeSerializer(result.data).data)

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_recipe(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


class RecipeIngredientCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = IngredientInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = add_recipe_ingredient(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(RecipeIngredientSerializer(result.data).data, status=status.HTTP_201_CREATED)


# =============================================================================
# Shopping lists
# =============================================================================

class ShoppingListListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        lists = ShoppingList.objects.filter(workspace=actor.workspace).prefetch_related("items")
        return Response(ShoppingListSerializer(lists, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = ShoppingListCreateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_shopping_list(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(ShoppingListSerializer(result.data).data, status=status.HTTP_201_CREATED)


class ShoppingListDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_shopping_list(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


class ShoppingItemCreateView(APIView):
    """POST /shopping-lists/<pk>/items/ -> add an item"""
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = ShoppingItemCreateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = add_shopping_item(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(ShoppingListItemSerializer(result.data).data, status=status.HTTP_201_CREATED)


class ShoppingListAddRecipeView(APIView):
    """POST /shopping-lists/<pk>/add-recipe/ {"recipe_id"} -> items added"""
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = AddRecipeSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = add_recipe_to_shopping_list(actor, pk, input_serializer.validated_data["recipe_id"])
        if not result.success:
            return failure_response(result)

        return Response(ShoppingListItemSerializer(result.data, many=True).data, status=status.HTTP_201_CREATED)


class ShoppingItemToggleView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id, item_id):
        actor = resolve_actor(request, workspace_id)

        result = toggle_shopping_item(actor, item_id)
        if not result.success:
            return failure_response(result)

        return Response(ShoppingListItemSerializer(result.data).data)


class ShoppingItemDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, workspace_id, item_id):
        actor = resolve_actor(request, workspace_id)

        result = delete_shopping_item(actor, item_id)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)
