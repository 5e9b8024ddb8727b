from rest_framework import serializers

from .models import Recipe, RecipeIngredient, ShoppingList, ShoppingListItem


class RecipeIngredientSerializer(serializers.ModelSerializer):
    class Meta:
        model = RecipeIngredient
        fields = ("id", "ingredient_name", "quantity", "unit")


class IngredientInputSerializer(serializers.Serializer):
    ingredient_name = serializers.CharField(max_length=255)
    quantity = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    unit = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")


class RecipeSerializer(serializers.ModelSerializer):
    ingredients = RecipeIngredientSerializer(many=True, read_only=True)

    class Meta:
        model = Recipe
        fields = ("id", "name", "instructions", "ingredients", "created_at", "updated_at")


class RecipeCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    instructions = serializers.CharField(required=False, allow_blank=True, default="")
    ingredients = IngredientInputSerializer(many=True, required=False, default=list)


class RecipeUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    instructions = serializers.CharField(required=False, allow_blank=True)


class ShoppingListItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShoppingListItem
        fields = ("id", "ingredient_name", "quantity", "unit", "completed", "recipe_source", "created_at")


class ShoppingListSerializer(serializers.ModelSerializer):
    items = ShoppingListItemSerializer(many=True, read_only=True)

    class Meta:
        model = ShoppingList
        fields = ("id", "name", "items", "created_at", "updated_at")


class ShoppingListCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)


class ShoppingItemCreateSerializer(IngredientInputSerializer):
    recipe_source_id = serializers.IntegerField(required=False, allow_null=True, default=None)


class AddRecipeSerializer(serializers.Serializer):
    recipe_id = serializers.IntegerField()
