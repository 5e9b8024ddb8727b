"""Food app configuration."""

from django.apps import AppConfig


class FoodConfig(AppConfig):
    """Recipes and shopping lists."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "food"
    verbose_name = "Food"
