"""Budget app configuration."""

from django.apps import AppConfig


class BudgetConfig(AppConfig):
    """Monthly income, recurring outgoings and per-month overrides."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "budget"
    verbose_name = "Budget"
