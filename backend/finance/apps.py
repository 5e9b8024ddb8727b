"""Simple finance app configuration."""

from django.apps import AppConfig


class FinanceConfig(AppConfig):
    """Assets, liabilities, monthly valuations and liquidity balances."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "finance"
    verbose_name = "Finance"
