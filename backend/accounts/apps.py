# accounts/apps.py
from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """Users, workspaces, memberships and module permission grants."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "accounts"
    verbose_name = "Accounts & Sharing"
