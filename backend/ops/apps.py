"""Operations app configuration."""

from django.apps import AppConfig


class OpsConfig(AppConfig):
    """Health probes and logging configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "ops"
    verbose_name = "Operations"
