"""Flow app configuration."""

from django.apps import AppConfig


class FlowConfig(AppConfig):
    """Tasks and ideas."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "flow"
    verbose_name = "Flow"
